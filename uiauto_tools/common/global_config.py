"""
================================================================================
Global Configuration for the UI Automation Framework
================================================================================

This module loads framework settings once per process and exposes them as an
immutable ``Settings`` value that is passed explicitly to every component.

Features:
    - Properties-style (``key=value``) and YAML configuration files
    - Environment variable override (``IMPLICIT_WAIT`` overrides ``implicit.wait``)
    - Typed getters with documented defaults
    - Malformed numeric values fall back to defaults with a warning

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml
from loguru import logger


# Default configuration file path, overridable with UIAUTO_CONFIG
DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "config" / "config.properties"
CONFIG_PATH_ENV = "UIAUTO_CONFIG"

TRUE_VALUES = ("true", "1", "yes", "on")

DEFAULTS: Dict[str, Any] = {
    "browser": "chrome",
    "base.url": "https://www.google.com",
    "headless": True,
    "implicit.wait": 10,
    "explicit.wait": 15,
    "page.load.timeout": 30,
    "take.screenshot.on.failure": True,
    "take.screenshot.on.pass": False,
    "screenshot.path": "target/screenshots",
    "extent.report.path": "test-output/ExtentReports",
    "extent.report.retention.count": 10,
    "log.level": "INFO",
    "log.file": None,
}


class ConfigurationError(Exception):
    """Raised when configuration loading fails."""
    pass


@dataclass(frozen=True)
class Settings:
    """
    Immutable framework configuration.

    Built once at process start by ``load_settings()`` and handed to the
    driver manager, page objects, scenario hooks and report manager.

    Attributes:
        browser: Browser kind for new sessions ('chrome', 'firefox', 'edge')
        base_url: Application under test entry URL
        headless: Launch browsers without a visible window
        implicit_wait: Default action timeout applied to sessions (seconds)
        explicit_wait: Bound for wait-then-act helpers (seconds)
        page_load_timeout: Navigation timeout applied to sessions (seconds)
        take_screenshot_on_failure: Capture a screenshot for failed scenarios
        take_screenshot_on_pass: Capture a screenshot for passed scenarios
        screenshot_path: Directory for saved screenshots
        extent_report_path: Directory holding HTML run reports
        extent_report_retention_count: Number of historical reports to keep
        log_level: Loguru level name
        log_file: Optional log file path
        raw: Every key read from the file, unconverted
    """
    browser: str = DEFAULTS["browser"]
    base_url: str = DEFAULTS["base.url"]
    headless: bool = DEFAULTS["headless"]
    implicit_wait: int = DEFAULTS["implicit.wait"]
    explicit_wait: int = DEFAULTS["explicit.wait"]
    page_load_timeout: int = DEFAULTS["page.load.timeout"]
    take_screenshot_on_failure: bool = DEFAULTS["take.screenshot.on.failure"]
    take_screenshot_on_pass: bool = DEFAULTS["take.screenshot.on.pass"]
    screenshot_path: str = DEFAULTS["screenshot.path"]
    extent_report_path: str = DEFAULTS["extent.report.path"]
    extent_report_retention_count: int = DEFAULTS["extent.report.retention.count"]
    log_level: str = DEFAULTS["log.level"]
    log_file: Optional[str] = DEFAULTS["log.file"]
    raw: Mapping[str, str] = field(default_factory=dict, compare=False, repr=False)

    def get_property(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Return a raw property value by its dotted key."""
        return self.raw.get(key, default)

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "Settings":
        """
        Build settings from a flat mapping of dotted keys.

        Environment variables take precedence over the mapping, and
        documented defaults fill anything missing.

        Args:
            values: Flat ``{"implicit.wait": "10", ...}`` mapping

        Returns:
            Settings instance
        """
        raw = {key: str(value) for key, value in values.items() if value is not None}
        reader = _PropertyReader(raw)

        return cls(
            browser=reader.get_str("browser").strip().lower(),
            base_url=reader.get_str("base.url"),
            headless=reader.get_bool("headless"),
            implicit_wait=reader.get_int("implicit.wait"),
            explicit_wait=reader.get_int("explicit.wait"),
            page_load_timeout=reader.get_int("page.load.timeout"),
            take_screenshot_on_failure=reader.get_bool("take.screenshot.on.failure"),
            take_screenshot_on_pass=reader.get_bool("take.screenshot.on.pass"),
            screenshot_path=reader.get_str("screenshot.path"),
            extent_report_path=reader.get_str("extent.report.path"),
            extent_report_retention_count=reader.get_int("extent.report.retention.count"),
            log_level=reader.get_str("log.level").upper(),
            log_file=reader.get_optional("log.file"),
            raw=raw,
        )


class _PropertyReader:
    """Typed access to raw string properties with env override and defaults."""

    def __init__(self, raw: Mapping[str, str]):
        self._raw = raw

    def _lookup(self, key: str) -> Optional[str]:
        env_key = key.upper().replace(".", "_")
        env_value = os.environ.get(env_key)
        if env_value is not None:
            return env_value
        return self._raw.get(key)

    def get_optional(self, key: str) -> Optional[str]:
        value = self._lookup(key)
        return value if value else DEFAULTS[key]

    def get_str(self, key: str) -> str:
        value = self._lookup(key)
        if value is None or not value.strip():
            return DEFAULTS[key]
        return value.strip()

    def get_bool(self, key: str) -> bool:
        value = self._lookup(key)
        if value is None or not value.strip():
            return DEFAULTS[key]
        return value.strip().lower() in TRUE_VALUES

    def get_int(self, key: str) -> int:
        value = self._lookup(key)
        default = DEFAULTS[key]
        if value is None or not value.strip():
            return default
        try:
            return int(value.strip())
        except ValueError:
            logger.warning(f"Invalid value for '{key}': {value!r}, using default: {default}")
            return default


# =============================================================================
# File Loading
# =============================================================================

def parse_properties(text: str) -> Dict[str, str]:
    """
    Parse properties-style text into a flat dictionary.

    Supports ``key=value`` and ``key: value`` lines, ``#`` and ``!`` comments,
    and blank lines. Values keep inner whitespace; surrounding whitespace is
    stripped.

    Args:
        text: File content

    Returns:
        Mapping of key to raw string value
    """
    properties: Dict[str, str] = {}
    for line_no, line in enumerate(text.splitlines(), start=1):
        stripped = line.strip()
        if not stripped or stripped[0] in ("#", "!"):
            continue

        separators = [i for i in (stripped.find("="), stripped.find(":")) if i != -1]
        if not separators:
            logger.warning(f"Ignoring malformed config line {line_no}: {stripped!r}")
            continue

        index = min(separators)
        key = stripped[:index].strip()
        value = stripped[index + 1:].strip()
        if key:
            properties[key] = value
    return properties


def _flatten(data: Mapping[str, Any], prefix: str = "") -> Dict[str, Any]:
    """Flatten nested YAML sections into dotted keys."""
    flat: Dict[str, Any] = {}
    for key, value in data.items():
        full_key = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, Mapping):
            flat.update(_flatten(value, full_key))
        else:
            flat[full_key] = value
    return flat


def _read_config_file(path: Path) -> Dict[str, Any]:
    """Read a properties or YAML file into a flat mapping."""
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in (".yaml", ".yml"):
        try:
            data = yaml.safe_load(text) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in configuration file: {e}") from e
        if not isinstance(data, Mapping):
            raise ConfigurationError(f"Configuration root must be a mapping: {path}")
        return _flatten(data)
    return parse_properties(text)


def resolve_config_path(config_path: Optional[Union[str, Path]] = None) -> Path:
    """Pick the explicit path, then UIAUTO_CONFIG, then the default."""
    if config_path:
        return Path(config_path)
    env_path = os.environ.get(CONFIG_PATH_ENV)
    if env_path:
        return Path(env_path)
    return DEFAULT_CONFIG_PATH


def load_settings(config_path: Optional[Union[str, Path]] = None) -> Settings:
    """
    Load settings from a configuration file.

    Args:
        config_path: Path to a ``.properties`` or ``.yaml`` file.
                     Falls back to ``$UIAUTO_CONFIG`` then DEFAULT_CONFIG_PATH.

    Returns:
        Settings instance

    Raises:
        ConfigurationError: If the file does not exist or cannot be read
    """
    path = resolve_config_path(config_path)
    if not path.is_file():
        raise ConfigurationError(f"Failed to load configuration file: {path}")

    try:
        values = _read_config_file(path)
    except OSError as e:
        raise ConfigurationError(f"Failed to load configuration file: {path}: {e}") from e

    settings = Settings.from_mapping(values)
    logger.debug(f"Loaded configuration from: {path}")
    return settings


__all__ = [
    "DEFAULTS",
    "DEFAULT_CONFIG_PATH",
    "ConfigurationError",
    "Settings",
    "load_settings",
    "parse_properties",
    "resolve_config_path",
]
