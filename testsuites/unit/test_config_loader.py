import pytest
import yaml

from uiauto_tools.common.global_config import (
    ConfigurationError,
    Settings,
    load_settings,
    parse_properties,
)

pytestmark = pytest.mark.config


def test_missing_keys_fall_back_to_defaults(tmp_path):
    config_path = tmp_path / "config.properties"
    config_path.write_text("# empty on purpose\n", encoding="utf-8")

    settings = load_settings(config_path)

    assert settings.browser == "chrome"
    assert settings.implicit_wait == 10
    assert settings.explicit_wait == 15
    assert settings.page_load_timeout == 30
    assert settings.extent_report_retention_count == 10
    assert settings.take_screenshot_on_failure is True
    assert settings.take_screenshot_on_pass is False
    assert settings.screenshot_path == "target/screenshots"
    assert settings.extent_report_path == "test-output/ExtentReports"


def test_properties_values_are_typed(tmp_path):
    config_path = tmp_path / "config.properties"
    config_path.write_text(
        "\n".join([
            "browser = Firefox",
            "base.url=https://example.com/search?q=a:b",
            "implicit.wait=4",
            "explicit.wait: 7",
            "take.screenshot.on.failure=false",
            "take.screenshot.on.pass=TRUE",
            "! bang comment",
            "extent.report.retention.count=2",
        ]),
        encoding="utf-8",
    )

    settings = load_settings(config_path)

    assert settings.browser == "firefox"
    assert settings.base_url == "https://example.com/search?q=a:b"
    assert settings.implicit_wait == 4
    assert settings.explicit_wait == 7
    assert settings.take_screenshot_on_failure is False
    assert settings.take_screenshot_on_pass is True
    assert settings.extent_report_retention_count == 2
    assert settings.get_property("implicit.wait") == "4"


def test_malformed_numeric_uses_default_with_warning(tmp_path):
    from loguru import logger

    messages = []
    handler_id = logger.add(messages.append, level="WARNING")
    try:
        config_path = tmp_path / "config.properties"
        config_path.write_text("implicit.wait=ten\npage.load.timeout=\n", encoding="utf-8")
        settings = load_settings(config_path)
    finally:
        logger.remove(handler_id)

    assert settings.implicit_wait == 10
    assert settings.page_load_timeout == 30
    assert any("implicit.wait" in str(message) for message in messages)


def test_env_override(monkeypatch, tmp_path):
    config_path = tmp_path / "config.properties"
    config_path.write_text("browser=chrome\nexplicit.wait=5\n", encoding="utf-8")

    monkeypatch.setenv("BROWSER", "edge")
    monkeypatch.setenv("EXPLICIT_WAIT", "20")
    settings = load_settings(config_path)

    assert settings.browser == "edge"
    assert settings.explicit_wait == 20


def test_config_path_from_env(monkeypatch, tmp_path):
    config_path = tmp_path / "custom.properties"
    config_path.write_text("explicit.wait=3\n", encoding="utf-8")
    monkeypatch.setenv("UIAUTO_CONFIG", str(config_path))

    assert load_settings().explicit_wait == 3


def test_missing_config_file_is_fatal(tmp_path):
    with pytest.raises(ConfigurationError):
        load_settings(tmp_path / "does-not-exist.properties")


def test_yaml_config_is_flattened(tmp_path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        yaml.dump({"browser": "edge", "page": {"load": {"timeout": 45}}}),
        encoding="utf-8",
    )

    settings = load_settings(config_path)

    assert settings.browser == "edge"
    assert settings.page_load_timeout == 45


def test_invalid_yaml_raises(tmp_path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text("browser: [unclosed", encoding="utf-8")

    with pytest.raises(ConfigurationError):
        load_settings(config_path)


def test_settings_are_immutable():
    settings = Settings()
    with pytest.raises(AttributeError):
        settings.browser = "firefox"


def test_parse_properties_skips_comments_and_malformed_lines():
    parsed = parse_properties("# comment\n\nkey.one=1\nnot a pair\nkey.two : two words\n")
    assert parsed == {"key.one": "1", "key.two": "two words"}


def test_repository_config_loads(project_root):
    settings = load_settings(project_root / "config" / "config.properties")
    assert settings.browser in ("chrome", "firefox", "edge")
