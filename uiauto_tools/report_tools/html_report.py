"""
================================================================================
HTML Run Report
================================================================================

Single-file HTML report of a scenario run.

Scenario results are recorded while the run is in progress and rendered once
at the end to ``<report dir>/ExtentReport.html``. The report manager later
renames that file to a timestamped name.

================================================================================
"""

from __future__ import annotations

import base64
import getpass
import platform
import threading
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from jinja2 import Environment
from loguru import logger

from .report_manager import TEMP_REPORT_NAME


STATUS_CLASSES = {
    "passed": "status-pass",
    "failed": "status-fail",
    "skipped": "status-skip",
}


@dataclass
class ScenarioResult:
    """
    Outcome of one scenario.

    Attributes:
        name: Scenario name
        status: 'passed', 'failed' or 'skipped'
        duration: Seconds spent in the scenario
        feature: Feature the scenario belongs to
        tags: Scenario tags
        error: Failure message, if any
        screenshots: (title, base64 PNG) pairs
    """
    name: str
    status: str
    duration: float = 0.0
    feature: str = ""
    tags: List[str] = field(default_factory=list)
    error: Optional[str] = None
    screenshots: List[tuple] = field(default_factory=list)


class HtmlRunReport:
    """
    Collects scenario results and renders them as a self-contained HTML file.

    Usage:
        report = HtmlRunReport(title="Automation Test Report")
        report.add_result(ScenarioResult(name="Search", status="passed"))
        report.write("test-output/ExtentReports")
    """

    def __init__(
        self,
        title: str = "Automation Test Report",
        report_name: str = "Playwright + behave Framework - Test Results",
    ):
        self.title = title
        self.report_name = report_name
        self.started_at = datetime.now()
        self._results: List[ScenarioResult] = []
        self._pending_screenshots: Dict[str, List[tuple]] = {}
        self._lock = threading.Lock()

    @property
    def results(self) -> List[ScenarioResult]:
        return list(self._results)

    def add_screenshot(self, scenario_name: str, png: bytes, title: str = "Screenshot") -> None:
        """Queue a screenshot for a scenario whose result is not recorded yet."""
        encoded = base64.b64encode(png).decode("ascii")
        with self._lock:
            self._pending_screenshots.setdefault(scenario_name, []).append((title, encoded))

    def add_result(self, result: ScenarioResult) -> None:
        """Record a scenario result, picking up any queued screenshots."""
        with self._lock:
            result.screenshots.extend(self._pending_screenshots.pop(result.name, []))
            self._results.append(result)

    def system_info(self) -> Dict[str, str]:
        return {
            "Operating System": platform.system(),
            "OS Version": platform.release(),
            "Python Version": platform.python_version(),
            "User Name": _current_user(),
            "Framework": "Playwright + behave + pytest",
        }

    def summary(self) -> Dict[str, Any]:
        counts = {"passed": 0, "failed": 0, "skipped": 0}
        for result in self._results:
            counts[result.status] = counts.get(result.status, 0) + 1
        return {
            "total": len(self._results),
            **counts,
            "duration": sum(result.duration for result in self._results),
        }

    def render(self) -> str:
        """Render the report HTML."""
        env = Environment(autoescape=True)
        template = env.from_string(HTML_TEMPLATE)
        return template.render(
            title=self.title,
            report_name=self.report_name,
            generated_at=datetime.now().strftime("%b %d, %Y %H:%M:%S"),
            started_at=self.started_at.strftime("%b %d, %Y %H:%M:%S"),
            summary=self.summary(),
            system_info=self.system_info(),
            results=self._results,
            status_class=lambda status: STATUS_CLASSES.get(status, "status-skip"),
        )

    def write(self, report_dir: Union[str, Path]) -> Optional[Path]:
        """
        Write the report to ``<report_dir>/ExtentReport.html``.

        Returns:
            Path written, or None when writing failed
        """
        path = Path(report_dir) / TEMP_REPORT_NAME
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(self.render(), encoding="utf-8")
        except OSError as e:
            logger.error(f"Failed to write run report: {e}")
            return None

        logger.info(f"Run report written: {path}")
        return path


def _current_user() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return "unknown"


HTML_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <title>{{ title }}</title>
    <style>
        body { font-family: -apple-system, 'Segoe UI', Roboto, sans-serif; background: #f8fafc; color: #1e293b; margin: 0; }
        .container { max-width: 1100px; margin: 0 auto; padding: 2rem; }
        header { background: #2563eb; color: white; padding: 1.5rem 2rem; border-radius: 10px; margin-bottom: 1.5rem; }
        header h1 { margin: 0 0 0.25rem 0; font-size: 1.5rem; }
        .meta { opacity: 0.9; font-size: 0.85rem; }
        .cards { display: flex; gap: 1rem; margin-bottom: 1.5rem; }
        .card { flex: 1; background: white; border: 1px solid #e2e8f0; border-radius: 8px; padding: 1rem; text-align: center; }
        .card .value { font-size: 1.6rem; font-weight: 600; }
        table { width: 100%; border-collapse: collapse; background: white; margin-bottom: 1.5rem; }
        th, td { border: 1px solid #e2e8f0; padding: 0.5rem 0.75rem; text-align: left; vertical-align: top; }
        th { background: #f1f5f9; }
        .status-pass { color: #16a34a; font-weight: 600; }
        .status-fail { color: #dc2626; font-weight: 600; }
        .status-skip { color: #6b7280; font-weight: 600; }
        .tag { display: inline-block; background: #e2e8f0; border-radius: 4px; padding: 0 0.4rem; margin-right: 0.25rem; font-size: 0.8rem; }
        pre { white-space: pre-wrap; margin: 0; font-size: 0.8rem; }
        img.screenshot { max-width: 480px; border: 1px solid #cbd5e1; margin-top: 0.5rem; }
    </style>
</head>
<body>
<div class="container">
    <header>
        <h1>{{ report_name }}</h1>
        <div class="meta">Started {{ started_at }} &middot; Generated {{ generated_at }}</div>
    </header>

    <div class="cards">
        <div class="card"><div class="value">{{ summary.total }}</div>Total</div>
        <div class="card"><div class="value status-pass">{{ summary.passed }}</div>Passed</div>
        <div class="card"><div class="value status-fail">{{ summary.failed }}</div>Failed</div>
        <div class="card"><div class="value status-skip">{{ summary.skipped }}</div>Skipped</div>
        <div class="card"><div class="value">{{ "%.2f"|format(summary.duration) }}s</div>Duration</div>
    </div>

    <table>
        <thead>
            <tr><th>Feature</th><th>Scenario</th><th>Status</th><th>Duration</th><th>Details</th></tr>
        </thead>
        <tbody>
        {% for result in results %}
            <tr>
                <td>{{ result.feature }}</td>
                <td>
                    {{ result.name }}<br>
                    {% for tag in result.tags %}<span class="tag">@{{ tag }}</span>{% endfor %}
                </td>
                <td class="{{ status_class(result.status) }}">{{ result.status|upper }}</td>
                <td>{{ "%.2f"|format(result.duration) }}s</td>
                <td>
                    {% if result.error %}<pre>{{ result.error }}</pre>{% endif %}
                    {% for shot_title, shot_data in result.screenshots %}
                        <div>{{ shot_title }}</div>
                        <img class="screenshot" alt="{{ shot_title }}" src="data:image/png;base64,{{ shot_data }}">
                    {% endfor %}
                </td>
            </tr>
        {% else %}
            <tr><td colspan="5">No scenarios were executed.</td></tr>
        {% endfor %}
        </tbody>
    </table>

    <table>
        <thead><tr><th colspan="2">System Information</th></tr></thead>
        <tbody>
        {% for key, value in system_info.items() %}
            <tr><td>{{ key }}</td><td>{{ value }}</td></tr>
        {% endfor %}
        </tbody>
    </table>
</div>
</body>
</html>"""


__all__ = [
    "HtmlRunReport",
    "ScenarioResult",
]
