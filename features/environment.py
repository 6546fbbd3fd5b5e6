"""
================================================================================
behave Environment Hooks
================================================================================

Run-level and scenario-level hooks for the BDD suites.

    before_all      -> load settings, set up logging, prune old run reports
    before_scenario -> acquire a browser session for the scenario
    after_scenario  -> screenshot per configuration, record result, release session
    after_all       -> write the HTML run report and timestamp it

User data (``behave -D key=value``):
    config   -> configuration file path
    browser  -> browser kind override
    headless -> headless override ('true' / 'false')

================================================================================
"""

from dataclasses import replace

from loguru import logger

from testsuites.ui_testing.framework.browser_manager import DriverManager
from testsuites.ui_testing.framework.scenario import ScenarioHooks
from uiauto_tools.common import init_logger_from_settings, load_settings
from uiauto_tools.report_tools import HtmlRunReport, ReportManager

FAILED_STATUSES = ("failed", "error", "hook_error")


def _apply_userdata(settings, userdata):
    overrides = {}
    if userdata.get("browser"):
        overrides["browser"] = userdata["browser"].strip().lower()
    if userdata.get("headless"):
        overrides["headless"] = userdata.getbool("headless")
    return replace(settings, **overrides) if overrides else settings


def _failure_message(scenario):
    for step in scenario.steps:
        if step.status.name in FAILED_STATUSES:
            return f"{step.keyword} {step.name}\n{step.error_message or ''}".strip()
    return None


def before_all(context):
    userdata = context.config.userdata
    settings = _apply_userdata(load_settings(userdata.get("config")), userdata)
    init_logger_from_settings(settings)

    context.settings = settings
    context.report_manager = ReportManager.from_settings(settings)
    context.report_manager.on_execution_start()

    context.run_report = HtmlRunReport()
    context.driver_manager = DriverManager(settings)
    context.hooks = ScenarioHooks(settings, context.driver_manager, context.run_report)


def before_scenario(context, scenario):
    context.scenario_context = context.hooks.before_scenario(
        scenario.name,
        tags=scenario.effective_tags,
        feature=scenario.feature.name,
    )


def after_scenario(context, scenario):
    scenario_context = getattr(context, "scenario_context", None)
    if scenario_context is None:
        logger.warning(f"Scenario '{scenario.name}' finished without a scenario context")
        return

    failed = scenario.status.name in FAILED_STATUSES
    context.hooks.after_scenario(
        scenario_context,
        failed=failed,
        error=_failure_message(scenario) if failed else None,
    )
    context.scenario_context = None


def after_all(context):
    if not hasattr(context, "hooks"):
        return

    context.driver_manager.quit_all()
    context.run_report.write(context.settings.extent_report_path)
    context.report_manager.on_execution_finish()
