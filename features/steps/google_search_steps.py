"""Step definitions for the Google search scenarios.

Every step talks to the browser through the page objects; the scenario
context carries the browser session and the last search term between steps.
"""

from behave import given, then, when

from testsuites.ui_testing.pages import GoogleHomePage, GoogleResultsPage


def _home_page(context) -> GoogleHomePage:
    return GoogleHomePage(context.scenario_context.page, context.settings)


def _results_page(context) -> GoogleResultsPage:
    return GoogleResultsPage(context.scenario_context.page, context.settings)


@given("the user is on the Google home page")
def step_user_is_on_home_page(context):
    home_page = _home_page(context).navigate_to_google()
    assert home_page.is_page_loaded(), "Google page did not load correctly"


@when('the user searches for "{search_term}"')
def step_user_searches_for(context, search_term):
    _home_page(context).search_for(search_term)
    context.scenario_context.search_term = search_term


@then("search results are displayed")
def step_search_results_are_displayed(context):
    results_page = _results_page(context)
    assert results_page.is_page_loaded(), "Results page did not load correctly"
    assert results_page.has_results(), "No search results were found"


@then("the page title contains the search term")
def step_page_title_contains_search_term(context):
    page_title = _results_page(context).get_search_page_title()
    search_term = context.scenario_context.search_term
    assert search_term and search_term in page_title, (
        "Page title does not contain the search term. "
        f"Expected: contains '{search_term}', Actual: '{page_title}'"
    )


@then('the search term "{search_term}" appears in the search box')
def step_search_term_appears_in_search_box(context, search_term):
    assert _results_page(context).is_search_term_displayed(search_term), (
        "Search term does not appear in the search box"
    )
