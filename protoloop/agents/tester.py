"""Tester: drives the running dev server through Playwright and records what happens.

Nothing here judges the component. Interaction outcomes, element counts and
accessibility counts are returned verbatim for the scorer to weigh.
"""

import re
from pathlib import Path

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright

from protoloop.state import LoopState

_FILLABLE_INPUTS = (
    'input:not([type]), input[type="text"], input[type="email"], '
    'input[type="password"], input[type="search"], input[type="number"], '
    'input[type="tel"], input[type="url"], textarea'
)
_NAV_LINKS = 'nav a, .nav a, [role="navigation"] a'
_FILL_VALUES = {
    "email": "test@example.com",
    "password": "password123",
    "number": "42",
    "tel": "5551234567",
    "url": "https://example.com",
}
_SUBMIT_BUTTONS = 'button[type="submit"], button:has-text("submit")'
_MAX_FLOW_BUTTONS = 5


def _slug(name: str) -> str:
    return re.sub(r"[^\w-]+", "-", name).strip("-") or "scenario"


def _click_first_button(page, wait_ms: int) -> str:
    button = page.locator("button:not([disabled])").first
    label = (button.text_content() or "").strip()
    button.click()
    page.wait_for_timeout(wait_ms)  # animations
    return f"Successfully clicked first button: {label}" if label else "Successfully clicked first button"


def _fill_first_input(page) -> str:
    field = page.locator(_FILLABLE_INPUTS).first
    input_type = (field.get_attribute("type") or "text").lower()
    field.fill(_FILL_VALUES.get(input_type, "Test input"))
    return f"Successfully filled first input ({input_type})"


def _visit_nav_links(page, limit: int) -> list[str]:
    results = []
    for link in page.locator(_NAV_LINKS).all()[:limit]:
        text = (link.text_content() or "").strip()
        href = link.get_attribute("href")
        if not href or href.startswith(("http", "mailto:", "tel:")):
            results.append(f"Skipped external link: {text or href}")
            continue

        before = page.url
        link.click()
        page.wait_for_load_state("networkidle")
        results.append(f"Navigated to: {text or href}")
        if page.url != before:
            page.go_back()
            page.wait_for_load_state("networkidle")
    return results


def _nav_pass(page, config: dict) -> list[str]:
    try:
        return _visit_nav_links(page, config.get("max_nav_links", 3))
    except PlaywrightError as exc:
        return [f"Navigation failed: {exc}"]


def _toggle_checkboxes(page) -> list[str]:
    results = []
    for checkbox in page.locator('input[type="checkbox"]').all():
        try:
            checkbox.click()
            results.append("Toggled checkbox")
        except PlaywrightError as exc:
            results.append(f"Checkbox toggle failed: {exc}")
    return results


def _select_options(page) -> list[str]:
    results = []
    for select in page.locator("select").all():
        try:
            if select.locator("option").count() > 1:
                select.select_option(index=1)
                results.append("Selected dropdown option")
        except PlaywrightError as exc:
            results.append(f"Dropdown selection failed: {exc}")
    return results


def _form_flow(page, config: dict) -> list[str]:
    results = []
    for field in page.locator(_FILLABLE_INPUTS).all():
        try:
            input_type = (field.get_attribute("type") or "text").lower()
            field.fill(_FILL_VALUES.get(input_type, "Test input"))
            results.append(f"Filled {input_type} input")
        except PlaywrightError as exc:
            results.append(f"Input fill failed: {exc}")

    submit = page.locator(_SUBMIT_BUTTONS)
    if submit.count() > 0:
        try:
            submit.first.click()
            page.wait_for_timeout(config.get("interaction_wait_ms", 1000))
            results.append("Clicked submit button")
        except PlaywrightError as exc:
            results.append(f"Submit failed: {exc}")
    return results


def _interactive_flow(page, config: dict) -> list[str]:
    results = []
    wait_ms = config.get("interaction_wait_ms", 1000)
    for button in page.locator("button:not([disabled])").all()[:_MAX_FLOW_BUTTONS]:
        try:
            label = (button.text_content() or "").strip()
            button.click()
            page.wait_for_timeout(wait_ms)
            results.append(f"Clicked button: {label}")
        except PlaywrightError as exc:
            results.append(f"Button click failed: {exc}")
    return results + _toggle_checkboxes(page) + _select_options(page)


def _generic_flow(page, config: dict) -> list[str]:
    results = []
    if page.locator("button:not([disabled])").count() > 0:
        try:
            results.append(_click_first_button(page, config.get("interaction_wait_ms", 1000)))
        except PlaywrightError as exc:
            results.append(f"Button click failed: {exc}")

    if page.locator(_FILLABLE_INPUTS).count() > 0:
        try:
            results.append(_fill_first_input(page))
        except PlaywrightError as exc:
            results.append(f"Input fill failed: {exc}")

    return results + _nav_pass(page, config) + _toggle_checkboxes(page) + _select_options(page)


# Checked in order; a scenario matching none of these gets the generic pass.
_FLOWS = (
    ("form", _form_flow),
    ("navigation", _nav_pass),
    ("interactive", _interactive_flow),
)


def scenario_flow(scenario: dict):
    """Pick the interaction routine for a scenario from keywords in its name."""
    name = str(scenario.get("name", "")).lower()
    for keyword, flow in _FLOWS:
        if keyword in name:
            return flow
    return _generic_flow


def perform_interactions(page, scenario: dict, config: dict) -> list[str]:
    """Exercise the page the way the scenario calls for and describe each outcome.

    Scenarios named for a form, navigation or interactive controls get a
    focused pass; any other scenario gets the generic pass. Every interaction
    is attempted independently; a Playwright error is recorded as a failure
    string rather than raised.
    """
    buttons = page.locator("button").count()
    inputs = page.locator("input").count()
    links = page.locator("a").count()
    interactions = [f"Found {buttons} buttons, {inputs} inputs, {links} links"]
    return interactions + scenario_flow(scenario)(page, config)


def _has_label(page, field) -> bool:
    field_id = field.get_attribute("id")
    if field_id:
        escaped = field_id.replace("\\", "\\\\").replace('"', '\\"')
        if page.locator(f'label[for="{escaped}"]').count() > 0:
            return True
    return field.locator("xpath=ancestor::label").count() > 0


def check_accessibility(page) -> dict:
    """Count common accessibility gaps on the current page.

    Returns {"checks": [...], "issues": [...]}: checks are raw counts for
    every check, issues repeat only the checks that found something.
    """
    checks = []
    issues = []

    images_without_alt = page.locator("img:not([alt])").count()
    checks.append(f"Images without alt text: {images_without_alt}")
    if images_without_alt:
        issues.append(f"{images_without_alt} images missing alt text")

    headings = page.locator("h1, h2, h3, h4, h5, h6").count()
    checks.append(f"Heading elements found: {headings}")
    if headings == 0:
        issues.append("No heading elements found")

    candidates = page.locator(
        'input:not([type="hidden"]):not([aria-label]):not([aria-labelledby])'
    ).all()
    unlabeled = sum(1 for field in candidates if not _has_label(page, field))
    checks.append(f"Unlabeled inputs: {unlabeled}")
    if unlabeled:
        issues.append(f"{unlabeled} inputs without labels")

    empty_buttons = page.locator("button:empty:not([aria-label])").count()
    checks.append(f"Buttons without text or labels: {empty_buttons}")
    if empty_buttons:
        issues.append(f"{empty_buttons} buttons without text or labels")

    focusable = page.locator("button, a, input, select, textarea").count()
    checks.append(f"Focusable elements: {focusable}")

    return {"checks": checks, "issues": issues}


def _run_scenario(page, index: int, scenario: dict, config: dict, screenshot_dir: Path, iteration: int) -> dict:
    name = scenario.get("name", "Unnamed scenario")
    base = screenshot_dir / f"iteration-{iteration}-{index}-{_slug(name)}"
    before = f"{base}-before.png"
    after = f"{base}-after.png"
    print(f"[protoloop]   Running: {name}")

    try:
        page.screenshot(path=before)
        interactions = perform_interactions(page, scenario, config)
        page.screenshot(path=after)
    except PlaywrightError as exc:
        return {"scenario": name, "status": "failed", "error": str(exc)}

    return {
        "scenario": name,
        "status": "passed",
        "interactions": interactions,
        "screenshots": {"before": before, "after": after},
    }


def run_playwright_tests(test_plan: dict, config: dict, iteration: int) -> dict:
    """Open the app, run every scenario in the plan, and collect observations.

    Failures inside a scenario become "failed" entries; failing to reach the
    app at all propagates.
    """
    screenshot_dir = Path(config["screenshot_dir"])
    screenshot_dir.mkdir(parents=True, exist_ok=True)
    initial = str(screenshot_dir / f"iteration-{iteration}-initial.png")

    with sync_playwright() as p:
        browser = p.chromium.launch(headless=config.get("headless", True))
        try:
            page = browser.new_context().new_page()
            page.goto(config["app_url"])
            page.wait_for_load_state("networkidle")
            page.screenshot(path=initial)

            results = [
                _run_scenario(page, index, scenario, config, screenshot_dir, iteration)
                for index, scenario in enumerate(test_plan.get("testScenarios", []), 1)
            ]
            try:
                accessibility = check_accessibility(page)
            except PlaywrightError as exc:
                accessibility = {"checks": [f"Accessibility check failed: {exc}"], "issues": []}
        finally:
            browser.close()

    return {
        "testResults": results,
        "accessibilityResults": accessibility["checks"],
        "accessibilityIssues": accessibility["issues"],
        "screenshot": initial,
    }


def tester_node(state: LoopState, config: dict) -> dict:
    """Tester node for the loop graph. Returns the iteration's observations."""
    print("[protoloop] Running Playwright tests...")
    observations = run_playwright_tests(state["test_plan"], config, state["iteration"])

    failed = sum(1 for r in observations["testResults"] if r["status"] == "failed")
    print(
        f"[protoloop] {len(observations['testResults'])} scenarios run, {failed} failed"
    )
    return {"observations": observations}
