"""Browser session management"""

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright

from easy_apply_crawler.config import BROWSER_DATA_DIR, LOGIN_URL
from easy_apply_crawler.perception import roles
from easy_apply_crawler.utils.timing import human_delay


def launch_browser(headless=False, user_data_dir=BROWSER_DATA_DIR):
    """
    Launch persistent browser context and return (playwright, context, page).
    Reuses login session across runs.
    """
    print("Launching browser...")

    p = sync_playwright().start()

    context = p.chromium.launch_persistent_context(
        user_data_dir=user_data_dir,
        headless=headless,
        args=[
            "--disable-blink-features=AutomationControlled",
            "--disable-gpu",
            "--disable-dev-shm-usage",
        ],
        viewport={"width": 1280, "height": 900},
        user_agent="Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    )

    page = context.pages[0] if context.pages else context.new_page()

    return p, context, page


def close_browser(playwright, context):
    """Close the context and stop Playwright, ignoring an already-dead browser"""
    try:
        context.close()
    except PlaywrightError as e:
        print(f"  ⚠️ Error closing browser: {e}")
    playwright.stop()


def _is_logged_in_url(url):
    return "feed" in url or "linkedin.com/in" in url


def login(page, username, password, timeout_ms=15000):
    """
    Fill the login form and wait for the post-login redirect.

    Returns True when the browser lands on the feed or a profile page. A
    timeout is reported, not raised: the persistent profile may already be
    logged in, and the results page will tell.
    """
    print("Opening login page...")
    page.goto(LOGIN_URL, wait_until="domcontentloaded")

    if _is_logged_in_url(page.url):
        print("✓ Already logged in (persistent session)")
        return True

    print("Filling credentials...")
    try:
        page.locator(roles.LOGIN_USERNAME).fill(username, timeout=timeout_ms)
        human_delay(200, 400)
        page.locator(roles.LOGIN_PASSWORD).fill(password, timeout=timeout_ms)
        human_delay(200, 400)
        page.locator(roles.LOGIN_SUBMIT).first.click(timeout=timeout_ms)
        print("Login submitted, waiting for redirect...")
        page.wait_for_url(_is_logged_in_url, timeout=timeout_ms)
    except PlaywrightError as e:
        print(f"⚠️ Login failed or still on the login page: {str(e)[:100]}")
        return False

    print(f"✓ Login successful! Current page: {page.url}")
    return True
