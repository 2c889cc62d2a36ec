"""Button interactions"""

from playwright.sync_api import Error as PlaywrightError

from easy_apply_crawler.config import CLICK_TIMEOUT_MS
from easy_apply_crawler.utils.timing import poll_until


def click_element(page, element, settle_ms=300):
    """Scroll a control into view and click it, falling back to a DOM click"""
    try:
        element.scroll_into_view_if_needed(timeout=CLICK_TIMEOUT_MS)
    except PlaywrightError:
        pass
    page.wait_for_timeout(settle_ms)

    try:
        element.click(timeout=CLICK_TIMEOUT_MS)
    except PlaywrightError as e:
        # Overlays (toasts, sticky headers) intercept pointer clicks
        print(f"  ⚠️ Click intercepted ({str(e)[:60]}), retrying via DOM click")
        element.evaluate("el => el.click()")


def wait_for_page_ready(page, timeout_ms=25000, settle_ms=1200, interval_ms=300):
    """Wait for document.readyState == complete, then give scripts time to render"""
    def probe():
        try:
            return True if page.evaluate("document.readyState") == "complete" else None
        except PlaywrightError:
            return None

    ready = poll_until(timeout_ms, probe, interval_ms) is not None
    page.wait_for_timeout(settle_ms)
    return ready
