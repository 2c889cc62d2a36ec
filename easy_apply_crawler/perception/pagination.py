"""Results pagination"""

from dataclasses import dataclass

from playwright.sync_api import Error as PlaywrightError

from easy_apply_crawler.config import READ_TIMEOUT_MS, TIMING
from easy_apply_crawler.perception import roles
from easy_apply_crawler.perception.cards import extract_listings, find_cards
from easy_apply_crawler.perception.locator import is_interactable
from easy_apply_crawler.utils.timing import poll_until

STOP_SINGLE_PAGE = "no_current_indicator"
STOP_LAST_PAGE = "last_page"
STOP_NEXT_NOT_READY = "next_not_ready"
STOP_NO_PROGRESS = "no_progress"


@dataclass
class WalkResult:
    pages: int
    records: int
    stop_reason: str


def current_page_index(buttons):
    """Index of the indicator flagged aria-current="page", or None"""
    for index in range(buttons.count()):
        if buttons.nth(index).get_attribute("aria-current", timeout=READ_TIMEOUT_MS) == "page":
            return index
    return None


def _wait_until_clickable(button, timeout_ms, interval_ms):
    def probe():
        try:
            return True if is_interactable(button) else None
        except PlaywrightError:
            return None

    return poll_until(timeout_ms, probe, interval_ms) is not None


def walk_all(page, on_page, extract=None, timing=None):
    """
    Extract the current results page and every page after it.

    on_page(records) is called once per page, including the first. The walk
    ends normally when there is no indicator after the current one. It also
    ends, without raising, when no indicator is current, when the next one
    never becomes clickable, or when a click does not move the current
    indicator forward. Pages already delivered are kept in every case.
    """
    timing = timing or TIMING
    if extract is None:
        def extract():
            return extract_listings(find_cards(page))

    records = extract()
    print(f"📄 Page 1: {len(records)} eligible listings")
    on_page(records)
    pages, total = 1, len(records)
    last_index = -1

    while True:
        buttons = page.locator(roles.PAGINATION_BUTTONS)
        current = current_page_index(buttons)

        if current is None:
            stop = STOP_SINGLE_PAGE
            break
        if current <= last_index:
            print("  ⚠️ Page indicator did not advance - ending pagination")
            stop = STOP_NO_PROGRESS
            break
        if current + 1 >= buttons.count():
            stop = STOP_LAST_PAGE
            break

        next_button = buttons.nth(current + 1)
        if not _wait_until_clickable(
            next_button, timing["pagination_ready_wait"], timing["poll_interval"]
        ):
            print("  ⚠️ Next page button never became clickable - ending pagination for this run")
            stop = STOP_NEXT_NOT_READY
            break

        print("➡️  Going to next page...")
        last_index = current
        next_button.click()
        page.wait_for_timeout(timing["pagination_settle"])

        records = extract()
        pages += 1
        total += len(records)
        print(f"📄 Page {pages}: {len(records)} eligible listings")
        on_page(records)

    print(f"✓ Pagination finished after {pages} page(s), {total} listings ({stop})")
    return WalkResult(pages=pages, records=total, stop_reason=stop)
