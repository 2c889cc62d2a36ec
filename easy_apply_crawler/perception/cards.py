"""Job card detection and field extraction"""

from urllib.parse import urljoin, urlsplit, urlunsplit

from playwright.sync_api import Error as PlaywrightError

from easy_apply_crawler.config import HOME_URL, READ_TIMEOUT_MS
from easy_apply_crawler.data.records import ListingRecord
from easy_apply_crawler.perception import roles
from easy_apply_crawler.perception.locator import has_match, read_attribute, read_text
from easy_apply_crawler.utils.timing import poll_until


def find_cards(page):
    """Return the job cards of the first card-list layout that has any"""
    for strategy in roles.JOB_CARDS.strategies:
        cards = page.locator(strategy.selector)
        if cards.count() > 0:
            return cards.all()
    return []


def has_simplified_application(card, markers=roles.ELIGIBILITY_MARKERS):
    """True if the card carries the simplified-application badge or text"""
    try:
        if has_match(card, roles.eligibility_badge(markers)):
            return True

        text = card.inner_text(timeout=READ_TIMEOUT_MS) or ""
        lowered = text.lower()
        return any(marker.lower() in lowered for marker in markers)
    except PlaywrightError:
        return False


def job_url_from_href(href, base_url=HOME_URL):
    """
    Absolute job URL for a card href, without query string or fragment.

    Cards link relatively (/jobs/view/<id>/?trackingId=...) and the tracking
    parameters change between scans, so only scheme, host and path identify
    a listing.
    """
    if not href or not href.strip():
        return ""
    parts = urlsplit(urljoin(base_url, href.strip()))
    return urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))


def extract_listing(card, base_url=HOME_URL):
    """
    Extract one ListingRecord from a card.

    Returns None for cards without the eligibility marker. Missing fields come
    back as empty strings. Playwright errors raised mid-read propagate.
    """
    if not has_simplified_application(card):
        return None

    return ListingRecord(
        title=read_text(card, roles.CARD_TITLE),
        organization=read_text(card, roles.CARD_COMPANY),
        location=read_text(card, roles.CARD_LOCATION),
        target_url=job_url_from_href(read_attribute(card, roles.CARD_LINK, "href"), base_url),
    )


def extract_listings(cards, base_url=HOME_URL):
    """Extract records from eligible cards, in encounter order. Broken cards are skipped."""
    records = []
    for card in cards:
        try:
            record = extract_listing(card, base_url)
        except PlaywrightError:
            # Card re-rendered while we were reading it
            continue
        except Exception as e:
            print(f"  ⚠️ Unexpected error reading card: {e}")
            continue

        if record is None:
            continue

        print(f"  Listing found: {record.as_line()}")
        records.append(record)
    return records


def _any_card_rendered(page):
    if has_match(page, roles.ANY_JOB_CARD):
        return True

    # Lazy lists only render cards once scrolled
    try:
        page.evaluate("window.scrollBy(0, 600)")
    except PlaywrightError:
        pass
    return True if has_match(page, roles.ANY_JOB_CARD) else None


def wait_for_results(page, timeout_ms=60000, interval_ms=1000):
    """Wait for the results list to render, reloading once on timeout"""
    def probe():
        return _any_card_rendered(page)

    try:
        if poll_until(timeout_ms, probe, interval_ms):
            return True

        print("  ⚠️ Job list did not render in time - reloading once")
        page.reload(wait_until="domcontentloaded")
        return bool(poll_until(timeout_ms, probe, interval_ms))
    except PlaywrightError as e:
        print(f"  ⚠️ Could not load job list: {e}")
        return False
