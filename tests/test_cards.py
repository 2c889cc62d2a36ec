from playwright.sync_api import Error as PlaywrightError

from easy_apply_crawler.perception import roles
from easy_apply_crawler.perception.cards import (
    extract_listing,
    extract_listings,
    find_cards,
    has_simplified_application,
    job_url_from_href,
    wait_for_results,
)

from fakes import FakeElement, FakeLocator, FakePage

CARD = roles.JOB_CARDS.strategies[0].selector
TITLE = roles.CARD_TITLE.strategies[0].selector
COMPANY = roles.CARD_COMPANY.strategies[0].selector
LOCATION = roles.CARD_LOCATION.strategies[0].selector
LINK = roles.CARD_LINK.strategies[0].selector
BADGE = roles.eligibility_badge().strategies[0].selector


def make_card(title="Backend Engineer", company="Acme", location="Remote",
              href="https://www.linkedin.com/jobs/view/1/", badge=True, **kwargs):
    children = []
    if title is not None:
        children.append(FakeElement(TITLE, text=title))
    if company is not None:
        children.append(FakeElement(COMPANY, text=company))
    if location is not None:
        children.append(FakeElement(LOCATION, text=location))
    if href is not None:
        children.append(FakeElement(LINK, attrs={"href": href}))
    if badge:
        children.append(FakeElement(BADGE, text="Candidatura simplificada"))
    return FakeElement(CARD, "li.jobs-search-results__list-item", children=children, **kwargs)


def test_eligible_card_yields_record():
    card = FakeLocator([make_card()])

    record = extract_listing(card)

    assert record.title == "Backend Engineer"
    assert record.organization == "Acme"
    assert record.location == "Remote"
    assert record.target_url == "https://www.linkedin.com/jobs/view/1/"


def test_card_without_marker_is_not_eligible():
    card = FakeLocator([make_card(badge=False)])

    assert has_simplified_application(card) is False
    assert extract_listing(card) is None


def test_marker_in_card_text_counts_regardless_of_case():
    card = make_card(badge=False)
    card.children.append(FakeElement("span.footer", text="EASY APPLY"))

    assert has_simplified_application(FakeLocator([card])) is True


def test_detached_card_is_treated_as_ineligible():
    card = FakeLocator([make_card(badge=False, broken=True)])

    assert has_simplified_application(card) is False


def test_missing_fields_come_back_empty():
    card = FakeLocator([make_card(company=None, location=None, href=None)])

    record = extract_listing(card)

    assert record.title == "Backend Engineer"
    assert record.organization == ""
    assert record.location == ""
    assert record.target_url == ""


def test_title_falls_back_to_list_title_link():
    card = make_card(title=None)
    card.children.append(FakeElement("a.job-card-list__title", text="Data Engineer"))

    assert extract_listing(FakeLocator([card])).title == "Data Engineer"


class StaleText(FakeElement):
    """Visible element that detaches as soon as its text is read"""

    def inner_text(self, timeout=None):
        raise PlaywrightError("Element is not attached to the DOM")


def test_extract_listings_keeps_order_and_skips_bad_cards():
    first = make_card(title="First", href="https://x/jobs/view/1/")
    ineligible = make_card(title="Other", badge=False)
    second = make_card(title="Second", href="https://x/jobs/view/2/")
    stale = make_card(title=None, href="https://x/jobs/view/3/")
    stale.children.insert(0, StaleText(TITLE))
    page = FakePage([first, ineligible, stale, second])

    records = extract_listings(find_cards(page))

    assert [r.title for r in records] == ["First", "Second"]
    assert [r.target_url for r in records] == ["https://x/jobs/view/1/", "https://x/jobs/view/2/"]


def test_find_cards_uses_first_layout_with_cards():
    legacy = FakeElement("div.job-card-container", children=[FakeElement(TITLE, text="Legacy")])
    page = FakePage([legacy])

    cards = find_cards(page)

    assert len(cards) == 1
    assert cards[0].elements == [legacy]
    assert find_cards(FakePage([])) == []


def test_wait_for_results_true_when_cards_present():
    page = FakePage([make_card()])

    assert wait_for_results(page, timeout_ms=0) is True
    assert page.reloads == 0


def test_wait_for_results_reloads_once_then_gives_up():
    page = FakePage([])

    assert wait_for_results(page, timeout_ms=0) is False
    assert page.reloads == 1


def test_relative_link_is_stored_as_absolute_url_without_tracking():
    card = FakeLocator([make_card(href="/jobs/view/4012345/?eBP=abc&trackingId=x#top")])

    record = extract_listing(card)

    assert record.target_url == "https://www.linkedin.com/jobs/view/4012345/"


def test_same_job_from_two_scans_has_one_identity():
    first = job_url_from_href("/jobs/view/77/?trackingId=aaa&refId=1")
    second = job_url_from_href("https://www.linkedin.com/jobs/view/77/?trackingId=bbb")

    assert first == second == "https://www.linkedin.com/jobs/view/77/"
    assert job_url_from_href("") == ""
    assert job_url_from_href("/jobs/view/9/", "https://br.linkedin.com/jobs/") == "https://br.linkedin.com/jobs/view/9/"
