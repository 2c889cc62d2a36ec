import pytest

from easy_apply_crawler.perception.locator import (
    attribute,
    css,
    has_match,
    read_attribute,
    read_text,
    resolve,
    resolve_any,
    resolve_with_strategy,
    role,
    text,
)
from easy_apply_crawler.utils.timing import poll_until

from fakes import FakeElement, FakePage


def test_falls_back_to_second_strategy_when_first_matches_nothing():
    target = FakeElement("button.b", text="Go")
    page = FakePage([target])

    found = resolve(page, role("go", css("button.a"), css("button.b")))

    assert found is not None
    assert found.elements == [target]


def test_strategies_are_tried_in_order():
    first = FakeElement("button.a", text="A")
    second = FakeElement("button.b", text="B")
    page = FakePage([second, first])

    element, strategy = resolve_with_strategy(page, role("go", css("button.a"), css("button.b")))

    assert element.elements == [first]
    assert strategy.selector == "button.a"


def test_absent_when_nothing_matches():
    page = FakePage([FakeElement("div.other")])

    assert resolve(page, role("go", css("button.a"), css("button.b"))) is None


def test_skips_hidden_and_disabled_candidates():
    hidden = FakeElement("button", text="hidden", visible=False)
    disabled = FakeElement("button", text="disabled", enabled=False)
    aria_disabled = FakeElement("button", text="aria", attrs={"aria-disabled": "true"})
    usable = FakeElement("button", text="usable")
    page = FakePage([hidden, disabled, aria_disabled, usable])

    found = resolve(page, role("button", css("button")))

    assert found.elements == [usable]


def test_hidden_only_match_falls_through_to_next_strategy():
    hidden = FakeElement("button.a", visible=False)
    fallback = FakeElement("button.b")
    page = FakePage([hidden, fallback])

    found = resolve(page, role("go", css("button.a"), css("button.b")))

    assert found.elements == [fallback]


def test_stale_candidate_is_skipped():
    stale = FakeElement("button", broken=True)
    fresh = FakeElement("button", text="fresh")
    page = FakePage([stale, fresh])

    found = resolve(page, role("button", css("button")))

    assert found.elements == [fresh]


def test_text_strategy_matches_text_or_aria_label_case_insensitively():
    other = FakeElement("button", text="Cancel")
    by_label = FakeElement("button", text="", attrs={"aria-label": "Avançar para próxima etapa"})
    page = FakePage([other, by_label])

    found = resolve(page, role("next", text("button", "Next", "AVANÇAR")))

    assert found.elements == [by_label]


def test_attribute_strategy_requires_attribute_and_term():
    plain = FakeElement("a", attrs={"href": "/jobs/view/1/"})
    apply_link = FakeElement("a", attrs={"href": "/jobs/view/1/apply/?openSDUIApplyFlow=true"})
    page = FakePage([plain, apply_link])

    found = resolve(page, role("apply", attribute("a", "href", "openSDUIApplyFlow=true")))
    present = resolve(page, role("link", attribute("a", "href")))

    assert found.elements == [apply_link]
    assert present.elements == [plain]


def test_scope_limits_the_search():
    outside = FakeElement("button.next", text="Next")
    inside = FakeElement("button.next", text="Next inside")
    modal = FakeElement("div.modal", children=[inside])
    page = FakePage([outside, modal])

    scope = resolve(page, role("modal", css("div.modal")))
    found = resolve(scope, role("next", css("button.next")))

    assert found.elements == [inside]


def test_resolve_any_ignores_visibility():
    hidden = FakeElement("label.resume", visible=False)
    page = FakePage([hidden])

    assert resolve(page, role("resume", css("label.resume"))) is None
    assert resolve_any(page, role("resume", css("label.resume"))).elements == [hidden]


def test_read_text_skips_empty_values_and_degrades_to_empty_string():
    empty = FakeElement("strong", text="   ")
    title = FakeElement("span.title", text="  Backend Engineer ")
    page = FakePage([empty, title])

    assert read_text(page, role("title", css("strong"), css("span.title"))) == "Backend Engineer"
    assert read_text(page, role("title", css("h1"))) == ""


def test_read_attribute_uses_fallback_selector():
    link = FakeElement("a.list-title", attrs={"href": "https://example.com/jobs/view/42/"})
    page = FakePage([link])

    value = read_attribute(page, role("link", css("a.card-link"), css("a.list-title")), "href")

    assert value == "https://example.com/jobs/view/42/"


class FakeClock:
    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


def test_poll_until_without_budget_probes_once():
    calls = []

    def probe():
        calls.append(1)
        return None

    assert poll_until(None, probe) is None
    assert poll_until(0, probe) is None
    assert len(calls) == 2


def test_poll_until_returns_first_result_within_budget():
    clock = FakeClock()
    results = iter([None, None, "found"])

    found = poll_until(1000, lambda: next(results), 300, sleep=clock.sleep, clock=clock)

    assert found == "found"
    assert clock.sleeps == [0.3, 0.3]


def test_poll_until_gives_up_after_budget():
    clock = FakeClock()
    calls = []

    def probe():
        calls.append(clock.now)
        return None

    assert poll_until(1000, probe, 300, sleep=clock.sleep, clock=clock) is None
    assert clock.now == pytest.approx(1.0)
    assert calls[:4] == pytest.approx([0.0, 0.3, 0.6, 0.9])
    assert calls[-1] == pytest.approx(1.0)


def test_strategy_timeout_polls_before_next_strategy(monkeypatch):
    import easy_apply_crawler.perception.locator as locator

    late = FakeElement("button.exact", visible=False)
    semantic = FakeElement("button.semantic")
    page = FakePage([late, semantic])
    polled = []

    def fake_poll(budget_ms, probe, interval_ms=300):
        polled.append(budget_ms)
        late.visible = True
        return probe()

    monkeypatch.setattr(locator, "poll_until", fake_poll)

    found = resolve(page, role("next", css("button.exact", timeout_ms=3600), css("button.semantic")))

    assert polled == [3600]
    assert found.elements == [late]


def test_has_match_applies_text_and_attribute_terms():
    page = FakePage([
        FakeElement("button", text="Cancel", visible=False),
        FakeElement("a", attrs={"href": "/jobs/view/1/"}),
    ])

    assert has_match(page, role("cancel", text("button", "cancel"))) is True
    assert has_match(page, role("submit", text("button", "submit application"))) is False
    assert has_match(page, role("apply", attribute("a", "href", "openSDUIApplyFlow=true"))) is False
    assert has_match(page, role("link", attribute("a", "href"))) is True
    assert has_match(page, role("any button", css("button"))) is True
