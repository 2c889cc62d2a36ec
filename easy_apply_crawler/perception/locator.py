"""
Multi-strategy element resolution

A LocatorRole is a named interaction point ("next button", "card title") with
an ordered list of Strategies reflecting the markup variants we have seen.
resolve() walks the strategies strictly in order and returns the first
visible, enabled candidate. When nothing matches it returns None, which
callers treat as "absent" - a normal branch, not an error.

Scope is anything with a Playwright-style .locator() method: a Page, a
Locator for a job card, or the Locator of the active modal root.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from playwright.sync_api import Error as PlaywrightError

from easy_apply_crawler.config import READ_TIMEOUT_MS
from easy_apply_crawler.utils.timing import poll_until

CSS = "css"
TEXT = "text"
ATTRIBUTE = "attribute"


@dataclass(frozen=True)
class Strategy:
    """One way of finding a control"""

    kind: str
    selector: str
    terms: Tuple[str, ...] = ()
    attribute: Optional[str] = None
    timeout_ms: Optional[int] = None

    def describe(self):
        if self.kind == TEXT:
            return f"text{list(self.terms)} in {self.selector}"
        if self.kind == ATTRIBUTE:
            return f"@{self.attribute}{list(self.terms)} in {self.selector}"
        return self.selector


@dataclass(frozen=True)
class LocatorRole:
    name: str
    strategies: Tuple[Strategy, ...]


def css(selector, timeout_ms=None):
    return Strategy(CSS, selector, timeout_ms=timeout_ms)


def text(selector, *terms, timeout_ms=None):
    """Candidates whose visible text or aria-label contains one of terms (case-insensitive)"""
    return Strategy(TEXT, selector, tuple(t.lower() for t in terms), timeout_ms=timeout_ms)


def attribute(selector, name, *terms, timeout_ms=None):
    """Candidates whose attribute contains one of terms, or just has it when no terms"""
    return Strategy(
        ATTRIBUTE, selector, tuple(t.lower() for t in terms), attribute=name, timeout_ms=timeout_ms
    )


def role(name, *strategies):
    return LocatorRole(name, tuple(strategies))


def is_interactable(element):
    """Visible (has layout, not hidden) and not disabled"""
    if not element.is_visible():
        return False
    if not element.is_enabled():
        return False
    return (element.get_attribute("aria-disabled", timeout=READ_TIMEOUT_MS) or "").lower() != "true"


def _matches_terms(element, strategy):
    if strategy.kind == TEXT:
        label = element.get_attribute("aria-label", timeout=READ_TIMEOUT_MS) or ""
        body = element.inner_text(timeout=READ_TIMEOUT_MS) or ""
        combined = f"{body} {label}".lower()
        return any(term in combined for term in strategy.terms)

    if strategy.kind == ATTRIBUTE:
        value = element.get_attribute(strategy.attribute, timeout=READ_TIMEOUT_MS)
        if value is None:
            return False
        if not strategy.terms:
            return True
        value = value.lower()
        return any(term in value for term in strategy.terms)

    return True


def iter_candidates(scope, strategy, visible_only=True):
    """
    Yield the elements a strategy matches, in DOM order.

    A candidate that detaches or goes stale while being probed is skipped.
    Errors from scope.locator()/count() themselves are not caught: they mean
    the page or browser is gone.
    """
    matches = scope.locator(strategy.selector)
    count = matches.count()
    for index in range(count):
        candidate = matches.nth(index)
        try:
            if visible_only and not is_interactable(candidate):
                continue
            if not _matches_terms(candidate, strategy):
                continue
        except PlaywrightError:
            continue
        yield candidate


def _first_candidate(scope, strategy, visible_only=True):
    for candidate in iter_candidates(scope, strategy, visible_only):
        return candidate
    return None


def probe_once(scope, locator_role, visible_only=True):
    """Single pass over every strategy in order"""
    for strategy in locator_role.strategies:
        found = _first_candidate(scope, strategy, visible_only)
        if found is not None:
            return found
    return None


def resolve_with_strategy(scope, locator_role, wait_ms=None, interval_ms=300):
    """
    Like resolve(), but also returns the Strategy that produced the element.

    Returns (element, strategy) or (None, None).
    """
    def probe_with(strategy):
        found = _first_candidate(scope, strategy)
        return (found, strategy) if found is not None else None

    for strategy in locator_role.strategies:
        if strategy.timeout_ms:
            hit = poll_until(strategy.timeout_ms, lambda s=strategy: probe_with(s), interval_ms)
        else:
            hit = probe_with(strategy)
        if hit is not None:
            return hit

    if wait_ms:
        def probe_all():
            for strategy in locator_role.strategies:
                hit = probe_with(strategy)
                if hit is not None:
                    return hit
            return None

        hit = poll_until(wait_ms, probe_all, interval_ms)
        if hit is not None:
            return hit

    return None, None


def resolve(scope, locator_role, wait_ms=None, interval_ms=300):
    """
    Resolve a role to its first visible + interactable element.

    Strategies are tried strictly in listed order. A strategy with its own
    timeout_ms is polled for that long before moving on. If wait_ms is given,
    the whole ordered list is then re-polled until the budget is spent;
    without it each strategy is checked once.

    Returns the element (a Locator) or None when the role is absent.
    """
    element, _ = resolve_with_strategy(scope, locator_role, wait_ms, interval_ms)
    return element


def resolve_any(scope, locator_role):
    """First element any strategy matches, visible or not (last-resort lookups)"""
    return probe_once(scope, locator_role, visible_only=False)


def read_text(scope, locator_role):
    """
    Text of the first visible candidate with non-empty text, else "".

    Read errors on the chosen candidate propagate so the caller can drop the
    whole card.
    """
    for strategy in locator_role.strategies:
        for candidate in iter_candidates(scope, strategy):
            value = (candidate.inner_text(timeout=READ_TIMEOUT_MS) or "").strip()
            if value:
                return value
    return ""


def read_attribute(scope, locator_role, name):
    """Attribute value of the first candidate that has a non-empty one, else ""."""
    for strategy in locator_role.strategies:
        for candidate in iter_candidates(scope, strategy, visible_only=False):
            value = (candidate.get_attribute(name, timeout=READ_TIMEOUT_MS) or "").strip()
            if value:
                return value
    return ""


def has_match(scope, locator_role):
    """
    True when any strategy matches at least one element, visible or not.

    Text and attribute strategies still apply their terms; plain CSS
    strategies only need a count.
    """
    for strategy in locator_role.strategies:
        if strategy.kind == CSS:
            if scope.locator(strategy.selector).count() > 0:
                return True
        elif _first_candidate(scope, strategy, visible_only=False) is not None:
            return True
    return False
