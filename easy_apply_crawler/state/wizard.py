"""
Apply-modal wizard state machine

Drives one listing through the Easy Apply modal:

    START -> ENTRY_CONFIRM -> ADVANCE_1 -> DOCUMENT_SELECT -> ADVANCE_2
          -> REVIEW -> SUBMIT -> DONE

ENTRY_CONFIRM, DOCUMENT_SELECT and REVIEW are optional. When ADVANCE_1 cannot
be resolved the session tries FALLBACK_FINALIZE (review, then submit
directly). Anything mandatory that stays absent ends in ABORTED with a
diagnostics snapshot. Only DONE allows the caller to mark the listing as
submitted; the engine itself never touches the repository.

An unresolved ADVANCE_2 aborts while an absent REVIEW is a normal skip. A
missing second "next" means the modal has more mandatory questions, which
this engine does not answer.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from easy_apply_crawler.config import TIMING
from easy_apply_crawler.interaction.buttons import click_element
from easy_apply_crawler.perception import roles
from easy_apply_crawler.perception.locator import has_match, resolve, resolve_any
from easy_apply_crawler.utils.timing import poll_until

START = "START"
ENTRY_CONFIRM = "ENTRY_CONFIRM"
ADVANCE_1 = "ADVANCE_1"
DOCUMENT_SELECT = "DOCUMENT_SELECT"
ADVANCE_2 = "ADVANCE_2"
REVIEW = "REVIEW"
SUBMIT = "SUBMIT"
FALLBACK_FINALIZE = "FALLBACK_FINALIZE"
DONE = "DONE"
ABORTED = "ABORTED"

TERMINAL_STATES = (DONE, ABORTED)

PATH_MAIN = "main"
PATH_FALLBACK = "fallback"


@dataclass
class StepOutcome:
    state: str
    step_name: str
    success: bool
    detail: Optional[str] = None


@dataclass
class WizardSession:
    """Per-listing wizard state. Discarded once the listing reaches a terminal state."""

    target_url: str
    state: str = START
    outcomes: List[StepOutcome] = field(default_factory=list)
    completed_via: Optional[str] = None
    abort_reason: Optional[str] = None

    @property
    def done(self):
        return self.state == DONE

    @property
    def aborted(self):
        return self.state == ABORTED

    def step_names(self):
        return [outcome.step_name for outcome in self.outcomes]


class WizardEngine:
    """Runs WizardSessions against one browser page, one listing at a time"""

    def __init__(self, page, audit, diagnostics, timing=None):
        self.page = page
        self.audit = audit
        self.diagnostics = diagnostics
        self.timing = timing or TIMING
        self._handlers = {
            START: self._start,
            ENTRY_CONFIRM: self._entry_confirm,
            ADVANCE_1: self._advance_1,
            FALLBACK_FINALIZE: self._fallback_finalize,
            DOCUMENT_SELECT: self._document_select,
            ADVANCE_2: self._advance_2,
            REVIEW: self._review_step,
            SUBMIT: self._submit,
        }

    def run(self, target_url):
        """Run the wizard for target_url until DONE or ABORTED and return the session"""
        session = WizardSession(target_url=target_url)
        print(f"🧭 Apply wizard: {target_url}")

        while session.state not in TERMINAL_STATES:
            state = session.state
            print(f"  [STEP] {state}")
            try:
                session.state = self._handlers[state](session)
            except Exception as e:
                session.state = self._abort(
                    session, f"step_exception_{state.lower()}", f"{type(e).__name__}: {e}"
                )

        if session.done:
            print(f"✅ Wizard finished via {session.completed_via} path")
        else:
            print(f"⏭️  Wizard aborted ({session.abort_reason})")
        return session

    # ------------------------------------------------------------------
    # audit helpers
    # ------------------------------------------------------------------

    def _record(self, session, step_name, success, detail=None, snapshot=None):
        session.outcomes.append(StepOutcome(session.state, step_name, success, detail))
        self.audit.record(session.target_url, step_name, success, detail, snapshot)

    def _abort(self, session, step_name, detail):
        snapshot = self.diagnostics.capture(self.page, session.target_url, step_name)
        self._record(session, step_name, False, detail, snapshot)
        session.abort_reason = step_name
        return ABORTED

    def _click(self, element):
        click_element(self.page, element, self.timing["scroll_settle"])

    # ------------------------------------------------------------------
    # control resolution
    # ------------------------------------------------------------------

    def _modal_root(self):
        return resolve(self.page, roles.MODAL_ROOT)

    def _resolve_next(self, scope_finder):
        """
        Find the modal's "next" control.

        Returns (element, how) where how is "exact" or "semantic", or
        (None, None). The exact attributes are polled page-wide first since
        the button renders asynchronously; then the semantic vocabulary is
        polled inside whatever modal root scope_finder() returns.
        """
        interval = self.timing["poll_interval"]

        element = resolve(self.page, roles.NEXT_EXACT, self.timing["advance_exact_poll"], interval)
        if element is not None:
            return element, "exact"

        def probe_modal():
            scope = scope_finder()
            if scope is None:
                return None
            return resolve(scope, roles.NEXT_EXACT) or resolve(scope, roles.NEXT_SEMANTIC)

        element = self._wait_step(probe_modal)
        if element is None:
            element = resolve(self.page, roles.NEXT_ANYWHERE)
        if element is not None:
            return element, "semantic"
        return None, None

    def _wait_step(self, probe):
        return poll_until(self.timing["step_wait"], probe, self.timing["poll_interval"])

    def _click_next(self, session, label):
        element, how = self._resolve_next(self._modal_root)
        if element is None:
            return False

        self._click(element)
        if how == "exact":
            self._record(session, f"next_clicked_exact_{label}", True, "Exact next button clicked")
        else:
            self._record(session, f"next_clicked_{label}", True, "Next button clicked")
        return True

    def _click_review(self, session, wait_ms):
        review = resolve(self.page, roles.REVIEW_BUTTON, wait_ms, self.timing["poll_interval"])
        if review is None:
            self._record(session, "review_not_present", True, "Review step not required for this listing")
            return False

        self._click(review)
        self._record(session, "review_clicked", True, "Review button clicked")
        return True

    def _find_submit(self):
        return resolve(
            self.page, roles.SUBMIT_BUTTON, self.timing["step_wait"], self.timing["poll_interval"]
        )

    # ------------------------------------------------------------------
    # states
    # ------------------------------------------------------------------

    def _start(self, session):
        self._record(session, "flow_started", True, "Easy Apply flow started")

        apply_button = resolve(
            self.page, roles.APPLY_BUTTON, self.timing["apply_wait"], self.timing["poll_interval"]
        )
        if apply_button is None:
            return self._abort(session, "initial_control_not_found", "Initial apply control not found")

        self._click(apply_button)
        self._record(session, "initiation_clicked", True, "Initial apply control clicked")
        return ENTRY_CONFIRM

    def _entry_confirm(self, session):
        continue_button = resolve(
            self.page,
            roles.ENTRY_CONTINUE,
            self.timing["entry_confirm_wait"],
            self.timing["poll_interval"],
        )
        if continue_button is None:
            return ADVANCE_1

        self._click(continue_button)
        self._record(session, "continue_entry_clicked", True, "Continue control clicked to open the flow")
        self.page.wait_for_timeout(self.timing["entry_confirm_settle"])
        return ADVANCE_1

    def _advance_1(self, session):
        if self._click_next(session, "advance_1"):
            self.page.wait_for_timeout(self.timing["step_settle"])
            return DOCUMENT_SELECT

        snapshot = self.diagnostics.capture(self.page, session.target_url, "next_not_found_advance_1")
        self._record(
            session, "next_not_found_advance_1", False, "No next button, trying to submit directly", snapshot
        )
        return FALLBACK_FINALIZE

    def _fallback_finalize(self, session):
        print("  [FALLBACK] Trying to finish without a next step...")
        self._click_review(session, self.timing["fallback_review_wait"])
        self.page.wait_for_timeout(self.timing["fallback_settle"])

        submit_button = self._find_submit()
        if submit_button is None:
            return self._abort(session, "fallback_not_possible", "No next button and no direct submit button")

        self._click(submit_button)
        self._record(session, "fallback_submit_clicked", True, "Submitted without a next step")
        self._record(session, "application_completed_via_fallback", True, "Flow completed through fallback")
        session.completed_via = PATH_FALLBACK
        return DONE

    def _document_select(self, session):
        scope = self._modal_root() or self.page
        try:
            if has_match(scope, roles.RESUME_SELECTED):
                detail = "Resume already selected"
            else:
                option = resolve_any(scope, roles.RESUME_OPTIONS)
                if option is None:
                    detail = "No resume option on this step"
                else:
                    self._click(option)
                    self.page.wait_for_timeout(self.timing["document_settle"])
                    detail = "Resume selected"
        except Exception as e:
            # Selecting a resume is a convenience, the next button decides if it was needed
            detail = f"Could not select resume automatically: {e}"

        print(f"  {detail}")
        self._record(session, "resume_step_processed", True, detail)
        return ADVANCE_2

    def _advance_2(self, session):
        if self._click_next(session, "advance_2"):
            return REVIEW
        return self._abort(session, "next_not_found_advance_2", "Next button not found")

    def _review_step(self, session):
        self._click_review(session, self.timing["step_wait"])
        self.page.wait_for_timeout(self.timing["step_settle"])
        return SUBMIT

    def _submit(self, session):
        submit_button = self._find_submit()
        if submit_button is None:
            return self._abort(
                session,
                "submit_not_found_or_required_questions",
                "Flow requires additional steps or mandatory questions",
            )

        self._click(submit_button)
        self._record(session, "submit_clicked", True, "Submit application clicked")
        session.completed_via = PATH_MAIN
        return DONE
