"""Locator roles for the LinkedIn jobs UI (Portuguese and English markup)"""

from easy_apply_crawler.perception.locator import attribute, css, role, text

# ========================================
# RESULTS LIST
# ========================================
JOB_CARDS = role(
    "job cards",
    css("ul.scaffold-layout__list-container > li"),
    css("ul.jobs-search-results__list > li"),
    css("li.jobs-search-results__list-item"),
    css("ul.jobs-search__results-list > li"),
    css("div.job-card-container"),
)

ANY_JOB_CARD = role(
    "any job card",
    css("li.jobs-search-results__list-item"),
    css("div.job-card-container"),
    css("a.job-card-container__link"),
    css("ul.jobs-search__results-list li"),
)

CARD_TITLE = role(
    "card title",
    css("a.job-card-container__link strong"),
    css("a.job-card-list__title"),
    css("a.job-card-container__link span[aria-hidden='true']"),
)

CARD_COMPANY = role(
    "card company",
    css(".artdeco-entity-lockup__subtitle"),
    css("a.job-card-container__company-name"),
    css(".job-card-container__primary-description"),
)

CARD_LOCATION = role(
    "card location",
    css(".job-card-container__metadata-wrapper span"),
    css("span.job-card-container__metadata-item"),
    css(".job-card-container__metadata-item"),
)

CARD_LINK = role(
    "card link",
    css("a.job-card-container__link"),
    css("a.job-card-list__title"),
)

# Text that marks a listing as supporting the in-page simplified application
ELIGIBILITY_MARKERS = ("Candidatura simplificada", "Easy Apply")


def eligibility_badge(markers=ELIGIBILITY_MARKERS):
    """Badge role: any descendant whose text or aria-label mentions a marker"""
    conditions = " or ".join(
        f"contains(., '{marker}') or contains(@aria-label, '{marker}')" for marker in markers
    )
    return role("eligibility badge", css(f"xpath=.//*[{conditions}]"))


# ========================================
# PAGINATION
# ========================================
PAGINATION_BUTTONS = (
    "ul.jobs-search-pagination__pages button.jobs-search-pagination__indicator-button"
)

# ========================================
# LOGIN
# ========================================
LOGIN_USERNAME = "#username"
LOGIN_PASSWORD = "#password"
LOGIN_SUBMIT = "button[type='submit']"

# ========================================
# APPLY MODAL
# ========================================
NEXT_TERMS = ("avançar", "next", "continuar", "continue", "prosseguir")
CONTINUE_TERMS = ("continuar", "continue", "prosseguir")
REVIEW_TERMS = ("revise sua candidatura", "review your application", "revisar", "review")
SUBMIT_TERMS = ("enviar candidatura", "submit application")
APPLY_TERMS = ("candidatura simplificada", "easy apply")

MODAL_ROOT = role(
    "modal root",
    css("div.jobs-easy-apply-modal"),
    css("div.jobs-easy-apply-modal-content"),
    css("div[role='dialog']"),
)

APPLY_BUTTON = role(
    "apply button",
    css("#jobs-apply-button-id"),
    css("button.jobs-apply-button, a.jobs-apply-button"),
    attribute("button, a", "data-live-test-job-apply-button"),
    attribute("button, a", "data-view-name", "job-apply-button"),
    attribute("a", "href", "/apply/?openSDUIApplyFlow=true"),
    text("a, button", *APPLY_TERMS),
)

ENTRY_CONTINUE = role(
    "entry continue",
    attribute("a", "href", "/apply/?openSDUIApplyFlow=true"),
    text("button:not([data-easy-apply-next-button]), a", *CONTINUE_TERMS),
)

# Matched page-wide: the attribute only exists on the wizard's own next button
NEXT_EXACT = role(
    "next button (exact)",
    css("button[data-easy-apply-next-button][data-live-test-easy-apply-next-button]"),
    css("button[data-live-test-easy-apply-next-button]"),
    css("button[data-easy-apply-next-button]"),
    css("button[aria-label='Avançar para próxima etapa']"),
)

# Matched inside the active modal root
NEXT_SEMANTIC = role(
    "next button (semantic)",
    text(
        "button[aria-label*='Avançar'], button[aria-label*='Next'], "
        "button[aria-label*='Continuar'], button[aria-label*='Continue'], "
        "button.artdeco-button--primary",
        *NEXT_TERMS,
    ),
)

# Last resort when no modal root is visible
NEXT_ANYWHERE = role(
    "next button (page)",
    text("div.jobs-easy-apply-modal button, div[role='dialog'] button", *NEXT_TERMS),
)

RESUME_SELECTED = role(
    "resume selected",
    css("input[type='radio'][name*='resume']:checked, input[type='radio'][id*='resume']:checked"),
)

RESUME_OPTIONS = role(
    "resume option",
    css(
        "label[for*='resume'], input[type='radio'][name*='resume'], "
        "[data-test-document-upload-item], div.jobs-document-upload-redesign-card__container"
    ),
)

REVIEW_BUTTON = role(
    "review button",
    css("button[data-live-test-easy-apply-review-button]"),
    text("button", *REVIEW_TERMS),
)

SUBMIT_BUTTON = role(
    "submit button",
    css("button[data-live-test-easy-apply-submit-button]"),
    text("button", *SUBMIT_TERMS),
)
