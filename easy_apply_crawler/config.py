"""Configuration and timing profiles for the Easy Apply crawler"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# ========================================
# SPEED MODE CONFIGURATION
# ========================================
# Choose one mode (set all others to False):
# - DEV_TEST_SPEED: shorter settle delays, same wait budgets
# - SUPER_DEV_SPEED: minimal settle delays and shorter wait budgets
# - Production: All False (default, safest)

DEV_TEST_SPEED = False
SUPER_DEV_SPEED = False

# ========================================
# TIMING PROFILES
# ========================================
# All values are in milliseconds (ms).
# "*_wait" keys are bounded polling budgets, everything else is a settle delay.

TIMING_PROFILES = {
    "default": {
        # Results list and pagination
        "results_wait": 60000,  # Max wait for the first job cards to render
        "pagination_ready_wait": 15000,  # Max wait for next page button to become clickable
        "pagination_settle": 2500,  # Re-render time after changing page
        # Job page
        "page_ready_wait": 25000,  # Max wait for document.readyState == complete
        "page_ready_settle": 1200,
        "between_records": 1500,  # Pause after a submitted application
        # Apply modal
        "apply_wait": 25000,  # Max wait for the initial apply control
        "entry_confirm_wait": 5000,  # Max wait for the optional "continue" control
        "entry_confirm_settle": 800,
        "advance_exact_poll": 3600,  # Exact next-button polling (12 x 300ms)
        "poll_interval": 300,
        "step_wait": 25000,  # Max wait for next/review/submit controls
        "fallback_review_wait": 4000,  # Review wait inside the fallback path
        "fallback_settle": 600,
        "step_settle": 800,  # Modal transition after a step
        "scroll_settle": 300,  # After scrolling a control into view
        "document_settle": 500,  # After picking a resume
    },
    "dev_test": {
        "results_wait": 60000,
        "pagination_ready_wait": 15000,
        "pagination_settle": 1500,
        "page_ready_wait": 25000,
        "page_ready_settle": 700,
        "between_records": 900,
        "apply_wait": 25000,
        "entry_confirm_wait": 5000,
        "entry_confirm_settle": 500,
        "advance_exact_poll": 3600,
        "poll_interval": 300,
        "step_wait": 25000,
        "fallback_review_wait": 4000,
        "fallback_settle": 400,
        "step_settle": 500,
        "scroll_settle": 200,
        "document_settle": 300,
    },
    "super_dev": {
        "results_wait": 30000,
        "pagination_ready_wait": 10000,
        "pagination_settle": 1000,  # Cannot go lower without reading the old list
        "page_ready_wait": 15000,
        "page_ready_settle": 400,
        "between_records": 500,
        "apply_wait": 15000,
        "entry_confirm_wait": 3000,
        "entry_confirm_settle": 400,
        "advance_exact_poll": 2400,
        "poll_interval": 200,
        "step_wait": 15000,
        "fallback_review_wait": 3000,
        "fallback_settle": 300,
        "step_settle": 400,
        "scroll_settle": 150,
        "document_settle": 200,
    },
}

# ========================================
# SAFETY VALIDATIONS
# ========================================
# Ensure timing values meet minimum thresholds
_MIN_PAGINATION_SETTLE_MS = 1000
_MIN_STEP_SETTLE_MS = 400
_MIN_POLL_INTERVAL_MS = 100


def get_active_timing():
    """Get the active timing profile based on current speed mode settings"""
    if SUPER_DEV_SPEED:
        timing = TIMING_PROFILES["super_dev"]
    elif DEV_TEST_SPEED:
        timing = TIMING_PROFILES["dev_test"]
    else:
        timing = TIMING_PROFILES["default"]

    violations = validate_timing(timing)
    if violations:
        print("⚠️ TIMING PROFILE VIOLATIONS - Falling back to default profile:")
        for violation in violations:
            print(f"  - {violation}")
        return TIMING_PROFILES["default"]
    return timing


def validate_timing(timing):
    """Return a list of human-readable floor violations for a timing profile"""
    violations = []
    for key, value in timing.items():
        if key == "pagination_settle" and value < _MIN_PAGINATION_SETTLE_MS:
            violations.append(f"{key}={value}ms < {_MIN_PAGINATION_SETTLE_MS}ms minimum")
        if key == "step_settle" and value < _MIN_STEP_SETTLE_MS:
            violations.append(f"{key}={value}ms < {_MIN_STEP_SETTLE_MS}ms minimum")
        if key == "poll_interval" and value < _MIN_POLL_INTERVAL_MS:
            violations.append(f"{key}={value}ms < {_MIN_POLL_INTERVAL_MS}ms minimum")
        if value < 0:
            violations.append(f"{key}={value}ms is negative")
    return violations


TIMING = get_active_timing()

# ========================================
# ENVIRONMENT
# ========================================
BASE_DIR = Path(__file__).resolve().parent.parent
DATA_DIR = BASE_DIR / "data"

LINKEDIN_USERNAME = os.getenv("LINKEDIN_USERNAME")
LINKEDIN_PASSWORD = os.getenv("LINKEDIN_PASSWORD")

DEFAULT_DB_PATH = DATA_DIR / "easy_apply.db"
DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{DEFAULT_DB_PATH}")

HOME_URL = "https://www.linkedin.com/"
LOGIN_URL = "https://www.linkedin.com/login"
COLLECTION_URL = os.getenv(
    "COLLECTION_URL",
    "https://www.linkedin.com/jobs/collections/easy-apply/"
    "?discover=recommended&discoveryOrigin=JOBS_HOME_JYMBII&start=0",
)

BROWSER_DATA_DIR = os.getenv("BROWSER_DATA_DIR", "./browser_data")
DIAGNOSTICS_DIR = Path(os.getenv("DIAGNOSTICS_DIR", str(BASE_DIR / "diagnostics")))
RESULT_LOG = os.getenv("RESULT_LOG", "log.jsonl")
STEP_LOG = os.getenv("STEP_LOG", "steps.jsonl")

# Playwright per-call timeout for reading text/attributes of an already located element
READ_TIMEOUT_MS = 2000
CLICK_TIMEOUT_MS = 5000


def get_required_env(name):
    """Read a mandatory environment variable or fail with a friendly message"""
    value = os.getenv(name)
    if not value or not value.strip():
        raise RuntimeError(f"Set the {name} environment variable.")
    return value
