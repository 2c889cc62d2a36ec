"""Timing utilities"""

import time
import random


def human_delay(min_ms=300, max_ms=800):
    """Random human-like delay"""
    delay = random.uniform(min_ms, max_ms) / 1000
    time.sleep(delay)


def poll_until(budget_ms, probe, interval_ms=300, sleep=time.sleep, clock=time.monotonic):
    """
    Call probe() until it returns something other than None or the budget runs out.

    A budget of None or 0 probes exactly once. The probe is always called at
    least once, and once more after the last sleep, so a control that appears
    right at the deadline is still picked up.

    Returns the first non-None probe result, or None.
    """
    deadline = clock() + max(budget_ms or 0, 0) / 1000
    while True:
        result = probe()
        if result is not None:
            return result

        remaining = deadline - clock()
        if remaining <= 0:
            return None
        sleep(min(interval_ms / 1000, remaining))
