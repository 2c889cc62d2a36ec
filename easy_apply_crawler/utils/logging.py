"""Logging utilities"""

import json
from datetime import datetime

from easy_apply_crawler.config import RESULT_LOG
from easy_apply_crawler.data.records import StepAuditEntry


def log_result(job_url, status, reason="", steps_completed=0, log_path=RESULT_LOG):
    """Log application result to JSONL file"""
    result = {
        "timestamp": datetime.now().astimezone().isoformat(),
        "job_url": job_url,
        "status": status,
        "steps_completed": steps_completed,
    }
    if reason:
        result["failure_reason"] = reason

    with open(log_path, "a", encoding="utf-8") as f:
        f.write(json.dumps(result, ensure_ascii=False) + "\n")

    print(f"[{status}] {job_url}")
    if reason:
        print(f"  Reason: {reason}")


class AuditTrail:
    """
    Fan-out for step audit entries.

    Every entry is printed, appended to the JSONL step log (when a path is
    given) and forwarded to each sink. All of this is best-effort: a failing
    sink is reported on the console and the automation keeps going.
    """

    def __init__(self, sinks=(), log_path=None):
        self.sinks = list(sinks)
        self.log_path = log_path

    def record(self, target_url, step_name, success, detail=None, snapshot=None):
        if not target_url or not target_url.strip() or not step_name:
            return None

        entry = StepAuditEntry(
            target_url=target_url,
            step_name=step_name,
            success=success,
            detail=detail,
            html_path=snapshot.html_path if snapshot else None,
            screenshot_path=snapshot.screenshot_path if snapshot else None,
        )

        marker = "✓" if success else "✗"
        print(f"  {marker} [{step_name}] {detail or ''}".rstrip())

        if self.log_path:
            try:
                with open(self.log_path, "a", encoding="utf-8") as f:
                    f.write(json.dumps(entry.to_dict(), ensure_ascii=False) + "\n")
            except OSError as e:
                print(f"  ⚠️ Failed to write step '{step_name}' to {self.log_path}: {e}")

        for sink in self.sinks:
            try:
                sink.append_step(entry)
            except Exception as e:
                print(f"  ⚠️ Failed to record step '{step_name}' in audit sink: {e}")

        return entry


def _truncate(value, width):
    if not value or not value.strip():
        return "".ljust(width)
    value = value.strip()
    if len(value) <= width:
        return value.ljust(width)
    return value[: max(0, width - 1)] + "…"


def print_listing_table(records, title_width=40, company_width=30, location_width=25):
    """Print collected listings as a fixed-width table"""
    header = (
        f"| {'Title'.ljust(title_width)} | {'Company'.ljust(company_width)} "
        f"| {'Location'.ljust(location_width)} | Link"
    )
    separator = (
        f"|-{'-' * title_width}-|-{'-' * company_width}-|-{'-' * location_width}-|------"
    )

    print(header)
    print(separator)
    for record in records:
        print(
            f"| {_truncate(record.title, title_width)} "
            f"| {_truncate(record.organization, company_width)} "
            f"| {_truncate(record.location, location_width)} | {record.target_url}"
        )
