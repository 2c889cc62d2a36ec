"""Plain records passed between the crawler, the wizard and the repository"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class ListingRecord:
    """One job card as extracted from the results list. target_url is the identity."""

    title: str
    organization: str
    location: str
    target_url: str

    def as_line(self):
        return f"{self.title} | {self.organization} | {self.location} | {self.target_url}"


@dataclass(frozen=True)
class Snapshot:
    """Paths of the evidence captured for a failed step (either may be missing)"""

    html_path: Optional[str] = None
    screenshot_path: Optional[str] = None


@dataclass
class StepAuditEntry:
    """One row of the append-only step log"""

    target_url: str
    step_name: str
    success: bool
    detail: Optional[str] = None
    html_path: Optional[str] = None
    screenshot_path: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.now)

    def to_dict(self):
        return {
            "timestamp": self.created_at.isoformat(),
            "job_url": self.target_url,
            "step": self.step_name,
            "success": self.success,
            "detail": self.detail,
            "html_path": self.html_path,
            "screenshot_path": self.screenshot_path,
        }


@dataclass(frozen=True)
class ProcessingStatus:
    eligible: bool
    submitted: bool
    submitted_at: Optional[datetime] = None
