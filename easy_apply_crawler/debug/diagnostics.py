"""
Failure diagnostics

Saves the page HTML and a screenshot when a wizard step cannot be resolved,
so the markup that broke the flow can be inspected later.

Capture is best-effort: anything that goes wrong here is printed and
swallowed, and never replaces the audit entry of the original failure.
"""

import re
from datetime import datetime
from pathlib import Path
from urllib.parse import urlparse

from easy_apply_crawler.config import DIAGNOSTICS_DIR
from easy_apply_crawler.data.records import Snapshot

_INVALID_FILE_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')
_MAX_PART_LENGTH = 80


def sanitize_file_name_part(value):
    """Make value safe to use inside a file name"""
    if not value or not value.strip():
        return "unknown"
    sanitized = _INVALID_FILE_CHARS.sub("_", value)
    return sanitized[:_MAX_PART_LENGTH]


def job_token_from_link(link):
    """Last path segment of a job URL (the job id on LinkedIn)"""
    if not link or not link.strip():
        return "job_unknown"
    try:
        segments = [s for s in urlparse(link).path.split("/") if s]
    except ValueError:
        return "job_unknown"
    if not segments:
        return "job_unknown"
    return sanitize_file_name_part(segments[-1])


class DiagnosticsRecorder:
    """Writes <timestamp>_<job>_<stage>.html/.png files into a directory"""

    def __init__(self, directory=DIAGNOSTICS_DIR):
        self.directory = Path(directory)

    def capture(self, page, target_url, stage):
        html_path = None
        try:
            self.directory.mkdir(parents=True, exist_ok=True)

            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")[:-3]
            base_name = f"{timestamp}_{job_token_from_link(target_url)}_{sanitize_file_name_part(stage)}"

            html_file = self.directory / f"{base_name}.html"
            html_file.write_text(page.content(), encoding="utf-8")
            html_path = str(html_file)

            screenshot_file = self.directory / f"{base_name}.png"
            page.screenshot(path=str(screenshot_file), full_page=True)

            print(f"  📸 Diagnostics saved: {html_path}")
            return Snapshot(html_path=html_path, screenshot_path=str(screenshot_file))
        except Exception as e:
            print(f"  ⚠️ Failed to save diagnostics: {e}")
            return Snapshot(html_path=html_path, screenshot_path=None)
