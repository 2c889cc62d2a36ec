from pathlib import Path

from easy_apply_crawler.debug.diagnostics import (
    DiagnosticsRecorder,
    job_token_from_link,
    sanitize_file_name_part,
)

from fakes import FakePage


def test_job_token_is_last_path_segment():
    assert job_token_from_link("https://www.linkedin.com/jobs/view/4242/?trk=abc") == "4242"
    assert job_token_from_link("") == "job_unknown"
    assert job_token_from_link("https://www.linkedin.com/") == "job_unknown"


def test_sanitize_file_name_part():
    assert sanitize_file_name_part('a/b:c*d?"e') == "a_b_c_d__e"
    assert sanitize_file_name_part("  ") == "unknown"
    assert len(sanitize_file_name_part("x" * 200)) == 80


def test_capture_writes_html_and_screenshot(tmp_path):
    page = FakePage(html="<html><body>modal</body></html>")
    recorder = DiagnosticsRecorder(tmp_path / "diagnostics")

    snapshot = recorder.capture(page, "https://www.linkedin.com/jobs/view/4242/", "next_not_found_advance_2")

    html = Path(snapshot.html_path)
    screenshot = Path(snapshot.screenshot_path)
    assert html.read_text(encoding="utf-8") == "<html><body>modal</body></html>"
    assert screenshot.exists()
    assert html.name.endswith("_4242_next_not_found_advance_2.html")
    assert screenshot.stem == html.stem


def test_screenshot_failure_keeps_html(tmp_path):
    page = FakePage()
    page.screenshot_error = RuntimeError("page crashed")
    recorder = DiagnosticsRecorder(tmp_path)

    snapshot = recorder.capture(page, "https://x/jobs/view/1/", "submit")

    assert snapshot.html_path is not None
    assert snapshot.screenshot_path is None


def test_content_failure_returns_empty_snapshot(tmp_path):
    page = FakePage()
    page.content_error = RuntimeError("target closed")

    snapshot = DiagnosticsRecorder(tmp_path).capture(page, "https://x/jobs/view/1/", "submit")

    assert snapshot.html_path is None
    assert snapshot.screenshot_path is None
