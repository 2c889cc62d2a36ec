#!/usr/bin/env python3
"""
Easy Apply Crawler - Main Orchestration

One cycle = collect listings from the Easy Apply collection (all pages),
store them, then run the apply wizard for every stored listing that has not
been submitted yet. Scheduling repeated cycles is left to cron/systemd.
"""

import argparse
import time
from datetime import datetime

from easy_apply_crawler.browser.session import close_browser, launch_browser, login
from easy_apply_crawler.data.repository import SqlRepository
from easy_apply_crawler.debug.diagnostics import DiagnosticsRecorder
from easy_apply_crawler.interaction.buttons import wait_for_page_ready
from easy_apply_crawler.perception.cards import wait_for_results
from easy_apply_crawler.perception.pagination import walk_all
from easy_apply_crawler.state.wizard import WizardEngine
from easy_apply_crawler.utils.logging import AuditTrail, log_result, print_listing_table
import easy_apply_crawler.config as config

# Per-listing outcomes of apply_pending()
RESULT_SUCCESS = "SUCCESS"
RESULT_ABORTED = "ABORTED"
RESULT_SKIPPED = "SKIPPED"


def format_elapsed_time(seconds):
    """Format elapsed time in human-readable format"""
    if seconds < 60:
        return f"{seconds:.1f}s"
    elif seconds < 3600:
        mins = int(seconds // 60)
        secs = int(seconds % 60)
        return f"{mins}m {secs}s"
    else:
        hours = int(seconds // 3600)
        mins = int((seconds % 3600) // 60)
        return f"{hours}h {mins}m"


def collect_listings(page, repository, timing=None, collection_url=None):
    """
    Walk every results page of the collection and store eligible listings.

    Storage failures are reported and do not stop the walk; the collected
    records are returned either way.
    """
    timing = timing or config.TIMING
    collection_url = collection_url or config.COLLECTION_URL

    print("Opening Easy Apply collection...")
    page.goto(collection_url, wait_until="domcontentloaded")

    if not wait_for_results(page, timing["results_wait"]):
        print("❌ Job list did not load (timeout). Trying again next cycle.")
        return []

    collected = []

    def store(records):
        collected.extend(records)
        if repository is None:
            return
        try:
            new_rows = repository.upsert_listings(records)
            print(f"  💾 Stored {new_rows} new listing(s), {len(records) - new_rows} already known")
        except Exception as e:
            print(f"  ⚠️ Failed to store listings: {e}")

    walk_all(page, store, timing=timing)
    print(f"\nTotal listings collected: {len(collected)}")
    return collected


def apply_pending(page, repository, engine, audit, timing=None):
    """
    Run the wizard for every eligible, unsubmitted listing, one at a time.

    Returns {target_url: RESULT_*}. A failing listing never stops the batch.
    """
    timing = timing or config.TIMING

    try:
        links = repository.select_eligible_unsubmitted()
    except Exception as e:
        print(f"⚠️ Could not read pending listings: {e}")
        return {}

    print(f"Listings waiting for an application: {len(links)}")
    results = {}

    for index, link in enumerate(links, 1):
        if not link or not link.strip():
            continue

        print("\n" + "=" * 60)
        print(f"JOB {index}/{len(links)}")
        print("=" * 60)
        start_time = time.time()

        try:
            audit.record(link, "job_open_started", True, "Opening listing")
            page.goto(link, wait_until="domcontentloaded")
            wait_for_page_ready(page, timing["page_ready_wait"], timing["page_ready_settle"])

            session = engine.run(link)
            if not session.done:
                print("Application not completed for this listing (moving on).")
                results[link] = RESULT_ABORTED
                log_result(link, RESULT_ABORTED, session.abort_reason or "", len(session.outcomes))
                continue

            # Already submitted at this point, whatever the repository says
            try:
                if repository.mark_submitted(link, datetime.now()):
                    audit.record(link, "job_marked_as_applied", True, "Listing marked as submitted")
                else:
                    audit.record(link, "job_marked_as_applied", False, "Listing was already marked as submitted")
            except Exception as e:
                print(f"⚠️ Submitted but could not mark {link} as applied: {e}")
                audit.record(link, "job_marked_as_applied", False, f"Failed to mark as submitted: {e}")
            results[link] = RESULT_SUCCESS
            log_result(link, RESULT_SUCCESS, "", len(session.outcomes))
            page.wait_for_timeout(timing["between_records"])
        except Exception as e:
            print(f"❌ Error processing {link}: {e}")
            snapshot = engine.diagnostics.capture(page, link, "job_processing_exception")
            audit.record(link, "job_processing_exception", False, str(e), snapshot)
            results[link] = RESULT_SKIPPED
            log_result(link, RESULT_SKIPPED, str(e))
        finally:
            print(f"⏱️  Time on listing: {format_elapsed_time(time.time() - start_time)}")

    return results


def print_summary(results):
    succeeded = sum(1 for r in results.values() if r == RESULT_SUCCESS)
    aborted = sum(1 for r in results.values() if r == RESULT_ABORTED)
    skipped = sum(1 for r in results.values() if r == RESULT_SKIPPED)

    print("\n" + "=" * 60)
    print("APPLY SUMMARY")
    print("=" * 60)
    print(f"  ✅ Submitted: {succeeded}")
    print(f"  ⏭️  Aborted:   {aborted}")
    print(f"  ❌ Errors:    {skipped}")


def run_cycle(page, repository, audit, diagnostics, timing=None, skip_scan=False, skip_apply=False,
              collection_url=None):
    """One scan-and-apply cycle against an already open page"""
    timing = timing or config.TIMING
    listings = []
    results = {}

    if not skip_scan:
        listings = collect_listings(page, repository, timing, collection_url)

    if not skip_apply:
        engine = WizardEngine(page, audit, diagnostics, timing)
        results = apply_pending(page, repository, engine, audit, timing)
        print_summary(results)

    if listings:
        print("\nCollected listings:")
        print_listing_table(listings)

    return listings, results


def main():
    parser = argparse.ArgumentParser(
        description="Easy Apply Crawler - collect Easy Apply listings and submit simple applications",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Speed Modes:
  --speed dev       Shorter settle delays
  --speed super     Minimal settle delays and shorter waits
  (default)         Production timing - safest

Examples:
  python -m easy_apply_crawler.main
  python -m easy_apply_crawler.main --skip-apply
  python -m easy_apply_crawler.main --speed dev --database-url postgresql+psycopg://user@host/jobs
        """,
    )
    parser.add_argument(
        "--speed",
        choices=["dev", "super"],
        help="Speed mode: dev or super",
    )
    parser.add_argument("--headless", action="store_true", help="Run the browser without a window")
    parser.add_argument("--skip-scan", action="store_true", help="Only apply to listings already stored")
    parser.add_argument("--skip-apply", action="store_true", help="Only collect and store listings")
    parser.add_argument("--database-url", default=config.DATABASE_URL, help="SQLAlchemy database URL")
    parser.add_argument("--collection-url", default=config.COLLECTION_URL, help="Results page to crawl")

    args = parser.parse_args()

    if args.skip_scan and args.skip_apply:
        parser.error("Cannot use both --skip-scan and --skip-apply")

    # Configure speed mode based on command-line flag
    if args.speed == "dev":
        config.DEV_TEST_SPEED = True
        config.SUPER_DEV_SPEED = False
        print("⚡ DEV_TEST_SPEED enabled\n")
    elif args.speed == "super":
        config.DEV_TEST_SPEED = False
        config.SUPER_DEV_SPEED = True
        print("⚡⚡ SUPER_DEV_SPEED enabled\n")
    timing = config.get_active_timing()

    repository = SqlRepository(args.database_url)
    repository.create_schema()
    audit = AuditTrail(sinks=[repository], log_path=config.STEP_LOG)
    diagnostics = DiagnosticsRecorder(config.DIAGNOSTICS_DIR)

    print("Starting new cycle...")
    cycle_start = time.time()
    playwright, context, page = launch_browser(headless=args.headless)
    try:
        page.goto(config.HOME_URL, wait_until="domcontentloaded")
        print(f"Page title: {page.title()}")

        if config.LINKEDIN_USERNAME or config.LINKEDIN_PASSWORD:
            login(
                page,
                config.get_required_env("LINKEDIN_USERNAME"),
                config.get_required_env("LINKEDIN_PASSWORD"),
            )
        else:
            print("No LINKEDIN_USERNAME/LINKEDIN_PASSWORD set - relying on the saved browser session")

        run_cycle(
            page,
            repository,
            audit,
            diagnostics,
            timing,
            skip_scan=args.skip_scan,
            skip_apply=args.skip_apply,
            collection_url=args.collection_url,
        )
    finally:
        print("Closing browser...")
        close_browser(playwright, context)

    print(f"Cycle finished in {format_elapsed_time(time.time() - cycle_start)}")


if __name__ == "__main__":
    main()
