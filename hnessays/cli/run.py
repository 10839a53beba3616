"""CLI for searching Hacker News for every Paul Graham essay.

Usage::

    # Start a new session
    python -m hnessays.cli

    # Resume the most recent session, or a specific one
    python -m hnessays.cli --resume
    python -m hnessays.cli --resume 2026-10-17T05-49-12-345Z

    # Tune throughput
    python -m hnessays.cli --batch-size 8 --delay 0.5

    # Show resumable sessions and exit
    python -m hnessays.cli --list-sessions

Progress is checkpointed after every essay.  If the run dies, the printed
resume hint names the session to pass to ``--resume``.
"""

from __future__ import annotations

import argparse
import asyncio
import sys

import httpx

from hnessays.config.loader import load_settings
from hnessays.config.settings import Settings
from hnessays.pipeline.batch_runner import BatchRunner
from hnessays.pipeline.checkpoint_store import CheckpointStore
from hnessays.pipeline.progress_tracker import PipelineEvent, ProgressTracker
from hnessays.providers.essays.paulgraham_provider import PaulGrahamEssaySource
from hnessays.providers.search.algolia_provider import AlgoliaSearchProvider
from hnessays.services.essay_search import EssaySearchService
from hnessays.services.match_scorers import SubstringMatchScorer
from hnessays.services.report_builder import ReportBuilder
from hnessays.services.report_writer import ReportWriter
from hnessays.utils.errors import ConfigurationError, ReportError
from hnessays.utils.logging import configure_logging, get_logger

# Value of --resume when the flag is given without a session id.
_LATEST = "latest"

logger = get_logger(__name__)


# ---------------------------------------------------------------------------
# HTTP client factory
# ---------------------------------------------------------------------------

def _make_http_client(settings: Settings) -> httpx.AsyncClient:
    """Create the single httpx.AsyncClient shared by the scraper and search."""
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout),
        headers={"User-Agent": settings.http_user_agent},
        follow_redirects=True,
    )


# ---------------------------------------------------------------------------
# Session helpers
# ---------------------------------------------------------------------------

async def _open_store(
    resume: str | None,
    checkpoint_dir: str,
    tracker: ProgressTracker,
) -> CheckpointStore:
    """Create a new session or load the one named by ``--resume``."""
    if resume is None:
        return await CheckpointStore.create(checkpoint_dir=checkpoint_dir, tracker=tracker)

    if resume == _LATEST:
        sessions = CheckpointStore.list_sessions(checkpoint_dir)
        if not sessions:
            print("No sessions to resume; starting a new one.")
            return await CheckpointStore.create(checkpoint_dir=checkpoint_dir, tracker=tracker)
        resume = sessions[-1]

    print(f"Resuming session {resume}")
    return await CheckpointStore.load(resume, checkpoint_dir=checkpoint_dir, tracker=tracker)


def _print_progress(event: PipelineEvent) -> None:
    """Tracker listener rendering progress lines on stdout."""
    fields = event.fields
    if event.event == "essay_processed":
        title = str(fields.get("title", ""))
        short = title[:57] + "..." if len(title) > 60 else title
        print(
            f"  [{fields['processed']}/{fields['total']}] ({fields['progress']:.1f}%) "
            f"{short} -- {fields['posts']} posts, max {fields['max_points']} pts"
        )
    elif event.event == "batch_started":
        print(f"\nBatch {fields['batch']} ({fields['size']} essays)")
    elif event.event == "essay_failed":
        print(f"  ! {fields['title']}: {fields['error']}")


def _print_resume_hint(session_id: str | None) -> None:
    print("", file=sys.stderr)
    if session_id:
        print(f"Progress is saved. Resume with: hnessays --resume {session_id}", file=sys.stderr)
    else:
        print("Progress is saved. Resume with: hnessays --resume", file=sys.stderr)


# ---------------------------------------------------------------------------
# Command handlers
# ---------------------------------------------------------------------------

async def _handle_run(args: argparse.Namespace, settings: Settings) -> int:
    """Run or resume a session end to end, then write the reports."""
    tracker = ProgressTracker()
    store = await _open_store(args.resume, settings.checkpoint_dir, tracker)
    tracker.register_listener(store.session_id, _print_progress)

    try:
        async with _make_http_client(settings) as client:
            essays = list(store.state.essays)
            if not essays:
                print(f"Fetching essay list from {settings.essays_url}")
                source = PaulGrahamEssaySource(
                    http_client=client,
                    essays_url=settings.essays_url,
                    base_url=settings.site_base_url,
                )
                essays = await source.fetch_essays()
                print(f"Found {len(essays)} essays")

            search_service = EssaySearchService(
                provider=AlgoliaSearchProvider(client, api_url=settings.search_api_url),
                scorer=SubstringMatchScorer(site_domain=settings.site_domain),
                site_domain=settings.site_domain,
                tags=settings.search_tags,
                hits_per_page=settings.search_hits_per_page,
                query_delay=settings.search_query_delay,
            )
            runner = BatchRunner(
                search_service=search_service,
                store=store,
                batch_size=settings.batch_size,
                batch_delay=settings.batch_delay,
                tracker=tracker,
            )

            stats = store.stats()
            print(
                f"Session {store.session_id}: {stats.processed}/{stats.total or len(essays)} "
                f"done, batch size {settings.batch_size}"
            )
            results = await runner.run(essays)

        if store.is_complete():
            await store.complete()
    except Exception as exc:
        logger.error(
            "run_failed",
            session_id=store.session_id,
            error=str(exc),
            error_type=type(exc).__name__,
            exc_info=True,
        )
        print(f"\nError: {exc}", file=sys.stderr)
        _print_resume_hint(store.session_id)
        return 1

    report = ReportBuilder().build(results)
    try:
        paths = ReportWriter(settings.output_dir).write_all(report)
    except ReportError as exc:
        logger.error("report_write_failed", session_id=store.session_id, error=str(exc))
        print(f"\nError: {exc}", file=sys.stderr)
        print(f"Search results are saved in {store.results_path}", file=sys.stderr)
        if not store.is_complete():
            _print_resume_hint(store.session_id)
        return 1

    statistics = report.statistics
    print()
    print("Run complete")
    print("=" * 60)
    print(f"  Essays analyzed:     {statistics.total_essays:,}")
    print(f"  Essays found on HN:  {statistics.essays_found_on_hn:,}")
    print(f"  HN posts found:      {statistics.total_hn_posts:,}")
    top = statistics.highest_scoring_post
    if top is not None:
        print(f"  Highest scoring:     \"{top.title}\" ({top.points:,} points)")
    print()
    print("Files saved:")
    print(f"  {paths.json}  (complete data)")
    print(f"  {paths.summary}  (human-readable summary)")
    print(f"  {paths.csv}  (spreadsheet data)")
    print(f"  {paths.html}  (HTML report)")
    return 0


async def _handle_list_sessions(settings: Settings) -> int:
    """Print every resumable session with its progress."""
    sessions = CheckpointStore.list_sessions(settings.checkpoint_dir)
    if not sessions:
        print("No resumable sessions found.")
        return 0

    print(f"Resumable sessions ({len(sessions)}):")
    for session_id in sessions:
        store = await CheckpointStore.load(session_id, checkpoint_dir=settings.checkpoint_dir)
        stats = store.stats()
        print(
            f"  {session_id}  {stats.processed}/{stats.total} "
            f"({stats.percentage}%), {stats.remaining} remaining"
        )
    return 0


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hnessays",
        description=(
            "Search Hacker News for every Paul Graham essay and rank the "
            "essays by how they did on HN.  Resumable."
        ),
    )
    parser.add_argument(
        "--resume",
        nargs="?",
        const=_LATEST,
        default=None,
        metavar="SESSION_ID",
        help="Resume a session (the most recent one when no id is given)",
    )
    parser.add_argument(
        "--list-sessions",
        action="store_true",
        dest="list_sessions",
        help="List resumable sessions and exit",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=None,
        dest="batch_size",
        help="Essays searched concurrently per batch (default: 5)",
    )
    parser.add_argument(
        "--delay",
        type=float,
        default=None,
        help="Seconds to wait between batches (default: 1.0)",
    )
    parser.add_argument(
        "--config",
        default="config/config.yaml",
        help="YAML config file (default: config/config.yaml)",
    )
    parser.add_argument("--checkpoint-dir", default=None, dest="checkpoint_dir")
    parser.add_argument("--output-dir", default=None, dest="output_dir")
    parser.add_argument(
        "--log-level",
        default=None,
        dest="log_level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        dest="json_logs",
        help="Emit logs as JSON lines on stderr",
    )
    return parser


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> None:
    """CLI entry point.  Exits 0 on success and 1 on any unrecoverable failure."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.batch_size is not None and args.batch_size < 1:
        parser.error("--batch-size must be at least 1")

    try:
        settings = load_settings(
            args.config,
            batch_size=args.batch_size,
            batch_delay=args.delay,
            checkpoint_dir=args.checkpoint_dir,
            output_dir=args.output_dir,
            log_level=args.log_level,
        )
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    configure_logging(settings.log_level, json_output=args.json_logs)

    if args.list_sessions:
        sys.exit(asyncio.run(_handle_list_sessions(settings)))

    try:
        exit_code = asyncio.run(_handle_run(args, settings))
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        _print_resume_hint(None)
        exit_code = 1
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
