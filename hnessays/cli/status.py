"""Show the progress of every resumable session.

Usage::

    python -m hnessays.cli.status
    python -m hnessays.cli.status --checkpoint-dir /tmp/checkpoints

Reads checkpoint files only; makes no network requests.
"""

from __future__ import annotations

import argparse
import asyncio
import sys

from hnessays.config.loader import load_settings
from hnessays.pipeline.checkpoint_store import CheckpointStore
from hnessays.pipeline.progress_tracker import ProgressTracker
from hnessays.utils.errors import ConfigurationError
from hnessays.utils.logging import configure_logging


async def _handle_status(checkpoint_dir: str) -> int:
    sessions = CheckpointStore.list_sessions(checkpoint_dir)
    if not sessions:
        print("No active sessions found.")
        return 0

    print(f"Found {len(sessions)} session(s):")
    print()

    tracker = ProgressTracker()
    for session_id in sessions:
        store = await CheckpointStore.load(
            session_id, checkpoint_dir=checkpoint_dir, tracker=tracker
        )
        if tracker.events(session_id, "session_load_failed"):
            print(f"Session: {session_id} (checkpoint unreadable; resuming starts it fresh)")
            print()
            continue

        stats = store.stats()
        print(f"Session: {session_id}")
        print(f"  Progress:  {stats.processed}/{stats.total} ({stats.percentage}%)")
        print(f"  Remaining: {stats.remaining} essays")

        if stats.has_results:
            results = list(store.results.values())
            with_posts = [r for r in results if r.total_posts > 0]
            total_posts = sum(r.total_posts for r in results)
            print(
                f"  Found HN posts: {total_posts} total, "
                f"{len(with_posts)} essays with posts"
            )
            if with_posts:
                top = max(with_posts, key=lambda r: r.max_points)
                print(f"  Top essay: \"{top.essay.title}\" ({top.max_points} points)")

        print(f"  Session files: {store.progress_path.name}, {store.results_path.name}")
        print()

    print("Commands:")
    print("  Resume latest:   hnessays --resume")
    print("  Resume specific: hnessays --resume <session_id>")
    return 0


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="python -m hnessays.cli.status",
        description="Show progress of resumable hnessays sessions.",
    )
    parser.add_argument("--config", default="config/config.yaml")
    parser.add_argument("--checkpoint-dir", default=None, dest="checkpoint_dir")
    args = parser.parse_args(argv)

    try:
        settings = load_settings(args.config, checkpoint_dir=args.checkpoint_dir)
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    # Loading sessions logs at INFO; keep the status table uncluttered.
    configure_logging("WARNING")
    sys.exit(asyncio.run(_handle_status(settings.checkpoint_dir)))


if __name__ == "__main__":
    main()
