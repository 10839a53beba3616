# =============================================================================
# hnessays/cli/__init__.py: CLI Module Overview
# =============================================================================
#
# Command-line entry points for hnessays.  Each submodule is a standalone
# tool runnable via `python -m hnessays.cli.<module>`:
#
#   1. RUN     (run.py)
#      Scrapes the essay list, searches Hacker News for every essay in
#      throttled concurrent groups, checkpoints after each essay, and
#      writes the JSON / text / CSV / HTML reports.  Resumable.
#
#   2. STATUS  (status.py)
#      Reads checkpoint files only (no network) and prints the progress
#      of every resumable session.
#
#   3. REPORT  (report.py)
#      Regenerates the HTML page from a JSON report, or lists reports.
#
# Architecture Notes:
#   - argparse, not Click/Typer.
#   - Human-readable output goes to stdout; structlog writes to stderr.
#   - Each tool builds its own collaborators; there is no DI container
#     because every tool is a one-shot process.
# =============================================================================

"""CLI tools for hnessays.

- ``python -m hnessays.cli`` or ``hnessays`` -- run or resume a search session
- ``python -m hnessays.cli.status`` -- show resumable sessions
- ``python -m hnessays.cli.report`` -- regenerate HTML from a JSON report
"""
