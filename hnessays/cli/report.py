"""Regenerate the HTML report from an existing JSON report.

Usage::

    # List JSON reports in the output directory
    python -m hnessays.cli.report
    python -m hnessays.cli.report --list

    # Regenerate HTML next to a specific report, or the newest one
    python -m hnessays.cli.report data/reports/pg-essays-hn-report-2026-10-17.json
    python -m hnessays.cli.report --latest
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from hnessays.config.loader import load_settings
from hnessays.services.report_writer import ReportWriter
from hnessays.utils.errors import ConfigurationError, ReportError
from hnessays.utils.logging import configure_logging


def _handle_list(writer: ReportWriter) -> int:
    reports = writer.list_json_reports()
    if not reports:
        print(f"No JSON reports found in {writer.output_dir}. Run the search first:")
        print("  hnessays")
        return 0

    print("Available JSON reports:")
    for index, path in enumerate(reports, start=1):
        print(f"  {index}. {path.name}")
    return 0


def _handle_generate(writer: ReportWriter, json_path: Path) -> int:
    print(f"Reading JSON report: {json_path}")
    try:
        html_path = writer.write_html_from_json(json_path)
    except ReportError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    print(f"HTML report created: {html_path}")
    print(f"Open in browser: {html_path.resolve().as_uri()}")
    return 0


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="python -m hnessays.cli.report",
        description="Create an HTML report from a JSON report.",
    )
    parser.add_argument("json_path", nargs="?", default=None, help="JSON report file")
    parser.add_argument("--list", "-l", action="store_true", dest="list_reports")
    parser.add_argument("--latest", action="store_true", help="Use the newest JSON report")
    parser.add_argument("--config", default="config/config.yaml")
    parser.add_argument("--output-dir", default=None, dest="output_dir")
    args = parser.parse_args(argv)

    try:
        settings = load_settings(args.config, output_dir=args.output_dir)
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    configure_logging("WARNING")
    writer = ReportWriter(settings.output_dir)

    if args.list_reports:
        sys.exit(_handle_list(writer))

    if args.json_path:
        sys.exit(_handle_generate(writer, Path(args.json_path)))

    if args.latest:
        reports = writer.list_json_reports()
        if not reports:
            print(f"No JSON reports found in {writer.output_dir}.", file=sys.stderr)
            sys.exit(1)
        print(f"Using latest report: {reports[-1].name}")
        sys.exit(_handle_generate(writer, reports[-1]))

    sys.exit(_handle_list(writer))


if __name__ == "__main__":
    main()
