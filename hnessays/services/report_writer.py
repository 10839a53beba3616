"""Renders a :class:`Report` to JSON, plain text, CSV and HTML files.

All four files for one run share the report's generation date::

    pg-essays-hn-report-2026-10-17.json   full report, reloadable
    pg-essays-summary-2026-10-17.txt      human-readable summary
    pg-essays-posts-2026-10-17.csv        one row per top post
    pg-essays-hn-report-2026-10-17.html   static page, no scripts

The HTML page can be regenerated later from the JSON file alone with
:meth:`ReportWriter.write_html_from_json`.
"""

from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from html import escape
from pathlib import Path

from pydantic import ValidationError

from hnessays.models.report import RankedPost, Report
from hnessays.models.session import EssayResult
from hnessays.utils.errors import ReportError
from hnessays.utils.logging import get_logger

JSON_PREFIX = "pg-essays-hn-report-"
SUMMARY_PREFIX = "pg-essays-summary-"
CSV_PREFIX = "pg-essays-posts-"

CSV_HEADER = [
    "Essay Title",
    "Essay URL",
    "HN Post Title",
    "HN Points",
    "HN Comments",
    "HN URL",
    "HN Author",
    "Created At",
]

_SUMMARY_TOP_ESSAYS = 10
_SUMMARY_TOP_POSTS = 20
_CARD_POSTS = 3


@dataclass(frozen=True)
class ReportPaths:
    """Locations of the files written for one report."""

    json: Path
    summary: Path
    csv: Path
    html: Path


class ReportWriter:
    """Writes report files into *output_dir*, creating it when needed."""

    def __init__(self, output_dir: str | Path = "data/reports") -> None:
        self._output_dir = Path(output_dir)
        self._logger = get_logger(__name__)

    @property
    def output_dir(self) -> Path:
        return self._output_dir

    def paths_for(self, date: str) -> ReportPaths:
        return ReportPaths(
            json=self._output_dir / f"{JSON_PREFIX}{date}.json",
            summary=self._output_dir / f"{SUMMARY_PREFIX}{date}.txt",
            csv=self._output_dir / f"{CSV_PREFIX}{date}.csv",
            html=self._output_dir / f"{JSON_PREFIX}{date}.html",
        )

    def write_all(self, report: Report) -> ReportPaths:
        """Write all four files, named after the report's generation date."""
        paths = self.paths_for(report.generated_at[:10])
        self._write(paths.json, report.model_dump_json(indent=2))
        self._write(paths.summary, render_summary(report))
        self._write(paths.csv, render_csv(report))
        self._write(paths.html, render_html(report))
        self._logger.info(
            "report_written",
            output_dir=str(self._output_dir),
            files=[p.name for p in (paths.json, paths.summary, paths.csv, paths.html)],
        )
        return paths

    def write_html_from_json(self, json_path: str | Path) -> Path:
        """Regenerate the HTML page beside an existing JSON report.

        Raises
        ------
        ReportError
            If the JSON file cannot be read or is not a report.
        """
        source = Path(json_path)
        try:
            report = Report.model_validate_json(source.read_text(encoding="utf-8"))
        except OSError as exc:
            raise ReportError(f"Cannot read {source}: {exc}") from exc
        except ValidationError as exc:
            raise ReportError(f"{source} is not a valid report: {exc}") from exc

        html_path = source.with_suffix(".html")
        self._write(html_path, render_html(report))
        self._logger.info("html_report_regenerated", source=str(source), path=str(html_path))
        return html_path

    def list_json_reports(self) -> list[Path]:
        """Return JSON reports in the output directory, oldest first."""
        if not self._output_dir.is_dir():
            return []
        return sorted(self._output_dir.glob(f"{JSON_PREFIX}*.json"))

    def _write(self, path: Path, content: str) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        except OSError as exc:
            raise ReportError(f"Cannot write {path}: {exc}") from exc


# ---------------------------------------------------------------------------
# Renderers
# ---------------------------------------------------------------------------

def render_summary(report: Report) -> str:
    stats = report.statistics
    lines = [
        f"Paul Graham Essays on Hacker News - Report Generated: {report.generated_at}",
        "=" * 70,
        "",
        "STATISTICS:",
        f"- Total essays analyzed: {stats.total_essays}",
        f"- Essays found on HN: {stats.essays_found_on_hn}",
        f"- Total HN posts found: {stats.total_hn_posts}",
        f"- Average posts per essay: {stats.avg_posts_per_essay}",
        f"- Total points across all posts: {stats.total_points}",
        "",
    ]

    top = stats.highest_scoring_post
    if top is not None:
        lines += [
            "HIGHEST SCORING POST:",
            f"- {top.points} points: {top.title}",
            f"- Essay: {top.essay_title}",
            f"- HN URL: {top.hn_url}",
            "",
        ]

    lines.append("TOP ESSAYS BY HN POPULARITY:")
    for rank, result in enumerate(report.essays_by_popularity[:_SUMMARY_TOP_ESSAYS], start=1):
        lines.append(
            f"{rank}. {result.essay.title} "
            f"({result.max_points} max points, {result.total_posts} posts)"
        )

    lines += ["", "TOP 20 HN POSTS BY POINTS:"]
    for rank, post in enumerate(report.all_posts_by_points[:_SUMMARY_TOP_POSTS], start=1):
        lines += [
            f"{rank}. {post.points} pts - {post.title}",
            f"    Essay: {post.essay_title}",
            f"    HN: {post.hn_url}",
            "",
        ]

    return "\n".join(lines) + "\n"


def render_csv(report: Report) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for post in report.all_posts_by_points:
        writer.writerow(
            [
                post.essay_title,
                post.essay_url,
                post.title,
                post.points,
                post.num_comments,
                post.hn_url,
                post.author or "",
                post.created_at or "",
            ]
        )
    return buffer.getvalue()


_STYLE = """
  * { margin: 0; padding: 0; box-sizing: border-box; }
  body { font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
         line-height: 1.6; color: #333; background: #f8f9fa; }
  a { color: inherit; }
  .header { background: linear-gradient(135deg, #667eea 0%, #764ba2 100%); color: white;
            padding: 2rem 0; text-align: center; }
  .header h1 { font-size: 2.5rem; font-weight: 300; }
  .container { max-width: 1200px; margin: 0 auto; padding: 0 1rem; }
  .stats { background: white; margin: 2rem 0; border-radius: 10px; padding: 2rem;
           display: grid; grid-template-columns: repeat(auto-fit, minmax(200px, 1fr)); gap: 2rem; }
  .stat-item { text-align: center; }
  .stat-number { font-size: 2.5rem; font-weight: bold; color: #667eea; display: block; }
  .stat-label { color: #666; font-size: 0.9rem; text-transform: uppercase; letter-spacing: 1px; }
  h2 { margin: 2rem 0 1rem; color: #2c3e50; }
  .essay-grid { display: grid; grid-template-columns: repeat(auto-fill, minmax(400px, 1fr)); gap: 2rem; }
  .essay-card { background: white; border-radius: 10px; padding: 1.5rem; }
  .essay-rank { display: inline-block; background: #667eea; color: white; border-radius: 20px;
                padding: 0.3rem 0.8rem; font-size: 0.8rem; font-weight: bold; margin-bottom: 1rem; }
  .essay-title { font-size: 1.3rem; font-weight: 600; margin-bottom: 1rem; color: #2c3e50; }
  .essay-stats { display: flex; justify-content: space-between; font-size: 0.9rem; color: #666; }
  .hn-post { background: #f8f9fa; border-radius: 5px; padding: 0.8rem; margin-top: 0.5rem;
             border-left: 4px solid #ff6600; }
  .hn-post-meta { font-size: 0.8rem; color: #666; display: flex; justify-content: space-between; }
  .points { color: #ff6600; font-weight: bold; }
  .no-posts { color: #999; font-style: italic; margin-top: 1rem; }
  table { width: 100%; background: white; border-collapse: collapse; margin-bottom: 3rem; }
  th, td { text-align: left; padding: 0.6rem; border-bottom: 1px solid #e1e5e9; }
"""


def render_html(report: Report) -> str:
    """Render a self-contained static HTML page.  Every text value is escaped."""
    stats = report.statistics
    cards = "\n".join(
        _essay_card(rank, result)
        for rank, result in enumerate(_ranked_essays(report), start=1)
    )
    rows = "\n".join(_post_row(rank, post) for rank, post in enumerate(report.all_posts_by_points, start=1))

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>Paul Graham Essays - Hacker News Rankings</title>
<style>{_STYLE}</style>
</head>
<body>
<div class="header">
  <h1>Paul Graham Essays</h1>
  <p>Ranked by Hacker News Popularity</p>
  <p>Generated {escape(report.generated_at)}</p>
</div>
<div class="container">
  <div class="stats">
    {_stat(stats.total_essays, "Total Essays")}
    {_stat(stats.essays_found_on_hn, "Found on HN")}
    {_stat(stats.total_hn_posts, "HN Posts")}
    {_stat(f"{stats.total_points:,}", "Total Points")}
  </div>
  <h2>Essays</h2>
  <div class="essay-grid">
{cards}
  </div>
  <h2>Top Hacker News Posts</h2>
  <table>
    <thead><tr><th>#</th><th>Points</th><th>Post</th><th>Essay</th><th>Comments</th><th>Author</th></tr></thead>
    <tbody>
{rows}
    </tbody>
  </table>
</div>
</body>
</html>
"""


def _ranked_essays(report: Report) -> list[EssayResult]:
    """Essays with posts by popularity, then the rest in session order."""
    ranked = list(report.essays_by_popularity)
    listed = {r.essay.title for r in ranked}
    ranked += [r for r in report.detailed_results.values() if r.essay.title not in listed]
    return ranked


def _stat(value: object, label: str) -> str:
    return (
        f'<div class="stat-item"><span class="stat-number">{escape(str(value))}</span>'
        f'<span class="stat-label">{escape(label)}</span></div>'
    )


def _essay_card(rank: int, result: EssayResult) -> str:
    essay = result.essay
    if result.hn_posts:
        posts = "".join(
            f'<div class="hn-post"><div><a href="{escape(p.hn_url)}">{escape(p.title)}</a></div>'
            f'<div class="hn-post-meta"><span class="points">{p.points} points</span>'
            f"<span>{p.num_comments} comments</span></div></div>"
            for p in result.hn_posts[:_CARD_POSTS]
        )
        extra = len(result.hn_posts) - _CARD_POSTS
        if extra > 0:
            posts += f'<div class="hn-post-meta">+{extra} more posts</div>'
    else:
        posts = '<div class="no-posts">Not found on Hacker News</div>'

    return (
        f'    <div class="essay-card"><div class="essay-rank">#{rank}</div>'
        f'<div class="essay-title"><a href="{escape(essay.url)}">{escape(essay.title)}</a></div>'
        f'<div class="essay-stats"><span>{result.max_points} max points</span>'
        f"<span>{result.total_posts} HN posts</span></div>{posts}</div>"
    )


def _post_row(rank: int, post: RankedPost) -> str:
    return (
        f"      <tr><td>{rank}</td><td class=\"points\">{post.points}</td>"
        f'<td><a href="{escape(post.hn_url)}">{escape(post.title)}</a></td>'
        f'<td><a href="{escape(post.essay_url)}">{escape(post.essay_title)}</a></td>'
        f"<td>{post.num_comments}</td><td>{escape(post.author or '')}</td></tr>"
    )
