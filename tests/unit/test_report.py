"""Unit tests for ReportBuilder and ReportWriter."""

from __future__ import annotations

import csv
import io
import json
from pathlib import Path

import pytest

from hnessays.models.essay import Essay
from hnessays.models.hit import HNPost
from hnessays.models.report import Report
from hnessays.models.session import EssayResult
from hnessays.services.report_builder import ReportBuilder
from hnessays.services.report_writer import (
    CSV_HEADER,
    ReportWriter,
    render_csv,
    render_html,
    render_summary,
)
from hnessays.utils.errors import ReportError


def make_essay(slug: str, title: str) -> Essay:
    return Essay(title=title, url=f"https://www.paulgraham.com/{slug}.html", slug=slug)


def make_post(
    post_id: str,
    title: str = "",
    points: int = 0,
    num_comments: int = 0,
    author: str | None = "pg",
) -> HNPost:
    return HNPost(
        id=post_id,
        title=title,
        points=points,
        num_comments=num_comments,
        created_at="2023-07-01T12:00:00.000Z",
        author=author,
    )


@pytest.fixture
def results(essays: list[Essay]) -> dict[str, EssayResult]:
    great, ds, makers = essays
    return {
        great.title: EssayResult.from_posts(
            great,
            [
                make_post("1", "How to Do Great Work", points=450, num_comments=200),
                make_post("2", "How to Do Great Work (2023)", points=30),
            ],
        ),
        ds.title: EssayResult.from_posts(ds, []),
        makers.title: EssayResult.from_posts(
            makers,
            [make_post("3", "Maker's Schedule, Manager's Schedule", points=900, num_comments=120)],
        ),
    }


class TestReportBuilder:
    def test_statistics(self, results: dict[str, EssayResult]) -> None:
        stats = ReportBuilder().build(results).statistics

        assert stats.total_essays == 3
        assert stats.essays_found_on_hn == 2
        assert stats.total_hn_posts == 3
        assert stats.avg_posts_per_essay == "1.00"
        assert stats.total_points == 1380
        assert stats.highest_scoring_post is not None
        assert stats.highest_scoring_post.id == "3"
        assert stats.highest_scoring_post.essay_title == "Maker's Schedule, Manager's Schedule"

    def test_empty_results(self) -> None:
        report = ReportBuilder().build({})

        assert report.statistics.total_essays == 0
        assert report.statistics.avg_posts_per_essay == "0.00"
        assert report.statistics.highest_scoring_post is None
        assert report.essays_by_popularity == []
        assert report.all_posts_by_points == []

    def test_average_rounds_to_two_places(self) -> None:
        items = [make_essay(f"e{i}", title=f"E{i}") for i in range(3)]
        results = {items[0].title: EssayResult.from_posts(items[0], [make_post("a", points=1)])}
        results.update({e.title: EssayResult.from_posts(e, []) for e in items[1:]})

        assert ReportBuilder().build(results).statistics.avg_posts_per_essay == "0.33"

    def test_average_rounds_ties_up(self) -> None:
        items = [make_essay(f"e{i}", title=f"E{i}") for i in range(8)]
        results = {items[0].title: EssayResult.from_posts(items[0], [make_post("a", points=1)])}
        results.update({e.title: EssayResult.from_posts(e, []) for e in items[1:]})

        # 1/8 is exactly 0.125.
        assert ReportBuilder().build(results).statistics.avg_posts_per_essay == "0.13"

    def test_essays_by_popularity_excludes_unfound(self, results: dict[str, EssayResult]) -> None:
        report = ReportBuilder().build(results)

        assert [r.essay.slug for r in report.essays_by_popularity] == [
            "makersschedule",
            "greatwork",
        ]

    def test_all_posts_sorted_and_annotated(self, results: dict[str, EssayResult]) -> None:
        posts = ReportBuilder().build(results).all_posts_by_points

        assert [p.points for p in posts] == [900, 450, 30]
        assert posts[1].essay_url == "https://www.paulgraham.com/greatwork.html"
        assert posts[1].hn_url == "https://news.ycombinator.com/item?id=1"

    def test_top_posts_capped(self) -> None:
        essay = make_essay("big", title="Big")
        posts = [make_post(str(i), points=i) for i in range(60)]
        report = ReportBuilder().build({essay.title: EssayResult.from_posts(essay, posts)})

        assert len(report.all_posts_by_points) == 50
        assert report.all_posts_by_points[0].points == 59
        assert report.statistics.total_hn_posts == 60

    def test_detailed_results_kept(self, results: dict[str, EssayResult]) -> None:
        report = ReportBuilder(top_posts=1).build(results)
        assert report.detailed_results == results


class TestRenderers:
    def test_summary_sections(self, results: dict[str, EssayResult]) -> None:
        text = render_summary(ReportBuilder().build(results))

        assert "STATISTICS:" in text
        assert "- Total essays analyzed: 3" in text
        assert "- Average posts per essay: 1.00" in text
        assert "HIGHEST SCORING POST:" in text
        assert "- 900 points: Maker's Schedule, Manager's Schedule" in text
        assert "1. Maker's Schedule, Manager's Schedule (900 max points, 1 posts)" in text
        assert "TOP 20 HN POSTS BY POINTS:" in text

    def test_summary_without_posts_omits_highlight(self) -> None:
        text = render_summary(ReportBuilder().build({}))
        assert "HIGHEST SCORING POST:" not in text

    def test_csv_rows_and_quoting(self) -> None:
        essay = make_essay("quote", title='Say "Hi", Then Leave')
        post = make_post("7", title='A, "quoted" title', points=5, num_comments=2, author=None)
        report = ReportBuilder().build({essay.title: EssayResult.from_posts(essay, [post])})

        rows = list(csv.reader(io.StringIO(render_csv(report))))

        assert rows[0] == CSV_HEADER
        assert rows[1] == [
            'Say "Hi", Then Leave',
            "https://www.paulgraham.com/quote.html",
            'A, "quoted" title',
            "5",
            "2",
            "https://news.ycombinator.com/item?id=7",
            "",
            "2023-07-01T12:00:00.000Z",
        ]

    def test_html_escapes_text(self) -> None:
        essay = make_essay("xss", title="<script>alert(1)</script>")
        post = make_post("9", title="Tom & Jerry <b>", points=3)
        html = render_html(ReportBuilder().build({essay.title: EssayResult.from_posts(essay, [post])}))

        assert "<script>" not in html
        assert "&lt;script&gt;alert(1)&lt;/script&gt;" in html
        assert "Tom &amp; Jerry &lt;b&gt;" in html

    def test_html_cards(self, results: dict[str, EssayResult]) -> None:
        html = render_html(ReportBuilder().build(results))

        assert "Not found on Hacker News" in html
        # Unfound essays are still listed, after the ranked ones.
        assert html.index("Maker&#x27;s Schedule") < html.index("Do Things that Don&#x27;t Scale")

    def test_html_more_posts_note(self) -> None:
        essay = make_essay("many", title="Many")
        posts = [make_post(str(i), title=f"Post {i}", points=i) for i in range(5)]
        html = render_html(ReportBuilder().build({essay.title: EssayResult.from_posts(essay, posts)}))

        assert "+2 more posts" in html


class TestReportWriter:
    def test_write_all_creates_four_dated_files(
        self, tmp_path: Path, results: dict[str, EssayResult]
    ) -> None:
        report = ReportBuilder().build(results).model_copy(
            update={"generated_at": "2026-10-17T08:00:00.000Z"}
        )
        writer = ReportWriter(tmp_path / "reports")

        paths = writer.write_all(report)

        assert paths.json.name == "pg-essays-hn-report-2026-10-17.json"
        assert paths.summary.name == "pg-essays-summary-2026-10-17.txt"
        assert paths.csv.name == "pg-essays-posts-2026-10-17.csv"
        assert paths.html.name == "pg-essays-hn-report-2026-10-17.html"
        for path in (paths.json, paths.summary, paths.csv, paths.html):
            assert path.is_file()

        data = json.loads(paths.json.read_text(encoding="utf-8"))
        assert data["statistics"]["total_essays"] == 3
        assert data["all_posts_by_points"][0]["essay_title"] == "Maker's Schedule, Manager's Schedule"
        assert "story_text" not in data["all_posts_by_points"][0]

    def test_json_report_reloads(self, tmp_path: Path, results: dict[str, EssayResult]) -> None:
        report = ReportBuilder().build(results)
        paths = ReportWriter(tmp_path).write_all(report)

        reloaded = Report.model_validate_json(paths.json.read_text(encoding="utf-8"))

        assert reloaded.statistics == report.statistics
        assert reloaded.all_posts_by_points == report.all_posts_by_points

    def test_write_html_from_json(self, tmp_path: Path, results: dict[str, EssayResult]) -> None:
        writer = ReportWriter(tmp_path)
        paths = writer.write_all(ReportBuilder().build(results))
        paths.html.unlink()

        html_path = writer.write_html_from_json(paths.json)

        assert html_path == paths.html
        assert "Paul Graham Essays" in html_path.read_text(encoding="utf-8")

    def test_write_html_from_missing_json_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ReportError, match="Cannot read"):
            ReportWriter(tmp_path).write_html_from_json(tmp_path / "missing.json")

    def test_write_html_from_invalid_json_raises(self, tmp_path: Path) -> None:
        bad = tmp_path / "pg-essays-hn-report-2026-01-01.json"
        bad.write_text('{"statistics": "nope"}', encoding="utf-8")

        with pytest.raises(ReportError, match="not a valid report"):
            ReportWriter(tmp_path).write_html_from_json(bad)

    def test_list_json_reports(self, tmp_path: Path) -> None:
        for name in (
            "pg-essays-hn-report-2026-10-17.json",
            "pg-essays-hn-report-2026-01-02.json",
            "pg-essays-summary-2026-10-17.txt",
            "other.json",
        ):
            (tmp_path / name).write_text("{}", encoding="utf-8")

        listed = [p.name for p in ReportWriter(tmp_path).list_json_reports()]

        assert listed == [
            "pg-essays-hn-report-2026-01-02.json",
            "pg-essays-hn-report-2026-10-17.json",
        ]

    def test_list_json_reports_missing_dir(self, tmp_path: Path) -> None:
        assert ReportWriter(tmp_path / "absent").list_json_reports() == []

    def test_unwritable_output_raises(self, tmp_path: Path) -> None:
        blocker = tmp_path / "file"
        blocker.write_text("", encoding="utf-8")

        with pytest.raises(ReportError):
            ReportWriter(blocker / "reports").write_all(ReportBuilder().build({}))
