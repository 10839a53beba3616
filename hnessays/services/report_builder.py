"""Aggregates a session's results mapping into a :class:`Report`.

The builder only reads the mapping it is given; rendering to files is the
job of :class:`~hnessays.services.report_writer.ReportWriter`.
"""

from __future__ import annotations

from hnessays.models.report import RankedPost, Report, ReportStatistics
from hnessays.models.session import EssayResult, to_fixed
from hnessays.utils.logging import get_logger

_TOP_POSTS = 50


class ReportBuilder:
    """Derives statistics and rankings from ``title -> EssayResult``."""

    def __init__(self, top_posts: int = _TOP_POSTS) -> None:
        self._top_posts = top_posts
        self._logger = get_logger(__name__)

    def build(self, results: dict[str, EssayResult]) -> Report:
        """Build the report.

        ``essays_by_popularity`` holds only essays with at least one post,
        ordered by their best post's points.  ``all_posts_by_points`` is
        every matched post across all essays, best first, capped at
        ``top_posts``.
        """
        essays = list(results.values())
        found = [r for r in essays if r.total_posts > 0]
        by_popularity = sorted(found, key=lambda r: r.max_points, reverse=True)

        all_posts = sorted(
            (RankedPost.from_post(post, r.essay) for r in essays for post in r.hn_posts),
            key=lambda p: p.points,
            reverse=True,
        )

        statistics = ReportStatistics(
            total_essays=len(essays),
            essays_found_on_hn=len(found),
            total_hn_posts=len(all_posts),
            avg_posts_per_essay=to_fixed(len(all_posts) / len(essays), 2) if essays else "0.00",
            highest_scoring_post=all_posts[0] if all_posts else None,
            total_points=sum(p.points for p in all_posts),
        )

        self._logger.info(
            "report_built",
            total_essays=statistics.total_essays,
            essays_found_on_hn=statistics.essays_found_on_hn,
            total_hn_posts=statistics.total_hn_posts,
        )
        return Report(
            statistics=statistics,
            essays_by_popularity=by_popularity,
            all_posts_by_points=all_posts[: self._top_posts],
            detailed_results=dict(results),
        )
