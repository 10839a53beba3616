"""Report models consumed by the JSON, CSV, text and HTML writers."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from hnessays.models.essay import Essay
from hnessays.models.hit import HNPost
from hnessays.models.session import EssayResult, utc_now_iso


class RankedPost(HNPost):
    """An HN post annotated with the essay it was matched to.

    Serialises flat (post fields plus ``essay_title`` / ``essay_url``) so a
    row of the posts CSV maps one-to-one onto it.
    """

    essay_title: str
    essay_url: str

    @classmethod
    def from_post(cls, post: HNPost, essay: Essay) -> RankedPost:
        return cls(
            **post.model_dump(exclude={"hn_url"}),
            essay_title=essay.title,
            essay_url=essay.url,
        )


class ReportStatistics(BaseModel):
    """Headline numbers for a finished run."""

    model_config = ConfigDict(frozen=True)

    total_essays: int = 0
    essays_found_on_hn: int = 0
    total_hn_posts: int = 0
    # Two-decimal string, e.g. "1.25".
    avg_posts_per_essay: str = "0.00"
    highest_scoring_post: RankedPost | None = None
    total_points: int = 0


class Report(BaseModel):
    """Full report built from a session's results mapping."""

    model_config = ConfigDict(frozen=True)

    generated_at: str = Field(default_factory=utc_now_iso)
    statistics: ReportStatistics = Field(default_factory=ReportStatistics)
    essays_by_popularity: list[EssayResult] = Field(default_factory=list)
    all_posts_by_points: list[RankedPost] = Field(default_factory=list)
    detailed_results: dict[str, EssayResult] = Field(default_factory=dict)
