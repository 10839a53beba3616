"""Pydantic v2 model for Hacker News search hits.

Represents one story returned by the HN Algolia search API, normalised
into a flat record.  Hits are ephemeral: fetched, scored, and discarded
unless judged relevant to an essay.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, computed_field

_HN_ITEM_URL = "https://news.ycombinator.com/item?id={}"


def _as_count(value: Any) -> int:
    """Coerce a possibly missing or null numeric field to a non-negative int."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return max(value, 0)
    if isinstance(value, float):
        return max(int(value), 0)
    return 0


class HNPost(BaseModel):
    """A single Hacker News story returned by the search API."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Algolia objectID, equal to the HN item id.")
    title: str = Field(default="", description="Story title.")
    url: str | None = Field(default=None, description="Linked URL, absent for text posts.")
    story_text: str | None = Field(
        default=None,
        description="Body of a text post; only used for relevance scoring.",
        exclude=True,
    )
    points: int = Field(default=0, ge=0, description="Story score.")
    num_comments: int = Field(default=0, ge=0, description="Comment count.")
    created_at: str | None = Field(default=None, description="ISO creation timestamp.")
    author: str | None = Field(default=None, description="Submitter username.")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def hn_url(self) -> str:
        return _HN_ITEM_URL.format(self.id)

    @classmethod
    def from_algolia(cls, item: dict[str, Any]) -> HNPost:
        """Parse one element of the Algolia ``hits`` array.

        Missing or null ``points`` / ``num_comments`` become zero and a
        missing title becomes the empty string.
        """
        return cls(
            id=str(item.get("objectID", "")),
            title=item.get("title") or "",
            url=item.get("url") or None,
            story_text=item.get("story_text") or None,
            points=_as_count(item.get("points")),
            num_comments=_as_count(item.get("num_comments")),
            created_at=item.get("created_at"),
            author=item.get("author"),
        )

