"""Essay reference model: the unit of work searched for on Hacker News."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Essay(BaseModel):
    """One essay listed on the source site.

    Frozen (immutable) per project convention.  ``title`` is the stable key
    used by the checkpoint store to track processed essays, so it must be
    unique within a session's essay list.
    """

    model_config = ConfigDict(frozen=True)

    title: str = Field(description="Essay title as shown on the articles page.")
    url: str = Field(description="Canonical absolute URL of the essay.")
    slug: str = Field(description="File name of the essay without the .html suffix.")

    @property
    def key(self) -> str:
        return self.title
