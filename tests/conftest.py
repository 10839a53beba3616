"""Shared pytest fixtures for the hnessays test suite."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock

import pytest

from hnessays.interfaces.search_provider import ISearchProvider
from hnessays.models.essay import Essay
from hnessays.models.hit import HNPost
from hnessays.pipeline.progress_tracker import ProgressTracker
from hnessays.utils.errors import SearchProviderError


# ---------------------------------------------------------------------------
# Domain objects
# ---------------------------------------------------------------------------


def make_essay(slug: str, title: str | None = None) -> Essay:
    return Essay(
        title=title or slug.replace("-", " ").title(),
        url=f"https://www.paulgraham.com/{slug}.html",
        slug=slug,
    )


def make_post(
    post_id: str,
    title: str = "",
    points: int = 0,
    url: str | None = None,
    story_text: str | None = None,
    num_comments: int = 0,
    author: str | None = "pg",
) -> HNPost:
    return HNPost(
        id=post_id,
        title=title,
        url=url,
        story_text=story_text,
        points=points,
        num_comments=num_comments,
        created_at="2023-07-01T12:00:00.000Z",
        author=author,
    )


@pytest.fixture
def great_work() -> Essay:
    return Essay(
        title="How to Do Great Work",
        url="https://www.paulgraham.com/greatwork.html",
        slug="greatwork",
    )


@pytest.fixture
def essays() -> list[Essay]:
    """Three essays in page order."""
    return [
        Essay(
            title="How to Do Great Work",
            url="https://www.paulgraham.com/greatwork.html",
            slug="greatwork",
        ),
        Essay(
            title="Do Things that Don't Scale",
            url="https://www.paulgraham.com/ds.html",
            slug="ds",
        ),
        Essay(
            title="Maker's Schedule, Manager's Schedule",
            url="https://www.paulgraham.com/makersschedule.html",
            slug="makersschedule",
        ),
    ]


@pytest.fixture
def essay_factory() -> Callable[[int], list[Essay]]:
    """Build *n* distinct essays: ``Essay 0`` .. ``Essay n-1``."""

    def _build(n: int) -> list[Essay]:
        return [make_essay(f"essay{i}", title=f"Essay {i}") for i in range(n)]

    return _build


# ---------------------------------------------------------------------------
# Collaborators
# ---------------------------------------------------------------------------


class FakeSearchProvider(ISearchProvider):
    """In-memory search backend.

    ``responses`` maps a query string to the hits it returns; unknown queries
    return nothing.  Queries listed in ``failing`` raise SearchProviderError.
    Every call is recorded in ``calls``.
    """

    def __init__(
        self,
        responses: dict[str, list[HNPost]] | None = None,
        failing: set[str] | None = None,
        fail_all: bool = False,
    ) -> None:
        self.responses = responses or {}
        self.failing = failing or set()
        self.fail_all = fail_all
        self.calls: list[dict[str, Any]] = []

    async def search(
        self,
        query: str,
        tags: str = "story",
        hits_per_page: int = 50,
    ) -> list[HNPost]:
        self.calls.append({"query": query, "tags": tags, "hits_per_page": hits_per_page})
        if self.fail_all or query in self.failing:
            raise SearchProviderError(f"boom: {query}", provider_name="fake")
        return list(self.responses.get(query, []))

    def get_provider_name(self) -> str:
        return "fake"


@pytest.fixture
def fake_provider() -> FakeSearchProvider:
    return FakeSearchProvider()


@pytest.fixture
def no_sleep() -> AsyncMock:
    """Stand-in for asyncio.sleep that returns immediately and records delays."""
    return AsyncMock(return_value=None)


@pytest.fixture
def tracker() -> ProgressTracker:
    return ProgressTracker()


@pytest.fixture
def checkpoint_dir(tmp_path: Path) -> Path:
    path = tmp_path / "checkpoints"
    path.mkdir()
    return path


@pytest.fixture
def post_factory() -> Callable[..., HNPost]:
    """Expose :func:`make_post` to tests without importing conftest."""
    return make_post


@pytest.fixture
def provider_cls() -> type[FakeSearchProvider]:
    return FakeSearchProvider
