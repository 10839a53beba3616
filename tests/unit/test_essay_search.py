"""Unit tests for EssaySearchService."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from hnessays.models.essay import Essay
from hnessays.services.essay_search import EssaySearchService
from hnessays.utils.errors import EssaySearchError

_GREAT_WORK_QUERIES = [
    "How to Do Great Work",
    '"How to Do Great Work"',
    "https://www.paulgraham.com/greatwork.html",
    "site:paulgraham.com How to Do Great Work",
    "greatwork",
]


def _service(provider, no_sleep, **kwargs) -> EssaySearchService:
    return EssaySearchService(provider=provider, query_delay=0.1, sleep=no_sleep, **kwargs)


class TestBuildQueries:
    def test_variants_in_order(self, fake_provider, no_sleep, great_work: Essay) -> None:
        service = _service(fake_provider, no_sleep)
        assert service.build_queries(great_work) == _GREAT_WORK_QUERIES


class TestSearchEssay:
    @pytest.mark.asyncio
    async def test_issues_every_variant_with_filters(
        self, fake_provider, no_sleep, great_work: Essay
    ) -> None:
        service = _service(fake_provider, no_sleep, tags="story", hits_per_page=50)
        await service.search_essay(great_work)

        assert [c["query"] for c in fake_provider.calls] == _GREAT_WORK_QUERIES
        assert all(c["tags"] == "story" and c["hits_per_page"] == 50 for c in fake_provider.calls)

    @pytest.mark.asyncio
    async def test_delay_between_variants_only(
        self, fake_provider, no_sleep, great_work: Essay
    ) -> None:
        await _service(fake_provider, no_sleep).search_essay(great_work)
        assert no_sleep.await_count == len(_GREAT_WORK_QUERIES) - 1
        no_sleep.assert_awaited_with(0.1)

    @pytest.mark.asyncio
    async def test_filters_dedupes_and_sorts(
        self, provider_cls, post_factory, no_sleep, great_work: Essay
    ) -> None:
        exact = post_factory("1", title="How to Do Great Work", points=450)
        by_url = post_factory("2", title="PG essay", url=great_work.url, points=900)
        noise = post_factory("3", title="Great Scott", points=5000)
        provider = provider_cls(
            responses={
                "How to Do Great Work": [exact, noise],
                '"How to Do Great Work"': [exact],
                great_work.url: [by_url, exact],
            }
        )

        posts = await _service(provider, no_sleep).search_essay(great_work)

        assert [p.id for p in posts] == ["2", "1"]

    @pytest.mark.asyncio
    async def test_first_occurrence_wins_on_duplicate_ids(
        self, provider_cls, post_factory, no_sleep, great_work: Essay
    ) -> None:
        first = post_factory("1", title="How to Do Great Work", points=10)
        later = post_factory("1", title="How to Do Great Work", points=99)
        provider = provider_cls(responses={"How to Do Great Work": [first], "greatwork": [later]})

        posts = await _service(provider, no_sleep).search_essay(great_work)

        assert len(posts) == 1
        assert posts[0].points == 10

    @pytest.mark.asyncio
    async def test_ties_keep_discovery_order(
        self, provider_cls, post_factory, no_sleep, great_work: Essay
    ) -> None:
        a = post_factory("a", title="How to Do Great Work", points=7)
        b = post_factory("b", title="how to do great work (2023)", points=7)
        provider = provider_cls(responses={"How to Do Great Work": [a, b]})

        posts = await _service(provider, no_sleep).search_essay(great_work)

        assert [p.id for p in posts] == ["a", "b"]

    @pytest.mark.asyncio
    async def test_not_found_is_empty_list(self, fake_provider, no_sleep, great_work) -> None:
        assert await _service(fake_provider, no_sleep).search_essay(great_work) == []

    @pytest.mark.asyncio
    async def test_partial_failure_keeps_other_variants(
        self, provider_cls, post_factory, no_sleep, great_work: Essay
    ) -> None:
        hit = post_factory("1", title="How to Do Great Work", points=1)
        provider = provider_cls(
            responses={"greatwork": [hit]},
            failing={"How to Do Great Work", great_work.url},
        )

        posts = await _service(provider, no_sleep).search_essay(great_work)

        assert [p.id for p in posts] == ["1"]
        assert len(provider.calls) == 5

    @pytest.mark.asyncio
    async def test_all_variants_failing_raises(
        self, provider_cls, no_sleep, great_work: Essay
    ) -> None:
        provider = provider_cls(fail_all=True)
        with pytest.raises(EssaySearchError) as exc_info:
            await _service(provider, no_sleep).search_essay(great_work)
        assert exc_info.value.provider_name == "fake"

    @pytest.mark.asyncio
    async def test_idempotent_against_fixed_provider(
        self, provider_cls, post_factory, no_sleep, great_work: Essay
    ) -> None:
        provider = provider_cls(
            responses={
                "How to Do Great Work": [
                    post_factory("1", title="How to Do Great Work", points=3),
                    post_factory("2", title="How to Do Great Work", points=8),
                ]
            }
        )
        service = _service(provider, no_sleep)

        first = await service.search_essay(great_work)
        second = await service.search_essay(great_work)

        assert first == second

    @pytest.mark.asyncio
    async def test_uses_injected_scorer(
        self, provider_cls, post_factory, no_sleep, great_work: Essay
    ) -> None:
        scorer = MagicMock()
        scorer.is_match.return_value = False
        provider = provider_cls(
            responses={"greatwork": [post_factory("1", title="How to Do Great Work")]}
        )

        posts = await _service(provider, no_sleep, scorer=scorer).search_essay(great_work)

        assert posts == []
        scorer.is_match.assert_called_once()
