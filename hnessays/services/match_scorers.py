"""Relevance strategies deciding whether a search hit refers to an essay.

Two strategies implement :class:`~hnessays.interfaces.match_scorer.IMatchScorer`:

- :class:`SubstringMatchScorer` (default): plain case-insensitive
  containment tests on title, URL and text-post body.
- :class:`TokenOverlapMatchScorer`: rapidfuzz token-set similarity on the
  title, with the same URL checks.

Known accuracy tradeoff of the substring strategy: a short or generic
essay title ("Why Nerds are Unpopular" is fine, "Cities" is not) matches
any hit whose title merely contains it, and an essay reposted under a
different headline is only found through its URL.
"""

from __future__ import annotations

from rapidfuzz import fuzz
from rapidfuzz.utils import default_process

from hnessays.interfaces.match_scorer import IMatchScorer
from hnessays.models.essay import Essay
from hnessays.models.hit import HNPost

_DEFAULT_DOMAIN = "paulgraham.com"


def _url_matches(essay: Essay, post: HNPost, site_domain: str) -> bool:
    """URL-based checks shared by every strategy."""
    essay_url = essay.url.lower()
    post_url = (post.url or "").lower()
    if post_url and essay_url in post_url:
        return True
    if post_url and f"{site_domain}/{essay.slug}".lower() in post_url:
        return True
    return bool(post.story_text) and essay_url in post.story_text.lower()


class SubstringMatchScorer(IMatchScorer):
    """A hit matches when any of these holds, compared case-insensitively:

    - its title contains the essay title
    - its URL contains the essay URL
    - its URL contains ``<site_domain>/<slug>``
    - its text-post body contains the essay URL
    """

    def __init__(self, site_domain: str = _DEFAULT_DOMAIN) -> None:
        self._site_domain = site_domain

    def is_match(self, essay: Essay, post: HNPost) -> bool:
        if essay.title.lower() in post.title.lower():
            return True
        return _url_matches(essay, post, self._site_domain)


class TokenOverlapMatchScorer(IMatchScorer):
    """Fuzzy title matching via ``fuzz.token_set_ratio``.

    Titles are lowercased and stripped of punctuation first.  Word order and
    extra words in the hit title ("Show HN", "[pdf]") do not lower the
    score, so reposts with decorated headlines still match.
    """

    def __init__(self, threshold: int = 90, site_domain: str = _DEFAULT_DOMAIN) -> None:
        if not 0 <= threshold <= 100:
            raise ValueError(f"threshold must be within 0-100, got {threshold}")
        self._threshold = threshold
        self._site_domain = site_domain

    def is_match(self, essay: Essay, post: HNPost) -> bool:
        if post.title:
            score = fuzz.token_set_ratio(essay.title, post.title, processor=default_process)
            if score >= self._threshold:
                return True
        return _url_matches(essay, post, self._site_domain)
