"""Public interface definitions for the external collaborators.

Every external service in the pipeline is reached through one of these
abstract base classes.  Concrete adapters live in ``hnessays/providers/``
and are constructed by the CLI; tests inject fakes or mocks instead.

    Interface         ->  Concrete implementations
    ------------------------------------------------------------------
    IEssaySource      ->  PaulGrahamEssaySource
    ISearchProvider   ->  AlgoliaSearchProvider
    IMatchScorer      ->  SubstringMatchScorer, TokenOverlapMatchScorer
"""

from hnessays.interfaces.essay_source import IEssaySource
from hnessays.interfaces.match_scorer import IMatchScorer
from hnessays.interfaces.search_provider import ISearchProvider

__all__ = [
    "IEssaySource",
    "IMatchScorer",
    "ISearchProvider",
]
