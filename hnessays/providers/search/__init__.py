"""Story search providers.

Only the HN Algolia index is implemented.  The official Firebase HN API
has no full-text search, so it could only serve item lookups, which the
pipeline does not need.
"""

from hnessays.providers.search.algolia_provider import AlgoliaSearchProvider

__all__ = ["AlgoliaSearchProvider"]
