"""Domain services: essay search, relevance scoring and reporting.

    - essay_search.py    -- query fan-out, relevance filter and ranking per essay
    - match_scorers.py   -- substring (default) and token-overlap strategies
    - report_builder.py  -- statistics and rankings from a results mapping
    - report_writer.py   -- JSON, text, CSV and HTML renderings of a report
"""

from hnessays.services.essay_search import EssaySearchService
from hnessays.services.match_scorers import SubstringMatchScorer, TokenOverlapMatchScorer
from hnessays.services.report_builder import ReportBuilder
from hnessays.services.report_writer import ReportPaths, ReportWriter

__all__ = [
    "EssaySearchService",
    "ReportBuilder",
    "ReportPaths",
    "ReportWriter",
    "SubstringMatchScorer",
    "TokenOverlapMatchScorer",
]
