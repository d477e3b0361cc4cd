"""Búsqueda difusa de personas sobre una colección de obituarios."""

from .highlight import highlight
from .matching import get_metric, jaro_winkler, normalize, similarity, tokenize, tokens_overlap
from .scoring import Query, composite_score, name_score, parse_year, year_score
from .search_engine import ScoredMatch, SearchConfig, SearchEngine, search
from .storage import (
    Business,
    BusinessAffiliation,
    DataLoadError,
    Dataset,
    Record,
    RecordValidationError,
    Sample,
)

__all__ = [
    "Business",
    "BusinessAffiliation",
    "DataLoadError",
    "Dataset",
    "Query",
    "Record",
    "RecordValidationError",
    "Sample",
    "ScoredMatch",
    "SearchConfig",
    "SearchEngine",
    "composite_score",
    "get_metric",
    "highlight",
    "jaro_winkler",
    "name_score",
    "normalize",
    "parse_year",
    "search",
    "similarity",
    "tokenize",
    "tokens_overlap",
    "year_score",
]
