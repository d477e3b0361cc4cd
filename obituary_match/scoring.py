# obituary_match/scoring.py
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional

from .matching import SimilarityMetric, jaro_winkler, normalize, tokenize, tokens_overlap

if TYPE_CHECKING:
    from .storage import Record

NAME_WEIGHT = 0.7
YEAR_WEIGHT = 0.3

LEADING_INT = re.compile(r"^[+-]?\d+")


def parse_year(value: Any) -> Optional[int]:
    """
    Año opcional del cliente -> int o None.
    Vacío / no numérico = sin restricción de año (nunca es error).
    Acepta un entero al inicio ("1950s" -> 1950).
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    m = LEADING_INT.match(str(value).strip())
    if not m:
        return None
    return int(m.group(0))


@dataclass(frozen=True)
class Query:
    text: str
    year: Optional[int] = None

    @classmethod
    def from_raw(cls, text: Optional[str], year: Any = None) -> "Query":
        return cls(text=text or "", year=parse_year(year))

    def is_blank(self) -> bool:
        return not self.text.strip()


def name_score(query_text: str, record: "Record", metric: SimilarityMetric = jaro_winkler) -> float:
    """
    Mejor score entre todas las variantes del nombre (canónico + alias).
    Por variante: max(similaridad del string completo, overlap de tokens).
    """
    query_norm = normalize(query_text)
    query_tokens = tokenize(query_text)
    denom = max(len(query_tokens), 1)

    best = 0.0
    for variant in record.names():
        variant_tokens = tokenize(variant)

        sim = metric(query_norm, normalize(variant))
        common = sum(
            1 for qt in query_tokens if any(tokens_overlap(qt, vt) for vt in variant_tokens)
        )
        overlap = common / denom

        best = max(best, sim, overlap)
    return best


def year_score(query_year: Optional[int], record_year: int) -> float:
    """Proximidad temporal; sin año en la query es neutral (1.0)."""
    if query_year is None:
        return 1.0
    delta = abs(query_year - record_year)
    if delta == 0:
        return 1.0
    if delta == 1:
        return 0.9
    if delta == 2:
        return 0.8
    return max(0.5 - min(delta / 50, 0.4), 0.1)


def combine(n_score: float, y_score: float,
            name_weight: float = NAME_WEIGHT, year_weight: float = YEAR_WEIGHT) -> float:
    score = name_weight * n_score + year_weight * y_score
    return min(1.0, max(0.0, score))


def composite_score(
    query: Query,
    record: "Record",
    metric: SimilarityMetric = jaro_winkler,
    name_weight: float = NAME_WEIGHT,
    year_weight: float = YEAR_WEIGHT,
) -> float:
    return combine(
        name_score(query.text, record, metric),
        year_score(query.year, record.birth_year),
        name_weight,
        year_weight,
    )
