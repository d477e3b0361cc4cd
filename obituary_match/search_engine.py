# obituary_match/search_engine.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Tuple

from .matching import get_metric
from .scoring import NAME_WEIGHT, YEAR_WEIGHT, Query, combine, name_score, year_score
from .storage import Record, RecordRepository


@dataclass(frozen=True)
class SearchConfig:
    top_k: int = 5
    min_score: float = 0.95
    name_weight: float = NAME_WEIGHT
    year_weight: float = YEAR_WEIGHT
    metric: str = "jaro_winkler"

    def __post_init__(self) -> None:
        if self.top_k < 1:
            raise ValueError("top_k debe ser >= 1")
        if not (0.0 <= self.min_score <= 1.0):
            raise ValueError("min_score debe estar entre 0 y 1")
        if self.name_weight < 0 or self.year_weight < 0:
            raise ValueError("los pesos no pueden ser negativos")
        if abs(self.name_weight + self.year_weight - 1.0) > 1e-9:
            raise ValueError("name_weight + year_weight debe sumar 1")
        get_metric(self.metric)


@dataclass(frozen=True)
class ScoredMatch:
    record: Record
    score: float
    name_score: float
    year_score: float


def score_records(query: Query, records: Iterable[Record], config: SearchConfig) -> List[ScoredMatch]:
    metric = get_metric(config.metric)
    out: List[ScoredMatch] = []
    for rec in records:
        n = name_score(query.text, rec, metric)
        y = year_score(query.year, rec.birth_year)
        out.append(
            ScoredMatch(
                record=rec,
                score=combine(n, y, config.name_weight, config.year_weight),
                name_score=n,
                year_score=y,
            )
        )
    return out


def search(query: Query, records: Iterable[Record], config: SearchConfig = SearchConfig()) -> List[ScoredMatch]:
    """
    Política de ranking:
      1) score desc (sort estable: empates conservan el orden de entrada)
      2) top_k
      3) descarta score < min_score

    El truncado va antes del umbral.
    """
    if query.is_blank():
        return []

    scored = score_records(query, records, config)
    scored.sort(key=lambda m: -m.score)

    top = scored[: config.top_k]
    return [m for m in top if m.score >= config.min_score]


class SearchEngine:
    """
    - Snapshot inmutable (tuple) de los records del repo
    - Scoring explicable (name_score / year_score por match)
    """

    def __init__(self, repo: RecordRepository, config: SearchConfig = SearchConfig()):
        self.config = config
        self.records: Tuple[Record, ...] = tuple(repo.iter_records())

    def search(self, query: Query) -> List[ScoredMatch]:
        return search(query, self.records, self.config)

    def search_explain(self, query: Query) -> Tuple[List[ScoredMatch], int]:
        """Devuelve (matches, candidate_count)."""
        if query.is_blank():
            return [], 0
        return search(query, self.records, self.config), len(self.records)
