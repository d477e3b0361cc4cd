# obituary_match/app.py
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field
from typing import Dict, Optional, List, Any, Union
import logging
import os
import time

from .highlight import highlight
from .matching import normalize
from .metrics import Metrics
from .scoring import Query
from .search_engine import ScoredMatch, SearchConfig, SearchEngine
from .storage import Business, DataLoadError, InMemoryRecordRepository, build_repository

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Obituary Match API",
    description=(
        "Búsqueda difusa de personas (Jaro-Winkler + overlap de tokens + proximidad de año), "
        "top-5 con umbral de confianza, highlight y métricas."
    ),
    version="1.0.0"
)

engine: Optional[SearchEngine] = None
repo: Optional[InMemoryRecordRepository] = None
load_error: Optional[str] = None
metrics = Metrics()


# -----------------------
# API Models
# -----------------------

class SearchRequest(BaseModel):
    name: str = Field(..., examples=["Al Capone"])
    year: Optional[Union[int, str]] = Field(
        None,
        examples=[1899, "1899"],
        description="Año de nacimiento aproximado. Vacío o no numérico = sin restricción.",
    )
    explain: bool = Field(False, description="Si true, incluye name_score y year_score por resultado.")


class HighlightWord(BaseModel):
    word: str
    match: bool


class AffiliationOut(BaseModel):
    name: str
    role: str
    category: Optional[str] = None


class SearchHit(BaseModel):
    full_name: str
    aliases: List[str]
    birth_year: int
    death_year: int
    last_residence: str
    occupation: str
    match_score: float
    match_percent: int
    highlighted_name: List[HighlightWord]
    business_affiliations: List[AffiliationOut]
    name_score: Optional[float] = None
    year_score: Optional[float] = None


class SearchResponse(BaseModel):
    results: List[SearchHit]


class SampleOut(BaseModel):
    name: str
    year: Optional[int] = None


# -----------------------
# Startup
# -----------------------

@app.on_event("startup")
def startup():
    global engine, repo, load_error
    logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())

    config = SearchConfig(
        top_k=int(os.getenv("TOP_K", "5")),
        min_score=float(os.getenv("MIN_SCORE", "0.95")),
        metric=os.getenv("SIMILARITY_METRIC", "jaro_winkler"),
    )

    try:
        repo = build_repository()
    except DataLoadError as exc:
        # "no cargó" != "cargó vacío": sin engine, /search responde 503
        engine, repo, load_error = None, None, str(exc)
        return

    load_error = None
    engine = SearchEngine(repo=repo, config=config)
    logger.info("SearchEngine listo: %d records, config=%s", len(engine.records), config)


def _require_engine() -> SearchEngine:
    if engine is None:
        raise HTTPException(status_code=503, detail=f"Dataset no disponible: {load_error}")
    return engine


@app.get("/health")
def health():
    if engine is None:
        return {"status": "unavailable", "detail": load_error}
    return {"status": "ok", "records": len(engine.records)}


@app.get("/metrics")
def get_metrics():
    snap = metrics.snapshot(topk=10)
    snap["repo"] = repo.stats() if repo is not None else {}
    return snap


@app.get("/samples", response_model=List[SampleOut])
def get_samples():
    _require_engine()
    return [{"name": s.name, "year": s.year} for s in repo.dataset.samples]


# -----------------------
# Presentación de un match
# -----------------------

def render_hit(m: ScoredMatch, query_text: str, businesses: Dict[str, Business], explain: bool) -> Dict[str, Any]:
    rec = m.record

    hit: Dict[str, Any] = rec.to_dict()
    hit["match_score"] = m.score
    hit["match_percent"] = round(m.score * 100)
    hit["highlighted_name"] = [
        {"word": w, "match": is_match} for w, is_match in highlight(rec.full_name, query_text)
    ]
    hit["business_affiliations"] = [
        {
            "name": aff.name,
            "role": aff.role,
            "category": businesses[aff.name].category if aff.name in businesses else None,
        }
        for aff in rec.business_affiliations
    ]
    if explain:
        hit["name_score"] = m.name_score
        hit["year_score"] = m.year_score
    return hit


# -----------------------
# Core search (shared)
# -----------------------

def run_search(name: str, year: Optional[Union[int, str]], explain: bool) -> Dict[str, Any]:
    eng = _require_engine()

    query = Query.from_raw(name, year)
    metrics.inc_request(normalize(query.text))
    if query.is_blank():
        return {"results": []}

    t0 = time.perf_counter()
    matches, candidate_count = eng.search_explain(query)
    latency_ms = (time.perf_counter() - t0) * 1000.0
    metrics.add_search_stats(latency_ms=latency_ms, result_count=len(matches))
    logger.debug(
        "search %r year=%s: %d/%d matches en %.2f ms",
        query.text, query.year, len(matches), candidate_count, latency_ms,
    )

    businesses = repo.dataset.business_by_name()
    return {"results": [render_hit(m, query.text, businesses, explain) for m in matches]}


@app.post("/search", response_model=SearchResponse, response_model_exclude_none=True)
def search_post(payload: SearchRequest):
    return run_search(name=payload.name, year=payload.year, explain=payload.explain)


@app.get("/search", response_model=SearchResponse, response_model_exclude_none=True)
def search_get(name: str = "", year: Optional[str] = None, explain: bool = False):
    return run_search(name=name, year=year, explain=explain)
