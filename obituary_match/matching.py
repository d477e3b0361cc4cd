# obituary_match/matching.py
from __future__ import annotations

import re
from typing import Callable, Dict, List

from rapidfuzz import fuzz
from rapidfuzz.distance import Levenshtein

# -------------------------
# Normalización
# -------------------------
# letras/dígitos ASCII: "José" -> "jos"
NON_WORD = re.compile(r"[^A-Za-z0-9_\s]")
MULTISPACE = re.compile(r"\s+")


def normalize(text: str) -> str:
    """
    Normalización para matching (query + nombres del dataset):
      - lower
      - strip
      - elimina todo lo que no sea letra/dígito/_ o espacio
      - colapsa espacios

    El strip va ANTES de eliminar puntuación: "smith ." queda "smith ".
    """
    s = (text or "").lower().strip()
    s = NON_WORD.sub("", s)
    return MULTISPACE.sub(" ", s)


def tokenize(text: str) -> List[str]:
    """Tokens no vacíos de normalize(text), en orden y con duplicados."""
    return [t for t in normalize(text).split(" ") if t]


def tokens_overlap(a: str, b: str) -> bool:
    """
    Predicado de contención bidireccional entre dos tokens.
    Se usa igual en el scoring y en el highlight.
    """
    if not a or not b:
        return False
    return a in b or b in a


# -------------------------
# Similaridad (Jaro-Winkler)
# -------------------------
WINKLER_PREFIX_MAX = 4
WINKLER_SCALE = 0.1


def jaro_winkler(a: str, b: str) -> float:
    """
    Jaro-Winkler en [0, 1].

    Ventana de matching: max(len)//2 - 1. Matching greedy de izquierda a
    derecha; cada posición de `b` se consume a lo sumo una vez.
    """
    m, n = len(a), len(b)
    if m == 0 or n == 0:
        return 0.0
    if a == b:
        return 1.0

    window = max(m, n) // 2 - 1
    a_matched = [False] * m
    b_matched = [False] * n
    matches = 0

    for i in range(m):
        start = max(0, i - window)
        end = min(i + window + 1, n)
        for j in range(start, end):
            if b_matched[j] or a[i] != b[j]:
                continue
            a_matched[i] = b_matched[j] = True
            matches += 1
            break

    if matches == 0:
        return 0.0

    transpositions = 0
    k = 0
    for i in range(m):
        if not a_matched[i]:
            continue
        while not b_matched[k]:
            k += 1
        if a[i] != b[k]:
            transpositions += 1
        k += 1

    jaro = (matches / m + matches / n + (matches - transpositions / 2) / matches) / 3

    prefix = 0
    for i in range(min(WINKLER_PREFIX_MAX, m, n)):
        if a[i] != b[i]:
            break
        prefix += 1

    return jaro + prefix * WINKLER_SCALE * (1 - jaro)


# Nombre genérico: el Scorer depende de "una similaridad", no de JW
similarity = jaro_winkler


# -------------------------
# Métricas intercambiables
# -------------------------
SimilarityMetric = Callable[[str, str], float]


def levenshtein_similarity(a: str, b: str) -> float:
    if not a or not b:
        return 0.0
    return float(Levenshtein.normalized_similarity(a, b))


def indel_similarity(a: str, b: str) -> float:
    if not a or not b:
        return 0.0
    return float(fuzz.ratio(a, b)) / 100.0


SIMILARITY_METRICS: Dict[str, SimilarityMetric] = {
    "jaro_winkler": jaro_winkler,
    "levenshtein": levenshtein_similarity,
    "indel": indel_similarity,
}


def get_metric(name: str) -> SimilarityMetric:
    key = (name or "").strip().lower()
    try:
        return SIMILARITY_METRICS[key]
    except KeyError:
        raise ValueError(
            f"Métrica desconocida: {name!r}. Opciones: {sorted(SIMILARITY_METRICS)}"
        ) from None
