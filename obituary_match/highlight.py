# obituary_match/highlight.py
from __future__ import annotations

from typing import List, Tuple

from .matching import normalize, tokenize, tokens_overlap


def highlight(name: str, query_text: str) -> List[Tuple[str, bool]]:
    """
    Marca qué palabras del nombre corresponden a tokens de la query.
    Las palabras se devuelven tal cual (sin normalizar) y en orden; el
    predicado es el mismo del overlap de tokens en scoring.name_score.
    """
    query_tokens = tokenize(query_text)
    out: List[Tuple[str, bool]] = []
    for word in name.split():
        norm_word = normalize(word)
        out.append((word, any(tokens_overlap(norm_word, qt) for qt in query_tokens)))
    return out
