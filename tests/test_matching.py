"""
Tests de normalización, tokenización y similaridad.
"""

import pytest

from obituary_match.matching import (
    get_metric,
    indel_similarity,
    jaro_winkler,
    levenshtein_similarity,
    normalize,
    similarity,
    tokenize,
    tokens_overlap,
)


class TestNormalize:

    def test_lowercases_and_strips_punctuation(self):
        assert normalize("  Hello, World!  ") == "hello world"

    def test_collapses_whitespace(self):
        assert normalize("a \t  b\n c") == "a b c"

    def test_strip_runs_before_punctuation_removal(self):
        # el punto final deja un espacio colgando
        assert normalize("Smith .") == "smith "

    def test_empty_and_none(self):
        assert normalize("") == ""
        assert normalize(None) == ""

    def test_keeps_digits_and_underscore(self):
        assert normalize("Lot_42-B") == "lot_42b"

    def test_non_ascii_letters_are_dropped(self):
        assert normalize("José Müller") == "jos mller"
        assert tokens_overlap(normalize("José"), normalize("Jose"))

    def test_unicode_whitespace_still_collapses(self):
        assert normalize("John\u00a0 Smith") == "john smith"


class TestTokenize:

    def test_splits_and_drops_punctuation(self):
        assert tokenize("O'Brien,  John (Jack)") == ["obrien", "john", "jack"]

    def test_preserves_duplicates_and_order(self):
        assert tokenize("Smith john SMITH") == ["smith", "john", "smith"]

    def test_punctuation_only_gives_no_tokens(self):
        assert tokenize("  ...  ") == []

    def test_trailing_punctuation_gives_no_empty_token(self):
        assert tokenize("Smith .") == ["smith"]

    def test_returns_reusable_list(self):
        tokens = tokenize("al capone")
        assert list(tokens) == list(tokens)


class TestTokensOverlap:

    def test_bidirectional_containment(self):
        assert tokens_overlap("al", "alphonse")
        assert tokens_overlap("alphonse", "al")

    def test_no_containment(self):
        assert not tokens_overlap("jon", "john")

    def test_empty_never_matches(self):
        assert not tokens_overlap("", "smith")
        assert not tokens_overlap("smith", "")


class TestJaroWinkler:

    def test_identical_is_one(self):
        for s in ["a", "john smith", "x y z", "Capone"]:
            assert jaro_winkler(s, s) == 1.0

    def test_empty_is_zero(self):
        assert jaro_winkler("", "abc") == 0.0
        assert jaro_winkler("abc", "") == 0.0
        assert jaro_winkler("", "") == 0.0

    def test_classic_pairs(self):
        assert jaro_winkler("martha", "marhta") == pytest.approx(0.9611, abs=1e-4)
        assert jaro_winkler("dwayne", "duane") == pytest.approx(0.84, abs=1e-4)

    def test_jon_vs_john_smith(self):
        assert jaro_winkler("jon smith", "john smith") == pytest.approx(0.97333, abs=1e-4)

    def test_single_chars_never_match(self):
        # ventana = 1//2 - 1 = -1
        assert jaro_winkler("a", "b") == 0.0

    def test_no_common_chars(self):
        assert jaro_winkler("abc", "xyz") == 0.0

    def test_bounded_and_deterministic(self):
        pairs = [("smith", "smyth"), ("capone", "al capone"), ("ab", "ba"), ("o neill", "oneill")]
        for a, b in pairs:
            score = jaro_winkler(a, b)
            assert 0.0 <= score <= 1.0
            assert jaro_winkler(a, b) == score

    def test_generic_alias(self):
        assert similarity is jaro_winkler


class TestMetrics:

    def test_default_metric(self):
        assert get_metric("jaro_winkler") is jaro_winkler
        assert get_metric(" Jaro_Winkler ") is jaro_winkler

    def test_unknown_metric(self):
        with pytest.raises(ValueError):
            get_metric("soundex")

    def test_levenshtein(self):
        assert levenshtein_similarity("kitten", "sitting") == pytest.approx(1 - 3 / 7)
        assert levenshtein_similarity("", "x") == 0.0

    def test_indel(self):
        assert indel_similarity("abc", "abc") == 1.0
        assert indel_similarity("", "abc") == 0.0
        assert 0.0 <= indel_similarity("smith", "smyth") <= 1.0
