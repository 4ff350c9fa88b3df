"""
Unit tests for query normalization and classification.
"""
import asyncio

import pytest

from futbolai.adapters.base import AdapterErrorKind
from futbolai.search.classifier import QueryClassifier, DEFAULT_LLM_CONFIDENCE
from futbolai.search.models.query import QueryType
from futbolai.search.normalizer import (
    expand_abbreviations,
    extract_year,
    normalize,
    normalize_query,
    strip_diacritics,
)
from futbolai.search.patterns import FUZZY_THRESHOLD, match_rules, similarity

from fakes import FakeAIAdapter


def classify(text, ai_adapter=None):
    return asyncio.run(QueryClassifier(ai_adapter=ai_adapter).classify(text))


# =============================================================================
# Normalization
# =============================================================================

class TestNormalizer:

    def test_strip_diacritics(self):
        assert strip_diacritics("Mbappé") == "Mbappe"
        assert strip_diacritics("Müller") == "Muller"

    def test_normalize_collapses_and_casefolds(self):
        assert normalize("  Kylian   MBAPPÉ!! ") == "kylian mbappe"

    def test_normalize_keeps_hyphens_and_apostrophes(self):
        assert normalize("Son Heung-min") == "son heung-min"
        assert normalize("N'Golo Kanté") == "n'golo kante"

    def test_diacritic_equivalence(self):
        assert normalize_query("Kylian Mbappe") == normalize_query("Kylian Mbappé")

    def test_expand_abbreviations(self):
        assert expand_abbreviations("man u") == "manchester united"
        assert expand_abbreviations("barca news") == "barcelona news"
        assert expand_abbreviations("copa del mundo 2030") == "world cup 2030"

    def test_extract_year(self):
        assert extract_year("world cup 2026") == 2026
        assert extract_year("world cup 1930 final") == 1930
        assert extract_year("real madrid") is None
        assert extract_year("asdkjasdkj123") is None


# =============================================================================
# Rule-based fast path
# =============================================================================

class TestRules:

    def test_tournament_keyword_wins_over_country(self):
        query_type, confidence, rule = match_rules("brazil world cup")
        assert query_type == QueryType.TOURNAMENT
        assert confidence == 0.95
        assert rule == "tournament_keyword:world cup"

    def test_club_before_country(self):
        query_type, confidence, _ = match_rules("real madrid")
        assert query_type == QueryType.TEAM
        assert confidence == 0.95

    def test_country(self):
        query_type, confidence, _ = match_rules("uruguay")
        assert query_type == QueryType.TEAM
        assert confidence == 0.90

    def test_player(self):
        query_type, confidence, _ = match_rules("luis suarez")
        assert query_type == QueryType.PLAYER
        assert confidence == 0.85

    def test_whole_word_only(self):
        # "roma" must not match inside "romance"
        assert match_rules("romance") is None

    def test_fuzzy_team(self):
        query_type, confidence, rule = match_rules("real madird")
        assert query_type == QueryType.TEAM
        assert confidence == 0.75
        assert rule == "fuzzy_team:real madrid"

    def test_fuzzy_country(self):
        assert match_rules("argentna") == (QueryType.TEAM, 0.75, "fuzzy_team:argentina")

    def test_similarity_blend(self):
        assert similarity("real madrid", "real madrid") == 1.0
        assert similarity("real madird", "real madrid") >= FUZZY_THRESHOLD
        assert similarity("asdkjasdkj123", "real madrid") < 0.5

    def test_no_match(self):
        assert match_rules("asdkjasdkj123") is None


# =============================================================================
# Classifier
# =============================================================================

class TestQueryClassifier:

    def test_real_madrid_is_team(self):
        query = classify("Real Madrid")
        assert query.query_type == QueryType.TEAM
        assert query.used_llm is False

    def test_world_cup_2026(self):
        query = classify("World Cup 2026")
        assert query.query_type == QueryType.TOURNAMENT
        assert query.query_type.wire_type == "worldCup"
        assert query.year == 2026

    def test_spanish_tournament_keyword(self):
        assert classify("Mundial 2030").query_type == QueryType.TOURNAMENT

    def test_diacritic_variants_classify_identically(self):
        a = classify("Kylian Mbappe")
        b = classify("Kylian Mbappé")
        assert a.query_type == b.query_type == QueryType.PLAYER
        assert a.normalized_text == b.normalized_text

    def test_no_ai_adapter_yields_unknown(self):
        query = classify("asdkjasdkj123")
        assert query.query_type == QueryType.GENERAL
        assert query.confidence == 0.0
        assert query.is_unknown

    def test_llm_fallback_uses_reported_confidence(self):
        ai = FakeAIAdapter(classification={"type": "player", "confidence": 0.8})
        query = classify("the egyptian king", ai)
        assert query.query_type == QueryType.PLAYER
        assert query.confidence == 0.8
        assert query.used_llm is True
        assert query.matched_rule == "llm"

    def test_llm_fallback_default_confidence(self):
        ai = FakeAIAdapter(classification={"type": "team", "confidence": None})
        query = classify("the red devils", ai)
        assert query.query_type == QueryType.TEAM
        assert query.confidence == DEFAULT_LLM_CONFIDENCE

    def test_llm_failure_yields_general_zero(self):
        ai = FakeAIAdapter(classification=None)
        query = classify("asdkjasdkj123", ai)
        assert query.query_type == QueryType.GENERAL
        assert query.confidence == 0.0

    def test_unavailable_adapter_is_not_called(self):
        ai = FakeAIAdapter(classification={"type": "player"}, available=False)
        query = classify("asdkjasdkj123", ai)
        assert query.is_unknown

    @pytest.mark.parametrize("text", ["Real Madrid", "World Cup 2026", "Lionel Messi"])
    def test_classification_is_idempotent(self, text):
        assert classify(text) == classify(text)
