"""Query classification for search queries."""

import logging
from typing import Optional

from .models.query import Query, QueryType
from .normalizer import normalize_query, extract_year
from .patterns import match_rules

logger = logging.getLogger(__name__)

# Confidence used when the AI classifier omits one
DEFAULT_LLM_CONFIDENCE = 0.5


class QueryClassifier:
    """
    Classifies search queries into player / team / tournament / general.

    Uses rule-based matching against curated name tables first and only
    delegates to the AI adapter when no rule matches. Never raises for
    provider problems: an unreachable or confused AI yields GENERAL with
    zero confidence.
    """

    def __init__(self, ai_adapter=None):
        """
        Initialize the classifier.

        Args:
            ai_adapter: Optional AIAdapter used for the fallback path.
        """
        self.ai_adapter = ai_adapter

    async def classify(self, raw_text: str) -> Query:
        """
        Classify a search query.

        Args:
            raw_text: Non-empty user text (blank input is rejected upstream)

        Returns:
            Query with a type that is always one of the four QueryType values
        """
        normalized = normalize_query(raw_text)
        year = extract_year(normalized)

        # Step 1: Rule-based fast path
        matched = match_rules(normalized)
        if matched:
            query_type, confidence, rule = matched
            logger.debug(f"Rule match for '{normalized}': {rule}")
            return Query(
                raw_text=raw_text,
                normalized_text=normalized,
                query_type=query_type,
                confidence=confidence,
                matched_rule=rule,
                year=year,
            )

        # Step 2: AI fallback
        return await self._llm_classify(raw_text, normalized, year)

    async def _llm_classify(
        self,
        raw_text: str,
        normalized: str,
        year: Optional[int],
    ) -> Query:
        """Delegate classification to the AI adapter."""
        unknown = Query(
            raw_text=raw_text,
            normalized_text=normalized,
            query_type=QueryType.GENERAL,
            confidence=0.0,
            used_llm=self.ai_adapter is not None,
            year=year,
        )

        if self.ai_adapter is None or not self.ai_adapter.is_available:
            return unknown

        try:
            result = await self.ai_adapter.classify(normalized)
        except Exception as e:
            logger.warning(f"AI classification raised for '{normalized}': {e}")
            return unknown

        if not result.ok:
            logger.info(
                f"AI classification failed for '{normalized}': "
                f"{result.error.kind.value} {result.error.message}"
            )
            return unknown

        payload = result.payload or {}
        query_type = payload.get("type")
        if not isinstance(query_type, QueryType):
            return unknown

        confidence = payload.get("confidence")
        if confidence is None:
            confidence = DEFAULT_LLM_CONFIDENCE

        return Query(
            raw_text=raw_text,
            normalized_text=normalized,
            query_type=query_type,
            confidence=max(0.0, min(float(confidence), 1.0)),
            used_llm=True,
            matched_rule="llm",
            year=year,
        )
