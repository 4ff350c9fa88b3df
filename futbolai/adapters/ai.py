"""
AI text-generation adapter.

Builds type-specific prompts, sends them through an LLMProvider and
validates the JSON that comes back. Every failure is returned as a typed
AdapterResult; nothing raised by the provider leaves this module.
"""

import asyncio
import json
import logging
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from futbolai.errors import AdapterMalformed, AdapterUnavailable
from futbolai.search.models.query import QueryType
from .base import AdapterErrorKind, AdapterResult, DataAdapter, SourceTag
from .llm.base import LLMProvider

logger = logging.getLogger(__name__)


# ============================================================================
# Prompt Templates
# ============================================================================

LANGUAGE_NAMES = {
    "en": "English",
    "es": "Spanish",
}

ENTITY_PROMPT_HEADER = """You are a football (soccer) expert writing for a search results page.

QUERY: "{term}"
{year_hint}
Write every text value in {language_name}. Keep JSON keys in English.
Return ONLY valid JSON. No markdown, no commentary.
"""

PLAYER_PROMPT = ENTITY_PROMPT_HEADER + """
The query is about a PLAYER. Fill "playerInfo" only and leave the other sections null.

{{
  "playerInfo": {{
    "name": "Full Name",
    "position": "Position",
    "nationality": "Nationality",
    "currentClub": "Current Club",
    "age": 0,
    "stats": {{"goals": 0, "assists": 0, "appearances": 0}},
    "marketValue": "Value",
    "achievements": ["Achievement1", "Achievement2"]
  }},
  "teamInfo": null,
  "worldCupInfo": null,
  "analysis": "Two or three paragraphs about the player's career and style",
  "videoSearchTerm": "Search term for highlight videos",
  "confidenceScore": 0.9
}}"""

TEAM_PROMPT = ENTITY_PROMPT_HEADER + """
The query is about a TEAM (a club or a national team). Fill "teamInfo" only and leave the other sections null.

{{
  "playerInfo": null,
  "teamInfo": {{
    "name": "Team Name",
    "type": "club or national",
    "country": "Country",
    "ranking": "Ranking",
    "coach": "Coach",
    "stadium": "Stadium",
    "league": "League",
    "founded": 1900,
    "achievements": ["Achievement1", "Achievement2"],
    "keyPlayers": ["Player1", "Player2"]
  }},
  "worldCupInfo": null,
  "analysis": "Two or three paragraphs about the team's history and current form",
  "videoSearchTerm": "Search term for highlight videos",
  "confidenceScore": 0.9
}}"""

TOURNAMENT_PROMPT = ENTITY_PROMPT_HEADER + """
The query is about a FIFA WORLD CUP edition. Fill "worldCupInfo" only and leave the other sections null.

{{
  "playerInfo": null,
  "teamInfo": null,
  "worldCupInfo": {{
    "year": {year_value},
    "host": "Host Countries",
    "details": "Format, dates and notable facts",
    "qualifiedTeams": ["Team1", "Team2"],
    "venues": ["Venue1", "Venue2"]
  }},
  "analysis": "Two or three paragraphs about the tournament",
  "videoSearchTerm": "Search term for highlight videos",
  "confidenceScore": 0.9
}}"""

GENERAL_PROMPT = ENTITY_PROMPT_HEADER + """
The query is a general football question. Leave every entity section null and answer in "analysis".

{{
  "playerInfo": null,
  "teamInfo": null,
  "worldCupInfo": null,
  "analysis": "A helpful answer of at least two paragraphs",
  "videoSearchTerm": "Search term for related videos",
  "confidenceScore": 0.7
}}"""

PROMPTS = {
    QueryType.PLAYER: PLAYER_PROMPT,
    QueryType.TEAM: TEAM_PROMPT,
    QueryType.TOURNAMENT: TOURNAMENT_PROMPT,
    QueryType.GENERAL: GENERAL_PROMPT,
}

CLASSIFY_PROMPT = """Classify this football search query into exactly ONE category.

QUERY: "{term}"

Categories:
- player: an individual footballer
- team: a club or a national team
- tournament: the FIFA World Cup or one of its editions
- general: anything else

Respond with ONLY a JSON object:
{{"type": "<player|team|tournament|general>", "confidence": <0.0-1.0>}}"""

FIXTURES_PROMPT = """Generate the group stage of the 2026 FIFA World Cup (USA, Canada, Mexico).

Return ONLY valid JSON with this structure:
{{
  "tournament": {{"name": "2026 FIFA World Cup", "dates": "June 11 - July 19, 2026",
                  "hosts": ["United States", "Canada", "Mexico"],
                  "teams": 48, "groups": 12, "matches": 104}},
  "groups": [{{"groupName": "Group A", "teams": [{{"name": "Team", "code": "ABC",
               "groupPoints": 0, "goalDifference": 0, "played": 0,
               "won": 0, "drawn": 0, "lost": 0}}]}}],
  "matches": [{{"id": "A1", "group": "Group A", "homeTeam": "Team", "awayTeam": "Team",
                "date": "2026-06-11", "venue": "Stadium", "city": "City",
                "homeScore": null, "awayScore": null, "status": "scheduled"}}],
  "qualifiedTeams": ["Team1", "Team2"],
  "hostCities": [{{"city": "City", "stadium": "Stadium", "country": "Country"}}]
}}"""


# ============================================================================
# Response Schemas
# ============================================================================

def clamp_confidence(value: Any) -> Any:
    """Read percentages (95) as fractions and clamp numbers into 0..1."""
    if isinstance(value, str):
        try:
            value = float(value)
        except ValueError:
            return value
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return value
    if value > 1:
        value = value / 100
    return min(max(float(value), 0.0), 1.0)


class AIEntityResponse(BaseModel):
    """Validated shape of an entity prompt response."""
    player_info: Optional[Dict[str, Any]] = Field(None, alias="playerInfo")
    team_info: Optional[Dict[str, Any]] = Field(None, alias="teamInfo")
    world_cup_info: Optional[Dict[str, Any]] = Field(None, alias="worldCupInfo")
    analysis: str = ""
    video_search_term: Optional[str] = Field(None, alias="videoSearchTerm")
    confidence_score: Optional[float] = Field(None, alias="confidenceScore", ge=0.0, le=1.0)

    class Config:
        populate_by_name = True
        extra = "ignore"

    @field_validator("confidence_score", mode="before")
    @classmethod
    def clamp_confidence_score(cls, value: Any) -> Any:
        return clamp_confidence(value)

    def populated_fields(self) -> Dict[str, Dict[str, Any]]:
        """Entity sections that carry at least one value, keyed by wire name."""
        sections = {
            "playerInfo": self.player_info,
            "teamInfo": self.team_info,
            "worldCupInfo": self.world_cup_info,
        }
        return {name: data for name, data in sections.items() if data}


class AIClassification(BaseModel):
    """Validated shape of a classification response."""
    type: str
    confidence: Optional[float] = Field(None, ge=0.0, le=1.0)

    class Config:
        extra = "ignore"

    @field_validator("confidence", mode="before")
    @classmethod
    def clamp_score(cls, value: Any) -> Any:
        return clamp_confidence(value)


# ============================================================================
# Adapter
# ============================================================================

def parse_json_response(response_text: str) -> Any:
    """
    Parse JSON from an LLM response.

    Handles markdown code fences and prose around the object.

    Raises:
        AdapterMalformed: If no JSON object can be decoded.
    """
    text = (response_text or "").strip()

    # Remove markdown code blocks if present
    if text.startswith("```"):
        lines = text.split("\n")[1:]
        if lines and lines[-1].strip() == "```":
            lines = lines[:-1]
        text = "\n".join(lines).strip()

    # Trim anything before the first brace or after the last one
    start, end = text.find("{"), text.rfind("}")
    if start != -1 and end > start:
        text = text[start:end + 1]

    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        logger.debug(f"Response was: {response_text[:500]}")
        raise AdapterMalformed(f"Invalid JSON from AI provider: {e}")


class AIAdapter(DataAdapter):
    """
    Adapter over an LLMProvider for entity summaries, classification and
    World Cup fixtures.
    """

    def __init__(
        self,
        provider: LLMProvider,
        timeout: float = 8.0,
        classify_timeout: float = 5.0,
        max_tokens: int = 1500,
    ):
        self.provider = provider
        self.timeout = timeout
        self.classify_timeout = classify_timeout
        self.max_tokens = max_tokens

    @property
    def source_name(self) -> str:
        return SourceTag.AI.value

    @property
    def is_available(self) -> bool:
        return self.provider.is_available

    def build_prompt(
        self,
        term: str,
        query_type: QueryType,
        language: str = "en",
        year: Optional[int] = None,
    ) -> str:
        """Render the prompt template for a query type."""
        template = PROMPTS.get(query_type, GENERAL_PROMPT)
        return template.format(
            term=term,
            year_hint=f"YEAR: {year}\n" if year else "",
            year_value=year or 2026,
            language_name=LANGUAGE_NAMES.get(language, "English"),
        )

    async def _complete(self, prompt: str, timeout: float, max_tokens: int) -> Any:
        """Call the provider under a timeout and decode the JSON reply."""
        try:
            text = await asyncio.wait_for(
                self.provider.complete(prompt, max_tokens),
                timeout=timeout,
            )
        except asyncio.TimeoutError:
            raise AdapterUnavailable(f"AI provider timed out after {timeout}s")
        except AdapterUnavailable:
            raise
        except Exception as e:
            logger.error(f"Unexpected error calling {self.provider.provider_name}: {e}")
            raise AdapterUnavailable(f"AI provider error: {e}")
        return parse_json_response(text)

    async def fetch(self, term: str, **options: Any) -> AdapterResult:
        """
        Generate an entity summary for a search term.

        Options:
            query_type: QueryType selecting the prompt template
            language: Response language code
            year: Optional tournament year

        Returns:
            AdapterResult with an AIEntityResponse payload
        """
        query_type = options.get("query_type", QueryType.GENERAL)
        prompt = self.build_prompt(
            term,
            query_type,
            language=options.get("language", "en"),
            year=options.get("year"),
        )

        try:
            data = await self._complete(prompt, self.timeout, self.max_tokens)
            if not isinstance(data, dict):
                raise AdapterMalformed("AI response is not a JSON object")
            response = AIEntityResponse.model_validate(data)
        except AdapterUnavailable as e:
            logger.warning(f"AI adapter unavailable for '{term}': {e}")
            return AdapterResult.failure(self.source_name, AdapterErrorKind.UNAVAILABLE, str(e))
        except (AdapterMalformed, ValidationError) as e:
            logger.warning(f"AI adapter returned malformed data for '{term}': {e}")
            return AdapterResult.failure(self.source_name, AdapterErrorKind.MALFORMED, str(e))

        return AdapterResult.success(self.source_name, response)

    async def classify(self, term: str) -> AdapterResult:
        """
        Ask the provider for exactly one query category.

        Returns:
            AdapterResult with {"type": QueryType, "confidence": float | None}
        """
        prompt = CLASSIFY_PROMPT.format(term=term)

        try:
            data = await self._complete(prompt, self.classify_timeout, 64)
            if not isinstance(data, dict):
                raise AdapterMalformed("Classification is not a JSON object")
            parsed = AIClassification.model_validate(data)
            query_type = QueryType(parsed.type.strip().lower())
        except AdapterUnavailable as e:
            return AdapterResult.failure(self.source_name, AdapterErrorKind.UNAVAILABLE, str(e))
        except (AdapterMalformed, ValidationError, ValueError) as e:
            return AdapterResult.failure(self.source_name, AdapterErrorKind.MALFORMED, str(e))

        return AdapterResult.success(
            self.source_name,
            {"type": query_type, "confidence": parsed.confidence},
        )

    async def fixtures(self) -> AdapterResult:
        """
        Ask the provider for the 2026 group stage document.

        The payload is the decoded dict; shape validation happens in
        the fixtures service.
        """
        try:
            data = await self._complete(FIXTURES_PROMPT.format(), self.timeout * 2, 4000)
            if not isinstance(data, dict):
                raise AdapterMalformed("Fixtures response is not a JSON object")
        except AdapterUnavailable as e:
            return AdapterResult.failure(self.source_name, AdapterErrorKind.UNAVAILABLE, str(e))
        except AdapterMalformed as e:
            return AdapterResult.failure(self.source_name, AdapterErrorKind.MALFORMED, str(e))

        return AdapterResult.success(self.source_name, data)
