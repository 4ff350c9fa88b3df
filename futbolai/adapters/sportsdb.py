"""
TheSportsDB stats adapter.

Looks up official team fields (coach, stadium, league, founding year)
and honours through the v1 JSON API. These fields take precedence over
AI-generated ones when results are merged.
"""

import asyncio
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

import httpx
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)

from futbolai.errors import AdapterMalformed, AdapterUnavailable
from futbolai.search.field_map import SPORTSDB_TEAM_FIELDS, map_fields
from futbolai.search.normalizer import normalize
from .base import AdapterErrorKind, AdapterResult, DataAdapter, SourceTag
from .honours import classify_honours

logger = logging.getLogger(__name__)


class SportsDbNotFound(Exception):
    """Raised when the provider has no team for the search term."""
    pass


class SportsDbAdapter(DataAdapter):
    """
    Adapter for TheSportsDB team search and honours lookup.

    The httpx client is injectable so tests can pass one built on
    httpx.MockTransport.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: str = "https://www.thesportsdb.com/api/v1/json",
        timeout: float = 8.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            follow_redirects=True,
        )

    @property
    def source_name(self) -> str:
        return SourceTag.STATS.value

    @property
    def is_available(self) -> bool:
        return bool(self.api_key)

    def _url(self, endpoint: str) -> str:
        return f"{self.base_url}/{self.api_key}/{endpoint}"

    @retry(
        stop=stop_after_attempt(2),
        wait=wait_exponential(multiplier=0.5, min=0.5, max=2),
        retry=retry_if_exception_type(httpx.TransportError),
        reraise=True,
    )
    async def _get(self, endpoint: str, params: Dict[str, Any]) -> Dict[str, Any]:
        """GET an endpoint and decode its JSON body."""
        response = await self.client.get(self._url(endpoint), params=params)
        response.raise_for_status()
        try:
            data = response.json()
        except ValueError as e:
            raise AdapterMalformed(f"Invalid JSON from TheSportsDB: {e}")
        if not isinstance(data, dict):
            raise AdapterMalformed("TheSportsDB response is not a JSON object")
        return data

    async def search_teams(self, name: str) -> List[Dict[str, Any]]:
        """Raw team records for a name (searchteams.php)."""
        data = await self._get("searchteams.php", {"t": name})
        teams = data.get("teams") or []
        if not isinstance(teams, list):
            raise AdapterMalformed("TheSportsDB 'teams' is not a list")
        return [t for t in teams if isinstance(t, dict)]

    async def lookup_honours(self, team_id: str) -> List[str]:
        """Honour titles for a team id (lookuphonours.php)."""
        data = await self._get("lookuphonours.php", {"id": team_id})
        honours = data.get("honours") or []
        if not isinstance(honours, list):
            return []
        return [h.get("strHonour") for h in honours if isinstance(h, dict) and h.get("strHonour")]

    @staticmethod
    def best_match(term: str, teams: List[Dict[str, Any]]) -> Dict[str, Any]:
        """Exact normalized-name match, else the first result."""
        target = normalize(term)
        for team in teams:
            names = [team.get("strTeam"), team.get("strTeamShort")]
            alternates = team.get("strTeamAlternate") or ""
            names.extend(part.strip() for part in alternates.split(","))
            if any(name and normalize(name) == target for name in names):
                return team
        return teams[0]

    async def _honours_best_effort(self, team_id: Optional[str]) -> Optional[List[str]]:
        if not team_id:
            return None
        try:
            return await self.lookup_honours(team_id)
        except (httpx.HTTPError, AdapterMalformed) as e:
            logger.info(f"Honours lookup failed for team {team_id}: {e}")
            return None

    async def _lookup(self, term: str) -> Dict[str, Any]:
        teams = await self.search_teams(term)
        if not teams:
            raise SportsDbNotFound(term)

        team = self.best_match(term, teams)
        values, used = map_fields(team, SPORTSDB_TEAM_FIELDS)
        logger.debug(f"TheSportsDB fields for '{term}': {used}")

        # National teams are filed under FIFA leagues or their country's name
        league = (team.get("strLeague") or "").lower()
        country = team.get("strCountry") or ""
        is_national = league.startswith("fifa") or (
            bool(country) and normalize(country) == normalize(values.get("name") or "")
        )
        values["team_type"] = "national" if is_national else "club"

        titles = await self._honours_best_effort(team.get("idTeam"))
        if titles is not None:
            values["trophies"] = classify_honours(titles)
            values["total_honours"] = len(titles)

        return values

    async def fetch(self, term: str, **options: Any) -> AdapterResult:
        """
        Look up canonical team fields for a search term.

        Returns:
            AdapterResult with a dict of canonical TeamRecord field values
        """
        if not self.is_available:
            return AdapterResult.failure(
                self.source_name, AdapterErrorKind.UNAVAILABLE, "TheSportsDB key not configured"
            )

        try:
            values = await asyncio.wait_for(self._lookup(term), timeout=self.timeout)
        except SportsDbNotFound:
            return AdapterResult.failure(
                self.source_name, AdapterErrorKind.NOT_FOUND, f"No team found for '{term}'"
            )
        except asyncio.TimeoutError:
            logger.warning(f"TheSportsDB timed out for '{term}'")
            return AdapterResult.failure(
                self.source_name, AdapterErrorKind.UNAVAILABLE, f"Timed out after {self.timeout}s"
            )
        except AdapterMalformed as e:
            logger.warning(f"TheSportsDB malformed response for '{term}': {e}")
            return AdapterResult.failure(self.source_name, AdapterErrorKind.MALFORMED, str(e))
        except (httpx.HTTPError, AdapterUnavailable) as e:
            logger.warning(f"TheSportsDB request failed for '{term}': {e}")
            return AdapterResult.failure(self.source_name, AdapterErrorKind.UNAVAILABLE, str(e))

        return AdapterResult.success(self.source_name, values)

    async def verify(self, team: str) -> Dict[str, Any]:
        """
        Verification document for the /verify endpoint.

        Returns {"verified": False, "error": ...} instead of raising.
        """
        result = await self.fetch(team)
        if not result.ok:
            message = {
                AdapterErrorKind.NOT_FOUND: "Team not found",
                AdapterErrorKind.MALFORMED: "Search failed",
                AdapterErrorKind.UNAVAILABLE: "Verification failed",
            }[result.error.kind]
            return {"verified": False, "error": message}

        values = result.payload
        trophies = values.get("trophies") or classify_honours([])
        return {
            "verified": True,
            "team": {
                "name": values.get("name"),
                "coach": values.get("coach"),
                "stadium": values.get("stadium"),
                "founded": values.get("founded"),
                "league": values.get("league"),
                "country": values.get("country"),
            },
            "trophies": trophies,
            "totalHonors": values.get("total_honours") or 0,
            "verificationDate": datetime.utcnow().isoformat() + "Z",
        }

    async def aclose(self) -> None:
        await self.client.aclose()
