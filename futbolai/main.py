"""
FutbolAI - Main FastAPI Application
Football search with AI summaries, official team data and highlight videos
"""
import logging
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from config.settings import settings
from futbolai import __version__
from futbolai.adapters.ai import AIAdapter
from futbolai.adapters.llm import get_llm_provider
from futbolai.adapters.sportsdb import SportsDbAdapter
from futbolai.cache import CacheManager, get_cache_manager
from futbolai.errors import InvalidQuery
from futbolai.i18n import SUPPORTED_LANGUAGES, get_messages, resolve_language, translate
from futbolai.search.formatter import error_envelope
from futbolai.search.pipeline import SearchService, get_search_service
from futbolai.worldcup import WorldCupService

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("futbolai")

# Version tracking
APP_VERSION = f"v{__version__}"
APP_NAME = "FutbolAI"

app = FastAPI(
    title=APP_NAME,
    description="Football search: AI summaries, official team data and highlight videos",
    version=APP_VERSION,
)


# ===== DEPENDENCIES =====

_worldcup_service: Optional[WorldCupService] = None
_stats_adapter: Optional[SportsDbAdapter] = None


def get_worldcup_service() -> WorldCupService:
    """Get or create the fixtures service."""
    global _worldcup_service
    if _worldcup_service is None:
        ai_adapter = AIAdapter(
            provider=get_llm_provider(),
            timeout=settings.adapter_timeout_seconds,
            classify_timeout=settings.classifier_timeout_seconds,
            max_tokens=settings.anthropic_max_tokens,
        )
        _worldcup_service = WorldCupService(ai_adapter=ai_adapter, seed=settings.fallback_fixtures_seed)
    return _worldcup_service


def get_stats_adapter() -> SportsDbAdapter:
    """Get or create the TheSportsDB adapter used by /verify."""
    global _stats_adapter
    if _stats_adapter is None:
        _stats_adapter = SportsDbAdapter(
            api_key=settings.sportsdb_api_key,
            base_url=settings.sportsdb_base_url,
            timeout=settings.adapter_timeout_seconds,
        )
    return _stats_adapter


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Log server-side, return a generic body."""
    logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": "Internal server error"},
    )


# ===== META =====

@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {
        "status": "ok",
        "providers": {
            "ai": bool(settings.anthropic_api_key),
            "stats": bool(settings.sportsdb_api_key),
            "video": bool(settings.youtube_api_key),
        },
    }


@app.get("/version")
def version_info():
    """Version information endpoint."""
    return {
        "name": APP_NAME,
        "version": APP_VERSION,
        "full": f"{APP_NAME} {APP_VERSION}",
    }


@app.get("/cache/stats")
def cache_stats(cache: CacheManager = Depends(get_cache_manager)):
    """Get cache statistics."""
    return cache.get_stats()


@app.get("/clear-cache")
def clear_cache(cache: CacheManager = Depends(get_cache_manager)):
    """Drop every cached search result and video reference."""
    cleared = cache.clear()
    return {
        "success": True,
        "cleared": cleared,
        "message": translate("cache.cleared", "en"),
    }


@app.get("/i18n/{language}")
def i18n_messages(language: str):
    """Message table for the UI."""
    code = language.strip().lower()
    if code not in SUPPORTED_LANGUAGES:
        raise HTTPException(status_code=404, detail=f"Unsupported language '{language}'")
    return {"language": code, "messages": get_messages(code)}


# ===== SEARCH =====

class SearchRequest(BaseModel):
    """Request body for search endpoint."""
    query: Optional[str] = None
    language: Optional[str] = "en"
    refresh: bool = False


async def _run_search(
    service: SearchService,
    query: Optional[str],
    language: Optional[str],
    refresh: bool,
):
    """Shared body of the GET and POST search endpoints."""
    lang = resolve_language(language)
    try:
        envelope = await service.search(query, language=lang, bust_cache=refresh)
    except InvalidQuery as e:
        return JSONResponse(
            status_code=400,
            content={"success": False, "error": str(e)},
        )
    except Exception as e:
        logger.error(f"Search error for '{query}': {e}", exc_info=True)
        envelope = error_envelope(query or "", lang, "search.failed", error="Search failed")

    return envelope.to_dict()


@app.get("/search")
async def search_get(
    query: Optional[str] = Query(None, description="Search text"),
    language: Optional[str] = Query("en", description="Response language (en, es)"),
    refresh: bool = Query(False, description="Bypass cached results"),
    service: SearchService = Depends(get_search_service),
):
    """
    Football search.

    Example: /search?query=Real%20Madrid&language=es

    Returns the search envelope: type, exactly one of playerInfo /
    teamInfo / worldCupInfo on success, analysis, videoUrl, confidence.
    """
    return await _run_search(service, query, language, refresh)


@app.post("/search")
async def search_post(
    request: SearchRequest,
    service: SearchService = Depends(get_search_service),
):
    """POST version of the search endpoint."""
    return await _run_search(service, request.query, request.language, request.refresh)


# ===== WORLD CUP =====

@app.get("/worldcup")
async def worldcup_fixtures(service: WorldCupService = Depends(get_worldcup_service)):
    """2026 World Cup group stage document."""
    document, from_fallback = await service.get_fixtures()
    return {
        "success": True,
        "data": document.to_wire(),
        "message": translate("worldcup.fallback" if from_fallback else "worldcup.loaded", "en"),
    }


# ===== VERIFY =====

@app.get("/verify")
async def verify_team(
    team: Optional[str] = Query(None, description="Team name"),
    adapter: SportsDbAdapter = Depends(get_stats_adapter),
):
    """
    Verify a team against TheSportsDB.

    Not found and provider failures return 200 with verified=false.
    """
    if not team or not team.strip():
        return JSONResponse(
            status_code=400,
            content={"verified": False, "error": translate("verify.missingTeam", "en")},
        )
    logger.info(f"Verifying team: {team}")
    return await adapter.verify(team.strip())
