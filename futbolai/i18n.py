"""
Static translation table for the supported response languages.

Message keys use dotted paths ("search.emptyQuery"). Lookups fall back to
English and then to the key itself, so a missing translation never breaks
a response.
"""

import copy
import logging
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "en"
SUPPORTED_LANGUAGES = ("en", "es")


MESSAGES: Dict[str, Dict[str, str]] = {
    "en": {
        "app.title": "FutbolAI Explorer",
        "app.subtitle": "AI-powered football intelligence with detailed stats, achievements, and video highlights",
        "search.placeholder": "Search players, teams, matches...",
        "search.button": "Search",
        "search.searching": "Searching...",
        "search.analyzing": "Analyzing football data...",
        "search.emptyQuery": "Please enter a search term",
        "search.error": "Search Error",
        "search.unavailable": (
            "We couldn't load details for \"{query}\" right now. Our football data "
            "sources did not respond, so no statistics are shown. Please try again "
            "in a moment, or search for a specific player, team, or World Cup edition."
        ),
        "search.failed": (
            "Something went wrong while searching for \"{query}\". Please try again "
            "shortly. In the meantime, enjoy some World Cup highlights."
        ),
        "analysis.player": (
            " {name} is one of the players football fans search for most. The profile "
            "above combines career statistics with an AI-written summary, and the "
            "highlight video shows {name} in action."
        ),
        "analysis.team": (
            " {name} has a long history in the game. The profile above brings together "
            "official club data and an AI-written summary, and the highlight video "
            "covers recent matches involving {name}."
        ),
        "analysis.tournament": (
            " The FIFA World Cup is the biggest event in international football. The "
            "summary above covers hosts, venues and qualified teams, and the highlight "
            "video revisits memorable moments of {name}."
        ),
        "analysis.general": (
            " Football questions like \"{name}\" often touch on players, teams and "
            "tournaments. Try searching for a specific player, team or World Cup "
            "edition for detailed statistics and highlights."
        ),
        "labels.aiAnalysis": "AI Analysis",
        "labels.detailedStats": "Detailed Stats",
        "labels.achievements": "Achievements",
        "labels.videoHighlights": "Video Highlights",
        "labels.unknown": "Unknown",
        "worldcup.title": "World Cup 2026",
        "worldcup.loaded": "Group stage fixtures loaded",
        "worldcup.fallback": "Showing generated group stage fixtures",
        "verify.notFound": "Team not found",
        "verify.missingTeam": "Missing team parameter",
        "cache.cleared": "Cache cleared",
        "language.english": "English",
        "language.spanish": "Spanish",
    },
    "es": {
        "app.title": "FutbolAI Explorer",
        "app.subtitle": "Inteligencia de fútbol con IA con estadísticas detalladas, logros y vídeos destacados",
        "search.placeholder": "Buscar jugadores, equipos, partidos...",
        "search.button": "Buscar",
        "search.searching": "Buscando...",
        "search.analyzing": "Analizando datos de fútbol...",
        "search.emptyQuery": "Por favor, introduce un término de búsqueda",
        "search.error": "Error de Búsqueda",
        "search.unavailable": (
            "No pudimos cargar los detalles de \"{query}\" en este momento. Nuestras "
            "fuentes de datos de fútbol no respondieron, así que no se muestran "
            "estadísticas. Inténtalo de nuevo en unos instantes o busca un jugador, "
            "un equipo o una edición del Mundial."
        ),
        "search.failed": (
            "Algo salió mal al buscar \"{query}\". Inténtalo de nuevo en breve. "
            "Mientras tanto, disfruta de algunos momentos destacados del Mundial."
        ),
        "analysis.player": (
            " {name} es uno de los jugadores más buscados por los aficionados. El perfil "
            "de arriba combina estadísticas de su carrera con un resumen escrito por IA, "
            "y el vídeo muestra a {name} en acción."
        ),
        "analysis.team": (
            " {name} tiene una larga historia en el fútbol. El perfil de arriba reúne "
            "datos oficiales del club y un resumen escrito por IA, y el vídeo recoge "
            "partidos recientes de {name}."
        ),
        "analysis.tournament": (
            " La Copa Mundial de la FIFA es el mayor evento del fútbol internacional. El "
            "resumen de arriba cubre sedes, estadios y selecciones clasificadas, y el "
            "vídeo repasa momentos memorables de {name}."
        ),
        "analysis.general": (
            " Preguntas como \"{name}\" suelen tratar de jugadores, equipos y torneos. "
            "Busca un jugador, un equipo o una edición del Mundial para ver "
            "estadísticas detalladas y vídeos destacados."
        ),
        "labels.aiAnalysis": "Análisis IA",
        "labels.detailedStats": "Estadísticas",
        "labels.achievements": "Logros",
        "labels.videoHighlights": "Vídeos Destacados",
        "labels.unknown": "Desconocido",
        "worldcup.title": "Copa del Mundo 2026",
        "worldcup.loaded": "Partidos de la fase de grupos cargados",
        "worldcup.fallback": "Mostrando partidos generados de la fase de grupos",
        "verify.notFound": "Equipo no encontrado",
        "verify.missingTeam": "Falta el parámetro del equipo",
        "cache.cleared": "Caché borrada",
        "language.english": "Inglés",
        "language.spanish": "Español",
    },
}

# Entity display strings: team and country names, positions
TERM_TRANSLATIONS: Dict[str, Dict[str, str]] = {
    "es": {
        "Bayern Munich": "Bayern de Múnich",
        "Inter Milan": "Inter de Milán",
        "France": "Francia",
        "Brazil": "Brasil",
        "England": "Inglaterra",
        "Germany": "Alemania",
        "Spain": "España",
        "Italy": "Italia",
        "Netherlands": "Países Bajos",
        "Belgium": "Bélgica",
        "Croatia": "Croacia",
        "Morocco": "Marruecos",
        "Mexico": "México",
        "Canada": "Canadá",
        "Japan": "Japón",
        "South Korea": "Corea del Sur",
        "United States": "Estados Unidos",
        "Saudi Arabia": "Arabia Saudita",
        "Egypt": "Egipto",
        "Goalkeeper": "Portero",
        "Defender": "Defensa",
        "Midfielder": "Centrocampista",
        "Forward": "Delantero",
        "Striker": "Delantero centro",
        "Winger": "Extremo",
        "Center Back": "Defensa central",
        "Full Back": "Lateral",
        "Central Midfielder": "Mediocentro",
        "Attacking Midfielder": "Mediocentro ofensivo",
        "Defensive Midfielder": "Mediocentro defensivo",
        "Unknown": "Desconocido",
    },
}

# Substrings replaced inside achievement titles
ACHIEVEMENT_TRANSLATIONS: Dict[str, Dict[str, str]] = {
    "es": {
        "UEFA Champions League": "Liga de Campeones de la UEFA",
        "UEFA Europa League": "Liga Europa de la UEFA",
        "FIFA Club World Cup": "Mundial de Clubes de la FIFA",
        "FIFA World Cup": "Copa Mundial de la FIFA",
        "UEFA European Championship": "Eurocopa",
        "Ballon d'Or": "Balón de Oro",
    },
}

# Wire fields of entity dicts holding translatable display strings
TRANSLATABLE_FIELDS = ("name", "country", "nationality", "currentClub", "position", "host")
TRANSLATABLE_LIST_FIELDS = ("qualifiedTeams",)


def resolve_language(language: Optional[str]) -> str:
    """Supported language code for a request, defaulting to English."""
    code = (language or DEFAULT_LANGUAGE).strip().lower()[:2]
    return code if code in SUPPORTED_LANGUAGES else DEFAULT_LANGUAGE


def translate(key: str, language: str = DEFAULT_LANGUAGE, **params: Any) -> str:
    """
    Look up a message and interpolate {param} placeholders.

    Falls back to English, then to the key itself.
    """
    text = MESSAGES.get(language, {}).get(key)
    if text is None:
        text = MESSAGES[DEFAULT_LANGUAGE].get(key, key)
    if params:
        try:
            text = text.format(**params)
        except (KeyError, IndexError) as e:
            logger.warning(f"Missing parameter {e} for message '{key}'")
    return text


def translate_term(term: Optional[str], language: str) -> Optional[str]:
    """Translate one entity display string; unknown terms pass through."""
    if not term or language == DEFAULT_LANGUAGE:
        return term
    return TERM_TRANSLATIONS.get(language, {}).get(term, term)


def translate_achievement(title: str, language: str) -> str:
    for source, target in ACHIEVEMENT_TRANSLATIONS.get(language, {}).items():
        if source in title:
            title = title.replace(source, target)
    return title


def translate_record(info: Optional[Dict[str, Any]], language: str) -> Optional[Dict[str, Any]]:
    """
    Localize the display strings of a wire entity dict.

    Returns a new dict; the input is left untouched.
    """
    if not info or language == DEFAULT_LANGUAGE:
        return info

    translated = copy.deepcopy(info)
    for key in TRANSLATABLE_FIELDS:
        if isinstance(translated.get(key), str):
            translated[key] = translate_term(translated[key], language)
    for key in TRANSLATABLE_LIST_FIELDS:
        if isinstance(translated.get(key), list):
            translated[key] = [translate_term(v, language) for v in translated[key]]
    if isinstance(translated.get("achievements"), list):
        translated["achievements"] = [
            translate_achievement(a, language) for a in translated["achievements"]
        ]
    return translated


def get_messages(language: str) -> Dict[str, str]:
    """Full message table for a language, English keys filled in."""
    merged = dict(MESSAGES[DEFAULT_LANGUAGE])
    merged.update(MESSAGES.get(language, {}))
    return merged
