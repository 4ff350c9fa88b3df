"""Query logging for search review and improvement.

Logs low-confidence, degraded and failed queries as JSON lines.
Controlled by the SEARCH_LOGGING setting.
"""

import hashlib
import json
import logging
import threading
from dataclasses import dataclass, asdict
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from config.settings import settings

logger = logging.getLogger(__name__)

LOG_FILENAME = "search_queries.jsonl"

# Only queries below this confidence are logged when nothing else went wrong
LOW_CONFIDENCE_THRESHOLD = 0.7

# Lock for thread-safe writing
_log_lock = threading.Lock()


@dataclass
class QueryLog:
    """Log entry for a search query."""
    timestamp: str
    query_hash: str  # SHA256 of normalized query for privacy
    query_type: Optional[str]
    confidence: float
    used_llm: bool
    language: str
    degraded_sources: List[str]
    from_cache: bool
    error_type: Optional[str]
    latency_ms: int


def _hash_query(query: str) -> str:
    """Hash query for privacy-preserving logging."""
    return hashlib.sha256(query.lower().strip().encode()).hexdigest()[:16]


def _log_file(log_dir: Optional[Path] = None) -> Path:
    return Path(log_dir or settings.log_directory) / LOG_FILENAME


def log_query(
    query: str,
    query_type: Optional[str],
    confidence: float,
    used_llm: bool,
    language: str,
    degraded_sources: List[str],
    from_cache: bool,
    error_type: Optional[str],
    latency_ms: int,
    enabled: Optional[bool] = None,
    log_dir: Optional[Path] = None,
) -> bool:
    """
    Log a search query for review.

    Only logs if search logging is enabled and one of:
    - confidence < 0.7
    - some adapter degraded
    - error_type is not None

    Returns:
        True if an entry was written
    """
    if not (settings.search_logging if enabled is None else enabled):
        return False

    should_log = (
        confidence < LOW_CONFIDENCE_THRESHOLD or
        bool(degraded_sources) or
        error_type is not None
    )

    if not should_log:
        return False

    entry = QueryLog(
        timestamp=datetime.utcnow().isoformat() + "Z",
        query_hash=_hash_query(query),
        query_type=query_type,
        confidence=confidence,
        used_llm=used_llm,
        language=language,
        degraded_sources=list(degraded_sources),
        from_cache=from_cache,
        error_type=error_type,
        latency_ms=latency_ms,
    )

    return _write_log(entry, _log_file(log_dir))


def _write_log(entry: QueryLog, log_file: Path) -> bool:
    """Write log entry to file."""
    with _log_lock:
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            with open(log_file, "a", encoding="utf-8") as f:
                f.write(json.dumps(asdict(entry)) + "\n")
        except OSError as e:
            logger.warning(f"Could not write search log {log_file}: {e}")
            return False
    return True


def get_recent_logs(limit: int = 100, log_dir: Optional[Path] = None) -> List[dict]:
    """Read recent log entries for review."""
    log_file = _log_file(log_dir)
    if not log_file.exists():
        return []

    entries = []
    with open(log_file, "r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            try:
                entries.append(json.loads(line))
            except json.JSONDecodeError:
                logger.warning(f"Skipping corrupt search log line in {log_file}")

    return entries[-limit:]
