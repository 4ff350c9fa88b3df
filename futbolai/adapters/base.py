"""Typed results shared by every external data provider adapter."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class AdapterErrorKind(str, Enum):
    """Why an adapter call produced no payload."""
    MALFORMED = "malformed"
    UNAVAILABLE = "unavailable"
    NOT_FOUND = "not_found"


class SourceTag(str, Enum):
    """Source attribution tags for merged fields."""
    AI = "ai"
    STATS = "stats-api"
    CACHE = "cache"
    FALLBACK = "fallback"
    RULES = "rules"
    VIDEO = "video-api"


@dataclass
class AdapterError:
    """Failure description carried inside an AdapterResult."""
    kind: AdapterErrorKind
    source: str
    message: str = ""

    def to_dict(self) -> dict:
        return {"source": self.source, "kind": self.kind.value, "message": self.message}


@dataclass
class AdapterResult:
    """
    Either a payload or an AdapterError, never both.

    Adapters return this instead of raising so a single provider failure
    can never escape into the reconciler.
    """
    source: str
    payload: Any = None
    error: Optional[AdapterError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, source: str, payload: Any) -> "AdapterResult":
        return cls(source=source, payload=payload)

    @classmethod
    def failure(
        cls,
        source: str,
        kind: AdapterErrorKind,
        message: str = "",
    ) -> "AdapterResult":
        return cls(source=source, error=AdapterError(kind=kind, source=source, message=message))


class DataAdapter(ABC):
    """Abstract base class for adapters wrapping one external provider."""

    @property
    @abstractmethod
    def source_name(self) -> str:
        """Return the attribution tag for payloads from this adapter."""
        pass

    @property
    @abstractmethod
    def is_available(self) -> bool:
        """Check if the provider is configured."""
        pass

    @abstractmethod
    async def fetch(self, term: str, **options: Any) -> AdapterResult:
        """
        Fetch a payload for a search term.

        Must never raise: every failure is returned as an AdapterResult
        carrying an AdapterError.
        """
        pass
