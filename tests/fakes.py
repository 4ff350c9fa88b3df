"""
In-memory test doubles for the adapters and the LLM provider.
"""
import asyncio
from typing import Any, Dict, List, Optional

from futbolai.adapters.ai import AIEntityResponse
from futbolai.adapters.base import AdapterErrorKind, AdapterResult, DataAdapter, SourceTag
from futbolai.adapters.llm.base import LLMProvider
from futbolai.errors import AdapterUnavailable
from futbolai.search.models.query import QueryType
from futbolai.search.models.results import VideoReference

LONG_ANALYSIS = (
    "Real Madrid are the most successful club in the history of European "
    "competition, with a record number of European Cups. Their home is the "
    "Santiago Bernabeu and their academy keeps producing first-team players."
)


class FakeAIAdapter(DataAdapter):
    """AI adapter returning canned responses."""

    def __init__(
        self,
        response: Optional[Dict[str, Any]] = None,
        error: Optional[AdapterErrorKind] = None,
        classification: Optional[Dict[str, Any]] = None,
        fixtures: Optional[Dict[str, Any]] = None,
        available: bool = True,
        delay: float = 0.0,
    ):
        self.response = response if response is not None else {"analysis": LONG_ANALYSIS}
        self.error = error
        self.classification = classification
        self.fixtures_payload = fixtures
        self.available = available
        self.delay = delay
        self.calls: List[Dict[str, Any]] = []

    @property
    def source_name(self) -> str:
        return SourceTag.AI.value

    @property
    def is_available(self) -> bool:
        return self.available

    async def fetch(self, term: str, **options: Any) -> AdapterResult:
        self.calls.append({"term": term, **options})
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            return AdapterResult.failure(self.source_name, self.error, "fake failure")
        return AdapterResult.success(self.source_name, AIEntityResponse.model_validate(self.response))

    async def classify(self, term: str) -> AdapterResult:
        if self.classification is None:
            return AdapterResult.failure(self.source_name, AdapterErrorKind.UNAVAILABLE, "no classifier")
        payload = dict(self.classification)
        payload["type"] = QueryType(payload["type"])
        return AdapterResult.success(self.source_name, payload)

    async def fixtures(self) -> AdapterResult:
        if self.fixtures_payload is None:
            return AdapterResult.failure(self.source_name, AdapterErrorKind.UNAVAILABLE, "no fixtures")
        return AdapterResult.success(self.source_name, self.fixtures_payload)


class FakeStatsAdapter(DataAdapter):
    """Stats adapter returning canonical team values."""

    def __init__(
        self,
        values: Optional[Dict[str, Any]] = None,
        error: Optional[AdapterErrorKind] = None,
    ):
        self.values = values or {}
        self.error = error
        self.calls: List[str] = []

    @property
    def source_name(self) -> str:
        return SourceTag.STATS.value

    @property
    def is_available(self) -> bool:
        return True

    async def fetch(self, term: str, **options: Any) -> AdapterResult:
        self.calls.append(term)
        if self.error:
            return AdapterResult.failure(self.source_name, self.error, "fake failure")
        return AdapterResult.success(self.source_name, dict(self.values))


class FakeVideoAdapter(DataAdapter):
    """Video adapter returning a fixed video id."""

    def __init__(self, video_id: str = "abc123XYZ", error: Optional[AdapterErrorKind] = None):
        self.video_id = video_id
        self.error = error
        self.calls: List[str] = []

    @property
    def source_name(self) -> str:
        return SourceTag.VIDEO.value

    @property
    def is_available(self) -> bool:
        return True

    async def fetch(self, term: str, **options: Any) -> AdapterResult:
        self.calls.append(term)
        if self.error:
            return AdapterResult.failure(self.source_name, self.error, "fake failure")
        return AdapterResult.success(
            self.source_name,
            VideoReference(
                url=f"https://www.youtube.com/embed/{self.video_id}",
                video_id=self.video_id,
                source=SourceTag.VIDEO.value,
                search_phrase=term,
            ),
        )


class RaisingAdapter(FakeVideoAdapter):
    """Adapter that breaks its contract by raising."""

    async def fetch(self, term: str, **options: Any) -> AdapterResult:
        raise RuntimeError("boom")


class FakeLLMProvider(LLMProvider):
    """LLM provider replaying canned completions."""

    def __init__(self, replies: Optional[List[str]] = None, error: Optional[Exception] = None, delay: float = 0.0):
        self.replies = list(replies or [])
        self.error = error
        self.delay = delay
        self.prompts: List[str] = []

    async def complete(self, prompt: str, max_tokens: int) -> str:
        self.prompts.append(prompt)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        if not self.replies:
            raise AdapterUnavailable("no more replies")
        return self.replies.pop(0)

    @property
    def provider_name(self) -> str:
        return "fake"

    @property
    def is_available(self) -> bool:
        return True
