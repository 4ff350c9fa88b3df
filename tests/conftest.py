"""
Shared fixtures: services wired with in-memory adapters.
"""
import pytest

from futbolai.cache import CacheManager
from futbolai.search.classifier import QueryClassifier
from futbolai.search.pipeline import SearchService
from futbolai.search.reconciler import ResultReconciler

from fakes import FakeAIAdapter, FakeStatsAdapter, FakeVideoAdapter


@pytest.fixture
def ai_adapter():
    return FakeAIAdapter()


@pytest.fixture
def stats_adapter():
    return FakeStatsAdapter()


@pytest.fixture
def video_adapter():
    return FakeVideoAdapter()


@pytest.fixture
def reconciler(ai_adapter, stats_adapter, video_adapter):
    return ResultReconciler(ai_adapter, stats_adapter, video_adapter, min_analysis_length=160)


@pytest.fixture
def cache():
    return CacheManager(coalesce_timeout=5.0)


@pytest.fixture
def search_service(ai_adapter, reconciler, cache):
    return SearchService(
        classifier=QueryClassifier(ai_adapter=ai_adapter),
        reconciler=reconciler,
        cache=cache,
    )
