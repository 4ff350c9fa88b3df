"""
Tests: health, version, cache and i18n endpoints
"""
from fastapi.testclient import TestClient
from futbolai.main import app

client = TestClient(app)


def test_health_endpoint_returns_200():
    """Test that /health returns HTTP 200"""
    response = client.get("/health")
    assert response.status_code == 200


def test_health_endpoint_returns_ok_status():
    """Test that /health returns status: ok"""
    response = client.get("/health")
    data = response.json()
    assert data["status"] == "ok"
    assert set(data["providers"]) == {"ai", "stats", "video"}


def test_version_endpoint():
    """Test that /version reports the app name"""
    data = client.get("/version").json()
    assert data["name"] == "FutbolAI"
    assert data["version"].startswith("v")


def test_cache_stats_endpoint():
    """Test that /cache/stats exposes hit/miss counters"""
    data = client.get("/cache/stats").json()
    assert "hits" in data
    assert "misses" in data
    assert "coalescer" in data


def test_clear_cache_endpoint():
    """Test that /clear-cache empties the process cache"""
    response = client.get("/clear-cache")
    assert response.status_code == 200
    assert response.json()["success"] is True
    assert client.get("/cache/stats").json()["entries"] == 0


def test_i18n_spanish_messages():
    """Test that /i18n/es returns the Spanish table"""
    data = client.get("/i18n/es").json()
    assert data["language"] == "es"
    assert data["messages"]["search.button"] == "Buscar"


def test_i18n_unsupported_language_404():
    """Test that unsupported languages are rejected"""
    response = client.get("/i18n/xx")
    assert response.status_code == 404
