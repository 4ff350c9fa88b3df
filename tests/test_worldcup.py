"""
Unit tests for the World Cup fixtures document and its fallback.
"""
import asyncio

from futbolai.adapters.base import AdapterErrorKind
from futbolai.worldcup import FixturesDocument, WorldCupService, generate_fallback_fixtures

from fakes import FakeAIAdapter


AI_FIXTURES = {
    "groups": [{
        "groupName": "Group A",
        "teams": [
            {"name": "Mexico", "code": "MEX"},
            {"name": "South Africa", "code": "RSA"},
        ],
    }],
    "matches": [{
        "id": "A1",
        "group": "Group A",
        "homeTeam": "Mexico",
        "awayTeam": "South Africa",
        "date": "2026-06-11",
        "venue": "Estadio Azteca",
        "city": "Mexico City",
    }],
    "qualifiedTeams": ["Mexico", "South Africa"],
}


def get_fixtures(ai_adapter):
    return asyncio.run(WorldCupService(ai_adapter=ai_adapter, seed=7).get_fixtures())


class TestFallbackFixtures:

    def test_same_seed_same_document(self):
        assert generate_fallback_fixtures(42) == generate_fallback_fixtures(42)

    def test_different_seed_changes_scores(self):
        a = [(m.home_score, m.away_score) for m in generate_fallback_fixtures(1).matches]
        b = [(m.home_score, m.away_score) for m in generate_fallback_fixtures(2).matches]
        assert a != b

    def test_shape(self):
        document = generate_fallback_fixtures()

        assert document.source == "fallback"
        assert len(document.groups) == 6
        assert all(len(group.teams) == 4 for group in document.groups)
        assert len(document.matches) == 36
        assert len(document.qualified_teams) == 24
        assert {m.status for m in document.matches} == {"simulated"}

    def test_standings_match_scores(self):
        document = generate_fallback_fixtures()

        for group in document.groups:
            points = [row.group_points for row in group.teams]
            assert points == sorted(points, reverse=True)
            for row in group.teams:
                assert row.played == 3
                assert row.won + row.drawn + row.lost == 3
                assert row.group_points == 3 * row.won + row.drawn
            assert sum(row.goal_difference for row in group.teams) == 0

    def test_wire_aliases(self):
        wire = generate_fallback_fixtures().to_wire()

        assert "lastUpdated" in wire
        assert "groupName" in wire["groups"][0]
        assert "groupPoints" in wire["groups"][0]["teams"][0]
        assert "homeTeam" in wire["matches"][0]
        assert wire["hostCities"][0]["stadium"]


class TestWorldCupService:

    def test_no_adapter_uses_fallback(self):
        document, from_fallback = get_fixtures(None)
        assert from_fallback is True
        assert document == generate_fallback_fixtures(7)

    def test_unavailable_adapter_uses_fallback(self):
        _, from_fallback = get_fixtures(FakeAIAdapter(fixtures=AI_FIXTURES, available=False))
        assert from_fallback is True

    def test_failed_call_uses_fallback(self):
        ai = FakeAIAdapter(error=AdapterErrorKind.UNAVAILABLE)
        document, from_fallback = get_fixtures(ai)
        assert from_fallback is True
        assert document.source == "fallback"

    def test_invalid_document_uses_fallback(self):
        _, from_fallback = get_fixtures(FakeAIAdapter(fixtures={"groups": []}))
        assert from_fallback is True

    def test_valid_ai_document(self):
        document, from_fallback = get_fixtures(FakeAIAdapter(fixtures=AI_FIXTURES))

        assert from_fallback is False
        assert isinstance(document, FixturesDocument)
        assert document.source == "ai"
        assert document.groups[0].group_name == "Group A"
        assert document.matches[0].home_score is None
        assert document.tournament.hosts == ["United States", "Canada", "Mexico"]
