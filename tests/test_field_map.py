"""
Unit tests for field mapping, precedence merging and honours bucketing.
"""
from futbolai.adapters.honours import TROPHY_CATEGORIES, classify_honour, classify_honours
from futbolai.search.field_map import (
    PLAYER_FIELDS,
    SPORTSDB_TEAM_FIELDS,
    TEAM_FIELDS,
    TOURNAMENT_FIELDS,
    map_fields,
    merge_by_precedence,
)
from futbolai.search.models.records import (
    PlayerRecord,
    PlayerStats,
    TeamRecord,
    record_from_fields,
    wire_key,
)


class TestMapFields:

    def test_lowest_priority_number_wins(self):
        values, used = map_fields(
            {"manager": "Manager Name", "coach": "Coach Name"},
            TEAM_FIELDS,
        )
        assert values["coach"] == "Coach Name"
        assert used["coach"] == "coach"

    def test_falls_through_unusable_values(self):
        values, used = map_fields(
            {"coach": "N/A", "currentCoach": None, "manager": "Carlo Ancelotti"},
            TEAM_FIELDS,
        )
        assert values["coach"] == "Carlo Ancelotti"
        assert used["coach"] == "manager"

    def test_coercions(self):
        values, _ = map_fields(
            {
                "name": "Lionel Messi",
                "age": "37 years",
                "stats": {"goals": 850, "assists": "380", "appearances": None},
                "majorAchievements": "World Cup, Copa America",
            },
            PLAYER_FIELDS,
        )
        assert values["age"] == 37
        assert values["stats"] == {"goals": 850, "assists": 380, "appearances": None}
        assert values["achievements"] == ["World Cup", "Copa America"]

    def test_host_list_joined(self):
        values, _ = map_fields(
            {"year": 2026, "host": ["United States", "Canada", "Mexico"]},
            TOURNAMENT_FIELDS,
        )
        assert values["year"] == 2026
        assert values["host"] == "United States, Canada, Mexico"

    def test_sportsdb_team(self):
        values, _ = map_fields(
            {
                "strTeam": "Real Madrid",
                "strManager": "",
                "strCoach": "Carlo Ancelotti",
                "intFormedYear": "1902",
                "strStadium": "Santiago Bernabeu",
            },
            SPORTSDB_TEAM_FIELDS,
        )
        assert values == {
            "name": "Real Madrid",
            "coach": "Carlo Ancelotti",
            "founded": 1902,
            "stadium": "Santiago Bernabeu",
        }

    def test_non_dict_payload(self):
        assert map_fields(None, TEAM_FIELDS) == ({}, {})


class TestMergeByPrecedence:

    def test_stats_beats_ai_per_field(self):
        merged, attribution = merge_by_precedence([
            ("stats-api", {"coach": "A"}),
            ("ai", {"coach": "B", "ranking": "1st"}),
        ])
        assert merged == {"coach": "A", "ranking": "1st"}
        assert attribution == {"coach": "stats-api", "ranking": "ai"}

    def test_empty_values_do_not_win(self):
        merged, attribution = merge_by_precedence([
            ("stats-api", {"achievements": [], "trophies": {}, "coach": None}),
            ("ai", {"achievements": ["La Liga"], "coach": "B"}),
        ])
        assert merged["achievements"] == ["La Liga"]
        assert attribution["coach"] == "ai"
        assert "trophies" not in merged


class TestRecords:

    def test_record_from_fields_ignores_unknown_keys(self):
        record = record_from_fields("teamInfo", {"name": "Arsenal", "bogus": 1})
        assert record == TeamRecord(name="Arsenal")

    def test_player_stats_converted(self):
        record = record_from_fields("playerInfo", {"stats": {"goals": 10}})
        assert isinstance(record, PlayerRecord)
        assert record.stats == PlayerStats(goals=10)

    def test_wire_key(self):
        assert wire_key("current_club") == "currentClub"
        assert wire_key("total_honours") == "totalHonours"
        assert wire_key("name") == "name"


class TestHonours:

    def test_buckets(self):
        assert classify_honour("UEFA Champions League") == "championsLeague"
        assert classify_honour("European Cup") == "championsLeague"
        assert classify_honour("FIFA Club World Cup") == "clubWorldCup"
        assert classify_honour("Intercontinental Cup") == "clubWorldCup"
        assert classify_honour("Spanish La Liga") == "domesticLeague"
        assert classify_honour("Copa del Rey") == "domesticCup"

    def test_world_cup_is_not_a_domestic_cup(self):
        assert classify_honour("FIFA World Cup") is None

    def test_unmatched_and_empty(self):
        assert classify_honour("Trofeo Santiago Bernabeu") is None
        assert classify_honour(None) is None

    def test_first_matching_bucket_only(self):
        counts = classify_honours(["FIFA Club World Cup"])
        assert counts["clubWorldCup"] == 1
        assert counts["domesticCup"] == 0

    def test_counts_all_buckets(self):
        counts = classify_honours([
            "UEFA Champions League",
            "UEFA Champions League",
            "FA Cup",
            "Premier League",
            "Community Shield",
        ])
        assert set(counts) == set(TROPHY_CATEGORIES)
        assert counts == {
            "clubWorldCup": 0,
            "championsLeague": 2,
            "domesticLeague": 1,
            "domesticCup": 1,
        }

    def test_pure(self):
        titles = ["Copa del Rey", "La Liga"]
        assert classify_honours(titles) == classify_honours(list(titles))
