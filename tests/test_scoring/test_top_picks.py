"""Tests for the pick-based top-K leaderboard."""

from unittest.mock import patch

import pytest
from tests.conftest import make_category, make_snapshot, positions, standing_names

from picks.config import Config
from picks.scoring import ResultsUnavailable
from picks.scoring.top_picks import TopPicksLeaderboard


class TestTopPicksLeaderboard:
    def setup_method(self):
        self.leaderboard = TopPicksLeaderboard()

    def test_order(self, top_round):
        result = self.leaderboard.compute(top_round)
        assert standing_names(result) == ["u1", "u3", "u2"]
        assert positions(result) == {"u1": 1, "u3": 2, "u2": 3}

    def test_keys(self, top_round):
        result = self.leaderboard.compute(top_round)
        keys = {s.id: s.keys for s in result.standings}
        assert keys["u1"] == {"success_count": 2, "rank_sum": 4, "preference_points": 37}
        assert keys["u2"] == {"success_count": 2, "rank_sum": 12, "preference_points": 30}
        assert keys["u3"] == {"success_count": 2, "rank_sum": 6, "preference_points": 35}

    def test_successful_picks_sorted_by_rank(self, top_round):
        result = self.leaderboard.compute(top_round)
        u2 = next(s for s in result.standings if s.id == "u2")
        assert u2.details["successful_picks"] == [
            {"name": "M1", "rank": 2, "points": 29},
            {"name": "M4", "rank": 10, "points": 1},
        ]

    def test_unfinalized_users_are_left_out(self, top_round):
        result = self.leaderboard.compute(top_round)
        assert "u4" not in standing_names(result)
        assert result.details["total_users"] == 3

    def test_details(self, top_round):
        with patch.object(Config, "ENTRY_FEE", 35):
            result = self.leaderboard.compute(top_round)
        assert result.variant == "top-picks"
        assert result.details["answer_count"] == 4
        assert result.details["prize_pool"] == 105
        preferences = result.details["preferences"]
        assert [row["id"] for row in preferences] == ["M1", "M2", "M3", "M5", "M4"]
        assert preferences[0]["points"] == 29

    def test_excluded_users(self, top_round):
        leaderboard = TopPicksLeaderboard(excluded_users={"u1"})
        with patch.object(Config, "ENTRY_FEE", 35):
            result = leaderboard.compute(top_round)
        assert standing_names(result) == ["u3", "u2"]
        assert result.details["prize_pool"] == 70
        # u1's picks no longer count towards preference points either
        assert result.details["preferences"][0] == {
            "id": "M1", "name": "M1", "position": 1, "tied": False,
            "points": 19, "frequency": 2, "best_rank": 1,
        }

    def test_less_popular_pick_breaks_tie(self):
        """Same count and rank sum: the user whose hit fewer others backed wins.

        A: u1 at 1 (10), u3 at 2 (9) -> 19 points
        B: u2 at 1 (10) -> 10 points
        """
        top = make_category("top", "ABCDEFGHIJ", 10, answers="AB")
        snapshot = make_snapshot(
            {
                "u1": {None: {"A": 1}},
                "u2": {None: {"B": 1}},
                "u3": {None: {"A": 2}},
            },
            top_list=top,
        )
        result = self.leaderboard.compute(snapshot)
        assert standing_names(result) == ["u2", "u1", "u3"]
        assert positions(result) == {"u2": 1, "u1": 2, "u3": 3}

    def test_identical_picks_share_position(self):
        top = make_category("top", "ABCDEFGHIJ", 10, answers="AC")
        snapshot = make_snapshot(
            {
                "u1": {None: {"A": 1, "B": 2}},
                "u2": {None: {"A": 1, "B": 2}},
                "u3": {None: {"C": 1, "D": 2}},
                "u4": {None: {"E": 1}},
            },
            top_list=top,
        )
        result = self.leaderboard.compute(snapshot)
        assert positions(result) == {"u3": 1, "u1": 2, "u2": 2, "u4": 4}
        assert [s.tied for s in result.standings] == [False, True, True, False]

    def test_user_without_hits_is_listed_last(self):
        top = make_category("top", "ABC", 3, answers="A")
        snapshot = make_snapshot(
            {"u1": {None: {"B": 1}}, "u2": {None: {"A": 3}}},
            top_list=top,
        )
        result = self.leaderboard.compute(snapshot)
        assert standing_names(result) == ["u2", "u1"]
        assert result.standings[1].keys == {
            "success_count": 0, "rank_sum": 0, "preference_points": 0,
        }

    def test_unranked_picks_do_not_count(self):
        top = make_category("top", "ABC", 3, answers="A")
        snapshot = make_snapshot({"u1": {None: {"A": None}}}, top_list=top)
        result = self.leaderboard.compute(snapshot)
        assert result.standings[0].keys["success_count"] == 0

    def test_unavailable_before_reveal(self):
        top = make_category("top", "ABC", 3)
        snapshot = make_snapshot({"u1": {None: {"A": 1}}}, top_list=top)
        assert not self.leaderboard.is_available(snapshot)
        with pytest.raises(ResultsUnavailable):
            self.leaderboard.compute(snapshot)

    def test_unavailable_without_top_list(self):
        snapshot = make_snapshot({"u1": {}})
        with pytest.raises(ResultsUnavailable):
            self.leaderboard.compute(snapshot)

    def test_empty_answer_set_is_not_revealed(self):
        top = make_category("top", "ABC", 3, answers=[])
        snapshot = make_snapshot({"u1": {None: {"A": 1}}}, top_list=top)
        with pytest.raises(ResultsUnavailable):
            self.leaderboard.compute(snapshot)
