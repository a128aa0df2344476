"""Tests for TournamentService using mockfirestore."""

from __future__ import annotations

import unittest
from unittest.mock import patch

from mockfirestore import MockFirestore

from leaguebracket.errors import NotFoundError, UnsupportedFormatError, ValidationError
from leaguebracket.tournament.services import TournamentService
from tests.mock_utils import add_teams, make_firestore_module, patch_mockfirestore


def match_at(bracket, round_number, position):
    return next(
        m for m in bracket if m["round"] == round_number and m["position"] == position
    )


class TournamentServiceTestCase(unittest.TestCase):
    """Test case for the tournament service layer."""

    def setUp(self) -> None:
        patch_mockfirestore()
        self.db = MockFirestore()

        patcher = patch(
            "leaguebracket.tournament.services.firestore",
            new=make_firestore_module(self.db),
        )
        patcher.start()
        self.addCleanup(patcher.stop)

        self.team_ids = add_teams(self.db, ["Aces", "Bombers", "Comets", "Dragons"])

    def _stored(self, tournament_id: str) -> dict:
        doc = self.db.collection("tournaments").document(tournament_id).get()
        return doc.to_dict()

    def _play(self, tournament_id: str, round_number: int, position: int, scores):
        bracket = self._stored(tournament_id)["bracket"]
        match = match_at(bracket, round_number, position)
        return TournamentService.record_result(
            tournament_id, match["id"], scores[0], scores[1], db=self.db
        )

    def test_create_tournament(self) -> None:
        tournament = TournamentService.create_tournament(
            "Summer Cup", self.team_ids, db=self.db
        )

        stored = self._stored(tournament["id"])
        self.assertEqual(stored["name"], "Summer Cup")
        self.assertEqual(stored["type"], "single-elimination")
        self.assertEqual(stored["status"], "setup")
        self.assertEqual(stored["teams"], self.team_ids)
        self.assertEqual(len(stored["bracket"]), 3)
        self.assertTrue(
            all(m["tournamentId"] == tournament["id"] for m in stored["bracket"])
        )
        first = match_at(stored["bracket"], 1, 1)
        self.assertEqual((first["team1Id"], first["team2Id"]), ("team1", "team2"))

    def test_create_tournament_uses_default_client(self) -> None:
        tournament = TournamentService.create_tournament("Cup", self.team_ids[:2])
        self.assertEqual(self._stored(tournament["id"])["name"], "Cup")

    def test_create_tournament_keeps_requested_order(self) -> None:
        order = ["team3", "team1", "team2"]
        tournament = TournamentService.create_tournament("Cup", order, db=self.db)
        bracket = self._stored(tournament["id"])["bracket"]
        self.assertEqual(match_at(bracket, 1, 1)["team1Id"], "team3")
        self.assertEqual(match_at(bracket, 1, 2)["winnerId"], "team2")

    def test_create_tournament_unknown_team(self) -> None:
        with self.assertRaises(NotFoundError) as ctx:
            TournamentService.create_tournament("Cup", ["team1", "ghost"], db=self.db)
        self.assertEqual(ctx.exception.message, "Team not found: ghost")

    def test_create_tournament_duplicate_team(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            TournamentService.create_tournament("Cup", ["team1", "team1"], db=self.db)
        self.assertEqual(ctx.exception.message, "Duplicate teams are not allowed")

    def test_create_tournament_without_teams(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            TournamentService.create_tournament("Cup", [], db=self.db)
        self.assertEqual(ctx.exception.message, "At least 2 teams are required")

    def test_create_unsupported_format_stores_nothing(self) -> None:
        with self.assertRaises(UnsupportedFormatError):
            TournamentService.create_tournament(
                "Cup", self.team_ids, "round-robin", db=self.db
            )
        self.assertEqual(TournamentService.list_tournaments(db=self.db), [])

    def test_get_tournament(self) -> None:
        created = TournamentService.create_tournament("Cup", self.team_ids, db=self.db)
        tournament = TournamentService.get_tournament(created["id"], db=self.db)
        self.assertEqual(tournament["id"], created["id"])
        self.assertEqual(tournament["name"], "Cup")

    def test_get_tournament_not_found(self) -> None:
        with self.assertRaises(NotFoundError):
            TournamentService.get_tournament("missing", db=self.db)

    def test_record_result_advances_winner(self) -> None:
        tournament = TournamentService.create_tournament(
            "Cup", self.team_ids, db=self.db
        )
        result = self._play(tournament["id"], 1, 1, (11, 5))

        self.assertEqual(result["status"], "in-progress")
        stored = self._stored(tournament["id"])
        self.assertEqual(stored["status"], "in-progress")
        first = match_at(stored["bracket"], 1, 1)
        self.assertEqual(first["winnerId"], "team1")
        self.assertEqual((first["team1Score"], first["team2Score"]), (11, 5))
        self.assertEqual(match_at(stored["bracket"], 2, 1)["team1Id"], "team1")
        self.assertNotIn("completedDate", stored)

    def test_record_result_completes_tournament(self) -> None:
        tournament = TournamentService.create_tournament(
            "Cup", self.team_ids, db=self.db
        )
        self._play(tournament["id"], 1, 1, (2, 1))
        self._play(tournament["id"], 1, 2, (0, 3))
        result = self._play(tournament["id"], 2, 1, (5, 7))

        self.assertEqual(result["status"], "completed")
        self.assertEqual(result["winnerId"], "team4")
        stored = self._stored(tournament["id"])
        self.assertEqual(stored["status"], "completed")
        self.assertEqual(stored["winnerId"], "team4")
        self.assertIsNotNone(stored["completedDate"])

    def test_record_result_with_bye(self) -> None:
        tournament = TournamentService.create_tournament(
            "Cup", self.team_ids[:3], db=self.db
        )
        self._play(tournament["id"], 1, 1, (11, 2))
        final = match_at(self._stored(tournament["id"])["bracket"], 2, 1)
        self.assertEqual((final["team1Id"], final["team2Id"]), ("team1", "team3"))

        result = self._play(tournament["id"], 2, 1, (4, 11))
        self.assertEqual(result["winnerId"], "team3")

    def test_record_result_can_be_corrected(self) -> None:
        tournament = TournamentService.create_tournament(
            "Cup", self.team_ids, db=self.db
        )
        self._play(tournament["id"], 1, 1, (11, 5))
        self._play(tournament["id"], 1, 1, (5, 11))

        stored = self._stored(tournament["id"])
        self.assertEqual(match_at(stored["bracket"], 1, 1)["winnerId"], "team2")
        self.assertEqual(match_at(stored["bracket"], 2, 1)["team1Id"], "team2")

    def test_record_result_locked_once_later_round_played(self) -> None:
        tournament = TournamentService.create_tournament(
            "Cup", self.team_ids, db=self.db
        )
        self._play(tournament["id"], 1, 1, (11, 5))
        self._play(tournament["id"], 1, 2, (5, 11))
        self._play(tournament["id"], 2, 1, (11, 9))
        before = self._stored(tournament["id"])

        with self.assertRaises(ValidationError) as ctx:
            self._play(tournament["id"], 1, 1, (5, 11))
        self.assertEqual(
            ctx.exception.message, "Later rounds have already been played."
        )

        stored = self._stored(tournament["id"])
        self.assertEqual(stored["bracket"], before["bracket"])
        self.assertEqual(stored["winnerId"], "team1")
        final = match_at(stored["bracket"], 2, 1)
        self.assertIn(stored["winnerId"], (final["team1Id"], final["team2Id"]))

    def test_record_result_correction_passes_through_bye(self) -> None:
        team_ids = add_teams(
            self.db, ["Aces", "Bombers", "Comets", "Dragons", "Eagles", "Falcons"]
        )
        tournament = TournamentService.create_tournament("Cup", team_ids, db=self.db)
        self._play(tournament["id"], 1, 3, (11, 4))
        stored = self._stored(tournament["id"])
        self.assertEqual(match_at(stored["bracket"], 2, 2)["status"], "completed")
        self.assertEqual(match_at(stored["bracket"], 3, 1)["team2Id"], "team5")

        self._play(tournament["id"], 1, 3, (4, 11))

        stored = self._stored(tournament["id"])
        self.assertEqual(match_at(stored["bracket"], 2, 2)["winnerId"], "team6")
        self.assertEqual(match_at(stored["bracket"], 3, 1)["team2Id"], "team6")

    def test_record_result_needs_both_teams(self) -> None:
        tournament = TournamentService.create_tournament(
            "Cup", self.team_ids, db=self.db
        )
        with self.assertRaises(ValidationError) as ctx:
            self._play(tournament["id"], 2, 1, (11, 5))
        self.assertEqual(
            ctx.exception.message, "Both teams must be set before recording a result."
        )

    def test_record_result_rejects_bad_scores(self) -> None:
        tournament = TournamentService.create_tournament(
            "Cup", self.team_ids, db=self.db
        )
        with self.assertRaises(ValidationError) as ctx:
            self._play(tournament["id"], 1, 1, (7, 7))
        self.assertEqual(ctx.exception.message, "Scores cannot be the same.")

        with self.assertRaises(ValidationError) as ctx:
            self._play(tournament["id"], 1, 1, (-1, 7))
        self.assertEqual(ctx.exception.message, "Scores cannot be negative.")

        self.assertEqual(self._stored(tournament["id"])["status"], "setup")

    def test_record_result_unknown_match(self) -> None:
        tournament = TournamentService.create_tournament(
            "Cup", self.team_ids, db=self.db
        )
        with self.assertRaises(NotFoundError) as ctx:
            TournamentService.record_result(tournament["id"], "nope", 11, 5, db=self.db)
        self.assertEqual(ctx.exception.message, "Match not found.")

    def test_record_result_unknown_tournament(self) -> None:
        with self.assertRaises(NotFoundError):
            TournamentService.record_result("missing", "nope", 11, 5, db=self.db)

    def test_list_tournaments_by_status(self) -> None:
        finished = TournamentService.create_tournament(
            "Old Cup", self.team_ids[:2], db=self.db
        )
        self._play(finished["id"], 1, 1, (11, 3))
        active = TournamentService.create_tournament(
            "New Cup", self.team_ids, db=self.db
        )

        everything = TournamentService.list_tournaments(db=self.db)
        self.assertEqual([t["id"] for t in everything], [active["id"], finished["id"]])

        active_only = TournamentService.list_tournaments(status="active", db=self.db)
        self.assertEqual([t["id"] for t in active_only], [active["id"]])

        completed = TournamentService.list_tournaments(status="completed", db=self.db)
        self.assertEqual([t["id"] for t in completed], [finished["id"]])
        self.assertEqual(completed[0]["winnerId"], "team1")

    def test_get_tournament_view(self) -> None:
        tournament = TournamentService.create_tournament(
            "Cup", self.team_ids[:3], db=self.db
        )
        view = TournamentService.get_tournament_view(tournament["id"], db=self.db)

        self.assertFalse(view["isComplete"])
        self.assertNotIn("winnerName", view)
        self.assertEqual([r["name"] for r in view["rounds"]], ["Semifinals", "Final"])

        semis = view["rounds"][0]["matches"]
        self.assertEqual((semis[0]["team1Name"], semis[0]["team2Name"]), ("Aces", "Bombers"))
        self.assertTrue(semis[0]["editable"])
        self.assertEqual((semis[1]["team1Name"], semis[1]["team2Name"]), ("Comets", "TBD"))
        self.assertFalse(semis[1]["editable"])

        final = view["rounds"][1]["matches"][0]
        self.assertEqual((final["team1Name"], final["team2Name"]), ("TBD", "Comets"))
        self.assertFalse(final["editable"])

    def test_get_tournament_view_with_winner(self) -> None:
        tournament = TournamentService.create_tournament(
            "Cup", self.team_ids[:2], db=self.db
        )
        self._play(tournament["id"], 1, 1, (9, 11))
        view = TournamentService.get_tournament_view(tournament["id"], db=self.db)
        self.assertTrue(view["isComplete"])
        self.assertEqual(view["winnerName"], "Bombers")

    def test_delete_tournament(self) -> None:
        tournament = TournamentService.create_tournament(
            "Cup", self.team_ids, db=self.db
        )
        TournamentService.delete_tournament(tournament["id"], db=self.db)
        with self.assertRaises(NotFoundError):
            TournamentService.get_tournament(tournament["id"], db=self.db)

    def test_delete_missing_tournament(self) -> None:
        with self.assertRaises(NotFoundError):
            TournamentService.delete_tournament("missing", db=self.db)


if __name__ == "__main__":
    unittest.main()
