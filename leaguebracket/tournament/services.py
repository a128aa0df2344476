"""Service layer for tournament business logic."""

from __future__ import annotations

import datetime
import logging
from typing import TYPE_CHECKING, Any, cast

from firebase_admin import firestore

from leaguebracket.core.constants import (
    MATCH_COMPLETED,
    SINGLE_ELIMINATION,
    TOURNAMENT_COMPLETED,
    TOURNAMENT_IN_PROGRESS,
    TOURNAMENTS_COLLECTION,
)
from leaguebracket.errors import NotFoundError, ValidationError
from leaguebracket.teams.services import TeamService

from .bracket import (
    advance_winner,
    create_tournament,
    get_tournament_winner,
    is_later_round_played,
    is_tournament_complete,
)
from .utils import build_bracket_view, serialize_date, team_display_name

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client
    from google.cloud.firestore_v1.document import DocumentReference

ACTIVE_FILTER = "active"


class TournamentService:
    """Handles business logic and data access for tournaments."""

    @staticmethod
    def _get_tournament_doc(
        db: Client, tournament_id: str
    ) -> tuple[DocumentReference, dict[str, Any]]:
        """Fetch a tournament document or raise NotFoundError."""
        ref = db.collection(TOURNAMENTS_COLLECTION).document(tournament_id)
        doc = cast(Any, ref.get())
        if not doc.exists:
            raise NotFoundError("Tournament not found.")
        return ref, cast(dict[str, Any], doc.to_dict() or {})

    @staticmethod
    def create_tournament(
        name: str,
        team_ids: list[str],
        tournament_type: str = SINGLE_ELIMINATION,
        db: Client | None = None,
    ) -> dict[str, Any]:
        """Create a tournament with its full bracket and return it."""
        if db is None:
            db = firestore.client()

        teams = TeamService.get_teams(db, team_ids)
        ref = db.collection(TOURNAMENTS_COLLECTION).document()
        tournament = create_tournament(
            name, teams, tournament_type, tournament_id=ref.id
        )
        ref.set(tournament)

        logging.info(
            f"Created tournament {ref.id} with {len(teams)} teams "
            f"and {len(tournament['bracket'])} matches"
        )
        return {**tournament, "id": ref.id}

    @staticmethod
    def get_tournament(tournament_id: str, db: Client | None = None) -> dict[str, Any]:
        """Fetch a single tournament."""
        if db is None:
            db = firestore.client()
        ref, data = TournamentService._get_tournament_doc(db, tournament_id)
        data["id"] = ref.id
        return data

    @staticmethod
    def list_tournaments(
        status: str | None = None, db: Client | None = None
    ) -> list[dict[str, Any]]:
        """Fetch tournaments, newest first.

        ``status="active"`` returns every tournament that is not completed;
        any other status is matched exactly.
        """
        if db is None:
            db = firestore.client()
        collection = db.collection(TOURNAMENTS_COLLECTION)

        if status and status != ACTIVE_FILTER:
            docs = collection.where(
                filter=firestore.FieldFilter("status", "==", status)
            ).stream()
        else:
            docs = collection.stream()

        tournaments = []
        for doc in docs:
            data = doc.to_dict()
            if not data:
                continue
            if status == ACTIVE_FILTER and data.get("status") == TOURNAMENT_COMPLETED:
                continue
            data["id"] = doc.id
            tournaments.append(data)

        tournaments.sort(
            key=lambda t: serialize_date(t.get("createdDate")) or "", reverse=True
        )
        return tournaments

    @staticmethod
    def record_result(
        tournament_id: str,
        match_id: str,
        team1_score: int,
        team2_score: int,
        db: Client | None = None,
    ) -> dict[str, Any]:
        """Record a match result and advance the winner through the bracket.

        Entering a result for an already completed match overwrites it, as
        long as no later round has been played.
        Concurrent edits are last-write-wins.
        """
        if db is None:
            db = firestore.client()
        ref, data = TournamentService._get_tournament_doc(db, tournament_id)
        bracket = data.get("bracket", [])

        match = next((m for m in bracket if m.get("id") == match_id), None)
        if match is None:
            raise NotFoundError("Match not found.")

        team1_id = match.get("team1Id")
        team2_id = match.get("team2Id")
        if not team1_id or not team2_id:
            raise ValidationError("Both teams must be set before recording a result.")
        if match.get("status") == MATCH_COMPLETED and is_later_round_played(
            bracket, match_id
        ):
            raise ValidationError("Later rounds have already been played.")
        if team1_score < 0 or team2_score < 0:
            raise ValidationError("Scores cannot be negative.")
        if team1_score == team2_score:
            raise ValidationError("Scores cannot be the same.")

        winner_id = team1_id if team1_score > team2_score else team2_id
        updated_bracket = advance_winner(
            bracket, match_id, winner_id, team1_score, team2_score
        )

        updates: dict[str, Any] = {
            "bracket": updated_bracket,
            "status": TOURNAMENT_IN_PROGRESS,
        }
        if is_tournament_complete(updated_bracket):
            updates["status"] = TOURNAMENT_COMPLETED
            updates["winnerId"] = get_tournament_winner(updated_bracket)
            updates["completedDate"] = datetime.datetime.now(datetime.timezone.utc)
            logging.info(
                f"Tournament {tournament_id} completed, winner {updates['winnerId']}"
            )

        ref.update(updates)
        logging.info(
            f"Recorded {team1_score}-{team2_score} for match {match_id} "
            f"in tournament {tournament_id}"
        )
        return {**data, **updates, "id": ref.id}

    @staticmethod
    def get_tournament_view(
        tournament_id: str, db: Client | None = None
    ) -> dict[str, Any]:
        """Fetch a tournament with its bracket laid out for display."""
        if db is None:
            db = firestore.client()
        tournament = TournamentService.get_tournament(tournament_id, db=db)
        bracket = tournament.get("bracket", [])

        teams_by_id = TeamService.get_teams_map(db, tournament.get("teams", []))
        tournament["rounds"] = build_bracket_view(bracket, teams_by_id)
        tournament["isComplete"] = is_tournament_complete(bracket)

        winner_id = get_tournament_winner(bracket)
        if winner_id:
            tournament["winnerName"] = team_display_name(winner_id, teams_by_id)
        return tournament

    @staticmethod
    def delete_tournament(tournament_id: str, db: Client | None = None) -> None:
        """Delete a tournament document."""
        if db is None:
            db = firestore.client()
        ref, _ = TournamentService._get_tournament_doc(db, tournament_id)
        ref.delete()
        logging.info(f"Deleted tournament {tournament_id}")
