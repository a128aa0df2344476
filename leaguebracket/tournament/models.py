"""Data models for the tournament blueprint."""

from __future__ import annotations

from typing import Any, TypedDict

from leaguebracket.core.types import FirestoreDocument


class Team(TypedDict, total=False):
    """An entrant. Only ``id`` and ``name`` matter to the bracket."""

    id: str
    name: str
    color: str


class _TournamentMatchBase(TypedDict):
    id: str
    tournamentId: str
    round: int
    position: int
    status: str


class TournamentMatch(_TournamentMatchBase, total=False):
    """A single match inside a tournament bracket."""

    team1Id: str
    team2Id: str
    team1Score: int
    team2Score: int
    winnerId: str
    nextMatchId: str


class BracketRound(TypedDict):
    """One round of the presentation-ready bracket."""

    round: int
    matches: list[TournamentMatch]


class Tournament(FirestoreDocument, total=False):
    """A tournament document in Firestore."""

    name: str
    type: str
    status: str
    teams: list[str]
    bracket: list[TournamentMatch]
    createdDate: Any
    completedDate: Any
    winnerId: str

    # UI and calculated fields
    rounds: list[dict[str, Any]]
    isComplete: bool
    winnerName: str
