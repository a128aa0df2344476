"""Utility functions for tournament presentation."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from leaguebracket.core.constants import (
    MATCH_PENDING,
    TBD_TEAM_NAME,
    UNKNOWN_TEAM_NAME,
)

from .bracket import get_bracket_structure, get_round_name

if TYPE_CHECKING:
    from .models import Team, TournamentMatch


def team_display_name(team_id: str | None, teams_by_id: dict[str, Team]) -> str:
    """Resolve a bracket slot to a display name."""
    if not team_id:
        return TBD_TEAM_NAME
    team = teams_by_id.get(team_id)
    if team is None:
        return UNKNOWN_TEAM_NAME
    return team.get("name") or UNKNOWN_TEAM_NAME


def is_match_editable(match: TournamentMatch) -> bool:
    """A result can be entered once both teams are known and it is unplayed."""
    return bool(
        match.get("team1Id")
        and match.get("team2Id")
        and match["status"] == MATCH_PENDING
    )


def build_bracket_view(
    bracket: list[TournamentMatch], teams_by_id: dict[str, Team]
) -> list[dict[str, Any]]:
    """Build the presentation-ready rounds of a bracket."""
    structure = get_bracket_structure(bracket)
    total_rounds = len(structure)

    rounds = []
    for bracket_round in structure:
        matches = []
        for match in bracket_round["matches"]:
            matches.append(
                {
                    **match,
                    "team1Name": team_display_name(match.get("team1Id"), teams_by_id),
                    "team2Name": team_display_name(match.get("team2Id"), teams_by_id),
                    "editable": is_match_editable(match),
                }
            )
        rounds.append(
            {
                "round": bracket_round["round"],
                "name": get_round_name(bracket_round["round"], total_rounds),
                "matches": matches,
            }
        )
    return rounds


def serialize_date(value: Any) -> str | None:
    """Convert Firestore timestamps and datetimes to ISO 8601 strings."""
    if value is None:
        return None
    if hasattr(value, "to_datetime"):
        value = value.to_datetime()
    if hasattr(value, "isoformat"):
        return str(value.isoformat())
    return str(value)
