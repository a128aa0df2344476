"""Service layer for team-related operations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

from leaguebracket.core.constants import TEAMS_COLLECTION
from leaguebracket.errors import NotFoundError

if TYPE_CHECKING:
    from google.cloud.firestore_v1.base_document import DocumentSnapshot
    from google.cloud.firestore_v1.client import Client

    from leaguebracket.tournament.models import Team


class TeamService:
    """Service class for team-related operations."""

    @staticmethod
    def _fetch_team_docs(db: Client, team_ids: list[str]) -> dict[str, dict[str, Any]]:
        """Fetch the distinct team documents in one round-trip."""
        unique_ids = list(dict.fromkeys(team_ids))
        if not unique_ids:
            return {}

        refs = [db.collection(TEAMS_COLLECTION).document(tid) for tid in unique_ids]
        docs = cast(list["DocumentSnapshot"], db.get_all(refs))
        return {
            doc.id: {**(doc.to_dict() or {}), "id": doc.id}
            for doc in docs
            if doc.exists
        }

    @staticmethod
    def get_teams(db: Client, team_ids: list[str]) -> list[Team]:
        """Return teams in the requested order.

        Repeated ids are returned as requested so that bracket validation
        can report them.

        Raises:
            NotFoundError: If any team id does not exist.
        """
        teams_map = TeamService._fetch_team_docs(db, team_ids)

        teams = []
        for team_id in team_ids:
            team = teams_map.get(team_id)
            if team is None:
                raise NotFoundError(f"Team not found: {team_id}")
            teams.append(cast("Team", dict(team)))
        return teams

    @staticmethod
    def get_teams_map(db: Client, team_ids: list[str]) -> dict[str, Team]:
        """Return a mapping of team id to team, skipping missing teams."""
        return cast(
            "dict[str, Team]", TeamService._fetch_team_docs(db, team_ids)
        )
