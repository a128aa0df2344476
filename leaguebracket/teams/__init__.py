"""Team lookups for tournament entrants."""

from .services import TeamService

__all__ = ["TeamService"]
