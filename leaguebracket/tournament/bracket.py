"""Single elimination bracket generation and advancement.

Brackets are flat lists of match mappings. The tree is encoded by each
match's ``nextMatchId``; rounds and feeders are always derived from the
list rather than stored.
"""

from __future__ import annotations

import copy
import datetime
import math
import uuid
from collections.abc import Iterable, Sequence
from typing import Any

from leaguebracket.core.constants import (
    DOUBLE_ELIMINATION,
    MATCH_COMPLETED,
    MATCH_PENDING,
    MAX_TOURNAMENT_TEAMS,
    MIN_TOURNAMENT_TEAMS,
    ROUND_NAMES,
    ROUND_ROBIN,
    SINGLE_ELIMINATION,
    TOURNAMENT_SETUP,
)
from leaguebracket.errors import UnsupportedFormatError, ValidationError

from .models import BracketRound, Team, TournamentMatch


def next_power_of_two(n: int) -> int:
    """Calculate the bracket size (next power of 2, at least 2)."""
    if n <= MIN_TOURNAMENT_TEAMS:
        return MIN_TOURNAMENT_TEAMS
    return 2 ** math.ceil(math.log2(n))


def calculate_rounds(team_count: int) -> int:
    """Calculate the number of rounds needed for a tournament."""
    return int(math.log2(next_power_of_two(team_count)))


def calculate_byes(team_count: int) -> int:
    """Calculate the number of byes needed to fill the bracket."""
    return next_power_of_two(team_count) - team_count


def validate_tournament_setup(teams: Sequence[Team]) -> None:
    """Validate the entrant list before a bracket is built.

    Raises:
        ValidationError: If there are too few or too many teams, or the
            same team is entered twice.
    """
    if len(teams) < MIN_TOURNAMENT_TEAMS:
        raise ValidationError(f"At least {MIN_TOURNAMENT_TEAMS} teams are required")

    if len(teams) > MAX_TOURNAMENT_TEAMS:
        raise ValidationError(f"Maximum {MAX_TOURNAMENT_TEAMS} teams allowed")

    team_ids = [team["id"] for team in teams]
    if len(team_ids) != len(set(team_ids)):
        raise ValidationError("Duplicate teams are not allowed")


def _new_match(tournament_id: str, round_number: int, position: int) -> TournamentMatch:
    return {
        "id": str(uuid.uuid4()),
        "tournamentId": tournament_id,
        "round": round_number,
        "position": position,
        "status": MATCH_PENDING,
    }


def generate_single_elimination_bracket(
    tournament_id: str, teams: Sequence[Team]
) -> list[TournamentMatch]:
    """Generate every match of a single elimination bracket.

    Teams are seeded in the order given and padded with byes up to the
    bracket size. A first round match against a bye is created already
    completed, and its winner is placed in the following round.
    """
    validate_tournament_setup(teams)

    bracket_size = next_power_of_two(len(teams))
    total_rounds = calculate_rounds(len(teams))

    slots: list[str | None] = [team["id"] for team in teams]
    slots.extend([None] * calculate_byes(len(teams)))

    matches: list[TournamentMatch] = []
    for i in range(bracket_size // 2):
        team1_id, team2_id = slots[i * 2], slots[i * 2 + 1]
        match = _new_match(tournament_id, 1, i + 1)
        if team1_id:
            match["team1Id"] = team1_id
        if team2_id:
            match["team2Id"] = team2_id

        # Exactly one real team: it advances without playing
        if bool(team1_id) != bool(team2_id):
            match["winnerId"] = team1_id or team2_id  # type: ignore[typeddict-item]
            match["status"] = MATCH_COMPLETED
        matches.append(match)

    for round_number in range(2, total_rounds + 1):
        matches_in_round = bracket_size // 2**round_number
        for position in range(1, matches_in_round + 1):
            matches.append(_new_match(tournament_id, round_number, position))

    link_matches(matches)

    index = _BracketIndex(matches)
    for match in get_bracket_structure(matches)[0]["matches"]:
        if match["status"] == MATCH_COMPLETED:
            index.place_winner(match, match["winnerId"])

    return matches


def link_matches(matches: list[TournamentMatch]) -> None:
    """Link matches so winners advance to the next round."""
    rounds = get_bracket_structure(matches)
    for current, following in zip(rounds, rounds[1:]):
        next_matches = following["matches"]
        for index, match in enumerate(current["matches"]):
            next_index = index // 2
            if next_index < len(next_matches):
                match["nextMatchId"] = next_matches[next_index]["id"]


class _BracketIndex:
    """Id, round position and feeder lookups over one bracket list."""

    def __init__(self, matches: list[TournamentMatch]) -> None:
        self.by_id = {match["id"]: match for match in matches}
        self.round_index: dict[str, int] = {}
        for bracket_round in get_bracket_structure(matches):
            for index, match in enumerate(bracket_round["matches"]):
                self.round_index[match["id"]] = index

        self.feeders: dict[str, list[TournamentMatch]] = {}
        for match in matches:
            next_id = match.get("nextMatchId")
            if next_id:
                self.feeders.setdefault(next_id, []).append(match)

    def is_void(self, match: TournamentMatch) -> bool:
        """Return True if no team can ever reach ``match``."""
        if match["status"] != MATCH_PENDING:
            return False
        if match.get("team1Id") or match.get("team2Id"):
            return False
        if match["round"] == 1:
            return True
        feeders = self.feeders.get(match["id"], [])
        return bool(feeders) and all(self.is_void(feeder) for feeder in feeders)

    def place_winner(self, match: TournamentMatch, winner_id: str) -> None:
        """Write the winner into the next match, then pass any bye onwards."""
        current = match
        while current.get("nextMatchId"):
            target = self.by_id.get(current["nextMatchId"])
            if target is None:
                return

            if self.round_index[current["id"]] % 2 == 0:
                target["team1Id"] = winner_id
            else:
                target["team2Id"] = winner_id

            others = [
                feeder
                for feeder in self.feeders.get(target["id"], [])
                if feeder["id"] != current["id"]
            ]
            if not others or not all(self.is_void(other) for other in others):
                return

            # Nobody can arrive on the other side, so this is a bye
            target["winnerId"] = winner_id
            target["status"] = MATCH_COMPLETED
            current = target


def group_matches_by_round(
    matches: Iterable[TournamentMatch],
) -> dict[int, list[TournamentMatch]]:
    """Group matches by round, keeping their relative order."""
    grouped: dict[int, list[TournamentMatch]] = {}
    for match in matches:
        grouped.setdefault(match["round"], []).append(match)
    return grouped


def advance_winner(
    matches: Sequence[TournamentMatch],
    match_id: str,
    winner_id: str,
    team1_score: int | None = None,
    team2_score: int | None = None,
) -> list[TournamentMatch]:
    """Complete a match and move its winner into the next round.

    Returns a new list; ``matches`` is left untouched. An unknown
    ``match_id`` returns an unchanged copy. The winner is not checked
    against the match's teams.
    """
    updated = copy.deepcopy(list(matches))
    index = _BracketIndex(updated)

    match = index.by_id.get(match_id)
    if match is None:
        return updated

    match["winnerId"] = winner_id
    match["status"] = MATCH_COMPLETED
    if team1_score is not None:
        match["team1Score"] = team1_score
    if team2_score is not None:
        match["team2Score"] = team2_score

    index.place_winner(match, winner_id)
    return updated


def is_later_round_played(matches: Sequence[TournamentMatch], match_id: str) -> bool:
    """Check whether a result has been entered downstream of ``match_id``.

    Bye matches completed automatically on the way do not count as played.
    """
    index = _BracketIndex(list(matches))
    current = index.by_id.get(match_id)
    while current is not None and current.get("nextMatchId"):
        target = index.by_id.get(current["nextMatchId"])
        if target is None or target["status"] != MATCH_COMPLETED:
            return False

        others = [
            feeder
            for feeder in index.feeders.get(target["id"], [])
            if feeder["id"] != current["id"]
        ]
        if not others or not all(index.is_void(other) for other in others):
            return True
        current = target
    return False


def _final_match(matches: Sequence[TournamentMatch]) -> TournamentMatch | None:
    if not matches:
        return None
    final_round = max(match["round"] for match in matches)
    return next(match for match in matches if match["round"] == final_round)


def is_tournament_complete(matches: Sequence[TournamentMatch]) -> bool:
    """Check whether the final has been played."""
    final = _final_match(matches)
    return final is not None and final["status"] == MATCH_COMPLETED


def get_tournament_winner(matches: Sequence[TournamentMatch]) -> str | None:
    """Get the winner of the final, if there is one."""
    final = _final_match(matches)
    if final is None:
        return None
    return final.get("winnerId")


def get_bracket_structure(matches: Iterable[TournamentMatch]) -> list[BracketRound]:
    """Get rounds in order with their matches sorted by position."""
    grouped = group_matches_by_round(matches)
    return [
        {
            "round": round_number,
            "matches": sorted(grouped[round_number], key=lambda m: m["position"]),
        }
        for round_number in sorted(grouped)
    ]


def get_round_name(round_number: int, total_rounds: int) -> str:
    """Get the display name of a round from its distance to the final."""
    rounds_from_end = total_rounds - round_number + 1
    return ROUND_NAMES.get(rounds_from_end, f"Round {round_number}")


def create_tournament(
    name: str,
    teams: Sequence[Team],
    tournament_type: str = SINGLE_ELIMINATION,
    tournament_id: str | None = None,
) -> dict[str, Any]:
    """Validate the setup and build a new tournament with its bracket.

    Raises:
        ValidationError: For a blank name, a bad team list or an unknown type.
        UnsupportedFormatError: For formats that are not implemented yet.
    """
    name = (name or "").strip()
    if not name:
        raise ValidationError("Tournament name is required")

    validate_tournament_setup(teams)

    if tournament_id is None:
        tournament_id = f"tournament-{uuid.uuid4().hex}"

    if tournament_type == SINGLE_ELIMINATION:
        bracket = generate_single_elimination_bracket(tournament_id, teams)
    elif tournament_type == DOUBLE_ELIMINATION:
        raise UnsupportedFormatError("Double elimination not yet implemented")
    elif tournament_type == ROUND_ROBIN:
        raise UnsupportedFormatError("Round robin not yet implemented")
    else:
        raise ValidationError(f"Unknown tournament type: {tournament_type}")

    return {
        "name": name,
        "type": tournament_type,
        "status": TOURNAMENT_SETUP,
        "teams": [team["id"] for team in teams],
        "bracket": bracket,
        "createdDate": datetime.datetime.now(datetime.timezone.utc),
    }
