"""Routes for the tournament blueprint."""

from __future__ import annotations

from typing import Any

from flask import current_app, jsonify, request

from leaguebracket.errors import ValidationError

from . import bp
from .forms import MatchResultForm, TournamentForm
from .services import TournamentService
from .utils import serialize_date


def _serialize(tournament: dict[str, Any]) -> dict[str, Any]:
    """Make a tournament document JSON friendly."""
    data = dict(tournament)
    for key in ("createdDate", "completedDate"):
        if key in data:
            data[key] = serialize_date(data[key])
    return data


def _form_error(form: Any) -> ValidationError:
    """Turn the form errors into a ValidationError led by the first message."""
    message = "Invalid request."
    for field_errors in form.errors.values():
        if field_errors:
            message = field_errors[0]
            break
    return ValidationError(message, errors=form.errors)


@bp.route("/", methods=["GET"])
def list_tournaments() -> Any:
    """List tournaments, optionally filtered by ``status``."""
    status = request.args.get("status") or None
    tournaments = TournamentService.list_tournaments(status=status)
    return jsonify({"tournaments": [_serialize(t) for t in tournaments]})


@bp.route("/", methods=["POST"])
def create_tournament() -> Any:
    """Create a tournament and generate its bracket."""
    form = TournamentForm()
    if not form.validate_on_submit():
        raise _form_error(form)

    tournament = TournamentService.create_tournament(
        form.name.data,
        list(form.team_ids.data or []),
        form.type.data,
    )
    current_app.logger.info(f"Tournament created: {tournament['id']}")
    return jsonify(_serialize(tournament)), 201


@bp.route("/<string:tournament_id>", methods=["GET"])
def view_tournament(tournament_id: str) -> Any:
    """View a single tournament with its bracket."""
    tournament = TournamentService.get_tournament_view(tournament_id)
    return jsonify(_serialize(tournament))


@bp.route("/<string:tournament_id>/matches/<string:match_id>", methods=["POST"])
def record_match_result(tournament_id: str, match_id: str) -> Any:
    """Enter the score of a match and advance its winner."""
    form = MatchResultForm()
    if not form.validate_on_submit():
        raise _form_error(form)

    tournament = TournamentService.record_result(
        tournament_id,
        match_id,
        form.team1_score.data,
        form.team2_score.data,
    )
    return jsonify(_serialize(tournament))


@bp.route("/<string:tournament_id>", methods=["DELETE"])
def delete_tournament(tournament_id: str) -> Any:
    """Delete a tournament."""
    TournamentService.delete_tournament(tournament_id)
    current_app.logger.info(f"Tournament deleted: {tournament_id}")
    return jsonify({"status": "success"})
