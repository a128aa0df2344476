"""Forms for the tournament blueprint."""

from flask_wtf import FlaskForm
from wtforms import IntegerField, SelectField, SelectMultipleField, StringField
from wtforms.validators import (
    DataRequired,
    Length,
    NumberRange,
    StopValidation,
    ValidationError,
)

from leaguebracket.core.constants import (
    DOUBLE_ELIMINATION,
    ROUND_ROBIN,
    SINGLE_ELIMINATION,
)


def score_required(form, field):
    """Like InputRequired, but a score of 0 counts as entered."""
    if field.data is None:
        raise StopValidation("Both scores are required.")


class TournamentForm(FlaskForm):
    """Form for creating a tournament."""

    class Meta:
        csrf = False

    name = StringField(
        "Tournament Name",
        validators=[DataRequired("Tournament name is required"), Length(max=100)],
    )

    type = SelectField(
        "Tournament Type",
        choices=[
            (SINGLE_ELIMINATION, "Single Elimination"),
            (DOUBLE_ELIMINATION, "Double Elimination"),
            (ROUND_ROBIN, "Round Robin"),
        ],
        default=SINGLE_ELIMINATION,
    )

    # Team ids are checked against Firestore by the service
    team_ids = SelectMultipleField("Teams", choices=[], validate_choice=False)


class MatchResultForm(FlaskForm):
    """Form for entering the score of a bracket match."""

    class Meta:
        csrf = False

    team1_score = IntegerField(
        "Team 1 Score",
        validators=[
            score_required,
            NumberRange(min=0, message="Scores cannot be negative."),
        ],
    )
    team2_score = IntegerField(
        "Team 2 Score",
        validators=[
            score_required,
            NumberRange(min=0, message="Scores cannot be negative."),
        ],
    )

    def validate_team2_score(self, field):
        """Reject ties; a knockout match needs a winner."""
        if field.data is not None and field.data == self.team1_score.data:
            raise ValidationError("Scores cannot be the same.")
