"""Forms for the grid blueprint."""

from wtforms import StringField
from wtforms.validators import DataRequired, Length

from fellowship.core.forms import ApiForm


class GridForm(ApiForm):
    """Form for creating or renaming a grid."""

    name = StringField("Grid Name", validators=[DataRequired(), Length(max=100)])


class AddMemberForm(ApiForm):
    """Form for adding a user to the caller's grid by email."""

    userEmail = StringField("Email", validators=[DataRequired(), Length(max=254)])
