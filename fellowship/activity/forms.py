"""Forms for the activity blueprint."""

from wtforms import DateTimeField, StringField, TextAreaField
from wtforms.validators import AnyOf, DataRequired, Length, Optional

from fellowship.constants import RESPONSE_STATUSES
from fellowship.core.forms import ApiForm

DATETIME_FORMATS = ["%Y-%m-%dT%H:%M:%S%z", "%Y-%m-%dT%H:%M:%S", "%Y-%m-%dT%H:%M"]


class ActivityForm(ApiForm):
    """Form for scheduling an activity."""

    groupId = StringField("Group", validators=[DataRequired()])
    name = StringField("Name", validators=[DataRequired(), Length(max=100)])
    address = StringField("Address", validators=[DataRequired(), Length(max=200)])
    dateTime = DateTimeField(
        "Date and Time", format=DATETIME_FORMATS, validators=[DataRequired()]
    )
    description = TextAreaField(
        "Description", validators=[DataRequired(), Length(max=5000)]
    )


class UpdateActivityForm(ApiForm):
    """Partial update of an activity."""

    name = StringField("Name", validators=[Optional(), Length(max=100)])
    address = StringField("Address", validators=[Optional(), Length(max=200)])
    dateTime = DateTimeField(
        "Date and Time", format=DATETIME_FORMATS, validators=[Optional()]
    )
    description = TextAreaField(
        "Description", validators=[Optional(), Length(max=5000)]
    )


class RespondForm(ApiForm):
    """Form for answering an activity invitation."""

    status = StringField(
        "Status", validators=[DataRequired(), AnyOf(RESPONSE_STATUSES)]
    )
