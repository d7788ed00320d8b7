"""Forms for the group blueprint."""

from wtforms import IntegerField, StringField, ValidationError
from wtforms.validators import DataRequired, Length, NumberRange, Optional

from fellowship.core.forms import ApiForm


class GroupForm(ApiForm):
    """Form for creating a group."""

    name = StringField("Group Name", validators=[DataRequired(), Length(max=100)])
    address = StringField("Address", validators=[DataRequired(), Length(max=200)])
    district = StringField("District", validators=[DataRequired(), Length(max=100)])
    minAge = IntegerField("Minimum Age", validators=[Optional(), NumberRange(min=0)])
    maxAge = IntegerField("Maximum Age", validators=[Optional(), NumberRange(min=0)])
    day = StringField("Day", validators=[DataRequired()])
    time = StringField("Time", validators=[DataRequired()])
    coLeaderId = StringField("Co-leader", validators=[Optional()])

    def validate_maxAge(self, field):
        """Ensure the age range is not inverted."""
        if self.minAge.data is not None and field.data is not None:
            if self.minAge.data > field.data:
                raise ValidationError(
                    "Minimum age cannot be greater than maximum age."
                )


class JoinGroupForm(ApiForm):
    """Form for joining a group with an invitation code."""

    invitationCode = StringField(
        "Invitation Code", validators=[DataRequired(), Length(min=1, max=20)]
    )


class UpdateGroupForm(ApiForm):
    """Partial update of a group's name or address."""

    name = StringField("Group Name", validators=[Optional(), Length(min=1, max=100)])
    address = StringField("Address", validators=[Optional(), Length(min=1, max=200)])
