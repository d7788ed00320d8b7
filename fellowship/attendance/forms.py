"""Forms for the attendance blueprint."""

from wtforms import DateField, IntegerField, StringField
from wtforms.validators import AnyOf, DataRequired, NumberRange, Optional

from fellowship.constants import ATTENDANCE_TYPES, CHURCH_SERVICES
from fellowship.core.forms import ApiForm


class AttendanceForm(ApiForm):
    """Form for recording or rewriting a day's attendance.

    ``attended`` and ``coLeaderAttended`` are read from the raw JSON body.
    """

    date = DateField("Date", validators=[DataRequired()])
    type = StringField("Type", validators=[DataRequired(), AnyOf(ATTENDANCE_TYPES)])
    service = StringField(
        "Service", validators=[Optional(), AnyOf(list(CHURCH_SERVICES))]
    )
    maleCount = IntegerField("Men", validators=[Optional(), NumberRange(min=0)])
    femaleCount = IntegerField("Women", validators=[Optional(), NumberRange(min=0)])
    coLeaderId = StringField("Co-leader", validators=[Optional()])


class RecordFilterForm(ApiForm):
    """Query-string filters for the caller's own records."""

    type = StringField("Type", validators=[Optional(), AnyOf(ATTENDANCE_TYPES)])
    month = IntegerField("Month", validators=[Optional(), NumberRange(min=1, max=12)])
    year = IntegerField("Year", validators=[Optional(), NumberRange(min=1900)])


class ReportForm(ApiForm):
    """Query-string arguments of the monthly and yearly reports."""

    year = IntegerField("Year", validators=[DataRequired(), NumberRange(min=1900)])
    month = IntegerField("Month", validators=[Optional(), NumberRange(min=1, max=12)])
    discipleId = StringField("Disciple", validators=[Optional()])
    groupId = StringField("Group", validators=[Optional()])
