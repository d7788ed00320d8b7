"""Forms for the stats blueprint."""

from wtforms import DateField, StringField
from wtforms.validators import AnyOf, Optional

from fellowship.constants import PERIOD_TYPES
from fellowship.core.forms import ApiForm


class PeriodForm(ApiForm):
    """Query-string period of the attendance statistics."""

    groupId = StringField("Group", validators=[Optional()])
    periodType = StringField("Period", validators=[Optional(), AnyOf(PERIOD_TYPES)])
    referenceDate = DateField("Reference Date", validators=[Optional()])
