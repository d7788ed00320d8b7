"""Forms for the service area blueprint."""

from wtforms import StringField
from wtforms.validators import DataRequired, Length, Optional

from fellowship.core.forms import ApiForm


class ServiceAreaForm(ApiForm):
    """Form for creating a service area."""

    name = StringField("Name", validators=[DataRequired(), Length(max=100)])


class UpdateServiceAreaForm(ApiForm):
    """Form for renaming a service area."""

    name = StringField("Name", validators=[Optional(), Length(max=100)])


class AssignServiceAreaForm(ApiForm):
    """Form carrying the service area to assign."""

    serviceId = StringField("Service Area", validators=[DataRequired()])
