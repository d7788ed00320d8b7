"""Forms for the user blueprint."""

from wtforms import DateField, StringField
from wtforms.validators import AnyOf, DataRequired, Length, Optional

from fellowship.constants import GENDERS, ROLES
from fellowship.core.forms import ApiForm


class UpdateProfileForm(ApiForm):
    """Partial update of the caller's own profile."""

    name = StringField("Name", validators=[Optional(), Length(min=1, max=100)])
    gender = StringField("Gender", validators=[Optional(), AnyOf(GENDERS)])
    phone = StringField("Phone", validators=[Optional(), Length(max=30)])
    birthday = DateField("Birthday", validators=[Optional()])


class CompleteProfileForm(ApiForm):
    """First-time profile completion."""

    name = StringField("Name", validators=[DataRequired(), Length(min=1, max=100)])
    role = StringField("Role", validators=[DataRequired(), AnyOf(ROLES)])
    gender = StringField("Gender", validators=[DataRequired(), AnyOf(GENDERS)])
    phone = StringField("Phone", validators=[Optional(), Length(max=30)])
