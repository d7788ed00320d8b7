"""Forms for the course blueprint."""

from wtforms import SelectMultipleField, StringField, TextAreaField
from wtforms.validators import DataRequired, Length, Optional

from fellowship.core.forms import ApiForm


class CourseForm(ApiForm):
    """Form for creating a course."""

    name = StringField("Course Name", validators=[DataRequired(), Length(max=100)])
    description = TextAreaField(
        "Description", validators=[Optional(), Length(max=2000)]
    )


class UpdateCourseForm(ApiForm):
    """Partial update of a course."""

    name = StringField("Course Name", validators=[Optional(), Length(min=1, max=100)])
    description = TextAreaField(
        "Description", validators=[Optional(), Length(max=2000)]
    )


class CourseSelectionForm(ApiForm):
    """A list of course ids to enroll in or drop."""

    # Ids are checked against the catalog by the service, not here.
    courseIds = SelectMultipleField("Courses", choices=[], validate_choice=False)
