"""Base form for JSON operation arguments."""

from __future__ import annotations

from typing import Any

from flask_wtf import FlaskForm

from fellowship.errors import ValidationError


class ApiForm(FlaskForm):
    """A form bound to the JSON body (or query string) of the current request.

    CSRF is enforced globally by ``CSRFProtect`` for cookie sessions, so the
    per-form token is disabled.
    """

    class Meta:
        csrf = False

        def wrap_formdata(self, form, formdata):
            """Reject explicit nulls; WTForms' parsers expect strings."""
            formdata = super().wrap_formdata(form, formdata)
            if formdata is not None:
                for name, field in form._fields.items():
                    if name in formdata and None in formdata.getlist(name):
                        raise ValidationError(
                            f"{field.label.text}: This field cannot be null."
                        )
            return formdata

    def supplied(self, field_name: str) -> bool:
        """Return True if the caller explicitly sent the field."""
        return bool(getattr(getattr(self, field_name), "raw_data", None))

    def validated_data(self) -> dict[str, Any]:
        """Validate the form, raising ValidationError with the first message."""
        if not self.validate():
            for field_name, messages in self.errors.items():
                field = self._fields.get(field_name)
                label = field.label.text if field else "Form"
                raise ValidationError(f"{label}: {messages[0]}")
        return {
            name: field.data
            for name, field in self._fields.items()
            if self.supplied(name)
        }
