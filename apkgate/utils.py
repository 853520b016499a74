"""Utility functions for the application."""

from flask import request
from werkzeug.datastructures import MultiDict

from .errors import ValidationError

MISSING_PARAMETERS = "Missing required parameters"


def mask_email(email):
    """Mask an email address for logging, keeping the first character."""
    if not email or "@" not in email:
        return "***"
    local, _, domain = email.partition("@")
    return f"{local[:1]}***@{domain}"


def get_json_payload():
    """Return the request body as a dict of its scalar fields.

    Raises:
        ValidationError: If the body is not a JSON object.
    """
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON format in request body.")
    return payload


def load_form(form_class, payload=None):
    """Bind a JSON payload to a form and validate it.

    Missing fields are reported before any format problem, so a request with
    both gets the missing-parameters message.

    Raises:
        ValidationError: With the first failing field's message.
    """
    if payload is None:
        payload = get_json_payload()
    formdata = MultiDict(
        {
            key: str(value)
            for key, value in payload.items()
            if isinstance(value, (str, int, float)) and not isinstance(value, bool)
        }
    )
    form = form_class(formdata=formdata, meta={"csrf": False})

    missing = [
        field.name
        for field in form
        if field.flags.required and not (field.data or "").strip()
    ]
    if missing:
        raise ValidationError(MISSING_PARAMETERS)

    if not form.validate():
        for errors in form.errors.values():
            if errors:
                raise ValidationError(errors[0])
        raise ValidationError()
    return form
