"""Forms for the auth blueprint."""

from flask_wtf import FlaskForm  # type: ignore
from wtforms import PasswordField, StringField
from wtforms.validators import AnyOf, DataRequired, Length, Regexp

from apkgate.core.constants import (
    EMAIL_PATTERN,
    PASSWORD_MIN_LENGTH,
    PASSWORD_PATTERN,
    ROLES,
)

PASSWORD_POLICY_MESSAGE = (
    "Password must be at least 8 characters long and contain both letters "
    "and numbers"
)


def _password_validators():
    return [
        DataRequired(),
        Length(min=PASSWORD_MIN_LENGTH, message=PASSWORD_POLICY_MESSAGE),
        Regexp(PASSWORD_PATTERN, message=PASSWORD_POLICY_MESSAGE),
    ]


class LoginForm(FlaskForm):
    """Login form."""

    email = StringField(
        "Email",
        validators=[
            DataRequired(),
            Regexp(EMAIL_PATTERN, message="Invalid email format"),
        ],
    )
    password = PasswordField("Password", validators=_password_validators())


class RegisterForm(FlaskForm):
    """Registration form."""

    email = StringField(
        "Email",
        validators=[
            DataRequired(),
            Regexp(EMAIL_PATTERN, message="Only gmail.com addresses are allowed"),
        ],
    )
    password = PasswordField("Password", validators=_password_validators())
    role = StringField(
        "Role",
        validators=[
            DataRequired(),
            AnyOf(ROLES, message="Invalid role provided"),
        ],
    )
