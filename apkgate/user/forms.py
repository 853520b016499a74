"""Forms for the user blueprint."""

from flask_wtf import FlaskForm
from wtforms import StringField
from wtforms.validators import DataRequired


class UserIdForm(FlaskForm):
    """Payload carrying only a user id."""

    userId = StringField("User ID", validators=[DataRequired()])
