"""Forms for the install_requests blueprint."""

from flask_wtf import FlaskForm
from wtforms import StringField, ValidationError
from wtforms.validators import DataRequired


class UpdateStatusForm(FlaskForm):
    """Payload of UpdateRequestStatus."""

    requestId = StringField("Request ID", validators=[DataRequired()])
    newStatus = StringField("New Status", validators=[DataRequired()])
    userId = StringField("User ID", validators=[DataRequired()])


class ApprovalNotificationForm(FlaskForm):
    """Payload of SendApprovalNotification.

    The request is identified either by its APK hash or its file name.
    """

    userId = StringField("User ID", validators=[DataRequired()])
    groupId = StringField("Group ID", validators=[DataRequired()])
    status = StringField("Status", validators=[DataRequired()])
    apkHash = StringField("APK Hash")
    apkFileName = StringField("APK File Name")

    def validate_apkHash(self, field):  # noqa: N802
        """Require at least one way of identifying the APK."""
        if not (field.data or self.apkFileName.data):
            raise ValidationError(
                "Missing required parameters: userId, apkHash or apkFileName, "
                "groupId, or status."
            )
