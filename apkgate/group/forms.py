"""Forms for the group blueprint."""

from flask_wtf import FlaskForm
from wtforms import StringField
from wtforms.validators import DataRequired


class CreateInvitationForm(FlaskForm):
    """Payload of CreateGroupInvitation."""

    leaderId = StringField("Leader ID", validators=[DataRequired()])
    memberEmail = StringField("Member Email", validators=[DataRequired()])
    groupId = StringField("Group ID", validators=[DataRequired()])
    groupName = StringField("Group Name", validators=[DataRequired()])


class DeleteGroupForm(FlaskForm):
    """Payload of DeleteGroup."""

    leaderId = StringField("Leader ID", validators=[DataRequired()])
    groupId = StringField("Group ID", validators=[DataRequired()])


class KickMemberForm(FlaskForm):
    """Payload of KickMember."""

    leaderId = StringField("Leader ID", validators=[DataRequired()])
    memberEmail = StringField("Member Email", validators=[DataRequired()])
    groupId = StringField("Group ID", validators=[DataRequired()])


class GroupIdForm(FlaskForm):
    """Payload carrying only a group id."""

    groupId = StringField("Group ID", validators=[DataRequired()])
