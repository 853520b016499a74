"""Group invitations."""

from __future__ import annotations

from typing import TYPE_CHECKING

from firebase_admin import firestore
from flask import current_app

from apkgate.core.constants import INVITATIONS_COLLECTION, STATUS_PENDING
from apkgate.core.types import InvitationDocument
from apkgate.user.services import get_user_by_email
from apkgate.utils import mask_email

from .group_service import GroupService, MemberNotFound

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client


class AlreadyMember(Exception):
    """Exception raised when the invitee already belongs to the group."""

    pass


class AlreadyInvited(Exception):
    """Exception raised when a pending invitation already exists."""

    pass


def has_pending_invitation(db: Client, user_id: str, group_id: str) -> bool:
    """Check for a pending invitation for this (user, group) pair."""
    query = (
        db.collection(INVITATIONS_COLLECTION)
        .where(filter=firestore.FieldFilter("userId", "==", user_id))
        .where(filter=firestore.FieldFilter("groupId", "==", group_id))
        .where(filter=firestore.FieldFilter("status", "==", STATUS_PENDING))
        .limit(1)
    )
    return bool(list(query.stream()))


def create_invitation(
    db: Client, leader_id: str, member_email: str, group_id: str, group_name: str
) -> str:
    """Invite the user owning ``member_email`` into a group.

    Checks run in order: invitee exists, caller leads the group, invitee is
    not a member yet, no pending invitation exists. Returns the new
    invitation id.
    """
    user = get_user_by_email(db, member_email)
    if user is None:
        raise MemberNotFound(f"No user found with email: {mask_email(member_email)}")
    user_id = user["id"]

    group_data = GroupService.get_led_group(db, leader_id, group_id)

    if user_id in (group_data.get("memberIds") or []):
        raise AlreadyMember("User is already a member of this group")

    if has_pending_invitation(db, user_id, group_id):
        raise AlreadyInvited("An invitation has already been sent to this user.")

    invitation: InvitationDocument = {
        "userId": user_id,
        "groupId": group_id,
        "groupName": group_name,
        "status": STATUS_PENDING,
        "createdAt": firestore.SERVER_TIMESTAMP,
    }
    _, invitation_ref = db.collection(INVITATIONS_COLLECTION).add(invitation)
    current_app.logger.info(
        f"Invitation {invitation_ref.id} created for user {user_id} "
        f"in group {group_id}."
    )
    return invitation_ref.id
