"""Routes for the group blueprint."""

from firebase_admin import firestore
from flask import current_app, jsonify

from apkgate.decorators import json_endpoint
from apkgate.errors import (
    ConflictError,
    InternalError,
    NotFoundError,
    UnauthorizedError,
)
from apkgate.utils import load_form, mask_email

from . import bp
from .forms import CreateInvitationForm, DeleteGroupForm, GroupIdForm, KickMemberForm
from .services import (
    AccessDenied,
    AlreadyInvited,
    AlreadyMember,
    BatchTooLarge,
    CannotRemoveLeader,
    GroupNotFound,
    GroupService,
    MemberNotFound,
    create_invitation,
)


@bp.route("/CreateGroupInvitation", methods=["POST"])
@json_endpoint
def create_group_invitation():
    """Invite a user, by email, into a group led by the caller."""
    form = load_form(CreateInvitationForm)
    db = firestore.client()
    try:
        create_invitation(
            db,
            form.leaderId.data,
            form.memberEmail.data,
            form.groupId.data,
            form.groupName.data,
        )
    except MemberNotFound as e:
        current_app.logger.info(str(e))
        raise NotFoundError("User not found") from e
    except (GroupNotFound, AccessDenied) as e:
        current_app.logger.info(
            f"Leader {form.leaderId.data} is not authorized for group "
            f"{form.groupId.data}: {e}"
        )
        raise UnauthorizedError() from e
    except (AlreadyMember, AlreadyInvited) as e:
        raise ConflictError(str(e)) from e

    return jsonify({"status": "success", "message": "Invitation created successfully"})


@bp.route("/DeleteGroup", methods=["POST"])
@json_endpoint
def delete_group():
    """Delete a group and its install requests in one batch."""
    form = load_form(DeleteGroupForm)
    db = firestore.client()
    try:
        GroupService.delete_group(db, form.leaderId.data, form.groupId.data)
    except (GroupNotFound, AccessDenied) as e:
        current_app.logger.info(f"DeleteGroup refused: {e}")
        raise UnauthorizedError() from e
    except BatchTooLarge as e:
        raise InternalError(f"Error: {e}") from e

    return jsonify(
        {
            "status": "success",
            "message": "Group and related data deleted successfully.",
        }
    )


@bp.route("/KickMember", methods=["POST"])
@json_endpoint
def kick_member():
    """Remove a member from a group, cascading to their install requests."""
    form = load_form(KickMemberForm)
    db = firestore.client()
    try:
        GroupService.remove_member(
            db, form.leaderId.data, form.groupId.data, form.memberEmail.data
        )
    except (GroupNotFound, AccessDenied) as e:
        current_app.logger.info(f"KickMember refused: {e}")
        raise UnauthorizedError() from e
    except MemberNotFound as e:
        current_app.logger.info(
            f"KickMember: no user with email {mask_email(form.memberEmail.data)}"
        )
        raise NotFoundError("User not found") from e
    except CannotRemoveLeader as e:
        raise ConflictError(str(e)) from e
    except BatchTooLarge as e:
        raise InternalError(f"Error: {e}") from e

    return jsonify(
        {"status": "success", "message": "Member removed from group successfully."}
    )


@bp.route("/FetchGroupMembers", methods=["POST"])
@json_endpoint
def fetch_group_members():
    """List a group's members with their pending install requests."""
    form = load_form(GroupIdForm)
    db = firestore.client()
    try:
        members = GroupService.get_members(db, form.groupId.data)
    except GroupNotFound as e:
        raise NotFoundError("Group not found") from e

    current_app.logger.info(
        f"Returning {len(members)} members for group {form.groupId.data}"
    )
    return jsonify({"members": members})
