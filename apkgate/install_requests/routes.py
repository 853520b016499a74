"""Routes for the install_requests blueprint."""

from firebase_admin import firestore
from flask import current_app, jsonify

from apkgate.decorators import json_endpoint
from apkgate.errors import DeliveryError, NotFoundError, UnauthorizedError
from apkgate.extensions import notifier
from apkgate.notifications import NotificationError
from apkgate.user.forms import UserIdForm
from apkgate.utils import load_form

from . import bp
from .forms import ApprovalNotificationForm, UpdateStatusForm
from .services import (
    InstallRequestService,
    NotALeader,
    RecipientNotFound,
    RequestNotFound,
)


@bp.route("/FetchGroupRequests", methods=["POST"])
@json_endpoint
def fetch_group_requests():
    """List pending install requests across the groups of a leader."""
    form = load_form(UserIdForm)
    user_id = form.userId.data
    current_app.logger.info(f"Fetching group requests for userId: {user_id}")
    db = firestore.client()

    try:
        requests = InstallRequestService.get_pending_requests_for_leader(db, user_id)
    except RecipientNotFound as e:
        raise NotFoundError(str(e)) from e
    except NotALeader as e:
        raise UnauthorizedError(str(e)) from e

    return jsonify({"requests": requests})


@bp.route("/UpdateRequestStatus", methods=["POST"])
@json_endpoint
def update_request_status():
    """Approve, reject or otherwise re-label an install request."""
    form = load_form(UpdateStatusForm)
    current_app.logger.info(
        f"Updating request status for {form.requestId.data} by {form.userId.data} "
        f"to {form.newStatus.data}"
    )
    db = firestore.client()

    try:
        InstallRequestService.update_status(
            db, form.requestId.data, form.newStatus.data, form.userId.data
        )
    except NotALeader as e:
        raise UnauthorizedError(str(e)) from e
    except RequestNotFound as e:
        raise NotFoundError(str(e)) from e

    return jsonify(
        {"status": "success", "message": "Request status updated successfully"}
    )


@bp.route("/SendApprovalNotification", methods=["POST"])
@json_endpoint
def send_approval_notification():
    """Push a notification about a member's install request to the leader."""
    form = load_form(ApprovalNotificationForm)
    db = firestore.client()

    try:
        message_id = InstallRequestService.notify_leader(
            db,
            notifier,
            form.userId.data,
            form.groupId.data,
            form.status.data,
            apk_hash=form.apkHash.data or None,
            apk_file_name=form.apkFileName.data or None,
        )
    except (RecipientNotFound, RequestNotFound) as e:
        current_app.logger.info(f"SendApprovalNotification: {e}")
        raise NotFoundError(str(e)) from e
    except NotificationError as e:
        raise DeliveryError(
            f"Error sending notification: {e.message}", e.reason
        ) from e

    current_app.logger.info(f"Notification sent successfully: {message_id}")
    return jsonify(
        {
            "status": "success",
            "message": "Notification sent successfully.",
            "messageId": message_id,
        }
    )
