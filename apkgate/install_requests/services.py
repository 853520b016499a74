"""Service layer for APK installation requests."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

from firebase_admin import firestore
from flask import current_app

from apkgate.core.constants import (
    GROUPS_COLLECTION,
    INSTALL_REQUESTS_COLLECTION,
    NOTIFICATION_TARGET_SCREEN,
    STATUS_PENDING,
)
from apkgate.core.types import InstallRequestDocument
from apkgate.user.services import get_user_by_id, is_leader

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client

    from apkgate.notifications import FcmNotifier


class RequestNotFound(Exception):
    """Exception raised when an install request cannot be found."""

    pass


class NotALeader(Exception):
    """Exception raised when the caller does not hold the leader role."""

    pass


class RecipientNotFound(Exception):
    """Exception raised when a notification has nobody to go to."""

    pass


class InstallRequestService:
    """Service class for install request operations."""

    @staticmethod
    def get_leader(db: Client, user_id: str) -> dict[str, Any]:
        """Fetch a user that must hold the leader role."""
        user = get_user_by_id(db, user_id)
        if user is None:
            raise RecipientNotFound(f"User with userId {user_id} not found.")
        if not is_leader(user):
            raise NotALeader("User is not authorized as a leader.")
        return user

    @staticmethod
    def get_pending_requests_for_leader(
        db: Client, user_id: str
    ) -> list[dict[str, Any]]:
        """List the pending install requests of every group the leader is in."""
        leader = InstallRequestService.get_leader(db, user_id)

        requests = []
        email_cache: dict[str, str | None] = {}
        for group_id in leader.get("groups") or []:
            group_doc = db.collection(GROUPS_COLLECTION).document(group_id).get()
            if not group_doc.exists:
                current_app.logger.warning(
                    f"User {user_id} references missing group {group_id}; skipping."
                )
                continue
            group_name = (group_doc.to_dict() or {}).get("name") or "Unknown Group"

            query = (
                db.collection(INSTALL_REQUESTS_COLLECTION)
                .where(filter=firestore.FieldFilter("status", "==", STATUS_PENDING))
                .where(filter=firestore.FieldFilter("groupId", "==", group_id))
            )
            for doc in query.stream():
                data = doc.to_dict() or {}
                requester_id = data.get("userId")
                user_email = data.get("userEmail")
                if not user_email and requester_id:
                    if requester_id not in email_cache:
                        requester = get_user_by_id(db, requester_id) or {}
                        email_cache[requester_id] = requester.get("email")
                    user_email = email_cache[requester_id]
                requests.append(
                    {
                        "id": doc.id,
                        "groupId": group_id,
                        "groupName": group_name,
                        "userId": requester_id,
                        "userEmail": user_email,
                        "apkFileName": data.get("apkFileName"),
                        "status": data.get("status"),
                    }
                )
        return requests

    @staticmethod
    def update_status(
        db: Client, request_id: str, new_status: str, user_id: str
    ) -> None:
        """Set the status of an install request on behalf of a leader."""
        user = get_user_by_id(db, user_id)
        if not is_leader(user):
            raise NotALeader("User is not authorized as a leader.")

        request_ref = db.collection(INSTALL_REQUESTS_COLLECTION).document(request_id)
        if not request_ref.get().exists:
            raise RequestNotFound(f"Install request {request_id} not found.")

        request_ref.update(
            {"status": new_status, "updatedAt": firestore.SERVER_TIMESTAMP}
        )
        current_app.logger.info(
            f"Request {request_id} set to {new_status} by {user_id}."
        )

    @staticmethod
    def find_request(
        db: Client,
        user_id: str,
        group_id: str,
        status: str,
        apk_hash: str | None = None,
        apk_file_name: str | None = None,
    ) -> InstallRequestDocument:
        """Find the install request a notification is about."""
        query = db.collection(INSTALL_REQUESTS_COLLECTION)
        if apk_hash:
            query = query.where(filter=firestore.FieldFilter("apkHash", "==", apk_hash))
        else:
            query = query.where(
                filter=firestore.FieldFilter("apkFileName", "==", apk_file_name)
            )
        query = (
            query.where(filter=firestore.FieldFilter("groupId", "==", group_id))
            .where(filter=firestore.FieldFilter("userId", "==", user_id))
            .where(filter=firestore.FieldFilter("status", "==", status))
            .limit(1)
        )
        for doc in query.stream():
            data = doc.to_dict() or {}
            data["id"] = doc.id
            return cast(InstallRequestDocument, data)
        raise RequestNotFound("No pending approval requests found.")

    @staticmethod
    def notify_leader(  # noqa: PLR0913
        db: Client,
        notifier: FcmNotifier,
        user_id: str,
        group_id: str,
        status: str,
        apk_hash: str | None = None,
        apk_file_name: str | None = None,
    ) -> str:
        """Tell a group's leader that a member asked to install an APK.

        Returns the FCM message id.
        """
        group_doc = db.collection(GROUPS_COLLECTION).document(group_id).get()
        if not group_doc.exists:
            raise RecipientNotFound("Group not found.")

        leader_id = (group_doc.to_dict() or {}).get("leaderId")
        if not leader_id:
            raise RecipientNotFound("Leader not found for group.")

        leader = get_user_by_id(db, leader_id)
        fcm_token = (leader or {}).get("fcmToken")
        if not fcm_token:
            current_app.logger.info(
                f"Leader with ID {leader_id} does not have a valid FCM token."
            )
            raise RecipientNotFound("Leader FCM token not found.")

        requester = get_user_by_id(db, user_id)
        if requester is None:
            raise RecipientNotFound("User not found.")
        user_email = requester.get("email") or "Unknown User"

        install_request = InstallRequestService.find_request(
            db, user_id, group_id, status, apk_hash, apk_file_name
        )
        apk_name = install_request.get("apkFileName") or apk_file_name or "Unknown APK"

        return notifier.send(
            fcm_token,
            title=f"New Installation Request from {user_email}",
            body=f"Request to install {apk_name}.",
            data={
                "navigateTo": NOTIFICATION_TARGET_SCREEN,
                "userId": user_id,
                "userName": user_email,
                "apkFileName": apk_name,
                "groupId": group_id,
                "requestId": install_request["id"],
            },
        )
