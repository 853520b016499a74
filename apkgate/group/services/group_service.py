"""Service layer for group operations, including the atomic group mutations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

from firebase_admin import firestore
from flask import current_app

from apkgate.core.constants import (
    FIRESTORE_BATCH_LIMIT,
    GROUPS_COLLECTION,
    INSTALL_REQUESTS_COLLECTION,
    INVITATIONS_COLLECTION,
    PRIVATE_USER_FIELDS,
    STATUS_PENDING,
    USERS_COLLECTION,
)
from apkgate.core.types import GroupDocument
from apkgate.user.services import get_user_by_email
from apkgate.utils import mask_email

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client


class GroupNotFound(Exception):
    """Exception raised when a group is not found."""

    pass


class AccessDenied(Exception):
    """Exception raised when the caller is not the group's leader."""

    pass


class MemberNotFound(Exception):
    """Exception raised when no user matches the member email."""

    pass


class CannotRemoveLeader(Exception):
    """Exception raised when a leader tries to remove themselves."""

    pass


class BatchTooLarge(Exception):
    """Exception raised when a mutation would not fit in one write batch."""

    pass


class WriteSet:
    """Writes staged for a single Firestore batch.

    Nothing touches the database until :meth:`commit`, which applies every
    staged write through one ``db.batch()`` so they become visible together.
    """

    def __init__(self) -> None:
        """Initialize an empty write set."""
        self.deletes: list[Any] = []
        self.updates: list[tuple[Any, dict[str, Any]]] = []

    def __len__(self) -> int:
        return len(self.deletes) + len(self.updates)

    def delete(self, ref: Any) -> None:
        """Stage a document deletion."""
        self.deletes.append(ref)

    def update(self, ref: Any, data: dict[str, Any]) -> None:
        """Stage a document update."""
        self.updates.append((ref, data))

    def commit(self, db: Client) -> None:
        """Apply every staged write as one atomic batch."""
        if len(self) > FIRESTORE_BATCH_LIMIT:
            raise BatchTooLarge(
                f"Operation needs {len(self)} writes; "
                f"a batch holds at most {FIRESTORE_BATCH_LIMIT}."
            )

        batch = db.batch()
        for ref, data in self.updates:
            batch.update(ref, data)
        for ref in self.deletes:
            batch.delete(ref)
        batch.commit()


def _public_user(doc: Any) -> dict[str, Any]:
    data = doc.to_dict() or {}
    for key in PRIVATE_USER_FIELDS:
        data.pop(key, None)
    data["id"] = doc.id
    return data


class GroupService:
    """Service class for group-related operations."""

    @staticmethod
    def get_group(db: Client, group_id: str) -> GroupDocument:
        """Fetch a group document as a dict."""
        group = db.collection(GROUPS_COLLECTION).document(group_id).get()
        if not group.exists:
            raise GroupNotFound("Group not found.")
        group_data = group.to_dict() or {}
        group_data["id"] = group.id
        return cast(GroupDocument, group_data)

    @staticmethod
    def get_led_group(db: Client, leader_id: str, group_id: str) -> GroupDocument:
        """Fetch a group, checking that ``leader_id`` is its leader."""
        group_data = GroupService.get_group(db, group_id)
        if group_data.get("leaderId") != leader_id:
            raise AccessDenied(
                f"Leader {leader_id} is not authorized for group {group_id}."
            )
        return group_data

    @staticmethod
    def _install_requests_query(
        db: Client, group_id: str, user_id: str | None = None
    ) -> Any:
        query = db.collection(INSTALL_REQUESTS_COLLECTION).where(
            filter=firestore.FieldFilter("groupId", "==", group_id)
        )
        if user_id is not None:
            query = query.where(
                filter=firestore.FieldFilter("userId", "==", user_id)
            )
        return query

    @staticmethod
    def delete_group(db: Client, leader_id: str, group_id: str) -> None:
        """Delete a group together with everything that references it.

        The group, its install requests and its invitations are deleted, and
        the group id is pulled from the ``groups`` of its leader and members,
        all in one batch.
        """
        group_data = GroupService.get_led_group(db, leader_id, group_id)
        group_ref = db.collection(GROUPS_COLLECTION).document(group_id)

        request_docs = list(
            GroupService._install_requests_query(db, group_id).stream()
        )
        invitation_docs = list(
            db.collection(INVITATIONS_COLLECTION)
            .where(filter=firestore.FieldFilter("groupId", "==", group_id))
            .stream()
        )

        user_ids = [leader_id] + [
            uid for uid in group_data.get("memberIds", []) if uid != leader_id
        ]
        users_ref = db.collection(USERS_COLLECTION)
        user_refs = [users_ref.document(uid) for uid in user_ids]
        existing_user_refs = [ref for ref in user_refs if ref.get().exists]

        writes = WriteSet()
        writes.delete(group_ref)
        for doc in request_docs:
            writes.delete(doc.reference)
        for doc in invitation_docs:
            writes.delete(doc.reference)
        for ref in existing_user_refs:
            writes.update(ref, {"groups": firestore.ArrayRemove([group_id])})
        writes.commit(db)

        current_app.logger.info(
            f"Deleted group {group_id} with {len(request_docs)} install requests "
            f"and {len(invitation_docs)} invitations."
        )

    @staticmethod
    def remove_member(
        db: Client, leader_id: str, group_id: str, member_email: str
    ) -> str:
        """Remove a member from a group and drop their install requests.

        Removing someone who is not a member is a no-op success. The leader
        cannot be removed from their own group. Returns the resolved user id.
        """
        group_data = GroupService.get_led_group(db, leader_id, group_id)

        user = get_user_by_email(db, member_email)
        if user is None:
            raise MemberNotFound(
                f"No user found with email: {mask_email(member_email)}"
            )
        user_id = user["id"]
        if user_id == group_data.get("leaderId"):
            raise CannotRemoveLeader(
                "The group leader cannot be removed from the group."
            )

        request_docs = list(
            GroupService._install_requests_query(db, group_id, user_id).stream()
        )

        writes = WriteSet()
        writes.update(
            db.collection(GROUPS_COLLECTION).document(group_id),
            {"memberIds": firestore.ArrayRemove([user_id])},
        )
        writes.update(
            db.collection(USERS_COLLECTION).document(user_id),
            {"groups": firestore.ArrayRemove([group_id])},
        )
        for doc in request_docs:
            writes.delete(doc.reference)
        writes.commit(db)

        current_app.logger.info(
            f"Removed user {user_id} from group {group_id} "
            f"({len(request_docs)} install requests deleted)."
        )
        return user_id

    @staticmethod
    def get_members(db: Client, group_id: str) -> list[dict[str, Any]]:
        """List a group's members, each with their pending install requests."""
        group_data = GroupService.get_group(db, group_id)
        member_ids = group_data.get("memberIds") or []
        if not member_ids:
            return []

        refs = [db.collection(USERS_COLLECTION).document(uid) for uid in member_ids]
        member_docs = [ref.get() for ref in refs]

        pending_by_user: dict[str, list[dict[str, Any]]] = {}
        pending_query = GroupService._install_requests_query(db, group_id).where(
            filter=firestore.FieldFilter("status", "==", STATUS_PENDING)
        )
        for doc in pending_query.stream():
            data = doc.to_dict() or {}
            data["id"] = doc.id
            pending_by_user.setdefault(data.get("userId"), []).append(data)

        members = []
        for doc in member_docs:
            if not doc.exists:
                current_app.logger.warning(
                    f"Group {group_id} lists missing user {doc.id}; skipping."
                )
                continue
            member = _public_user(doc)
            member["installRequests"] = pending_by_user.get(doc.id, [])
            members.append(member)
        return members
