"""Core data types for the apkgate application."""

from typing import Any, List, Optional, TypedDict  # noqa: UP035


class UserDocument(TypedDict, total=False):
    """A document of the ``users`` collection."""

    id: str
    email: str
    role: str
    groups: List[str]  # noqa: UP006
    fcmToken: Optional[str]
    passwordHash: str
    createdAt: Any


class GroupDocument(TypedDict, total=False):
    """A document of the ``groups`` collection."""

    id: str
    name: str
    leaderId: str
    memberIds: List[str]  # noqa: UP006


class InvitationDocument(TypedDict, total=False):
    """A document of the ``invitations`` collection."""

    id: str
    userId: str
    groupId: str
    groupName: str
    status: str
    createdAt: Any


class InstallRequestDocument(TypedDict, total=False):
    """A document of the ``installRequests`` collection."""

    id: str
    userId: str
    groupId: str
    apkFileName: str
    apkHash: Optional[str]
    status: str
    userEmail: str
    updatedAt: Any
