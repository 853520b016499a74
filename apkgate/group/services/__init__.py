from .group_service import (
    AccessDenied,
    BatchTooLarge,
    CannotRemoveLeader,
    GroupNotFound,
    GroupService,
    MemberNotFound,
)
from .invitations import AlreadyInvited, AlreadyMember, create_invitation

__all__ = [
    "AccessDenied",
    "AlreadyInvited",
    "AlreadyMember",
    "BatchTooLarge",
    "CannotRemoveLeader",
    "GroupNotFound",
    "GroupService",
    "MemberNotFound",
    "create_invitation",
]
