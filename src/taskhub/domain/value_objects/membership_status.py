"""Membership status."""

from enum import StrEnum


class MembershipStatus(StrEnum):
    """Lifecycle state of a membership. Only ACTIVE grants access."""

    ACTIVE = "active"
    INVITED = "invited"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"
    REMOVED = "removed"
