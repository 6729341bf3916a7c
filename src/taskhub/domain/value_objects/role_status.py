"""Custom role lifecycle states."""

from enum import StrEnum


class RoleStatus(StrEnum):
    """draft -> active -> active (updates) -> deleted. Deleted is terminal."""

    DRAFT = "draft"
    ACTIVE = "active"
    DELETED = "deleted"


ROLE_TRANSITIONS: dict[RoleStatus, frozenset[RoleStatus]] = {
    RoleStatus.DRAFT: frozenset({RoleStatus.ACTIVE}),
    RoleStatus.ACTIVE: frozenset({RoleStatus.ACTIVE, RoleStatus.DELETED}),
    RoleStatus.DELETED: frozenset(),
}
