"""Built-in organization roles."""

from enum import StrEnum


class BuiltinRole(StrEnum):
    """Roles every organization has without defining them."""

    ADMIN = "admin"
    MANAGER = "manager"
    MEMBER = "member"
    GUEST = "guest"

    @classmethod
    def is_builtin(cls, value: str) -> bool:
        return value in cls._value2member_map_


class RoleBase(StrEnum):
    """Base a custom role derives its defaults from."""

    ADMIN = "admin"
    MANAGER = "manager"
    MEMBER = "member"
    GUEST = "guest"
    CUSTOM = "custom"
