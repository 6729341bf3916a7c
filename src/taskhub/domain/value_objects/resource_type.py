"""Resource types subject to access control."""

from enum import StrEnum

from taskhub.domain.exceptions import ValidationError


class ResourceType(StrEnum):
    PROJECT = "project"
    TEAM = "team"
    TASK = "task"
    NOTE = "note"

    @classmethod
    def parse(cls, value: object) -> "ResourceType":
        try:
            return cls(value)
        except ValueError:
            allowed = ", ".join(t.value for t in cls)
            raise ValidationError(
                f"Invalid resource type {value!r}, expected one of: {allowed}"
            ) from None
