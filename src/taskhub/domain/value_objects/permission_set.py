"""Permission maps and effective permission sets."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from taskhub.domain.exceptions import ValidationError

PermissionMap = dict[str, bool]


def flatten_permissions(raw: Mapping[str, Any] | None, prefix: str = "") -> PermissionMap:
    """Flatten a nested permission map into dotted names.

    {"tasks": {"edit": True}, "read": False} -> {"tasks.edit": True, "read": False}
    """
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise ValidationError("Permissions must be an object")
    flat: PermissionMap = {}
    for key, value in raw.items():
        if not isinstance(key, str) or not key:
            raise ValidationError(f"Invalid permission name: {key!r}")
        name = f"{prefix}{key}"
        if isinstance(value, Mapping):
            flat.update(flatten_permissions(value, f"{name}."))
        elif isinstance(value, bool):
            flat[name] = value
        else:
            raise ValidationError(f"Permission {name!r} must be a boolean")
    return flat


def merge_permissions(base: Mapping[str, bool], *overrides: Mapping[str, bool]) -> PermissionMap:
    """Merge permission maps left to right; later maps win."""
    merged = dict(base)
    for override in overrides:
        merged.update(override)
    return merged


@dataclass(frozen=True)
class EffectivePermissions:
    """Resolved permissions for one membership, optionally for one resource.

    An explicit grant wins; names without one fall back to all_granted.
    """

    grants: Mapping[str, bool] = field(default_factory=dict)
    all_granted: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "grants", MappingProxyType(dict(self.grants)))

    @classmethod
    def everything(cls) -> "EffectivePermissions":
        return cls(grants={}, all_granted=True)

    def allows(self, permission: str) -> bool:
        value = self.grants.get(permission)
        if value is None:
            return self.all_granted
        return value

    def allows_all(self, permissions: tuple[str, ...] | list[str]) -> bool:
        return all(self.allows(p) for p in permissions)

    def merged(self, overrides: Mapping[str, bool] | None) -> "EffectivePermissions":
        if not overrides:
            return self
        return EffectivePermissions(
            grants=merge_permissions(self.grants, overrides),
            all_granted=self.all_granted,
        )

    def to_dict(self) -> dict[str, Any]:
        return {"all": self.all_granted, "grants": dict(self.grants)}
