"""Role catalog - built-in role defaults and custom role permissions."""

from taskhub.application.dto.role_defaults import RoleDefaults
from taskhub.application.ports import UnitOfWork
from taskhub.domain.entities import CustomRole
from taskhub.domain.exceptions import RoleNotFound
from taskhub.domain.value_objects import (
    BuiltinRole,
    EffectivePermissions,
    ResourceRef,
    RoleBase,
    is_valid_object_id,
    merge_permissions,
)


class RoleCatalog:
    """Maps a role name or custom role to its effective permissions."""

    def __init__(self, defaults: RoleDefaults) -> None:
        self._defaults = defaults

    def builtin_permissions(self, role: str) -> EffectivePermissions:
        if not BuiltinRole.is_builtin(role):
            raise RoleNotFound(role)
        if role == BuiltinRole.ADMIN:
            return EffectivePermissions.everything()
        return EffectivePermissions(grants=self._defaults.for_role(role))

    def custom_role_permissions(
        self, role: CustomRole, resource: ResourceRef | None = None
    ) -> EffectivePermissions:
        """Base role defaults, then the role's own map, then its override for resource.

        A role based on admin keeps all_granted, so only explicit False entries
        restrict it.
        """
        layers = [role.permissions]
        if resource is not None:
            override = role.override_for(resource)
            if override is not None:
                layers.append(override.permissions)

        if role.based_on == RoleBase.ADMIN:
            return EffectivePermissions(grants=merge_permissions({}, *layers), all_granted=True)
        base = self._defaults.for_role(role.based_on)
        return EffectivePermissions(grants=merge_permissions(base, *layers))

    async def role_permissions(
        self,
        uow: UnitOfWork,
        role: str,
        organization_id: str,
        resource: ResourceRef | None = None,
    ) -> tuple[EffectivePermissions, str]:
        """Permissions and base role for a membership role value."""
        if BuiltinRole.is_builtin(role):
            return self.builtin_permissions(role), role
        if not is_valid_object_id(role):
            raise RoleNotFound(role)

        custom = await uow.custom_roles.get_by_id(role.lower(), organization_id)
        if custom is None or custom.is_deleted:
            raise RoleNotFound(role)
        return self.custom_role_permissions(custom, resource), str(custom.based_on)
