"""Create organization use case."""

from datetime import UTC, datetime

import structlog

from taskhub.application.dto.role_defaults import (
    DEFAULT_TEMPLATES,
    SYSTEM_ROLES,
    RoleDefaults,
)
from taskhub.application.use_cases.role.create_role import clean_name
from taskhub.domain.entities import (
    CustomRole,
    Membership,
    Organization,
    PermissionTemplate,
)
from taskhub.domain.exceptions import UserNotFound
from taskhub.domain.value_objects import (
    BuiltinRole,
    MembershipStatus,
    RoleStatus,
    new_object_id,
)

log = structlog.get_logger()


class CreateOrganizationUseCase:
    """Create an organization with its creator as admin, system roles and default templates."""

    def __init__(self, unit_of_work_factory, role_defaults: RoleDefaults) -> None:
        self._uow_factory = unit_of_work_factory
        self._defaults = role_defaults

    async def execute(
        self, user_id: str, name: str, description: str = ""
    ) -> Organization:
        name = clean_name(name, "Organization")

        async with self._uow_factory() as uow:
            user = await uow.users.get_by_id(user_id)
            if user is None:
                raise UserNotFound(user_id)

            now = datetime.now(UTC)
            organization = Organization(
                id=new_object_id(),
                name=name,
                created_by=user_id,
                created_at=now,
                updated_at=now,
                description=description or "",
            )
            await uow.organizations.create(organization)

            await uow.memberships.create(
                Membership(
                    id=new_object_id(),
                    user_id=user_id,
                    organization_id=organization.id,
                    role=BuiltinRole.ADMIN,
                    joined_at=now,
                    created_at=now,
                    updated_at=now,
                    status=MembershipStatus.ACTIVE,
                    title="Owner",
                )
            )

            for seed in SYSTEM_ROLES:
                await uow.custom_roles.create(
                    CustomRole(
                        id=new_object_id(),
                        organization_id=organization.id,
                        name=seed.name,
                        based_on=seed.based_on,
                        created_at=now,
                        updated_at=now,
                        description=seed.description,
                        permissions=self._defaults.for_role(seed.based_on),
                        is_system_role=True,
                        status=RoleStatus.ACTIVE,
                        created_by=user_id,
                        updated_by=user_id,
                    )
                )

            for seed in DEFAULT_TEMPLATES:
                await uow.templates.create(
                    PermissionTemplate(
                        id=new_object_id(),
                        organization_id=organization.id,
                        name=seed.name,
                        created_at=now,
                        updated_at=now,
                        description=seed.description,
                        permissions=dict(seed.permissions),
                        applicable_resource_types=list(seed.applicable_resource_types),
                        is_default=True,
                        created_by=user_id,
                        updated_by=user_id,
                    )
                )

            if not user.current_organization_id:
                user.current_organization_id = organization.id
                user.updated_at = now
                await uow.users.update(user)

        log.info("organization.created", organization_id=organization.id, created_by=user_id)
        return organization
