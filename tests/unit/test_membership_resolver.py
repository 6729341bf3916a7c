"""Unit tests for OrganizationMembershipResolver."""

from datetime import UTC, datetime

import pytest

from taskhub.domain.entities import ResourceOverride
from taskhub.domain.exceptions import (
    DuplicateMembership,
    InsufficientPermission,
    InsufficientRole,
    InvalidOrganizationId,
    NoOrganizationMembership,
    NotAMember,
    OrganizationRequired,
    RoleNotFound,
    UserNotFound,
)
from taskhub.domain.value_objects import (
    MembershipStatus,
    ResourceType,
    RoleBase,
    RoleStatus,
    new_object_id,
)

from tests.conftest import make_membership


@pytest.mark.asyncio
async def test_resolve_explicit_organization(resolver, scenario) -> None:
    resolved = await resolver.resolve(scenario.member.id, scenario.org_id)
    assert resolved.organization_id == scenario.org_id
    assert resolved.role == "member"
    assert resolved.base_role == "member"
    assert resolved.permissions.allows("tasks.edit")
    assert not resolved.permissions.allows("tasks.delete")


@pytest.mark.asyncio
async def test_resolve_falls_back_to_current_organization(resolver, scenario) -> None:
    resolved = await resolver.resolve(scenario.manager.id, None)
    assert resolved.organization_id == scenario.org_id


@pytest.mark.asyncio
async def test_resolve_without_current_organization(resolver, scenario) -> None:
    with pytest.raises(OrganizationRequired):
        await resolver.resolve(scenario.outsider.id, None)


@pytest.mark.asyncio
async def test_resolve_unknown_user(resolver, scenario) -> None:
    with pytest.raises(UserNotFound):
        await resolver.resolve(new_object_id(), None)


@pytest.mark.asyncio
async def test_resolve_invalid_organization_id(resolver, scenario) -> None:
    with pytest.raises(InvalidOrganizationId) as exc_info:
        await resolver.resolve(scenario.member.id, "not-an-id")
    assert exc_info.value.code == "INVALID_ID"


@pytest.mark.asyncio
async def test_resolve_non_member(resolver, scenario) -> None:
    with pytest.raises(NotAMember):
        await resolver.resolve(scenario.outsider.id, scenario.org_id)


@pytest.mark.asyncio
async def test_inactive_membership_is_not_membership(resolver, scenario, fake_uow) -> None:
    membership = await fake_uow.memberships.get_active(scenario.guest.id, scenario.org_id)
    membership.status = MembershipStatus.SUSPENDED
    await fake_uow.memberships.update(membership)
    with pytest.raises(NotAMember):
        await resolver.resolve(scenario.guest.id, scenario.org_id)


@pytest.mark.asyncio
async def test_admin_has_everything_with_empty_defaults(resolver, scenario) -> None:
    resolved = await resolver.resolve(scenario.admin.id, scenario.org_id)
    assert resolved.is_admin
    assert resolved.permissions.allows("organization.manageBilling")
    assert resolved.has_permission("made.up.permission")


@pytest.mark.asyncio
async def test_membership_overrides_win_over_role(resolver, scenario, fake_uow) -> None:
    membership = await fake_uow.memberships.get_active(scenario.member.id, scenario.org_id)
    membership.permissions = {"tasks.delete": True, "tasks.edit": False}
    await fake_uow.memberships.update(membership)

    resolved = await resolver.resolve(scenario.member.id, scenario.org_id)
    assert resolved.permissions.allows("tasks.delete")
    assert not resolved.permissions.allows("tasks.edit")


@pytest.mark.asyncio
async def test_custom_role_membership(resolver, scenario, fake_uow) -> None:
    role = await scenario.add_role("Reviewer", RoleBase.GUEST, permissions={"comments.resolve": True})
    user = await scenario.add_user(role.id)

    resolved = await resolver.resolve(user.id, scenario.org_id)
    assert resolved.role == role.id
    assert resolved.base_role == "guest"
    assert resolved.has_role(("guest",))
    assert resolved.permissions.allows("comments.resolve")
    assert not resolved.permissions.allows("tasks.edit")


@pytest.mark.asyncio
async def test_deleted_custom_role_is_not_found(resolver, scenario, fake_uow) -> None:
    role = await scenario.add_role("Gone", status=RoleStatus.ACTIVE)
    user = await scenario.add_user(role.id)
    role.transition(RoleStatus.DELETED)
    await fake_uow.custom_roles.update(role)

    with pytest.raises(RoleNotFound):
        await resolver.resolve(user.id, scenario.org_id)


@pytest.mark.asyncio
async def test_resource_override_merges_last(resolver, scenario, fake_uow) -> None:
    task = await scenario.add_resource(ResourceType.TASK, owner_id=scenario.admin.id)
    now = datetime.now(UTC)
    await fake_uow.resource_overrides.upsert(
        ResourceOverride(
            id=new_object_id(),
            organization_id=scenario.org_id,
            resource_type=ResourceType.TASK,
            resource_id=task.id,
            created_at=now,
            updated_at=now,
            permissions={"tasks.edit": False},
        )
    )

    on_task = await resolver.resolve(scenario.member.id, scenario.org_id, task.ref)
    assert not on_task.permissions.allows("tasks.edit")
    org_wide = await resolver.resolve(scenario.member.id, scenario.org_id)
    assert org_wide.permissions.allows("tasks.edit")


@pytest.mark.asyncio
async def test_check_role(resolver, scenario) -> None:
    resolved = await resolver.check_role(scenario.manager.id, scenario.org_id, ("admin", "manager"))
    assert resolved.role == "manager"
    with pytest.raises(InsufficientRole):
        await resolver.check_role(scenario.member.id, scenario.org_id, ("admin", "manager"))
    # admin passes any role check
    await resolver.check_role(scenario.admin.id, scenario.org_id, ("guest",))


@pytest.mark.asyncio
async def test_check_permission(resolver, scenario) -> None:
    await resolver.check_permission(scenario.member.id, scenario.org_id, ["tasks.view", "tasks.edit"])
    with pytest.raises(InsufficientPermission) as exc_info:
        await resolver.check_permission(
            scenario.member.id, scenario.org_id, ["tasks.edit", "tasks.delete"]
        )
    assert exc_info.value.permissions == ("tasks.delete",)


@pytest.mark.asyncio
async def test_require_any_membership(resolver, scenario) -> None:
    memberships = await resolver.require_any_membership(scenario.member.id)
    assert [m.organization_id for m in memberships] == [scenario.org_id]
    with pytest.raises(NoOrganizationMembership):
        await resolver.require_any_membership(scenario.outsider.id)


@pytest.mark.asyncio
async def test_duplicate_active_membership_conflicts(scenario, fake_uow) -> None:
    with pytest.raises(DuplicateMembership):
        await fake_uow.memberships.create(
            make_membership(scenario.member.id, scenario.org_id, "guest")
        )
