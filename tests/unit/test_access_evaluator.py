"""Unit tests for ResourceAccessEvaluator."""

import pytest

from taskhub.application.dto.access import AccessGrant, AccessRequirement
from taskhub.domain.exceptions import (
    AccessDenied,
    InsufficientPermission,
    InvalidId,
    PermissionDenied,
    ResourceNotFound,
    ValidationError,
)
from taskhub.domain.value_objects import (
    CollaboratorGating,
    ResourceAction,
    ResourceType,
    RoleBase,
    RoleStatus,
    new_object_id,
)
from taskhub.infrastructure.permission.access_evaluator import ResourceAccessEvaluator

WRITE = AccessRequirement(action=ResourceAction.WRITE)


@pytest.mark.asyncio
async def test_owner_always_granted(evaluator, scenario) -> None:
    """Ownership wins even without any organization membership."""
    note = await scenario.add_resource(ResourceType.NOTE, owner_id=scenario.outsider.id)
    decision = await evaluator.evaluate(
        scenario.outsider.id,
        note,
        AccessRequirement(action=ResourceAction.DELETE, permission="notes.delete"),
    )
    assert decision.allowed
    assert decision.grant == AccessGrant.OWNER
    assert decision.membership is None


@pytest.mark.asyncio
async def test_public_resource(evaluator, scenario) -> None:
    task = await scenario.add_resource(
        ResourceType.TASK, owner_id=scenario.admin.id, is_shared=True
    )
    decision = await evaluator.evaluate(scenario.outsider.id, task)
    assert decision.grant == AccessGrant.PUBLIC


@pytest.mark.asyncio
async def test_shared_with_user(evaluator, scenario) -> None:
    task = await scenario.add_resource(
        ResourceType.TASK,
        owner_id=scenario.admin.id,
        organization_id=None,
        shared_with={scenario.outsider.id},
    )
    decision = await evaluator.evaluate(scenario.outsider.id, task)
    assert decision.grant == AccessGrant.SHARED

    stranger = await scenario.add_user(None)
    denied = await evaluator.evaluate(stranger.id, task)
    assert not denied.allowed
    assert isinstance(denied.error, AccessDenied)


@pytest.mark.asyncio
async def test_sharing_ignored_for_projects(evaluator, scenario) -> None:
    project = await scenario.add_resource(
        ResourceType.PROJECT,
        owner_id=scenario.admin.id,
        is_shared=True,
        shared_with={scenario.outsider.id},
    )
    decision = await evaluator.evaluate(scenario.outsider.id, project)
    assert not decision.allowed
    assert decision.error.code == "NOT_ORGANIZATION_MEMBER"


@pytest.mark.asyncio
async def test_strict_collaborator_gating(evaluator, scenario) -> None:
    note = await scenario.add_resource(
        ResourceType.NOTE,
        owner_id=scenario.admin.id,
        organization_id=None,
        collaborators=[(scenario.outsider.id, "viewer")],
    )
    read = await evaluator.evaluate(scenario.outsider.id, note)
    assert read.grant == AccessGrant.COLLABORATOR

    write = await evaluator.evaluate(scenario.outsider.id, note, WRITE)
    assert not write.allowed
    assert isinstance(write.error, PermissionDenied)
    assert write.error.code == "PERMISSION_DENIED"
    with pytest.raises(PermissionDenied):
        write.unwrap()


@pytest.mark.asyncio
async def test_lenient_collaborator_gating(uow_factory, resolver, scenario) -> None:
    lenient = ResourceAccessEvaluator(uow_factory, resolver, CollaboratorGating.LENIENT)
    note = await scenario.add_resource(
        ResourceType.NOTE,
        owner_id=scenario.admin.id,
        organization_id=None,
        collaborators=[(scenario.outsider.id, "viewer")],
    )
    decision = await lenient.evaluate(scenario.outsider.id, note, WRITE)
    assert decision.grant == AccessGrant.COLLABORATOR


@pytest.mark.asyncio
async def test_viewer_collaborator_falls_through_to_organization(evaluator, scenario) -> None:
    """A collaborator denial is only reported when no later path grants access."""
    note = await scenario.add_resource(
        ResourceType.NOTE,
        owner_id=scenario.admin.id,
        collaborators=[(scenario.member.id, "viewer")],
    )
    decision = await evaluator.evaluate(scenario.member.id, note, WRITE)
    assert decision.grant == AccessGrant.ORGANIZATION


@pytest.mark.asyncio
async def test_member_lacking_permission_vs_admin(evaluator, scenario, fake_uow) -> None:
    membership = await fake_uow.memberships.get_active(scenario.member.id, scenario.org_id)
    membership.permissions = {"tasks.read": True, "tasks.write": False}
    await fake_uow.memberships.update(membership)
    task = await scenario.add_resource(ResourceType.TASK, owner_id=scenario.manager.id)

    requirement = AccessRequirement(action=ResourceAction.WRITE, permission="tasks.write")
    denied = await evaluator.evaluate(scenario.member.id, task, requirement)
    assert not denied.allowed
    assert isinstance(denied.error, InsufficientPermission)
    assert denied.error.code == "INSUFFICIENT_PERMISSIONS"
    assert denied.membership.role == "member"

    granted = await evaluator.evaluate(scenario.admin.id, task, requirement)
    assert granted.grant == AccessGrant.ORGANIZATION
    assert granted.membership.is_admin


@pytest.mark.asyncio
async def test_role_requirement(evaluator, scenario) -> None:
    project = await scenario.add_resource(ResourceType.PROJECT, owner_id=scenario.admin.id)
    requirement = AccessRequirement(roles=("manager",))
    assert (await evaluator.evaluate(scenario.manager.id, project, requirement)).allowed
    denied = await evaluator.evaluate(scenario.guest.id, project, requirement)
    assert denied.error.code == "INSUFFICIENT_ROLE"


@pytest.mark.asyncio
async def test_custom_role_satisfies_base_role_requirement(evaluator, scenario) -> None:
    role = await scenario.add_role("Lead", RoleBase.MANAGER)
    lead = await scenario.add_user(role.id)
    project = await scenario.add_resource(ResourceType.PROJECT, owner_id=scenario.admin.id)
    decision = await evaluator.evaluate(lead.id, project, AccessRequirement(roles=("manager",)))
    assert decision.allowed


@pytest.mark.asyncio
async def test_role_override_only_affects_its_resource(evaluator, scenario, fake_uow) -> None:
    role = await scenario.add_role("Contributor", RoleBase.MEMBER)
    user = await scenario.add_user(role.id)
    locked = await scenario.add_resource(ResourceType.TASK, owner_id=scenario.admin.id)
    other = await scenario.add_resource(ResourceType.TASK, owner_id=scenario.admin.id)

    stored = await fake_uow.custom_roles.get_by_id(role.id, scenario.org_id)
    stored.set_override(locked.ref, {"tasks.edit": False})
    await fake_uow.custom_roles.update(stored)

    requirement = AccessRequirement(action=ResourceAction.WRITE, permission="tasks.edit")
    assert not (await evaluator.evaluate(user.id, locked, requirement)).allowed
    assert (await evaluator.evaluate(user.id, other, requirement)).allowed


@pytest.mark.asyncio
async def test_no_path_denies(evaluator, scenario) -> None:
    task = await scenario.add_resource(
        ResourceType.TASK, owner_id=scenario.admin.id, organization_id=None
    )
    decision = await evaluator.evaluate(scenario.member.id, task)
    assert not decision.allowed
    assert decision.error.code == "RESOURCE_ACCESS_DENIED"
    assert decision.to_dict()["allowed"] is False


@pytest.mark.asyncio
async def test_evaluate_by_id(evaluator, scenario) -> None:
    task = await scenario.add_resource(ResourceType.TASK, owner_id=scenario.member.id)
    decision = await evaluator.evaluate_by_id(scenario.member.id, "task", task.id.upper())
    assert decision.grant == AccessGrant.OWNER

    with pytest.raises(InvalidId):
        await evaluator.evaluate_by_id(scenario.member.id, "task", "bogus")
    with pytest.raises(ValidationError):
        await evaluator.evaluate_by_id(scenario.member.id, "document", task.id)
    with pytest.raises(ResourceNotFound):
        await evaluator.evaluate_by_id(scenario.member.id, "note", task.id)
    with pytest.raises(ResourceNotFound):
        await evaluator.evaluate_by_id(scenario.member.id, "task", new_object_id())


@pytest.mark.asyncio
async def test_organization_path_checks_action_permission(evaluator, scenario) -> None:
    """Without an explicit permission the action maps to the catalog entry for the type."""
    task = await scenario.add_resource(ResourceType.TASK, owner_id=scenario.admin.id)
    delete = AccessRequirement(action=ResourceAction.DELETE)

    denied = await evaluator.evaluate(scenario.guest.id, task, delete)
    assert not denied.allowed
    assert isinstance(denied.error, InsufficientPermission)
    assert denied.error.permissions == ("tasks.delete",)
    assert denied.membership.base_role == "guest"

    read = await evaluator.evaluate(scenario.member.id, task)
    assert read.grant == AccessGrant.ORGANIZATION
    assert not (await evaluator.evaluate(scenario.member.id, task, delete)).allowed
    assert (await evaluator.evaluate(scenario.manager.id, task, delete)).allowed


@pytest.mark.asyncio
async def test_guest_cannot_edit_organization_note(evaluator, scenario) -> None:
    note = await scenario.add_resource(ResourceType.NOTE, owner_id=scenario.admin.id)
    assert (await evaluator.evaluate(scenario.guest.id, note)).allowed
    denied = await evaluator.evaluate(scenario.guest.id, note, WRITE)
    assert denied.error.permissions == ("notes.edit",)
    assert (await evaluator.evaluate(scenario.member.id, note, WRITE)).allowed


@pytest.mark.asyncio
async def test_share_through_organization_needs_admin(evaluator, scenario) -> None:
    task = await scenario.add_resource(ResourceType.TASK, owner_id=scenario.member.id)
    share = AccessRequirement(action=ResourceAction.SHARE)

    denied = await evaluator.evaluate(scenario.manager.id, task, share)
    assert denied.error.code == "INSUFFICIENT_ROLE"
    assert (await evaluator.evaluate(scenario.admin.id, task, share)).allowed
    assert (await evaluator.evaluate(scenario.member.id, task, share)).grant == AccessGrant.OWNER


@pytest.mark.asyncio
async def test_deleted_custom_role_yields_denial(evaluator, scenario, fake_uow) -> None:
    role = await scenario.add_role("Temporary")
    user = await scenario.add_user(role.id)
    stored = await fake_uow.custom_roles.get_by_id(role.id, scenario.org_id)
    stored.transition(RoleStatus.DELETED)
    await fake_uow.custom_roles.update(stored)
    task = await scenario.add_resource(ResourceType.TASK, owner_id=scenario.admin.id)

    decision = await evaluator.evaluate(user.id, task)
    assert not decision.allowed
    assert isinstance(decision.error, AccessDenied)
    assert decision.to_dict()["error"] == "RESOURCE_ACCESS_DENIED"
