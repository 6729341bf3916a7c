"""Unit tests for permission template use cases."""

import pytest

from taskhub.application.use_cases.role.set_resource_override import (
    SetResourceOverrideUseCase,
)
from taskhub.application.use_cases.template.apply_template import ApplyTemplateUseCase
from taskhub.application.use_cases.template.create_template import CreateTemplateUseCase
from taskhub.application.use_cases.template.delete_template import DeleteTemplateUseCase
from taskhub.application.use_cases.template.update_template import UpdateTemplateUseCase
from taskhub.domain.exceptions import (
    DefaultTemplateImmutable,
    DuplicateName,
    InsufficientRole,
    TemplateInUse,
    TemplateNotApplicable,
    TemplateNotFound,
    ValidationError,
)
from taskhub.domain.value_objects import ResourceType

from tests.conftest import make_template


def _use_case(cls, uow_factory, resolver):
    return cls(unit_of_work_factory=uow_factory, membership_resolver=resolver)


async def _add_template(scenario, name="Reviewers", types=(ResourceType.TASK,), **kwargs):
    template = make_template(scenario.org_id, name, {"tasks.edit": False, "tasks.view": True}, types, **kwargs)
    await scenario.uow.templates.create(template)
    return template


@pytest.mark.asyncio
async def test_create_template(uow_factory, resolver, scenario) -> None:
    create = _use_case(CreateTemplateUseCase, uow_factory, resolver)
    template = await create.execute(
        scenario.admin.id,
        scenario.org_id,
        "Readers",
        {"tasks": {"view": True}},
        ["task", "note", "task"],
    )
    assert template.permissions == {"tasks.view": True}
    assert template.applicable_resource_types == [ResourceType.TASK, ResourceType.NOTE]
    assert not template.is_default


@pytest.mark.asyncio
async def test_create_template_validation(uow_factory, resolver, scenario) -> None:
    create = _use_case(CreateTemplateUseCase, uow_factory, resolver)
    with pytest.raises(ValidationError):
        await create.execute(scenario.admin.id, scenario.org_id, "Empty", {}, [])
    with pytest.raises(ValidationError):
        await create.execute(scenario.admin.id, scenario.org_id, "Bad", {}, ["document"])
    await create.execute(scenario.admin.id, scenario.org_id, "Once", {}, ["task"])
    with pytest.raises(DuplicateName):
        await create.execute(scenario.admin.id, scenario.org_id, "Once", {}, ["task"])
    with pytest.raises(InsufficientRole):
        await create.execute(scenario.manager.id, scenario.org_id, "Manager's", {}, ["task"])


@pytest.mark.asyncio
async def test_update_template(uow_factory, resolver, scenario) -> None:
    template = await _add_template(scenario)
    update = _use_case(UpdateTemplateUseCase, uow_factory, resolver)
    updated = await update.execute(
        scenario.admin.id,
        scenario.org_id,
        template.id,
        permissions={"tasks.edit": True},
        applicable_resource_types=["project"],
    )
    assert updated.permissions == {"tasks.edit": True, "tasks.view": True}
    assert updated.applicable_resource_types == [ResourceType.PROJECT]

    with pytest.raises(TemplateNotFound):
        await update.execute(scenario.admin.id, scenario.org_id, "0" * 24, name="x")


@pytest.mark.asyncio
async def test_apply_template_writes_resource_override(uow_factory, resolver, evaluator, scenario, fake_uow) -> None:
    template = await _add_template(scenario)
    task = await scenario.add_resource(ResourceType.TASK, owner_id=scenario.admin.id)
    apply = _use_case(ApplyTemplateUseCase, uow_factory, resolver)

    application = await apply.execute(
        scenario.manager.id, scenario.org_id, template.id, "task", task.id
    )
    assert application.role_id is None
    override = await fake_uow.resource_overrides.get_for_resource(
        scenario.org_id, ResourceType.TASK, task.id
    )
    assert override.permissions == {"tasks.edit": False, "tasks.view": True}
    assert override.template_id == template.id

    # reapplying replaces the same override
    await apply.execute(scenario.manager.id, scenario.org_id, template.id, "task", task.id)
    again = await fake_uow.resource_overrides.get_for_resource(
        scenario.org_id, ResourceType.TASK, task.id
    )
    assert again.id == override.id
    assert len(await fake_uow.template_applications.list_by_template(template.id)) == 2

    resolved = await resolver.resolve(scenario.member.id, scenario.org_id, task.ref)
    assert not resolved.permissions.allows("tasks.edit")


@pytest.mark.asyncio
async def test_apply_template_to_role(uow_factory, resolver, scenario, fake_uow) -> None:
    template = await _add_template(scenario)
    role = await scenario.add_role("Contributor")
    task = await scenario.add_resource(ResourceType.TASK, owner_id=scenario.admin.id)
    apply = _use_case(ApplyTemplateUseCase, uow_factory, resolver)

    application = await apply.execute(
        scenario.admin.id, scenario.org_id, template.id, "task", task.id, role_id=role.id
    )
    assert application.role_id == role.id
    stored = await fake_uow.custom_roles.get_by_id(role.id, scenario.org_id)
    assert stored.override_for(task.ref).permissions == {"tasks.edit": False, "tasks.view": True}
    assert stored.override_for(task.ref).template_id == template.id
    assert (
        await fake_uow.resource_overrides.get_for_resource(
            scenario.org_id, ResourceType.TASK, task.id
        )
        is None
    )


@pytest.mark.asyncio
async def test_apply_template_not_applicable_changes_nothing(uow_factory, resolver, scenario, fake_uow) -> None:
    template = await _add_template(scenario, types=(ResourceType.PROJECT,))
    role = await scenario.add_role("Contributor")
    task = await scenario.add_resource(ResourceType.TASK, owner_id=scenario.admin.id)
    before = fake_uow.snapshot()
    apply = _use_case(ApplyTemplateUseCase, uow_factory, resolver)

    for role_id in (None, role.id):
        with pytest.raises(TemplateNotApplicable):
            await apply.execute(
                scenario.admin.id, scenario.org_id, template.id, "task", task.id, role_id=role_id
            )
    assert fake_uow.snapshot() == before


@pytest.mark.asyncio
async def test_apply_template_requires_manager(uow_factory, resolver, scenario) -> None:
    template = await _add_template(scenario)
    task = await scenario.add_resource(ResourceType.TASK, owner_id=scenario.member.id)
    apply = _use_case(ApplyTemplateUseCase, uow_factory, resolver)
    with pytest.raises(InsufficientRole):
        await apply.execute(scenario.member.id, scenario.org_id, template.id, "task", task.id)


@pytest.mark.asyncio
async def test_delete_template(uow_factory, resolver, scenario, fake_uow) -> None:
    template = await _add_template(scenario)
    delete = _use_case(DeleteTemplateUseCase, uow_factory, resolver)
    await delete.execute(scenario.admin.id, scenario.org_id, template.id)
    assert await fake_uow.templates.get_by_id(template.id, scenario.org_id) is None


@pytest.mark.asyncio
async def test_delete_default_template_rejected(uow_factory, resolver, scenario) -> None:
    template = await _add_template(scenario, is_default=True)
    delete = _use_case(DeleteTemplateUseCase, uow_factory, resolver)
    with pytest.raises(DefaultTemplateImmutable):
        await delete.execute(scenario.admin.id, scenario.org_id, template.id, cascade=True)


@pytest.mark.asyncio
async def test_delete_applied_template_needs_cascade(uow_factory, resolver, scenario, fake_uow) -> None:
    template = await _add_template(scenario)
    role = await scenario.add_role("Contributor")
    task = await scenario.add_resource(ResourceType.TASK, owner_id=scenario.admin.id)
    apply = _use_case(ApplyTemplateUseCase, uow_factory, resolver)
    delete = _use_case(DeleteTemplateUseCase, uow_factory, resolver)
    await apply.execute(scenario.admin.id, scenario.org_id, template.id, "task", task.id)
    await apply.execute(
        scenario.admin.id, scenario.org_id, template.id, "task", task.id, role_id=role.id
    )

    with pytest.raises(TemplateInUse):
        await delete.execute(scenario.admin.id, scenario.org_id, template.id)

    await delete.execute(scenario.admin.id, scenario.org_id, template.id, cascade=True)
    assert await fake_uow.templates.get_by_id(template.id, scenario.org_id) is None
    assert await fake_uow.template_applications.list_by_template(template.id) == []
    assert (
        await fake_uow.resource_overrides.get_for_resource(
            scenario.org_id, ResourceType.TASK, task.id
        )
        is None
    )
    stored = await fake_uow.custom_roles.get_by_id(role.id, scenario.org_id)
    assert stored.resource_overrides == []


@pytest.mark.asyncio
async def test_cascade_keeps_override_edited_after_apply(uow_factory, resolver, scenario, fake_uow) -> None:
    template = await _add_template(scenario)
    role = await scenario.add_role("Contributor")
    task = await scenario.add_resource(ResourceType.TASK, owner_id=scenario.admin.id)
    apply = _use_case(ApplyTemplateUseCase, uow_factory, resolver)
    set_override = _use_case(SetResourceOverrideUseCase, uow_factory, resolver)
    delete = _use_case(DeleteTemplateUseCase, uow_factory, resolver)

    await apply.execute(
        scenario.admin.id, scenario.org_id, template.id, "task", task.id, role_id=role.id
    )
    edited = await set_override.execute(
        scenario.admin.id, scenario.org_id, role.id, "task", task.id, {"tasks.edit": True}
    )
    assert edited.override_for(task.ref).template_id is None

    await delete.execute(scenario.admin.id, scenario.org_id, template.id, cascade=True)
    stored = await fake_uow.custom_roles.get_by_id(role.id, scenario.org_id)
    assert stored.override_for(task.ref).permissions == {"tasks.edit": True}


@pytest.mark.asyncio
async def test_cascade_keeps_overrides_of_later_template(uow_factory, resolver, scenario, fake_uow) -> None:
    first = await _add_template(scenario, "Locked")
    second = make_template(scenario.org_id, "Open", {"tasks.edit": True}, (ResourceType.TASK,))
    await fake_uow.templates.create(second)
    role = await scenario.add_role("Contributor")
    task = await scenario.add_resource(ResourceType.TASK, owner_id=scenario.admin.id)
    apply = _use_case(ApplyTemplateUseCase, uow_factory, resolver)
    delete = _use_case(DeleteTemplateUseCase, uow_factory, resolver)

    for template in (first, second):
        await apply.execute(scenario.admin.id, scenario.org_id, template.id, "task", task.id)
        await apply.execute(
            scenario.admin.id, scenario.org_id, template.id, "task", task.id, role_id=role.id
        )

    await delete.execute(scenario.admin.id, scenario.org_id, first.id, cascade=True)

    stored = await fake_uow.custom_roles.get_by_id(role.id, scenario.org_id)
    assert stored.override_for(task.ref).template_id == second.id
    resource_override = await fake_uow.resource_overrides.get_for_resource(
        scenario.org_id, ResourceType.TASK, task.id
    )
    assert resource_override.template_id == second.id
    assert len(await fake_uow.template_applications.list_by_template(second.id)) == 2
    assert await fake_uow.template_applications.list_by_template(first.id) == []
