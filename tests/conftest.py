"""Pytest fixtures for TaskHub tests."""

from __future__ import annotations

import copy
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import UTC, datetime

import pytest
import pytest_asyncio

from taskhub.application.dto.role_defaults import RoleDefaults
from taskhub.domain.entities import (
    Collaborator,
    CustomRole,
    Membership,
    Organization,
    PermissionTemplate,
    Resource,
    ResourceOverride,
    TemplateApplication,
    User,
)
from taskhub.domain.exceptions import DuplicateMembership, DuplicateName
from taskhub.domain.value_objects import (
    BuiltinRole,
    CollaboratorGating,
    CollaboratorRole,
    MembershipStatus,
    ResourceType,
    RoleBase,
    RoleStatus,
    new_object_id,
)
from taskhub.infrastructure.permission.access_evaluator import ResourceAccessEvaluator
from taskhub.infrastructure.permission.membership_resolver import (
    OrganizationMembershipResolver,
)
from taskhub.infrastructure.permission.role_catalog import RoleCatalog


# --- Fake repositories ---
# Reads and writes copy entities so that unsaved changes never leak into the
# store, like a real database.


class FakeUserRepository:
    """In-memory user repository."""

    def __init__(self) -> None:
        self._by_id: dict[str, User] = {}

    async def get_by_id(self, user_id: str) -> User | None:
        return copy.deepcopy(self._by_id.get(user_id))

    async def get_by_email(self, email: str) -> User | None:
        for user in self._by_id.values():
            if user.email.lower() == email.lower():
                return copy.deepcopy(user)
        return None

    async def create(self, user: User) -> User:
        self._by_id[user.id] = copy.deepcopy(user)
        return user

    async def update(self, user: User) -> None:
        self._by_id[user.id] = copy.deepcopy(user)


class FakeOrganizationRepository:
    """In-memory organization repository."""

    def __init__(self) -> None:
        self._by_id: dict[str, Organization] = {}

    async def get_by_id(self, organization_id: str) -> Organization | None:
        return copy.deepcopy(self._by_id.get(organization_id))

    async def create(self, organization: Organization) -> Organization:
        self._by_id[organization.id] = copy.deepcopy(organization)
        return organization

    async def update(self, organization: Organization) -> None:
        self._by_id[organization.id] = copy.deepcopy(organization)


class FakeMembershipRepository:
    """In-memory membership repository; one active membership per (user, organization)."""

    def __init__(self) -> None:
        self._by_id: dict[str, Membership] = {}

    def _check_unique(self, membership: Membership) -> None:
        if not membership.is_active:
            return
        for other in self._by_id.values():
            if (
                other.id != membership.id
                and other.is_active
                and other.user_id == membership.user_id
                and other.organization_id == membership.organization_id
            ):
                raise DuplicateMembership(membership.user_id, membership.organization_id)

    async def get_by_id(self, membership_id: str) -> Membership | None:
        return copy.deepcopy(self._by_id.get(membership_id))

    async def get_active(self, user_id: str, organization_id: str) -> Membership | None:
        for m in self._by_id.values():
            if m.is_active and m.user_id == user_id and m.organization_id == organization_id:
                return copy.deepcopy(m)
        return None

    async def get_invited(self, user_id: str, organization_id: str) -> Membership | None:
        for m in self._by_id.values():
            if (
                m.status == MembershipStatus.INVITED
                and m.user_id == user_id
                and m.organization_id == organization_id
            ):
                return copy.deepcopy(m)
        return None

    async def list_active_by_user(self, user_id: str) -> list[Membership]:
        return [
            copy.deepcopy(m)
            for m in self._by_id.values()
            if m.is_active and m.user_id == user_id
        ]

    async def list_invited_by_user(self, user_id: str) -> list[Membership]:
        return [
            copy.deepcopy(m)
            for m in self._by_id.values()
            if m.status == MembershipStatus.INVITED and m.user_id == user_id
        ]

    async def list_by_organization(
        self, organization_id: str, *, include_removed: bool = False
    ) -> list[Membership]:
        return [
            copy.deepcopy(m)
            for m in self._by_id.values()
            if m.organization_id == organization_id
            and (include_removed or m.status != MembershipStatus.REMOVED)
        ]

    async def list_by_role(self, organization_id: str, role: str) -> list[Membership]:
        return [
            copy.deepcopy(m)
            for m in self._by_id.values()
            if m.status != MembershipStatus.REMOVED
            and m.organization_id == organization_id
            and m.role == role
        ]

    async def count_active_admins(self, organization_id: str) -> int:
        return sum(
            1
            for m in self._by_id.values()
            if m.is_active and m.is_admin and m.organization_id == organization_id
        )

    async def create(self, membership: Membership) -> Membership:
        self._check_unique(membership)
        self._by_id[membership.id] = copy.deepcopy(membership)
        return membership

    async def update(self, membership: Membership) -> None:
        self._check_unique(membership)
        self._by_id[membership.id] = copy.deepcopy(membership)

    async def reassign_role(self, organization_id: str, old_role: str, new_role: str) -> int:
        count = 0
        for m in self._by_id.values():
            if (
                m.status != MembershipStatus.REMOVED
                and m.organization_id == organization_id
                and m.role == old_role
            ):
                m.role = new_role
                m.updated_at = datetime.now(UTC)
                count += 1
        return count


class FakeCustomRoleRepository:
    """In-memory custom role repository; names unique among non-deleted roles."""

    def __init__(self) -> None:
        self._by_id: dict[str, CustomRole] = {}

    def _check_unique(self, role: CustomRole) -> None:
        if role.is_deleted:
            return
        for other in self._by_id.values():
            if (
                other.id != role.id
                and not other.is_deleted
                and other.organization_id == role.organization_id
                and other.name == role.name
            ):
                raise DuplicateName("role", role.name)

    async def get_by_id(
        self, role_id: str, organization_id: str, include_deleted: bool = False
    ) -> CustomRole | None:
        role = self._by_id.get(role_id)
        if role is None or role.organization_id != organization_id:
            return None
        if role.is_deleted and not include_deleted:
            return None
        return copy.deepcopy(role)

    async def get_by_name(self, organization_id: str, name: str) -> CustomRole | None:
        for role in self._by_id.values():
            if role.organization_id == organization_id and role.name == name and not role.is_deleted:
                return copy.deepcopy(role)
        return None

    async def list_by_organization(
        self, organization_id: str, include_deleted: bool = False
    ) -> list[CustomRole]:
        roles = [
            copy.deepcopy(r)
            for r in self._by_id.values()
            if r.organization_id == organization_id and (include_deleted or not r.is_deleted)
        ]
        roles.sort(key=lambda r: r.name)
        return roles

    async def create(self, role: CustomRole) -> CustomRole:
        self._check_unique(role)
        self._by_id[role.id] = copy.deepcopy(role)
        return role

    async def update(self, role: CustomRole) -> None:
        self._check_unique(role)
        self._by_id[role.id] = copy.deepcopy(role)


class FakeTemplateRepository:
    """In-memory permission template repository."""

    def __init__(self) -> None:
        self._by_id: dict[str, PermissionTemplate] = {}

    def _check_unique(self, template: PermissionTemplate) -> None:
        for other in self._by_id.values():
            if (
                other.id != template.id
                and other.organization_id == template.organization_id
                and other.name == template.name
            ):
                raise DuplicateName("permission template", template.name)

    async def get_by_id(
        self, template_id: str, organization_id: str
    ) -> PermissionTemplate | None:
        template = self._by_id.get(template_id)
        if template is None or template.organization_id != organization_id:
            return None
        return copy.deepcopy(template)

    async def get_by_name(self, organization_id: str, name: str) -> PermissionTemplate | None:
        for template in self._by_id.values():
            if template.organization_id == organization_id and template.name == name:
                return copy.deepcopy(template)
        return None

    async def list(self, organization_id: str) -> list[PermissionTemplate]:
        items = [
            copy.deepcopy(t) for t in self._by_id.values() if t.organization_id == organization_id
        ]
        items.sort(key=lambda t: t.name)
        return items

    async def create(self, template: PermissionTemplate) -> PermissionTemplate:
        self._check_unique(template)
        self._by_id[template.id] = copy.deepcopy(template)
        return template

    async def update(self, template: PermissionTemplate) -> None:
        self._check_unique(template)
        self._by_id[template.id] = copy.deepcopy(template)

    async def delete(self, template_id: str) -> None:
        self._by_id.pop(template_id, None)


class FakeTemplateApplicationRepository:
    """In-memory template application log."""

    def __init__(self) -> None:
        self._by_id: dict[str, TemplateApplication] = {}

    async def list_by_template(self, template_id: str) -> list[TemplateApplication]:
        return [
            copy.deepcopy(a) for a in self._by_id.values() if a.template_id == template_id
        ]

    async def create(self, application: TemplateApplication) -> TemplateApplication:
        self._by_id[application.id] = copy.deepcopy(application)
        return application

    async def delete_by_template(self, template_id: str) -> None:
        self._by_id = {k: a for k, a in self._by_id.items() if a.template_id != template_id}


class FakeResourceRepository:
    """In-memory resource access metadata."""

    def __init__(self) -> None:
        self._by_id: dict[str, Resource] = {}

    async def get_by_id(self, resource_type: ResourceType, resource_id: str) -> Resource | None:
        resource = self._by_id.get(resource_id)
        if resource is None or resource.resource_type != resource_type:
            return None
        return copy.deepcopy(resource)

    async def create(self, resource: Resource) -> Resource:
        self._by_id[resource.id] = copy.deepcopy(resource)
        return resource

    async def update(self, resource: Resource) -> None:
        self._by_id[resource.id] = copy.deepcopy(resource)


class FakeResourceOverrideRepository:
    """In-memory resource overrides; one per (organization, resource)."""

    def __init__(self) -> None:
        self._by_id: dict[str, ResourceOverride] = {}

    async def get_for_resource(
        self, organization_id: str, resource_type: ResourceType, resource_id: str
    ) -> ResourceOverride | None:
        for o in self._by_id.values():
            if (
                o.organization_id == organization_id
                and o.resource_type == resource_type
                and o.resource_id == resource_id
            ):
                return copy.deepcopy(o)
        return None

    async def list_by_template(self, template_id: str) -> list[ResourceOverride]:
        return [copy.deepcopy(o) for o in self._by_id.values() if o.template_id == template_id]

    async def upsert(self, override: ResourceOverride) -> ResourceOverride:
        existing = await self.get_for_resource(
            override.organization_id, override.resource_type, override.resource_id
        )
        if existing is not None:
            self._by_id.pop(existing.id, None)
        self._by_id[override.id] = copy.deepcopy(override)
        return override

    async def delete(self, override_id: str) -> None:
        self._by_id.pop(override_id, None)


class FakeUnitOfWork:
    """In-memory Unit of Work with fake repositories."""

    def __init__(self) -> None:
        self.users = FakeUserRepository()
        self.organizations = FakeOrganizationRepository()
        self.memberships = FakeMembershipRepository()
        self.custom_roles = FakeCustomRoleRepository()
        self.templates = FakeTemplateRepository()
        self.template_applications = FakeTemplateApplicationRepository()
        self.resources = FakeResourceRepository()
        self.resource_overrides = FakeResourceOverrideRepository()
        self.commits = 0
        self.rollbacks = 0

    def _repositories(self) -> tuple:
        return (
            self.users,
            self.organizations,
            self.memberships,
            self.custom_roles,
            self.templates,
            self.template_applications,
            self.resources,
            self.resource_overrides,
        )

    def snapshot(self) -> list[dict]:
        return [copy.deepcopy(repo._by_id) for repo in self._repositories()]

    def restore(self, snapshot: list[dict]) -> None:
        for repo, data in zip(self._repositories(), snapshot, strict=True):
            repo._by_id = data

    async def commit(self) -> None:
        self.commits += 1

    async def rollback(self) -> None:
        self.rollbacks += 1


def make_uow_factory(uow: FakeUnitOfWork):
    """Factory sharing one store; an exception inside the block rolls it back."""

    @asynccontextmanager
    async def factory() -> AsyncIterator[FakeUnitOfWork]:
        snapshot = uow.snapshot()
        try:
            yield uow
        except BaseException:
            uow.restore(snapshot)
            await uow.rollback()
            raise
        await uow.commit()

    return factory


# --- Builders ---


def _now() -> datetime:
    return datetime.now(UTC)


def make_user(**kwargs) -> User:
    uid = kwargs.pop("id", None) or new_object_id()
    now = _now()
    return User(
        id=uid,
        email=kwargs.pop("email", f"{uid}@example.com"),
        username=kwargs.pop("username", f"user-{uid[-6:]}"),
        created_at=now,
        updated_at=now,
        **kwargs,
    )


def make_membership(user_id: str, organization_id: str, role: str, **kwargs) -> Membership:
    now = _now()
    return Membership(
        id=kwargs.pop("id", None) or new_object_id(),
        user_id=user_id,
        organization_id=organization_id,
        role=role,
        joined_at=now,
        created_at=now,
        updated_at=now,
        **kwargs,
    )


def make_role(organization_id: str, name: str, based_on: RoleBase = RoleBase.MEMBER, **kwargs) -> CustomRole:
    now = _now()
    return CustomRole(
        id=kwargs.pop("id", None) or new_object_id(),
        organization_id=organization_id,
        name=name,
        based_on=based_on,
        created_at=now,
        updated_at=now,
        status=kwargs.pop("status", RoleStatus.ACTIVE),
        **kwargs,
    )


def make_template(
    organization_id: str,
    name: str,
    permissions: dict[str, bool],
    types: tuple[ResourceType, ...] = (ResourceType.TASK,),
    **kwargs,
) -> PermissionTemplate:
    now = _now()
    return PermissionTemplate(
        id=kwargs.pop("id", None) or new_object_id(),
        organization_id=organization_id,
        name=name,
        created_at=now,
        updated_at=now,
        permissions=dict(permissions),
        applicable_resource_types=list(types),
        **kwargs,
    )


def make_resource(resource_type: ResourceType, **kwargs) -> Resource:
    now = _now()
    collaborators = tuple(
        c if isinstance(c, Collaborator) else Collaborator(c[0], CollaboratorRole(c[1]))
        for c in kwargs.pop("collaborators", ())
    )
    return Resource(
        id=kwargs.pop("id", None) or new_object_id(),
        resource_type=resource_type,
        created_at=now,
        updated_at=now,
        shared_with=frozenset(kwargs.pop("shared_with", ())),
        collaborators=collaborators,
        **kwargs,
    )


@dataclass
class OrgScenario:
    """One organization with an admin, a manager, a member, a guest and an outsider."""

    uow: FakeUnitOfWork
    organization: Organization
    admin: User
    manager: User
    member: User
    guest: User
    outsider: User

    @property
    def org_id(self) -> str:
        return self.organization.id

    async def add_user(self, role: str | None = None, **kwargs) -> User:
        user = make_user(current_organization_id=self.org_id if role else None, **kwargs)
        await self.uow.users.create(user)
        if role:
            await self.uow.memberships.create(make_membership(user.id, self.org_id, role))
        return user

    async def add_role(self, name: str, based_on: RoleBase = RoleBase.MEMBER, **kwargs) -> CustomRole:
        role = make_role(self.org_id, name, based_on, **kwargs)
        await self.uow.custom_roles.create(role)
        return role

    async def add_resource(self, resource_type: ResourceType, **kwargs) -> Resource:
        kwargs.setdefault("organization_id", self.org_id)
        resource = make_resource(resource_type, **kwargs)
        await self.uow.resources.create(resource)
        return resource


async def build_scenario(uow: FakeUnitOfWork) -> OrgScenario:
    now = _now()
    admin = make_user(username="alice")
    org = Organization(
        id=new_object_id(), name="Acme", created_by=admin.id, created_at=now, updated_at=now
    )
    await uow.organizations.create(org)
    scenario = OrgScenario(uow, org, admin, admin, admin, admin, admin)

    admin.current_organization_id = org.id
    await uow.users.create(admin)
    await uow.memberships.create(make_membership(admin.id, org.id, BuiltinRole.ADMIN))
    scenario.manager = await scenario.add_user(BuiltinRole.MANAGER, username="mona")
    scenario.member = await scenario.add_user(BuiltinRole.MEMBER, username="mike")
    scenario.guest = await scenario.add_user(BuiltinRole.GUEST, username="gina")
    scenario.outsider = await scenario.add_user(None, username="otto")
    return scenario


# --- Fixtures ---


@pytest.fixture
def fake_uow() -> FakeUnitOfWork:
    """Fresh in-memory UnitOfWork for each test."""
    return FakeUnitOfWork()


@pytest.fixture
def uow_factory(fake_uow: FakeUnitOfWork):
    """Factory returning async context manager over the shared FakeUnitOfWork."""
    return make_uow_factory(fake_uow)


@pytest.fixture
def role_defaults() -> RoleDefaults:
    return RoleDefaults.standard()


@pytest.fixture
def resolver(uow_factory, role_defaults) -> OrganizationMembershipResolver:
    return OrganizationMembershipResolver(uow_factory, RoleCatalog(role_defaults))


@pytest.fixture
def evaluator(uow_factory, resolver) -> ResourceAccessEvaluator:
    return ResourceAccessEvaluator(uow_factory, resolver, CollaboratorGating.STRICT)


@pytest_asyncio.fixture
async def scenario(fake_uow: FakeUnitOfWork) -> OrgScenario:
    return await build_scenario(fake_uow)
