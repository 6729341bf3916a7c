"""Repository ports."""

from taskhub.application.ports.repositories.custom_role_repository import (
    CustomRoleRepository,
)
from taskhub.application.ports.repositories.membership_repository import (
    MembershipRepository,
)
from taskhub.application.ports.repositories.organization_repository import (
    OrganizationRepository,
)
from taskhub.application.ports.repositories.resource_override_repository import (
    ResourceOverrideRepository,
)
from taskhub.application.ports.repositories.resource_repository import (
    ResourceRepository,
)
from taskhub.application.ports.repositories.template_application_repository import (
    TemplateApplicationRepository,
)
from taskhub.application.ports.repositories.template_repository import (
    TemplateRepository,
)
from taskhub.application.ports.repositories.user_repository import UserRepository

__all__ = [
    "CustomRoleRepository",
    "MembershipRepository",
    "OrganizationRepository",
    "ResourceOverrideRepository",
    "ResourceRepository",
    "TemplateApplicationRepository",
    "TemplateRepository",
    "UserRepository",
]
