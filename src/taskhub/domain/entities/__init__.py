"""Domain entities."""

from taskhub.domain.entities.custom_role import CustomRole, RoleResourceOverride
from taskhub.domain.entities.membership import Membership
from taskhub.domain.entities.organization import Organization
from taskhub.domain.entities.permission_template import PermissionTemplate
from taskhub.domain.entities.resource import Collaborator, Resource
from taskhub.domain.entities.resource_override import ResourceOverride
from taskhub.domain.entities.template_application import TemplateApplication
from taskhub.domain.entities.user import User

__all__ = [
    "Collaborator",
    "CustomRole",
    "Membership",
    "Organization",
    "PermissionTemplate",
    "Resource",
    "ResourceOverride",
    "RoleResourceOverride",
    "TemplateApplication",
    "User",
]
