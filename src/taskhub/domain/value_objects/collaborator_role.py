"""Collaborator roles on a collaborative resource."""

from enum import StrEnum

from taskhub.domain.value_objects.resource_action import ResourceAction


class CollaboratorRole(StrEnum):
    VIEWER = "viewer"
    EDITOR = "editor"
    OWNER = "owner"

    def allows(self, action: ResourceAction) -> bool:
        """Whether this role covers the action under strict gating."""
        return action in COLLABORATOR_ACTIONS[self]


COLLABORATOR_ACTIONS: dict[CollaboratorRole, frozenset[ResourceAction]] = {
    CollaboratorRole.VIEWER: frozenset({ResourceAction.READ}),
    CollaboratorRole.EDITOR: frozenset({ResourceAction.READ, ResourceAction.WRITE}),
    CollaboratorRole.OWNER: frozenset(ResourceAction),
}


class CollaboratorGating(StrEnum):
    """STRICT maps collaborator role to actions; LENIENT grants any collaborator."""

    STRICT = "strict"
    LENIENT = "lenient"
