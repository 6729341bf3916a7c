"""Access capabilities a resource type supports."""

from enum import Flag, auto

from taskhub.domain.value_objects.resource_type import ResourceType


class Capability(Flag):
    """Combinable capability tags; the evaluator checks every tag present."""

    NONE = 0
    OWNABLE = auto()
    ORG_SCOPED = auto()
    SHAREABLE = auto()
    COLLABORATIVE = auto()


RESOURCE_CAPABILITIES: dict[ResourceType, Capability] = {
    ResourceType.TASK: Capability.OWNABLE | Capability.ORG_SCOPED | Capability.SHAREABLE,
    ResourceType.NOTE: (
        Capability.OWNABLE
        | Capability.ORG_SCOPED
        | Capability.SHAREABLE
        | Capability.COLLABORATIVE
    ),
    ResourceType.PROJECT: Capability.OWNABLE | Capability.ORG_SCOPED,
    ResourceType.TEAM: Capability.OWNABLE | Capability.ORG_SCOPED,
}
