"""Access evaluator port - per-resource authorization."""

from typing import Protocol

from taskhub.application.dto.access import AccessDecision, AccessRequirement
from taskhub.domain.entities import Resource


class AccessEvaluator(Protocol):
    """Port for deciding whether a caller may act on a resource."""

    async def evaluate(
        self, user_id: str, resource: Resource, requirement: AccessRequirement
    ) -> AccessDecision: ...

    async def evaluate_by_id(
        self,
        user_id: str,
        resource_type: str,
        resource_id: str,
        requirement: AccessRequirement,
    ) -> AccessDecision: ...
