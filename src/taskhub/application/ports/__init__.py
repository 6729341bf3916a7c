"""Application ports - interfaces for external adapters."""

from taskhub.application.ports.access_evaluator import AccessEvaluator
from taskhub.application.ports.membership_resolver import MembershipResolver
from taskhub.application.ports.unit_of_work import UnitOfWork, UnitOfWorkFactory

__all__ = [
    "AccessEvaluator",
    "MembershipResolver",
    "UnitOfWork",
    "UnitOfWorkFactory",
]
