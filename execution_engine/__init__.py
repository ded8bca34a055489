from .models import (
    AuthorityDirective,
    AuthorityKind,
    CreationRequest,
    DirectiveKind,
    StepKind,
    TokenMetadata,
    TransactionPlan,
    TransactionStep,
)
from .planner import (
    PlanValidationError,
    TransactionPlanBuilder,
    planned_step_count,
    planned_transaction_count,
    validate_plan,
)
from .request import TokenForm, parse_directive, parse_request

__all__ = [
    "AuthorityDirective",
    "AuthorityKind",
    "CreationRequest",
    "DirectiveKind",
    "PlanValidationError",
    "StepKind",
    "TokenForm",
    "TokenMetadata",
    "TransactionPlan",
    "TransactionPlanBuilder",
    "TransactionStep",
    "parse_directive",
    "parse_request",
    "planned_step_count",
    "planned_transaction_count",
    "validate_plan",
]
