from .controller import CreationOrchestrator, InvalidTransitionError
from .progress import RunLog
from .result import AuthorityOutcome, CreationResult
from .states import CreationState, ProgressEvent, can_transition

__all__ = [
    "AuthorityOutcome",
    "CreationOrchestrator",
    "CreationResult",
    "CreationState",
    "InvalidTransitionError",
    "ProgressEvent",
    "RunLog",
    "can_transition",
]
