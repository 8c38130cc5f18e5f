from .orchestrator import FlashloanExecution, FlashloanOrchestrator, StateTransitionError
from .states import ALLOWED_TRANSITIONS, TERMINAL_STATES, FlashloanResult, FlashloanState

__all__ = [
    "ALLOWED_TRANSITIONS",
    "FlashloanExecution",
    "FlashloanOrchestrator",
    "FlashloanResult",
    "FlashloanState",
    "StateTransitionError",
    "TERMINAL_STATES",
]
