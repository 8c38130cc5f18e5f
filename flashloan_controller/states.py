"""Flash loan execution states and results."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Tuple

from lending_pool.models import EventLogEntry, LoanRecord


class FlashloanState(Enum):
    IDLE = "Idle"
    BORROWING = "Borrowing"
    CALLBACK_RUNNING = "CallbackRunning"
    SETTLING = "Settling"
    COMPLETED = "Completed"
    REVERTED = "Reverted"


TERMINAL_STATES: FrozenSet[FlashloanState] = frozenset(
    {FlashloanState.COMPLETED, FlashloanState.REVERTED}
)

ALLOWED_TRANSITIONS: Dict[FlashloanState, FrozenSet[FlashloanState]] = {
    FlashloanState.IDLE: frozenset({FlashloanState.BORROWING}),
    FlashloanState.BORROWING: frozenset(
        {FlashloanState.CALLBACK_RUNNING, FlashloanState.REVERTED}
    ),
    FlashloanState.CALLBACK_RUNNING: frozenset(
        {FlashloanState.SETTLING, FlashloanState.REVERTED}
    ),
    FlashloanState.SETTLING: frozenset({FlashloanState.COMPLETED, FlashloanState.REVERTED}),
    FlashloanState.COMPLETED: frozenset(),
    FlashloanState.REVERTED: frozenset(),
}


@dataclass(frozen=True)
class FlashloanResult:
    loan: LoanRecord
    events: Tuple[EventLogEntry, ...]
    state: FlashloanState

    def to_dict(self) -> Dict[str, object]:
        return {
            "state": self.state.value,
            "loan": self.loan.to_dict(),
            "events": [{"message": event.message, "value": event.value} for event in self.events],
        }
