"""Domain models for flash loan issuance and settlement."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple


class LoanStatus(Enum):
    INITIATED = "Initiated"
    DISBURSED = "Disbursed"
    REPAID = "Repaid"
    FAILED = "Failed"


@dataclass(frozen=True)
class EventLogEntry:
    message: str
    value: int


class EventLog:
    """Append-only diagnostic log for one flash loan call."""

    def __init__(self) -> None:
        self._entries: List[EventLogEntry] = []

    def record(self, message: str, value: int) -> EventLogEntry:
        entry = EventLogEntry(message=message, value=value)
        self._entries.append(entry)
        return entry

    @property
    def entries(self) -> Tuple[EventLogEntry, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


@dataclass
class LoanRecord:
    """Transient accounting record owned by a single orchestration call."""

    asset: str
    principal: int
    fee: int
    borrower: str
    liquidity_before: int
    status: LoanStatus = LoanStatus.INITIATED
    initiator: Optional[str] = None

    @property
    def required_repayment(self) -> int:
        return self.principal + self.fee

    def to_dict(self) -> Dict[str, object]:
        return {
            "asset": self.asset,
            "principal": self.principal,
            "fee": self.fee,
            "borrower": self.borrower,
            "status": self.status.value,
            "initiator": self.initiator,
        }
