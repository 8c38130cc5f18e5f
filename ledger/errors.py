"""Error taxonomy shared by every flash loan component."""

from enum import Enum
from typing import Optional, Tuple


class ErrorKind(Enum):
    INSUFFICIENT_FUNDS = "InsufficientFunds"
    AMOUNT_OVERFLOW = "AmountOverflow"
    INSUFFICIENT_LIQUIDITY = "InsufficientLiquidity"
    STRATEGY_FAILED = "StrategyFailed"
    REPAYMENT_FAILED = "RepaymentFailed"
    LOAN_NOT_REPAID = "LoanNotRepaid"


class FlashloanError(RuntimeError):
    """Base class for domain errors that void a flash loan call.

    ``events`` is filled in by the orchestrator with the event log of the
    reverted call so callers can inspect what happened before the failure.
    """

    kind: ErrorKind

    def __init__(self, message: str, events: Optional[Tuple[object, ...]] = None) -> None:
        super().__init__(message)
        self.events: Tuple[object, ...] = tuple(events or ())


class InsufficientFundsError(FlashloanError):
    """Raised when a debit exceeds the available balance."""

    kind = ErrorKind.INSUFFICIENT_FUNDS


class AmountOverflowError(FlashloanError):
    """Raised when a credit would push a balance past the uint256 range."""

    kind = ErrorKind.AMOUNT_OVERFLOW
