from .fees import DYDX_FLASHLOAN_FEE, ZERO_FEE, ConstantFee, FeePolicy, ProportionalFee
from .models import EventLog, EventLogEntry, LoanRecord, LoanStatus
from .pool import InsufficientLiquidityError, LendingPool, LoanNotRepaidError

__all__ = [
    "ConstantFee",
    "DYDX_FLASHLOAN_FEE",
    "EventLog",
    "EventLogEntry",
    "FeePolicy",
    "InsufficientLiquidityError",
    "LendingPool",
    "LoanNotRepaidError",
    "LoanRecord",
    "LoanStatus",
    "ProportionalFee",
    "ZERO_FEE",
]
