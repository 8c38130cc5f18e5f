from .errors import AmountOverflowError, ErrorKind, FlashloanError, InsufficientFundsError
from .ledger import Ledger, validate_amount
from .models import MAX_AMOUNT, BalanceEntry, JournalEntry

__all__ = [
    "AmountOverflowError",
    "BalanceEntry",
    "ErrorKind",
    "FlashloanError",
    "InsufficientFundsError",
    "JournalEntry",
    "Ledger",
    "MAX_AMOUNT",
    "validate_amount",
]
