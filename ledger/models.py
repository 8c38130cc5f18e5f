"""Domain models for the balance ledger."""

from dataclasses import dataclass

MAX_AMOUNT = 2**256 - 1


@dataclass(frozen=True)
class BalanceEntry:
    account: str
    asset: str
    amount: int


@dataclass(frozen=True)
class JournalEntry:
    """One signed balance change recorded while an atomic unit is open."""

    account: str
    asset: str
    delta: int
