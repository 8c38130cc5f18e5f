"""In-memory balance ledger with journaled, all-or-nothing units of work."""

from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional, Tuple
import logging
import threading

from .errors import AmountOverflowError, InsufficientFundsError
from .models import MAX_AMOUNT, BalanceEntry, JournalEntry

logger = logging.getLogger(__name__)

BalanceKey = Tuple[str, str]


class Ledger:
    """Source of truth for funds keyed by (account, asset).

    Every mutation made inside ``atomic()`` is journaled; if the unit exits
    with an exception the journal is replayed in reverse before the
    exception propagates. Journals are tracked per thread so an open unit
    never captures another thread's mutations.
    """

    def __init__(self) -> None:
        self._balances: Dict[BalanceKey, int] = {}
        self._lock = threading.RLock()
        self._local = threading.local()

    def balance(self, account: str, asset: str) -> int:
        with self._lock:
            return self._balances.get((account, asset), 0)

    def balances(self) -> Tuple[BalanceEntry, ...]:
        with self._lock:
            items = sorted(self._balances.items())
        return tuple(
            BalanceEntry(account=account, asset=asset, amount=amount)
            for (account, asset), amount in items
        )

    def snapshot(self) -> Dict[BalanceKey, int]:
        with self._lock:
            return dict(self._balances)

    def credit(self, account: str, asset: str, amount: int) -> None:
        validate_amount(amount)
        with self._lock:
            current = self._balances.get((account, asset), 0)
            if current + amount > MAX_AMOUNT:
                raise AmountOverflowError(
                    f"Credit of {amount} {asset} to {account} overflows the balance."
                )
            self._apply(account, asset, amount)
        logger.debug("credit %s %s %s", account, asset, amount)

    def debit(self, account: str, asset: str, amount: int) -> None:
        validate_amount(amount)
        with self._lock:
            current = self._balances.get((account, asset), 0)
            if current < amount:
                raise InsufficientFundsError(
                    f"{account} holds {current} {asset}, cannot debit {amount}."
                )
            self._apply(account, asset, -amount)
        logger.debug("debit %s %s %s", account, asset, amount)

    def transfer(self, sender: str, recipient: str, asset: str, amount: int) -> None:
        with self.atomic():
            self.debit(sender, asset, amount)
            self.credit(recipient, asset, amount)

    @contextmanager
    def atomic(self) -> Iterator[None]:
        """Open a unit of work.

        Nested units join the outermost one. A failed nested unit undoes its
        own mutations before re-raising; the outer unit keeps the rest.
        """

        journal: Optional[List[JournalEntry]] = getattr(self._local, "journal", None)
        if journal is not None:
            savepoint = len(journal)
            try:
                yield
            except BaseException:
                self._rollback(journal[savepoint:])
                del journal[savepoint:]
                raise
            return

        journal = []
        self._local.journal = journal
        try:
            yield
        except BaseException:
            self._rollback(journal)
            raise
        finally:
            self._local.journal = None

    def _apply(self, account: str, asset: str, delta: int) -> None:
        self._set((account, asset), self._balances.get((account, asset), 0) + delta)
        journal = getattr(self._local, "journal", None)
        if journal is not None:
            journal.append(JournalEntry(account=account, asset=asset, delta=delta))

    def _set(self, key: BalanceKey, value: int) -> None:
        # zero balances are not stored so snapshots compare equal after a rollback
        if value:
            self._balances[key] = value
        else:
            self._balances.pop(key, None)

    def _rollback(self, journal: List[JournalEntry]) -> None:
        with self._lock:
            for entry in reversed(journal):
                key = (entry.account, entry.asset)
                self._set(key, self._balances.get(key, 0) - entry.delta)
        logger.debug("rolled back %d ledger mutations", len(journal))


def validate_amount(amount: int) -> None:
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise ValueError("amount must be an integer number of atomic units.")
    if amount < 0:
        raise ValueError("amount must be non-negative.")
