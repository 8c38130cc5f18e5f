"""Test harness that fabricates ledger preconditions by impersonating accounts."""

from typing import Set, Tuple
import logging

from ledger.ledger import Ledger

logger = logging.getLogger(__name__)


class HarnessError(RuntimeError):
    """Raised when the harness is asked to act for an account it does not control."""


class HarnessPreconditionError(HarnessError):
    """Raised when a balance precondition of a scenario does not hold."""


class ImpersonationHarness:
    """Acts on behalf of arbitrary accounts, outside any flash loan call."""

    def __init__(self, ledger: Ledger) -> None:
        self._ledger = ledger
        self._impersonated: Set[str] = set()

    @property
    def impersonated(self) -> Tuple[str, ...]:
        return tuple(sorted(self._impersonated))

    def impersonate(self, account: str) -> None:
        if not account:
            raise ValueError("Account to impersonate must be non-empty.")
        self._impersonated.add(account)
        logger.debug("impersonating %s", account)

    def stop_impersonating(self, account: str) -> None:
        self._impersonated.discard(account)

    def is_impersonated(self, account: str) -> bool:
        return account in self._impersonated

    def seed(self, account: str, asset: str, amount: int) -> None:
        self._ledger.credit(account, asset, amount)
        logger.debug("seeded %s with %s %s", account, amount, asset)

    def transfer(self, sender: str, recipient: str, asset: str, amount: int) -> None:
        if sender not in self._impersonated:
            raise HarnessError(f"{sender} is not impersonated; cannot send from it.")
        self._ledger.transfer(sender, recipient, asset, amount)
        logger.info("transferred %s %s from %s to %s", amount, asset, sender, recipient)

    def require_balance(self, account: str, asset: str, minimum: int, message: str) -> int:
        balance = self._ledger.balance(account, asset)
        if balance < minimum:
            logger.warning("%s: %s holds %s %s", message, account, balance, asset)
            raise HarnessPreconditionError(message)
        return balance
