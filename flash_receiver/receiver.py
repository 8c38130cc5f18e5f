"""Borrower callback contract that receives, uses, and repays a flash loan."""

from typing import Optional
import logging

from ledger.errors import AmountOverflowError, ErrorKind, FlashloanError, InsufficientFundsError
from ledger.ledger import Ledger
from lending_pool.models import EventLog

from .strategies import Strategy, noop_strategy

logger = logging.getLogger(__name__)


class StrategyFailedError(FlashloanError):
    """Raised when the injected borrower operation fails."""

    kind = ErrorKind.STRATEGY_FAILED


class RepaymentFailedError(FlashloanError):
    """Raised when the receiver cannot cover principal plus fee."""

    kind = ErrorKind.REPAYMENT_FAILED


class FlashloanReceiver:
    """Holds borrowed funds during the callback and pays the pool back.

    ``user`` only changes once the orchestrator commits a completed call;
    the value staged by ``on_flashloan`` is dropped by ``abort``.
    """

    def __init__(
        self,
        ledger: Ledger,
        account: str,
        pool_account: str,
        strategy: Optional[Strategy] = None,
    ) -> None:
        if not account:
            raise ValueError("Receiver account must be non-empty.")
        self._ledger = ledger
        self._account = account
        self._pool_account = pool_account
        self._strategy = strategy or noop_strategy
        self._user: Optional[str] = None
        self._pending_user: Optional[str] = None

    @property
    def account(self) -> str:
        return self._account

    @property
    def user(self) -> Optional[str]:
        return self._user

    def set_strategy(self, strategy: Strategy) -> None:
        self._strategy = strategy

    def on_flashloan(self, asset: str, amount: int, fee: int, events: EventLog) -> None:
        self._pending_user = None
        events.record("received", amount)
        logger.debug("%s received %s %s", self._account, amount, asset)

        try:
            self._strategy(asset, amount)
        except Exception as exc:
            events.record("strategy failed", amount)
            logger.warning("strategy on %s failed: %s", self._account, exc)
            raise StrategyFailedError(f"Borrower strategy failed: {exc}") from exc

        repayment = amount + fee
        events.record("repaying", repayment)
        try:
            self._ledger.transfer(self._account, self._pool_account, asset, repayment)
        except InsufficientFundsError as exc:
            events.record("repayment failed", repayment)
            logger.warning("%s cannot repay %s %s", self._account, repayment, asset)
            raise RepaymentFailedError(
                f"Receiver cannot repay {repayment} {asset}: {exc}"
            ) from exc
        except AmountOverflowError:
            events.record("repayment failed", repayment)
            logger.warning(
                "%s repayment of %s %s overflows the pool", self._account, repayment, asset
            )
            raise

        self._pending_user = self._account

    def commit(self) -> None:
        if self._pending_user is not None:
            self._user = self._pending_user
        self._pending_user = None

    def abort(self) -> None:
        self._pending_user = None
