"""Flash loan orchestrator driving borrow, callback, and settlement atomically."""

from typing import Optional
import logging

from flash_receiver.receiver import FlashloanReceiver
from ledger.errors import FlashloanError
from ledger.ledger import Ledger
from lending_pool.models import EventLog, LoanRecord
from lending_pool.pool import LendingPool

from .states import ALLOWED_TRANSITIONS, FlashloanResult, FlashloanState

logger = logging.getLogger(__name__)


class StateTransitionError(ValueError):
    """Raised when an execution is driven through an illegal transition."""


class FlashloanExecution:
    """Single-use state machine for one ``initiate_flashloan`` call."""

    def __init__(
        self,
        ledger: Ledger,
        pool: LendingPool,
        receiver: FlashloanReceiver,
        asset: str,
        amount: int,
        initiator: Optional[str] = None,
    ) -> None:
        self._ledger = ledger
        self._pool = pool
        self._receiver = receiver
        self._asset = asset
        self._amount = amount
        self._initiator = initiator
        self._state = FlashloanState.IDLE
        self._events = EventLog()
        self._loan: Optional[LoanRecord] = None

    @property
    def state(self) -> FlashloanState:
        return self._state

    @property
    def events(self) -> EventLog:
        return self._events

    @property
    def loan(self) -> Optional[LoanRecord]:
        return self._loan

    def run(self) -> FlashloanResult:
        if self._state != FlashloanState.IDLE:
            raise StateTransitionError("A flash loan execution can only run once.")

        with self._pool.lock:
            try:
                with self._ledger.atomic():
                    loan = self._execute()
            except Exception as exc:
                self._revert(exc)
                raise

        return FlashloanResult(loan=loan, events=self._events.entries, state=self._state)

    def _execute(self) -> LoanRecord:
        self._transition(FlashloanState.BORROWING)
        loan = self._pool.borrow(self._receiver.account, self._asset, self._amount, self._events)
        loan.initiator = self._initiator
        self._loan = loan

        self._transition(FlashloanState.CALLBACK_RUNNING)
        self._receiver.on_flashloan(self._asset, loan.principal, loan.fee, self._events)

        self._transition(FlashloanState.SETTLING)
        self._pool.settle(loan, self._events)

        self._transition(FlashloanState.COMPLETED)
        self._receiver.commit()
        logger.info(
            "flash loan of %s %s through %s completed",
            self._amount,
            self._asset,
            self._receiver.account,
        )
        return loan

    def _revert(self, exc: Exception) -> None:
        self._receiver.abort()
        self._events.record("loan reverted", self._amount)
        self._transition(FlashloanState.REVERTED)
        if isinstance(exc, FlashloanError):
            exc.events = self._events.entries
        logger.warning(
            "flash loan of %s %s reverted: %s",
            self._amount,
            self._asset,
            exc,
        )

    def _transition(self, target: FlashloanState) -> None:
        if target not in ALLOWED_TRANSITIONS[self._state]:
            raise StateTransitionError(
                f"Cannot move from {self._state.value} to {target.value}."
            )
        self._state = target


class FlashloanOrchestrator:
    """Public entry point; each call runs in a fresh ``FlashloanExecution``."""

    def __init__(self, ledger: Ledger, pool: LendingPool, receiver: FlashloanReceiver) -> None:
        self._ledger = ledger
        self._pool = pool
        self._receiver = receiver

    @property
    def address(self) -> str:
        return self._receiver.account

    @property
    def user(self) -> Optional[str]:
        return self._receiver.user

    @property
    def pool(self) -> LendingPool:
        return self._pool

    @property
    def receiver(self) -> FlashloanReceiver:
        return self._receiver

    def new_execution(
        self, asset: str, amount: int, initiator: Optional[str] = None
    ) -> FlashloanExecution:
        return FlashloanExecution(
            ledger=self._ledger,
            pool=self._pool,
            receiver=self._receiver,
            asset=asset,
            amount=amount,
            initiator=initiator,
        )

    def initiate_flashloan(
        self, asset: str, amount: int, initiator: Optional[str] = None
    ) -> FlashloanResult:
        logger.info("initiating flash loan of %s %s via %s", amount, asset, self.address)
        return self.new_execution(asset, amount, initiator).run()
