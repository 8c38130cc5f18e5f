"""Flash loan liquidity pool: disbursement and repayment verification."""

from typing import Optional
import logging
import threading

from ledger.errors import ErrorKind, FlashloanError
from ledger.ledger import Ledger, validate_amount

from .fees import ConstantFee, FeePolicy
from .models import EventLog, LoanRecord, LoanStatus

logger = logging.getLogger(__name__)


class InsufficientLiquidityError(FlashloanError):
    """Raised when the pool cannot cover the requested principal."""

    kind = ErrorKind.INSUFFICIENT_LIQUIDITY


class LoanNotRepaidError(FlashloanError):
    """Raised when the pool balance after the callback is short of principal plus fee."""

    kind = ErrorKind.LOAN_NOT_REPAID


class LendingPool:
    """The lender: debits itself to fund a borrower, then checks net repayment."""

    def __init__(self, ledger: Ledger, account: str, fee_policy: Optional[FeePolicy] = None) -> None:
        if not account:
            raise ValueError("Pool account must be non-empty.")
        self._ledger = ledger
        self._account = account
        self._fee_policy = fee_policy or ConstantFee()
        self._lock = threading.RLock()

    @property
    def account(self) -> str:
        return self._account

    @property
    def fee_policy(self) -> FeePolicy:
        return self._fee_policy

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    def fee_for(self, amount: int) -> int:
        return self._fee_policy.fee_for(amount)

    def max_flashloan(self, asset: str) -> int:
        return self._ledger.balance(self._account, asset)

    def borrow(self, borrower: str, asset: str, amount: int, events: EventLog) -> LoanRecord:
        validate_amount(amount)
        liquidity = self._ledger.balance(self._account, asset)
        if liquidity < amount:
            events.record("insufficient liquidity", amount)
            logger.warning(
                "pool %s holds %s %s, cannot lend %s", self._account, liquidity, asset, amount
            )
            raise InsufficientLiquidityError(
                f"Pool holds {liquidity} {asset}, requested {amount}."
            )

        loan = LoanRecord(
            asset=asset,
            principal=amount,
            fee=self.fee_for(amount),
            borrower=borrower,
            liquidity_before=liquidity,
        )
        self._ledger.transfer(self._account, borrower, asset, amount)
        loan.status = LoanStatus.DISBURSED
        events.record("loan initiated", amount)
        logger.info("disbursed %s %s to %s", amount, asset, borrower)
        return loan

    def settle(self, loan: LoanRecord, events: EventLog) -> None:
        required = loan.required_repayment
        balance_after = self._ledger.balance(self._account, loan.asset)
        if balance_after < loan.liquidity_before + loan.fee:
            loan.status = LoanStatus.FAILED
            events.record("loan not repaid", required)
            logger.warning(
                "loan to %s short: pool holds %s %s, expected at least %s",
                loan.borrower,
                balance_after,
                loan.asset,
                loan.liquidity_before + loan.fee,
            )
            raise LoanNotRepaidError(
                f"Pool balance {balance_after} is below the required {loan.liquidity_before + loan.fee}."
            )

        loan.status = LoanStatus.REPAID
        events.record("loan repaid", required)
        logger.info("loan to %s repaid with %s %s", loan.borrower, required, loan.asset)
