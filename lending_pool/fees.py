"""Deterministic fee policies shared by disbursement and settlement."""

from dataclasses import dataclass
from typing import Protocol

DYDX_FLASHLOAN_FEE = 2
BPS_DENOMINATOR = 10_000


class FeePolicy(Protocol):
    def fee_for(self, amount: int) -> int:
        ...


@dataclass(frozen=True)
class ConstantFee:
    """Flat fee per loan, independent of the principal."""

    fee: int = DYDX_FLASHLOAN_FEE

    def __post_init__(self) -> None:
        if isinstance(self.fee, bool) or not isinstance(self.fee, int) or self.fee < 0:
            raise ValueError("fee must be a non-negative integer.")

    def fee_for(self, amount: int) -> int:
        return self.fee


@dataclass(frozen=True)
class ProportionalFee:
    """Fee expressed in basis points of the principal, rounded down."""

    bps: int

    def __post_init__(self) -> None:
        if isinstance(self.bps, bool) or not isinstance(self.bps, int):
            raise ValueError("bps must be an integer.")
        if not 0 <= self.bps <= BPS_DENOMINATOR:
            raise ValueError("bps must be between 0 and 10000.")

    def fee_for(self, amount: int) -> int:
        return amount * self.bps // BPS_DENOMINATOR


ZERO_FEE = ConstantFee(0)
