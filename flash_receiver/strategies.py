"""Injectable borrower operations run while the loan is outstanding."""

from typing import Callable, Optional

from ledger.ledger import Ledger

Strategy = Callable[[str, int], None]


def noop_strategy(asset: str, amount: int) -> None:
    return None


def spend_strategy(
    ledger: Ledger, owner: str, sink: str, portion: Optional[int] = None
) -> Strategy:
    """Move borrowed funds from ``owner`` to ``sink``; all of them when ``portion`` is None."""

    def spend(asset: str, amount: int) -> None:
        ledger.transfer(owner, sink, asset, amount if portion is None else portion)

    return spend


def failing_strategy(message: str = "Strategy aborted.") -> Strategy:
    def fail(asset: str, amount: int) -> None:
        raise RuntimeError(message)

    return fail
