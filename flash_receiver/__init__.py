from .receiver import FlashloanReceiver, RepaymentFailedError, StrategyFailedError
from .strategies import Strategy, failing_strategy, noop_strategy, spend_strategy

__all__ = [
    "FlashloanReceiver",
    "RepaymentFailedError",
    "Strategy",
    "StrategyFailedError",
    "failing_strategy",
    "noop_strategy",
    "spend_strategy",
]
