from .impersonation import HarnessError, HarnessPreconditionError, ImpersonationHarness

__all__ = [
    "HarnessError",
    "HarnessPreconditionError",
    "ImpersonationHarness",
]
