from __future__ import annotations

from decimal import Decimal
from typing import Protocol, runtime_checkable


# PrimeChecker port defines the boundary for primality checks used by sessions.
@runtime_checkable
class PrimeChecker(Protocol):
    def is_prime(self, number: int | Decimal) -> bool:
        """Return True only for integers >= 2 that are prime; never raises for finite input."""
        # Port contract has no implementation; calling it directly is a wiring error.
        raise NotImplementedError("PrimeChecker is a port; use a concrete adapter.")
