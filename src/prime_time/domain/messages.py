from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

IS_PRIME_METHOD = "isPrime"


@dataclass(frozen=True, slots=True)
class Request:
    # Number is held as Decimal so integer and decimal literals of any size stay exact.
    method: str
    number: Decimal

    def __post_init__(self) -> None:
        if self.method != IS_PRIME_METHOD:
            raise ValueError(f"Request method must be {IS_PRIME_METHOD!r}")


@dataclass(frozen=True, slots=True)
class Response:
    prime: bool
    method: str = IS_PRIME_METHOD
