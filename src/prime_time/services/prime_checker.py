from __future__ import annotations

import math
from dataclasses import dataclass, field
from decimal import Decimal

from prime_time.ports.prime_checker import PrimeChecker

# Miller-Rabin with the first thirteen prime bases is exact below this bound
# (Sorenson and Webster, 2015).
DETERMINISTIC_MR_LIMIT = 3_317_044_064_679_887_385_961_981
_MR_BASES = (2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37, 41)


@dataclass(frozen=True, slots=True)
class SievePrimeChecker(PrimeChecker):
    """Exact primality oracle for JSON numbers.

    Small values are answered from a precomputed sieve. Larger integers go
    through trial division by the primes below 1000, deterministic
    Miller-Rabin below ``DETERMINISTIC_MR_LIMIT`` and Baillie-PSW above it.
    Instances are immutable and can be shared between sessions.
    """

    _max_n: int = 0
    _is_prime: tuple[bool, ...] = field(default_factory=lambda: (False,))

    @classmethod
    def from_max(cls, max_n: int) -> SievePrimeChecker:
        # The sieve covers 0..max_n; a negative bound leaves everything to the exact tests.
        if max_n < 0:
            max_n = 0
        return cls(_max_n=max_n, _is_prime=_sieve(max_n))

    def is_prime(self, number: int | Decimal) -> bool:
        if isinstance(number, Decimal):
            return self._is_prime_decimal(number)
        if isinstance(number, bool) or not isinstance(number, int):
            return False
        return self._is_prime_int(number)

    def _is_prime_decimal(self, value: Decimal) -> bool:
        if not value.is_finite() or value < 2:
            return False
        _, digits, exponent = value.as_tuple()
        if exponent > 0:
            # coefficient * 10**exponent with exponent >= 1 is a multiple of ten.
            return False
        if exponent < 0 and any(digits[exponent:]):
            return False
        # Fraction is zero, so truncation is exact.
        return self._is_prime_int(int(value))

    def _is_prime_int(self, n: int) -> bool:
        if n <= 1:
            return False
        if n <= self._max_n:
            return self._is_prime[n]
        return _is_prime_large(n)


def _sieve(max_n: int) -> tuple[bool, ...]:
    # Sieve of Eratosthenes for fast membership checks.
    if max_n < 1:
        return tuple([False] * (max_n + 1))

    is_prime = [True] * (max_n + 1)
    is_prime[0] = False
    is_prime[1] = False

    for p in range(2, int(math.isqrt(max_n)) + 1):
        if is_prime[p]:
            for multiple in range(p * p, max_n + 1, p):
                is_prime[multiple] = False

    return tuple(is_prime)


_SMALL_PRIMES = tuple(n for n, flag in enumerate(_sieve(1000)) if flag)


def _is_prime_large(n: int) -> bool:
    for p in _SMALL_PRIMES:
        if n == p:
            return True
        if n % p == 0:
            return False
    # No factor below the largest small prime, so anything under its square is prime.
    if n < _SMALL_PRIMES[-1] ** 2:
        return True

    if n < DETERMINISTIC_MR_LIMIT:
        return all(_is_strong_probable_prime(n, base) for base in _MR_BASES)

    # Baillie-PSW: no composite passing both halves is known.
    return _is_strong_probable_prime(n, 2) and _is_strong_lucas_probable_prime(n)


def _is_strong_probable_prime(n: int, base: int) -> bool:
    # Strong Fermat (Miller-Rabin) test for odd n > base.
    d = n - 1
    s = 0
    while d % 2 == 0:
        d //= 2
        s += 1

    x = pow(base, d, n)
    if x == 1 or x == n - 1:
        return True
    for _ in range(s - 1):
        x = x * x % n
        if x == n - 1:
            return True
    return False


def _jacobi(a: int, n: int) -> int:
    # Jacobi symbol (a/n) for odd positive n.
    a %= n
    result = 1
    while a:
        while a % 2 == 0:
            a //= 2
            if n % 8 in (3, 5):
                result = -result
        a, n = n, a
        if a % 4 == 3 and n % 4 == 3:
            result = -result
        a %= n
    return result if n == 1 else 0


def _selfridge_d(n: int) -> int | None:
    # First D in 5, -7, 9, -11, ... with (D/n) == -1; None when n is shown composite.
    d = 5
    while True:
        symbol = _jacobi(d, n)
        if symbol == -1:
            return d
        if symbol == 0 and abs(d) != n:
            return None
        d = -d - 2 if d > 0 else -d + 2


def _is_strong_lucas_probable_prime(n: int) -> bool:
    # Perfect squares never yield (D/n) == -1, so reject them before the search.
    root = math.isqrt(n)
    if root * root == n:
        return False

    d_param = _selfridge_d(n)
    if d_param is None:
        return False
    p_param = 1
    q_param = (1 - d_param) // 4

    k = n + 1
    s = 0
    while k % 2 == 0:
        k //= 2
        s += 1

    # U_1 = 1, V_1 = P, walking the bits of k from the top.
    u = 1
    v = p_param
    q_k = q_param % n
    for bit in bin(k)[3:]:
        u = u * v % n
        v = (v * v - 2 * q_k) % n
        q_k = q_k * q_k % n
        if bit == "1":
            u, v = p_param * u + v, d_param * u + p_param * v
            if u % 2:
                u += n
            u = (u // 2) % n
            if v % 2:
                v += n
            v = (v // 2) % n
            q_k = q_k * q_param % n

    if u == 0 or v == 0:
        return True
    for _ in range(s - 1):
        v = (v * v - 2 * q_k) % n
        if v == 0:
            return True
        q_k = q_k * q_k % n
    return False


_DEFAULT_CHECKER = SievePrimeChecker.from_max(0)


def is_prime(number: int | Decimal) -> bool:
    # Module-level oracle for callers that do not need a configured sieve.
    return _DEFAULT_CHECKER.is_prime(number)
