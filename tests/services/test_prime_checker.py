from __future__ import annotations

from decimal import Decimal

import pytest

from prime_time.services.prime_checker import (
    DETERMINISTIC_MR_LIMIT,
    SievePrimeChecker,
    _is_prime_large,
    _is_strong_lucas_probable_prime,
    _is_strong_probable_prime,
    _jacobi,
    is_prime,
)

M89 = 2**89 - 1
M127 = 2**127 - 1
M521 = 2**521 - 1


def test_prime_checker_basic_values() -> None:
    # Basic primality rules (n <= 1 not prime; 2 and 3 prime; even > 2 not prime).
    checker = SievePrimeChecker.from_max(100)
    assert checker.is_prime(-3) is False
    assert checker.is_prime(0) is False
    assert checker.is_prime(1) is False
    assert checker.is_prime(2) is True
    assert checker.is_prime(3) is True
    assert checker.is_prime(4) is False
    assert checker.is_prime(17) is True
    assert checker.is_prime(18) is False


def test_prime_checker_sieve_membership() -> None:
    # The sieve should include known primes up to its bound.
    checker = SievePrimeChecker.from_max(30)
    for n in (2, 3, 5, 7, 11, 13, 17, 19, 23, 29):
        assert checker.is_prime(n) is True
    for n in (4, 6, 8, 9, 10, 12, 14, 15, 16, 18, 20, 21, 22, 24, 25, 26, 27, 28, 30):
        assert checker.is_prime(n) is False


def test_prime_checker_outside_range_matches_sieve() -> None:
    # Values past the sieve must agree with a larger sieve.
    small = SievePrimeChecker.from_max(30)
    large = SievePrimeChecker.from_max(20_000)
    for n in range(-5, 20_001):
        assert small.is_prime(n) is large.is_prime(n), n


def test_prime_checker_negative_bound_is_clamped() -> None:
    # A negative bound is clamped to 0 and everything goes through the exact tests.
    checker = SievePrimeChecker.from_max(-5)
    assert checker.is_prime(2) is True
    assert checker.is_prime(97) is True
    assert checker.is_prime(99) is False


def test_even_numbers_above_two_are_not_prime() -> None:
    for n in (4, 6, 1_000_000, 2**64, 2**200):
        assert is_prime(n) is False


def test_carmichael_and_strong_pseudoprimes_are_rejected() -> None:
    # Carmichael numbers and strong pseudoprimes fool Fermat-style tests but not this oracle.
    for n in (561, 1105, 1729, 41041, 825265, 2047, 3215031751, 1194649):
        assert is_prime(n) is False


def test_mersenne_primes_beyond_native_width() -> None:
    assert is_prime(2**61 - 1) is True
    assert is_prime(M89) is True
    assert is_prime(M127) is True
    assert is_prime(M521) is True


def test_large_composites_are_rejected() -> None:
    # Composite Mersenne numbers and semiprimes of large primes.
    assert is_prime(2**67 - 1) is False
    assert is_prime(2**523 - 1) is False
    assert is_prime(M521 + 1) is False
    assert is_prime(M521 * 3) is False
    assert is_prime(M89 * M127) is False
    assert is_prime((2**61 - 1) * M89) is False
    assert is_prime(M89 * M89) is False


def test_large_path_threshold_behaviour() -> None:
    # Both sides of the deterministic Miller-Rabin bound.
    assert DETERMINISTIC_MR_LIMIT > M89
    assert DETERMINISTIC_MR_LIMIT < M127
    assert _is_prime_large(M89) is True
    assert _is_prime_large(M127) is True


def test_decimal_integers_are_checked_exactly() -> None:
    assert is_prime(Decimal("7")) is True
    assert is_prime(Decimal("7.0")) is True
    assert is_prime(Decimal("7.000")) is True
    assert is_prime(Decimal("70E-1")) is True
    assert is_prime(Decimal("1.7E+1")) is True
    assert is_prime(Decimal("2.0")) is True
    assert is_prime(Decimal(M127)) is True


def test_decimal_non_integers_and_negatives_are_not_prime() -> None:
    for value in ("4.5", "7.0000001", "-7", "-7.0", "-2", "0.5", "1.999", "0", "-0"):
        assert is_prime(Decimal(value)) is False, value


def test_decimal_with_positive_exponent_is_composite() -> None:
    # coefficient * 10**k is a multiple of ten; huge exponents must not be expanded.
    assert is_prime(Decimal("2E+1")) is False
    assert is_prime(Decimal("1E+400")) is False
    assert is_prime(Decimal("2.5E+999999")) is False


def test_non_finite_decimals_are_not_prime() -> None:
    assert is_prime(Decimal("Infinity")) is False
    assert is_prime(Decimal("NaN")) is False


def test_booleans_are_not_numbers() -> None:
    assert is_prime(True) is False  # type: ignore[arg-type]


def test_strong_probable_prime_helper() -> None:
    # 2047 = 23 * 89 is the smallest strong pseudoprime to base 2.
    assert _is_strong_probable_prime(2047, 2) is True
    assert _is_strong_probable_prime(2047, 3) is False
    assert _is_strong_probable_prime(M89, 2) is True


def test_strong_lucas_helper() -> None:
    # 5459 and 5777 are strong Lucas pseudoprimes; neither is a base-2 strong pseudoprime.
    assert _is_strong_lucas_probable_prime(5459) is True
    assert _is_strong_lucas_probable_prime(5777) is True
    assert _is_strong_probable_prime(5777, 2) is False
    assert _is_strong_lucas_probable_prime(M127) is True
    assert _is_strong_lucas_probable_prime(1093**2) is False


@pytest.mark.parametrize(
    ("a", "n", "expected"),
    [(1, 3, 1), (2, 3, -1), (2, 7, 1), (5, 21, 1), (3, 9, 0), (-7, 11, 1), (30, 59, -1)],
)
def test_jacobi_symbol(a: int, n: int, expected: int) -> None:
    assert _jacobi(a, n) == expected
