from .prime_checker import DETERMINISTIC_MR_LIMIT, SievePrimeChecker, is_prime

__all__ = ["DETERMINISTIC_MR_LIMIT", "SievePrimeChecker", "is_prime"]
