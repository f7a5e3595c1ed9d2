from .log_sink import LogSink
from .prime_checker import PrimeChecker

__all__ = ["LogSink", "PrimeChecker"]
