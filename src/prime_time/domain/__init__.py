from .messages import IS_PRIME_METHOD, Request, Response
from .reasons import ReasonCode

# Public domain exports keep imports explicit across layers.
__all__ = [
    "IS_PRIME_METHOD",
    "ReasonCode",
    "Request",
    "Response",
]
