from __future__ import annotations

from enum import Enum


# Stable reason codes for rejected request lines; emitted in the malformed reply.
class ReasonCode(str, Enum):
    INVALID_ENCODING = "INVALID_ENCODING"
    INVALID_JSON = "INVALID_JSON"
    NOT_AN_OBJECT = "NOT_AN_OBJECT"
    INVALID_METHOD = "INVALID_METHOD"
    INVALID_NUMBER = "INVALID_NUMBER"
