from __future__ import annotations

import json
import re
from decimal import Decimal, InvalidOperation
from typing import Literal

from pydantic import BaseModel, ConfigDict, ValidationError

from prime_time.domain.messages import Request, Response
from prime_time.domain.reasons import ReasonCode

MALFORMED_ERROR = "malformed request"

# JSON number token: sign, integer digits, fraction digits, exponent.
_NUMBER = re.compile(r"(-?)(\d+)(?:\.(\d+))?(?:[eE]([+-]?\d+))?")


class FormatError(ValueError):
    # Raised for any line that is not a well-formed isPrime request.
    def __init__(self, reason: ReasonCode, detail: str = "") -> None:
        super().__init__(f"{reason.value}: {detail}" if detail else reason.value)
        self.reason = reason
        self.detail = detail


class _RawRequest(BaseModel):
    # Strict mode keeps booleans and numeric strings from passing as numbers.
    method: Literal["isPrime"]
    number: Decimal

    model_config = ConfigDict(extra="ignore", strict=True)


def read_line_text(raw: bytes) -> str:
    # One terminator is framing, not content; a lone "\r" before it is tolerated.
    if raw.endswith(b"\n"):
        raw = raw[:-1]
        if raw.endswith(b"\r"):
            raw = raw[:-1]
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise FormatError(ReasonCode.INVALID_ENCODING, str(exc)) from exc


def decode_request(line: str) -> Request:
    """Parse one request line into a ``Request``.

    Numbers are decoded straight to ``Decimal`` so arbitrarily long integer
    literals and decimal fractions survive without rounding or the interpreter's
    int-string length limit. ``NaN`` and ``Infinity`` are rejected because they
    are not JSON numbers. A number whose exponent is beyond Decimal's range is
    replaced by a small value with the same primality verdict. Extra keys are
    ignored.
    """
    try:
        payload = json.loads(
            line,
            parse_int=_parse_number,
            parse_float=_parse_number,
            parse_constant=_reject_constant,
        )
    except (ValueError, InvalidOperation, RecursionError) as exc:
        raise FormatError(ReasonCode.INVALID_JSON, str(exc)) from exc

    if not isinstance(payload, dict):
        raise FormatError(ReasonCode.NOT_AN_OBJECT, type(payload).__name__)

    try:
        raw = _RawRequest.model_validate(payload)
    except ValidationError as exc:
        raise FormatError(_reason_for(exc), _first_error(exc)) from exc

    return Request(method=raw.method, number=raw.number)


def encode_request(request: Request) -> str:
    # Client-side encoding; str(Decimal) is valid JSON for finite values.
    return f'{{"method":{json.dumps(request.method)},"number":{request.number}}}'


def encode_response(prime: bool) -> str:
    # Compact output keeps the wire form canonical: {"method":"isPrime","prime":true}.
    response = Response(prime=prime)
    payload = {"method": response.method, "prime": response.prime}
    return json.dumps(payload, separators=(",", ":"))


def encode_malformed(reason: ReasonCode) -> str:
    # Deliberately lacks method/prime so clients cannot mistake it for a Response.
    payload = {"error": MALFORMED_ERROR, "reason": reason.value}
    return json.dumps(payload, separators=(",", ":"))


def _parse_number(literal: str) -> Decimal:
    try:
        return Decimal(literal)
    except InvalidOperation:
        return _out_of_range_number(literal)


def _out_of_range_number(literal: str) -> Decimal:
    # The exponent does not fit a Decimal. Only the primality verdict matters, so
    # return a small stand-in with the same one: zero, a multiple of ten, or a fraction.
    match = _NUMBER.fullmatch(literal)
    if match is None:
        raise ValueError(f"unparseable number {literal!r}")
    sign, whole, fraction, exponent = match.groups()
    if not (whole + (fraction or "")).strip("0"):
        return Decimal(0)
    if exponent is not None and not exponent.startswith("-"):
        return Decimal(f"{sign}1E+1")
    return Decimal(f"{sign}0.1")


def _reject_constant(name: str) -> Decimal:
    raise ValueError(f"{name} is not a JSON number")


def _reason_for(exc: ValidationError) -> ReasonCode:
    for error in exc.errors():
        loc = error.get("loc", ())
        if loc and loc[0] == "method":
            return ReasonCode.INVALID_METHOD
    return ReasonCode.INVALID_NUMBER


def _first_error(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return ""
    first = errors[0]
    loc = ".".join(str(part) for part in first.get("loc", ()))
    return f"{loc}: {first.get('msg', '')}"

