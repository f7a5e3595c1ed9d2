from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from prime_time.domain.reasons import ReasonCode
from prime_time.ports.prime_checker import PrimeChecker
from prime_time.usecases.codec import (
    FormatError,
    decode_request,
    encode_malformed,
    encode_response,
    read_line_text,
)


class SessionState(str, Enum):
    OPEN = "OPEN"
    PROCESSING = "PROCESSING"
    CLOSED = "CLOSED"


class SessionEvent(str, Enum):
    REQUEST = "REQUEST"
    MALFORMED = "MALFORMED"
    END_OF_STREAM = "END_OF_STREAM"


# Every legal transition; anything missing (i.e. any event after CLOSED) is rejected.
_TRANSITIONS: dict[tuple[SessionState, SessionEvent], SessionState] = {
    (SessionState.OPEN, SessionEvent.REQUEST): SessionState.PROCESSING,
    (SessionState.OPEN, SessionEvent.MALFORMED): SessionState.CLOSED,
    (SessionState.OPEN, SessionEvent.END_OF_STREAM): SessionState.CLOSED,
    (SessionState.PROCESSING, SessionEvent.REQUEST): SessionState.PROCESSING,
    (SessionState.PROCESSING, SessionEvent.MALFORMED): SessionState.CLOSED,
    (SessionState.PROCESSING, SessionEvent.END_OF_STREAM): SessionState.CLOSED,
}


class SessionClosedError(ValueError):
    # Feeding a closed session is a caller bug; the socket loop must stop reading first.
    pass


@dataclass(frozen=True, slots=True)
class SessionStep:
    # Reply is a full wire line including the terminator.
    reply: str
    state: SessionState
    reason: ReasonCode | None = None


@dataclass(slots=True)
class Session:
    """Per-connection protocol state, free of socket plumbing.

    Each framed line yields exactly one reply. A well-formed request keeps the
    session in PROCESSING; the first malformed line produces the malformed
    reply and moves the session to CLOSED, after which no input is accepted.
    """

    checker: PrimeChecker
    state: SessionState = SessionState.OPEN
    handled: int = field(default=0, init=False)

    def handle_line(self, raw: bytes) -> SessionStep:
        self._require_open()
        try:
            request = decode_request(read_line_text(raw))
        except FormatError as exc:
            self.state = self._transition(SessionEvent.MALFORMED)
            return SessionStep(
                reply=encode_malformed(exc.reason) + "\n",
                state=self.state,
                reason=exc.reason,
            )

        prime = self.checker.is_prime(request.number)
        self.state = self._transition(SessionEvent.REQUEST)
        self.handled += 1
        return SessionStep(reply=encode_response(prime) + "\n", state=self.state)

    def end_of_stream(self) -> None:
        # Peer closed cleanly; no reply is owed.
        if self.state is SessionState.CLOSED:
            return
        self.state = self._transition(SessionEvent.END_OF_STREAM)

    @property
    def closed(self) -> bool:
        return self.state is SessionState.CLOSED

    def _require_open(self) -> None:
        if self.state is SessionState.CLOSED:
            raise SessionClosedError("session is closed")

    def _transition(self, event: SessionEvent) -> SessionState:
        try:
            return _TRANSITIONS[(self.state, event)]
        except KeyError as exc:
            raise SessionClosedError(f"no transition from {self.state.value} on {event.value}") from exc
