from __future__ import annotations

import socket
import threading
from dataclasses import dataclass, field

from prime_time.observability.logging import log_event
from prime_time.ports.log_sink import LogSink
from prime_time.ports.prime_checker import PrimeChecker
from prime_time.usecases.config_models import ServerConfig
from prime_time.usecases.session import Session


class ServerStateError(RuntimeError):
    # Raised when the server is used before open() or after close().
    pass


def serve_connection(
    conn: socket.socket,
    peer: object,
    checker: PrimeChecker,
    log_sink: LogSink | None = None,
) -> None:
    """Drive one accepted socket until end-of-stream, a malformed line or a transport error.

    Lines are reassembled by a buffered reader; each one is handed to a
    ``Session`` and its reply is written before the next line is read, so
    replies leave in receipt order. After a malformed reply the write side is
    shut down and the socket closed without reading further input.
    """
    session = Session(checker=checker)
    peer_text = _format_peer(peer)
    log_event(log_sink, level="debug", message="session.opened", peer=peer_text)

    with conn:
        try:
            with conn.makefile("rb") as reader:
                while not session.closed:
                    raw = reader.readline()
                    if not raw:
                        session.end_of_stream()
                        break
                    step = session.handle_line(raw)
                    conn.sendall(step.reply.encode("utf-8"))
                    if step.reason is not None:
                        log_event(
                            log_sink,
                            level="info",
                            message="session.malformed",
                            peer=peer_text,
                            reason=step.reason.value,
                            handled=session.handled,
                        )
                        conn.shutdown(socket.SHUT_WR)
        except OSError as exc:
            session.end_of_stream()
            log_event(
                log_sink,
                level="debug",
                message="session.transport_error",
                peer=peer_text,
                error_type=type(exc).__name__,
                error=str(exc),
            )

    log_event(
        log_sink,
        level="debug",
        message="session.closed",
        peer=peer_text,
        handled=session.handled,
    )


@dataclass
class PrimeTimeServer:
    """Listener/Dispatcher: one daemon thread per accepted connection.

    Sessions share only the immutable ``checker``. The accept loop polls with
    ``config.accept_poll_seconds`` so that ``shutdown()`` from another thread
    ends ``serve_forever()`` promptly.
    """

    config: ServerConfig
    checker: PrimeChecker
    log_sink: LogSink | None = None
    _listener: socket.socket | None = field(default=None, init=False, repr=False)
    _stop: threading.Event = field(default_factory=threading.Event, init=False, repr=False)

    def open(self) -> tuple[str, int]:
        if self._listener is not None:
            return self.address
        listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            listener.bind((self.config.host, self.config.port))
            listener.listen(self.config.backlog)
            listener.settimeout(self.config.accept_poll_seconds)
        except OSError:
            listener.close()
            raise
        self._listener = listener
        self._stop.clear()
        host, port = self.address
        log_event(self.log_sink, level="info", message="server.listening", host=host, port=port)
        return host, port

    @property
    def address(self) -> tuple[str, int]:
        listener = self._require_listener()
        host, port = listener.getsockname()[:2]
        return host, port

    def serve_forever(self) -> None:
        listener = self._require_listener()
        while not self._stop.is_set():
            try:
                conn, peer = listener.accept()
            except TimeoutError:
                continue
            except OSError as exc:
                if self._stop.is_set():
                    break
                # Transient accept failures (EMFILE, ECONNABORTED) must not end the loop.
                log_event(
                    self.log_sink,
                    level="warning",
                    message="server.accept_failed",
                    error_type=type(exc).__name__,
                    error=str(exc),
                )
                continue
            self._dispatch(conn, peer)
        log_event(self.log_sink, level="info", message="server.stopped")

    def shutdown(self) -> None:
        self._stop.set()

    def close(self) -> None:
        self._stop.set()
        if self._listener is not None:
            self._listener.close()
            self._listener = None

    def __enter__(self) -> PrimeTimeServer:
        self.open()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _dispatch(self, conn: socket.socket, peer: object) -> None:
        # Accepted sockets are switched to blocking mode; the poll timeout is for the listener only.
        conn.settimeout(None)
        thread = threading.Thread(
            target=serve_connection,
            args=(conn, peer, self.checker, self.log_sink),
            name=f"session-{_format_peer(peer)}",
            daemon=True,
        )
        thread.start()

    def _require_listener(self) -> socket.socket:
        if self._listener is None:
            raise ServerStateError("server is not open; call open() first")
        return self._listener


def _format_peer(peer: object) -> str:
    if isinstance(peer, tuple) and len(peer) >= 2:
        return f"{peer[0]}:{peer[1]}"
    return str(peer)
