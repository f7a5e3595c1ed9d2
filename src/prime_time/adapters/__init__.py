from .server import PrimeTimeServer, ServerStateError, serve_connection

__all__ = ["PrimeTimeServer", "ServerStateError", "serve_connection"]
