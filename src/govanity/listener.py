from __future__ import annotations

import logging
import os
import socket
import threading

from govanity.errors import ListenerError

logger = logging.getLogger(__name__)

DEFAULT_BACKLOG = 128


class Listener:
    """A bound, listening unix socket that is closed at most once."""

    def __init__(self, sock: socket.socket, path: str) -> None:
        self.sock = sock
        self.path = path
        self.close_count = 0
        self._lock = threading.Lock()

    @property
    def closed(self) -> bool:
        return self.close_count > 0

    def close(self) -> None:
        with self._lock:
            if self.close_count:
                return
            self.close_count += 1
        self.sock.close()
        logger.debug("Closed listener on %s", self.path)


def open_listener(
    socket_path: str, mode: int | None = None, *, backlog: int = DEFAULT_BACKLOG
) -> Listener:
    """Bind a unix stream socket at ``socket_path`` and optionally chmod it.

    The socket file is left in place when the listener is closed.
    """

    sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    try:
        sock.bind(socket_path)
        sock.listen(backlog)
    except OSError as exc:
        sock.close()
        raise ListenerError(f"listen unix {socket_path}: {exc}") from exc

    listener = Listener(sock, socket_path)

    if mode is not None:
        try:
            os.chmod(socket_path, mode)
        except OSError as exc:
            listener.close()
            raise ListenerError(f"chmod {socket_path}: {exc}") from exc

    return listener
