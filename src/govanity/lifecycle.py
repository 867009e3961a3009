from __future__ import annotations

import logging
import queue
import signal
import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from types import FrameType

import uvicorn
from fastapi import FastAPI

from govanity.app import create_app
from govanity.config import VanityConfig, validate_config
from govanity.errors import ServerError
from govanity.listener import Listener, open_listener

logger = logging.getLogger(__name__)

SHUTDOWN_SIGNALS: tuple[signal.Signals, ...] = (signal.SIGINT, signal.SIGTERM)

ServeFunc = Callable[[FastAPI, Listener], None]


@dataclass(frozen=True)
class ShutdownEvent:
    signum: int | None = None
    error: BaseException | None = None

    @property
    def is_signal(self) -> bool:
        return self.signum is not None

    @property
    def signal_name(self) -> str:
        if self.signum is None:
            return ""
        try:
            return signal.Signals(self.signum).name
        except ValueError:
            return str(self.signum)


class ShutdownRace:
    """First of (server stopped, signal received) wins; later events are dropped.

    SimpleQueue.put is reentrant, so signal_received can run as a signal handler
    while the main thread is blocked in wait().
    """

    def __init__(self) -> None:
        self._events: queue.SimpleQueue[ShutdownEvent] = queue.SimpleQueue()
        self._winner: ShutdownEvent | None = None

    def server_stopped(self, error: BaseException) -> None:
        self._events.put(ShutdownEvent(error=error))

    def signal_received(self, signum: int, frame: FrameType | None = None) -> None:
        self._events.put(ShutdownEvent(signum=signum))

    def wait(self, poll_interval: float = 0.2) -> ShutdownEvent:
        # Polling lets the main thread run Python signal handlers even when the
        # OS delivered the signal to another thread.
        while self._winner is None:
            try:
                self._winner = self._events.get(timeout=poll_interval)
            except queue.Empty:
                continue
        return self._winner


def serve_uvicorn(app: FastAPI, listener: Listener) -> None:
    # Off the main thread uvicorn leaves signal handling to us.
    config = uvicorn.Config(app, log_config=None, access_log=False)
    uvicorn.Server(config).run(sockets=[listener.sock])


def _serve_in_thread(
    serve: ServeFunc, app: FastAPI, listener: Listener, race: ShutdownRace
) -> threading.Thread:
    def _target() -> None:
        try:
            serve(app, listener)
        except (Exception, SystemExit) as exc:
            race.server_stopped(exc)
        else:
            race.server_stopped(ServerError("server stopped unexpectedly"))

    thread = threading.Thread(target=_target, name="govanity-server", daemon=True)
    thread.start()
    return thread


def run(
    config: VanityConfig,
    *,
    serve: ServeFunc | None = None,
    signals: Iterable[signal.Signals] = SHUTDOWN_SIGNALS,
) -> int:
    """Serve ``config`` on its unix socket until a signal or a server failure.

    Returns the process exit status: 0 after a signal, 1 after a server failure.
    Config and listener errors propagate (ConfigError, ListenerError) before
    anything is served.
    Must be called from the main thread.
    """

    validate_config(config)
    listener = open_listener(config.socket_path, config.socket_mode)
    logger.info("Listening on unix:%s", config.socket_path)

    race = ShutdownRace()
    previous: dict[signal.Signals, object] = {}
    try:
        for sig in signals:
            previous[sig] = signal.signal(sig, race.signal_received)

        _serve_in_thread(serve or serve_uvicorn, create_app(config), listener, race)
        event = race.wait()
    finally:
        listener.close()
        for sig, handler in previous.items():
            # None means the handler was not installed from Python.
            signal.signal(sig, signal.SIG_DFL if handler is None else handler)

    if event.is_signal:
        logger.info("signal received: %s", event.signal_name)
        return 0

    logger.error("server failed: %s", event.error)
    return 1
