"""The single MPD connection and its reconnect-once policy."""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Optional, TypeVar

from mpd import ConnectionError as MPDConnectionError
from mpd import MPDClient, MPDError

from samc.config import ConnectionTarget

logger = logging.getLogger(__name__)

T = TypeVar("T")
ClientFactory = Callable[[], Any]

_CLOSED_TYPES = (
    MPDConnectionError,
    BrokenPipeError,
    ConnectionResetError,
    ConnectionAbortedError,
    EOFError,
)
_CLOSED_MARKERS = ("eof", "hangup", "broken pipe", "connection lost")
_FAILURES = (MPDError, OSError, EOFError)


class ServiceError(RuntimeError):
    """A call into MPD failed."""

    def __init__(self, message: str, *, connection_closed: bool = False) -> None:
        super().__init__(message)
        self.connection_closed = connection_closed


class ConnectError(ServiceError):
    """A connection to MPD could not be established."""


def is_connection_closed(exc: BaseException) -> bool:
    """Return True when ``exc`` means the transport to MPD is gone."""
    if isinstance(exc, _CLOSED_TYPES):
        return True
    message = str(exc).lower()
    return any(marker in message for marker in _CLOSED_MARKERS)


class Session:
    """Owns the MPD client; every service call goes through :meth:`call`."""

    def __init__(
        self,
        target: ConnectionTarget,
        client_factory: ClientFactory = MPDClient,
    ) -> None:
        self._target = target
        self._client_factory = client_factory
        self._client: Optional[Any] = None
        self._lock = threading.RLock()
        self.reconnects = 0

    @property
    def target(self) -> ConnectionTarget:
        return self._target

    def connect(self) -> None:
        """Open the initial connection, raising :class:`ConnectError`."""
        with self._lock:
            self._discard()
            self._client = self._open()

    def _open(self) -> Any:
        client = self._client_factory()
        try:
            client.connect(self._target.host, self._target.port)
            if self._target.password:
                client.password(self._target.password)
        except _FAILURES as exc:
            raise ConnectError(
                f"cannot connect to MPD at {self._target}: {exc}",
                connection_closed=True,
            ) from exc
        logger.info("Connected to MPD at %s", self._target)
        return client

    def _discard(self) -> None:
        client, self._client = self._client, None
        if client is None:
            return
        try:
            client.disconnect()
        except _FAILURES:
            logger.debug("Ignoring error while dropping MPD client", exc_info=True)

    def call(self, operation: Callable[[Any], T]) -> T:
        """Run ``operation(client)``, reconnecting and retrying once on a drop.

        Failures other than a dropped connection, and any failure of the
        retry, are raised as :class:`ServiceError`.
        """
        with self._lock:
            if self._client is None:
                self._client = self._open()
            try:
                return operation(self._client)
            except _FAILURES as exc:
                if not is_connection_closed(exc):
                    raise ServiceError(str(exc)) from exc
                logger.info("MPD connection lost (%s), reconnecting", exc)
            self._discard()
            self._client = self._open()
            self.reconnects += 1
            try:
                return operation(self._client)
            except _FAILURES as exc:
                raise ServiceError(
                    str(exc), connection_closed=is_connection_closed(exc)
                ) from exc

    def command(self, name: str, *args: Any) -> Any:
        """Call the client method ``name`` with ``args`` through :meth:`call`."""
        return self.call(lambda client: getattr(client, name)(*args))

    def close(self) -> None:
        with self._lock:
            self._discard()
