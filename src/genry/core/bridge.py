"""Lifecycle notifications for an editor extension listening over local IPC."""

from __future__ import annotations

import json
import logging
import socket
from pathlib import Path
from types import TracebackType
from typing import Literal

logger = logging.getLogger(__name__)

BridgeEvent = Literal["found", "notFound", "end"]

EVENTS: frozenset[str] = frozenset({"found", "notFound", "end"})

SOCKET_ROOT = Path("/tmp")
SOCKET_APPSPACE = "app."
MESSAGE_DELIMITER = "\f"


def socket_path(server_id: str) -> Path:
    """Path of the Unix socket the editor extension serves *server_id* on."""
    return SOCKET_ROOT / f"{SOCKET_APPSPACE}{server_id}"


class EditorBridge:
    """
    Reports ``found``, ``notFound`` and ``end`` to an editor extension.

    Without a server id every ``emit`` is a no-op. Transport failures are
    logged once and turn the bridge off, they never reach the caller.
    """

    def __init__(self, server_id: str | None = None, terminal_id: str | None = None) -> None:
        self._server_id = server_id
        self._terminal_id = terminal_id
        self._sock: socket.socket | None = None
        self._disabled = server_id is None

    @property
    def server_id(self) -> str | None:
        return self._server_id

    @property
    def terminal_id(self) -> str | None:
        return self._terminal_id

    def _connect(self) -> socket.socket:
        if self._sock is None:
            if not hasattr(socket, "AF_UNIX"):
                raise OSError("Unix domain sockets are not available on this platform")
            sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
            try:
                sock.connect(str(socket_path(self._server_id or "")))
            except OSError:
                sock.close()
                raise
            self._sock = sock
        return self._sock

    def emit(self, event: BridgeEvent) -> None:
        if event not in EVENTS:
            raise ValueError(f"Unknown editor event {event!r}, expected one of {sorted(EVENTS)}.")
        if self._disabled:
            return

        message = json.dumps({"type": event, "data": {"terminalId": self._terminal_id}})
        try:
            self._connect().sendall((message + MESSAGE_DELIMITER).encode("utf-8"))
        except OSError as e:
            logger.warning("Editor integration unavailable (%s): %s", self._server_id, e)
            self._disabled = True
            self.close()
            return
        logger.debug("Sent %r to editor %s", event, self._server_id)

    def close(self) -> None:
        if self._sock is not None:
            self._sock.close()
            self._sock = None

    def __enter__(self) -> EditorBridge:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
