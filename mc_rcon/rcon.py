# mc_rcon/rcon.py
from __future__ import annotations

import enum
import logging
import socket
import time
from typing import Optional

from .config import RconConfig
from .errors import (
    AuthenticationError,
    ConnectionFailedError,
    CommandTooLongError,
    InvalidResponseIdError,
    PacketError,
    SessionStateError,
    TransportError,
)
from .packet import MAX_PACKET_SIZE, Packet, PacketType, encode_packet, read_packet

log = logging.getLogger(__name__)

REQUEST_ID = 0x0BADC0DE
REJECTED_ID = -1

CONNECT_ATTEMPTS = 3
CONNECT_TIMEOUT = 10.0  # seconds, per attempt
RETRY_PAUSE = 1.0       # seconds
READ_TIMEOUT = 10.0     # seconds, per response


class SessionState(enum.Enum):
    DISCONNECTED = "disconnected"
    CONNECTED = "connected"
    AUTHENTICATED = "authenticated"
    CLOSED = "closed"


class RconSession:
    """
    One TCP connection to an RCON server, used for a single login followed by
    any number of sequential commands. A session that fails is not reused.
    """

    def __init__(self, config: RconConfig):
        self.config = config
        self.state = SessionState.DISCONNECTED
        self._sock: Optional[socket.socket] = None

    def __enter__(self) -> "RconSession":
        self.connect()
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def _set_state(self, state: SessionState) -> None:
        log.debug("session %s -> %s", self.state.value, state.value)
        self.state = state

    def _require(self, state: SessionState, op: str) -> None:
        if self.state is not state:
            raise SessionStateError(f"cannot {op} while {self.state.value}")

    # --- connection ----------------------------------------------------------

    def connect(self) -> None:
        self._require(SessionState.DISCONNECTED, "connect")
        port = self.config.port_number
        last_err: Optional[OSError] = None

        for attempt in range(1, CONNECT_ATTEMPTS + 1):
            log.debug("connecting to %s (attempt %d/%d)", self.config.address, attempt, CONNECT_ATTEMPTS)
            try:
                sock = socket.create_connection((self.config.host, port), timeout=CONNECT_TIMEOUT)
                break
            except OSError as e:
                last_err = e
                log.info("connect to %s failed: %s", self.config.address, e)
                if attempt < CONNECT_ATTEMPTS:
                    time.sleep(RETRY_PAUSE)
        else:
            self._set_state(SessionState.CLOSED)
            raise ConnectionFailedError(f"failed to connect to {self.config.address}: {last_err}") from last_err

        try:
            sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
        except (OSError, AttributeError):
            pass
        sock.settimeout(None)
        self._sock = sock
        self._set_state(SessionState.CONNECTED)

    def close(self) -> None:
        if self.state is SessionState.CLOSED and self._sock is None:
            return
        if self._sock is not None:
            try:
                self._sock.close()
            finally:
                self._sock = None
        self._set_state(SessionState.CLOSED)

    # --- framing -------------------------------------------------------------

    def _send(self, packet_type: PacketType, body: str) -> None:
        data = encode_packet(REQUEST_ID, packet_type, body)
        log.debug("send id=%d type=%d size=%d", REQUEST_ID, int(packet_type), len(data) - 4)
        try:
            self._sock.sendall(data)
        except OSError as e:
            raise TransportError(f"send failed: {e}") from e

    def _receive(self) -> Packet:
        self._sock.settimeout(READ_TIMEOUT)
        try:
            return read_packet(self._sock)
        except OSError as e:
            raise TransportError(f"receive failed: {e}") from e
        finally:
            # no deadline leaks into the next read
            if self._sock is not None:
                self._sock.settimeout(None)

    # --- protocol ------------------------------------------------------------

    def authenticate(self) -> None:
        self._require(SessionState.CONNECTED, "authenticate")
        self._send(PacketType.AUTHENTICATE, self.config.password)
        try:
            response = self._receive()
        except PacketError as e:
            raise type(e)(f"failed to receive auth response: {e}") from e
        # only the -1 sentinel means rejection; the echoed id is not checked
        if response.request_id == REJECTED_ID:
            self.close()
            raise AuthenticationError("authentication rejected")
        self._set_state(SessionState.AUTHENTICATED)

    def command(self, cmd: str) -> str:
        """Run one command and return the response body (possibly empty)."""
        self._require(SessionState.AUTHENTICATED, "run a command")
        size = len(cmd.encode("utf-8"))
        if size >= MAX_PACKET_SIZE:
            raise CommandTooLongError(f"command too long ({size} bytes). Maximum: {MAX_PACKET_SIZE - 1}")

        self._send(PacketType.EXEC_COMMAND, cmd)
        try:
            response = self._receive()
        except PacketError as e:
            raise type(e)(f"failed to receive response: {e}") from e
        if response.request_id != REQUEST_ID:
            raise InvalidResponseIdError(
                f"invalid response ID: expected {REQUEST_ID}, got {response.request_id}"
            )
        return response.text
