# mc_rcon/packet.py
from __future__ import annotations

import enum
import logging
import socket
import struct
from dataclasses import dataclass
from typing import Union

from .errors import MalformedHeaderError, PacketSizeError, ReadTimeoutError, TruncatedPayloadError

log = logging.getLogger(__name__)

SIZE = struct.Struct("<i")
HEADER = struct.Struct("<ii")  # id, type
TERMINATOR = b"\x00\x00"

MIN_PACKET_SIZE = HEADER.size + len(TERMINATOR)  # 10
MAX_PACKET_SIZE = 4096
MAX_BODY_SIZE = MAX_PACKET_SIZE - MIN_PACKET_SIZE


class PacketType(enum.IntEnum):
    RESPONSE_VALUE = 0
    EXEC_COMMAND = 2
    AUTHENTICATE = 3


# replies to AUTHENTICATE reuse the command type number
AUTH_RESPONSE = PacketType.EXEC_COMMAND


@dataclass(frozen=True, slots=True)
class Packet:
    request_id: int
    packet_type: int
    body: bytes = b""

    @property
    def size(self) -> int:
        return HEADER.size + len(self.body) + len(TERMINATOR)

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", "replace")

    def to_bytes(self) -> bytes:
        return encode_packet(self.request_id, self.packet_type, self.body)

    @staticmethod
    def from_payload(payload: bytes) -> "Packet":
        return decode_payload(payload)


def encode_packet(request_id: int, packet_type: int, body: Union[str, bytes]) -> bytes:
    if isinstance(body, str):
        body = body.encode("utf-8")
    data = HEADER.pack(request_id, int(packet_type)) + body + TERMINATOR
    return SIZE.pack(len(data)) + data


def decode_payload(payload: bytes) -> Packet:
    """Parse everything after the size prefix; the two terminator bytes are dropped."""
    if len(payload) < MIN_PACKET_SIZE:
        raise PacketSizeError(f"invalid packet size: {len(payload)} (must be {MIN_PACKET_SIZE}-{MAX_PACKET_SIZE})")
    request_id, packet_type = HEADER.unpack_from(payload)
    return Packet(request_id, packet_type, bytes(payload[HEADER.size : len(payload) - len(TERMINATOR)]))


def _recv_exact(sock: socket.socket, n: int) -> bytes:
    """Read up to n bytes, looping over partial reads. Returns short only on EOF."""
    data = bytearray()
    while len(data) < n:
        try:
            chunk = sock.recv(n - len(data))
        except socket.timeout as e:
            raise ReadTimeoutError(f"no response within deadline ({len(data)}/{n} bytes read)") from e
        if not chunk:
            break
        data += chunk
    return bytes(data)


def read_packet(sock: socket.socket) -> Packet:
    raw_size = _recv_exact(sock, SIZE.size)
    if len(raw_size) < SIZE.size:
        raise MalformedHeaderError(f"failed to read packet size: got {len(raw_size)} of {SIZE.size} bytes")
    (size,) = SIZE.unpack(raw_size)
    if size < MIN_PACKET_SIZE or size > MAX_PACKET_SIZE:
        raise PacketSizeError(f"invalid packet size: {size} (must be {MIN_PACKET_SIZE}-{MAX_PACKET_SIZE})")

    payload = _recv_exact(sock, size)
    if len(payload) < size:
        raise TruncatedPayloadError(f"failed to read packet payload: got {len(payload)} of {size} bytes")

    packet = decode_payload(payload)
    log.debug("recv id=%d type=%d size=%d", packet.request_id, packet.packet_type, size)
    return packet
