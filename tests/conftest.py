from __future__ import annotations

import socket
import threading
from typing import Optional

import pytest

from mc_rcon.config import RconConfig
from mc_rcon.errors import PacketError
from mc_rcon.packet import AUTH_RESPONSE, Packet, PacketType, encode_packet, read_packet
from mc_rcon.rcon import REQUEST_ID

PASSWORD = "secret"


def auth_ok(request_id: int = REQUEST_ID) -> bytes:
    return encode_packet(request_id, AUTH_RESPONSE, "")


def auth_rejected(packet_type: int = AUTH_RESPONSE, body: str = "") -> bytes:
    return encode_packet(-1, packet_type, body)


def response(body: str, request_id: int = REQUEST_ID) -> bytes:
    return encode_packet(request_id, PacketType.RESPONSE_VALUE, body)


class FakeRconServer:
    """
    Accepts a single connection and answers the n-th request with the n-th
    scripted reply. A reply of None means "read the request, send nothing".
    """

    def __init__(self, replies: list[Optional[bytes]]):
        self.replies = replies
        self.requests: list[Packet] = []
        self.sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self.sock.bind(("127.0.0.1", 0))
        self.sock.listen(1)
        self.port = self.sock.getsockname()[1]
        self.thread = threading.Thread(target=self._serve, daemon=True)

    def config(self, **overrides) -> RconConfig:
        values = {"host": "127.0.0.1", "port": str(self.port), "password": PASSWORD}
        values.update(overrides)
        return RconConfig(**values)

    def start(self) -> "FakeRconServer":
        self.thread.start()
        return self

    def _serve(self) -> None:
        try:
            conn, _ = self.sock.accept()
        except OSError:
            return
        with conn:
            for reply in self.replies:
                try:
                    packet = read_packet(conn)
                except (PacketError, OSError):
                    return
                self.requests.append(packet)
                if reply is not None:
                    conn.sendall(reply)
            try:
                while conn.recv(4096):
                    pass
            except OSError:
                pass

    def stop(self) -> None:
        self.thread.join(timeout=5.0)
        self.sock.close()


@pytest.fixture
def rcon_server():
    servers: list[FakeRconServer] = []

    def start(*replies: Optional[bytes]) -> FakeRconServer:
        srv = FakeRconServer(list(replies)).start()
        servers.append(srv)
        return srv

    yield start
    for srv in servers:
        srv.sock.close()
