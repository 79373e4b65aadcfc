# mc_rcon/errors.py
from __future__ import annotations


class RconError(Exception):
    """Base class for everything the client reports to the user."""


class ConfigError(RconError):
    pass


class ConnectionFailedError(RconError):
    pass


class AuthenticationError(RconError):
    pass


class SessionStateError(RconError):
    pass


class TransportError(RconError):
    pass


class CommandTooLongError(RconError):
    pass


class InvalidResponseIdError(RconError):
    pass


class PacketError(RconError):
    """A response could not be read off the wire."""


class MalformedHeaderError(PacketError):
    pass


class PacketSizeError(PacketError):
    pass


class TruncatedPayloadError(PacketError):
    pass


class ReadTimeoutError(PacketError):
    pass
