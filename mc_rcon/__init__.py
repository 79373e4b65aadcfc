"""Minecraft RCON client: packet codec, session and console drivers."""

__version__ = "0.7.2"
