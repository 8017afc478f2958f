"""
Per-client connection handle.

A Connection wraps the asyncio StreamWriter of one client. It is keyed by an
integer uid so registries and tests can compare handles by value.
"""

import asyncio
from typing import Optional

from yochat.common.protocol_definitions import encode_line
from yochat.server.chat.errors import TransportWriteFailure


class Connection:
    """One live client stream, addressable for writes and closable."""

    def __init__(self, uid: int, writer: Optional[asyncio.StreamWriter], peername: str = 'unknown'):
        self.uid = uid
        self.writer = writer
        self.peername = peername
        self.closed = False

    def __eq__(self, other):
        if not isinstance(other, Connection):
            return NotImplemented
        return self.uid == other.uid

    def __hash__(self):
        return hash(self.uid)

    def __repr__(self):
        return f"Connection(uid={self.uid}, peer={self.peername})"

    async def send(self, text: str):
        """Queue one line for delivery and wait for the transport to accept it."""
        if self.closed or self.writer is None:
            raise TransportWriteFailure(self.uid, ConnectionError("connection closed"))
        try:
            self.writer.write(encode_line(text))
            # Known limit: a reader slower than its peers holds up a broadcast here
            # once its buffer passes the high-water mark
            await self.writer.drain()
        except (ConnectionError, OSError, RuntimeError) as e:
            raise TransportWriteFailure(self.uid, e) from e

    async def close(self):
        """Close the underlying writer. Safe to call more than once."""
        if self.closed:
            return
        self.closed = True
        if self.writer is None:
            return
        try:
            self.writer.close()
            await self.writer.wait_closed()
        except (ConnectionError, OSError):
            pass
