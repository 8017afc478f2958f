"""
Connection registry.

Tracks live connections, the name bound to each one, and the set of names in
use. One asyncio.Lock guards all three collections so a reader never sees a
rename half applied.
"""

import asyncio
from dataclasses import dataclass
from typing import Dict, List, Optional

from yochat.server.chat.errors import InvalidName, NameTaken, TransportClosed
from yochat.server.connection import Connection


@dataclass(frozen=True)
class NameChange:
    """Outcome of a successful set_identity call."""
    old: Optional[str]
    new: str

    @property
    def is_first(self) -> bool:
        return self.old is None

    @property
    def is_rename(self) -> bool:
        return self.old is not None and self.old != self.new


class ConnectionRegistry:
    """Live connections, their optional identities and the name-set."""

    def __init__(self):
        self.connections: Dict[int, Connection] = {}  # uid -> connection
        self.identities: Dict[int, str] = {}  # uid -> name
        self.names: Dict[str, int] = {}  # name -> uid, insertion ordered
        self.lock = asyncio.Lock()

    async def register(self, connection: Connection):
        """Add a connection in the anonymous state."""
        async with self.lock:
            self.connections[connection.uid] = connection

    async def deregister(self, connection: Connection) -> Optional[str]:
        """
        Remove a connection and release its name.

        Returns the released name, or None if the connection had none or was
        not registered. Calling it twice is harmless.
        """
        async with self.lock:
            if self.connections.pop(connection.uid, None) is None:
                return None
            name = self.identities.pop(connection.uid, None)
            if name is not None:
                del self.names[name]
            return name

    async def set_identity(self, connection: Connection, name: str) -> NameChange:
        """
        Bind ``name`` to ``connection``.

        Raises InvalidName for a blank name and NameTaken if another connection
        holds it. Neither failure changes any state.
        """
        name = (name or '').strip()
        if not name:
            raise InvalidName(name)

        async with self.lock:
            if connection.uid not in self.connections:
                raise TransportClosed(connection.uid)

            owner = self.names.get(name)
            if owner is not None and owner != connection.uid:
                raise NameTaken(name)

            old = self.identities.get(connection.uid)
            if old == name:
                return NameChange(old, name)
            if old is not None:
                del self.names[old]
            self.identities[connection.uid] = name
            self.names[name] = connection.uid
            return NameChange(old, name)

    async def identity_of(self, connection: Connection) -> Optional[str]:
        """Bound name, or None for an anonymous connection."""
        async with self.lock:
            return self.identities.get(connection.uid)

    async def lookup_identity(self, connection: Connection) -> str:
        """Bound name, or a display-only placeholder built from the peer address."""
        name = await self.identity_of(connection)
        if name is None:
            return connection.peername
        return name

    async def all_connections(self) -> List[Connection]:
        async with self.lock:
            return list(self.connections.values())

    async def others(self, connection: Connection) -> List[Connection]:
        """Snapshot of every live connection except ``connection``."""
        async with self.lock:
            return [c for uid, c in self.connections.items() if uid != connection.uid]

    async def lurkers(self) -> List[Connection]:
        """Snapshot of registered connections with no name."""
        async with self.lock:
            return [c for uid, c in self.connections.items() if uid not in self.identities]

    async def all_names(self) -> List[str]:
        async with self.lock:
            return list(self.names)

    async def count(self) -> int:
        async with self.lock:
            return len(self.connections)

    async def named_count(self) -> int:
        async with self.lock:
            return len(self.identities)

    async def lurker_count(self) -> int:
        """count() - named_count(), read in one critical section."""
        async with self.lock:
            return len(self.connections) - len(self.identities)

    async def is_registered(self, connection: Connection) -> bool:
        async with self.lock:
            return connection.uid in self.connections
