"""
In-memory stand-ins for asyncio stream writers used by the unit tests.
"""

from yochat.server.connection import Connection


class FakeWriter:
    """Records written bytes; optionally fails every write."""

    def __init__(self, fail: bool = False):
        self.buffer = bytearray()
        self.fail = fail
        self.closed = False

    def write(self, data: bytes):
        if self.fail:
            raise ConnectionResetError("peer reset")
        self.buffer.extend(data)

    async def drain(self):
        pass

    def close(self):
        self.closed = True

    async def wait_closed(self):
        pass

    def text(self) -> str:
        return self.buffer.decode('utf-8')

    def lines(self):
        return [line for line in self.text().split('\n') if line]

    def clear(self):
        self.buffer.clear()


def make_connection(uid: int, fail: bool = False) -> Connection:
    """Connection backed by a FakeWriter, with a predictable peer address."""
    return Connection(uid, FakeWriter(fail=fail), f"127.0.0.1:{50000 + uid}")
