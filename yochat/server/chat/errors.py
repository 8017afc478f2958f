"""
Chat error taxonomy.

Naming errors are recovered locally and answered with a plain-text reply.
Transport errors are isolated to the connection they happened on.
"""


class ChatError(Exception):
    """Base class for all relay errors."""


class InvalidName(ChatError):
    """Requested name is empty or blank after stripping."""

    def __init__(self, name: str = ''):
        super().__init__(f"invalid username: {name!r}")
        self.name = name


class NameTaken(ChatError):
    """Requested name is already bound to another connection."""

    def __init__(self, name: str):
        super().__init__(f"username taken: {name!r}")
        self.name = name


class TransportWriteFailure(ChatError):
    """Writing to a connection's outbound stream failed."""

    def __init__(self, uid: int, cause: Exception = None):
        super().__init__(f"write to uid={uid} failed: {cause}")
        self.uid = uid
        self.cause = cause


class TransportClosed(ChatError):
    """The connection is closed or no longer registered."""

    def __init__(self, uid: int):
        super().__init__(f"connection uid={uid} is closed")
        self.uid = uid
