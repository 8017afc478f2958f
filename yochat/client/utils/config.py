"""
Client configuration module.

This module handles client-side configuration settings.
"""

from typing import Optional

from yochat.common.constants import DEFAULT_HOST, DEFAULT_PORT, MAX_RETRY_ATTEMPTS, RECONNECT_DELAY_BASE


class ClientConfig:
    """Client configuration class."""

    def __init__(self, host: str = DEFAULT_HOST, port: int = DEFAULT_PORT,
                 username: Optional[str] = None, retries: int = MAX_RETRY_ATTEMPTS,
                 retry_delay: float = RECONNECT_DELAY_BASE):
        self.host = host
        self.port = port
        # Unlike the server, a client may start without a name and pick one later
        self.username = username

        # Connection settings
        self.retries = max(1, retries)
        self.retry_delay = retry_delay
