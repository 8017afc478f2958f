"""
Command sub-processor.

Receives slash-prefixed lines that none of the built-in chat keywords claim.
Extra commands can be plugged in with ``register``; anything else gets an
"unknown command" reply.
"""

from typing import Awaitable, Callable, Dict

from yochat.common.constants import COMMAND_PREFIX
from yochat.common.protocol_definitions import create_unknown_command_message
from yochat.server.chat.errors import TransportWriteFailure
from yochat.server.connection import Connection
from yochat.server.utils.logger import logger

CommandHandler = Callable[[Connection, str], Awaitable[None]]


class CommandProcessor:
    """Routes extension commands to their handlers."""

    def __init__(self, prefix: str = COMMAND_PREFIX):
        self.prefix = prefix
        self.handlers: Dict[str, CommandHandler] = {}

    def register(self, name: str, handler: CommandHandler):
        """Register ``handler(connection, args)`` for ``/name args``."""
        self.handlers[name.lower()] = handler

    async def process(self, connection: Connection, text: str):
        """Handle the full command text, prefix included."""
        body = text[len(self.prefix):] if text.startswith(self.prefix) else text
        parts = body.split(None, 1)
        name = parts[0].lower() if parts else ''
        args = parts[1].strip() if len(parts) > 1 else ''

        handler = self.handlers.get(name)
        if handler is not None:
            await handler(connection, args)
            return

        logger.debug(f"Unknown command '{text}' from uid={connection.uid}")
        try:
            await connection.send(create_unknown_command_message(text))
        except TransportWriteFailure as e:
            logger.log_send_failure(connection.uid, e)
