"""
Chat server module.

This module interprets each inbound line as either a command or a chat
message, applies it to the connection registry and fans the resulting text out
to the sender, to everyone else, or to nobody.
"""

from typing import Optional

from yochat.common.constants import COMMAND_PREFIX, Keywords
from yochat.common.protocol_definitions import (
    HELLO, GOODBYE, PICK_A_NAME, INVALID_NAME, NAME_TAKEN, HELP_TEXT,
    create_name_set_message, create_user_joined_message, create_user_left_message,
    create_rename_message, create_chat_message, create_lurkers_message,
    create_who_message
)
from yochat.server.chat.commands import CommandProcessor
from yochat.server.chat.errors import InvalidName, NameTaken, TransportClosed, TransportWriteFailure
from yochat.server.chat.registry import ConnectionRegistry
from yochat.server.connection import Connection
from yochat.server.utils.logger import logger


class ChatServer:
    """Session protocol engine: per-line command and chat dispatch."""

    def __init__(self, registry: Optional[ConnectionRegistry] = None,
                 command_processor: Optional[CommandProcessor] = None,
                 prefix: str = COMMAND_PREFIX):
        self.registry = registry or ConnectionRegistry()
        self.command_processor = command_processor or CommandProcessor(prefix)
        self.prefix = prefix
        self.keyword_handlers = {
            Keywords.QUIT: self.handle_quit,
            Keywords.LURKERS: self.handle_lurkers,
            Keywords.KICK_LURKERS: self.handle_kick_lurkers,
            Keywords.NAME: self.handle_name,
            Keywords.HELP: self.handle_help,
            Keywords.WHO: self.handle_who,
        }

    # Lifecycle

    async def on_connect(self, connection: Connection):
        """Register a new anonymous connection and greet it. Nobody else is told."""
        await self.registry.register(connection)
        await self.send_message(connection, HELLO)

    async def on_disconnect(self, connection: Connection):
        """Remote close or end of stream: release the name and drop the handle."""
        display = await self.registry.lookup_identity(connection)
        if await self.registry.is_registered(connection):
            logger.log_disconnect(display, connection.uid)
        await self.registry.deregister(connection)
        await connection.close()

    async def on_error(self, connection: Connection, error: Exception):
        """Transport failure: fatal for this connection only, no "left chat" notice."""
        logger.log_error(f"connection uid={connection.uid}", error)
        await self.registry.deregister(connection)
        await connection.close()

    # Outbound

    async def send_message(self, connection: Connection, text: str) -> bool:
        """Reply to a single connection. Failures are logged, never raised."""
        try:
            await connection.send(text)
            return True
        except TransportWriteFailure as e:
            logger.log_send_failure(connection.uid, e)
            return False

    async def broadcast(self, sender: Connection, text: str):
        """
        Send ``text`` to every live connection except ``sender``.

        Recipients are snapshotted up front. A recipient whose write fails is
        logged and dropped; delivery to the rest continues.
        """
        recipients = await self.registry.others(sender)
        failed = []
        for recipient in recipients:
            if not await self.send_message(recipient, text):
                failed.append(recipient)

        for recipient in failed:
            await self.registry.deregister(recipient)
            await recipient.close()

        return failed

    # Inbound

    async def handle_line(self, connection: Connection, raw: str) -> bool:
        """
        Process one decoded line from ``connection``.

        Returns False once the connection has been closed by the line it sent
        (quit, or kicking itself as a lurker), True otherwise.
        """
        text = raw.strip()
        if not text:
            return not connection.closed

        handler, argument = self.match_keyword(text)
        if handler is not None or text.startswith(self.prefix):
            display = await self.registry.lookup_identity(connection)
            logger.log_command(display, connection.uid, text)

        if handler is not None:
            await handler(connection, argument)
        elif text.startswith(self.prefix):
            await self.command_processor.process(connection, text)
        else:
            await self.handle_chat(connection, text)

        return not connection.closed

    def match_keyword(self, text: str):
        """
        Return (handler, argument) for the first matching built-in keyword.

        The command prefix is optional: "quit" and "/quit" both match.
        """
        body = text[len(self.prefix):] if text.startswith(self.prefix) else text
        body = body.strip()
        parts = body.split(None, 1)
        first = parts[0].lower() if parts else ''
        for keyword in Keywords.ORDER:
            if keyword == Keywords.NAME:
                # prefix match: "name" followed by whitespace and the value
                if first == keyword:
                    argument = parts[1].strip() if len(parts) > 1 else ''
                    return self.keyword_handlers[keyword], argument
            elif body.lower() == keyword:
                return self.keyword_handlers[keyword], ''
        return None, ''

    async def handle_quit(self, connection: Connection, _argument: str = ''):
        display = await self.registry.lookup_identity(connection)
        logger.log_quit(display, connection.uid)
        await self.broadcast(connection, create_user_left_message(display))
        await self.send_message(connection, GOODBYE)
        await self.registry.deregister(connection)
        await connection.close()

    async def handle_lurkers(self, connection: Connection, _argument: str = ''):
        count = await self.registry.lurker_count()
        await self.send_message(connection, create_lurkers_message(count))

    async def handle_kick_lurkers(self, connection: Connection, _argument: str = ''):
        # Single pass over a snapshot; connections that lose their name later are not caught
        for lurker in await self.registry.lurkers():
            logger.log_kick(lurker.peername, lurker.uid, connection.uid)
            await lurker.close()
            await self.registry.deregister(lurker)

    async def handle_name(self, connection: Connection, name: str):
        try:
            change = await self.registry.set_identity(connection, name)
        except InvalidName:
            logger.log_name_rejected(name, connection.uid, "invalid")
            await self.send_message(connection, INVALID_NAME)
            return
        except NameTaken:
            logger.log_name_rejected(name, connection.uid, "taken")
            await self.send_message(connection, NAME_TAKEN)
            return
        except TransportClosed:
            return

        await self.send_message(connection, create_name_set_message(change.new))
        if change.is_rename:
            logger.log_rename(change.old, change.new, connection.uid)
            await self.broadcast(connection, create_rename_message(change.old, change.new))
        elif change.is_first:
            logger.log_name_set(change.new, connection.uid)
            await self.broadcast(connection, create_user_joined_message(change.new))

    async def handle_help(self, connection: Connection, _argument: str = ''):
        await self.send_message(connection, HELP_TEXT)

    async def handle_who(self, connection: Connection, _argument: str = ''):
        names = await self.registry.all_names()
        await self.send_message(connection, create_who_message(names))

    async def handle_chat(self, connection: Connection, text: str):
        """Relay a chat line to everyone but the sender, if the sender has a name."""
        name = await self.registry.identity_of(connection)
        if name is None:
            await self.send_message(connection, PICK_A_NAME)
            return

        logger.log_chat(name, connection.uid, text)
        await self.broadcast(connection, create_chat_message(name, text))
