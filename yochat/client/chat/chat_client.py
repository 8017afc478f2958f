"""
Chat client module.

This module handles client-side chat messaging functionality.
"""

import asyncio
from typing import Callable, Optional

from yochat.common.constants import COMMAND_PREFIX, Keywords
from yochat.common.protocol_definitions import encode_line
from yochat.client.utils.logger import logger


class ChatClient:
    """Client-side chat functionality."""

    def __init__(self, writer: Optional[asyncio.StreamWriter] = None):
        self.writer = writer
        self.message_handler: Optional[Callable[[str], None]] = None

    def set_writer(self, writer: asyncio.StreamWriter):
        """Set the writer for sending messages."""
        self.writer = writer

    def set_message_handler(self, handler: Callable[[str], None]):
        """Set the handler called with each line received from the server."""
        self.message_handler = handler

    async def send_line(self, text: str) -> bool:
        """Send one line to the server."""
        if not self.writer:
            logger.error("[ERROR] Not connected to server")
            return False

        try:
            self.writer.write(encode_line(text))
            await self.writer.drain()
            logger.log_chat_sent(text)
            return True
        except (ConnectionError, OSError) as e:
            logger.error(f"[ERROR] Failed to send message: {e}")
            return False

    async def send_command(self, keyword: str, argument: str = '') -> bool:
        text = f"{COMMAND_PREFIX}{keyword}"
        if argument:
            text = f"{text} {argument}"
        return await self.send_line(text)

    async def set_name(self, name: str) -> bool:
        return await self.send_command(Keywords.NAME, name)

    async def quit(self) -> bool:
        return await self.send_command(Keywords.QUIT)

    def handle_line(self, line: str):
        """Deliver one server line to the handler, or print it."""
        if self.message_handler is not None:
            self.message_handler(line)
        else:
            print(line)
