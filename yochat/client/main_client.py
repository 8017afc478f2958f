#!/usr/bin/env python3
"""
yochat terminal client - Main Entry Point

Connects to a relay server, prints every line the server sends and forwards
each line typed on stdin.
"""

import argparse
import asyncio
import sys
import threading
from typing import Optional

from yochat.client.chat.chat_client import ChatClient
from yochat.client.utils.config import ClientConfig
from yochat.client.utils.logger import logger
from yochat.common.constants import DEFAULT_HOST, DEFAULT_PORT, MAX_RETRY_ATTEMPTS
from yochat.common.protocol_definitions import decode_line


class RelayClient:
    """Terminal client for the relay server."""

    def __init__(self, config: Optional[ClientConfig] = None, input_stream=None):
        self.config = config or ClientConfig()
        self.input_stream = input_stream or sys.stdin
        self.reader: Optional[asyncio.StreamReader] = None
        self.writer: Optional[asyncio.StreamWriter] = None
        self.running = False
        self.chat_client = ChatClient()

    async def connect(self) -> bool:
        """Establish connection to the server with retry logic and exponential backoff."""
        for attempt in range(1, self.config.retries + 1):
            try:
                self.reader, self.writer = await asyncio.open_connection(self.config.host, self.config.port)
                logger.log_connection(self.config.host, self.config.port, True)
                self.chat_client.set_writer(self.writer)
                self.running = True
                return True
            except OSError as e:
                logger.log_connection(self.config.host, self.config.port, False)
                logger.log_error("connection", e)

                if attempt < self.config.retries:
                    delay = self.config.retry_delay * (2 ** (attempt - 1))
                    logger.info(f"[INFO] Retrying connection in {delay}s (attempt {attempt}/{self.config.retries})...")
                    await asyncio.sleep(delay)

        logger.error(f"[ERROR] Failed to connect after {self.config.retries} attempts")
        return False

    async def listen_for_messages(self):
        """Print server lines until the server closes the connection."""
        while self.running:
            try:
                data = await self.reader.readline()
            except (ConnectionError, OSError) as e:
                logger.error(f"[ERROR] Connection lost: {e}")
                break
            if not data:
                logger.info("[INFO] Server closed connection")
                break
            self.chat_client.handle_line(decode_line(data))
        self.running = False

    async def close(self):
        self.running = False
        if self.writer:
            self.writer.close()
            try:
                await self.writer.wait_closed()
            except (ConnectionError, OSError):
                pass
        logger.info("[INFO] Disconnected from server")

    def _read_input(self, loop: asyncio.AbstractEventLoop, queue: asyncio.Queue):
        """Thread body: push each input line onto ``queue``, then None at EOF."""
        try:
            for line in self.input_stream:
                loop.call_soon_threadsafe(queue.put_nowait, line)
            loop.call_soon_threadsafe(queue.put_nowait, None)
        except RuntimeError:
            # event loop already closed; the client has exited
            pass

    async def interactive_mode(self):
        """Run client with interactive chat input."""
        if not await self.connect():
            return

        if self.config.username:
            await self.chat_client.set_name(self.config.username)

        listener_task = asyncio.create_task(self.listen_for_messages())
        logger.show_interactive_mode_info()

        # Daemon thread so a pending stdin read never holds up exit
        queue: asyncio.Queue = asyncio.Queue()
        loop = asyncio.get_running_loop()
        threading.Thread(target=self._read_input, args=(loop, queue), daemon=True).start()

        try:
            while self.running:
                input_task = asyncio.ensure_future(queue.get())
                done, _ = await asyncio.wait(
                    {input_task, listener_task}, return_when=asyncio.FIRST_COMPLETED
                )
                if input_task not in done:
                    # server closed the connection while waiting for input
                    input_task.cancel()
                    break

                user_input = input_task.result()
                if user_input is None:
                    # input closed
                    await self.chat_client.quit()
                    break
                if user_input.strip():
                    await self.chat_client.send_line(user_input.strip())
        except asyncio.CancelledError:
            pass
        finally:
            listener_task.cancel()
            try:
                await listener_task
            except asyncio.CancelledError:
                pass
            await self.close()


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='yochat terminal client')
    parser.add_argument('--host', type=str, default=DEFAULT_HOST,
                        help=f'Server host (default: {DEFAULT_HOST})')
    parser.add_argument('--port', type=int, default=DEFAULT_PORT,
                        help=f'Server port (default: {DEFAULT_PORT})')
    parser.add_argument('--name', type=str, default=None,
                        help='Name to claim right after connecting')
    parser.add_argument('--retries', type=int, default=MAX_RETRY_ATTEMPTS,
                        help=f'Connection attempts before giving up (default: {MAX_RETRY_ATTEMPTS})')
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    client = RelayClient(ClientConfig(args.host, args.port, args.name, args.retries))
    try:
        asyncio.run(client.interactive_mode())
    except KeyboardInterrupt:
        print("\n[INFO] Client terminated")


if __name__ == "__main__":
    main()
