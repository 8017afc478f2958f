#!/usr/bin/env python3
"""
yochat relay server - Main Entry Point

Accepts TCP clients, splits their byte streams into lines and feeds each line
to the chat protocol engine.
"""

import argparse
import asyncio
from typing import Optional

from yochat.common.constants import (
    DEFAULT_SERVER_HOST, DEFAULT_PORT, LOG_DIR, MAX_LINE_LENGTH, ENCODING, LINE_DELIMITER
)
from yochat.common.protocol_definitions import LINE_TOO_LONG, decode_line
from yochat.server.chat.chat_server import ChatServer
from yochat.server.connection import Connection
from yochat.server.utils.config import ServerConfig
from yochat.server.utils.logger import logger


def format_peername(addr) -> str:
    """Render a socket peername tuple as host:port."""
    if not addr:
        return 'unknown'
    if isinstance(addr, tuple):
        host, port = addr[0], addr[1]
        if ':' in str(host):
            return f"[{host}]:{port}"
        return f"{host}:{port}"
    return str(addr)


class RelayServer:
    """Main server class: TCP listener plus per-client read loops."""

    def __init__(self, config: Optional[ServerConfig] = None, chat_server: Optional[ChatServer] = None):
        self.config = config or ServerConfig()
        self.chat_server = chat_server or ChatServer(prefix=self.config.command_prefix)
        self.server: Optional[asyncio.AbstractServer] = None
        self.next_uid = 1

    def get_next_uid(self) -> int:
        """Get the next available UID."""
        uid = self.next_uid
        self.next_uid += 1
        return uid

    @property
    def port(self) -> Optional[int]:
        """Port actually bound, useful when listening on port 0."""
        if self.server is None or not self.server.sockets:
            return None
        return self.server.sockets[0].getsockname()[1]

    async def handle_client(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter):
        """Handle individual client connection."""
        uid = self.get_next_uid()
        connection = Connection(uid, writer, format_peername(writer.get_extra_info('peername')))
        logger.log_connection(connection.peername, uid)

        # Set while dropping an over-long line up to and including its delimiter
        discarding = False

        try:
            await self.chat_server.on_connect(connection)
            while not connection.closed:
                try:
                    data = await reader.readuntil(LINE_DELIMITER.encode(ENCODING))
                except asyncio.LimitOverrunError as e:
                    await reader.read(e.consumed)
                    if not discarding:
                        logger.warning(f"Line too long from uid={uid}")
                        await self.chat_server.send_message(connection, LINE_TOO_LONG)
                        discarding = True
                    continue
                except asyncio.IncompleteReadError as e:
                    # EOF; a final unterminated line still counts unless it is being dropped
                    if e.partial and not discarding:
                        await self.chat_server.handle_line(connection, decode_line(e.partial))
                    break

                if discarding:
                    discarding = False
                    continue

                if not await self.chat_server.handle_line(connection, decode_line(data)):
                    break

        except asyncio.CancelledError:
            logger.info(f"Connection cancelled for uid={uid}")
            raise
        except Exception as e:
            await self.chat_server.on_error(connection, e)
        finally:
            await self.chat_server.on_disconnect(connection)

    async def listen(self) -> asyncio.AbstractServer:
        """Bind the listening socket without blocking."""
        self.server = await asyncio.start_server(
            self.handle_client,
            self.config.host,
            self.config.port,
            limit=self.config.max_line_length
        )
        addr = ', '.join(str(sock.getsockname()) for sock in self.server.sockets)
        logger.info(f"Server listening on {addr}")
        return self.server

    async def start(self):
        """Start the server and serve until cancelled."""
        server = await self.listen()
        async with server:
            await server.serve_forever()

    async def stop(self):
        """Stop accepting clients and close every live connection."""
        if self.server is not None:
            self.server.close()
        for connection in await self.chat_server.registry.all_connections():
            await self.chat_server.registry.deregister(connection)
            await connection.close()
        if self.server is not None:
            await self.server.wait_closed()


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='yochat relay server')
    parser.add_argument('--host', type=str, default=DEFAULT_SERVER_HOST,
                        help=f'Host to bind to (default: {DEFAULT_SERVER_HOST})')
    parser.add_argument('--port', type=int, default=DEFAULT_PORT,
                        help=f'TCP port (default: {DEFAULT_PORT})')
    parser.add_argument('--logs-dir', type=str, default=LOG_DIR,
                        help=f'Directory for the chat transcript, empty to disable (default: {LOG_DIR})')
    parser.add_argument('--log-level', type=str, default='INFO',
                        help='Log level (DEBUG/INFO/WARNING/ERROR)')
    parser.add_argument('--max-line-length', type=int, default=MAX_LINE_LENGTH,
                        help=f'Longest accepted inbound line in bytes (default: {MAX_LINE_LENGTH})')
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    config = ServerConfig.from_args(args)
    logger.configure(**config.get_log_settings())

    server = RelayServer(config)
    try:
        asyncio.run(server.start())
    except KeyboardInterrupt:
        logger.info("Server shutting down...")
    except OSError as e:
        logger.log_error("server", e)
        raise SystemExit(1)


if __name__ == "__main__":
    main()
