"""
Server configuration module.

This module handles server-side configuration settings.
"""

import logging

from yochat.common.constants import (
    DEFAULT_SERVER_HOST, DEFAULT_PORT, LOG_DIR, MAX_LINE_LENGTH, COMMAND_PREFIX
)


class ServerConfig:
    """Server configuration class."""

    def __init__(self, host: str = DEFAULT_SERVER_HOST, port: int = DEFAULT_PORT,
                 logs_dir: str = LOG_DIR, log_level: str = 'INFO',
                 max_line_length: int = MAX_LINE_LENGTH):
        self.host = host
        self.port = port

        # Logging configuration
        self.logs_dir = logs_dir
        self.log_level = log_level

        # Framing settings
        self.max_line_length = max_line_length

        # Command settings
        self.command_prefix = COMMAND_PREFIX

    @classmethod
    def from_args(cls, args):
        """Build a config from parsed command line arguments."""
        return cls(
            host=args.host,
            port=args.port,
            logs_dir=args.logs_dir,
            log_level=args.log_level,
            max_line_length=args.max_line_length,
        )

    def get_log_settings(self):
        """Get logging settings."""
        return {
            'logs_dir': self.logs_dir,
            'log_level': getattr(logging, str(self.log_level).upper(), logging.INFO)
        }
