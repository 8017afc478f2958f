"""
Server logging module.

This module handles server-side logging functionality.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from yochat.common.constants import CHAT_LOG_FILE


class ServerLogger:
    """Server logging class."""

    def __init__(self, log_level: int = logging.INFO):
        # Set up main logger
        self.logger = logging.getLogger('yochat_server')
        self.logger.setLevel(log_level)

        # Remove existing handlers
        for handler in self.logger.handlers[:]:
            self.logger.removeHandler(handler)

        # Create console handler
        console_handler = logging.StreamHandler()
        console_handler.setLevel(log_level)

        # Create formatter
        formatter = logging.Formatter(
            '%(asctime)s [%(levelname)s] %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        console_handler.setFormatter(formatter)

        # Add handler to logger
        self.logger.addHandler(console_handler)
        self.console_handler = console_handler

        # Chat transcript is off until configure() points it at a directory
        self.logs_dir: Optional[Path] = None
        self.chat_log_path: Optional[Path] = None

    def configure(self, logs_dir: Optional[str] = None, log_level: Optional[int] = None):
        """Apply runtime settings: transcript directory and log level."""
        if log_level is not None:
            self.logger.setLevel(log_level)
            self.console_handler.setLevel(log_level)
        if logs_dir:
            self.logs_dir = Path(logs_dir)
            self.logs_dir.mkdir(parents=True, exist_ok=True)
            self.chat_log_path = self.logs_dir / CHAT_LOG_FILE
        else:
            self.logs_dir = None
            self.chat_log_path = None

    def info(self, message: str):
        """Log info message."""
        self.logger.info(message)

    def error(self, message: str):
        """Log error message."""
        self.logger.error(message)

    def warning(self, message: str):
        """Log warning message."""
        self.logger.warning(message)

    def debug(self, message: str):
        """Log debug message."""
        self.logger.debug(message)

    def log_connection(self, addr: str, uid: int):
        """Log client connection."""
        self.info(f"New connection from {addr}, assigned uid={uid}")

    def log_name_set(self, name: str, uid: int):
        self.info(f"uid={uid} is now '{name}'")

    def log_rename(self, old: str, new: str, uid: int):
        self.info(f"'{old}' (uid={uid}) is now known as '{new}'")

    def log_name_rejected(self, name: str, uid: int, reason: str):
        self.info(f"uid={uid} could not take name '{name}': {reason}")

    def log_disconnect(self, display: str, uid: int):
        """Log client disconnect."""
        self.info(f"{display} (uid={uid}) disconnected")

    def log_quit(self, display: str, uid: int):
        self.info(f"{display} (uid={uid}) quit")

    def log_kick(self, display: str, uid: int, by_uid: int):
        self.info(f"Kicked lurker {display} (uid={uid}), requested by uid={by_uid}")

    def log_command(self, display: str, uid: int, command: str):
        self.debug(f"{display} (uid={uid}) sent command {command}")

    def log_chat(self, display: str, uid: int, message: str):
        """Log chat message."""
        self.info(f"Chat from {display} (uid={uid}): {message}")
        if self.chat_log_path is not None:
            self._write_to_file(self.chat_log_path, f"{datetime.now().isoformat()} | {display} (uid={uid}) | {message}")

    def log_send_failure(self, uid: int, error: Exception):
        self.warning(f"Failed to deliver to uid={uid}: {error}")

    def log_error(self, operation: str, error: Exception):
        """Log error with operation context."""
        self.error(f"Error in {operation}: {error}")

    def _write_to_file(self, file_path: Path, content: str):
        """Write content to log file."""
        try:
            with open(file_path, 'a', encoding='utf-8') as f:
                f.write(content + '\n')
        except OSError as e:
            self.error(f"Failed to write to log file {file_path}: {e}")


# Global logger instance
logger = ServerLogger()
