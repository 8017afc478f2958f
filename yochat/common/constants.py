"""
Shared constants for the yochat relay.

This module contains all constants used across client and server components.
"""

# Network Configuration
DEFAULT_HOST = 'localhost'
DEFAULT_SERVER_HOST = '0.0.0.0'
DEFAULT_PORT = 9000

# Line framing
MAX_LINE_LENGTH = 8192  # bytes, delimiter included
ENCODING = 'utf-8'
LINE_DELIMITER = '\n'

# Commands
COMMAND_PREFIX = '/'

# Client reconnect
MAX_RETRY_ATTEMPTS = 3
RECONNECT_DELAY_BASE = 1.0  # seconds

# Logging
LOG_DIR = 'logs'
CHAT_LOG_FILE = 'chat_history.log'


# Built-in keywords, in dispatch priority order
class Keywords:
    QUIT = 'quit'
    LURKERS = 'lurkers'
    KICK_LURKERS = 'kick-lurkers'
    NAME = 'name'
    HELP = 'help'
    WHO = 'who'

    ORDER = (QUIT, LURKERS, KICK_LURKERS, NAME, HELP, WHO)
