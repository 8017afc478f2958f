"""
Protocol definitions for the yochat relay.

The wire format is plain UTF-8 text, one message per ``\\n``-terminated line.
This module holds every line the server emits so that client, server and
tests agree on the exact wording.
"""

from typing import List

from yochat.common.constants import COMMAND_PREFIX, ENCODING, LINE_DELIMITER


HELLO = f"Connected. Enter a username by typing `{COMMAND_PREFIX}name <your name>`."
GOODBYE = "Disconnected."
PICK_A_NAME = f"Pick a name before sending messages! Type {COMMAND_PREFIX}help for help."
INVALID_NAME = "Sorry that username is invalid."
NAME_TAKEN = "Sorry that username is taken."
LINE_TOO_LONG = "Line too long."

HELP_TEXT = LINE_DELIMITER.join([
    f"{COMMAND_PREFIX}name <NAME> to set your username",
    f"{COMMAND_PREFIX}who lists users with a name",
    f"{COMMAND_PREFIX}lurkers counts connections without a name",
    f"{COMMAND_PREFIX}kick-lurkers disconnects connections without a name",
    f"{COMMAND_PREFIX}quit to disconnect",
    f"{COMMAND_PREFIX}help prints this message",
])


def create_name_set_message(name: str) -> str:
    """Reply to a successful name change."""
    return f"Name set to {name}"


def create_user_joined_message(name: str) -> str:
    return f"{name} joined chat."


def create_user_left_message(name: str) -> str:
    return f"{name} left chat."


def create_rename_message(old: str, new: str) -> str:
    return f"{old} is now known as {new}"


def create_chat_message(sender: str, text: str) -> str:
    return f"{sender}: {text}"


def create_lurkers_message(count: int) -> str:
    """Reply to a lurker count request."""
    return f"there are {count} nameless lurkers."


def create_who_message(names: List[str]) -> str:
    """Reply to a who request: a header line followed by one name per line."""
    return LINE_DELIMITER.join(["current users:"] + list(names))


def create_unknown_command_message(text: str) -> str:
    return f"Unknown command: {text}. Type {COMMAND_PREFIX}help for help."


def encode_line(text: str) -> bytes:
    """Serialize one outbound message, appending the delimiter if missing."""
    if not text.endswith(LINE_DELIMITER):
        text += LINE_DELIMITER
    return text.encode(ENCODING)


def decode_line(data: bytes) -> str:
    """Decode one inbound line, dropping the delimiter and surrounding whitespace."""
    return data.decode(ENCODING, errors='replace').strip()
