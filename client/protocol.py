"""Line protocol helpers for the compressed TCP transport."""

from __future__ import annotations

import gzip
from enum import Enum

DELIMITER = "\n"
ENCODING = "utf-8"

SNAPSHOT_PREFIX = "DATA:"
NOTICE_PREFIX = "MSG:"
IDENTITY_PREFIX = "ID:"


class Command(str, Enum):
    """Tokens the client sends to the server, one per line."""

    UP = "UP"
    DOWN = "DOWN"
    LEFT = "LEFT"
    RIGHT = "RIGHT"
    SPACE = "SPACE"


def encode_command(command: Command) -> bytes:
    """Encode ``command`` as a newline terminated, uncompressed line."""

    return (Command(command).value + DELIMITER).encode(ENCODING)


def encode_frame(*messages: str) -> bytes:
    """Compress ``messages`` into one self-contained server frame.

    Every frame the server writes is an independently finalised gzip block
    holding one or more delimited messages.
    """

    text = "".join(message + DELIMITER for message in messages)
    return gzip.compress(text.encode(ENCODING))
