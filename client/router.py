"""Classify decoded messages by prefix and dispatch them."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from . import constants
from .errors import ProtocolError
from .protocol import IDENTITY_PREFIX, NOTICE_PREFIX, SNAPSHOT_PREFIX

logger = logging.getLogger(__name__)

_DECIMAL = re.compile(r"[0-9]+")
_MAX_ID_DIGITS = len(str(constants.MAX_CLIENT_ID))


class MessageKind(Enum):
    SNAPSHOT = SNAPSHOT_PREFIX
    NOTICE = NOTICE_PREFIX
    IDENTITY = IDENTITY_PREFIX


@dataclass(frozen=True)
class Message:
    """A classified message with its prefix stripped."""

    kind: MessageKind
    body: str


def classify_message(text: str) -> Message:
    """Return the :class:`Message` for ``text`` or raise :class:`ProtocolError`."""

    for kind in MessageKind:
        if text.startswith(kind.value):
            return Message(kind, text[len(kind.value):])
    raise ProtocolError(f"Unrecognised message: {text[:80]!r}")


def parse_client_id(body: str) -> int:
    """Parse the body of an ``ID:`` message as an unsigned 32 bit integer."""

    body = body.strip()
    if len(body) > _MAX_ID_DIGITS or not _DECIMAL.fullmatch(body):
        raise ProtocolError(f"Malformed client id: {body[:32]!r}")
    client_id = int(body)
    if client_id > constants.MAX_CLIENT_ID:
        raise ProtocolError(f"Client id out of range: {body}")
    return client_id


def _log_notice(text: str) -> None:
    logger.info("Server message: %s", text)


class MessageRouter:
    """Dispatch messages to the snapshot, notice and identity handlers.

    :meth:`route` never raises for malformed input; such messages are logged
    and dropped.
    """

    def __init__(
        self,
        on_snapshot: Callable[[str], None],
        on_identity: Callable[[int], None],
        on_notice: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.on_snapshot = on_snapshot
        self.on_identity = on_identity
        self.on_notice = on_notice or _log_notice

    def route(self, text: str) -> bool:
        """Handle one message. Returns ``False`` when it was dropped."""

        if not text:
            return False
        try:
            message = classify_message(text)
            if message.kind is MessageKind.SNAPSHOT:
                self.on_snapshot(message.body)
            elif message.kind is MessageKind.NOTICE:
                self.on_notice(message.body)
            else:
                self.on_identity(parse_client_id(message.body))
        except ProtocolError as exc:
            logger.warning("Dropped message: %s", exc)
            return False
        return True
