"""Turn compressed read chunks into delimited text messages."""

from __future__ import annotations

import codecs
import gzip
import zlib
from typing import Iterator

from . import constants
from .errors import DecodeError, FrameOverflowError
from .protocol import DELIMITER, ENCODING


class FrameDecoder:
    """Accumulate decompressed text and split it on the line delimiter.

    Each chunk handed to :meth:`feed` is decompressed on its own, so the
    server has to finalise one gzip block per write. Text that is not yet
    terminated stays in the pending buffer until a later chunk completes it.
    """

    def __init__(self, max_pending: int = constants.MAX_PENDING_CHARS) -> None:
        self.max_pending = max_pending
        self._pending = ""
        self._text_decoder = codecs.getincrementaldecoder(ENCODING)(errors="replace")

    @property
    def pending(self) -> str:
        return self._pending

    def reset(self) -> None:
        self._pending = ""
        self._text_decoder.reset()

    def feed(self, chunk: bytes) -> Iterator[str]:
        """Decode ``chunk`` and yield every message completed by it.

        Raises :class:`DecodeError` before yielding anything when the chunk is
        not a valid compressed block; the chunk is dropped and the buffer is
        left as it was.
        """

        if not chunk:
            return
        try:
            data = gzip.decompress(chunk)
        except (OSError, EOFError, zlib.error) as exc:
            raise DecodeError(f"Dropped {len(chunk)} byte chunk: {exc}") from exc

        self._pending += self._text_decoder.decode(data)

        while True:
            index = self._pending.find(DELIMITER)
            if index < 0:
                break
            message = self._pending[:index].strip()
            self._pending = self._pending[index + len(DELIMITER):]
            yield message

        if len(self._pending) > self.max_pending:
            size = len(self._pending)
            self.reset()
            raise FrameOverflowError(
                f"Discarded {size} undelimited characters (limit {self.max_pending})"
            )
