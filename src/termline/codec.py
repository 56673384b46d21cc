"""Streaming byte/codepoint conversion for terminal I/O.

``Decoder`` reassembles codepoints from arbitrarily split byte chunks and
hands complete text to a consumer. ``Encoder`` turns text back into bytes for
the output sink.

Malformed input never stops decoding: every invalid byte sequence is replaced
with U+FFFD (``errors="replace"``), so the same bytes always decode to the same
text no matter how they were chunked.
"""

from __future__ import annotations

import codecs
import locale
import logging
from typing import Callable

logger = logging.getLogger(__name__)

REPLACEMENT_CHAR = "\ufffd"


def default_encoding() -> str:
    """Return the preferred encoding of the environment, falling back to UTF-8."""
    encoding = locale.getpreferredencoding(False) or "utf-8"
    try:
        return codecs.lookup(encoding).name
    except LookupError:
        return "utf-8"


class Decoder:
    """Incremental bytes -> text decoder with carry-over between chunks."""

    def __init__(
        self,
        encoding: str = "utf-8",
        consumer: Callable[[str], None] | None = None,
    ) -> None:
        self.encoding = encoding
        self.consumer = consumer
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")

    def write(self, data: bytes) -> None:
        """Feed *data*; complete codepoints are passed on immediately."""
        if not data:
            return
        self._emit(self._decoder.decode(data))

    def flush(self) -> None:
        """Finish the stream; a dangling partial sequence becomes U+FFFD."""
        self._emit(self._decoder.decode(b"", final=True))
        self._decoder.reset()

    def pending(self) -> bytes:
        """Bytes held back while waiting for the rest of a character."""
        buffered, _ = self._decoder.getstate()
        return buffered

    def _emit(self, text: str) -> None:
        if not text:
            return
        if self.consumer is not None:
            self.consumer(text)
        else:
            logger.debug("no consumer registered, dropping %d codepoints", len(text))


class Encoder:
    """Stateless text -> bytes converter writing to *sink*."""

    def __init__(self, encoding: str, sink: Callable[[bytes], None]) -> None:
        self.encoding = encoding
        self._sink = sink

    def encode(self, text: str) -> bytes:
        return text.encode(self.encoding, errors="replace")

    def __call__(self, text: str) -> None:
        if text:
            self._sink(self.encode(text))
