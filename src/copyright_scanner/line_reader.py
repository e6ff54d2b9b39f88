"""Streaming byte-to-text decoder with a character-offset line index.

``IndexedLineReader`` wraps a binary stream and produces text that the
scanner can search without ever failing on bad input:

* Well-formed UTF-8 decodes normally (NUL included).
* Every malformed byte becomes exactly one substitute character. Bytes in
  ``0xC0-0xFF`` keep their Latin-1 meaning; a handful of Windows-1252 /
  Latin-1 punctuation bytes that show up in legal notices map to a visible
  equivalent (``0xA9`` -> ``©``); anything else becomes ``?``.
* The markup escapes ``&quot;``, ``&#34;``, ``<var>`` and ``</var>`` are
  rewritten to a plain ``"`` even when split across read boundaries.

While characters are handed out the reader records where each line starts so
that ``line_number(offset)`` is a binary search.
"""
from __future__ import annotations

import codecs
import logging
import re
from bisect import bisect_right
from types import TracebackType
from typing import Protocol

logger = logging.getLogger(__name__)

BUFFER_SIZE = 2048  # bytes per fetch from the source

# ── Substitution table ──────────────────────────────────────────────────
# The incremental decoder runs with errors="surrogateescape", so each
# malformed byte b arrives as the lone surrogate U+DC00 + b.


def _substitute(b: int) -> str:
    if b >= 0xC0:
        return chr(b)
    if b in (0xA0, 0xA7, 0xAD, 0xB6):
        return " "
    if b in (0x87, 0xB7):
        return "*"
    if b in (0x85, 0x99):
        return "™"
    if b == 0xA9:
        return "©"
    if b == 0xAE:
        return "®"
    if b == 0x94:
        return "ö"
    return "?"


SUBSTITUTIONS: dict[int, str] = {b: _substitute(b) for b in range(0x80, 0x100)}

_ESCAPED_TRANSLATION: dict[int, str] = {
    0xDC00 + b: sub for b, sub in SUBSTITUTIONS.items()
}
RE_ESCAPED_BYTE: re.Pattern[str] = re.compile("[\udc80-\udcff]")

MARKUP_QUOTES: dict[str, str] = {
    "&quot;": '"',
    "&#34;": '"',
    "<var>": '"',
    "</var>": '"',
}


class ByteSource(Protocol):
    def read(self, size: int = -1, /) -> bytes: ...

    def close(self) -> None: ...


class LineReaderIOError(OSError):
    """An I/O failure of the underlying byte source, with reader position."""

    def __init__(
        self, name: str, line: int, column: int, offset: int, cause: OSError,
    ) -> None:
        super().__init__(
            f"{name}:{line}:{column} (offset {offset}): {cause}"
        )
        self.name = name
        self.line = line
        self.column = column
        self.offset = offset


class _MarkupRewriter:
    """Replace table keys in a chunked text stream.

    Any tail of a chunk that could still grow into a key is held back and
    prepended to the next chunk; ``flush`` releases it verbatim.
    """

    def __init__(self, table: dict[str, str]) -> None:
        self._table = table
        self._regex = re.compile("|".join(re.escape(k) for k in table))
        self._prefixes = frozenset(
            key[:i] for key in table for i in range(1, len(key))
        )
        self._hold_max = max(len(key) for key in table) - 1
        self._pending = ""

    def feed(self, text: str) -> str:
        text = self._pending + text
        self._pending = ""
        for n in range(min(self._hold_max, len(text)), 0, -1):
            if text[-n:] in self._prefixes:
                self._pending = text[-n:]
                text = text[:-n]
                break
        return self._regex.sub(lambda m: self._table[m.group()], text)

    def flush(self) -> str:
        tail, self._pending = self._pending, ""
        return tail


class IndexedLineReader:
    """Decode ``source`` into text, tracking line starts by character offset.

    ``size`` is a hint in bytes (``-1`` or ``0`` when unknown). Reading stops
    early once the stream has produced more substituted bytes than lines, on
    the grounds that the remainder is a binary blob.
    """

    def __init__(self, name: str, source: ByteSource, size: int = -1) -> None:
        self.name = name
        self.size = size
        self.chars_read = 0
        self.lines_read = 0
        self.line_offsets: list[int] = [0]
        self.first_binary = -1
        self.binary_count = 0

        self._source = source
        self._decoder = codecs.getincrementaldecoder("utf-8")(
            errors="surrogateescape"
        )
        self._rewriter = _MarkupRewriter(MARKUP_QUOTES)
        self._buffer = ""
        self._produced = 0  # characters decoded into _buffer so far
        self._produced_lines = 0
        self._eof = False
        self._closed = False

    # ── Context manager ────────────────────────────────────────────────

    def __enter__(self) -> IndexedLineReader:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self._source.close()

    # ── Reading ────────────────────────────────────────────────────────

    def read(self, size: int = -1) -> str:
        """Return up to ``size`` characters (all remaining when negative).

        Returns ``""`` once the input is exhausted.
        """
        while not self._eof and (size < 0 or len(self._buffer) < size):
            self._fill()
        if size < 0 or size >= len(self._buffer):
            text, self._buffer = self._buffer, ""
        else:
            text, self._buffer = self._buffer[:size], self._buffer[size:]
        self._consume(text)
        return text

    def read_delimited(self, delimiter: str, out: list[str]) -> int | None:
        """Append text up to the next ``delimiter`` to ``out``.

        Returns the number of characters consumed, delimiter included, or
        ``None`` when the input was already exhausted.
        """
        while True:
            idx = self._buffer.find(delimiter)
            if idx >= 0 or self._eof:
                break
            self._fill()
        if idx < 0:
            if not self._buffer:
                return None
            text, self._buffer = self._buffer, ""
            self._consume(text)
            out.append(text)
            return len(text)
        text = self._buffer[:idx]
        self._buffer = self._buffer[idx + len(delimiter):]
        self._consume(text + delimiter)
        out.append(text)
        return idx + len(delimiter)

    def line_number(self, offset: int) -> int:
        """1-based line containing character ``offset``."""
        return bisect_right(self.line_offsets, offset) if offset > 0 else 1

    # ── Internals ──────────────────────────────────────────────────────

    def _consume(self, text: str) -> None:
        start = self.chars_read
        pos = text.find("\n")
        while pos >= 0:
            self.line_offsets.append(start + pos + 1)
            self.lines_read += 1
            pos = text.find("\n", pos + 1)
        self.chars_read += len(text)

    def _fill(self) -> None:
        if self.binary_count > self._produced_lines:
            logger.debug(
                "%s: %d substituted bytes in %d lines; treating rest as binary",
                self.name, self.binary_count, self._produced_lines,
            )
            self._finish()
            return
        try:
            data = self._source.read(BUFFER_SIZE)
        except OSError as exc:
            line = len(self.line_offsets)
            column = self.chars_read - self.line_offsets[-1] + 1
            raise LineReaderIOError(
                self.name, line, column, self.chars_read, exc,
            ) from exc
        if not data:
            self._finish()
            return
        self._append(self._rewriter.feed(self._decoder.decode(data)))

    def _finish(self) -> None:
        tail = self._decoder.decode(b"", final=True)
        self._append(self._rewriter.feed(tail) + self._rewriter.flush())
        self._eof = True

    def _append(self, text: str) -> None:
        if not text:
            return
        escaped = RE_ESCAPED_BYTE.search(text)
        if escaped is not None:
            if self.first_binary < 0:
                self.first_binary = self._produced + escaped.start()
            self.binary_count += len(RE_ESCAPED_BYTE.findall(text))
            text = text.translate(_ESCAPED_TRANSLATION)
        self._buffer += text
        self._produced += len(text)
        self._produced_lines += text.count("\n")
