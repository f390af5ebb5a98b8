#!/usr/bin/env python3
"""
NTREADER LINE STREAM
--------------------
Forward-only source of classified lines. Accepts text, bytes, text or
binary streams, or any iterable of lines, and hands the Block Parser
one Line at a time.

Author: ntreader contributors
"""

import codecs
import io
import logging
import threading
from typing import Iterable, Iterator, Optional, Union

from ntreader.core.errors import ParseCancelled
from ntreader.core.models import Line
from ntreader.parsing.lexer import LineLexer

logger = logging.getLogger("ntreader.stream")

Source = Union[str, bytes, bytearray, io.IOBase, Iterable[str]]

BOM = '\ufeff'


class LineStream:
    """
    Wraps the raw input and yields classified lines in order.

    Each line is read lazily, so the cancel event is checked exactly
    once per line read and nowhere else.
    """

    def __init__(self, source: Source, lexer: Optional[LineLexer] = None,
                 cancel_event: Optional[threading.Event] = None):
        self.lexer = lexer or LineLexer()
        self.cancel_event = cancel_event
        self.lines_read = 0
        self._raw = self._open(source)

    def _open(self, source: Source) -> Iterator[str]:
        """Normalizes every supported input kind into an iterator of text lines."""
        if isinstance(source, str):
            # Universal newlines: \n, \r\n and \r all end a line
            return iter(io.StringIO(source, newline=None))
        if isinstance(source, (bytes, bytearray)):
            return iter(io.StringIO(bytes(source).decode('utf-8-sig'), newline=None))
        if isinstance(source, io.TextIOBase):
            return self._split_lines(source)
        if isinstance(source, (io.RawIOBase, io.BufferedIOBase)):
            return self._decode_lines(source)
        return iter(source)

    def _split_lines(self, source: Iterable[str]) -> Iterator[str]:
        """Re-splits a text stream's lines so a lone CR also ends a line."""
        for chunk in source:
            yield from io.StringIO(chunk, newline=None)

    def _decode_lines(self, source: io.IOBase) -> Iterator[str]:
        """Decodes a binary stream line by line without taking ownership of it."""
        decoder = codecs.getincrementaldecoder('utf-8-sig')()
        for chunk in source:
            yield from io.StringIO(decoder.decode(chunk), newline=None)
        tail = decoder.decode(b'', final=True)
        if tail:
            yield tail

    def _clean(self, raw: str) -> str:
        """Strips the line terminator and, on the first line, a UTF-8 BOM."""
        if self.lines_read == 0 and raw.startswith(BOM):
            raw = raw[1:]
        if raw.endswith('\n'):
            raw = raw[:-1]
        if raw.endswith('\r'):
            raw = raw[:-1]
        return raw

    def next_line(self) -> Optional[Line]:
        """Reads and classifies the next line; None at end of input."""
        if self.cancel_event is not None and self.cancel_event.is_set():
            logger.debug("Cancelled before line %d", self.lines_read)
            raise ParseCancelled(f"parse cancelled before line {self.lines_read + 1}")

        raw = next(self._raw, None)
        if raw is None:
            return None

        text = self._clean(raw)
        line = self.lexer.classify(text, self.lines_read)
        self.lines_read += 1
        return line
