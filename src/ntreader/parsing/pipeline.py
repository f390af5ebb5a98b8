#!/usr/bin/env python3
"""
NTREADER PIPELINE
-----------------
Central coordinator for a parse. Validates options up front, then
wires the raw source through the line stream into the Block Parser:

    raw text -> LineStream (classify) -> BlockParser -> ParseContext

Author: ntreader contributors
"""

import logging
from typing import Optional

from ntreader.core.errors import UnsupportedDialect
from ntreader.core.models import Dialect, ParseOptions
from ntreader.parsing.builder import BlockParser
from ntreader.parsing.context import ParseContext
from ntreader.parsing.lexer import LineLexer
from ntreader.parsing.stream import LineStream, Source

logger = logging.getLogger("ntreader.pipeline")


class ParsePipeline:
    """
    Runs classification and block building in a fixed order. The
    pipeline holds no per-document state, so one instance can parse
    any number of sources.
    """

    def __init__(self, options: Optional[ParseOptions] = None):
        """
        Args:
            options: parse configuration; defaults to the minimal dialect.

        Raises:
            UnsupportedDialect: before any input is touched.
        """
        self.options = options or ParseOptions()
        if self.options.dialect is not Dialect.MINIMAL:
            raise UnsupportedDialect(
                f"dialect {self.options.dialect.value!r} is not supported, "
                f"only {Dialect.MINIMAL.value!r} is implemented"
            )
        self.lexer = LineLexer()

    def run(self, source: Source) -> ParseContext:
        """Parses source completely. Any error propagates; no partial tree is kept."""
        stream = LineStream(source, lexer=self.lexer, cancel_event=self.options.cancel_event)
        builder = BlockParser(stream, max_depth=self.options.max_depth)

        root = builder.parse_document()

        context = ParseContext(
            root=root,
            lines_read=stream.lines_read,
            max_depth_reached=builder.deepest,
            dialect=self.options.dialect,
        )
        logger.debug("Parsed %d lines into %s (depth %d)",
                     context.lines_read, context.root_kind, context.max_depth_reached)
        return context
