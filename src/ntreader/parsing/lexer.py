#!/usr/bin/env python3
"""
NTREADER LEXER - Line Classifier
--------------------------------
Classifies one raw line at a time into a Line model. No lookahead and
no state: the same line and index always give the same result.

Author: ntreader contributors
"""

import re

from ntreader.core.errors import InvalidIndentCharacter, UnrecognizedLine
from ntreader.core.models import (
    BlankOrCommentLine,
    KeyLine,
    Line,
    ListItemLine,
    MultilineLine,
)


class LineLexer:
    """
    Turns raw text lines into KeyLine / ListItemLine / MultilineLine /
    BlankOrCommentLine. Patterns are tried in a fixed order; the first
    match wins.
    """

    # Group 1: Indent, Group 2: Tag ('-' or '>'), Group 3: Value
    TAG_PATTERN = re.compile(r'^(\s*)([->])(?: (.*))?$')
    # Group 1: Indent, Group 2: Key (trailing whitespace excluded), Group 3: Value
    KEY_PATTERN = re.compile(r'^(\s*)(.+?)\s*:(?: (.*))?$')
    BLANK_PATTERN = re.compile(r'^ *$')
    COMMENT_PATTERN = re.compile(r'^ *# ?(.*)$')

    def classify(self, raw_line: str, line_index: int) -> Line:
        """Classifies a single line, newline already stripped."""
        match = self.TAG_PATTERN.match(raw_line)
        if match:
            indent_str, tag, value = match.groups()
            indent = self._check_indent(indent_str, raw_line, line_index)
            if tag == '-':
                return ListItemLine(raw_line, line_index, indent, value)
            return MultilineLine(raw_line, line_index, indent, value)

        # A '#' line that also has a colon is a key named '#...'
        match = self.KEY_PATTERN.match(raw_line)
        if match:
            indent_str, key, value = match.groups()
            indent = self._check_indent(indent_str, raw_line, line_index)
            return KeyLine(raw_line, line_index, indent, key, value)

        if self.BLANK_PATTERN.match(raw_line) or self.COMMENT_PATTERN.match(raw_line):
            return BlankOrCommentLine(raw_line, line_index)

        raise UnrecognizedLine("unrecognized line", raw_line, line_index)

    def _check_indent(self, indent_str: str, raw_line: str, line_index: int) -> int:
        """Only plain spaces may indent a line; reports the first offender's column."""
        for column, char in enumerate(indent_str):
            if char != ' ':
                raise InvalidIndentCharacter(
                    f"invalid character {char!r} in indentation, only simple spaces are allowed",
                    raw_line, line_index, column
                )
        return len(indent_str)


_default_lexer = LineLexer()


def classify(raw_line: str, line_index: int) -> Line:
    """Module-level shortcut around a shared, stateless LineLexer."""
    return _default_lexer.classify(raw_line, line_index)
