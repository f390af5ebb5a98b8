#!/usr/bin/env python3
"""
NTREADER ERRORS
---------------
Single taxonomy for malformed input. Every FormatError knows the
offending line, its 0-based index and, where it applies, the 0-based
column. The first error aborts the parse.

Author: ntreader contributors
"""

from typing import Optional


class FormatError(ValueError):
    """Base class for every lexical or structural violation."""

    def __init__(self, message: str, line: str, line_index: int, column: Optional[int] = None):
        self.message = message
        self.line = line
        self.line_index = line_index
        self.column = column
        if column is not None:
            location = f"Ln {line_index + 1} Ch {column + 1}"
        else:
            location = f"Ln {line_index + 1}"
        super().__init__(f"{location}: {message}")

    @property
    def lineno(self) -> int:
        """1-based line number, for humans."""
        return self.line_index + 1


class UnrecognizedLine(FormatError):
    pass


class InvalidIndentCharacter(FormatError):
    pass


class InvalidKeyCharacter(FormatError):
    pass


class InvalidKeySubstring(FormatError):
    pass


class DuplicateKey(FormatError):
    pass


class UnexpectedNesting(FormatError):
    pass


class MixedContainerKinds(FormatError):
    pass


class EmptyNestedBlock(FormatError):
    pass


class NestingTooDeep(FormatError):
    pass


class UnsupportedDialect(NotImplementedError):
    """Raised before any input is read when the requested dialect is not implemented."""


class ParseCancelled(RuntimeError):
    """The caller's cancel event was set while the parse was running."""
