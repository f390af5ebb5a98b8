#!/usr/bin/env python3
"""
NTREADER CORE MODELS
--------------------
Defines the fundamental data structures used across the reader.
Lines are the transient unit produced by the classifier; the document
tree itself is plain dict / list / str.

Author: ntreader contributors
"""

import sys
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Union

# Joins the lines of a '>' multiline run into a single string.
LINE_SEPARATOR = "\n"

DEFAULT_MAX_DEPTH = 256


def max_depth_ceiling() -> int:
    """Largest max_depth the recursive Block Parser can honour under the current recursion limit."""
    return sys.getrecursionlimit() // 2


# A parsed document: nested dicts / lists whose leaves are always strings.
Node = Union[Dict[str, Any], List[Any], str]


@dataclass(frozen=True)
class KeyLine:
    """A 'key: value' or bare 'key:' line."""
    line: str               # The raw line text, newline stripped
    line_index: int         # 0-based position in the input
    indent: int             # Count of leading spaces
    key: str
    value: Optional[str] = None  # None when nothing follows the colon


@dataclass(frozen=True)
class ListItemLine:
    """A '- value' or bare '-' line."""
    line: str
    line_index: int
    indent: int
    value: Optional[str] = None


@dataclass(frozen=True)
class MultilineLine:
    """A '> text' line, one row of a multiline string."""
    line: str
    line_index: int
    indent: int
    value: Optional[str] = None


@dataclass(frozen=True)
class BlankOrCommentLine:
    """Blank or '#' comment line. Carries no structure."""
    line: str
    line_index: int


Line = Union[KeyLine, ListItemLine, MultilineLine, BlankOrCommentLine]


class Dialect(Enum):
    MINIMAL = "minimal"
    FULL = "full"   # Recognised so it can be rejected explicitly


@dataclass
class ParseOptions:
    """
    Knobs for a single parse call.

    dialect:      only Dialect.MINIMAL is implemented.
    max_depth:    nesting limit; deeper documents are rejected.
    cancel_event: checked before every line read; when set the parse aborts.
    """
    dialect: Dialect = Dialect.MINIMAL
    max_depth: int = DEFAULT_MAX_DEPTH
    cancel_event: Optional[threading.Event] = None

    def __post_init__(self):
        # Allow plain strings such as "minimal" from the CLI or callers
        if not isinstance(self.dialect, Dialect):
            self.dialect = Dialect(str(self.dialect).lower())
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be at least 1, got {self.max_depth}")
        # One stack frame per nesting level, so the cap must stay under the recursion limit
        ceiling = max_depth_ceiling()
        if self.max_depth > ceiling:
            raise ValueError(f"max_depth must be at most {ceiling}, got {self.max_depth}")
