#!/usr/bin/env python3
"""
NTREADER PARSE CONTEXT
----------------------
The record of a single parse run: the finished tree plus what the
pipeline learned while producing it.

Author: ntreader contributors
"""

from dataclasses import dataclass
from typing import Optional

from ntreader.core.models import Dialect, Node


@dataclass
class ParseContext:
    """
    Filled in by ParsePipeline once the whole input has been consumed.
    A context only exists for successful parses.
    """
    root: Optional[Node] = None            # The document tree, None for an empty document
    lines_read: int = 0                    # Physical lines consumed, blank and comment lines included
    max_depth_reached: int = 0             # Deepest block nesting seen (1 = top level)
    dialect: Dialect = Dialect.MINIMAL

    @property
    def root_kind(self) -> str:
        """'object', 'array', 'string' or 'empty'."""
        if self.root is None:
            return "empty"
        if isinstance(self.root, dict):
            return "object"
        if isinstance(self.root, list):
            return "array"
        return "string"
