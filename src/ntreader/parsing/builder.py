#!/usr/bin/env python3
"""
NTREADER BUILDER - Block Parser
-------------------------------
Assembles classified lines into the document tree, one indentation
level per call. The first line a block cannot own (shallower indent)
is handed back to the caller instead of being pushed back into the
stream.

Block kinds are fixed by the first content line and never change:
    Empty -> Object (key lines)
    Empty -> Array  (list item lines)
    Empty -> String (multiline '>' lines)

Author: ntreader contributors
"""

import logging
from typing import List, Optional, Tuple, Union

from ntreader.core.errors import (
    DuplicateKey,
    EmptyNestedBlock,
    InvalidKeyCharacter,
    InvalidKeySubstring,
    MixedContainerKinds,
    NestingTooDeep,
    UnexpectedNesting,
)
from ntreader.core.models import (
    DEFAULT_MAX_DEPTH,
    LINE_SEPARATOR,
    BlankOrCommentLine,
    KeyLine,
    Line,
    ListItemLine,
    MultilineLine,
    Node,
)
from ntreader.parsing.stream import LineStream

logger = logging.getLogger("ntreader.builder")

# A key or list item with no inline value, waiting for a nested block
Pending = Union[KeyLine, ListItemLine]


class BlockParser:
    """
    Recursive, indentation-driven tree builder.

    All accumulation state lives in the local variables of parse_block,
    so one BlockParser is good for exactly one stream and nothing is
    shared between nesting levels except the leftover line.
    """

    def __init__(self, stream: LineStream, max_depth: int = DEFAULT_MAX_DEPTH):
        self.stream = stream
        self.max_depth = max_depth
        self.deepest = 0

    def parse_document(self) -> Optional[Node]:
        """Parses the whole stream. An empty document yields None."""
        node, _ = self.parse_block(0, None, depth=1)
        return node

    def _read_content_line(self) -> Optional[Line]:
        """Next line that is neither blank nor a comment; None at end of input."""
        while True:
            line = self.stream.next_line()
            if not isinstance(line, BlankOrCommentLine):
                return line

    def parse_block(self, min_indent: int, line: Optional[Line],
                    depth: int) -> Tuple[Optional[Node], Optional[Line]]:
        """
        Parses the block whose lines sit at min_indent.

        Args:
            min_indent: indentation every line of this block shares.
            line: first line of the block if the caller already read it.
            depth: nesting level, 1 for the document itself.

        Returns:
            (node, leftover) where leftover is the first line with an
            indent below min_indent, or None at end of input.
        """
        if depth > self.max_depth:
            raise NestingTooDeep(
                f"nesting deeper than {self.max_depth} levels",
                line.line, line.line_index
            )
        self.deepest = max(self.deepest, depth)

        node: Optional[Node] = None
        multiline: Optional[List[str]] = None
        pending: Optional[Pending] = None

        if line is None:
            line = self._read_content_line()

        while line is not None:
            if line.indent > min_indent:
                if pending is None:
                    raise UnexpectedNesting("invalid indentation", line.line, line.line_index)
                sub_node, line = self.parse_block(line.indent, line, depth + 1)
                self._attach(node, pending, sub_node)
                pending = None
                continue

            if pending is not None:
                self._finalize(node, pending)
                pending = None

            if line.indent < min_indent:
                break

            if isinstance(line, KeyLine):
                node = self._add_key(node, multiline, line)
                if line.value is None:
                    pending = line
            elif isinstance(line, ListItemLine):
                node = self._add_list_item(node, multiline, line)
                if line.value is None:
                    pending = line
            elif isinstance(line, MultilineLine):
                if node is not None:
                    raise MixedContainerKinds(
                        "multiline string mixed with other entries",
                        line.line, line.line_index
                    )
                if multiline is None:
                    multiline = []
                multiline.append(line.value if line.value is not None else "")

            line = self._read_content_line()

        if pending is not None:
            self._finalize(node, pending)

        if multiline is not None:
            node = LINE_SEPARATOR.join(multiline)

        logger.debug("Closed block at indent %d (depth %d) as %s",
                     min_indent, depth, type(node).__name__)
        return node, line

    def _add_key(self, node: Optional[Node], multiline: Optional[List[str]], line: KeyLine) -> Node:
        """Opens or extends an object. Inline values are stored right away."""
        if node is None and multiline is None:
            node = {}
        if not isinstance(node, dict):
            raise MixedContainerKinds(
                f"key {line.key!r} mixed with list items or multiline strings",
                line.line, line.line_index
            )

        key = line.key
        if key[0] in (' ', '[', '{'):
            raise InvalidKeyCharacter(f"invalid character '{key[0]}' in key {key}.", line.line, line.line_index)
        if key.startswith('- '):
            raise InvalidKeySubstring(f"invalid substring '- ' in key {key}.", line.line, line.line_index)
        if ': ' in key:
            raise InvalidKeySubstring(f"invalid substring ': ' in key {key}.", line.line, line.line_index)

        if key in node:
            raise DuplicateKey(f"duplicate key: {key}.", line.line, line.line_index)

        if line.value is not None:
            node[key] = line.value
        return node

    def _add_list_item(self, node: Optional[Node], multiline: Optional[List[str]], line: ListItemLine) -> Node:
        """Opens or extends an array. Inline values are appended right away."""
        if node is None and multiline is None:
            node = []
        if not isinstance(node, list):
            raise MixedContainerKinds(
                "list item mixed with keys or multiline strings",
                line.line, line.line_index
            )
        if line.value is not None:
            node.append(line.value)
        return node

    def _finalize(self, node: Node, pending: Pending):
        """A pending entry that got no nested block holds the empty string."""
        if isinstance(pending, KeyLine):
            node[pending.key] = ""
        else:
            node.append("")

    def _attach(self, node: Node, pending: Pending, sub_node: Optional[Node]):
        if sub_node is None:
            raise EmptyNestedBlock("nested block has no content", pending.line, pending.line_index)
        if isinstance(pending, KeyLine):
            node[pending.key] = sub_node
        else:
            node.append(sub_node)
