#!/usr/bin/env python3
"""
NTREADER EXPORTER - Tree Rendering
----------------------------------
Renders parsed trees as JSON (the reference form used to compare
documents) or YAML. Nothing here writes the NestedText format back.

Author: ntreader contributors
"""

import io
import json
from typing import Any, Optional

from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap, CommentedSeq
from ruamel.yaml.scalarstring import LiteralScalarString

from ntreader.core.models import LINE_SEPARATOR, Node


def to_json(node: Optional[Node], indent: Optional[int] = 2) -> str:
    """Deterministic JSON text for a tree; key order is document order."""
    return json.dumps(node, indent=indent, ensure_ascii=False)


class TreeExporter:
    """
    Converts dict / list / str trees into ruamel round-trip types so the
    dumper keeps document order and prints multiline strings as blocks.
    """

    def __init__(self):
        self.yaml = YAML(typ='rt')
        self.yaml.indent(mapping=2, sequence=4, offset=2)
        self.yaml.width = 4096

    def _to_commented(self, data: Any) -> Any:
        if isinstance(data, dict):
            mapping = CommentedMap()
            for key, value in data.items():
                mapping[key] = self._to_commented(value)
            return mapping
        if isinstance(data, list):
            return CommentedSeq(self._to_commented(item) for item in data)
        if isinstance(data, str) and LINE_SEPARATOR in data:
            return LiteralScalarString(data)
        return data

    def export(self, node: Optional[Node]) -> str:
        stream = io.StringIO()
        self.yaml.dump(self._to_commented(node), stream)
        return stream.getvalue()


def to_yaml(node: Optional[Node]) -> str:
    """YAML text for a tree."""
    return TreeExporter().export(node)
