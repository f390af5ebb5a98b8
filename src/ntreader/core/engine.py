#!/usr/bin/env python3
"""
NTREADER ENGINE - Public Entry Points
-------------------------------------
parse() and parse_path() are the library surface. ParseEngine checks
whole workspaces of documents and produces per-file reports for the
CLI.

Author: ntreader contributors
"""

import logging
import time
from dataclasses import replace
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from ntreader.core.errors import FormatError
from ntreader.core.models import Node, ParseOptions
from ntreader.parsing.context import ParseContext
from ntreader.parsing.pipeline import ParsePipeline
from ntreader.parsing.stream import Source

logger = logging.getLogger("ntreader.engine")


def _resolve_options(options: Optional[ParseOptions], overrides: Dict[str, Any]) -> ParseOptions:
    options = options or ParseOptions()
    if overrides:
        options = replace(options, **overrides)
    return options


def parse(source: Source, options: Optional[ParseOptions] = None, **overrides) -> Optional[Node]:
    """
    Parses a NestedText document into dicts, lists and strings.

    Args:
        source: str, bytes, a text or binary stream, or an iterable of lines.
        options: ParseOptions; keyword overrides such as max_depth=10
            are applied on top of it.

    Returns:
        The document tree, or None when the document has no content.

    Raises:
        FormatError: on the first malformed line.
        UnsupportedDialect: when a dialect other than minimal is requested.
        ParseCancelled: when options.cancel_event is set mid-parse.
    """
    return ParsePipeline(_resolve_options(options, overrides)).run(source).root


def parse_path(path: Union[str, Path], options: Optional[ParseOptions] = None, **overrides) -> Optional[Node]:
    """Parses a file on disk. The file is read as UTF-8, BOM tolerated."""
    pipeline = ParsePipeline(_resolve_options(options, overrides))
    with open(path, 'rb') as handle:
        return pipeline.run(handle).root


class ParseEngine:
    """
    Batch checker: parses every document under a workspace and reports
    per-file status without ever raising for a bad document.
    """

    def __init__(self, workspace_path: Union[str, Path], options: Optional[ParseOptions] = None):
        self.workspace = Path(workspace_path).resolve()
        self.pipeline = ParsePipeline(options)

    def check_file(self, relative_path: Union[str, Path]) -> Dict[str, Any]:
        """Parses a single file and returns its report."""
        full_path = (self.workspace / relative_path).resolve()
        if not full_path.exists():
            return self._file_error(relative_path, "FILE_NOT_FOUND", f"Path missing: {full_path}")

        try:
            with open(full_path, 'rb') as handle:
                context = self.pipeline.run(handle)
        except FormatError as e:
            logger.info(f"{relative_path}: {e}")
            report = self._file_error(relative_path, "INVALID", str(e))
            report.update({
                "error_type": type(e).__name__,
                "line": e.lineno,
                "column": e.column + 1 if e.column is not None else None,
                "line_text": e.line,
            })
            return report
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Error reading {relative_path}: {str(e)}")
            return self._file_error(relative_path, "READ_ERROR", str(e))

        return self._file_ok(relative_path, context)

    def scan_directory(self, extension: str = ".nt", max_depth: int = 10,
                       progress_callback: Optional[Callable[[int, int], None]] = None) -> List[Dict[str, Any]]:
        """
        Recursively discovers and checks every document with the extension.
        Symlinks are skipped to avoid loops; max_depth bounds directory depth.
        """
        patterns = {f"*{extension.lower()}", f"*{extension.upper()}"}
        all_files = set()
        for pattern in patterns:
            all_files.update(f for f in self.workspace.rglob(pattern) if f.is_file() and not f.is_symlink())

        targets = []
        for file_path in sorted(all_files):
            rel_path = file_path.relative_to(self.workspace)
            if len(rel_path.parts) > max_depth:
                logger.debug(f"Skipping {rel_path}: deeper than {max_depth} directories")
                continue
            targets.append(rel_path)

        reports = []
        for processed, rel_path in enumerate(targets, 1):
            reports.append(self.check_file(rel_path))
            if progress_callback:
                progress_callback(processed, len(targets))
        return reports

    def generate_summary(self, reports: List[Dict[str, Any]]) -> Dict[str, Any]:
        total = len(reports)
        valid = sum(1 for r in reports if r.get('success', False))
        invalid = sum(1 for r in reports if r.get('status') == "INVALID")
        read_errors = sum(1 for r in reports if r.get('status') in ("READ_ERROR", "FILE_NOT_FOUND"))
        return {
            "total_files": total,
            "valid": valid,
            "invalid": invalid,
            "read_errors": read_errors,
            "success_rate": (valid / total) if total > 0 else 0,
            "summary_timestamp": time.strftime("%Y-%m-%d %H:%M:%S"),
        }

    def _file_ok(self, path: Union[str, Path], context: ParseContext) -> Dict[str, Any]:
        return {
            "file_path": str(path), "status": "VALID", "success": True,
            "dialect": context.dialect.value,
            "root_kind": context.root_kind, "lines": context.lines_read,
            "depth": context.max_depth_reached, "tree": context.root,
        }

    def _file_error(self, path: Union[str, Path], status: str, error: str) -> Dict[str, Any]:
        return {
            "file_path": str(path), "status": status, "error": error,
            "success": False, "root_kind": "unknown",
        }
