#!/usr/bin/env python3
"""
NTREADER CHAOS & EDGE CASE SUITE
--------------------------------
Input-surface and filesystem edge cases for parse(), parse_path() and
ParseEngine:
1. Every supported source kind (str, bytes, text / binary streams, line iterables)
2. UTF-8 BOM handling
3. Zero-byte and comment-only files
4. Binary garbage (invalid encoding)
5. Symlink loops and directory depth limits
"""

import io
import os

import pytest

from ntreader.core.engine import ParseEngine, parse, parse_path

DOC = "name: web\nports:\n  - 80\n  - 443\n"
TREE = {"name": "web", "ports": ["80", "443"]}


@pytest.mark.parametrize("source", [
    DOC,
    DOC.encode("utf-8"),
    bytearray(DOC.encode("utf-8")),
    io.StringIO(DOC),
    io.BytesIO(DOC.encode("utf-8")),
    DOC.splitlines(),
    DOC.splitlines(keepends=True),
])
def test_source_kinds(source):
    assert parse(source) == TREE


def test_binary_stream_is_left_open():
    stream = io.BytesIO(DOC.encode("utf-8"))
    assert parse(stream) == TREE
    assert not stream.closed


@pytest.mark.parametrize("source", [
    "\ufeff" + DOC,
    b"\xef\xbb\xbf" + DOC.encode("utf-8"),
    io.BytesIO(b"\xef\xbb\xbf" + DOC.encode("utf-8")),
])
def test_bom_is_stripped(source):
    assert parse(source) == TREE


@pytest.mark.parametrize("newline", ["\r", "\r\n", "\n"])
def test_text_stream_line_endings(newline):
    text = newline.join(["name: web", "ports:", "  - 80", "  - 443"]) + newline
    assert parse(io.StringIO(text)) == TREE
    assert parse(io.StringIO(text, newline="")) == TREE


def test_only_one_bom_is_stripped():
    assert parse("\ufeff\ufeffa: 1\n") == {"\ufeffa": "1"}


def test_non_ascii_content():
    assert parse("città: Zürich\n") == {"città": "Zürich"}
    assert parse("名前: 値\n".encode("utf-8")) == {"名前": "値"}


@pytest.mark.parametrize("source", ["", "\n\n", "# only a comment\n", b"", []])
def test_empty_documents(source):
    assert parse(source) is None


def test_parse_path(tmp_path):
    target = tmp_path / "doc.nt"
    target.write_bytes(b"\xef\xbb\xbf" + DOC.encode("utf-8"))
    assert parse_path(target) == TREE
    assert parse_path(str(target)) == TREE


def _build_workspace(root):
    (root / "good.nt").write_text(DOC, encoding="utf-8")
    (root / "empty.nt").write_text("", encoding="utf-8")
    (root / "dup.nt").write_text("a: 1\na: 2\n", encoding="utf-8")
    (root / "binary.nt").write_bytes(b"\xff\xfe\x00garbage\x80")
    (root / "notes.txt").write_text("not: checked\n", encoding="utf-8")
    nested = root / "sub" / "deeper"
    nested.mkdir(parents=True)
    (nested / "tab.nt").write_text("a:\n\tb: 1\n", encoding="utf-8")


def test_engine_scan_directory(tmp_path):
    _build_workspace(tmp_path)
    engine = ParseEngine(tmp_path)
    progress = []

    reports = engine.scan_directory(progress_callback=lambda done, total: progress.append((done, total)))
    by_name = {os.path.basename(r["file_path"]): r for r in reports}

    assert set(by_name) == {"good.nt", "empty.nt", "dup.nt", "binary.nt", "tab.nt"}
    assert progress[-1] == (5, 5)

    assert by_name["good.nt"]["status"] == "VALID"
    assert by_name["good.nt"]["root_kind"] == "object"
    assert by_name["good.nt"]["tree"] == TREE
    assert by_name["good.nt"]["dialect"] == "minimal"
    assert by_name["empty.nt"]["root_kind"] == "empty"

    dup = by_name["dup.nt"]
    assert dup["status"] == "INVALID"
    assert dup["error_type"] == "DuplicateKey"
    assert dup["line"] == 2
    assert dup["column"] is None

    tab = by_name["tab.nt"]
    assert tab["error_type"] == "InvalidIndentCharacter"
    assert (tab["line"], tab["column"]) == (2, 1)

    assert by_name["binary.nt"]["status"] == "READ_ERROR"

    summary = engine.generate_summary(reports)
    assert summary["total_files"] == 5
    assert summary["valid"] == 2
    assert summary["invalid"] == 2
    assert summary["read_errors"] == 1


def test_engine_respects_directory_depth(tmp_path):
    _build_workspace(tmp_path)
    reports = ParseEngine(tmp_path).scan_directory(max_depth=1)
    assert all("tab.nt" not in r["file_path"] for r in reports)


@pytest.mark.skipif(os.name == "nt", reason="POSIX symlink test")
def test_engine_skips_symlink_loops(tmp_path):
    (tmp_path / "real.nt").write_text(DOC, encoding="utf-8")
    loop_dir = tmp_path / "loop"
    loop_dir.mkdir()
    os.symlink(tmp_path, loop_dir / "back", target_is_directory=True)
    os.symlink(tmp_path / "real.nt", tmp_path / "alias.nt")

    reports = ParseEngine(tmp_path).scan_directory()
    assert [r["file_path"] for r in reports] == ["real.nt"]


def test_engine_missing_file(tmp_path):
    report = ParseEngine(tmp_path).check_file("nope.nt")
    assert report["status"] == "FILE_NOT_FOUND"
    assert report["success"] is False


def test_engine_empty_summary(tmp_path):
    summary = ParseEngine(tmp_path).generate_summary([])
    assert summary["total_files"] == 0
    assert summary["success_rate"] == 0
