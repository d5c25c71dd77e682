from __future__ import annotations

import io
import os
import sys
from pathlib import Path

import pytest
from rich.console import Console

from fs_analyser.collectors.traversal_collector import TraversalCollector
from fs_analyser.models.filesystem import DiskSnapshot, ReportRow
from fs_analyser.services.report_service import ReportService
from fs_analyser.views.table_view import TableView, printable


def _render(rows: list[ReportRow]) -> str:
    buf = io.StringIO()
    TableView(Console(file=buf, width=400, color_system=None)).render(rows)
    return buf.getvalue()


def test_renders_header_and_rows_in_order() -> None:
    out = _render(
        [
            ReportRow("TOTAL_SIZE", "45B", ""),
            ReportRow("LARGEST_DIR", "/a/b", ""),
        ]
    )

    assert "METRIC" in out and "VALUE" in out and "PERCENTAGE" in out
    assert out.index("TOTAL_SIZE") < out.index("LARGEST_DIR")
    assert "45B" in out


def test_brackets_in_values_are_printed_literally() -> None:
    out = _render([ReportRow("LARGE_FILE_NAME", "/data/[bold]raw[/bold].bin", "NA")])

    assert "/data/[bold]raw[/bold].bin" in out


def test_empty_rows_still_render_header() -> None:
    out = _render([])

    assert "METRIC" in out


def test_printable_escapes_only_undecodable_bytes() -> None:
    assert printable("/tmp/big\udcff.bin") == "/tmp/big\\xff.bin"
    assert printable("/tmp/café") == "/tmp/café"


@pytest.mark.skipif(sys.getfilesystemencoding().lower() != "utf-8", reason="needs a UTF-8 filesystem encoding")
def test_non_utf8_file_name_renders_as_utf8(tmp_path: Path) -> None:
    target = tmp_path / os.fsdecode(b"big\xff.bin")
    try:
        target.write_bytes(b"x" * 50)
    except OSError:
        pytest.skip("filesystem rejects non UTF-8 names")

    state = TraversalCollector(str(tmp_path)).collect()
    out = _render(ReportService().space_rows(state, DiskSnapshot.unavailable(), 0.0))

    out.encode("utf-8")
    assert "big\\xff.bin" in out
    assert "50B" in out
