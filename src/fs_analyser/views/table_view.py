from __future__ import annotations

from typing import Sequence

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from fs_analyser.models.filesystem import ReportRow

HEADERS = ("Metric", "Value", "Percentage")


def printable(value: str) -> str:
    """Turn undecodable filename bytes (lone surrogates) into ``\\xNN`` escapes."""
    return value.encode("utf-8", "surrogateescape").decode("utf-8", "backslashreplace")


class TableView:
    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def build(self, rows: Sequence[ReportRow], title: str | None = None) -> Table:
        t = Table(title=title, box=box.ASCII, show_lines=False, highlight=False)
        for h in HEADERS:
            t.add_column(h.upper(), overflow="fold")
        for r in rows:
            # Text keeps paths with brackets from being read as markup.
            t.add_row(*(Text(printable(c)) for c in r.as_list()))
        return t

    def render(self, rows: Sequence[ReportRow], title: str | None = None) -> None:
        self.console.print(self.build(rows, title=title))
