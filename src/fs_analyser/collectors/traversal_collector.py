from __future__ import annotations

import logging
import os
import re
import stat
import threading
from datetime import datetime

from fs_analyser.errors import InvalidInputError, ScanCancelledError, TraversalError
from fs_analyser.models.filesystem import DirStats, TraversalState

logger = logging.getLogger(__name__)

# POSIX bracket classes, as ranges usable inside a Python character set.
POSIX_CLASSES = {
    "alnum": "0-9A-Za-z",
    "alpha": "A-Za-z",
    "ascii": "\\x00-\\x7f",
    "blank": "\\t ",
    "cntrl": "\\x00-\\x1f\\x7f",
    "digit": "0-9",
    "graph": "!-~",
    "lower": "a-z",
    "print": " -~",
    "punct": "!-/:-@\\[-`{-~",
    "space": "\\t\\n\\v\\f\\r ",
    "upper": "A-Z",
    "word": "0-9A-Za-z_",
    "xdigit": "0-9A-Fa-f",
}


def translate_posix_classes(pattern: str) -> str:
    """Rewrite ``[[:digit:]]``-style bracket classes into ``re`` syntax.

    A ``]`` right after ``[`` or ``[^`` is a literal, as in POSIX. Any other
    ``[`` inside a bracket expression is escaped.
    """
    out: list[str] = []
    i, n = 0, len(pattern)
    while i < n:
        ch = pattern[i]
        if ch == "\\":
            out.append(pattern[i : i + 2])
            i += 2
            continue
        if ch != "[":
            out.append(ch)
            i += 1
            continue

        j = i + 1
        out.append("[")
        if j < n and pattern[j] == "^":
            out.append("^")
            j += 1
        if j < n and pattern[j] == "]":
            out.append("\\]")
            j += 1
        while j < n and pattern[j] != "]":
            if pattern.startswith("[:", j):
                end = pattern.find(":]", j + 2)
                if end == -1:
                    raise InvalidInputError(f"Invalid filter expression {pattern!r}: unterminated [: class")
                name = pattern[j + 2 : end]
                if name not in POSIX_CLASSES:
                    raise InvalidInputError(f"Invalid filter expression {pattern!r}: unknown class [:{name}:]")
                out.append(POSIX_CLASSES[name])
                j = end + 2
            elif pattern[j] == "\\":
                out.append(pattern[j : j + 2])
                j += 2
            elif pattern[j] == "[":
                out.append("\\[")
                j += 1
            else:
                out.append(pattern[j])
                j += 1
        if j >= n:
            raise InvalidInputError(f"Invalid filter expression {pattern!r}: missing closing ]")
        out.append("]")
        i = j + 1
    return "".join(out)


def compile_filter(pattern: str | None) -> re.Pattern[str] | None:
    if not pattern:
        return None
    try:
        return re.compile(translate_posix_classes(pattern))
    except re.error as e:
        raise InvalidInputError(f"Invalid filter expression {pattern!r}: {e}") from e


class TraversalAccumulator:
    """Folds directory and file visits into a :class:`TraversalState`.

    Visits may arrive in any order; a file whose parent was never registered
    gets a fresh entry. Largest file and largest directory only move on a
    strictly greater size, so the first one to reach a size keeps it.
    """

    def __init__(self, file_filter: re.Pattern[str] | None = None) -> None:
        self.state = TraversalState(filter=file_filter)

    def accepts(self, name: str) -> bool:
        f = self.state.filter
        return f is None or f.search(name) is not None

    def visit_dir(self, path: str) -> None:
        if path not in self.state.per_directory:
            self.state.per_directory[path] = DirStats(path=path)
        self.state.dirs_seen += 1

    def visit_file(self, path: str, size: int) -> bool:
        if not self.accepts(os.path.basename(path)):
            self.skip(path)
            return False
        self.add_file(path, size)
        return True

    def skip(self, path: str) -> None:
        self.state.files_seen += 1
        logger.debug("filtered out: %s", path)

    def add_file(self, path: str, size: int) -> None:
        """Count a file that already passed the filter."""
        s = self.state
        size = int(size)
        s.files_seen += 1
        s.files_matched += 1
        s.total_size += size

        parent = os.path.dirname(path)
        d = s.per_directory.get(parent)
        if d is None:
            d = DirStats(path=parent)
            s.per_directory[parent] = d
        d.total_size += size
        if d.total_size > s.largest_dir_size:
            s.largest_dir_size = d.total_size
            s.largest_dir_path = parent

        if size > s.largest_file_size:
            s.largest_file_size = size
            s.largest_file_path = path


class TraversalCollector:
    def __init__(
        self,
        root: str,
        file_filter: re.Pattern[str] | None = None,
        cancel: threading.Event | None = None,
    ) -> None:
        self.root = os.path.abspath(root)
        self.file_filter = file_filter
        self.cancel = cancel

    def collect(self) -> TraversalState:
        """Walk ``root`` once, depth-first, and return the aggregates.

        The first I/O error aborts the walk with :class:`TraversalError`;
        its ``state`` attribute carries the partial aggregates.
        """
        acc = TraversalAccumulator(self.file_filter)
        started = datetime.now()
        logger.info("walking %s (filter=%s)", self.root, self.file_filter.pattern if self.file_filter else None)

        current = self.root
        try:
            st = os.lstat(self.root)
            if not stat.S_ISDIR(st.st_mode):
                acc.visit_file(self.root, st.st_size)
                return acc.state

            for dirpath, dirnames, filenames in os.walk(self.root, onerror=_reraise, followlinks=False):
                if self.cancel is not None and self.cancel.is_set():
                    raise ScanCancelledError(f"Scan cancelled at {dirpath}", path=dirpath, state=acc.state)
                current = dirpath
                acc.visit_dir(dirpath)
                # Symlinked directories are not descended into; they count as files of their link size.
                links = [d for d in dirnames if os.path.islink(os.path.join(dirpath, d))]
                for fn in filenames + links:
                    current = os.path.join(dirpath, fn)
                    if not acc.accepts(fn):
                        acc.skip(current)
                        continue
                    acc.add_file(current, os.lstat(current).st_size)
        except OSError as e:
            failed = str(e.filename) if e.filename else current
            raise TraversalError(
                f"{e.strerror or e}: {failed}",
                path=failed,
                state=acc.state,
            ) from e

        logger.info(
            "walked %s: %d dirs, %d/%d files, %d bytes in %.3fs",
            self.root,
            acc.state.dirs_seen,
            acc.state.files_matched,
            acc.state.files_seen,
            acc.state.total_size,
            (datetime.now() - started).total_seconds(),
        )
        return acc.state


def _reraise(err: OSError) -> None:
    raise err
