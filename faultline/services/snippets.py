from __future__ import annotations
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

FILE_UNAVAILABLE = "File unavailable."

# Cached in place of the lines of a file that could not be read
_UNAVAILABLE = object()


def _read_lines(path: str) -> List[str]:
    return Path(path).read_text(encoding="utf-8", errors="replace").splitlines()


class SnippetProvider:
    """Source lines around an error site, each file read at most once."""

    def __init__(self, reader: Optional[Callable[[str], List[str]]] = None):
        self._reader = reader or _read_lines
        self._cache: Dict[str, Union[List[str], object]] = {}

    def _lines(self, file: str):
        if file not in self._cache:
            try:
                self._cache[file] = list(self._reader(file))
            except (OSError, UnicodeError, ValueError):
                self._cache[file] = _UNAVAILABLE
        return self._cache[file]

    def snippet(self, file: str, line: Optional[int], padding: int = 0) -> str:
        lines = self._lines(file)
        if lines is _UNAVAILABLE:
            return FILE_UNAVAILABLE
        line = line or 0
        start = max(0, line - padding - 1)
        end = min(len(lines), line + padding)
        return "".join(f"{i + 1}: {lines[i].strip()}\n" for i in range(start, end))

    def cached_files(self) -> List[str]:
        return list(self._cache)
