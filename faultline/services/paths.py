from __future__ import annotations
from typing import Iterable, List, Union

PLACEHOLDER = ".."


def _normalize_separators(path: str) -> str:
    return path.replace("\\", "/")


class PathFilter:
    """Rewrites configured path prefixes to a short placeholder before a path is shown."""

    def __init__(self, filters: Union[str, Iterable[str], None] = None):
        self._filters: List[str] = []
        if filters:
            self.set_filters(filters)

    @property
    def filters(self) -> List[str]:
        return list(self._filters)

    def set_filters(self, paths: Union[str, Iterable[str]]) -> None:
        paths = [paths] if isinstance(paths, str) else list(paths)
        self._filters = [_normalize_separators(p) for p in paths if p]

    def filter(self, path: str) -> str:
        path = _normalize_separators(path)
        for prefix in self._filters:
            path = path.replace(prefix, PLACEHOLDER)
        return path
