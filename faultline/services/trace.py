from __future__ import annotations
import re
import traceback
from typing import Iterable, List, Optional
from faultline.models.schemas import ExceptionInfo, RawFrame, TraceFrame
from faultline.services.paths import PLACEHOLDER, PathFilter
from faultline.services.snippets import SnippetProvider

UNKNOWN_FILE = "unknown file"
APP_FRAME_MARKER = "➡"

# Roots whose frames belong to this library or its dependencies
LIBRARY_ROOTS = re.compile(r"/(faultline/(?:api|core|models|services)|site-packages|dist-packages)(/.*)")


def _exception_code(exc: BaseException) -> Optional[int]:
    if isinstance(exc, OSError):
        return exc.errno
    code = getattr(exc, "code", None)
    if isinstance(code, int) and not isinstance(code, bool):
        return code
    return None


def describe_exception(exc: BaseException) -> ExceptionInfo:
    """Site and call stack of ``exc``, innermost frame first."""
    summary = traceback.extract_tb(exc.__traceback__)
    message = f"{type(exc).__name__}: {exc}" if str(exc) else type(exc).__name__
    if not summary:
        return ExceptionInfo(message=message, file=UNKNOWN_FILE, code=_exception_code(exc))
    site, *callers = reversed(summary)
    return ExceptionInfo(
        message=message,
        file=site.filename,
        line=site.lineno,
        code=_exception_code(exc),
        frames=[RawFrame(file=f.filename, line=f.lineno) for f in callers],
    )


class TraceBuilder:
    def __init__(self, snippets: SnippetProvider, path_filter: PathFilter, padding: int = 0):
        self.snippets = snippets
        self.path_filter = path_filter
        self.padding = padding

    def _frame(self, num: int, file: Optional[str], line: Optional[int]) -> TraceFrame:
        file = file or UNKNOWN_FILE
        shown = self.path_filter.filter(file)
        match = LIBRARY_ROOTS.search(shown)
        if match:
            shown = PLACEHOLDER + match.group(0)
        return TraceFrame(
            sequence_number=num,
            file=shown,
            line=line,
            snippet=self.snippets.snippet(file, line, self.padding),
            is_library_internal=match is not None,
        )

    def build(self, site_file: str, site_line: Optional[int], raw_frames: Iterable[RawFrame]) -> List[TraceFrame]:
        frames = [self._frame(0, site_file, site_line)]
        for num, raw in enumerate(raw_frames, start=1):
            frames.append(self._frame(num, raw.file, raw.line))
        return frames

    @staticmethod
    def render_frame(frame: TraceFrame) -> str:
        line = frame.line if frame.line is not None else "?"
        marker = "" if frame.is_library_internal else APP_FRAME_MARKER + " "
        return f"{marker}#{frame.sequence_number} {frame.file}({line})\n{frame.snippet}\n\n"

    def render(self, frames: Iterable[TraceFrame]) -> str:
        return "".join(self.render_frame(f) for f in frames)
