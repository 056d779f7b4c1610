"""
Host runtime extension points the error pipeline attaches to.

``HostRuntime`` owns the reporting level and its local suppression, the
subclasses bind the three failure channels (non-fatal errors, uncaught
exceptions, end of process) to a concrete runtime.

Usage example
-------------
    runtime = PythonRuntime()
    with runtime.silenced(Severity.DEPRECATED):
        import legacy_module
"""
from __future__ import annotations

import atexit
import logging
import sys
import threading
import warnings
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Callable, Iterator, Optional

from faultline.models.schemas import FatalError, Severity
from faultline.services.severity import severity_for_warning
from faultline.services.trace import describe_exception

logger = logging.getLogger(__name__)

ErrorHandler = Callable[[int, str, str, Optional[int]], None]
ExceptionHandler = Callable[[BaseException], None]
ShutdownHook = Callable[[], None]

DEFAULT_REPORTING = Severity.ALL & ~Severity.DEPRECATED & ~Severity.USER_DEPRECATED & ~Severity.STRICT


class HostRuntime(ABC):
    """Reporting level plus hook registration; subclasses bind the hooks."""

    def __init__(self, reporting_level: int = DEFAULT_REPORTING) -> None:
        self._reporting_level = int(reporting_level)
        self._local = threading.local()

    def reporting_level(self) -> int:
        """Level seen by the calling thread, minus what it has silenced."""
        return self._reporting_level & ~getattr(self._local, "silenced", 0)

    def set_reporting_level(self, level: int) -> None:
        self._reporting_level = int(level)

    def report_everything(self) -> None:
        self.set_reporting_level(Severity.ALL)

    @contextmanager
    def silenced(self, severities: int = Severity.ALL) -> Iterator[None]:
        """Suppress reports of ``severities`` raised by this thread inside the block."""
        previous = getattr(self._local, "silenced", 0)
        self._local.silenced = previous | int(severities)
        try:
            yield
        finally:
            self._local.silenced = previous

    @abstractmethod
    def install(self, on_error: ErrorHandler, on_exception: ExceptionHandler, on_shutdown: ShutdownHook) -> None:
        ...

    @abstractmethod
    def uninstall(self) -> None:
        ...

    def last_fatal_error(self) -> Optional[FatalError]:
        return None


class PythonRuntime(HostRuntime):
    """
    Binds the failure channels to the running interpreter.

    - non-fatal errors: ``warnings.showwarning`` and ``sys.unraisablehook``
    - uncaught exceptions: ``sys.excepthook`` and ``threading.excepthook``
    - end of process: ``atexit``
    """

    def __init__(self, reporting_level: int = DEFAULT_REPORTING) -> None:
        super().__init__(reporting_level)
        self._installed = False
        self._last_seen: Optional[BaseException] = None
        self._saved: dict = {}
        self._on_error: Optional[ErrorHandler] = None
        self._on_exception: Optional[ExceptionHandler] = None
        self._on_shutdown: Optional[ShutdownHook] = None

    @property
    def installed(self) -> bool:
        return self._installed

    def report_everything(self) -> None:
        super().report_everything()
        self._saved.setdefault("filters", warnings.filters[:])
        warnings.simplefilter("always")

    def install(self, on_error: ErrorHandler, on_exception: ExceptionHandler, on_shutdown: ShutdownHook) -> None:
        if self._installed:
            raise RuntimeError("runtime hooks are already installed")
        self._on_error = on_error
        self._on_exception = on_exception
        self._on_shutdown = on_shutdown
        self._saved.update(
            showwarning=warnings.showwarning,
            excepthook=sys.excepthook,
            threading_excepthook=threading.excepthook,
            unraisablehook=sys.unraisablehook,
        )
        warnings.showwarning = self._showwarning
        sys.excepthook = self._excepthook
        threading.excepthook = self._threading_excepthook
        sys.unraisablehook = self._unraisablehook
        atexit.register(self._at_exit)
        self._installed = True
        logger.debug("Error hooks installed")

    def uninstall(self) -> None:
        if not self._installed:
            return
        warnings.showwarning = self._saved.pop("showwarning")
        sys.excepthook = self._saved.pop("excepthook")
        threading.excepthook = self._saved.pop("threading_excepthook")
        sys.unraisablehook = self._saved.pop("unraisablehook")
        if "filters" in self._saved:
            warnings.filters[:] = self._saved.pop("filters")
        atexit.unregister(self._at_exit)
        self._installed = False
        logger.debug("Error hooks removed")

    def _showwarning(self, message, category, filename, lineno, file=None, line=None) -> None:
        self._on_error(severity_for_warning(category), str(message), filename, lineno)

    def _unraisablehook(self, unraisable) -> None:
        exc = unraisable.exc_value
        where = unraisable.err_msg or "Exception ignored in"
        try:
            obj = repr(unraisable.object)
        except Exception:
            obj = f"<{type(unraisable.object).__name__} object>"
        text = f"{where}: {obj}"
        file, line = "unknown file", None
        if exc is not None:
            text = f"{text}: {type(exc).__name__}: {exc}"
            if exc.__traceback__ is None and unraisable.exc_traceback is not None:
                exc = exc.with_traceback(unraisable.exc_traceback)
            info = describe_exception(exc)
            file, line = info.file, info.line
        self._on_error(Severity.WARNING, text, file, line)

    def _handle_exception(self, exc_type, exc, tb, fallback) -> None:
        if exc is None or issubclass(exc_type, KeyboardInterrupt):
            fallback(exc_type, exc, tb)
            return
        if exc.__traceback__ is None and tb is not None:
            exc = exc.with_traceback(tb)
        self._last_seen = exc
        self._on_exception(exc)

    def _excepthook(self, exc_type, exc, tb) -> None:
        self._handle_exception(exc_type, exc, tb, self._saved["excepthook"])

    def _threading_excepthook(self, args) -> None:
        previous = self._saved["threading_excepthook"]
        self._handle_exception(args.exc_type, args.exc_value, args.exc_traceback, lambda *_: previous(args))

    def _at_exit(self) -> None:
        if self._on_shutdown is not None:
            self._on_shutdown()

    def last_fatal_error(self) -> Optional[FatalError]:
        """The exception the interpreter died on, unless the pipeline already saw it."""
        exc = getattr(sys, "last_exc", None) or getattr(sys, "last_value", None)
        if exc is None or exc is self._last_seen or isinstance(exc, KeyboardInterrupt):
            return None
        info = describe_exception(exc)
        if isinstance(exc, SyntaxError):
            return FatalError(
                type=Severity.PARSE,
                message=info.message,
                file=exc.filename or info.file,
                line=exc.lineno or info.line,
            )
        return FatalError(type=Severity.ERROR, message=info.message, file=info.file, line=info.line)
