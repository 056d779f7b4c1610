from __future__ import annotations
import logging
import threading
from typing import Iterable, Optional, Union
from faultline.core.runtime import HostRuntime
from faultline.models.schemas import (
    DispatchTarget,
    ErrorEvent,
    PipelineState,
    Severity,
    TERMINAL_SEVERITIES,
)
from .dispatcher import ReportDispatcher
from .exceptions import PipelineConfigError
from .normalizer import normalize
from .notifier import NotificationChannel
from .paths import PathFilter
from .severity import classify, tier_prefix
from .snippets import SnippetProvider
from .trace import APP_FRAME_MARKER, TraceBuilder, describe_exception

logger = logging.getLogger(__name__)


class ErrorPipeline:
    """
    Turns every failure the host runtime signals into one text report.

    Usage example
    -------------
        pipeline = ErrorPipeline(PythonRuntime(), channel=VkMessagesChannel())
        pipeline.set_path_filters(["/srv/bot"])
        pipeline.configure(RecipientsTarget(recipients=[111, 222]))
    """

    def __init__(
        self,
        runtime: HostRuntime,
        channel: Optional[NotificationChannel] = None,
        snippets: Optional[SnippetProvider] = None,
        snippet_padding: int = 0,
    ):
        self.runtime = runtime
        self.channel = channel
        self.snippets = snippets or SnippetProvider()
        self.path_filter = PathFilter()
        self.snippet_padding = snippet_padding
        self.tracer = TraceBuilder(self.snippets, self.path_filter, padding=snippet_padding)
        self.dispatcher: Optional[ReportDispatcher] = None
        self.exception_report_pending = False
        # Reports from different threads are serialised, re-entry is tracked per thread
        self._lock = threading.RLock()
        self._local = threading.local()

    @property
    def state(self) -> PipelineState:
        """What the calling thread is currently doing inside the pipeline."""
        return getattr(self._local, "state", PipelineState.IDLE)

    @state.setter
    def state(self, value: PipelineState) -> None:
        self._local.state = value

    def configure(self, target: DispatchTarget) -> "ErrorPipeline":
        if self.dispatcher is not None:
            raise PipelineConfigError("Error pipeline is already configured")
        self.dispatcher = ReportDispatcher(target, self.channel)
        self.runtime.report_everything()
        self.runtime.install(self.on_error, self.on_uncaught_exception, self.on_shutdown)
        logger.debug("Error pipeline configured with %s", type(target).__name__)
        return self

    def uninstall(self) -> None:
        self.runtime.uninstall()

    def set_path_filters(self, paths: Union[str, Iterable[str]]) -> None:
        self.path_filter.set_filters(paths)

    def on_error(
        self,
        code: int,
        message: str,
        file: str,
        line: Optional[int],
        app_code: Optional[int] = None,
        exception: Optional[BaseException] = None,
    ) -> None:
        event = ErrorEvent(
            severity_code=int(code),
            message=message,
            file=file,
            line=line,
            app_code=app_code,
            exception=exception,
        )
        self._report(event)

    def _report(self, event: ErrorEvent) -> None:
        if not self.runtime.reporting_level() & event.severity_code:
            return
        if self.dispatcher is None:
            raise PipelineConfigError("Error pipeline is not configured")
        if self.state == PipelineState.HANDLING_NONFATAL:
            logger.debug("Dropping report raised while dispatching another: %s", event.message)
            return

        with self._lock:
            previous, self.state = self.state, PipelineState.HANDLING_NONFATAL
            try:
                info = classify(event.severity_code)
                prefix = tier_prefix(info.tier)
                if self.exception_report_pending and previous == PipelineState.HANDLING_EXCEPTION:
                    # File, line and snippet are already part of the exception trace
                    msg = f"{prefix}{event.message}"
                else:
                    snippet = self.snippets.snippet(event.file, event.line, self.snippet_padding)
                    line = event.line if event.line is not None else "?"
                    msg = f"{prefix}{event.message} ({event.file} at line {line})\n{APP_FRAME_MARKER}{snippet}"
                self.exception_report_pending = False

                logger.debug("Dispatching %s report (%s)", info.label, previous.value)
                self.dispatcher.dispatch(info.label, msg, event.app_code, event.exception)
                if event.exception is not None:
                    print(msg)
            finally:
                self.state = previous

    def on_uncaught_exception(self, exc: BaseException) -> None:
        with self._lock:
            previous, self.state = self.state, PipelineState.HANDLING_EXCEPTION
            try:
                self.exception_report_pending = True
                info = describe_exception(exc)
                message = normalize(info.message)
                file = normalize(info.file)
                frames = self.tracer.build(file, info.line, info.frames)
                trace = self.tracer.render(frames)
                self.on_error(Severity.ERROR, f"{message}\n\n{trace}", file, info.line, info.code, exc)
            finally:
                self.exception_report_pending = False
                self.state = previous

    def on_shutdown(self) -> None:
        if self.state == PipelineState.SHUTDOWN_SCAN:
            return
        previous, self.state = self.state, PipelineState.SHUTDOWN_SCAN
        try:
            error = self.runtime.last_fatal_error()
            if error is not None and error.type & TERMINAL_SEVERITIES:
                self.on_error(error.type, error.message, error.file, error.line)
        finally:
            self.state = previous
