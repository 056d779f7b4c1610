from __future__ import annotations
from enum import Enum, IntFlag
from typing import Any, Callable, List, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator
from faultline.core.config import split_csv


class Severity(IntFlag):
    ERROR = 1
    WARNING = 2
    PARSE = 4
    NOTICE = 8
    CORE_ERROR = 16
    CORE_WARNING = 32
    COMPILE_ERROR = 64
    COMPILE_WARNING = 128
    USER_ERROR = 256
    USER_WARNING = 512
    USER_NOTICE = 1024
    STRICT = 2048
    RECOVERABLE_ERROR = 4096
    DEPRECATED = 8192
    USER_DEPRECATED = 16384
    ALL = 32767


# Conditions that stop the process; the only ones recovered at shutdown
TERMINAL_SEVERITIES = (
    Severity.ERROR
    | Severity.PARSE
    | Severity.CORE_ERROR
    | Severity.COMPILE_ERROR
    | Severity.USER_ERROR
    | Severity.RECOVERABLE_ERROR
)


class Tier(str, Enum):
    NOTICE = "NOTICE"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"
    UNKNOWN = "UNKNOWN"


class PipelineState(str, Enum):
    IDLE = "idle"
    HANDLING_NONFATAL = "handling_nonfatal"
    HANDLING_EXCEPTION = "handling_exception"
    SHUTDOWN_SCAN = "shutdown_scan"


class SeverityInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    tier: Tier
    label: str


class ErrorEvent(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    severity_code: int
    message: str
    file: str
    line: Optional[int] = None
    app_code: Optional[int] = None
    exception: Optional[BaseException] = None


class RawFrame(BaseModel):
    model_config = ConfigDict(frozen=True)

    file: Optional[str] = None
    line: Optional[int] = None


class ExceptionInfo(BaseModel):
    message: str
    file: str
    line: Optional[int] = None
    code: Optional[int] = None
    frames: List[RawFrame] = Field(default_factory=list)


class TraceFrame(BaseModel):
    sequence_number: int
    file: str
    line: Optional[int] = None
    snippet: str = ""
    is_library_internal: bool = False


class FatalError(BaseModel):
    type: int
    message: str
    file: str
    line: Optional[int] = None


class CallbackTarget(BaseModel):
    """Reports go to ``handler(category, message, code, exception)``."""
    handler: Callable[[str, str, Optional[int], Optional[BaseException]], Any]


class RecipientsTarget(BaseModel):
    """Reports go to the notification channel, one message for all recipients."""
    model_config = ConfigDict(frozen=True)

    recipients: List[int]

    @field_validator("recipients", mode="before")
    @classmethod
    def split_recipients(cls, v):
        if isinstance(v, int):
            return [v]
        return split_csv(v)

    @field_validator("recipients")
    @classmethod
    def not_empty(cls, v):
        if not v:
            raise ValueError("at least one recipient is required")
        return v


DispatchTarget = Union[CallbackTarget, RecipientsTarget]
