from __future__ import annotations
import logging
from typing import Optional
from faultline.models.schemas import CallbackTarget, DispatchTarget, RecipientsTarget
from .exceptions import NotificationDispatchError, PipelineConfigError
from .notifier import NotificationChannel

logger = logging.getLogger(__name__)


class ReportDispatcher:
    def __init__(self, target: DispatchTarget, channel: Optional[NotificationChannel] = None):
        if not isinstance(target, (CallbackTarget, RecipientsTarget)):
            raise PipelineConfigError(f"Unsupported dispatch target: {type(target).__name__}")
        self.target = target
        self.channel = channel

    def dispatch(self, category: str, message: str, code: Optional[int] = None, exception: Optional[BaseException] = None) -> bool:
        """Deliver one finished report. Returns False when the channel dropped it."""
        target = self.target
        if isinstance(target, CallbackTarget):
            target.handler(category, message, code, exception)
            return True

        if self.channel is None:
            logger.warning("No notification channel configured, dropping %s report", category)
            return False
        recipients = ",".join(str(r) for r in target.recipients)
        try:
            self.channel.send(recipients, message, correlation_token=0, suppress_link_preview=True)
        except NotificationDispatchError as e:
            # Not retried; the report is lost
            logger.warning("Failed to deliver %s report to %s: %s", category, recipients, e)
            return False
        return True
