from __future__ import annotations
import logging
from typing import Optional
from dotenv import load_dotenv
from faultline.core.config import get_settings
from faultline.core.runtime import HostRuntime, PythonRuntime
from faultline.models.schemas import DispatchTarget, RecipientsTarget
from faultline.services.exceptions import PipelineConfigError
from faultline.services.notifier import VkMessagesChannel
from faultline.services.pipeline import ErrorPipeline

logger = logging.getLogger(__name__)


def install(target: Optional[DispatchTarget] = None, runtime: Optional[HostRuntime] = None) -> ErrorPipeline:
    """Build a pipeline from the environment and attach it to the interpreter.

    Without ``target`` reports go to the peers listed in ``ERROR_RECIPIENTS``.
    """
    load_dotenv(override=True)
    # Pick up variables the .env file just set
    get_settings.cache_clear()  # type: ignore[attr-defined]
    settings = get_settings()

    channel = None
    if settings.notifications_configured:
        channel = VkMessagesChannel(settings)
    else:
        logger.info("Notifications disabled or VK_ACCESS_TOKEN unset, recipient reports will be dropped")

    if target is None:
        if not settings.error_recipients:
            raise PipelineConfigError("No dispatch target given and ERROR_RECIPIENTS is empty")
        target = RecipientsTarget(recipients=settings.error_recipients)

    pipeline = ErrorPipeline(runtime or PythonRuntime(), channel=channel, snippet_padding=settings.snippet_padding)
    if settings.trace_path_filters:
        pipeline.set_path_filters(settings.trace_path_filters)
    return pipeline.configure(target)
