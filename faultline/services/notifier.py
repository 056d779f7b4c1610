from __future__ import annotations
import logging
from typing import Optional, Protocol
import httpx
from faultline.core.config import Settings, get_settings
from .exceptions import NotificationDispatchError

logger = logging.getLogger(__name__)


class NotificationChannel(Protocol):
    def send(self, recipients: str, text: str, correlation_token: int = 0, suppress_link_preview: bool = True) -> None:
        ...


class VkMessagesChannel:
    """Delivers report text with the VK ``messages.send`` method."""

    def __init__(self, settings: Optional[Settings] = None, transport: Optional[httpx.BaseTransport] = None):
        self.settings = settings or get_settings()
        self._transport = transport

    def send(self, recipients: str, text: str, correlation_token: int = 0, suppress_link_preview: bool = True) -> None:
        settings = self.settings
        if not settings.vk_access_token:
            raise NotificationDispatchError("VK_ACCESS_TOKEN is not configured")
        data = {
            "peer_ids": recipients,
            "message": text,
            "random_id": correlation_token,
            "dont_parse_links": 1 if suppress_link_preview else 0,
            "access_token": settings.vk_access_token,
            "v": settings.vk_api_version,
        }
        url = f"{settings.vk_api_url}messages.send"
        try:
            with httpx.Client(timeout=settings.notify_timeout, transport=self._transport) as client:
                r = client.post(url, data=data)
        except httpx.RequestError as ex:
            raise NotificationDispatchError(f"VK request failed: {ex.__class__.__name__}: {ex}") from ex
        if r.status_code >= 400:
            raise NotificationDispatchError(f"VK HTTP error {r.status_code}: {r.text}")
        try:
            body = r.json()
        except ValueError as ex:
            raise NotificationDispatchError(f"VK returned a non-JSON body: {r.text[:180]}") from ex
        if "error" in body:
            error = body["error"]
            raise NotificationDispatchError(f"VK API error {error.get('error_code')}: {error.get('error_msg')}")
        logger.debug("Report delivered to peers %s", recipients)
