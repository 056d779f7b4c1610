from __future__ import annotations
import os
from functools import lru_cache
from typing import List
from pydantic import BaseModel, Field, field_validator


def split_csv(v):
    if isinstance(v, str):
        # Allow comma or semicolon separated
        return [p.strip() for p in v.replace(";", ",").split(",") if p.strip()]
    return v


class Settings(BaseModel):
    vk_access_token: str = Field(default="", alias="VK_ACCESS_TOKEN")
    vk_api_url: str = Field(default="https://api.vk.com/method/", alias="VK_API_URL")
    vk_api_version: str = Field(default="5.199", alias="VK_API_VERSION")

    error_recipients: List[int] = Field(default_factory=list, alias="ERROR_RECIPIENTS")
    trace_path_filters: List[str] = Field(default_factory=list, alias="TRACE_PATH_FILTERS")

    snippet_padding: int = Field(default=0, ge=0, alias="SNIPPET_PADDING")
    notify_timeout: float = Field(default=10.0, gt=0, alias="NOTIFY_TIMEOUT")
    disable_notifications: bool = Field(default=False, alias="DISABLE_NOTIFICATIONS")

    class Config:
        populate_by_name = True

    @field_validator("error_recipients", "trace_path_filters", mode="before")
    @classmethod
    def split_list(cls, v):
        return split_csv(v)

    @field_validator("vk_api_url")
    @classmethod
    def trailing_slash(cls, v: str) -> str:
        return v if v.endswith("/") else v + "/"

    @property
    def notifications_configured(self) -> bool:
        return bool(self.vk_access_token) and not self.disable_notifications

@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Load from environment variables (dotenv can be loaded in main)
    data = {k: v for k, v in os.environ.items()}
    return Settings(**data)
