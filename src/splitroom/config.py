from __future__ import annotations

from functools import lru_cache
from typing import Optional
from zoneinfo import ZoneInfo

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", case_sensitive=False)

    room_api_url: str = Field("http://localhost:3001", alias="ROOM_API_URL")
    currency: str = Field("INR", alias="CURRENCY")
    payment_scheme: str = Field("upi", alias="PAYMENT_SCHEME")
    request_timeout: float = Field(5.0, alias="REQUEST_TIMEOUT")
    refresh_interval: int = Field(15, alias="REFRESH_INTERVAL")
    tz: str = Field("Asia/Kolkata", alias="TZ")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(True, alias="LOG_JSON")
    room_id: Optional[str] = Field(None, alias="ROOM_ID")
    viewer_id: Optional[str] = Field(None, alias="VIEWER_ID")

    @property
    def zoneinfo(self) -> ZoneInfo:
        return ZoneInfo(self.tz)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
