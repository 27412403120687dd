# erp_console/settings.py
"""
ERP Console settings - backend URL, cache timers, data root.
"""
from __future__ import annotations
from pathlib import Path
from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, AliasChoices

class Settings(BaseSettings):
    # =========================================================================
    # ERP backend
    # =========================================================================
    ERP_API_URL: str = Field(
        default="http://localhost:5000/api",
        validation_alias=AliasChoices("ERP_API_URL", "NEXT_PUBLIC_API_URL", "api_url"),
    )
    ERP_REQUEST_TIMEOUT: float = Field(default=30.0, validation_alias="ERP_REQUEST_TIMEOUT")
    ERP_VERIFY_SSL: bool = Field(default=True, validation_alias="ERP_VERIFY_SSL")

    # queries retry once, mutations never
    ERP_QUERY_RETRY: int = Field(default=1, validation_alias="ERP_QUERY_RETRY")

    # =========================================================================
    # Query cache
    # =========================================================================
    CACHE_STALE_SECONDS: float = Field(default=5 * 60, validation_alias="CACHE_STALE_SECONDS")
    CACHE_GC_SECONDS: float = Field(default=10 * 60, validation_alias="CACHE_GC_SECONDS")

    # =========================================================================
    # Notifications
    # =========================================================================
    NOTIFICATION_POLLING: bool = Field(default=True, validation_alias="NOTIFICATION_POLLING")
    NOTIFICATION_POLL_SECONDS: float = Field(default=30.0, validation_alias="NOTIFICATION_POLL_SECONDS")

    # =========================================================================
    # Local storage (logs, session, exports)
    # =========================================================================
    CONSOLE_DATA_ROOT: Path = Field(
        default=(Path(__file__).resolve().parents[2] / "console-data"),
        validation_alias=AliasChoices("CONSOLE_DATA_ROOT", "console_data_root"),
    )

    CORS_ORIGINS: List[str] = Field(
        default=[
            "http://localhost:3000",
            "http://127.0.0.1:3000",
            "http://localhost:5173",
        ],
        validation_alias="CORS_ORIGINS",
    )

    LOG_LEVEL: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    LOG_TO_STDERR: bool = Field(default=False, validation_alias="LOG_TO_STDERR")

    APP_NAME: str = Field(default="Quản Lý Bán Hàng & Sản Xuất", validation_alias="APP_NAME")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="",
        case_sensitive=False,
        extra="ignore",
    )

settings = Settings()

CONSOLE_DATA_ROOT = settings.CONSOLE_DATA_ROOT
