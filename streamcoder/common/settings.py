# streamcoder/common/settings.py
from __future__ import annotations

import tempfile
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class APIConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8000
    prefix: str = "/api"


class FFmpegConfig(BaseModel):
    # Working directory for the engine process; None means the system temp dir
    work_dir: Optional[Path] = None
    # Bytes per write when pumping a source stream into ffmpeg's stdin
    pump_chunk_size: int = Field(64 * 1024, ge=1024)
    # Upper bound for read_metadata() waiting on the process
    metadata_timeout_sec: int = Field(30, ge=1)
    stderr_encoding: str = "utf-8"


class Settings(BaseSettings):
    # -------- App / Env --------
    app_name: str = "streamcoder"
    app_env: str = "development"  # development|test|staging|production
    log_level: str = "INFO"

    # -------- Engine binary --------
    # Conventional override for the ffmpeg binary location
    ffmpeg_bin_override: Optional[str] = Field(default=None, alias="FFMPEG_BIN_PATH")

    # -------- Sub-configs --------
    api: APIConfig = APIConfig()
    ffmpeg: FFmpegConfig = FFmpegConfig()

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ===== Derived =====
    @computed_field  # type: ignore[misc]
    @property
    def ffmpeg_bin(self) -> str:
        return self.ffmpeg_bin_override or "ffmpeg"

    @computed_field  # type: ignore[misc]
    @property
    def ffmpeg_work_dir(self) -> Path:
        if self.ffmpeg.work_dir:
            return Path(self.ffmpeg.work_dir)
        return Path(tempfile.gettempdir())


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Global settings accessor (cached). Use this everywhere you need config:
        from streamcoder.common.settings import get_settings
        cfg = get_settings()
    """
    return Settings()  # pydantic_settings will read from .env automatically
