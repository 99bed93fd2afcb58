"""Application configuration loaded from environment variables."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings


def _split_csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
        "frozen": True,
    }

    # Sandbox roots, comma-separated
    roots: str = ""

    # Server
    host: str = "127.0.0.1"
    port: int = 4000
    allowed_origins: str = "*"
    web_dir: str = ""
    log_level: str = "info"

    # External tools
    ffmpeg_binary: str = "ffmpeg"
    ffprobe_binary: str = "ffprobe"
    log_tail_chars: int = 8000

    # File classification
    video_extensions: str = ".mp4,.mkv,.mov,.avi"
    subtitle_extensions: str = ".srt,.ass,.ssa,.vtt"

    @property
    def root_paths(self) -> tuple[Path, ...]:
        """Configured roots as absolute, normalized paths (order preserved)."""
        return tuple(Path(os.path.abspath(p)) for p in _split_csv(self.roots))

    @property
    def video_ext_set(self) -> frozenset[str]:
        return frozenset(ext.lower() for ext in _split_csv(self.video_extensions))

    @property
    def subtitle_ext_set(self) -> frozenset[str]:
        return frozenset(ext.lower() for ext in _split_csv(self.subtitle_extensions))

    @property
    def origin_list(self) -> list[str]:
        return _split_csv(self.allowed_origins) or ["*"]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings, read once on first use."""
    return Settings()
