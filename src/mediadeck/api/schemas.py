"""Response schemas for the FastAPI endpoints."""

from __future__ import annotations

from typing import Optional

from mediadeck.models.base import CamelModel
from mediadeck.models.media import DirectoryEntry, ProbeResult, SubtitleSelection


class HealthResponse(CamelModel):
    ok: bool = True
    roots: list[str]


class BrowseResponse(CamelModel):
    path: str
    entries: list[DirectoryEntry]


class ProbeResponse(CamelModel):
    path: str
    size: int
    modified: float
    meta: ProbeResult


class ExtractResponse(CamelModel):
    ok: bool = True
    output: str
    stream: SubtitleSelection


class ToolLogResponse(CamelModel):
    ok: bool = True
    output: str
    log: str
    log_truncated: bool


class FileOpResponse(CamelModel):
    ok: bool = True
    created: Optional[str] = None


class TranslateResponse(CamelModel):
    ok: bool = False
    message: str
    batch_size: int
