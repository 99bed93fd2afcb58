"""Pydantic models for directory listings and probe results."""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import Field

from mediadeck.models.base import CamelModel


class EntryKind(str, Enum):
    DIRECTORY = "dir"
    VIDEO = "video"
    SUBTITLE = "sub"
    OTHER = "file"


class DirectoryEntry(CamelModel):
    name: str
    path: str
    is_directory: bool
    size: int
    modified: float  # ms since epoch
    ext: Optional[str] = None
    kind: EntryKind


class StreamDescriptor(CamelModel):
    index: int  # absolute index in the container
    ordinal: int  # position among streams of the same codec type
    codec_type: str
    codec_name: str = ""
    language: str = "und"
    width: Optional[int] = None
    height: Optional[int] = None


class ProbeResult(CamelModel):
    """Raw ffprobe output, or the reason it is missing.

    ``format``/``streams`` are passed through untouched; ``error``/``stderr``
    are set instead when probing failed.
    """

    format: Optional[dict[str, Any]] = None
    streams: list[dict[str, Any]] = Field(default_factory=list)
    error: Optional[str] = None
    stderr: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class SubtitleSelection(CamelModel):
    codec: str
    language: str
    ordinal: int
