"""Request variants for media operations and file operations.

Each media endpoint accepts exactly one of the ``MediaOperationRequest``
variants; file operations arrive as a loose ``{action, source, target}``
body and are narrowed to a ``FileOperation`` variant before execution.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, Field

from mediadeck.errors import InvalidInputError
from mediadeck.models.base import CamelModel
from mediadeck.models.media import SubtitleSelection


class ExtractSubtitles(CamelModel):
    operation: Literal["extract-subs"] = "extract-subs"
    input: str
    stream_index: Any = 0
    output: Optional[str] = None


class BurnSubtitles(CamelModel):
    operation: Literal["burn-subs"] = "burn-subs"
    input: str
    subtitles: str
    output: Optional[str] = None


class TranscodeHEVC(CamelModel):
    operation: Literal["transcode-hevc"] = "transcode-hevc"
    input: str
    output: Optional[str] = None
    bitrate: Union[str, int] = "5M"
    preset: str = "p5"
    gop: int = 48


class TranscodeMP4(CamelModel):
    operation: Literal["transcode-mp4"] = "transcode-mp4"
    input: str
    output: Optional[str] = None
    crf: Union[int, float] = 19
    preset: str = "medium"
    audio_bitrate: Union[str, int] = "192k"


MediaOperationRequest = Union[ExtractSubtitles, BurnSubtitles, TranscodeHEVC, TranscodeMP4]


class MediaPlan(BaseModel):
    """A fully validated ffmpeg invocation: arguments exclude the binary."""

    output: Path
    args: list[str]
    stream: Optional[SubtitleSelection] = None


# --- File operations ---------------------------------------------------------


class CopyOp(BaseModel):
    action: Literal["copy"] = "copy"
    source: str
    target: str


class MoveOp(BaseModel):
    action: Literal["move"] = "move"
    source: str
    target: str


class DeleteOp(BaseModel):
    action: Literal["delete"] = "delete"
    source: str


class CreateDirOp(BaseModel):
    action: Literal["createDir"] = "createDir"
    target: str


FileOperation = Union[CopyOp, MoveOp, DeleteOp, CreateDirOp]


class FileOpRequest(BaseModel):
    action: Optional[str] = None
    source: Optional[str] = None
    target: Optional[str] = None

    def _require(self, field: str) -> str:
        value = getattr(self, field)
        if not value:
            raise InvalidInputError(f"'{field}' is required for action '{self.action}'")
        return value

    def to_operation(self) -> FileOperation:
        """Narrow the raw body to its variant; ``rename`` is an alias of ``move``."""
        if self.action == "createDir":
            return CreateDirOp(target=self._require("target"))
        if self.action == "delete":
            return DeleteOp(source=self._require("source"))
        if self.action == "copy":
            return CopyOp(source=self._require("source"), target=self._require("target"))
        if self.action in ("move", "rename"):
            return MoveOp(source=self._require("source"), target=self._require("target"))
        raise InvalidInputError(f"Invalid action: {self.action!r}")


class TranslateRequest(CamelModel):
    input: str
    batch_size: int = Field(default=100, ge=1)
