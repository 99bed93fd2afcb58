"""ffprobe metadata: invocation, stream description, language tags."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Mapping, Optional

import structlog

from mediadeck.errors import ParseError, ToolExecutionError
from mediadeck.models.media import ProbeResult, StreamDescriptor
from mediadeck.tools.runner import ExternalToolRunner

logger = structlog.get_logger()

UNDETERMINED_LANGUAGE = "und"

_LANGUAGE_RE = re.compile(r"[a-z]{2,3}(?:-[a-z0-9]+)?", re.IGNORECASE)


def language_code_from_tags(tags: Optional[Mapping[str, Any]]) -> str:
    """Derive a short language code from a stream's tag map.

    The ``language`` key is looked up case-insensitively. ``"eng"``,
    ``"pt-BR"`` and ``"English"`` give ``"eng"``, ``"pt-br"`` and ``"eng"``.
    Missing or unusable values give ``"und"``.
    """
    if not tags:
        return UNDETERMINED_LANGUAGE
    raw = ""
    for key, value in tags.items():
        if str(key).lower() == "language" and value is not None:
            raw = str(value).strip().lower()
            if raw:
                break
    if not raw:
        return UNDETERMINED_LANGUAGE
    match = _LANGUAGE_RE.search(raw)
    return match.group(0).lower() if match else UNDETERMINED_LANGUAGE


def describe_streams(result: ProbeResult, codec_type: str) -> list[StreamDescriptor]:
    """Streams of one codec type, numbered by their position among that type."""
    described: list[StreamDescriptor] = []
    for position, raw in enumerate(result.streams):
        if raw.get("codec_type") != codec_type:
            continue
        described.append(
            StreamDescriptor(
                index=int(raw.get("index", position)),
                ordinal=len(described),
                codec_type=codec_type,
                codec_name=str(raw.get("codec_name") or ""),
                language=language_code_from_tags(raw.get("tags")),
                width=raw.get("width"),
                height=raw.get("height"),
            )
        )
    return described


def subtitle_streams(result: ProbeResult) -> list[StreamDescriptor]:
    return describe_streams(result, "subtitle")


def video_height(result: ProbeResult) -> Optional[int]:
    """Height of the first video stream, if ffprobe reported one."""
    videos = describe_streams(result, "video")
    if videos and videos[0].height:
        return int(videos[0].height)
    return None


class MetadataProbe:
    """Runs ffprobe for format and stream information."""

    def __init__(self, runner: ExternalToolRunner, ffprobe_binary: str = "ffprobe") -> None:
        self.runner = runner
        self.ffprobe_binary = ffprobe_binary

    @staticmethod
    def build_args(path: Path) -> list[str]:
        return [
            "-v",
            "error",
            "-print_format",
            "json",
            "-show_format",
            "-show_streams",
            str(path),
        ]

    async def load(self, path: Path) -> ProbeResult:
        """Probe *path*, raising ``ToolExecutionError``/``ParseError`` on failure."""
        data = await self.runner.run_capture(self.ffprobe_binary, self.build_args(path))
        if not isinstance(data, dict):
            raise ParseError(f"Unexpected {self.ffprobe_binary} output: expected a JSON object")
        fmt = data.get("format")
        return ProbeResult(
            format=fmt if isinstance(fmt, dict) else None,
            streams=[s for s in data.get("streams") or [] if isinstance(s, dict)],
        )

    async def probe(self, path: Path) -> ProbeResult:
        """Probe *path*; failures come back as ``ProbeResult.error`` instead of raising."""
        try:
            return await self.load(path)
        except ToolExecutionError as exc:
            logger.warning("probe.failed", path=str(path), error=exc.message[:300])
            return ProbeResult(error=exc.message, stderr=exc.log)
        except ParseError as exc:
            logger.warning("probe.unparseable", path=str(path), error=exc.message)
            return ProbeResult(error=exc.message)
