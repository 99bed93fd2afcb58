"""Turns media operation requests into concrete ffmpeg invocations.

Planning validates paths and file kinds, fills in derived defaults (output
names, stream selection) and builds the argument list. Running the plan is
left to the caller.
"""

from __future__ import annotations

from pathlib import Path
from typing import AbstractSet, Any, Optional

import structlog

from mediadeck.errors import InvalidInputError, NoSubtitlesError
from mediadeck.models.media import SubtitleSelection
from mediadeck.models.operations import (
    BurnSubtitles,
    ExtractSubtitles,
    MediaOperationRequest,
    MediaPlan,
    TranscodeHEVC,
    TranscodeMP4,
)
from mediadeck.sandbox import PathSandbox
from mediadeck.tools import commands
from mediadeck.tools.probe import MetadataProbe, subtitle_streams, video_height

logger = structlog.get_logger()


def coerce_ordinal(value: Any, count: int) -> int:
    """Requested subtitle ordinal if it is an in-range integer, else 0.

    Accepts ints and strings holding an int (``"1"``); booleans, floats
    with a fraction and anything unparseable fall back to 0.
    """
    if isinstance(value, bool):
        return 0
    if isinstance(value, float):
        if not value.is_integer():
            return 0
        value = int(value)
    elif isinstance(value, str):
        try:
            value = int(value.strip())
        except ValueError:
            return 0
    if isinstance(value, int) and 0 <= value < count:
        return value
    return 0


def _explicit(output: Optional[str]) -> Optional[str]:
    return output if output and output.strip() else None


class MediaOperationPlanner:
    def __init__(self, sandbox: PathSandbox, probe: MetadataProbe, video_exts: AbstractSet[str]) -> None:
        self.sandbox = sandbox
        self.probe = probe
        self.video_exts = video_exts

    async def plan(self, request: MediaOperationRequest) -> MediaPlan:
        if isinstance(request, ExtractSubtitles):
            return await self.plan_extract(request)
        if isinstance(request, BurnSubtitles):
            return await self.plan_burn(request)
        if isinstance(request, TranscodeHEVC):
            return await self.plan_transcode_hevc(request)
        if isinstance(request, TranscodeMP4):
            return await self.plan_transcode_mp4(request)
        raise InvalidInputError(f"Unsupported operation: {type(request).__name__}")

    def _resolve_video(self, raw: str) -> Path:
        path = self.sandbox.resolve(raw)
        if path.suffix.lower() not in self.video_exts:
            raise InvalidInputError(f"Not a video file: {path.name}")
        return path

    def _output(self, explicit: Optional[str], default: Path) -> Path:
        return self.sandbox.resolve(_explicit(explicit) or default)

    async def plan_extract(self, request: ExtractSubtitles) -> MediaPlan:
        input_path = self._resolve_video(request.input)

        # A file ffprobe cannot read has no usable subtitle streams either
        meta = await self.probe.probe(input_path)
        streams = subtitle_streams(meta)
        if not streams:
            if meta.error:
                logger.warning("plan.extract_probe_failed", input=str(input_path), error=meta.error[:300])
            raise NoSubtitlesError(f"No embedded subtitle streams in {input_path.name}")

        selected = streams[coerce_ordinal(request.stream_index, len(streams))]
        ext = commands.subtitle_ext_from_codec(selected.codec_name)
        default = input_path.with_name(f"{input_path.stem}.{selected.language}{ext}")
        output = self._output(request.output, default)

        logger.info(
            "plan.extract",
            input=str(input_path),
            ordinal=selected.ordinal,
            container_index=selected.index,
            codec=selected.codec_name,
        )
        return MediaPlan(
            output=output,
            args=commands.extract_subtitles_args(input_path, selected.ordinal, output),
            stream=SubtitleSelection(
                codec=selected.codec_name,
                language=selected.language,
                ordinal=selected.ordinal,
            ),
        )

    async def plan_burn(self, request: BurnSubtitles) -> MediaPlan:
        input_path = self.sandbox.resolve(request.input)
        subtitles_path = self.sandbox.resolve(request.subtitles)
        output = self._output(request.output, input_path.with_name(f"{input_path.stem}.burnin.mp4"))
        return MediaPlan(
            output=output,
            args=commands.burn_subtitles_args(input_path, subtitles_path, output),
        )

    async def _height_suffix(self, input_path: Path, label: str) -> str:
        height = video_height(await self.probe.probe(input_path))
        return f"-{height}p-{label}" if height else f"-{label}"

    async def plan_transcode_hevc(self, request: TranscodeHEVC) -> MediaPlan:
        input_path = self._resolve_video(request.input)
        suffix = await self._height_suffix(input_path, "HEVC")
        # Same container as the source
        default = input_path.with_name(f"{input_path.stem}{suffix}{input_path.suffix.lower()}")
        output = self._output(request.output, default)
        return MediaPlan(
            output=output,
            args=commands.transcode_hevc_args(
                input_path,
                output,
                bitrate=request.bitrate,
                preset=request.preset,
                gop=request.gop,
            ),
        )

    async def plan_transcode_mp4(self, request: TranscodeMP4) -> MediaPlan:
        input_path = self._resolve_video(request.input)
        suffix = await self._height_suffix(input_path, "MP4")
        output = self._output(request.output, input_path.with_name(f"{input_path.stem}{suffix}.mp4"))
        return MediaPlan(
            output=output,
            args=commands.transcode_mp4_args(
                input_path,
                output,
                crf=request.crf,
                preset=request.preset,
                audio_bitrate=request.audio_bitrate,
            ),
        )
