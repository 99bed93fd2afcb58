"""ffmpeg argument builders.

Everything here is pure: paths come in already sandboxed, argument lists
come out without the binary name.
"""

from __future__ import annotations

from pathlib import Path

_SUBTITLE_EXT_BY_CODEC = {
    "subrip": ".srt",
    "ass": ".ass",
    "ssa": ".ssa",
    "webvtt": ".vtt",
    "mov_text": ".srt",
    "dvd_subtitle": ".sub",
    "hdmv_pgs_subtitle": ".sup",
}
DEFAULT_SUBTITLE_EXT = ".srt"

# Characters with meaning inside a filter-graph argument
_FILTER_SPECIALS = (":", ",", "[", "]", "'")


def subtitle_ext_from_codec(codec_name: str | None) -> str:
    return _SUBTITLE_EXT_BY_CODEC.get((codec_name or "").lower(), DEFAULT_SUBTITLE_EXT)


def escape_filter_path(path: str | Path) -> str:
    """Escape a file path for use as ``filename='...'`` inside ``-vf``.

    Backslashes become forward slashes first (Windows paths), then each
    filter-significant character gets a backslash in front of it.
    """
    escaped = str(path).replace("\\", "/")
    for char in _FILTER_SPECIALS:
        escaped = escaped.replace(char, "\\" + char)
    return escaped


def subtitle_filter(subtitles_path: Path) -> str:
    """``ass`` filter for .ass files, ``subtitles`` for everything else."""
    name = "ass" if subtitles_path.suffix.lower() == ".ass" else "subtitles"
    return f"{name}=filename='{escape_filter_path(subtitles_path)}'"


def extract_subtitles_args(input_path: Path, ordinal: int, output_path: Path) -> list[str]:
    return ["-y", "-i", str(input_path), "-map", f"0:s:{ordinal}", "-c", "copy", str(output_path)]


def burn_subtitles_args(input_path: Path, subtitles_path: Path, output_path: Path) -> list[str]:
    return [
        "-y",
        "-i", str(input_path),
        "-vf", subtitle_filter(subtitles_path),
        "-c:a", "copy",
        str(output_path),
    ]


def transcode_hevc_args(
    input_path: Path,
    output_path: Path,
    *,
    bitrate: str | int,
    preset: str,
    gop: int,
) -> list[str]:
    """NVENC HEVC, constant quality 19 capped at *bitrate*; audio/subs copied."""
    return [
        "-y",
        "-hwaccel", "cuda",
        "-i", str(input_path),
        "-map", "0",
        "-c:v", "hevc_nvenc",
        "-preset", preset,
        "-rc:v", "vbr",
        "-cq", "19",
        "-b:v", str(bitrate),
        "-maxrate", str(bitrate),
        "-bufsize", "20M",
        "-g", str(gop),
        "-map_metadata", "0",
        "-map_chapters", "0",
        "-c:a", "copy",
        "-c:s", "copy",
        "-movflags", "+faststart",
        str(output_path),
    ]


def transcode_mp4_args(
    input_path: Path,
    output_path: Path,
    *,
    crf: int | float,
    preset: str,
    audio_bitrate: str | int,
) -> list[str]:
    """x264 high profile yuv420p, AAC audio, subtitles as mov_text."""
    return [
        "-y",
        "-i", str(input_path),
        "-map", "0:v:0?",
        "-map", "0:a?",
        "-map", "0:s?",
        "-c:v", "libx264",
        "-preset", preset,
        "-crf", str(crf),
        "-profile:v", "high",
        "-pix_fmt", "yuv420p",
        "-c:a", "aac",
        "-b:a", str(audio_bitrate),
        "-c:s", "mov_text",
        "-movflags", "+faststart",
        "-map_metadata", "0",
        "-map_chapters", "0",
        str(output_path),
    ]
