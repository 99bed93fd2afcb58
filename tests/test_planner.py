import asyncio

import pytest

from mediadeck.errors import InvalidInputError, NoSubtitlesError, OutOfBoundsError, ToolExecutionError
from mediadeck.models.operations import BurnSubtitles, ExtractSubtitles, TranscodeHEVC, TranscodeMP4
from mediadeck.sandbox import PathSandbox
from mediadeck.services.planner import MediaOperationPlanner, coerce_ordinal
from mediadeck.tools.probe import MetadataProbe

VIDEO_EXTS = frozenset({".mp4", ".mkv", ".mov", ".avi"})


def subtitle_stream(index, codec="subrip", language=None):
    stream = {"index": index, "codec_type": "subtitle", "codec_name": codec}
    if language:
        stream["tags"] = {"language": language}
    return stream


@pytest.fixture
def planner(media_root, fake_runner):
    return MediaOperationPlanner(PathSandbox([media_root]), MetadataProbe(fake_runner), VIDEO_EXTS)


def plan(planner, request):
    return asyncio.run(planner.plan(request))


@pytest.mark.parametrize(
    "value, count, expected",
    [
        (1, 3, 1),
        ("2", 3, 2),
        (" 1 ", 3, 1),
        (2.0, 3, 2),
        (1.5, 3, 0),
        (3, 3, 0),
        (-1, 3, 0),
        ("abc", 3, 0),
        (None, 3, 0),
        (True, 3, 0),
        ([1], 3, 0),
    ],
)
def test_coerce_ordinal(value, count, expected):
    assert coerce_ordinal(value, count) == expected


def test_extract_selects_by_subtitle_ordinal(planner, media_root, fake_runner):
    fake_runner.probe_data = {
        "streams": [
            {"index": 0, "codec_type": "video"},
            {"index": 1, "codec_type": "audio"},
            subtitle_stream(2, "subrip", "eng"),
            {"index": 3, "codec_type": "audio"},
            {"index": 4, "codec_type": "audio"},
            subtitle_stream(5, "ass", "jpn"),
            {"index": 6, "codec_type": "audio"},
            subtitle_stream(7, "webvtt", "spa"),
        ]
    }
    movie = media_root / "Movie.mkv"

    result = plan(planner, ExtractSubtitles(input=str(movie), stream_index=1))

    assert result.stream.ordinal == 1
    assert result.stream.codec == "ass"
    assert result.stream.language == "jpn"
    assert result.output == media_root / "Movie.jpn.ass"
    assert result.args == ["-y", "-i", str(movie), "-map", "0:s:1", "-c", "copy", str(media_root / "Movie.jpn.ass")]


def test_extract_out_of_range_ordinal_falls_back_to_first(planner, media_root, fake_runner):
    fake_runner.probe_data = {"streams": [subtitle_stream(3, "mov_text"), subtitle_stream(4, "dvd_subtitle")]}

    result = plan(planner, ExtractSubtitles(input=str(media_root / "clip.mp4"), stream_index=9))

    assert result.stream.ordinal == 0
    assert result.output == media_root / "clip.und.srt"
    assert "0:s:0" in result.args


def test_extract_explicit_output_must_stay_in_sandbox(planner, media_root, tmp_path, fake_runner):
    fake_runner.probe_data = {"streams": [subtitle_stream(2)]}
    movie = str(media_root / "a.mkv")

    result = plan(planner, ExtractSubtitles(input=movie, output=str(media_root / "subs" / "a.srt")))
    assert result.output == media_root / "subs" / "a.srt"

    with pytest.raises(OutOfBoundsError):
        plan(planner, ExtractSubtitles(input=movie, output=str(tmp_path / "a.srt")))


def test_extract_without_subtitles(planner, media_root, fake_runner):
    fake_runner.probe_data = {"streams": [{"index": 0, "codec_type": "video"}]}
    with pytest.raises(NoSubtitlesError):
        plan(planner, ExtractSubtitles(input=str(media_root / "a.mkv")))


def test_extract_requires_video_extension(planner, media_root, fake_runner):
    with pytest.raises(InvalidInputError):
        plan(planner, ExtractSubtitles(input=str(media_root / "a.srt")))
    assert fake_runner.capture_calls == []


def test_extract_unreadable_input_reports_no_subtitles(planner, media_root, fake_runner):
    fake_runner.capture_error = ToolExecutionError("a.mkv: Invalid data found when processing input")
    with pytest.raises(NoSubtitlesError):
        plan(planner, ExtractSubtitles(input=str(media_root / "a.mkv")))


@pytest.mark.parametrize("subs, filter_name", [("a.ass", "ass"), ("a.srt", "subtitles"), ("a.vtt", "subtitles")])
def test_burn_filter_selection(planner, media_root, subs, filter_name):
    result = plan(planner, BurnSubtitles(input=str(media_root / "a.mkv"), subtitles=str(media_root / subs)))

    vf = result.args[result.args.index("-vf") + 1]
    assert vf == f"{filter_name}=filename='{media_root / subs}'"
    assert result.output == media_root / "a.burnin.mp4"


def test_burn_rejects_subtitles_outside_sandbox(planner, media_root, tmp_path):
    with pytest.raises(OutOfBoundsError):
        plan(planner, BurnSubtitles(input=str(media_root / "a.mkv"), subtitles=str(tmp_path / "a.srt")))


def test_burn_blank_output_uses_default(planner, media_root):
    result = plan(
        planner,
        BurnSubtitles(input=str(media_root / "a.mkv"), subtitles=str(media_root / "a.srt"), output="   "),
    )
    assert result.output == media_root / "a.burnin.mp4"


def test_hevc_default_output_uses_source_height(planner, media_root, fake_runner):
    fake_runner.probe_data = {"streams": [{"index": 0, "codec_type": "video", "height": 1080}]}

    result = plan(planner, TranscodeHEVC(input=str(media_root / "show.MKV")))

    assert result.output == media_root / "show-1080p-HEVC.mkv"
    assert result.args[result.args.index("-b:v") + 1] == "5M"
    assert result.args[result.args.index("-preset") + 1] == "p5"
    assert result.args[result.args.index("-g") + 1] == "48"


def test_hevc_unknown_height_when_probe_fails(planner, media_root, fake_runner):
    fake_runner.capture_error = ToolExecutionError("boom")
    result = plan(planner, TranscodeHEVC(input=str(media_root / "show.mov")))
    assert result.output == media_root / "show-HEVC.mov"


def test_mp4_defaults_and_output(planner, media_root, fake_runner):
    fake_runner.probe_data = {"streams": [{"index": 0, "codec_type": "video", "height": 720}]}

    result = plan(planner, TranscodeMP4(input=str(media_root / "show.avi")))

    assert result.output == media_root / "show-720p-MP4.mp4"
    assert result.args[result.args.index("-crf") + 1] == "19"
    assert result.args[result.args.index("-preset") + 1] == "medium"
    assert result.args[result.args.index("-b:a") + 1] == "192k"


def test_transcode_requires_video(planner, media_root):
    with pytest.raises(InvalidInputError):
        plan(planner, TranscodeMP4(input=str(media_root / "notes.txt")))
