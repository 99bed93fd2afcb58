"""FastAPI dependency injection: components built from the settings object."""

from __future__ import annotations

from fastapi import Depends

from mediadeck.config import Settings, get_settings
from mediadeck.sandbox import PathSandbox
from mediadeck.services.file_ops import FileOpExecutor
from mediadeck.services.lister import DirectoryLister
from mediadeck.services.planner import MediaOperationPlanner
from mediadeck.tools.probe import MetadataProbe
from mediadeck.tools.runner import ExternalToolRunner


def get_sandbox(settings: Settings = Depends(get_settings)) -> PathSandbox:
    return PathSandbox(settings.root_paths)


def get_runner(settings: Settings = Depends(get_settings)) -> ExternalToolRunner:
    return ExternalToolRunner(log_tail_chars=settings.log_tail_chars)


def get_probe(
    settings: Settings = Depends(get_settings),
    runner: ExternalToolRunner = Depends(get_runner),
) -> MetadataProbe:
    return MetadataProbe(runner, ffprobe_binary=settings.ffprobe_binary)


def get_planner(
    settings: Settings = Depends(get_settings),
    sandbox: PathSandbox = Depends(get_sandbox),
    probe: MetadataProbe = Depends(get_probe),
) -> MediaOperationPlanner:
    return MediaOperationPlanner(sandbox, probe, settings.video_ext_set)


def get_lister(settings: Settings = Depends(get_settings)) -> DirectoryLister:
    return DirectoryLister(settings.video_ext_set, settings.subtitle_ext_set)


def get_file_ops(sandbox: PathSandbox = Depends(get_sandbox)) -> FileOpExecutor:
    return FileOpExecutor(sandbox)
