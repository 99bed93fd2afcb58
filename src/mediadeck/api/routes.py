"""FastAPI route handlers: browsing, probing, media operations, file operations."""

from __future__ import annotations

import asyncio
import os
from typing import Optional

import structlog
from fastapi import APIRouter, Depends

from mediadeck.api.dependencies import (
    get_file_ops,
    get_lister,
    get_planner,
    get_probe,
    get_runner,
    get_sandbox,
)
from mediadeck.api.schemas import (
    BrowseResponse,
    ExtractResponse,
    FileOpResponse,
    HealthResponse,
    ProbeResponse,
    ToolLogResponse,
    TranslateResponse,
)
from mediadeck.config import Settings, get_settings
from mediadeck.errors import FileSystemError, InvalidInputError
from mediadeck.models.operations import (
    BurnSubtitles,
    ExtractSubtitles,
    FileOpRequest,
    MediaPlan,
    TranscodeHEVC,
    TranscodeMP4,
    TranslateRequest,
)
from mediadeck.sandbox import PathSandbox
from mediadeck.services.file_ops import FileOpExecutor
from mediadeck.services.lister import DirectoryLister
from mediadeck.services.planner import MediaOperationPlanner
from mediadeck.tools.probe import MetadataProbe
from mediadeck.tools.runner import ExternalToolRunner, tail_log

logger = structlog.get_logger()

router = APIRouter()


async def _run_plan(plan: MediaPlan, runner: ExternalToolRunner, settings: Settings) -> ToolLogResponse:
    """Run an encode plan and package the tail of its log."""
    result = await runner.run_streamed(settings.ffmpeg_binary, plan.args)
    snippet, truncated = tail_log(result.log, settings.log_tail_chars)
    return ToolLogResponse(output=str(plan.output), log=snippet, log_truncated=truncated)


@router.get("/health", response_model=HealthResponse)
async def health(settings: Settings = Depends(get_settings)):
    return HealthResponse(roots=[str(r) for r in settings.root_paths])


@router.get("/browse", response_model=BrowseResponse)
async def browse(
    path: Optional[str] = None,
    sandbox: PathSandbox = Depends(get_sandbox),
    lister: DirectoryLister = Depends(get_lister),
):
    """List a directory inside the sandbox (first root when *path* is omitted)."""
    target = sandbox.resolve(path)
    entries = await asyncio.to_thread(lister.list, target)
    return BrowseResponse(path=str(target), entries=entries)


@router.get("/probe", response_model=ProbeResponse, response_model_exclude_none=True)
async def probe_file(
    path: Optional[str] = None,
    sandbox: PathSandbox = Depends(get_sandbox),
    probe: MetadataProbe = Depends(get_probe),
):
    """Stat a file and attach ffprobe metadata; probe failures are reported in ``meta.error``."""
    target = sandbox.resolve(path)
    try:
        st = await asyncio.to_thread(os.stat, target)
    except OSError as exc:
        raise FileSystemError(str(exc)) from exc
    meta = await probe.probe(target)
    return ProbeResponse(path=str(target), size=st.st_size, modified=st.st_mtime * 1000, meta=meta)


@router.post("/extract-subs", response_model=ExtractResponse)
async def extract_subs(
    request: ExtractSubtitles,
    planner: MediaOperationPlanner = Depends(get_planner),
    runner: ExternalToolRunner = Depends(get_runner),
    settings: Settings = Depends(get_settings),
):
    plan = await planner.plan(request)
    await runner.run_streamed(settings.ffmpeg_binary, plan.args)
    logger.info("extract_subs.done", output=str(plan.output))
    return ExtractResponse(output=str(plan.output), stream=plan.stream)


@router.post("/burn-subs", response_model=ToolLogResponse)
async def burn_subs(
    request: BurnSubtitles,
    planner: MediaOperationPlanner = Depends(get_planner),
    runner: ExternalToolRunner = Depends(get_runner),
    settings: Settings = Depends(get_settings),
):
    plan = await planner.plan(request)
    logger.info("burn_subs.start", input=request.input, subtitles=request.subtitles, output=str(plan.output))
    response = await _run_plan(plan, runner, settings)
    logger.info("burn_subs.done", output=response.output)
    return response


@router.post("/transcode-hevc", response_model=ToolLogResponse)
async def transcode_hevc(
    request: TranscodeHEVC,
    planner: MediaOperationPlanner = Depends(get_planner),
    runner: ExternalToolRunner = Depends(get_runner),
    settings: Settings = Depends(get_settings),
):
    plan = await planner.plan(request)
    return await _run_plan(plan, runner, settings)


@router.post("/transcode-mp4", response_model=ToolLogResponse)
async def transcode_mp4(
    request: TranscodeMP4,
    planner: MediaOperationPlanner = Depends(get_planner),
    runner: ExternalToolRunner = Depends(get_runner),
    settings: Settings = Depends(get_settings),
):
    plan = await planner.plan(request)
    return await _run_plan(plan, runner, settings)


@router.post("/file-op", response_model=FileOpResponse, response_model_exclude_none=True)
async def file_op(request: FileOpRequest, executor: FileOpExecutor = Depends(get_file_ops)):
    """Copy, move/rename, delete or create a directory inside the sandbox."""
    operation = request.to_operation()
    extra = await asyncio.to_thread(executor.execute, operation)
    return FileOpResponse(**extra)


@router.post("/translate-subs", response_model=TranslateResponse)
async def translate_subs(
    request: TranslateRequest,
    sandbox: PathSandbox = Depends(get_sandbox),
    settings: Settings = Depends(get_settings),
):
    """Placeholder: validates the subtitle path but never translates."""
    subs_path = sandbox.resolve(request.input)
    if subs_path.suffix.lower() not in settings.subtitle_ext_set:
        raise InvalidInputError(f"Not a subtitle file: {subs_path.name}")
    return TranslateResponse(
        message="Subtitle translation is not available yet; this endpoint is a stub.",
        batch_size=request.batch_size,
    )
