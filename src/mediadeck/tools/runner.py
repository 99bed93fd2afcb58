"""Subprocess boundary for ffprobe/ffmpeg."""

from __future__ import annotations

import asyncio
import codecs
import json
from dataclasses import dataclass
from typing import Any, Sequence

import structlog

from mediadeck.errors import ParseError, ToolExecutionError

logger = structlog.get_logger()

_READ_CHUNK = 4096


def tail_log(log: str, limit: int) -> tuple[str, bool]:
    """Return the last *limit* characters of *log* and whether anything was cut."""
    if limit > 0 and len(log) > limit:
        return log[-limit:], True
    return log, False


@dataclass(frozen=True)
class ToolRun:
    log: str


class ExternalToolRunner:
    """Runs external tools with stdin closed and no timeout.

    ``run_capture`` is for ffprobe (stdout is the payload), ``run_streamed``
    for ffmpeg (stderr is the progress log).
    """

    def __init__(self, log_tail_chars: int = 8000) -> None:
        self.log_tail_chars = log_tail_chars

    async def _spawn(self, tool: str, args: Sequence[str], **streams: Any) -> asyncio.subprocess.Process:
        try:
            return await asyncio.create_subprocess_exec(
                tool,
                *args,
                stdin=asyncio.subprocess.DEVNULL,
                **streams,
            )
        except OSError as exc:
            logger.error("tool.spawn_failed", tool=tool, error=str(exc))
            raise ToolExecutionError(f"Could not start {tool}: {exc}") from exc

    async def run_capture(self, tool: str, args: Sequence[str]) -> Any:
        """Run *tool*, buffer stdout and parse it as JSON."""
        proc = await self._spawn(
            tool,
            args,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        stdout, stderr = await proc.communicate()
        err_text = stderr.decode("utf-8", errors="replace")

        if proc.returncode != 0:
            message = err_text.strip() or f"{tool} exited with code {proc.returncode}"
            logger.warning("tool.capture_failed", tool=tool, returncode=proc.returncode)
            raise ToolExecutionError(message, log=err_text)

        try:
            return json.loads(stdout.decode("utf-8", errors="replace"))
        except json.JSONDecodeError as exc:
            raise ParseError(f"Could not parse {tool} output: {exc}") from exc

    async def run_streamed(self, tool: str, args: Sequence[str]) -> ToolRun:
        """Run *tool*, accumulating stderr as it arrives; succeed only on exit code 0.

        Raises:
            ToolExecutionError: Spawn failure or non-zero exit. The message is
                the tail of the accumulated log.
        """
        logger.info("tool.start", tool=tool, args=list(args))
        proc = await self._spawn(
            tool,
            args,
            stdout=asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.PIPE,
        )

        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        chunks: list[str] = []
        if proc.stderr is None:
            raise ToolExecutionError(f"{tool} started without a stderr pipe")
        while True:
            chunk = await proc.stderr.read(_READ_CHUNK)
            if not chunk:
                break
            chunks.append(decoder.decode(chunk))
        chunks.append(decoder.decode(b"", final=True))
        returncode = await proc.wait()
        log = "".join(chunks)

        if returncode != 0:
            snippet, _ = tail_log(log, self.log_tail_chars)
            logger.warning("tool.failed", tool=tool, returncode=returncode, tail=snippet[-300:])
            raise ToolExecutionError(snippet or f"{tool} exited with code {returncode}", log=log)

        logger.info("tool.done", tool=tool, log_chars=len(log))
        return ToolRun(log=log)
