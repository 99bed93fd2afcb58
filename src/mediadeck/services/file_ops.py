"""Sandboxed copy/move/delete/createDir."""

from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import Any

import structlog

from mediadeck.errors import FileSystemError, InvalidInputError
from mediadeck.models.operations import CopyOp, CreateDirOp, DeleteOp, FileOperation, MoveOp
from mediadeck.sandbox import PathSandbox

logger = structlog.get_logger()


class FileOpExecutor:
    """Executes a single ``FileOperation``; no rollback, no verification."""

    def __init__(self, sandbox: PathSandbox) -> None:
        self.sandbox = sandbox

    def execute(self, operation: FileOperation) -> dict[str, Any]:
        """Run *operation* and return extra fields for the response body."""
        # Every path is resolved before any filesystem call
        if isinstance(operation, CreateDirOp):
            target = self.sandbox.resolve(operation.target)
            self._call(target.mkdir, parents=True, exist_ok=True)
            logger.info("file_op.done", action=operation.action, target=str(target))
            return {"created": str(target)}

        if isinstance(operation, DeleteOp):
            source = self.sandbox.resolve(operation.source)
            self._delete(source)
            logger.info("file_op.done", action=operation.action, source=str(source))
            return {}

        if isinstance(operation, (CopyOp, MoveOp)):
            source = self.sandbox.resolve(operation.source)
            target = self.sandbox.resolve(operation.target)
            if isinstance(operation, CopyOp):
                self._call(shutil.copyfile, source, target)
            else:
                self._call(os.rename, source, target)
            logger.info("file_op.done", action=operation.action, source=str(source), target=str(target))
            return {}

        raise InvalidInputError(f"Invalid action: {getattr(operation, 'action', None)!r}")

    @staticmethod
    def _delete(path: Path) -> None:
        try:
            if path.is_dir() and not path.is_symlink():
                # Non-recursive: only an empty directory goes
                path.rmdir()
            else:
                path.unlink()
        except FileNotFoundError:
            return
        except OSError as exc:
            logger.warning("file_op.failed", error=str(exc))
            raise FileSystemError(str(exc)) from exc

    @staticmethod
    def _call(func, *args, **kwargs) -> None:
        try:
            func(*args, **kwargs)
        except OSError as exc:
            logger.warning("file_op.failed", error=str(exc))
            raise FileSystemError(str(exc)) from exc
