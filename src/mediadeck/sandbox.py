"""Path sandbox: every user-supplied path goes through here first."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable

import structlog

from mediadeck.errors import ConfigError, InvalidInputError, OutOfBoundsError

logger = structlog.get_logger()


class PathSandbox:
    """Resolves raw paths and proves they lie inside one of the configured roots.

    Comparison is done on ``os.path.abspath`` forms, so ``.`` and ``..``
    segments are collapsed before the check. A candidate is inside a root
    only when it equals the root or starts with ``root + os.sep``;
    ``/media/foo-evil`` is not inside ``/media/foo``.
    """

    def __init__(self, roots: Iterable[str | os.PathLike[str]]) -> None:
        self._roots: tuple[str, ...] = tuple(os.path.abspath(os.fspath(r)) for r in roots)

    @property
    def roots(self) -> tuple[Path, ...]:
        return tuple(Path(r) for r in self._roots)

    def contains(self, path: str | os.PathLike[str]) -> bool:
        normalized = os.path.abspath(os.fspath(path))
        for root in self._roots:
            # "/" already ends with the separator
            prefix = root if root.endswith(os.sep) else root + os.sep
            if normalized == root or normalized.startswith(prefix):
                return True
        return False

    def resolve(self, raw_path: str | os.PathLike[str] | None = None) -> Path:
        """Return the absolute form of *raw_path* if it is inside the sandbox.

        With no *raw_path* (``None`` or empty) the first root is returned,
        which is the entry point for browsing.

        Raises:
            ConfigError: No roots are configured.
            InvalidInputError: The path contains a NUL byte.
            OutOfBoundsError: The path escapes every root.
        """
        if not self._roots:
            raise ConfigError("No roots configured; set ROOTS to a comma-separated list of directories")

        if raw_path is None or os.fspath(raw_path) == "":
            return Path(self._roots[0])

        if "\x00" in os.fspath(raw_path):
            raise InvalidInputError("Path contains a NUL byte")

        candidate = os.path.abspath(os.fspath(raw_path))
        if not self.contains(candidate):
            logger.warning("sandbox.rejected", path=candidate)
            raise OutOfBoundsError(f"Path is outside the allowed roots: {candidate}")
        return Path(candidate)
