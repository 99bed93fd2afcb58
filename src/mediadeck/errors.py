"""Error taxonomy shared by every component.

Each error carries the message returned to the client. All kinds map to
HTTP 400 today; ``status_code`` lives on the class so a kind can be moved
to another status without touching the handlers.
"""

from __future__ import annotations


class MediaDeckError(Exception):
    """Base class for errors reported to the client as ``{"error": message}``."""

    status_code: int = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    @property
    def kind(self) -> str:
        return type(self).__name__


class ConfigError(MediaDeckError):
    """No sandbox roots are configured."""


class OutOfBoundsError(MediaDeckError):
    """A path resolves outside every configured root."""


class InvalidInputError(MediaDeckError):
    """Wrong file kind for an operation, unknown action or missing field."""


class NoSubtitlesError(MediaDeckError):
    """Subtitle extraction requested on a file without subtitle streams."""


class FileSystemError(MediaDeckError):
    """A filesystem call failed; the message is the OS error text."""


class ToolExecutionError(MediaDeckError):
    """ffmpeg/ffprobe could not be spawned or exited non-zero."""

    def __init__(self, message: str, log: str | None = None) -> None:
        super().__init__(message)
        self.log = log


class ParseError(MediaDeckError):
    """The probing tool produced output that is not valid JSON."""
