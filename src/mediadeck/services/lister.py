"""Directory listing with per-entry classification."""

from __future__ import annotations

import os
from pathlib import Path
from typing import AbstractSet

import structlog

from mediadeck.errors import FileSystemError
from mediadeck.models.media import DirectoryEntry, EntryKind

logger = structlog.get_logger()


def classify(name: str, is_directory: bool, video_exts: AbstractSet[str], subtitle_exts: AbstractSet[str]) -> EntryKind:
    if is_directory:
        return EntryKind.DIRECTORY
    ext = os.path.splitext(name)[1].lower()
    if ext in video_exts:
        return EntryKind.VIDEO
    if ext in subtitle_exts:
        return EntryKind.SUBTITLE
    return EntryKind.OTHER


class DirectoryLister:
    def __init__(self, video_exts: AbstractSet[str], subtitle_exts: AbstractSet[str]) -> None:
        self.video_exts = video_exts
        self.subtitle_exts = subtitle_exts

    def list(self, directory: Path) -> list[DirectoryEntry]:
        """List *directory* in enumeration order.

        Fails as a whole (``FileSystemError``) if the directory cannot be read
        or any single entry cannot be stat'ed.
        """
        entries: list[DirectoryEntry] = []
        try:
            with os.scandir(directory) as it:
                for dirent in it:
                    is_directory = dirent.is_dir(follow_symlinks=False)
                    st = dirent.stat()
                    entries.append(
                        DirectoryEntry(
                            name=dirent.name,
                            path=os.path.join(directory, dirent.name),
                            is_directory=is_directory,
                            size=st.st_size,
                            modified=st.st_mtime * 1000,
                            ext=None if is_directory else os.path.splitext(dirent.name)[1].lower(),
                            kind=classify(dirent.name, is_directory, self.video_exts, self.subtitle_exts),
                        )
                    )
        except OSError as exc:
            raise FileSystemError(str(exc)) from exc

        logger.debug("browse.listed", path=str(directory), count=len(entries))
        return entries
