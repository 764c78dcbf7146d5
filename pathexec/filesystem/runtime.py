from __future__ import annotations

import os
import stat
from pathlib import Path
from typing import NamedTuple

from ..models import EntryType


class DirectoryEntry(NamedTuple):
    name: str
    path: str
    entry_type: EntryType


class FsRuntime:
    """
    Wrapper for the filesystem calls made while scanning PATH.

    ``is_dir`` never raises; ``is_symlink``, ``resolve_link`` and ``scandir``
    raise ``OSError`` so the scanner can tell a vanished entry from a
    non-matching one.
    """

    def is_dir(self, path: str) -> bool:
        try:
            return Path(path).is_dir()
        except (OSError, ValueError):
            return False

    def is_symlink(self, path: str) -> bool:
        return stat.S_ISLNK(os.lstat(path).st_mode)

    def resolve_link(self, path: str) -> str:
        """
        Resolve every link in ``path``.

        Raises:
            OSError: The target does not exist or the links loop.
        """
        try:
            return str(Path(path).resolve(strict=True))
        except RuntimeError as e:
            # Symlink loops surface as RuntimeError before Python 3.13
            raise OSError(str(e)) from e

    def scandir(self, path: str) -> list[DirectoryEntry]:
        with os.scandir(path) as it:
            return [
                DirectoryEntry(entry.name, entry.path, self._classify(entry))
                for entry in it
            ]

    @staticmethod
    def _classify(entry: os.DirEntry) -> EntryType:
        try:
            if entry.is_symlink():
                return EntryType.SYMBOLIC_LINK
            if entry.is_dir(follow_symlinks=False):
                return EntryType.DIRECTORY
            if entry.is_file(follow_symlinks=False):
                return EntryType.FILE
        except OSError:
            return EntryType.UNKNOWN
        return EntryType.UNKNOWN
