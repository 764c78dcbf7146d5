from __future__ import annotations

import logging

from .constants import SYMLINK_DOCUMENTATION_FORMAT
from .filesystem import FsRuntime
from .models import CompletionKind, CompletionResource, EntryType, LabelSet
from .platforms import PlatformStrategy, SuffixConfig, get_platform

LOG = logging.getLogger(__name__)

SKIPPED_ENTRY_TYPES = (EntryType.UNKNOWN, EntryType.DIRECTORY)


class DirectoryScanner:
    """
    Lists one PATH directory and turns its executables into completion
    candidates.
    """

    def __init__(
        self,
        fs: FsRuntime | None = None,
        platform: PlatformStrategy | None = None,
    ):
        self.fs = fs or FsRuntime()
        self.platform = platform or get_platform()

    def scan(
        self,
        directory: str,
        path_separator: str,
        labels: LabelSet,
        suffix_config: SuffixConfig | None = None,
    ) -> set[CompletionResource] | None:
        """
        Scan ``directory`` for executables whose names are not in ``labels`` yet.

        Every accepted name is added to ``labels``, which is shared with the
        scans of the other PATH directories.

        Args:
            directory (str): The PATH entry to scan.
            path_separator (str): Separator used for the documentation paths.
            labels (LabelSet): Names already accepted during this fill.
            suffix_config (SuffixConfig | None): Windows suffix overrides.

        Returns:
            set[CompletionResource] | None: The candidates, or None if the
            directory is missing, unreadable or failed mid-scan.
        """
        if not self.fs.is_dir(directory):
            return None

        try:
            result: set[CompletionResource] = set()

            for entry in self.fs.scandir(directory):
                if entry.entry_type in SKIPPED_ENTRY_TYPES:
                    continue

                kind: CompletionKind | None = None
                documentation: str | None = None

                try:
                    if self.fs.is_symlink(entry.path):
                        try:
                            target = self.fs.resolve_link(entry.path)
                        except OSError:
                            LOG.debug("Skipping broken link %s", entry.path)
                            continue

                        if not self.platform.is_executable(target, suffix_config):
                            continue

                        kind = CompletionKind.SYMBOLIC_LINK
                        documentation = SYMLINK_DOCUMENTATION_FORMAT.format(
                            link=entry.path, target=target
                        )
                except OSError:
                    # Vanished or unreadable entry
                    continue

                if documentation is None:
                    documentation = self.platform.friendly_path(entry.path, path_separator)

                if entry.name in labels:
                    continue

                if kind is None:
                    if not self.platform.is_executable(entry.path, suffix_config):
                        continue
                    kind = CompletionKind.EXECUTABLE

                if not labels.add_if_absent(entry.name):
                    continue

                result.add(
                    CompletionResource(
                        label=entry.name, documentation=documentation, kind=kind
                    )
                )

            return result
        except Exception:
            LOG.debug("Unable to scan %s", directory, exc_info=True)
            return None
