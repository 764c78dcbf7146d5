from __future__ import annotations

import asyncio
import functools
import logging
import os
from concurrent.futures import Executor
from typing import Optional

from .config import ConfigurationChangeEvent, Settings, WINDOWS_EXECUTABLE_EXTENSIONS_KEY
from .environment import Environment, ShellType, resolve_path_value, split_path_value
from .lifecycle import DisposableScope
from .models import CacheEntry, CompletionResource, LabelSet
from .platforms import PlatformStrategy, SuffixConfig, get_platform
from .scanner import DirectoryScanner

logger = logging.getLogger(__name__)


class PathExecutableCache:
    """
    Executables reachable through PATH, cached by the exact PATH value.

    The cached entry is replaced wholesale by a fill and dropped by
    ``refresh()``; it is never modified in place.
    """

    def __init__(
        self,
        platform: PlatformStrategy | None = None,
        settings: Settings | None = None,
        scanner: DirectoryScanner | None = None,
        strict_precedence: bool = False,
        executor: Executor | None = None,
    ):
        """
        Initialize the cache.

        Args:
            platform: Platform strategy, the running platform by default.
            settings: Source of the Windows executable extensions.
            scanner: Directory scanner, one bound to ``platform`` by default.
            strict_precedence: Scan directories one by one in PATH order so
                the earlier directory wins a name collision.
            executor: Executor running the blocking scans, the loop's default
                executor when None.
        """
        self.platform = platform or get_platform()
        self.scanner = scanner or DirectoryScanner(platform=self.platform)
        self.strict_precedence = strict_precedence
        self.executor = executor

        self._entry: Optional[CacheEntry] = None
        self._path_value: Optional[str] = None
        self._windows_extensions: Optional[SuffixConfig] = None
        self._settings = settings
        self._subscriptions = DisposableScope()

        if self.platform.is_windows and settings is not None:
            self._windows_extensions = settings.windows_executable_extensions()
            self._subscriptions.add(settings.on_did_change(self._on_configuration_change))

    @property
    def cached_entry(self) -> Optional[CacheEntry]:
        return self._entry

    @property
    def settings(self) -> Optional[Settings]:
        return self._settings

    @property
    def windows_extensions(self) -> Optional[SuffixConfig]:
        return self._windows_extensions

    def refresh(self) -> None:
        """
        Forget the cached entry so the next lookup scans again.
        """
        self._entry = None
        self._path_value = None

    def dispose(self) -> None:
        self._subscriptions.dispose()

    def __enter__(self) -> PathExecutableCache:
        return self

    def __exit__(self, *exc_info) -> None:
        self.dispose()

    async def get_executables_in_path(
        self,
        env: Environment | None = None,
        shell_type: ShellType | None = None,
    ) -> Optional[CacheEntry]:
        """
        Get the executables reachable through the PATH of ``env``.

        Args:
            env: Environment to read PATH from, this process's by default.
            shell_type: Shell the environment was reported by.

        Returns:
            Optional[CacheEntry]: The cached or freshly computed entry, or None
            if no PATH value could be resolved.
        """
        if env is None:
            env = os.environ

        path_value = resolve_path_value(env, shell_type, self.platform)
        if path_value is None:
            logger.debug("No PATH found in the environment")
            return None

        entry = self._entry
        if entry is not None and self._path_value == path_value:
            return entry

        entry = await self._fill(path_value)

        self._path_value = path_value
        self._entry = entry
        return entry

    async def _fill(self, path_value: str) -> CacheEntry:
        directories = split_path_value(path_value, self.platform)
        separator = self.platform.path_component_separator
        suffix_config = self._windows_extensions
        labels = LabelSet()
        loop = asyncio.get_running_loop()

        def _scan(directory: str):
            return loop.run_in_executor(
                self.executor,
                functools.partial(
                    self.scanner.scan, directory, separator, labels, suffix_config
                ),
            )

        if self.strict_precedence:
            result_sets = [await _scan(directory) for directory in directories]
        else:
            result_sets = await asyncio.gather(
                *(_scan(directory) for directory in directories)
            )

        executables: set[CompletionResource] = set()
        for result_set in result_sets:
            if result_set:
                executables.update(result_set)

        logger.debug(
            "Found %d executables in %d PATH directories",
            len(executables),
            len(directories),
        )

        return CacheEntry(
            path_key=path_value,
            candidates=frozenset(executables),
            labels=labels.snapshot(),
        )

    def _on_configuration_change(self, event: ConfigurationChangeEvent) -> None:
        if not event.affects(WINDOWS_EXECUTABLE_EXTENSIONS_KEY) or self._settings is None:
            return

        self._windows_extensions = self._settings.windows_executable_extensions()
        self._entry = None
