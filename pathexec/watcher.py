from __future__ import annotations

import logging
import os
import threading
from typing import Callable, Optional

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer
from watchdog.observers.api import BaseObserver, ObservedWatch

from .cache import PathExecutableCache
from .environment import Environment, resolve_path_value, split_path_value
from .lifecycle import Disposable, DisposableScope
from .platforms import PlatformStrategy, get_platform

logger = logging.getLogger(__name__)


class PathChangeHandler(FileSystemEventHandler):
    """
    Drops the cached executables whenever a watched directory changes.
    """

    def __init__(self, cache: Optional[PathExecutableCache]):
        super().__init__()
        self.cache = cache

    def on_any_event(self, event: FileSystemEvent) -> None:
        if self.cache is not None:
            self.cache.refresh()


class WatchRegistry:
    """
    Directories under an active watch, at most one watch per directory.

    The observer thread is a daemon, so active watches never keep the
    process alive. A stopped registry swaps in a fresh observer from
    ``observer_factory`` and can schedule watches again.
    """

    def __init__(
        self,
        observer: Optional[BaseObserver] = None,
        observer_factory: Callable[[], BaseObserver] = Observer,
    ):
        self._observer_factory = observer_factory
        self.observer = observer or observer_factory()
        self._started = self.observer.is_alive()
        if not self._started:
            self.observer.daemon = True
        self._watches: dict[str, ObservedWatch] = {}
        self._lock = threading.Lock()

    @property
    def watched(self) -> frozenset[str]:
        with self._lock:
            return frozenset(self._watches)

    def is_watched(self, directory: str) -> bool:
        with self._lock:
            return directory in self._watches

    def schedule(self, directory: str, handler: FileSystemEventHandler) -> bool:
        """
        Start watching ``directory`` (not recursively).

        Returns:
            bool: False if the directory was already watched.
        """
        with self._lock:
            if directory in self._watches:
                return False
            if not self._started:
                self.observer.start()
                self._started = True
            self._watches[directory] = self.observer.schedule(
                handler, directory, recursive=False
            )
            return True

    def release(self, directory: str) -> None:
        with self._lock:
            watch = self._watches.pop(directory, None)
        if watch is not None:
            self.observer.unschedule(watch)

    def stop(self) -> None:
        with self._lock:
            self._watches.clear()
            observer = self.observer
            started = self._started
            if started:
                self.observer = self._observer_factory()
                self.observer.daemon = True
                self._started = False

        if started:
            observer.stop()
            observer.join()


def watch_path_directories(
    scope: DisposableScope,
    env: Environment,
    cache: Optional[PathExecutableCache],
    registry: WatchRegistry,
    platform: PlatformStrategy | None = None,
) -> list[str]:
    """
    Watch every PATH directory of ``env`` and refresh ``cache`` on change.

    Each new watch is released when ``scope`` is disposed. Directories that
    are already watched, missing or not directories are skipped.

    Args:
        scope (DisposableScope): Owner of the watch teardowns.
        env (Environment): Environment to read PATH from.
        cache (Optional[PathExecutableCache]): Cache to refresh.
        registry (WatchRegistry): Directories already under a watch.
        platform (PlatformStrategy | None): Defaults to the running platform.

    Returns:
        list[str]: The directories newly watched.
    """
    platform = platform or get_platform()
    path_value = resolve_path_value(env, platform=platform)
    if not path_value:
        return []

    directories = set(split_path_value(path_value, platform))
    handler = PathChangeHandler(cache)
    watched = []

    for directory in directories:
        if registry.is_watched(directory):
            continue

        try:
            if not os.path.isdir(directory):
                continue

            if not registry.schedule(directory, handler):
                continue
        except Exception:
            logger.debug("Unable to watch %s", directory, exc_info=True)
            continue

        scope.add(Disposable(lambda directory=directory: registry.release(directory)))
        watched.append(directory)

    logger.debug("Watching %d new PATH directories", len(watched))
    return watched
