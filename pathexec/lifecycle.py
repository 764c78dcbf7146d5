from __future__ import annotations

import logging
import threading
from typing import Callable, Protocol

LOG = logging.getLogger(__name__)


class Releasable(Protocol):
    def dispose(self) -> None: ...


class Disposable:
    """
    Handle that runs ``callback`` the first time it is disposed.
    """

    def __init__(self, callback: Callable[[], None]):
        self._callback: Callable[[], None] | None = callback
        self._lock = threading.Lock()

    @property
    def disposed(self) -> bool:
        return self._callback is None

    def dispose(self) -> None:
        with self._lock:
            callback, self._callback = self._callback, None
        if callback is not None:
            callback()


class DisposableScope:
    """
    Collects handles and releases all of them when the scope ends.

    Handles are released in reverse order of registration. A failing release
    is logged and does not stop the remaining ones.
    """

    def __init__(self):
        self._handles: list[Releasable] = []
        self._lock = threading.Lock()
        self._disposed = False

    @property
    def disposed(self) -> bool:
        return self._disposed

    def __len__(self) -> int:
        with self._lock:
            return len(self._handles)

    def add(self, handle: Releasable) -> Releasable:
        with self._lock:
            if not self._disposed:
                self._handles.append(handle)
                return handle

        # Too late to hold it
        self._release(handle)
        return handle

    def dispose(self) -> None:
        with self._lock:
            handles, self._handles = self._handles, []
            self._disposed = True

        for handle in reversed(handles):
            self._release(handle)

    def __enter__(self) -> DisposableScope:
        return self

    def __exit__(self, *exc_info) -> None:
        self.dispose()

    @staticmethod
    def _release(handle: Releasable) -> None:
        try:
            handle.dispose()
        except Exception:
            LOG.exception("Error releasing %r", handle)
