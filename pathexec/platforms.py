from __future__ import annotations

import logging
import os
import platform
import re
from functools import lru_cache
from typing import Mapping, Optional

from pathexec.constants import WINDOWS_DEFAULT_EXECUTABLE_EXTENSIONS

LOG = logging.getLogger(__name__)

SuffixConfig = Mapping[str, Optional[bool]]

_DRIVE_LETTER = re.compile(r"^[a-zA-Z]:\\")


class PlatformStrategy:
    """
    Everything that differs between Windows and the other platforms.

    Picked once through ``get_platform()`` and handed to the scanner,
    the cache and the watcher.
    """

    is_windows = False
    path_list_separator = os.pathsep
    path_component_separator = os.sep

    def is_executable(self, path: str, suffix_config: SuffixConfig | None = None) -> bool:
        raise NotImplementedError

    def friendly_path(self, path: str, separator: str | None = None) -> str:
        """
        Normalize ``path`` for display using ``separator``, this platform's
        component separator by default.
        """
        separator = separator or self.path_component_separator
        alternate = "/" if separator == "\\" else "\\"
        if separator == "\\":
            path = path.replace(alternate, separator)
            if _DRIVE_LETTER.match(path):
                path = f"{path[0].upper()}{path[1:]}"
        return path

    def find_path_key(self, env: Mapping[str, Optional[str]]) -> str | None:
        return "PATH" if "PATH" in env else None

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class PosixPlatform(PlatformStrategy):
    is_windows = False
    path_list_separator = ":"
    path_component_separator = "/"

    def is_executable(self, path: str, suffix_config: SuffixConfig | None = None) -> bool:
        try:
            if not os.path.isfile(path):
                return False
            return os.access(path, os.X_OK)
        except (OSError, ValueError):
            return False


class WindowsPlatform(PlatformStrategy):
    is_windows = True
    path_list_separator = ";"
    path_component_separator = "\\"

    def executable_extensions(self, suffix_config: SuffixConfig | None = None) -> tuple[str, ...]:
        """
        Resolve the recognized suffixes.

        Configured suffixes mapped to True are added to the defaults,
        suffixes mapped to anything else are removed.
        """
        extensions = [ext.lower() for ext in WINDOWS_DEFAULT_EXECUTABLE_EXTENSIONS]
        excluded = set()

        for suffix, enabled in (suffix_config or {}).items():
            suffix = suffix.lower()
            if enabled is True:
                if suffix not in extensions:
                    extensions.append(suffix)
            else:
                excluded.add(suffix)

        return tuple(ext for ext in extensions if ext not in excluded)

    def is_executable(self, path: str, suffix_config: SuffixConfig | None = None) -> bool:
        try:
            lowered = path.lower()
            return any(
                lowered.endswith(ext) for ext in self.executable_extensions(suffix_config)
            )
        except (AttributeError, TypeError):
            LOG.debug("Unable to check suffix of %r", path, exc_info=True)
            return False

    def find_path_key(self, env: Mapping[str, Optional[str]]) -> str | None:
        return next((key for key in env if key.lower() == "path"), None)


@lru_cache()
def get_platform() -> PlatformStrategy:
    """
    Select the strategy for the running interpreter.
    """
    if platform.system() == "Windows":
        return WindowsPlatform()
    return PosixPlatform()


def is_executable(
    path: str,
    suffix_config: SuffixConfig | None = None,
    platform_strategy: PlatformStrategy | None = None,
) -> bool:
    """
    Decide whether ``path`` denotes a runnable program. Never raises.

    Args:
        path (str): The path to check.
        suffix_config (SuffixConfig | None): Windows suffix overrides.
        platform_strategy (PlatformStrategy | None): Defaults to the running platform.

    Returns:
        bool: True if the path is executable.
    """
    strategy = platform_strategy or get_platform()
    return strategy.is_executable(path, suffix_config)
