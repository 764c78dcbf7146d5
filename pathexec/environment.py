from __future__ import annotations

import os
from enum import Enum
from typing import Callable, Mapping, Optional

from .platforms import PlatformStrategy, get_platform

Environment = Mapping[str, Optional[str]]


class ShellType(str, Enum):
    BASH = "bash"
    ZSH = "zsh"
    FISH = "fish"
    POWERSHELL = "pwsh"
    GIT_BASH = "gitbash"
    NUSHELL = "nu"
    PYTHON = "python"
    CMD = "cmd"


PathExtractor = Callable[[Environment, PlatformStrategy], Optional[str]]


def extract_from_environment(env: Environment, platform: PlatformStrategy) -> str | None:
    """
    Read PATH from ``env``; the key is matched case-insensitively on Windows.
    """
    key = platform.find_path_key(env)
    if key is None:
        return None
    return env.get(key)


def extract_from_process(env: Environment, platform: PlatformStrategy) -> str | None:
    """
    Ignore ``env`` and read the PATH of this process.
    """
    return os.environ.get("PATH")


# Shells whose reported PATH cannot be trusted. Git Bash reports it with
# backslash separators.
PATH_EXTRACTORS: dict[ShellType, PathExtractor] = {
    ShellType.GIT_BASH: extract_from_process,
}


def resolve_path_value(
    env: Environment,
    shell_type: ShellType | None = None,
    platform: PlatformStrategy | None = None,
) -> str | None:
    """
    Resolve the PATH string a lookup is keyed by.

    Returns:
        str | None: The PATH value, or None if there is none.
    """
    platform = platform or get_platform()
    extractor = PATH_EXTRACTORS.get(shell_type, extract_from_environment)
    return extractor(env, platform)


def split_path_value(value: str, platform: PlatformStrategy | None = None) -> list[str]:
    """
    Split a PATH value into its directories, keeping empty entries.
    """
    platform = platform or get_platform()
    return value.split(platform.path_list_separator)
