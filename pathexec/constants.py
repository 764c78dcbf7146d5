# -*- coding: utf-8 -*-
import os
import sys
from pathlib import Path
from typing import Optional

DIR_NAME = ".pathexec"


def get_system_dir() -> Path:
    """
    Get the system directory for the pathexec configuration.

    Returns:
        Path: The system directory path.
    """
    raw_dir = os.getenv("PATHEXEC_SYSTEM_CONFIG_PATH")
    app_data = os.environ.get("ALLUSERSPROFILE", None)

    if not raw_dir:
        if sys.platform.startswith("win") and app_data:
            raw_dir = app_data
        elif sys.platform.startswith("darwin"):
            raw_dir = "/Library/Application Support"
        elif sys.platform.startswith("linux"):
            raw_dir = "/etc"
        else:
            raw_dir = "/"

    return Path(raw_dir, DIR_NAME)


def get_user_dir() -> Path:
    """
    Get the user directory for the pathexec configuration.

    Returns:
        Path: The user directory path.
    """
    path = Path("~", DIR_NAME).expanduser()
    return path


USER_CONFIG_DIR = get_user_dir()
SYSTEM_CONFIG_DIR = get_system_dir()

CONFIG_FILE_NAME = "config.ini"
CONFIG_FILE_SYSTEM = SYSTEM_CONFIG_DIR / CONFIG_FILE_NAME if SYSTEM_CONFIG_DIR else None
CONFIG_FILE_USER = USER_CONFIG_DIR / CONFIG_FILE_NAME


def get_config_path() -> Path:
    """
    Resolve the config.ini to read.

    ``PATHEXEC_CONFIG_PATH`` wins, then an existing system file, then the
    user file (which may not exist yet).
    """
    override: Optional[str] = os.getenv("PATHEXEC_CONFIG_PATH")
    if override:
        return Path(override).expanduser()

    if CONFIG_FILE_SYSTEM and CONFIG_FILE_SYSTEM.exists():
        return CONFIG_FILE_SYSTEM

    return CONFIG_FILE_USER


# Section holding the suffix-only executable overrides for Windows
WINDOWS_EXECUTABLE_EXTENSIONS_SECTION = "windows_executable_extensions"

# Suffixes treated as runnable on Windows without any configuration
WINDOWS_DEFAULT_EXECUTABLE_EXTENSIONS = (
    ".exe",
    ".bat",
    ".cmd",
    ".com",
    ".msi",
    ".vbs",
    ".js",
    ".jar",
    ".py",
    ".rb",
    ".pl",
    ".sh",
)

SYMLINK_DOCUMENTATION_FORMAT = "{link} -> {target}"

DEFAULT_WATCH_INTERVAL = 1.0

# Exit codes
EXIT_CODE_OK = 0
EXIT_CODE_FAILURE = 1
EXIT_CODE_PATH_NOT_RESOLVED = 64
EXIT_CODE_INVALID_CONFIG = 65

CLI_MAIN_INTRODUCTION = (
    "List the executables reachable through PATH, the way a terminal "
    "autocomplete sees them."
)
CLI_DEBUG_HELP = "Enable debug logging."
CLI_LIST_COMMAND_HELP = "Scan every PATH directory once and print the executables found."
CLI_WATCH_COMMAND_HELP = (
    "Watch every PATH directory and print the executables that appear or "
    "disappear until interrupted."
)
CLI_SHELL_HELP = (
    "Shell the environment comes from. Some shells misreport PATH and are "
    "special-cased."
)
CLI_JSON_HELP = "Print the executables as JSON."
CLI_STRICT_PRECEDENCE_HELP = (
    "Scan PATH directories in order so an earlier directory always wins a "
    "name collision."
)
CLI_CONFIG_HELP = "Path to a config.ini with a [windows_executable_extensions] section."
CLI_INTERVAL_HELP = "Seconds between checks for a refreshed cache."
CLI_DURATION_HELP = "Stop watching after this many seconds."
