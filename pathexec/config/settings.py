from __future__ import annotations

import configparser
import logging
import threading
from pathlib import Path
from typing import Callable, Mapping, NamedTuple, Optional

from pathexec.constants import WINDOWS_EXECUTABLE_EXTENSIONS_SECTION, get_config_path
from pathexec.errors import ConfigurationError
from pathexec.lifecycle import Disposable

from .log_codes import (
    EXTENSIONS_CHANGED,
    EXTENSIONS_FILE_MALFORMED,
    EXTENSIONS_FILE_MISSING,
    EXTENSIONS_INVALID_VALUE,
    EXTENSIONS_MISSING_SECTION,
    EXTENSIONS_RESOLVED,
)

logger = logging.getLogger(__name__)

WINDOWS_EXECUTABLE_EXTENSIONS_KEY = WINDOWS_EXECUTABLE_EXTENSIONS_SECTION


class ConfigurationChangeEvent(NamedTuple):
    keys: frozenset

    def affects(self, key: str) -> bool:
        return key in self.keys


Listener = Callable[[ConfigurationChangeEvent], None]


def _new_parser() -> configparser.ConfigParser:
    # Values are read verbatim, "%" included
    return configparser.ConfigParser(interpolation=None)


def _read_config(config_path: Path) -> Optional[configparser.ConfigParser]:
    config = _new_parser()
    try:
        config_files = config.read(filenames=[config_path], encoding="utf-8")
    except (configparser.Error, UnicodeDecodeError) as e:
        logger.warning(
            EXTENSIONS_FILE_MALFORMED,
            extra={"config_path": str(config_path), "error": str(e)},
        )
        return None

    if not config_files:
        logger.debug(EXTENSIONS_FILE_MISSING, extra={"config_path": str(config_path)})
        return None

    return config


def _extensions_from_config(
    config: Optional[configparser.ConfigParser], config_path: Path
) -> dict[str, bool]:
    """
    Extract the suffix overrides from a parsed config.ini.

    Args:
        config (Optional[configparser.ConfigParser]): The parsed file, if any.
        config_path (Path): Where it was read from, for logging.

    Returns:
        dict[str, bool]: Suffix to "suffix-only executable" flag. Values that
        are not booleans are dropped.
    """
    if config is None:
        return {}

    if not config.has_section(WINDOWS_EXECUTABLE_EXTENSIONS_SECTION):
        logger.debug(
            EXTENSIONS_MISSING_SECTION, extra={"config_path": str(config_path)}
        )
        return {}

    section = config[WINDOWS_EXECUTABLE_EXTENSIONS_SECTION]
    extensions: dict[str, bool] = {}

    for suffix in section:
        try:
            extensions[suffix] = section.getboolean(suffix)
        except ValueError:
            logger.warning(
                EXTENSIONS_INVALID_VALUE,
                extra={"suffix": suffix, "value": section.get(suffix)},
            )

    logger.debug(
        EXTENSIONS_RESOLVED,
        extra={"config_path": str(config_path), "extensions": extensions},
    )
    return extensions


class Settings:
    """
    Configuration store for the executable discovery.

    Only the Windows executable extensions live here. Interested parties
    subscribe with ``on_did_change`` and are told which keys changed.
    """

    def __init__(self, config_path: Optional[Path] = None):
        self.config_path = Path(config_path) if config_path else get_config_path()
        self._lock = threading.Lock()
        self._listeners: list[Listener] = []
        self._extensions = _extensions_from_config(
            _read_config(self.config_path), self.config_path
        )

    @classmethod
    def from_file(cls, config_path: Path) -> Settings:
        """
        Load settings from a file the user asked for explicitly.

        Raises:
            ConfigurationError: The file does not exist, cannot be opened or
                cannot be parsed.
        """
        config_path = Path(config_path).expanduser()
        if not config_path.is_file():
            raise ConfigurationError(str(config_path), reason="File not found.")

        try:
            with open(config_path, encoding="utf-8") as f:
                _new_parser().read_file(f)
        except (OSError, configparser.Error, UnicodeDecodeError) as e:
            raise ConfigurationError(str(config_path), reason=str(e)) from e

        return cls(config_path)

    def windows_executable_extensions(self) -> dict[str, bool]:
        with self._lock:
            return dict(self._extensions)

    def update(self, extensions: Mapping[str, bool]) -> None:
        """
        Replace the extension overrides and notify listeners if they changed.
        """
        self._replace(dict(extensions))

    def reload(self) -> None:
        """
        Re-read the config file and notify listeners if anything changed.
        """
        self._replace(
            _extensions_from_config(_read_config(self.config_path), self.config_path)
        )

    def on_did_change(self, listener: Listener) -> Disposable:
        with self._lock:
            self._listeners.append(listener)

        def _unsubscribe():
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return Disposable(_unsubscribe)

    def _replace(self, extensions: dict[str, bool]) -> None:
        with self._lock:
            if extensions == self._extensions:
                return
            self._extensions = extensions
            listeners = list(self._listeners)

        logger.debug(EXTENSIONS_CHANGED, extra={"extensions": extensions})

        event = ConfigurationChangeEvent(
            keys=frozenset({WINDOWS_EXECUTABLE_EXTENSIONS_KEY})
        )
        for listener in listeners:
            listener(event)
