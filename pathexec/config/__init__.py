from .settings import (
    ConfigurationChangeEvent,
    Settings,
    WINDOWS_EXECUTABLE_EXTENSIONS_KEY,
)

__all__ = [
    "ConfigurationChangeEvent",
    "Settings",
    "WINDOWS_EXECUTABLE_EXTENSIONS_KEY",
]
