"""
Log codes for configuration-related operations.
"""

CONFIG = "config"

# Windows executable extensions
EXTENSIONS = f"{CONFIG}.windows_executable_extensions"
EXTENSIONS_RESOLVED = f"{EXTENSIONS}.resolved"
EXTENSIONS_FILE_MISSING = f"{EXTENSIONS}.file_missing"
EXTENSIONS_FILE_MALFORMED = f"{EXTENSIONS}.file_malformed"
EXTENSIONS_MISSING_SECTION = f"{EXTENSIONS}.missing_section"
EXTENSIONS_INVALID_VALUE = f"{EXTENSIONS}.invalid_value"
EXTENSIONS_CHANGED = f"{EXTENSIONS}.changed"
