from typing import Optional

from pathexec.constants import (
    EXIT_CODE_FAILURE,
    EXIT_CODE_INVALID_CONFIG,
    EXIT_CODE_PATH_NOT_RESOLVED,
)


class PathExecError(Exception):
    """
    Generic pathexec error.

    Args:
        message (str): The error message.
        error_code (Optional[int]): The error code.
    """
    def __init__(self, message: str = "An error occurred while running pathexec.\n"
                                      "Please check your configuration and try again.",
                 error_code: Optional[int] = None):
        self.message = message
        self.error_code = error_code
        super().__init__(self.message)

    def get_exit_code(self) -> int:
        """
        Get the exit code associated with this error.

        Returns:
            int: The exit code.
        """
        return self.error_code if self.error_code is not None else EXIT_CODE_FAILURE


class ConfigurationError(PathExecError):
    """
    Error raised when an explicitly requested config file cannot be used.

    Args:
        config_path (str): The config file that was requested.
        reason (Optional[str]): Why it could not be used.
    """
    def __init__(self, config_path: str, reason: Optional[str] = None,
                 message: str = "Unable to read configuration from {config_path}.\n"):
        info = f"Details: {reason}\n" if reason else ""
        self.message = message.format(config_path=config_path) + info
        super().__init__(self.message)

    def get_exit_code(self) -> int:
        return EXIT_CODE_INVALID_CONFIG


class PathNotResolvedError(PathExecError):
    """
    Error raised when no PATH value can be found in the environment.
    """
    def __init__(self, message: str = "No PATH variable was found in the environment.\n"
                                      "There are no executables to offer."):
        self.message = message
        super().__init__(self.message)

    def get_exit_code(self) -> int:
        return EXIT_CODE_PATH_NOT_RESOLVED
