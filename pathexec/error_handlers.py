# Standard library imports
import logging
import sys
from functools import wraps

# Third-party imports
import click

# Local imports
from pathexec.constants import EXIT_CODE_FAILURE, EXIT_CODE_OK
from pathexec.errors import PathExecError


LOG = logging.getLogger(__name__)


def output_exception(exception: Exception, exit_code_output: bool = True) -> None:
    """
    Output an exception message to the console and exit.

    Args:
        exception (Exception): The exception to output.
        exit_code_output (bool): Whether to output the exit code.

    Exits:
        Exits the program with the appropriate exit code.
    """
    click.secho(str(exception), fg="red", file=sys.stderr)

    if exit_code_output:
        exit_code = EXIT_CODE_FAILURE
        if hasattr(exception, "get_exit_code"):
            exit_code = exception.get_exit_code()
    else:
        exit_code = EXIT_CODE_OK

    sys.exit(exit_code)


def handle_cmd_exception(func):
    """
    Decorator to handle exceptions in command functions.

    Args:
        func: The command function to wrap.

    Returns:
        The wrapped function.
    """

    @wraps(func)
    def inner(ctx, *args, **kwargs):
        try:
            return func(ctx, *args, **kwargs)
        except click.ClickException as e:
            raise e
        except PathExecError as e:
            LOG.exception("Expected PathExecError happened: %s", e)
            output_exception(e, exit_code_output=True)
        except Exception as e:
            LOG.exception("Unexpected Exception happened: %s", e)
            output_exception(
                PathExecError(message=f"An unexpected error occurred in pathexec: {e}"),
                exit_code_output=True,
            )

    return inner
