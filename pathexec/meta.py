from importlib.metadata import PackageNotFoundError, version
import logging
from typing import Optional


LOG = logging.getLogger(__name__)


def get_version() -> Optional[str]:
    """
    Get the version of the pathexec package.

    Returns:
      Optional[str]: The pathexec version if found, otherwise None.
    """
    try:
        return version("pathexec")
    except PackageNotFoundError:
        LOG.exception("Unable to get pathexec version.")
        return None
