import os
import stat
from pathlib import Path
from typing import Callable

import pytest

from pathexec.platforms import PosixPlatform, WindowsPlatform


def pytest_configure(config):
    for marker in (
        "unit: fast tests without real I/O beyond tmp_path",
        "integration: tests touching real watchers or the whole CLI",
        "slow: tests that wait on filesystem events",
        "unix_only: tests relying on POSIX permission bits",
    ):
        config.addinivalue_line("markers", marker)


@pytest.fixture
def posix_platform() -> PosixPlatform:
    return PosixPlatform()


@pytest.fixture
def windows_platform() -> WindowsPlatform:
    return WindowsPlatform()


@pytest.fixture
def make_file() -> Callable[..., Path]:
    """
    Factory creating a file, executable unless told otherwise.
    """

    def _make(directory: Path, name: str, executable: bool = True) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / name
        path.write_text("#!/bin/sh\necho hi\n")
        mode = stat.S_IRUSR | stat.S_IWUSR
        if executable:
            mode |= stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH
        os.chmod(path, mode)
        return path

    return _make


@pytest.fixture
def bin_dirs(tmp_path: Path) -> tuple[Path, Path]:
    first = tmp_path / "usr" / "bin"
    second = tmp_path / "usr" / "local" / "bin"
    first.mkdir(parents=True)
    second.mkdir(parents=True)
    return first, second
