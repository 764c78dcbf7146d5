import asyncio
import sys
import time
from unittest.mock import Mock

import pytest
from watchdog.events import FileCreatedEvent, FileDeletedEvent
from watchdog.observers.api import BaseObserver
from watchdog.observers.polling import PollingObserver

from pathexec.cache import PathExecutableCache
from pathexec.lifecycle import DisposableScope
from pathexec.watcher import PathChangeHandler, WatchRegistry, watch_path_directories


@pytest.fixture
def observer() -> Mock:
    observer = Mock(spec=BaseObserver)
    observer.is_alive.return_value = False
    observer.schedule.side_effect = lambda handler, path, recursive: ("watch", path)
    return observer


@pytest.fixture
def registry(observer) -> WatchRegistry:
    return WatchRegistry(observer=observer)


@pytest.mark.unit
class TestPathChangeHandler:
    @pytest.mark.parametrize(
        "event", [FileCreatedEvent("/usr/bin/new"), FileDeletedEvent("/usr/bin/old")]
    )
    def test_any_event_refreshes_cache(self, event):
        cache = Mock(spec=PathExecutableCache)
        handler = PathChangeHandler(cache)

        handler.dispatch(event)

        cache.refresh.assert_called_once_with()

    def test_without_cache(self):
        PathChangeHandler(None).dispatch(FileCreatedEvent("/usr/bin/new"))


@pytest.mark.unit
class TestWatchRegistry:
    def test_schedule_once_per_directory(self, registry, observer):
        handler = PathChangeHandler(None)

        assert registry.schedule("/usr/bin", handler) is True
        assert registry.schedule("/usr/bin", handler) is False
        assert registry.watched == {"/usr/bin"}
        observer.start.assert_called_once_with()
        observer.schedule.assert_called_once_with(handler, "/usr/bin", recursive=False)

    def test_release(self, registry, observer):
        registry.schedule("/usr/bin", PathChangeHandler(None))

        registry.release("/usr/bin")
        registry.release("/usr/bin")

        assert not registry.is_watched("/usr/bin")
        observer.unschedule.assert_called_once_with(("watch", "/usr/bin"))

    def test_stop(self, registry, observer):
        registry.schedule("/usr/bin", PathChangeHandler(None))
        observer.is_alive.return_value = True

        registry.stop()

        assert registry.watched == frozenset()
        observer.stop.assert_called_once_with()
        observer.join.assert_called_once_with()

    def test_schedule_after_stop_uses_fresh_observer(self, observer):
        fresh = Mock(spec=BaseObserver)
        fresh.is_alive.return_value = False
        fresh.schedule.return_value = ("watch", "/usr/bin")
        registry = WatchRegistry(observer=observer, observer_factory=lambda: fresh)
        handler = PathChangeHandler(None)

        registry.schedule("/usr/bin", handler)
        registry.stop()

        assert registry.observer is fresh
        assert registry.schedule("/usr/bin", handler) is True
        observer.start.assert_called_once_with()
        fresh.start.assert_called_once_with()
        assert fresh.daemon is True

    def test_stop_without_watches_keeps_observer(self, registry, observer):
        registry.stop()

        assert registry.observer is observer
        observer.stop.assert_not_called()


@pytest.mark.unit
class TestWatchPathDirectories:
    def test_watches_each_existing_directory_once(self, registry, bin_dirs, tmp_path, posix_platform):
        usr_bin, local_bin = bin_dirs
        not_a_dir = tmp_path / "file"
        not_a_dir.write_text("x")
        env = {
            "PATH": ":".join(
                [str(usr_bin), str(local_bin), str(usr_bin), str(tmp_path / "missing"), str(not_a_dir), ""]
            )
        }
        scope = DisposableScope()

        watched = watch_path_directories(scope, env, Mock(), registry, posix_platform)

        assert sorted(watched) == sorted([str(usr_bin), str(local_bin)])
        assert registry.watched == {str(usr_bin), str(local_bin)}
        assert len(scope) == 2

    def test_already_watched_directories_are_skipped(self, registry, observer, bin_dirs, posix_platform):
        usr_bin, local_bin = bin_dirs
        scope = DisposableScope()

        watch_path_directories(scope, {"PATH": str(usr_bin)}, None, registry, posix_platform)
        watched = watch_path_directories(
            scope, {"PATH": f"{usr_bin}:{local_bin}"}, None, registry, posix_platform
        )

        assert watched == [str(local_bin)]
        assert observer.schedule.call_count == 2

    def test_scope_teardown_releases_watches(self, registry, observer, bin_dirs, posix_platform):
        usr_bin, local_bin = bin_dirs

        with DisposableScope() as scope:
            watch_path_directories(
                scope, {"PATH": f"{usr_bin}:{local_bin}"}, None, registry, posix_platform
            )

        assert registry.watched == frozenset()
        assert observer.unschedule.call_count == 2

    def test_released_directory_can_be_watched_again(self, registry, bin_dirs, posix_platform):
        usr_bin, _ = bin_dirs
        env = {"PATH": str(usr_bin)}

        with DisposableScope() as scope:
            watch_path_directories(scope, env, None, registry, posix_platform)

        with DisposableScope() as scope:
            assert watch_path_directories(scope, env, None, registry, posix_platform) == [str(usr_bin)]

    def test_failing_watch_is_skipped(self, registry, observer, bin_dirs, posix_platform):
        usr_bin, local_bin = bin_dirs
        observer.schedule.side_effect = [OSError("inotify watch limit reached"), ("watch", str(local_bin))]
        scope = DisposableScope()

        watched = watch_path_directories(
            scope, {"PATH": f"{usr_bin}:{local_bin}"}, None, registry, posix_platform
        )

        assert len(watched) == 1
        assert len(scope) == 1

    def test_unexpected_watch_error_is_skipped(self, registry, observer, bin_dirs, posix_platform):
        usr_bin, _ = bin_dirs
        observer.start.side_effect = RuntimeError("threads can only be started once")
        scope = DisposableScope()

        watched = watch_path_directories(
            scope, {"PATH": str(usr_bin)}, None, registry, posix_platform
        )

        assert watched == []
        assert len(scope) == 0
        assert registry.watched == frozenset()

    def test_no_path(self, registry, posix_platform):
        scope = DisposableScope()

        assert watch_path_directories(scope, {}, None, registry, posix_platform) == []
        assert len(scope) == 0


@pytest.mark.integration
@pytest.mark.slow
@pytest.mark.unix_only
@pytest.mark.skipif(sys.platform.startswith("win"), reason="Unix-specific test")
def test_new_executable_is_found_after_change(bin_dirs, make_file, posix_platform):
    usr_bin, local_bin = bin_dirs
    make_file(usr_bin, "ls")
    env = {"PATH": f"{usr_bin}:{local_bin}"}
    cache = PathExecutableCache(platform=posix_platform)
    registry = WatchRegistry(observer=PollingObserver(timeout=0.1))

    try:
        with DisposableScope() as scope:
            first = asyncio.run(cache.get_executables_in_path(env))
            watch_path_directories(scope, env, cache, registry, posix_platform)
            # Let the polling emitter take its first snapshot
            time.sleep(0.5)

            make_file(local_bin, "newtool")

            deadline = time.monotonic() + 10
            while cache.cached_entry is not None and time.monotonic() < deadline:
                time.sleep(0.05)

            second = asyncio.run(cache.get_executables_in_path(env))
    finally:
        registry.stop()

    assert first.labels == {"ls"}
    assert second.labels == {"ls", "newtool"}
    assert second.path_key == first.path_key


@pytest.mark.integration
@pytest.mark.unix_only
@pytest.mark.skipif(sys.platform.startswith("win"), reason="Unix-specific test")
def test_directories_can_be_watched_again_after_stop(bin_dirs, posix_platform):
    usr_bin, _ = bin_dirs
    env = {"PATH": str(usr_bin)}
    registry = WatchRegistry(
        observer=PollingObserver(timeout=0.1),
        observer_factory=lambda: PollingObserver(timeout=0.1),
    )

    try:
        assert watch_path_directories(DisposableScope(), env, None, registry, posix_platform) == [str(usr_bin)]
        registry.stop()

        assert watch_path_directories(DisposableScope(), env, None, registry, posix_platform) == [str(usr_bin)]
        assert registry.observer.is_alive()
    finally:
        registry.stop()
