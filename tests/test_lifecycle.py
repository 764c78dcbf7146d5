from unittest.mock import Mock

import pytest

from pathexec.lifecycle import Disposable, DisposableScope


@pytest.mark.unit
class TestDisposable:
    def test_callback_runs_once(self):
        callback = Mock()
        disposable = Disposable(callback)

        disposable.dispose()
        disposable.dispose()

        callback.assert_called_once_with()
        assert disposable.disposed


@pytest.mark.unit
class TestDisposableScope:
    def test_releases_in_reverse_order(self):
        order = []
        scope = DisposableScope()
        scope.add(Disposable(lambda: order.append("first")))
        scope.add(Disposable(lambda: order.append("second")))

        scope.dispose()

        assert order == ["second", "first"]
        assert len(scope) == 0
        assert scope.disposed

    def test_failing_release_does_not_stop_others(self):
        released = Mock()
        scope = DisposableScope()
        scope.add(Disposable(released))
        scope.add(Disposable(Mock(side_effect=RuntimeError("boom"))))

        scope.dispose()

        released.assert_called_once_with()

    def test_add_after_dispose_releases_immediately(self):
        scope = DisposableScope()
        scope.dispose()
        callback = Mock()

        scope.add(Disposable(callback))

        callback.assert_called_once_with()
        assert len(scope) == 0

    def test_context_manager_releases_on_error(self):
        callback = Mock()

        with pytest.raises(ValueError):
            with DisposableScope() as scope:
                scope.add(Disposable(callback))
                raise ValueError("early exit")

        callback.assert_called_once_with()
