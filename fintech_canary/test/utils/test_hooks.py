from unittest.mock import MagicMock, call

import pytest

from fintech_canary.utils.hooks import Hooks, LatencyTracker, invoke_with_hooks


def test_invoke_with_hooks() -> None:
    hook = MagicMock()
    hooks = Hooks(
        pre_hooks=[hook.pre], post_hooks=[hook.post], error_hooks=[hook.error]
    )
    with invoke_with_hooks("ctx", hooks):
        hook.call()
    assert hook.mock_calls == [call.pre("ctx"), call.call(), call.post("ctx")]


def test_invoke_with_hooks_error() -> None:
    hook = MagicMock()
    hooks = Hooks(
        pre_hooks=[hook.pre], post_hooks=[hook.post], error_hooks=[hook.error]
    )
    with pytest.raises(RuntimeError):
        with invoke_with_hooks("ctx", hooks):
            raise RuntimeError("boom")
    assert hook.mock_calls == [call.pre("ctx"), call.error("ctx"), call.post("ctx")]


def test_hooks_extend() -> None:
    first, second = MagicMock(), MagicMock()
    hooks = Hooks(pre_hooks=[first])
    extended = hooks.extend(pre_hooks=[second], post_hooks=[second])
    assert extended.pre_hooks == [first, second]
    assert extended.post_hooks == [second]
    assert extended.error_hooks == []
    assert hooks.pre_hooks == [first]


def test_latency_tracker() -> None:
    ticks = iter([1.0, 1.5, 2.0, 2.25, 3.0])
    latency = LatencyTracker(clock=lambda: next(ticks))
    assert latency.average_seconds == 0.0

    # nested calls
    latency.start(None)
    latency.start(None)
    latency.stop(None)
    assert latency.last_seconds == 0.5
    latency.stop(None)
    assert latency.last_seconds == 1.25

    assert latency.calls == 2
    assert latency.total_seconds == 1.75
    assert latency.average_seconds == 0.875
