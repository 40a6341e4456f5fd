import contextlib
import time
from collections.abc import Callable, Generator, Sequence
from dataclasses import dataclass, field
from typing import Any, TypeVar

T = TypeVar("T")


@dataclass
class Hooks:
    """Hooks run around every API call of a client.

    pre_hooks run before the call, post_hooks after it (also on failure),
    error_hooks only when the call raised.
    """

    pre_hooks: list[Callable[[Any], None]] = field(default_factory=list)
    post_hooks: list[Callable[[Any], None]] = field(default_factory=list)
    error_hooks: list[Callable[[Any], None]] = field(default_factory=list)

    def extend(
        self,
        pre_hooks: Sequence[Callable[[Any], None]] | None = None,
        post_hooks: Sequence[Callable[[Any], None]] | None = None,
        error_hooks: Sequence[Callable[[Any], None]] | None = None,
    ) -> "Hooks":
        return Hooks(
            pre_hooks=[*self.pre_hooks, *(pre_hooks or [])],
            post_hooks=[*self.post_hooks, *(post_hooks or [])],
            error_hooks=[*self.error_hooks, *(error_hooks or [])],
        )


@contextlib.contextmanager
def invoke_with_hooks(context: T, hooks: Hooks) -> Generator[None, Any, None]:
    for hook in hooks.pre_hooks:
        hook(context)
    try:
        yield
    except Exception:
        for hook in hooks.error_hooks:
            hook(context)
        raise
    finally:
        for hook in hooks.post_hooks:
            hook(context)


class LatencyTracker:
    """Measure the duration of hooked calls.

    Use start() as a pre hook and stop() as a post hook. Nested calls are
    supported through a stack of start times.
    """

    def __init__(self, clock: Callable[[], float] = time.perf_counter) -> None:
        self._clock = clock
        self._starts: list[float] = []
        self.calls = 0
        self.total_seconds = 0.0
        self.last_seconds = 0.0

    def start(self, _context: Any) -> None:
        self._starts.append(self._clock())

    def stop(self, _context: Any) -> None:
        self.last_seconds = self._clock() - self._starts.pop()
        self.calls += 1
        self.total_seconds += self.last_seconds

    @property
    def average_seconds(self) -> float:
        if not self.calls:
            return 0.0
        return self.total_seconds / self.calls
