from __future__ import annotations

from contextlib import contextmanager
from threading import Lock
from typing import Iterator

from timetabler.core.exceptions import GenerationInProgressError


class GenerationGuard:
    """Allows one generate/reset operation in flight per process."""

    def __init__(self) -> None:
        self._lock = Lock()

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    @contextmanager
    def hold(self) -> Iterator[None]:
        if not self._lock.acquire(blocking=False):
            raise GenerationInProgressError()
        try:
            yield
        finally:
            self._lock.release()


generation_guard = GenerationGuard()
