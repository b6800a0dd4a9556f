"""ID generation for business entities.

Account ids are random UUID4 strings. Callers that need deterministic ids
(tests, fixtures) pass their own IdGenerator instead of the module default.
"""

import itertools
import threading
import uuid
from collections.abc import Callable

IdGenerator = Callable[[], str]


def generate_id() -> str:
    """Generate a random UUID4 string."""
    return str(uuid.uuid4())


class SequentialIdGenerator:
    """Deterministic UUID-shaped ids: 00000000-0000-4000-8000-000000000001, ...

    Thread-safe; each instance keeps its own counter.
    """

    def __init__(self, start: int = 1) -> None:
        if start < 0:
            raise ValueError(f"start must be >= 0, got {start}")
        self._counter = itertools.count(start)
        self._lock = threading.Lock()

    def __call__(self) -> str:
        with self._lock:
            n = next(self._counter)
        return f"00000000-0000-4000-8000-{n:012d}"
