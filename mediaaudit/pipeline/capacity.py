import threading
from typing import Optional


class CapacityPool:
    """Weighted counting semaphore over a fixed number of capacity tokens.

    Unlike threading.Semaphore, a caller can take several tokens at once;
    acquiring the whole capacity only succeeds once every outstanding token
    has been returned, which is how the dispatcher waits for in-flight work.
    """

    def __init__(self, capacity: int):
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self.capacity = capacity
        self._in_use = 0
        self._cond = threading.Condition()

    @property
    def in_use(self) -> int:
        with self._cond:
            return self._in_use

    @property
    def available(self) -> int:
        with self._cond:
            return self.capacity - self._in_use

    def acquire(self, n: int = 1, timeout: Optional[float] = None) -> bool:
        """Blocks until `n` tokens are free. Returns False only on timeout."""
        if n < 1 or n > self.capacity:
            raise ValueError(f"cannot acquire {n} tokens from a pool of {self.capacity}")
        with self._cond:
            acquired = self._cond.wait_for(lambda: self.capacity - self._in_use >= n, timeout=timeout)
            if acquired:
                self._in_use += n
            return acquired

    def release(self, n: int = 1):
        with self._cond:
            if n < 1 or n > self._in_use:
                raise ValueError(f"cannot release {n} tokens, {self._in_use} held")
            self._in_use -= n
            self._cond.notify_all()
