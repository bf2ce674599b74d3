"""
Primary-key allocation for activities.
"""
import threading


class PrimaryKeyAllocator:
    """
    Monotonic source of activity primary keys.

    One allocator is owned by the bootstrap layer and passed to every
    Activity created without an explicit key. Persistence restores it with
    set() after loading stored activities.
    """

    def __init__(self, start: int = 0):
        self._next = start
        self._lock = threading.Lock()

    def current(self) -> int:
        """Key the next allocation will return."""
        with self._lock:
            return self._next

    def set(self, key: int) -> None:
        with self._lock:
            self._next = key

    def allocate(self) -> int:
        """Return the current key and advance the counter."""
        with self._lock:
            key = self._next
            self._next += 1
            return key
