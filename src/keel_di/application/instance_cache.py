import threading
from typing import Any, Callable, Dict, Hashable

from keel_di.domain import IInstanceCache


def current_thread_identity() -> Hashable:
    """Identity of the calling thread.

    The thread object itself is used rather than its numeric ident, which the
    interpreter recycles once a thread exits.
    """
    return threading.current_thread()


class LazyInstanceCell(IInstanceCache):
    """Compute-once cell shared by singleton and hierarchical resolutions.

    The lock is held across check, construction and store, so concurrent first
    access constructs exactly once. The lock is re-entrant so that a factory
    recursing into the same cell reaches cycle detection instead of deadlocking.

    Attributes:
        _lock: Guards the check-then-set sequence.
        _value: The cached instance, valid once _has_value is set.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._has_value = False
        self._value: Any = None

    @property
    def has_value(self) -> bool:
        return self._has_value

    def get_or_create(self, factory: Callable[[], Any]) -> Any:
        """Return the cached instance, creating it on first access.

        Args:
            factory: Callable creating the instance. Exceptions propagate and leave the cell empty.

        Returns:
            The single instance of this cell.
        """
        if self._has_value:
            return self._value

        with self._lock:
            if not self._has_value:
                self._value = factory()
                self._has_value = True
            return self._value

    def clear(self) -> None:
        with self._lock:
            self._value = None
            self._has_value = False


class ContextInstanceCache(IInstanceCache):
    """Maps an execution-context identity to the instance created for it.

    Used for the per-thread lifetime. The identity function is opaque; the
    default keys by thread, while integrations may key by task or request.
    Construction happens outside the lock and the first stored instance wins,
    so a constructor that resolves from other threads cannot deadlock the map.

    Attributes:
        _context_identity: Callable returning the calling context's key.
        _instances: Instances created so far, by context key.
    """

    def __init__(self, context_identity: Callable[[], Hashable] = current_thread_identity) -> None:
        self._context_identity = context_identity
        self._instances: Dict[Hashable, Any] = {}
        self._lock = threading.Lock()

    def get_or_create(self, factory: Callable[[], Any]) -> Any:
        """Return the calling context's instance, creating it on a miss.

        Args:
            factory: Callable creating the instance.

        Returns:
            The instance bound to the current context.
        """
        key = self._context_identity()
        with self._lock:
            if key in self._instances:
                return self._instances[key]

        instance = factory()
        with self._lock:
            return self._instances.setdefault(key, instance)

    def discard(self, key: Hashable) -> None:
        """Forget the instance created for a context, if any."""
        with self._lock:
            self._instances.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._instances.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._instances)
