"""Application layer - Circular dependency detection."""

import threading
from typing import Type

from keel_di.domain import ResolutionContext


class CircularDependencyDetector:
    """Detects circular dependencies during construction.

    Uses thread-local storage so every thread tracks its own stack of types
    under construction. When a type appears twice in the stack, a circular
    dependency is detected.

    Attributes:
        _local: Thread-local storage for resolution contexts.
    """

    def __init__(self) -> None:
        """Initialize the circular dependency detector with thread-local storage."""
        self._local = threading.local()

    def _get_context(self) -> ResolutionContext:
        """Get the current thread's resolution context."""
        if not hasattr(self._local, "context"):
            self._local.context = ResolutionContext()
        return self._local.context

    def push(self, dependency_type: Type) -> None:
        """Add a type to the current thread's construction stack.

        Args:
            dependency_type: The type about to be constructed.

        Raises:
            CircularDependencyError: If the type is already being constructed.

        Example:
            >>> detector = CircularDependencyDetector()
            >>> detector.push(ServiceA)
            >>> detector.push(ServiceB)
            >>> detector.push(ServiceA)  # Raises CircularDependencyError
        """
        self._get_context().push(dependency_type)

    def pop(self) -> None:
        """Remove the last type from the construction stack."""
        self._get_context().pop()

    def depth(self) -> int:
        """Number of types currently under construction on this thread."""
        return len(self._get_context().stack)

    def clear(self) -> None:
        """Clear the current thread's construction stack."""
        if hasattr(self._local, "context"):
            self._local.context.clear()
