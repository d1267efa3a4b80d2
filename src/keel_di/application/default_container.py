"""Explicit process-wide default container.

Nothing is created implicitly: code that wants a shared container either
initializes it once at startup or installs one it built itself. Reading the
handle before that raises instead of handing out a fresh, disconnected
container.

Example:
    >>> container = initialize_default_container(Lifetime.SINGLETON)
    >>> container.register(IClock, SystemClock)
    >>> get_default_container().resolve(IClock)
"""

import logging
import threading
from typing import Any, Optional

from keel_di.application.container import Container
from keel_di.domain import ContainerNotInitializedError

logger = logging.getLogger(__name__)

_lock = threading.Lock()
_default_container: Optional[Container] = None


def initialize_default_container(*args: Any, **kwargs: Any) -> Container:
    """Create the default container once and store it.

    Later calls return the stored container and ignore their arguments.

    Args:
        *args: Positional arguments for Container.
        **kwargs: Keyword arguments for Container.

    Returns:
        The default container.
    """
    global _default_container
    with _lock:
        if _default_container is None:
            _default_container = Container(*args, **kwargs)
            logger.debug("Default container initialized")
        return _default_container


def set_default_container(container: Container) -> None:
    """Install an existing container as the default, replacing any previous one."""
    global _default_container
    with _lock:
        _default_container = container


def get_default_container() -> Container:
    """Return the default container.

    Raises:
        ContainerNotInitializedError: If no default container was initialized or set.
    """
    with _lock:
        if _default_container is None:
            raise ContainerNotInitializedError(
                "The default container has not been initialized. "
                "Call initialize_default_container() or set_default_container() first."
            )
        return _default_container


def has_default_container() -> bool:
    with _lock:
        return _default_container is not None


def reset_default_container() -> None:
    """Forget the default container."""
    global _default_container
    with _lock:
        _default_container = None
