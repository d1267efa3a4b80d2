"""Decorators marking the constructors a container may use to build a type.

A class is always buildable through its ``__init__``. Alternate constructors
are classmethods (or staticmethods) opted in with :func:`injection_constructor`.
Marking any candidate with :func:`preferred_constructor` makes the container
choose it over the arity heuristic.

Example:
    >>> class ReportService:
    ...     def __init__(self, repository: IRepository):
    ...         self.repository = repository
    ...
    ...     @preferred_constructor
    ...     @classmethod
    ...     def cached(cls, repository: IRepository, cache: ICache) -> "ReportService":
    ...         return cls(CachedRepository(repository, cache))
"""

from typing import Any, Optional

_MARKER_ATTRIBUTE = "__keel_di_constructor__"


def _underlying_function(member: Any) -> Any:
    if isinstance(member, (classmethod, staticmethod)):
        return member.__func__
    return member


def injection_constructor(member: Any = None, *, preferred: bool = False) -> Any:
    """Mark a classmethod or staticmethod as a candidate constructor.

    Usable bare (``@injection_constructor``) or with arguments
    (``@injection_constructor(preferred=True)``), above or below ``@classmethod``.
    """

    def decorate(target: Any) -> Any:
        function = _underlying_function(target)
        already_preferred = getattr(function, _MARKER_ATTRIBUTE, False)
        setattr(function, _MARKER_ATTRIBUTE, preferred or already_preferred)
        return target

    if member is None:
        return decorate
    return decorate(member)


def preferred_constructor(member: Any) -> Any:
    """Mark ``__init__`` or an alternate constructor as the preferred one."""
    return injection_constructor(member, preferred=True)


def constructor_marker(member: Any) -> Optional[bool]:
    """Return the preferred flag of a marked member, or None when it is unmarked."""
    return getattr(_underlying_function(member), _MARKER_ATTRIBUTE, None)
