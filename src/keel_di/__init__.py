"""
keel-di: Inversion-of-control container with constructor injection and lifetime policies.

Public API exports for the keel-di package.
"""

# Application exports
from keel_di.application import (
    Container,
    ResolverEntry,
    get_default_container,
    initialize_default_container,
    injection_constructor,
    preferred_constructor,
    reset_default_container,
    set_default_container,
)

# Domain exports
from keel_di.domain.enums import Lifetime, RegistrationFailure
from keel_di.domain.exceptions import (
    AlreadyRegisteredError,
    CircularDependencyError,
    ContainerNotInitializedError,
    DIException,
    LifetimeError,
    NotAssignableError,
    RegistrationError,
    UnresolvableError,
)

__version__ = "0.1.0"

__all__ = [
    # Container
    "Container",
    "ResolverEntry",
    # Constructor markers
    "injection_constructor",
    "preferred_constructor",
    # Default container
    "initialize_default_container",
    "set_default_container",
    "get_default_container",
    "reset_default_container",
    # Enums
    "Lifetime",
    "RegistrationFailure",
    # Exceptions
    "DIException",
    "RegistrationError",
    "NotAssignableError",
    "AlreadyRegisteredError",
    "CircularDependencyError",
    "UnresolvableError",
    "LifetimeError",
    "ContainerNotInitializedError",
]
