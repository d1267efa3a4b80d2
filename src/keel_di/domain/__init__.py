"""
Domain layer - Core types of the container.

This layer contains the enums, exceptions, value objects and interfaces shared
by the rest of the package. It has no dependencies on other layers.
"""

from .enums import Lifetime, RegistrationFailure
from .exceptions import (
    AlreadyRegisteredError,
    CircularDependencyError,
    ContainerNotInitializedError,
    DIException,
    LifetimeError,
    NotAssignableError,
    RegistrationError,
    UnresolvableError,
)
from .interfaces import IConstructorSelector, IContainer, IInstanceCache
from .models import (
    ConstructorDescriptor,
    ContainerOptions,
    ParameterDescriptor,
    Registration,
    RegistrationInfo,
    ResolutionContext,
)

__all__ = [
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
    # Interfaces
    "IContainer",
    "IConstructorSelector",
    "IInstanceCache",
    # Models
    "Registration",
    "RegistrationInfo",
    "ParameterDescriptor",
    "ConstructorDescriptor",
    "ContainerOptions",
    "ResolutionContext",
]
