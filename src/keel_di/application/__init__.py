"""
Application layer - Registration and resolution.

This layer contains the container, its resolver entries and the construction
machinery. It depends only on the Domain layer.
"""

from .circular_detector import CircularDependencyDetector
from .constructor_selector import ConstructorSelector
from .container import Container
from .default_container import (
    get_default_container,
    has_default_container,
    initialize_default_container,
    reset_default_container,
    set_default_container,
)
from .instance_cache import ContextInstanceCache, LazyInstanceCell, current_thread_identity
from .instance_constructor import InstanceConstructor
from .markers import injection_constructor, preferred_constructor
from .resolver_entry import ResolverEntry

__all__ = [
    "Container",
    "ResolverEntry",
    "ConstructorSelector",
    "InstanceConstructor",
    "CircularDependencyDetector",
    "LazyInstanceCell",
    "ContextInstanceCache",
    "current_thread_identity",
    "injection_constructor",
    "preferred_constructor",
    "initialize_default_container",
    "set_default_container",
    "get_default_container",
    "has_default_container",
    "reset_default_container",
]
