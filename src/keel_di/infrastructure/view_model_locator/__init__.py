"""
View-model locator module.

Maps views to their view-models by registration or naming convention,
independently of any container.
"""

from .provider import (
    ViewModelLocationProvider,
    container_view_model_factory,
    default_view_model_factory,
    default_view_type_to_view_model_type,
    view_type_key,
)

__all__ = [
    "ViewModelLocationProvider",
    "container_view_model_factory",
    "default_view_model_factory",
    "default_view_type_to_view_model_type",
    "view_type_key",
]
