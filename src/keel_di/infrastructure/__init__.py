"""
Infrastructure layer - External integrations.

This layer contains integrations with external frameworks and tools.
It depends on both Application and Domain layers. The FastAPI integration
needs the ``fastapi`` extra and is imported explicitly from
``keel_di.infrastructure.fastapi_integration``.
"""

from . import testing, view_model_locator

__all__ = [
    "testing",
    "view_model_locator",
]
