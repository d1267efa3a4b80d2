"""
FastAPI integration module.

Provides helpers and utilities for integrating keel-di with FastAPI.
"""

from .integration import (
    RequestContextMiddleware,
    create_fastapi_dependency,
    inject_dependencies,
    request_context_identity,
)

__all__ = [
    "create_fastapi_dependency",
    "inject_dependencies",
    "request_context_identity",
    "RequestContextMiddleware",
]
