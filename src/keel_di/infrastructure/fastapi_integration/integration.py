import functools
import inspect
import uuid
from contextvars import ContextVar
from typing import Any, Awaitable, Callable, Hashable, Optional, Type, TypeVar

from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from keel_di.application import Container, current_thread_identity
from keel_di.domain import IContainer

T = TypeVar("T")

_request_context_id: ContextVar[Optional[str]] = ContextVar("keel_di_request_context_id", default=None)


def request_context_identity() -> Hashable:
    """Context identity keyed by HTTP request.

    Pass it as ``context_identity`` when building the container, and install
    ``RequestContextMiddleware``: PER_THREAD registrations then yield one
    instance per request. Outside a request it falls back to the calling thread.

    Example:
        >>> container = Container(context_identity=request_context_identity)
        >>> container.register(IUnitOfWork, UnitOfWork).with_lifetime(Lifetime.PER_THREAD)
        >>> app.add_middleware(RequestContextMiddleware, container=container)
    """
    request_id = _request_context_id.get()
    if request_id is None:
        return current_thread_identity()
    return request_id


def create_fastapi_dependency(container: IContainer, contract_type: Type[T]) -> Callable[[], Optional[T]]:
    """Create a FastAPI Depends() callable that resolves from the container.

    The resolved instance lifetime follows the registration in the container.

    Args:
        container: The container to resolve from.
        contract_type: The contract to resolve when the dependency is called.

    Returns:
        A callable that FastAPI can use with Depends().

    Example:
        >>> container = Container()
        >>> container.register(IUserRepository, SqlUserRepository).with_lifetime(Lifetime.SINGLETON)
        >>>
        >>> get_user_repo = create_fastapi_dependency(container, IUserRepository)
        >>>
        >>> @app.get("/users")
        >>> async def list_users(repo: IUserRepository = Depends(get_user_repo)):
        ...     return await repo.get_all()
    """

    def dependency() -> Optional[T]:
        """Resolve the dependency from the container."""
        return container.resolve(contract_type)

    return dependency


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Middleware giving every HTTP request its own context identity.

    The identity is exposed as ``request.state.di_context_id`` and read by
    ``request_context_identity``. When a container is given, the per-thread
    instances built for a request are released once the request ends.

    Example:
        >>> app.add_middleware(RequestContextMiddleware, container=container)
    """

    def __init__(self, app: FastAPI, container: Optional[Container] = None):
        """Initialize the middleware.

        Args:
            app: The FastAPI/Starlette application.
            container: Container whose per-request instances are released after each request.
        """
        super().__init__(app)
        self.container = container

    async def dispatch(self, request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        """Bind a fresh context identity for the duration of the request.

        Args:
            request: The incoming HTTP request.
            call_next: The next middleware or endpoint handler.

        Returns:
            The response from the endpoint.
        """
        context_id = uuid.uuid4().hex
        request.state.di_context_id = context_id
        token = _request_context_id.set(context_id)

        try:
            response = await call_next(request)
            return response
        finally:
            _request_context_id.reset(token)
            if self.container is not None:
                self.container.release_context(context_id)


def inject_dependencies(container: IContainer, *contract_types: Type[Any]) -> Callable:
    """Decorator that resolves the leading parameters of a function from the container.

    The n-th contract type fills the n-th parameter unless the caller passed it.
    Injected parameters are hidden from the visible signature, so FastAPI does
    not treat them as request parameters.

    Args:
        container: The container to resolve from.
        *contract_types: Contracts to resolve, in parameter order.

    Returns:
        A decorator function.

    Example:
        >>> @app.get("/users")
        >>> @inject_dependencies(container, IUserService, ILogger)
        >>> async def list_users(user_service: IUserService, logger: ILogger):
        ...     logger.info("Listing users")
        ...     return await user_service.get_all()
    """

    def decorator(func: Callable) -> Callable:
        """Wrap the function with dependency injection logic."""
        signature = inspect.signature(func)
        injected = list(zip(signature.parameters.keys(), contract_types))
        injected_names = {name for name, _ in injected}

        def fill(args: tuple, kwargs: dict) -> dict:
            positional = set(list(signature.parameters.keys())[: len(args)])
            for param_name, contract_type in injected:
                if param_name not in kwargs and param_name not in positional:
                    kwargs[param_name] = container.resolve(contract_type)
            return kwargs

        if inspect.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(*args, **kwargs):
                return await func(*args, **fill(args, kwargs))

            wrapper: Callable = async_wrapper
        else:

            @functools.wraps(func)
            def sync_wrapper(*args, **kwargs):
                return func(*args, **fill(args, kwargs))

            wrapper = sync_wrapper

        wrapper.__signature__ = signature.replace(  # type: ignore[attr-defined]
            parameters=[p for p in signature.parameters.values() if p.name not in injected_names]
        )
        return wrapper

    return decorator
