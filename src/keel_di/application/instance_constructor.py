import logging
from typing import TYPE_CHECKING, Any, Dict, List, Type, TypeVar

from keel_di.application.circular_detector import CircularDependencyDetector
from keel_di.domain import IConstructorSelector, ParameterDescriptor, UnresolvableError

if TYPE_CHECKING:
    from keel_di.application.container import Container

logger = logging.getLogger(__name__)

T = TypeVar("T")


class InstanceConstructor:
    """Builds instances by filling constructor parameters from a container.

    Every parameter is resolved by its annotated type, left to right, as a
    nested (parameter) resolution. An unresolved parameter receives its
    declared default, or None. Containers in strict mode raise instead of
    passing None. Exceptions raised by the constructor itself propagate
    unchanged.

    Attributes:
        _container: Container used to resolve parameter types.
        _selector: Picks the constructor to invoke.
        _circular_detector: Tracks types under construction when cycle detection is on.
    """

    def __init__(self, container: "Container", selector: IConstructorSelector) -> None:
        self._container = container
        self._selector = selector
        self._circular_detector = CircularDependencyDetector()

    def construct(self, implementation_type: Type[T]) -> T:
        """Build a new instance of implementation_type.

        Args:
            implementation_type: The concrete type to build.

        Returns:
            The new instance.

        Raises:
            UnresolvableError: In strict mode, when a required parameter cannot be resolved.
            CircularDependencyError: With cycle detection on, when construction re-enters a type.
        """
        if not self._container.options.detect_cycles:
            return self._invoke(implementation_type)

        self._circular_detector.push(implementation_type)
        try:
            return self._invoke(implementation_type)
        finally:
            self._circular_detector.pop()

    def _invoke(self, implementation_type: Type[T]) -> T:
        constructor = self._selector.select(implementation_type)
        if not constructor.parameters:
            logger.debug("Constructing %s without parameters", implementation_type.__name__)
            return constructor.factory()

        args: List[Any] = []
        kwargs: Dict[str, Any] = {}
        for parameter in constructor.parameters:
            value = self._resolve_parameter(implementation_type, parameter)
            if parameter.keyword_only:
                kwargs[parameter.name] = value
            else:
                args.append(value)

        logger.debug(
            "Constructing %s through %s with %d resolved parameter(s)",
            implementation_type.__name__,
            constructor.name,
            constructor.arity,
        )
        return constructor.factory(*args, **kwargs)

    def _resolve_parameter(self, implementation_type: Type, parameter: ParameterDescriptor) -> Any:
        value = None
        if parameter.annotation is not None:
            value = self._container.resolve_parameter(parameter.annotation)

        if value is not None:
            return value
        if parameter.has_default:
            return parameter.default

        if self._container.options.strict:
            if parameter.annotation is None:
                reason = f"Parameter '{parameter.name}' lacks type hint and has no default value."
            else:
                reason = f"No registration for parameter '{parameter.name}' of type {parameter.annotation!r}."
            raise UnresolvableError(implementation_type, reason)

        logger.debug(
            "Parameter '%s' of %s is unresolved, passing None",
            parameter.name,
            implementation_type.__name__,
        )
        return None
