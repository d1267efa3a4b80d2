import inspect
import logging
from typing import Any, Dict, List, Optional, Type, get_type_hints

from keel_di.application.markers import constructor_marker
from keel_di.application.type_checks import unwrap_optional
from keel_di.domain import ConstructorDescriptor, IConstructorSelector, ParameterDescriptor, UnresolvableError

logger = logging.getLogger(__name__)


class ConstructorSelector(IConstructorSelector):
    """Discovers constructors through signature introspection and picks one.

    Candidates are the effective ``__init__`` plus every member marked with
    ``@injection_constructor``, in declaration order from the root of the MRO
    downward. A member overridden in a subclass keeps the slot of its first
    declaration, so ``__init__`` (declared on ``object``) always comes first.
    """

    def discover(self, implementation_type: Type) -> List[ConstructorDescriptor]:
        """Enumerate candidate constructors of a type.

        Args:
            implementation_type: The type to inspect.

        Returns:
            Descriptors in declaration order, never empty.
        """
        members: Dict[str, Any] = {}
        for klass in reversed(inspect.getmro(implementation_type)):
            for name, member in vars(klass).items():
                if name == "__init__" or name in members or constructor_marker(member) is not None:
                    members[name] = member

        return [
            self._describe(implementation_type, name, member)
            for name, member in members.items()
            if name == "__init__" or constructor_marker(member) is not None
        ]

    def select(self, implementation_type: Type) -> ConstructorDescriptor:
        """Pick the constructor used to build a type.

        The first preferred candidate wins outright. Otherwise the candidate
        with the most parameters wins, a later candidate replacing the current
        pick when its parameter count is equal or greater.

        Args:
            implementation_type: The type to inspect.

        Returns:
            The selected constructor.

        Raises:
            UnresolvableError: If no candidate constructor was discovered.

        Example:
            >>> class Service:
            ...     def __init__(self, repository: IRepository): ...
            ...
            ...     @injection_constructor
            ...     @classmethod
            ...     def offline(cls) -> "Service": ...
            >>>
            >>> ConstructorSelector().select(Service).name
            '__init__'
        """
        chosen: Optional[ConstructorDescriptor] = None
        for constructor in self.discover(implementation_type):
            if constructor.preferred:
                chosen = constructor
                break
            if chosen is None or constructor.arity >= chosen.arity:
                chosen = constructor

        if chosen is None:
            raise UnresolvableError(implementation_type, "No candidate constructor found.")
        logger.debug(
            "Selected constructor %s.%s with %d parameter(s)",
            implementation_type.__name__,
            chosen.name,
            chosen.arity,
        )
        return chosen

    def _describe(self, implementation_type: Type, name: str, member: Any) -> ConstructorDescriptor:
        if name == "__init__":
            function = member
            factory = implementation_type
            skip_first = True
        else:
            function = member.__func__ if isinstance(member, (classmethod, staticmethod)) else member
            factory = getattr(implementation_type, name)
            skip_first = isinstance(member, classmethod)

        return ConstructorDescriptor(
            name=name,
            factory=factory,
            parameters=self._describe_parameters(implementation_type, function, skip_first),
            preferred=bool(constructor_marker(member)),
        )

    def _describe_parameters(
        self,
        implementation_type: Type,
        function: Any,
        skip_first: bool,
    ) -> List[ParameterDescriptor]:
        try:
            signature = inspect.signature(function)
        except (TypeError, ValueError):
            logger.debug("No signature available for %s, treating it as parameterless", function)
            return []

        hints = _get_type_hints(implementation_type, function)
        parameters = list(signature.parameters.values())
        if skip_first and parameters:
            parameters = parameters[1:]

        descriptors = []
        for param in parameters:
            # *args and **kwargs are never injected
            if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
                continue

            annotation = hints.get(param.name)
            has_default = param.default is not inspect.Parameter.empty
            descriptors.append(
                ParameterDescriptor(
                    name=param.name,
                    annotation=unwrap_optional(annotation) if annotation is not None else None,
                    keyword_only=param.kind is inspect.Parameter.KEYWORD_ONLY,
                    has_default=has_default,
                    default=param.default if has_default else None,
                )
            )
        return descriptors


def _get_type_hints(implementation_type: Type, function: Any) -> Dict[str, Any]:
    try:
        return get_type_hints(function)
    except TypeError:
        return {}
    except NameError as exc:
        logger.warning(
            "'%s' name error retrieving %s (%s) type hints",
            exc.name,
            implementation_type.__name__,
            implementation_type.__qualname__,
        )
        return {}
