import logging
import threading
from typing import Any, Callable, Dict, Hashable, List, Optional, Type, TypeVar, Union

from pydantic import ValidationError

from keel_di.application.constructor_selector import ConstructorSelector
from keel_di.application.instance_cache import current_thread_identity
from keel_di.application.instance_constructor import InstanceConstructor
from keel_di.application.resolver_entry import ResolverEntry
from keel_di.application.type_checks import is_assignable, is_instance_assignable
from keel_di.domain import (
    AlreadyRegisteredError,
    ContainerOptions,
    IConstructorSelector,
    IContainer,
    Lifetime,
    LifetimeError,
    NotAssignableError,
    Registration,
    RegistrationInfo,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _build_options(**values: Any) -> ContainerOptions:
    try:
        return ContainerOptions.model_validate(values)
    except ValidationError as e:
        raise LifetimeError(f"Invalid container options: {e}") from e


class Container(IContainer):
    """Inversion-of-control container.

    Maps contract types to implementation types (or pre-built instances) and
    resolves object graphs by filling constructor parameters from its own
    registrations. Each registration carries a lifetime policy: transient,
    singleton, hierarchical, per-thread, or unspecified (the container default).

    Registration and lookup share a single re-entrant lock, so an entry is
    never read mid-registration. Instance construction is serialised per entry.

    Attributes:
        _options: Validated container settings.
        _entries: Resolver entries keyed by contract type.
        _context_identity: Key function for the per-thread lifetime.
        _constructor: Builds instances by constructor injection.

    Example:
        >>> container = Container()
        >>> container.register(IRepository, SqlRepository).with_lifetime(Lifetime.SINGLETON)
        >>> container.register(IUserService, UserService)
        >>> service = container.resolve(IUserService)
    """

    def __init__(
        self,
        default_lifetime: Union[Lifetime, str] = Lifetime.TRANSIENT,
        *,
        strict: bool = False,
        detect_cycles: bool = False,
        context_identity: Optional[Callable[[], Hashable]] = None,
        selector: Optional[IConstructorSelector] = None,
    ) -> None:
        """Initialize an empty container.

        Args:
            default_lifetime: Lifetime for registrations left UNSPECIFIED. UNSPECIFIED means TRANSIENT.
            strict: Raise UnresolvableError instead of passing None for unresolved required parameters.
            detect_cycles: Raise CircularDependencyError instead of recursing until the stack overflows.
            context_identity: Key function for the per-thread lifetime. Defaults to the calling thread.
            selector: Constructor discovery strategy. Defaults to signature introspection.
        """
        self._options = _build_options(
            default_lifetime=default_lifetime,
            strict=strict,
            detect_cycles=detect_cycles,
        )
        self._entries: Dict[Type, ResolverEntry] = {}
        self._lock = threading.RLock()
        self._context_identity: Callable[[], Hashable] = context_identity or current_thread_identity
        self._constructor = InstanceConstructor(self, selector or ConstructorSelector())

    @property
    def options(self) -> ContainerOptions:
        return self._options

    @property
    def default_lifetime(self) -> Lifetime:
        return self._options.default_lifetime

    @default_lifetime.setter
    def default_lifetime(self, value: Union[Lifetime, str]) -> None:
        with self._lock:
            self._options = _build_options(**{**self._options.model_dump(), "default_lifetime": value})
        logger.debug("Default lifetime set to %s", self._options.default_lifetime)

    @property
    def context_identity(self) -> Callable[[], Hashable]:
        return self._context_identity

    def register(self, contract_type: Type, implementation_type: Type) -> ResolverEntry:
        """Register an implementation type for a contract.

        The new registration starts with an UNSPECIFIED lifetime.

        Args:
            contract_type: The type callers resolve by.
            implementation_type: The concrete type to construct. Must satisfy contract_type.

        Returns:
            The resolver entry, for fluent configuration.

        Raises:
            NotAssignableError: If implementation_type does not satisfy contract_type.
            AlreadyRegisteredError: If contract_type is already registered.

        Example:
            >>> container.register(ICache, MemoryCache).with_lifetime(Lifetime.PER_THREAD)
        """
        if not is_assignable(contract_type, implementation_type):
            raise NotAssignableError(contract_type, implementation_type)

        return self._add_entry(contract_type, implementation_type)

    def register_instance(self, contract_type: Type[T], instance: T) -> ResolverEntry:
        """Register a pre-built instance for a contract.

        Every resolution of the contract returns this exact instance; the
        lifetime is forced to SINGLETON.

        Args:
            contract_type: The type callers resolve by.
            instance: The object to return. Its type must satisfy contract_type.

        Returns:
            The resolver entry, for fluent configuration.

        Raises:
            NotAssignableError: If the instance's type does not satisfy contract_type.
            AlreadyRegisteredError: If contract_type is already registered.
        """
        if not is_instance_assignable(contract_type, instance):
            raise NotAssignableError(contract_type, type(instance))

        # the entry only becomes visible once its instance is fixed
        with self._lock:
            return self._add_entry(contract_type, type(instance)).with_instance(instance)

    def _add_entry(self, contract_type: Type, implementation_type: Type) -> ResolverEntry:
        with self._lock:
            if contract_type in self._entries:
                raise AlreadyRegisteredError(contract_type, implementation_type)
            entry = ResolverEntry(
                Registration(contract_type=contract_type, implementation_type=implementation_type),
                self,
            )
            self._entries[contract_type] = entry

        logger.debug("Registered %s -> %s", contract_type.__name__, implementation_type.__name__)
        return entry

    def resolve(self, contract_type: Type[T]) -> Optional[T]:
        """Resolve an instance of a contract.

        A missing registration is not an error: it resolves to None, which
        lets callers treat dependencies as optional.

        Args:
            contract_type: The type to resolve.

        Returns:
            The instance dictated by the registration's lifetime, or None when unregistered.

        Example:
            >>> user_service = container.resolve(IUserService)
        """
        return self._resolve(contract_type, is_parameter=False)

    def resolve_parameter(self, parameter_type: Any) -> Any:
        """Resolve a constructor parameter type as a nested resolution.

        Hierarchical registrations build a fresh instance for each parameter.

        Args:
            parameter_type: The annotated type of the parameter.

        Returns:
            The instance, or None when the type is unregistered.
        """
        return self._resolve(parameter_type, is_parameter=True)

    def _resolve(self, contract_type: Any, is_parameter: bool) -> Any:
        with self._lock:
            try:
                entry = self._entries.get(contract_type)
            except TypeError:
                # unhashable annotations can never be registered
                entry = None

        if entry is None:
            logger.debug("No registration for %r", contract_type)
            return None
        return entry.get_instance(is_parameter)

    def build(self, implementation_type: Type[T]) -> T:
        """Construct a type without registering it.

        Constructor parameters are resolved from this container exactly as
        for registered types. The result is never cached.

        Args:
            implementation_type: The concrete type to construct.

        Returns:
            A new instance.
        """
        return self._constructor.construct(implementation_type)

    def is_registered(self, contract_type: Type) -> bool:
        with self._lock:
            return contract_type in self._entries

    def get_entry(self, contract_type: Type) -> Optional[ResolverEntry]:
        """Return the resolver entry of a contract, if registered."""
        with self._lock:
            return self._entries.get(contract_type)

    def registrations(self) -> List[RegistrationInfo]:
        """Return a snapshot of all registrations in registration order."""
        with self._lock:
            entries = list(self._entries.values())
        return [entry.info() for entry in entries]

    def release_context(self, context_id: Hashable) -> None:
        """Drop every per-thread instance cached for a context identity.

        Identities that end, such as HTTP requests, are released so their
        instances do not outlive them. Thread identities are never released.

        Args:
            context_id: The identity returned by the context identity function.
        """
        with self._lock:
            entries = list(self._entries.values())
        for entry in entries:
            entry.release_context(context_id)
        logger.debug("Released context %r", context_id)

    def __contains__(self, contract_type: Any) -> bool:
        return self.is_registered(contract_type)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
