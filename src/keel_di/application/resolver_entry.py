import logging
import threading
from typing import TYPE_CHECKING, Any, Hashable, Type, Union

from keel_di.application.instance_cache import ContextInstanceCache, LazyInstanceCell
from keel_di.application.type_checks import is_instance_assignable
from keel_di.domain import (
    Lifetime,
    LifetimeError,
    NotAssignableError,
    Registration,
    RegistrationInfo,
)

if TYPE_CHECKING:
    from keel_di.application.container import Container

logger = logging.getLogger(__name__)

_NO_INSTANCE = object()


class ResolverEntry:
    """Registration record of one contract, plus its lifetime cache state.

    Returned by ``Container.register`` and ``Container.register_instance`` as a
    fluent handle for follow-up configuration.

    Attributes:
        _registration: The contract/implementation pair.
        _container: Owning container, used to build instances.
        _lifetime: Own lifetime policy; UNSPECIFIED defers to the container default.
        _fixed_instance: Instance registered by value, if any.
        _shared: Cell holding the singleton/hierarchical instance.
        _per_context: Instances of the per-thread lifetime, by context identity.

    Example:
        >>> container.register(IClock, SystemClock).with_lifetime(Lifetime.SINGLETON)
    """

    def __init__(self, registration: Registration, container: "Container") -> None:
        self._registration = registration
        self._container = container
        self._lifetime = Lifetime.UNSPECIFIED
        self._fixed_instance: Any = _NO_INSTANCE
        self._shared = LazyInstanceCell()
        self._per_context = ContextInstanceCache(container.context_identity)
        self._lock = threading.RLock()
        self._resolution_count = 0

    @property
    def registration(self) -> Registration:
        return self._registration

    @property
    def contract_type(self) -> Type:
        return self._registration.contract_type

    @property
    def implementation_type(self) -> Type:
        return self._registration.implementation_type

    @property
    def lifetime(self) -> Lifetime:
        return self._lifetime

    @property
    def effective_lifetime(self) -> Lifetime:
        """The lifetime actually applied, with UNSPECIFIED replaced by the container default."""
        lifetime = self._lifetime
        if lifetime == Lifetime.UNSPECIFIED:
            return self._container.default_lifetime
        return lifetime

    @property
    def has_fixed_instance(self) -> bool:
        return self._fixed_instance is not _NO_INSTANCE

    @property
    def fixed_instance(self) -> Any:
        """The instance registered by value, or None when there is none."""
        if self._fixed_instance is _NO_INSTANCE:
            return None
        return self._fixed_instance

    @property
    def resolution_count(self) -> int:
        return self._resolution_count

    def with_lifetime(self, lifetime: Union[Lifetime, str]) -> "ResolverEntry":
        """Set the lifetime policy of this registration.

        Args:
            lifetime: A Lifetime member or its string value.

        Returns:
            This entry, for chaining.

        Raises:
            LifetimeError: If the value is not a known lifetime.
        """
        try:
            lifetime = Lifetime(lifetime)
        except ValueError as e:
            raise LifetimeError(f"Invalid lifetime {lifetime!r} for {self.contract_type.__name__}") from e

        with self._lock:
            self._lifetime = lifetime
        logger.debug("Lifetime of %s set to %s", self.contract_type.__name__, lifetime)
        return self

    def with_instance(self, instance: Any) -> "ResolverEntry":
        """Resolve this contract to a fixed instance; the lifetime becomes SINGLETON.

        Args:
            instance: The object every resolution returns.

        Returns:
            This entry, for chaining.

        Raises:
            NotAssignableError: If the instance does not satisfy the contract.
        """
        if not is_instance_assignable(self.contract_type, instance):
            raise NotAssignableError(self.contract_type, type(instance))

        with self._lock:
            self._fixed_instance = instance
        return self.with_lifetime(Lifetime.SINGLETON)

    def get_instance(self, is_parameter: bool = False) -> Any:
        """Produce or reuse an instance according to the lifetime policy.

        Args:
            is_parameter: True when the instance fills another type's constructor parameter.

        Returns:
            The instance for this resolution.
        """
        with self._lock:
            fixed_instance = self._fixed_instance
            lifetime = self.effective_lifetime
            self._resolution_count += 1

        if fixed_instance is not _NO_INSTANCE:
            return fixed_instance

        if lifetime == Lifetime.SINGLETON:
            return self._shared.get_or_create(self._create_instance)

        if lifetime == Lifetime.HIERARCHICAL:
            # Each parent gets a private child; direct resolutions share one.
            if is_parameter:
                return self._create_instance()
            return self._shared.get_or_create(self._create_instance)

        if lifetime == Lifetime.PER_THREAD:
            return self._per_context.get_or_create(self._create_instance)

        # Lifetime.TRANSIENT
        return self._create_instance()

    def release_context(self, context_id: Hashable) -> None:
        """Drop the per-thread instance cached for a context identity."""
        self._per_context.discard(context_id)

    def info(self) -> RegistrationInfo:
        """Snapshot of this entry for diagnostics."""
        with self._lock:
            return RegistrationInfo(
                contract_type=self.contract_type,
                implementation_type=self.implementation_type,
                lifetime=self._lifetime,
                effective_lifetime=self.effective_lifetime,
                has_fixed_instance=self.has_fixed_instance,
                resolution_count=self._resolution_count,
            )

    def _create_instance(self) -> Any:
        return self._container.build(self.implementation_type)

    def __repr__(self) -> str:
        return (
            f"ResolverEntry({self.contract_type.__name__} -> {self.implementation_type.__name__}, "
            f"lifetime={self._lifetime.value})"
        )
