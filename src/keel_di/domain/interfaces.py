from abc import ABC, abstractmethod
from typing import Any, Callable, List, Optional, Type, TypeVar

from keel_di.domain.models import ConstructorDescriptor, RegistrationInfo

T = TypeVar("T")


class IContainer(ABC):
    """Abstract interface for dependency injection container operations."""

    @abstractmethod
    def register(self, contract_type: Type, implementation_type: Type) -> Any:
        """Register an implementation type for a contract.

        Args:
            contract_type: The type callers resolve by.
            implementation_type: The concrete type to construct.

        Returns:
            A handle for fluent follow-up configuration.
        """

    @abstractmethod
    def register_instance(self, contract_type: Type, instance: Any) -> Any:
        """Register a pre-built instance for a contract.

        Args:
            contract_type: The type callers resolve by.
            instance: The object every resolution returns.

        Returns:
            A handle for fluent follow-up configuration.
        """

    @abstractmethod
    def resolve(self, contract_type: Type[T]) -> Optional[T]:
        """Resolve an instance of the contract, or None when it is not registered.

        Args:
            contract_type: The type to resolve.
        """

    @abstractmethod
    def is_registered(self, contract_type: Type) -> bool:
        """Return whether the contract has a registration."""

    @abstractmethod
    def build(self, implementation_type: Type[T]) -> T:
        """Construct an unregistered type, injecting constructor dependencies.

        Args:
            implementation_type: The concrete type to construct.
        """

    @abstractmethod
    def registrations(self) -> List[RegistrationInfo]:
        """Return a snapshot of all registrations."""


class IConstructorSelector(ABC):
    """Abstract interface for constructor discovery and selection."""

    @abstractmethod
    def discover(self, implementation_type: Type) -> List[ConstructorDescriptor]:
        """Enumerate the candidate constructors of a type in declaration order.

        Args:
            implementation_type: The type to inspect.
        """

    @abstractmethod
    def select(self, implementation_type: Type) -> ConstructorDescriptor:
        """Pick the constructor used to build instances of a type.

        Args:
            implementation_type: The type to inspect.
        """


class IInstanceCache(ABC):
    """Abstract interface for a lifetime-specific instance cache."""

    @abstractmethod
    def get_or_create(self, factory: Callable[[], Any]) -> Any:
        """Return the cached instance, creating it with the factory on a miss.

        Args:
            factory: Callable creating a new instance.
        """

    @abstractmethod
    def clear(self) -> None:
        """Drop any cached instances."""
