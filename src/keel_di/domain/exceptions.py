from typing import Any, List, Optional, Type

from keel_di.domain.enums import RegistrationFailure


def _type_name(value: Any) -> str:
    return getattr(value, "__name__", repr(value))


class DIException(Exception):
    """Base exception for DI-related errors."""


class RegistrationError(DIException):
    """Raised when a registration is refused.

    Registration errors are only ever raised by ``register`` and
    ``register_instance``; the registry is left unchanged.

    Attributes:
        contract_type: The type callers would resolve by.
        implementation_type: The type (or instance type) offered for it.
        reason: Why the registration failed.
    """

    def __init__(
        self,
        contract_type: Type,
        implementation_type: Type,
        reason: RegistrationFailure,
        message: Optional[str] = None,
    ) -> None:
        self.contract_type = contract_type
        self.implementation_type = implementation_type
        self.reason = reason
        if message is None:
            message = (
                f"Cannot register {_type_name(implementation_type)} for {_type_name(contract_type)}: {reason.value}"
            )
        super().__init__(message)


class NotAssignableError(RegistrationError):
    """Raised when the implementation does not satisfy the contract."""

    def __init__(self, contract_type: Type, implementation_type: Type) -> None:
        super().__init__(
            contract_type,
            implementation_type,
            RegistrationFailure.NOT_ASSIGNABLE,
            f"Type '{_type_name(contract_type)}' is not assignable from type '{_type_name(implementation_type)}'. "
            f"Make sure that '{_type_name(implementation_type)}' implements '{_type_name(contract_type)}'.",
        )


class AlreadyRegisteredError(RegistrationError):
    """Raised when the contract already has a registration."""

    def __init__(self, contract_type: Type, implementation_type: Type) -> None:
        super().__init__(
            contract_type,
            implementation_type,
            RegistrationFailure.ALREADY_REGISTERED,
            f"Type '{_type_name(contract_type)}' is already registered",
        )


class CircularDependencyError(DIException):
    """Raised when a circular dependency is detected.

    Only raised by containers created with ``detect_cycles=True``.

    Attributes:
        dependency_chain: List of types involved in the circular dependency.
    """

    def __init__(self, dependency_chain: List[Type]) -> None:
        self.dependency_chain = dependency_chain
        message = f"Circular dependency detected: {' -> '.join([_type_name(cls) for cls in dependency_chain])}"
        super().__init__(message)


class UnresolvableError(DIException):
    """Raised when a required constructor dependency cannot be resolved.

    Only raised by containers created with ``strict=True``. This occurs when:
    - No registration exists for a parameter's type.
    - A parameter lacks a type hint.

    Attributes:
        cls: The class type that could not be constructed.
        reason: Optional reason for the failure.
    """

    def __init__(self, cls: Type, reason: Optional[str] = None) -> None:
        self.cls = cls
        self.reason = reason
        message = f"Cannot resolve dependency for type: {_type_name(cls)}"
        if reason:
            message += f". Reason: {reason}"
        super().__init__(message)


class LifetimeError(DIException):
    """Raised for invalid lifetime configurations."""


class ContainerNotInitializedError(DIException):
    """Raised when the default container is read before it was initialized."""
