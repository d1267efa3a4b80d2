from typing import Any, Callable, List, Optional, Type

from pydantic import BaseModel, ConfigDict, Field, field_validator

from keel_di.domain.enums import Lifetime
from keel_di.domain.exceptions import CircularDependencyError


class Registration(BaseModel):
    """Value object representing a contract/implementation pair.

    Attributes:
        contract_type: The type callers resolve by.
        implementation_type: The concrete type constructed for it.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    contract_type: Type = Field(..., description="The contract type callers resolve by.")
    implementation_type: Type = Field(..., description="The concrete type constructed for the contract.")


class RegistrationInfo(BaseModel):
    """Read-only snapshot of a resolver entry, for diagnostics."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    contract_type: Type
    implementation_type: Type
    lifetime: Lifetime
    effective_lifetime: Lifetime
    has_fixed_instance: bool = False
    resolution_count: int = 0


class ParameterDescriptor(BaseModel):
    """A single injectable constructor parameter.

    Attributes:
        name: Parameter name.
        annotation: Evaluated type hint, or None when the parameter has none.
        keyword_only: Whether the parameter must be passed by keyword.
        has_default: Whether the parameter declares a default value.
        default: The declared default, meaningful only when has_default is set.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    annotation: Optional[Any] = None
    keyword_only: bool = False
    has_default: bool = False
    default: Any = None


class ConstructorDescriptor(BaseModel):
    """A way of building an implementation type.

    Attributes:
        name: Member name the constructor was discovered under.
        factory: Callable producing the instance from the resolved arguments.
        parameters: Injectable parameters, in declaration order.
        preferred: Whether the constructor carries the preferred marker.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    factory: Callable[..., Any]
    parameters: List[ParameterDescriptor] = Field(default_factory=list)
    preferred: bool = False

    @property
    def arity(self) -> int:
        return len(self.parameters)


class ContainerOptions(BaseModel):
    """Container-wide settings.

    Attributes:
        default_lifetime: Lifetime applied to entries registered without one.
        strict: Raise instead of injecting None for unresolved required parameters.
        detect_cycles: Raise CircularDependencyError instead of recursing forever.
    """

    model_config = ConfigDict(frozen=True)

    default_lifetime: Lifetime = Lifetime.TRANSIENT
    strict: bool = False
    detect_cycles: bool = False

    @field_validator("default_lifetime")
    @classmethod
    def _normalize_default_lifetime(cls, value: Lifetime) -> Lifetime:
        if value == Lifetime.UNSPECIFIED:
            return Lifetime.TRANSIENT
        return value


class ResolutionContext(BaseModel):
    """Tracks the stack of types currently being constructed.

    Used for circular dependency detection, one context per thread.

    Attributes:
        stack: List of implementation types currently under construction.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    stack: List[Type] = Field(
        default_factory=list,
        description="Stack of types currently being constructed.",
    )

    def push(self, dependency_type: Type) -> None:
        """Add a type to the resolution stack.

        Raises:
            CircularDependencyError: If the type is already in the stack.
        """
        if dependency_type in self.stack:
            cycle = self.stack[self.stack.index(dependency_type) :] + [dependency_type]
            raise CircularDependencyError(cycle)
        self.stack.append(dependency_type)

    def pop(self) -> None:
        """Remove the most recent type from the stack."""
        if self.stack:
            self.stack.pop()

    def clear(self) -> None:
        """Clear the entire resolution stack."""
        self.stack.clear()
