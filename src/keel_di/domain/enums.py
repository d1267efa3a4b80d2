from enum import Enum


class Lifetime(str, Enum):
    """Defines how instances of a registered dependency are reused.

    Attributes:
        TRANSIENT: New instance created on each resolution.
        SINGLETON: Single instance shared across every resolution.
        HIERARCHICAL: Shared for direct resolutions, fresh when injected into a constructor.
        PER_THREAD: One instance per execution context (thread by default).
        UNSPECIFIED: Defer to the container's default lifetime.
    """

    TRANSIENT = "transient"
    SINGLETON = "singleton"
    HIERARCHICAL = "hierarchical"
    PER_THREAD = "per_thread"
    UNSPECIFIED = "unspecified"

    def __str__(self) -> str:
        return self.value


class RegistrationFailure(str, Enum):
    """Reason a registration was refused."""

    NOT_ASSIGNABLE = "not_assignable"
    ALREADY_REGISTERED = "already_registered"

    def __str__(self) -> str:
        return self.value
