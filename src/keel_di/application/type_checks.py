import inspect
import types
from typing import Any, Union, get_args, get_origin


def is_assignable(contract_type: Any, implementation_type: Any) -> bool:
    """Return whether instances of implementation_type satisfy contract_type.

    Both arguments must be classes. Protocols that are not runtime checkable
    refuse ``issubclass``; for those only nominal subclassing counts.
    """
    if not (inspect.isclass(contract_type) and inspect.isclass(implementation_type)):
        return False
    try:
        return issubclass(implementation_type, contract_type)
    except TypeError:
        return contract_type in inspect.getmro(implementation_type)


def unwrap_optional(annotation: Any) -> Any:
    """Reduce ``Optional[X]`` and ``X | None`` to ``X``; return anything else unchanged."""
    origin = get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        members = [arg for arg in get_args(annotation) if arg is not type(None)]
        if len(members) == 1:
            return members[0]
    return annotation


def is_instance_assignable(contract_type: Any, instance: Any) -> bool:
    """Return whether a pre-built instance satisfies contract_type.

    Falls back to ``isinstance`` so objects that spoof ``__class__`` (such as
    ``unittest.mock`` objects created with ``spec=``) are accepted.
    """
    if is_assignable(contract_type, type(instance)):
        return True
    if not inspect.isclass(contract_type):
        return False
    try:
        return isinstance(instance, contract_type)
    except TypeError:
        return False
