import importlib
import inspect
import logging
import sys
import threading
from typing import Any, Callable, Dict, Optional, Type, Union

from keel_di.domain import IContainer

logger = logging.getLogger(__name__)

ViewKey = Union[Type, str]
ViewModelFactory = Callable[[Type], Any]
ViewTypeResolver = Callable[[Type], Optional[Type]]


def view_type_key(view: ViewKey) -> str:
    """Key a view type by its fully qualified name; strings are used as-is."""
    if isinstance(view, str):
        return view
    return f"{view.__module__}.{view.__qualname__}"


def default_view_type_to_view_model_type(view_type: Type) -> Optional[Type]:
    """Naming convention mapping a view type to its view-model type.

    ``pkg.views.MainView`` maps to ``pkg.views.MainViewModel`` and
    ``pkg.views.Settings`` to ``pkg.views.SettingsViewModel``. The view-model
    is looked up in the view's own module.

    Returns:
        The view-model type, or None when the module has no such class.
    """
    suffix = "Model" if view_type.__name__.endswith("View") else "ViewModel"
    module = sys.modules.get(view_type.__module__)
    if module is None:
        try:
            module = importlib.import_module(view_type.__module__)
        except ImportError:
            return None

    candidate: Any = module
    for part in f"{view_type.__qualname__}{suffix}".split("."):
        candidate = getattr(candidate, part, None)
        if candidate is None:
            return None
    return candidate if inspect.isclass(candidate) else None


def default_view_model_factory(view_model_type: Type) -> Any:
    return view_model_type()


def container_view_model_factory(container: IContainer) -> ViewModelFactory:
    """Activator building view-models through a container.

    Registered view-model types are resolved; anything else is built with
    constructor injection.

    Example:
        >>> provider.set_default_view_model_factory(container_view_model_factory(container))
    """

    def factory(view_model_type: Type) -> Any:
        if container.is_registered(view_model_type):
            return container.resolve(view_model_type)
        return container.build(view_model_type)

    return factory


class ViewModelLocationProvider:
    """Finds and attaches the view-model of a view.

    Independent of the container: it keeps its own factory and type tables
    keyed by view type name. Lookup order on auto-wire is a registered
    factory, then a registered view-model type, then the naming convention.

    Attributes:
        _factories: View key to zero-argument view-model factory.
        _view_model_types: View key to view-model type.
        _view_model_factory: Activator for view-model types.
        _view_type_resolver: Naming convention used when nothing is registered.
    """

    def __init__(
        self,
        view_model_factory: Optional[ViewModelFactory] = None,
        view_type_resolver: Optional[ViewTypeResolver] = None,
    ) -> None:
        self._factories: Dict[str, Callable[[], Any]] = {}
        self._view_model_types: Dict[str, Type] = {}
        self._view_model_factory = view_model_factory or default_view_model_factory
        self._view_type_resolver = view_type_resolver or default_view_type_to_view_model_type
        self._lock = threading.Lock()

    def set_default_view_model_factory(self, view_model_factory: ViewModelFactory) -> None:
        self._view_model_factory = view_model_factory

    def set_default_view_type_to_view_model_type_resolver(self, view_type_resolver: ViewTypeResolver) -> None:
        self._view_type_resolver = view_type_resolver

    def register_factory(self, view: ViewKey, factory: Callable[[], Any]) -> None:
        """Register a factory producing the view-model for a view type (or its name)."""
        with self._lock:
            self._factories[view_type_key(view)] = factory

    def register_type(self, view: ViewKey, view_model_type: Type) -> None:
        """Register the view-model type for a view type (or its name)."""
        with self._lock:
            self._view_model_types[view_type_key(view)] = view_model_type

    def get_view_model_for_view(self, view: Any) -> Optional[Any]:
        """Invoke the factory registered for the view's type, if any."""
        with self._lock:
            factory = self._factories.get(view_type_key(type(view)))
        if factory is None:
            return None
        return factory()

    def get_view_model_type_for_view(self, view_type: Type) -> Optional[Type]:
        """Return the view-model type registered for a view type, if any."""
        with self._lock:
            return self._view_model_types.get(view_type_key(view_type))

    def auto_wire_view_model(self, view: Any, bind: Callable[[Any, Any], None]) -> Optional[Any]:
        """Locate the view's view-model and hand both to bind.

        Args:
            view: The view instance.
            bind: Callback attaching the view-model to the view.

        Returns:
            The view-model, or None when no view-model type could be found.

        Example:
            >>> provider.auto_wire_view_model(window, lambda view, vm: setattr(view, "data_context", vm))
        """
        view_model = self.get_view_model_for_view(view)

        if view_model is None:
            view_type = type(view)
            view_model_type = self.get_view_model_type_for_view(view_type)
            if view_model_type is None:
                view_model_type = self._view_type_resolver(view_type)
            if view_model_type is None:
                logger.debug("No view-model found for %s", view_type_key(view_type))
                return None
            view_model = self._view_model_factory(view_model_type)

        bind(view, view_model)
        return view_model
