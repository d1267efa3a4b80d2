"""Unit tests for ViewModelLocationProvider."""

from keel_di.application.container import Container
from keel_di.infrastructure.view_model_locator.provider import (
    ViewModelLocationProvider,
    container_view_model_factory,
    default_view_type_to_view_model_type,
    view_type_key,
)


class IGreeter:
    pass


class Greeter(IGreeter):
    pass


class MainView:
    pass


class MainViewModel:
    def __init__(self, greeter: IGreeter = None):
        self.greeter = greeter


class Settings:
    pass


class SettingsViewModel:
    pass


class OrphanView:
    pass


class Outer:
    class DetailView:
        pass

    class DetailViewModel:
        pass


def bind_data_context(view, view_model):
    view.data_context = view_model


class TestViewTypeKey:
    """Test cases for view_type_key."""

    def test_key_for_type(self):
        """Test that types are keyed by module and qualified name."""
        assert view_type_key(MainView) == f"{__name__}.MainView"

    def test_key_for_string(self):
        """Test that strings are used unchanged."""
        assert view_type_key("app.views.MainView") == "app.views.MainView"


class TestDefaultNamingConvention:
    """Test cases for the default view to view-model naming convention."""

    def test_view_suffix_gets_model(self):
        """Test that MainView maps to MainViewModel."""
        assert default_view_type_to_view_model_type(MainView) is MainViewModel

    def test_other_names_get_view_model(self):
        """Test that Settings maps to SettingsViewModel."""
        assert default_view_type_to_view_model_type(Settings) is SettingsViewModel

    def test_nested_classes(self):
        """Test that nested views resolve within their enclosing class."""
        assert default_view_type_to_view_model_type(Outer.DetailView) is Outer.DetailViewModel

    def test_missing_view_model(self):
        """Test that a view without a view-model maps to None."""
        assert default_view_type_to_view_model_type(OrphanView) is None


class TestViewModelLocationProvider:
    """Test cases for ViewModelLocationProvider."""

    def test_auto_wire_by_convention(self):
        """Test that the convention finds and binds the view-model."""
        provider = ViewModelLocationProvider()
        view = Settings()

        view_model = provider.auto_wire_view_model(view, bind_data_context)

        assert isinstance(view_model, SettingsViewModel)
        assert view.data_context is view_model

    def test_registered_factory_wins(self):
        """Test that a registered factory is used before anything else."""
        provider = ViewModelLocationProvider()
        expected = MainViewModel()
        provider.register_factory(MainView, lambda: expected)
        provider.register_type(MainView, SettingsViewModel)
        view = MainView()

        assert provider.auto_wire_view_model(view, bind_data_context) is expected
        assert view.data_context is expected

    def test_registered_factory_by_name(self):
        """Test that factories can be keyed by the view type name."""
        provider = ViewModelLocationProvider()
        provider.register_factory(f"{__name__}.OrphanView", SettingsViewModel)

        assert isinstance(provider.get_view_model_for_view(OrphanView()), SettingsViewModel)

    def test_registered_type_wins_over_convention(self):
        """Test that a registered view-model type overrides the convention."""
        provider = ViewModelLocationProvider()
        provider.register_type(MainView, SettingsViewModel)

        view_model = provider.auto_wire_view_model(MainView(), bind_data_context)

        assert isinstance(view_model, SettingsViewModel)
        assert provider.get_view_model_type_for_view(MainView) is SettingsViewModel

    def test_no_view_model_does_not_bind(self):
        """Test that bind is not called when nothing is found."""
        provider = ViewModelLocationProvider()
        calls = []

        result = provider.auto_wire_view_model(OrphanView(), lambda view, vm: calls.append(vm))

        assert result is None
        assert calls == []

    def test_lookups_without_registration(self):
        """Test that lookups return None when nothing is registered."""
        provider = ViewModelLocationProvider()

        assert provider.get_view_model_for_view(MainView()) is None
        assert provider.get_view_model_type_for_view(MainView) is None

    def test_custom_resolver(self):
        """Test replacing the naming convention."""
        provider = ViewModelLocationProvider()
        provider.set_default_view_type_to_view_model_type_resolver(lambda view_type: SettingsViewModel)

        assert isinstance(provider.auto_wire_view_model(OrphanView(), bind_data_context), SettingsViewModel)

    def test_custom_factory(self):
        """Test replacing the view-model activator."""
        provider = ViewModelLocationProvider()
        built = []

        def factory(view_model_type):
            built.append(view_model_type)
            return view_model_type()

        provider.set_default_view_model_factory(factory)
        provider.auto_wire_view_model(MainView(), bind_data_context)

        assert built == [MainViewModel]


class TestContainerViewModelFactory:
    """Test cases for container_view_model_factory."""

    def test_builds_unregistered_view_model_with_injection(self):
        """Test that unregistered view-models are built by the container."""
        container = Container()
        container.register(IGreeter, Greeter)
        provider = ViewModelLocationProvider(container_view_model_factory(container))

        view_model = provider.auto_wire_view_model(MainView(), bind_data_context)

        assert isinstance(view_model.greeter, Greeter)

    def test_resolves_registered_view_model(self):
        """Test that registered view-models follow their lifetime."""
        container = Container()
        container.register(MainViewModel, MainViewModel).with_lifetime("singleton")
        factory = container_view_model_factory(container)

        assert factory(MainViewModel) is factory(MainViewModel)
