"""Unit tests for the default container handle."""

import pytest

from keel_di.application import default_container
from keel_di.application.container import Container
from keel_di.domain import ContainerNotInitializedError, Lifetime


@pytest.fixture(autouse=True)
def clean_default_container():
    default_container.reset_default_container()
    yield
    default_container.reset_default_container()


class TestDefaultContainer:
    """Test cases for the explicit default container."""

    def test_get_before_initialization_raises(self):
        """Test that reading an uninitialized default raises instead of fabricating one."""
        with pytest.raises(ContainerNotInitializedError):
            default_container.get_default_container()

        assert not default_container.has_default_container()

    def test_initialize_constructs_once(self):
        """Test that initialization stores one container and returns it afterwards."""
        first = default_container.initialize_default_container(Lifetime.SINGLETON)
        second = default_container.initialize_default_container(Lifetime.TRANSIENT)

        assert first is second
        assert first.default_lifetime == Lifetime.SINGLETON
        assert default_container.get_default_container() is first

    def test_registrations_are_shared_through_handle(self):
        """Test that every access sees the same registrations."""

        class Clock:
            pass

        default_container.initialize_default_container()
        default_container.get_default_container().register(Clock, Clock)

        assert default_container.get_default_container().is_registered(Clock)

    def test_set_default_container(self):
        """Test installing an existing container."""
        container = Container()

        default_container.set_default_container(container)

        assert default_container.get_default_container() is container
        assert default_container.initialize_default_container() is container

    def test_reset_default_container(self):
        """Test that reset forgets the default."""
        default_container.initialize_default_container()

        default_container.reset_default_container()

        with pytest.raises(ContainerNotInitializedError):
            default_container.get_default_container()
