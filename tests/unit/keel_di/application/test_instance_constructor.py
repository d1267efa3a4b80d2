"""Unit tests for InstanceConstructor."""

from typing import Optional

import pytest

from keel_di.application.constructor_selector import ConstructorSelector
from keel_di.application.container import Container
from keel_di.application.instance_constructor import InstanceConstructor
from keel_di.application.markers import injection_constructor
from keel_di.domain import CircularDependencyError, Lifetime, UnresolvableError


class IDependentClass:
    pass


class ICache:
    pass


class DependentClass(IDependentClass):
    pass


class MemoryCache(ICache):
    pass


class TestConstruct:
    """Test cases for building instances."""

    def test_construct_parameterless(self):
        """Test building a type without parameters."""
        container = Container()
        constructor = InstanceConstructor(container, ConstructorSelector())

        assert isinstance(constructor.construct(DependentClass), DependentClass)

    def test_construct_positional_and_keyword_parameters(self):
        """Test that keyword-only parameters are passed by keyword."""

        class Consumer:
            def __init__(self, dependent: IDependentClass, *, cache: ICache):
                self.dependent = dependent
                self.cache = cache

        container = Container()
        container.register(IDependentClass, DependentClass)
        container.register(ICache, MemoryCache)

        result = container.build(Consumer)

        assert isinstance(result.dependent, DependentClass)
        assert isinstance(result.cache, MemoryCache)

    def test_parameters_resolved_left_to_right(self):
        """Test that parameters are resolved in declaration order."""
        order = []

        class First(IDependentClass):
            def __init__(self):
                order.append("first")

        class Second(ICache):
            def __init__(self):
                order.append("second")

        class Consumer:
            def __init__(self, a: IDependentClass, b: ICache):
                pass

        container = Container()
        container.register(ICache, Second)
        container.register(IDependentClass, First)

        container.build(Consumer)

        assert order == ["first", "second"]

    def test_unresolved_parameter_receives_none(self):
        """Test that unregistered parameter types are injected as None."""

        class Consumer:
            def __init__(self, dependent: IDependentClass, cache: ICache):
                self.dependent = dependent
                self.cache = cache

        container = Container()
        container.register(ICache, MemoryCache)

        result = container.build(Consumer)

        assert result.dependent is None
        assert isinstance(result.cache, MemoryCache)

    def test_unannotated_parameter_receives_none(self):
        """Test that parameters without annotation are injected as None."""

        class Consumer:
            def __init__(self, anything):
                self.anything = anything

        assert Container().build(Consumer).anything is None

    def test_unresolved_parameter_uses_default(self):
        """Test that declared defaults are used for unresolved parameters."""
        fallback = MemoryCache()

        class Consumer:
            def __init__(self, cache: ICache = fallback, retries: int = 3):
                self.cache = cache
                self.retries = retries

        result = Container().build(Consumer)

        assert result.cache is fallback
        assert result.retries == 3

    def test_registered_parameter_overrides_default(self):
        """Test that a registration wins over the declared default."""

        class Consumer:
            def __init__(self, cache: Optional[ICache] = None):
                self.cache = cache

        container = Container()
        container.register(ICache, MemoryCache)

        assert isinstance(container.build(Consumer).cache, MemoryCache)

    def test_alternate_constructor_is_used(self):
        """Test that a marked classmethod with more parameters is selected."""

        class Consumer:
            def __init__(self):
                self.via = "init"
                self.cache = None

            @injection_constructor
            @classmethod
            def with_cache(cls, cache: ICache):
                instance = cls()
                instance.via = "with_cache"
                instance.cache = cache
                return instance

        container = Container()
        container.register(ICache, MemoryCache)

        result = container.build(Consumer)

        assert result.via == "with_cache"
        assert isinstance(result.cache, MemoryCache)


class TestStrictMode:
    """Test cases for strict containers."""

    def test_strict_raises_for_unregistered_parameter(self):
        """Test that strict mode refuses to inject None."""

        class Consumer:
            def __init__(self, dependent: IDependentClass):
                pass

        container = Container(strict=True)

        with pytest.raises(UnresolvableError) as exc_info:
            container.build(Consumer)

        assert exc_info.value.cls is Consumer
        assert "dependent" in str(exc_info.value)

    def test_strict_raises_for_unannotated_parameter(self):
        """Test that strict mode rejects parameters without type hints."""

        class Consumer:
            def __init__(self, anything):
                pass

        with pytest.raises(UnresolvableError, match="lacks type hint"):
            Container(strict=True).build(Consumer)

    def test_strict_still_uses_defaults(self):
        """Test that parameters with defaults are not required in strict mode."""

        class Consumer:
            def __init__(self, dependent: Optional[IDependentClass] = None):
                self.dependent = dependent

        assert Container(strict=True).build(Consumer).dependent is None

    def test_strict_does_not_affect_top_level_resolve(self):
        """Test that resolving an unregistered contract still returns None."""
        assert Container(strict=True).resolve(IDependentClass) is None


class ServiceA:
    def __init__(self, b: "ServiceB"):
        self.b = b


class ServiceB:
    def __init__(self, a: ServiceA):
        self.a = a


class TestCycleDetection:
    """Test cases for cycle detection."""

    def test_cycle_detected_when_enabled(self):
        """Test that an A -> B -> A graph raises CircularDependencyError."""
        container = Container(detect_cycles=True)
        container.register(ServiceA, ServiceA)
        container.register(ServiceB, ServiceB)

        with pytest.raises(CircularDependencyError) as exc_info:
            container.resolve(ServiceA)

        assert exc_info.value.dependency_chain == [ServiceA, ServiceB, ServiceA]

    def test_cycle_detected_for_singletons(self):
        """Test that re-entering a singleton cell reaches cycle detection instead of deadlocking."""
        container = Container(Lifetime.SINGLETON, detect_cycles=True)
        container.register(ServiceA, ServiceA)
        container.register(ServiceB, ServiceB)

        with pytest.raises(CircularDependencyError):
            container.resolve(ServiceA)

    def test_detector_is_unwound_after_error(self):
        """Test that a failed construction does not poison later resolutions."""
        container = Container(detect_cycles=True)
        container.register(ServiceA, ServiceA)
        container.register(ServiceB, ServiceB)

        with pytest.raises(CircularDependencyError):
            container.resolve(ServiceA)

        assert isinstance(container.build(DependentClass), DependentClass)
        assert container._constructor._circular_detector.depth() == 0

    def test_cycle_without_detection_overflows(self):
        """Test that without detection a cycle recurses until RecursionError."""
        container = Container()
        container.register(ServiceA, ServiceA)
        container.register(ServiceB, ServiceB)

        with pytest.raises(RecursionError):
            container.resolve(ServiceA)
