"""
Tests for the relay receiver registry.
"""

import pytest
from function_chain.exceptions import ReceiverNotFoundError
from function_chain.registry import ReceiverRegistry


class Greeter:
    def greet(self, name):
        return f"Hello, {name}"


@pytest.fixture
def registry():
    registry = ReceiverRegistry()
    registry.register("greeter", Greeter())
    return registry


class TestReceiverRegistry:
    """Tests for registering and retrieving receivers."""

    def test_get(self, registry):
        assert registry.get("greeter").greet("Ann") == "Hello, Ann"

    def test_has_receiver(self, registry):
        assert registry.has_receiver("greeter")
        assert "greeter" in registry
        assert "other" not in registry

    def test_register_replaces(self, registry):
        replacement = Greeter()
        registry.register("greeter", replacement)
        assert registry.get("greeter") is replacement
        assert len(registry) == 1

    def test_update(self, registry):
        registry.update({"b": 1, "a": 2})
        assert registry.list_receivers() == ["a", "b", "greeter"]

    def test_missing_receiver(self, registry):
        with pytest.raises(ReceiverNotFoundError) as exc_info:
            registry.get("greter")

        error = exc_info.value
        assert error.suggestions == ["greeter"]
        assert "Unknown receiver: 'greter'" in str(error)
        assert error.to_dict() == {
            "error": "RECEIVER_NOT_FOUND",
            "receiver": "greter",
            "suggestions": ["greeter"],
            "registered": ["greeter"],
        }

    @pytest.mark.parametrize("name", ["", "a.b"])
    def test_invalid_name(self, registry, name):
        with pytest.raises(ValueError):
            registry.register(name, Greeter())

    def test_name_must_be_string(self, registry):
        with pytest.raises(TypeError):
            registry.register(1, Greeter())
