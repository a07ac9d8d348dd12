"""
Tests for the mutation surface shared by pull and relay chains.
"""

import pytest
from function_chain import PullChain, RelayChain
from function_chain.base import StepType
from function_chain.exceptions import (
    IndexOutOfRangeError,
    InvalidAliasNameError,
    UnsupportedStepTypeError,
)


class Letters:
    def a(self, value):
        return value + "a"

    def b(self, value):
        return value + "b"

    def c(self, value):
        return value + "c"

    def d(self, value):
        return value + "d"

    def x(self, value):
        return value + "x"


@pytest.fixture
def relay():
    return RelayChain(Letters())


@pytest.fixture
def record():
    return {"user": {"name": "  louis  "}}


class TestInsert:
    """Tests for insert_at and insert_all_at."""

    def test_insert_at_front(self, relay):
        relay.add("b").insert_at(0, "a")
        assert relay.specs == ["a", "b"]
        assert relay.call("") == "ab"

    def test_insert_at_end(self, relay):
        relay.add("a").insert_at(1, "b")
        assert relay.specs == ["a", "b"]

    def test_insert_path_expands_in_place(self, relay):
        relay.add("a/d").insert_at(1, "b/c")
        assert relay.specs == ["a", "b", "c", "d"]
        assert relay.call("") == "abcd"

    def test_insert_all_at_keeps_order(self, relay):
        relay.add("a/d")
        relay.insert_all_at(1, "b/c", "x")
        assert relay.specs == ["a", "b", "c", "x", "d"]
        assert relay.call("") == "abcxd"

    def test_insert_all_at_end_is_add_all(self, relay):
        other = RelayChain(Letters())
        relay.add("a").insert_all_at(1, "b", "c")
        other.add("a").add_all("b", "c")
        assert relay.specs == other.specs

    @pytest.mark.parametrize("index", [-1, 3, 100])
    def test_insert_out_of_range(self, relay, index):
        relay.add("a/b")
        with pytest.raises(IndexOutOfRangeError) as exc_info:
            relay.insert_at(index, "c")

        assert exc_info.value.length == 2
        assert relay.specs == ["a", "b"]

    def test_insert_all_at_is_all_or_nothing(self, relay):
        relay.add("a")
        with pytest.raises(UnsupportedStepTypeError):
            relay.insert_all_at(0, "b", "c", 100)

        assert relay.specs == ["a"]

    def test_invalid_segment_leaves_chain_unchanged(self, record):
        chain = PullChain(record, "user")
        with pytest.raises(InvalidAliasNameError):
            chain.add("name/@1 = strip")

        assert chain.specs == ["user"]


class TestDelete:
    """Tests for delete_at and clear."""

    def test_delete_at(self, relay):
        relay.add("a/b/c").delete_at(1)
        assert relay.specs == ["a", "c"]

    def test_delete_negative_index(self, relay):
        relay.add("a/b/c").delete_at(-1)
        assert relay.specs == ["a", "b"]

    @pytest.mark.parametrize("index", [3, -4])
    def test_delete_out_of_range(self, relay, index):
        relay.add("a/b/c")
        with pytest.raises(IndexOutOfRangeError) as exc_info:
            relay.delete_at(index)

        assert exc_info.value.to_dict()["action"] == "delete"
        assert len(relay) == 3

    def test_delete_from_pull_chain(self, record):
        chain = PullChain(record, "user/name/strip/upper")
        chain.delete_at(3)
        assert chain.call() == "louis"

    def test_clear(self, record):
        chain = PullChain(record, "user/name").clear()
        assert len(chain) == 0
        assert chain.call() is record


class TestRendering:
    """Tests for str/repr and the specs view."""

    def test_pull_repr(self, record):
        chain = PullChain(record)
        chain << "user" << ("__getitem__", ["name"]) << "/@n = strip()"
        assert repr(chain) == "PullChain['user', ('__getitem__', ['name']), '@n = strip()']"
        assert str(chain) == repr(chain)

    def test_relay_repr(self):
        letters = Letters()
        stopper = lambda _, value: value
        chain = RelayChain() >> letters.a >> stopper
        assert str(chain) == f"RelayChain{[letters.a, stopper]!r}"

    def test_repr_is_stable(self, relay):
        relay.add("a/b")
        assert repr(relay) == repr(relay) == "RelayChain['a', 'b']"

    def test_escaped_delimiter_is_unescaped_in_specs(self, record):
        chain = PullChain(record)
        chain.insert_at(0, r"concat '\/DC'")
        assert chain.specs == ["concat '/DC'"]

    def test_step_types(self, record):
        chain = PullChain(record, "user", ("get", ["name"]), "self.strip()")
        types = [element.get_step_type() for element in chain._elements]
        assert types == [StepType.NAMED_CALL, StepType.PARAMETERIZED_CALL, StepType.EXPRESSION]


class TestEquivalence:
    """A delimited string behaves like its segments added one by one."""

    def test_pull(self, record):
        joined = PullChain(record, "/user/name/strip/upper/")
        separate = PullChain(record, "user", "name", "strip", "upper")
        assert joined.specs == separate.specs
        assert joined.call() == separate.call() == "LOUIS"

    def test_relay(self):
        joined = RelayChain(Letters(), "a/b/c")
        separate = RelayChain(Letters(), "a", "b", "c")
        assert joined.specs == separate.specs
        assert joined.call("") == separate.call("") == "abc"

    def test_custom_delimiter(self, record):
        chain = PullChain(record)
        chain.delimiter = "|"
        chain << "user|name|split('/')"
        assert chain.call() == ["  louis  "]

    def test_fluent_mutations(self, relay):
        result = relay.add("a").add_all("b", "c").insert_at(0, "x").delete_at(0).clear()
        assert result is relay
