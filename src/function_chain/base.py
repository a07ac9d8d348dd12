"""
Base chain interface for the function chain engine.

This module defines the core abstractions:
- StepType: Enum classifying chain elements
- ChainElement: Abstract base class for one executable step
- AliasContext: Per-call named results of a pull chain
- BaseChain: Ordered, mutable sequence of chain elements
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from enum import Enum
from typing import Any, Dict, Iterator, List
import logging

from .exceptions import (
    IndexOutOfRangeError,
    MalformedDescriptorError,
    UnsupportedStepTypeError,
)
from .parser import DEFAULT_DELIMITER, PathParser

logger = logging.getLogger("function_chain")


class StepType(Enum):
    """
    Classification of chain elements.

    - NAMED_CALL: An identifier, read or invoked on the receiver
    - PARAMETERIZED_CALL: A (name, args) pair, or (receiver, name) for relays
    - EXPRESSION: A string expression, or a "key.operation" relay reference
    - CALLABLE: A function or bound method (relay chains only)
    """

    NAMED_CALL = "named_call"
    PARAMETERIZED_CALL = "parameterized_call"
    EXPRESSION = "expression"
    CALLABLE = "callable"


class ChainElement(ABC):
    """
    Base abstract class for one step of a chain.

    Each element keeps the literal specification it was built from in
    ``spec``, which is what chains render in ``str()``.
    """

    def __init__(self, spec: Any):
        self.spec = spec

    @abstractmethod
    def get_step_type(self) -> StepType:
        """Return the type of this element."""
        pass

    def __repr__(self):
        return f"<{self.__class__.__name__}(spec={self.spec!r}, type={self.get_step_type().value})>"


class AliasContext(Mapping):
    """
    Named intermediate results of a single pull chain call.

    Created fresh for every ``PullChain.call()`` and discarded afterwards.
    Values are reachable by key, by attribute, and as bare names inside
    string expressions.

    Example:
        >>> context = AliasContext()
        >>> context.bind("shelf", shelf)
        >>> context.shelf is context["shelf"]
        True
    """

    def __init__(self):
        self._values: Dict[str, Any] = {}

    def bind(self, name: str, value: Any):
        """Bind ``value`` under ``name``, replacing any earlier binding."""
        self._values[name] = value

    def __getitem__(self, name: str) -> Any:
        return self._values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._values[name]
        except KeyError:
            raise AttributeError(
                f"No result named '{name}' yet; known names: {sorted(self._values)}"
            ) from None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging."""
        return dict(self._values)

    def __repr__(self):
        return f"AliasContext({sorted(self._values)})"


class BaseChain(ABC):
    """
    Base class of PullChain and RelayChain.

    Owns the ordered element list and the mutation surface. Every mutation
    returns the chain itself so calls can be strung together, and none of
    them runs a step. Subclasses decide how each kind of specification
    becomes an element and how the elements run.

    To create a new kind of chain:
        1. Implement _create_element_by_string and _create_element_by_descriptor
        2. Override _create_element_by_callable if callables are accepted
        3. Implement call()
    """

    delimiter = DEFAULT_DELIMITER

    def __init__(self):
        self._elements: List[ChainElement] = []

    # ------------------------------------------------------------------
    # Mutation surface
    # ------------------------------------------------------------------

    def add(self, spec: Any) -> "BaseChain":
        """Append one specification (a string may expand to several steps)."""
        return self.insert_at(len(self._elements), spec)

    def add_all(self, *specs: Any) -> "BaseChain":
        """Append several specifications in order."""
        return self.insert_all_at(len(self._elements), *specs)

    def insert_at(self, index: int, spec: Any) -> "BaseChain":
        """
        Insert the element(s) built from ``spec`` at ``index``.

        Raises:
            IndexOutOfRangeError: If index is outside 0..len(chain)
        """
        self._check_insert_index(index)
        self._insert_elements(index, self._build_elements(spec))
        return self

    def insert_all_at(self, index: int, *specs: Any) -> "BaseChain":
        """
        Insert several specifications starting at ``index``.

        Each specification lands right after the elements produced by the
        previous one. Nothing is inserted if any of them is invalid.
        """
        self._check_insert_index(index)
        elements: List[ChainElement] = []
        for spec in specs:
            elements.extend(self._build_elements(spec))
        self._insert_elements(index, elements)
        return self

    def delete_at(self, index: int) -> "BaseChain":
        """
        Remove the element at ``index``; negative indices count from the end.

        Raises:
            IndexOutOfRangeError: If index does not name an element
        """
        length = len(self._elements)
        if not -length <= index < length:
            raise IndexOutOfRangeError(index, length, action="delete")
        del self._elements[index]
        return self

    def clear(self) -> "BaseChain":
        """Remove every element."""
        self._elements.clear()
        return self

    @property
    def specs(self) -> List[Any]:
        """The literal specifications of all elements, in order."""
        return [element.spec for element in self._elements]

    def __len__(self) -> int:
        return len(self._elements)

    def __repr__(self):
        return f"{self.__class__.__name__}{self.specs!r}"

    def __call__(self, *args: Any) -> Any:
        return self.call(*args)

    @abstractmethod
    def call(self, *args: Any) -> Any:
        """Run the chain."""
        pass

    # ------------------------------------------------------------------
    # Element factory
    # ------------------------------------------------------------------

    def supported_types(self) -> List[str]:
        """Kinds of specification this chain accepts."""
        return ["str", "tuple", "list"]

    def _check_insert_index(self, index: int):
        length = len(self._elements)
        if not 0 <= index <= length:
            raise IndexOutOfRangeError(index, length, action="insert at")

    def _insert_elements(self, index: int, elements: List[ChainElement]) -> int:
        self._elements[index:index] = elements
        logger.debug(
            "%s: inserted %d element(s) at %d", self.__class__.__name__, len(elements), index
        )
        return len(elements)

    def _build_elements(self, spec: Any) -> List[ChainElement]:
        if isinstance(spec, str):
            return [
                self._create_element_by_string(segment)
                for segment in PathParser.split(spec, self.delimiter)
            ]
        return [self._create_element(spec)]

    def _create_element(self, spec: Any) -> ChainElement:
        if isinstance(spec, str):
            return self._create_element_by_string(spec)
        if isinstance(spec, (tuple, list)):
            return self._create_element_by_descriptor(spec)
        if callable(spec):
            return self._create_element_by_callable(spec)
        raise UnsupportedStepTypeError(spec, self.supported_types())

    @abstractmethod
    def _create_element_by_string(self, segment: str) -> ChainElement:
        pass

    @abstractmethod
    def _create_element_by_descriptor(self, descriptor: Any) -> ChainElement:
        pass

    def _create_element_by_callable(self, function: Any) -> ChainElement:
        raise UnsupportedStepTypeError(function, self.supported_types())

    @staticmethod
    def _validate_descriptor(
        descriptor: Any, second_types: tuple, expected_format: str, second_callable: bool = False
    ):
        if len(descriptor) != 2:
            raise MalformedDescriptorError(
                f"expected 2 elements, got {len(descriptor)}", descriptor, expected_format
            )
        second = descriptor[1]
        if isinstance(second, second_types):
            return
        if second_callable and callable(second):
            return
        raise MalformedDescriptorError(
            f"second element is {type(second).__name__}", descriptor, expected_format
        )
