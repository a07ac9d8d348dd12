"""
Function Chain - record chains of operations now, replay them later.

This library builds ordered sequences of operations without running them.
A chain is an object: it can be edited, printed and called any number of
times.

Basic Usage:
    >>> from function_chain import PullChain, RelayChain
    >>>
    >>> # Navigate into a value: city.bookstore.shelves["mystery"]
    >>> chain = PullChain(city) << "bookstore" << "shelves" << ("__getitem__", ["mystery"])
    >>> chain.call()
    >>>
    >>> # Pipe a value through functions: decorate2(decorate1("x"))
    >>> chain = RelayChain(decorator) >> "decorate1" >> "decorate2"
    >>> chain.call("x")

Key Concepts:
    - **Pull chain**: Each step reads an accessor off the previous result,
      stopping at the first None
    - **Relay chain**: Each step receives the previous step's output, and
      functions in the pipeline decide whether to continue
    - **String steps**: ``"bookstore/@shelf = shelves['mystery']/books"``
      describes several steps at once; ``\\/`` keeps a slash literal
    - **Aliases**: ``@name = `` binds a pull step's result for later steps
"""

from typing import Any

from .base import (
    AliasContext,
    BaseChain,
    ChainElement,
    StepType,
)
from .expression import Expression
from .parser import PathParser
from .pull import PullChain
from .registry import ReceiverRegistry
from .relay import RelayChain
from .exceptions import (
    ChainError,
    UnsupportedStepTypeError,
    MalformedDescriptorError,
    InvalidAliasNameError,
    ExpressionSyntaxError,
    IndexOutOfRangeError,
    OperationNotFoundError,
    ReceiverNotFoundError,
    OperationFailedError,
)

__version__ = "0.1.0"


def pull(receiver: Any, *specs: Any, return_nil_at_error: bool = False) -> Any:
    """
    Shortcut to ``PullChain(receiver, *specs).call()``.

    Example:
        >>> pull(account, "user/name/upper")
        'LOUIS'
    """
    return PullChain(receiver, *specs, return_nil_at_error=return_nil_at_error).call()


__all__ = [
    # Chains
    "BaseChain",
    "PullChain",
    "RelayChain",
    "pull",
    # Building blocks
    "AliasContext",
    "ChainElement",
    "StepType",
    "Expression",
    "PathParser",
    "ReceiverRegistry",
    # Exceptions
    "ChainError",
    "UnsupportedStepTypeError",
    "MalformedDescriptorError",
    "InvalidAliasNameError",
    "ExpressionSyntaxError",
    "IndexOutOfRangeError",
    "OperationNotFoundError",
    "ReceiverNotFoundError",
    "OperationFailedError",
]
