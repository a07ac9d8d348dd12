"""
Relay chains: feed each function's output into the next function's input.

Supported call chain type is like ``filter3(filter2(filter1(value)))``.
Unsupported is ``account.user.name``; PullChain supports that.

Example:
    >>> chain = RelayChain(Decorator(), "decorate1", "decorate2")
    >>> chain.call("Hello")
    '{ ( Hello ) }'

Similar:
    >>> RelayChain(decorator, "decorate1/decorate2").call("Hello")
    >>> (RelayChain(decorator) >> "decorate1" >> "decorate2").call("Hello")
    >>> (RelayChain() >> decorator.decorate1 >> decorator.decorate2).call("Hello")

Other receivers:
    >>> RelayChain(decorator) >> "decorate1" >> (Decorator2(), "decorate")
    >>> chain = RelayChain(decorator).add_receiver("d2", Decorator2())
    >>> chain >> "decorate1/decorate2/d2.decorate"

Mismatched inputs and outputs are joined by a function that receives the
chain and decides how (or whether) to continue:
    >>> add_arg = lambda chain, value: chain(value, "Jerry")
    >>> RelayChain(decorator) >> "decorate" >> add_arg >> "union"

Returning without calling the chain stops the pipeline:
    >>> stopper = lambda chain, value: value if value.isdigit() else chain(value)
"""

from abc import abstractmethod
from collections.abc import Mapping
from typing import Any
import logging

from .base import BaseChain, ChainElement, StepType
from .operation import invoke, invoke_by_name, is_bound_method
from .registry import ReceiverRegistry

logger = logging.getLogger("function_chain")


class RelayElement(ChainElement):
    """A relay step, invoked with the chain as its continuation."""

    @abstractmethod
    def relay(self, chain: "RelayChain", *args: Any) -> Any:
        pass


class AutoRelayElement(RelayElement):
    """
    A step that hands its result to the next step by itself.

    The last step's result is returned as it is; otherwise a tuple result
    becomes several arguments of the next step.
    """

    def relay(self, chain: "RelayChain", *args: Any) -> Any:
        if chain.is_last():
            return self.apply(chain, *args)
        result = self.apply(chain, *args)
        if isinstance(result, tuple):
            return chain.call(*result)
        return chain.call(result)

    @abstractmethod
    def apply(self, chain: "RelayChain", *args: Any) -> Any:
        pass


class NamedRelayElement(AutoRelayElement):
    """Run ``name`` on the chain's common receiver."""

    def __init__(self, spec: Any, name: str):
        super().__init__(spec)
        self.name = name

    def get_step_type(self) -> StepType:
        return StepType.NAMED_CALL

    def apply(self, chain: "RelayChain", *args: Any) -> Any:
        return invoke_by_name(chain.common_receiver, self.name, *args)


class RegistryRelayElement(AutoRelayElement):
    """Run ``operation`` on the receiver registered under ``key``."""

    def __init__(self, spec: Any, key: str, operation: str):
        super().__init__(spec)
        self.key = key
        self.operation = operation

    def get_step_type(self) -> StepType:
        return StepType.EXPRESSION

    def apply(self, chain: "RelayChain", *args: Any) -> Any:
        return invoke_by_name(chain.receivers.get(self.key), self.operation, *args)


class CrossReceiverRelayElement(AutoRelayElement):
    """Run ``operation`` on an explicitly given receiver."""

    def __init__(self, spec: Any, receiver: Any, operation: str):
        super().__init__(spec)
        self.receiver = receiver
        self.operation = operation

    def get_step_type(self) -> StepType:
        return StepType.PARAMETERIZED_CALL

    def apply(self, chain: "RelayChain", *args: Any) -> Any:
        return invoke_by_name(self.receiver, self.operation, *args)


class MethodRelayElement(AutoRelayElement):
    """Run a bound method."""

    def __init__(self, method: Any):
        super().__init__(method)
        self.method = method

    def get_step_type(self) -> StepType:
        return StepType.CALLABLE

    def apply(self, chain: "RelayChain", *args: Any) -> Any:
        return invoke(self.method, args, receiver=getattr(self.method, "__self__", None))


class ContinuationRelayElement(RelayElement):
    """
    Run a function as ``function(chain, *args)``.

    The function continues the pipeline by calling ``chain(...)`` with the
    next step's arguments, or stops it by returning a value directly.
    """

    def __init__(self, function: Any):
        super().__init__(function)
        self.function = function

    def get_step_type(self) -> StepType:
        return StepType.CALLABLE

    def relay(self, chain: "RelayChain", *args: Any) -> Any:
        return invoke(self.function, (chain,) + args)


class RelayChain(BaseChain):
    """
    Pipeline of functions, each fed with the previous one's output.

    Steps may be:
    - an operation name of the common receiver: ``"decorate1"``
    - a registered receiver's operation: ``"d2.decorate"``
    - a (receiver, operation name) pair: ``(Decorator2(), "decorate")``
    - a bound method: ``decorator.decorate1``
    - any other callable, called as ``function(chain, *args)``
    - a slash-delimited string of names

    The chain keeps a cursor while it runs; it is reset to 0 whenever
    ``call`` returns or raises, so the chain can be called again. Calling the
    same chain from several threads at once is not supported.
    """

    def __init__(self, common_receiver: Any = None, *specs: Any):
        """
        Initialize the chain.

        Args:
            common_receiver: Receiver of steps that name no receiver
            *specs: Step specifications, appended in order
        """
        super().__init__()
        self.common_receiver = common_receiver
        self.receivers = ReceiverRegistry()
        self._index = 0
        self.add_all(*specs)

    def __rshift__(self, spec: Any) -> "RelayChain":
        return self.add(spec)

    def call(self, *args: Any) -> Any:
        """
        Run the step under the cursor, which relays to the following ones.

        Returns:
            The pipeline's result, or None once every step has run.

        Raises:
            OperationNotFoundError: If a step names a missing operation
            ReceiverNotFoundError: If a step names an unregistered receiver
            OperationFailedError: If a step raised
        """
        try:
            if self.is_last():
                return None
            element = self._elements[self._index]
            logger.debug("Relay step %d: %r", self._index, element.spec)
            self._index += 1
            return element.relay(self, *args)
        finally:
            self._index = 0

    def is_last(self) -> bool:
        """Whether the cursor has reached the end of the chain."""
        return self._index == len(self._elements)

    def add_receiver(self, name: str, receiver: Any) -> "RelayChain":
        """Register ``receiver`` for ``"name.operation"`` steps."""
        self.receivers.register(name, receiver)
        return self

    def add_receiver_table(self, table: Mapping) -> "RelayChain":
        """Register several receivers at once, ``{name: receiver}``."""
        self.receivers.update(table)
        return self

    # ------------------------------------------------------------------
    # Element factory
    # ------------------------------------------------------------------

    def supported_types(self):
        return super().supported_types() + ["callable"]

    def _create_element_by_string(self, segment: str) -> ChainElement:
        key, dot, operation = segment.partition(".")
        if dot:
            return RegistryRelayElement(segment, key, operation)
        return NamedRelayElement(segment, segment)

    def _create_element_by_descriptor(self, descriptor: Any) -> ChainElement:
        self._validate_descriptor(descriptor, (str,), "receiver, operation name")
        receiver, operation = descriptor
        return CrossReceiverRelayElement(descriptor, receiver, operation)

    def _create_element_by_callable(self, function: Any) -> ChainElement:
        if is_bound_method(function):
            return MethodRelayElement(function)
        return ContinuationRelayElement(function)
