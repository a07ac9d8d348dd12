"""
Pull chains: navigate into a value one accessor at a time.

Supported call chain type is like ``account.user.name``. Unsupported is
``filter3(filter2(filter1(value)))``; RelayChain supports that.

Example:
    >>> chain = PullChain(account, "user", "name", "upper")
    >>> chain.call()
    'LOUIS'

Similar:
    >>> PullChain(account, "user/name/upper").call()
    >>> (PullChain(account) << "user" << "name" << "upper").call()
    >>> PullChain(account).add_all("user", "name", "upper").call()

Arguments:
    >>> PullChain(foo) << ("say", ["Andres", "Hello"])
    >>> PullChain(foo) << "say('John', 'Goodbye')"

Earlier results:
    >>> PullChain(foo) << "bar/baz/say(bar.speaker, 'Good!')"
    >>> PullChain(foo) << "@b = bar/baz/say(b.speaker, 'Cool')"
    >>> PullChain(foo) << "bar" << "baz" << ("say", lambda r: (r.bar.speaker, "Oh"))

A slash inside a step is escaped with a backslash:
    >>> PullChain("AC", r"__add__('\\/DC')").call()
    'AC/DC'
"""

from abc import abstractmethod
import inspect
from typing import Any, Optional
import logging

from .base import AliasContext, BaseChain, ChainElement, StepType
from .exceptions import (
    ChainError,
    MalformedDescriptorError,
    OperationFailedError,
    OperationNotFoundError,
)
from .expression import Expression
from .operation import access, invoke, lookup_member
from .parser import PathParser

logger = logging.getLogger("function_chain")


class PullElement(ChainElement):
    """A pull step: maps the current value to the next one."""

    @property
    def alias(self) -> Optional[str]:
        """Name the step's result is bound under, if any."""
        return None

    def pull(self, receiver: Any, aliases: AliasContext) -> Any:
        """Run the step and bind its result in the alias context."""
        result = self.apply(receiver, aliases)
        if self.alias is not None:
            aliases.bind(self.alias, result)
        return result

    @abstractmethod
    def apply(self, receiver: Any, aliases: AliasContext) -> Any:
        pass


class NamedPullElement(PullElement):
    """Read ``name`` off the receiver, calling it if it is a method."""

    def __init__(self, spec: Any, name: str, alias: Optional[str] = None):
        super().__init__(spec)
        self.name = name
        self._alias = alias or name

    @property
    def alias(self) -> Optional[str]:
        return self._alias

    def get_step_type(self) -> StepType:
        return StepType.NAMED_CALL

    def apply(self, receiver: Any, aliases: AliasContext) -> Any:
        return access(receiver, self.name)


class ParameterizedPullElement(PullElement):
    """
    Call ``name`` on the receiver with arguments.

    ``arguments`` is either a list/tuple of positional arguments, whose
    trailing callable is passed through as a callback, or a producer called
    with the alias context that returns the arguments (a tuple is splatted).
    """

    def __init__(self, spec: Any, name: str, arguments: Any):
        super().__init__(spec)
        self.name = name
        self.arguments = arguments

    @property
    def alias(self) -> Optional[str]:
        return self.name

    def get_step_type(self) -> StepType:
        return StepType.PARAMETERIZED_CALL

    def apply(self, receiver: Any, aliases: AliasContext) -> Any:
        args = self._resolve_arguments(aliases)
        operation = lookup_member(receiver, self.name)
        return invoke(operation, args, operation_name=self.name, receiver=receiver)

    def _resolve_arguments(self, aliases: AliasContext) -> tuple:
        if isinstance(self.arguments, (list, tuple)):
            return tuple(self.arguments)

        producer = self.arguments
        if _takes_no_arguments(producer):
            produced = invoke(producer, operation_name=f"{self.name} arguments")
        else:
            produced = invoke(producer, (aliases,), operation_name=f"{self.name} arguments")

        if isinstance(produced, tuple):
            return produced
        return (produced,)


class ExpressionPullElement(PullElement):
    """Evaluate a string expression with the receiver as ``self``."""

    def __init__(self, spec: Any, expression: Expression, alias: Optional[str] = None):
        super().__init__(spec)
        self.expression = expression
        self._alias = alias

    @property
    def alias(self) -> Optional[str]:
        return self._alias

    def get_step_type(self) -> StepType:
        return StepType.EXPRESSION

    def apply(self, receiver: Any, aliases: AliasContext) -> Any:
        try:
            return self.expression.evaluate(receiver, aliases)
        except ChainError:
            raise
        except Exception as e:
            raise OperationFailedError(
                str(e),
                receiver=receiver,
                expression=self.expression.text,
                original_error=e,
            ) from e


def _takes_no_arguments(function: Any) -> bool:
    try:
        parameters = inspect.signature(function).parameters.values()
    except (TypeError, ValueError):
        return False
    return not any(
        p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD, p.VAR_POSITIONAL)
        for p in parameters
    )


class PullChain(BaseChain):
    """
    Chain of accessors applied one after another to a starting receiver.

    Steps may be:
    - an identifier string: ``"user"``
    - a (name, args) pair: ``("__getitem__", ["mystery"])``
    - a (name, producer) pair: ``("say", lambda results: (results.bar.speaker, "Oh"))``
    - a string expression: ``"books[1].title"``, ``"@shelf = shelves['mystery']"``
    - a slash-delimited string of any of the above

    A ``None`` anywhere along the way stops the chain and returns ``None``.

    Attributes:
        return_nil_at_error: When True, a failing call returns None instead
            of raising OperationNotFoundError / OperationFailedError.

    Example:
        >>> chain = PullChain(city) << "bookstore" << "shelves" << ("__getitem__", ["mystery"])
        >>> chain.call() is city.bookstore.shelves["mystery"]
        True
    """

    def __init__(self, receiver: Any, *specs: Any, return_nil_at_error: bool = False):
        """
        Initialize the chain.

        Args:
            receiver: Starting point of the accessor chain
            *specs: Step specifications, appended in order
            return_nil_at_error: Swallow call-time errors and return None
        """
        super().__init__()
        self.receiver = receiver
        self.return_nil_at_error = return_nil_at_error
        self.add_all(*specs)

    def __lshift__(self, spec: Any) -> "PullChain":
        return self.add(spec)

    def call(self) -> Any:
        """
        Run every step against the starting receiver.

        Returns:
            The last step's result, or None if a step produced None (or
            failed while return_nil_at_error is set).

        Raises:
            OperationNotFoundError: If a step names a missing member
            OperationFailedError: If a step raised
        """
        aliases = AliasContext()
        value = self.receiver

        logger.debug(
            "Pulling %d step(s) from %s", len(self._elements), type(value).__name__
        )

        try:
            for step_index, element in enumerate(self._elements):
                if value is None:
                    logger.debug(
                        "Step %d (%r) reached None, stopping", step_index, element.spec
                    )
                    return None
                value = element.pull(value, aliases)
        except (OperationNotFoundError, OperationFailedError) as e:
            if not self.return_nil_at_error:
                raise
            logger.warning("Pull chain failed (returning None): %s", e)
            return None

        logger.debug("Pull chain completed, result type: %s", type(value).__name__)
        return value

    # ------------------------------------------------------------------
    # Element factory
    # ------------------------------------------------------------------

    def _create_element_by_string(self, segment: str) -> ChainElement:
        alias, text = PathParser.split_alias(segment)
        if PathParser.is_identifier(text):
            return NamedPullElement(segment, text, alias)
        return ExpressionPullElement(segment, Expression(text), alias)

    def _create_element_by_descriptor(self, descriptor: Any) -> ChainElement:
        expected_format = "name, [*args] or callable"
        self._validate_descriptor(
            descriptor, (list, tuple), expected_format, second_callable=True
        )
        name, arguments = descriptor
        if not isinstance(name, str):
            raise MalformedDescriptorError(
                f"first element is {type(name).__name__}, not str",
                descriptor,
                expected_format,
            )
        return ParameterizedPullElement(descriptor, name, arguments)
