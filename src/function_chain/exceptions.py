"""
Exception classes for Function Chain.

All exceptions include:
- Descriptive messages with context
- `to_dict()` method for structured JSON output
- Fuzzy-matched suggestions where applicable

Errors fall into two groups. Construction errors (unsupported step types,
malformed descriptors, invalid aliases, expression syntax, bad indices) are
raised while a chain is being assembled and always propagate. Call errors
(`OperationNotFoundError`, `OperationFailedError`) are raised while a chain
runs; pull chains may turn them into ``None`` via ``return_nil_at_error``.
"""

from difflib import get_close_matches
from typing import Any, Dict, List, Optional, Sequence


class ChainError(Exception):
    """
    Base exception for all Function Chain errors.

    Example:
        >>> try:
        ...     chain.call()
        ... except ChainError as e:
        ...     print(e.to_dict())
    """

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to JSON-serializable dict."""
        return {
            "error": self.__class__.__name__,
            "message": str(self),
        }


class UnsupportedStepTypeError(ChainError):
    """
    Raised when a step specification is not one of the supported kinds.

    Attributes:
        spec: The rejected specification value
        supported_types: Names of the kinds the chain accepts
    """

    def __init__(self, spec: Any, supported_types: Sequence[str]):
        self.spec = spec
        self.supported_types = list(supported_types)
        super().__init__(
            f"Not supported type {spec!r} ({type(spec).__name__}), "
            f"supported types are: {', '.join(self.supported_types)}."
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": "UNSUPPORTED_STEP_TYPE",
            "message": str(self),
            "spec_type": type(self.spec).__name__,
            "supported_types": self.supported_types,
        }


class MalformedDescriptorError(ChainError):
    """
    Raised when a parameterized-call descriptor has the wrong shape.

    Attributes:
        descriptor: The rejected tuple or list
        expected_format: Human-readable description of the accepted shape
    """

    def __init__(self, message: str, descriptor: Any, expected_format: str):
        self.message = message
        self.descriptor = descriptor
        self.expected_format = expected_format
        super().__init__(
            f"Format wrong {descriptor!r}: {message}, "
            f"expected format is ({expected_format})"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": "MALFORMED_DESCRIPTOR",
            "message": self.message,
            "descriptor": repr(self.descriptor),
            "expected_format": self.expected_format,
        }


class InvalidAliasNameError(ChainError):
    """Raised when an ``@name = `` prefix names an illegal identifier."""

    def __init__(self, alias: str, segment: Optional[str] = None):
        self.alias = alias
        self.segment = segment
        message = f"Wrong format variable defined '{alias}'"
        if segment is not None:
            message += f" in '{segment}'"
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": "INVALID_ALIAS_NAME",
            "alias": self.alias,
            "segment": self.segment,
        }


class ExpressionSyntaxError(ChainError):
    """
    Raised when a string step cannot be parsed as an expression.

    Attributes:
        expression: The offending expression text
        detail: Parser diagnostic
    """

    def __init__(self, expression: str, detail: str):
        self.expression = expression
        self.detail = detail
        super().__init__(f"Cannot parse expression '{expression}': {detail}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": "EXPRESSION_SYNTAX_ERROR",
            "expression": self.expression,
            "detail": self.detail,
        }


class IndexOutOfRangeError(ChainError):
    """Raised when an insert or delete index falls outside the chain."""

    def __init__(self, index: int, length: int, action: str = "access"):
        self.index = index
        self.length = length
        self.action = action
        super().__init__(
            f"Cannot {action} index {index} in chain of length {length}"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": "INDEX_OUT_OF_RANGE",
            "index": self.index,
            "length": self.length,
            "action": self.action,
        }


class OperationNotFoundError(ChainError):
    """
    Raised when a named operation does not exist on the current receiver.

    Includes fuzzy-matched suggestions to help identify typos.

    Attributes:
        operation: The unknown operation name that was requested
        valid_operations: Names available on the receiver
        suggestions: Fuzzy-matched similar names
        receiver: The object the lookup ran against

    Example:
        >>> PullChain(city, "bookstore/shelvs").call()
        OperationNotFoundError: Unknown operation: 'shelvs' on BookStore.
        Did you mean: shelves?
    """

    kind = "operation"

    def __init__(
        self,
        operation: str,
        valid_operations: List[str],
        receiver: Any = None,
    ):
        self.operation = operation
        self.valid_operations = valid_operations
        self.receiver = receiver
        self.suggestions = get_close_matches(
            operation.lower(),
            [op.lower() for op in valid_operations],
            n=3,
            cutoff=0.5,
        )
        # Map back to original case
        self.suggestions = [
            op for op in valid_operations
            if op.lower() in self.suggestions
        ]

        message = f"Unknown {self.kind}: '{operation}'"
        if receiver is not None:
            message += f" on {type(receiver).__name__}"
        message += "."
        if self.suggestions:
            message += f" Did you mean: {', '.join(self.suggestions)}?"

        sorted_ops = sorted(valid_operations)[:10]
        if sorted_ops:
            message += f"\nAvailable {self.kind}s: {', '.join(sorted_ops)}"
            if len(valid_operations) > 10:
                message += f" ... ({len(valid_operations) - 10} more)"

        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": "OPERATION_NOT_FOUND",
            "operation": self.operation,
            "receiver_type": type(self.receiver).__name__,
            "suggestions": self.suggestions,
            "valid_operations": sorted(self.valid_operations),
        }


class ReceiverNotFoundError(OperationNotFoundError):
    """Raised when a relay step names a receiver key that was never registered."""

    kind = "receiver"

    def __init__(self, name: str, registered: List[str]):
        super().__init__(name, registered)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": "RECEIVER_NOT_FOUND",
            "receiver": self.operation,
            "suggestions": self.suggestions,
            "registered": sorted(self.valid_operations),
        }


class OperationFailedError(ChainError):
    """
    Raised when an operation exists but raised while running.

    Wraps the original exception with the receiver and, for string
    expression steps, the expression that was being evaluated.

    Attributes:
        message: Error description
        operation_name: Name of the operation that failed
        receiver: The object the operation ran against
        expression: Expression text, for string expression steps
        original_error: The underlying exception

    Example:
        >>> raise OperationFailedError(
        ...     "division by zero",
        ...     operation_name="ratio",
        ...     original_error=ZeroDivisionError("division by zero")
        ... )
    """

    def __init__(
        self,
        message: str,
        operation_name: Optional[str] = None,
        receiver: Any = None,
        expression: Optional[str] = None,
        original_error: Optional[BaseException] = None,
    ):
        self.message = message
        self.operation_name = operation_name
        self.receiver = receiver
        self.expression = expression
        self.original_error = original_error

        full_message = message
        if expression is not None:
            full_message = f"{receiver!r}.{expression}: {message}"
        elif operation_name:
            full_message = f"[{operation_name}] {message}"

        super().__init__(full_message)

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "error": "OPERATION_FAILED",
            "message": self.message,
            "operation": self.operation_name,
            "expression": self.expression,
            "receiver_type": type(self.receiver).__name__,
        }
        if self.original_error:
            result["original_error"] = str(self.original_error)
        return result
