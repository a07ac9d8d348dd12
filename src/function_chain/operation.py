"""
Host invocation helpers.

Chains never know what their operations are; they only need to look a name
up on a receiver and call what they find. These helpers do that and translate
failures into the library's error taxonomy.
"""

import inspect
import types
from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Sequence

from .exceptions import ChainError, OperationFailedError, OperationNotFoundError


def public_names(receiver: Any) -> List[str]:
    """Names a receiver exposes, used for typo suggestions."""
    names = [name for name in dir(receiver) if not name.startswith("_")]
    if isinstance(receiver, Mapping):
        names.extend(key for key in receiver if isinstance(key, str))
    return names


def lookup_member(receiver: Any, name: str) -> Any:
    """
    Resolve ``name`` on ``receiver``.

    Attributes win; mappings without such an attribute fall back to key
    lookup so that ``{"user": ...}`` navigates like an object.

    Raises:
        OperationNotFoundError: If neither lookup succeeds
        OperationFailedError: If a property getter raised
    """
    try:
        return getattr(receiver, name)
    except AttributeError:
        pass
    except ChainError:
        raise
    except Exception as e:
        raise OperationFailedError(
            f"Reading {name} failed: {e}",
            operation_name=name,
            receiver=receiver,
            original_error=e,
        ) from e

    if isinstance(receiver, Mapping) and name in receiver:
        return receiver[name]

    raise OperationNotFoundError(name, public_names(receiver), receiver=receiver)


def invoke(
    operation: Any,
    args: Sequence[Any] = (),
    kwargs: Optional[Dict[str, Any]] = None,
    operation_name: Optional[str] = None,
    receiver: Any = None,
) -> Any:
    """
    Call ``operation`` and wrap anything it raises in OperationFailedError.

    ChainErrors pass through untouched so that failures raised deeper in a
    nested chain keep their original type.
    """
    try:
        return operation(*args, **(kwargs or {}))
    except ChainError:
        raise
    except Exception as e:
        name = operation_name or getattr(operation, "__name__", repr(operation))
        raise OperationFailedError(
            f"Operation {name} failed: {e}",
            operation_name=name,
            receiver=receiver,
            original_error=e,
        ) from e


def invoke_by_name(receiver: Any, name: str, *args: Any) -> Any:
    """Look ``name`` up on ``receiver`` and call it with ``args``."""
    member = lookup_member(receiver, name)
    return invoke(member, args, operation_name=name, receiver=receiver)


def access(receiver: Any, name: str) -> Any:
    """
    Read ``name`` off ``receiver`` the way a named pull step does.

    Routines (methods, builtins) are called with no arguments; plain
    attributes and mapping values are returned as they are.
    """
    member = lookup_member(receiver, name)
    if inspect.isroutine(member) or isinstance(member, types.MethodWrapperType):
        return invoke(member, operation_name=name, receiver=receiver)
    return member


def is_bound_method(target: Any) -> bool:
    """True for methods bound to an instance, including builtin ones."""
    if inspect.ismethod(target) or isinstance(target, types.MethodWrapperType):
        return True
    if inspect.isbuiltin(target):
        owner = getattr(target, "__self__", None)
        return owner is not None and not inspect.ismodule(owner)
    return False
