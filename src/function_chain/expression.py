"""
Restricted expression interpreter for string pull steps.

A string step like ``"shelves[shelf.recommended_shelf]"`` is parsed into a
lark parse tree the first time it runs and evaluated on every call against
the current receiver. The language only knows:

- names (``self``, ``None``, ``True``, ``False``, aliases, receiver members)
- int, float and string literals, and list literals
- member access ``a.b``, indexing ``a[k]`` and calls ``f(x, key=y)``
- ``+``, ``-``, ``*``, ``%`` and unary minus

Bare names resolve against the alias context first and fall back to the
receiver's own members.
"""

import ast
from collections.abc import Mapping
from typing import Any, Dict, List, Optional

from lark import Lark, Transformer, Tree, v_args
from lark.exceptions import LarkError, VisitError

from .exceptions import ExpressionSyntaxError
from .operation import lookup_member

GRAMMAR = r"""
    ?start: sum

    ?sum: product
        | sum "+" product           -> add
        | sum "-" product           -> sub

    ?product: unary
        | product "*" unary         -> mul
        | product "%" unary         -> mod

    ?unary: postfix
        | "-" unary                 -> neg

    ?postfix: atom
        | postfix "." NAME          -> member
        | postfix "[" sum "]"       -> item
        | postfix "(" ")"           -> call
        | postfix "(" arguments ")" -> call

    arguments: argument ("," argument)* ","?

    ?argument: sum
        | NAME "=" sum              -> keyword

    ?atom: NAME                     -> name
        | NUMBER                    -> number
        | STRING                    -> string
        | "[" "]"                   -> empty_list
        | "[" items "]"
        | "(" sum ")"

    items: sum ("," sum)* ","?

    NAME: /[A-Za-z_][A-Za-z0-9_]*/
    NUMBER: /\d+(\.\d+)?/
    STRING: /'(?:[^'\\]|\\.)*'/ | /"(?:[^"\\]|\\.)*"/

    %import common.WS
    %ignore WS
"""

_parser = Lark(GRAMMAR, parser="lalr")

CONSTANTS: Dict[str, Any] = {"None": None, "True": True, "False": False}


class _Keyword:
    __slots__ = ("name", "value")

    def __init__(self, name: str, value: Any):
        self.name = name
        self.value = value


@v_args(inline=True)
class _Evaluator(Transformer):
    """Bottom-up evaluation of a parse tree against one receiver."""

    def __init__(self, receiver: Any, aliases: Mapping):
        super().__init__()
        self.receiver = receiver
        self.aliases = aliases

    def name(self, token):
        name = str(token)
        if name in CONSTANTS:
            return CONSTANTS[name]
        if name == "self":
            return self.receiver
        if name in self.aliases:
            return self.aliases[name]
        return lookup_member(self.receiver, name)

    def number(self, token):
        text = str(token)
        return float(text) if "." in text else int(text)

    def string(self, token):
        return ast.literal_eval(str(token))

    def empty_list(self):
        return []

    def items(self, *values):
        return list(values)

    def member(self, target, token):
        return lookup_member(target, str(token))

    def item(self, target, key):
        return target[key]

    def keyword(self, token, value):
        return _Keyword(str(token), value)

    def arguments(self, *values):
        args: List[Any] = []
        kwargs: Dict[str, Any] = {}
        for value in values:
            if isinstance(value, _Keyword):
                kwargs[value.name] = value.value
            else:
                args.append(value)
        return args, kwargs

    def call(self, target, arguments=None):
        args, kwargs = arguments if arguments is not None else ((), {})
        return target(*args, **kwargs)

    def add(self, left, right):
        return left + right

    def sub(self, left, right):
        return left - right

    def mul(self, left, right):
        return left * right

    def mod(self, left, right):
        return left % right

    def neg(self, value):
        return -value


class Expression:
    """
    A parsed expression, ready to be evaluated against any receiver.

    Example:
        >>> expr = Expression("books[shelf.recommended_book_num].title")
        >>> expr.evaluate(shelf, {"shelf": shelf})
        'Tragedy of X'

    Parsing is deferred until the expression is first needed, so a chain
    can hold text that only fails when it runs.

    Raises:
        ExpressionSyntaxError: On first use, if ``text`` does not parse
    """

    def __init__(self, text: str):
        self.text = text
        self._tree: Optional[Tree] = None

    @property
    def tree(self) -> Tree:
        """The parse tree, built on first access and cached."""
        if self._tree is None:
            try:
                self._tree = _parser.parse(self.text)
            except LarkError as e:
                raise ExpressionSyntaxError(self.text, str(e).strip()) from e
        return self._tree

    def evaluate(self, receiver: Any, aliases: Optional[Mapping] = None) -> Any:
        """
        Evaluate against ``receiver`` with ``aliases`` visible as bare names.

        Errors raised while evaluating (missing members, failing calls) are
        re-raised as they are, without lark's wrapper.
        """
        tree = self.tree
        evaluator = _Evaluator(receiver, aliases if aliases is not None else {})
        try:
            return evaluator.transform(tree)
        except VisitError as e:
            raise e.orig_exc from None

    def __repr__(self):
        return f"Expression({self.text!r})"
