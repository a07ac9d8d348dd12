"""
Path parser for slash-delimited chain specifications.

A string step such as ``"bookstore/@shelf = shelves['mystery']/books"``
describes several steps at once. This module splits it into segments and
recognises the ``@alias = `` prefix of pull steps.
"""

import keyword
import re
from typing import List, Optional, Tuple

from .exceptions import ChainError, InvalidAliasNameError

DEFAULT_DELIMITER = "/"


class PathParser:
    """
    Utility class to split and validate string chain specifications.

    Example:
        >>> PathParser.split("/bookstore/shelves/")
        ['bookstore', 'shelves']
        >>> PathParser.split(r"concat '\\/DC'")
        ["concat '/DC'"]
        >>> PathParser.split_alias("@shelf = shelves['mystery']")
        ('shelf', "shelves['mystery']")
    """

    ALIAS_PATTERN = re.compile(r"^@(.+?)=")
    ALIAS_START = re.compile(r"[A-Za-z_]")
    RESERVED_NAMES = frozenset({"self", "None", "True", "False"})

    @classmethod
    def split(cls, path: str, delimiter: str = DEFAULT_DELIMITER) -> List[str]:
        """
        Split ``path`` on unescaped delimiters.

        A backslash before the delimiter keeps it literal. Empty and blank
        segments (leading, trailing or doubled delimiters) are dropped.

        Args:
            path: The delimited specification
            delimiter: Segment separator, "/" by default

        Returns:
            The segments, unescaped and stripped, in order.
        """
        if not delimiter:
            raise ValueError("delimiter must be a non-empty string")

        escaped = "\\" + delimiter
        pattern = re.compile(r"(?<!\\)" + re.escape(delimiter))

        segments = []
        for raw in pattern.split(path):
            segment = raw.replace(escaped, delimiter).strip()
            if segment:
                segments.append(segment)
        return segments

    @classmethod
    def split_alias(cls, segment: str) -> Tuple[Optional[str], str]:
        """
        Separate an ``@alias = `` prefix from the rest of a segment.

        Returns:
            ``(alias, expression)``; alias is None when there is no prefix.

        Raises:
            InvalidAliasNameError: If the alias does not start with a letter
                or underscore
        """
        match = cls.ALIAS_PATTERN.match(segment)
        if not match:
            return None, segment

        alias = match.group(1).strip()
        if not cls.ALIAS_START.match(alias):
            raise InvalidAliasNameError(alias, segment)

        return alias, segment[match.end():].strip()

    @classmethod
    def is_identifier(cls, text: str) -> bool:
        """True when ``text`` is a named-call step rather than an expression."""
        return (
            text.isidentifier()
            and not keyword.iskeyword(text)
            and text not in cls.RESERVED_NAMES
        )

    @classmethod
    def validate(cls, path: str, delimiter: str = DEFAULT_DELIMITER) -> List[str]:
        """
        Validate a pull-chain path without building a chain.

        Checks:
        - Alias prefixes name legal identifiers
        - Every expression segment parses

        Args:
            path: The delimited specification
            delimiter: Segment separator

        Returns:
            List of validation error messages (empty if valid).

        Example:
            >>> PathParser.validate("/@1x = bookstore/shelves[")
            ["Segment 0: Wrong format variable defined '1x' ...", "Segment 1: ..."]
        """
        from .expression import Expression

        errors: List[str] = []
        segments = cls.split(path, delimiter)
        if not segments:
            return ["Path contains no steps"]

        for idx, segment in enumerate(segments):
            try:
                _, text = cls.split_alias(segment)
                if not cls.is_identifier(text):
                    Expression(text).tree
            except ChainError as e:
                errors.append(f"Segment {idx}: {e}")

        return errors
