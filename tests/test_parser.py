"""
Tests for path splitting, alias prefixes and path validation.
"""

import pytest
from function_chain.exceptions import InvalidAliasNameError
from function_chain.parser import PathParser


class TestSplit:
    """Tests for PathParser.split."""

    def test_simple_path(self):
        assert PathParser.split("user/name/upper") == ["user", "name", "upper"]

    def test_leading_trailing_and_doubled_delimiters(self):
        assert PathParser.split("//user//name/") == ["user", "name"]

    def test_blank_segments_are_dropped(self):
        assert PathParser.split("user/  /name") == ["user", "name"]

    def test_segments_are_stripped(self):
        assert PathParser.split(" user / name ") == ["user", "name"]

    def test_escaped_delimiter(self):
        assert PathParser.split(r"concat '\/DC'") == ["concat '/DC'"]

    def test_escaped_delimiter_between_segments(self):
        assert PathParser.split(r"a/b('x\/y')/c") == ["a", "b('x/y')", "c"]

    def test_empty_path(self):
        assert PathParser.split("") == []
        assert PathParser.split("///") == []

    def test_custom_delimiter(self):
        assert PathParser.split(r"a|b\|c", delimiter="|") == ["a", "b|c"]

    def test_empty_delimiter(self):
        with pytest.raises(ValueError):
            PathParser.split("a/b", delimiter="")


class TestSplitAlias:
    """Tests for PathParser.split_alias."""

    def test_without_alias(self):
        assert PathParser.split_alias("shelves['mystery']") == (None, "shelves['mystery']")

    def test_with_alias(self):
        assert PathParser.split_alias("@shelf = shelves['mystery']") == (
            "shelf",
            "shelves['mystery']",
        )

    def test_without_spaces(self):
        assert PathParser.split_alias("@s=shelves") == ("s", "shelves")

    @pytest.mark.parametrize("alias", ["class", "self", "my_val-1", "_x.y"])
    def test_alias_only_checks_first_character(self, alias):
        assert PathParser.split_alias(f"@{alias} = shelves") == (alias, "shelves")

    def test_alias_starting_with_digit(self):
        with pytest.raises(InvalidAliasNameError) as exc_info:
            PathParser.split_alias("@1st = shelves")

        assert exc_info.value.alias == "1st"
        assert exc_info.value.to_dict()["segment"] == "@1st = shelves"


class TestIsIdentifier:
    """Tests for PathParser.is_identifier."""

    @pytest.mark.parametrize("text", ["user", "_private", "__getitem__", "x1"])
    def test_identifiers(self, text):
        assert PathParser.is_identifier(text)

    @pytest.mark.parametrize(
        "text", ["1x", "a.b", "a b", "f()", "", "None", "True", "self", "lambda"]
    )
    def test_not_identifiers(self, text):
        assert not PathParser.is_identifier(text)


class TestValidate:
    """Tests for PathParser.validate."""

    def test_valid_path(self):
        path = "/bookstore/@shelf = shelves['mystery']/books[shelf.recommended_book_num]"
        assert PathParser.validate(path) == []

    def test_empty_path(self):
        assert PathParser.validate("//") == ["Path contains no steps"]

    def test_reports_each_bad_segment(self):
        errors = PathParser.validate("/@1x = bookstore/shelves[/books")

        assert len(errors) == 2
        assert errors[0].startswith("Segment 0: Wrong format variable defined '1x'")
        assert errors[1].startswith("Segment 1: Cannot parse expression 'shelves['")
