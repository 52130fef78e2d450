# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Tests for StructuredString splitting, destructuring and parsing."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from fractions import Fraction

import pytest

from bad_input import (
    BadInputError,
    DelimiterNotFoundError,
    ParseFailureError,
    SplitPieces,
    StructuredString,
)

FANCY = StructuredString("Very,8;fancy,82;string,11")


@dataclass
class RadixParser:
    """Callable parser object; dataclasses with eq are unhashable."""

    base: int = 10

    def __call__(self, text: str) -> int:
        return int(text, self.base)


class TestConstruction:
    def test_default_is_empty(self) -> None:
        value = StructuredString()
        assert value.is_empty()
        assert not value
        assert len(value) == 0

    def test_rejects_non_text(self) -> None:
        with pytest.raises(TypeError, match="wraps str"):
            StructuredString(b"bytes")  # type: ignore[arg-type]

    def test_is_immutable(self) -> None:
        value = StructuredString("fixed")
        with pytest.raises(AttributeError):
            value.text = "changed"  # type: ignore[misc]

    def test_text_views(self) -> None:
        value = StructuredString("née")
        assert value.as_str() == "née"
        assert str(value) == "née"
        assert len(value) == 3
        assert value.byte_len == 4
        assert value.to_bytes() == "née".encode()
        assert list(value.chars()) == ["n", "é", "e"]

    def test_format_applies_to_text(self) -> None:
        assert f"[{StructuredString('ab'):>4}]" == "[  ab]"

    def test_contains(self) -> None:
        assert "fancy" in FANCY
        assert "plain" not in FANCY


class TestEquality:
    def test_equal_to_plain_text_both_ways(self) -> None:
        value = StructuredString("same")
        assert value == "same"
        assert "same" == value
        assert value != "other"
        assert "other" != value

    def test_equal_instances_share_hash(self) -> None:
        assert hash(StructuredString("k")) == hash(StructuredString("k"))
        assert hash(StructuredString("k")) == hash("k")
        assert {StructuredString("k"): 1}["k"] == 1

    def test_not_equal_to_unrelated_types(self) -> None:
        assert StructuredString("1") != 1

    def test_ordering_by_content(self) -> None:
        values = [StructuredString("b"), StructuredString("a"), StructuredString("c")]
        assert sorted(values) == ["a", "b", "c"]
        assert StructuredString("a") < "b"
        assert "b" > StructuredString("a")
        assert StructuredString("b") >= StructuredString("b")

    def test_no_implicit_trimming(self) -> None:
        assert StructuredString(" x ") != "x"


class TestParse:
    @pytest.mark.parametrize(
        ("text", "target", "expected"),
        [
            ("42", int, 42),
            ("-7", int, -7),
            ("2.5", float, 2.5),
            ("1.10", Decimal, Decimal("1.10")),
            ("3/4", Fraction, Fraction(3, 4)),
            ("true", bool, True),
            ("false", bool, False),
            ("word", str, "word"),
        ],
    )
    def test_converts_with_target(
        self, text: str, target: type, expected: object
    ) -> None:
        assert StructuredString(text).parse(target) == expected

    def test_accepts_plain_functions(self) -> None:
        def hex_int(text: str) -> int:
            return int(text, 16)

        assert StructuredString("ff").parse(hex_int) == 255

    def test_accepts_unhashable_callable_objects(self) -> None:
        parser = RadixParser(base=16)

        assert StructuredString("ff").parse(parser) == 255
        assert StructuredString("xyz").try_parse(parser) is None
        with pytest.raises(ParseFailureError, match="RadixParser"):
            StructuredString("xyz").parse(parser)

    def test_failure_names_text_and_target(self) -> None:
        with pytest.raises(ParseFailureError) as excinfo:
            StructuredString("abc").parse(int)

        error = excinfo.value
        assert str(error) == 'Could not parse "abc" to int'
        assert error.text == "abc"
        assert error.target == "int"
        assert isinstance(error.__cause__, ValueError)

    def test_decimal_failure_is_parse_failure(self) -> None:
        with pytest.raises(ParseFailureError, match="Decimal"):
            StructuredString("nope").parse(Decimal)

    def test_bool_does_not_use_truthiness(self) -> None:
        with pytest.raises(ParseFailureError, match="bool"):
            StructuredString("yes").parse(bool)

    def test_try_parse_returns_none_on_failure(self) -> None:
        assert StructuredString("12").try_parse(int) == 12
        assert StructuredString("1 2").try_parse(int) is None

    def test_parse_failure_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            StructuredString("x").parse(float)


class TestSplit:
    def test_splits_on_literal_substring(self) -> None:
        assert list(StructuredString("a::b::c").split("::")) == ["a", "b", "c"]

    def test_adjacent_and_edge_delimiters_yield_empty_pieces(self) -> None:
        assert list(StructuredString(",a,,b,").split(",")) == ["", "a", "", "b", ""]

    def test_no_delimiter_yields_whole_text(self) -> None:
        assert list(StructuredString("abc").split(";")) == ["abc"]

    def test_empty_text_yields_single_empty_piece(self) -> None:
        assert list(StructuredString("").split(",")) == [""]

    def test_pieces_are_restartable(self) -> None:
        pieces = StructuredString("1 2 3").split(" ")
        assert isinstance(pieces, SplitPieces)
        assert [p.parse(int) for p in pieces] == [1, 2, 3]
        assert [p.parse(int) for p in pieces] == [1, 2, 3]

    def test_pieces_are_lazy(self) -> None:
        pieces = iter(StructuredString("1 x").split(" "))
        assert next(pieces).parse(int) == 1

    def test_rejects_empty_delimiter(self) -> None:
        with pytest.raises(ValueError, match="empty"):
            StructuredString("abc").split("")

    def test_accepts_structured_delimiter(self) -> None:
        pieces = StructuredString("a,b").split(StructuredString(","))
        assert list(pieces) == ["a", "b"]

    def test_matches_str_split(self) -> None:
        text = "a, b,, c ,"
        assert list(StructuredString(text).split(",")) == text.split(",")


class TestDestruct:
    def test_rotating_delimiters(self) -> None:
        assert FANCY.destruct_n(6, [",", ";"]) == (
            "Very",
            "8",
            "fancy",
            "82",
            "string",
            "11",
        )

    def test_last_field_absorbs_remainder(self) -> None:
        assert FANCY.destruct_n(5, [",", ";"]) == (
            "Very",
            "8",
            "fancy",
            "82",
            "string,11",
        )

    def test_single_field_is_whole_text(self) -> None:
        assert FANCY.destruct_n(1, [",", ";"]) == (FANCY,)

    def test_single_string_delimiter(self) -> None:
        assert StructuredString("a b c").destruct_n(2, " ") == ("a", "b c")

    def test_trailing_delimiter_gives_empty_last_field(self) -> None:
        assert StructuredString("k=").destruct_n(2, ["="]) == ("k", "")

    def test_missing_delimiter_raises(self) -> None:
        with pytest.raises(DelimiterNotFoundError) as excinfo:
            FANCY.destruct_n(7, [",", ";"])

        error = excinfo.value
        assert error.delimiter == ";"
        assert error.remaining == "11"
        assert error.collected == 5
        assert error.expected == 7
        assert "field 6 of 7" in str(error)

    def test_try_destruct_returns_none_when_delimiter_missing(self) -> None:
        assert FANCY.try_destruct_n(7, [",", ";"]) is None
        assert FANCY.try_destruct_n(2, [";"]) == ("Very,8", "fancy,82;string,11")

    @pytest.mark.parametrize(
        ("count", "delimiters", "message"),
        [
            (0, [","], "at least 1"),
            (2, [], "At least one delimiter"),
            (2, [",", ""], "must not be empty"),
        ],
    )
    def test_precondition_errors_raise_in_both_tiers(
        self, count: int, delimiters: list[str], message: str
    ) -> None:
        with pytest.raises(ValueError, match=message):
            FANCY.destruct_n(count, delimiters)
        with pytest.raises(ValueError, match=message):
            FANCY.try_destruct_n(count, delimiters)

    def test_precondition_errors_are_not_bad_input_errors(self) -> None:
        with pytest.raises(ValueError) as excinfo:
            FANCY.destruct_n(0, [","])
        assert not isinstance(excinfo.value, BadInputError)

    def test_structured_delimiters(self) -> None:
        delimiters = [StructuredString(","), StructuredString(";")]
        assert FANCY.destruct_n(6, delimiters) == FANCY.destruct_n(6, [",", ";"])
        assert FANCY.destruct_n(2, StructuredString(";")) == (
            "Very,8",
            "fancy,82;string,11",
        )

    def test_fields_are_independent_values(self) -> None:
        first, rest = FANCY.split_n(2, ",")
        assert isinstance(first, StructuredString)
        assert rest.split_n(2, ";") == ("8", "fancy,82;string,11")


class TestSplitN:
    def test_keeps_remainder_in_last_field(self) -> None:
        assert StructuredString("a b c d").split_n(3, " ") == ("a", "b", "c d")

    def test_unpacks_into_names(self) -> None:
        name, age = StructuredString("Ada 36").split_n(2, " ")
        assert name == "Ada"
        assert age.parse(int) == 36

    def test_too_few_pieces_raises(self) -> None:
        with pytest.raises(DelimiterNotFoundError):
            StructuredString("a b").split_n(3, " ")

    def test_accepts_structured_delimiter(self) -> None:
        text = StructuredString("a b c")
        assert text.split_n(2, StructuredString(" ")) == ("a", "b c")

    def test_try_split_n(self) -> None:
        assert StructuredString("a b").try_split_n(3, " ") is None
        assert StructuredString("a b").try_split_n(2, " ") == ("a", "b")


class TestSplitAt:
    def test_splits_at_character_offset(self) -> None:
        assert StructuredString("héllo").split_at(2) == ("hé", "llo")

    @pytest.mark.parametrize("offset", [0, 5])
    def test_bounds_are_inclusive(self, offset: int) -> None:
        head, tail = StructuredString("hello").split_at(offset)
        assert head + tail == "hello"

    @pytest.mark.parametrize("offset", [-1, 6])
    def test_out_of_range_offset_raises(self, offset: int) -> None:
        with pytest.raises(IndexError):
            StructuredString("hello").split_at(offset)


class TestTrimAndConcat:
    def test_trim_returns_new_value(self) -> None:
        original = StructuredString("\t padded \n")
        assert original.trim() == "padded"
        assert original == "\t padded \n"

    def test_trim_unicode_whitespace(self) -> None:
        assert StructuredString("　x ").trim() == "x"

    def test_add_appends_display_form(self) -> None:
        result = StructuredString("x=") + 3 + ";" + 2.5
        assert isinstance(result, StructuredString)
        assert result == "x=3;2.5"

    def test_radd_prepends(self) -> None:
        result = "id:" + StructuredString("7")
        assert isinstance(result, StructuredString)
        assert result == "id:7"

    def test_concat_folds_values(self) -> None:
        parts = ["a", 1, StructuredString("b"), None]
        assert StructuredString.concat(*parts) == "a1bNone"

    def test_sum_with_empty_start(self) -> None:
        assert sum(["a", "b", 3], StructuredString()) == "ab3"  # type: ignore[arg-type]
