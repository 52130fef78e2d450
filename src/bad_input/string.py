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

"""Immutable text values with splitting, destructuring and typed parsing.

:class:`StructuredString` is what :class:`~bad_input.cursor.LineCursor`
hands out for every line. It describes the shape of a line declaratively::

    >>> line = StructuredString("Very,8;fancy,82;string,11")
    >>> w1, n1, w2, n2, w3, n3 = line.destruct_n(6, [",", ";"])
    >>> f"{w1} {w2} {w3}"
    'Very fancy string'
    >>> n1.parse(int) + n2.parse(int) + n3.parse(int)
    101

Every operation returns new instances; nothing is shared with the source
value or with the reader that produced it.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Sequence
from dataclasses import dataclass
from functools import total_ordering
from typing import TypeVar, cast, override

from .dbc import ContractResult, ensure
from .errors import BadInputError, DelimiterNotFoundError, ParseFailureError

__all__ = [
    "SplitPieces",
    "StructuredString",
]

T = TypeVar("T")

_PARSE_ERRORS = (ValueError, TypeError, ArithmeticError)


def _parse_bool(text: str) -> bool:
    if text == "true":
        return True
    if text == "false":
        return False
    msg = f"expected 'true' or 'false', got {text!r}"
    raise ValueError(msg)


type Delimiter = str | StructuredString


def _type_label(target: object) -> str:
    return getattr(target, "__qualname__", None) or repr(target)


def _delimiter_text(delimiter: Delimiter) -> str:
    if isinstance(delimiter, StructuredString):
        return delimiter.text
    return delimiter


def _separators(
    count: int, delimiters: Sequence[Delimiter] | Delimiter
) -> tuple[str, ...]:
    if count < 1:
        msg = f"Field count must be at least 1, got {count}"
        raise ValueError(msg)
    if isinstance(delimiters, (str, StructuredString)):
        delimiters = (delimiters,)
    separators = tuple(_delimiter_text(delimiter) for delimiter in delimiters)
    if not separators:
        msg = "At least one delimiter is required"
        raise ValueError(msg)
    if not all(separators):
        msg = f"Delimiters must not be empty: {separators!r}"
        raise ValueError(msg)
    return separators


def _has_requested_arity(
    value: StructuredString,
    count: int,
    delimiters: Sequence[Delimiter] | Delimiter,
    *,
    result: tuple[StructuredString, ...],
) -> ContractResult:
    return len(result) == count, f"expected {count} fields, got {len(result)}"


@total_ordering
@dataclass(frozen=True, slots=True, eq=False)
class StructuredString:
    """An immutable piece of text compared, hashed and ordered by content.

    Instances compare equal to plain ``str`` values with the same content, in
    both directions. Trimming is never implicit; call :meth:`trim`.
    """

    text: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.text, str):
            msg = f"StructuredString wraps str, got {type(self.text).__name__}"
            raise TypeError(msg)

    @classmethod
    def concat(cls, *values: object) -> StructuredString:
        """Join the text form of ``values`` without a separator.

        >>> StructuredString.concat("x=", 3, StructuredString(";"))
        StructuredString(text='x=3;')
        """
        return cls("".join(str(value) for value in values))

    def as_str(self) -> str:
        return self.text

    @property
    def byte_len(self) -> int:
        """Length of the UTF-8 encoding in bytes."""
        return len(self.text.encode("utf-8"))

    def to_bytes(self) -> bytes:
        return self.text.encode("utf-8")

    def chars(self) -> Iterator[str]:
        return iter(self.text)

    def is_empty(self) -> bool:
        return not self.text

    def parse(self, target: Callable[[str], T]) -> T:
        """Convert the whole text with ``target`` (``int``, ``float``, ...).

        ``bool`` accepts exactly ``"true"`` and ``"false"``. Surrounding
        whitespace is handed to ``target`` unchanged.

        Raises:
            ParseFailureError: If ``target`` rejects the text. The message
                names both the text and ``target``.
        """
        # bool() tests truthiness instead of parsing text.
        parser = _parse_bool if target is bool else target
        converter = cast(Callable[[str], T], parser)
        try:
            return converter(self.text)
        except _PARSE_ERRORS as exc:
            raise ParseFailureError(self.text, _type_label(target)) from exc

    def try_parse(self, target: Callable[[str], T]) -> T | None:
        """Like :meth:`parse`, returning ``None`` when conversion fails."""
        try:
            return self.parse(target)
        except BadInputError:
            return None

    def split(self, delimiter: Delimiter) -> SplitPieces:
        """Return the pieces between literal occurrences of ``delimiter``.

        Adjacent delimiters produce empty pieces, as do delimiters at either
        end. The result is lazy and can be iterated any number of times.

        Raises:
            ValueError: If ``delimiter`` is empty.
        """
        return SplitPieces(self.text, delimiter)

    @ensure(_has_requested_arity)
    def destruct_n(
        self, count: int, delimiters: Sequence[Delimiter] | Delimiter
    ) -> tuple[StructuredString, ...]:
        """Cut the text into exactly ``count`` fields.

        Delimiters are used in rotation: the first split uses
        ``delimiters[0]``, the next ``delimiters[1]``, wrapping around. After
        ``count - 1`` splits the rest of the text, delimiters included,
        becomes the final field. A single ``str`` or StructuredString is
        treated as a one-element delimiter list.

        >>> StructuredString("Very,8;fancy,82;string,11").destruct_n(5, [",", ";"])[-1]
        StructuredString(text='string,11')

        Raises:
            DelimiterNotFoundError: If a delimiter is missing before the
                final field is reached.
            ValueError: If ``count`` is below 1 or a delimiter is empty.
        """
        separators = _separators(count, delimiters)
        fields: list[StructuredString] = []
        rest = self.text
        index = 0
        while len(fields) < count - 1:
            delimiter = separators[index]
            head, found, tail = rest.partition(delimiter)
            if not found:
                raise DelimiterNotFoundError(
                    delimiter, rest, collected=len(fields), expected=count
                )
            fields.append(StructuredString(head))
            rest = tail
            index = (index + 1) % len(separators)
        fields.append(StructuredString(rest))
        return tuple(fields)

    def try_destruct_n(
        self, count: int, delimiters: Sequence[Delimiter] | Delimiter
    ) -> tuple[StructuredString, ...] | None:
        """Like :meth:`destruct_n`, returning ``None`` on a missing delimiter."""
        try:
            return self.destruct_n(count, delimiters)
        except BadInputError:
            return None

    def split_n(self, count: int, delimiter: Delimiter) -> tuple[StructuredString, ...]:
        """Split into exactly ``count`` fields; the last keeps the remainder."""
        return self.destruct_n(count, (delimiter,))

    def try_split_n(
        self, count: int, delimiter: Delimiter
    ) -> tuple[StructuredString, ...] | None:
        return self.try_destruct_n(count, (delimiter,))

    def split_at(self, offset: int) -> tuple[StructuredString, StructuredString]:
        """Split into the first ``offset`` characters and the rest.

        Raises:
            IndexError: If ``offset`` lies outside ``0..len(self)``.
        """
        if not 0 <= offset <= len(self.text):
            msg = f"Offset {offset} outside 0..{len(self.text)}"
            raise IndexError(msg)
        head, tail = self.text[:offset], self.text[offset:]
        return StructuredString(head), StructuredString(tail)

    def trim(self) -> StructuredString:
        """Return a copy without leading and trailing whitespace."""
        return StructuredString(self.text.strip())

    def __len__(self) -> int:
        return len(self.text)

    def __contains__(self, item: object) -> bool:
        return str(item) in self.text

    def __add__(self, value: object) -> StructuredString:
        return StructuredString(self.text + str(value))

    def __radd__(self, value: object) -> StructuredString:
        return StructuredString(str(value) + self.text)

    @override
    def __eq__(self, other: object) -> bool:
        if isinstance(other, StructuredString):
            return self.text == other.text
        if isinstance(other, str):
            return self.text == other
        return NotImplemented

    def __lt__(self, other: object) -> bool:
        if isinstance(other, StructuredString):
            return self.text < other.text
        if isinstance(other, str):
            return self.text < other
        return NotImplemented

    @override
    def __hash__(self) -> int:
        return hash(self.text)

    @override
    def __str__(self) -> str:
        return self.text

    @override
    def __format__(self, format_spec: str) -> str:
        return format(self.text, format_spec)


class SplitPieces(Iterable[StructuredString]):
    """Lazy, restartable view over the pieces of a split."""

    __slots__ = ("_delimiter", "_text")

    def __init__(self, text: str, delimiter: Delimiter) -> None:
        delimiter = _delimiter_text(delimiter)
        if not delimiter:
            msg = "Delimiter must not be empty"
            raise ValueError(msg)
        self._text = text
        self._delimiter = delimiter

    @override
    def __iter__(self) -> Iterator[StructuredString]:
        text, delimiter = self._text, self._delimiter
        start = 0
        while (index := text.find(delimiter, start)) >= 0:
            yield StructuredString(text[start:index])
            start = index + len(delimiter)
        yield StructuredString(text[start:])

    def __repr__(self) -> str:
        return f"SplitPieces(text={self._text!r}, delimiter={self._delimiter!r})"
