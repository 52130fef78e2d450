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

"""Base exception hierarchy for :mod:`bad_input`.

Every failure the library reports on purpose derives from
:class:`BadInputError`. Each subclass also inherits from the closest builtin
exception so callers that do not know about this library can still catch
``EOFError`` or ``ValueError``.

The primary operations (``line()``, ``parse()``, ``destruct_n()``, ...) raise
these errors. Their ``try_*`` counterparts catch :class:`BadInputError` and
return ``None`` instead, discarding the detail. Errors outside this hierarchy
(bad arguments, ``OSError`` from the underlying source) propagate from both
tiers.
"""

from __future__ import annotations

from typing import override


class BadInputError(Exception):
    """Base class for all bad_input exceptions.

    Example:
        Catch any input-shape error with a single handler::

            try:
                name, age = cursor.line().split_n(2, " ")
            except BadInputError as e:
                logger.error("Malformed input: %s", e)
    """


class EndOfStreamError(BadInputError, EOFError):
    """Raised when a line is requested but the source has no bytes left.

    An exhausted reader stays exhausted: every later read raises again.
    """


class InvalidEncodingError(BadInputError, ValueError):
    """Raised when an assembled line is not valid UTF-8.

    The check runs once on the complete line, never on individual reads, so
    a multi-byte character split across two reads is not an error.

    Attributes:
        data: The raw bytes that failed to decode. They have been consumed
            from the source; the next read continues after them.
        encoding: Name of the expected encoding.
    """

    def __init__(self, data: bytes, *, encoding: str = "utf-8") -> None:
        super().__init__(data, encoding)
        self.data = data
        self.encoding = encoding

    @override
    def __str__(self) -> str:
        return f"Line is not valid {self.encoding}: {self.data!r}"


class ParseFailureError(BadInputError, ValueError):
    """Raised when text cannot be converted to the requested type.

    Attributes:
        text: The text that was handed to the conversion.
        target: Display label of the conversion target (e.g. ``"int"``).
    """

    def __init__(self, text: str, target: str) -> None:
        super().__init__(text, target)
        self.text = text
        self.target = target

    @override
    def __str__(self) -> str:
        return f'Could not parse "{self.text}" to {self.target}'


class DelimiterNotFoundError(BadInputError, ValueError):
    """Raised when destructuring runs out of delimiters before the last field.

    Attributes:
        delimiter: The separator that could not be located.
        remaining: Text left over when the search failed.
        collected: Number of fields produced before the failure.
        expected: Number of fields requested.
    """

    def __init__(
        self, delimiter: str, remaining: str, *, collected: int, expected: int
    ) -> None:
        super().__init__(delimiter, remaining, collected, expected)
        self.delimiter = delimiter
        self.remaining = remaining
        self.collected = collected
        self.expected = expected

    @override
    def __str__(self) -> str:
        return (
            f"Delimiter {self.delimiter!r} not found in {self.remaining!r} "
            f"(field {self.collected + 1} of {self.expected})"
        )


__all__ = [
    "BadInputError",
    "DelimiterNotFoundError",
    "EndOfStreamError",
    "InvalidEncodingError",
    "ParseFailureError",
]
