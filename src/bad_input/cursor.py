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

"""Line-oriented cursor over a :class:`~bad_input.reader.ByteStreamReader`."""

from __future__ import annotations

import sys
from collections.abc import Iterator
from typing import Self

from .dbc import ContractResult, ensure
from .errors import BadInputError, EndOfStreamError
from .reader import DEFAULT_CHUNK_SIZE, ByteStreamReader
from .string import StructuredString

__all__ = [
    "LineCursor",
]

_NEWLINE = 0x0A


def _strip_line_ending(line: str) -> str:
    line = line.removesuffix("\n")
    return line.removesuffix("\r")


def _is_unterminated(cursor: LineCursor, *, result: StructuredString) -> ContractResult:
    return "\n" not in result.text, "line contains a newline"


class LineCursor:
    """Read input line by line and hand each line out as a StructuredString.

    Lines end at ``\\n``; one ``\\r`` directly before it is dropped as well.
    The last line does not need a terminating newline.

    Example::

        cursor = LineCursor.from_text("Hello, world!\\nGood bye!")
        cursor.line()      # StructuredString(text='Hello, world!')
        cursor.line()      # StructuredString(text='Good bye!')
        cursor.try_line()  # None

    Reading from standard input::

        cursor = LineCursor.stdin()
        count = cursor.line().parse(int)
        for line in cursor.lines():
            name, score = line.split_n(2, " ")

    Failure policy: :meth:`line` and :meth:`lines` raise
    :class:`~bad_input.errors.InvalidEncodingError` when a line is not valid
    UTF-8, and :meth:`line` raises
    :class:`~bad_input.errors.EndOfStreamError` once the input is used up.
    :meth:`try_line` turns both into ``None``.
    """

    __slots__ = ("_line_number", "_reader")

    def __init__(self, source: object, *, chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        """Create a cursor over a binary stream (``readinto`` or ``read``).

        An existing :class:`ByteStreamReader` is used as is, together with
        any bytes it has already buffered.
        """
        if isinstance(source, ByteStreamReader):
            self._reader = source
        else:
            self._reader = ByteStreamReader(source, chunk_size=chunk_size)
        self._line_number = 0

    @classmethod
    def from_reader(cls, reader: ByteStreamReader) -> Self:
        """Create a cursor sharing an existing reader and its buffered bytes."""
        return cls(reader)

    @classmethod
    def from_bytes(
        cls,
        data: bytes | bytearray | memoryview,
        *,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> Self:
        return cls.from_reader(ByteStreamReader.from_bytes(data, chunk_size=chunk_size))

    @classmethod
    def from_text(cls, text: str, *, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Self:
        return cls.from_bytes(text.encode("utf-8"), chunk_size=chunk_size)

    @classmethod
    def stdin(cls, *, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Self:
        """Create a cursor over the process standard input."""
        return cls(sys.stdin.buffer, chunk_size=chunk_size)

    @property
    def reader(self) -> ByteStreamReader:
        """The reader this cursor pulls from."""
        return self._reader

    @property
    def line_number(self) -> int:
        """Number of lines delivered so far."""
        return self._line_number

    @ensure(_is_unterminated)
    def line(self) -> StructuredString:
        """Read the next line.

        Raises:
            EndOfStreamError: If there is no line left.
            InvalidEncodingError: If the line is not valid UTF-8.
        """
        raw = self._reader.read_until(_NEWLINE)
        self._line_number += 1
        return StructuredString(_strip_line_ending(raw))

    def try_line(self) -> StructuredString | None:
        """Read the next line, or return ``None`` when none can be produced.

        An undecodable line is consumed and reported as ``None`` as well, so
        a following call continues with the next line.
        """
        try:
            return self.line()
        except BadInputError:
            return None

    def lines(self) -> Iterator[StructuredString]:
        """Yield lines until the input ends.

        Each step consumes one line from the shared reader, so stopping early
        leaves the rest for later :meth:`line` calls. Invalid UTF-8 raises
        out of the iterator.
        """
        while True:
            try:
                line = self.line()
            except EndOfStreamError:
                return
            yield line

    def __iter__(self) -> Iterator[StructuredString]:
        return self.lines()

    def close(self) -> None:
        """Close the underlying reader and source."""
        self._reader.close()

    def __enter__(self) -> Self:
        """Enter context manager."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Exit context manager, closing the cursor."""
        self.close()

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(line_number={self._line_number}, "
            f"reader={self._reader!r})"
        )
