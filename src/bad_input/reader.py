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

"""Buffered delimiter search over an arbitrary byte source.

:class:`ByteStreamReader` pulls fixed-size chunks from its source into a
scratch buffer and keeps whatever follows the first delimiter in a carry-over
buffer, so a chunk holding several delimiters is never re-read and a
delimiter spread over many chunks is still found. Text is decoded once per
delivered piece, after it has been assembled, which keeps multi-byte UTF-8
characters intact across chunk boundaries.
"""

from __future__ import annotations

import io
from typing import Final, Self

from ._protocols import as_byte_source
from .dbc import ContractResult, ensure
from .errors import BadInputError, EndOfStreamError, InvalidEncodingError
from .logging import StructuredLogger, get_logger

__all__ = [
    "DEFAULT_CHUNK_SIZE",
    "ByteStreamReader",
]

#: Default scratch buffer size in bytes.
DEFAULT_CHUNK_SIZE: Final[int] = 1024

logger: StructuredLogger = get_logger(__name__, context={"component": "reader"})


def _delimiter_byte(delimiter: int | bytes) -> int:
    if isinstance(delimiter, int):
        if not 0 <= delimiter <= 0xFF:
            msg = f"Delimiter byte out of range: {delimiter}"
            raise ValueError(msg)
        return delimiter
    if isinstance(delimiter, (bytes, bytearray)) and len(delimiter) == 1:
        return delimiter[0]
    msg = f"Delimiter must be a single byte, got {delimiter!r}"
    raise ValueError(msg)


def _excludes_delimiter(
    reader: ByteStreamReader, delimiter: int | bytes, *, result: str
) -> ContractResult:
    byte = _delimiter_byte(delimiter)
    if byte >= 0x80:
        return True
    return chr(byte) not in result, f"delimiter {byte:#04x} leaked into result"


class ByteStreamReader:
    """Read delimiter-terminated pieces of text from a byte source.

    The reader owns ``source`` exclusively: nothing else may read from it
    while the reader is alive. Bytes read past a delimiter stay in the
    reader and are lost when it is discarded.

    Example::

        reader = ByteStreamReader.from_bytes(b"a,b,c")
        reader.read_until(b",")    # "a"
        reader.read_until(b",")    # "b"
        reader.read_until(b",")    # "c"  (unterminated tail, delivered once)
        reader.try_read_until(b",")  # None
    """

    __slots__ = (
        "_carry",
        "_closed",
        "_encoding",
        "_exhausted",
        "_readinto",
        "_scratch",
        "_source",
    )

    def __init__(
        self,
        source: object,
        *,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        encoding: str = "utf-8",
    ) -> None:
        """Wrap ``source`` for delimiter-based reading.

        Args:
            source: A binary stream offering ``readinto`` or ``read``.
            chunk_size: Size of the scratch buffer used for each raw read.
            encoding: Text encoding (only ``"utf-8"`` is supported).

        Raises:
            TypeError: If ``source`` is not a binary stream.
            ValueError: If ``chunk_size`` is not positive or ``encoding``
                is not ``"utf-8"``.
        """
        if chunk_size <= 0:
            msg = f"chunk_size must be positive, got {chunk_size}"
            raise ValueError(msg)
        if encoding.replace("_", "-").lower() not in {"utf-8", "utf8"}:
            msg = f"Only 'utf-8' encoding is supported, got: {encoding}"
            raise ValueError(msg)

        byte_source = as_byte_source(source)
        self._source = source
        # readinto1 performs at most one raw read, so interactive pipes are
        # not forced to fill the whole scratch buffer before returning.
        self._readinto = getattr(byte_source, "readinto1", byte_source.readinto)
        self._scratch = bytearray(chunk_size)
        self._carry = bytearray()
        self._encoding = "utf-8"
        self._exhausted = False
        self._closed = False

    @classmethod
    def from_bytes(
        cls,
        data: bytes | bytearray | memoryview,
        *,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        encoding: str = "utf-8",
    ) -> Self:
        """Create a reader over an in-memory copy of ``data``."""
        return cls(io.BytesIO(bytes(data)), chunk_size=chunk_size, encoding=encoding)

    @property
    def chunk_size(self) -> int:
        """Capacity of the scratch buffer."""
        return len(self._scratch)

    @property
    def encoding(self) -> str:
        """Text encoding (always ``'utf-8'``)."""
        return self._encoding

    @property
    def exhausted(self) -> bool:
        """True once the source reported end of stream."""
        return self._exhausted

    @property
    def pending(self) -> int:
        """Number of bytes read from the source but not yet delivered."""
        return len(self._carry)

    @property
    def closed(self) -> bool:
        """True if the reader has been closed."""
        return self._closed

    def _check_closed(self) -> None:
        if self._closed:
            msg = "I/O operation on closed reader"
            raise ValueError(msg)

    @ensure(_excludes_delimiter)
    def read_until(self, delimiter: int | bytes) -> str:
        """Return the text before the next ``delimiter``, consuming both.

        The delimiter itself is dropped. When the source ends without a
        final delimiter, the remaining bytes are returned once as the last
        piece.

        Raises:
            EndOfStreamError: If no bytes are left.
            InvalidEncodingError: If the piece is not valid UTF-8. The bytes
                are consumed regardless.
            ValueError: If ``delimiter`` is not a single byte or the reader
                is closed.
            OSError: Propagated from the source (``InterruptedError`` is
                retried instead).
        """
        self._check_closed()
        data = self._take_until(_delimiter_byte(delimiter))
        if data is None:
            raise EndOfStreamError("No more input")
        try:
            return data.decode(self._encoding)
        except UnicodeDecodeError as exc:
            logger.debug(
                "Discarding undecodable piece.",
                event="reader.invalid_encoding",
                context={"size": len(data), "position": exc.start},
            )
            raise InvalidEncodingError(data, encoding=self._encoding) from exc

    def try_read_until(self, delimiter: int | bytes) -> str | None:
        """Like :meth:`read_until`, returning ``None`` instead of raising.

        Only end of stream and encoding failures become ``None``; argument
        and I/O errors still raise.
        """
        try:
            return self.read_until(delimiter)
        except BadInputError:
            return None

    def _take_until(self, delimiter: int) -> bytes | None:
        index = self._carry.find(delimiter)
        if index >= 0:
            piece = bytes(self._carry[:index])
            del self._carry[: index + 1]
            return piece

        pending = self._carry
        self._carry = bytearray()
        try:
            while not self._exhausted:
                count = self._fill()
                if count == 0:
                    self._exhausted = True
                    logger.debug(
                        "Source exhausted.",
                        event="reader.eof",
                        context={"pending": len(pending)},
                    )
                    break
                index = self._scratch.find(delimiter, 0, count)
                if index < 0:
                    pending += self._scratch[:count]
                    continue
                pending += self._scratch[:index]
                self._carry += self._scratch[index + 1 : count]
                return bytes(pending)
        except BaseException:
            self._carry[:0] = pending
            raise

        if not pending:
            return None
        logger.debug(
            "Flushing unterminated final piece.",
            event="reader.flush",
            context={"size": len(pending)},
        )
        return bytes(pending)

    def _fill(self) -> int:
        while True:
            try:
                count = self._readinto(self._scratch)
            except InterruptedError:
                logger.debug("Read interrupted, retrying.", event="reader.retry")
                continue
            if count is None:
                continue
            return count

    def close(self) -> None:
        """Close the reader and the underlying source, if it can be closed."""
        if self._closed:
            return
        self._closed = True
        self._carry.clear()
        close = getattr(self._source, "close", None)
        if callable(close):
            close()

    def __enter__(self) -> Self:
        """Enter context manager."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Exit context manager, closing the reader."""
        self.close()

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(chunk_size={self.chunk_size}, "
            f"pending={self.pending}, exhausted={self._exhausted})"
        )
