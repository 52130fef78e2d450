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

"""Protocols describing the byte sources a reader can consume.

Any object with ``readinto`` (binary files, ``io.BytesIO``,
``sys.stdin.buffer``) is a :class:`ByteSource`. Objects that only offer
``read`` are adapted by :func:`as_byte_source`.
"""

from __future__ import annotations

import io
from collections.abc import Buffer
from typing import Protocol, runtime_checkable

__all__ = [
    "ByteSource",
    "ReadableSource",
    "as_byte_source",
]


@runtime_checkable
class ByteSource(Protocol):
    """Anything that can fill a caller-provided buffer with bytes.

    ``readinto`` reports how many bytes were written into ``buffer``:

    - a positive count: that many bytes are available at the front of the
      buffer;
    - ``0``: the source is permanently exhausted;
    - ``None``: no data right now (non-blocking sources), try again.

    Raising :class:`InterruptedError` asks the caller to retry. Any other
    :class:`OSError` is fatal.
    """

    def readinto(self, buffer: Buffer, /) -> int | None:
        """Read bytes into ``buffer`` and return the count."""
        ...


@runtime_checkable
class ReadableSource(Protocol):
    """A source exposing ``read(size)`` only, such as a generator wrapper."""

    def read(self, size: int = -1, /) -> bytes | None:
        """Read up to ``size`` bytes. Empty bytes mean exhaustion.

        ``None`` means no data is available yet and the read is retried.
        """
        ...


class _ReadAdapter:
    """Present a ``read``-only source through the ``readinto`` protocol."""

    __slots__ = ("_source",)

    def __init__(self, source: ReadableSource) -> None:
        self._source = source

    def readinto(self, buffer: Buffer, /) -> int | None:
        view = memoryview(buffer).cast("B")
        data = self._source.read(len(view))
        if data is None:
            return None
        count = len(data)
        if count > len(view):
            msg = (
                f"{type(self._source).__name__}.read() returned {count} bytes "
                f"when at most {len(view)} were requested"
            )
            raise OSError(msg)
        view[:count] = data
        return count


def as_byte_source(source: object) -> ByteSource:
    """Return ``source`` as a :class:`ByteSource`, adapting if needed.

    Raises:
        TypeError: If ``source`` is text or offers neither ``readinto`` nor
            ``read``.
    """

    if isinstance(source, (str, bytes, bytearray, memoryview, io.TextIOBase)):
        msg = (
            f"Expected a binary stream, got {type(source).__name__}; "
            "use from_bytes() or from_text() for in-memory input."
        )
        raise TypeError(msg)
    if isinstance(source, ByteSource):
        return source
    if isinstance(source, ReadableSource):
        return _ReadAdapter(source)
    msg = f"{type(source).__name__} has neither readinto() nor read()"
    raise TypeError(msg)
