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

"""Declarative line input with loud failures.

Hand any binary stream to :class:`LineCursor` (``sys.stdin.buffer``, an open
file, a socket file) and describe the shape of each line instead of writing
parsing loops::

    from bad_input import LineCursor

    cursor = LineCursor.from_text("Very,8;fancy,82;string,11\n")
    w1, n1, w2, n2, w3, n3 = cursor.line().destruct_n(6, [",", ";"])
    assert f"{w1} {w2} {w3}" == "Very fancy string"
    assert n1.parse(int) + n2.parse(int) + n3.parse(int) == 101

Malformed input raises a :class:`BadInputError` subclass right away. Every
raising operation has a ``try_*`` twin that returns ``None`` instead.
"""

from __future__ import annotations

from ._protocols import ByteSource, ReadableSource
from .cursor import LineCursor
from .errors import (
    BadInputError,
    DelimiterNotFoundError,
    EndOfStreamError,
    InvalidEncodingError,
    ParseFailureError,
)
from .logging import get_logger
from .reader import DEFAULT_CHUNK_SIZE, ByteStreamReader
from .string import SplitPieces, StructuredString

__all__ = [
    "DEFAULT_CHUNK_SIZE",
    "BadInputError",
    "ByteSource",
    "ByteStreamReader",
    "DelimiterNotFoundError",
    "EndOfStreamError",
    "InvalidEncodingError",
    "LineCursor",
    "ParseFailureError",
    "ReadableSource",
    "SplitPieces",
    "StructuredString",
    "get_logger",
]
