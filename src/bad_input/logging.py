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

"""Structured logging helpers for :mod:`bad_input`.

The library only ever logs at ``DEBUG`` and never installs handlers on its
own. Applications that want to see the records attach their own handlers to
the ``bad_input`` logger hierarchy; each record carries ``event`` and
``context`` attributes for formatters to use.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, MutableMapping
from typing import Any, cast, override

__all__ = [
    "StructuredLogger",
    "get_logger",
]


class StructuredLogger(logging.LoggerAdapter[logging.Logger]):
    """Logger adapter that attaches an ``event`` name and a ``context`` payload.

    Every call must name its event::

        logger.debug("Source exhausted.", event="reader.eof", context={"pending": 0})

    Keyword ``extra`` values are folded into ``context`` alongside the context
    bound through :meth:`bind`.
    """

    def __init__(
        self,
        logger: logging.Logger,
        *,
        context: Mapping[str, object] | None = None,
    ) -> None:
        super().__init__(logger, dict(context) if context is not None else {})

    def bind(self, **context: object) -> StructuredLogger:
        """Return a new adapter with ``context`` merged into the bound payload."""

        base = cast(Mapping[str, object], self.extra)
        return type(self)(self.logger, context={**dict(base), **context})

    @override
    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        extra = kwargs.get("extra")
        if extra is None:
            extra = {}
        if not isinstance(extra, MutableMapping):
            raise TypeError("Structured logs require a mutable mapping for extra.")
        extra_mapping = cast(MutableMapping[str, object], extra)

        payload: dict[str, object] = dict(cast(Mapping[str, object], self.extra))

        inline_context = kwargs.pop("context", None)
        if inline_context is not None:
            if not isinstance(inline_context, Mapping):
                raise TypeError("context must be a mapping when provided.")
            payload.update(cast(Mapping[str, object], inline_context))

        event = kwargs.pop("event", None)
        if event is None:
            event = extra_mapping.pop("event", None)
        if not isinstance(event, str):
            raise TypeError("Structured logs require an 'event' field.")

        for key in tuple(extra_mapping):
            if key != "event":
                payload[key] = extra_mapping.pop(key)

        kwargs["extra"] = {"event": event, "context": payload}
        return msg, kwargs


def get_logger(
    name: str,
    *,
    logger_override: logging.Logger | None = None,
    context: Mapping[str, object] | None = None,
) -> StructuredLogger:
    """Return a :class:`StructuredLogger` scoped to ``name``.

    ``logger_override`` lets tests route records to a dedicated logger while
    keeping the structured payload.
    """

    base_logger = (
        logger_override if logger_override is not None else logging.getLogger(name)
    )
    return StructuredLogger(base_logger, context=context)

