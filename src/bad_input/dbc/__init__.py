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

"""Design-by-contract checks for :mod:`bad_input`.

Contracts are off unless ``BAD_INPUT_DBC`` is set to a truthy value or a test
forces them on with :func:`enable_dbc` / :func:`dbc_enabled`. They guard the
library's own invariants (output arity, delimiter-free results); argument
validation that callers rely on is always performed by the code itself.

Predicates return ``bool``, ``None`` (failure) or ``(bool, detail)``.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Iterator, Mapping, Sequence
from contextlib import contextmanager
from functools import wraps
from typing import ParamSpec, TypeVar, cast

P = ParamSpec("P")
R = TypeVar("R")

type ContractResult = bool | tuple[bool, *tuple[object, ...]] | None
ContractCallable = Callable[..., ContractResult | object]

_ENV_FLAG = "BAD_INPUT_DBC"
_forced_state: bool | None = None


def _coerce_flag(value: str | None) -> bool:
    if value is None:
        return False
    return value.strip().lower() not in {"", "0", "false", "off", "no"}


def dbc_active() -> bool:
    """Return ``True`` when contract checks should run."""

    if _forced_state is not None:
        return _forced_state
    return _coerce_flag(os.getenv(_ENV_FLAG))


def enable_dbc() -> None:
    """Force contract enforcement on."""

    global _forced_state
    _forced_state = True


def disable_dbc() -> None:
    """Force contract enforcement off."""

    global _forced_state
    _forced_state = False


@contextmanager
def dbc_enabled(*, active: bool = True) -> Iterator[None]:
    """Temporarily set the contract flag inside a ``with`` block."""

    global _forced_state
    previous = _forced_state
    _forced_state = active
    try:
        yield
    finally:
        _forced_state = previous


def _qualname(target: object) -> str:
    return getattr(target, "__qualname__", repr(target))


def _normalize(result: ContractResult | object) -> tuple[bool, str | None]:
    if isinstance(result, tuple):
        items = cast(Sequence[object], result)
        if not items:
            msg = "Contract callables must not return empty tuples"
            raise TypeError(msg)
        detail = None if len(items) == 1 else str(items[1])
        return bool(items[0]), detail
    if result is None:
        return False, None
    return bool(result), None


def _evaluate(
    *,
    kind: str,
    func: Callable[..., object],
    predicate: ContractCallable,
    args: tuple[object, ...],
    kwargs: Mapping[str, object],
) -> None:
    try:
        result = predicate(*args, **kwargs)
    except AssertionError:
        raise
    except Exception as exc:
        msg = (
            f"{kind} contract for {_qualname(func)} raised "
            f"{type(exc).__name__}: {exc}"
        )
        raise AssertionError(msg) from exc
    outcome, detail = _normalize(result)
    if outcome:
        return
    predicate_name = getattr(predicate, "__name__", repr(predicate))
    msg = (
        f"{kind} contract for {_qualname(func)} failed via {predicate_name}."
        f" Args={args!r} Kwargs={dict(kwargs)!r}"
    )
    if detail:
        msg = f"{msg} Details: {detail}"
    raise AssertionError(msg)


def ensure(*predicates: ContractCallable) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Check postconditions once the callable returns.

    Predicates receive the call arguments plus a ``result`` keyword. When the
    callable raises, the exception propagates without evaluating them.
    """

    if not predicates:
        msg = "@ensure expects at least one predicate"
        raise ValueError(msg)

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        @wraps(func)
        def wrapped(*args: P.args, **kwargs: P.kwargs) -> R:
            result = func(*args, **kwargs)
            if dbc_active():
                for predicate in predicates:
                    _evaluate(
                        kind="ensure",
                        func=func,
                        predicate=predicate,
                        args=tuple(args),
                        kwargs={**kwargs, "result": result},
                    )
            return result

        return wrapped

    return decorator


__all__ = [
    "ContractResult",
    "dbc_active",
    "dbc_enabled",
    "disable_dbc",
    "enable_dbc",
    "ensure",
]
