"""Early-return propagation of failures.

``propagate()`` evaluates to the Ok payload of a Result, or leaves the
enclosing ``@propagates`` function immediately with that Result's failure:

    @propagates(into=Result[int, DivideError])
    def average(total: int, count: int) -> Result[int, DivideError]:
        quotient = propagate(divide(total, count))
        return Result[int, DivideError].ok(quotient)

The failure payload is relayed as is: no wrapping, translation or retry.
"""

from __future__ import annotations

import functools
import inspect
import logging
from typing import TYPE_CHECKING, Any, ParamSpec, TypeVar, overload

from ditto.config import current_settings
from ditto.errors import EarlyReturn, PayloadTypeError
from ditto.result import Result

if TYPE_CHECKING:
    from collections.abc import Callable

__all__ = ["propagate", "propagates"]

logger = logging.getLogger(__name__)

T = TypeVar("T")
E = TypeVar("E")
P = ParamSpec("P")
R = TypeVar("R")


def propagate(result: Result[T, E]) -> T:
    """Return the Ok payload of ``result`` or relay its failure.

    Either way the payload is taken out of ``result``, which must not be read
    again. Outside a ``@propagates`` function a failure surfaces as an
    uncaught ``EarlyReturn``.
    """
    if not isinstance(result, Result):
        raise TypeError(f"propagate() expects a Result, got {type(result).__name__}")
    payload = result._take()
    if result.is_error():
        raise EarlyReturn(payload, origin=result)
    return payload


def _relay(exc: EarlyReturn, into: type[Result[Any, Any]], where: str) -> Result[Any, Any]:
    logger.debug("Propagating %r out of %s", exc.payload, where)
    origin = exc.origin
    kind = into._err_kind
    if kind is None:
        if isinstance(origin, Result) and origin._err_kind is None:
            return into.error()
        raise PayloadTypeError(
            f"{where} propagated {exc.payload!r} into {into.__name__}, "
            "which carries no failure payload",
            hint="The propagated and enclosing Results must share the failure type.",
        )
    # Relay the payload as is; never convert it through the Err constructor.
    if current_settings().validate_payloads and not kind.accepts(exc.payload):
        raise PayloadTypeError(
            f"{where} propagated {exc.payload!r}, which is not a failure of "
            f"{into.__name__}",
            hint="The propagated and enclosing Results must share the failure type.",
        )
    return into._staged(False, exc.payload)


@overload
def propagates(func: Callable[P, R], /) -> Callable[P, R]: ...


@overload
def propagates(
    *, into: type[Result[Any, Any]] | None = ...
) -> Callable[[Callable[P, R]], Callable[P, R]]: ...


def propagates(
    func: Callable[P, R] | None = None,
    /,
    *,
    into: type[Result[Any, Any]] | None = None,
) -> Any:
    """Mark a function as the frame ``propagate()`` returns from.

    Args:
        func: The function, when used as a bare ``@propagates``.
        into: Result class used to build the returned failure. It must share
            the failure type of the propagated results. Defaults to the
            untyped ``Result``.

    Coroutine functions are supported.
    """
    target = Result if into is None else into
    if not (isinstance(target, type) and issubclass(target, Result)):
        raise TypeError(f"into must be a Result class, got {target!r}")

    def decorate(fn: Callable[P, R]) -> Callable[P, R]:
        where = fn.__qualname__

        if inspect.iscoroutinefunction(fn):

            @functools.wraps(fn)
            async def async_wrapper(*args: P.args, **kwargs: P.kwargs) -> Any:
                try:
                    return await fn(*args, **kwargs)  # type: ignore[misc]
                except EarlyReturn as exc:
                    return _relay(exc, target, where)

            return async_wrapper  # type: ignore[return-value]

        @functools.wraps(fn)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> Any:
            try:
                return fn(*args, **kwargs)
            except EarlyReturn as exc:
                return _relay(exc, target, where)

        return wrapper  # type: ignore[return-value]

    if func is not None:
        return decorate(func)
    return decorate
