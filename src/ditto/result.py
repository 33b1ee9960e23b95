"""Result: a value holding either an Ok payload or an Err payload.

A ``Result`` is a tagged union: one payload slot plus a discriminant recording
which alternative is live. Callers check ``is_ok()`` / ``is_error()`` before
reading; reading the wrong alternative is a contract violation reported through
``ditto.assertions``, never a returned error.

Subscripting selects one of three forms and enables payload type checks:

- ``Result[int, DivideError]``: full form, either side carries a payload.
- ``Result[int, None]``: Ok-only form, failures carry no details.
- ``Result[None, DivideError]``: Err-only form, successes carry no value.

The bare ``Result`` is untyped and accepts any payload on either side.

Example:
    IntResult = Result[int, DivideError]

    def divide(a: int, b: int) -> Result[int, DivideError]:
        if b == 0:
            return IntResult.error(DivideError.DIVIDE_BY_ZERO)
        return IntResult.ok(a // b)
"""

from __future__ import annotations

from copy import deepcopy
from enum import Enum
from functools import cache
import logging
from typing import (
    TYPE_CHECKING,
    Any,
    ClassVar,
    Final,
    Generic,
    ParamSpec,
    Self,
    TypeVar,
    get_origin,
)

from ditto._kinds import PayloadKind, describe
from ditto.assertions import verify
from ditto.config import current_settings
from ditto.errors import ConfigurationError, PayloadTypeError

if TYPE_CHECKING:
    from collections.abc import Callable

__all__ = ["MOVED", "Form", "Result"]

logger = logging.getLogger(__name__)

T = TypeVar("T")
E = TypeVar("E")
U = TypeVar("U")
F = TypeVar("F")


class _Moved:
    """Marker left in a payload slot after the payload was taken or moved."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "<moved>"

    def __copy__(self) -> _Moved:
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> _Moved:
        return self


MOVED: Final = _Moved()


class Form(str, Enum):
    """Which sides of a Result carry a payload."""

    FULL = "full"
    OK_ONLY = "ok_only"
    ERR_ONLY = "err_only"


_ANY: Final = PayloadKind(Any)


class Result(Generic[T, E]):
    """Either an Ok payload or an Err payload, never both."""

    __slots__ = ("_consumed", "_is_ok", "_payload")

    # None marks a side that carries no payload.
    _ok_kind: ClassVar[PayloadKind | None] = _ANY
    _err_kind: ClassVar[PayloadKind | None] = _ANY
    form: ClassVar[Form] = Form.FULL

    _is_ok: bool
    _payload: Any
    _consumed: bool

    def __class_getitem__(cls, params: Any) -> Any:
        if cls is not Result:
            raise ConfigurationError(
                f"{cls.__name__} is already specialized",
                hint="Subscript the bare Result class.",
            )
        if not isinstance(params, tuple) or len(params) != 2:
            raise TypeError("Result takes exactly two type parameters: Result[Ok, Err]")
        if any(_is_generic_parameter(p) for p in params):
            # Keep generic annotations such as Result[T, E] working.
            return super().__class_getitem__(params)  # type: ignore[misc]
        ok, err = (_normalize(p) for p in params)
        return _specialize(ok, err)

    def __init__(self, value: T | E) -> None:
        """Build a Result from a bare payload, inferring the live alternative."""
        cls = type(self)
        if cls is Result:
            raise PayloadTypeError(
                "An untyped Result cannot infer which alternative a value is",
                hint="Use Result.ok(value) or Result.error(value), or subscript "
                "Result with distinct types.",
            )
        ok_kind, err_kind = cls._ok_kind, cls._err_kind
        ok_fits = ok_kind is not None and ok_kind.accepts(value)
        err_fits = err_kind is not None and err_kind.accepts(value)

        if ok_fits and err_fits:
            # Both accept: the side declared as exactly type(value) wins.
            ok_exact = ok_kind.is_exact(value)  # type: ignore[union-attr]
            err_exact = err_kind.is_exact(value)  # type: ignore[union-attr]
            if ok_exact == err_exact:
                raise PayloadTypeError(
                    f"{value!r} fits both alternatives of {cls.__name__}",
                    hint="Use .ok() or .error() to choose explicitly.",
                )
            is_ok = ok_exact
        elif ok_fits or err_fits:
            is_ok = ok_fits
        else:
            raise PayloadTypeError(
                f"{value!r} is not a valid payload for {cls.__name__}",
            )
        self._place(is_ok, value)

    def _place(self, is_ok: bool, payload: Any) -> None:
        self._is_ok = is_ok
        self._payload = payload
        self._consumed = False

    @classmethod
    def _staged(cls, is_ok: bool, payload: Any) -> Self:
        result = cls.__new__(cls)
        result._place(is_ok, payload)
        return result

    @classmethod
    def _emplace(
        cls,
        kind: PayloadKind | None,
        side: str,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> Any:
        if kind is None:
            if args or kwargs:
                raise PayloadTypeError(
                    f"{cls.__name__}.{side}() takes no arguments: "
                    f"this form carries no {side} payload"
                )
            return None
        return kind.build(args, kwargs, validate=current_settings().validate_payloads)

    # --- Construction ---

    @classmethod
    def ok(cls, *args: Any, **kwargs: Any) -> Self:
        """Build a success.

        A single argument that already is a valid Ok payload is stored as is;
        other arguments are forwarded to the Ok type's constructor. A
        conversion that loses numeric precision, such as 3.7 to int, is
        rejected. The Err-only form takes no arguments.
        """
        return cls._staged(True, cls._emplace(cls._ok_kind, "ok", args, kwargs))

    @classmethod
    def error(cls, *args: Any, **kwargs: Any) -> Self:
        """Build a failure. Symmetric to :meth:`ok`."""
        return cls._staged(False, cls._emplace(cls._err_kind, "error", args, kwargs))

    # --- Discriminant ---

    def is_ok(self) -> bool:
        return self._is_ok

    def is_error(self) -> bool:
        return not self._is_ok

    # --- Access ---

    def _ensure_live(self, action: str) -> None:
        if current_settings().guard_consumed:
            verify(
                not self._consumed,
                f"payload of {type(self).__name__} was already taken or moved "
                f"and cannot be {action}",
            )

    def _check_readable(self, want_ok: bool) -> None:
        side = "Ok" if want_ok else "Err"
        verify(
            self._is_ok is want_ok,
            f"{side} payload read from {self!r}",
        )
        kind = self._ok_kind if want_ok else self._err_kind
        verify(kind is not None, f"{type(self).__name__} carries no {side} payload")
        self._ensure_live("read")

    def _release(self) -> Any:
        payload = self._payload
        self._payload = MOVED
        self._consumed = True
        return payload

    def _take(self) -> Any:
        """Consume whichever payload is live; None for a side without one."""
        self._ensure_live("taken")
        return self._release()

    def ok_value(self) -> T:
        """Return the Ok payload itself, leaving the Result usable."""
        self._check_readable(True)
        return self._payload

    def take_ok(self) -> T:
        """Return the Ok payload and mark this Result consumed."""
        self._check_readable(True)
        return self._release()

    def error_value(self) -> E:
        """Return the Err payload itself, leaving the Result usable."""
        self._check_readable(False)
        return self._payload

    def take_error(self) -> E:
        """Return the Err payload and mark this Result consumed."""
        self._check_readable(False)
        return self._release()

    # --- Copy / move ---

    def copy(self) -> Self:
        """Return an independent Result holding a deep copy of the payload."""
        return deepcopy(self)

    def move(self) -> Self:
        """Transfer the payload into a new Result; this one becomes consumed."""
        self._ensure_live("moved")
        return type(self)._staged(self._is_ok, self._release())

    def __copy__(self) -> Self:
        self._ensure_live("copied")
        duplicate = type(self)._staged(self._is_ok, self._payload)
        duplicate._consumed = self._consumed
        return duplicate

    def __deepcopy__(self, memo: dict[int, Any]) -> Self:
        self._ensure_live("copied")
        duplicate = type(self)._staged(self._is_ok, deepcopy(self._payload, memo))
        duplicate._consumed = self._consumed
        return duplicate

    # --- Combinators ---

    def _apply(self, fn: Callable[..., Any]) -> Any:
        self._ensure_live("read")
        kind = self._ok_kind if self._is_ok else self._err_kind
        if kind is None:
            return fn()
        return fn(self._payload)

    def map(self, fn: Callable[..., U]) -> Result[U, E]:
        """Apply ``fn`` to the Ok payload; a failure passes through unchanged."""
        self._ensure_live("read")
        if not self._is_ok:
            return self  # type: ignore[return-value]
        return Result._staged(True, self._apply(fn))

    def map_err(self, fn: Callable[..., F]) -> Result[T, F]:
        """Apply ``fn`` to the Err payload; a success passes through unchanged."""
        self._ensure_live("read")
        if self._is_ok:
            return self  # type: ignore[return-value]
        return Result._staged(False, self._apply(fn))

    def and_then(self, fn: Callable[..., Result[U, E]]) -> Result[U, E]:
        """Chain a fallible step onto a success."""
        self._ensure_live("read")
        if not self._is_ok:
            return self  # type: ignore[return-value]
        chained = self._apply(fn)
        if not isinstance(chained, Result):
            raise PayloadTypeError(
                f"and_then() callback must return a Result, got {type(chained).__name__}"
            )
        return chained

    def value_or(self, default: T) -> T:
        """Return the Ok payload, or ``default`` when the Err alternative is live."""
        self._ensure_live("read")
        if not self._is_ok:
            return default
        return self._payload

    # --- Protocol ---

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Result):
            return NotImplemented
        self._ensure_live("compared")
        other._ensure_live("compared")
        return self._is_ok == other._is_ok and self._payload == other._payload

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        tag = "Ok" if self._is_ok else "Err"
        kind = self._ok_kind if self._is_ok else self._err_kind
        if kind is None and not self._consumed:
            return f"{tag}()"
        return f"{tag}({self._payload!r})"


def _normalize(param: Any) -> Any:
    return None if param is None or param is type(None) else param


def _is_generic_parameter(param: Any) -> bool:
    if isinstance(param, (TypeVar, ParamSpec)):
        return True
    # Only aliases such as list[T] are open; a class deriving from Generic is not.
    return get_origin(param) is not None and bool(getattr(param, "__parameters__", ()))


@cache
def _specialize(ok: Any, err: Any) -> type[Result[Any, Any]]:
    if ok is None and err is None:
        raise ConfigurationError(
            "Result[None, None] carries no payload on either side",
            hint="Use Result[None, Err] or Result[Ok, None].",
        )
    if ok == err:
        raise ConfigurationError(
            f"Result[{describe(ok)}, {describe(err)}] is ambiguous: "
            "Ok and Err must be distinct types",
            hint="Wrap one side in a dedicated type.",
        )

    if err is None:
        form = Form.OK_ONLY
    elif ok is None:
        form = Form.ERR_ONLY
    else:
        form = Form.FULL

    name = f"Result[{describe(ok)}, {describe(err)}]"
    namespace = {
        "__slots__": (),
        "__module__": __name__,
        "__qualname__": name,
        "_ok_kind": None if ok is None else PayloadKind(ok),
        "_err_kind": None if err is None else PayloadKind(err),
        "form": form,
    }
    specialized = type(name, (Result,), namespace)
    logger.debug("Specialized %s (%s form)", name, form.value)
    return specialized
