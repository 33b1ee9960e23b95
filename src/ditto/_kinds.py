"""Payload kinds: runtime type checks and in-place payload construction.

A kind wraps the annotation a specialized ``Result`` declares for one side.
Checks run through a strict pydantic ``TypeAdapter`` so ``True`` is not an
``int`` and ``"1"`` is not a ``float``; classes pydantic cannot build a schema
for fall back to ``isinstance``.
"""

from __future__ import annotations

from numbers import Number
import types
from typing import Any, get_origin

from pydantic import ConfigDict, PydanticUserError, TypeAdapter, ValidationError

from ditto.errors import ConfigurationError, PayloadTypeError

_ADAPTER_CONFIG = ConfigDict(arbitrary_types_allowed=True, strict=True)


def describe(annotation: Any) -> str:
    """Return a short, readable name for a payload annotation."""
    if annotation is None:
        return "None"
    if annotation is Any:
        return "Any"
    if get_origin(annotation) is None and isinstance(annotation, type):
        return annotation.__qualname__
    return repr(annotation).replace("typing.", "")


def _instance_class(annotation: Any) -> type | None:
    """Return the class an isinstance fallback checks, if there is one."""
    cls = get_origin(annotation) or annotation
    if isinstance(cls, type) and cls is not types.UnionType:
        return cls
    return None


def _build_adapter(annotation: Any) -> TypeAdapter[Any] | None:
    try:
        return TypeAdapter(annotation, config=_ADAPTER_CONFIG)
    except PydanticUserError:
        pass
    # Models, dataclasses and TypedDicts reject an external config.
    try:
        return TypeAdapter(annotation)
    except PydanticUserError:
        if _instance_class(annotation) is not None:
            return None
        raise ConfigurationError(
            f"Unsupported payload type: {describe(annotation)}",
            hint="Use a class, a builtin generic such as list[int], or Any.",
        ) from None


class PayloadKind:
    """Type check and constructor for one side of a Result."""

    __slots__ = ("_adapter", "_instance_of", "annotation")

    def __init__(self, annotation: Any) -> None:
        self.annotation = annotation
        self._adapter = None if annotation is Any else _build_adapter(annotation)
        self._instance_of = _instance_class(annotation)

    def __repr__(self) -> str:
        return f"PayloadKind({describe(self.annotation)})"

    @property
    def is_any(self) -> bool:
        return self.annotation is Any

    def accepts(self, value: Any) -> bool:
        """Return True when ``value`` is a valid payload of this kind."""
        if self.is_any:
            return True
        if self._adapter is None:
            cls = self._instance_of
            return cls is not None and isinstance(value, cls)
        try:
            self._adapter.validate_python(value, strict=True)
        except ValidationError:
            return False
        return True

    def is_exact(self, value: Any) -> bool:
        """Return True when the declared type is exactly ``type(value)``."""
        return type(value) is self.annotation

    def build(
        self, args: tuple[Any, ...], kwargs: dict[str, Any], *, validate: bool
    ) -> Any:
        """Produce a payload from constructor arguments.

        A single argument that already is a valid payload is stored as is.
        Anything else is forwarded to the payload class's constructor.
        """
        if len(args) == 1 and not kwargs:
            if not validate or self.accepts(args[0]):
                return args[0]
        if self.is_any:
            if args or kwargs:
                raise PayloadTypeError(
                    "An untyped Result payload takes at most one positional value",
                    hint="Subscript Result with concrete types to forward "
                    "constructor arguments.",
                )
            return None

        factory = self._instance_of
        if factory is None:
            raise PayloadTypeError(
                f"Cannot construct a {describe(self.annotation)} payload from arguments",
                hint="Pass a ready-made payload value instead.",
            )
        value = factory(*args, **kwargs)
        if len(args) == 1 and not kwargs and _narrows(args[0], value):
            raise PayloadTypeError(
                f"Converting {args[0]!r} to {describe(self.annotation)} loses precision",
                hint="Pass a value of the payload type, or convert it explicitly.",
            )
        if validate and not self.accepts(value):
            raise PayloadTypeError(
                f"Expected a {describe(self.annotation)} payload, got {value!r}"
            )
        return value


def _narrows(source: Any, value: Any) -> bool:
    if isinstance(source, bool) or not isinstance(source, Number):
        return False
    return isinstance(value, Number) and value != source
