"""Settings: resolve once, then flow through a context-local scope.

Resolution precedence is defaults < environment (after ``.env``) < overrides.
Only ``DITTO_*`` variables are read.
"""

from __future__ import annotations

from contextlib import contextmanager
import contextvars
from functools import cache
import os
from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from ditto.errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Generator, Mapping

ENV_PREFIX = "DITTO_"

ViolationMode = Literal["raise", "abort"]


class Settings(BaseModel):
    """Validated, immutable runtime settings."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    #: What a contract violation does after it is logged.
    on_violation: ViolationMode = "raise"
    #: Reject reads of a payload that was already taken or moved.
    guard_consumed: bool = True
    #: Check payloads against the types a specialized Result declares.
    validate_payloads: bool = True

    @field_validator("on_violation", mode="before")
    @classmethod
    def normalize_on_violation(cls, v: Any) -> Any:
        """Accept surrounding whitespace and any casing."""
        if isinstance(v, str):
            return v.strip().lower()
        return v


_SCOPED: contextvars.ContextVar[Settings | None] = contextvars.ContextVar(
    "ditto_settings", default=None
)

_DOTENV_LOADED: bool = False


def _try_load_dotenv() -> None:
    """Load a ``.env`` file from the working directory, once."""
    global _DOTENV_LOADED
    if _DOTENV_LOADED:
        return
    from dotenv import load_dotenv

    load_dotenv()
    _DOTENV_LOADED = True


def _coerce_bool(v: str) -> bool:
    return v.strip().lower() in {"1", "true", "yes", "on"}


def load_env() -> dict[str, Any]:
    """Read ``DITTO_*`` variables into a plain mapping of setting values.

    Unknown ``DITTO_*`` names are kept so validation can reject them.
    """
    values: dict[str, Any] = {}
    for key, raw in os.environ.items():
        if not key.startswith(ENV_PREFIX):
            continue
        name = key[len(ENV_PREFIX) :].lower()
        info = Settings.model_fields.get(name)
        if info is not None and info.annotation is bool:
            values[name] = _coerce_bool(raw)
        else:
            values[name] = raw
    return values


def resolve_settings(overrides: Mapping[str, Any] | None = None) -> Settings:
    """Resolve settings from the environment and programmatic overrides.

    Raises:
        ConfigurationError: If a value fails validation.
    """
    _try_load_dotenv()
    merged = {**load_env(), **(overrides or {})}
    try:
        return Settings.model_validate(merged)
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(part) for part in err.get("loc", ())) or "settings"
        raise ConfigurationError(
            f"Invalid setting {field!r}: {err.get('msg')}",
            hint=f"Check {ENV_PREFIX}{field.upper()} or the override passed in code.",
        ) from e


@cache
def _env_settings() -> Settings:
    return resolve_settings()


def reset_settings_cache() -> None:
    """Forget the environment-resolved settings so the next read re-resolves."""
    _env_settings.cache_clear()


def current_settings() -> Settings:
    """Return the settings active in this context."""
    scoped = _SCOPED.get()
    if scoped is not None:
        return scoped
    return _env_settings()


@contextmanager
def settings_scope(
    settings: Settings | None = None, **overrides: Any
) -> Generator[Settings]:
    """Activate settings for the current thread or task.

    Example:
        with settings_scope(guard_consumed=False):
            value = result.take_ok()
    """
    base = settings if settings is not None else current_settings()
    if overrides:
        try:
            settings = Settings.model_validate({**base.model_dump(), **overrides})
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid settings override: {e.errors()[0].get('msg')}",
                hint=f"Valid fields: {', '.join(Settings.model_fields)}.",
            ) from e
    else:
        settings = base

    token = _SCOPED.set(settings)
    try:
        yield settings
    finally:
        _SCOPED.reset(token)
