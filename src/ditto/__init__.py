"""Ditto: a Result type for fallible operations without exceptions.

Public API:
    - Result: Either an Ok payload or an Err payload
    - propagate / propagates: Early return of failures
    - settings_scope / resolve_settings: Runtime settings
"""

from __future__ import annotations

import logging

from ditto.assertions import fail, verify
from ditto.config import (
    Settings,
    current_settings,
    reset_settings_cache,
    resolve_settings,
    settings_scope,
)
from ditto.errors import (
    ConfigurationError,
    ContractViolation,
    DittoError,
    EarlyReturn,
    PayloadTypeError,
)
from ditto.propagate import propagate, propagates
from ditto.result import MOVED, Form, Result

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("ditto-result")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"

# Library-level NullHandler: stay silent unless the consumer configures logging.
logging.getLogger("ditto").addHandler(logging.NullHandler())

__all__ = [
    "MOVED",
    "ConfigurationError",
    "ContractViolation",
    "DittoError",
    "EarlyReturn",
    "Form",
    "PayloadTypeError",
    "Result",
    "Settings",
    "current_settings",
    "fail",
    "propagate",
    "propagates",
    "reset_settings_cache",
    "resolve_settings",
    "settings_scope",
    "verify",
]
