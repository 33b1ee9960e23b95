"""Fail-loudly assertion primitive used to enforce Result access contracts."""

from __future__ import annotations

import logging
import os
from typing import NoReturn

from ditto.config import current_settings
from ditto.errors import ContractViolation

__all__ = ["fail", "verify"]

logger = logging.getLogger(__name__)


def fail(message: str) -> NoReturn:
    """Report a contract violation.

    The violation is always logged at CRITICAL. With ``on_violation="abort"``
    the process is then terminated with ``os.abort()``; otherwise a
    ``ContractViolation`` is raised.
    """
    logger.critical("Contract violation: %s", message)
    if current_settings().on_violation == "abort":
        os.abort()
    raise ContractViolation(
        message, hint="Check is_ok()/is_error() before reading a payload."
    )


def verify(condition: bool, message: str) -> None:
    """Do nothing when ``condition`` holds, otherwise ``fail(message)``."""
    if not condition:
        fail(message)
