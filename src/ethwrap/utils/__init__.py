"""
ethwrap utilities.

This module provides validation helpers and structured logging.
"""

from ethwrap.utils.logging import (
    LogContext,
    configure_logging,
    disable_logging,
    enable_debug,
    get_logger,
    set_level,
)
from ethwrap.utils.validation import (
    is_address,
    validate_address,
    validate_amount,
    validate_hex,
)

__all__ = [
    # Validation
    "validate_address",
    "is_address",
    "validate_amount",
    "validate_hex",
    # Structured logging
    "get_logger",
    "configure_logging",
    "set_level",
    "disable_logging",
    "enable_debug",
    "LogContext",
]
