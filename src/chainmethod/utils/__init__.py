"""
chainmethod utilities.

This module provides helpers shared by the invocation paths.
"""

from chainmethod.utils.address import (
    address_from_private_key,
    is_base58_address,
    sha3,
    to_abi_address,
    to_base58_address,
    to_hex_address,
    to_utf8,
)
from chainmethod.utils.callbacks import Callback, inject_awaitable, invoke_callback
from chainmethod.utils.logging import (
    configure_logging,
    disable_logging,
    enable_debug,
    get_logger,
    set_level,
)
from chainmethod.utils.polling import PollConfig, PollExhaustedError, ResultPending, poll_async

__all__ = [
    # Addresses and hashing
    "address_from_private_key",
    "is_base58_address",
    "sha3",
    "to_abi_address",
    "to_base58_address",
    "to_hex_address",
    "to_utf8",
    # Calling convention
    "Callback",
    "inject_awaitable",
    "invoke_callback",
    # Structured logging
    "get_logger",
    "configure_logging",
    "set_level",
    "disable_logging",
    "enable_debug",
    # Polling
    "PollConfig",
    "PollExhaustedError",
    "ResultPending",
    "poll_async",
]
