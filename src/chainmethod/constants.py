"""Constants for the chainmethod SDK.

This module defines the constant values shared by the invocation paths,
including fee defaults, polling cadence and ABI encoding lengths.
"""

# ABI Encoding Constants
SELECTOR_HEX_LENGTH = 8  # 4 bytes
ADDRESS_PREFIX_HEX = "41"
ADDRESS_HEX_LENGTH = 42  # "41" + 20 bytes

# Fee Constants
DEFAULT_FEE_LIMIT = 1_000_000_000  # 1000 TRX in sun
DEFAULT_CALL_VALUE = 0

# Confirmation Polling
RECEIPT_POLL_INTERVAL_SECONDS = 3.0
MAX_RECEIPT_POLL_ATTEMPTS = 20

# Event Watching
EVENT_POLL_INTERVAL_SECONDS = 3.0

# Network Constants
PROVIDER_TIMEOUT_SECONDS = 30

# State mutability classes that never change chain state
CONSTANT_MUTABILITIES = frozenset({"pure", "view"})

__all__ = [
    "SELECTOR_HEX_LENGTH",
    "ADDRESS_PREFIX_HEX",
    "ADDRESS_HEX_LENGTH",
    "DEFAULT_FEE_LIMIT",
    "DEFAULT_CALL_VALUE",
    "RECEIPT_POLL_INTERVAL_SECONDS",
    "MAX_RECEIPT_POLL_ATTEMPTS",
    "EVENT_POLL_INTERVAL_SECONDS",
    "PROVIDER_TIMEOUT_SECONDS",
    "CONSTANT_MUTABILITIES",
]
