"""
Exception hierarchy for the chainmethod SDK.
"""

from chainmethod.errors.base import ChainMethodError
from chainmethod.errors.invocation import (
    ContractNotDeployedError,
    DecodeError,
    EventServerNotConfiguredError,
    ExecutionError,
    InvalidArgumentCountError,
    InvalidEventTypeError,
    InvalidPrivateKeyError,
    MissingAddressError,
    ReceiptTimeoutError,
    RpcError,
    StateMutabilityError,
    TransactionError,
    TransactionFailedError,
    ValidationError,
)

__all__ = [
    "ChainMethodError",
    # Validation
    "ValidationError",
    "InvalidArgumentCountError",
    "MissingAddressError",
    "ContractNotDeployedError",
    "InvalidPrivateKeyError",
    "StateMutabilityError",
    "InvalidEventTypeError",
    "EventServerNotConfiguredError",
    # Transport / protocol state
    "RpcError",
    "TransactionError",
    "ExecutionError",
    "TransactionFailedError",
    "ReceiptTimeoutError",
    "DecodeError",
]
