"""
chainmethod - contract method invocation for TRON-style chains.

Turns ABI entries into invocation handles that can:
- ``call()`` constant methods and decode their result
- ``send()`` state-changing methods (build, sign, broadcast, confirm)
- ``watch()`` events through a de-duplicated polling feed
"""

from .abi import MethodDescriptor, decode_output, encode_parameters, get_function_selector, parse_event
from .client import ChainClient, HttpChainClient
from .config import NETWORKS, ChainConfig, Network, get_chain_config
from .constants import (
    DEFAULT_CALL_VALUE,
    DEFAULT_FEE_LIMIT,
    EVENT_POLL_INTERVAL_SECONDS,
    MAX_RECEIPT_POLL_ATTEMPTS,
    PROVIDER_TIMEOUT_SECONDS,
    RECEIPT_POLL_INTERVAL_SECONDS,
    SELECTOR_HEX_LENGTH,
)
from .contract import Contract, ContractMethods
from .errors import (
    ChainMethodError,
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
from .method import BoundMethod, EventWatch, MethodInvoker
from .models import EventWatermark, InvocationOptions, Parameter, PendingTransaction
from .utils.polling import PollConfig

__version__ = "0.1.0"

__all__ = [
    # Invocation
    "Contract",
    "ContractMethods",
    "MethodInvoker",
    "BoundMethod",
    "EventWatch",
    # Client
    "ChainClient",
    "HttpChainClient",
    # Config
    "Network",
    "ChainConfig",
    "NETWORKS",
    "get_chain_config",
    "PollConfig",
    # Models
    "MethodDescriptor",
    "InvocationOptions",
    "Parameter",
    "PendingTransaction",
    "EventWatermark",
    # ABI helpers
    "decode_output",
    "encode_parameters",
    "get_function_selector",
    "parse_event",
    # Errors
    "ChainMethodError",
    "ValidationError",
    "InvalidArgumentCountError",
    "MissingAddressError",
    "ContractNotDeployedError",
    "InvalidPrivateKeyError",
    "StateMutabilityError",
    "InvalidEventTypeError",
    "EventServerNotConfiguredError",
    "RpcError",
    "TransactionError",
    "ExecutionError",
    "TransactionFailedError",
    "ReceiptTimeoutError",
    "DecodeError",
    # Constants
    "DEFAULT_FEE_LIMIT",
    "DEFAULT_CALL_VALUE",
    "RECEIPT_POLL_INTERVAL_SECONDS",
    "MAX_RECEIPT_POLL_ATTEMPTS",
    "EVENT_POLL_INTERVAL_SECONDS",
    "PROVIDER_TIMEOUT_SECONDS",
    "SELECTOR_HEX_LENGTH",
]
