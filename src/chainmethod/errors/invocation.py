"""
Invocation exceptions for contract method calls.

Validation errors are raised locally before any network interaction.
The remaining classes wrap node responses (build, broadcast, receipt)
and keep the raw payloads on the error for caller-side diagnostics.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from chainmethod.errors.base import ChainMethodError, dump_payload


class ValidationError(ChainMethodError):
    """Raised when an invocation is rejected before reaching the network."""

    default_code = "VALIDATION_ERROR"


class InvalidArgumentCountError(ValidationError):
    """Raised when argument values do not match the declared parameter types."""

    def __init__(self, expected: int, received: int) -> None:
        super().__init__(
            "Invalid argument count provided",
            code="INVALID_ARGUMENT_COUNT",
            details={"expected": expected, "received": received},
        )
        self.expected = expected
        self.received = received


class MissingAddressError(ValidationError):
    def __init__(self) -> None:
        super().__init__("Smart contract is missing address", code="MISSING_ADDRESS")


class ContractNotDeployedError(ValidationError):
    def __init__(self) -> None:
        super().__init__(
            "Calling smart contracts requires you to load the contract first",
            code="CONTRACT_NOT_LOADED",
        )


class InvalidPrivateKeyError(ValidationError):
    """Raised when no signing key is available (the key itself is never shown)."""

    def __init__(self) -> None:
        super().__init__("Invalid private key provided", code="INVALID_PRIVATE_KEY")


class StateMutabilityError(ValidationError):
    """
    Raised when a method is dispatched on the wrong path.

    Constant methods (``pure``/``view``) must use ``call()``, everything
    else must use ``send()``.
    """

    def __init__(self, state_mutability: str, expected_path: str) -> None:
        super().__init__(
            f'Methods with state mutability "{state_mutability}" must use {expected_path}()',
            code="WRONG_INVOCATION_PATH",
            details={"state_mutability": state_mutability, "expected_path": expected_path},
        )
        self.state_mutability = state_mutability
        self.expected_path = expected_path


class InvalidEventTypeError(ValidationError):
    def __init__(self, abi_type: str) -> None:
        super().__init__(
            "Invalid method type for event watching",
            code="INVALID_EVENT_TYPE",
            details={"type": abi_type},
        )


class EventServerNotConfiguredError(ValidationError):
    def __init__(self) -> None:
        super().__init__("No event server configured", code="NO_EVENT_SERVER")


class RpcError(ChainMethodError):
    """Raised when a node or event server request fails."""

    default_code = "RPC_ERROR"

    def __init__(
        self,
        message: str,
        *,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = dict(details or {})
        if url:
            details["url"] = url
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(message, details=details)
        self.url = url
        self.status_code = status_code


class TransactionError(ChainMethodError):
    """Raised when a build or broadcast response lacks a positive result flag."""

    default_code = "TRANSACTION_ERROR"

    def __init__(
        self,
        response: Any,
        *,
        transaction: Optional[Mapping[str, Any]] = None,
    ) -> None:
        super().__init__("Unknown error: " + dump_payload(response), transaction=transaction, output=response)

    @property
    def response(self) -> Any:
        return self.output


class ExecutionError(ChainMethodError):
    """
    Raised when a node response lacks the expected result field.

    ``output`` holds the raw receipt when the error comes from confirmation
    polling, in which case the message embeds it as well.
    """

    default_code = "EXECUTION_FAILED"

    def __init__(
        self,
        *,
        output: Any = None,
        transaction: Optional[Mapping[str, Any]] = None,
    ) -> None:
        message = "Failed to execute"
        if output is not None:
            message += ": " + dump_payload(output)
        super().__init__(message, transaction=transaction, output=output)


class TransactionFailedError(ChainMethodError):
    """Raised when the receipt carries an explicit FAILED status."""

    default_code = "TRANSACTION_FAILED"


class ReceiptTimeoutError(ChainMethodError):
    """
    Raised when confirmation polling is exhausted.

    The signed transaction is attached so the caller can look the receipt
    up again later.
    """

    default_code = "RECEIPT_TIMEOUT"

    def __init__(self, transaction: Mapping[str, Any], attempts: int) -> None:
        super().__init__(
            "Cannot find result in solidity node",
            transaction=transaction,
            details={"attempts": attempts},
        )
        self.attempts = attempts


class DecodeError(ChainMethodError):
    """Raised when a result payload cannot be decoded against the outputs."""

    default_code = "DECODE_ERROR"

    def __init__(self, message: str, *, data: Optional[str] = None) -> None:
        super().__init__(message, details={"data": data} if data else None)
        self.data = data
