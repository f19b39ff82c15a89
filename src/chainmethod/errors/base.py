"""
Base exception class for the chainmethod SDK.

Failures on the mutation path happen at different stages of a
transaction's life (built, signed, broadcast, confirmed). The base class
keeps the payloads of that stage: the ``transaction`` that was in flight
and the raw node ``output`` that rejected it, so subclasses only choose
the message.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Mapping, Optional


def dump_payload(payload: Any) -> str:
    """Pretty-print a node payload for inclusion in an error message."""
    return json.dumps(payload, indent=2, default=str)


class ChainMethodError(Exception):
    """
    Base exception for all contract invocation errors.

    Attributes:
        message: Human-readable error description.
        code: Machine-readable error code, ``default_code`` unless overridden.
        transaction: Transaction in flight when the error happened, if any.
        output: Raw node response that caused the error, if any.
        tx_hash: Transaction id, taken from ``transaction["txID"]`` when
            not given explicitly.
        details: Any further context (attempt counts, urls, ...).

    Example:
        >>> err = ChainMethodError("Failed", transaction={"txID": "8f1c"})
        >>> err.tx_hash
        '8f1c'
    """

    default_code = "CHAIN_METHOD_ERROR"

    def __init__(
        self,
        message: str,
        *,
        code: Optional[str] = None,
        transaction: Optional[Mapping[str, Any]] = None,
        output: Any = None,
        tx_hash: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.transaction = transaction
        self.output = output
        if tx_hash is None and isinstance(transaction, Mapping):
            tx_hash = transaction.get("txID")
        self.tx_hash = tx_hash
        self.details = dict(details or {})

    def __str__(self) -> str:
        if self.tx_hash:
            return f"{self.message} [{self.code}, tx {self.tx_hash}]"
        return f"{self.message} [{self.code}]"

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to a dictionary for JSON serialization.

        ``transaction`` and ``output`` are included only when present.
        """
        data: Dict[str, Any] = {
            "error": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "tx_hash": self.tx_hash,
        }
        if self.transaction is not None:
            data["transaction"] = self.transaction
        if self.output is not None:
            data["output"] = self.output
        if self.details:
            data["details"] = self.details
        return data
