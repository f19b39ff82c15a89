"""
Tests for the exception hierarchy.

Tests cover:
- Transaction id taken from the in-flight transaction
- Payload context shared by node-response errors
- Serialization
"""

from chainmethod import (
    ChainMethodError,
    ExecutionError,
    ReceiptTimeoutError,
    TransactionError,
    TransactionFailedError,
    ValidationError,
)

from conftest import TX_ID


class TestChainMethodError:
    def test_tx_hash_from_transaction(self) -> None:
        error = ChainMethodError("Failed", transaction={"txID": TX_ID})

        assert error.tx_hash == TX_ID
        assert str(error) == f"Failed [CHAIN_METHOD_ERROR, tx {TX_ID}]"

    def test_explicit_tx_hash_wins(self) -> None:
        error = ChainMethodError("Failed", transaction={"txID": TX_ID}, tx_hash="bb")

        assert error.tx_hash == "bb"

    def test_subclass_default_code(self) -> None:
        assert ValidationError("bad").code == "VALIDATION_ERROR"
        assert str(ValidationError("bad")) == "bad [VALIDATION_ERROR]"

    def test_to_dict_omits_missing_payloads(self) -> None:
        assert ChainMethodError("plain").to_dict() == {
            "error": "ChainMethodError",
            "code": "CHAIN_METHOD_ERROR",
            "message": "plain",
            "tx_hash": None,
        }


class TestNodeResponseErrors:
    def test_transaction_error_keeps_response(self) -> None:
        error = TransactionError({"result": False}, transaction={"txID": TX_ID})

        assert error.response == error.output == {"result": False}
        assert error.tx_hash == TX_ID
        assert error.message == 'Unknown error: {\n  "result": false\n}'

    def test_execution_error_without_output(self) -> None:
        error = ExecutionError()

        assert error.message == "Failed to execute"
        assert error.output is None
        assert error.tx_hash is None

    def test_failed_and_timeout_carry_transaction(self) -> None:
        transaction = {"txID": TX_ID}
        failed = TransactionFailedError("REVERT", transaction=transaction, output={"result": "FAILED"})
        timeout = ReceiptTimeoutError(transaction, 20)

        assert failed.code == "TRANSACTION_FAILED"
        assert failed.to_dict()["output"] == {"result": "FAILED"}
        assert timeout.to_dict()["transaction"] == transaction
        assert timeout.details == {"attempts": 20}
