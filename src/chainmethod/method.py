"""
Contract method invocation.

Provides:
- MethodInvoker: one ABI entry bound to a contract and a chain client
- BoundMethod: a method bound to argument values (``call``/``send``/``watch``)
- EventWatch: polling subscription to an event's feed

Every operation accepts an optional ``callback(error, result)``. Without
one, the coroutine resolves to the result or raises the error instead.
Callbacks may be plain functions or coroutine functions.

Example:
    >>> balance_of = contract.methods.balanceOf
    >>> balance = await balance_of("TQ5...").call()
    >>> tx_id = await transfer("TQ5...", 10).send({"shouldPollResponse": False})
"""

from __future__ import annotations

import asyncio
from typing import (
    TYPE_CHECKING,
    Any,
    Awaitable,
    Callable,
    Dict,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    Union,
)

from chainmethod.abi import MethodDescriptor, decode_output, parse_event, unwrap_single
from chainmethod.constants import EVENT_POLL_INTERVAL_SECONDS
from chainmethod.errors import (
    ContractNotDeployedError,
    EventServerNotConfiguredError,
    ExecutionError,
    InvalidArgumentCountError,
    InvalidEventTypeError,
    InvalidPrivateKeyError,
    MissingAddressError,
    ReceiptTimeoutError,
    StateMutabilityError,
    TransactionError,
    TransactionFailedError,
    ValidationError,
)
from chainmethod.models import EventWatermark, InvocationOptions, Parameter, PendingTransaction
from chainmethod.utils.address import to_abi_address
from chainmethod.utils.callbacks import Callback, inject_awaitable, invoke_callback
from chainmethod.utils.logging import get_logger
from chainmethod.utils.polling import PollConfig, PollExhaustedError, ResultPending, poll_async

if TYPE_CHECKING:
    from chainmethod.client import ChainClient
    from chainmethod.contract import Contract

_logger = get_logger(__name__)

OptionsLike = Optional[Union[InvocationOptions, Mapping[str, Any]]]


class MethodInvoker:
    """
    Invocation handle for one ABI entry of a contract.

    The descriptor and default options are derived once at construction
    and never mutated afterwards.

    Args:
        contract: Contract handle exposing ``address``, ``deployed`` and ``client``
        abi: ABI entry (function or event)
        receipt_poll: Confirmation polling cadence (3s x 20 by default)
        event_poll_interval: Seconds between event feed polls
    """

    def __init__(
        self,
        contract: "Contract",
        abi: Mapping[str, Any],
        receipt_poll: Optional[PollConfig] = None,
        event_poll_interval: float = EVENT_POLL_INTERVAL_SECONDS,
    ) -> None:
        self.contract = contract
        self.client: "ChainClient" = contract.client
        self.abi = abi
        self.descriptor = MethodDescriptor.from_abi(abi)
        self.name = self.descriptor.name
        self.receipt_poll = receipt_poll or PollConfig()
        self.event_poll_interval = event_poll_interval
        self.default_options = InvocationOptions(from_address=self.client.default_address)

    @property
    def function_selector(self) -> str:
        return self.descriptor.function_selector

    @property
    def signature(self) -> str:
        return self.descriptor.signature

    def __call__(self, *args: Any) -> "BoundMethod":
        return BoundMethod(self, args)

    async def watch(self, callback: Optional[Callback] = None) -> Optional["EventWatch"]:
        return await self._watch(callback)

    def __repr__(self) -> str:
        return f"MethodInvoker({self.function_selector!r}, mutability={self.descriptor.state_mutability!r})"

    # ------------------------------------------------------------------
    # Shared validation and marshalling
    # ------------------------------------------------------------------
    def _check_target(self, args: Sequence[Any]) -> Optional[ValidationError]:
        types = self.descriptor.param_types
        if len(types) != len(args):
            return InvalidArgumentCountError(len(types), len(args))
        if not self.contract.address:
            return MissingAddressError()
        if not self.contract.deployed:
            return ContractNotDeployedError()
        return None

    def _parameters(self, args: Sequence[Any]) -> List[Parameter]:
        parameters = []
        for param_type, value in zip(self.descriptor.param_types, args):
            if param_type == "address":
                value = to_abi_address(self.client.to_hex_address(value))
            parameters.append(Parameter(type=param_type, value=value))
        return parameters

    def _decode(self, data: str) -> Any:
        return unwrap_single(decode_output(self.descriptor.outputs, data))

    # ------------------------------------------------------------------
    # Query path
    # ------------------------------------------------------------------
    async def _call(
        self,
        args: Sequence[Any],
        options: OptionsLike = None,
        callback: Optional[Callback] = None,
    ) -> Any:
        if callback is None:
            return await inject_awaitable(self._call, args, options)

        error = self._check_target(args)
        if error is None and not self.descriptor.is_constant:
            error = StateMutabilityError(self.descriptor.state_mutability, "send")
        if error is not None:
            return await invoke_callback(callback, error)

        try:
            merged = self.default_options.merge(options)
            parameters = self._parameters(args)
            sender = self.client.to_hex_address(merged.from_address) if merged.from_address else None
            _logger.debug(
                "Calling constant method",
                extra={"contract": self.contract.address, "method": self.function_selector},
            )
            transaction = await self.client.build_call(
                self.contract.address,
                self.function_selector,
                merged.fee_limit,
                merged.call_value,
                parameters,
                sender,
            )
        except Exception as e:
            return await invoke_callback(callback, e)

        if not isinstance(transaction, Mapping) or "constant_result" not in transaction:
            return await invoke_callback(callback, ExecutionError())

        try:
            output = self._decode(transaction["constant_result"][0])
        except Exception as e:
            return await invoke_callback(callback, e)

        return await invoke_callback(callback, None, output)

    # ------------------------------------------------------------------
    # Mutation path
    # ------------------------------------------------------------------
    async def _send(
        self,
        args: Sequence[Any],
        options: OptionsLike = None,
        private_key: Optional[str] = None,
        callback: Optional[Callback] = None,
    ) -> Any:
        if callback is None:
            return await inject_awaitable(self._send, args, options, private_key)

        if private_key is None:
            private_key = self.client.default_private_key

        error = self._check_target(args)
        if error is None and (not private_key or not isinstance(private_key, str)):
            error = InvalidPrivateKeyError()
        if error is None and self.descriptor.is_constant:
            error = StateMutabilityError(self.descriptor.state_mutability, "call")
        if error is not None:
            return await invoke_callback(callback, error)

        try:
            merged = self.default_options.merge(options)
            parameters = self._parameters(args)
            sender = self.client.address_from_private_key(private_key)
            transaction = await self.client.build_transaction(
                self.contract.address,
                self.function_selector,
                merged.fee_limit,
                merged.call_value,
                parameters,
                self.client.to_hex_address(sender),
            )
        except Exception as e:
            return await invoke_callback(callback, e)

        if not _result_flag(transaction, nested=True):
            return await invoke_callback(callback, TransactionError(transaction))

        try:
            signed = await self.client.sign(transaction["transaction"], private_key)
            if not isinstance(signed, Mapping) or not signed.get("txID"):
                raise TransactionError(signed, transaction=transaction["transaction"])
            broadcast = await self.client.broadcast(signed)
        except Exception as e:
            return await invoke_callback(callback, e)

        if not _result_flag(broadcast):
            return await invoke_callback(callback, TransactionError(broadcast, transaction=signed))

        pending = PendingTransaction(tx_id=signed["txID"], signed_transaction=signed)
        _logger.info(
            "Transaction broadcast",
            extra={"contract": self.contract.address, "method": self.function_selector, "tx_id": pending.tx_id},
        )

        if not merged.should_poll_response:
            return await invoke_callback(callback, None, pending.tx_id)

        try:
            output = await self._await_confirmation(pending)
        except Exception as e:
            return await invoke_callback(callback, e)

        return await invoke_callback(callback, None, output)

    async def _await_confirmation(self, pending: PendingTransaction) -> Any:
        """
        Poll the receipt of a broadcast transaction and decode its result.

        Raises:
            TransactionFailedError: If the receipt reports FAILED
            ExecutionError: If the receipt has no contract result
            ReceiptTimeoutError: If no receipt appears within the attempt budget
        """

        async def check_result() -> Any:
            receipt = await self.client.get_transaction_receipt(pending.tx_id)
            if not receipt:
                raise ResultPending()

            if receipt.get("result") == "FAILED":
                raise TransactionFailedError(
                    self.client.to_utf8(receipt.get("resMessage") or ""),
                    transaction=pending.signed_transaction,
                    output=receipt,
                )

            if "contractResult" not in receipt:
                raise ExecutionError(output=receipt, transaction=pending.signed_transaction)

            return self._decode(receipt["contractResult"][0])

        try:
            return await poll_async(check_result, self.receipt_poll)
        except PollExhaustedError as e:
            _logger.warning(
                "Transaction result not found",
                extra={"tx_id": pending.tx_id, "attempts": e.attempts},
            )
            raise ReceiptTimeoutError(pending.signed_transaction, e.attempts) from e

    # ------------------------------------------------------------------
    # Event path
    # ------------------------------------------------------------------
    async def _watch(self, callback: Optional[Callback] = None) -> Optional["EventWatch"]:
        """
        Start watching the event feed of this ABI entry.

        Returns:
            The active EventWatch, or None if a precondition failed (the
            error is delivered to ``callback``)

        Raises:
            TypeError: If no callback is provided
        """
        if not callable(callback):
            raise TypeError("Expected callback to be provided")

        error: Optional[ValidationError] = None
        if not self.contract.address:
            error = MissingAddressError()
        elif not self.descriptor.is_event:
            error = InvalidEventTypeError(self.descriptor.type)
        elif not self.client.event_server:
            error = EventServerNotConfiguredError()
        if error is not None:
            await invoke_callback(callback, error)
            return None

        watch = EventWatch(
            fetch=lambda: self.client.get_events(self.contract.address, self.name),
            inputs=self.descriptor.inputs,
            callback=callback,
            interval=self.event_poll_interval,
            name=self.name,
        )
        await watch.start()
        return watch


class BoundMethod:
    """A method bound to its positional argument values."""

    def __init__(self, invoker: MethodInvoker, args: Tuple[Any, ...]) -> None:
        self._invoker = invoker
        self.args = args

    async def call(
        self,
        options: Union[OptionsLike, Callback] = None,
        callback: Optional[Callback] = None,
    ) -> Any:
        """
        Run a constant (``pure``/``view``) method.

        Args:
            options: Options override, or the callback itself
            callback: Optional ``callback(error, result)``

        Returns:
            Decoded output (single values unwrapped), or the callback's
            return value
        """
        if callable(options) and callback is None:
            callback, options = options, None
        return await self._invoker._call(self.args, options, callback=callback)

    async def send(
        self,
        options: Union[OptionsLike, Callback] = None,
        private_key: Union[Optional[str], Callback] = None,
        callback: Optional[Callback] = None,
    ) -> Any:
        """
        Build, sign and broadcast a state-changing call.

        Args:
            options: Options override, or the callback itself
            private_key: Signing key (client default if None), or the callback
            callback: Optional ``callback(error, result)``

        Returns:
            Transaction id when ``shouldPollResponse`` is False, otherwise
            the decoded contract result
        """
        if callable(private_key) and callback is None:
            callback, private_key = private_key, None
        if callable(options) and callback is None:
            callback, options = options, None
        return await self._invoker._send(self.args, options, private_key, callback=callback)

    async def watch(self, callback: Optional[Callback] = None) -> Optional["EventWatch"]:
        return await self._invoker._watch(callback)


class EventWatch:
    """
    Polling subscription to an event feed.

    Inactive until :meth:`start`; :meth:`stop` returns it to inactive and
    can be called any number of times. Each activation has its own
    watermark, and no delivery happens once it is stopped, even for a
    fetch that was already in flight.
    """

    def __init__(
        self,
        fetch: Callable[[], Awaitable[List[Dict[str, Any]]]],
        inputs: Sequence[Mapping[str, Any]],
        callback: Callback,
        interval: float = EVENT_POLL_INTERVAL_SECONDS,
        name: str = "",
    ) -> None:
        self._fetch = fetch
        self._inputs = inputs
        self._callback = callback
        self._interval = interval
        self._name = name
        self._stop_event: Optional[asyncio.Event] = None
        self._poll_task: Optional[asyncio.Task[None]] = None
        self.watermark: Optional[EventWatermark] = None

    @property
    def is_active(self) -> bool:
        return self._stop_event is not None and not self._stop_event.is_set()

    async def start(self) -> None:
        """Deliver the current feed once, then poll it every interval."""
        if self.is_active:
            return

        stop_event = asyncio.Event()
        watermark = EventWatermark()
        self._stop_event = stop_event
        self.watermark = watermark
        _logger.info("Starting event watch", extra={"event": self._name, "interval": self._interval})

        await self._poll_guarded(stop_event, watermark)
        if stop_event.is_set():
            return
        self._poll_task = asyncio.create_task(self._poll_loop(stop_event, watermark))

    def stop(self) -> None:
        stop_event = self._stop_event
        if stop_event is None or stop_event.is_set():
            return
        stop_event.set()
        _logger.info("Stopped event watch", extra={"event": self._name})

    async def wait_stopped(self) -> None:
        """Wait for the poll task of the last activation to finish."""
        if self._poll_task is not None:
            await self._poll_task

    async def _poll_loop(self, stop_event: asyncio.Event, watermark: EventWatermark) -> None:
        while not stop_event.is_set():
            # Wait for interval or stop signal
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=self._interval)
                break
            except asyncio.TimeoutError:
                pass
            await self._poll_guarded(stop_event, watermark)
        _logger.debug("Event poll loop ended", extra={"event": self._name})

    async def _poll_guarded(self, stop_event: asyncio.Event, watermark: EventWatermark) -> None:
        try:
            await self._poll_once(stop_event, watermark)
        except Exception as e:
            # Raised by the subscriber's own callback
            _logger.error("Event callback failed", extra={"event": self._name, "error": str(e)})

    async def _poll_once(self, stop_event: asyncio.Event, watermark: EventWatermark) -> None:
        try:
            events = await self._fetch()
            fresh = [parse_event(event, self._inputs) for event in watermark.admit(events)]
        except Exception as e:
            _logger.warning("Event fetch failed", extra={"event": self._name, "error": str(e)})
            if not stop_event.is_set():
                await invoke_callback(self._callback, e)
            return

        for event in fresh:
            if stop_event.is_set():
                return
            await invoke_callback(self._callback, None, event)


def _result_flag(response: Any, nested: bool = False) -> bool:
    if not isinstance(response, Mapping):
        return False
    result = response.get("result")
    if nested:
        return isinstance(result, Mapping) and bool(result.get("result"))
    return bool(result)
