"""
ABI helpers: method descriptors, parameter encoding and result decoding.

Encoding and decoding are delegated to ``eth_abi``; this module only
decides which types (and names) to feed it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from eth_abi import decode as abi_decode
from eth_abi import encode as abi_encode

from .constants import CONSTANT_MUTABILITIES, SELECTOR_HEX_LENGTH
from .errors import DecodeError, ValidationError
from .models import Parameter
from .utils.address import sha3, to_hex_address

__all__ = [
    "MethodDescriptor",
    "get_param_types",
    "get_function_selector",
    "encode_parameters",
    "decode_output",
    "unwrap_single",
    "parse_event",
]


def get_param_types(params: Sequence[Mapping[str, Any]]) -> Tuple[str, ...]:
    return tuple(param["type"] for param in params)


def get_function_selector(abi: Mapping[str, Any]) -> str:
    """Canonical signature ``name(type1,type2,...)`` of an ABI entry."""
    return f"{abi['name']}({','.join(get_param_types(abi.get('inputs') or []))})"


@dataclass(frozen=True)
class MethodDescriptor:
    """Immutable view of one ABI entry.

    Attributes:
        name: Method or event name
        type: ABI entry type ("function", "event", ...)
        inputs: Input descriptors
        outputs: Output descriptors
        param_types: Ordered input types
        state_mutability: Mutability class as declared (may be empty)
        function_selector: Canonical signature, e.g. "balanceOf(address)"
        signature: First 4 bytes (8 hex chars) of keccak256(name)
    """
    name: str
    type: str
    inputs: Tuple[Mapping[str, Any], ...]
    outputs: Tuple[Mapping[str, Any], ...]
    param_types: Tuple[str, ...]
    state_mutability: str
    function_selector: str
    signature: str

    @classmethod
    def from_abi(cls, abi: Mapping[str, Any]) -> "MethodDescriptor":
        inputs = tuple(abi.get("inputs") or ())
        outputs = tuple(abi.get("outputs") or ())
        return cls(
            name=abi["name"],
            type=abi.get("type") or "function",
            inputs=inputs,
            outputs=outputs,
            param_types=get_param_types(inputs),
            state_mutability=_state_mutability(abi),
            function_selector=get_function_selector(abi),
            signature=sha3(abi["name"])[:SELECTOR_HEX_LENGTH],
        )

    @property
    def is_constant(self) -> bool:
        return self.state_mutability.lower() in CONSTANT_MUTABILITIES

    @property
    def is_event(self) -> bool:
        return self.type.lower() == "event"


def _state_mutability(abi: Mapping[str, Any]) -> str:
    # Pre-0.4.16 ABIs only carry the ``constant``/``payable`` flags
    if abi.get("stateMutability"):
        return str(abi["stateMutability"])
    if abi.get("constant"):
        return "view"
    if abi.get("payable"):
        return "payable"
    return "nonpayable"


def encode_parameters(parameters: Sequence[Union[Parameter, Mapping[str, Any]]]) -> str:
    """ABI-encode a parameter list as unprefixed hex."""
    types: List[str] = []
    values: List[Any] = []
    for param in parameters:
        if isinstance(param, Parameter):
            types.append(param.type)
            values.append(param.value)
        else:
            types.append(param["type"])
            values.append(param["value"])
    if not types:
        return ""
    return abi_encode(types, values).hex()


def decode_output(outputs: Sequence[Mapping[str, Any]], data: str) -> Union[Dict[str, Any], List[Any]]:
    """
    Decode a result payload against output descriptors.

    When every output is named the result is a dict keyed by name,
    otherwise a positional list.

    Args:
        outputs: Output descriptors of the ABI entry
        data: Hex payload, ``0x`` optional

    Returns:
        Decoded values

    Raises:
        DecodeError: If the payload does not match the output types
    """
    types = [output["type"] for output in outputs]
    value = data[2:] if data.startswith(("0x", "0X")) else data
    try:
        decoded = abi_decode(types, bytes.fromhex(value))
    except Exception as exc:
        raise DecodeError(f"Failed to decode output: {exc}", data=data) from exc

    if outputs and all(output.get("name") for output in outputs):
        return {output["name"]: item for output, item in zip(outputs, decoded)}
    return list(decoded)


def unwrap_single(decoded: Union[Dict[str, Any], List[Any]]) -> Any:
    """Return the only value of a one-element result, else the result itself."""
    if len(decoded) != 1:
        return decoded
    if isinstance(decoded, dict):
        return next(iter(decoded.values()))
    return decoded[0]


def parse_event(event: Mapping[str, Any], inputs: Sequence[Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Key an event record's ``result`` by the event's input names.

    Address-typed values are converted to the ``41``-hex form. The input
    record is not modified.

    Args:
        event: Event record from the event source
        inputs: Input descriptors of the event ABI entry

    Returns:
        New event record
    """
    parsed = dict(event)
    result: Optional[Any] = event.get("result")
    if not result:
        return parsed

    if isinstance(result, Mapping):
        keyed = dict(result)
        for param in inputs:
            name = param.get("name")
            if param.get("type") == "address" and name in keyed:
                keyed[name] = _event_address(keyed[name])
    elif isinstance(result, (list, tuple)):
        keyed = {}
        for param, value in zip(inputs, result):
            if param.get("type") == "address":
                value = _event_address(value)
            keyed[param.get("name")] = value
    else:
        return parsed

    parsed["result"] = keyed
    return parsed


def _event_address(value: Any) -> Any:
    if not isinstance(value, str):
        return value
    try:
        return to_hex_address(value)
    except ValidationError:
        # Leave unrecognized values as reported by the source
        return value
