"""
Address, key and hashing helpers.

TRON-style chains use Ethereum's 20-byte account identifiers with a
``0x41`` network prefix. The same account therefore appears in three
forms:

- hex: ``41`` + 40 hex chars (node APIs)
- base58check: ``T...`` (user facing)
- ABI: ``0x`` + 40 hex chars, checksummed (ABI encoder input)
"""

from __future__ import annotations

import base58
from eth_account import Account
from eth_utils import keccak
from web3 import Web3

from chainmethod.constants import ADDRESS_HEX_LENGTH, ADDRESS_PREFIX_HEX
from chainmethod.errors import ValidationError

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


def _is_hex(value: str) -> bool:
    return bool(value) and all(ch in _HEX_DIGITS for ch in value)


def is_base58_address(address: str) -> bool:
    """Check whether ``address`` is a valid base58check account address."""
    if not isinstance(address, str) or len(address) != 34:
        return False
    try:
        raw = base58.b58decode_check(address)
    except ValueError:
        return False
    return len(raw) == 21 and raw[:1].hex() == ADDRESS_PREFIX_HEX


def to_hex_address(address: str) -> str:
    """
    Normalize an address to the ``41``-prefixed hex form.

    Args:
        address: base58check, ``41``-hex or ``0x``-hex address

    Returns:
        Lowercase ``41``-prefixed hex string

    Raises:
        ValidationError: If the value is not a recognized address
    """
    if not isinstance(address, str):
        raise ValidationError(f"address must be a string, got {type(address).__name__}")

    if is_base58_address(address):
        return base58.b58decode_check(address).hex()

    value = address[2:] if address.startswith(("0x", "0X")) else address
    if len(value) == 40 and _is_hex(value):
        return ADDRESS_PREFIX_HEX + value.lower()
    if len(value) == ADDRESS_HEX_LENGTH and value.startswith(ADDRESS_PREFIX_HEX) and _is_hex(value):
        return value.lower()

    raise ValidationError(f"Invalid address provided: {address!r}")


def to_abi_address(address: str) -> str:
    """Normalize an address to the checksummed ``0x`` form the ABI encoder expects."""
    hex_address = to_hex_address(address)
    return Web3.to_checksum_address("0x" + hex_address[len(ADDRESS_PREFIX_HEX):])


def to_base58_address(address: str) -> str:
    return base58.b58encode_check(bytes.fromhex(to_hex_address(address))).decode()


def address_from_private_key(private_key: str) -> str:
    """
    Derive the ``41``-hex account address for a private key.

    Raises:
        ValidationError: If the key is malformed (key not shown)
    """
    try:
        account = Account.from_key(private_key)
    except Exception:
        raise ValidationError("Invalid private key format (key not shown for security)") from None
    return to_hex_address(account.address)


def sha3(text: str) -> str:
    """Keccak-256 of a UTF-8 string, as unprefixed hex."""
    return keccak(text=text).hex()


def to_utf8(hex_string: str) -> str:
    """Decode a hex payload (``0x`` optional) as UTF-8, replacing invalid bytes."""
    if not hex_string:
        return ""
    value = hex_string[2:] if hex_string.startswith(("0x", "0X")) else hex_string
    return bytes.fromhex(value).decode("utf-8", errors="replace")
