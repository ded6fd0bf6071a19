"""Address string codec for syndicate-deployer library."""

import string
from typing import Any

import pycspr

from .exceptions import InvalidAddressError
from .types import ADDRESS_LENGTH, Address, AddressKind

# Public key algorithm tag -> (algorithm name, raw key length)
PUBLIC_KEY_ALGORITHMS = {
    "01": ("ed25519", 32),
    "02": ("secp256k1", 33),
}


def _decode_hex(text: str, expected_length: int, original: str) -> bytes:
    # bytes.fromhex tolerates whitespace, addresses must not
    if len(text) % 2 or not all(c in string.hexdigits for c in text):
        raise InvalidAddressError(f"Address is not valid hex: {original!r}")
    raw = bytes.fromhex(text)
    if len(raw) != expected_length:
        raise InvalidAddressError(
            f"Address must encode {expected_length} bytes, got {len(raw)}: {original!r}"
        )
    return raw


def decode(address: Any) -> Address:
    """
    Decode a prefixed address string.

    Prefixes are tried in AddressKind order (account-hash- first) and exactly
    one is stripped.

    Args:
        address: String such as "hash-<64 hex>", "contract-<64 hex>" or
                 "account-hash-<64 hex>"

    Returns:
        Address with the matching kind and 32 raw bytes

    Raises:
        InvalidAddressError: If the prefix is unknown or the remainder is not
                             32 bytes of hex
    """
    if not isinstance(address, str) or not address:
        raise InvalidAddressError(f"Invalid address string: {address!r}")

    for kind in AddressKind:
        if address.startswith(kind.value):
            remainder = address[len(kind.value):]
            return Address(kind, _decode_hex(remainder, ADDRESS_LENGTH, address))

    raise InvalidAddressError(f"Unknown address prefix: {address!r}")


def encode(address: Address) -> str:
    """Render an Address back to its prefixed string form."""
    return str(address)


# Name used by the wizard for argument conversion
string_to_key = decode


def account_hash_from_public_key(public_key_hex: str) -> Address:
    """
    Compute the account hash of a tagged public key.

    Args:
        public_key_hex: Hex public key with algorithm tag ("01" ed25519,
                        "02" secp256k1)

    Returns:
        Address of kind ACCOUNT_HASH

    Raises:
        InvalidAddressError: If the tag is unknown or the key length is wrong
    """
    if not isinstance(public_key_hex, str) or len(public_key_hex) < 2:
        raise InvalidAddressError(f"Invalid public key: {public_key_hex!r}")

    tag = public_key_hex[:2]
    if tag not in PUBLIC_KEY_ALGORITHMS:
        raise InvalidAddressError(f"Unknown public key algorithm tag: {tag!r}")

    _, key_length = PUBLIC_KEY_ALGORITHMS[tag]
    raw_key = _decode_hex(public_key_hex[2:], key_length, public_key_hex)

    account_key = bytes.fromhex(tag) + raw_key
    return Address(AddressKind.ACCOUNT_HASH, pycspr.get_account_hash(account_key))
