"""Deploy construction for syndicate-deployer library."""

import math
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Union

import pycspr
from pycspr.crypto import cl_checksum
from pycspr.types import (
    CL_Bool,
    CL_Key,
    CL_KeyType,
    CL_String,
    CL_U8,
    CL_U256,
    CL_U512,
    CL_Value,
    Deploy,
    DeployParameters,
    DeployTimeToLive,
    ModuleBytes,
    StoredContractByHash,
    Timestamp,
)

from .addresses import account_hash_from_public_key, decode
from .constants import (
    DEFAULT_BUY_RATE,
    DEFAULT_DECIMALS,
    DEFAULT_GAS_PRICE,
    DEFAULT_INITIAL_SUPPLY,
    DEFAULT_TTL_MS,
    GOVERNANCE_KEY_PREFIX,
    GOVERNANCE_PAYMENT,
    ODRA_ALLOW_KEY_OVERRIDE,
    ODRA_IS_UPGRADABLE,
    ODRA_IS_UPGRADE,
    ODRA_PACKAGE_HASH_KEY_NAME,
    REGISTER_DAO_ENTRY_POINT,
    REGISTRY_PAYMENT,
    TOKEN_KEY_PREFIX,
    TOKEN_PAYMENT,
)
from .exceptions import UntypedArgumentError
from .types import Address, KeyTag


class CLType(Enum):
    """
    Argument types accepted by the builder.

    Value strings are the node's JSON type names.
    """

    BOOL = "Bool"
    U8 = "U8"
    U256 = "U256"
    U512 = "U512"
    STRING = "String"
    KEY = "Key"


_KEY_TYPES = {
    KeyTag.ACCOUNT: CL_KeyType.ACCOUNT,
    KeyTag.HASH: CL_KeyType.HASH,
}


@dataclass(frozen=True)
class CLValue:
    """An explicitly typed deploy argument."""

    cl_type: CLType
    value: Any

    def to_cl_value(self) -> CL_Value:
        """Equivalent pycspr CL value."""
        match self.cl_type:
            case CLType.BOOL:
                return CL_Bool(self.value)
            case CLType.U8:
                return CL_U8(self.value)
            case CLType.U256:
                return CL_U256(self.value)
            case CLType.U512:
                return CL_U512(self.value)
            case CLType.STRING:
                return CL_String(self.value)
            case CLType.KEY:
                return CL_Key(self.value.raw, _KEY_TYPES[self.value.key_tag])
            case _:
                raise UntypedArgumentError(f"Unsupported CLType: {self.cl_type}")

    def to_bytes(self) -> bytes:
        """Value bytes, without the length prefix or type tag."""
        return pycspr.to_bytes(self.to_cl_value())

    def to_json(self) -> Dict[str, Any]:
        return pycspr.to_json(self.to_cl_value())


def _check_uint(value: Any, bits: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"Expected an integer, got {type(value).__name__}")
    if not 0 <= value < 2**bits:
        raise ValueError(f"Value {value} out of range for u{bits}")
    return value


def cl_string(value: str) -> CLValue:
    if not isinstance(value, str):
        raise TypeError(f"Expected a string, got {type(value).__name__}")
    return CLValue(CLType.STRING, value)


def cl_u8(value: int) -> CLValue:
    return CLValue(CLType.U8, _check_uint(value, 8))


def cl_u256(value: int) -> CLValue:
    return CLValue(CLType.U256, _check_uint(value, 256))


def cl_u512(value: int) -> CLValue:
    return CLValue(CLType.U512, _check_uint(value, 512))


def cl_bool(value: bool) -> CLValue:
    if not isinstance(value, bool):
        raise TypeError(f"Expected a bool, got {type(value).__name__}")
    return CLValue(CLType.BOOL, value)


def cl_key(address: Union[Address, str]) -> CLValue:
    """Key argument from an Address or a prefixed address string."""
    if isinstance(address, str):
        address = decode(address)
    if not isinstance(address, Address):
        raise TypeError(f"Expected an Address, got {type(address).__name__}")
    return CLValue(CLType.KEY, address)


class SessionKind(Enum):
    """
    Session code variants.

    Value strings are the node's JSON variant names.
    """

    MODULE_BYTES = "ModuleBytes"
    STORED_CONTRACT_BY_HASH = "StoredContractByHash"


def _cl_args(args: Mapping[str, CLValue]) -> Dict[str, CL_Value]:
    return {name: value.to_cl_value() for name, value in args.items()}


def _timestamp_seconds(timestamp_ms: int) -> float:
    # pycspr hashes int(seconds * 1000); nudge up when the float lands just below
    seconds = timestamp_ms / 1000
    if int(seconds * 1000) < timestamp_ms:
        seconds = math.nextafter(seconds, math.inf)
    return seconds


def _format_timestamp(timestamp_ms: int) -> str:
    moment = datetime.fromtimestamp(timestamp_ms // 1000, tz=timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{timestamp_ms % 1000:03d}Z"


@dataclass(frozen=True)
class DeployRequest:
    """
    One immutable deploy, ready to hand to a signer.

    Built by build_deploy(); never mutated afterwards. The pycspr deploy is
    derived on demand by to_deploy().
    """

    kind: SessionKind
    args: Mapping[str, CLValue]
    payer: str  # Public key hex
    payment_amount: int  # Motes
    chain_name: str
    module_bytes: Optional[bytes] = None
    contract_hash: Optional[Address] = None
    entry_point: Optional[str] = None
    timestamp_ms: int = field(default_factory=lambda: int(time.time() * 1000))
    ttl_ms: int = DEFAULT_TTL_MS
    gas_price: int = DEFAULT_GAS_PRICE

    def to_deploy(self) -> Deploy:
        """Assemble the unsigned pycspr Deploy, hashes included."""
        # Built directly: create_deploy_parameters rounds the timestamp again
        params = DeployParameters(
            account_public_key=pycspr.factory.create_public_key_from_account_key(
                bytes.fromhex(self.payer)
            ),
            chain_name=self.chain_name,
            dependencies=[],
            gas_price=self.gas_price,
            timestamp=Timestamp(_timestamp_seconds(self.timestamp_ms)),
            ttl=DeployTimeToLive.from_milliseconds(self.ttl_ms),
        )
        payment = pycspr.create_standard_payment(self.payment_amount)

        if self.kind is SessionKind.MODULE_BYTES:
            session = ModuleBytes(args=_cl_args(self.args), module_bytes=self.module_bytes or b"")
        else:
            session = StoredContractByHash(
                args=_cl_args(self.args),
                entry_point=self.entry_point,
                hash=self.contract_hash.raw,
            )

        return pycspr.create_deploy(params, payment, session)

    def body_hash(self) -> bytes:
        return self.to_deploy().header.body_hash

    @property
    def deploy_hash(self) -> str:
        """Checksummed hex, as it appears in to_json()."""
        return cl_checksum.encode_digest(self.to_deploy().hash)

    def to_json(self) -> Dict[str, Any]:
        """
        Serialise to the deploy JSON accepted by the wallet.

        Returns:
            {"deploy": {hash, header, payment, session, approvals}}
        """
        deploy = pycspr.to_json(self.to_deploy())
        # pycspr drops the fraction for whole-second timestamps
        deploy["header"]["timestamp"] = _format_timestamp(self.timestamp_ms)
        return {"deploy": deploy}


def build_deploy(
    kind: SessionKind,
    args: Mapping[str, Any],
    payer: str,
    payment_amount: int,
    chain_name: str,
    *,
    module_bytes: Optional[bytes] = None,
    contract_hash: Optional[Union[Address, str]] = None,
    entry_point: Optional[str] = None,
    timestamp_ms: Optional[int] = None,
    ttl_ms: int = DEFAULT_TTL_MS,
    gas_price: int = DEFAULT_GAS_PRICE,
) -> DeployRequest:
    """
    Assemble a DeployRequest.

    Args:
        kind: Session kind
        args: Argument name -> CLValue
        payer: Public key hex of the signing account
        payment_amount: Payment in motes
        chain_name: Network chain name, e.g. "casper-test"
        module_bytes: Compiled WASM (MODULE_BYTES only)
        contract_hash: Target contract (STORED_CONTRACT_BY_HASH only)
        entry_point: Entry point name (STORED_CONTRACT_BY_HASH only)
        timestamp_ms: Deploy timestamp (defaults to now)
        ttl_ms: Time to live
        gas_price: Gas price

    Returns:
        DeployRequest

    Raises:
        UntypedArgumentError: If any argument is not a CLValue
        InvalidAddressError: If payer or contract_hash cannot be decoded
        ValueError: If the session fields do not match kind
    """
    for name, value in args.items():
        if not isinstance(value, CLValue):
            raise UntypedArgumentError(
                f"Argument '{name}' must be a CLValue, got {type(value).__name__}"
            )

    # Validates the key; the hash itself is not needed here
    account_hash_from_public_key(payer)

    if payment_amount < 0:
        raise ValueError(f"Payment amount cannot be negative: {payment_amount}")
    if not chain_name:
        raise ValueError("Chain name is required")

    match kind:
        case SessionKind.MODULE_BYTES:
            if module_bytes is None:
                raise ValueError("module_bytes is required for a module bytes deploy")
            if contract_hash is not None or entry_point is not None:
                raise ValueError("Module bytes deploys take no contract hash or entry point")
        case SessionKind.STORED_CONTRACT_BY_HASH:
            if contract_hash is None or not entry_point:
                raise ValueError("contract_hash and entry_point are required for a contract call")
            if module_bytes is not None:
                raise ValueError("Contract calls take no module bytes")
            if isinstance(contract_hash, str):
                contract_hash = decode(contract_hash)

    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)

    return DeployRequest(
        kind=kind,
        args=MappingProxyType(dict(args)),
        payer=payer,
        payment_amount=payment_amount,
        chain_name=chain_name,
        module_bytes=bytes(module_bytes) if module_bytes is not None else None,
        contract_hash=contract_hash,
        entry_point=entry_point,
        timestamp_ms=timestamp_ms,
        ttl_ms=ttl_ms,
        gas_price=gas_price,
    )


def _installer_args(package_key_name: str) -> Dict[str, CLValue]:
    return {
        ODRA_PACKAGE_HASH_KEY_NAME: cl_string(package_key_name),
        ODRA_ALLOW_KEY_OVERRIDE: cl_bool(True),
        ODRA_IS_UPGRADABLE: cl_bool(True),
        ODRA_IS_UPGRADE: cl_bool(False),
    }


def token_deploy_request(
    name: str,
    symbol: str,
    payer: str,
    wasm: bytes,
    chain_name: str,
    *,
    decimals: int = DEFAULT_DECIMALS,
    initial_supply: int = DEFAULT_INITIAL_SUPPLY,
    buy_rate: int = DEFAULT_BUY_RATE,
    payment_amount: int = TOKEN_PAYMENT,
    timestamp_ms: Optional[int] = None,
) -> DeployRequest:
    """
    Build the token installation deploy.

    The initial supply goes to the payer's own account. The package hash is
    stored under a fresh "token_pkg_<ms>" named key.
    """
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)

    args: Dict[str, CLValue] = {
        "name": cl_string(name),
        "symbol": cl_string(symbol),
        "decimals": cl_u8(decimals),
        "initial_supply": cl_u256(initial_supply),
        "recipient": cl_key(account_hash_from_public_key(payer)),
        "buy_rate": cl_u256(buy_rate),
    }
    args.update(_installer_args(f"{TOKEN_KEY_PREFIX}{timestamp_ms}"))

    return build_deploy(
        SessionKind.MODULE_BYTES,
        args,
        payer,
        payment_amount,
        chain_name,
        module_bytes=wasm,
        timestamp_ms=timestamp_ms,
    )


def governance_deploy_request(
    token_address: Union[Address, str],
    payer: str,
    wasm: bytes,
    chain_name: str,
    *,
    payment_amount: int = GOVERNANCE_PAYMENT,
    timestamp_ms: Optional[int] = None,
) -> DeployRequest:
    """Build the governance installation deploy linked to a token contract."""
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)

    args: Dict[str, CLValue] = {"token_contract_hash": cl_key(token_address)}
    args.update(_installer_args(f"{GOVERNANCE_KEY_PREFIX}{timestamp_ms}"))

    return build_deploy(
        SessionKind.MODULE_BYTES,
        args,
        payer,
        payment_amount,
        chain_name,
        module_bytes=wasm,
        timestamp_ms=timestamp_ms,
    )


def register_dao_request(
    registry_address: Union[Address, str],
    token_address: Union[Address, str],
    governance_address: Union[Address, str],
    payer: str,
    chain_name: str,
    *,
    payment_amount: int = REGISTRY_PAYMENT,
    timestamp_ms: Optional[int] = None,
) -> DeployRequest:
    """Build the registry call that records a token/governance pair."""
    args = {
        "token_address": cl_key(token_address),
        "governance_address": cl_key(governance_address),
    }
    return build_deploy(
        SessionKind.STORED_CONTRACT_BY_HASH,
        args,
        payer,
        payment_amount,
        chain_name,
        contract_hash=registry_address,
        entry_point=REGISTER_DAO_ENTRY_POINT,
        timestamp_ms=timestamp_ms,
    )
