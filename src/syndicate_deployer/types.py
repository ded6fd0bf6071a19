"""Data types and dataclasses for syndicate-deployer library."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from .exceptions import InvalidAddressError

ADDRESS_LENGTH = 32


class AddressKind(Enum):
    """
    Address string prefixes.

    Value strings define de/serialization law. Order matters when decoding:
    ACCOUNT_HASH must be tried before the generic prefixes.
    """

    ACCOUNT_HASH = "account-hash-"
    HASH = "hash-"
    CONTRACT = "contract-"


class KeyTag(Enum):
    """CLKey variants used in deploy arguments (byte tag values)."""

    ACCOUNT = 0
    HASH = 1


@dataclass(frozen=True)
class Address:
    """A 32-byte account, contract or contract package hash."""

    kind: AddressKind
    raw: bytes

    def __post_init__(self) -> None:
        if len(self.raw) != ADDRESS_LENGTH:
            raise InvalidAddressError(
                f"Address must be {ADDRESS_LENGTH} bytes, got {len(self.raw)}"
            )

    @property
    def is_account(self) -> bool:
        return self.kind is AddressKind.ACCOUNT_HASH

    @property
    def key_tag(self) -> KeyTag:
        # Contract and package hashes share the generic Hash key variant
        return KeyTag.ACCOUNT if self.is_account else KeyTag.HASH

    def __str__(self) -> str:
        return f"{self.kind.value}{self.raw.hex()}"


class ExecutionOutcome(Enum):
    """Execution result variants as named by the node."""

    SUCCESS = "Success"
    FAILURE = "Failure"


@dataclass(frozen=True)
class Transform:
    """One state mutation from a deploy's execution effects."""

    key: str
    operation: Any  # "Write", {"WriteCLValue": {...}}, "AddUInt512", ...

    @property
    def is_write(self) -> bool:
        """
        True for write operations.

        Older nodes serialise the operation as the bare string "Write", newer
        ones as a mapping keyed by the operation kind.
        """
        if self.operation == "Write":
            return True
        return isinstance(self.operation, Mapping) and "Write" in self.operation


@dataclass(frozen=True)
class ExecutionResult:
    """A node's report for an executed deploy."""

    outcome: ExecutionOutcome
    # None when the node sent no effect list (or not a list)
    transforms: Optional[Tuple[Transform, ...]]
    error_message: Optional[str] = None
    cost: Optional[int] = None
    block_hash: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.outcome is ExecutionOutcome.SUCCESS


@dataclass(frozen=True)
class NodeStatus:
    """Subset of info_get_status consumed by this library."""

    chainspec_name: str
    api_version: Optional[str] = None
    build_version: Optional[str] = None
    last_block_height: Optional[int] = None


@dataclass(frozen=True)
class StoredContract:
    """A stored_value.Contract read from global state."""

    contract_package_hash: str
    contract_wasm_hash: Optional[str]
    named_keys: Dict[str, str] = field(default_factory=dict)
    entry_points: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class StoredCLValue:
    """A stored_value.CLValue read from global state."""

    cl_type: Any
    parsed: Any
    bytes: str


StoredValue = Union[StoredContract, StoredCLValue]


@dataclass(frozen=True)
class ConnectionCheck:
    """Outcome of an RPC liveness check."""

    success: bool
    message: str
    latency_ms: Optional[int] = None


@dataclass(frozen=True)
class ActiveAccount:
    """Account currently selected in the wallet."""

    public_key: str  # Hex, algorithm tag included


@dataclass(frozen=True)
class SendResult:
    """What the wallet returns after a send request."""

    deploy_hash: Optional[str] = None
    cancelled: bool = False


@dataclass(frozen=True)
class DeployerConfig:
    """Environment configuration for a deployer instance."""

    rpc_url: str
    chain_name: str
    block_explorer_url: str
    registry_address: Optional[str] = None
    contracts_dir: Optional[Path] = None
