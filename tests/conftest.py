"""Shared pytest fixtures for syndicate-deployer tests."""

import json
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import pytest

from syndicate_deployer.types import ActiveAccount, DeployerConfig, SendResult

RPC_URL = "http://test-node.example.com/rpc"

# ed25519 public key (tag 01 + 32 bytes)
PUBLIC_KEY = "01" + "5b" * 32

REGISTRY_ADDRESS = "hash-" + "ab" * 32
TOKEN_ADDRESS = "hash-9824d60dc3a5c44a20b9fd260a412437933835b52fc683d8ae36e4ec2114843e"
GOVERNANCE_ADDRESS = "contract-" + "cd" * 32


class FakeSigner:
    """In-memory wallet: records sent deploys and replies with scripted results."""

    def __init__(
        self,
        public_key: Optional[str] = PUBLIC_KEY,
        results: Optional[List[Optional[SendResult]]] = None,
    ):
        self.public_key = public_key
        self.results = list(results) if results is not None else None
        self.sent: List[Dict[str, Any]] = []
        self.handlers: Dict[str, List[Callable[[Any], None]]] = {}

    def get_active_account(self) -> Optional[ActiveAccount]:
        if self.public_key is None:
            return None
        return ActiveAccount(public_key=self.public_key)

    def send(self, deploy_json: Dict[str, Any], public_key_hex: str) -> Optional[SendResult]:
        self.sent.append(deploy_json)
        if self.results is not None:
            return self.results.pop(0)
        # Default: accept and echo the deploy's own hash
        return SendResult(deploy_hash=deploy_json["deploy"]["hash"])

    def on(self, event_name: str, callback: Callable[[Any], None]) -> None:
        self.handlers.setdefault(event_name, []).append(callback)

    def emit(self, event_name: str, event: Any = None) -> None:
        for callback in self.handlers.get(event_name, []):
            callback(event)


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def load_fixture(fixtures_dir: Path) -> Callable[[str], Dict[str, Any]]:
    """Return a loader for JSON fixtures by file name."""

    def _load(name: str) -> Dict[str, Any]:
        with open(fixtures_dir / name) as f:
            return json.load(f)

    return _load


@pytest.fixture
def deploy_success(load_fixture) -> Dict[str, Any]:
    """info_get_deploy result for an executed token installation."""
    return load_fixture("deploy_success.json")


@pytest.fixture
def deploy_failure(load_fixture) -> Dict[str, Any]:
    """info_get_deploy result for a reverted deploy."""
    return load_fixture("deploy_failure.json")


@pytest.fixture
def rpc_url() -> str:
    return RPC_URL


@pytest.fixture
def public_key() -> str:
    return PUBLIC_KEY


@pytest.fixture
def signer() -> FakeSigner:
    return FakeSigner()


@pytest.fixture
def contracts_dir(tmp_path: Path) -> Path:
    """Create a contracts directory with dummy WASM files."""
    contracts = tmp_path / "contracts"
    contracts.mkdir()
    (contracts / "Token.wasm").write_bytes(b"\x00asm\x01\x00\x00\x00token")
    (contracts / "Governance.wasm").write_bytes(b"\x00asm\x01\x00\x00\x00governance")
    return contracts


@pytest.fixture
def config(contracts_dir: Path) -> DeployerConfig:
    return DeployerConfig(
        rpc_url=RPC_URL,
        chain_name="casper-test",
        block_explorer_url="https://testnet.cspr.live",
        registry_address=REGISTRY_ADDRESS,
        contracts_dir=contracts_dir,
    )


@pytest.fixture
def make_signer() -> Callable[..., FakeSigner]:
    """Return the FakeSigner class for tests that script wallet replies."""
    return FakeSigner


@pytest.fixture
def token_address() -> str:
    return TOKEN_ADDRESS


@pytest.fixture
def governance_address() -> str:
    return GOVERNANCE_ADDRESS


@pytest.fixture
def registry_address() -> str:
    return REGISTRY_ADDRESS
