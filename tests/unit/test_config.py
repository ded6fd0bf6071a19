"""Unit tests for environment configuration."""

from pathlib import Path

import pytest

from syndicate_deployer.config import load_config
from syndicate_deployer.exceptions import InvalidAddressError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv("CASPER_RPC_URL", raising=False)
    monkeypatch.delenv("REGISTRY_CONTRACT_ADDRESS", raising=False)


class TestLoadConfig:
    """Test the load_config function."""

    def test_reads_environment(self, monkeypatch, rpc_url, registry_address):
        """Test that RPC URL and registry come from the environment."""
        monkeypatch.setenv("CASPER_RPC_URL", rpc_url)
        monkeypatch.setenv("REGISTRY_CONTRACT_ADDRESS", registry_address)

        config = load_config()

        assert config.rpc_url == rpc_url
        assert config.registry_address == registry_address
        assert config.chain_name == "casper-test"
        assert config.block_explorer_url == "https://testnet.cspr.live"
        assert config.contracts_dir is None

    def test_arguments_override_environment(self, monkeypatch, rpc_url):
        monkeypatch.setenv("CASPER_RPC_URL", "http://other:7777/rpc")

        config = load_config(rpc_url=rpc_url, contracts_dir="contracts")

        assert config.rpc_url == rpc_url
        assert config.contracts_dir == Path("contracts")

    def test_mainnet(self, rpc_url):
        config = load_config(rpc_url=rpc_url, network="mainnet")

        assert config.chain_name == "casper"
        assert config.block_explorer_url == "https://cspr.live"

    def test_registry_optional(self, rpc_url, monkeypatch):
        """Test that an empty registry variable counts as unset."""
        monkeypatch.setenv("REGISTRY_CONTRACT_ADDRESS", "")

        assert load_config(rpc_url=rpc_url).registry_address is None

    def test_missing_rpc_url(self):
        """Test that a missing RPC URL raises ValueError naming the variable."""
        with pytest.raises(ValueError, match="CASPER_RPC_URL"):
            load_config()

    def test_unknown_network(self, rpc_url):
        with pytest.raises(ValueError, match="Unknown network"):
            load_config(rpc_url=rpc_url, network="devnet")

    def test_malformed_registry(self, rpc_url):
        with pytest.raises(InvalidAddressError):
            load_config(rpc_url=rpc_url, registry_address="hash-xyz")
