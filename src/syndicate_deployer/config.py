"""Environment configuration for syndicate-deployer library."""

import os
from pathlib import Path
from typing import Optional, Union

from .addresses import decode
from .constants import NETWORK_CONFIG
from .types import DeployerConfig


def load_config(
    rpc_url: Optional[str] = None,
    registry_address: Optional[str] = None,
    network: str = "testnet",
    contracts_dir: Optional[Union[Path, str]] = None,
) -> DeployerConfig:
    """
    Build a DeployerConfig from arguments and environment.

    Args:
        rpc_url: Node RPC URL (defaults to $CASPER_RPC_URL)
        registry_address: Registry contract hash (defaults to
                          $REGISTRY_CONTRACT_ADDRESS, may stay unset)
        network: Key of NETWORK_CONFIG ("testnet" or "mainnet")
        contracts_dir: Directory with compiled contracts

    Returns:
        DeployerConfig

    Raises:
        ValueError: If the network is unknown or no RPC URL is available
        InvalidAddressError: If the registry address is malformed
    """
    if network not in NETWORK_CONFIG:
        raise ValueError(f"Unknown network: {network}")
    network_config = NETWORK_CONFIG[network]

    # Get values from environment if not provided
    if rpc_url is None:
        rpc_url = os.environ.get(network_config["default_rpc_env"])
    if registry_address is None:
        registry_address = os.environ.get(network_config["registry_env"]) or None

    if not rpc_url:
        raise ValueError(
            f"RPC URL required: set ${network_config['default_rpc_env']} environment "
            "variable, or pass rpc_url parameter"
        )

    if registry_address is not None:
        # Fail early on a malformed address
        decode(registry_address)

    return DeployerConfig(
        rpc_url=rpc_url,
        chain_name=network_config["chain_name"],
        block_explorer_url=network_config["block_explorer_url"],
        registry_address=registry_address,
        contracts_dir=Path(contracts_dir) if contracts_dir is not None else None,
    )
