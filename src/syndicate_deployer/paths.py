"""Contract asset paths for syndicate-deployer library."""

from pathlib import Path
from typing import Optional, Union

from .constants import GOVERNANCE_WASM, TOKEN_WASM
from .exceptions import ContractAssetNotFoundError


def get_default_contracts_dir() -> Path:
    """
    Get default directory holding compiled contracts.

    Returns:
        Path to ./contracts
    """
    return Path.cwd() / "contracts"


def get_wasm_paths(contracts_root: Optional[Union[Path, str]] = None) -> tuple[Path, Path]:
    """
    Get compiled contract paths.

    Args:
        contracts_root: Custom contracts directory (defaults to ./contracts)

    Returns:
        Tuple of (token_wasm_path, governance_wasm_path)
    """
    if contracts_root is None:
        contracts_root = get_default_contracts_dir()
    else:
        contracts_root = Path(contracts_root).absolute()

    return (contracts_root / TOKEN_WASM, contracts_root / GOVERNANCE_WASM)


def load_wasm(path: Union[Path, str]) -> bytes:
    """
    Read a compiled contract as raw bytes.

    Raises:
        ContractAssetNotFoundError: If the file does not exist
    """
    wasm_path = Path(path)
    if not wasm_path.is_file():
        raise ContractAssetNotFoundError(f"Contract WASM not found at {wasm_path}")
    return wasm_path.read_bytes()
