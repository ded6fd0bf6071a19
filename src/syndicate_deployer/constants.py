"""Configuration constants for syndicate-deployer library."""

# 1 CSPR = 10^9 motes
MOTES_PER_CSPR = 1_000_000_000

# Network configuration for supported Casper networks
NETWORK_CONFIG = {
    "testnet": {
        "chain_name": "casper-test",
        "block_explorer_url": "https://testnet.cspr.live",
        "default_rpc_env": "CASPER_RPC_URL",
        "registry_env": "REGISTRY_CONTRACT_ADDRESS",
    },
    "mainnet": {
        "chain_name": "casper",
        "block_explorer_url": "https://cspr.live",
        "default_rpc_env": "CASPER_RPC_URL",
        "registry_env": "REGISTRY_CONTRACT_ADDRESS",
    },
}

# Standard payment per wizard action, in motes
TOKEN_PAYMENT = 500 * MOTES_PER_CSPR
GOVERNANCE_PAYMENT = 400 * MOTES_PER_CSPR
REGISTRY_PAYMENT = 100 * MOTES_PER_CSPR

# Confirmation polling defaults (~3 minutes ceiling)
DEFAULT_POLL_INTERVAL = 3.0
DEFAULT_MAX_ATTEMPTS = 60

DEFAULT_REQUEST_TIMEOUT = 30

# Deploy header defaults
DEFAULT_TTL_MS = 30 * 60 * 1000
DEFAULT_GAS_PRICE = 1

# Token init defaults
DEFAULT_DECIMALS = 9
DEFAULT_INITIAL_SUPPLY = 1_000_000_000
DEFAULT_BUY_RATE = 10

# Odra installer arguments
ODRA_PACKAGE_HASH_KEY_NAME = "odra_cfg_package_hash_key_name"
ODRA_ALLOW_KEY_OVERRIDE = "odra_cfg_allow_key_override"
ODRA_IS_UPGRADABLE = "odra_cfg_is_upgradable"
ODRA_IS_UPGRADE = "odra_cfg_is_upgrade"

TOKEN_KEY_PREFIX = "token_pkg_"
GOVERNANCE_KEY_PREFIX = "gov_pkg_"

REGISTER_DAO_ENTRY_POINT = "register_dao"

# Compiled contract file names
TOKEN_WASM = "Token.wasm"
GOVERNANCE_WASM = "Governance.wasm"

# Wallet events
SIGNED_IN_EVENT = "csprclick:signed_in"
SWITCHED_ACCOUNT_EVENT = "csprclick:switched_account"
SIGNED_OUT_EVENT = "csprclick:signed_out"
DISCONNECTED_EVENT = "csprclick:disconnected"
