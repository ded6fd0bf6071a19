"""Main API for syndicate-deployer library."""

import logging
import threading
from typing import Optional, Union

from .builder import (
    DeployRequest,
    governance_deploy_request,
    register_dao_request,
    token_deploy_request,
)
from .constants import DEFAULT_MAX_ATTEMPTS, DEFAULT_POLL_INTERVAL
from .effects import extract_new_address
from .exceptions import WalletNotConnectedError
from .paths import get_wasm_paths, load_wasm
from .rpc import CasperRpcClient
from .signer import Signer
from .submission import SubmissionFlow, SubmissionState, await_confirmation, sign_and_send
from .types import Address, DeployerConfig

logger = logging.getLogger(__name__)


class DaoDeployer:
    """Deploys a token and governance pair and registers it in the DAO registry."""

    def __init__(
        self,
        config: DeployerConfig,
        signer: Signer,
        client: Optional[CasperRpcClient] = None,
        *,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ):
        """
        Initialize the deployer.

        Args:
            config: Network and registry configuration
            signer: Wallet collaborator used for every deploy
            client: RPC client (defaults to one for config.rpc_url)
            poll_interval: Seconds between confirmation polls
            max_attempts: Confirmation polls before giving up
        """
        self.config = config
        self.signer = signer
        self.client = client or CasperRpcClient(config.rpc_url)
        self.poll_interval = poll_interval
        self.max_attempts = max_attempts

    def active_public_key(self) -> str:
        """
        Get the public key of the wallet's active account.

        Raises:
            WalletNotConnectedError: If no account is connected
        """
        account = self.signer.get_active_account()
        if account is None or not account.public_key:
            raise WalletNotConnectedError("Connect a wallet first")
        return account.public_key

    def _submit(self, request: DeployRequest) -> str:
        flow = sign_and_send(request, self.signer)
        flow.raise_for_error()
        return flow.deploy_hash

    def deploy_token(self, name: str, symbol: str) -> str:
        """
        Install the token contract.

        Args:
            name: Token (and syndicate) name
            symbol: Token symbol

        Returns:
            Deploy hash

        Raises:
            WalletNotConnectedError: If no account is connected
            ContractAssetNotFoundError: If Token.wasm is missing
            UserCancelledError: If the user declines to sign
            SubmissionRejectedError: If the wallet returns no deploy hash
        """
        public_key = self.active_public_key()
        token_wasm_path, _ = get_wasm_paths(self.config.contracts_dir)

        request = token_deploy_request(
            name, symbol, public_key, load_wasm(token_wasm_path), self.config.chain_name
        )
        logger.info(
            "Deploying token %s (%s), package key %s",
            name,
            symbol,
            request.args["odra_cfg_package_hash_key_name"].value,
        )
        return self._submit(request)

    def deploy_governance(self, token_address: Union[Address, str]) -> str:
        """
        Install the governance contract linked to a token.

        Returns:
            Deploy hash

        Raises:
            ValueError: If token_address is empty
            InvalidAddressError: If token_address is malformed
        """
        if not token_address:
            raise ValueError("Token contract address is required")

        public_key = self.active_public_key()
        _, governance_wasm_path = get_wasm_paths(self.config.contracts_dir)

        request = governance_deploy_request(
            token_address, public_key, load_wasm(governance_wasm_path), self.config.chain_name
        )
        logger.info("Deploying governance for token %s", token_address)
        return self._submit(request)

    def register_dao(
        self,
        token_address: Union[Address, str],
        governance_address: Union[Address, str],
    ) -> str:
        """
        Record a token/governance pair in the registry.

        Returns:
            Deploy hash

        Raises:
            ValueError: If an address is empty or no registry is configured
        """
        if not token_address or not governance_address:
            raise ValueError("Both token and governance addresses are required")
        if not self.config.registry_address:
            raise ValueError("Registry contract address is not configured")

        public_key = self.active_public_key()
        request = register_dao_request(
            self.config.registry_address,
            token_address,
            governance_address,
            public_key,
            self.config.chain_name,
        )
        logger.info("Registering DAO token=%s governance=%s", token_address, governance_address)
        return self._submit(request)

    def resolve_deployed_address(
        self, deploy_hash: str, cancel_event: Optional[threading.Event] = None
    ) -> Address:
        """
        Wait for an installation deploy and read the new contract address.

        Raises:
            ConfirmationTimeoutError: If the deploy is not executed in time
            PollingCancelledError: If cancel_event is set
            DeployRevertedError, NoEffectsError, AddressNotFoundError: from parsing
        """
        flow = SubmissionFlow(state=SubmissionState.SUBMITTED, deploy_hash=deploy_hash)
        flow = await_confirmation(
            flow,
            self.client,
            poll_interval=self.poll_interval,
            max_attempts=self.max_attempts,
            cancel_event=cancel_event,
        )
        flow.raise_for_error()

        address = extract_new_address(flow.execution_result)
        logger.info("Deploy %s created %s", deploy_hash, address)
        return address

    def deploy_url(self, deploy_hash: str) -> str:
        """Block explorer link for a deploy."""
        return f"{self.config.block_explorer_url}/deploy/{deploy_hash}"
