"""
syndicate-deployer: Python library for launching Syndicate DAOs on Casper
"""

from importlib.metadata import PackageNotFoundError, version

from .addresses import account_hash_from_public_key, decode, encode, string_to_key
from .builder import (
    CLType,
    CLValue,
    DeployRequest,
    SessionKind,
    build_deploy,
    governance_deploy_request,
    register_dao_request,
    token_deploy_request,
)
from .config import load_config
from .deployer import DaoDeployer
from .effects import extract_new_address, parse_execution_result
from .exceptions import (
    AddressNotFoundError,
    ConfirmationTimeoutError,
    ContractAssetNotFoundError,
    DeployError,
    DeployRevertedError,
    InvalidAddressError,
    NoEffectsError,
    PollingCancelledError,
    RpcError,
    SubmissionRejectedError,
    TransportError,
    UnexpectedResultError,
    UntypedArgumentError,
    UserCancelledError,
    WalletNotConnectedError,
    WizardStepError,
)
from .rpc import CasperRpcClient
from .submission import (
    SubmissionFlow,
    SubmissionState,
    await_confirmation,
    sign_and_send,
    submit_and_confirm,
    wait_for_deploy,
)
from .types import Address, AddressKind, ExecutionResult, KeyTag, Transform
from .wizard import WizardState

try:
    __version__ = version("syndicate-deployer")
except PackageNotFoundError:
    __version__ = None

__all__ = [
    "Address",
    "AddressKind",
    "KeyTag",
    "decode",
    "encode",
    "string_to_key",
    "account_hash_from_public_key",
    "CasperRpcClient",
    "CLType",
    "CLValue",
    "SessionKind",
    "DeployRequest",
    "build_deploy",
    "token_deploy_request",
    "governance_deploy_request",
    "register_dao_request",
    "SubmissionFlow",
    "SubmissionState",
    "sign_and_send",
    "wait_for_deploy",
    "await_confirmation",
    "submit_and_confirm",
    "ExecutionResult",
    "Transform",
    "parse_execution_result",
    "extract_new_address",
    "DaoDeployer",
    "WizardState",
    "load_config",
    "DeployError",
    "TransportError",
    "RpcError",
    "UnexpectedResultError",
    "InvalidAddressError",
    "UntypedArgumentError",
    "ContractAssetNotFoundError",
    "WalletNotConnectedError",
    "UserCancelledError",
    "SubmissionRejectedError",
    "ConfirmationTimeoutError",
    "PollingCancelledError",
    "DeployRevertedError",
    "NoEffectsError",
    "AddressNotFoundError",
    "WizardStepError",
]
