"""Custom exception classes for syndicate-deployer library."""

from typing import Optional


class DeployError(Exception):
    """Base exception for deploy-related errors."""

    pass


class TransportError(DeployError, RuntimeError):
    """Raised when the node cannot be reached or answers with a non-2xx status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RpcError(DeployError, ValueError):
    """Raised when the node answers with a JSON-RPC error object."""

    def __init__(self, message: str, code: Optional[int] = None):
        super().__init__(message)
        self.code = code


class UnexpectedResultError(DeployError, ValueError):
    """Raised when an RPC result has a shape this library does not consume."""

    pass


class InvalidAddressError(DeployError, ValueError):
    """Raised when an address string or public key cannot be decoded."""

    pass


class UntypedArgumentError(DeployError, TypeError):
    """Raised when a deploy argument is not an explicitly typed CLValue."""

    pass


class ContractAssetNotFoundError(DeployError, FileNotFoundError):
    """Raised when a compiled contract WASM file is missing."""

    pass


class WalletNotConnectedError(DeployError, RuntimeError):
    """Raised when the signer has no active account."""

    pass


class UserCancelledError(DeployError):
    """Raised when the user declines to sign a deploy."""

    pass


class SubmissionRejectedError(DeployError, RuntimeError):
    """Raised when the signer returns no deploy hash."""

    pass


class ConfirmationTimeoutError(DeployError, TimeoutError):
    """Raised when a deploy is not executed within the polling budget."""

    def __init__(self, message: str, deploy_hash: Optional[str] = None, attempts: int = 0):
        super().__init__(message)
        self.deploy_hash = deploy_hash
        self.attempts = attempts


class PollingCancelledError(DeployError):
    """Raised when the cancellation signal stops a confirmation loop."""

    pass


class DeployRevertedError(DeployError, RuntimeError):
    """Raised when the node reports a failed execution."""

    def __init__(self, message: str, reason: Optional[str] = None):
        super().__init__(message)
        self.reason = reason


class NoEffectsError(DeployError, ValueError):
    """Raised when an execution result carries no effect list."""

    pass


class AddressNotFoundError(DeployError, ValueError):
    """Raised when no contract write is found in the execution effects."""

    pass


class WizardStepError(DeployError, ValueError):
    """Raised when a wizard action is attempted from the wrong step."""

    pass
