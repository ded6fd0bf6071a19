"""Deploy submission and confirmation for syndicate-deployer library."""

import logging
import threading
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Optional

from .builder import DeployRequest
from .constants import DEFAULT_MAX_ATTEMPTS, DEFAULT_POLL_INTERVAL
from .effects import parse_execution_result
from .exceptions import (
    ConfirmationTimeoutError,
    DeployError,
    NoEffectsError,
    PollingCancelledError,
    RpcError,
    SubmissionRejectedError,
    TransportError,
    UnexpectedResultError,
    UserCancelledError,
)
from .rpc import CasperRpcClient
from .signer import Signer
from .types import ExecutionResult

logger = logging.getLogger(__name__)


class SubmissionState(Enum):
    """Submission lifecycle states."""

    BUILDING = "building"
    AWAITING_SIGNATURE = "awaiting_signature"
    SUBMITTED = "submitted"
    POLLING = "polling"
    CONFIRMED = "confirmed"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


TERMINAL_STATES = frozenset(
    {SubmissionState.CONFIRMED, SubmissionState.FAILED, SubmissionState.TIMED_OUT}
)


@dataclass(frozen=True)
class SubmissionFlow:
    """Snapshot of one submission. Each transition returns a new snapshot."""

    state: SubmissionState = SubmissionState.BUILDING
    deploy_hash: Optional[str] = None
    execution_result: Optional[ExecutionResult] = None
    error: Optional[DeployError] = None

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES

    def raise_for_error(self) -> None:
        """Re-raise the error that ended this flow, if any."""
        if self.error is not None:
            raise self.error


def sign_and_send(request: DeployRequest, signer: Signer) -> SubmissionFlow:
    """
    Hand a deploy to the signer and collect its deploy hash.

    Args:
        request: Deploy to submit
        signer: Wallet collaborator

    Returns:
        SUBMITTED flow with deploy_hash set, or a FAILED flow carrying
        UserCancelledError / SubmissionRejectedError
    """
    flow = SubmissionFlow(state=SubmissionState.BUILDING)
    deploy_json = request.to_json()

    flow = replace(flow, state=SubmissionState.AWAITING_SIGNATURE)
    try:
        result = signer.send(deploy_json, request.payer)
    except UserCancelledError as e:
        logger.warning("Signature request cancelled by user")
        return replace(flow, state=SubmissionState.FAILED, error=e)

    if result is not None and result.cancelled:
        logger.warning("Signature request cancelled by user")
        return replace(
            flow,
            state=SubmissionState.FAILED,
            error=UserCancelledError("Transaction cancelled by user"),
        )

    if result is None or not result.deploy_hash:
        logger.warning("Signer returned no deploy hash")
        return replace(
            flow,
            state=SubmissionState.FAILED,
            error=SubmissionRejectedError("Transaction cancelled or failed to send"),
        )

    logger.info("Submitted deploy %s", result.deploy_hash)
    return replace(flow, state=SubmissionState.SUBMITTED, deploy_hash=result.deploy_hash)


def wait_for_deploy(
    client: CasperRpcClient,
    deploy_hash: str,
    *,
    poll_interval: float = DEFAULT_POLL_INTERVAL,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    cancel_event: Optional[threading.Event] = None,
) -> Dict[str, Any]:
    """
    Poll the node until a deploy has been executed.

    Any RPC or transport failure counts as "still pending" (the node answers
    not-found until the deploy is gossiped and executed).

    Args:
        client: RPC client
        deploy_hash: Hash returned by the signer
        poll_interval: Seconds to wait between attempts
        max_attempts: Maximum number of info_get_deploy calls
        cancel_event: Set it to stop polling before the next call

    Returns:
        The first entry of the deploy's execution_results

    Raises:
        ConfirmationTimeoutError: After max_attempts calls without a result
        PollingCancelledError: If cancel_event is set
    """
    if cancel_event is None:
        cancel_event = threading.Event()

    for attempt in range(1, max_attempts + 1):
        if cancel_event.is_set():
            raise PollingCancelledError(f"Stopped waiting for deploy {deploy_hash}")

        try:
            deploy_info = client.get_deploy(deploy_hash)
        except (RpcError, TransportError, UnexpectedResultError) as e:
            logger.debug("Deploy %s poll attempt %s failed: %s", deploy_hash, attempt, e)
        else:
            execution_results = deploy_info.get("execution_results")
            if isinstance(execution_results, list) and execution_results:
                logger.info("Deploy %s executed (attempt %s)", deploy_hash, attempt)
                return execution_results[0]
            logger.debug("Deploy %s pending on attempt %s", deploy_hash, attempt)

        # No wait after the last attempt
        if attempt < max_attempts and cancel_event.wait(poll_interval):
            raise PollingCancelledError(f"Stopped waiting for deploy {deploy_hash}")

    raise ConfirmationTimeoutError(
        f"Timeout waiting for deploy {deploy_hash} after {max_attempts} attempts",
        deploy_hash=deploy_hash,
        attempts=max_attempts,
    )


def await_confirmation(
    flow: SubmissionFlow,
    client: CasperRpcClient,
    *,
    poll_interval: float = DEFAULT_POLL_INTERVAL,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    cancel_event: Optional[threading.Event] = None,
) -> SubmissionFlow:
    """
    Drive a SUBMITTED flow to a terminal state.

    Returns:
        CONFIRMED flow with execution_result set, TIMED_OUT flow with a
        ConfirmationTimeoutError, or FAILED flow (cancelled or unreadable result)

    Raises:
        ValueError: If the flow is not SUBMITTED
    """
    if flow.state is not SubmissionState.SUBMITTED:
        raise ValueError(f"Cannot confirm a flow in state {flow.state.value}")

    flow = replace(flow, state=SubmissionState.POLLING)
    try:
        raw = wait_for_deploy(
            client,
            flow.deploy_hash,
            poll_interval=poll_interval,
            max_attempts=max_attempts,
            cancel_event=cancel_event,
        )
    except ConfirmationTimeoutError as e:
        logger.warning("Deploy %s not executed in time", flow.deploy_hash)
        return replace(flow, state=SubmissionState.TIMED_OUT, error=e)
    except PollingCancelledError as e:
        return replace(flow, state=SubmissionState.FAILED, error=e)

    try:
        execution_result = parse_execution_result(raw)
    except NoEffectsError as e:
        return replace(flow, state=SubmissionState.FAILED, error=e)

    return replace(flow, state=SubmissionState.CONFIRMED, execution_result=execution_result)


def submit_and_confirm(
    request: DeployRequest,
    signer: Signer,
    client: CasperRpcClient,
    *,
    poll_interval: float = DEFAULT_POLL_INTERVAL,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    cancel_event: Optional[threading.Event] = None,
) -> ExecutionResult:
    """
    Sign, submit and wait for one deploy.

    Returns:
        ExecutionResult of the executed deploy

    Raises:
        UserCancelledError, SubmissionRejectedError, ConfirmationTimeoutError,
        PollingCancelledError, NoEffectsError: from the terminal flow
    """
    flow = sign_and_send(request, signer)
    flow.raise_for_error()

    flow = await_confirmation(
        flow,
        client,
        poll_interval=poll_interval,
        max_attempts=max_attempts,
        cancel_event=cancel_event,
    )
    flow.raise_for_error()
    return flow.execution_result
