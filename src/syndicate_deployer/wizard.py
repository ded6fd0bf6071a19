"""Launch-wizard state for syndicate-deployer library.

Steps:
    1. Deploy token          2. Enter token address
    3. Deploy governance     4. Enter governance address
    5. Register DAO          6. Done

Every transition takes a WizardState and returns a new one. An action that
raises leaves the caller's state as it was.
"""

import threading
from dataclasses import dataclass, replace
from typing import Optional

from .addresses import decode, encode
from .deployer import DaoDeployer
from .exceptions import WizardStepError

FIRST_STEP = 1
LAST_STEP = 6


@dataclass(frozen=True)
class WizardState:
    """User-entered fields and deploy hashes of one wizard session."""

    step: int = FIRST_STEP
    name: str = ""
    symbol: str = ""
    token_address: str = ""
    governance_address: str = ""
    token_deploy_hash: str = ""
    governance_deploy_hash: str = ""

    def __post_init__(self) -> None:
        if not FIRST_STEP <= self.step <= LAST_STEP:
            raise WizardStepError(f"Wizard step must be {FIRST_STEP}-{LAST_STEP}, got {self.step}")

    @property
    def done(self) -> bool:
        return self.step == LAST_STEP


def _require_step(state: WizardState, step: int) -> None:
    if state.step != step:
        raise WizardStepError(f"Action belongs to step {step}, wizard is at step {state.step}")


def _normalize(address: str) -> str:
    return encode(decode(address.strip()))


def skip(state: WizardState) -> WizardState:
    """Move to the next step without running its action."""
    if state.done:
        raise WizardStepError("Wizard is already finished")
    return replace(state, step=state.step + 1)


def advance(state: WizardState) -> WizardState:
    """
    Continue from an address-entry step.

    Raises:
        WizardStepError: If not on step 2 or 4, or the address is missing
    """
    if state.step == 2 and state.token_address:
        return replace(state, step=3)
    if state.step == 4 and state.governance_address:
        return replace(state, step=5)
    raise WizardStepError(f"Cannot continue from step {state.step} yet")


def update_form(
    state: WizardState, name: Optional[str] = None, symbol: Optional[str] = None
) -> WizardState:
    """Set the syndicate name and/or token symbol."""
    changes = {}
    if name is not None:
        changes["name"] = name
    if symbol is not None:
        changes["symbol"] = symbol
    return replace(state, **changes)


def set_token_address(state: WizardState, address: str) -> WizardState:
    """
    Store the token contract address (validated and normalised).

    Raises:
        InvalidAddressError: If the address cannot be decoded
    """
    return replace(state, token_address=_normalize(address))


def set_governance_address(state: WizardState, address: str) -> WizardState:
    """
    Store the governance contract address (validated and normalised).

    Raises:
        InvalidAddressError: If the address cannot be decoded
    """
    return replace(state, governance_address=_normalize(address))


def run_token_step(state: WizardState, deployer: DaoDeployer) -> WizardState:
    """Step 1: deploy the token and move to step 2."""
    _require_step(state, 1)
    deploy_hash = deployer.deploy_token(state.name, state.symbol)
    return replace(state, step=2, token_deploy_hash=deploy_hash)


def run_governance_step(state: WizardState, deployer: DaoDeployer) -> WizardState:
    """
    Step 3: deploy governance for the entered token and move to step 4.

    Raises:
        WizardStepError: If no token address has been entered
    """
    _require_step(state, 3)
    if not state.token_address:
        raise WizardStepError("Enter the token contract address first")
    deploy_hash = deployer.deploy_governance(state.token_address)
    return replace(state, step=4, governance_deploy_hash=deploy_hash)


def run_registry_step(state: WizardState, deployer: DaoDeployer) -> WizardState:
    """
    Step 5: register the DAO and finish.

    Raises:
        WizardStepError: If either address is missing
    """
    _require_step(state, 5)
    if not state.token_address or not state.governance_address:
        raise WizardStepError("Enter both token and governance addresses")
    deployer.register_dao(state.token_address, state.governance_address)
    return replace(state, step=LAST_STEP)


def resolve_token_address(
    state: WizardState,
    deployer: DaoDeployer,
    cancel_event: Optional[threading.Event] = None,
) -> WizardState:
    """Step 2: fill the token address from the executed token deploy."""
    _require_step(state, 2)
    if not state.token_deploy_hash:
        raise WizardStepError("No token deploy to resolve")
    address = deployer.resolve_deployed_address(state.token_deploy_hash, cancel_event)
    return replace(state, token_address=encode(address))


def resolve_governance_address(
    state: WizardState,
    deployer: DaoDeployer,
    cancel_event: Optional[threading.Event] = None,
) -> WizardState:
    """Step 4: fill the governance address from the executed governance deploy."""
    _require_step(state, 4)
    if not state.governance_deploy_hash:
        raise WizardStepError("No governance deploy to resolve")
    address = deployer.resolve_deployed_address(state.governance_deploy_hash, cancel_event)
    return replace(state, governance_address=encode(address))
