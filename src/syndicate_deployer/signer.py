"""Wallet (signer) boundary for syndicate-deployer library."""

import logging
from typing import Any, Callable, Dict, Optional, Protocol

from .constants import (
    DISCONNECTED_EVENT,
    SIGNED_IN_EVENT,
    SIGNED_OUT_EVENT,
    SWITCHED_ACCOUNT_EVENT,
)
from .types import ActiveAccount, SendResult

logger = logging.getLogger(__name__)


class Signer(Protocol):
    """Wallet collaborator that prompts the user and submits deploys."""

    def get_active_account(self) -> Optional[ActiveAccount]:
        ...

    def send(self, deploy_json: Dict[str, Any], public_key_hex: str) -> Optional[SendResult]:
        ...

    def on(self, event_name: str, callback: Callable[[Any], None]) -> None:
        ...


class AccountTracker:
    """Keeps the active public key in sync with wallet events."""

    def __init__(self) -> None:
        self.public_key: Optional[str] = None

    def attach(self, signer: Signer) -> None:
        """
        Read the current account and subscribe to account changes.

        Args:
            signer: Wallet collaborator
        """
        account = signer.get_active_account()
        self.public_key = account.public_key if account else None

        signer.on(SIGNED_IN_EVENT, self._update)
        signer.on(SWITCHED_ACCOUNT_EVENT, self._update)
        signer.on(SIGNED_OUT_EVENT, self._clear)
        signer.on(DISCONNECTED_EVENT, self._clear)

    @property
    def connected(self) -> bool:
        return self.public_key is not None

    def _update(self, event: Any) -> None:
        account = event.get("account") if isinstance(event, dict) else None
        self.public_key = (account or {}).get("public_key") or None
        logger.debug("Active account changed: %s", self.public_key)

    def _clear(self, event: Any = None) -> None:
        self.public_key = None


def short_address(public_key: str) -> str:
    """Abbreviate a public key for display, e.g. "01abcd...12345"."""
    return f"{public_key[:6]}...{public_key[-5:]}"
