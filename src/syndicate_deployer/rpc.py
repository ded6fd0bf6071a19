"""JSON-RPC client for a single Casper node endpoint."""

import itertools
import logging
import time
from typing import Any, Dict, List, Mapping, Optional

import requests

from .addresses import decode
from .constants import DEFAULT_REQUEST_TIMEOUT
from .exceptions import RpcError, TransportError, UnexpectedResultError
from .types import Address, ConnectionCheck, NodeStatus, StoredCLValue, StoredContract, StoredValue

logger = logging.getLogger(__name__)


class CasperRpcClient:
    """
    Stateless-per-call client for one node RPC endpoint.

    Every call is a single HTTP POST; retrying is left to the caller.
    """

    def __init__(
        self,
        rpc_url: str,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.rpc_url = rpc_url
        self.timeout = timeout
        self._session = session or requests.Session()
        self._ids = itertools.count(1)

    def call(self, method: str, params: Any = None) -> Any:
        """
        Issue one JSON-RPC 2.0 request.

        Args:
            method: RPC method name
            params: Method parameters (defaults to an empty list)

        Returns:
            The "result" field of the response, untouched

        Raises:
            TransportError: On connection failure, non-2xx status or a body
                            that is not JSON
            RpcError: If the response carries an "error" object
        """
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": [] if params is None else params,
        }

        try:
            response = self._session.post(self.rpc_url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(f"Network error during RPC call {method}: {e}") from e

        # Check for HTTP errors
        if not 200 <= response.status_code < 300:
            raise TransportError(
                f"RPC request {method} failed with status {response.status_code}",
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as e:
            raise TransportError(f"RPC response to {method} is not JSON") from e

        # Check for RPC errors
        if isinstance(body, Mapping) and body.get("error") is not None:
            error = body["error"]
            if isinstance(error, Mapping):
                raise RpcError(str(error.get("message", error)), code=error.get("code"))
            raise RpcError(str(error))

        if not isinstance(body, Mapping) or "result" not in body:
            raise TransportError(f"RPC response to {method} has no result")

        return body["result"]

    def get_status(self) -> NodeStatus:
        """
        Read node status via info_get_status.

        Returns:
            NodeStatus

        Raises:
            UnexpectedResultError: If the result lacks chainspec_name or its
                                   last block info is not an object
        """
        result = self.call("info_get_status")
        if not isinstance(result, Mapping) or "chainspec_name" not in result:
            raise UnexpectedResultError("info_get_status result has no chainspec_name")

        last_block = result.get("last_added_block_info") or {}
        if not isinstance(last_block, Mapping):
            raise UnexpectedResultError("info_get_status last_added_block_info is not an object")
        return NodeStatus(
            chainspec_name=result["chainspec_name"],
            api_version=result.get("api_version"),
            build_version=result.get("build_version"),
            last_block_height=last_block.get("height"),
        )

    def get_deploy(self, deploy_hash: str) -> Dict[str, Any]:
        """Fetch a deploy and its execution results via info_get_deploy."""
        result = self.call("info_get_deploy", {"deploy_hash": deploy_hash})
        if not isinstance(result, Mapping):
            raise UnexpectedResultError("info_get_deploy result is not an object")
        return dict(result)

    def query_global_state(
        self,
        key: str,
        path: Optional[List[str]] = None,
        state_identifier: Optional[Dict[str, Any]] = None,
    ) -> StoredValue:
        """
        Read a stored value from global state.

        Args:
            key: State key, e.g. "hash-..."
            path: Named-key path below the key
            state_identifier: Block reference; None means latest

        Returns:
            StoredContract or StoredCLValue

        Raises:
            UnexpectedResultError: For any other stored value shape
        """
        result = self.call(
            "query_global_state",
            {"state_identifier": state_identifier, "key": key, "path": path or []},
        )
        stored_value = result.get("stored_value") if isinstance(result, Mapping) else None
        return parse_stored_value(stored_value)

    def get_named_key(self, contract_key: str, name: str) -> Address:
        """
        Resolve one named key of a stored contract.

        Raises:
            UnexpectedResultError: If the key is not a contract or has no such name
        """
        stored = self.query_global_state(contract_key)
        if not isinstance(stored, StoredContract):
            raise UnexpectedResultError(f"{contract_key} is not a stored contract")
        if name not in stored.named_keys:
            raise UnexpectedResultError(f"Named key '{name}' not found on {contract_key}")
        return decode(stored.named_keys[name])

    def check_connection(self) -> ConnectionCheck:
        """
        Check the endpoint with info_get_status.

        Never raises: failures are reported in the returned ConnectionCheck.
        """
        started = time.monotonic()
        try:
            status = self.get_status()
        except TransportError as e:
            return ConnectionCheck(success=False, message=str(e))
        except RpcError as e:
            return ConnectionCheck(success=False, message=f"RPC Error: {e}")
        except UnexpectedResultError:
            status = NodeStatus(chainspec_name="unknown")

        latency_ms = int((time.monotonic() - started) * 1000)
        logger.info("Connected to %s at %s (%d ms)", status.chainspec_name, self.rpc_url, latency_ms)
        return ConnectionCheck(
            success=True,
            message=f"Connected to {status.chainspec_name}",
            latency_ms=latency_ms,
        )


def _entries(entries: Any, label: str, *fields: str) -> List[Mapping[str, Any]]:
    """Check a list of objects that each carry the given string fields."""
    if not isinstance(entries, list):
        raise UnexpectedResultError(f"Contract {label} is not a list")
    for entry in entries:
        if not isinstance(entry, Mapping) or not all(
            isinstance(entry.get(name), str) for name in fields
        ):
            raise UnexpectedResultError(f"Malformed contract {label} entry: {entry!r}")
    return entries


def parse_stored_value(stored_value: Any) -> StoredValue:
    """
    Convert a raw stored_value object into a typed value.

    Raises:
        UnexpectedResultError: If the shape is neither Contract nor CLValue, or
                               a contract entry lacks its name or key
    """
    if not isinstance(stored_value, Mapping):
        raise UnexpectedResultError("Query result has no stored_value")

    match stored_value:
        case {"Contract": {"contract_package_hash": package_hash, **contract}}:
            named_keys = {
                entry["name"]: entry["key"]
                for entry in _entries(contract.get("named_keys", []), "named_keys", "name", "key")
            }
            entry_points = [
                entry["name"]
                for entry in _entries(contract.get("entry_points", []), "entry_points", "name")
            ]
            return StoredContract(
                contract_package_hash=package_hash,
                contract_wasm_hash=contract.get("contract_wasm_hash"),
                named_keys=named_keys,
                entry_points=entry_points,
            )
        case {"CLValue": {"cl_type": cl_type, "bytes": raw, **value}}:
            return StoredCLValue(cl_type=cl_type, parsed=value.get("parsed"), bytes=raw)
        case _:
            kinds = ", ".join(stored_value.keys()) or "empty"
            raise UnexpectedResultError(f"Unsupported stored value: {kinds}")
