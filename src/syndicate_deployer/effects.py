"""Execution result parsing for syndicate-deployer library."""

import json
from typing import Any, Mapping, Optional, Union

from .addresses import decode
from .exceptions import (
    AddressNotFoundError,
    DeployRevertedError,
    InvalidAddressError,
    NoEffectsError,
)
from .types import Address, ExecutionOutcome, ExecutionResult, Transform

# Keys a newly installed contract can be written under
CONTRACT_KEY_PREFIXES = ("hash-", "contract-")


def _parse_cost(value: Any) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _parse_transforms(body: Mapping[str, Any]) -> Optional[tuple]:
    effect = body.get("effect")
    transforms = effect.get("transforms") if isinstance(effect, Mapping) else None
    if not isinstance(transforms, list):
        return None

    return tuple(
        Transform(key=str(entry.get("key", "")), operation=entry.get("transform"))
        for entry in transforms
        if isinstance(entry, Mapping)
    )


def parse_execution_result(raw: Mapping[str, Any]) -> ExecutionResult:
    """
    Parse one entry of a deploy's execution_results list.

    Args:
        raw: {"block_hash": ..., "result": {"Success": {...}} | {"Failure": {...}}}

    Returns:
        ExecutionResult; transforms is None when the effect list is missing

    Raises:
        NoEffectsError: If there is no result object at all
    """
    if not isinstance(raw, Mapping) or not isinstance(raw.get("result"), Mapping):
        raise NoEffectsError("Invalid execution result object")

    result = raw["result"]
    block_hash = raw.get("block_hash")

    # Failure takes precedence; its effects are never inspected
    if "Failure" in result:
        failure = result["Failure"]
        if isinstance(failure, Mapping):
            reason = failure.get("error_message") or json.dumps(failure, sort_keys=True)
            cost = _parse_cost(failure.get("cost"))
        else:
            reason = str(failure)
            cost = None
        return ExecutionResult(
            outcome=ExecutionOutcome.FAILURE,
            transforms=None,
            error_message=reason,
            cost=cost,
            block_hash=block_hash,
        )

    success = result.get("Success")
    if not isinstance(success, Mapping):
        return ExecutionResult(
            outcome=ExecutionOutcome.SUCCESS, transforms=None, block_hash=block_hash
        )

    return ExecutionResult(
        outcome=ExecutionOutcome.SUCCESS,
        transforms=_parse_transforms(success),
        cost=_parse_cost(success.get("cost")),
        block_hash=block_hash,
    )


def extract_new_address(result: Union[ExecutionResult, Mapping[str, Any]]) -> Address:
    """
    Find the address of a contract created by a deploy.

    Picks the first write to a "hash-" or "contract-" key, in effect order.
    This does not check that the write belongs to the contract just installed;
    deploys that write several contract keys return the earliest one.

    Args:
        result: Parsed ExecutionResult or a raw execution_results entry

    Returns:
        Address of the first qualifying write

    Raises:
        DeployRevertedError: If the deploy failed on-chain
        NoEffectsError: If the result carries no effect list
        AddressNotFoundError: If no transform qualifies, or the first qualifying
                              key is not a 32-byte hash
    """
    if not isinstance(result, ExecutionResult):
        result = parse_execution_result(result)

    if not result.succeeded:
        raise DeployRevertedError(
            f"Deploy failed on-chain: {result.error_message}", reason=result.error_message
        )

    if result.transforms is None:
        raise NoEffectsError("No effects found in execution result")

    for transform in result.transforms:
        if transform.key.startswith(CONTRACT_KEY_PREFIXES) and transform.is_write:
            try:
                return decode(transform.key)
            except InvalidAddressError as e:
                raise AddressNotFoundError(
                    f"Malformed contract hash in deploy effects: {transform.key!r}"
                ) from e

    raise AddressNotFoundError("Could not find new contract hash in deploy effects")
