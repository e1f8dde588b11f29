"""Bulk admin actions

Applies a single-item use case to many ids. Each id succeeds or fails on
its own; one failure never stops or rolls back the others.
"""

import logging
from typing import Awaitable, Callable, Iterable, List, Optional
from pydantic import BaseModel
from libs.result import Result

logger = logging.getLogger(__name__)


class BulkFailureDTO(BaseModel):
    id: str
    code: str
    reason: Optional[str] = None


class BulkResultDTO(BaseModel):
    """Response DTO for bulk actions"""

    requested: int
    succeeded: List[str]
    failed: List[BulkFailureDTO]


async def apply_to_each(
    ids: Iterable[str],
    action: Callable[[str], Awaitable[Result]],
    label: str,
) -> BulkResultDTO:
    """
    Run action once per distinct id, in request order

    Args:
        ids: Target ids (duplicates are processed once)
        action: Single-item use case call returning a Result
        label: Action name for logging (e.g., "accept subscription")

    Returns:
        BulkResultDTO with succeeded ids and per-id failures
    """
    unique_ids = list(dict.fromkeys(ids))
    succeeded: List[str] = []
    failed: List[BulkFailureDTO] = []

    for target_id in unique_ids:
        result = await action(target_id)
        if result.is_ok():
            succeeded.append(target_id)
        else:
            failed.append(
                BulkFailureDTO(
                    id=target_id,
                    code=result.error.code,
                    reason=result.error.reason or result.error.message,
                )
            )

    logger.info(f"Bulk {label}: {len(succeeded)} succeeded, {len(failed)} failed")
    return BulkResultDTO(requested=len(unique_ids), succeeded=succeeded, failed=failed)
