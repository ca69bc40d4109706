"""Shared job state timeline helper utilities."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any


def domain_build_state_event(
    state: str,
    job_name: str,
    details: dict[str, Any] | None = None,
) -> dict[str, object]:
    """Build one structured job state transition event.

    Args:
        state: Job state entered (`built`, `running`, `succeeded`, `failed`).
        job_name: Descriptor job name.
        details: Optional structured details object.

    Returns:
        dict[str, object]: Structured timeline event.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    event_payload: dict[str, object] = {
        "state": state,
        "job_name": job_name,
        "at_utc": datetime.now(timezone.utc).isoformat(),
    }
    if details is not None:
        event_payload["details"] = details
    return event_payload
