"""
Shared helpers for turning calculator results into JSON responses.
"""

import logging
import math
from dataclasses import asdict, is_dataclass
from typing import Any, List

from fastapi import HTTPException

from finappo.config import get_settings

logger = logging.getLogger(__name__)

# Row lists capped at settings.max_schedule_rows
SCHEDULE_KEYS = ("schedule", "monthly_schedule")


def reject_invalid(calculator: str, errors: List[str]) -> None:
    """Raise a 400 carrying every validation message, if there are any."""
    if errors:
        logger.info("Rejected %s inputs: %s", calculator, "; ".join(errors))
        raise HTTPException(status_code=400, detail={"errors": errors})


def solver_error(calculator: str, error: ValueError) -> HTTPException:
    logger.info("%s calculation failed: %s", calculator, error)
    return HTTPException(status_code=400, detail=str(error))


def to_response(result: Any) -> Any:
    """
    Convert a result dataclass to JSON-safe data.

    Non-finite floats become None and schedules are truncated to the
    configured maximum; totals on the result are left as calculated.
    """
    data = asdict(result) if is_dataclass(result) else result
    return _clean(data, get_settings().max_schedule_rows)


def _clean(value: Any, max_rows: int) -> Any:
    if isinstance(value, dict):
        return {
            key: (
                [_clean(row, max_rows) for row in item[:max_rows]]
                if key in SCHEDULE_KEYS and isinstance(item, list)
                else _clean(item, max_rows)
            )
            for key, item in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [_clean(item, max_rows) for item in value]
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value
