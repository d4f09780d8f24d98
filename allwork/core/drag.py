"""
Drop-target resolution shared by the board and the team list.

Drop targets are the droppable ids the front-end reports: the trash zone id,
`user-<uuid>` for a board column, or nothing when the card was released
outside every zone.
"""

import math
from enum import Enum
from typing import Optional

from pydantic import BaseModel

from allwork.config import settings

COLUMN_PREFIX = "user-"


class DragOutcome(str, Enum):
    CLICK = "click"
    DELETE = "delete"
    ASSIGN = "assign"
    NONE = "none"


class DragResolution(BaseModel):
    outcome: DragOutcome
    user_id: Optional[str] = None


def column_id(user_id: str) -> str:
    return f"{COLUMN_PREFIX}{user_id}"


def is_click(dx: float, dy: float, threshold: Optional[float] = None) -> bool:
    """Pointer travel shorter than the threshold never starts a drag"""
    if threshold is None:
        threshold = settings.drag_threshold_px
    return math.hypot(dx, dy) < threshold


def resolve_drop(
    dx: float,
    dy: float,
    target: Optional[str],
    threshold: Optional[float] = None,
    trash_zone_id: Optional[str] = None,
) -> DragResolution:
    if is_click(dx, dy, threshold):
        return DragResolution(outcome=DragOutcome.CLICK)
    if not target:
        return DragResolution(outcome=DragOutcome.NONE)
    if target == (trash_zone_id or settings.trash_zone_id):
        return DragResolution(outcome=DragOutcome.DELETE)
    if target.startswith(COLUMN_PREFIX) and len(target) > len(COLUMN_PREFIX):
        return DragResolution(outcome=DragOutcome.ASSIGN, user_id=target[len(COLUMN_PREFIX):])
    return DragResolution(outcome=DragOutcome.NONE)
