"""Status pipeline helpers.

The pipeline is a fixed, linear list of stages (``STATUS_FLOW``).  An
order only ever moves one stage at a time, forward or back, and the move
is clamped at both ends: advancing a finished order or reverting a freshly
received one changes nothing.
"""

from __future__ import annotations

from typing import List, TypedDict

from modules.orders.constants import (
    FIRST_STAGE_INDEX,
    LAST_STAGE_INDEX,
    NOTE_ADVANCED,
    NOTE_REVERTED,
    STATUS_FLOW,
)
from modules.orders.exceptions import InvalidStageDirection

FORWARD = 1
BACKWARD = -1


class StageProgress(TypedDict):
    index: int
    name: str
    reached: bool
    current: bool


def clamp_stage_index(index: int) -> int:
    return min(max(index, FIRST_STAGE_INDEX), LAST_STAGE_INDEX)


def validate_direction(direction: int) -> int:
    if direction not in (FORWARD, BACKWARD):
        raise InvalidStageDirection(f"Stage direction must be +1 or -1, got {direction!r}.")
    return direction


def next_stage_index(current: int, direction: int) -> int:
    """Return the stage index after moving *direction* from *current*.

    Raises:
        InvalidStageDirection: *direction* is not ``+1`` or ``-1``.
    """
    validate_direction(direction)
    return clamp_stage_index(current + direction)


def stage_name(index: int) -> str:
    return STATUS_FLOW[clamp_stage_index(index)]


def transition_note(direction: int) -> str:
    return NOTE_ADVANCED if direction > 0 else NOTE_REVERTED


def is_final(index: int) -> bool:
    return index >= LAST_STAGE_INDEX


def progress(current: int) -> List[StageProgress]:
    """Every stage with a flag telling whether the order has reached it."""
    return [
        {
            "index": i,
            "name": name,
            "reached": i <= current,
            "current": i == current,
        }
        for i, name in enumerate(STATUS_FLOW)
    ]
