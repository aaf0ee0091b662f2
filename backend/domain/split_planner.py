"""Split planning: decide whether a recording must be cut, and where.

Pure functions, no I/O.
"""

import math

from domain.errors import InvalidInputError
from domain.models import NO_SPLIT, SplitCriteria, SplitPlan

# Extra headroom applied to the size-derived duration ceiling.
SIZE_HEADROOM = 0.95

# Quotients this close above an integer count as that integer.
COUNT_TOLERANCE = 1e-9


def plan_split(duration: float, byte_size: int, criteria: SplitCriteria) -> SplitPlan:
    """Compute a per-segment duration ceiling satisfying both criteria.

    Returns NO_SPLIT when the recording already fits. Otherwise the ceiling
    is the duration limit, the size-derived limit, or the smaller of the
    two when both are exceeded.
    """
    if duration <= 0 or not math.isfinite(duration):
        raise InvalidInputError(f"Audio duration must be positive, got {duration}")
    if byte_size < 0:
        raise InvalidInputError(f"Audio size must not be negative, got {byte_size}")

    exceeds_duration = duration > criteria.max_duration
    exceeds_size = byte_size > criteria.max_file_size
    if not exceeds_duration and not exceeds_size:
        return NO_SPLIT

    bytes_per_second = byte_size / duration

    if exceeds_size:
        size_limited = criteria.max_file_size / bytes_per_second * SIZE_HEADROOM
        if exceeds_duration:
            return SplitPlan(min(criteria.max_duration, size_limited))
        return SplitPlan(size_limited)
    return SplitPlan(criteria.max_duration)


def segment_bounds(duration: float, effective_max_duration: float) -> list[tuple[float, float]]:
    """Contiguous (start, end) ranges covering [0, duration].

    The last range always ends exactly at duration.
    """
    if duration <= 0:
        raise InvalidInputError(f"Audio duration must be positive, got {duration}")
    if effective_max_duration <= 0:
        raise InvalidInputError(
            f"Segment duration must be positive, got {effective_max_duration}"
        )

    count = max(1, math.ceil(duration / effective_max_duration - COUNT_TOLERANCE))
    bounds = []
    for i in range(count):
        start = i * effective_max_duration
        end = duration if i == count - 1 else min((i + 1) * effective_max_duration, duration)
        bounds.append((start, end))
    return bounds
