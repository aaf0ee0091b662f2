import math

import pytest

from domain.errors import InvalidInputError
from domain.models import NO_SPLIT, SplitCriteria
from domain.providers import ProviderLimits, TranscriptionProvider
from domain.split_planner import plan_split, segment_bounds

MB = 1024 * 1024


def test_within_limits_returns_no_split() -> None:
    criteria = SplitCriteria(max_duration=1710, max_file_size=28 * MB)

    for duration, size in [(1.0, 0), (1710.0, 28 * MB), (600.0, 5 * MB)]:
        plan = plan_split(duration, size, criteria)
        assert plan is NO_SPLIT
        assert not plan.needs_split


def test_duration_only_uses_duration_limit() -> None:
    criteria = SplitCriteria(max_duration=1710, max_file_size=28 * MB)

    plan = plan_split(4000.0, 10 * MB, criteria)

    assert plan.needs_split
    assert plan.effective_max_duration == 1710


def test_size_only_uses_size_derived_limit() -> None:
    criteria = SplitCriteria(max_duration=1710, max_file_size=20 * MB)
    duration, size = 1000.0, 40 * MB

    plan = plan_split(duration, size, criteria)

    expected = criteria.max_file_size / (size / duration) * 0.95
    assert plan.effective_max_duration == pytest.approx(expected)
    assert plan.effective_max_duration == pytest.approx(475.0)


def test_both_exceeded_scenario() -> None:
    criteria = SplitCriteria(max_duration=1750, max_file_size=int(28 * MB * 0.93))
    duration, size = 1900.0, 29 * MB

    plan = plan_split(duration, size, criteria)

    expected = min(1750, criteria.max_file_size / (size / duration) * 0.95)
    assert plan.effective_max_duration == pytest.approx(expected)
    assert plan.effective_max_duration == pytest.approx(1620.77, abs=0.01)
    assert math.ceil(duration / plan.effective_max_duration) == 2
    assert len(segment_bounds(duration, plan.effective_max_duration)) == 2


def test_both_exceeded_prefers_duration_when_smaller() -> None:
    criteria = SplitCriteria(max_duration=600, max_file_size=20 * MB)

    plan = plan_split(3000.0, 25 * MB, criteria)

    assert plan.effective_max_duration == 600


def test_segments_respect_size_margin() -> None:
    criteria = SplitCriteria.from_limits(TranscriptionProvider.SAKURA.limits)

    for duration in (900.0, 1800.0, 3600.0, 7200.0):
        for size in (1 * MB, 29 * MB, 64 * MB, 300 * MB):
            plan = plan_split(duration, size, criteria)
            if not plan.needs_split:
                continue
            bytes_per_second = size / duration
            assert plan.effective_max_duration <= criteria.max_duration
            assert plan.effective_max_duration * bytes_per_second <= criteria.max_file_size * 0.95 + 1e-6


def test_criteria_from_limits_applies_margins() -> None:
    criteria = SplitCriteria.from_limits(ProviderLimits(1800, 30 * MB, True))

    assert criteria.max_duration == pytest.approx(1710.0)
    assert criteria.max_file_size == int(30 * MB * 0.93)


def test_criteria_must_be_positive() -> None:
    with pytest.raises(InvalidInputError):
        SplitCriteria(max_duration=0, max_file_size=10)
    with pytest.raises(InvalidInputError):
        SplitCriteria(max_duration=10, max_file_size=-1)


def test_invalid_duration_rejected() -> None:
    criteria = SplitCriteria(max_duration=100, max_file_size=MB)

    with pytest.raises(InvalidInputError):
        plan_split(0.0, 10, criteria)
    with pytest.raises(InvalidInputError):
        plan_split(-5.0, 10, criteria)
    with pytest.raises(InvalidInputError):
        plan_split(10.0, -1, criteria)


def test_segment_bounds_cover_tail_exactly() -> None:
    bounds = segment_bounds(100.0, 30.0)

    assert [end for _, end in bounds] == [30.0, 60.0, 90.0, 100.0]
    assert [start for start, _ in bounds] == [0.0, 30.0, 60.0, 90.0]


def test_segment_bounds_exact_multiple() -> None:
    bounds = segment_bounds(90.0, 30.0)

    assert len(bounds) == 3
    assert bounds[-1] == (60.0, 90.0)


def test_segment_bounds_fractional_ceiling() -> None:
    duration = 1900.0
    bounds = segment_bounds(duration, 1620.7655)

    assert len(bounds) == 2
    assert bounds[-1][1] == duration
    assert bounds[0][1] == bounds[1][0]


def test_segment_bounds_ignore_float_noise() -> None:
    # 1.1 / 0.1 evaluates to 11.000000000000002
    bounds = segment_bounds(1.1, 0.1)

    assert len(bounds) == 11
    assert bounds[-1][1] == 1.1
    assert bounds[-1][1] - bounds[-1][0] == pytest.approx(0.1)
