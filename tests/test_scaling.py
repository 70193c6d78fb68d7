import threading

import pytest

from shrink_it.core.scaling import fallback_quality, next_dimensions, scale_down
from shrink_it.utils.errors import CompressionCancelled


def area_size(width, height, quality):
    return width * height


def test_next_dimensions_floors():
    assert next_dimensions(16, 16) == (14, 14)
    assert next_dimensions(4000, 3000) == (3600, 2700)
    assert next_dimensions(1, 1) == (1, 1)
    assert next_dimensions(1, 50) == (1, 45)


def test_scale_stops_once_target_met(fake_session):
    session = fake_session(area_size, width=100, height=100)

    attempt, data = scale_down(session, 5000)

    widths = [a.width for a in session.attempts]
    assert widths == [90, 81, 72, 64]
    assert attempt.size == 64 * 64
    assert len(data) == attempt.size


def test_scale_runs_at_most_ten_steps(fake_session):
    session = fake_session(area_size, width=16, height=16)

    attempt, _ = scale_down(session, 1)

    assert [a.width for a in session.attempts] == [14, 12, 10, 9, 8, 7, 6, 5, 4, 3]
    assert attempt.width == 3
    assert attempt.size > 1


def test_scale_dimensions_non_increasing(fake_session):
    session = fake_session(area_size, width=1000, height=700)

    scale_down(session, 1)

    sizes = [(a.width, a.height) for a in session.attempts]
    previous = (1000, 700)
    for width, height in sizes:
        assert width < previous[0] and height < previous[1]
        assert width == pytest.approx(previous[0] * 0.9, abs=1)
        previous = (width, height)
    scales = [a.scale for a in session.attempts]
    assert scales == sorted(scales, reverse=True)
    assert all(s > 0 for s in scales)


def test_scale_uses_fixed_fallback_quality(fake_session):
    lossy = fake_session(area_size, width=50, height=50)
    lossless = fake_session(area_size, lossy=False, width=50, height=50)

    scale_down(lossy, 1)
    scale_down(lossless, 1)

    assert fallback_quality(lossy) == 0.5
    assert fallback_quality(lossless) == 1.0
    assert {a.quality for a in lossy.attempts} == {0.5}
    assert {a.quality for a in lossless.attempts} == {1.0}


def test_scale_stops_when_nothing_left_to_shrink(fake_session):
    session = fake_session(area_size, width=1, height=1)

    attempt, data = scale_down(session, 0)

    assert (attempt, data) == (None, None)
    assert session.attempts == []


def test_scale_starts_from_given_dimensions(fake_session):
    session = fake_session(area_size, width=100, height=100)

    scale_down(session, 10_000, width=50, height=40)

    assert (session.attempts[0].width, session.attempts[0].height) == (45, 36)


def test_scale_checks_cancellation(fake_session):
    session = fake_session(area_size)
    event = threading.Event()
    event.set()

    with pytest.raises(CompressionCancelled):
        scale_down(session, 1, cancel_event=event)
