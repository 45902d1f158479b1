"""
Tests for the map viewport controller.

Run with: python -m pytest tests/test_viewport.py
"""

import pytest

from gottago.geo.viewport import (
    DEFAULT_CENTER,
    IDLE,
    Dragging,
    MapState,
    Pinching,
    PointerDown,
    PointerLeave,
    PointerMove,
    PointerUp,
    TouchEnd,
    TouchMove,
    TouchStart,
    ViewportState,
    Wheel,
    apply_events,
    degrees_per_pixel,
    transition,
)
from gottago.models import GeoPoint


def at_zoom(zoom, center=DEFAULT_CENTER):
    return MapState(viewport=ViewportState(center=center, zoom=zoom))


def test_initial_state_is_idle_at_default_camera():
    state = MapState()
    assert state.gesture == IDLE
    assert state.viewport.zoom == 12
    assert state.viewport.center == DEFAULT_CENTER


def test_scale_halves_with_each_zoom_level():
    assert degrees_per_pixel(18) == pytest.approx(0.0001)
    assert degrees_per_pixel(17) == pytest.approx(0.0002)
    assert degrees_per_pixel(12) == pytest.approx(0.0064)


def test_drag_pans_center():
    center = GeoPoint(latitude=40.0, longitude=-74.0)
    state = apply_events(at_zoom(18, center), [PointerDown(100, 100), PointerMove(110, 95)])

    assert state.gesture == Dragging(last_pointer=(110, 95))
    # right drag moves west, upward drag moves south
    assert state.viewport.center.longitude == pytest.approx(-74.0 - 10 * 0.0001)
    assert state.viewport.center.latitude == pytest.approx(40.0 - 5 * 0.0001)


def test_drag_tracks_last_pointer():
    center = GeoPoint(latitude=40.0, longitude=-74.0)
    state = apply_events(
        at_zoom(18, center),
        [PointerDown(0, 0), PointerMove(10, 0), PointerMove(20, 0)],
    )
    assert state.viewport.center.longitude == pytest.approx(-74.0 - 20 * 0.0001)


def test_pan_sensitivity_depends_on_zoom():
    center = GeoPoint(latitude=40.0, longitude=-74.0)
    state = apply_events(at_zoom(12, center), [PointerDown(0, 0), PointerMove(0, 10)])
    assert state.viewport.center.latitude == pytest.approx(40.0 + 10 * 0.0064)


def test_move_without_press_does_nothing():
    state = MapState()
    assert transition(state, PointerMove(50, 50)) == state


@pytest.mark.parametrize("release", [PointerUp(), PointerLeave()])
def test_release_returns_to_idle(release):
    state = apply_events(MapState(), [PointerDown(0, 0), release])
    assert state.gesture == IDLE
    after = transition(state, PointerMove(30, 30))
    assert after.viewport == state.viewport


def test_wheel_zooms_by_one_step():
    assert transition(at_zoom(12), Wheel(delta_y=100)).viewport.zoom == 11
    assert transition(at_zoom(12), Wheel(delta_y=-3)).viewport.zoom == 13
    assert transition(at_zoom(12), Wheel(delta_y=0)).viewport.zoom == 12


def test_scroll_down_at_max_zoom():
    assert transition(at_zoom(18), Wheel(delta_y=1)).viewport.zoom == 17


def test_wheel_is_clamped():
    assert transition(at_zoom(18), Wheel(delta_y=-500)).viewport.zoom == 18
    assert transition(at_zoom(1), Wheel(delta_y=500)).viewport.zoom == 1


def test_zoom_stays_in_range_under_any_sequence():
    events = [Wheel(delta_y=-1)] * 40 + [TouchStart(((0, 0), (10, 0)))]
    events += [TouchMove(((0, 0), (10 + i, 0))) for i in range(1, 60)]
    events += [Wheel(delta_y=1)] * 80
    state = MapState()
    for event in events:
        state = transition(state, event)
        assert 1 <= state.viewport.zoom <= 18
    assert state.viewport.zoom == 1


def test_single_touch_drags():
    center = GeoPoint(latitude=40.0, longitude=-74.0)
    state = apply_events(at_zoom(18, center), [TouchStart(((5, 5),)), TouchMove(((15, 5),))])
    assert isinstance(state.gesture, Dragging)
    assert state.viewport.center.longitude == pytest.approx(-74.0 - 10 * 0.0001)

    state = transition(state, TouchEnd())
    assert state.gesture == IDLE


def test_pinch_out_and_in():
    state = transition(at_zoom(12), TouchStart(((0, 0), (100, 0))))
    assert state.gesture == Pinching(last_distance=100)

    state = transition(state, TouchMove(((0, 0), (150, 0))))
    assert state.viewport.zoom == 12.5
    assert state.gesture == Pinching(last_distance=150)

    state = transition(state, TouchMove(((0, 0), (120, 0))))
    assert state.viewport.zoom == 12

    state = transition(state, TouchMove(((0, 0), (120, 0))))
    assert state.viewport.zoom == 12


def test_pinch_is_clamped():
    state = apply_events(at_zoom(18), [TouchStart(((0, 0), (10, 0))), TouchMove(((0, 0), (20, 0)))])
    assert state.viewport.zoom == 18


def test_pinch_ends_when_fewer_than_two_touches():
    state = apply_events(at_zoom(12), [TouchStart(((0, 0), (10, 0))), TouchEnd(((0, 0),))])
    assert state.gesture == IDLE


def test_pinch_continues_with_two_remaining_touches():
    state = apply_events(
        at_zoom(12),
        [TouchStart(((0, 0), (10, 0), (5, 5))), TouchEnd(((0, 0), (10, 0)))],
    )
    assert isinstance(state.gesture, Pinching)


def test_second_touch_during_drag_starts_fresh_pinch():
    center = GeoPoint(latitude=40.0, longitude=-74.0)
    state = apply_events(at_zoom(12, center), [TouchStart(((0, 0),)), TouchMove(((0, 0), (50, 0)))])

    assert state.gesture == Pinching(last_distance=50)
    assert state.viewport.zoom == 12
    assert state.viewport.center == center


def test_pointer_down_ignored_while_pinching():
    state = transition(at_zoom(12), TouchStart(((0, 0), (10, 0))))
    assert transition(state, PointerDown(1, 1)) == state


def test_pan_keeps_center_valid():
    center = GeoPoint(latitude=85.0, longitude=179.9)
    state = apply_events(at_zoom(1, center), [PointerDown(0, 0), PointerMove(-10, 100)])
    assert -85.0511 <= state.viewport.center.latitude <= 85.0511
    assert -180 <= state.viewport.center.longitude <= 180


def test_transition_does_not_mutate_input():
    state = MapState()
    transition(state, Wheel(delta_y=1))
    assert state.viewport.zoom == 12


def test_unknown_event_rejected():
    with pytest.raises(TypeError):
        transition(MapState(), object())
