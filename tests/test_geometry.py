"""View transform, snapping and hit testing."""

import pytest

from canvas.hit_test import hit_member
from canvas.view import MAX_ZOOM, MIN_ZOOM, View_Transform
from models.world import Member, Point, norm_angle, snap


def test_world_screen_round_trip():
    view = View_Transform(pan=Point(x=13.5, y=-7.0), zoom=1.7)
    p = Point(x=123.4, y=567.8)
    back = view.screen_to_world(view.world_to_screen(p))
    assert back.x == pytest.approx(p.x)
    assert back.y == pytest.approx(p.y)


def test_world_to_screen_applies_zoom_then_pan():
    view = View_Transform(pan=Point(x=10, y=20), zoom=2.0)
    s = view.world_to_screen(Point(x=5, y=5))
    assert (s.x, s.y) == (20.0, 30.0)


def test_zoom_clamps_at_both_ends():
    view = View_Transform()
    for _ in range(40):
        view.adjust_zoom(0.1)
    assert view.zoom == MAX_ZOOM
    for _ in range(40):
        view.adjust_zoom(-0.1)
    assert view.zoom == MIN_ZOOM
    assert view.set_zoom(9) == MAX_ZOOM


def test_zoom_steps_do_not_drift():
    view = View_Transform()
    for _ in range(3):
        view.adjust_zoom(0.1)
    assert view.zoom == 1.3


def test_pan_from_anchor():
    view = View_Transform()
    view.pan_from(Point(x=5, y=5), Point(x=100, y=100), Point(x=130, y=80))
    assert (view.pan.x, view.pan.y) == (35.0, -15.0)


def test_reset_restores_identity():
    view = View_Transform(pan=Point(x=1, y=2), zoom=2)
    view.reset()
    assert view.zoom == 1.0
    assert (view.pan.x, view.pan.y) == (0.0, 0.0)


@pytest.mark.parametrize(
    "value, expected",
    [(0, 0), (50, 50), (24, 15.6), (25, 33.75), (-25, -25 + (0 - -25) * 0.35)],
)
def test_snap_pulls_toward_grid(value, expected):
    assert snap(value) == pytest.approx(expected)


def test_snap_converges_on_grid_line():
    v = 40.0
    for _ in range(60):
        v = snap(v)
    assert v == pytest.approx(50.0, abs=1e-6)


def test_norm_angle():
    assert norm_angle(-90) == 270
    assert norm_angle(720) == 0
    assert norm_angle(365) == 5


def test_hit_radius_boundary():
    m = Member(id=1, name="A", x=100, y=100)
    assert hit_member([m], Point(x=129, y=100)) is m
    assert hit_member([m], Point(x=130, y=100)) is m
    assert hit_member([m], Point(x=131, y=100)) is None


def test_hit_overlap_resolves_in_list_order():
    first = Member(id=1, name="A", x=100, y=100)
    second = Member(id=2, name="B", x=110, y=100)
    assert hit_member([first, second], Point(x=105, y=100)) is first
    assert hit_member([second, first], Point(x=105, y=100)) is second
