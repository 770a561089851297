"""Unit tests for :mod:`orrery.scene`."""

import logging
import math

import pytest

from orrery.bodies import CelestialBody
from orrery.orbit import Orbit
from orrery.presets_loader import default_scene
from orrery.scene import InputState, Scene, SceneError, within_radius
from orrery.vector_utils import vec_add


@pytest.fixture
def scene():
    return default_scene()


def body(name, parent=None, orbit=None, position_on_orbit=0.0):
    return CelestialBody(
        name=name,
        parent=parent,
        mass=1.0,
        gravity=1.0,
        orbit=orbit or Orbit(inclination=0, apoapsis=30, periapsis=20),
        position_on_orbit=position_on_orbit,
    )


# -----------------------
# Default scene layout
# -----------------------

def test_default_scene_hierarchy(scene):
    sun, earth, moon = (scene.get_body(n) for n in ("Sun", "Earth", "Moon"))
    assert sun.parent is None
    assert earth.parent is sun
    assert moon.parent is sun
    assert moon.orbit is earth.orbit
    assert scene.trackable is earth
    assert scene.focused is None
    assert len(scene.orbits()) == 2
    assert scene.bodies_sharing(earth.orbit) == [earth, moon]


def test_tick_advances_every_body(scene):
    before = {b.name: b.position_on_orbit for b in scene.bodies}
    scene.tick()
    for b in scene.bodies:
        assert b.position_on_orbit > before[b.name]
    assert scene.tick_count == 1


def test_tick_is_order_independent():
    forward, backward = default_scene(), default_scene()
    backward.bodies.reverse()
    for _ in range(50):
        forward.tick()
        backward.tick()
    for b in forward.bodies:
        assert backward.get_body(b.name).position_on_orbit == b.position_on_orbit


def test_tick_leaves_shared_orbit_untouched(scene):
    earth = scene.get_body("Earth")
    params = (earth.orbit.apoapsis, earth.orbit.periapsis, earth.orbit.inclination)
    for _ in range(10):
        scene.tick()
    assert (earth.orbit.apoapsis, earth.orbit.periapsis, earth.orbit.inclination) == params


# -----------------------
# Focus
# -----------------------

def test_within_radius_is_euclidean():
    assert within_radius((10.0, 10.0), (10.0, 14.0), 5.0)
    assert not within_radius((10.0, 10.0), (14.0, 14.0), 5.0)
    assert not within_radius((10.0, 10.0), (10.0, 15.0), 5.0)


def test_cursor_on_body_with_select_focuses(scene):
    earth = scene.get_body("Earth")
    scene.apply_input(InputState(cursor=earth.resolve_position(), select=True))
    assert scene.focused is earth
    assert scene.bodies_to_render() == [earth]


def test_cursor_near_body_vertically_focuses(scene):
    earth = scene.get_body("Earth")
    cursor = vec_add(earth.resolve_position(), (0.0, 4.0))
    assert scene.update_focus(cursor, True) is earth


def test_cursor_diagonally_outside_radius_does_not_focus(scene):
    earth = scene.get_body("Earth")
    cursor = vec_add(earth.resolve_position(), (4.0, 4.0))
    assert scene.update_focus(cursor, True) is None


def test_cursor_far_away_never_focuses(scene):
    for _ in range(200):
        scene.apply_input(InputState(cursor=(-1000.0, -1000.0), select=True))
        scene.tick()
    assert scene.focused is None


def test_hover_without_select_does_not_focus(scene):
    earth = scene.get_body("Earth")
    scene.apply_input(InputState(cursor=earth.resolve_position(), select=False))
    assert scene.focused is None
    assert scene.hovered(earth.resolve_position())


def test_hit_point_is_resolved_position_not_marker(scene):
    earth = scene.get_body("Earth")
    resolved = earth.resolve_position()
    marker = earth.screen_position()
    assert resolved == pytest.approx((800.0, 600.0))
    assert marker == pytest.approx((800.0, 624.0))
    assert scene.update_focus(marker, True) is None
    assert scene.update_focus(resolved, True) is earth


def test_cursor_offset_logged_every_tick_without_select(scene, caplog):
    with caplog.at_level(logging.DEBUG, logger="orrery.scene"):
        scene.apply_input(InputState(cursor=(0.0, 0.0), select=False))
        scene.apply_input(InputState(cursor=(0.0, 0.0), select=False))
    offsets = [r for r in caplog.records if r.getMessage().startswith("cursor offset from Earth")]
    assert len(offsets) == 2


def test_clear_focus_returns_full_scene(scene):
    scene.set_focus(scene.get_body("Moon"))
    assert scene.bodies_to_render() == [scene.get_body("Moon")]
    scene.apply_input(InputState(clear_focus=True))
    assert scene.focused is None
    assert scene.bodies_to_render() == scene.bodies


def test_set_focus_rejects_foreign_body(scene):
    with pytest.raises(SceneError):
        scene.set_focus(body("Stranger"))


def test_scene_without_trackable_never_hovers():
    s = Scene([body("Sun")])
    assert not s.hovered(s.origin)
    assert s.update_focus(s.origin, True) is None


# -----------------------
# Orbit edits
# -----------------------

def test_set_orbit_parameters_is_seen_by_sharing_bodies(scene):
    earth, moon = scene.get_body("Earth"), scene.get_body("Moon")
    scene.set_orbit_parameters(earth.orbit, apoapsis=40, periapsis=10, inclination=0.3)
    assert moon.orbit.apoapsis == 40
    assert moon.orbit.periapsis == 10
    assert moon.orbit.inclination == 0.3


def test_set_orbit_parameters_clamps(scene):
    orbit = scene.get_body("Earth").orbit
    scene.set_orbit_parameters(orbit, periapsis=50)
    assert (orbit.apoapsis, orbit.periapsis) == (30, 30)
    scene.set_orbit_parameters(orbit, apoapsis=-5, periapsis=-1)
    assert (orbit.apoapsis, orbit.periapsis) == (0, 0)
    assert orbit.is_valid()


def test_set_orbit_parameters_rejects_foreign_orbit(scene):
    with pytest.raises(SceneError):
        scene.set_orbit_parameters(Orbit(0, 10, 5), apoapsis=20)


def test_arrow_input_nudges_trackable_orbit(scene):
    orbit = scene.trackable.orbit
    scene.apply_input(InputState(apoapsis_delta=2.0, periapsis_delta=-1.0))
    assert orbit.apoapsis == 32
    assert orbit.periapsis == 19


def test_nudges_keep_orbit_valid(scene):
    orbit = scene.trackable.orbit
    for _ in range(100):
        scene.apply_input(InputState(apoapsis_delta=-1.0))
    assert orbit.apoapsis == 0
    assert orbit.periapsis == 0


def test_collapsed_orbit_recovers_after_widening(scene):
    earth, moon = scene.get_body("Earth"), scene.get_body("Moon")
    for _ in range(40):
        scene.apply_input(InputState(apoapsis_delta=-1.0))
        scene.tick()
    assert (earth.orbit.apoapsis, earth.orbit.periapsis) == (0, 0)
    for _ in range(40):
        scene.apply_input(InputState(apoapsis_delta=1.0, periapsis_delta=1.0))
        scene.tick()
    assert (earth.orbit.apoapsis, earth.orbit.periapsis) == (40, 40)
    for b in (earth, moon):
        assert math.isfinite(b.position_on_orbit)
        assert 0.0 <= b.position_on_orbit < 1.0
    before = earth.position_on_orbit
    scene.tick()
    assert earth.position_on_orbit > before


# -----------------------
# Validation
# -----------------------

def test_rejects_duplicate_names():
    with pytest.raises(SceneError, match="Duplicate"):
        Scene([body("A"), body("A")])


def test_rejects_parent_outside_scene():
    outsider = body("Outsider")
    with pytest.raises(SceneError, match="not part of the scene"):
        Scene([body("Child", parent=outsider)])


def test_rejects_parent_cycle():
    a = body("A")
    b = body("B", parent=a)
    a.parent = b
    with pytest.raises(SceneError, match="cycle"):
        Scene([a, b])


def test_rejects_self_parent():
    a = body("A")
    a.parent = a
    with pytest.raises(SceneError, match="cycle"):
        Scene([a])


def test_rejects_invalid_orbit():
    with pytest.raises(SceneError, match="Invalid orbit"):
        Scene([body("A", orbit=Orbit(0, 10, 20))])


def test_rejects_unknown_trackable():
    with pytest.raises(SceneError, match="trackable"):
        Scene([body("A")], trackable="B")


def test_rejects_unhashable_trackable():
    with pytest.raises(SceneError, match="trackable"):
        Scene([body("A")], trackable=["A"])
