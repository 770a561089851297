"""Unit tests for :mod:`orrery.orbit`."""

import math

import pytest

from orrery.orbit import (
    Orbit,
    anomaly_from_fraction,
    position_from_anomaly,
    radial_distance,
    sample_orbit_path,
)


def test_derived_values_follow_apoapsis_and_periapsis():
    orbit = Orbit(inclination=0, apoapsis=300, periapsis=100)
    assert orbit.semi_major_axis == 200
    assert orbit.eccentricity == pytest.approx(0.5)

    # Derived values are recomputed, never cached
    orbit.apoapsis = 100
    assert orbit.semi_major_axis == 100
    assert orbit.eccentricity == 0


@pytest.mark.parametrize(
    "a, e",
    [(200.0, 0.5), (25.0, 0.2), (100.0, 0.0), (1.0, 0.99)],
)
def test_periapsis_and_apoapsis_distances(a, e):
    x0, y0 = position_from_anomaly(a, e, 0.0, 0.0)
    assert math.hypot(x0, y0) == pytest.approx(a * (1 - e))
    assert y0 == pytest.approx(0.0)

    xp, yp = position_from_anomaly(a, e, 0.0, math.pi)
    assert math.hypot(xp, yp) == pytest.approx(a * (1 + e))
    assert xp == pytest.approx(-a * (1 + e))


def test_points_lie_on_ellipse():
    # Sum of distances to both foci is 2a; the origin is one focus, the other is at (-2ae, 0)
    a, e = 200.0, 0.5
    other_focus = (-2 * a * e, 0.0)
    for i in range(36):
        theta = i / 36 * 2 * math.pi
        x, y = position_from_anomaly(a, e, 0.0, theta)
        d = math.hypot(x, y) + math.hypot(x - other_focus[0], y - other_focus[1])
        assert d == pytest.approx(2 * a)


def test_quarter_orbit_offset():
    x, y = position_from_anomaly(200.0, 0.5, 0.0, 0.5 * math.pi)
    assert x == pytest.approx(0.0, abs=1e-9)
    assert y == pytest.approx(150.0)


def test_inclination_has_no_effect():
    theta = 1.234
    flat = position_from_anomaly(50.0, 0.3, 0.0, theta)
    tilted = position_from_anomaly(50.0, 0.3, 1.2, theta)
    assert flat == tilted


def test_same_inputs_same_outputs():
    first = position_from_anomaly(25.0, 0.2, 0.0, 2.5)
    second = position_from_anomaly(25.0, 0.2, 0.0, 2.5)
    assert first == second


def test_offset_at_uses_fraction_of_period():
    orbit = Orbit(inclination=0, apoapsis=300, periapsis=100)
    assert orbit.offset_at(0.25) == position_from_anomaly(200.0, 0.5, 0, anomaly_from_fraction(0.25))
    assert anomaly_from_fraction(0.5) == pytest.approx(math.pi)


def test_is_valid():
    assert Orbit(0, 30, 20).is_valid()
    assert Orbit(0, 20, 20).is_valid()
    assert not Orbit(0, 20, 30).is_valid()
    assert not Orbit(0, 10, -1).is_valid()


def test_degenerate_inputs_do_not_raise():
    # Zero semi-major axis: 0/0 eccentricity
    assert math.isnan(Orbit(0, 0, 0).eccentricity)
    # Parabolic orbit at theta = pi divides by zero
    r = radial_distance(10.0, 1.0, math.pi)
    assert not math.isfinite(r) or abs(r) > 1e12


def test_sample_orbit_path_is_closed():
    orbit = Orbit(inclination=0, apoapsis=30, periapsis=20)
    points = sample_orbit_path(orbit, 100)
    assert len(points) == 101
    assert points[0][0] == pytest.approx(points[-1][0])
    assert points[0][1] == pytest.approx(points[-1][1], abs=1e-9)
    assert points[0] == pytest.approx((20.0, 0.0))
