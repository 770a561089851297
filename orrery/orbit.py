#!/usr/bin/env python3
"""
Orbit geometry for the Orrery visualizer.

Responsibilities
- Hold the geometric parameters of an elliptical orbit (apoapsis, periapsis,
  inclination, period) and derive semi-major axis and eccentricity on demand.
- Map a true anomaly to a planar offset from the orbit's focus using the polar
  form of a conic section.
- Sample an orbit's full ellipse for drawing.

Conventions
- Distances are logical canvas pixels, angles are radians.
- The projection is planar: inclination is carried for interface parity with
  the orbit record but does not affect any computed position.
- Nothing here is guarded against degenerate input (eccentricity >= 1 near
  theta = pi, a zero semi-major axis); such cases produce inf/nan.
"""
import math
from dataclasses import dataclass
from typing import List

from .vector_utils import Vec2, ieee_div


@dataclass
class Orbit:
    """
    Elliptical orbit parameters.

    Fields:
    - inclination: Tilt of the orbit (unused by the 2D projection)
    - apoapsis: Farthest distance from the focus
    - periapsis: Nearest distance from the focus
    - period: Orbital period (informational)

    An Orbit may be shared by several bodies. Bodies only read it; edits go
    through Scene.set_orbit_parameters.
    """
    inclination: float
    apoapsis: float
    periapsis: float
    period: float = 1.0

    @property
    def semi_major_axis(self) -> float:
        return (self.apoapsis + self.periapsis) / 2

    @property
    def eccentricity(self) -> float:
        a = self.semi_major_axis
        return ieee_div(a - self.periapsis, a)

    def is_valid(self) -> bool:
        """True when apoapsis >= periapsis >= 0."""
        return self.apoapsis >= self.periapsis >= 0

    def offset_at(self, position_on_orbit: float) -> Vec2:
        """Planar offset from the focus at a fractional position on this orbit."""
        return position_from_anomaly(
            self.semi_major_axis,
            self.eccentricity,
            self.inclination,
            anomaly_from_fraction(position_on_orbit),
        )


def anomaly_from_fraction(position_on_orbit: float) -> float:
    """Convert a fraction of one period into a true anomaly in radians."""
    return position_on_orbit * 2 * math.pi


def radial_distance(a: float, e: float, theta: float) -> float:
    """Distance from the focus at true anomaly theta: a(1-e^2) / (1 + e cos theta)."""
    return ieee_div(a * (1 - e * e), 1 + e * math.cos(theta))


def position_from_anomaly(a: float, e: float, inclination: float, theta: float) -> Vec2:
    """
    Convert a true anomaly into an (x, y) offset from the orbit's focus.

    Args:
        a: Semi-major axis
        e: Eccentricity
        inclination: Accepted for interface parity; has no effect on the result
        theta: True anomaly in radians, measured from periapsis

    Returns:
        (x, y) offset in the orbital plane. At theta=0 the distance equals the
        periapsis a(1-e); at theta=pi it equals the apoapsis a(1+e).
    """
    r = radial_distance(a, e, theta)
    return (r * math.cos(theta), r * math.sin(theta))


def sample_orbit_path(orbit: Orbit, steps: int) -> List[Vec2]:
    """
    Sample `steps` + 1 points around the full ellipse, first and last coinciding.

    Consecutive points form the line segments used to draw the orbit.
    """
    a = orbit.semi_major_axis
    e = orbit.eccentricity
    points: List[Vec2] = []
    for i in range(steps + 1):
        theta = i / steps * 2 * math.pi
        points.append(position_from_anomaly(a, e, orbit.inclination, theta))
    return points
