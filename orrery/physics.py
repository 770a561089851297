#!/usr/bin/env python3
"""
Orbital speed heuristic for the Orrery visualizer.

Responsibilities
- Estimate how fast a body moves along its orbit at a given radial distance.
- Turn that speed into a per-tick advance of the body's fractional position on
  its orbit.

This is not real orbital mechanics. The speed follows the shape of the
vis-viva equation, v^2 = GM (2/r - 1/a), with mass * gravity^2 / 60 standing in
for GM. Feeding v^2 / 100 into the position increment makes bodies hurry
through periapsis and linger at apoapsis, which is enough to look like Kepler's
second law without solving Kepler's equation.

Numerical notes
- The radicand is non-negative for any point on a valid ellipse (r <= 2a). A
  negative radicand (degenerate orbits, rounding at periapsis = 0) yields nan
  rather than raising, matching how the rest of the geometry degrades.
- A position that has gone non-finite (a collapsed orbit with a = 0) restarts
  at 0 on the next wrap check, so the body moves again once its orbit is
  widened.
"""

import math

from .constants import INCREMENT_DIVISOR, SPEED_DIVISOR
from .vector_utils import ieee_div, ieee_sqrt


def heuristic_speed(mass: float, gravity: float, r: float, a: float) -> float:
    """
    Pseudo vis-viva speed at radial distance r on an orbit with semi-major axis a.

        v = sqrt(mass * gravity^2 / 60 * (2/r - 1/a))

    Args:
        mass: Body mass scalar (not physical units)
        gravity: Gravity scalar (not physical units)
        r: Current distance from the focus
        a: Semi-major axis of the orbit

    Returns:
        Speed scalar; nan when the radicand is negative.
    """
    return ieee_sqrt(mass * gravity ** 2 / SPEED_DIVISOR * (ieee_div(2, r) - ieee_div(1, a)))


def position_increment(speed: float) -> float:
    """Fraction of the orbit covered in one tick at the given speed: v^2 / 100."""
    return speed * speed / INCREMENT_DIVISOR


def wrap_position(position_on_orbit: float) -> float:
    """Reset a full (or non-finite) position back to exactly 0."""
    if not math.isfinite(position_on_orbit) or position_on_orbit >= 1:
        return 0.0
    return position_on_orbit
