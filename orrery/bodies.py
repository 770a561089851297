#!/usr/bin/env python3
"""
Celestial body model for the Orrery visualizer.

This module defines the CelestialBody dataclass shared between the scene
coordinator, the renderer and the control panel.

State and ownership
- orbit is read-only from the body's perspective and may be shared with other
  bodies (the default moon rides on the earth's orbit record).
- position_on_orbit is the only field that changes while the scene runs, and
  only advance() writes it.
- parent is a non-owning link up the hierarchy. The scene rejects cycles when
  it is assembled, so resolve_position() always terminates.
"""
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .constants import BODY_COLOR, ORIGIN
from .orbit import Orbit, anomaly_from_fraction, radial_distance
from .physics import heuristic_speed, position_increment, wrap_position
from .vector_utils import Vec2, vec_add


@dataclass(eq=False)
class CelestialBody:
    """
    Represents a celestial body moving along a simplified elliptical orbit.

    Fields:
    - name: Identifier for the body
    - orbit: Orbit record (possibly shared)
    - mass: Scalar used only by the speed heuristic
    - gravity: Scalar used only by the speed heuristic
    - position_on_orbit: Fraction of the period elapsed, in [0, 1)
    - parent: Body this one is positioned relative to, None for the root
    - color: RGB tuple used for rendering
    """
    name: str
    orbit: Orbit
    mass: float
    gravity: float
    position_on_orbit: float = 0.0
    parent: Optional["CelestialBody"] = None
    color: Tuple[int, int, int] = BODY_COLOR

    def has_parent_cycle(self) -> bool:
        seen = {id(self)}
        node = self.parent
        while node is not None:
            if id(node) in seen:
                return True
            seen.add(id(node))
            node = node.parent
        return False

    def current_radius(self) -> float:
        o = self.orbit
        return radial_distance(o.semi_major_axis, o.eccentricity, anomaly_from_fraction(self.position_on_orbit))

    def speed(self) -> float:
        """Heuristic orbital speed at the current position."""
        return heuristic_speed(self.mass, self.gravity, self.current_radius(), self.orbit.semi_major_axis)

    def advance(self) -> None:
        """Move one tick along the orbit, wrapping to 0 after a full period."""
        v = self.speed()
        self.position_on_orbit = wrap_position(self.position_on_orbit + position_increment(v))

    def resolve_position(self, origin: Vec2 = ORIGIN) -> Vec2:
        """
        Absolute position of this body's anchor point.

        A parentless body sits at the origin. Any other body is offset from its
        parent's resolved position by where the parent currently is on the
        parent's own orbit.
        """
        if self.parent is None:
            return origin
        offset = self.parent.orbit.offset_at(self.parent.position_on_orbit)
        return vec_add(offset, self.parent.resolve_position(origin))

    def orbit_offset(self) -> Vec2:
        return self.orbit.offset_at(self.position_on_orbit)

    def screen_position(self, origin: Vec2 = ORIGIN) -> Vec2:
        """Where the body marker is drawn: its anchor plus its own orbit offset."""
        return vec_add(self.resolve_position(origin), self.orbit_offset())

    def describe(self, origin: Vec2 = ORIGIN) -> List[str]:
        """Lines of text for the detail view."""
        o = self.orbit
        x, y = self.screen_position(origin)
        parent_name = self.parent.name if self.parent is not None else "-"
        return [
            f"{self.name}",
            f"parent: {parent_name}",
            f"apoapsis: {o.apoapsis:.2f}  periapsis: {o.periapsis:.2f}",
            f"semi-major axis: {o.semi_major_axis:.2f}  eccentricity: {o.eccentricity:.4f}",
            f"position on orbit: {self.position_on_orbit:.4f}",
            f"speed: {self.speed():.4f}",
            f"screen position: ({x:.1f}, {y:.1f})",
        ]
