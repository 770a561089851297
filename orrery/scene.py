#!/usr/bin/env python3
"""
Scene coordinator for the Orrery visualizer.

What this module does
- Owns the fixed set of bodies and validates their hierarchy once, when the
  scene is assembled (known parents, no cycles, sane orbits, unique names).
- Drives the per-tick update of every body.
- Applies one tick's worth of input: arrow-key orbit nudges and focus
  selection by hovering the trackable body and pressing the select key.
- Decides what the renderer shows: the focused body's detail view, or the
  whole scene.

Frame discipline
- Everything runs on one thread. Per frame the caller applies input, then
  ticks, then renders, so all position updates finish before anything reads
  positions for drawing. Orbit records are only edited through
  set_orbit_parameters and nudge_orbit, between ticks.
"""
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from .bodies import CelestialBody
from .constants import FOCUS_RADIUS, ORIGIN
from .orbit import Orbit
from .vector_utils import Vec2, clamp, vec_len, vec_sub

logger = logging.getLogger(__name__)


class SceneError(ValueError):
    """Raised when a set of bodies cannot form a valid scene."""


@dataclass
class InputState:
    """
    Snapshot of the input source for one tick.

    Fields:
    - cursor: Pointer position in logical canvas coordinates
    - select: Select key held (focus the hovered trackable body)
    - clear_focus: Return to the full scene view
    - apoapsis_delta: Change to apply to the trackable orbit's apoapsis
    - periapsis_delta: Change to apply to the trackable orbit's periapsis
    """
    cursor: Vec2 = (0.0, 0.0)
    select: bool = False
    clear_focus: bool = False
    apoapsis_delta: float = 0.0
    periapsis_delta: float = 0.0


def within_radius(point: Vec2, cursor: Vec2, radius: float) -> bool:
    """True when cursor lies strictly inside the circle of `radius` around point."""
    return vec_len(vec_sub(point, cursor)) < radius


class Scene:
    """
    Fixed collection of celestial bodies plus the current focus.

    Attributes:
        bodies: Bodies in update/draw order.
        trackable: The body that can be focused by hovering, or None.
        focused: The body whose detail view is shown, or None.
        origin: Absolute position of parentless bodies.
        playing: When False the frame loop skips tick().
    """

    def __init__(self, bodies: List[CelestialBody], trackable: Optional[str] = None,
                 origin: Vec2 = ORIGIN, focus_radius: float = FOCUS_RADIUS):
        self._validate(bodies)
        self.bodies: List[CelestialBody] = list(bodies)
        self._by_name: Dict[str, CelestialBody] = {b.name: b for b in self.bodies}
        self.origin = origin
        self.focus_radius = focus_radius
        self.focused: Optional[CelestialBody] = None
        self.playing = True
        self.tick_count = 0
        self.trackable: Optional[CelestialBody] = None
        if trackable is not None:
            if not isinstance(trackable, str) or trackable not in self._by_name:
                raise SceneError(f"Unknown trackable body '{trackable}'")
            self.trackable = self._by_name[trackable]

    @staticmethod
    def _validate(bodies: List[CelestialBody]) -> None:
        names = set()
        for b in bodies:
            if b.name in names:
                raise SceneError(f"Duplicate body name '{b.name}'")
            names.add(b.name)
        members = {id(b) for b in bodies}
        for b in bodies:
            if not b.orbit.is_valid():
                raise SceneError(
                    f"Invalid orbit for '{b.name}': need apoapsis >= periapsis >= 0, "
                    f"got apoapsis={b.orbit.apoapsis}, periapsis={b.orbit.periapsis}"
                )
            if b.parent is not None and id(b.parent) not in members:
                raise SceneError(f"Parent of '{b.name}' is not part of the scene")
            if b.has_parent_cycle():
                raise SceneError(f"Parent cycle through '{b.name}'")

    # -----------------------
    # Lookup
    # -----------------------

    def get_body(self, name: str) -> Optional[CelestialBody]:
        return self._by_name.get(name)

    def orbits(self) -> List[Orbit]:
        """Distinct orbit records in the scene, shared records listed once."""
        seen = set()
        out: List[Orbit] = []
        for b in self.bodies:
            if id(b.orbit) not in seen:
                seen.add(id(b.orbit))
                out.append(b.orbit)
        return out

    def bodies_sharing(self, orbit: Orbit) -> List[CelestialBody]:
        return [b for b in self.bodies if b.orbit is orbit]

    # -----------------------
    # Simulation
    # -----------------------

    def tick(self) -> None:
        """Advance every body by one tick."""
        for b in self.bodies:
            b.advance()
        self.tick_count += 1

    def apply_input(self, state: InputState) -> None:
        """Consume one tick of input; call before tick()."""
        if state.clear_focus:
            self.clear_focus()
        if self.trackable is not None and (state.apoapsis_delta or state.periapsis_delta):
            self.nudge_orbit(self.trackable.orbit, state.apoapsis_delta, state.periapsis_delta)
        self.update_focus(state.cursor, state.select)

    # -----------------------
    # Focus
    # -----------------------

    def hovered(self, cursor: Vec2) -> bool:
        """True when the cursor is within focus_radius of the trackable body's resolved position."""
        if self.trackable is None:
            return False
        pos = self.trackable.resolve_position(self.origin)
        dist = vec_sub(pos, cursor)
        logger.debug("cursor offset from %s: %f %f", self.trackable.name, dist[0], dist[1])
        return within_radius(pos, cursor, self.focus_radius)

    def update_focus(self, cursor: Vec2, select: bool) -> Optional[CelestialBody]:
        """Focus the trackable body if it is hovered while select is pressed."""
        # hover is evaluated every tick so the cursor offset is logged each frame
        is_hovered = self.hovered(cursor)
        if select and is_hovered:
            self.set_focus(self.trackable)
        return self.focused

    def set_focus(self, body: Optional[CelestialBody]) -> None:
        if body is not None and self._by_name.get(body.name) is not body:
            raise SceneError(f"Body '{body.name}' is not part of the scene")
        if body is not self.focused:
            logger.info("Focus: %s", body.name if body is not None else "none")
        self.focused = body

    def clear_focus(self) -> None:
        self.set_focus(None)

    def bodies_to_render(self) -> List[CelestialBody]:
        """The focused body alone, or every body when nothing is focused."""
        if self.focused is not None:
            return [self.focused]
        return list(self.bodies)

    # -----------------------
    # Orbit edits
    # -----------------------

    def set_orbit_parameters(self, orbit: Orbit, apoapsis: Optional[float] = None,
                             periapsis: Optional[float] = None,
                             inclination: Optional[float] = None) -> Orbit:
        """
        Edit an orbit record, keeping apoapsis >= periapsis >= 0.

        Apoapsis is floored at 0 and periapsis is clamped into [0, apoapsis].
        Every body sharing the record sees the change on its next read.
        """
        self._write_orbit(orbit, apoapsis, periapsis, inclination)
        logger.info("Orbit of %s set to apoapsis=%.2f periapsis=%.2f inclination=%.2f",
                    ", ".join(b.name for b in self.bodies_sharing(orbit)),
                    orbit.apoapsis, orbit.periapsis, orbit.inclination)
        return orbit

    def nudge_orbit(self, orbit: Orbit, apoapsis_delta: float, periapsis_delta: float) -> Orbit:
        """Shift apoapsis/periapsis by the given deltas (arrow keys, once per tick)."""
        self._write_orbit(orbit, orbit.apoapsis + apoapsis_delta, orbit.periapsis + periapsis_delta, None)
        logger.debug("Orbit nudged to apoapsis=%.2f periapsis=%.2f", orbit.apoapsis, orbit.periapsis)
        return orbit

    def _write_orbit(self, orbit: Orbit, apoapsis: Optional[float], periapsis: Optional[float],
                     inclination: Optional[float]) -> None:
        if not self.bodies_sharing(orbit):
            raise SceneError("Orbit is not part of the scene")
        apo = orbit.apoapsis if apoapsis is None else float(apoapsis)
        peri = orbit.periapsis if periapsis is None else float(periapsis)
        apo = max(apo, 0.0)
        orbit.apoapsis = apo
        orbit.periapsis = clamp(peri, 0.0, apo)
        if inclination is not None:
            orbit.inclination = float(inclination)
