#!/usr/bin/env python3
"""
Scene presets and JSON template loading.

This module provides:
- The built-in scene: a sun, an earth and a moon with hard-coded parameters.
- A loader for scene templates (templates/*.json) so other hierarchies can be
  tried without touching code.

Schema
======
Template JSON (templates/*.json):
{
  "name": "Human-friendly preset name",
  "description": "Optional description",
  "trackable": "Earth",                 # optional, body that can be focused
  "orbits": {
    "sun":   {"inclination": 0, "apoapsis": 300, "periapsis": 100, "period": 1.0},
    "earth": {"inclination": 0, "apoapsis": 30,  "periapsis": 20}
  },
  "bodies": [
    {"name": "Sun",   "mass": 5.9, "gravity": 8, "orbit": "sun",   "position_on_orbit": 0.25},
    {"name": "Earth", "mass": 0.9, "gravity": 8, "orbit": "earth", "position_on_orbit": 0.25,
     "parent": "Sun", "color": [255, 0, 0]},
    {"name": "Moon",  "mass": 0.9, "gravity": 3, "orbit": "earth", "position_on_orbit": 0.75,
     "parent": "Sun"}
  ]
}

Bodies naming the same orbit key share one Orbit record. Parents are looked up
by body name and may appear anywhere in the list.
"""
import json
import logging
import os
from typing import List, Optional, Tuple

from .bodies import CelestialBody
from .constants import BODY_COLOR
from .orbit import Orbit
from .scene import Scene, SceneError

logger = logging.getLogger(__name__)

TEMPLATES_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "templates")


def _read_json(path: str) -> Optional[dict]:
  try:
    with open(path, "r", encoding="utf-8") as f:
      return json.load(f)
  except (OSError, ValueError) as exc:
    logger.warning("Could not read %s: %s", path, exc)
    return None


def _coerce_color(c) -> Tuple[int, int, int]:
  try:
    r, g, b = int(c[0]), int(c[1]), int(c[2])
  except (TypeError, ValueError, IndexError):
    return BODY_COLOR
  r = max(0, min(255, r)); g = max(0, min(255, g)); b = max(0, min(255, b))
  return (r, g, b)


def default_scene() -> Scene:
  """
  The built-in sun/earth/moon scene.

  The moon shares the earth's orbit record and, like the earth, hangs off the
  sun. The sun itself circles the canvas center.
  """
  sun = CelestialBody(
    name="Sun",
    mass=5.9,
    gravity=8,
    orbit=Orbit(inclination=0, apoapsis=300, periapsis=100, period=1.0),
    position_on_orbit=0.25,
  )
  earth = CelestialBody(
    name="Earth",
    parent=sun,
    mass=0.9,
    gravity=8,
    orbit=Orbit(inclination=0, apoapsis=30, periapsis=20, period=1.0),
    position_on_orbit=0.25,
  )
  moon = CelestialBody(
    name="Moon",
    parent=sun,
    mass=0.9,
    gravity=3,
    orbit=earth.orbit,
    position_on_orbit=0.75,
  )
  return Scene([sun, earth, moon], trackable="Earth")


def list_templates(directory: str = TEMPLATES_DIR) -> List[Tuple[str, str]]:
  """Return list of (file_name, display_name) for available templates."""
  items: List[Tuple[str, str]] = []
  if not os.path.isdir(directory):
    return items
  for fn in sorted(os.listdir(directory)):
    if not fn.lower().endswith(".json"):
      continue
    data = _read_json(os.path.join(directory, fn))
    if not isinstance(data, dict):
      continue
    display = data.get("name") or os.path.splitext(fn)[0]
    items.append((fn, display))
  return items


def _parse_orbit(key: str, spec) -> Orbit:
  try:
    return Orbit(
      inclination=float(spec.get("inclination", 0.0)),
      apoapsis=float(spec["apoapsis"]),
      periapsis=float(spec["periapsis"]),
      period=float(spec.get("period", 1.0)),
    )
  except (AttributeError, KeyError, TypeError, ValueError) as exc:
    raise SceneError(f"Invalid orbit '{key}': {exc!r}") from exc


def scene_from_dict(data: dict) -> Scene:
  """Build a Scene from parsed template JSON; raises SceneError when malformed."""
  if not isinstance(data, dict):
    raise SceneError("Template must be a JSON object")
  raw_orbits = data.get("orbits") or {}
  if not isinstance(raw_orbits, dict):
    raise SceneError("'orbits' must map orbit names to parameters")
  orbits = {key: _parse_orbit(key, spec) for key, spec in raw_orbits.items()}

  raw_bodies = data.get("bodies", [])
  if not isinstance(raw_bodies, list):
    raise SceneError("'bodies' must be a list of body entries")
  trackable = data.get("trackable")
  if trackable is not None and not isinstance(trackable, str):
    raise SceneError(f"'trackable' must be a body name, got {trackable!r}")

  bodies: List[CelestialBody] = []
  parents = {}
  for raw in raw_bodies:
    try:
      name = str(raw["name"])
      orbit_key = raw["orbit"]
      body = CelestialBody(
        name=name,
        orbit=orbits[orbit_key] if orbit_key in orbits else None,
        mass=float(raw["mass"]),
        gravity=float(raw["gravity"]),
        position_on_orbit=float(raw.get("position_on_orbit", 0.0)),
        color=_coerce_color(raw.get("color", BODY_COLOR)),
      )
    except (KeyError, TypeError, ValueError) as exc:
      raise SceneError(f"Invalid body entry {raw!r}: {exc!r}") from exc
    if body.orbit is None:
      raise SceneError(f"Body '{name}' refers to unknown orbit '{orbit_key}'")
    if not 0.0 <= body.position_on_orbit < 1.0:
      raise SceneError(f"Body '{name}' position_on_orbit must be in [0, 1)")
    bodies.append(body)
    if raw.get("parent") is not None:
      parents[name] = str(raw["parent"])

  by_name = {b.name: b for b in bodies}
  for name, parent_name in parents.items():
    if parent_name not in by_name:
      raise SceneError(f"Body '{name}' refers to unknown parent '{parent_name}'")
    by_name[name].parent = by_name[parent_name]

  return Scene(bodies, trackable=trackable)


def load_template(path: str) -> Tuple[Scene, str]:
  """
  Load a template JSON by path (absolute, or a file name inside TEMPLATES_DIR).
  Returns (scene, display_name).
  """
  if not os.path.isabs(path) and not os.path.exists(path):
    path = os.path.join(TEMPLATES_DIR, path)
  data = _read_json(path)
  if data is None:
    raise SceneError(f"Could not read scene template '{path}'")
  scene = scene_from_dict(data)
  display_name = data.get("name") or os.path.splitext(os.path.basename(path))[0]
  logger.info("Loaded scene '%s' with %d bodies", display_name, len(scene.bodies))
  return scene, display_name
