#!/usr/bin/env python3
"""
Orrery visualizer entry point and renderer/control-panel coordination.

What this module does
- Runs a single frame loop that samples input, advances every body by one
  tick and then draws, at a fixed 60 Hz.
- Draws into a fixed 1600x900 logical canvas that is scaled into the window,
  so all scene geometry is expressed in canvas pixels.
- Optionally drives a Dear PyGui control panel from the same loop for pausing,
  stepping, focusing bodies, editing orbits and loading scene templates.

Frame order
- Input is applied and all bodies are ticked before anything is drawn, so the
  renderer and the panel only ever read fully updated positions. Both pygame
  and Dear PyGui are pumped from the main thread; there is no locking.

Controls (viewport)
- Hover the trackable body and hold S to focus it; Escape returns to the scene.
- Up/Down nudge the trackable orbit's apoapsis, Right/Left its periapsis.
- Space pauses/resumes.

Running
1) Install dependencies: `pip install pygame dearpygui`
2) Run this module: `python orrery_viz.py [--scene templates/nested_moon.json] [--no-panel]`
"""

import argparse
import logging
import sys
from typing import List, Optional, Tuple

# GUI and Rendering libs
import pygame
import dearpygui.dearpygui as dpg

from orrery.bodies import CelestialBody
from orrery.constants import (
    BACKGROUND_COLOR,
    BODY_RADIUS,
    DETAIL_SCALE,
    FOCAL_POINT_COLOR,
    FOCAL_POINT_RADIUS,
    HOVER_RING_COLOR,
    HUD_TEXT_COLOR,
    ORBIT_COLOR,
    ORBIT_NUDGE_STEP,
    ORBIT_SAMPLES,
    RENDER_HEIGHT,
    RENDER_WIDTH,
    SAFE_COORD_LIMIT,
    SCREEN_HEIGHT,
    SCREEN_WIDTH,
    TICK_RATE,
)
from orrery.orbit import Orbit, sample_orbit_path
from orrery.presets_loader import default_scene, list_templates, load_template
from orrery.scene import InputState, Scene, SceneError
from orrery.vector_utils import is_finite, vec_add, vec_scale
from orrery.viewport import Viewport

logger = logging.getLogger("orrery")


def try_float(val) -> Optional[float]:
    try:
        return float(val)
    except (TypeError, ValueError):
        return None

# ============================================================
# Pygame Renderer (frame loop)
# ============================================================

class OrreryRenderer:
    """
    Pygame loop: polls input, ticks the scene, draws orbits, bodies and HUD.
    """
    def __init__(self, scene: Scene):
        self.scene = scene
        self.viewport = Viewport()
        self.panel: Optional["ControlPanel"] = None
        self.window = None
        self.canvas = None
        self.clock = None
        self.running = True

    def set_scene(self, scene: Scene):
        self.scene = scene

    def setup(self):
        pygame.init()
        pygame.display.set_caption("Orrery - Viewport")
        self.window = pygame.display.set_mode((RENDER_WIDTH, RENDER_HEIGHT), pygame.RESIZABLE)
        self.viewport.set_window_size(RENDER_WIDTH, RENDER_HEIGHT)
        self.canvas = pygame.Surface((SCREEN_WIDTH, SCREEN_HEIGHT))
        self.clock = pygame.time.Clock()

    def run(self):
        self.setup()
        try:
            while self.running:
                # Input handling
                state = self.poll_input()
                self.scene.apply_input(state)

                # Simulation step
                if self.scene.playing:
                    self.scene.tick()

                # Draw
                self.draw()
                if self.panel is not None and not self.panel.render_frame():
                    self.running = False

                # Limit FPS
                self.clock.tick(TICK_RATE)
        finally:
            pygame.quit()

    def poll_input(self) -> InputState:
        state = InputState()
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False

            elif event.type == pygame.VIDEORESIZE:
                self.window = pygame.display.set_mode((event.w, event.h), pygame.RESIZABLE)
                self.viewport.set_window_size(event.w, event.h)

            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    state.clear_focus = True
                elif event.key == pygame.K_SPACE:
                    self.scene.playing = not self.scene.playing

        keys = pygame.key.get_pressed()
        if keys[pygame.K_UP]:
            state.apoapsis_delta += ORBIT_NUDGE_STEP
        if keys[pygame.K_DOWN]:
            state.apoapsis_delta -= ORBIT_NUDGE_STEP
        if keys[pygame.K_RIGHT]:
            state.periapsis_delta += ORBIT_NUDGE_STEP
        if keys[pygame.K_LEFT]:
            state.periapsis_delta -= ORBIT_NUDGE_STEP
        state.select = bool(keys[pygame.K_s])
        state.cursor = self.viewport.window_to_logical(pygame.mouse.get_pos())
        return state

    def draw_orbit(self, surf, orbit: Orbit, center: Tuple[float, float], scale: float = 1.0):
        points = sample_orbit_path(orbit, ORBIT_SAMPLES)
        prev = None
        for p in points:
            cur = _safe_point(vec_add(center, vec_scale(p, scale)))
            if prev is not None and cur is not None:
                pygame.draw.line(surf, ORBIT_COLOR, prev, cur, 1)
            prev = cur

    def draw_body(self, surf, body: CelestialBody):
        anchor = body.resolve_position(self.scene.origin)
        self.draw_orbit(surf, body.orbit, anchor)
        pos = _safe_point(body.screen_position(self.scene.origin))
        if pos:
            pygame.draw.circle(surf, body.color, pos, BODY_RADIUS)

    def draw_focal_point(self, surf):
        center = _safe_point(self.scene.origin)
        if center:
            pygame.draw.circle(surf, FOCAL_POINT_COLOR, center, FOCAL_POINT_RADIUS)

    def draw_hover_ring(self, surf):
        """Outline the trackable body's hit area (its resolved position)."""
        trackable = self.scene.trackable
        if trackable is None:
            return
        center = _safe_point(trackable.resolve_position(self.scene.origin))
        if center:
            pygame.draw.circle(surf, HOVER_RING_COLOR, center, int(self.scene.focus_radius), 1)

    def draw_details(self, surf, body: CelestialBody):
        """Enlarged view of a single body and its orbit, with a readout."""
        center = (SCREEN_WIDTH / 2, SCREEN_HEIGHT / 2)
        self.draw_orbit(surf, body.orbit, center, DETAIL_SCALE)
        pos = _safe_point(vec_add(center, vec_scale(body.orbit_offset(), DETAIL_SCALE)))
        if pos:
            pygame.draw.circle(surf, body.color, pos, int(BODY_RADIUS * DETAIL_SCALE))
        y = 10
        for line in body.describe(self.scene.origin):
            draw_text(surf, line, 10, y, HUD_TEXT_COLOR)
            y += 20
        draw_text(surf, "Esc: back to scene", 10, y + 10, HUD_TEXT_COLOR)

    def draw(self):
        surf = self.canvas
        surf.fill(BACKGROUND_COLOR)

        if self.scene.focused is not None:
            self.draw_details(surf, self.scene.focused)
        else:
            for body in self.scene.bodies_to_render():
                self.draw_body(surf, body)
            self.draw_focal_point(surf)
            self.draw_hover_ring(surf)

            # HUD text
            draw_text(surf, "Hover + S: focus | Esc: back | Up/Down: apoapsis | Left/Right: periapsis | Space: Pause/Play",
                      10, 10, HUD_TEXT_COLOR)
            state = "Playing" if self.scene.playing else "Paused"
            draw_text(surf, f"Tick {self.scene.tick_count}  [{state}]", 10, 30, HUD_TEXT_COLOR)

        # Scale the logical canvas into the window
        self.window.fill(BACKGROUND_COLOR)
        scaled = pygame.transform.smoothscale(surf, self.viewport.scaled_size())
        self.window.blit(scaled, (int(self.viewport.offset[0]), int(self.viewport.offset[1])))
        pygame.display.flip()

_cached_font = None

def draw_text(surface, text, x, y, color):
    global _cached_font
    if not pygame.font.get_init():
        pygame.font.init()
    if _cached_font is None:
        # SysFont falls back to pygame's default font when consolas is missing
        _cached_font = pygame.font.SysFont("consolas", 16)
    img = _cached_font.render(text, True, color)
    surface.blit(img, (x, y))

def _safe_point(pt):
    # nan/inf from degenerate orbits are skipped rather than drawn
    if not is_finite(pt):
        return None
    x, y = int(pt[0]), int(pt[1])
    if -SAFE_COORD_LIMIT <= x <= SAFE_COORD_LIMIT and -SAFE_COORD_LIMIT <= y <= SAFE_COORD_LIMIT:
        return (x, y)
    return None

# ============================================================
# Dear PyGui Control Panel
# ============================================================

class ControlPanel:
    """
    Dear PyGui interface: play/pause/step, focus, orbit editor, templates.

    Pumped once per frame by OrreryRenderer.run via render_frame().
    """
    SYNC_EVERY = 6  # frames between readout refreshes (~10 Hz)

    def __init__(self, renderer: OrreryRenderer):
        self.renderer = renderer
        self._frame = 0
        self._template_map = {}

        self.template_combo_id = None
        self.body_list_id = None
        self.apoapsis_id = None
        self.periapsis_id = None
        self.inclination_id = None
        self.readout_id = None
        self.status_msg_id = None

        self._build_ui()
        self._refresh_body_list()

    @property
    def scene(self) -> Scene:
        return self.renderer.scene

    # -----------------------
    # UI Construction
    # -----------------------

    def _build_ui(self):
        dpg.create_context()
        dpg.create_viewport(title='Orrery - Controls', width=440, height=560)

        with dpg.window(label="Controls", tag="main_window"):
            dpg.add_text("Scene template:")
            self._template_map = {display: fn for fn, display in list_templates()}
            items = list(self._template_map) or ["No templates found (add JSONs to templates/)"]
            with dpg.group(horizontal=True):
                self.template_combo_id = dpg.add_combo(items, default_value=items[0], width=260)
                dpg.add_button(label="Load", callback=self._on_load_template)
                dpg.add_button(label="Built-in", callback=self._on_load_builtin)

            dpg.add_separator()
            dpg.add_text("Simulation")
            with dpg.group(horizontal=True):
                dpg.add_button(label="Play/Pause", callback=self._toggle_play)
                dpg.add_button(label="Step", callback=self._step_once)

            dpg.add_separator()
            dpg.add_text("Bodies")
            self.body_list_id = dpg.add_listbox(items=[], width=400, num_items=4,
                                                callback=lambda s, a, u: self._populate_orbit_fields())
            with dpg.group(horizontal=True):
                dpg.add_button(label="Focus", callback=self._on_focus)
                dpg.add_button(label="Clear Focus", callback=self._on_clear_focus)
            self.readout_id = dpg.add_text("")

            dpg.add_separator()
            dpg.add_text("Orbit of selected body (shared records change for every body)")
            self.apoapsis_id = dpg.add_input_text(label="Apoapsis", width=150)
            self.periapsis_id = dpg.add_input_text(label="Periapsis", width=150)
            self.inclination_id = dpg.add_input_text(label="Inclination", width=150)
            dpg.add_button(label="Apply Orbit", callback=self._apply_orbit_edits)

            self.status_msg_id = dpg.add_text("")

        dpg.setup_dearpygui()
        dpg.show_viewport()
        dpg.set_primary_window("main_window", True)

    def render_frame(self) -> bool:
        """Draw one panel frame; False once the panel window has been closed."""
        if not dpg.is_dearpygui_running():
            return False
        self._frame += 1
        if self._frame % self.SYNC_EVERY == 0:
            self._sync_readout()
        dpg.render_dearpygui_frame()
        return True

    def close(self):
        dpg.destroy_context()

    # -----------------------
    # UI Callbacks
    # -----------------------

    def _set_status(self, msg: str, color=(180, 220, 180)):
        dpg.set_value(self.status_msg_id, msg)
        dpg.configure_item(self.status_msg_id, color=color)

    def _set_error(self, msg: str):
        self._set_status(msg, color=(255, 120, 120))

    def _selected_body(self) -> Optional[CelestialBody]:
        name = dpg.get_value(self.body_list_id)
        return self.scene.get_body(name) if name else None

    def _refresh_body_list(self):
        items = [b.name for b in self.scene.bodies]
        dpg.configure_item(self.body_list_id, items=items)
        if items:
            dpg.set_value(self.body_list_id, items[0])
        self._populate_orbit_fields()

    def _populate_orbit_fields(self):
        b = self._selected_body()
        if not b:
            return
        dpg.set_value(self.apoapsis_id, f"{b.orbit.apoapsis:.3f}")
        dpg.set_value(self.periapsis_id, f"{b.orbit.periapsis:.3f}")
        dpg.set_value(self.inclination_id, f"{b.orbit.inclination:.3f}")

    def _apply_orbit_edits(self):
        b = self._selected_body()
        if not b:
            self._set_error("No body selected.")
            return
        apo = try_float(dpg.get_value(self.apoapsis_id))
        peri = try_float(dpg.get_value(self.periapsis_id))
        inc = try_float(dpg.get_value(self.inclination_id))
        if None in (apo, peri, inc):
            self._set_error("Invalid orbit input.")
            return
        self.scene.set_orbit_parameters(b.orbit, apoapsis=apo, periapsis=peri, inclination=inc)
        self._populate_orbit_fields()
        shared = ", ".join(x.name for x in self.scene.bodies_sharing(b.orbit))
        self._set_status(f"Updated orbit of {shared}.")

    def _on_focus(self):
        b = self._selected_body()
        if not b:
            self._set_error("No body selected.")
            return
        self.scene.set_focus(b)
        self._set_status(f"Focused {b.name}.")

    def _on_clear_focus(self):
        self.scene.clear_focus()
        self._set_status("Showing full scene.")

    def _toggle_play(self):
        self.scene.playing = not self.scene.playing
        state = "Playing" if self.scene.playing else "Paused"
        self._set_status(f"Simulation {state}.")

    def _step_once(self):
        self.scene.playing = False
        self.scene.tick()
        self._set_status("Stepped one tick.")

    def _on_load_template(self):
        name = dpg.get_value(self.template_combo_id)
        if name not in self._template_map:
            self._set_error("No template selected.")
            return
        try:
            scene, display_name = load_template(self._template_map[name])
        except SceneError as exc:
            logger.warning("Template '%s' rejected: %s", name, exc)
            self._set_error(str(exc))
            return
        self.renderer.set_scene(scene)
        self._refresh_body_list()
        self._set_status(f"Loaded template: {display_name}")

    def _on_load_builtin(self):
        self.renderer.set_scene(default_scene())
        self._refresh_body_list()
        self._set_status("Loaded built-in scene.")

    def _sync_readout(self):
        """Periodic readout of the selected body's state."""
        b = self._selected_body()
        if not b:
            dpg.set_value(self.readout_id, "")
            return
        x, y = b.screen_position(self.scene.origin)
        focused = self.scene.focused.name if self.scene.focused is not None else "none"
        dpg.set_value(self.readout_id,
                      f"position on orbit: {b.position_on_orbit:.4f}\n"
                      f"speed: {b.speed():.4f}\n"
                      f"screen: ({x:.1f}, {y:.1f})\n"
                      f"focused: {focused}")

# ============================================================
# Application Entry
# ============================================================

def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Toy orrery: sun, earth and moon on elliptical orbits")
    parser.add_argument(
        "--scene",
        help="Path to a scene template JSON (see orrery/presets_loader.py). Defaults to the built-in scene.",
    )
    parser.add_argument(
        "--no-panel",
        action="store_true",
        help="Run without the Dear PyGui control panel.",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (DEBUG also prints the per-frame cursor distance).",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    panel = None
    try:
        if args.scene:
            scene, display_name = load_template(args.scene)
        else:
            scene, display_name = default_scene(), "built-in"
        logger.info("Starting with scene %s", display_name)

        renderer = OrreryRenderer(scene)
        if not args.no_panel:
            panel = ControlPanel(renderer)
            renderer.panel = panel
        renderer.run()
    except Exception:
        logger.exception("Fatal error, shutting down")
        return 1
    finally:
        if panel is not None:
            panel.close()
    return 0

if __name__ == "__main__":
    sys.exit(main())
