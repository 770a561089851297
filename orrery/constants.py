#!/usr/bin/env python3
"""
Shared constants for the Orrery visualizer.

Distances are in logical canvas pixels; the canvas is scaled into the window
by the viewport, so none of these depend on the actual window size.
"""

# Canvas (logical) and window (physical) sizes
SCREEN_WIDTH = 1600
SCREEN_HEIGHT = 900
RENDER_WIDTH = 1080
RENDER_HEIGHT = 720

# World origin: parentless bodies sit at the canvas center
ORIGIN = (SCREEN_WIDTH / 2, SCREEN_HEIGHT / 2)

# Frame loop
TICK_RATE = 60  # ticks (and frames) per second

# Speed heuristic tuning; not physical units
SPEED_DIVISOR = 60.0
INCREMENT_DIVISOR = 100.0

# Rendering
BACKGROUND_COLOR = (0, 0, 0)
ORBIT_COLOR = (255, 255, 255)
BODY_COLOR = (255, 0, 0)
FOCAL_POINT_COLOR = (0, 255, 0)
HOVER_RING_COLOR = (255, 255, 0)
HUD_TEXT_COLOR = (200, 200, 200)
BODY_RADIUS = 5
FOCAL_POINT_RADIUS = 15
ORBIT_SAMPLES = 1000
DETAIL_SCALE = 4.0  # magnification of the focused body's detail view

# Focus hit-testing (radius of the body marker)
FOCUS_RADIUS = 5.0

# Arrow-key orbit perturbation, canvas pixels per tick
ORBIT_NUDGE_STEP = 1.0

# Safety: avoid drawing outside reasonable integer pixel ranges
SAFE_COORD_LIMIT = 30000
