#!/usr/bin/env python3
"""
Viewport utilities for logical-canvas-to-window transforms.
"""
from typing import Tuple

from .constants import RENDER_HEIGHT, RENDER_WIDTH, SCREEN_HEIGHT, SCREEN_WIDTH


class Viewport:
    """
    Fits the fixed logical canvas into the window, keeping its aspect ratio.

    The canvas is scaled uniformly and centered; leftover window area is
    letterboxed.
    """

    def __init__(self, window_size=(RENDER_WIDTH, RENDER_HEIGHT), canvas_size=(SCREEN_WIDTH, SCREEN_HEIGHT)):
        self.canvas_size = (canvas_size[0], canvas_size[1])
        self.window_size = (RENDER_WIDTH, RENDER_HEIGHT)
        self.scale = 1.0
        self.offset = (0.0, 0.0)
        self.set_window_size(*window_size)

    def set_window_size(self, w: int, h: int) -> None:
        self.window_size = (max(w, 1), max(h, 1))
        cw, ch = self.canvas_size
        self.scale = min(self.window_size[0] / cw, self.window_size[1] / ch)
        self.offset = ((self.window_size[0] - cw * self.scale) / 2,
                       (self.window_size[1] - ch * self.scale) / 2)

    def scaled_size(self) -> Tuple[int, int]:
        """Size of the canvas once scaled into the window, in pixels."""
        return (int(round(self.canvas_size[0] * self.scale)), int(round(self.canvas_size[1] * self.scale)))

    def logical_to_window(self, pos: Tuple[float, float]) -> Tuple[int, int]:
        px = pos[0] * self.scale + self.offset[0]
        py = pos[1] * self.scale + self.offset[1]
        return (int(px), int(py))

    def window_to_logical(self, screen: Tuple[int, int]) -> Tuple[float, float]:
        lx = (screen[0] - self.offset[0]) / self.scale
        ly = (screen[1] - self.offset[1]) / self.scale
        return (lx, ly)
