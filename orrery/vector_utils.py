#!/usr/bin/env python3
"""
Vector helper functions for 2D operations.

Arithmetic follows IEEE semantics where Python would raise: a zero divisor
yields inf or nan so degenerate orbits propagate to the renderer instead of
aborting a tick.
"""
import math
from typing import Tuple

Vec2 = Tuple[float, float]


def clamp(x: float, a: float, b: float) -> float:
    """Clamp x to the inclusive range [a, b]."""
    return max(a, min(b, x))


def ieee_div(n: float, d: float) -> float:
    """Divide like IEEE 754 floats do: x/0 is +-inf and 0/0 is nan."""
    if d == 0:
        if n == 0 or math.isnan(n):
            return math.nan
        return math.copysign(math.inf, n) * math.copysign(1.0, d)
    return n / d


def ieee_sqrt(x: float) -> float:
    """Square root returning nan for negative input instead of raising."""
    if x < 0:
        return math.nan
    return math.sqrt(x)


def vec_add(a: Vec2, b: Vec2) -> Vec2:
    return (a[0] + b[0], a[1] + b[1])


def vec_sub(a: Vec2, b: Vec2) -> Vec2:
    return (a[0] - b[0], a[1] - b[1])


def vec_scale(a: Vec2, s: float) -> Vec2:
    return (a[0] * s, a[1] * s)


def vec_len(a: Vec2) -> float:
    return math.hypot(a[0], a[1])


def is_finite(a: Vec2) -> bool:
    return math.isfinite(a[0]) and math.isfinite(a[1])
