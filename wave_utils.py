"""
Module for small numerical and geometric utility functions.

Provides functions for:
- Linear interpolation and range mapping (slider value -> physical quantity).
- Discrete energy of a wave field.
- Courant number of an explicit wave step.
- Viewport and arrow geometry used by the renderers.
"""

import math
import numpy as np
from typing import Tuple

def lerp(a: float, b: float, t: float) -> float:
    """Linearly interpolate between a (t=0) and b (t=1)."""
    return a + (b - a) * t

def map_range(x: float, a: float, b: float, new_a: float, new_b: float) -> float:
    """
    Map x from the interval [a, b] onto [new_a, new_b] linearly.

    Values outside [a, b] are extrapolated, not clamped. A degenerate source
    interval (a == b) is not guarded against.

    Parameters
    ----------
    x : float
        Value to map.
    a, b : float
        Source interval.
    new_a, new_b : float
        Target interval.

    Returns
    -------
    float
        The mapped value.
    """
    t = (x - a) / (b - a)
    return lerp(new_a, new_b, t)

def discrete_energy(field) -> float:
    """
    Calculate the discrete energy of a wave field.

    E = dx * sum( 0.5 * v_i^2 ) + dx * sum( 0.5 * c(x_i)^2 * ((y_{i+1} - y_i) / dx)^2 )

    The potential term is the one whose gradient gives the central
    second-difference stencil used by the integrator, so for zero damping and
    a pinned/fixed boundary it is conserved up to truncation error.

    Parameters
    ----------
    field : WaveField
        Field to evaluate (read only).

    Returns
    -------
    float
        Total discrete energy.
    """
    dx = field.dx
    y = field.position
    v = field.velocity

    kinetic = 0.5 * np.sum(v ** 2)

    # Speed evaluated at the left node of each segment.
    x_left = np.arange(field.point_count - 1) * dx
    c_left = np.asarray(field.velocity_field.speed_at(x_left), dtype=float)
    slope = (y[1:] - y[:-1]) / dx
    potential = 0.5 * np.sum(c_left ** 2 * slope ** 2)

    return float((kinetic + potential) * dx)

def courant_number(field, dt: float) -> float:
    """
    Calculate the Courant number max(c) * dt / dx of a field for a timestep dt.

    Only reported to the user; the integrator never clamps parameters
    based on it.
    """
    speeds = np.asarray(field.velocity_field.speed_at(field.x_grid), dtype=float)
    max_speed = np.max(np.abs(speeds)) if speeds.size > 0 else 0.0
    return float(max_speed * dt / field.dx)

def fit_viewport(
    container_w: float,
    container_h: float,
    aspect_ratio: float
) -> Tuple[float, float, float, float]:
    """
    Fit a canvas of the given aspect ratio inside a container, centered.

    Parameters
    ----------
    container_w, container_h : float
        Size of the containing layout.
    aspect_ratio : float
        Target width / height of the canvas.

    Returns
    -------
    Tuple[float, float, float, float]
        (x, y, width, height) of the letterboxed canvas inside the container.
    """
    canvas_w = container_w
    canvas_h = container_h

    window_aspect_ratio = container_w / container_h

    if window_aspect_ratio > aspect_ratio:
        canvas_w = container_h * aspect_ratio
    else:
        canvas_h = container_w / aspect_ratio

    canvas_x = (container_w - canvas_w) * 0.5
    canvas_y = (container_h - canvas_h) * 0.5
    return canvas_x, canvas_y, canvas_w, canvas_h

def arrow_head(
    x0: float, y0: float,
    x1: float, y1: float,
    tip_size: float
) -> np.ndarray:
    """
    Vertices of the triangular tip of an arrow going from (x0, y0) to (x1, y1).

    Returns
    -------
    np.ndarray
        Array of shape (3, 2): the two barbs and the tip itself.
    """
    angle = math.atan2(y1 - y0, x1 - x0)

    ax = x1 - tip_size * math.cos(angle - math.pi / 6)
    ay = y1 - tip_size * math.sin(angle - math.pi / 6)

    bx = x1 - tip_size * math.cos(angle + math.pi / 6)
    by = y1 - tip_size * math.sin(angle + math.pi / 6)

    return np.array([[ax, ay], [bx, by], [x1, y1]])
