"""Ray / box boundary intersection."""

import math
from typing import Tuple


def find_intersection(
    px: float, py: float, alpha: float, nx: float, ny: float
) -> Tuple[float, float]:
    """
    Point where a ray from (px, py) at ``alpha`` degrees leaves the box [0, nx] x [0, ny].

    Edges are tried in a fixed order (right, left, top, bottom) and the first
    one whose intersection lies within that edge wins. Exactly vertical rays
    are handled by the top and bottom checks only. If no edge matches, the
    starting point is returned unchanged.

    Args:
        px, py: Starting point, expected inside the box
        alpha: Ray direction in degrees, counter-clockwise from +x
        nx, ny: Box extent

    Returns:
        tuple: (x, y) of the exit point

    Examples:
        >>> find_intersection(50, 50, 0, 100, 100)
        (100, 50.0)
    """
    alpharad = (alpha % 360.0) * math.pi / 180.0
    half_pi = math.pi / 2
    three_half_pi = 3 * math.pi / 2

    # right boundary
    if alpharad < half_pi or alpharad > three_half_pi:
        y = py + math.tan(alpharad) * (nx - px)
        if 0 <= y <= ny:
            return nx, y

    # left boundary
    if half_pi < alpharad < three_half_pi:
        y = py - math.tan(alpharad) * px
        if 0 <= y <= ny:
            return 0, y

    # top boundary
    if 0 < alpharad < math.pi:
        x = px + (ny - py) / math.tan(alpharad)
        if 0 <= x <= nx:
            return x, ny

    # bottom boundary
    if math.pi < alpharad < 2 * math.pi:
        x = px - py / math.tan(alpharad)
        if 0 <= x <= nx:
            return x, 0

    return px, py
