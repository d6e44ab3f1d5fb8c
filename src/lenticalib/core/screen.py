from __future__ import annotations

import math
import numbers
from dataclasses import dataclass

import numpy as np

from lenticalib.config import ConfigurationError

MM_PER_INCH = 25.4
MM_PER_WORLD_UNIT = 1000.0


@dataclass(frozen=True, eq=False)
class ScreenGeometry:
    """
    Physical geometry of the display panel.

    Corners live in a screen-local frame centred on the panel midpoint,
    x right, y up, z towards the viewer, in world units (metres).
    """

    h_res: int
    v_res: int
    diagonal_in: float
    width_in: float
    height_in: float
    dots_per_inch: float
    dots_per_mm: float
    corner_bottom_left: np.ndarray  # (3,)
    corner_bottom_right: np.ndarray  # (3,)
    corner_top_left: np.ndarray  # (3,)

    @property
    def width_mm(self) -> float:
        return self.width_in * MM_PER_INCH

    @property
    def height_mm(self) -> float:
        return self.height_in * MM_PER_INCH

    @property
    def corners(self) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        return self.corner_bottom_left, self.corner_bottom_right, self.corner_top_left


def _is_integral(v) -> bool:
    if isinstance(v, bool) or not isinstance(v, numbers.Real):
        return False
    return math.isfinite(v) and int(v) == v


def compute_screen_geometry(h_res: int, v_res: int, diagonal_in: float) -> ScreenGeometry:
    if not (_is_integral(h_res) and _is_integral(v_res)):
        raise ConfigurationError(f"screen resolution must be integral (got {h_res}x{v_res})")
    h_res = int(h_res)
    v_res = int(v_res)
    if h_res <= 0 or v_res <= 0:
        raise ConfigurationError(f"screen resolution must be > 0 (got {h_res}x{v_res})")
    diagonal_in = float(diagonal_in)
    if not math.isfinite(diagonal_in) or diagonal_in <= 0.0:
        raise ConfigurationError(f"screen diagonal must be > 0 inches (got {diagonal_in})")

    angle = math.atan2(v_res, h_res)
    width_in = diagonal_in * math.cos(angle)
    height_in = diagonal_in * math.sin(angle)
    dpi = h_res / width_in
    dpmm = dpi / MM_PER_INCH

    half_w = 0.5 * width_in * MM_PER_INCH / MM_PER_WORLD_UNIT
    half_h = 0.5 * height_in * MM_PER_INCH / MM_PER_WORLD_UNIT

    return ScreenGeometry(
        h_res=h_res,
        v_res=v_res,
        diagonal_in=diagonal_in,
        width_in=width_in,
        height_in=height_in,
        dots_per_inch=dpi,
        dots_per_mm=dpmm,
        corner_bottom_left=np.array([-half_w, -half_h, 0.0], dtype=np.float64),
        corner_bottom_right=np.array([half_w, -half_h, 0.0], dtype=np.float64),
        corner_top_left=np.array([-half_w, half_h, 0.0], dtype=np.float64),
    )
