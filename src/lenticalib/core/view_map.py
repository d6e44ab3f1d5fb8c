from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from typing import Iterator

import numpy as np

from lenticalib.config import ConfigurationError
from lenticalib.core.lenticular import LenticularSheet
from lenticalib.core.lightfield import LightfieldResolution
from lenticalib.core.screen import ScreenGeometry


@dataclass(frozen=True)
class ViewMapEntry:
    pixel: int
    lens: int  # 1-based
    view: int
    valid: bool


@dataclass(frozen=True, eq=False)
class ViewMap:
    """
    Per-column interlacing table, stored column-wise.

    Entry i describes (upsampled) pixel column i: the lens it sits under and
    the view it must show. Columns past the addressable lenses keep their
    entry with valid=False; the renderer decides what to draw there.
    """

    upscale: int
    pixel: np.ndarray  # (N,) int64
    lens: np.ndarray  # (N,) int64
    view: np.ndarray  # (N,) int64
    valid: np.ndarray  # (N,) bool

    def __len__(self) -> int:
        return int(self.pixel.shape[0])

    def __iter__(self) -> Iterator[ViewMapEntry]:
        for i in range(len(self)):
            yield self.entry(i)

    def entry(self, i: int) -> ViewMapEntry:
        return ViewMapEntry(
            pixel=int(self.pixel[i]),
            lens=int(self.lens[i]),
            view=int(self.view[i]),
            valid=bool(self.valid[i]),
        )

    @property
    def n_valid(self) -> int:
        return int(np.count_nonzero(self.valid))


def _frozen(a: np.ndarray) -> np.ndarray:
    a.setflags(write=False)
    return a


def pixel_centers_mm(screen: ScreenGeometry, upscale: int) -> np.ndarray:
    """Centre of every upsampled pixel column along the screen width, in mm."""
    n = int(upscale) * screen.h_res
    pitch_mm = 1.0 / (int(upscale) * screen.dots_per_mm)
    return np.arange(n, dtype=np.float64) * pitch_mm + 0.5 * pitch_mm


def compute_view_map(
    screen: ScreenGeometry,
    sheet: LenticularSheet,
    lightfield: LightfieldResolution,
    upscale: int,
) -> ViewMap:
    """
    Assign every pixel column to a lens and a view.

    View indices are clamped to [1, max(angular_res, 1)]. The centre term
    (angular_res + 1) // 2 is an integer division, so for an even angular_res
    the view sequence sits half a step lower than for an odd one. Before
    clamping the truncated index spans [0, angular_res]; 0 occurs on the
    trailing edge of a lens.
    """
    if (
        isinstance(upscale, bool)
        or not isinstance(upscale, numbers.Real)
        or not math.isfinite(upscale)
        or int(upscale) != upscale
        or int(upscale) < 1
    ):
        raise ConfigurationError(f"upscale must be an integer >= 1 (got {upscale})")
    upscale = int(upscale)

    w = sheet.lens_width_mm
    n_views = lightfield.angular_res

    centers = pixel_centers_mm(screen, upscale)
    pos = centers - w * sheet.offset
    lens = np.floor(1.0 + pos / w).astype(np.int64)

    residual = pos - w * lens + 0.5 * w
    raw = -(n_views / w) * residual + (n_views + 1) // 2
    view = np.trunc(raw).astype(np.int64)
    view = np.clip(view, 1, max(n_views, 1))

    valid = (lens >= 1) & (lens <= lightfield.spatial_res)

    return ViewMap(
        upscale=upscale,
        pixel=_frozen(np.arange(centers.shape[0], dtype=np.int64)),
        lens=_frozen(lens),
        view=_frozen(view),
        valid=_frozen(valid),
    )
