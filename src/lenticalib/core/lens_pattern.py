from __future__ import annotations

import numpy as np

from lenticalib.core.lenticular import LenticularSheet
from lenticalib.core.screen import ScreenGeometry


def lens_width_px(screen: ScreenGeometry, sheet: LenticularSheet) -> float:
    return sheet.lens_width_mm * screen.dots_per_mm


def lens_pattern_image(screen: ScreenGeometry, sheet: LenticularSheet) -> np.ndarray:
    """
    Alignment pattern: white stripes one lens wide on every other lens.

    Returns a (v_res, h_res) uint8 image. The first stripe starts at
    offset * lens width, so the pattern moves with the sheet offset.
    """
    step = lens_width_px(screen, sheet)
    start = sheet.offset * step
    # Column centres, measured in lens widths from the first stripe.
    x = (np.arange(screen.h_res, dtype=np.float64) + 0.5 - start) / step
    on = (x >= 0.0) & (np.floor(x).astype(np.int64) % 2 == 0)
    row = np.where(on, 255, 0).astype(np.uint8)
    return np.repeat(row[None, :], screen.v_res, axis=0)
