from __future__ import annotations

import math
from dataclasses import dataclass

from lenticalib.core.lenticular import LenticularSheet
from lenticalib.core.screen import ScreenGeometry


@dataclass(frozen=True)
class LightfieldResolution:
    spatial_res: int  # lenses across the screen width
    angular_res: int  # pixel columns (views) under one lens


def compute_lightfield_resolution(screen: ScreenGeometry, sheet: LenticularSheet) -> LightfieldResolution:
    spatial = math.floor(screen.width_mm / sheet.lens_width_mm)
    # round half up, not half to even
    angular = math.floor(screen.dots_per_mm * sheet.lens_width_mm + 0.5)
    return LightfieldResolution(spatial_res=max(int(spatial), 0), angular_res=max(int(angular), 0))
