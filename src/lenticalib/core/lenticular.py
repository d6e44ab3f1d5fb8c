from __future__ import annotations

import math
from dataclasses import dataclass

from lenticalib.config import ConfigurationError
from lenticalib.core.screen import MM_PER_INCH


@dataclass(frozen=True)
class LenticularSheet:
    lines_per_inch: float
    lines_per_mm: float
    lens_width_mm: float
    offset: float  # fraction of a lens, [0, 1)
    thickness_mm: float  # not used by the mapping, kept for refraction modelling


def compute_lenticular_sheet(lines_per_inch: float, offset: float, thickness_mm: float) -> LenticularSheet:
    lines_per_inch = float(lines_per_inch)
    offset = float(offset)
    thickness_mm = float(thickness_mm)
    if not math.isfinite(lines_per_inch) or lines_per_inch <= 0.0:
        raise ConfigurationError(f"lenticular LPI must be > 0 (got {lines_per_inch})")
    if not (0.0 <= offset < 1.0):
        raise ConfigurationError(f"lenticular offset must be in [0, 1) (got {offset})")
    if not math.isfinite(thickness_mm) or thickness_mm < 0.0:
        raise ConfigurationError(f"lenticular thickness must be >= 0 mm (got {thickness_mm})")

    lines_per_mm = lines_per_inch / MM_PER_INCH
    return LenticularSheet(
        lines_per_inch=lines_per_inch,
        lines_per_mm=lines_per_mm,
        lens_width_mm=1.0 / lines_per_mm,
        offset=offset,
        thickness_mm=thickness_mm,
    )
