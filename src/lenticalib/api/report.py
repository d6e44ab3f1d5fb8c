from __future__ import annotations

import logging
from typing import Any

import numpy as np

from lenticalib.api.snapshot import CalibrationSnapshot
from lenticalib.config import CalibrationConfig

logger = logging.getLogger(__name__)


def report_lines(snapshot: CalibrationSnapshot) -> list[str]:
    s = snapshot.screen
    sheet = snapshot.lenticular
    lf = snapshot.lightfield
    return [
        "/// SCREEN ///",
        f"Resolution (W, H): {s.h_res}, {s.v_res}",
        f"Size, Width (in): {s.diagonal_in:.4g}, {s.width_in:.4g}",
        f"Width, Height (mm): {s.width_mm:.4g}, {s.height_mm:.4g}",
        f"DPI, DPMM: {s.dots_per_inch:.4g}, {s.dots_per_mm:.4g}",
        "/// LENTICULAR ///",
        f"LPI, LPMM: {sheet.lines_per_inch:.4g}, {sheet.lines_per_mm:.4g}",
        f"Lens Width (mm): {sheet.lens_width_mm:.4g}",
        f"Lens Offset: {sheet.offset:.4g}",
        f"Thickness (mm): {sheet.thickness_mm:.4g}",
        "/// LIGHTFIELD ///",
        f"Spatial Resolution: {lf.spatial_res}",
        f"Angular Resolution: {lf.angular_res}",
    ]


def format_report(snapshot: CalibrationSnapshot) -> str:
    return "\n".join(report_lines(snapshot))


def log_report(snapshot: CalibrationSnapshot) -> None:
    for line in report_lines(snapshot):
        logger.info(line)


def format_matrix(m: np.ndarray) -> str:
    rows = np.asarray(m, dtype=np.float64).reshape(4, 4)
    return "\n".join("  ".join(f"{v: .6f}" for v in row) for row in rows)


def shader_uniforms(snapshot: CalibrationSnapshot, config: CalibrationConfig | None = None) -> dict[str, Any]:
    """
    Uniform values for the interlacing shaders, keyed by uniform name.

    `config` supplies the per-frame viewer settings and defaults to the one
    the snapshot was computed with (it differs while parameters are locked).
    """
    cfg = snapshot.config if config is None else config
    s = snapshot.screen
    sheet = snapshot.lenticular
    lf = snapshot.lightfield
    uniforms: dict[str, Any] = {
        "_resAngSpat": (float(lf.angular_res), float(lf.spatial_res)),
        "_screenDPMM": float(s.dots_per_mm),
        "_res": (float(s.h_res), float(s.v_res)),
        "_upscale": int(snapshot.view_map.upscale),
        "_lentWidthOff": (float(sheet.lens_width_mm), float(sheet.offset), float(sheet.thickness_mm)),
        "_viewPos": tuple(float(c) for c in cfg.viewpoint),
        "_positional": 1 if cfg.positional_interlacing else 0,
    }
    if snapshot.projection is not None:
        uniforms["_projection"] = snapshot.projection.matrix.astype(np.float32)
    return uniforms
