from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import numpy as np

from lenticalib.api.snapshot import CalibrationSnapshot

logger = logging.getLogger(__name__)

SCHEMA_VERSION = "lenticalib.calibration.v0"


def export_calibration(out_dir: Path, snapshot: CalibrationSnapshot) -> Path:
    """
    Write the computed outputs of a snapshot into a directory:

      calibration.json + view_map.npz

    The JSON holds the scalar results and the projection; the NPZ stores the
    per-column view map. Nothing here is meant to be loaded back as config.
    """
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    vm = snapshot.view_map
    map_path = out_dir / "view_map.npz"
    np.savez_compressed(
        map_path,
        pixel=np.asarray(vm.pixel, dtype=np.int32),
        lens=np.asarray(vm.lens, dtype=np.int32),
        view=np.asarray(vm.view, dtype=np.int32),
        valid=np.asarray(vm.valid, dtype=np.bool_),
    )

    s = snapshot.screen
    sheet = snapshot.lenticular
    lf = snapshot.lightfield
    meta: dict[str, Any] = {
        "schema_version": SCHEMA_VERSION,
        "screen": {
            "h_res": int(s.h_res),
            "v_res": int(s.v_res),
            "diagonal_in": float(s.diagonal_in),
            "width_in": float(s.width_in),
            "height_in": float(s.height_in),
            "dots_per_inch": float(s.dots_per_inch),
            "dots_per_mm": float(s.dots_per_mm),
            "corners_m": {
                "bottom_left": s.corner_bottom_left.tolist(),
                "bottom_right": s.corner_bottom_right.tolist(),
                "top_left": s.corner_top_left.tolist(),
            },
        },
        "lenticular": {
            "lines_per_inch": float(sheet.lines_per_inch),
            "lines_per_mm": float(sheet.lines_per_mm),
            "lens_width_mm": float(sheet.lens_width_mm),
            "offset": float(sheet.offset),
            "thickness_mm": float(sheet.thickness_mm),
        },
        "lightfield": {"spatial_res": int(lf.spatial_res), "angular_res": int(lf.angular_res)},
        "view_map": {
            "format": "npz",
            "path": map_path.name,
            "upscale": int(vm.upscale),
            "columns": len(vm),
            "valid_columns": vm.n_valid,
        },
        "projection": None,
    }
    if snapshot.projection is not None:
        p = snapshot.projection
        meta["projection"] = {
            "eye": p.eye.tolist(),
            "frustum": {
                "left": p.left,
                "right": p.right,
                "bottom": p.bottom,
                "top": p.top,
                "near": p.near,
                "far": p.far,
            },
            "matrix": p.matrix.tolist(),
        }

    json_path = out_dir / "calibration.json"
    json_path.write_text(json.dumps(meta, indent=2, sort_keys=True), encoding="utf-8")
    logger.info("Exported calibration to %s", json_path)
    return json_path
