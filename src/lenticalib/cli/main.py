from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

from PIL import Image

from lenticalib.api.export import export_calibration
from lenticalib.api.report import format_matrix, format_report
from lenticalib.api.snapshot import compute_projection_for, compute_snapshot
from lenticalib.config import CalibrationConfig, ConfigurationError, ProjectionMode, load_calibration_config
from lenticalib.core.lens_pattern import lens_pattern_image


def _add_config_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--config", type=Path, default=None, help="JSON config (schema lenticalib.config.v0).")
    p.add_argument("--h-res", type=int, default=None, help="Horizontal resolution (px).")
    p.add_argument("--v-res", type=int, default=None, help="Vertical resolution (px).")
    p.add_argument("--diagonal", type=float, default=None, help="Screen diagonal (inches).")
    p.add_argument("--lpi", type=float, default=None, help="Lenticular lines per inch.")
    p.add_argument("--offset", type=float, default=None, help="Lenticular offset, fraction of a lens in [0,1).")
    p.add_argument("--thickness", type=float, default=None, help="Lenticular sheet thickness (mm).")
    p.add_argument("--upscale", type=int, default=None, help="Column upsampling factor (>=1).")
    p.add_argument("--near", type=float, default=None, help="Near clipping plane.")
    p.add_argument("--far", type=float, default=None, help="Far clipping plane.")
    p.add_argument("--view", type=float, nargs=3, default=None, metavar=("X", "Y", "Z"), help="Viewpoint (m).")
    p.add_argument("--mode", type=str, default=None, choices=[m.value for m in ProjectionMode])


def config_from_args(args: argparse.Namespace) -> CalibrationConfig:
    cfg = load_calibration_config(args.config) if args.config is not None else CalibrationConfig()
    overrides: dict[str, Any] = {
        "h_res": args.h_res,
        "v_res": args.v_res,
        "screen_diagonal_in": args.diagonal,
        "lenticular_lpi": args.lpi,
        "lenticular_offset": args.offset,
        "lenticular_thickness_mm": args.thickness,
        "upscale": args.upscale,
        "near_clip": args.near,
        "far_clip": args.far,
        "viewpoint": tuple(args.view) if args.view is not None else None,
        "projection_mode": ProjectionMode(args.mode) if args.mode is not None else None,
    }
    return cfg.replace(**{k: v for k, v in overrides.items() if v is not None})


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="lenticalib")
    sub = parser.add_subparsers(dest="cmd", required=True)

    rep = sub.add_parser("report", help="Print screen/lenticular/lightfield calibration values.")
    _add_config_args(rep)

    proj = sub.add_parser("projection", help="Print the off-axis projection matrix for the viewpoint.")
    _add_config_args(proj)

    pat = sub.add_parser("lens-pattern", help="Write the lens alignment stripe pattern as an image.")
    _add_config_args(pat)
    pat.add_argument("--out", type=Path, required=True)

    exp = sub.add_parser("export", help="Write calibration.json + view_map.npz into a directory.")
    _add_config_args(exp)
    exp.add_argument("--out", type=Path, required=True)
    exp.add_argument("--with-projection", action="store_true", help="Include the projection matrix.")

    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s | %(message)s")

    try:
        cfg = config_from_args(args)
        if args.cmd == "export" and args.with_projection:
            cfg = cfg.replace(test_projection=True)
        snapshot = compute_snapshot(cfg)

        if args.cmd == "report":
            print(format_report(snapshot))
            return 0

        if args.cmd == "projection":
            p = compute_projection_for(cfg, snapshot.screen)
            print(f"frustum l={p.left:.6g} r={p.right:.6g} b={p.bottom:.6g} t={p.top:.6g} n={p.near:.6g} f={p.far:.6g}")
            print(format_matrix(p.matrix))
            return 0

        if args.cmd == "lens-pattern":
            img = lens_pattern_image(snapshot.screen, snapshot.lenticular)
            args.out.parent.mkdir(parents=True, exist_ok=True)
            Image.fromarray(img).save(args.out)
            print(f"Wrote {args.out}")
            return 0

        if args.cmd == "export":
            json_path = export_calibration(args.out, snapshot)
            print(f"Wrote {json_path}")
            return 0
    except ConfigurationError as e:
        print(f"lenticalib: configuration error: {e}", file=sys.stderr)
        return 2

    raise AssertionError(f"Unhandled cmd: {args.cmd}")


if __name__ == "__main__":
    raise SystemExit(main())
