from __future__ import annotations

import json
from dataclasses import asdict, dataclass, fields, replace
from enum import Enum
from pathlib import Path
from typing import Any

SCHEMA_VERSION = "lenticalib.config.v0"


class ConfigurationError(ValueError):
    pass


class ProjectionMode(str, Enum):
    OFF_AXIS = "off_axis"
    SIMPLE = "simple"


@dataclass(frozen=True)
class CalibrationConfig:
    """
    Plain value struct filled by whatever control surface the host has.

    Numeric ranges are not checked here: the compute functions own those
    checks so a bad value coming from a live UI degrades instead of crashing.
    """

    h_res: int = 1024
    v_res: int = 768
    screen_diagonal_in: float = 15.4
    lenticular_lpi: float = 30.0
    lenticular_offset: float = 0.5
    lenticular_thickness_mm: float = 5.0
    upscale: int = 1
    near_clip: float = 2.0
    far_clip: float = 10.0
    viewpoint: tuple[float, float, float] = (0.0, 0.0, 1.5)
    lock_params: bool = False
    test_projection: bool = False
    projection_mode: ProjectionMode = ProjectionMode.OFF_AXIS
    positional_interlacing: bool = False
    debug_print: bool = False

    def replace(self, **changes: Any) -> "CalibrationConfig":
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        d["viewpoint"] = list(self.viewpoint)
        d["projection_mode"] = ProjectionMode(self.projection_mode).value
        return {"schema_version": SCHEMA_VERSION, **d}


def _require(cond: bool, msg: str) -> None:
    if not cond:
        raise ConfigurationError(msg)


def _as_int(data: dict[str, Any], key: str) -> int:
    v = data[key]
    _require(isinstance(v, int) and not isinstance(v, bool), f"{key} must be an integer")
    return int(v)


def _as_float(data: dict[str, Any], key: str) -> float:
    v = data[key]
    _require(isinstance(v, (int, float)) and not isinstance(v, bool), f"{key} must be a number")
    return float(v)


def _as_bool(data: dict[str, Any], key: str) -> bool:
    v = data[key]
    _require(isinstance(v, bool), f"{key} must be true or false")
    return bool(v)


_INT_KEYS = ("h_res", "v_res", "upscale")
_FLOAT_KEYS = (
    "screen_diagonal_in",
    "lenticular_lpi",
    "lenticular_offset",
    "lenticular_thickness_mm",
    "near_clip",
    "far_clip",
)
_BOOL_KEYS = ("lock_params", "test_projection", "positional_interlacing", "debug_print")


def parse_calibration_config(data: dict[str, Any]) -> CalibrationConfig:
    """
    Build a config from its JSON form. Missing keys take their defaults.
    """
    _require(isinstance(data, dict), "config must be a JSON object")
    _require(data.get("schema_version") == SCHEMA_VERSION, f"schema_version must be {SCHEMA_VERSION}")

    known = {f.name for f in fields(CalibrationConfig)}
    unknown = sorted(set(data) - known - {"schema_version"})
    _require(not unknown, f"unknown config keys: {', '.join(unknown)}")

    kwargs: dict[str, Any] = {}
    for key in _INT_KEYS:
        if key in data:
            kwargs[key] = _as_int(data, key)
    for key in _FLOAT_KEYS:
        if key in data:
            kwargs[key] = _as_float(data, key)
    for key in _BOOL_KEYS:
        if key in data:
            kwargs[key] = _as_bool(data, key)

    if "viewpoint" in data:
        vp = data["viewpoint"]
        _require(isinstance(vp, (list, tuple)) and len(vp) == 3, "viewpoint must be [x,y,z]")
        _require(
            all(isinstance(c, (int, float)) and not isinstance(c, bool) for c in vp),
            "viewpoint components must be numbers",
        )
        kwargs["viewpoint"] = (float(vp[0]), float(vp[1]), float(vp[2]))

    if "projection_mode" in data:
        mode = data["projection_mode"]
        valid = [m.value for m in ProjectionMode]
        _require(mode in valid, f"projection_mode must be one of {valid}")
        kwargs["projection_mode"] = ProjectionMode(mode)

    return CalibrationConfig(**kwargs)


def load_calibration_config(path: Path) -> CalibrationConfig:
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"{path} is not valid JSON: {e}") from e
    return parse_calibration_config(data)
