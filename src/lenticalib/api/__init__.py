from lenticalib.api.calibration_state import CalibrationState
from lenticalib.api.export import export_calibration
from lenticalib.api.report import format_report, log_report, shader_uniforms
from lenticalib.api.snapshot import CalibrationSnapshot, compute_snapshot

__all__ = [
    "CalibrationState",
    "CalibrationSnapshot",
    "compute_snapshot",
    "export_calibration",
    "format_report",
    "log_report",
    "shader_uniforms",
]
