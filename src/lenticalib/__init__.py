from lenticalib import config
from lenticalib.api import CalibrationSnapshot, CalibrationState, export_calibration, format_report, shader_uniforms
from lenticalib.config import CalibrationConfig, ConfigurationError, ProjectionMode

__all__ = [
    "config",
    "CalibrationConfig",
    "ConfigurationError",
    "ProjectionMode",
    "CalibrationState",
    "CalibrationSnapshot",
    "export_calibration",
    "format_report",
    "shader_uniforms",
]
