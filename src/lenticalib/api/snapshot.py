from __future__ import annotations

from dataclasses import dataclass

from lenticalib.config import CalibrationConfig
from lenticalib.core.lenticular import LenticularSheet, compute_lenticular_sheet
from lenticalib.core.lightfield import LightfieldResolution, compute_lightfield_resolution
from lenticalib.core.projection import OffAxisProjection, compute_projection
from lenticalib.core.screen import ScreenGeometry, compute_screen_geometry
from lenticalib.core.view_map import ViewMap, compute_view_map


@dataclass(frozen=True, eq=False)
class CalibrationSnapshot:
    """
    Everything the renderer needs for one frame. `config` is the one the chain ran with.

    Snapshots hold numpy arrays and compare by identity.
    """

    config: CalibrationConfig
    screen: ScreenGeometry
    lenticular: LenticularSheet
    lightfield: LightfieldResolution
    view_map: ViewMap
    projection: OffAxisProjection | None = None


def compute_projection_for(config: CalibrationConfig, screen: ScreenGeometry) -> OffAxisProjection:
    return compute_projection(
        screen,
        config.viewpoint,
        config.near_clip,
        config.far_clip,
        config.projection_mode,
    )


def compute_snapshot(
    config: CalibrationConfig,
    projection: OffAxisProjection | None = None,
) -> CalibrationSnapshot:
    """
    Run the full calibration chain for `config`.

    The projection is computed when `config.test_projection` is set; otherwise
    the `projection` argument is carried over as is.
    """
    screen = compute_screen_geometry(config.h_res, config.v_res, config.screen_diagonal_in)
    sheet = compute_lenticular_sheet(
        config.lenticular_lpi, config.lenticular_offset, config.lenticular_thickness_mm
    )
    lightfield = compute_lightfield_resolution(screen, sheet)
    view_map = compute_view_map(screen, sheet, lightfield, config.upscale)
    if config.test_projection:
        projection = compute_projection_for(config, screen)
    return CalibrationSnapshot(
        config=config,
        screen=screen,
        lenticular=sheet,
        lightfield=lightfield,
        view_map=view_map,
        projection=projection,
    )
