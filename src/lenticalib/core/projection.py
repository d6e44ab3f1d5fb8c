from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from lenticalib.config import ConfigurationError, ProjectionMode
from lenticalib.core.screen import ScreenGeometry


@dataclass(frozen=True, eq=False)
class OffAxisProjection:
    """
    Generalized perspective projection for a viewer in front of a planar screen.

    matrix = projection @ rotation @ translation maps world points straight to
    clip space. Frustum extents are given on the near plane.
    """

    left: float
    right: float
    bottom: float
    top: float
    near: float
    far: float
    distance: float  # eye to screen plane
    vr: np.ndarray  # (3,) screen right
    vu: np.ndarray  # (3,) screen up
    vn: np.ndarray  # (3,) screen normal, towards the viewer
    eye: np.ndarray  # (3,)
    projection: np.ndarray  # (4,4)
    rotation: np.ndarray  # (4,4)
    translation: np.ndarray  # (4,4)
    matrix: np.ndarray  # (4,4)


def _normalize(v: np.ndarray, what: str) -> np.ndarray:
    n = float(np.linalg.norm(v))
    if not math.isfinite(n) or n < 1e-12:
        raise ConfigurationError(f"degenerate screen corners: {what} has zero length")
    return v / n


def frustum_matrix(left: float, right: float, bottom: float, top: float, near: float, far: float) -> np.ndarray:
    """OpenGL-style asymmetric perspective matrix (right-handed, camera looks down -z)."""
    m = np.zeros((4, 4), dtype=np.float64)
    m[0, 0] = 2.0 * near / (right - left)
    m[0, 2] = (right + left) / (right - left)
    m[1, 1] = 2.0 * near / (top - bottom)
    m[1, 2] = (top + bottom) / (top - bottom)
    m[2, 2] = -(far + near) / (far - near)
    m[2, 3] = -2.0 * far * near / (far - near)
    m[3, 2] = -1.0
    return m


def compute_off_axis_projection(
    corner_bottom_left: np.ndarray,
    corner_bottom_right: np.ndarray,
    corner_top_left: np.ndarray,
    viewpoint: np.ndarray,
    near: float,
    far: float,
) -> OffAxisProjection:
    near = float(near)
    far = float(far)
    if not (math.isfinite(near) and math.isfinite(far)) or near <= 0.0 or far <= 0.0:
        raise ConfigurationError(f"clip planes must be > 0 (got near={near}, far={far})")
    if far <= near:
        raise ConfigurationError(f"far clip must be > near clip (got near={near}, far={far})")

    pa = np.asarray(corner_bottom_left, dtype=np.float64).reshape(3)
    pb = np.asarray(corner_bottom_right, dtype=np.float64).reshape(3)
    pc = np.asarray(corner_top_left, dtype=np.float64).reshape(3)
    eye = np.asarray(viewpoint, dtype=np.float64).reshape(3)
    if not np.all(np.isfinite(eye)):
        raise ConfigurationError("viewpoint must be finite")

    # Orthonormal screen basis.
    vr = _normalize(pb - pa, "bottom edge")
    vu = _normalize(pc - pa, "left edge")
    vn = _normalize(np.cross(vr, vu), "screen normal")

    va = pa - eye
    vb = pb - eye
    vc = pc - eye

    d = -float(np.dot(va, vn))
    if d <= 0.0:
        raise ConfigurationError(f"viewpoint must be in front of the screen plane (distance {d:.6g})")

    scale = near / d
    left = float(np.dot(vr, va)) * scale
    right = float(np.dot(vr, vb)) * scale
    bottom = float(np.dot(vu, va)) * scale
    top = float(np.dot(vu, vc)) * scale

    proj = frustum_matrix(left, right, bottom, top, near, far)

    rot = np.eye(4, dtype=np.float64)
    rot[0, :3] = vr
    rot[1, :3] = vu
    rot[2, :3] = vn

    trans = np.eye(4, dtype=np.float64)
    trans[:3, 3] = -eye

    return OffAxisProjection(
        left=left,
        right=right,
        bottom=bottom,
        top=top,
        near=near,
        far=far,
        distance=d,
        vr=vr,
        vu=vu,
        vn=vn,
        eye=eye,
        projection=proj,
        rotation=rot,
        translation=trans,
        matrix=proj @ rot @ trans,
    )


def compute_projection(
    screen: ScreenGeometry,
    viewpoint: tuple[float, float, float] | np.ndarray,
    near: float,
    far: float,
    mode: ProjectionMode | str = ProjectionMode.OFF_AXIS,
) -> OffAxisProjection:
    """
    Projection for the given screen.

    SIMPLE keeps only the viewing distance and puts the eye on the screen's
    perpendicular axis, which gives a symmetric frustum.
    """
    mode = ProjectionMode(mode)
    eye = np.asarray(viewpoint, dtype=np.float64).reshape(3)
    if mode is ProjectionMode.SIMPLE:
        eye = np.array([0.0, 0.0, eye[2]], dtype=np.float64)
    return compute_off_axis_projection(
        screen.corner_bottom_left,
        screen.corner_bottom_right,
        screen.corner_top_left,
        eye,
        near,
        far,
    )
