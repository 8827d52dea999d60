"""Cube-map unwrap (cross layout) parameterization of view directions.

The six faces are laid out on a 4x3 grid::

            +----+
            | +Y |
       +----+----+----+----+
       | -X | +Z | +X | -Z |
       +----+----+----+----+
            | -Y |
            +----+

Face-local coordinates are continuous across every edge of the middle row
and across the +Z/+Y and +Z/-Y edges. Final UV has v = 0 at the top.
"""

from __future__ import annotations

from math import sqrt
from typing import Tuple

from ibllut.mapping.equirect import complete_unit_vector, equirect_uv_to_eye
from ibllut.validation import validate_signed_unit

UNWRAP_COLUMNS = 4
UNWRAP_ROWS = 3

# Face name -> (column, row counted from the bottom)
FACE_CELLS = {
    "-X": (0, 1),
    "+Z": (1, 1),
    "+X": (2, 1),
    "-Z": (3, 1),
    "+Y": (1, 2),
    "-Y": (1, 0),
}


def cube_face_for_direction(x: float, y: float, z: float) -> str:
    """Name of the cube face a direction projects onto.

    Ties are resolved Z first, then Y, then X.
    """
    ax, ay, az = abs(x), abs(y), abs(z)
    if az >= ay and az >= ax:
        return "+Z" if z >= 0.0 else "-Z"
    if ay >= ax:
        return "+Y" if y >= 0.0 else "-Y"
    return "+X" if x >= 0.0 else "-X"


def face_local_coords(face: str, x: float, y: float, z: float) -> Tuple[float, float]:
    """(s, t) in [0, 1] on ``face``; s points right, t points up in the unwrap."""
    if face == "+Z":
        m = abs(z)
        s, t = x / m, y / m
    elif face == "-Z":
        m = abs(z)
        s, t = -x / m, y / m
    elif face == "+X":
        m = abs(x)
        s, t = -z / m, y / m
    elif face == "-X":
        m = abs(x)
        s, t = z / m, y / m
    elif face == "+Y":
        m = abs(y)
        s, t = x / m, -z / m
    elif face == "-Y":
        m = abs(y)
        s, t = x / m, z / m
    else:
        raise ValueError(f"Unknown cube face: {face}")
    return (s + 1.0) * 0.5, (t + 1.0) * 0.5


def direction_to_cube_uv(x: float, y: float, z: float) -> Tuple[float, float]:
    """Cube-unwrap UV of a direction (no validation)."""
    face = cube_face_for_direction(x, y, z)
    s, t = face_local_coords(face, x, y, z)
    col, row = FACE_CELLS[face]
    u = (col + s) / UNWRAP_COLUMNS
    v = 1.0 - (row + t) / UNWRAP_ROWS
    return u, v


def eye_to_cube_uv(eye_x: float, eye_z: float) -> Tuple[float, float]:
    """Cube-unwrap UV of the eye vector with the given X and Z components.

    The Y component is reconstructed as the non-negative solution of
    ``x^2 + y^2 + z^2 = 1``; out-of-circle pairs are renormalized with Y = 0.
    """
    eye_x = validate_signed_unit(eye_x, "eye_x")
    eye_z = validate_signed_unit(eye_z, "eye_z")

    y, x, z = complete_unit_vector(eye_x, eye_z)
    return direction_to_cube_uv(x, y, z)


def equirect_uv_to_cube_uv(u: float, v: float) -> Tuple[float, float]:
    """Cube-unwrap UV for an equirectangular UV.

    Goes through the eye vector. ``eye_to_cube_uv`` only sees the upper
    hemisphere, so rays below the horizon are mirrored back with v -> 1 - v,
    which lands them on the mirrored side-face row or on -Y.
    """
    ex, ey, ez = equirect_uv_to_eye(u, v)
    length = sqrt(ex * ex + ey * ey + ez * ez)
    ex, ey, ez = ex / length, ey / length, ez / length

    cu, cv = eye_to_cube_uv(_clamp_signed(ex), _clamp_signed(ez))
    if ey < 0.0:
        cv = 1.0 - cv
    return cu, cv


def _clamp_signed(x: float) -> float:
    return min(max(-1.0, x), 1.0)
