"""Equirectangular (longitude/latitude) parameterization of view directions.

UV (0.5, 0.5) is the +Z axis; u grows with atan2(x, z), v grows downward
(v = 0 is +Y, v = 1 is -Y).
"""

from __future__ import annotations

from math import atan2, cos, hypot, pi, sin, sqrt
from typing import Tuple

from ibllut.validation import validate_signed_unit, validate_unit

Vec3 = Tuple[float, float, float]


def complete_unit_vector(a: float, b: float) -> Tuple[float, float, float]:
    """Solve the missing non-negative component of a unit vector from two others.

    Returns ``(missing, a, b)``. If ``a^2 + b^2 > 1`` the pair is rescaled to
    unit length and the missing component is 0.
    """
    ab2 = a * a + b * b
    if ab2 > 1.0:
        length = sqrt(ab2)
        return 0.0, a / length, b / length
    return sqrt(1.0 - ab2), a, b


def direction_to_equirect_uv(x: float, y: float, z: float) -> Tuple[float, float]:
    """Equirectangular UV of a unit direction (no validation)."""
    u = atan2(x, z) / pi * 0.5 + 0.5
    v = -atan2(y, hypot(x, z)) / pi + 0.5
    return u, v


def eye_to_equirect_uv(eye_y: float, eye_z: float) -> Tuple[float, float]:
    """Equirectangular UV of the eye vector with the given Y and Z components.

    The X component is reconstructed as the non-negative solution of
    ``x^2 + y^2 + z^2 = 1``.
    """
    eye_y = validate_signed_unit(eye_y, "eye_y")
    eye_z = validate_signed_unit(eye_z, "eye_z")

    x, y, z = complete_unit_vector(eye_y, eye_z)
    return direction_to_equirect_uv(x, y, z)


def max_abs_normalize(v: Vec3) -> Vec3:
    """Rescale so that the largest absolute component is exactly 1."""
    m = max(abs(v[0]), abs(v[1]), abs(v[2]))
    return (v[0] / m, v[1] / m, v[2] / m)


def equirect_uv_to_eye(u: float, v: float) -> Vec3:
    """Eye vector for an equirectangular UV, Chebyshev-normalized.

    The result is scaled so its largest absolute component is 1 (a point on
    the unit cube, ready for cube-face lookup), not to unit length.
    """
    u = validate_unit(u, "u")
    v = validate_unit(v, "v")

    rv = (v - 0.5) * pi
    ru = (u - 0.5) * 2.0 * pi

    eye = (cos(rv) * sin(ru), -sin(rv), cos(rv) * cos(ru))
    return max_abs_normalize(eye)
