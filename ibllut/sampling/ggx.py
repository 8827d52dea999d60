"""GGX (Trowbridge-Reitz) importance sampling.

Reference: Brian Karis, "Real Shading in Unreal Engine 4",
SIGGRAPH 2013 Course: Physically Based Shading in Theory and Practice.
"""

from __future__ import annotations

from math import cos, pi, sin, sqrt
from typing import Sequence, Tuple

from ibllut.validation import validate_unit

Vec3 = Tuple[float, float, float]

# Above this |N.z| the tangent frame is built from +X instead of +Z.
UP_VECTOR_THRESHOLD = 0.999


def _cross(a: Sequence[float], b: Sequence[float]) -> Vec3:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def _normalize(v: Sequence[float]) -> Vec3:
    length = sqrt(v[0] * v[0] + v[1] * v[1] + v[2] * v[2])
    return (v[0] / length, v[1] / length, v[2] / length)


def tangent_frame(normal: Sequence[float]) -> Tuple[Vec3, Vec3]:
    """Build (tangent, bitangent) around ``normal``."""
    if abs(normal[2]) < UP_VECTOR_THRESHOLD:
        up = (0.0, 0.0, 1.0)
    else:
        up = (1.0, 0.0, 0.0)
    tangent = _normalize(_cross(up, normal))
    bitangent = _cross(normal, tangent)
    return tangent, bitangent


def sample_ggx_tangent_space(xi: Sequence[float], roughness: float) -> Vec3:
    """Half vector in tangent space (Z is the normal axis)."""
    a = roughness * roughness

    phi = 2.0 * pi * xi[0]
    cos_theta = sqrt((1.0 - xi[1]) / (1.0 + (a * a - 1.0) * xi[1]))
    sin_theta = sqrt(max(0.0, 1.0 - cos_theta * cos_theta))

    return (sin_theta * cos(phi), sin_theta * sin(phi), cos_theta)


def importance_sample_ggx(xi: Sequence[float], roughness: float,
                          normal: Sequence[float]) -> Vec3:
    """Map a 2D sample to a GGX-distributed half vector around ``normal``.

    Args:
        xi: sample coordinate in [0,1)x[0,1), usually from ``hammersley``.
        roughness: perceptual roughness in [0, 1]; alpha = roughness^2.
        normal: unit normal the lobe is centred on.

    Returns:
        Half vector in world space.
    """
    roughness = validate_unit(roughness, "roughness")

    hx, hy, hz = sample_ggx_tangent_space(xi, roughness)
    tangent, bitangent = tangent_frame(normal)

    return (
        tangent[0] * hx + bitangent[0] * hy + normal[0] * hz,
        tangent[1] * hx + bitangent[1] * hy + normal[1] * hz,
        tangent[2] * hx + bitangent[2] * hy + normal[2] * hz,
    )
