"""Split-sum environment BRDF integration.

Monte-Carlo estimate of the (scale, bias) pair applied to F0 in the split-sum
approximation:

    specular ~= prefiltered_env(R, roughness) * (F0 * scale + bias)

References:
    SIGGRAPH 2013 Course: Physically Based Shading in Theory and Practice
    http://blog.selfshadow.com/publications/s2013-shading-course/
    Specular BRDF Reference
    http://graphicrants.blogspot.com/2013/08/specular-brdf-reference.html
"""

from __future__ import annotations

from math import sqrt
from typing import Iterable, List, Sequence, Tuple

from ibllut.sampling.ggx import Vec3, importance_sample_ggx
from ibllut.sampling.hammersley import hammersley
from ibllut.validation import validate_count, validate_unit

NORMAL: Vec3 = (0.0, 0.0, 1.0)


def _clamp01(x: float) -> float:
    return min(max(0.0, x), 1.0)


def schlick_ggx(n_dot: float, alpha: float) -> float:
    """Schlick-GGX single-direction geometry term with k = alpha / 2."""
    k = alpha / 2.0
    return n_dot / (n_dot * (1.0 - k) + k)


def smith_ggx(roughness: float, nv_dot: float, nl_dot: float) -> float:
    """Smith shadowing-masking: product of the view and light Schlick-GGX terms."""
    alpha = roughness * roughness
    return schlick_ggx(nl_dot, alpha) * schlick_ggx(nv_dot, alpha)


def view_vector(nv_dot: float) -> Vec3:
    return (sqrt(1.0 - nv_dot * nv_dot), 0.0, nv_dot)


def ggx_half_vectors(roughness: float, sample_count: int) -> List[Vec3]:
    """Half vectors around +Z for Hammersley indices 0..sample_count-1, in order."""
    roughness = validate_unit(roughness, "roughness")
    sample_count = validate_count(sample_count, "sample_count")
    return [
        importance_sample_ggx(hammersley(i, sample_count), roughness, NORMAL)
        for i in range(sample_count)
    ]


def accumulate_brdf(roughness: float, nv_dot: float,
                    half_vectors: Iterable[Sequence[float]],
                    sample_count: int) -> Tuple[float, float]:
    """Sum the split-sum terms over precomputed half vectors.

    ``half_vectors`` must be in increasing sample index order; the sums are
    order dependent at the floating-point level.
    """
    if nv_dot <= 0.0:
        return 0.0, 0.0

    v = view_vector(nv_dot)
    scale = 0.0
    bias = 0.0

    for h in half_vectors:
        vh_dot = v[0] * h[0] + v[1] * h[1] + v[2] * h[2]
        lz = 2.0 * vh_dot * h[2] - v[2]

        # Light below the horizon contributes nothing.
        if lz > 0.0:
            nl_dot = _clamp01(lz)
            nh_dot = _clamp01(h[2])
            vh_dot = _clamp01(vh_dot)

            g = smith_ggx(roughness, nv_dot, nl_dot)
            g_vis = g * vh_dot / (nh_dot * nv_dot)
            fc = (1.0 - vh_dot) ** 5

            scale += (1.0 - fc) * g_vis
            bias += fc * g_vis

    return scale / sample_count, bias / sample_count


def integrate_brdf(roughness: float, nv_dot: float,
                   sample_count: int) -> Tuple[float, float]:
    """Integrate the environment BRDF for one (roughness, N.V) pair.

    Args:
        roughness: perceptual roughness in [0, 1].
        nv_dot: cosine between normal and view vector, in [0, 1].
        sample_count: number of Hammersley samples, >= 1.

    Returns:
        (scale, bias) for the split-sum approximation. ``nv_dot == 0``
        returns ``(0.0, 0.0)`` without sampling.
    """
    roughness = validate_unit(roughness, "roughness")
    nv_dot = validate_unit(nv_dot, "nv_dot")
    sample_count = validate_count(sample_count, "sample_count")

    if nv_dot <= 0.0:
        return 0.0, 0.0

    half_vectors = (
        importance_sample_ggx(hammersley(i, sample_count), roughness, NORMAL)
        for i in range(sample_count)
    )
    return accumulate_brdf(roughness, nv_dot, half_vectors, sample_count)
