"""Tests for GGX importance sampling."""

import math

import pytest

from ibllut.sampling.ggx import (
    importance_sample_ggx, sample_ggx_tangent_space, tangent_frame,
)
from ibllut.sampling.hammersley import hammersley
from ibllut.validation import RangeValidationError


def _length(v):
    return math.sqrt(v[0] * v[0] + v[1] * v[1] + v[2] * v[2])


def _dot(a, b):
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def _normalized(v):
    n = _length(v)
    return (v[0] / n, v[1] / n, v[2] / n)


NORMALS = [
    (0.0, 0.0, 1.0),
    (0.0, 0.0, -1.0),
    (1.0, 0.0, 0.0),
    (0.0, 1.0, 0.0),
    _normalized((1.0, 2.0, 3.0)),
    _normalized((-0.3, 0.1, -0.9)),
]


class TestTangentSpace:
    def test_zero_roughness_is_normal(self):
        for i in range(16):
            h = sample_ggx_tangent_space(hammersley(i, 16), 0.0)
            assert h == pytest.approx((0.0, 0.0, 1.0), abs=1e-12)

    def test_first_sample_is_normal(self):
        for roughness in (0.0, 0.3, 1.0):
            h = sample_ggx_tangent_space((0.0, 0.0), roughness)
            assert h == pytest.approx((0.0, 0.0, 1.0))

    def test_roughness_one_is_uniform_in_cos(self):
        """a = 1 makes cos(theta) = sqrt(1 - xi.y)."""
        h = sample_ggx_tangent_space((0.0, 0.75), 1.0)
        assert h[2] == pytest.approx(0.5)
        assert h[0] == pytest.approx(math.sqrt(0.75))


class TestTangentFrame:
    def test_z_normal_uses_x_up(self):
        tangent, bitangent = tangent_frame((0.0, 0.0, 1.0))
        assert tangent == pytest.approx((0.0, -1.0, 0.0))
        assert bitangent == pytest.approx((1.0, 0.0, 0.0))

    def test_x_normal_uses_z_up(self):
        tangent, bitangent = tangent_frame((1.0, 0.0, 0.0))
        assert tangent == pytest.approx((0.0, 1.0, 0.0))
        assert bitangent == pytest.approx((0.0, 0.0, 1.0))

    def test_threshold_is_inclusive(self):
        """|N.z| == 0.999 already switches the up vector to +X."""
        at = (math.sqrt(1.0 - 0.999 ** 2), 0.0, 0.999)
        below = (math.sqrt(1.0 - 0.998 ** 2), 0.0, 0.998)
        assert tangent_frame(at)[0] == pytest.approx((0.0, -1.0, 0.0))
        assert tangent_frame(below)[0] == pytest.approx((0.0, 1.0, 0.0))

    @pytest.mark.parametrize("normal", NORMALS)
    def test_orthonormal(self, normal):
        tangent, bitangent = tangent_frame(normal)
        assert _length(tangent) == pytest.approx(1.0)
        assert _length(bitangent) == pytest.approx(1.0)
        assert _dot(tangent, normal) == pytest.approx(0.0, abs=1e-12)
        assert _dot(bitangent, normal) == pytest.approx(0.0, abs=1e-12)
        assert _dot(tangent, bitangent) == pytest.approx(0.0, abs=1e-12)


class TestImportanceSampleGGX:
    @pytest.mark.parametrize("normal", NORMALS)
    def test_zero_roughness_returns_normal(self, normal):
        for i in range(8):
            h = importance_sample_ggx(hammersley(i, 8), 0.0, normal)
            assert h == pytest.approx(normal, abs=1e-12)

    @pytest.mark.parametrize("normal", NORMALS)
    @pytest.mark.parametrize("roughness", [0.1, 0.5, 1.0])
    def test_unit_length_upper_hemisphere(self, normal, roughness):
        for i in range(64):
            h = importance_sample_ggx(hammersley(i, 64), roughness, normal)
            assert _length(h) == pytest.approx(1.0)
            assert _dot(h, normal) >= 0.0

    def test_z_normal_world_space(self):
        """With N = +Z the world half vector is (h.y, -h.x, h.z)."""
        xi = hammersley(5, 16)
        hx, hy, hz = sample_ggx_tangent_space(xi, 0.6)
        h = importance_sample_ggx(xi, 0.6, (0.0, 0.0, 1.0))
        assert h == pytest.approx((hy, -hx, hz))

    def test_rougher_spreads_wider(self):
        normal = (0.0, 0.0, 1.0)
        n = 256
        smooth = sum(importance_sample_ggx(hammersley(i, n), 0.2, normal)[2] for i in range(n))
        rough = sum(importance_sample_ggx(hammersley(i, n), 0.9, normal)[2] for i in range(n))
        assert smooth > rough

    @pytest.mark.parametrize("roughness", [-0.01, 1.01, float("nan"), float("inf")])
    def test_rejects_bad_roughness(self, roughness):
        with pytest.raises(RangeValidationError) as exc:
            importance_sample_ggx((0.1, 0.2), roughness, (0.0, 0.0, 1.0))
        assert exc.value.param == "roughness"
