"""Tests for the Hammersley quasi-random sequence."""

import pytest

from ibllut.sampling.hammersley import (
    hammersley, hammersley_sequence, radical_inverse_vdc,
)
from ibllut.validation import RangeValidationError


class TestRadicalInverse:
    def test_known_values(self):
        assert radical_inverse_vdc(0) == 0.0
        assert radical_inverse_vdc(1) == 0.5
        assert radical_inverse_vdc(2) == 0.25
        assert radical_inverse_vdc(3) == 0.75
        assert radical_inverse_vdc(4) == 0.125
        assert radical_inverse_vdc(5) == 0.625

    def test_top_bit_maps_to_smallest_step(self):
        assert radical_inverse_vdc(0x80000000) == pytest.approx(2.0 ** -32)

    def test_all_ones(self):
        assert radical_inverse_vdc(0xFFFFFFFF) == pytest.approx(1.0 - 2.0 ** -32)
        assert radical_inverse_vdc(0xFFFFFFFF) < 1.0


class TestHammersley:
    def test_first_point_is_origin(self):
        for n in (1, 2, 3, 16, 1000):
            assert hammersley(0, n) == (0.0, 0.0)

    def test_half(self):
        assert hammersley(1, 2) == (0.5, 0.5)

    @pytest.mark.parametrize("n", [1, 2, 3, 7, 64, 100, 1024])
    def test_x_is_index_over_count(self, n):
        for i in range(n):
            x, _ = hammersley(i, n)
            assert x == i / n

    @pytest.mark.parametrize("k", range(0, 11))
    def test_power_of_two_y_is_permutation(self, k):
        """For n = 2^k the y values are exactly {0, 1/n, ..., (n-1)/n}."""
        n = 2 ** k
        ys = [hammersley(i, n)[1] for i in range(n)]
        assert len(set(ys)) == n
        assert sorted(ys) == [j / n for j in range(n)]

    def test_y_in_unit_interval(self):
        for i in range(777):
            x, y = hammersley(i, 777)
            assert 0.0 <= x < 1.0
            assert 0.0 <= y < 1.0

    def test_y_does_not_depend_on_count(self):
        assert hammersley(5, 8)[1] == hammersley(5, 1000)[1]

    def test_sequence_matches_scalar(self):
        points = hammersley_sequence(33)
        assert points.shape == (33, 2)
        for i in range(33):
            assert tuple(points[i]) == hammersley(i, 33)


class TestHammersleyValidation:
    def test_zero_sample_count(self):
        with pytest.raises(RangeValidationError) as exc:
            hammersley(0, 0)
        assert exc.value.param == "sample_count"

    def test_negative_index(self):
        with pytest.raises(RangeValidationError) as exc:
            hammersley(-1, 4)
        assert exc.value.param == "index"
        assert "less than 0" in str(exc.value)

    def test_index_equal_to_count(self):
        with pytest.raises(RangeValidationError) as exc:
            hammersley(4, 4)
        assert "greater than 3" in str(exc.value)

    def test_non_integer_index(self):
        with pytest.raises(RangeValidationError):
            hammersley(1.5, 4)

    def test_is_value_error(self):
        with pytest.raises(ValueError):
            hammersley(0, -3)

    def test_sequence_rejects_zero(self):
        with pytest.raises(RangeValidationError):
            hammersley_sequence(0)
