import pytest

from design_consensus.features.spacing import detect_spacing_scale
from design_consensus.io.models import SpacingScale


def test_empty_input():
    assert detect_spacing_scale([]) == SpacingScale(base_unit=1, scale=[], coverage=0.0)


def test_non_positive_input():
    assert detect_spacing_scale([0, -4, -8, 0.2]) == SpacingScale(base_unit=1, scale=[], coverage=0.0)


def test_four_pixel_grid():
    scale = detect_spacing_scale([4, 8, 16, 24, 32])
    assert scale.base_unit == 4
    assert scale.coverage == 1.0
    assert scale.scale == [4, 8, 16, 24, 32]


def test_outlier_keeps_common_base():
    scale = detect_spacing_scale([4, 8, 16, 24, 32, 37])
    assert scale.base_unit == 4
    assert scale.scale == [4, 8, 16, 24, 32]
    assert scale.coverage == pytest.approx(5 / 6)


def test_gcd_above_one_is_used_directly():
    scale = detect_spacing_scale([8, 16, 24, 48, 16])
    assert scale.base_unit == 8
    assert scale.scale == [8, 16, 24, 48]
    assert scale.coverage == 1.0


def test_values_are_rounded_before_gcd():
    scale = detect_spacing_scale([3.6, 8.4, 12.49])
    assert scale.base_unit == 4
    assert scale.scale == [4, 8, 12]


def test_half_rounds_up():
    assert detect_spacing_scale([2.5, 6]).base_unit == 3


def test_common_base_needs_more_than_three_values():
    scale = detect_spacing_scale([4, 8, 13])
    assert scale.base_unit == 1
    assert scale.scale == [4, 8, 13]


def test_best_common_base_wins():
    scale = detect_spacing_scale([6, 12, 18, 7])
    assert scale.base_unit == 6
    assert scale.scale == [6, 12, 18]
    assert scale.coverage == 0.75


def test_low_coverage_falls_back_to_gcd():
    scale = detect_spacing_scale([3, 5, 7, 9, 11])
    assert scale.base_unit == 1
    assert scale.coverage == 1.0
    assert scale.scale == [3, 5, 7, 9, 11]
