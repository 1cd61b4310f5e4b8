"""
Unit tests for color space conversions.

Covers RGB <-> HSV math, hex formatting, clamping of out-of-range input and
the storage encoding of RGB triples.
"""

import math

import pytest

from huematch.services.colors.conversions import (
    clamp_channel, decode_rgb, encode_rgb, hex_to_rgb, hsv_to_rgb,
    rgb_to_hex, rgb_to_hsv, round_half_up
)


class TestRgbToHsv:
    """Test RGB -> HSV conversion."""

    def test_primary_colors(self):
        h, s, v = rgb_to_hsv(255, 0, 0)
        assert h == 0.0 and s == 1.0 and v == 1.0

        h, s, v = rgb_to_hsv(0, 255, 0)
        assert abs(h - 120) < 1e-9

        h, s, v = rgb_to_hsv(0, 0, 255)
        assert abs(h - 240) < 1e-9

    def test_achromatic_has_zero_hue_and_saturation(self):
        for gray in (0, 1, 128, 254, 255):
            h, s, v = rgb_to_hsv(gray, gray, gray)
            assert h == 0.0
            assert s == 0.0
            assert abs(v - gray / 255) < 1e-9

    def test_red_sector_wraparound(self):
        """Red max with blue > green lands just below 360, not negative."""
        h, _, _ = rgb_to_hsv(255, 0, 51)
        assert 340 < h < 360

    def test_scenario_color(self):
        h, s, v = rgb_to_hsv(200, 80, 80)
        assert h == 0.0
        assert abs(s - 0.6) < 1e-9
        assert abs(v - 200 / 255) < 1e-9

    def test_hue_always_in_range(self):
        for r in range(0, 256, 17):
            for g in range(0, 256, 17):
                for b in range(0, 256, 17):
                    h, s, v = rgb_to_hsv(r, g, b)
                    assert 0 <= h < 360
                    assert 0 <= s <= 1
                    assert 0 <= v <= 1


class TestHsvToRgb:
    """Test HSV -> RGB conversion."""

    def test_sector_corners(self):
        assert hsv_to_rgb(0, 1, 1) == (255, 0, 0)
        assert hsv_to_rgb(60, 1, 1) == (255, 255, 0)
        assert hsv_to_rgb(120, 1, 1) == (0, 255, 0)
        assert hsv_to_rgb(180, 1, 1) == (0, 255, 255)
        assert hsv_to_rgb(240, 1, 1) == (0, 0, 255)
        assert hsv_to_rgb(300, 1, 1) == (255, 0, 255)

    def test_hue_wraps_modulo_360(self):
        assert hsv_to_rgb(360, 1, 1) == hsv_to_rgb(0, 1, 1)
        assert hsv_to_rgb(480, 0.5, 0.5) == hsv_to_rgb(120, 0.5, 0.5)
        assert hsv_to_rgb(-30, 1, 1) == hsv_to_rgb(330, 1, 1)
        assert hsv_to_rgb(-120, 0.7, 0.6) == hsv_to_rgb(240, 0.7, 0.6)

    @pytest.mark.parametrize("h", [0, 45, 90, 180, 270, 359.9, -45, 720])
    def test_saturation_and_value_are_clamped(self, h):
        assert hsv_to_rgb(h, 2.0, -1.0) == hsv_to_rgb(h, 1.0, 0.0)
        assert hsv_to_rgb(h, -0.5, 3.0) == hsv_to_rgb(h, 0.0, 1.0)

    def test_non_finite_input_does_not_propagate(self):
        assert hsv_to_rgb(float("nan"), float("nan"), float("nan")) == (0, 0, 0)
        assert hsv_to_rgb(float("inf"), 1.0, 1.0) == hsv_to_rgb(0, 1.0, 1.0)

    def test_output_channels_in_range(self):
        for h in range(-360, 720, 37):
            for s in (-1, 0, 0.3, 1, 5):
                for v in (-1, 0, 0.5, 1, 5):
                    for channel in hsv_to_rgb(h, s, v):
                        assert isinstance(channel, int)
                        assert 0 <= channel <= 255


class TestRoundTrip:
    """RGB -> HSV -> RGB must reproduce the input within rounding tolerance."""

    def test_hsv_roundtrip_grid(self):
        for r in range(0, 256, 15):
            for g in range(0, 256, 15):
                for b in range(0, 256, 15):
                    back = hsv_to_rgb(*rgb_to_hsv(r, g, b))
                    assert all(abs(x - y) <= 1 for x, y in zip(back, (r, g, b))), (r, g, b, back)

    def test_hsv_roundtrip_extremes(self):
        for rgb in [(0, 0, 0), (255, 255, 255), (255, 0, 0), (1, 0, 0), (254, 255, 255), (18, 52, 86)]:
            back = hsv_to_rgb(*rgb_to_hsv(*rgb))
            assert all(abs(x - y) <= 1 for x, y in zip(back, rgb))


class TestHexFormatting:
    """Test RGB <-> hex conversion."""

    def test_rgb_to_hex_zero_pads(self):
        assert rgb_to_hex(0, 0, 0) == "#000000"
        assert rgb_to_hex(255, 255, 255) == "#FFFFFF"
        assert rgb_to_hex(18, 52, 86) == "#123456"
        assert rgb_to_hex(0, 0, 1) == "#000001"
        assert rgb_to_hex(10, 11, 12) == "#0A0B0C"

    def test_rgb_to_hex_upper_case(self):
        assert rgb_to_hex(171, 205, 239) == "#ABCDEF"

    def test_hex_to_rgb(self):
        assert hex_to_rgb("#123456") == (18, 52, 86)
        assert hex_to_rgb("abcdef") == (171, 205, 239)
        assert hex_to_rgb("#FFFFFF") == (255, 255, 255)

    def test_invalid_hex_format(self):
        with pytest.raises(ValueError):
            hex_to_rgb("#FF00")

        with pytest.raises(ValueError):
            hex_to_rgb("#GGGGGG")

        with pytest.raises(ValueError):
            hex_to_rgb("")

    def test_hex_rejects_signs_and_spaces_inside_pairs(self):
        for bad in ("#+1+2+3", "#-1-2-3", "# 1 2 3", "#0x1234"):
            with pytest.raises(ValueError):
                hex_to_rgb(bad)


class TestRounding:
    def test_round_half_up(self):
        assert round_half_up(0.5) == 1
        assert round_half_up(2.5) == 3
        assert round_half_up(2.4999) == 2
        assert round_half_up(-0.4) == 0

    def test_clamp_channel(self):
        assert clamp_channel(-5) == 0
        assert clamp_channel(300) == 255
        assert clamp_channel(127.5) == 128
        assert clamp_channel(math.nan) == 0


class TestRgbEncoding:
    """Storage encoding of RGB triples."""

    def test_encode_is_plain_int_list(self):
        assert encode_rgb((1, 2, 3)) == [1, 2, 3]

    def test_decode_encode_roundtrip(self):
        for rgb in [(0, 0, 0), (255, 255, 255), (18, 52, 86), (200, 80, 80)]:
            assert decode_rgb(encode_rgb(rgb)) == rgb

    def test_decode_legacy_json_string(self):
        assert decode_rgb("[200,80,80]") == (200, 80, 80)

    @pytest.mark.parametrize("bad", [
        [1, 2],
        [1, 2, 3, 4],
        [1, 2, 256],
        [-1, 0, 0],
        [1.5, 2, 3],
        [True, 0, 0],
        "not json",
        "[1,2]",
        None,
        {"r": 1, "g": 2, "b": 3},
    ])
    def test_decode_rejects_invalid(self, bad):
        with pytest.raises(ValueError):
            decode_rgb(bad)
