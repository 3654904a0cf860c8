"""Tests for color.py — RGB→HSV bytes, correction factors, hex parsing."""

import math
import unittest

from vialight.color import HSV, apply_correction, correction_factors, parse_color, rgb_to_hsv


class TestRgbToHsv(unittest.TestCase):

    def test_black(self):
        self.assertEqual(rgb_to_hsv((0, 0, 0)), HSV(0, 0, 0))

    def test_white(self):
        self.assertEqual(rgb_to_hsv((255, 255, 255)), HSV(0, 0, 255))

    def test_red(self):
        self.assertEqual(rgb_to_hsv((255, 0, 0)), HSV(0, 255, 255))

    def test_green(self):
        # 120° -> 120/360 * 255
        self.assertEqual(rgb_to_hsv((0, 255, 0)), HSV(85, 255, 255))

    def test_blue(self):
        # 240° -> 240/360 * 255
        self.assertEqual(rgb_to_hsv((0, 0, 255)), HSV(170, 255, 255))

    def test_orange(self):
        # (128/255) * 60° = 30.12° -> 21.33
        self.assertEqual(rgb_to_hsv((255, 128, 0)), HSV(21, 255, 255))

    def test_negative_hue_wraps(self):
        # (0 - 128/255) * 60° = -30.12° -> 329.88° -> 233.67
        self.assertEqual(rgb_to_hsv((255, 0, 128)), HSV(234, 255, 255))

    def test_dark_red_keeps_value(self):
        self.assertEqual(rgb_to_hsv((128, 0, 0)), HSV(0, 255, 128))

    def test_grayscale_has_no_hue_or_saturation(self):
        for k in range(256):
            self.assertEqual(rgb_to_hsv((k, k, k)), HSV(0, 0, k), k)

    def test_ties_round_half_up(self):
        # s = 1/6 * 255 = 42.5
        self.assertEqual(rgb_to_hsv((6, 5, 5)), HSV(0, 43, 6))
        # s = 5/6 * 255 = 212.5
        self.assertEqual(rgb_to_hsv((6, 1, 1)), HSV(0, 213, 6))
        # s = 7/10 * 255 = 178.5
        self.assertEqual(rgb_to_hsv((10, 3, 3)), HSV(0, 179, 10))
        # s = 127.5
        self.assertEqual(rgb_to_hsv((2, 1, 1)), HSV(0, 128, 2))

    def test_accepts_lists(self):
        self.assertEqual(rgb_to_hsv([255, 0, 0]), HSV(0, 255, 255))


class TestCorrection(unittest.TestCase):

    def test_ideal_white_is_identity(self):
        factors = correction_factors((255, 255, 255))
        self.assertEqual(factors, (1.0, 1.0, 1.0))
        self.assertEqual(apply_correction((12, 34, 56), factors), (12, 34, 56))

    def test_factors(self):
        factors = correction_factors((255, 128, 51))
        self.assertAlmostEqual(factors[1], 255 / 128)
        self.assertAlmostEqual(factors[2], 5.0)

    def test_apply_truncates(self):
        factors = correction_factors((255, 255, 128))
        self.assertEqual(apply_correction((255, 0, 255), factors), (255, 0, 128))
        # 100 / (255/128) = 50.19
        self.assertEqual(apply_correction((0, 0, 100), factors)[2], 50)

    def test_zero_channel_turns_channel_off(self):
        factors = correction_factors((255, 0, 255))
        self.assertTrue(math.isinf(factors[1]))
        self.assertEqual(apply_correction((200, 200, 200), factors), (200, 0, 200))

    def test_result_clamped_to_byte(self):
        self.assertEqual(apply_correction((255, 0, 0), (0.5, 1.0, 1.0)), (255, 0, 0))


class TestParseColor(unittest.TestCase):

    def test_with_hash(self):
        self.assertEqual(parse_color("#FF8000"), (255, 128, 0))

    def test_without_hash(self):
        self.assertEqual(parse_color("00ff00"), (0, 255, 0))

    def test_bad_length(self):
        with self.assertRaises(ValueError):
            parse_color("#fff")

    def test_bad_digits(self):
        with self.assertRaises(ValueError):
            parse_color("#gg0000")
