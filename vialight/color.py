"""
VIA RGB Matrix — color model: RGB→HSV bytes, white-point correction, parsing.
"""

import math
from typing import NamedTuple


def _round(x):
    """Round half up; inputs are never negative."""
    return int(math.floor(x + 0.5))


class HSV(NamedTuple):
    """Hue, saturation, value, each scaled to a single byte (0-255)."""
    h: int
    s: int
    v: int


# ── RGB → HSV ────────────────────────────────────────────────────────────
def rgb_to_hsv(rgb):
    """Convert an (r, g, b) byte triple to HSV bytes.

    Gray detection compares delta against exactly 0, and the hue sector is
    chosen by exact equality with the max channel.

    >>> rgb_to_hsv((255, 0, 0))
    HSV(h=0, s=255, v=255)
    """
    r = rgb[0] / 255.0
    g = rgb[1] / 255.0
    b = rgb[2] / 255.0

    max_val = max(r, g, b)
    min_val = min(r, g, b)
    delta = max_val - min_val

    h = 0.0
    s = 0.0
    v = max_val * 255.0

    if delta != 0:
        s = delta / max_val
        if r == max_val:
            h = (g - b) / delta
        elif g == max_val:
            h = 2 + (b - r) / delta
        else:
            h = 4 + (r - g) / delta
        h *= 60
        if h < 0:
            h += 360

    return HSV(_round((h / 360.0) * 255.0), _round(s * 255.0), _round(v))


# ── White-point correction ───────────────────────────────────────────────
def correction_factors(true_white):
    """Per-channel scale factors from the RGB the keyboard shows as white.

    A zero channel has no finite factor and yields ``inf``, which turns that
    channel off once applied.
    """
    return tuple(255.0 / c if c else math.inf for c in true_white[:3])


def apply_correction(rgb, factors):
    """Divide each channel by its factor, truncating to an int in 0-255."""
    return tuple(min(255, int(c / f)) for c, f in zip(rgb, factors))


# ── Color parsing ────────────────────────────────────────────────────────
def parse_color(color_str):
    """Parse '#RRGGBB' or 'RRGGBB' hex string into (r, g, b) tuple."""
    s = color_str.lstrip("#")
    if len(s) != 6:
        raise ValueError(f"Expected 6 hex chars, got '{color_str}'")
    return (int(s[0:2], 16), int(s[2:4], 16), int(s[4:6], 16))
