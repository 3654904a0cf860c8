"""
VIA RGB Matrix lighting control over USB HID.
"""

from vialight.api import ConnectionDelegate, ViaLightingAPI
from vialight.color import HSV, rgb_to_hsv
from vialight.errors import InvalidColorFormat, InvalidCorrectionReference, NotConnected, ViaError

__all__ = [
    "ConnectionDelegate", "ViaLightingAPI", "HSV", "rgb_to_hsv",
    "ViaError", "InvalidColorFormat", "NotConnected", "InvalidCorrectionReference",
]
