#!/usr/bin/env python3
# /// script
# dependencies = ["hidapi>=0.14"]
# ///
"""
VIA Keyboard RGB Matrix Controller - Python CLI

Control QMK/VIA keyboard lighting over the raw HID interface.

Usage:
    uv run via_rgb.py --vid 0x3434 --pid 0x0361 <command>

Commands:
    scan                     Show HID interfaces of the keyboard
    brightness <0-255>       Set RGB Matrix brightness
    effect <id>              Set lighting effect
    speed <0-255>            Set effect speed
    color <#RRGGBB|R G B>    Set hue/saturation (or --hs H S)
    abs <#RRGGBB|R G B>      Set hue/saturation and brightness
    save                     Persist lighting to EEPROM
"""

import sys
from vialight.cli import main

if __name__ == "__main__":
    sys.exit(main())
