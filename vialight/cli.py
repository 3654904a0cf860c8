"""
VIA RGB Matrix — CLI entry point (argparse).
"""

import argparse
import logging

from vialight.protocol import DEFAULT_USAGE, DEFAULT_USAGE_PAGE


def _hex_int(x):
    return int(x, 0)


def _common(p):
    p.add_argument("--save", action="store_true",
                   help="Persist to EEPROM after applying")


def build_parser():
    parser = argparse.ArgumentParser(
        prog="via_rgb",
        description="VIA keyboard RGB Matrix controller — USB HID lighting control",
    )
    parser.add_argument("--vid", type=_hex_int, required=True,
                        help="Keyboard vendor ID (e.g. 0x3434)")
    parser.add_argument("--pid", type=_hex_int, required=True,
                        help="Keyboard product ID (e.g. 0x0361)")
    parser.add_argument("--usage", type=_hex_int, default=DEFAULT_USAGE,
                        help=f"HID usage of the raw HID interface (default 0x{DEFAULT_USAGE:02X})")
    parser.add_argument("--usage-page", type=_hex_int, default=DEFAULT_USAGE_PAGE,
                        help=f"HID usage page (default 0x{DEFAULT_USAGE_PAGE:04X})")
    parser.add_argument("--wait", type=float, default=2.0,
                        help="Seconds to wait for the keyboard (default 2)")
    parser.add_argument("--correct", nargs=3, type=int, metavar=("R", "G", "B"),
                        help="RGB the keyboard shows as white, for color correction")
    parser.add_argument("--strict", action="store_true",
                        help="Fail on malformed input instead of ignoring it")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Log every HID frame")
    sub = parser.add_subparsers(dest="command")

    # scan
    sub.add_parser("scan", help="List HID interfaces of the keyboard")

    # brightness / effect / speed
    for name, hlp in [("brightness", "Set RGB Matrix brightness (0-255)"),
                      ("effect", "Set lighting effect id"),
                      ("speed", "Set effect speed (0-255)")]:
        p = sub.add_parser(name, help=hlp)
        p.add_argument("value", type=int)
        _common(p)

    # color
    p_col = sub.add_parser("color", help="Set hue/saturation (brightness unchanged)")
    p_col.add_argument("rgb", nargs="*", help="#RRGGBB or R G B")
    p_col.add_argument("--hs", nargs=2, type=int, metavar=("H", "S"),
                       help="Raw hue and saturation (0-255 each)")
    _common(p_col)

    # abs
    p_abs = sub.add_parser("abs", help="Set absolute color, including brightness")
    p_abs.add_argument("rgb", nargs="+", help="#RRGGBB or R G B")
    _common(p_abs)

    # save
    sub.add_parser("save", help="Persist current lighting to EEPROM")

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    from vialight.commands import (cmd_scan, cmd_brightness, cmd_effect, cmd_speed,
                                   cmd_color, cmd_abs, cmd_save)

    if args.command == "scan":
        return cmd_scan(args)
    elif args.command == "brightness":
        return cmd_brightness(args)
    elif args.command == "effect":
        return cmd_effect(args)
    elif args.command == "speed":
        return cmd_speed(args)
    elif args.command == "color":
        if not args.hs and not args.rgb:
            print("Provide #RRGGBB, R G B or --hs H S.")
            return 1
        if args.hs and args.rgb:
            print("Give either a color or --hs H S, not both.")
            return 1
        return cmd_color(args)
    elif args.command == "abs":
        return cmd_abs(args)
    elif args.command == "save":
        return cmd_save(args)

    return 0
