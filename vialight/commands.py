import threading

from vialight.api import ViaLightingAPI
from vialight.color import parse_color
from vialight.device import enumerate_interfaces
from vialight.errors import ViaError
from vialight.protocol import VIA_INTERFACE_NUM


class _WaitForKeyboard:
    """Delegate that lets a command block until the keyboard shows up."""

    def __init__(self):
        self.connected = threading.Event()
        self.name = None

    def on_connected(self, device_name):
        self.name = device_name
        self.connected.set()

    def on_disconnected(self):
        self.connected.clear()


def _open(opts):
    """Start discovery and wait for the keyboard.

    Returns:
        (api, name) or (None, None) if nothing connected within opts.wait.
    """
    waiter = _WaitForKeyboard()
    api = ViaLightingAPI(opts.vid, opts.pid, opts.usage, opts.usage_page,
                         delegate=waiter, strict=opts.strict)
    if not waiter.connected.wait(opts.wait):
        api.close()
        return (None, None)
    return (api, waiter.name)


def _color_arg(values):
    """Accept either '#RRGGBB' or three 0-255 ints."""
    if len(values) == 1:
        return parse_color(values[0])
    if len(values) == 3:
        return tuple(int(v) for v in values)
    raise ValueError(f"Expected #RRGGBB or R G B, got {' '.join(values)}")


def cmd_scan(opts):
    print(f"Scanning for 0x{opts.vid:04X}:0x{opts.pid:04X}...")
    print("=" * 60)
    devs = enumerate_interfaces(opts.vid, opts.pid)
    if not devs:
        print("  No keyboard found.")
        return 1
    name = devs[0].get("product_string") or "Unknown"
    print(f"  {name} - {len(devs)} collection(s):")
    for d in devs:
        up = d["usage_page"]
        tag = ""
        if up == opts.usage_page and d["usage"] == opts.usage:
            tag = " ** VIA raw HID **"
        print(f"    iface={d['interface_number']}  page=0x{up:04X}  usage=0x{d['usage']:04X}{tag}")
    print(f"\n  (VIA normally lives on interface {VIA_INTERFACE_NUM})")
    return 0


def _run(opts, desc, apply):
    print(desc)
    api, name = _open(opts)
    if not api:
        print("Keyboard not found.")
        return 1
    print(f"  Connected: {name}")
    with api:
        try:
            if opts.correct:
                api.set_color_correction(opts.correct)
            apply(api)
            if opts.save:
                api.save()
                print("  Saved to EEPROM")
        except ViaError as e:
            print(f"  Error: {e}")
            return 1
    return 0


def cmd_brightness(opts):
    return _run(opts, f"Setting brightness={opts.value}",
                lambda api: api.set_brightness(opts.value))


def cmd_effect(opts):
    return _run(opts, f"Setting effect #{opts.value}",
                lambda api: api.set_effect(opts.value))


def cmd_speed(opts):
    return _run(opts, f"Setting effect speed={opts.value}",
                lambda api: api.set_effect_speed(opts.value))


def cmd_color(opts):
    if opts.hs:
        color = tuple(opts.hs)
        desc = f"Setting hue={color[0]} sat={color[1]}"
    else:
        try:
            color = _color_arg(opts.rgb)
        except ValueError as e:
            print(f"Bad color: {e}")
            return 1
        desc = f"Setting color=({color[0]},{color[1]},{color[2]})"
    return _run(opts, desc, lambda api: api.set_color(color))


def cmd_abs(opts):
    try:
        color = _color_arg(opts.rgb)
    except ValueError as e:
        print(f"Bad color: {e}")
        return 1
    desc = f"Setting absolute color=({color[0]},{color[1]},{color[2]})"
    if opts.correct:
        desc += f"  true-white=({opts.correct[0]},{opts.correct[1]},{opts.correct[2]})"
    return _run(opts, desc, lambda api: api.set_color_absolute(color))


def cmd_save(opts):
    opts.save = False
    return _run(opts, "Saving lighting settings", lambda api: api.save())
