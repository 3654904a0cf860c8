"""
VIA RGB Matrix protocol — constants and frame builders.
"""

# ── Raw HID ──────────────────────────────────────────────────────────────
VIA_INTERFACE_NUM = 1
FRAME_SIZE = 32

# QMK raw HID interface
DEFAULT_USAGE_PAGE = 0xFF60
DEFAULT_USAGE = 0x61

# ── Commands ─────────────────────────────────────────────────────────────
CMD_SET_VALUE = 7
CMD_SAVE = 9

# ── Channels ─────────────────────────────────────────────────────────────
CHANNEL_RGB_MATRIX = 3

# ── RGB Matrix entries ───────────────────────────────────────────────────
ENTRY_BRIGHTNESS = 1
ENTRY_EFFECT = 2
ENTRY_EFFECT_SPEED = 3
ENTRY_COLOR = 4


# ── Frame builder ────────────────────────────────────────────────────────
def _build(*fields):
    """Build a 32-byte HID output report frame.

    Args:
        fields: Command bytes in wire order (command, channel, entry, ...).
                Each is masked to a single byte.

    Returns:
        bytes: FRAME_SIZE-byte frame, zero padded.
    """
    if len(fields) > FRAME_SIZE:
        raise ValueError(f"Command is {len(fields)} bytes, frame holds {FRAME_SIZE}")
    f = bytearray(FRAME_SIZE)
    for i, b in enumerate(fields):
        f[i] = b & 0xFF
    return bytes(f)


def _set_value(entry, *payload):
    return _build(CMD_SET_VALUE, CHANNEL_RGB_MATRIX, entry, *payload)


def build_brightness(value):
    return _set_value(ENTRY_BRIGHTNESS, value)


def build_effect(effect_id):
    """Effect ids are firmware defined (0 = all off, 1 = solid color, ...)."""
    return _set_value(ENTRY_EFFECT, effect_id)


def build_effect_speed(speed):
    return _set_value(ENTRY_EFFECT_SPEED, speed)


def build_color(hue, sat):
    return _set_value(ENTRY_COLOR, hue, sat)


def build_save():
    """Persist the active RGB matrix settings to EEPROM."""
    return _build(CMD_SAVE, CHANNEL_RGB_MATRIX)
