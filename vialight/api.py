"""
VIA RGB Matrix lighting API — semantic setters over a discovered keyboard.

Commands are fire-and-forget: frames are built, then written only while a
keyboard is connected. With ``strict=False`` (the default) malformed input and
sends while disconnected are dropped silently; ``strict=True`` raises the
errors from ``vialight.errors`` instead.
"""

import logging
import threading
import weakref
from typing import Optional, Protocol

from vialight import protocol
from vialight.color import apply_correction, correction_factors, rgb_to_hsv
from vialight.device import (CONNECTED, REMOVED, DEFAULT_POLL_INTERVAL,
                             DeviceMatch, HidApiTransport)
from vialight.errors import InvalidColorFormat, InvalidCorrectionReference, NotConnected

log = logging.getLogger(__name__)


class ConnectionDelegate(Protocol):
    def on_connected(self, device_name: str) -> None: ...

    def on_disconnected(self) -> None: ...


def _route_events(api_ref):
    """Event callback holding only a weak reference to the API.

    Returns False once the API is gone, which stops discovery.
    """
    def on_event(event):
        api = api_ref()
        if api is None:
            return False
        if event.kind == CONNECTED:
            api._connected(event.handle)
        elif event.kind == REMOVED:
            api._disconnected(event.handle)
        return True
    return on_event


class ViaLightingAPI:
    """Controls RGB Matrix lighting on one VIA keyboard.

    Discovery starts in the constructor and runs in the background; connect
    and removal are reported through ``delegate``.
    """

    def __init__(self, vendor_id, product_id, usage=protocol.DEFAULT_USAGE,
                 usage_page=protocol.DEFAULT_USAGE_PAGE, delegate: Optional[ConnectionDelegate] = None,
                 transport=None, strict=False, poll_interval=DEFAULT_POLL_INTERVAL):
        self.match = DeviceMatch(vendor_id, product_id, usage, usage_page)
        self.delegate = delegate
        self.strict = strict

        self._lock = threading.Lock()
        self._device = None
        self._device_name = None
        self._color_correction = None
        self._closed = False

        self._transport = transport or HidApiTransport(poll_interval=poll_interval)
        self._transport.start(self.match, _route_events(weakref.ref(self)))
        self._finalizer = weakref.finalize(self, self._transport.stop)

    # ── Connection state ─────────────────────────────────────────────

    @property
    def is_connected(self):
        with self._lock:
            return self._device is not None

    @property
    def device_name(self):
        """Product name of the connected keyboard, or None."""
        with self._lock:
            return self._device_name

    def _connected(self, handle):
        name = self._transport.product_name(handle)
        with self._lock:
            if self._closed:
                log.debug("Closed, ignoring connect of %s", name)
                return
            self._device = handle
            self._device_name = name
        log.info("Keyboard connected: %s", name)
        if self.delegate is not None:
            self.delegate.on_connected(name)

    def _disconnected(self, handle):
        with self._lock:
            if self._device is not handle:
                return
            self._device = None
            self._device_name = None
        log.info("Keyboard disconnected")
        if self.delegate is not None:
            self.delegate.on_disconnected()

    def close(self):
        """Stop discovery and release the keyboard."""
        with self._lock:
            self._closed = True
            self._device = None
            self._device_name = None
        self._finalizer()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    # ── Send path ────────────────────────────────────────────────────

    def _send(self, *frames):
        """Write frames back to back; a removal cannot split them."""
        with self._lock:
            if self._device is None:
                for frame in frames:
                    log.debug("Not connected, dropped: %s", frame.hex())
                if self.strict:
                    raise NotConnected("No keyboard connected")
                return
            for frame in frames:
                log.debug("TX: %s", frame.hex())
                self._transport.send_report(self._device, frame[0], frame)

    def _reject(self, what, components):
        log.debug("Ignoring %s with %d component(s)", what, len(components))
        if self.strict:
            raise InvalidColorFormat(
                f"{what} needs {'2 or 3' if what == 'color' else '3'} components, "
                f"got {len(components)}")

    # ── Lighting commands ────────────────────────────────────────────

    def set_brightness(self, brightness):
        """Set RGB Matrix brightness (0-255)."""
        self._send(protocol.build_brightness(brightness))

    def set_effect(self, effect):
        """Set the lighting effect (e.g. 0 for all off, 1 for solid color)."""
        self._send(protocol.build_effect(effect))

    def set_effect_speed(self, speed):
        """Set the effect speed (0-255)."""
        self._send(protocol.build_effect_speed(speed))

    def set_color(self, color):
        """Set hue and saturation from ``[R, G, B]`` or ``[H, S]``.

        RGB brightness is discarded; use ``set_brightness`` or
        ``set_color_absolute`` for lightness. ``[H, S]`` is sent unchanged.
        """
        if len(color) == 3:
            hsv = rgb_to_hsv(color)
            hue, sat = hsv.h, hsv.s
        elif len(color) == 2:
            hue, sat = color[0], color[1]
        else:
            self._reject("color", color)
            return
        self._send(protocol.build_color(hue, sat))

    def set_color_absolute(self, color):
        """Set hue, saturation and brightness from ``[R, G, B]``.

        Applies color correction when enabled, then sends the color frame
        followed by the brightness frame.
        """
        if len(color) != 3:
            self._reject("absolute color", color)
            return
        with self._lock:
            factors = self._color_correction
        if factors is not None:
            color = apply_correction(color, factors)
        hsv = rgb_to_hsv(color)
        self._send(protocol.build_color(hsv.h, hsv.s), protocol.build_brightness(hsv.v))

    def save(self):
        """Save the current lighting settings to EEPROM."""
        self._send(protocol.build_save())

    # ── Color correction ─────────────────────────────────────────────

    @property
    def color_correction(self):
        """Per-channel correction factors, or None when disabled."""
        with self._lock:
            return self._color_correction

    def set_color_correction(self, true_white):
        """Enable color correction.

        Args:
            true_white: ``[R, G, B]`` the keyboard shows when set to white.
        """
        if len(true_white) != 3:
            self._reject("color correction reference", true_white)
            return
        if 0 in true_white:
            if self.strict:
                raise InvalidCorrectionReference(
                    f"True white {tuple(true_white)} has a zero channel")
            log.warning("True white %s has a zero channel; that channel will be off",
                        tuple(true_white))
        factors = correction_factors(true_white)
        with self._lock:
            self._color_correction = factors

    def disable_color_correction(self):
        with self._lock:
            self._color_correction = None
