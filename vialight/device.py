"""
VIA keyboard — HID discovery, connect/removal events, report transmission.
"""

import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, NamedTuple, Optional

log = logging.getLogger(__name__)

CONNECTED = "connected"
REMOVED = "removed"

DEFAULT_POLL_INTERVAL = 1.0
UNKNOWN_PRODUCT = "Unknown"


@dataclass(frozen=True)
class DeviceMatch:
    """Identity of the HID interface to open."""
    vendor_id: int
    product_id: int
    usage: int
    usage_page: int

    def matches(self, info):
        return (info.get("vendor_id") == self.vendor_id
                and info.get("product_id") == self.product_id
                and info.get("usage") == self.usage
                and info.get("usage_page") == self.usage_page)


class DeviceEvent(NamedTuple):
    kind: str  # CONNECTED or REMOVED
    handle: Any


@dataclass
class HidHandle:
    """An opened hidapi device plus the enumeration entry it came from."""
    path: bytes
    info: dict = field(default_factory=dict)
    dev: Any = None


# =========================================================================
# Transport interface
# =========================================================================

class HidTransport(ABC):
    """Device discovery and output reports for one matched HID interface.

    ``start`` delivers ``DeviceEvent``s to ``on_event`` from the transport's
    own thread. At most one handle is open at a time.
    """

    @abstractmethod
    def start(self, match: DeviceMatch, on_event: Callable[[DeviceEvent], None]) -> None:
        ...

    @abstractmethod
    def stop(self) -> None:
        ...

    @abstractmethod
    def product_name(self, handle: Any) -> str:
        ...

    @abstractmethod
    def send_report(self, handle: Any, report_id: int, data: bytes) -> None:
        ...

    @abstractmethod
    def close_handle(self, handle: Any) -> None:
        ...


# =========================================================================
# Enumeration
# =========================================================================

def enumerate_interfaces(vendor_id, product_id):
    """List every HID collection exposed by a keyboard.

    Returns:
        list of hidapi enumeration dicts (empty if nothing is plugged in).
    """
    import hid

    return list(hid.enumerate(vendor_id, product_id))


def _find_matches(match):
    return [d for d in enumerate_interfaces(match.vendor_id, match.product_id)
            if match.matches(d)]


# =========================================================================
# Real transport: hidapi
# =========================================================================

class HidApiTransport(HidTransport):
    """Transport on the hidapi binding.

    hidapi has no hotplug callbacks, so a daemon thread polls
    ``hid.enumerate`` and diffs device paths between scans.
    """

    def __init__(self, poll_interval=DEFAULT_POLL_INTERVAL):
        self._poll_interval = poll_interval
        self._match: Optional[DeviceMatch] = None
        self._on_event: Optional[Callable[[DeviceEvent], None]] = None
        self._current: Optional[HidHandle] = None
        self._failed = set()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def start(self, match, on_event):
        self._match = match
        self._on_event = on_event
        self._stop.clear()
        self._thread = threading.Thread(target=self._watch, name="via-hid-discovery",
                                        daemon=True)
        self._thread.start()

    def stop(self):
        """Stop discovery and release the open device, if any."""
        self._stop.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout=self._poll_interval + 1.0)
        self._thread = None
        if self._current is not None:
            self.close_handle(self._current)
            self._current = None

    def _watch(self):
        log.debug("Discovery started for %04X:%04X (page=0x%04X usage=0x%02X)",
                  self._match.vendor_id, self._match.product_id,
                  self._match.usage_page, self._match.usage)
        while not self._stop.is_set():
            try:
                if not self.poll_once():
                    break
            except Exception:
                log.exception("HID discovery scan failed")
            self._stop.wait(self._poll_interval)
        log.debug("Discovery stopped")

    def poll_once(self):
        """Scan once and emit connect/removal events.

        Returns:
            False once the event receiver is gone, True otherwise.
        """
        found = {d["path"]: d for d in _find_matches(self._match)}
        self._failed &= set(found)

        if self._current is not None and self._current.path not in found:
            handle = self._current
            self._current = None
            # Receiver drops its reference before the handle is closed
            alive = self._emit(DeviceEvent(REMOVED, handle))
            self.close_handle(handle)
            if not alive:
                return False

        if self._current is None:
            for path, info in found.items():
                if path in self._failed:
                    continue
                handle = self._open(path, info)
                if handle is None:
                    self._failed.add(path)
                    continue
                self._current = handle
                if not self._emit(DeviceEvent(CONNECTED, handle)):
                    return False
                break
        return True

    def _emit(self, event):
        return self._on_event(event) is not False

    def _open(self, path, info):
        import hid

        dev = hid.device()
        try:
            dev.open_path(path)
        except OSError as e:
            log.warning("Cannot open HID device %r: %s", path, e)
            return None
        return HidHandle(path=path, info=info, dev=dev)

    def product_name(self, handle):
        name = handle.info.get("product_string")
        if not name and handle.dev is not None:
            try:
                name = handle.dev.get_product_string()
            except (OSError, ValueError):
                name = None
        return name or UNKNOWN_PRODUCT

    def send_report(self, handle, report_id, data):
        """Write one output report.

        hidapi takes the report id as the first byte of the buffer, which for
        VIA frames is the command id itself.
        """
        if data[0] != report_id:
            raise ValueError(f"Report id 0x{report_id:02X} does not lead frame")
        if handle.dev is None:
            log.debug("Handle closed, dropped: %s", bytes(data).hex())
            return
        try:
            n = handle.dev.write(bytes(data))
        except (OSError, ValueError) as e:
            log.warning("HID write failed: %s", e)
            return
        if n < 0:
            log.warning("HID write failed (returned %d)", n)

    def close_handle(self, handle):
        if handle.dev is None:
            return
        try:
            handle.dev.close()
        except (OSError, ValueError) as e:
            log.debug("Ignoring close error: %s", e)
        handle.dev = None
