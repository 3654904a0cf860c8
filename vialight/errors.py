"""
Errors raised by ViaLightingAPI in strict mode.

The default (lenient) API never raises these; it logs and drops the command.
"""


class ViaError(Exception):
    """Base class for VIA lighting errors."""


class InvalidColorFormat(ViaError, ValueError):
    """Color components have the wrong number of elements."""


class NotConnected(ViaError):
    """A command was issued while no keyboard is connected."""


class InvalidCorrectionReference(ViaError, ValueError):
    """The true-white reference has a zero channel."""
