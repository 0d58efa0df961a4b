"""
Exception types raised by the viewer.

Device open failures are recoverable and shown in the menu; everything else
ends the session.
"""


class ViewerError(Exception):
    """Base class for all viewer errors."""


class NoDevicesError(ViewerError):
    """Raised when no capture devices could be found at startup."""


class DeviceOpenError(ViewerError):
    """Raised when a capture device cannot be opened."""

    def __init__(self, device, message: str = ""):
        self.device = device
        super().__init__(message or f"Could not open device: {device}")


class FrameError(ViewerError):
    """Base class for per-frame failures while viewing."""


class FrameCaptureError(FrameError):
    """Raised when a frame cannot be read from an open device."""


class ImageDecodeError(FrameError):
    """Raised when a captured frame cannot be decoded into pixel data."""
