"""
ASCII Viewer - Watch a live camera feed as ASCII art in the terminal

Pick a capture device from a menu and its feed is rendered with a
brightness-ordered character palette, with support for:
- Pausing on a frame and resuming
- Switching back to the device menu
- Mock devices for running without a webcam
"""

__version__ = "1.0.0"

from .app import Action, ViewerApp
from .camera import Camera, DeviceDescriptor, MockCamera, list_devices, mock_devices, open_device
from .converter import CharacterSets, FrameRenderer, map_glyphs, normalize_luminance
from .display import Painter
from .errors import (
    DeviceOpenError,
    FrameCaptureError,
    FrameError,
    ImageDecodeError,
    NoDevicesError,
    ViewerError,
)
from .selectable import SelectableList

__all__ = [
    # Pipeline
    "CharacterSets",
    "FrameRenderer",
    "map_glyphs",
    "normalize_luminance",
    # Devices
    "Camera",
    "MockCamera",
    "DeviceDescriptor",
    "list_devices",
    "mock_devices",
    "open_device",
    # Interface
    "Action",
    "ViewerApp",
    "Painter",
    "SelectableList",
    # Errors
    "ViewerError",
    "NoDevicesError",
    "DeviceOpenError",
    "FrameError",
    "FrameCaptureError",
    "ImageDecodeError",
]
