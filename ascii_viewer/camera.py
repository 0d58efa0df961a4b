"""
Capture device discovery and frame acquisition.

Provides device enumeration, a capture handle wrapping OpenCV's
VideoCapture, and mock devices for running without a webcam.
"""

import glob
import logging
import os
import platform
import re
from dataclasses import dataclass
from typing import Callable, Hashable, List, Optional, Tuple, Union
# Read by OpenCV when its backends load
os.environ.setdefault("OPENCV_LOG_LEVEL", "SILENT")
os.environ.setdefault("OPENCV_FFMPEG_LOGLEVEL", "-8")
import cv2
import numpy as np

from .errors import DeviceOpenError, FrameCaptureError, NoDevicesError

logger = logging.getLogger(__name__)

# Drivers clamp the requested rate to the fastest mode they support
HIGHEST_FPS_REQUEST = 1000

SYSFS_VIDEO4LINUX = "/sys/class/video4linux"


@dataclass(frozen=True)
class DeviceDescriptor:
    """An enumerated capture source."""

    display_name: str
    handle: Hashable


class Camera:
    """
    Capture handle for a single device.

    Frames are read synchronously; a slow device blocks the caller.
    """

    def __init__(self, source: Union[int, str] = 0):
        """
        Initialize the camera.

        Args:
            source: Camera index or device path
        """
        self.source = source
        self._cap: Optional[cv2.VideoCapture] = None
        self._is_open = False

    def open(self):
        """
        Open the device, asking for its highest frame rate.

        Raises:
            DeviceOpenError: If the device cannot be opened
        """
        self._cap = cv2.VideoCapture(self.source)

        if not self._cap.isOpened():
            self._cap.release()
            self._cap = None
            raise DeviceOpenError(self.source)

        self._cap.set(cv2.CAP_PROP_FPS, HIGHEST_FPS_REQUEST)
        self._is_open = True
        width, height = self.resolution
        logger.info(
            "Opened device %s (%dx%d @ %.1f fps)",
            self.source, width, height, self.fps,
        )

    def close(self):
        """Release the camera resources."""
        if self._cap is not None:
            self._cap.release()
            self._cap = None
            logger.info("Released device %s", self.source)
        self._is_open = False

    @property
    def is_open(self) -> bool:
        """True while the handle holds a live VideoCapture."""
        return self._is_open and self._cap is not None and self._cap.isOpened()

    @property
    def resolution(self) -> Tuple[int, int]:
        """Frame size the driver settled on, (0, 0) when closed."""
        if self._cap is None:
            return (0, 0)
        width = self._cap.get(cv2.CAP_PROP_FRAME_WIDTH)
        height = self._cap.get(cv2.CAP_PROP_FRAME_HEIGHT)
        return (int(width), int(height))

    @property
    def fps(self) -> float:
        """Frame rate the driver granted for the open mode."""
        return self._cap.get(cv2.CAP_PROP_FPS) if self._cap is not None else 0.0

    def read(self) -> Optional[np.ndarray]:
        """Grab one BGR frame, or None when nothing could be read."""
        if self._cap is None:
            return None
        ok, frame = self._cap.read()
        return frame if ok else None

    def next_frame(self) -> np.ndarray:
        """
        Read the next frame.

        Raises:
            FrameCaptureError: If the device is closed or the read fails
        """
        if not self._is_open:
            raise FrameCaptureError(f"Device {self.source} is not open")

        frame = self.read()
        if frame is None:
            raise FrameCaptureError(f"Failed to read frame from device {self.source}")
        return frame

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


class MockCamera(Camera):
    """
    Synthetic capture handle behind the --mock devices.

    Each read produces the next frame of an animated pattern, so the viewer
    can be exercised end to end without hardware.
    """

    PATTERNS = ("gradient", "noise", "checkerboard")

    def __init__(
        self,
        width: int = 640,
        height: int = 480,
        pattern: str = "gradient"
    ):
        """
        Initialize mock camera.

        Args:
            width: Frame width in pixels
            height: Frame height in pixels
            pattern: One of PATTERNS
        """
        super().__init__(f"mock:{pattern}")
        self._frame_width = width
        self._frame_height = height
        self._frame_count = 0
        self._pattern = pattern

    def open(self):
        self._is_open = True
        logger.info("Opened mock device %s", self.source)

    def close(self):
        self._is_open = False

    @property
    def is_open(self) -> bool:
        return self._is_open

    @property
    def resolution(self) -> Tuple[int, int]:
        return (self._frame_width, self._frame_height)

    @property
    def fps(self) -> float:
        return 30.0

    def read(self) -> Optional[np.ndarray]:
        if not self._is_open:
            return None

        self._frame_count += 1
        draw = {
            "noise": self._noise,
            "checkerboard": self._checkerboard,
        }.get(self._pattern, self._gradient)
        return draw()

    def _gradient(self) -> np.ndarray:
        """Left-to-right ramp that scrolls two levels per frame."""
        offset = (self._frame_count * 2) % 256
        columns = (np.arange(self._frame_width) * 256 // self._frame_width + offset) % 256

        frame = np.empty((self._frame_height, self._frame_width, 3), dtype=np.uint8)
        frame[:, :, 0] = columns
        frame[:, :, 1] = (columns + 85) % 256
        frame[:, :, 2] = (columns + 170) % 256
        return frame

    def _noise(self) -> np.ndarray:
        shape = (self._frame_height, self._frame_width, 3)
        return np.random.randint(0, 256, shape, dtype=np.uint8)

    def _checkerboard(self) -> np.ndarray:
        """32px squares whose colors swap every ten frames."""
        cell = 32
        rows = np.arange(self._frame_height)[:, None] // cell
        cols = np.arange(self._frame_width)[None, :] // cell
        phase = (self._frame_count // 10) % 2
        white = (rows + cols + phase) % 2 == 1

        frame = np.zeros((self._frame_height, self._frame_width, 3), dtype=np.uint8)
        frame[white] = 255
        return frame


def _video_node_order(path: str) -> Tuple[int, str]:
    """Sort key putting /dev/video2 before /dev/video10."""
    digits = re.search(r"(\d+)$", path)
    return (int(digits.group(1)) if digits else -1, path)


def quiet_opencv():
    """Stop OpenCV and its backends writing to the terminal the viewer paints."""
    cv2.utils.logging.setLogLevel(cv2.utils.logging.LOG_LEVEL_SILENT)


def _device_name(path: str) -> str:
    """Read the V4L2 name of a /dev/video* node, falling back to the path."""
    name_path = os.path.join(SYSFS_VIDEO4LINUX, os.path.basename(path), "name")
    try:
        with open(name_path, encoding="utf-8") as f:
            name = f.read().strip()
    except OSError:
        return path
    return f"{name} ({path})" if name else path


def _scan_indices(max_index: int) -> List[DeviceDescriptor]:
    """Find devices by trying to open each index in turn."""
    devices = []
    for index in range(max_index):
        cap = cv2.VideoCapture(index)
        try:
            if cap.isOpened():
                devices.append(DeviceDescriptor(f"Camera {index}", index))
        finally:
            cap.release()
    return devices


def list_devices(max_index: int = 6) -> List[DeviceDescriptor]:
    """
    Enumerate the capture devices on this machine.

    On Linux the /dev/video* nodes are listed; elsewhere indices
    0..max_index-1 are tried through OpenCV.

    Args:
        max_index: Number of indices to try when no device nodes exist

    Returns:
        Devices in a stable order

    Raises:
        NoDevicesError: If nothing was found
    """
    devices: List[DeviceDescriptor] = []

    if platform.system() == "Linux":
        for path in sorted(glob.glob("/dev/video*"), key=_video_node_order):
            devices.append(DeviceDescriptor(_device_name(path), path))

    if not devices:
        devices = _scan_indices(max_index)

    if not devices:
        raise NoDevicesError("No capture devices found")

    logger.info("Found %d capture device(s)", len(devices))
    return devices


def open_device(device: DeviceDescriptor) -> Camera:
    """
    Open a capture handle for an enumerated device.

    Raises:
        DeviceOpenError: If the device cannot be opened
    """
    if isinstance(device.handle, str) and device.handle.startswith("mock:"):
        pattern = device.handle.split(":", 1)[1]
        if pattern not in MockCamera.PATTERNS:
            raise DeviceOpenError(device, f"Mock device '{pattern}' is unavailable")
        camera: Camera = MockCamera(pattern=pattern)
    else:
        camera = Camera(source=device.handle)

    try:
        camera.open()
    except DeviceOpenError as e:
        raise DeviceOpenError(device, str(e)) from e
    return camera


def mock_devices() -> List[DeviceDescriptor]:
    """Synthetic devices, including one that always fails to open."""
    devices = [
        DeviceDescriptor(f"Mock {pattern}", f"mock:{pattern}")
        for pattern in MockCamera.PATTERNS
    ]
    devices.append(DeviceDescriptor("Mock broken", "mock:broken"))
    return devices


DeviceOpener = Callable[[DeviceDescriptor], Camera]
