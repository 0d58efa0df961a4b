"""Shared test fixtures for the ascii_viewer test suite.

Provides fake capture handles and a fake blessed terminal so the state
machine, loop and painter can be exercised without hardware or a tty.
"""

from __future__ import annotations

from contextlib import contextmanager

import numpy as np
import pytest
from blessed.keyboard import Keystroke

from ascii_viewer.camera import DeviceDescriptor
from ascii_viewer.errors import DeviceOpenError, FrameCaptureError


# ---------------------------------------------------------------------------
# Frame Fixtures
# ---------------------------------------------------------------------------


def gradient_frame(shift: int = 0) -> np.ndarray:
    """A 4x16 BGR frame with a horizontal gradient rolled by `shift` columns."""
    row = np.arange(0, 256, 16, dtype=np.uint8)
    gray = np.roll(np.tile(row, (4, 1)), shift, axis=1)
    return np.stack([gray, gray, gray], axis=2)


@pytest.fixture
def sample_frame() -> np.ndarray:
    return gradient_frame()


@pytest.fixture
def frame_factory():
    return gradient_frame


# ---------------------------------------------------------------------------
# Device Fixtures
# ---------------------------------------------------------------------------


class FakeCamera:
    """Capture handle returning a new gradient shift on every read."""

    def __init__(self, fail_after: int | None = None) -> None:
        self.reads = 0
        self.closed = False
        self.fail_after = fail_after

    def next_frame(self) -> np.ndarray:
        if self.closed:
            raise FrameCaptureError("closed")
        if self.fail_after is not None and self.reads >= self.fail_after:
            raise FrameCaptureError("device unplugged")
        self.reads += 1
        return gradient_frame(shift=self.reads)

    def close(self) -> None:
        self.closed = True


class FakeOpener:
    """Device opener that fails for handles listed in `broken`."""

    def __init__(self, broken: set | None = None, fail_after: int | None = None) -> None:
        self.broken = broken or set()
        self.fail_after = fail_after
        self.opened: list[FakeCamera] = []

    def __call__(self, device: DeviceDescriptor) -> FakeCamera:
        if device.handle in self.broken:
            raise DeviceOpenError(device)
        camera = FakeCamera(fail_after=self.fail_after)
        self.opened.append(camera)
        return camera


@pytest.fixture
def devices() -> list[DeviceDescriptor]:
    return [
        DeviceDescriptor("Front camera", 0),
        DeviceDescriptor("Back camera", 1),
        DeviceDescriptor("Capture card", 2),
    ]


@pytest.fixture
def opener() -> FakeOpener:
    return FakeOpener(broken={1})


@pytest.fixture
def opener_factory():
    return FakeOpener


# ---------------------------------------------------------------------------
# Terminal Fixtures
# ---------------------------------------------------------------------------


class FakeTerminal:
    """Minimal stand-in for blessed.Terminal.

    `keys` is consumed by inkey(); once empty, 'q' is returned so loops end.
    """

    clear = "<clear>"

    def __init__(self, width: int = 40, height: int = 12) -> None:
        self.width = width
        self.height = height
        self.keys: list[Keystroke] = []
        self.timeouts: list[float] = []
        self.events: list[str] = []

    def inkey(self, timeout: float | None = None) -> Keystroke:
        self.timeouts.append(timeout)
        if self.keys:
            return self.keys.pop(0)
        return Keystroke("q")

    def move_xy(self, x: int, y: int) -> str:
        return f"<{x},{y}>"

    def reverse(self, text: str) -> str:
        return f"[{text}]"

    def _mode(self, name: str):
        @contextmanager
        def manager():
            self.events.append(f"enter {name}")
            try:
                yield
            finally:
                self.events.append(f"exit {name}")
        return manager()

    def fullscreen(self):
        return self._mode("fullscreen")

    def cbreak(self):
        return self._mode("cbreak")

    def hidden_cursor(self):
        return self._mode("hidden_cursor")


@pytest.fixture
def fake_term() -> FakeTerminal:
    return FakeTerminal()


def key(name: str) -> Keystroke:
    """Build a special-key keystroke, e.g. key('KEY_DOWN')."""
    return Keystroke("\x1b", code=1, name=name)


@pytest.fixture
def keys():
    return {
        "up": key("KEY_UP"),
        "down": key("KEY_DOWN"),
        "enter": key("KEY_ENTER"),
        "esc": key("KEY_ESCAPE"),
        "space": Keystroke(" "),
        "q": Keystroke("q"),
        "x": Keystroke("x"),
        "none": Keystroke(""),
    }
