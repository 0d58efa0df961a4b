"""
Application state machine.

The viewer is always in exactly one mode:

- MenuMode: choosing a device, no capture handle held
- LiveMode: a device is open and fresh frames are pulled every tick
- PausedMode: a device is open and one frozen frame is redrawn every tick

Capture handles and frozen frames live inside the mode objects, so leaving a
mode drops them with it.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Union
import numpy as np

from .camera import Camera, DeviceDescriptor, DeviceOpener, open_device
from .converter import FrameRenderer
from .errors import DeviceOpenError, FrameError
from .selectable import SelectableList

logger = logging.getLogger(__name__)

OPEN_ERROR_SUFFIX = " - failed to open"
FRAME_ERROR_SUFFIX = " - stopped on a bad frame"


class Action(Enum):
    """Input events understood by the state machine."""

    QUIT = "quit"
    UP = "up"
    DOWN = "down"
    CONFIRM = "confirm"
    TOGGLE_PAUSE = "toggle_pause"
    BACK = "back"


@dataclass
class MenuEntry:
    """A device as shown in the menu, with an optional error annotation."""

    device: DeviceDescriptor
    error: Optional[str] = None

    @property
    def label(self) -> str:
        if self.error:
            return self.device.display_name + self.error
        return self.device.display_name


@dataclass
class MenuMode:
    pass


@dataclass
class LiveMode:
    camera: Camera
    entry: MenuEntry
    # Most recently displayed frame, frozen when pausing
    last_frame: Optional[np.ndarray] = field(default=None, repr=False)


@dataclass
class PausedMode:
    camera: Camera
    entry: MenuEntry
    frozen_frame: np.ndarray = field(repr=False)


Mode = Union[MenuMode, LiveMode, PausedMode]


class ViewerApp:
    """
    Holds the device menu and the current mode, and reacts to actions.

    Rendering asks the app for the text of the current frame; the app pulls
    from the capture handle only while live.
    """

    def __init__(
        self,
        devices: Sequence[DeviceDescriptor],
        opener: DeviceOpener = open_device,
        renderer: Optional[FrameRenderer] = None,
        recover_frame_errors: bool = False
    ):
        """
        Initialize the application.

        Args:
            devices: Enumerated capture devices, in menu order
            opener: Opens a device and returns its capture handle
            renderer: Frame renderer (standard palette if None)
            recover_frame_errors: Return to the menu on a bad frame instead
                of propagating the error
        """
        self.menu: SelectableList[MenuEntry] = SelectableList.with_items(
            [MenuEntry(device) for device in devices]
        )
        self.menu.select_first()
        self.opener = opener
        self.renderer = renderer or FrameRenderer()
        self.recover_frame_errors = recover_frame_errors
        self.mode: Mode = MenuMode()

    @property
    def viewing(self) -> bool:
        return not isinstance(self.mode, MenuMode)

    @property
    def paused(self) -> bool:
        return isinstance(self.mode, PausedMode)

    @property
    def camera(self) -> Optional[Camera]:
        if isinstance(self.mode, (LiveMode, PausedMode)):
            return self.mode.camera
        return None

    def menu_labels(self) -> List[str]:
        return [entry.label for entry in self.menu.items]

    def handle(self, action: Action) -> bool:
        """
        Apply an action to the current mode.

        Actions that mean nothing in the current mode are ignored.

        Returns:
            False when the application should quit, True otherwise
        """
        if action is Action.QUIT:
            self.close()
            return False

        if isinstance(self.mode, MenuMode):
            if action is Action.DOWN:
                self.menu.next()
            elif action is Action.UP:
                self.menu.previous()
            elif action is Action.CONFIRM:
                self._open_selected()
        elif action is Action.TOGGLE_PAUSE:
            self._toggle_pause()
        elif action is Action.BACK:
            self._return_to_menu()

        return True

    def _open_selected(self):
        """Open the device under the cursor, annotating it on failure."""
        entry = self.menu.current()
        if entry is None:
            return

        try:
            camera = self.opener(entry.device)
        except DeviceOpenError as e:
            logger.warning("Failed to open %s: %s", entry.device.display_name, e)
            entry.error = OPEN_ERROR_SUFFIX
            return

        entry.error = None
        self.mode = LiveMode(camera=camera, entry=entry)

    def _toggle_pause(self):
        mode = self.mode
        if isinstance(mode, LiveMode):
            frame = mode.last_frame
            if frame is None:
                try:
                    frame = mode.camera.next_frame()
                except FrameError as e:
                    self._frame_failed(mode, e)
                    return
            self.mode = PausedMode(camera=mode.camera, entry=mode.entry, frozen_frame=frame)
            logger.info("Paused %s", mode.entry.device.display_name)
        elif isinstance(mode, PausedMode):
            self.mode = LiveMode(camera=mode.camera, entry=mode.entry)
            logger.info("Resumed %s", mode.entry.device.display_name)

    def _return_to_menu(self):
        """Release the capture handle and drop any frozen frame."""
        camera = self.camera
        self.mode = MenuMode()
        if camera is not None:
            camera.close()

    def frame_text(self, width: int, height: int) -> str:
        """
        Produce the text for the current frame at the given size.

        While live a fresh frame is pulled from the device; while paused the
        frozen frame is re-rendered at the current size.

        Raises:
            FrameError: If the frame cannot be captured or decoded and
                recovery is disabled
        """
        mode = self.mode
        if isinstance(mode, MenuMode):
            raise RuntimeError("No device is being viewed")

        try:
            if isinstance(mode, PausedMode):
                return self.renderer.render(mode.frozen_frame, width, height)

            frame = mode.camera.next_frame()
            text = self.renderer.render(frame, width, height)
            mode.last_frame = frame
            return text
        except FrameError as e:
            self._frame_failed(mode, e)
            return ""

    def _frame_failed(self, mode: Union[LiveMode, PausedMode], error: FrameError):
        """Propagate a frame error, or fall back to the menu when recovering."""
        if not self.recover_frame_errors:
            raise error
        logger.error("Frame error on %s: %s", mode.entry.device.display_name, error)
        mode.entry.error = FRAME_ERROR_SUFFIX
        self._return_to_menu()

    def close(self):
        """Release all resources held by the current mode."""
        self._return_to_menu()
