"""
Fixed-tick render and input loop.

Each tick paints the current state, then waits for a key for whatever is
left of the tick interval. Everything runs on the calling thread, including
blocking frame reads.
"""

import logging
import time
from typing import Callable, Optional

from .app import Action, ViewerApp
from .display import Painter

logger = logging.getLogger(__name__)

DEFAULT_TICK_RATE = 0.015

KEY_ACTIONS = {
    "KEY_UP": Action.UP,
    "KEY_DOWN": Action.DOWN,
    "KEY_ENTER": Action.CONFIRM,
    "KEY_ESCAPE": Action.BACK,
}

CHAR_ACTIONS = {
    "q": Action.QUIT,
    " ": Action.TOGGLE_PAUSE,
    "\n": Action.CONFIRM,
    "\r": Action.CONFIRM,
}


def key_to_action(key) -> Optional[Action]:
    """Translate a blessed keystroke into an action, or None to ignore it."""
    if not key:
        return None
    name = getattr(key, "name", None)
    if name:
        return KEY_ACTIONS.get(name)
    return CHAR_ACTIONS.get(str(key))


def draw(app: ViewerApp, painter: Painter):
    """Paint the current state of the app."""
    if app.viewing:
        width, height = painter.view_size()
        text = app.frame_text(width, height)
        # A recovered frame error leaves the app back in the menu
        if app.viewing:
            painter.paint_view(text, paused=app.paused)
            return
    painter.paint_menu(app.menu_labels(), app.menu.selected())


def run(
    app: ViewerApp,
    term,
    painter: Painter,
    tick_rate: float = DEFAULT_TICK_RATE,
    stop_requested: Optional[Callable[[], bool]] = None
):
    """
    Run the loop until the app asks to quit or a stop is requested.

    Args:
        app: Application state machine
        term: blessed Terminal used for input
        painter: Painter drawing onto the same terminal
        tick_rate: Tick interval in seconds
        stop_requested: Checked every tick; True ends the loop
    """
    last_tick = time.monotonic()
    logger.info("Starting render loop (tick %.0f ms)", tick_rate * 1000)

    try:
        while True:
            if stop_requested is not None and stop_requested():
                logger.info("Stop requested")
                return

            draw(app, painter)

            timeout = max(0.0, tick_rate - (time.monotonic() - last_tick))
            action = key_to_action(term.inkey(timeout=timeout))
            if action is not None and not app.handle(action):
                logger.info("Quit requested")
                return

            if time.monotonic() - last_tick >= tick_rate:
                last_tick = time.monotonic()
    finally:
        app.close()
