#!/usr/bin/env python3
"""
Command-line entry point for the ASCII camera viewer.

Lists the capture devices, lets the user pick one from a menu and shows
its live feed as ASCII art until 'q' is pressed.
"""

import argparse
import logging
import signal
import sys
from typing import List, Optional
from blessed import Terminal

from .app import ViewerApp
from .camera import list_devices, mock_devices, quiet_opencv
from .converter import CharacterSets, FrameRenderer
from .display import Painter, terminal_session
from .errors import NoDevicesError
from .log import setup_logging
from .loop import run

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="ASCII Viewer - Watch a camera feed as ASCII art in the terminal",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  ascii-viewer                        Pick a camera and start viewing
  ascii-viewer --mock                 Use synthetic test devices
  ascii-viewer -s blocks              Render with block characters
  ascii-viewer --log-file viewer.log  Write a debug log

Controls:
  up/down  navigate   enter  select    space  pause/resume
  esc      back       q      quit
"""
    )

    # Devices
    parser.add_argument(
        "--mock",
        action="store_true",
        help="Use mock devices instead of real cameras"
    )
    parser.add_argument(
        "--max-index",
        type=int,
        default=6,
        help="Number of camera indices to try when no /dev/video* exist (default: 6)"
    )

    # Rendering
    parser.add_argument(
        "-s", "--charset",
        choices=CharacterSets.NAMES,
        default="standard",
        help="Character set to use"
    )
    parser.add_argument(
        "--tick-ms",
        type=int,
        default=15,
        help="Render loop tick interval in milliseconds (default: 15)"
    )
    parser.add_argument(
        "--recover-frame-errors",
        action="store_true",
        help="Return to the menu on a bad frame instead of exiting"
    )

    # Logging
    parser.add_argument(
        "--log-file",
        help="Write log records to this file"
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (default: INFO)"
    )

    return parser


class SignalStop:
    """
    Turns SIGINT and SIGTERM into a stop request for the render loop.

    The loop checks the request every tick and unwinds normally, so the
    capture handle is released and the terminal restored.
    """

    SIGNALS = (signal.SIGINT, signal.SIGTERM)

    def __init__(self):
        self.signum: Optional[int] = None
        self._previous = {}

    def __call__(self) -> bool:
        return self.signum is not None

    def _handler(self, signum, frame):
        self.signum = signum

    def __enter__(self):
        for signum in self.SIGNALS:
            self._previous[signum] = signal.signal(signum, self._handler)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        for signum, previous in self._previous.items():
            signal.signal(signum, previous)
        self._previous.clear()
        return False


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI."""
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level, args.log_file)
    quiet_opencv()

    if args.tick_ms <= 0:
        print("Error: --tick-ms must be positive", file=sys.stderr)
        return 2

    try:
        devices = mock_devices() if args.mock else list_devices(args.max_index)
    except NoDevicesError as e:
        logger.error("%s", e)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    app = ViewerApp(
        devices,
        renderer=FrameRenderer(CharacterSets.by_name(args.charset)),
        recover_frame_errors=args.recover_frame_errors,
    )

    term = Terminal()

    try:
        with SignalStop() as stop, terminal_session(term):
            run(
                app,
                term,
                Painter(term),
                tick_rate=args.tick_ms / 1000,
                stop_requested=stop,
            )
    except KeyboardInterrupt:
        # Interrupted before the handlers were installed
        app.close()
        logger.info("Interrupted")
        return 0
    except Exception as e:
        # Terminal is restored by now
        logger.exception("Viewer stopped on an error")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if stop.signum is not None:
        logger.info("Stopped by signal %d", stop.signum)
    return 0


if __name__ == "__main__":
    sys.exit(main())
