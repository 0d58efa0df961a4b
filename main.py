#!/usr/bin/env python3
"""
ASCII Viewer - Watch a camera feed as ASCII art in the terminal.

Quick start:
    python main.py                    # Pick a camera from the menu
    python main.py --mock             # Test without camera
    python main.py -s blocks          # Use block characters

For more options: python main.py --help
"""

from ascii_viewer.cli import main

if __name__ == "__main__":
    exit(main())
