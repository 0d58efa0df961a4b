"""
Frame to ASCII conversion.

Turns a captured color frame into a block of text:
- Nearest-neighbour resize to the exact terminal size (no aspect correction)
- Grayscale conversion
- Luminance normalization to the full 0-255 range
- Brightness to character mapping
"""

from typing import List, Union
import numpy as np
from PIL import Image

from .errors import ImageDecodeError


class CharacterSets:
    """Predefined character sets, ordered from darkest to brightest."""

    # Reference palette
    STANDARD = " .:-=+*#%@"

    # Simple/minimal set
    MINIMAL = " .-+*#"

    # More detailed character set for smoother gradients
    DETAILED = " .'`^\",:;Il!i><~+_-?][}{1)(|\\/tfjrxnuvczXYUJCLQ0OZmwqpdbkhao*#MW&8%B@$"

    # Block characters for a pixelated look
    BLOCKS = " ░▒▓█"

    NAMES = ("standard", "minimal", "detailed", "blocks")

    @classmethod
    def by_name(cls, name: str) -> str:
        """Look up a palette by its lowercase name."""
        if name not in cls.NAMES:
            raise ValueError(f"Unknown character set: {name}")
        return getattr(cls, name.upper())


def normalize_luminance(gray: np.ndarray) -> np.ndarray:
    """
    Stretch a brightness grid to the full 0-255 range.

    Each pixel becomes round(255 * (v - min) / (max - min)). A uniform grid
    has no range to stretch and is returned unchanged.

    Args:
        gray: 2-D array of brightness values (0-255)

    Returns:
        uint8 array with the same shape as the input
    """
    values = np.asarray(gray, dtype=np.float64)
    if values.size == 0:
        return values.astype(np.uint8)

    low = values.min()
    high = values.max()
    if high == low:
        return np.clip(values, 0, 255).astype(np.uint8)

    scaled = 255.0 * (values - low) / (high - low)
    # Round half up
    return np.floor(scaled + 0.5).astype(np.uint8)


def map_glyphs(gray: np.ndarray, palette: str = CharacterSets.STANDARD) -> List[str]:
    """
    Map a brightness grid to palette characters.

    Value v selects palette index round(v / 255 * (N - 1)), clamped to the
    palette bounds.

    Args:
        gray: 2-D array of brightness values (0-255)
        palette: Characters ordered from darkest to brightest

    Returns:
        One string per row of the input
    """
    if not palette:
        raise ValueError("Palette must contain at least one character")

    last = len(palette) - 1
    values = np.asarray(gray, dtype=np.float64)
    indices = np.floor(values / 255.0 * last + 0.5).astype(np.int64)
    indices = np.clip(indices, 0, last)

    chars = np.array(list(palette))
    return ["".join(row) for row in chars[indices]]


class FrameRenderer:
    """
    Renders raw captured frames as text blocks sized to the terminal.

    The renderer is stateless apart from its palette, so the same instance
    can be used for live and frozen frames.
    """

    def __init__(self, palette: str = CharacterSets.STANDARD):
        """
        Initialize the renderer.

        Args:
            palette: Characters ordered from darkest to brightest
        """
        if not palette:
            raise ValueError("Palette must contain at least one character")
        self.palette = palette

    def _to_image(self, frame: Union[np.ndarray, Image.Image]) -> Image.Image:
        """Decode a raw frame (OpenCV BGR array or PIL image) into a PIL image."""
        if isinstance(frame, Image.Image):
            return frame

        if not isinstance(frame, np.ndarray):
            raise ImageDecodeError(f"Unsupported frame type: {type(frame).__name__}")

        if frame.size == 0:
            raise ImageDecodeError("Frame contains no pixel data")

        array = frame
        if array.dtype != np.uint8:
            raise ImageDecodeError(f"Unsupported pixel type: {array.dtype}")

        if array.ndim == 3 and array.shape[2] == 1:
            array = array[:, :, 0]

        if array.ndim == 3 and array.shape[2] in (3, 4):
            # OpenCV uses BGR(A), convert to RGB
            array = np.ascontiguousarray(array[:, :, 2::-1])
        elif array.ndim != 2:
            raise ImageDecodeError(f"Unsupported frame shape: {frame.shape}")

        try:
            return Image.fromarray(array)
        except (TypeError, ValueError) as e:
            raise ImageDecodeError(f"Could not decode frame: {e}") from e

    def to_gray(self, frame: Union[np.ndarray, Image.Image], width: int, height: int) -> np.ndarray:
        """Resize a frame to (width, height) and return its grayscale pixels."""
        if width <= 0 or height <= 0:
            raise ValueError(f"Output size must be positive, got {width}x{height}")

        image = self._to_image(frame)
        # Distortion is accepted, the frame always fills the target size
        image = image.resize((width, height), Image.Resampling.NEAREST)
        return np.array(image.convert("L"))

    def render(self, frame: Union[np.ndarray, Image.Image], width: int, height: int) -> str:
        """
        Convert a frame to ASCII art.

        Args:
            frame: Raw frame, either an OpenCV array or a PIL image
            width: Output width in characters
            height: Output height in lines

        Returns:
            Text with exactly `height` lines of exactly `width` characters

        Raises:
            ImageDecodeError: If the frame cannot be decoded
        """
        gray = self.to_gray(frame, width, height)
        lines = map_glyphs(normalize_luminance(gray), self.palette)
        return "\n".join(lines)
