"""Pixel sinks receiving the rendered frame.

A sink is anything with a set_pixel(x, y, r, g, b) method. The renderer calls
it exactly once per pixel with 8-bit channel values, for x in [0, width) and
y in [0, height), y = 0 being the top row.

Example:
    >>> from softrt.output.sinks import ArraySink
    >>> sink = ArraySink(4, 3)
    >>> sink.set_pixel(1, 2, 255, 0, 0)
    >>> sink.image[2, 1]
    array([255,   0,   0], dtype=uint8)
"""

from __future__ import annotations

from typing import Protocol

import numpy as np
import numpy.typing as npt

from softrt.output.export import save_png_from_array


class PixelSink(Protocol):
    """Destination for rendered pixels."""

    def set_pixel(self, x: int, y: int, r: int, g: int, b: int) -> None:
        """Write one pixel."""
        ...


class ArraySink:
    """Pixel sink buffering into a NumPy array.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        image: uint8 array of shape (height, width, 3).
    """

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Sink dimensions ({width}x{height}) must be positive")
        self.width = width
        self.height = height
        self.image: npt.NDArray[np.uint8] = np.zeros((height, width, 3), dtype=np.uint8)
        self.pixels_written = 0

    def set_pixel(self, x: int, y: int, r: int, g: int, b: int) -> None:
        """Write one pixel.

        Raises:
            IndexError: If (x, y) is outside the image.
        """
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} image")
        self.image[y, x] = (r, g, b)
        self.pixels_written += 1

    def save_png(self, filepath: str) -> None:
        """Save the buffered image as a PNG file."""
        save_png_from_array(self.image, filepath)

    def __repr__(self) -> str:
        return f"ArraySink(width={self.width}, height={self.height})"
