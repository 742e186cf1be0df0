"""Output module for rendered frames.

Components:
    sinks: PixelSink protocol and a NumPy-backed ArraySink
    export: PNG export via Pillow

Example:
    >>> from softrt.output import ArraySink
    >>> from softrt.core.renderer import render
    >>>
    >>> sink = ArraySink(512, 512)
    >>> render(512, 512, sink)
    >>> sink.save_png("output.png")
"""

from softrt.output.export import image_to_uint8, save_png_from_array
from softrt.output.sinks import ArraySink, PixelSink

__all__ = [
    "PixelSink",
    "ArraySink",
    "save_png_from_array",
    "image_to_uint8",
]
