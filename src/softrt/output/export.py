"""Image export utilities for rendered frames.

Supported formats:
    - PNG (8-bit RGB via Pillow)

Colors are written as traced: the renderer already clamps to [0, 1] and
quantizes, and no gamma curve is applied.

Example:
    >>> from softrt.output.export import save_png_from_array
    >>> from softrt.core.renderer import Renderer
    >>>
    >>> renderer = Renderer(512, 512)
    >>> save_png_from_array(renderer.render(), "output.png")
"""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

logger = logging.getLogger(__name__)


def image_to_uint8(image: npt.NDArray[np.floating]) -> npt.NDArray[np.uint8]:
    """Convert a float image in [0, 1] to uint8.

    Values are clamped, scaled by 255 and truncated.

    Args:
        image: Float image array of shape (H, W, 3).

    Returns:
        8-bit image array of shape (H, W, 3).
    """
    return (np.clip(image, 0.0, 1.0) * 255.0).astype(np.uint8)


def save_png_from_array(
    image: npt.NDArray[np.uint8] | npt.NDArray[np.floating],
    filepath: str | Path,
) -> Path:
    """Save an image array as a PNG file.

    Args:
        image: Array of shape (H, W, 3). uint8 arrays are written directly;
            float arrays are converted with image_to_uint8().
        filepath: Output file path (should end in .png).

    Returns:
        The path that was written.

    Raises:
        ValueError: If the array is not of shape (H, W, 3).
    """
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Expected image of shape (H, W, 3), got {image.shape}")

    if image.dtype != np.uint8:
        image = image_to_uint8(image)

    output = Path(filepath)
    pil_image = PILImage.fromarray(np.ascontiguousarray(image))
    pil_image.save(output)
    logger.debug("Wrote %dx%d image to %s", image.shape[1], image.shape[0], output)
    return output
