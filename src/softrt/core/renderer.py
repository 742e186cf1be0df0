"""Frame driver: one primary ray per pixel, colors handed to a pixel sink.

The renderer traces every pixel of a width x height grid in a Taichi kernel,
clamps each channel to [0, 1], and stores the result in a preallocated render
target. The host then quantizes the buffer to 8 bits and calls the sink once
per pixel.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from softrt.core.renderer import render
    >>> from softrt.output.sinks import ArraySink
    >>> from softrt.scene.random_spheres import create_random_spheres_scene
    >>>
    >>> scene, camera = create_random_spheres_scene(seed=43)
    >>> sink = ArraySink(256, 256)
    >>> render(256, 256, sink, camera=camera)
    >>> sink.save_png("spheres.png")
"""

import logging
import time

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from softrt.camera.near_plane import (
    NearPlaneCamera,
    get_active_camera,
    get_primary_ray,
    setup_camera,
)
from softrt.core.shading import get_shading_config, shade
from softrt.core.vector import saturate
from softrt.output.export import image_to_uint8, save_png_from_array
from softrt.output.sinks import PixelSink

logger = logging.getLogger(__name__)

vec3 = tm.vec3

# -----------------------------------------------------------------------------
# Frame buffer
# -----------------------------------------------------------------------------

# Allocated once at the largest size; resizing only changes _frame_size
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

# Active (width, height); (0, 0) until setup_render_target() runs
_frame_size = ti.Vector.field(2, dtype=ti.i32, shape=())

# Saturated colors, indexed [x, y] with y = 0 at the top
_frame = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))


def setup_render_target(width: int, height: int) -> None:
    """Select the active frame size and zero the buffer.

    Raises:
        ValueError: If either dimension is below 1 or above the maximum.
    """
    if not (0 < width <= MAX_IMAGE_WIDTH and 0 < height <= MAX_IMAGE_HEIGHT):
        raise ValueError(
            f"Image dimensions ({width}x{height}) must be positive and at most "
            f"{MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT}"
        )

    _frame_size[None] = [width, height]
    clear_render_target()


def clear_render_target() -> None:
    _frame.fill(0.0)


def get_image_dimensions() -> tuple[int, int]:
    """Return the active frame size as (width, height)."""
    size = _frame_size[None]
    return int(size[0]), int(size[1])


def _active_dimensions() -> tuple[int, int]:
    width, height = get_image_dimensions()
    if width == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")
    return width, height


# -----------------------------------------------------------------------------
# Kernels
# -----------------------------------------------------------------------------


@ti.func
def render_pixel(i: ti.i32, j: ti.i32, width: ti.i32, height: ti.i32) -> vec3:
    """Shade the primary ray of pixel (i, j) at depth 0."""
    ray = get_primary_ray(i, j, width, height)
    return shade(ray.origin, ray.direction, ray.origin)


@ti.kernel
def _render_frame(width: ti.i32, height: ti.i32):
    for i, j in ti.ndrange(width, height):
        color = render_pixel(i, j, width, height)
        _frame[i, j] = vec3(saturate(color.x), saturate(color.y), saturate(color.z))


def render_frame() -> None:
    """Trace every pixel of the active frame.

    Installs the default shading config and camera first if none is set.

    Raises:
        RuntimeError: If setup_render_target() has not been called.
    """
    width, height = _active_dimensions()
    get_shading_config()
    get_active_camera()
    _render_frame(width, height)


def get_image_numpy() -> npt.NDArray[np.float32]:
    """Copy the active frame to the host.

    Returns:
        float32 array of shape (height, width, 3), values in [0, 1], row 0 at
        the top.

    Raises:
        RuntimeError: If setup_render_target() has not been called.
    """
    width, height = _active_dimensions()
    frame = _frame.to_numpy()[:width, :height]
    return np.ascontiguousarray(frame.swapaxes(0, 1), dtype=np.float32)


def write_to_sink(image: npt.NDArray[np.uint8], sink: PixelSink) -> None:
    """Send every pixel of an 8-bit image to a sink.

    Pixels are visited column by column (x outer, y inner) and each pixel is
    sent exactly once.

    Args:
        image: Array of shape (height, width, 3), dtype uint8.
        sink: The pixel sink receiving set_pixel(x, y, r, g, b) calls.
    """
    height, width = image.shape[:2]
    for x in range(width):
        for y in range(height):
            r, g, b = image[y, x]
            sink.set_pixel(x, y, int(r), int(g), int(b))


# -----------------------------------------------------------------------------
# Entry points
# -----------------------------------------------------------------------------


class Renderer:
    """Renders frames of one size from the active scene.

    Use render() for a single frame sent straight to a sink; keep a Renderer
    around to produce several frames or to get arrays back.
    """

    def __init__(self, width: int, height: int) -> None:
        """Raises ValueError unless 1 <= width, height <= 2048."""
        setup_render_target(width, height)
        self._size = (width, height)

    @property
    def width(self) -> int:
        return self._size[0]

    @property
    def height(self) -> int:
        return self._size[1]

    def resize(self, width: int, height: int) -> None:
        """Change the frame size; the old size is kept if validation fails."""
        setup_render_target(width, height)
        self._size = (width, height)

    def _trace(self) -> npt.NDArray[np.float32]:
        # Another Renderer may have changed the shared frame size
        setup_render_target(*self._size)
        render_frame()
        return get_image_numpy()

    def render(self, sink: PixelSink | None = None) -> npt.NDArray[np.uint8]:
        """Trace one frame and quantize it.

        Args:
            sink: If given, receives every pixel via set_pixel().

        Returns:
            uint8 array of shape (height, width, 3).
        """
        image = image_to_uint8(self._trace())
        if sink is not None:
            write_to_sink(image, sink)
        return image

    def render_to_array(self) -> npt.NDArray[np.float32]:
        """Trace one frame and return the saturated float colors."""
        return self._trace()

    def save_image(self, filepath: str) -> None:
        save_png_from_array(self.render(), filepath)

    def __repr__(self) -> str:
        return f"Renderer(width={self.width}, height={self.height})"


def render(
    width: int,
    height: int,
    sink: PixelSink,
    camera: NearPlaneCamera | None = None,
) -> None:
    """Render the active scene, calling sink.set_pixel once per pixel.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        sink: Receives set_pixel(x, y, r, g, b) with 8-bit channels.
        camera: Installed with setup_camera() before tracing. The active
            camera is used if omitted.

    Raises:
        ValueError: If either dimension is below 1 or above the maximum.
    """
    if camera is not None:
        setup_camera(camera)

    started = time.perf_counter()
    Renderer(width, height).render(sink)
    logger.info("Rendered %dx%d frame in %.2fs", width, height, time.perf_counter() - started)
