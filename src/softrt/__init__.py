"""Taichi-based sphere ray tracer.

Casts one ray per pixel through a scene of spheres, shades the closest hit
with a directional light, shadow rays and a chain of bounces along the
surface normal, and writes the result to a pixel sink.

Subpackages:
    core: Vector utilities, shading engine and frame driver
    geometry: Sphere primitive and ray-sphere intersection
    materials: Material table (color + roughness)
    scene: Sphere storage, scene manager and the random spheres scene
    camera: Fixed near-plane camera
    output: Pixel sinks and PNG export

Taichi must be initialized with ti.init() before any softrt kernel runs.
"""

__version__ = "0.1.0"
