"""Public API for the grayscale Mandelbrot renderer."""

from .complex64 import Complex64, add, div, mul, squared_magnitude, sub
from .escape import ESCAPE_THRESHOLD, MAX_ITERATIONS, evaluate, evaluate_grid
from .image import RasterBuffer
from .renderer import (
    BACKENDS,
    RenderConfig,
    grayscale,
    pixel_to_complex,
    render_frame,
    render_to_file,
    sample_axes,
)

__all__ = [
    "BACKENDS",
    "Complex64",
    "ESCAPE_THRESHOLD",
    "MAX_ITERATIONS",
    "RasterBuffer",
    "RenderConfig",
    "add",
    "div",
    "evaluate",
    "evaluate_grid",
    "grayscale",
    "mul",
    "pixel_to_complex",
    "render_frame",
    "render_to_file",
    "sample_axes",
    "squared_magnitude",
    "sub",
]
