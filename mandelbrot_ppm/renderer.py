"""Rendering driver: maps raster pixels onto the complex plane and shades them."""

from __future__ import annotations

import math
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Union

import numpy as np

from .complex64 import Complex64
from .escape import ESCAPE_THRESHOLD, MAX_ITERATIONS, evaluate, evaluate_grid
from .image import DEFAULT_COMMENT, MAX_CHANNEL, Color, RasterBuffer

BACKENDS = ("scalar", "tensorflow")

ProgressCallback = Callable[[int, int], None]


def _is_real(value) -> bool:
    return not isinstance(value, bool) and isinstance(value, (int, float, np.integer, np.floating))


@dataclass(frozen=True)
class RenderConfig:
    """Parameters for a single render of the Mandelbrot set."""

    size: int = 4096
    re_range: tuple[float, float] = (-2.0, 1.0)
    im_range: tuple[float, float] = (-1.0, 1.0)
    max_iterations: int = MAX_ITERATIONS
    escape_threshold: float = ESCAPE_THRESHOLD
    output_path: Union[str, Path] = "image.ppm"
    comment: Optional[str] = DEFAULT_COMMENT

    def __post_init__(self) -> None:
        if isinstance(self.size, bool) or not isinstance(self.size, int) or self.size < 1:
            raise ValueError(f"size must be a positive integer, got {self.size!r}.")
        if isinstance(self.max_iterations, bool) or not isinstance(self.max_iterations, int):
            raise ValueError(f"max_iterations must be an integer, got {self.max_iterations!r}.")
        if not 1 <= self.max_iterations <= MAX_CHANNEL:
            # Intensities are written straight into an 8-bit channel.
            raise ValueError(f"max_iterations must lie in [1, {MAX_CHANNEL}], got {self.max_iterations}.")
        if not _is_real(self.escape_threshold) or not math.isfinite(self.escape_threshold) or self.escape_threshold < 0:
            raise ValueError(f"escape_threshold must be finite and non-negative, got {self.escape_threshold!r}.")
        for name in ("re_range", "im_range"):
            bounds = getattr(self, name)
            if (
                not isinstance(bounds, (tuple, list))
                or len(bounds) != 2
                or not all(_is_real(v) and math.isfinite(v) for v in bounds)
            ):
                raise ValueError(f"{name} must be a pair of finite numbers, got {bounds!r}.")
            object.__setattr__(self, name, (float(bounds[0]), float(bounds[1])))
        object.__setattr__(self, "escape_threshold", float(self.escape_threshold))
        object.__setattr__(self, "output_path", Path(self.output_path))


def pixel_to_complex(config: RenderConfig, column: int, row: int) -> Complex64:
    re_start, re_end = config.re_range
    im_start, im_end = config.im_range
    return Complex64(
        re_start + (column / config.size) * (re_end - re_start),
        im_start + (row / config.size) * (im_end - im_start),
    )


def sample_axes(config: RenderConfig) -> tuple[np.ndarray, np.ndarray]:
    """Return the real coordinate of every column and the imaginary coordinate of every row."""

    re_start, re_end = config.re_range
    im_start, im_end = config.im_range
    steps = np.arange(config.size, dtype=np.float64) / np.float64(config.size)
    re = np.float64(re_start) + steps * (np.float64(re_end) - np.float64(re_start))
    im = np.float64(im_start) + steps * (np.float64(im_end) - np.float64(im_start))
    return re, im


def grayscale(intensity: int) -> Color:
    return (intensity, intensity, intensity)


def _render_scalar(config: RenderConfig, image: RasterBuffer, progress: Optional[ProgressCallback]) -> None:
    for column in range(config.size):
        for row in range(config.size):
            point = pixel_to_complex(config, column, row)
            intensity = evaluate(point, config.max_iterations, config.escape_threshold)
            image.set_pixel(column, row, grayscale(intensity))
        if progress is not None:
            progress(column + 1, config.size)


def _render_tensorflow(config: RenderConfig, image: RasterBuffer, device: Optional[str]) -> None:
    re, im = sample_axes(config)
    intensities = evaluate_grid(re, im, config.max_iterations, config.escape_threshold, device=device)
    image.blit(np.repeat(intensities[..., np.newaxis], 3, axis=-1))


def render_frame(
    config: RenderConfig,
    *,
    backend: str = "scalar",
    device: Optional[str] = None,
    progress: Optional[ProgressCallback] = None,
) -> RasterBuffer:
    """Render ``config`` into a fresh raster buffer.

    The ``scalar`` backend evaluates and writes one pixel at a time and reports
    ``progress(done_columns, total_columns)`` after each column. The
    ``tensorflow`` backend evaluates the whole grid in one batched loop on
    ``device`` and produces the same pixels.
    """

    if backend not in BACKENDS:
        raise ValueError(f"Unknown backend '{backend}'. Valid choices: {', '.join(BACKENDS)}.")

    image = RasterBuffer(config.size, config.size, (0, 0, 0), comment=config.comment)
    if backend == "scalar":
        _render_scalar(config, image, progress)
    else:
        _render_tensorflow(config, image, device)
        if progress is not None:
            progress(config.size, config.size)
    return image


def render_to_file(config: RenderConfig, **kwargs) -> Path:
    """Render ``config`` and write the image to ``config.output_path``."""

    image = render_frame(config, **kwargs)
    return image.save_to_file(config.output_path)
