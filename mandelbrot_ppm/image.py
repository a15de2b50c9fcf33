"""In-memory raster of 24-bit pixels and its plain-text PPM (``P3``) encoder."""

from __future__ import annotations

import io
import os
from pathlib import Path
from typing import BinaryIO, Optional, Union

import numpy as np

Color = tuple[int, int, int]

MAX_CHANNEL = 255
DEFAULT_COMMENT = "Created by mandelbrot-ppm"
_WRITE_BUFFER_SIZE = 8192


def _check_color(color: Color) -> Color:
    if len(color) != 3:
        raise ValueError(f"color must have exactly three channels, got {color!r}.")
    for channel in color:
        if isinstance(channel, bool) or not isinstance(channel, (int, np.integer)):
            raise ValueError(f"color channels must be integers, got {color!r}.")
        if not 0 <= channel <= MAX_CHANNEL:
            raise ValueError(f"color channels must lie in [0, {MAX_CHANNEL}], got {color!r}.")
    return (int(color[0]), int(color[1]), int(color[2]))


def _check_dimension(name: str, value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise ValueError(f"{name} must be an integer, got {value!r}.")
    if value < 0:
        raise ValueError(f"{name} must not be negative, got {value}.")
    return int(value)


class RasterBuffer:
    """Fixed-size ``width x height`` grid of RGB triples.

    Cells are stored row-major: pixel ``(column, row)`` lives at linear index
    ``row * width + column`` and the encoder walks cells in that same order,
    so the first pixel line of the output is the top-left corner and the
    ``width``-th line ends the first row.

    A buffer is encoded at most once. After :meth:`encode`, :meth:`save` or
    :meth:`save_to_file` the buffer is consumed and rejects further writes.
    """

    def __init__(self, width: int, height: int, default: Color = (0, 0, 0), comment: Optional[str] = DEFAULT_COMMENT) -> None:
        self.width = _check_dimension("width", width)
        self.height = _check_dimension("height", height)
        if comment is not None and ("\n" in comment or "\r" in comment):
            raise ValueError("comment must fit on a single line.")
        self.comment = comment
        self._pixels = np.empty((self.height, self.width, 3), dtype=np.uint8)
        self._pixels[...] = _check_color(default)
        self._consumed = False

    def __len__(self) -> int:
        return self.width * self.height

    @property
    def consumed(self) -> bool:
        return self._consumed

    def _ensure_live(self) -> None:
        if self._consumed:
            raise RuntimeError("raster buffer has already been encoded.")

    def _check_bounds(self, column: int, row: int) -> None:
        # numpy would wrap negative indices; out-of-range writes are bugs in the caller.
        if not (0 <= column < self.width and 0 <= row < self.height):
            raise IndexError(
                f"pixel ({column}, {row}) is outside a {self.width}x{self.height} raster."
            )

    def set_pixel(self, column: int, row: int, color: Color) -> None:
        """Overwrite the cell at ``row * width + column``."""

        self._ensure_live()
        self._check_bounds(column, row)
        self._pixels[row, column] = _check_color(color)

    def get_pixel(self, column: int, row: int) -> Color:
        self._check_bounds(column, row)
        r, g, b = self._pixels[row, column]
        return (int(r), int(g), int(b))

    def blit(self, colors: np.ndarray) -> None:
        """Replace every cell from a ``(height, width, 3)`` array of channel values."""

        self._ensure_live()
        colors = np.asarray(colors)
        expected = (self.height, self.width, 3)
        if colors.shape != expected:
            raise ValueError(f"expected an array of shape {expected}, got {colors.shape}.")
        if colors.size and (colors.min() < 0 or colors.max() > MAX_CHANNEL):
            raise ValueError(f"color channels must lie in [0, {MAX_CHANNEL}].")
        self._pixels[...] = colors.astype(np.uint8)

    def header(self) -> bytes:
        lines = ["P3"]
        if self.comment is not None:
            lines.append(f"# {self.comment}")
        lines.append(f"{self.width} {self.height}")
        lines.append(str(MAX_CHANNEL))
        return ("\n".join(lines) + "\n").encode("ascii")

    def save(self, stream: BinaryIO) -> None:
        """Write the header and one ``"r g b"`` line per cell to ``stream``, then flush it."""

        self._ensure_live()
        self._consumed = True
        stream.write(self.header())
        np.savetxt(stream, self._pixels.reshape(-1, 3), fmt="%d", delimiter=" ", newline="\n")
        stream.flush()

    def encode(self) -> bytes:
        stream = io.BytesIO()
        self.save(stream)
        return stream.getvalue()

    def save_to_file(self, path: Union[str, Path]) -> Path:
        """Encode into ``path``, creating parent directories as needed.

        Pixels go to a sibling ``.part`` file that replaces ``path`` only once it
        is complete, so a failed write never leaves a truncated image behind.
        Errors from creating, writing or flushing the file propagate unchanged.
        """

        output_path = Path(path).expanduser()
        output_path.parent.mkdir(parents=True, exist_ok=True)
        partial_path = output_path.with_name(output_path.name + ".part")
        try:
            with open(partial_path, "wb", buffering=_WRITE_BUFFER_SIZE) as handle:
                self.save(handle)
            os.replace(partial_path, output_path)
        except BaseException:
            partial_path.unlink(missing_ok=True)
            raise
        return output_path
