"""Rendering primitives for Mandelbrot frames."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np

LIMIT = 255
HORIZON = 4.0


@dataclass(frozen=True)
class RenderParameters:
    """Parameters that describe a single render of the Mandelbrot set."""

    width: int
    height: int
    upper_left: complex
    lower_right: complex
    limit: int = LIMIT

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"image bounds must be positive, got {self.width}x{self.height}")
        if self.limit <= 0:
            raise ValueError(f"iteration limit must be positive, got {self.limit}")

    @property
    def bounds(self) -> tuple[int, int]:
        return self.width, self.height

    def point(self, col: float, row: float) -> complex:
        return pixel_to_point(self.bounds, (col, row), self.upper_left, self.lower_right)


def escape_time(c: complex, limit: int = LIMIT) -> Optional[int]:
    """Return the iteration at which ``c`` leaves the bailout radius.

    ``None`` means ``c`` stayed bounded for ``limit`` iterations and is
    treated as a member of the set.
    """

    cr = c.real
    ci = c.imag
    zr = 0.0
    zi = 0.0
    for i in range(limit):
        zr, zi = zr * zr - zi * zi + cr, 2.0 * zr * zi + ci
        if zr * zr + zi * zi > HORIZON:
            return i
    return None


def escape_times(real: np.ndarray, imag: np.ndarray, limit: int = LIMIT) -> np.ndarray:
    """Vectorised :func:`escape_time` over broadcastable coordinate arrays.

    Members of the set are reported as ``-1``. Each surviving point goes
    through the same float operations as the scalar version, so counts agree
    exactly.
    """

    cr, ci = np.broadcast_arrays(np.asarray(real, dtype=np.float64), np.asarray(imag, dtype=np.float64))
    shape = cr.shape
    cr = cr.ravel().copy()
    ci = ci.ravel().copy()

    counts = np.full(cr.size, -1, dtype=np.int32)
    index = np.arange(cr.size)
    zr = np.zeros_like(cr)
    zi = np.zeros_like(ci)

    # Huge viewports overflow to inf/nan exactly like the scalar loop does.
    with np.errstate(over="ignore", invalid="ignore"):
        for i in range(limit):
            if index.size == 0:
                break
            zr, zi = zr * zr - zi * zi + cr, 2.0 * zr * zi + ci
            escaped = zr * zr + zi * zi > HORIZON
            if escaped.any():
                counts[index[escaped]] = i
                keep = ~escaped
                index = index[keep]
                cr = cr[keep]
                ci = ci[keep]
                zr = zr[keep]
                zi = zi[keep]

    return counts.reshape(shape)


def pixel_to_point(
    bounds: tuple[int, int],
    pixel: tuple[float, float],
    upper_left: complex,
    lower_right: complex,
) -> complex:
    """Map ``pixel`` (column, row) of an image of ``bounds`` onto the plane.

    Column and row may equal the width and height, which maps the far edges
    of the image and is how band boundaries are computed.
    """

    width = lower_right.real - upper_left.real
    height = upper_left.imag - lower_right.imag
    return complex(
        upper_left.real + pixel[0] * width / bounds[0],
        upper_left.imag - pixel[1] * height / bounds[1],
    )


def _intensity(counts: np.ndarray) -> np.ndarray:
    shade = np.clip(255 - counts, 0, 255)
    return np.where(counts < 0, 0, shade).astype(np.uint8)


def render_rows(pixels: np.ndarray, params: RenderParameters, top: int, height: int) -> None:
    """Fill rows ``[top, top + height)`` of the frame into ``pixels``.

    ``pixels`` holds exactly those rows. Coordinates come from the frame's
    own viewport using the global row index, so a frame rendered in pieces is
    identical to one rendered whole.
    """

    if pixels.size != params.width * height:
        raise ValueError(
            f"pixel buffer holds {pixels.size} bytes, expected {params.width}x{height}={params.width * height}"
        )
    if height == 0:
        return

    upper_left = params.upper_left
    lower_right = params.lower_right
    span_re = lower_right.real - upper_left.real
    span_im = upper_left.imag - lower_right.imag

    cols = np.arange(params.width, dtype=np.float64)
    rows = np.arange(top, top + height, dtype=np.float64)
    real = upper_left.real + cols * span_re / params.width
    imag = upper_left.imag - rows * span_im / params.height

    counts = escape_times(real[np.newaxis, :], imag[:, np.newaxis], params.limit)
    pixels.reshape(height, params.width)[...] = _intensity(counts)


def render(
    pixels: np.ndarray,
    bounds: tuple[int, int],
    upper_left: complex,
    lower_right: complex,
    limit: int = LIMIT,
) -> None:
    """Render the rectangle between ``upper_left`` and ``lower_right`` into ``pixels``.

    ``pixels`` is a flat row-major ``uint8`` buffer of ``bounds[0] * bounds[1]``
    grayscale bytes. Escaped points become ``255 - count``, members become 0.
    """

    if pixels.size != bounds[0] * bounds[1]:
        raise ValueError(
            f"pixel buffer holds {pixels.size} bytes, expected {bounds[0]}x{bounds[1]}={bounds[0] * bounds[1]}"
        )
    params = RenderParameters(bounds[0], bounds[1], upper_left, lower_right, limit)
    render_rows(pixels, params, 0, bounds[1])
