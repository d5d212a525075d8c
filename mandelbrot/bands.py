"""Utilities for splitting a frame into row bands."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .renderer import RenderParameters


@dataclass(frozen=True)
class Band:
    """A contiguous run of rows and the byte range and viewport it covers."""

    index: int
    top: int
    height: int
    start: int
    stop: int
    upper_left: complex
    lower_right: complex

    @property
    def size(self) -> int:
        return self.stop - self.start


def rows_per_band(height: int, workers: int) -> int:
    """Number of rows per band so ``workers`` bands cover ``height`` rows."""

    if workers < 1:
        raise ValueError(f"worker count must be at least 1, got {workers}")
    return -(-height // workers)


def plan_bands(params: RenderParameters, rows: int) -> list[Band]:
    """Partition the frame into bands of ``rows`` rows (the last may be shorter)."""

    if rows < 1:
        raise ValueError(f"rows per band must be at least 1, got {rows}")

    width, height = params.bounds
    bands = []
    for index, top in enumerate(range(0, height, rows)):
        band_height = min(rows, height - top)
        bands.append(
            Band(
                index=index,
                top=top,
                height=band_height,
                start=top * width,
                stop=(top + band_height) * width,
                upper_left=params.point(0, top),
                lower_right=params.point(width, top + band_height),
            )
        )
    return bands


def split_bands(pixels: np.ndarray, bands: list[Band]) -> list[tuple[Band, np.ndarray]]:
    """Pair each band with its own view into ``pixels``."""

    return [(band, pixels[band.start:band.stop]) for band in bands]
