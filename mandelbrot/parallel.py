"""Band executors and the parallel render driver."""

from __future__ import annotations

import concurrent.futures
from functools import partial
from typing import Callable, Optional, Sequence

import numpy as np

from .bands import Band, plan_bands, rows_per_band, split_bands
from .renderer import RenderParameters, render_rows

BandJob = tuple[Band, np.ndarray]
BandFunction = Callable[[Band, np.ndarray], None]


def render_band(params: RenderParameters, band: Band, pixels: np.ndarray) -> None:
    render_rows(pixels, params, band.top, band.height)


def _wait_all(futures: Sequence[concurrent.futures.Future]) -> list:
    # Every worker finishes before the first failure is re-raised.
    concurrent.futures.wait(futures)
    return [future.result() for future in futures]


class SequentialExecutor:
    """Render the whole frame as one band on the calling thread."""

    name = "sequential"

    def __init__(self, workers: int = 1) -> None:
        self.workers = 1

    def rows_per_band(self, height: int) -> int:
        return height

    def run(self, fn: BandFunction, jobs: Sequence[BandJob]) -> None:
        for band, pixels in jobs:
            fn(band, pixels)


class ThreadExecutor:
    """One thread per band, all joined before returning."""

    name = "threads"

    def __init__(self, workers: int) -> None:
        self.workers = workers

    def rows_per_band(self, height: int) -> int:
        return rows_per_band(height, self.workers)

    def run(self, fn: BandFunction, jobs: Sequence[BandJob]) -> None:
        if not jobs:
            return
        with concurrent.futures.ThreadPoolExecutor(max_workers=len(jobs), thread_name_prefix="band") as pool:
            _wait_all([pool.submit(fn, band, pixels) for band, pixels in jobs])


class PoolExecutor:
    """A fixed pool of worker threads pulling one row at a time."""

    name = "pool"

    def __init__(self, workers: int) -> None:
        self.workers = workers

    def rows_per_band(self, height: int) -> int:
        return 1

    def run(self, fn: BandFunction, jobs: Sequence[BandJob]) -> None:
        with concurrent.futures.ThreadPoolExecutor(max_workers=self.workers, thread_name_prefix="row") as pool:
            _wait_all([pool.submit(fn, band, pixels) for band, pixels in jobs])


def _render_detached(fn: BandFunction, band: Band) -> np.ndarray:
    pixels = np.zeros(band.size, dtype=np.uint8)
    fn(band, pixels)
    return pixels


class ProcessExecutor:
    """Bands rendered in worker processes and copied back into place.

    Each worker owns a private buffer for its band and hands it back on
    completion. ``fn`` must be picklable.
    """

    name = "processes"

    def __init__(self, workers: int) -> None:
        self.workers = workers

    def rows_per_band(self, height: int) -> int:
        return rows_per_band(height, self.workers)

    def run(self, fn: BandFunction, jobs: Sequence[BandJob]) -> None:
        if not jobs:
            return
        with concurrent.futures.ProcessPoolExecutor(max_workers=min(self.workers, len(jobs))) as pool:
            results = _wait_all([pool.submit(_render_detached, fn, band) for band, _ in jobs])
        for (band, pixels), rendered in zip(jobs, results):
            pixels[...] = rendered


EXECUTORS = {
    SequentialExecutor.name: SequentialExecutor,
    ThreadExecutor.name: ThreadExecutor,
    PoolExecutor.name: PoolExecutor,
    ProcessExecutor.name: ProcessExecutor,
}


def get_executor(name: str, workers: int = 1):
    """Return the band executor registered under ``name``."""

    if workers < 1:
        raise ValueError(f"worker count must be at least 1, got {workers}")
    try:
        executor_cls = EXECUTORS[name.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown backend '{name}'. Valid choices: {', '.join(sorted(EXECUTORS))}."
        ) from None
    return executor_cls(workers)


def render_image(params: RenderParameters, executor=None, *, bands: Optional[list[Band]] = None) -> np.ndarray:
    """Render the frame described by ``params`` and return its pixel buffer."""

    if executor is None:
        executor = SequentialExecutor()
    if bands is None:
        bands = plan_bands(params, executor.rows_per_band(params.height))

    pixels = np.zeros(params.width * params.height, dtype=np.uint8)
    executor.run(partial(render_band, params), split_bands(pixels, bands))
    return pixels
