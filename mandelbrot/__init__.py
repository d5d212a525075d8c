"""Public API for Mandelbrot rendering utilities."""

from .renderer import (
    LIMIT,
    RenderParameters,
    escape_time,
    escape_times,
    pixel_to_point,
    render,
    render_rows,
)
from .bands import Band, plan_bands, rows_per_band, split_bands
from .parallel import (
    EXECUTORS,
    PoolExecutor,
    ProcessExecutor,
    SequentialExecutor,
    ThreadExecutor,
    get_executor,
    render_image,
)
from .parsing import ParseError, parse_bounds, parse_complex, parse_pair, parse_point
from .imaging import write_image

__all__ = [
    "Band",
    "EXECUTORS",
    "LIMIT",
    "ParseError",
    "PoolExecutor",
    "ProcessExecutor",
    "RenderParameters",
    "SequentialExecutor",
    "ThreadExecutor",
    "escape_time",
    "escape_times",
    "get_executor",
    "parse_bounds",
    "parse_complex",
    "parse_pair",
    "parse_point",
    "pixel_to_point",
    "plan_bands",
    "render",
    "render_image",
    "render_rows",
    "rows_per_band",
    "split_bands",
    "write_image",
]
