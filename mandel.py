import os
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Sequence

from mandelbrot import (
    ParseError,
    RenderParameters,
    get_executor,
    parse_bounds,
    parse_point,
    plan_bands,
    render_image,
    write_image,
)

_VERBOSE_FLAGS = {"--verbose", "-v"}

DEFAULT_BACKEND = "threads"
BACKEND_ENV = "MANDELBROT_BACKEND"
WORKERS_ENV = "MANDELBROT_WORKERS"

VERBOSE = False


def log(message, *args, **kwargs):
    if VERBOSE:
        print(message, *args, **kwargs)


def usage(program: str) -> str:
    return (
        "Usage: mandelbrot [-v] FILE PIXELS UPPERLEFT LOWERRIGHT\n"
        f"Example: {program} mandel.png 1000x750 -1.20,0.35 -1,0.20\n"
    )


@dataclass
class RenderConfig:
    output: Path
    params: RenderParameters
    backend: str
    workers: int
    verbose: bool


def _default_workers() -> int:
    return os.cpu_count() or 8


def resolve_render_config(arguments: Sequence[str], environ: Mapping[str, str], verbose: bool = False) -> RenderConfig:
    """Build the render configuration from the four positional arguments and the environment."""

    output, pixels, upper_left, lower_right = arguments
    bounds = parse_bounds(pixels)
    params = RenderParameters(
        width=bounds[0],
        height=bounds[1],
        upper_left=parse_point(upper_left, "upper left corner point"),
        lower_right=parse_point(lower_right, "lower right corner point"),
    )

    backend = environ.get(BACKEND_ENV, DEFAULT_BACKEND).strip().lower() or DEFAULT_BACKEND
    workers_text = environ.get(WORKERS_ENV, "").strip()
    if workers_text:
        try:
            workers = int(workers_text)
        except ValueError:
            raise ParseError("worker count", workers_text, f"{WORKERS_ENV} must be an integer") from None
        if workers < 1:
            raise ParseError("worker count", workers_text, f"{WORKERS_ENV} must be at least 1")
    else:
        workers = _default_workers()

    return RenderConfig(
        output=Path(output),
        params=params,
        backend=backend,
        workers=workers,
        verbose=verbose,
    )


def main(argv: Optional[Sequence[str]] = None, environ: Optional[Mapping[str, str]] = None) -> int:
    global VERBOSE

    argv = list(sys.argv if argv is None else argv)
    environ = os.environ if environ is None else environ
    program = argv[0] if argv else "mandelbrot"

    verbose = any(arg in _VERBOSE_FLAGS for arg in argv[1:])
    arguments = [arg for arg in argv[1:] if arg not in _VERBOSE_FLAGS]
    if len(arguments) != 4:
        sys.stderr.write(usage(program))
        return 1

    VERBOSE = verbose

    try:
        config = resolve_render_config(arguments, environ, verbose=verbose)
        executor = get_executor(config.backend, config.workers)
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    params = config.params
    log("Rendering %dx%d from %s to %s" % (params.width, params.height, params.upper_left, params.lower_right))
    log("Backend %s with %d workers" % (executor.name, executor.workers))

    bands = plan_bands(params, executor.rows_per_band(params.height))
    log("Split into %d bands of up to %d rows" % (len(bands), max(band.height for band in bands)))
    for band in bands[:: max(1, len(bands) // 8)]:
        log("  band %d: rows [%d, %d) spans %s .. %s" % (band.index, band.top, band.top + band.height, band.upper_left, band.lower_right))

    start = time.perf_counter()
    pixels = render_image(params, executor, bands=bands)
    log("Rendered in %.3fs" % (time.perf_counter() - start))

    try:
        write_image(config.output, pixels, params.bounds)
    except OSError as exc:
        print(f"error: cannot write {config.output}: {exc}", file=sys.stderr)
        return 1

    log("Image saved to %s" % config.output)
    return 0


if __name__ == '__main__':
    sys.exit(main())
