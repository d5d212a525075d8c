"""Grayscale image output."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

import numpy as np
import PIL.Image

DEFAULT_FORMAT = "PNG"


def _pil_format_name(path: Path) -> str:
    return PIL.Image.registered_extensions().get(path.suffix.lower(), DEFAULT_FORMAT)


def write_image(
    filename: Union[str, Path],
    pixels: np.ndarray,
    bounds: tuple[int, int],
    image_format: Optional[str] = None,
) -> Path:
    """Write the ``bounds``-sized grayscale ``pixels`` buffer to ``filename``.

    The format follows the file extension and defaults to PNG.
    """

    width, height = bounds
    if pixels.size != width * height:
        raise ValueError(f"pixel buffer holds {pixels.size} bytes, expected {width}x{height}")

    output_path = Path(filename)
    pil_format = image_format.upper() if image_format else _pil_format_name(output_path)
    image = PIL.Image.fromarray(np.ascontiguousarray(pixels, dtype=np.uint8).reshape(height, width))
    image.save(str(output_path), format=pil_format)
    return output_path
