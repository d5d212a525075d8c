import numpy as np
import pytest

from mandelbrot import (
    RenderParameters,
    escape_time,
    escape_times,
    pixel_to_point,
    render,
    render_rows,
)


def test_pixel_to_point():
    assert pixel_to_point((100, 100), (25, 75), complex(-1.0, 1.0), complex(1.0, -1.0)) == complex(-0.5, -0.5)


def test_pixel_to_point_maps_far_edges():
    upper_left = complex(-2.0, 1.5)
    lower_right = complex(1.0, -1.5)
    assert pixel_to_point((300, 200), (0, 0), upper_left, lower_right) == upper_left
    assert pixel_to_point((300, 200), (300, 200), upper_left, lower_right) == lower_right


@pytest.mark.parametrize("limit", [1, 2, 50, 255, 1000])
def test_origin_never_escapes(limit):
    assert escape_time(0j, limit) is None


@pytest.mark.parametrize("c", [2.5 + 0j, -2.01 + 0j, 0 + 3j, 1.5 + 1.5j, -100 - 100j])
def test_points_outside_radius_escape_immediately(c):
    assert escape_time(c) == 0


def test_escape_time_counts_iterations():
    # z1 = 1, z2 = 2, z3 = 5 -> escapes on the third application
    assert escape_time(1 + 0j) == 2
    assert escape_time(-1 + 0j) is None
    assert escape_time(0.25 + 0j, 255) is None


def test_escape_times_matches_scalar_classifier():
    real = np.linspace(-2.2, 0.8, 61)
    imag = np.linspace(-1.3, 1.3, 41)
    counts = escape_times(real[np.newaxis, :], imag[:, np.newaxis], 100)

    assert counts.shape == (41, 61)
    for row, y in enumerate(imag):
        for col, x in enumerate(real):
            expected = escape_time(complex(x, y), 100)
            assert counts[row, col] == (-1 if expected is None else expected)


def test_escape_times_survives_overflow():
    counts = escape_times(np.array([1e300, 0.0]), np.array([1e300, 0.0]), 10)
    assert counts[0] == escape_time(complex(1e300, 1e300), 10)
    assert counts[1] == -1


def test_render_matches_per_pixel_mapping():
    bounds = (23, 17)
    upper_left = complex(-1.2, 0.35)
    lower_right = complex(-1.0, 0.2)
    pixels = np.zeros(bounds[0] * bounds[1], dtype=np.uint8)

    render(pixels, bounds, upper_left, lower_right)

    for row in range(bounds[1]):
        for col in range(bounds[0]):
            count = escape_time(pixel_to_point(bounds, (col, row), upper_left, lower_right), 255)
            expected = 0 if count is None else 255 - count
            assert pixels[row * bounds[0] + col] == expected


def test_render_paints_interior_black_and_exterior_bright():
    pixels = np.zeros(3, dtype=np.uint8)
    # Row of points: 0 (member), 1.5 (escapes at iteration 1), 3 (escapes at once)
    render(pixels, (3, 1), complex(0.0, 0.0), complex(4.5, -1.0))

    assert list(pixels) == [0, 254, 255]


def test_render_rejects_mismatched_buffer():
    with pytest.raises(ValueError, match="expected"):
        render(np.zeros(10, dtype=np.uint8), (4, 3), complex(-2, 1), complex(1, -1))


def test_render_rows_uses_global_row_index():
    params = RenderParameters(16, 12, complex(-2.0, 1.2), complex(0.6, -1.2))
    whole = np.zeros(16 * 12, dtype=np.uint8)
    render_rows(whole, params, 0, 12)

    part = np.zeros(16 * 5, dtype=np.uint8)
    render_rows(part, params, 4, 5)

    assert np.array_equal(part, whole[4 * 16:9 * 16])


def test_render_parameters_validate_bounds():
    with pytest.raises(ValueError):
        RenderParameters(0, 10, complex(-2, 1), complex(1, -1))
    with pytest.raises(ValueError):
        RenderParameters(10, 10, complex(-2, 1), complex(1, -1), limit=0)


def test_late_escapes_clamp_to_black():
    c = complex(0.2501, 0.0)
    count = escape_time(c, 600)
    assert count is not None and count > 255

    pixels = np.zeros(1, dtype=np.uint8)
    render(pixels, (1, 1), c, complex(1.0, -1.0), limit=600)

    assert pixels[0] == 0
