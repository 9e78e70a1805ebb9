import pytest

from pinch_zoom.fit import fit_scale, fit_transform
from pinch_zoom.geometry import Size, Transform


def test_landscape_viewport_fits_content_height() -> None:
    result = fit_transform(Size(400, 400), Size(800, 600))

    assert result.transform == Transform(1.5, 100.0, 0.0)
    assert result.fitted_size == Size(600.0, 600.0)


def test_portrait_viewport_fits_content_width() -> None:
    result = fit_transform(Size(400, 200), Size(600, 800))

    assert result.transform == Transform(1.5, 0.0, 250.0)
    assert result.fitted_size == Size(600.0, 300.0)


def test_square_viewport_uses_width() -> None:
    assert fit_scale(Size(200, 400), Size(500, 500)) == pytest.approx(2.5)


def test_axis_selection_ignores_content_aspect_ratio() -> None:
    # Wide content in a landscape viewport still matches the height.
    result = fit_transform(Size(1600, 400), Size(800, 600))

    assert result.transform.scale == pytest.approx(1.5)
    assert result.fitted_size.width == pytest.approx(2400.0)
    assert result.transform.translate_x == pytest.approx(-800.0)


def test_fit_is_idempotent() -> None:
    first = fit_transform(Size(640, 480), Size(1024, 768))
    second = fit_transform(Size(640, 480), Size(1024, 768))

    assert first == second
