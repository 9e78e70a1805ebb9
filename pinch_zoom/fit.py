"""Initial placement of content inside the viewport."""
from __future__ import annotations

from dataclasses import dataclass

from pinch_zoom.geometry import Size, Transform


@dataclass(frozen=True)
class FitResult:
    transform: Transform
    fitted_size: Size


def fit_scale(content: Size, viewport: Size) -> float:
    """Return the scale used for the unzoomed view.

    The scale follows the larger viewport side: a landscape viewport matches
    the content height, anything else matches the content width. This is not
    an aspect-preserving "contain" fit, so wide content in a landscape
    viewport can overflow horizontally.
    """
    if viewport.width > viewport.height:
        return viewport.height / content.height
    return viewport.width / content.width


def fit_transform(content: Size, viewport: Size) -> FitResult:
    """Return the centered fit transform for ``content`` in ``viewport``.

    Callers must not pass empty sizes: a zero content side divides by zero
    and a zero viewport side gives a degenerate scale.
    """
    scale = fit_scale(content, viewport)
    fitted = Size(scale * content.width, scale * content.height)
    transform = Transform(
        scale,
        (viewport.width - fitted.width) / 2,
        (viewport.height - fitted.height) / 2,
    )
    return FitResult(transform=transform, fitted_size=fitted)
