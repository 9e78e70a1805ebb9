"""Translation limits that keep zoomed content covering the viewport."""
from __future__ import annotations

import math
from dataclasses import dataclass

from pinch_zoom.geometry import Point, Size, Transform


@dataclass(frozen=True)
class ClampContext:
    """Amount the scaled content exceeds the viewport on each axis."""

    overflow_right: float
    overflow_bottom: float


def _round_half_up(value: float) -> float:
    return float(math.floor(value + 0.5))


def scaled_size(fitted_size: Size, user_scale: float) -> Size:
    return Size(
        _round_half_up(fitted_size.width * user_scale),
        _round_half_up(fitted_size.height * user_scale),
    )


def clamp_context(fitted_size: Size, user_scale: float, viewport: Size) -> ClampContext:
    scaled = scaled_size(fitted_size, user_scale)
    return ClampContext(
        overflow_right=scaled.width - viewport.width,
        overflow_bottom=scaled.height - viewport.height,
    )


def _clamp_axis(offset: float, delta: float, overflow: float) -> float:
    if offset + delta > 0:
        return -offset
    if offset + delta < -overflow:
        return -(offset + overflow)
    return delta


def compute_clamped_delta(
    delta: Point,
    transform: Transform,
    fitted_size: Size,
    user_scale: float,
    viewport: Size,
) -> Point:
    """Return ``delta`` limited so no edge gap opens on an overflowing axis.

    Content smaller than the viewport on both axes is unconstrained. When only
    one axis overflows, the other axis is locked and the overflowing one is
    pinned between ``0`` and ``-overflow``.
    """
    dx, dy = delta
    scaled = scaled_size(fitted_size, user_scale)
    fits_x = scaled.width < viewport.width
    fits_y = scaled.height < viewport.height
    if fits_x and fits_y:
        return (dx, dy)

    limit_x = limit_y = False
    if fits_x:
        dx = 0.0
        limit_y = True
    elif fits_y:
        dy = 0.0
        limit_x = True
    else:
        limit_x = limit_y = True

    context = clamp_context(fitted_size, user_scale, viewport)
    if limit_y:
        dy = _clamp_axis(transform.translate_y, dy, context.overflow_bottom)
    if limit_x:
        dx = _clamp_axis(transform.translate_x, dx, context.overflow_right)
    return (dx, dy)
