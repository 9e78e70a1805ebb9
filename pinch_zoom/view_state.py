"""Immutable zoom/pan view state and its pure transitions."""
from __future__ import annotations

from dataclasses import dataclass, replace

from pinch_zoom.bounds import compute_clamped_delta
from pinch_zoom.fit import fit_transform
from pinch_zoom.geometry import Point, Size, Transform

DEFAULT_MIN_SCALE = 0.5
DEFAULT_MAX_SCALE = 2.0


@dataclass(frozen=True)
class ScaleBounds:
    min_scale: float = DEFAULT_MIN_SCALE
    max_scale: float = DEFAULT_MAX_SCALE

    def is_valid(self) -> bool:
        return self.min_scale < self.max_scale

    def accepts(self, scale: float) -> bool:
        # A proposal exactly on a bound is rejected, never snapped.
        return self.min_scale < scale < self.max_scale


@dataclass(frozen=True)
class ViewState:
    """Everything needed to map content into the viewport.

    ``user_scale`` is the zoom multiplier on top of the fit scale, so the
    transform's scale is ``fit scale * user_scale``.
    """

    viewport: Size | None = None
    content: Size | None = None
    fitted_size: Size | None = None
    user_scale: float = 1.0
    transform: Transform = Transform()

    @property
    def is_laid_out(self) -> bool:
        return self.viewport is not None and self.fitted_size is not None


def layout_view(state: ViewState, viewport: Size, content: Size) -> ViewState:
    """Return the fit view for a newly measured viewport or new content."""
    result = fit_transform(content, viewport)
    return replace(
        state,
        viewport=viewport,
        content=content,
        fitted_size=result.fitted_size,
        user_scale=1.0,
        transform=result.transform,
    )


def reset_view(state: ViewState) -> ViewState:
    if state.viewport is None or state.content is None:
        return state
    return layout_view(state, state.viewport, state.content)


def pan_view(state: ViewState, delta: Point) -> ViewState:
    """Return the state after a clamped drag by ``delta``.

    Translation only moves once the user has zoomed past the fit scale.
    """
    if not state.is_laid_out:
        return state
    dx, dy = compute_clamped_delta(
        delta, state.transform, state.fitted_size, state.user_scale, state.viewport
    )
    if state.user_scale <= 1.0:
        return state
    return replace(state, transform=state.transform.post_translate(dx, dy))


def scale_pivot(state: ViewState, focus: Point) -> Point:
    """Return the viewport center while the zoomed content still fits on an
    axis, otherwise the gesture focus."""
    width, height = state.viewport.as_tuple()
    scaled_width = state.fitted_size.width * state.user_scale
    scaled_height = state.fitted_size.height * state.user_scale
    if scaled_width <= width or scaled_height <= height:
        return (width / 2, height / 2)
    return focus


def scale_view(
    state: ViewState, bounds: ScaleBounds, focus: Point, factor: float
) -> ViewState | None:
    """Return the state scaled by ``factor`` or ``None`` if out of bounds."""
    if not state.is_laid_out:
        return None
    new_scale = state.user_scale * factor
    if not bounds.accepts(new_scale):
        return None
    scaled = replace(state, user_scale=new_scale)
    pivot = scale_pivot(scaled, focus)
    return replace(scaled, transform=state.transform.post_scale(factor, pivot))
