"""Gesture state machine driving the zoom/pan transform.

The controller consumes a normalized pointer stream from the host (pointer
down/move/up, secondary pointers, pinch callbacks) and keeps the live
transform. It never polls a clock and never renders; hosts read
``current_transform()`` or subscribe through ``on_transform_changed``.
"""
from __future__ import annotations

import logging
from enum import Enum, auto
from typing import Callable

from pinch_zoom.bounds import ClampContext, clamp_context
from pinch_zoom.geometry import Point, Size, Transform
from pinch_zoom.tap_tracker import MAX_DOUBLE_TAP_DURATION_MS, TapTracker
from pinch_zoom.view_state import (
    ScaleBounds,
    ViewState,
    layout_view,
    pan_view,
    reset_view,
    scale_view,
)

logger = logging.getLogger(__name__)

PRIMARY_POINTER_ID = 0


class GestureMode(Enum):
    NONE = auto()
    DRAG = auto()
    ZOOM = auto()


class PointerRole(Enum):
    PRIMARY = auto()
    SECONDARY = auto()


class GestureStateMachine:
    """Owns the transform, gesture mode and tap state for one viewport."""

    def __init__(
        self,
        bounds: ScaleBounds | None = None,
        *,
        double_tap_ms: float = MAX_DOUBLE_TAP_DURATION_MS,
        on_transform_changed: Callable[[Transform], None] | None = None,
    ) -> None:
        self._bounds = ScaleBounds()
        if bounds is not None:
            self.configure(bounds.min_scale, bounds.max_scale)
        self._state = ViewState()
        self._mode = GestureMode.NONE
        self._pointers: dict[int, PointerRole] = {}
        self._tracked_pointer: int | None = None
        self._last_point: Point | None = None
        self._taps = TapTracker(double_tap_ms)
        self._on_transform_changed = on_transform_changed

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def mode(self) -> GestureMode:
        return self._mode

    @property
    def scale_bounds(self) -> ScaleBounds:
        return self._bounds

    @property
    def user_scale(self) -> float:
        return self._state.user_scale

    @property
    def view_state(self) -> ViewState:
        return self._state

    @property
    def tap_tracker(self) -> TapTracker:
        return self._taps

    @property
    def active_pointers(self) -> dict[int, PointerRole]:
        return dict(self._pointers)

    def current_transform(self) -> Transform:
        return self._state.transform

    def clamp_context(self) -> ClampContext | None:
        if not self._state.is_laid_out:
            return None
        return clamp_context(
            self._state.fitted_size, self._state.user_scale, self._state.viewport
        )

    # ------------------------------------------------------------------
    # Configuration and layout
    # ------------------------------------------------------------------
    def configure(self, min_scale: float, max_scale: float) -> bool:
        bounds = ScaleBounds(min_scale, max_scale)
        if not bounds.is_valid():
            logger.warning(
                "Rejected scale bounds min=%s max=%s; keeping min=%s max=%s",
                min_scale,
                max_scale,
                self._bounds.min_scale,
                self._bounds.max_scale,
            )
            return False
        self._bounds = bounds
        return True

    def on_layout(self, viewport: Size, content: Size) -> Transform:
        """Refit the content; viewport and content must not be empty."""
        logger.debug(
            "Layout viewport=%sx%s content=%sx%s",
            viewport.width,
            viewport.height,
            content.width,
            content.height,
        )
        self._commit(layout_view(self._state, viewport, content))
        return self._state.transform

    def reset(self) -> Transform:
        self._commit(reset_view(self._state))
        return self._state.transform

    # ------------------------------------------------------------------
    # Pointer lifecycle
    # ------------------------------------------------------------------
    def on_pointer_down(self, pointer_id: int, position: Point, timestamp: float) -> None:
        self._taps.register_pointer_down(timestamp)
        self._pointers = {pointer_id: PointerRole.PRIMARY}
        self._track(pointer_id, position)
        self._set_mode(GestureMode.DRAG)
        self._log_location()

    def on_secondary_pointer_down(
        self, position: Point, pointer_id: int | None = None
    ) -> None:
        if pointer_id is None:
            pointer_id = self._next_pointer_id()
        self._pointers[pointer_id] = PointerRole.SECONDARY
        self._track(pointer_id, position)
        self._set_mode(GestureMode.ZOOM)
        self._log_location()

    def on_pointer_move(self, pointer_id: int, position: Point) -> None:
        if pointer_id != self._tracked_pointer or self._last_point is None:
            return
        pannable = self._mode is GestureMode.ZOOM or (
            self._mode is GestureMode.DRAG
            and self._state.user_scale > self._bounds.min_scale
        )
        if not pannable:
            return
        delta = (position[0] - self._last_point[0], position[1] - self._last_point[1])
        self._commit(pan_view(self._state, delta))
        self._last_point = position
        self._log_location()

    def on_pointer_up(self, pointer_id: int, timestamp: float) -> None:
        """Handle the last pointer leaving the surface.

        Pointers other than ``pointer_id`` still recorded at this point missed
        their release and are dropped with it.
        """
        if self._taps.register_pointer_up(timestamp):
            logger.debug("Double tap detected; resetting to fit")
            self._commit(reset_view(self._state))
        self._pointers.pop(pointer_id, None)
        if self._pointers:
            logger.debug("Dropping stale pointers %s", sorted(self._pointers))
        self._release_all()
        self._log_location()

    def cancel(self) -> None:
        """Abandon the current gesture without evaluating a tap."""
        if self._pointers:
            logger.debug("Gesture cancelled with pointers %s", sorted(self._pointers))
        self._taps.reset()
        self._release_all()

    def on_secondary_pointer_up(self, pointer_id: int | None = None) -> None:
        # A single-finger drag resumes only after a fresh pointer-down.
        if pointer_id is None:
            pointer_id = self._last_secondary_pointer()
        if pointer_id is not None:
            self._pointers.pop(pointer_id, None)
        self._set_mode(GestureMode.NONE)
        self._log_location()

    # ------------------------------------------------------------------
    # Pinch gesture
    # ------------------------------------------------------------------
    def on_scale_begin(self) -> bool:
        self._set_mode(GestureMode.ZOOM)
        return True

    def on_scale(self, focus: Point, factor: float) -> bool:
        updated = scale_view(self._state, self._bounds, focus, factor)
        if updated is None:
            logger.debug(
                "Rejected scale factor %.4f at user scale %.4f",
                factor,
                self._state.user_scale,
            )
            return False
        self._commit(updated)
        return True

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _track(self, pointer_id: int, position: Point) -> None:
        self._tracked_pointer = pointer_id
        self._last_point = position

    def _release_all(self) -> None:
        self._pointers.clear()
        self._tracked_pointer = None
        self._last_point = None
        self._set_mode(GestureMode.NONE)

    def _next_pointer_id(self) -> int:
        return max(self._pointers, default=PRIMARY_POINTER_ID) + 1

    def _last_secondary_pointer(self) -> int | None:
        secondary = [
            pointer_id
            for pointer_id, role in self._pointers.items()
            if role is PointerRole.SECONDARY
        ]
        return secondary[-1] if secondary else None

    def _set_mode(self, mode: GestureMode) -> None:
        if mode is not self._mode:
            logger.debug("Gesture mode %s -> %s", self._mode.name, mode.name)
        self._mode = mode

    def _commit(self, state: ViewState) -> None:
        previous = self._state.transform
        self._state = state
        if state.transform != previous and self._on_transform_changed is not None:
            self._on_transform_changed(state.transform)

    def _log_location(self) -> None:
        if logger.isEnabledFor(logging.DEBUG):
            transform = self._state.transform
            logger.debug(
                "Content location: left=%.2f top=%.2f",
                transform.translate_x,
                transform.translate_y,
            )
