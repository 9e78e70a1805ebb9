from .fit import FitResult, fit_transform
from .geometry import Point, Rect, Size, Transform
from .gesture_controller import GestureMode, GestureStateMachine, PointerRole
from .tap_tracker import MAX_DOUBLE_TAP_DURATION_MS, TapTracker
from .view_state import ScaleBounds

__all__ = [
    "Point",
    "Size",
    "Rect",
    "Transform",
    "FitResult",
    "fit_transform",
    "TapTracker",
    "MAX_DOUBLE_TAP_DURATION_MS",
    "ScaleBounds",
    "GestureMode",
    "PointerRole",
    "GestureStateMachine",
]
