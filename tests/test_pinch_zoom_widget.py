import os
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from types import SimpleNamespace

import pytest

try:  # pragma: no cover - allows tests to be skipped in headless CI without PyQt5
    from PyQt5 import QtCore, QtGui, QtWidgets
    from pinch_zoom.ui.zoom_image_widget import ZoomImageWidget, to_qtransform
except ImportError:  # pragma: no cover
    pytest.skip("PyQt5 not available", allow_module_level=True)

from pinch_zoom.geometry import Transform
from pinch_zoom.gesture_controller import GestureMode, PointerRole
from pinch_zoom.view_state import ScaleBounds


@pytest.fixture(scope="module")
def qapp():
    app = QtWidgets.QApplication.instance()
    if app is None:
        app = QtWidgets.QApplication([])
    yield app


def _widget_with_image() -> ZoomImageWidget:
    widget = ZoomImageWidget()
    widget.resize(800, 600)
    pixmap = QtGui.QPixmap(400, 400)
    pixmap.fill(QtGui.QColor("white"))
    widget.set_pixmap(pixmap)
    return widget


def test_to_qtransform_maps_like_transform(qapp) -> None:
    transform = Transform(2.0, 10.0, 20.0)

    mapped = to_qtransform(transform).map(QtCore.QPointF(1.0, 1.0))

    assert (mapped.x(), mapped.y()) == transform.map_point((1.0, 1.0))


def test_setting_pixmap_fits_it_into_the_widget(qapp) -> None:
    widget = _widget_with_image()

    assert widget.controller.current_transform() == Transform(1.5, 100.0, 0.0)


def test_transform_changed_signal_emitted(qapp) -> None:
    widget = ZoomImageWidget()
    widget.resize(800, 600)
    seen = []
    widget.transformChanged.connect(seen.append)

    pixmap = QtGui.QPixmap(400, 400)
    widget.set_pixmap(pixmap)
    widget.controller.on_scale((400.0, 300.0), 1.5)

    assert seen == [Transform(1.5, 100.0, 0.0), Transform(2.25, -50.0, -150.0)]


def test_without_pixmap_no_layout_happens(qapp) -> None:
    widget = ZoomImageWidget()
    widget.resize(800, 600)

    widget.set_pixmap(None)

    assert widget.controller.view_state.is_laid_out is False


def test_set_zoom_scale_validates_bounds(qapp) -> None:
    widget = ZoomImageWidget(bounds=ScaleBounds(0.25, 3.0))

    assert widget.controller.scale_bounds == ScaleBounds(0.25, 3.0)
    assert widget.set_zoom_scale(2.0, 1.0) is False
    assert widget.set_zoom_scale(1.0, 5.0) is True
    assert widget.controller.scale_bounds == ScaleBounds(1.0, 5.0)


def test_missing_image_path_is_reported(qapp, tmp_path) -> None:
    widget = ZoomImageWidget()

    assert widget.set_image_path(tmp_path / "missing.png") is False
    assert widget.pixmap() is None


def test_mouse_press_starts_drag(qapp) -> None:
    widget = _widget_with_image()
    event = QtGui.QMouseEvent(
        QtCore.QEvent.MouseButtonPress,
        QtCore.QPointF(50.0, 60.0),
        QtCore.Qt.LeftButton,
        QtCore.Qt.LeftButton,
        QtCore.Qt.NoModifier,
    )

    widget.mousePressEvent(event)

    assert widget.controller.mode is GestureMode.DRAG


FIT = Transform(1.5, 100.0, 0.0)
ZOOMED = Transform(2.25, -50.0, -150.0)


def _mouse_event(kind, pos, button, buttons, timestamp=0) -> QtGui.QMouseEvent:
    event = QtGui.QMouseEvent(
        kind, QtCore.QPointF(*pos), button, buttons, QtCore.Qt.NoModifier
    )
    event.setTimestamp(timestamp)
    return event


def _click(widget: ZoomImageWidget, pos, down: int, up: int) -> None:
    left = QtCore.Qt.LeftButton
    widget.mousePressEvent(
        _mouse_event(QtCore.QEvent.MouseButtonPress, pos, left, left, down)
    )
    widget.mouseReleaseEvent(
        _mouse_event(
            QtCore.QEvent.MouseButtonRelease, pos, left, QtCore.Qt.NoButton, up
        )
    )


def _touch_point(point_id: int, state, pos):
    return SimpleNamespace(
        id=lambda: point_id,
        state=lambda: state,
        pos=lambda: QtCore.QPointF(*pos),
    )


def _touch_event(timestamp: int, *points):
    return SimpleNamespace(
        timestamp=lambda: timestamp,
        touchPoints=lambda: list(points),
        accept=lambda: None,
    )


def _pinch_event(state, flags, factor: float):
    pinch = SimpleNamespace(
        state=lambda: state,
        changeFlags=lambda: flags,
        centerPoint=lambda: QtCore.QPointF(0.0, 0.0),
        scaleFactor=lambda: factor,
    )
    return SimpleNamespace(
        gesture=lambda kind: pinch if kind == QtCore.Qt.PinchGesture else None,
        accept=lambda gesture: None,
    )


def test_mouse_drag_pans_zoomed_image(qapp) -> None:
    widget = _widget_with_image()
    widget.controller.on_scale((400.0, 300.0), 1.5)
    assert widget.controller.current_transform() == ZOOMED
    left = QtCore.Qt.LeftButton

    widget.mousePressEvent(
        _mouse_event(QtCore.QEvent.MouseButtonPress, (500, 500), left, left, 0)
    )
    widget.mouseMoveEvent(
        _mouse_event(QtCore.QEvent.MouseMove, (400, 500), QtCore.Qt.NoButton, left)
    )

    assert widget.controller.current_transform() == Transform(2.25, -100.0, -150.0)

    widget.mouseReleaseEvent(
        _mouse_event(
            QtCore.QEvent.MouseButtonRelease, (400, 500), left, QtCore.Qt.NoButton, 900
        )
    )

    assert widget.controller.mode is GestureMode.NONE


def test_mouse_move_without_left_button_is_ignored(qapp) -> None:
    widget = _widget_with_image()
    widget.controller.on_scale((400.0, 300.0), 1.5)
    left = QtCore.Qt.LeftButton
    widget.mousePressEvent(
        _mouse_event(QtCore.QEvent.MouseButtonPress, (500, 500), left, left, 0)
    )

    widget.mouseMoveEvent(
        _mouse_event(
            QtCore.QEvent.MouseMove, (400, 500), QtCore.Qt.NoButton, QtCore.Qt.NoButton
        )
    )

    assert widget.controller.current_transform() == ZOOMED


def test_quick_mouse_double_click_resets_to_fit(qapp) -> None:
    widget = _widget_with_image()
    widget.controller.on_scale((400.0, 300.0), 1.5)

    _click(widget, (200, 200), 1000, 1050)
    _click(widget, (200, 200), 1100, 1150)

    assert widget.controller.current_transform() == FIT
    assert widget.controller.user_scale == 1.0


def test_slow_mouse_double_click_keeps_zoom(qapp) -> None:
    widget = _widget_with_image()
    widget.controller.on_scale((400.0, 300.0), 1.5)

    _click(widget, (200, 200), 1000, 1150)
    _click(widget, (200, 200), 1300, 1400)

    assert widget.controller.current_transform() == ZOOMED


def test_touch_points_map_to_primary_and_secondary(qapp) -> None:
    widget = _widget_with_image()
    controller = widget.controller

    widget._handle_touch(
        _touch_event(0, _touch_point(3, QtCore.Qt.TouchPointPressed, (10, 10)))
    )
    assert controller.mode is GestureMode.DRAG
    assert controller.active_pointers == {3: PointerRole.PRIMARY}

    widget._handle_touch(
        _touch_event(
            20,
            _touch_point(3, QtCore.Qt.TouchPointStationary, (10, 10)),
            _touch_point(5, QtCore.Qt.TouchPointPressed, (300, 300)),
        )
    )
    assert controller.mode is GestureMode.ZOOM
    assert controller.active_pointers == {
        3: PointerRole.PRIMARY,
        5: PointerRole.SECONDARY,
    }

    widget._handle_touch(
        _touch_event(40, _touch_point(5, QtCore.Qt.TouchPointReleased, (300, 300)))
    )
    assert controller.mode is GestureMode.NONE
    assert controller.active_pointers == {3: PointerRole.PRIMARY}

    widget._handle_touch(
        _touch_event(60, _touch_point(3, QtCore.Qt.TouchPointReleased, (10, 10)))
    )
    assert controller.active_pointers == {}


def test_touch_move_pans_with_tracked_point(qapp) -> None:
    widget = _widget_with_image()
    widget.controller.on_scale((400.0, 300.0), 1.5)

    widget._handle_touch(
        _touch_event(0, _touch_point(1, QtCore.Qt.TouchPointPressed, (500, 500)))
    )
    widget._handle_touch(
        _touch_event(10, _touch_point(1, QtCore.Qt.TouchPointMoved, (400, 500)))
    )

    assert widget.controller.current_transform() == Transform(2.25, -100.0, -150.0)


def test_quick_double_touch_resets_to_fit(qapp) -> None:
    widget = _widget_with_image()
    widget.controller.on_scale((400.0, 300.0), 1.5)

    for down, up in ((1000, 1040), (1100, 1140)):
        widget._handle_touch(
            _touch_event(down, _touch_point(1, QtCore.Qt.TouchPointPressed, (50, 50)))
        )
        widget._handle_touch(
            _touch_event(up, _touch_point(1, QtCore.Qt.TouchPointReleased, (50, 50)))
        )

    assert widget.controller.current_transform() == FIT


def test_touch_cancel_releases_pointers(qapp) -> None:
    widget = _widget_with_image()
    controller = widget.controller
    widget._handle_touch(
        _touch_event(0, _touch_point(7, QtCore.Qt.TouchPointPressed, (10, 10)))
    )

    handled = widget.event(
        SimpleNamespace(type=lambda: QtCore.QEvent.TouchCancel, accept=lambda: None)
    )

    assert handled is True
    assert controller.mode is GestureMode.NONE
    assert controller.active_pointers == {}

    widget._handle_touch(
        _touch_event(100, _touch_point(8, QtCore.Qt.TouchPointPressed, (20, 20)))
    )
    assert controller.mode is GestureMode.DRAG
    assert controller.active_pointers == {8: PointerRole.PRIMARY}
    assert controller.tap_tracker.pending_count == 1


def test_pinch_start_enters_zoom_and_scales(qapp) -> None:
    widget = _widget_with_image()

    widget._handle_gesture(
        _pinch_event(
            QtCore.Qt.GestureStarted, QtWidgets.QPinchGesture.ScaleFactorChanged, 1.2
        )
    )

    assert widget.controller.mode is GestureMode.ZOOM
    assert widget.controller.user_scale == pytest.approx(1.2)
    # Content still fits vertically, so the viewport center is the pivot.
    transform = widget.controller.current_transform()
    assert transform.translate_x == pytest.approx(40.0)
    assert transform.translate_y == pytest.approx(-60.0)


def test_pinch_update_without_scale_change_is_ignored(qapp) -> None:
    widget = _widget_with_image()

    widget._handle_gesture(
        _pinch_event(
            QtCore.Qt.GestureUpdated, QtWidgets.QPinchGesture.RotationAngleChanged, 1.2
        )
    )

    assert widget.controller.user_scale == 1.0
    assert widget.controller.current_transform() == FIT
    assert widget.controller.mode is GestureMode.NONE
