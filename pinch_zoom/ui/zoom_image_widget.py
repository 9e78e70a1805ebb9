"""Qt host widget that feeds input into the gesture controller."""
from __future__ import annotations

import logging
from pathlib import Path

from PyQt5 import QtCore, QtGui, QtWidgets

from pinch_zoom.geometry import Size, Transform
from pinch_zoom.gesture_controller import PRIMARY_POINTER_ID, GestureStateMachine
from pinch_zoom.view_state import ScaleBounds

logger = logging.getLogger(__name__)

_TOUCH_EVENTS = (
    QtCore.QEvent.TouchBegin,
    QtCore.QEvent.TouchUpdate,
    QtCore.QEvent.TouchEnd,
)


def to_qtransform(transform: Transform) -> QtGui.QTransform:
    m = transform.to_matrix()
    return QtGui.QTransform(m[0, 0], m[1, 0], m[0, 1], m[1, 1], m[0, 2], m[1, 2])


class ZoomImageWidget(QtWidgets.QWidget):
    """Displays a pixmap that can be dragged, pinched and double-tapped."""

    transformChanged = QtCore.pyqtSignal(object)

    def __init__(
        self,
        parent: QtWidgets.QWidget | None = None,
        bounds: ScaleBounds | None = None,
        double_tap_ms: float | None = None,
    ) -> None:
        super().__init__(parent)
        self.setAttribute(QtCore.Qt.WA_AcceptTouchEvents)
        self.grabGesture(QtCore.Qt.PinchGesture)
        self.setMinimumSize(320, 240)

        palette = self.palette()
        palette.setColor(QtGui.QPalette.Window, QtGui.QColor("black"))
        self.setPalette(palette)
        self.setAutoFillBackground(True)

        controller_kwargs = {"on_transform_changed": self._handle_transform_changed}
        if double_tap_ms is not None:
            controller_kwargs["double_tap_ms"] = double_tap_ms
        self._controller = GestureStateMachine(bounds, **controller_kwargs)
        self._pixmap: QtGui.QPixmap | None = None

    @property
    def controller(self) -> GestureStateMachine:
        return self._controller

    def pixmap(self) -> QtGui.QPixmap | None:
        return self._pixmap

    def set_zoom_scale(self, min_scale: float, max_scale: float) -> bool:
        return self._controller.configure(min_scale, max_scale)

    def set_pixmap(self, pixmap: QtGui.QPixmap | None) -> None:
        self._pixmap = pixmap
        self._relayout()
        self.update()

    def set_image_path(self, path: Path) -> bool:
        pixmap = QtGui.QPixmap(str(path))
        if pixmap.isNull():
            logger.warning("Failed to load image %s", path)
            return False
        logger.info("Loaded image %s (%dx%d)", path, pixmap.width(), pixmap.height())
        self.set_pixmap(pixmap)
        return True

    def _relayout(self) -> None:
        if self._pixmap is None or self._pixmap.isNull():
            return
        viewport = Size(self.width(), self.height())
        content = Size(self._pixmap.width(), self._pixmap.height())
        if viewport.is_empty() or content.is_empty():
            return
        self._controller.on_layout(viewport, content)

    def _handle_transform_changed(self, transform: Transform) -> None:
        self.transformChanged.emit(transform)
        self.update()

    # ------------------------------------------------------------------
    # Qt event handlers
    # ------------------------------------------------------------------
    def resizeEvent(self, event: QtGui.QResizeEvent) -> None:  # noqa: N802
        super().resizeEvent(event)
        self._relayout()

    def paintEvent(self, event: QtGui.QPaintEvent) -> None:  # noqa: N802
        if self._pixmap is None or self._pixmap.isNull():
            return
        painter = QtGui.QPainter(self)
        painter.setRenderHint(QtGui.QPainter.SmoothPixmapTransform)
        painter.setTransform(to_qtransform(self._controller.current_transform()))
        painter.drawPixmap(0, 0, self._pixmap)
        painter.end()

    def mousePressEvent(self, event: QtGui.QMouseEvent) -> None:  # noqa: N802
        if event.button() != QtCore.Qt.LeftButton:
            super().mousePressEvent(event)
            return
        self._controller.on_pointer_down(
            PRIMARY_POINTER_ID, (event.x(), event.y()), event.timestamp()
        )
        event.accept()

    def mouseMoveEvent(self, event: QtGui.QMouseEvent) -> None:  # noqa: N802
        if not event.buttons() & QtCore.Qt.LeftButton:
            super().mouseMoveEvent(event)
            return
        self._controller.on_pointer_move(PRIMARY_POINTER_ID, (event.x(), event.y()))
        event.accept()

    def mouseReleaseEvent(self, event: QtGui.QMouseEvent) -> None:  # noqa: N802
        if event.button() != QtCore.Qt.LeftButton:
            super().mouseReleaseEvent(event)
            return
        self._controller.on_pointer_up(PRIMARY_POINTER_ID, event.timestamp())
        event.accept()

    def event(self, event: QtCore.QEvent) -> bool:
        if event.type() == QtCore.QEvent.Gesture:
            return self._handle_gesture(event)
        if event.type() in _TOUCH_EVENTS:
            return self._handle_touch(event)
        if event.type() == QtCore.QEvent.TouchCancel:
            return self._handle_touch_cancel(event)
        return super().event(event)

    def _handle_touch_cancel(self, event: QtGui.QTouchEvent) -> bool:
        self._controller.cancel()
        event.accept()
        return True

    def _handle_touch(self, event: QtGui.QTouchEvent) -> bool:
        timestamp = event.timestamp()
        for point in event.touchPoints():
            position = (point.pos().x(), point.pos().y())
            state = point.state()
            if state == QtCore.Qt.TouchPointPressed:
                if self._controller.active_pointers:
                    self._controller.on_secondary_pointer_down(position, point.id())
                else:
                    self._controller.on_pointer_down(point.id(), position, timestamp)
            elif state == QtCore.Qt.TouchPointMoved:
                self._controller.on_pointer_move(point.id(), position)
            elif state == QtCore.Qt.TouchPointReleased:
                if len(self._controller.active_pointers) > 1:
                    self._controller.on_secondary_pointer_up(point.id())
                else:
                    self._controller.on_pointer_up(point.id(), timestamp)
        event.accept()
        return True

    def _handle_gesture(self, event: QtWidgets.QGestureEvent) -> bool:
        pinch = event.gesture(QtCore.Qt.PinchGesture)
        if pinch is None:
            return super().event(event)
        if pinch.state() == QtCore.Qt.GestureStarted:
            self._controller.on_scale_begin()
        if pinch.changeFlags() & QtWidgets.QPinchGesture.ScaleFactorChanged:
            center = self.mapFromGlobal(pinch.centerPoint().toPoint())
            self._controller.on_scale((center.x(), center.y()), pinch.scaleFactor())
        event.accept(pinch)
        return True
