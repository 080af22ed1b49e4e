"""
canvas/view.py

QGraphicsView that supplies the pan/zoom transform and feeds pointer input
into a ``JointEditor``.

Mouse and touch events are turned into ``RawInput`` here and nowhere
else; normalization to one canonical pointer shape happens in the
dispatcher.
"""

from __future__ import annotations

from typing import Optional

from PyQt6.QtCore import Qt, QEvent
from PyQt6.QtGui import QPainter
from PyQt6.QtWidgets import QGraphicsView

from canvas.scene import JointScene
from models import PanZoomState, RawInput
from settings import CanvasZoomSettings

_TOUCH_TYPES = {
    QEvent.Type.TouchBegin: "touchstart",
    QEvent.Type.TouchUpdate: "touchmove",
    QEvent.Type.TouchEnd: "touchend",
    QEvent.Type.TouchCancel: "touchcancel",
}


class JointView(QGraphicsView):
    """
    Graphics view acting as viewport provider and input adapter.

    Zoom:
    - Mouse wheel scales by the configured factor around the cursor
    """

    def __init__(self, scene: JointScene, zoom: Optional[CanvasZoomSettings] = None, parent=None):
        super().__init__(scene, parent)
        self.editor = None
        self._zoom = zoom or CanvasZoomSettings()
        self.setRenderHint(QPainter.RenderHint.Antialiasing, True)
        self.setTransformationAnchor(QGraphicsView.ViewportAnchor.AnchorUnderMouse)
        self.setDragMode(QGraphicsView.DragMode.NoDrag)
        self.setMouseTracking(True)
        self.viewport().setAttribute(Qt.WidgetAttribute.WA_AcceptTouchEvents, True)

    def attach(self, editor) -> None:
        """Route this view's input to ``editor``."""
        self.editor = editor

    # ------------------------------------------------------------------
    # Viewport provider
    # ------------------------------------------------------------------

    def pan_zoom_state(self) -> PanZoomState:
        """Scene -> viewport transform, including scroll offsets."""
        t = self.viewportTransform()
        return PanZoomState(scale=t.m11(), translate_x=t.dx(), translate_y=t.dy())

    # ------------------------------------------------------------------
    # Input adapter
    # ------------------------------------------------------------------

    def _forward_mouse(self, event_type: str, event) -> bool:
        if self.editor is None or event.button() not in (Qt.MouseButton.LeftButton, Qt.MouseButton.NoButton):
            return False
        p = event.globalPosition()
        self.editor.dispatch(RawInput(event_type, client_x=p.x(), client_y=p.y()))
        return True

    def mousePressEvent(self, event):
        if self._forward_mouse("mousedown", event):
            self.setFocus()
            event.accept()
            return
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event):
        if self._forward_mouse("mousemove", event):
            event.accept()
            return
        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event):
        if self._forward_mouse("mouseup", event):
            event.accept()
            return
        super().mouseReleaseEvent(event)

    def viewportEvent(self, event):
        event_type = _TOUCH_TYPES.get(event.type())
        if event_type is not None and self.editor is not None:
            if event_type in ("touchend", "touchcancel"):
                touches = []
            else:
                touches = [(p.globalPosition().x(), p.globalPosition().y()) for p in event.points()]
            self.editor.dispatch(RawInput(event_type, touches=touches))
            event.accept()
            return True
        return super().viewportEvent(event)

    def keyPressEvent(self, event):
        if self.editor is not None and event.key() == Qt.Key.Key_Delete:
            if self.editor.key_press("Delete"):
                event.accept()
                return
        super().keyPressEvent(event)

    def wheelEvent(self, event):
        """Zoom with mouse wheel."""
        delta = event.angleDelta().y()
        factor = self._zoom.wheel_factor if delta > 0 else 1 / self._zoom.wheel_factor
        self.scale(factor, factor)

    def zoom_reset(self):
        """Reset zoom to 100% (1:1 scale)."""
        self.resetTransform()
