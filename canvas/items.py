"""
canvas/items.py

PyQt6 graphics items for nodes, joints and connector paths.

Items only render; positions and connections are driven by the
interaction engine through ``JointScene``.
"""

from __future__ import annotations

from typing import Optional

from PyQt6.QtCore import Qt, QRectF
from PyQt6.QtGui import QBrush, QColor, QPainterPath, QPen
from PyQt6.QtWidgets import QGraphicsEllipseItem, QGraphicsPathItem, QGraphicsRectItem

from canvas.paths import ConnectorPath
from models import Joint, Node
from settings import CanvasSettings
from utils import hex_to_qcolor, to_qpoint

NODE_ID_KEY = 1       # QGraphicsItem.data key for node id
PIN_ID_KEY = 2        # QGraphicsItem.data key for joint pin id
CONNECTOR_ID_KEY = 3  # QGraphicsItem.data key for connector id


class NodeItem(QGraphicsRectItem):
    """A node's body; the whole rect is its grab region."""

    def __init__(self, node: Node, width: float, height: float, style: CanvasSettings):
        super().__init__(0, 0, width, height)
        self.node = node
        self.setData(NODE_ID_KEY, node.node_id)
        self.setPos(node.x, node.y)
        self.setBrush(QBrush(hex_to_qcolor(style.colors.node_fill, QColor("#1A2236"))))
        self.setPen(QPen(hex_to_qcolor(style.colors.node_border, QColor("#2A3A5C")), 1.5))
        self.setZValue(10)


class JointItem(QGraphicsEllipseItem):
    """A joint circle, parented to its node and centred on the joint offset."""

    def __init__(self, joint: Joint, parent: NodeItem, style: CanvasSettings):
        r = style.joints.radius
        super().__init__(QRectF(-r, -r, 2 * r, 2 * r), parent)
        self.joint = joint
        self.setData(PIN_ID_KEY, joint.pin_id)
        self.setPos(joint.offset.x, joint.offset.y)
        self._brush = QBrush(hex_to_qcolor(style.colors.joint, QColor("#4D96FF")))
        self._hover_brush = QBrush(hex_to_qcolor(style.colors.joint_hover, QColor("#FFFFFF")))
        self.setBrush(self._brush)
        self.setPen(QPen(Qt.PenStyle.NoPen))
        self.highlighted = False

    def set_highlighted(self, on: bool) -> None:
        self.highlighted = on
        self.setBrush(self._hover_brush if on else self._brush)


class ConnectorItem(QGraphicsPathItem):
    """Drawable for a connector, or for the preview path when ``connector_id`` is None."""

    def __init__(self, connector_id: Optional[int], style: CanvasSettings):
        super().__init__()
        self.connector_id = connector_id
        if connector_id is not None:
            self.setData(CONNECTOR_ID_KEY, connector_id)
            self._color = hex_to_qcolor(style.colors.connector, QColor("#6BCB77"))
        else:
            self._color = hex_to_qcolor(style.colors.preview, QColor("#AAAAAA"))
        self._selected_color = hex_to_qcolor(style.colors.connector_selected, QColor("#F9CA24"))
        self._stroke_width = 1.0
        self.selected = False
        self.path_description = ""
        self._apply_pen()

    def set_path(self, path: ConnectorPath) -> None:
        """Rebuild the painter path from the connector's segments."""
        qpath = QPainterPath()
        for seg in path.segments:
            qpath.moveTo(to_qpoint(seg.start))
            qpath.lineTo(to_qpoint(seg.end))
        self._stroke_width = path.stroke_width
        self.path_description = path.to_svg()
        self.setPath(qpath)
        self._apply_pen()

    def set_selected(self, on: bool) -> None:
        self.selected = on
        self._apply_pen()

    def _apply_pen(self) -> None:
        pen = QPen(self._selected_color if self.selected else self._color, self._stroke_width)
        pen.setCapStyle(Qt.PenCapStyle.RoundCap)
        if self.connector_id is None:
            pen.setStyle(Qt.PenStyle.DashLine)
        self.setPen(pen)
