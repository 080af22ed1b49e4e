"""
canvas/scene.py

QGraphicsScene implementing the scene provider for ``JointEditor``.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from PyQt6.QtCore import QPoint, QPointF
from PyQt6.QtWidgets import QGraphicsItemGroup, QGraphicsScene

from canvas.items import ConnectorItem, JointItem, NodeItem
from errors import SceneConfigurationError
from models import Hit, HitKind, Joint, Node, NO_HIT, Point, Rect
from settings import CanvasSettings


class JointScene(QGraphicsScene):
    """
    Graphics scene holding nodes, their joints, and a connections container.

    Connector drawables are mounted in a single ``QGraphicsItemGroup`` that
    sits below the nodes, so connectors render behind the joints they join.
    """

    def __init__(self, style: Optional[CanvasSettings] = None, parent=None):
        super().__init__(parent)
        self.style = style or CanvasSettings()
        self._nodes: Dict[str, NodeItem] = {}
        self._joints: Dict[str, JointItem] = {}
        self._connectors: Dict[int, ConnectorItem] = {}
        self.connections_container = QGraphicsItemGroup()
        self.connections_container.setZValue(0)
        self.addItem(self.connections_container)

    # ------------------------------------------------------------------
    # Host-side construction
    # ------------------------------------------------------------------

    def add_node(self, node: Node, width: float = 160, height: float = 80) -> NodeItem:
        """Add a node and its joints to the scene."""
        if node.node_id in self._nodes:
            raise ValueError(f"Duplicate node id: {node.node_id}")
        item = NodeItem(node, width, height, self.style)
        self.addItem(item)
        self._nodes[node.node_id] = item
        for joint in node.joints:
            joint.node_id = node.node_id
            self._joints[joint.pin_id] = JointItem(joint, item, self.style)
        return item

    def remove_node(self, node_id: str) -> bool:
        """Remove a node; its connectors must already be deleted."""
        item = self._nodes.pop(node_id, None)
        if item is None:
            return False
        for joint in item.node.joints:
            self._joints.pop(joint.pin_id, None)
        self.removeItem(item)
        return True

    # ------------------------------------------------------------------
    # Scene provider
    # ------------------------------------------------------------------

    def node(self, node_id: str) -> Optional[Node]:
        item = self._nodes.get(node_id)
        return item.node if item else None

    def joint(self, pin_id: str) -> Optional[Joint]:
        item = self._joints.get(pin_id)
        return item.joint if item else None

    def nodes(self) -> Iterable[Node]:
        return [item.node for item in self._nodes.values()]

    def joints(self) -> Iterable[Joint]:
        return [item.joint for item in self._joints.values()]

    def move_node(self, node_id: str, x: float, y: float) -> None:
        item = self._nodes.get(node_id)
        if item is None:
            return
        item.node.x = x
        item.node.y = y
        item.setPos(x, y)

    def create_drawable(self, connector_id: Optional[int]) -> ConnectorItem:
        item = ConnectorItem(connector_id, self.style)
        self.connections_container.addToGroup(item)
        if connector_id is not None:
            self._connectors[connector_id] = item
        return item

    def remove_drawable(self, drawable: ConnectorItem) -> None:
        if drawable.connector_id is not None:
            self._connectors.pop(drawable.connector_id, None)
        self.connections_container.removeFromGroup(drawable)
        self.removeItem(drawable)

    def connector_item(self, connector_id: int) -> Optional[ConnectorItem]:
        return self._connectors.get(connector_id)

    def set_joint_highlight(self, pin_id: str, on: bool) -> None:
        item = self._joints.get(pin_id)
        if item is not None:
            item.set_highlighted(on)

    def set_connector_highlight(self, connector_id: int, on: bool) -> None:
        item = self._connectors.get(connector_id)
        if item is not None:
            item.set_selected(on)

    def hit_test(self, point: Point) -> Hit:
        """Hit-test in scene (local canvas) coordinates.

        Joints win over connectors, connectors over node bodies. The
        preview path is never hit.
        """
        items = self.items(QPointF(point.x, point.y))
        for kind, cls in ((HitKind.JOINT, JointItem),
                          (HitKind.CONNECTOR, ConnectorItem),
                          (HitKind.NODE, NodeItem)):
            for it in items:
                if not isinstance(it, cls):
                    continue
                if kind == HitKind.JOINT:
                    return Hit(kind, it.joint.pin_id)
                if kind == HitKind.CONNECTOR:
                    if it.connector_id is None:
                        continue
                    return Hit(kind, it.connector_id)
                return Hit(kind, it.node.node_id)
        return NO_HIT

    def _view(self):
        views = self.views()
        if not views:
            raise SceneConfigurationError("JointScene has no view attached")
        return views[0]

    def canvas_origin(self) -> Point:
        """Global screen position of the view's viewport top-left."""
        origin = self._view().viewport().mapToGlobal(QPoint(0, 0))
        return Point(origin.x(), origin.y())

    def canvas_bounds(self) -> Rect:
        viewport = self._view().viewport()
        origin = viewport.mapToGlobal(QPoint(0, 0))
        return Rect(origin.x(), origin.y(), viewport.width(), viewport.height())

    def node_items(self) -> List[NodeItem]:
        return list(self._nodes.values())
