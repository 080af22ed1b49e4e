"""
canvas package

Interaction engine (drag, connect, connector bookkeeping) plus the PyQt6
scene, view and items it drives.
"""

from canvas.connectors import ConnectorStore
from canvas.dispatcher import InputDispatcher
from canvas.drag import DragController
from canvas.editor import JointEditor
from canvas.path_drag import PathDragController
from canvas.transform import CoordinateTransformer
from canvas.items import ConnectorItem, JointItem, NodeItem
from canvas.scene import JointScene
from canvas.view import JointView

__all__ = [
    "ConnectorStore",
    "CoordinateTransformer",
    "DragController",
    "InputDispatcher",
    "JointEditor",
    "PathDragController",
    "ConnectorItem",
    "JointItem",
    "NodeItem",
    "JointScene",
    "JointView",
]
