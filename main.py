"""
main.py

Joint Canvas - Demo Application

PyQt6 window hosting a node-and-connector canvas:
- Drag nodes by their body
- Drag from one joint to another to connect them
- Click a connector and press Delete to remove it
- Mouse wheel zooms

Usage:
    python main.py

Dependencies:
    pip install PyQt6 platformdirs tomli-w
"""

from __future__ import annotations

import itertools
import sys
from typing import Optional

from PyQt6.QtGui import QAction, QCursor
from PyQt6.QtWidgets import QApplication, QMainWindow

from canvas.editor import JointEditor
from canvas.scene import JointScene
from canvas.view import JointView
from debug_trace import close_log, trace, trace_exception
from errors import ViewportError
from events import EventType, JointEvent
from models import Joint, Node, Point
from settings import SettingsManager

NODE_W = 160
NODE_H = 80


def _demo_node(node_id: str, x: float, y: float, kind: Optional[str] = None) -> Node:
    """A node with one input joint on the left edge and one output on the right."""
    return Node(node_id, x, y, joints=[
        Joint(f"{node_id}-in", node_id, Point(0, NODE_H / 2), kind=kind),
        Joint(f"{node_id}-out", node_id, Point(NODE_W, NODE_H / 2), kind=kind),
    ])


class MainWindow(QMainWindow):
    """Main application window for the joint canvas demo.

    Args:
        settings_manager: The SettingsManager instance for application settings.
    """

    def __init__(self, settings_manager: SettingsManager):
        super().__init__()
        self.settings_manager = settings_manager
        self.setWindowTitle("Joint Canvas")

        # Scene and view
        canvas_settings = settings_manager.settings.canvas
        self.scene = JointScene(canvas_settings)
        self.scene.setSceneRect(0, 0, 1200, 800)
        self.view = JointView(self.scene, canvas_settings.zoom)
        self.setCentralWidget(self.view)

        self._node_ids = itertools.count(1)
        for x, y in ((80, 120), (420, 300), (760, 140)):
            self.scene.add_node(_demo_node(f"node-{next(self._node_ids)}", x, y), NODE_W, NODE_H)

        self.editor = JointEditor(
            self.scene,
            self.view,
            settings_manager.joint_config(),
            on_viewport_error=self._on_viewport_error,
        )
        self.view.attach(self.editor)
        self.editor.subscribe(self._on_editor_event)

        self._build_toolbar()
        self.statusBar().showMessage("Drag nodes; drag joint to joint to connect; Delete removes a selected connector.")

    def _build_toolbar(self):
        tb = self.addToolBar("Canvas")

        add_act = QAction("Add Node", self)
        add_act.triggered.connect(self.add_node_at_cursor)
        tb.addAction(add_act)

        clear_act = QAction("Clear Connectors", self)
        clear_act.triggered.connect(lambda: self.editor.handle_host_event({"type": EventType.CLEAR_ALL}))
        tb.addAction(clear_act)

        reset_act = QAction("Reset Zoom", self)
        reset_act.triggered.connect(self.view.zoom_reset)
        tb.addAction(reset_act)

    def add_node_at_cursor(self):
        """Create a node and let the user place it with the next mouse moves."""
        node_id = f"node-{next(self._node_ids)}"
        self.scene.add_node(_demo_node(node_id, 0, 0), NODE_W, NODE_H)
        pos = QCursor.pos()
        self.editor.start_drag_on_creation(node_id, pos.x(), pos.y())

    def _on_editor_event(self, event: JointEvent):
        if event.type == EventType.CONNECTOR_CREATED:
            p = event.payload
            self.statusBar().showMessage(f"Connected {p['endpoint_a']} -> {p['endpoint_b']}")
        elif event.type == EventType.DELETE:
            self.statusBar().showMessage(f"Deleted connector {event.payload['connector_id']}")
        elif event.type == EventType.DRAG_END and event.payload:
            p = event.payload
            self.statusBar().showMessage(f"{p['node_id']} at ({p['x']:.0f}, {p['y']:.0f})")

    def _on_viewport_error(self, error: ViewportError):
        self.statusBar().showMessage(f"Viewport unavailable: {error.message}")


def main():
    """Application entry point."""
    trace("Application starting", "MAIN")
    app = QApplication(sys.argv)

    trace("Loading settings", "MAIN")
    settings_manager = SettingsManager()

    # Ensure settings file has all sections
    settings_manager.ensure_file_complete()

    def save_on_quit():
        trace("Saving settings on quit", "MAIN")
        settings_manager.save()
        close_log()

    app.aboutToQuit.connect(save_on_quit)

    trace("Creating MainWindow", "MAIN")
    w = MainWindow(settings_manager)
    w.resize(1280, 860)
    w.show()
    trace("Entering event loop", "MAIN")
    sys.exit(app.exec())


if __name__ == "__main__":
    # Set up global exception handler to catch crashes
    def excepthook(exc_type, exc_value, exc_tb):
        import traceback
        trace("UNCAUGHT EXCEPTION:", "CRASH")
        trace("".join(traceback.format_exception(exc_type, exc_value, exc_tb)), "CRASH")
        close_log()
        sys.__excepthook__(exc_type, exc_value, exc_tb)

    sys.excepthook = excepthook

    try:
        main()
    except Exception as e:
        trace(f"FATAL: {type(e).__name__}: {e}", "CRASH")
        trace_exception("Fatal exception")
        close_log()
        raise
