"""
canvas/drag.py

Move-node gesture: Idle -> Armed -> Dragging -> Idle.
"""

from __future__ import annotations

from typing import Optional

from canvas.connectors import ConnectorStore
from canvas.transform import CoordinateTransformer
from debug_trace import begin_gesture, end_gesture, trace_gesture
from events import EventBus, EventType
from models import DragKind, DragSession, Point, PointerInput


class DragState:
    IDLE = "idle"
    ARMED = "armed"
    DRAGGING = "dragging"


class DragController:
    """Moves a node with the pointer and keeps its connectors attached.

    The node position on every tick is computed from the gesture start,
    never accumulated from the previous tick, so the result does not
    depend on how often move events arrive.
    """

    def __init__(self, scene, transformer: CoordinateTransformer,
                 store: ConnectorStore, bus: EventBus):
        self._scene = scene
        self._transformer = transformer
        self._store = store
        self._bus = bus
        self.state = DragState.IDLE
        self.session: Optional[DragSession] = None

    @property
    def active(self) -> bool:
        return self.session is not None

    def begin(self, node_id: str, pointer: PointerInput) -> bool:
        """Arm a drag of ``node_id`` from a press at ``pointer``.

        Returns:
            False if the node is unknown or not draggable.
        """
        node = self._scene.node(node_id)
        if node is None or not node.draggable:
            return False
        self.session = DragSession(
            kind=DragKind.MOVE_NODE,
            subject_id=node_id,
            origin=node.position,
            pointer_start=self._transformer.screen_to_canvas(pointer.x, pointer.y),
            gesture_id=begin_gesture(f"move {node_id}"),
        )
        self.state = DragState.ARMED
        trace_gesture(self.session.gesture_id, f"armed origin={node.position}")
        self._bus.emit(EventType.DRAG_BEGIN, node_id=node_id, x=node.x, y=node.y)
        return True

    def begin_at(self, node_id: str, client_x: float, client_y: float) -> bool:
        """Arm a drag for a node the host has just created under the pointer.

        The node is placed at the canvas coordinates of the pointer and the
        pointer start is that position mapped into pan/zoom space, so the
        first move tick snaps the node to the pointer.
        """
        node = self._scene.node(node_id)
        if node is None:
            return False
        origin = self._transformer.screen_to_canvas(client_x, client_y)
        pan_zoom = self._transformer.pan_zoom_state()
        self._scene.move_node(node_id, origin.x, origin.y)
        self.session = DragSession(
            kind=DragKind.MOVE_NODE,
            subject_id=node_id,
            origin=origin,
            pointer_start=self._transformer.canvas_to_pan_zoom(origin, pan_zoom),
            gesture_id=begin_gesture(f"move {node_id} on creation"),
        )
        self.state = DragState.ARMED
        trace_gesture(self.session.gesture_id, f"armed origin={origin}")
        self._bus.emit(EventType.DRAG_BEGIN, node_id=node_id, x=origin.x, y=origin.y)
        return True

    def update(self, pointer: PointerInput) -> Optional[Point]:
        """Apply one move tick.

        Returns:
            The node's new position, or None when the tick was suppressed
            (no session, or pointer outside the canvas).
        """
        session = self.session
        if session is None:
            return None
        self.state = DragState.DRAGGING
        if self._transformer.is_out_of_bounds(pointer.x, pointer.y):
            trace_gesture(session.gesture_id, "tick out of bounds", "MOVE")
            return None

        pan_zoom = self._transformer.pan_zoom_state()
        now = self._transformer.screen_to_canvas(pointer.x, pointer.y)
        session.delta = (now - session.pointer_start) / pan_zoom.scale
        new_pos = (session.origin + session.delta).rounded()

        self._scene.move_node(session.subject_id, new_pos.x, new_pos.y)
        for connector in self._store.connectors_for_node(session.subject_id):
            self._store.redraw(connector)

        trace_gesture(session.gesture_id, f"-> {new_pos}", "MOVE")
        self._bus.emit(EventType.DRAG, node_id=session.subject_id, x=new_pos.x, y=new_pos.y)
        return new_pos

    def end(self) -> None:
        """Finish the gesture and emit ``DRAG_END``; a no-op when idle."""
        session = self.session
        self.session = None
        self.state = DragState.IDLE
        if session is None:
            return
        node = self._scene.node(session.subject_id)
        pos = node.position if node is not None else session.origin + session.delta
        end_gesture(session.gesture_id, f"at {pos}")
        self._bus.emit(EventType.DRAG_END, node_id=session.subject_id, x=pos.x, y=pos.y)
