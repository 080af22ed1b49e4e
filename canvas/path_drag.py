"""
canvas/path_drag.py

Draw-connector gesture: Idle -> Previewing -> Idle.

Pressing on a connectable joint starts a preview path that follows the
pointer. Releasing over a distinct, connectable, compatible joint creates
a connector; releasing anywhere else silently discards the preview.
"""

from __future__ import annotations

from typing import Optional

from canvas.connectors import ConnectorStore
from canvas.paths import build_path
from canvas.transform import CoordinateTransformer
from debug_trace import begin_gesture, end_gesture, trace_gesture
from errors import ViewportError
from events import EventBus, EventType
from models import (
    Connector, DragKind, DragSession, HitKind, Joint, JointConfig, Point, PointerInput,
)


class PathDragState:
    IDLE = "idle"
    PREVIEWING = "previewing"


class PathDragController:
    def __init__(self, scene, transformer: CoordinateTransformer,
                 store: ConnectorStore, bus: EventBus, config: JointConfig):
        self._scene = scene
        self._transformer = transformer
        self._store = store
        self._bus = bus
        self._config = config
        self.state = PathDragState.IDLE
        self.session: Optional[DragSession] = None
        self._preview = None
        self._hover_pin: Optional[str] = None

    @property
    def active(self) -> bool:
        return self.session is not None

    @property
    def hover_pin(self) -> Optional[str]:
        """Pin id of the currently highlighted candidate joint."""
        return self._hover_pin

    def begin(self, pin_id: str, pointer: PointerInput) -> bool:
        """Start a preview from ``pin_id``.

        Returns:
            False if the joint is unknown, not connectable, or detached.
        """
        joint = self._scene.joint(pin_id)
        if joint is None or not joint.connectable:
            return False
        start = self._transformer.joint_position(joint)
        if start is None:
            return False

        self.session = DragSession(
            kind=DragKind.DRAW_PATH,
            subject_id=pin_id,
            origin=start,
            pointer_start=self._transformer.screen_to_canvas(pointer.x, pointer.y),
            gesture_id=begin_gesture(f"path from {pin_id}"),
        )
        self._preview = self._scene.create_drawable(None)
        self.state = PathDragState.PREVIEWING
        trace_gesture(self.session.gesture_id, f"preview at {start}")
        return True

    def update(self, pointer: PointerInput) -> Optional[Point]:
        """Redraw the preview to the pointer and refresh the hover highlight.

        Returns:
            The pointer position in local canvas space, or None when idle.
        """
        session = self.session
        if session is None:
            return None
        target = self._transformer.to_logical(pointer.x, pointer.y)
        session.delta = target - session.origin
        self._preview.set_path(build_path(self._config.path_type, session.origin, target, self._config))

        candidate = self._candidate_at(target)
        new_hover = candidate.pin_id if candidate is not None else None
        if new_hover != self._hover_pin:
            self._clear_hover()
            if new_hover is not None:
                self._scene.set_joint_highlight(new_hover, True)
                self._hover_pin = new_hover
            trace_gesture(session.gesture_id, f"hover {new_hover}", "MOVE")
        return target

    def end(self, pointer: Optional[PointerInput] = None) -> Optional[Connector]:
        """Finish the preview, creating a connector if released over a valid joint.

        Returns:
            The created connector, or None for a silent abort.
        """
        session = self.session
        if session is None:
            return None

        target_joint = None
        try:
            if pointer is not None:
                target = self._transformer.to_logical(pointer.x, pointer.y)
                target_joint = self._candidate_at(target)
            elif self._hover_pin is not None:
                target_joint = self._scene.joint(self._hover_pin)
        except ViewportError as e:
            end_gesture(session.gesture_id, f"aborted: {e.message}")
            raise
        finally:
            # The session ends even if the viewport could not be read
            self._finish()

        if target_joint is None:
            end_gesture(session.gesture_id, "discarded")
            return None
        result = self._store.create(session.subject_id, target_joint.pin_id,
                                    self._config.path_type)
        if not isinstance(result, Connector):
            end_gesture(session.gesture_id, f"rejected: {result.reason}")
            return None
        self._bus.emit(
            EventType.CONNECTOR_CREATED,
            connector_id=result.connector_id,
            endpoint_a=result.endpoint_a,
            endpoint_b=result.endpoint_b,
        )
        end_gesture(session.gesture_id, f"connector {result.connector_id} to {result.endpoint_b}")
        return result

    def _candidate_at(self, point: Point) -> Optional[Joint]:
        """The joint under ``point`` if the origin may connect to it."""
        hit = self._scene.hit_test(point)
        if hit.kind != HitKind.JOINT:
            return None
        origin = self._scene.joint(self.session.subject_id)
        candidate = self._scene.joint(hit.target_id)
        if origin is None or candidate is None or not origin.accepts(candidate):
            return None
        return candidate

    def _clear_hover(self) -> None:
        if self._hover_pin is not None:
            self._scene.set_joint_highlight(self._hover_pin, False)
            self._hover_pin = None

    def _finish(self) -> None:
        self._clear_hover()
        if self._preview is not None:
            self._scene.remove_drawable(self._preview)
            self._preview = None
        self.session = None
        self.state = PathDragState.IDLE
