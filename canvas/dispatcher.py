"""
canvas/dispatcher.py

Routes normalized pointer input to the drag controllers.

Mouse, pointer and touch events are reduced to one ``PointerInput``
shape before any controller sees them. At most one gesture is active at
a time: a press while a drag or path preview is running is ignored, and
the release always reaches the controller that owns the gesture.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from canvas.connectors import ConnectorStore
from canvas.drag import DragController
from canvas.path_drag import PathDragController
from canvas.transform import CoordinateTransformer
from debug_trace import trace
from errors import ViewportError
from models import HitKind, JointConfig, Phase, PointerInput, RawInput

log = logging.getLogger(__name__)

DELETE_KEYS = ("Delete", "Del", 46)

_PHASES = {
    "mousedown": Phase.BEGIN,
    "pointerdown": Phase.BEGIN,
    "touchstart": Phase.BEGIN,
    "mousemove": Phase.MOVE,
    "pointermove": Phase.MOVE,
    "touchmove": Phase.MOVE,
    "mouseup": Phase.END,
    "pointerup": Phase.END,
    "pointercancel": Phase.END,
    "touchend": Phase.END,
    "touchcancel": Phase.END,
}


# ---------------------------------------------------------------------------
# Delete strategies
# ---------------------------------------------------------------------------

class StoreDeleteStrategy:
    """Delete the connector from the store, which notifies ``DELETE``."""

    def __init__(self, store: ConnectorStore):
        self._store = store

    def delete(self, connector_id: int) -> None:
        self._store.delete_by_id(connector_id)


class HostDeleteStrategy:
    """Hand the decision to the host's delete handler, keyed by pin id."""

    def __init__(self, store: ConnectorStore, handler: Callable[[str], None]):
        self._store = store
        self._handler = handler

    def delete(self, connector_id: int) -> None:
        pin_id = self._store.pin_id_for(connector_id)
        if pin_id is None:
            return
        self._handler(pin_id)


def delete_strategy_for(store: ConnectorStore,
                        delete_handler: Optional[Callable[[str], None]]):
    if delete_handler is not None:
        return HostDeleteStrategy(store, delete_handler)
    return StoreDeleteStrategy(store)


# ---------------------------------------------------------------------------
# Dispatcher
# ---------------------------------------------------------------------------

class InputDispatcher:
    """Turns raw input into controller transitions.

    Args:
        on_viewport_error: Called with the ``ViewportError`` when a tick
            could not be transformed; the host decides whether to keep
            going or freeze interaction.
    """

    def __init__(self, scene, transformer: CoordinateTransformer, store: ConnectorStore,
                 drag: DragController, path_drag: PathDragController,
                 config: JointConfig, delete_strategy,
                 on_viewport_error: Optional[Callable[[ViewportError], None]] = None):
        self._scene = scene
        self._transformer = transformer
        self._store = store
        self._drag = drag
        self._path_drag = path_drag
        self._config = config
        self._delete_strategy = delete_strategy
        self._on_viewport_error = on_viewport_error
        self._last_pointer: Optional[PointerInput] = None
        self.active_connector: Optional[int] = None

    @property
    def gesture_active(self) -> bool:
        return self._drag.active or self._path_drag.active

    # ------------------------------------------------------------------
    # Normalization
    # ------------------------------------------------------------------

    def normalize(self, raw: RawInput) -> Optional[PointerInput]:
        """Reduce a raw mouse/pointer/touch event to ``PointerInput``.

        Returns None for unknown event types and for presses or moves that
        carry no coordinates (e.g. a touch event without a touch point).
        A release without coordinates keeps the last known position so the
        gesture can still end.
        """
        phase = _PHASES.get(raw.type)
        if phase is None:
            return None

        if raw.type.startswith("touch"):
            point = raw.touches[0] if raw.touches else None
        elif raw.client_x is not None and raw.client_y is not None:
            point = (raw.client_x, raw.client_y)
        else:
            point = None

        if point is None:
            if phase != Phase.END:
                trace(f"dropped {raw.type} without coordinates", "INPUT")
                return None
            last = self._last_pointer
            point = (last.x, last.y) if last is not None else (0.0, 0.0)

        return PointerInput(float(point[0]), float(point[1]), phase)

    def dispatch(self, raw: RawInput) -> None:
        pointer = self.normalize(raw)
        if pointer is not None:
            self.handle(pointer)

    # ------------------------------------------------------------------
    # Gesture routing
    # ------------------------------------------------------------------

    def handle(self, pointer: PointerInput) -> None:
        try:
            if pointer.phase == Phase.BEGIN:
                self._begin(pointer)
            elif pointer.phase == Phase.MOVE:
                self._move(pointer)
            elif pointer.phase == Phase.END:
                self._end(pointer)
        except ViewportError as e:
            log.warning("Skipped %s tick: %s", pointer.phase, e.message)
            if self._on_viewport_error is not None:
                self._on_viewport_error(e)
        finally:
            self._last_pointer = pointer

    def _begin(self, pointer: PointerInput) -> None:
        if self.gesture_active:
            trace("press ignored: gesture already active", "INPUT")
            return

        hit = self._scene.hit_test(self._transformer.to_logical(pointer.x, pointer.y))
        self._update_selection(hit)

        if hit.kind == HitKind.JOINT and self._config.interactive_joints:
            if self._path_drag.begin(hit.target_id, pointer):
                return
        if hit.kind == HitKind.NODE:
            self._drag.begin(hit.target_id, pointer)

    def _move(self, pointer: PointerInput) -> None:
        if self._drag.active:
            self._drag.update(pointer)
        elif self._path_drag.active:
            self._path_drag.update(pointer)

    def _end(self, pointer: PointerInput) -> None:
        if self._path_drag.active:
            self._path_drag.end(pointer)
        else:
            self._drag.end()

    # ------------------------------------------------------------------
    # Selection and deletion
    # ------------------------------------------------------------------

    def _update_selection(self, hit) -> None:
        if hit.kind == HitKind.CONNECTOR:
            if self.active_connector != hit.target_id:
                self.clear_selection()
                self.active_connector = hit.target_id
                self._scene.set_connector_highlight(hit.target_id, True)
        else:
            self.clear_selection()

    def clear_selection(self) -> None:
        if self.active_connector is not None:
            if self._store.find_by_id(self.active_connector) is not None:
                self._scene.set_connector_highlight(self.active_connector, False)
            self.active_connector = None

    def key_press(self, key) -> bool:
        """Handle a key; Delete removes the active connector.

        Returns:
            True if a delete was requested.
        """
        if key not in DELETE_KEYS or self.active_connector is None:
            return False
        connector_id = self.active_connector
        if self._store.find_by_id(connector_id) is None:
            self.active_connector = None
            return False
        trace(f"delete requested for connector {connector_id}", "INPUT")
        self._delete_strategy.delete(connector_id)
        # A host handler may decline; the selection only goes with the connector
        if self.active_connector == connector_id and self._store.find_by_id(connector_id) is None:
            self.active_connector = None
        return True
