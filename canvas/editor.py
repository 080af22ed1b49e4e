"""
canvas/editor.py

JointEditor: one interaction engine bound to one scene and viewport.

Everything the engine mutates (connector list, gesture sessions, active
selection, subscribers) is owned by the editor instance; two editors on
two scenes share nothing.
"""

from __future__ import annotations

from typing import Callable, List, Optional, Union

from canvas.connectors import ConnectorStore
from canvas.dispatcher import InputDispatcher, delete_strategy_for
from canvas.drag import DragController
from canvas.path_drag import PathDragController
from canvas.providers import SceneProvider, ViewportProvider
from canvas.transform import CoordinateTransformer
from debug_trace import trace
from errors import SceneConfigurationError, ViewportError
from events import EventBus, EventType, JointEvent
from models import Connector, Joint, JointConfig, Node, RawInput, Rejected

_REQUIRED_SCENE_METHODS = (
    "node", "joint", "nodes", "joints", "move_node", "create_drawable",
    "remove_drawable", "set_joint_highlight", "set_connector_highlight",
    "hit_test", "canvas_origin", "canvas_bounds",
)


def _validate_scene(scene) -> None:
    if scene is None:
        raise SceneConfigurationError("No scene given to JointEditor")
    missing = [m for m in _REQUIRED_SCENE_METHODS if not callable(getattr(scene, m, None))]
    if missing:
        raise SceneConfigurationError(
            f"Scene {type(scene).__name__} is missing {', '.join(missing)}",
            {"missing": missing},
        )


class JointEditor:
    """Wires the transformer, store, controllers and dispatcher together.

    Args:
        scene: A ``SceneProvider``.
        viewport: A ``ViewportProvider``.
        config: Fixed configuration; defaults to ``JointConfig()``.
        delete_handler: Optional host callback that takes over Delete-key
            presses. It receives the connector's pin id and decides what
            deleting means; the editor then neither deletes nor notifies.
        on_viewport_error: Optional callback for ticks skipped because the
            viewport was unavailable or had zero scale.

    Attributes:
        draggable_nodes: Nodes that were draggable when the editor was built.
        interactive_joints: Connectable joints at that time (empty when
            ``interactive_joints`` is off).

    Both lists are informational snapshots for the host; ``remove_node()``
    prunes them. Press handling reads ``Node.draggable``, ``Joint.connectable``
    and the config on every press, so nodes added later are draggable
    without being listed here.

    Raises:
        SceneConfigurationError: ``scene`` is missing or malformed.
    """

    def __init__(self, scene: SceneProvider, viewport: Optional[ViewportProvider],
                 config: Optional[JointConfig] = None,
                 delete_handler: Optional[Callable[[str], None]] = None,
                 on_viewport_error: Optional[Callable[[ViewportError], None]] = None):
        _validate_scene(scene)
        self.scene = scene
        self.config = config or JointConfig()
        self.bus = EventBus()
        self.transformer = CoordinateTransformer(scene, viewport)
        self.connectors = ConnectorStore(scene, self.transformer, self.config, self.bus)
        self.drag = DragController(scene, self.transformer, self.connectors, self.bus)
        self.path_drag = PathDragController(
            scene, self.transformer, self.connectors, self.bus, self.config
        )
        self.dispatcher = InputDispatcher(
            scene, self.transformer, self.connectors, self.drag, self.path_drag,
            self.config, delete_strategy_for(self.connectors, delete_handler),
            on_viewport_error=on_viewport_error,
        )

        self.draggable_nodes: List[Node] = [n for n in scene.nodes() if n.draggable]
        self.interactive_joints: List[Joint] = (
            [j for j in scene.joints() if j.connectable]
            if self.config.interactive_joints else []
        )
        trace(
            f"editor ready: {len(self.draggable_nodes)} draggable nodes, "
            f"{len(self.interactive_joints)} interactive joints",
            "INIT",
        )

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def subscribe(self, handler: Callable[[JointEvent], None]) -> None:
        self.bus.subscribe(handler)

    def unsubscribe(self, handler: Callable[[JointEvent], None]) -> None:
        self.bus.unsubscribe(handler)

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def dispatch(self, raw: RawInput) -> None:
        self.dispatcher.dispatch(raw)

    def key_press(self, key) -> bool:
        return self.dispatcher.key_press(key)

    def start_drag_on_creation(self, node_id: str, client_x: float, client_y: float) -> bool:
        """Begin moving a node the host just created at a screen position."""
        if self.dispatcher.gesture_active:
            return False
        return self.drag.begin_at(node_id, client_x, client_y)

    # ------------------------------------------------------------------
    # Host commands
    # ------------------------------------------------------------------

    def handle_host_event(self, event: Union[JointEvent, dict]) -> None:
        """React to an event raised by the host application.

        Only ``CLEAR_ALL`` is understood: every connector is deleted.
        """
        event_type = event.get("type") if isinstance(event, dict) else event.type
        if event_type == EventType.CLEAR_ALL:
            self.clear_all()

    def clear_all(self) -> int:
        """Delete every connector (one ``DELETE`` each), then notify ``CLEAR_ALL``."""
        self.dispatcher.clear_selection()
        count = self.connectors.delete_all()
        self.bus.emit(EventType.CLEAR_ALL, deleted=count)
        return count

    def connect(self, pin_a: str, pin_b: str,
                path_type: Optional[str] = None) -> Union[Connector, Rejected]:
        """Create a connector programmatically, notifying on success."""
        result = self.connectors.create(pin_a, pin_b, path_type)
        if isinstance(result, Connector):
            self.bus.emit(
                EventType.CONNECTOR_CREATED,
                connector_id=result.connector_id,
                endpoint_a=result.endpoint_a,
                endpoint_b=result.endpoint_b,
            )
        return result

    def delete_connector(self, connector_id: int) -> bool:
        if self.dispatcher.active_connector == connector_id:
            self.dispatcher.clear_selection()
        return self.connectors.delete_by_id(connector_id)

    def remove_node(self, node_id: str) -> int:
        """Delete the connectors of a node the host is about to remove.

        Call before the node leaves the scene so no connector is left
        pointing at a missing joint.
        """
        active = self.dispatcher.active_connector
        if active is not None and any(
            c.connector_id == active for c in self.connectors.connectors_for_node(node_id)
        ):
            self.dispatcher.clear_selection()
        self.draggable_nodes = [n for n in self.draggable_nodes if n.node_id != node_id]
        self.interactive_joints = [j for j in self.interactive_joints if j.node_id != node_id]
        return self.connectors.delete_for_node(node_id)

    def refresh(self) -> List[int]:
        """Redraw every connector and delete those whose joints are gone.

        Returns:
            Ids of the connectors that were purged.
        """
        stale = self.connectors.redraw_all()
        self.connectors.purge_stale()
        return stale
