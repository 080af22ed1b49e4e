"""
canvas/connectors.py

Ordered collection of connectors and their drawables.
"""

from __future__ import annotations

import itertools
from typing import Iterator, List, Optional, Union

from canvas.paths import build_path
from canvas.transform import CoordinateTransformer
from debug_trace import trace
from events import EventBus, EventType
from models import Connector, JointConfig, PathType, Rejected


class ConnectorStore:
    """Creates, finds, redraws and deletes connectors.

    Connectors keep insertion order. Endpoints are pin ids resolved through
    the scene on every redraw, so a connector never owns its joints.

    Event handlers must not create or delete connectors while
    ``redraw_all()`` or ``delete_all()`` is running.
    """

    def __init__(self, scene, transformer: CoordinateTransformer,
                 config: JointConfig, bus: Optional[EventBus] = None):
        self._scene = scene
        self._transformer = transformer
        self._config = config
        self._bus = bus
        self._connectors: List[Connector] = []
        self._ids = itertools.count(1)
        # Connectors whose joints vanished during the last redraw_all()
        self.stale: List[int] = []

    def __iter__(self) -> Iterator[Connector]:
        return iter(self._connectors)

    def __len__(self) -> int:
        return len(self._connectors)

    def ids(self) -> List[int]:
        return [c.connector_id for c in self._connectors]

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create(self, endpoint_a: str, endpoint_b: str,
               path_type: Optional[str] = None) -> Union[Connector, Rejected]:
        """Connect two joints.

        Returns:
            The new connector, or ``Rejected`` when the joints are the same,
            unknown, not connectable, of incompatible kinds, at the same
            position, or already connected (with ``unique_connectors``).
        """
        path_type = path_type or self._config.path_type
        if path_type not in PathType.ALL:
            return Rejected(f"unknown path type {path_type!r}")
        if endpoint_a == endpoint_b:
            return Rejected("a joint cannot connect to itself")

        joint_a = self._scene.joint(endpoint_a)
        joint_b = self._scene.joint(endpoint_b)
        if joint_a is None or joint_b is None:
            return Rejected("unknown joint")
        if not (joint_a.connectable and joint_b.connectable):
            return Rejected("joint is not connectable")
        if not joint_a.accepts(joint_b):
            return Rejected("incompatible joint kinds")

        start = self._transformer.joint_position(joint_a)
        end = self._transformer.joint_position(joint_b)
        if start is None or end is None:
            return Rejected("joint has no owning node")
        if start == end:
            return Rejected("zero-length connector")

        if self._config.unique_connectors and self._find_pair(endpoint_a, endpoint_b):
            return Rejected("joints are already connected")

        connector_id = next(self._ids)
        connector = Connector(
            connector_id=connector_id,
            endpoint_a=endpoint_a,
            endpoint_b=endpoint_b,
            path_type=path_type,
            drawable=self._scene.create_drawable(connector_id),
        )
        self._connectors.append(connector)
        self.redraw(connector)
        trace(f"connector {connector_id} created {endpoint_a} -> {endpoint_b}", "CONNECTOR")
        return connector

    def _find_pair(self, a: str, b: str) -> Optional[Connector]:
        pair = {a, b}
        for c in self._connectors:
            if {c.endpoint_a, c.endpoint_b} == pair:
                return c
        return None

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def _index_of(self, connector_id: int) -> int:
        for i, c in enumerate(self._connectors):
            if c.connector_id == connector_id:
                return i
        return -1

    def find_by_id(self, connector_id: int) -> Optional[Connector]:
        i = self._index_of(connector_id)
        return self._connectors[i] if i >= 0 else None

    def find_by_endpoint_pin_id(self, pin_id: str) -> Optional[Connector]:
        """First connector with either endpoint on ``pin_id``."""
        for c in self._connectors:
            if c.touches(pin_id):
                return c
        return None

    def pin_id_for(self, connector_id: int) -> Optional[str]:
        """Pin id reported to a host delete handler for this connector."""
        connector = self.find_by_id(connector_id)
        return connector.endpoint_a if connector else None

    def connectors_for_node(self, node_id: str) -> List[Connector]:
        """Connectors with at least one endpoint owned by ``node_id``."""
        result = []
        for c in self._connectors:
            for pin_id in c.endpoints:
                joint = self._scene.joint(pin_id)
                if joint is not None and joint.node_id == node_id:
                    result.append(c)
                    break
        return result

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    def delete_by_id(self, connector_id: int) -> bool:
        """Remove one connector and its drawable, then notify ``DELETE``.

        Returns:
            False if no connector has that id.
        """
        i = self._index_of(connector_id)
        if i < 0:
            return False
        connector = self._connectors.pop(i)
        if connector.drawable is not None:
            self._scene.remove_drawable(connector.drawable)
            connector.drawable = None
        if connector_id in self.stale:
            self.stale.remove(connector_id)
        trace(f"connector {connector_id} deleted", "CONNECTOR")
        if self._bus is not None:
            self._bus.emit(EventType.DELETE, connector_id=connector_id)
        return True

    def delete_all(self) -> int:
        """Delete every connector one at a time; returns how many."""
        count = 0
        for connector in list(self._connectors):
            if self.delete_by_id(connector.connector_id):
                count += 1
        return count

    def delete_for_node(self, node_id: str) -> int:
        """Delete every connector attached to ``node_id``'s joints."""
        count = 0
        for connector in self.connectors_for_node(node_id):
            if self.delete_by_id(connector.connector_id):
                count += 1
        return count

    def purge_stale(self) -> int:
        """Delete connectors flagged by the last ``redraw_all()``."""
        count = 0
        for connector_id in list(self.stale):
            if self.delete_by_id(connector_id):
                count += 1
        self.stale = []
        return count

    # ------------------------------------------------------------------
    # Redraw
    # ------------------------------------------------------------------

    def redraw(self, connector: Connector) -> bool:
        """Recompute the connector's path from its endpoints' current positions.

        Returns:
            False when an endpoint joint (or its node) no longer resolves.
        """
        joint_a = self._scene.joint(connector.endpoint_a)
        joint_b = self._scene.joint(connector.endpoint_b)
        if joint_a is None or joint_b is None:
            return False
        start = self._transformer.joint_position(joint_a)
        end = self._transformer.joint_position(joint_b)
        if start is None or end is None:
            return False
        if connector.drawable is not None:
            connector.drawable.set_path(build_path(connector.path_type, start, end, self._config))
        return True

    def redraw_all(self) -> List[int]:
        """Redraw every connector, flagging unresolvable ones in ``stale``.

        Returns:
            Ids of connectors that could not be redrawn.
        """
        failed = []
        for connector in self._connectors:
            if not self.redraw(connector):
                failed.append(connector.connector_id)
        self.stale = failed
        if failed:
            trace(f"redraw_all: stale connectors {failed}", "CONNECTOR")
        return failed
