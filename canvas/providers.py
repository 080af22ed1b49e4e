"""
canvas/providers.py

Interfaces the interaction core expects from its host.

The scene provider owns nodes, joints and connector drawables; the
viewport provider supplies the current pan/zoom transform. ``JointScene``
and ``JointView`` are the Qt implementations.
"""

from __future__ import annotations

from typing import Iterable, Optional, Protocol, runtime_checkable

from models import Hit, Joint, Node, PanZoomState, Point, Rect


@runtime_checkable
class Drawable(Protocol):
    """A mounted connector or preview path."""

    def set_path(self, path) -> None:
        """Replace the rendered path with a ``ConnectorPath``."""


@runtime_checkable
class SceneProvider(Protocol):
    def node(self, node_id: str) -> Optional[Node]: ...

    def joint(self, pin_id: str) -> Optional[Joint]: ...

    def nodes(self) -> Iterable[Node]: ...

    def joints(self) -> Iterable[Joint]: ...

    def move_node(self, node_id: str, x: float, y: float) -> None: ...

    def create_drawable(self, connector_id: Optional[int]) -> Drawable: ...

    def remove_drawable(self, drawable: Drawable) -> None: ...

    def set_joint_highlight(self, pin_id: str, on: bool) -> None: ...

    def set_connector_highlight(self, connector_id: int, on: bool) -> None: ...

    def hit_test(self, point: Point) -> Hit: ...

    def canvas_origin(self) -> Point: ...

    def canvas_bounds(self) -> Rect: ...


@runtime_checkable
class ViewportProvider(Protocol):
    def pan_zoom_state(self) -> Optional[PanZoomState]: ...
