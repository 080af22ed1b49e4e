"""
canvas/transform.py

Coordinate pipeline: screen -> local canvas -> pan/zoom space.

Node translations and connector drawables live in local canvas space.
Pointer positions, once the canvas origin is subtracted, are in the space
the viewport transform maps local coordinates into:

    x' = x * scale + translate_x
    y' = y * scale + translate_y
"""

from __future__ import annotations

import math
from typing import Optional

from errors import InvalidViewportError, ViewportUnavailableError
from models import Joint, PanZoomState, Point


class CoordinateTransformer:
    """Converts pointer coordinates using the current scene layout and viewport."""

    def __init__(self, scene, viewport):
        self._scene = scene
        self._viewport = viewport

    def screen_to_canvas(self, client_x: float, client_y: float) -> Point:
        """Subtract the canvas's screen-space origin."""
        origin = self._scene.canvas_origin()
        return Point(client_x - origin.x, client_y - origin.y)

    def pan_zoom_state(self) -> PanZoomState:
        """Query a fresh pan/zoom snapshot.

        Raises:
            ViewportUnavailableError: no provider, or it failed or returned nothing.
            InvalidViewportError: the scale is zero or not finite.
        """
        if self._viewport is None:
            raise ViewportUnavailableError("No viewport provider configured")
        try:
            state = self._viewport.pan_zoom_state()
        except Exception as e:
            raise ViewportUnavailableError(
                f"Viewport provider failed: {e}", {"cause": repr(e)}
            ) from e
        if state is None:
            raise ViewportUnavailableError("Viewport provider returned no state")
        _check_scale(state)
        return state

    @staticmethod
    def canvas_to_pan_zoom(point: Point, pan_zoom: PanZoomState) -> Point:
        return Point(
            point.x * pan_zoom.scale + pan_zoom.translate_x,
            point.y * pan_zoom.scale + pan_zoom.translate_y,
        )

    @staticmethod
    def pan_zoom_to_canvas(point: Point, pan_zoom: PanZoomState) -> Point:
        """Inverse of ``canvas_to_pan_zoom``."""
        _check_scale(pan_zoom)
        return Point(
            (point.x - pan_zoom.translate_x) / pan_zoom.scale,
            (point.y - pan_zoom.translate_y) / pan_zoom.scale,
        )

    def to_logical(self, client_x: float, client_y: float,
                   pan_zoom: Optional[PanZoomState] = None) -> Point:
        """Map a screen position all the way into local canvas space."""
        if pan_zoom is None:
            pan_zoom = self.pan_zoom_state()
        return self.pan_zoom_to_canvas(self.screen_to_canvas(client_x, client_y), pan_zoom)

    def is_out_of_bounds(self, client_x: float, client_y: float) -> bool:
        return not self._scene.canvas_bounds().contains(client_x, client_y)

    def joint_position(self, joint: Joint) -> Optional[Point]:
        """Owning node translation plus the joint's offset, or None if the node is gone."""
        node = self._scene.node(joint.node_id)
        if node is None:
            return None
        return node.position + joint.offset


def _check_scale(pan_zoom: PanZoomState) -> None:
    scale = pan_zoom.scale
    if not scale or not math.isfinite(scale):
        raise InvalidViewportError(
            f"Invalid viewport scale: {scale!r}", {"scale": scale}
        )
