"""
models.py

Data models and constants for the joint canvas.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence, Tuple


# ----------------------------
# Geometry
# ----------------------------

@dataclass(frozen=True)
class Point:
    """A 2D point or vector."""
    x: float
    y: float

    def __add__(self, other: "Point") -> "Point":
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Point") -> "Point":
        return Point(self.x - other.x, self.y - other.y)

    def __mul__(self, factor: float) -> "Point":
        return Point(self.x * factor, self.y * factor)

    def __truediv__(self, factor: float) -> "Point":
        return Point(self.x / factor, self.y / factor)

    def rounded(self) -> "Point":
        """Round both coordinates to integer units."""
        return Point(round(self.x), round(self.y))


@dataclass(frozen=True)
class Rect:
    """Screen-space bounding box (edges inclusive)."""
    x: float
    y: float
    width: float
    height: float

    def contains(self, x: float, y: float) -> bool:
        return (self.x <= x <= self.x + self.width
                and self.y <= y <= self.y + self.height)


@dataclass(frozen=True)
class PanZoomState:
    """Read-only snapshot of the viewport's pan/zoom transform."""
    scale: float = 1.0
    translate_x: float = 0.0
    translate_y: float = 0.0


# ----------------------------
# Scene model
# ----------------------------

@dataclass
class Joint:
    """A connectable attachment point owned by a node.

    ``offset`` is fixed relative to the owning node's translation.
    ``kind`` is an optional connection type; joints with different kinds
    cannot be connected.
    """
    pin_id: str
    node_id: str
    offset: Point = Point(0.0, 0.0)
    connectable: bool = True
    kind: Optional[str] = None

    def accepts(self, other: "Joint") -> bool:
        """Check whether a connector between this joint and ``other`` is allowed."""
        if other.pin_id == self.pin_id:
            return False
        if not (self.connectable and other.connectable):
            return False
        return self.kind is None or other.kind is None or self.kind == other.kind


@dataclass
class Node:
    """A positioned, optionally draggable element."""
    node_id: str
    x: float = 0.0
    y: float = 0.0
    draggable: bool = True
    joints: List[Joint] = field(default_factory=list)

    @property
    def position(self) -> Point:
        return Point(self.x, self.y)


@dataclass
class Connector:
    """A link between two joints, referenced by pin id.

    The drawable is owned exclusively by the connector and removed with it.
    """
    connector_id: int
    endpoint_a: str
    endpoint_b: str
    path_type: str
    drawable: Any = field(default=None, repr=False)

    @property
    def endpoints(self) -> Tuple[str, str]:
        return (self.endpoint_a, self.endpoint_b)

    def touches(self, pin_id: str) -> bool:
        return pin_id in (self.endpoint_a, self.endpoint_b)


@dataclass(frozen=True)
class Rejected:
    """Result of a connector creation that was refused."""
    reason: str

    def __bool__(self) -> bool:
        return False


# ----------------------------
# Gestures
# ----------------------------

class DragKind:
    """Kinds of drag session."""
    MOVE_NODE = "move-node"
    DRAW_PATH = "draw-path"


@dataclass
class DragSession:
    """State of the single in-flight gesture.

    ``origin`` is the subject position in local canvas space at gesture
    begin. ``pointer_start`` is the pointer start in pan/zoom space (the
    screen-local space the viewport transform maps into). ``gesture_id``
    tags the session's trace lines.
    """
    kind: str
    subject_id: str
    origin: Point
    pointer_start: Point
    delta: Point = Point(0.0, 0.0)
    gesture_id: int = 0


class Phase:
    """Canonical gesture phases."""
    BEGIN = "begin"
    MOVE = "move"
    END = "end"


@dataclass(frozen=True)
class PointerInput:
    """A normalized pointer event in screen coordinates."""
    x: float
    y: float
    phase: str


@dataclass(frozen=True)
class RawInput:
    """Pointer or touch event as delivered by a platform adapter.

    ``type`` uses DOM-style names (``mousedown``, ``pointermove``,
    ``touchend`` ...). Touch events carry their points in ``touches``;
    mouse and pointer events carry ``client_x``/``client_y``.
    """
    type: str
    client_x: Optional[float] = None
    client_y: Optional[float] = None
    touches: Sequence[Tuple[float, float]] = ()


class HitKind:
    """What a scene hit test landed on."""
    NONE = "none"
    NODE = "node"
    JOINT = "joint"
    CONNECTOR = "connector"


@dataclass(frozen=True)
class Hit:
    """Hit-test result: a kind plus the id of the hit element."""
    kind: str = HitKind.NONE
    target_id: Any = None


NO_HIT = Hit()


# ----------------------------
# Configuration
# ----------------------------

class PathType:
    """Connector path types."""
    LINE = "line"
    TRIPLE_LINE = "triple-line"

    ALL = (LINE, TRIPLE_LINE)


@dataclass(frozen=True)
class JointConfig:
    """Editor configuration, fixed at construction.

    Defaults:
        interactive_joints: True
        connector_stroke_width: 5
        connector_triple_offset: 5
        path_type: "triple-line"
        unique_connectors: True
    """
    interactive_joints: bool = True
    connector_stroke_width: float = 5
    connector_triple_offset: float = 5
    path_type: str = PathType.TRIPLE_LINE
    unique_connectors: bool = True  # reject a second connector between the same two joints
