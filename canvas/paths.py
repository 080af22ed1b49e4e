"""
canvas/paths.py

Connector path geometry.

Pure functions of the two endpoint positions and the configured stroke
width and offset; nothing here touches the scene.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

from models import JointConfig, PathType, Point


@dataclass(frozen=True)
class Segment:
    """One straight stroke of a connector path."""
    start: Point
    end: Point
    stroke_width: float


@dataclass(frozen=True)
class ConnectorPath:
    """The drawable description of a connector: one or more segments."""
    segments: Tuple[Segment, ...]

    @property
    def stroke_width(self) -> float:
        return self.segments[0].stroke_width if self.segments else 0.0

    def to_svg(self) -> str:
        """Render as an SVG path ``d`` attribute."""
        parts = []
        for seg in self.segments:
            parts.append(
                f"M {_fmt(seg.start.x)} {_fmt(seg.start.y)} "
                f"L {_fmt(seg.end.x)} {_fmt(seg.end.y)}"
            )
        return " ".join(parts)


def _fmt(v: float) -> str:
    # Trim "10.0" to "10" so descriptions stay stable across int/float inputs
    v = round(v, 3)
    return str(int(v)) if v == int(v) else repr(v)


def line_segments(start: Point, end: Point, stroke_width: float) -> Tuple[Segment, ...]:
    return (Segment(start, end, stroke_width),)


def offset_triple_segments(start: Point, end: Point, offset: float,
                           stroke_width: float) -> Tuple[Segment, ...]:
    """Three parallel segments: the centre line and one on each side.

    The side segments are shifted perpendicular to start->end by
    ``offset``. With coincident endpoints there is no direction, so all
    three segments collapse onto the centre.

    Returns:
        (centre, left, right)
    """
    dx = end.x - start.x
    dy = end.y - start.y
    length = math.hypot(dx, dy)
    if length == 0:
        normal = Point(0.0, 0.0)
    else:
        normal = Point(-dy / length * offset, dx / length * offset)

    return (
        Segment(start, end, stroke_width),
        Segment(start + normal, end + normal, stroke_width),
        Segment(start - normal, end - normal, stroke_width),
    )


def build_path(path_type: str, start: Point, end: Point, config: JointConfig) -> ConnectorPath:
    """Build the path of ``path_type`` between two positions.

    Raises:
        ValueError: unknown path type.
    """
    if path_type == PathType.TRIPLE_LINE:
        segments = offset_triple_segments(
            start, end, config.connector_triple_offset, config.connector_stroke_width
        )
    elif path_type == PathType.LINE:
        segments = line_segments(start, end, config.connector_stroke_width)
    else:
        raise ValueError(f"Unknown path type: {path_type!r}")
    return ConnectorPath(segments)
