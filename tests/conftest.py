"""Shared fixtures: an in-memory scene and viewport, and an event recorder.

The fake scene implements the same provider interface as ``JointScene``
without Qt, so the interaction engine can be driven with plain numbers.
"""
from __future__ import annotations

import math
import os
import sys

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from canvas.editor import JointEditor
from models import Hit, HitKind, Joint, JointConfig, NO_HIT, Node, PanZoomState, Point, Rect


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------

class FakeDrawable:
    def __init__(self, connector_id):
        self.connector_id = connector_id
        self.path = None
        self.highlighted = False
        self.draws = 0

    def set_path(self, path):
        self.path = path
        self.draws += 1


class FakeScene:
    """Nodes are NODE_W x NODE_H rects; joints are circles of JOINT_R."""

    NODE_W = 100
    NODE_H = 50
    JOINT_R = 7

    def __init__(self, origin=Point(100, 50), bounds=None):
        self.origin = origin
        self.bounds = bounds or Rect(origin.x, origin.y, 800, 600)
        self._nodes = {}
        self._joints = {}
        self.drawables = []
        self.highlighted_joints = set()
        self.highlighted_connectors = set()

    # host side
    def add_node(self, node_id, x, y, joints=(), draggable=True):
        node = Node(node_id, x, y, draggable=draggable)
        for pin_id, ox, oy, *rest in joints:
            opts = rest[0] if rest else {}
            joint = Joint(pin_id, node_id, Point(ox, oy), **opts)
            node.joints.append(joint)
            self._joints[pin_id] = joint
        self._nodes[node_id] = node
        return node

    def remove_joint(self, pin_id):
        joint = self._joints.pop(pin_id)
        node = self._nodes[joint.node_id]
        node.joints = [j for j in node.joints if j.pin_id != pin_id]

    def remove_node(self, node_id):
        node = self._nodes.pop(node_id)
        for j in node.joints:
            self._joints.pop(j.pin_id, None)

    # provider interface
    def node(self, node_id):
        return self._nodes.get(node_id)

    def joint(self, pin_id):
        return self._joints.get(pin_id)

    def nodes(self):
        return list(self._nodes.values())

    def joints(self):
        return list(self._joints.values())

    def move_node(self, node_id, x, y):
        node = self._nodes[node_id]
        node.x = x
        node.y = y

    def create_drawable(self, connector_id):
        d = FakeDrawable(connector_id)
        self.drawables.append(d)
        return d

    def remove_drawable(self, drawable):
        self.drawables.remove(drawable)

    def set_joint_highlight(self, pin_id, on):
        if on:
            self.highlighted_joints.add(pin_id)
        else:
            self.highlighted_joints.discard(pin_id)

    def set_connector_highlight(self, connector_id, on):
        if on:
            self.highlighted_connectors.add(connector_id)
        else:
            self.highlighted_connectors.discard(connector_id)

    def hit_test(self, point):
        for joint in self._joints.values():
            node = self._nodes[joint.node_id]
            c = node.position + joint.offset
            if math.hypot(point.x - c.x, point.y - c.y) <= self.JOINT_R:
                return Hit(HitKind.JOINT, joint.pin_id)
        for d in self.drawables:
            if d.connector_id is None or d.path is None:
                continue
            seg = d.path.segments[0]
            if _distance_to_segment(point, seg.start, seg.end) <= seg.stroke_width:
                return Hit(HitKind.CONNECTOR, d.connector_id)
        for node in self._nodes.values():
            if (node.x <= point.x <= node.x + self.NODE_W
                    and node.y <= point.y <= node.y + self.NODE_H):
                return Hit(HitKind.NODE, node.node_id)
        return NO_HIT

    def canvas_origin(self):
        return self.origin

    def canvas_bounds(self):
        return self.bounds


def _distance_to_segment(p, a, b):
    dx, dy = b.x - a.x, b.y - a.y
    length_sq = dx * dx + dy * dy
    if length_sq == 0:
        return math.hypot(p.x - a.x, p.y - a.y)
    t = max(0.0, min(1.0, ((p.x - a.x) * dx + (p.y - a.y) * dy) / length_sq))
    return math.hypot(p.x - (a.x + t * dx), p.y - (a.y + t * dy))


class FakeViewport:
    def __init__(self, scale=1.0, tx=0.0, ty=0.0):
        self.state = PanZoomState(scale, tx, ty)
        self.queries = 0

    def set(self, scale=1.0, tx=0.0, ty=0.0):
        self.state = PanZoomState(scale, tx, ty)

    def pan_zoom_state(self):
        self.queries += 1
        return self.state


class Recorder:
    """Collects every event published on a bus."""

    def __init__(self):
        self.events = []

    def __call__(self, event):
        self.events.append(event)

    def types(self):
        return [e.type for e in self.events]

    def of_type(self, event_type):
        return [e for e in self.events if e.type == event_type]

    def clear(self):
        self.events.clear()


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def scene():
    """Two nodes with two joints each, plus a node with a dead joint.

    a: at (0, 0), joints a-in (0, 25) and a-out (100, 25)
    b: at (300, 200), joints b-in (0, 25) and b-out (100, 25)
    c: at (300, 0), joint c-dead (0, 25) not connectable
    """
    s = FakeScene()
    s.add_node("a", 0, 0, [("a-in", 0, 25), ("a-out", 100, 25)])
    s.add_node("b", 300, 200, [("b-in", 0, 25), ("b-out", 100, 25)])
    s.add_node("c", 300, 0, [("c-dead", 0, 25, {"connectable": False})])
    return s


@pytest.fixture()
def viewport():
    return FakeViewport()


@pytest.fixture()
def config():
    return JointConfig()


@pytest.fixture()
def editor(scene, viewport, config):
    return JointEditor(scene, viewport, config)


@pytest.fixture()
def recorder(editor):
    rec = Recorder()
    editor.subscribe(rec)
    return rec


def client_point(scene, viewport, x, y):
    """Screen coordinates of local canvas point (x, y) under the current viewport."""
    st = viewport.state
    return (x * st.scale + st.translate_x + scene.origin.x,
            y * st.scale + st.translate_y + scene.origin.y)
