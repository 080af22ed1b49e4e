"""Tests for the move-node gesture driven through the editor."""
from __future__ import annotations

from canvas.drag import DragState
from canvas.editor import JointEditor
from events import EventType
from models import Point, RawInput

from conftest import FakeScene, client_point


def _press(editor, x, y):
    editor.dispatch(RawInput("mousedown", x, y))


def _move(editor, x, y):
    editor.dispatch(RawInput("mousemove", x, y))


def _release(editor, x=None, y=None):
    editor.dispatch(RawInput("mouseup", x, y))


class TestMoveNode:
    def test_scaled_and_panned_drag(self, editor, scene, viewport):
        """At scale 2 a 20px screen move is 10 logical units."""
        viewport.set(2, 10, 10)
        sx, sy = client_point(scene, viewport, 50, 10)
        _press(editor, sx, sy)
        _move(editor, sx + 20, sy + 20)
        _release(editor, sx + 20, sy + 20)
        assert scene.node("a").position == Point(10, 10)

    def test_identity_viewport(self, editor, scene, viewport):
        sx, sy = client_point(scene, viewport, 50, 10)
        _press(editor, sx, sy)
        _move(editor, sx + 33, sy - 4)
        assert scene.node("a").position == Point(33, -4)

    def test_position_is_rounded(self, editor, scene, viewport):
        viewport.set(3, 0, 0)
        sx, sy = client_point(scene, viewport, 50, 10)
        _press(editor, sx, sy)
        _move(editor, sx + 10, sy + 5)  # 3.33.., 1.66..
        assert scene.node("a").position == Point(3, 2)

    def test_sampling_rate_does_not_matter(self, viewport):
        def run(steps):
            s = FakeScene()
            s.add_node("a", 0, 0)
            ed = JointEditor(s, viewport)
            sx, sy = client_point(s, viewport, 50, 10)
            _press(ed, sx, sy)
            for i in range(1, steps + 1):
                _move(ed, sx + 37 * i / steps, sy + 91 * i / steps)
            _release(ed)
            return s.node("a").position

        viewport.set(1.5, 4, -7)
        assert run(1) == run(3) == run(17)

    def test_out_of_bounds_tick_is_skipped(self, editor, scene, viewport, recorder):
        sx, sy = client_point(scene, viewport, 50, 10)
        _press(editor, sx, sy)
        _move(editor, sx + 10, sy + 10)
        assert scene.node("a").position == Point(10, 10)

        _move(editor, scene.origin.x - 5, sy + 10)  # left of the canvas
        assert scene.node("a").position == Point(10, 10)

        _move(editor, sx + 20, sy + 20)
        assert scene.node("a").position == Point(20, 20)

        _release(editor, sx + 20, sy + 20)
        assert editor.drag.active is False
        assert recorder.events[-1].type == EventType.DRAG_END
        assert recorder.events[-1].payload == {"node_id": "a", "x": 20, "y": 20}

    def test_node_not_draggable(self, editor, scene, viewport, recorder):
        scene.node("a").draggable = False
        sx, sy = client_point(scene, viewport, 50, 10)
        _press(editor, sx, sy)
        _move(editor, sx + 10, sy + 10)
        assert scene.node("a").position == Point(0, 0)
        assert EventType.DRAG_BEGIN not in recorder.types()

    def test_press_on_empty_canvas(self, editor, scene, viewport, recorder):
        sx, sy = client_point(scene, viewport, 200, 400)
        _press(editor, sx, sy)
        _move(editor, sx + 10, sy + 10)
        _release(editor, sx + 10, sy + 10)
        assert scene.node("a").position == Point(0, 0)
        assert recorder.events == []

    def test_end_while_idle_is_silent(self, editor, recorder):
        editor.drag.end()
        assert editor.drag.state == DragState.IDLE
        assert recorder.events == []


class TestEvents:
    def test_sequence(self, editor, scene, viewport, recorder):
        sx, sy = client_point(scene, viewport, 50, 10)
        _press(editor, sx, sy)
        _move(editor, sx + 5, sy)
        _move(editor, sx + 10, sy)
        _release(editor, sx + 10, sy)

        assert recorder.types() == [
            EventType.DRAG_BEGIN, EventType.DRAG, EventType.DRAG, EventType.DRAG_END,
        ]
        assert recorder.events[0].payload == {"node_id": "a", "x": 0, "y": 0}
        assert recorder.events[2].payload == {"node_id": "a", "x": 10, "y": 0}
        assert recorder.events[-1].payload == {"node_id": "a", "x": 10, "y": 0}

    def test_drag_end_without_move(self, editor, scene, viewport, recorder):
        sx, sy = client_point(scene, viewport, 50, 10)
        _press(editor, sx, sy)
        _release(editor, sx, sy)
        assert recorder.types() == [EventType.DRAG_BEGIN, EventType.DRAG_END]
        assert recorder.events[-1].payload["node_id"] == "a"

    def test_state_machine(self, editor, scene, viewport):
        sx, sy = client_point(scene, viewport, 50, 10)
        assert editor.drag.state == DragState.IDLE
        _press(editor, sx, sy)
        assert editor.drag.state == DragState.ARMED
        _move(editor, sx + 1, sy)
        assert editor.drag.state == DragState.DRAGGING
        _release(editor)
        assert editor.drag.state == DragState.IDLE
        assert not editor.drag.active


class TestConnectorsFollow:
    def test_connectors_redrawn_on_move(self, editor, scene, viewport):
        first = editor.connect("a-out", "b-in")
        second = editor.connect("a-in", "b-out")
        draws = (first.drawable.draws, second.drawable.draws)

        sx, sy = client_point(scene, viewport, 50, 10)
        _press(editor, sx, sy)
        _move(editor, sx + 10, sy + 20)

        assert first.drawable.draws == draws[0] + 1
        assert second.drawable.draws == draws[1] + 1
        assert first.drawable.path.segments[0].start == Point(110, 45)
        assert second.drawable.path.segments[0].start == Point(10, 45)

    def test_redrawn_before_drag_event(self, editor, scene, viewport):
        c = editor.connect("a-out", "b-in")
        seen = []
        editor.subscribe(
            lambda e: seen.append(c.drawable.path.segments[0].start)
            if e.type == EventType.DRAG else None
        )
        sx, sy = client_point(scene, viewport, 50, 10)
        _press(editor, sx, sy)
        _move(editor, sx + 10, sy)
        assert seen == [Point(110, 25)]

    def test_unrelated_connectors_untouched(self, editor, scene, viewport):
        scene.add_node("d", 600, 400, [("d-in", 0, 0)])
        other = editor.connect("b-out", "d-in")
        draws = other.drawable.draws
        sx, sy = client_point(scene, viewport, 50, 10)
        _press(editor, sx, sy)
        _move(editor, sx + 10, sy)
        assert other.drawable.draws == draws


class TestDragOnCreation:
    def test_begin_at_places_node_and_follows(self, editor, scene, viewport, recorder):
        scene.add_node("new", 0, 0)
        cx, cy = scene.origin.x + 250, scene.origin.y + 300
        assert editor.start_drag_on_creation("new", cx, cy)
        assert scene.node("new").position == Point(250, 300)
        assert recorder.types() == [EventType.DRAG_BEGIN]

        _move(editor, cx + 15, cy + 5)
        assert scene.node("new").position == Point(265, 305)
        _release(editor, cx + 15, cy + 5)
        assert recorder.events[-1].payload == {"node_id": "new", "x": 265, "y": 305}

    def test_begin_at_refused_while_dragging(self, editor, scene, viewport):
        scene.add_node("new", 0, 0)
        sx, sy = client_point(scene, viewport, 50, 10)
        _press(editor, sx, sy)
        assert editor.start_drag_on_creation("new", 300, 300) is False
        assert editor.drag.session.subject_id == "a"

    def test_begin_at_unknown_node(self, editor):
        assert editor.start_drag_on_creation("ghost", 10, 10) is False
