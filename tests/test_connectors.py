"""Tests for ConnectorStore: creation rules, lookup, deletion, redraw."""
from __future__ import annotations

import pytest

from canvas.connectors import ConnectorStore
from canvas.transform import CoordinateTransformer
from events import EventBus, EventType
from models import Connector, JointConfig, PathType, Point, Rejected

from conftest import Recorder


@pytest.fixture()
def bus():
    return EventBus()


@pytest.fixture()
def rec(bus):
    r = Recorder()
    bus.subscribe(r)
    return r


@pytest.fixture()
def store(scene, viewport, bus):
    return ConnectorStore(scene, CoordinateTransformer(scene, viewport), JointConfig(), bus)


# ---------------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------------

class TestCreate:
    def test_creates_and_draws(self, store, scene):
        c = store.create("a-out", "b-in")
        assert isinstance(c, Connector)
        assert c.endpoints == ("a-out", "b-in")
        assert c.path_type == PathType.TRIPLE_LINE
        assert c.drawable in scene.drawables
        assert c.drawable.path.segments[0].start == Point(100, 25)
        assert c.drawable.path.segments[0].end == Point(300, 225)

    def test_ids_are_unique_and_increasing(self, store):
        first = store.create("a-out", "b-in")
        second = store.create("a-in", "b-out")
        assert second.connector_id > first.connector_id

    def test_explicit_path_type(self, store):
        c = store.create("a-out", "b-in", PathType.LINE)
        assert c.path_type == PathType.LINE
        assert len(c.drawable.path.segments) == 1

    @pytest.mark.parametrize("a, b", [
        ("a-out", "a-out"),      # same joint
        ("a-out", "missing"),    # unknown joint
        ("a-out", "c-dead"),     # not connectable
    ])
    def test_rejections(self, store, scene, a, b):
        result = store.create(a, b)
        assert isinstance(result, Rejected)
        assert not result
        assert len(store) == 0
        assert scene.drawables == []

    def test_unknown_path_type(self, store):
        assert isinstance(store.create("a-out", "b-in", "zigzag"), Rejected)

    def test_incompatible_kinds(self, scene, store):
        scene.add_node("d", 600, 0, [("d-int", 0, 0, {"kind": "int"})])
        scene.add_node("e", 600, 300, [("e-str", 0, 0, {"kind": "str"}),
                                       ("e-any", 50, 0)])
        assert isinstance(store.create("d-int", "e-str"), Rejected)
        assert isinstance(store.create("d-int", "e-any"), Connector)

    def test_zero_length(self, scene, store):
        scene.add_node("d", 0, 0, [("d-in", 0, 25)])
        result = store.create("a-in", "d-in")
        assert isinstance(result, Rejected)
        assert "zero-length" in result.reason

    def test_duplicate_rejected_in_either_orientation(self, store):
        assert isinstance(store.create("a-out", "b-in"), Connector)
        assert isinstance(store.create("a-out", "b-in"), Rejected)
        assert isinstance(store.create("b-in", "a-out"), Rejected)
        assert len(store) == 1

    def test_duplicates_allowed_when_not_unique(self, scene, viewport):
        store = ConnectorStore(
            scene, CoordinateTransformer(scene, viewport),
            JointConfig(unique_connectors=False),
        )
        store.create("a-out", "b-in")
        store.create("a-out", "b-in")
        assert len(store) == 2

    def test_create_does_not_notify(self, store, rec):
        store.create("a-out", "b-in")
        assert rec.events == []


# ---------------------------------------------------------------------------
# Lookup
# ---------------------------------------------------------------------------

class TestLookup:
    def test_find_by_id(self, store):
        c = store.create("a-out", "b-in")
        assert store.find_by_id(c.connector_id) is c
        assert store.find_by_id(9999) is None

    def test_find_by_endpoint_returns_first(self, store):
        first = store.create("a-out", "b-in")
        store.create("a-out", "b-out")
        assert store.find_by_endpoint_pin_id("a-out") is first
        assert store.find_by_endpoint_pin_id("b-out").endpoint_b == "b-out"
        assert store.find_by_endpoint_pin_id("c-dead") is None

    def test_pin_id_for(self, store):
        c = store.create("b-in", "a-out")
        assert store.pin_id_for(c.connector_id) == "b-in"
        assert store.pin_id_for(42) is None

    def test_connectors_for_node(self, store):
        ab = store.create("a-out", "b-in")
        ab2 = store.create("a-in", "b-out")
        assert store.connectors_for_node("a") == [ab, ab2]
        assert store.connectors_for_node("c") == []


# ---------------------------------------------------------------------------
# Delete
# ---------------------------------------------------------------------------

class TestDelete:
    def test_delete_preserves_order(self, store, scene):
        scene.add_node("d", 600, 400, [("d-in", 0, 0), ("d-out", 20, 0)])
        c1 = store.create("a-out", "b-in")
        c2 = store.create("a-in", "b-out")
        c3 = store.create("a-out", "d-in")
        c4 = store.create("b-out", "d-out")

        assert store.delete_by_id(c2.connector_id)
        assert store.ids() == [c1.connector_id, c3.connector_id, c4.connector_id]
        assert store.find_by_id(c2.connector_id) is None
        assert c2.drawable is None

    def test_delete_removes_drawable_and_notifies(self, store, scene, rec):
        c = store.create("a-out", "b-in")
        drawable = c.drawable
        store.delete_by_id(c.connector_id)
        assert drawable not in scene.drawables
        assert rec.types() == [EventType.DELETE]
        assert rec.events[0].payload == {"connector_id": c.connector_id}

    def test_delete_unknown(self, store, rec):
        assert store.delete_by_id(7) is False
        assert rec.events == []

    def test_delete_all(self, store, scene, rec):
        ids = [
            store.create("a-out", "b-in").connector_id,
            store.create("a-in", "b-out").connector_id,
            store.create("a-in", "b-in").connector_id,
        ]
        assert store.delete_all() == 3
        assert len(store) == 0
        assert scene.drawables == []
        assert [e.payload["connector_id"] for e in rec.of_type(EventType.DELETE)] == ids

    def test_delete_all_empty(self, store, rec):
        assert store.delete_all() == 0
        assert rec.events == []

    def test_delete_for_node(self, store):
        store.create("a-out", "b-in")
        store.create("a-in", "b-out")
        scene_only_b = store.create("b-in", "b-out")
        assert store.delete_for_node("a") == 2
        assert store.ids() == [scene_only_b.connector_id]


# ---------------------------------------------------------------------------
# Redraw
# ---------------------------------------------------------------------------

class TestRedraw:
    def test_redraw_follows_node(self, store, scene):
        c = store.create("a-out", "b-in")
        scene.move_node("a", 50, 50)
        assert store.redraw(c)
        assert c.drawable.path.segments[0].start == Point(150, 75)

    def test_redraw_all_flags_and_purges_stale(self, store, scene, rec):
        keep = store.create("a-out", "b-in")
        gone = store.create("a-in", "b-out")
        scene.remove_joint("b-out")

        assert store.redraw_all() == [gone.connector_id]
        assert store.stale == [gone.connector_id]
        # flagged only, not yet removed
        assert store.find_by_id(gone.connector_id) is gone

        assert store.purge_stale() == 1
        assert store.ids() == [keep.connector_id]
        assert store.stale == []
        assert rec.of_type(EventType.DELETE)[0].payload["connector_id"] == gone.connector_id

    def test_redraw_missing_node(self, store, scene):
        c = store.create("a-out", "b-in")
        scene.remove_node("b")
        assert store.redraw(c) is False
