"""Tests for VersionStore and the store() factory."""

import threading

import pytest

from annohist import Failure, HistoryGraph, VersionStore, lineage, store


@pytest.fixture
def vs(ids, clock):
    return VersionStore(ids=ids, clock=clock)


class TestStoreFactory:
    def test_default(self):
        s = store()
        assert isinstance(s, VersionStore)
        assert len(s) == 0

    def test_counter_ids(self):
        s = store(ids="counter")
        g = s.commit("a.json", "edit", 1, initial_state=0)
        assert g.root.startswith("v1-")
        assert g.head.startswith("v2-")

    def test_invalid_ids(self):
        with pytest.raises(ValueError, match="Unknown ids"):
            store(ids="bogus")  # type: ignore[arg-type]

    def test_clock_and_summary(self, clock):
        s = store(clock=clock, initial_summary="loaded")
        g = s.ensure("a.json", "s0")
        assert g.root_node.summary == "loaded"
        assert g.root_node.timestamp == 1_700_000_000.0


class TestEnsure:
    def test_fresh_graph_not_stored(self, vs):
        g = vs.ensure("a.json", "s0")
        assert isinstance(g, HistoryGraph)
        assert g.head == g.root
        assert g.redo_stack == ()
        assert g.head_node.state == "s0"
        assert "a.json" not in vs

    def test_existing_graph(self, vs):
        g = vs.commit("a.json", "edit", "s1", initial_state="s0")
        assert vs.ensure("a.json", "ignored") is g


class TestMapping:
    def test_set_get_delete(self, vs):
        g = vs.ensure("a.json", "s0")
        vs["a.json"] = g
        assert vs["a.json"] is g
        assert list(vs) == ["a.json"]
        del vs["a.json"]
        assert "a.json" not in vs

    def test_set_rejects_non_graph(self, vs):
        with pytest.raises(TypeError, match="HistoryGraph"):
            vs["a.json"] = {"nodes": {}}

    def test_get_missing(self, vs):
        assert vs.get("nope") is None
        with pytest.raises(KeyError):
            vs["nope"]

    def test_clear(self, vs):
        vs.commit("a.json", "edit", 1, initial_state=0)
        vs.commit("b.json", "edit", 1, initial_state=0)
        vs.clear()
        assert len(vs) == 0


class TestOperations:
    def test_commit_stores_result(self, vs):
        g = vs.commit("a.json", "edit1", "s1", initial_state="s0")
        assert vs["a.json"] is g
        assert len(g) == 2
        assert g.root_node.state == "s0"
        assert g.head_node.state == "s1"

    def test_commit_appends(self, vs):
        vs.commit("a.json", "edit1", "s1", initial_state="s0")
        g = vs.commit("a.json", "edit2", "s2")
        assert len(g) == 3
        assert g.root_node.state == "s0"

    def test_undo_redo(self, vs):
        g = vs.commit("a.json", "edit1", "s1", initial_state="s0")
        out = vs.undo("a.json")
        assert out.state == "s0"
        assert vs["a.json"] is out.graph
        assert vs.can_redo("a.json")
        out = vs.redo("a.json")
        assert out.state == "s1"
        assert vs["a.json"].head == g.head
        assert not vs.can_redo("a.json")

    def test_failed_op_not_stored(self, vs):
        out = vs.undo("a.json", initial_state="s0")
        assert out.failure is Failure.AT_ROOT
        assert "a.json" not in vs

    def test_failed_op_leaves_graph(self, vs):
        g = vs.commit("a.json", "edit1", "s1", initial_state="s0")
        out = vs.redo("a.json")
        assert out.failure is Failure.NO_REDO
        assert vs["a.json"] is g

    def test_checkout(self, vs):
        g = vs.commit("a.json", "edit1", "s1", initial_state="s0")
        out = vs.checkout("a.json", g.root)
        assert out.state == "s0"
        assert vs["a.json"].head_node.parent_id == g.root

    def test_checkout_missing(self, vs):
        vs.commit("a.json", "edit1", "s1", initial_state="s0")
        out = vs.checkout("a.json", "ghost")
        assert out.failure is Failure.NOT_FOUND

    def test_uses_store_clock_and_ids(self, vs):
        g = vs.commit("a.json", "edit1", "s1", initial_state="s0")
        assert (g.root, g.head) == ("n0", "n1")
        assert g.head_node.timestamp == g.root_node.timestamp + 1


class TestIsolation:
    def test_keys_independent(self, vs):
        vs.commit("a.json", "a1", "a1", initial_state="a0")
        vs.commit("a.json", "a2", "a2")
        vs.commit("b.txt", "b1", "b1", initial_state="b0")
        vs.undo("a.json")
        a, b = vs["a.json"], vs["b.txt"]
        assert len(a) == 3
        assert len(b) == 2
        assert set(a.nodes).isdisjoint(b.nodes)
        assert b.redo_stack == ()
        assert a.redo_stack != ()

    def test_queries_per_key(self, vs):
        vs.commit("a.json", "a1", "a1", initial_state="a0")
        assert vs.can_undo("a.json")
        assert not vs.can_undo("b.txt")
        assert not vs.can_redo("b.txt")

    def test_project(self, vs):
        g = vs.commit("a.json", "a1", "a1", initial_state="a0")
        p = vs.project("a.json")
        assert p.active_path == (g.head, g.root)
        assert vs.project("missing").tree == ()

    def test_preview(self, vs):
        g = vs.commit("a.json", "a1", "a1", initial_state="a0")
        assert vs.preview("a.json", g.root) == "a0"
        assert vs["a.json"].head == g.head
        assert vs.preview("missing", g.root) is None


class TestSerializedWrites:
    def test_concurrent_commits_not_lost(self):
        vs = VersionStore()
        vs.commit("a.json", "seed", 0, initial_state=None)

        def worker(n):
            for i in range(50):
                vs.commit("a.json", f"w{n}-{i}", i)

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        g = vs["a.json"]
        assert len(g) == 2 + 4 * 50
        assert len(list(lineage(g))) == len(g)
