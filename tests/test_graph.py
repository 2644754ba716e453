"""Tests for ir/graph.py: CommitGraphModel indexing and reported conditions."""

from __future__ import annotations

import logging

from commit_graph.errors import DanglingReference, OrderingViolation
from commit_graph.ir.graph import CommitGraphModel
from commit_graph.ir.history import CommitRecord, mark_current, with_uncommitted_changes
from commit_graph.types import ParentStatus


def _model(*commits: tuple[str, ...]) -> CommitGraphModel:
    """Build a model from (id, *parents) tuples, newest first."""
    return CommitGraphModel.from_records(CommitRecord.new(*c) for c in commits)


class TestBasicConstruction:
    def test_empty_model(self):
        """No records gives an empty model with a clean report."""
        model = _model()
        assert len(model) == 0
        assert model.violations == []
        assert model.dangling == []

    def test_rows_follow_input_order(self):
        """Each vertex gets the row of its position in the input."""
        model = _model(("C", "B"), ("B", "A"), ("A",))
        assert [v.row for v in model] == [0, 1, 2]
        assert model.row_of("A") == 2
        assert model.row_of("missing") is None

    def test_vertex_flags_copied(self):
        """is_committed and is_current come from the records."""
        recs = [CommitRecord(id="W", parent_ids=("A",), is_committed=False), CommitRecord(id="A", is_current=True)]
        model = CommitGraphModel.from_records(recs)
        assert not model.vertex(0).is_committed
        assert model.vertex(1).is_current

    def test_merge_and_parent_properties(self):
        """is_merge needs two parents; has_parents needs one."""
        model = _model(("M", "A", "B"), ("A",), ("B",))
        assert model.vertex(0).is_merge
        assert model.vertex(0).has_parents
        assert not model.vertex(1).is_merge
        assert not model.vertex(1).has_parents

    def test_contains(self):
        model = _model(("B", "A"), ("A",))
        assert "A" in model
        assert "Z" not in model

    def test_duplicate_id_first_wins(self, caplog):
        """A repeated id is logged and the first row keeps the lookup."""
        with caplog.at_level(logging.WARNING, logger="commit_graph.ir.graph"):
            model = _model(("A",), ("A",))
        assert model.row_of("A") == 0
        assert model.report.duplicates == ["A"]
        assert "duplicate commit id A" in caplog.text


class TestParentResolution:
    def test_resolved_parent(self):
        model = _model(("B", "A"), ("A",))
        assert model.parent_status(0, "A") is ParentStatus.Resolved

    def test_missing_parent_reported_as_dangling(self):
        """A parent outside the window is a DanglingReference, not an error."""
        model = _model(("B", "A"))
        assert model.parent_status(0, "A") is ParentStatus.Missing
        assert model.dangling == [DanglingReference(row=0, commit_id="B", parent_id="A")]

    def test_parent_above_child_is_violation(self):
        """A parent listed before its child is an OrderingViolation."""
        model = _model(("A",), ("B", "A"))
        assert model.parent_status(1, "A") is ParentStatus.OutOfOrder
        assert model.violations == [OrderingViolation(row=1, commit_id="B", parent_id="A", parent_row=0)]

    def test_self_parent_is_violation(self):
        """A commit naming itself as parent resolves at its own row."""
        model = _model(("A", "A"))
        assert model.parent_status(0, "A") is ParentStatus.OutOfOrder
        assert len(model.violations) == 1

    def test_violation_describe_mentions_ids(self):
        model = _model(("A",), ("B", "A"))
        text = model.violations[0].describe()
        assert "A" in text and "B" in text and "row 1" in text


class TestDigraph:
    def test_edges_point_child_to_parent(self):
        model = _model(("M", "A", "B"), ("A",), ("B",))
        assert set(model.digraph.edges()) == {("M", "A"), ("M", "B")}

    def test_missing_parents_have_no_edge(self):
        model = _model(("B", "A"))
        assert model.digraph.number_of_edges() == 0

    def test_heads(self):
        """Heads are commits no other commit in the window points at."""
        model = _model(("F", "A"), ("E", "A"), ("A",))
        assert model.heads() == ["F", "E"]


class TestHistoryHelpers:
    def test_mark_current(self):
        recs = mark_current([CommitRecord.new("B", "A"), CommitRecord.new("A")], "A")
        assert [r.is_current for r in recs] == [False, True]

    def test_mark_current_none_is_noop(self):
        recs = [CommitRecord.new("A")]
        assert mark_current(recs, None) == recs

    def test_with_uncommitted_changes(self):
        """The working-tree row goes first, uncommitted, with HEAD as parent."""
        recs = with_uncommitted_changes([CommitRecord.new("A")], "A")
        assert recs[0].parent_ids == ("A",)
        assert not recs[0].is_committed
        assert recs[1].id == "A"
