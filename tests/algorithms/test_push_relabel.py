"""Tests for the highest-label push-relabel engine."""

import pytest

from preflow.algorithms.events import PushEvent, RelabelEvent
from preflow.algorithms.push_relabel import HighestLabelPushRelabel
from preflow.config import SolverConfig


def flows(network):
    return {key: attr["flow"] for key, (_, _, _, attr) in network.get_edges().items()}


class TestScenarios:
    def test_single_arc_needs_no_relabel(self, single_arc):
        engine = HighestLabelPushRelabel(single_arc, "S", "T")
        engine.run()

        assert engine.is_finished()
        assert engine.flow_value() == 7
        assert engine.relabels == 0
        assert engine.pushes == 1
        assert flows(single_arc) == {0: 7}

    def test_diamond(self, diamond):
        engine = HighestLabelPushRelabel(diamond, "S", "T")
        engine.run()

        assert engine.flow_value() == 15
        assert diamond.flow_value("S") == 15
        edge_flow = {
            (u, v): attr["flow"] for u, v, _, attr in diamond.get_edges().values()
        }
        assert edge_flow[("A", "T")] == 5
        assert edge_flow[("B", "T")] == 10

    def test_overflow_drains_back_to_source(self, overflow):
        events = []
        engine = HighestLabelPushRelabel(overflow, "S", "T", listener=events.append)
        engine.run()

        assert engine.flow_value() == 1
        assert flows(overflow) == {0: 1, 1: 1}
        assert engine.relabels == 2

        returns = [
            e for e in events if isinstance(e, PushEvent) and (e.start, e.end) == ("A", "S")
        ]
        assert len(returns) == 1
        assert returns[0].amount == 2
        assert returns[0].forward is False
        assert returns[0].edge_key == 0

    def test_overflow_event_sequence(self, overflow):
        events = []
        HighestLabelPushRelabel(overflow, "S", "T", listener=events.append).run()

        assert events == [
            PushEvent(0, "S", "A", 0, True, 3),
            RelabelEvent("A", 0, 1),
            PushEvent(2, "A", "T", 1, True, 1),
            RelabelEvent("A", 1, 4),
            PushEvent(1, "A", "S", 0, False, 2),
        ]

    def test_textbook_network(self, clrs):
        engine = HighestLabelPushRelabel(clrs, "s", "t")
        engine.run()
        assert engine.flow_value() == 23

    def test_parallel_and_antiparallel_arcs(self, parallel):
        engine = HighestLabelPushRelabel(parallel, "S", "T")
        engine.run()
        assert engine.flow_value() == 8
        for _, _, _, attr in parallel.get_edges().values():
            assert 0 <= attr["flow"] <= attr["capacity"]

    def test_unreachable_target(self, disconnected):
        engine = HighestLabelPushRelabel(disconnected, "S", "T")
        engine.run()
        assert engine.flow_value() == 0
        assert flows(disconnected) == {0: 0, 1: 0}

    def test_source_without_capacity_finishes_immediately(self, make_network):
        g = make_network("SAT", [("S", "A", 0), ("A", "T", 5)])
        engine = HighestLabelPushRelabel(g, "S", "T")

        assert engine.run_step() == []
        assert engine.is_finished()
        assert engine.flow_value() == 0

    def test_heights_after_run(self, overflow):
        engine = HighestLabelPushRelabel(overflow, "S", "T")
        engine.run()
        heights = engine.residual.snapshot().heights
        assert heights == {"S": 3, "A": 4, "T": 0}


class TestStepMode:
    def test_first_step_initializes(self, diamond):
        engine = HighestLabelPushRelabel(diamond, "S", "T")
        events = engine.run_step()

        assert [(e.start, e.end, e.amount) for e in events] == [
            ("S", "A", 10),
            ("S", "B", 10),
        ]
        assert engine.residual.vertices["S"].height == 4
        assert engine.active_vertices() == 2
        assert not engine.is_finished()

    def test_each_later_step_is_one_decision(self, diamond):
        engine = HighestLabelPushRelabel(diamond, "S", "T")
        engine.run_step()
        while not engine.is_finished():
            events = engine.run_step()
            assert len(events) == 1
            assert isinstance(events[0], (PushEvent, RelabelEvent))
        assert engine.run_step() == []

    def test_flows_written_back_only_when_finished(self, overflow):
        engine = HighestLabelPushRelabel(overflow, "S", "T")
        engine.run_step()
        assert flows(overflow) == {0: 0, 1: 0}
        assert engine.residual.arc_flow(0) == 3

        while not engine.is_finished():
            engine.run_step()
        assert flows(overflow) == {0: 1, 1: 1}

    def test_steps_match_batch(self, clrs):
        batch = clrs.copy()
        stepped = clrs.copy()

        batch_engine = HighestLabelPushRelabel(batch, "s", "t")
        batch_engine.run()

        step_engine = HighestLabelPushRelabel(stepped, "s", "t")
        while not step_engine.is_finished():
            step_engine.run_step()

        assert flows(batch) == flows(stepped)
        assert batch_engine.pushes == step_engine.pushes
        assert batch_engine.relabels == step_engine.relabels

    def test_run_after_partial_steps(self, clrs):
        engine = HighestLabelPushRelabel(clrs, "s", "t")
        for _ in range(3):
            engine.run_step()
        engine.run()
        assert engine.flow_value() == 23


class TestReset:
    def test_reset_then_run_gives_same_flow(self, clrs):
        engine = HighestLabelPushRelabel(clrs, "s", "t")
        engine.run()
        first = flows(clrs)

        engine.reset()
        assert not engine.is_finished()
        assert engine.pushes == engine.relabels == 0
        assert all(f == 0 for f in flows(clrs).values())
        assert all(s.height == 0 for s in engine.residual.vertices.values())

        engine.run()
        assert flows(clrs) == first
        assert engine.flow_value() == 23

    def test_reset_mid_run(self, overflow):
        engine = HighestLabelPushRelabel(overflow, "S", "T")
        engine.run_step()
        engine.run_step()
        engine.reset()
        assert engine.active_vertices() == 0
        assert engine.run_step()[0].amount == 3


class TestErrors:
    def test_invalid_endpoints(self, diamond):
        with pytest.raises(ValueError, match="must differ"):
            HighestLabelPushRelabel(diamond, "S", "S")
        with pytest.raises(ValueError, match="does not exist"):
            HighestLabelPushRelabel(diamond, "S", "Z")

    def test_unbalanced_starting_flow(self, make_network):
        g = make_network("SAT", [])
        g.add_arc("S", "A", capacity=5, flow=0)
        g.add_arc("A", "T", capacity=5, flow=2)
        with pytest.raises(ValueError, match="not conserved at node 'A'"):
            HighestLabelPushRelabel(g, "S", "T")

    def test_relabel_limit(self, overflow):
        engine = HighestLabelPushRelabel(
            overflow, "S", "T", config=SolverConfig(relabel_limit_factor=0)
        )
        with pytest.raises(RuntimeError, match="Relabel limit 1 exceeded"):
            engine.run()

    def test_invariant_checking_enabled(self, clrs):
        engine = HighestLabelPushRelabel(
            clrs, "s", "t", config=SolverConfig(check_invariants=True)
        )
        engine.run()
        assert engine.flow_value() == 23
