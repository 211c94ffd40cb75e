import copy

import pytest

from schedsim.algorithms import (
    ALGORITHMS,
    run_algorithm,
    schedule_fcfs,
    schedule_priority,
    schedule_priority_ready,
    schedule_rr,
    schedule_sjf,
)
from schedsim.models import Process


def _procs():
    return [
        Process(1, arrival_time=0, burst_time=5, priority=2),
        Process(2, arrival_time=1, burst_time=3, priority=1),
        Process(3, arrival_time=2, burst_time=8, priority=3),
    ]


def _mixed():
    return [
        Process(1, arrival_time=0, burst_time=7, priority=3),
        Process(2, arrival_time=2, burst_time=4, priority=1),
        Process(3, arrival_time=4, burst_time=1, priority=4),
        Process(4, arrival_time=5, burst_time=4, priority=2),
        Process(5, arrival_time=30, burst_time=2, priority=1),
    ]


def _run(name, processes):
    return run_algorithm(name, processes, quantum=2 if name == "rr" else None)


def test_fcfs_two_process_scenario():
    res = schedule_fcfs([Process(1, 0, 5), Process(2, 1, 3)])
    p1, p2 = res.metrics_for(1), res.metrics_for(2)
    assert (p1.waiting_time, p1.completion_time, p1.turnaround_time) == (0, 5, 5)
    assert (p2.waiting_time, p2.completion_time, p2.turnaround_time) == (4, 8, 7)


def test_fcfs_order():
    res = schedule_fcfs(_procs())
    assert [s.pid for s in res.timeline] == [1, 2, 3]
    assert [p.waiting_time for p in res.by_pid()] == [0, 4, 6]


def test_fcfs_equal_arrivals_keep_input_order():
    res = schedule_fcfs([Process(2, 0, 1), Process(1, 0, 1)])
    assert [s.pid for s in res.timeline] == [2, 1]


def test_fcfs_idle_gap_is_elided():
    res = schedule_fcfs([Process(1, 3, 2), Process(2, 10, 1)])
    assert [(s.start_time, s.end_time) for s in res.timeline] == [(3, 5), (10, 11)]
    assert res.system.idle_time == 8


def test_fcfs_is_deterministic():
    first = schedule_fcfs(_mixed())
    second = schedule_fcfs(_mixed())
    assert [p.completion_time for p in first.by_pid()] == [p.completion_time for p in second.by_pid()]


def test_sjf_order():
    res = schedule_sjf(_procs())
    assert [s.pid for s in res.timeline] == [1, 2, 3]


def test_sjf_picks_shortest_arrived_job():
    res = schedule_sjf(_mixed()[:4])
    # P1 is alone at t=0; at t=7 P3 is shortest, then P2 beats P4 on arrival.
    assert [s.pid for s in res.timeline] == [1, 3, 2, 4]
    assert res.metrics_for(3).completion_time == 8
    assert res.metrics_for(4).completion_time == 16


def test_sjf_tie_break_arrival_then_pid():
    res = schedule_sjf([Process(3, 1, 3), Process(2, 1, 3), Process(1, 0, 2)])
    assert [s.pid for s in res.timeline] == [1, 2, 3]


def test_sjf_selection_is_minimal_at_each_decision():
    procs = _mixed()
    res = schedule_sjf(procs)
    finished = set()
    for sl in res.timeline:
        candidates = [p for p in procs if p.pid not in finished and p.arrival_time <= sl.start_time]
        chosen = next(p for p in procs if p.pid == sl.pid)
        assert chosen.burst_time == min(p.burst_time for p in candidates)
        finished.add(sl.pid)


def test_sjf_jumps_to_next_arrival():
    res = schedule_sjf([Process(1, 4, 2)])
    assert res.timeline[0].start_time == 4
    assert res.metrics_for(1).waiting_time == 0


def test_rr_two_process_scenario():
    res = schedule_rr([Process(1, 0, 4), Process(2, 0, 3)], quantum=2)
    assert [(s.pid, s.end_time) for s in res.timeline] == [(1, 2), (2, 4), (1, 6), (2, 7)]
    p1, p2 = res.metrics_for(1), res.metrics_for(2)
    assert (p1.completion_time, p1.waiting_time, p1.turnaround_time) == (6, 2, 6)
    assert (p2.completion_time, p2.waiting_time, p2.turnaround_time) == (7, 4, 7)


def test_rr_quantum_2():
    res = schedule_rr(_procs(), quantum=2)
    assert {s.pid for s in res.timeline} == {1, 2, 3}
    assert sum(p.burst_time for p in _procs()) == res.system.cpu_busy_time


def test_rr_arrivals_go_ahead_of_preempted_process():
    res = schedule_rr([Process(1, 0, 5), Process(2, 1, 2)], quantum=3)
    assert [(s.pid, s.end_time) for s in res.timeline] == [(1, 3), (2, 5), (1, 7)]


def test_rr_arrival_at_slice_end_counts_as_arrived():
    res = schedule_rr([Process(1, 0, 4), Process(2, 2, 2)], quantum=2)
    assert [(s.pid, s.end_time) for s in res.timeline] == [(1, 2), (2, 4), (1, 6)]


def test_rr_idle_advance_when_queue_empties():
    res = schedule_rr([Process(1, 0, 1), Process(2, 5, 2)], quantum=2)
    assert [(s.pid, s.start_time, s.end_time) for s in res.timeline] == [(1, 0, 1), (2, 5, 7)]
    assert res.metrics_for(2).waiting_time == 0


def test_rr_nothing_arrives_at_zero():
    res = schedule_rr([Process(1, 4, 3)], quantum=2)
    assert [(s.start_time, s.end_time) for s in res.timeline] == [(4, 6), (6, 7)]
    assert res.metrics_for(1).completion_time == 7


def test_rr_slices_add_up_to_burst():
    procs = _mixed()
    res = schedule_rr(procs, quantum=3)
    for p in procs:
        assert sum(s.duration for s in res.timeline if s.pid == p.pid) == p.burst_time
        assert all(s.duration <= 3 for s in res.timeline)


def test_rr_requeued_process_waits_at_most_one_turn_per_queued_peer():
    procs = [
        Process(1, 0, 7),
        Process(2, 1, 5),
        Process(3, 3, 4),
        Process(4, 8, 6),
        Process(5, 9, 3),
    ]
    quantum = 3
    res = schedule_rr(procs, quantum=quantum)
    completion = {p.pid: p.completion_time for p in res.processes}

    slices = res.timeline
    for i, sl in enumerate(slices):
        requeued_at = sl.end_time
        if completion[sl.pid] == requeued_at:
            continue
        # Everything that has arrived and is unfinished sits in the queue with it.
        queued = {p.pid for p in procs if p.arrival_time <= requeued_at and completion[p.pid] > requeued_at}
        k = len(queued)

        nxt = next(s for s in slices[i + 1:] if s.pid == sl.pid)
        between = [s.pid for s in slices[i + 1:] if s.start_time < nxt.start_time]
        assert nxt.start_time - requeued_at <= (k - 1) * quantum
        assert len(between) == len(set(between)) <= k - 1
        assert set(between) <= queued - {sl.pid}


@pytest.mark.parametrize("quantum", [None, 0, -1])
def test_rr_rejects_bad_quantum(quantum):
    with pytest.raises(ValueError):
        schedule_rr(_procs(), quantum=quantum)


def test_priority_static():
    res = schedule_priority(_procs())
    # P2 sorts first and the CPU idles until it arrives at t=1.
    assert [s.pid for s in res.timeline] == [2, 1, 3]
    assert res.timeline[0].start_time == 1
    assert [p.waiting_time for p in res.by_pid()] == [4, 0, 7]


def test_priority_ties_broken_by_arrival():
    res = schedule_priority([Process(1, 3, 1, priority=1), Process(2, 0, 1, priority=1)])
    assert [s.pid for s in res.timeline] == [2, 1]


def test_priority_completion_follows_priority_order():
    res = schedule_priority(_mixed())
    order = sorted(_mixed(), key=lambda p: (p.priority, p.arrival_time, p.pid))
    completions = [res.metrics_for(p.pid).completion_time for p in order]
    assert completions == sorted(completions)


def test_priority_ready_only_considers_arrived():
    res = schedule_priority_ready(_procs())
    assert [s.pid for s in res.timeline] == [1, 2, 3]


@pytest.mark.parametrize("name", sorted(ALGORITHMS))
def test_invariants_hold(name):
    res = _run(name, _mixed())
    assert len(res.processes) == len(_mixed())
    for p in res.processes:
        assert p.turnaround_time == p.waiting_time + p.burst_time
        assert p.turnaround_time == p.completion_time - p.arrival_time
        assert p.completion_time >= p.arrival_time + p.burst_time
    for prev, nxt in zip(res.timeline, res.timeline[1:]):
        assert nxt.start_time >= prev.end_time


@pytest.mark.parametrize("name", sorted(ALGORITHMS))
def test_empty_input(name):
    res = _run(name, [])
    assert res.processes == []
    assert res.timeline == []
    assert res.system.makespan == 0


@pytest.mark.parametrize("name", sorted(ALGORITHMS))
def test_inputs_are_not_mutated(name):
    procs = _mixed()
    before = copy.deepcopy(procs)
    _run(name, procs)
    assert procs == before


@pytest.mark.parametrize(
    "procs",
    [
        [Process(1, 0, 0)],
        [Process(1, 0, -2)],
        [Process(1, -1, 3)],
        [Process(1, 0, 1), Process(1, 2, 1)],
        [Process(0, 0, 1)],
        [Process(-1, 0, 1)],
    ],
)
def test_invalid_processes_rejected(procs):
    for name in ALGORITHMS:
        with pytest.raises(ValueError):
            _run(name, procs)


def test_run_algorithm_dispatch():
    assert run_algorithm("FCFS", _procs()).algorithm == "FCFS"
    with pytest.raises(ValueError, match="Unknown algorithm"):
        run_algorithm("srtf", _procs())
