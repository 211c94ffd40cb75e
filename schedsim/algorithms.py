from __future__ import annotations

import logging
from collections import deque
from typing import Callable, Deque, Dict, Iterable, List, Optional, Set

from .metrics import compute_system_metrics
from .models import Process, ProcessMetrics, ScheduleResult
from .timeline import Timeline

logger = logging.getLogger(__name__)


def validate_processes(processes: Iterable[Process]) -> None:
    """
    Reject inputs that would make a schedule degenerate or non-terminating.
    """
    seen: Set[int] = set()
    for p in processes:
        if p.pid <= 0:
            raise ValueError(f"Process id must be a positive integer (got {p.pid})")
        if p.pid in seen:
            raise ValueError(f"Duplicate process id: {p.pid}")
        seen.add(p.pid)
        if p.arrival_time < 0:
            raise ValueError(f"P{p.pid}: arrival time must be non-negative (got {p.arrival_time})")
        if p.burst_time <= 0:
            raise ValueError(f"P{p.pid}: burst time must be positive (got {p.burst_time})")


def _run_to_completion(p: Process, time: int, timeline: Timeline) -> ProcessMetrics:
    """
    Dispatch ``p`` at ``time`` (or at its arrival, if later) and run it without
    interruption.
    """
    start_time = max(time, p.arrival_time)
    if start_time > time:
        logger.debug("CPU idle %d..%d", time, start_time)

    end_time = start_time + p.burst_time
    timeline.record(p.pid, start_time, end_time)
    logger.debug("t=%d: dispatch P%d until t=%d", start_time, p.pid, end_time)

    waiting_time = start_time - p.arrival_time
    return ProcessMetrics(
        pid=p.pid,
        arrival_time=p.arrival_time,
        burst_time=p.burst_time,
        start_time=start_time,
        completion_time=end_time,
        waiting_time=waiting_time,
        turnaround_time=end_time - p.arrival_time,
        response_time=waiting_time,  # non-preemptive: first response is the only one
        priority=p.priority,
    )


def _run_in_order(ordered: List[Process], algorithm: str) -> ScheduleResult:
    time = 0
    timeline = Timeline()
    metrics: List[ProcessMetrics] = []

    for p in ordered:
        m = _run_to_completion(p, time, timeline)
        metrics.append(m)
        time = m.completion_time

    result = ScheduleResult(algorithm=algorithm, quantum=None, processes=metrics, timeline=timeline.segments)
    compute_system_metrics(result)
    return result


def schedule_fcfs(processes: List[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    First-Come First-Serve (non-preemptive) scheduling.

    Processes run in ascending arrival order; equal arrivals keep their input
    order (``sorted`` is stable).
    """
    validate_processes(processes)
    return _run_in_order(sorted(processes, key=lambda p: p.arrival_time), "FCFS")


def schedule_sjf(processes: List[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Shortest Job First (non-preemptive).

    At each decision point, among processes that have arrived and are not yet
    completed, choose the one with the smallest burst time. Ties go to the
    earlier arrival, then the lower pid.
    """
    validate_processes(processes)

    time = 0
    timeline = Timeline()
    metrics: List[ProcessMetrics] = []
    pending: List[Process] = list(processes)

    while pending:
        ready = [p for p in pending if p.arrival_time <= time]

        if not ready:
            # Nothing has arrived yet: jump straight to the next arrival.
            next_arrival = min(p.arrival_time for p in pending)
            logger.debug("CPU idle %d..%d", time, next_arrival)
            time = next_arrival
            continue

        p = min(ready, key=lambda x: (x.burst_time, x.arrival_time, x.pid))
        m = _run_to_completion(p, time, timeline)
        metrics.append(m)

        pending.remove(p)
        time = m.completion_time

    result = ScheduleResult(
        algorithm="SJF (non-preemptive)", quantum=None, processes=metrics, timeline=timeline.segments
    )
    compute_system_metrics(result)
    return result


def schedule_rr(processes: List[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Round Robin scheduling with a fixed time quantum.

    After every slice, processes that arrived by the end of the slice are
    appended to the ready queue in input order, and only then is the
    preempted process put back at the tail. If the queue runs dry while some
    processes have not arrived yet, the clock jumps to the next arrival.
    """
    if quantum is None or quantum <= 0:
        raise ValueError("Round Robin requires a positive quantum (use --quantum)")
    validate_processes(processes)

    remaining: Dict[int, int] = {p.pid: p.burst_time for p in processes}
    proc_by_pid = {p.pid: p for p in processes}

    time = 0
    timeline = Timeline()
    metrics_map: Dict[int, ProcessMetrics] = {}

    ready: Deque[int] = deque()
    queued: Set[int] = set()

    def enqueue_new_arrivals(current_time: int, running: Optional[int] = None) -> None:
        for p in processes:
            if p.pid == running or p.pid in queued:
                continue
            if p.arrival_time <= current_time and remaining[p.pid] > 0:
                ready.append(p.pid)
                queued.add(p.pid)

    # Seed with processes that arrive at time 0
    enqueue_new_arrivals(time)

    while any(rt > 0 for rt in remaining.values()):
        if not ready:
            next_arrival = min(p.arrival_time for p in processes if remaining[p.pid] > 0)
            logger.debug("CPU idle %d..%d", time, next_arrival)
            time = next_arrival
            enqueue_new_arrivals(time)
            continue

        pid = ready.popleft()
        queued.discard(pid)
        p = proc_by_pid[pid]

        if pid not in metrics_map:
            metrics_map[pid] = ProcessMetrics(
                pid=pid,
                arrival_time=p.arrival_time,
                burst_time=p.burst_time,
                start_time=time,
                completion_time=0,  # filled on completion
                waiting_time=0,
                turnaround_time=0,
                response_time=time - p.arrival_time,
                priority=p.priority,
            )

        run_time = min(quantum, remaining[pid])
        timeline.record(pid, time, time + run_time)
        logger.debug("t=%d: P%d runs %d unit(s), %d left", time, pid, run_time, remaining[pid] - run_time)

        time += run_time
        remaining[pid] -= run_time

        # Arrivals during this slice go ahead of the process that just ran.
        enqueue_new_arrivals(time, running=pid)

        if remaining[pid] > 0:
            ready.append(pid)
            queued.add(pid)
        else:
            m = metrics_map[pid]
            m.completion_time = time
            m.turnaround_time = time - p.arrival_time
            m.waiting_time = m.turnaround_time - p.burst_time

    metrics = list(metrics_map.values())
    result = ScheduleResult(algorithm="Round Robin", quantum=quantum, processes=metrics, timeline=timeline.segments)
    compute_system_metrics(result)
    return result


def schedule_priority(processes: List[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Static Priority scheduling (non-preemptive).

    Lower numeric priority value means higher priority. The whole set is
    ordered once by (priority, arrival, pid) and run in that sequence; a
    process that arrives later but sorts earlier still runs first, and the
    CPU idles until it arrives. See ``schedule_priority_ready`` for the
    variant that only picks among arrived processes.
    """
    validate_processes(processes)
    ordered = sorted(processes, key=lambda p: (p.priority, p.arrival_time, p.pid))
    return _run_in_order(ordered, "Priority (static)")


def schedule_priority_ready(processes: List[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Non-preemptive Priority scheduling over the ready set.

    At each completion, choose among the processes that have arrived the one
    with the smallest priority value; break ties by earlier arrival time,
    then pid.
    """
    validate_processes(processes)

    time = 0
    timeline = Timeline()
    metrics: List[ProcessMetrics] = []
    pending: List[Process] = list(processes)

    while pending:
        ready = [p for p in pending if p.arrival_time <= time]

        if not ready:
            time = min(p.arrival_time for p in pending)
            continue

        p = min(ready, key=lambda x: (x.priority, x.arrival_time, x.pid))
        m = _run_to_completion(p, time, timeline)
        metrics.append(m)

        pending.remove(p)
        time = m.completion_time

    result = ScheduleResult(
        algorithm="Priority (ready set)", quantum=None, processes=metrics, timeline=timeline.segments
    )
    compute_system_metrics(result)
    return result


Scheduler = Callable[..., ScheduleResult]

ALGORITHMS: Dict[str, Scheduler] = {
    "fcfs": schedule_fcfs,
    "sjf": schedule_sjf,
    "rr": schedule_rr,
    "priority": schedule_priority,
    "priority-ready": schedule_priority_ready,
}

# Algorithms that take a time quantum.
QUANTUM_ALGORITHMS = {"rr"}


def run_algorithm(name: str, processes: List[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Dispatch to the requested algorithm. Quantum is only used by round-robin.
    """
    name = name.lower()
    if name not in ALGORITHMS:
        raise ValueError(f"Unknown algorithm '{name}' (choose from {', '.join(ALGORITHMS)})")

    func = ALGORITHMS[name]
    logger.info("Running %s on %d process(es)", name, len(processes))
    return func(processes, quantum=quantum)
