from __future__ import annotations

from typing import Dict, List

from .models import ProcessMetrics, ScheduleResult, SystemMetrics
from .timeline import Timeline


def compute_system_metrics(result: ScheduleResult) -> SystemMetrics:
    """
    Derive makespan, busy/idle time, throughput and CPU utilization from the
    result's timeline and attach them to ``result.system``.
    """
    timeline = Timeline.from_slices(result.timeline)
    makespan = timeline.end_time

    if makespan > 0:
        throughput = len(result.processes) / makespan
        cpu_utilization = timeline.busy_time / makespan
    else:
        throughput = cpu_utilization = 0.0

    result.system = SystemMetrics(
        cpu_busy_time=timeline.busy_time,
        makespan=makespan,
        idle_time=timeline.idle_time,
        throughput=throughput,
        cpu_utilization=cpu_utilization,
    )
    return result.system


def summarize_process_metrics(processes: List[ProcessMetrics]) -> Dict[str, float]:
    """Averages of the per-process times; an empty set averages to 0."""
    n = len(processes)
    if n == 0:
        return {"avg_waiting": 0.0, "avg_turnaround": 0.0, "avg_response": 0.0}

    return {
        "avg_waiting": sum(p.waiting_time for p in processes) / n,
        "avg_turnaround": sum(p.turnaround_time for p in processes) / n,
        "avg_response": sum(p.response_time for p in processes) / n,
    }
