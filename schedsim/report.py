from __future__ import annotations

from typing import List, Optional

from rich import box
from rich.console import Console
from rich.table import Table

from .gantt import build_rich_gantt, render_gantt
from .metrics import summarize_process_metrics
from .models import ScheduleResult

RESULT_HEADERS = ["PID", "Arrival", "Burst", "Priority", "Waiting", "Turnaround", "Completion"]


def result_rows(result: ScheduleResult) -> List[List[str]]:
    """
    Table rows for a result, ordered by pid regardless of execution order.
    """
    return [
        [
            f"P{p.pid}",
            str(p.arrival_time),
            str(p.burst_time),
            str(p.priority),
            str(p.waiting_time),
            str(p.turnaround_time),
            str(p.completion_time),
        ]
        for p in result.by_pid()
    ]


def build_results_table(result: ScheduleResult) -> Table:
    table = Table(title="Process Execution Results", box=box.SIMPLE_HEAVY)
    for h in RESULT_HEADERS:
        justify = "center" if h == "PID" else "right"
        table.add_column(h, justify=justify)

    for row in result_rows(result):
        table.add_row(*row)
    return table


def format_averages(result: ScheduleResult) -> List[str]:
    summary = summarize_process_metrics(result.processes)
    return [
        f"Average Waiting Time: {summary['avg_waiting']:.2f}",
        f"Average Turnaround Time: {summary['avg_turnaround']:.2f}",
    ]


def build_system_table(result: ScheduleResult) -> Optional[Table]:
    if result.system is None:
        return None

    sys = result.system
    summary = summarize_process_metrics(result.processes)
    sys_table = Table(title="System metrics", box=box.SIMPLE_HEAVY)
    sys_table.add_column("Metric")
    sys_table.add_column("Value", justify="right")

    sys_table.add_row("Avg response", f"{summary['avg_response']:.2f}")
    sys_table.add_row("Makespan", str(sys.makespan))
    sys_table.add_row("Idle time", str(sys.idle_time))
    sys_table.add_row("Throughput (proc/time)", f"{sys.throughput:.3f}")
    sys_table.add_row("CPU utilization", f"{sys.cpu_utilization*100:.1f}%")
    return sys_table


def print_result(result: ScheduleResult, console: Optional[Console] = None, plain: bool = False) -> None:
    """
    Print the results table, averages and Gantt chart of a finished run.
    """
    console = console or Console()

    console.print(f"[bold]Algorithm:[/bold] {result.algorithm}")
    if result.quantum is not None:
        console.print(f"[bold]Quantum:[/bold] {result.quantum}")

    console.print()
    console.print(build_results_table(result))
    for line in format_averages(result):
        console.print(line)
    console.print()

    if plain:
        console.print(render_gantt(result.timeline), markup=False, highlight=False)
    else:
        panel, time_marks = build_rich_gantt(result.timeline)
        console.print(panel)
        if time_marks:
            console.print(time_marks, highlight=False)

    sys_table = build_system_table(result)
    if sys_table is not None:
        console.print()
        console.print(sys_table)


def build_compare_table(results: List[ScheduleResult], title: str = "Algorithm comparison") -> Table:
    summary_table = Table(title=title, box=box.SIMPLE_HEAVY)
    summary_table.add_column("Algorithm")
    summary_table.add_column("Quantum", justify="right")
    summary_table.add_column("Avg waiting", justify="right")
    summary_table.add_column("Avg turnaround", justify="right")
    summary_table.add_column("Avg response", justify="right")

    for result in results:
        summary = summarize_process_metrics(result.processes)
        summary_table.add_row(
            result.algorithm,
            "" if result.quantum is None else str(result.quantum),
            f"{summary['avg_waiting']:.2f}",
            f"{summary['avg_turnaround']:.2f}",
            f"{summary['avg_response']:.2f}",
        )
    return summary_table
