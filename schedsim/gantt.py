from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import ScheduledSlice
from .timeline import Timeline

IDLE_LABEL = "--"


def _with_idle(slices: List[ScheduledSlice]) -> List[Tuple[Optional[int], int, int]]:
    """
    Expand slices into (pid, start, end) cells, with an idle cell (pid None)
    for every gap the timeline reports.
    """
    timeline = Timeline.from_slices(slices)
    cells: List[Tuple[Optional[int], int, int]] = [(s.pid, s.start_time, s.end_time) for s in timeline]
    cells.extend((None, start, end) for start, end in timeline.idle_gaps())
    return sorted(cells, key=lambda c: c[1])


def render_gantt(slices: List[ScheduledSlice]) -> str:
    """
    Plain-text Gantt chart: one bar per segment, boundary times underneath.

        | P1 | P2 |
        0    5    8
    """
    if not slices:
        return "Gantt Chart:\n(no execution)"

    cells = _with_idle(slices)

    bar = ""
    marks = ""
    for pid, start, _ in cells:
        label = IDLE_LABEL if pid is None else f"P{pid}"
        cell = f"| {label} "
        # the start mark must leave a space before the next one
        width = max(len(cell), len(str(start)) + 1)
        bar += cell.ljust(width)
        marks += str(start).ljust(width)
    bar += "|"
    marks += str(cells[-1][2])

    rule = "-" * max(len(bar), len(marks))
    return "\n".join(["Gantt Chart:", rule, bar, rule, marks])


def build_rich_gantt(slices: List[ScheduledSlice]) -> tuple[Panel, str]:
    """
    Build a Rich Panel containing a colored Gantt chart and a string with time marks.
    """
    if not slices:
        panel = Panel("No execution", title="Gantt Chart")
        return panel, ""

    colors = ["red", "green", "yellow", "blue", "magenta", "cyan"]
    pid_to_color: Dict[int, str] = {}

    def pid_color(pid: int) -> str:
        if pid not in pid_to_color:
            idx = len(pid_to_color) % len(colors)
            pid_to_color[pid] = colors[idx]
        return pid_to_color[pid]

    timeline = Text()
    labels = Text()
    time_marks = "0"

    for pid, start, end in _with_idle(slices):
        width = max(3, end - start, len(str(end)) + 1)
        if pid is None:
            timeline.append(" " * width)
            labels.append(IDLE_LABEL.ljust(width), style="dim")
        else:
            timeline.append(" " * width, style=f"on {pid_color(pid)}")
            labels.append(f"P{pid}"[:width].ljust(width), style="bold")
        time_marks += str(end).rjust(width)

    table = Table.grid(padding=(0, 0))
    table.add_row(timeline)
    table.add_row(labels)

    panel = Panel.fit(table, title="Gantt Chart")
    return panel, time_marks
