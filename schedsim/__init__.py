"""
schedsim package.

Simulates classical CPU scheduling disciplines (FCFS, SJF, Round Robin,
Priority) on a logical clock and reports per-process metrics and a Gantt
chart.
"""

__all__ = ["cli"]

__version__ = "0.1.0"
