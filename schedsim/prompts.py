from __future__ import annotations

from dataclasses import replace
from typing import List, Optional, Tuple

from rich.console import Console
from rich.markup import escape

from .algorithms import run_algorithm
from .models import Process
from .report import print_result

MENU: List[Tuple[str, str, str]] = [
    ("1", "fcfs", "First-Come, First-Served (FCFS)"),
    ("2", "sjf", "Shortest Job First (SJF)"),
    ("3", "rr", "Round Robin"),
    ("4", "priority", "Priority Scheduling"),
]


def ask_int(console: Console, prompt: str, minimum: int, default: Optional[int] = None) -> int:
    """
    Keep asking until the answer is an integer >= ``minimum``. An empty answer
    returns ``default`` when one is given.
    """
    while True:
        raw = input(prompt).strip()
        if not raw and default is not None:
            return default
        try:
            value = int(raw)
        except ValueError:
            console.print(f"[red]Not a whole number: {escape(repr(raw))}[/red]")
            continue
        if value < minimum:
            console.print(f"[red]Value must be at least {minimum}.[/red]")
            continue
        return value


def collect_processes(console: Console) -> List[Process]:
    n = ask_int(console, "Enter the number of processes: ", minimum=1)
    processes: List[Process] = []
    for pid in range(1, n + 1):
        arrival = ask_int(console, f"Process {pid} -> Arrival Time: ", minimum=0)
        burst = ask_int(console, "Burst Time: ", minimum=1)
        processes.append(Process(pid=pid, arrival_time=arrival, burst_time=burst))
    return processes


def collect_priorities(console: Console, processes: List[Process]) -> List[Process]:
    """Lower value means more urgent."""
    return [
        replace(p, priority=ask_int(console, f"Process {p.pid} -> Priority: ", minimum=0))
        for p in processes
    ]


def choose_algorithm(console: Console) -> Optional[str]:
    """
    Show the algorithm menu and return the chosen algorithm key, or None for
    an answer outside the menu.
    """
    console.print("\n[bold]Choose Scheduling Algorithm:[/bold]")
    for number, _, label in MENU:
        console.print(f"  [yellow]{number}[/yellow]. {label}")

    choice = input("Enter choice: ").strip()
    for number, key, _ in MENU:
        if choice == number:
            return key
    return None


def run_menu(console: Optional[Console] = None, default_quantum: int = 2) -> int:
    """
    Interactive session: read processes, pick an algorithm, run it and report.
    Returns a process exit status.
    """
    console = console or Console()

    try:
        processes = collect_processes(console)
        alg = choose_algorithm(console)
        if alg is None:
            console.print("[red]Invalid choice![/red]")
            return 1

        quantum = None
        if alg == "priority":
            processes = collect_priorities(console, processes)
        elif alg == "rr":
            quantum = ask_int(
                console, f"Enter Time Quantum for Round Robin [{default_quantum}]: ", minimum=1, default=default_quantum
            )
    except EOFError:
        console.print("\n[red]Input ended before the simulation was set up.[/red]")
        return 1

    result = run_algorithm(alg, processes, quantum=quantum)
    print_result(result, console=console, plain=True)
    return 0
