from __future__ import annotations

import argparse
import logging
from pathlib import Path

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .algorithms import ALGORITHMS, run_algorithm, run_all
from .gantt import build_rich_gantt, render_gantt
from .metrics import summarize_process_metrics
from .models import ScheduleResult, Workload
from .workload_io import load_workload

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scheduler-sim",
        description="CPU scheduling simulator (FCFS, SRT, RR) with context-switch overhead.",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="count",
        default=0,
        help="Log scheduling progress (-v for a summary per run, -vv for every dispatch).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Run one scheduling algorithm on a workload file.")
    run_parser.add_argument(
        "--algorithm",
        "-a",
        required=True,
        choices=sorted(ALGORITHMS),
        help="Algorithm to use (fcfs, srt, rr).",
    )
    _add_workload_arguments(run_parser)
    run_parser.add_argument(
        "--plain",
        action="store_true",
        help="Print the Gantt chart as plain pid[start-end] text.",
    )

    compare_parser = subparsers.add_parser(
        "compare",
        help="Run several algorithms on identical copies of a workload and compare them.",
    )
    _add_workload_arguments(compare_parser)
    compare_parser.add_argument(
        "--algorithms",
        "-a",
        nargs="+",
        choices=list(ALGORITHMS),
        default=list(ALGORITHMS),
        help="Algorithms to compare (default: fcfs srt rr).",
    )
    compare_parser.add_argument(
        "--details",
        action="store_true",
        help="Also print the Gantt chart and per-process table of every algorithm.",
    )

    return parser


def _add_workload_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to a .txt or .json workload file.",
    )
    parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=None,
        help="Override the workload's round-robin quantum.",
    )
    parser.add_argument(
        "--context-switch",
        "-c",
        type=int,
        default=None,
        help="Override the workload's context-switch cost.",
    )


def configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity > 1:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load(args: argparse.Namespace) -> Workload:
    workload = load_workload(Path(args.workload))
    if args.quantum is None and args.context_switch is None:
        return workload

    # Rebuilding re-checks the overridden values.
    return Workload(
        quantum=workload.quantum if args.quantum is None else args.quantum,
        context_switch=workload.context_switch if args.context_switch is None else args.context_switch,
        processes=workload.processes,
    )


def _print_result(result: ScheduleResult, console: Console, plain: bool = False) -> None:
    console.print(f"[bold]Algorithm:[/bold] {result.algorithm}")
    if result.quantum is not None:
        console.print(f"[bold]Quantum:[/bold] {result.quantum}")
    console.print(f"[bold]Context switch:[/bold] {result.context_switch}")

    console.print()

    if plain:
        console.print(render_gantt(result.timeline), markup=False, highlight=False)
    else:
        panel, time_marks = build_rich_gantt(result.timeline)
        console.print(panel)
        if time_marks:
            console.print(time_marks)

    console.print()

    headers = ["PID", "Arrive", "Burst", "Start", "Finish", "Wait", "Turnaround", "Response"]

    proc_table = Table(title="Per-process metrics", box=box.SIMPLE_HEAVY)
    for h in headers:
        justify = "center" if h == "PID" else "right"
        proc_table.add_column(h, justify=justify)

    for p in result.processes:
        proc_table.add_row(
            p.pid,
            str(p.arrival_time),
            str(p.burst_time),
            str(p.start_time),
            str(p.finish_time),
            str(p.waiting_time),
            str(p.turnaround_time),
            str(p.response_time),
        )

    console.print(proc_table)
    console.print()

    summary = summarize_process_metrics(result.processes)
    if result.system:
        sys = result.system
        sys_table = Table(title="System metrics", box=box.SIMPLE_HEAVY)
        sys_table.add_column("Metric")
        sys_table.add_column("Value", justify="right")

        sys_table.add_row("Avg waiting", f"{summary['avg_waiting']:.2f}")
        sys_table.add_row("Avg turnaround", f"{summary['avg_turnaround']:.2f}")
        sys_table.add_row("Avg response", f"{summary['avg_response']:.2f}")
        sys_table.add_row("Makespan", str(sys.makespan))
        sys_table.add_row("Throughput (proc/time)", f"{sys.throughput:.3f}")
        sys_table.add_row("Context switches", str(sys.context_switches))
        sys_table.add_row("Switch overhead", str(sys.switch_overhead))
        sys_table.add_row("CPU utilization", f"{sys.cpu_utilization:.2f}%")

        console.print(sys_table)


def _print_comparison(results: list[ScheduleResult], title: str, console: Console) -> None:
    summary_table = Table(title=title, box=box.SIMPLE_HEAVY)
    summary_table.add_column("Algorithm")
    summary_table.add_column("Quantum", justify="right")
    summary_table.add_column("Avg waiting", justify="right")
    summary_table.add_column("Avg turnaround", justify="right")
    summary_table.add_column("Switches", justify="right")
    summary_table.add_column("CPU util.", justify="right")

    for result in results:
        summary = summarize_process_metrics(result.processes)
        summary_table.add_row(
            result.algorithm,
            "" if result.quantum is None else str(result.quantum),
            f"{summary['avg_waiting']:.2f}",
            f"{summary['avg_turnaround']:.2f}",
            str(result.system.context_switches if result.system else 0),
            f"{result.cpu_utilization:.2f}%",
        )

    console.print(summary_table)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.verbose)
    console = Console()

    try:
        workload = _load(args)
    except (OSError, ValueError) as exc:
        logger.error("Could not load workload %s: %s", args.workload, exc)
        console.print(f"[red]Error: {escape(str(exc))}[/red]")
        return 1

    if args.command == "run":
        result = run_algorithm(
            args.algorithm,
            workload.processes,
            quantum=workload.quantum,
            context_switch=workload.context_switch,
        )
        _print_result(result, console, plain=args.plain)
        return 0

    if args.command == "compare":
        results = run_all(workload, args.algorithms)
        if args.details:
            for result in results:
                _print_result(result, console)
                console.print()
        _print_comparison(results, f"Algorithm comparison: {args.workload}", console)
        return 0

    parser.error(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
