from __future__ import annotations

from typing import Dict, List

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import ScheduledSlice

IDLE_MARK = "."
SWITCH_MARK = "x"

_COLORS = ["red", "green", "yellow", "blue", "magenta", "cyan"]


def render_gantt(slices: List[ScheduledSlice]) -> str:
    """
    Plain-text Gantt chart, one ``pid[start-end]`` entry per slice.
    """
    if not slices:
        return "(no execution)"

    entries = " ".join(f"{sl.pid}[{sl.start_time}-{sl.end_time}]" for sl in slices)
    return "\n".join(["Gantt Chart:", entries])


def chart_rows(slices: List[ScheduledSlice]) -> tuple[Text, Text, str]:
    """
    Lay the timeline out one character per tick: colored bars for execution,
    ``x`` for context-switch overhead and ``.`` for an idle processor.

    The gap before a slice is idle time first (the clock jumps to an arrival)
    and then the switch paid on dispatch. Returns the bar row, the pid label
    row and the time marks at every segment boundary.
    """
    pid_to_color: Dict[str, str] = {}
    bars = Text()
    labels = Text()
    marks = ["0"]
    clock = 0

    def advance(width: int, mark: str, style: str) -> None:
        nonlocal clock
        if width <= 0:
            return
        bars.append(mark * width, style=style)
        labels.append(" " * width)
        clock += width
        marks.append(f"{clock:>3}")

    for sl in slices:
        gap = sl.start_time - clock
        switch = min(sl.switch_time, gap)
        advance(gap - switch, IDLE_MARK, "dim")
        advance(switch, SWITCH_MARK, "bold red")

        color = pid_to_color.setdefault(sl.pid, _COLORS[len(pid_to_color) % len(_COLORS)])
        bars.append(" " * sl.duration, style=f"on {color}")
        labels.append(sl.pid[: sl.duration].ljust(sl.duration), style="bold")
        clock = sl.end_time
        marks.append(f"{clock:>3}")

    return bars, labels, "".join(marks)


def build_rich_gantt(slices: List[ScheduledSlice]) -> tuple[Panel, str]:
    """
    Build a Rich Panel containing the colored Gantt chart and a string with time marks.
    The panel subtitle totals the idle and switch ticks when there are any.
    """
    if not slices:
        panel = Panel("No execution", title="Gantt Chart")
        return panel, ""

    bars, labels, marks = chart_rows(slices)

    switch_ticks = bars.plain.count(SWITCH_MARK)
    idle_ticks = bars.plain.count(IDLE_MARK)
    subtitle = None
    if switch_ticks or idle_ticks:
        subtitle = f"{SWITCH_MARK} switch: {switch_ticks}  {IDLE_MARK} idle: {idle_ticks}"

    table = Table.grid(padding=(0, 0))
    table.add_row(bars)
    table.add_row(labels)

    panel = Panel.fit(table, title="Gantt Chart", subtitle=subtitle)
    return panel, marks
