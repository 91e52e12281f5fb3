from rich.panel import Panel

from scheduler_sim.algorithms import schedule_rr
from scheduler_sim.gantt import build_rich_gantt, chart_rows, render_gantt
from scheduler_sim.models import Process, ScheduledSlice


def _slices():
    return [ScheduledSlice("P1", 0, 3), ScheduledSlice("P2", 5, 7)]


def test_render_gantt():
    assert render_gantt(_slices()) == "Gantt Chart:\nP1[0-3] P2[5-7]"


def test_render_gantt_empty():
    assert render_gantt([]) == "(no execution)"


def test_rich_gantt_time_marks_include_gaps():
    panel, marks = build_rich_gantt(_slices())
    assert isinstance(panel, Panel)
    assert marks == "0  3  5  7"


def test_rich_gantt_empty():
    panel, marks = build_rich_gantt([])
    assert isinstance(panel, Panel)
    assert marks == ""


def test_chart_rows_separates_switch_from_idle():
    slices = [ScheduledSlice("P1", 0, 3), ScheduledSlice("P2", 6, 8, switch_time=1)]
    bars, labels, marks = chart_rows(slices)
    # P2 arrives at 5, so 3-5 is idle and 5-6 is the switch
    assert bars.plain == "   ..x  "
    assert labels.plain == "P1    P2"
    assert marks == "0  3  5  6  8"


def test_rich_gantt_counts_overhead_from_schedule():
    res = schedule_rr([Process("P1", 0, 4), Process("P2", 0, 4)], quantum=2, context_switch=1)
    panel, marks = build_rich_gantt(res.timeline)
    assert panel.subtitle == "x switch: 3  . idle: 0"
    assert marks == "0  2  3  5  6  8  9 11"


def test_rich_gantt_no_subtitle_without_gaps():
    panel, _ = build_rich_gantt([ScheduledSlice("P1", 0, 4), ScheduledSlice("P1", 4, 5)])
    assert panel.subtitle is None
