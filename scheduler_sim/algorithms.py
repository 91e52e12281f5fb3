from __future__ import annotations

import logging
from typing import Callable, Dict, Iterable, List, Optional

from .metrics import compute_system_metrics
from .models import Process, ScheduleResult, ScheduledSlice, Workload

logger = logging.getLogger(__name__)


def _working_copies(processes: Iterable[Process]) -> List[Process]:
    return [p.copy() for p in processes]


def _admit_arrivals(pending: List[Process], ready: List[Process], time: int) -> None:
    """Move every pending process that has arrived by ``time`` onto ``ready``, in order."""
    arrived = [p for p in pending if p.arrival_time <= time]
    pending[:] = [p for p in pending if p.arrival_time > time]
    for p in arrived:
        ready.append(p)
        logger.debug("t=%d: %s arrived", time, p.pid)


def _switch_cost(timeline: List[ScheduledSlice], pid: str, context_switch: int, time: int) -> int:
    """Context-switch cost owed before dispatching ``pid``; zero if it ran last."""
    if timeline and timeline[-1].pid != pid:
        logger.debug("t=%d: context switch %s -> %s", time, timeline[-1].pid, pid)
        return context_switch
    return 0


def _finish(result: ScheduleResult, context_switches: int) -> ScheduleResult:
    compute_system_metrics(result, context_switches=context_switches)
    logger.info(
        "%s: %d processes, %d slices, makespan %d, utilization %.2f%%",
        result.algorithm,
        len(result.processes),
        len(result.timeline),
        result.system.makespan,
        result.cpu_utilization,
    )
    return result


def schedule_fcfs(
    processes: List[Process], context_switch: int = 0, quantum: Optional[int] = None
) -> ScheduleResult:
    """
    First-Come First-Serve (non-preemptive) scheduling.

    Processes are served in list order; callers wanting arrival order must
    sort first. Every dispatch after the first pays the context-switch cost,
    whichever process it is.
    """
    procs = _working_copies(processes)

    time = 0
    timeline: List[ScheduledSlice] = []
    switches = 0

    for p in procs:
        if time < p.arrival_time:
            logger.debug("t=%d: idle until %d", time, p.arrival_time)
            time = p.arrival_time

        cost = 0
        if timeline:
            cost = context_switch
            switches += 1
        time += cost

        p.start_time = time
        p.response_time = time - p.arrival_time
        timeline.append(
            ScheduledSlice(pid=p.pid, start_time=time, end_time=time + p.burst_time, switch_time=cost)
        )
        logger.debug("t=%d: dispatch %s for %d", time, p.pid, p.burst_time)

        time += p.burst_time
        p.remaining_time = 0
        p.finish_time = time
        p.waiting_time = p.start_time - p.arrival_time
        p.turnaround_time = p.finish_time - p.arrival_time

    result = ScheduleResult(
        algorithm="FCFS", quantum=None, context_switch=context_switch, processes=procs, timeline=timeline
    )
    return _finish(result, switches)


def schedule_srt(
    processes: List[Process], context_switch: int = 0, quantum: Optional[int] = None
) -> ScheduleResult:
    """
    Shortest Remaining Time (preemptive SJF), decided one tick at a time.

    Ties on remaining time keep their order in the ready list, which is the
    order they arrived in. Consecutive ticks of the same process are merged
    into a single slice.
    """
    procs = _working_copies(processes)
    pending: List[Process] = list(procs)
    ready: List[Process] = []

    time = 0
    timeline: List[ScheduledSlice] = []
    switches = 0

    while pending or ready:
        _admit_arrivals(pending, ready, time)

        if not ready:
            nxt = min(p.arrival_time for p in pending)
            logger.debug("t=%d: idle until %d", time, nxt)
            time = nxt
            continue

        # list.sort is stable, so equal remaining times keep arrival order
        ready.sort(key=lambda p: p.remaining_time)
        current = ready[0]

        if timeline and timeline[-1].pid != current.pid:
            switches += 1
        cost = _switch_cost(timeline, current.pid, context_switch, time)
        time += cost

        current.mark_dispatched(time)
        last = timeline[-1] if timeline else None
        if last is not None and last.pid == current.pid and last.end_time == time:
            last.end_time = time + 1
        else:
            timeline.append(ScheduledSlice(pid=current.pid, start_time=time, end_time=time + 1, switch_time=cost))

        time += 1
        current.remaining_time -= 1

        if current.finished:
            current.mark_finished(time)
            ready.pop(0)
            logger.debug("t=%d: %s finished", time, current.pid)

    result = ScheduleResult(
        algorithm="SRT", quantum=None, context_switch=context_switch, processes=procs, timeline=timeline
    )
    return _finish(result, switches)


def schedule_rr(
    processes: List[Process], quantum: Optional[int] = None, context_switch: int = 0
) -> ScheduleResult:
    """
    Round Robin scheduling with a fixed time quantum.

    A preempted process rejoins the tail of the queue after any process that
    arrived during its slice.
    """
    if quantum is None or quantum <= 0:
        raise ValueError("Round Robin requires a positive quantum (use --quantum)")

    procs = _working_copies(processes)
    pending: List[Process] = list(procs)
    ready: List[Process] = []

    time = 0
    timeline: List[ScheduledSlice] = []
    switches = 0

    while pending or ready:
        _admit_arrivals(pending, ready, time)

        if not ready:
            nxt = min(p.arrival_time for p in pending)
            logger.debug("t=%d: idle until %d", time, nxt)
            time = nxt
            continue

        p = ready.pop(0)

        if timeline and timeline[-1].pid != p.pid:
            switches += 1
        cost = _switch_cost(timeline, p.pid, context_switch, time)
        time += cost

        p.mark_dispatched(time)
        run_time = min(p.remaining_time, quantum)
        timeline.append(ScheduledSlice(pid=p.pid, start_time=time, end_time=time + run_time, switch_time=cost))
        logger.debug("t=%d: dispatch %s for %d", time, p.pid, run_time)

        time += run_time
        p.remaining_time -= run_time

        if p.remaining_time > 0:
            _admit_arrivals(pending, ready, time)
            ready.append(p)
        else:
            p.mark_finished(time)
            logger.debug("t=%d: %s finished", time, p.pid)

    result = ScheduleResult(
        algorithm="Round Robin", quantum=quantum, context_switch=context_switch, processes=procs, timeline=timeline
    )
    return _finish(result, switches)


ALGORITHMS: Dict[str, Callable[..., ScheduleResult]] = {
    "fcfs": schedule_fcfs,
    "srt": schedule_srt,
    "rr": schedule_rr,
}


def run_algorithm(
    name: str, processes: List[Process], quantum: Optional[int] = None, context_switch: int = 0
) -> ScheduleResult:
    """
    Dispatch to the requested algorithm. Quantum is only used by round-robin.
    """
    name = name.lower()
    if name not in ALGORITHMS:
        raise ValueError(f"Unknown algorithm '{name}' (choose from {', '.join(ALGORITHMS)})")

    func = ALGORITHMS[name]
    return func(processes, quantum=quantum, context_switch=context_switch)


def run_all(workload: Workload, names: Optional[Iterable[str]] = None) -> List[ScheduleResult]:
    """
    Run each named algorithm (all of them by default) against its own copy
    of the workload's processes.
    """
    names = list(names) if names is not None else list(ALGORITHMS)
    return [
        run_algorithm(name, workload.processes, quantum=workload.quantum, context_switch=workload.context_switch)
        for name in names
    ]
