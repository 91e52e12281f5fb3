from __future__ import annotations

from typing import List

from .models import Process, ScheduleResult, SystemMetrics


def cpu_utilization(busy_time: int, makespan: int) -> float:
    """
    Percentage of the simulated span spent executing processes. The span
    includes idle gaps and context-switch overhead; an empty run is 0%.
    """
    if makespan <= 0:
        return 0.0
    return 100.0 * busy_time / makespan


def compute_system_metrics(result: ScheduleResult, context_switches: int = 0) -> SystemMetrics:
    """
    Compute throughput and CPU utilization given populated per-process metrics
    and timeline slices. The clock only ever advances towards a dispatch, so the
    end of the last slice is the final clock value.
    """
    makespan = result.timeline[-1].end_time if result.timeline else 0
    cpu_busy_time = sum(p.burst_time for p in result.processes if p.finished)

    throughput = len(result.processes) / makespan if makespan > 0 else 0.0
    utilization = cpu_utilization(cpu_busy_time, makespan)

    system = SystemMetrics(
        cpu_busy_time=cpu_busy_time,
        makespan=makespan,
        throughput=throughput,
        cpu_utilization=utilization,
        context_switches=context_switches,
        switch_overhead=context_switches * result.context_switch,
    )
    result.cpu_utilization = utilization
    result.system = system
    return system


def summarize_process_metrics(processes: List[Process]) -> dict:
    """
    Return averages of the key per-process metrics for quick comparison.
    """
    done = [p for p in processes if p.finished]
    if not done:
        return {"avg_waiting": 0.0, "avg_turnaround": 0.0, "avg_response": 0.0}

    n = len(done)
    return {
        "avg_waiting": sum(p.waiting_time for p in done) / n,
        "avg_turnaround": sum(p.turnaround_time for p in done) / n,
        "avg_response": sum(p.response_time for p in done) / n,
    }
