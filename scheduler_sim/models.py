from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class Process:
    """
    A process control block: the loaded facts plus the state a scheduler
    writes while simulating it.
    """

    pid: str
    arrival_time: int
    burst_time: int
    remaining_time: int = field(init=False)
    start_time: Optional[int] = field(default=None, init=False)
    finish_time: Optional[int] = field(default=None, init=False)
    waiting_time: Optional[int] = field(default=None, init=False)
    turnaround_time: Optional[int] = field(default=None, init=False)
    response_time: Optional[int] = field(default=None, init=False)

    def __post_init__(self) -> None:
        self.remaining_time = self.burst_time

    @property
    def finished(self) -> bool:
        return self.remaining_time == 0

    def reset(self) -> None:
        """Drop all simulation state, leaving the record as freshly loaded."""
        self.remaining_time = self.burst_time
        self.start_time = None
        self.finish_time = None
        self.waiting_time = None
        self.turnaround_time = None
        self.response_time = None

    def copy(self) -> "Process":
        """Independent working copy for one scheduling run, with no simulation state."""
        clone = copy.copy(self)
        clone.reset()
        return clone

    def mark_dispatched(self, time: int) -> None:
        if self.start_time is None:
            self.start_time = time
            self.response_time = time - self.arrival_time

    def mark_finished(self, time: int) -> None:
        self.finish_time = time
        self.turnaround_time = time - self.arrival_time
        self.waiting_time = self.turnaround_time - self.burst_time


@dataclass
class ScheduledSlice:
    """
    One contiguous slice of execution for a process in the Gantt chart.
    ``switch_time`` is the context-switch overhead paid right before it.
    """

    pid: str
    start_time: int
    end_time: int
    switch_time: int = 0

    @property
    def duration(self) -> int:
        return self.end_time - self.start_time


@dataclass
class SystemMetrics:
    cpu_busy_time: int
    makespan: int
    throughput: float
    cpu_utilization: float
    context_switches: int = 0
    switch_overhead: int = 0


@dataclass
class ScheduleResult:
    algorithm: str
    quantum: Optional[int]
    context_switch: int
    processes: List[Process] = field(default_factory=list)
    timeline: List[ScheduledSlice] = field(default_factory=list)
    cpu_utilization: float = 0.0
    system: Optional[SystemMetrics] = None


@dataclass
class Workload:
    """
    Everything a simulation needs: the scheduling parameters and the
    process set, in load order.
    """

    quantum: int
    context_switch: int
    processes: List[Process] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.quantum <= 0:
            raise ValueError(f"Quantum must be a positive integer, got {self.quantum}")
        if self.context_switch < 0:
            raise ValueError(f"Context switch cost must be non-negative, got {self.context_switch}")
        for p in self.processes:
            if p.arrival_time < 0:
                raise ValueError(f"Process {p.pid}: arrival time must be >= 0, got {p.arrival_time}")
            if p.burst_time <= 0:
                raise ValueError(f"Process {p.pid}: burst time must be > 0, got {p.burst_time}")
