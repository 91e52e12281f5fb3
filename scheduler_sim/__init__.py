"""
Scheduler simulator package.

Simulates FCFS, SRT and Round Robin CPU scheduling over a fixed process set,
with context-switch overhead, and reports Gantt charts and performance metrics.
"""

__all__ = ["cli"]
