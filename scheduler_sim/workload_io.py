from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Mapping

from .models import Process, Workload

logger = logging.getLogger(__name__)


def load_workload(path: str | Path) -> Workload:
    """
    Load a workload from a text or JSON file.

    Text files hold the quantum on the first line, the context-switch cost on
    the second, then one ``pid,arrival,burst`` record per line.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".txt":
        workload = _load_text(path)
    elif suffix == ".json":
        workload = _load_json(path)
    else:
        raise ValueError(f"Unsupported workload format: {suffix} (use .txt or .json)")

    logger.info(
        "Loaded %d processes from %s (quantum=%d, context_switch=%d)",
        len(workload.processes),
        path,
        workload.quantum,
        workload.context_switch,
    )
    return workload


def _load_text(path: Path) -> Workload:
    with path.open("r", encoding="utf-8") as f:
        lines = [line.strip() for line in f]
    lines = [line for line in lines if line]

    if len(lines) < 2:
        raise ValueError(f"{path}: expected quantum and context switch on the first two lines")

    quantum = _parse_int(lines[0], "quantum")
    context_switch = _parse_int(lines[1], "context switch")

    processes: List[Process] = []
    for line in lines[2:]:
        fields = [part.strip() for part in line.split(",")]
        if len(fields) != 3:
            raise ValueError(f"Invalid process entry: {line!r}")
        processes.append(
            _process_from_mapping({"pid": fields[0], "arrival_time": fields[1], "burst_time": fields[2]})
        )

    return Workload(quantum=quantum, context_switch=context_switch, processes=processes)


def _load_json(path: Path) -> Workload:
    with path.open("r", encoding="utf-8") as f:
        raw = json.load(f)

    if not isinstance(raw, Mapping):
        raise ValueError("JSON workload must be an object with quantum, context_switch and processes")

    quantum = _parse_int(raw.get("quantum"), "quantum")
    context_switch = _parse_int(raw.get("context_switch", 0), "context switch")

    entries = raw.get("processes", [])
    if not isinstance(entries, list):
        raise ValueError("JSON workload 'processes' must be a list of process objects")

    processes = [_process_from_mapping(entry) for entry in entries]
    return Workload(quantum=quantum, context_switch=context_switch, processes=processes)


def _as_int(value) -> int:
    """Strict integer conversion: bools and fractional floats are rejected, not truncated."""
    if isinstance(value, bool):
        raise TypeError(f"expected an integer, got {value!r}")
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"expected an integer, got {value!r}")
    return int(value)


def _parse_int(value, name: str) -> int:
    try:
        return _as_int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid {name}: {value!r}") from exc


def _process_from_mapping(mapping) -> Process:
    try:
        pid = str(mapping["pid"])
        arrival_time = _as_int(mapping["arrival_time"])
        burst_time = _as_int(mapping["burst_time"])
    except (KeyError, TypeError, ValueError) as exc:
        raise ValueError(f"Invalid process entry: {mapping!r}") from exc

    return Process(pid=pid, arrival_time=arrival_time, burst_time=burst_time)
