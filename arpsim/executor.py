"""
Step executor: pure transitions over SimulationState.

Every function takes a state snapshot and returns a new one. Moving the cursor
always drops the in-flight animation first, then applies the target step's
effects on top of the current caches and log. Nothing is rolled back when
moving backwards; re-applying the cache update writes the same entries again.
"""
from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Callable, List, Optional, Sequence

from . import cache
from .animation import new_animation, with_progress
from .models import LogEntry, LogType, SimulationState, Step, Topology

logger = logging.getLogger(__name__)

LOG_CAP = 200

Clock = Callable[[], str]


def wall_clock() -> str:
    """Local time label for log entries, e.g. '14:03:27'."""
    return datetime.now().strftime("%H:%M:%S")


def initial_state(topology: Topology) -> SimulationState:
    """Index 0, nothing executed yet; every end host starts with an empty cache."""
    return SimulationState(caches=cache.empty_caches(h.id for h in topology.end_hosts))


def push_log(entries: List[LogEntry], message: str, clock: Clock,
             log_type: LogType = "info", cap: int = LOG_CAP) -> List[LogEntry]:
    """Prepends a new entry (newest first) and drops anything beyond cap."""
    entry = LogEntry(id=str(uuid.uuid4()), timestamp=clock(), message=message, type=log_type)
    return ([entry] + list(entries))[:cap]


def clamp_index(index: int, script: Sequence[Step]) -> int:
    return max(0, min(len(script) - 1, index))


# ─── Step Effects ────────────────────────────────────────────────────────────

def apply_step(
    state: SimulationState,
    script: Sequence[Step],
    topology: Topology,
    index: int,
    clock: Optional[Clock] = None,
    log_cap: int = LOG_CAP,
) -> SimulationState:
    """Moves the cursor to index (clamped) and applies that step's effects."""
    clock = clock or wall_clock
    index = clamp_index(index, script)
    step = script[index]
    generation = state.generation + 1

    sender = topology.host(topology.sender_id)
    target = topology.host(topology.target_id)

    log = list(state.event_log)
    caches = state.caches
    selected_frame = state.selected_frame
    animation = None

    def emit(message: str, log_type: LogType = "info") -> None:
        nonlocal log
        log = push_log(log, message, clock, log_type, log_cap)

    if step.kind == "scenario-start":
        emit(step.title)
        emit("ARP caches are empty at the start.")

    elif step.kind == "cache-lookup":
        found = cache.lookup(caches, sender.id, target.ip)
        emit(f"{sender.name} ARP cache lookup: {target.ip} -> {found if found else '(missing)'}")

    elif step.kind == "cache-miss":
        emit("No entry found, so the host must resolve the target MAC using ARP.", "warning")

    elif step.kind == "arp-request":
        selected_frame = step.frame
        emit(step.title)
        emit("Broadcast frame: everyone receives it, only the owner of TPA replies.")
        animation = new_animation(topology, "broadcast", sender.id, None, step.frame, generation)

    elif step.kind == "peer-received":
        emit(step.title)

    elif step.kind == "arp-reply":
        selected_frame = step.frame
        emit(step.title, "success")
        emit("Unicast frame: sent only back to the requester MAC.")
        animation = new_animation(topology, "unicast", target.id, sender.id, step.frame, generation)

    elif step.kind == "cache-update":
        emit(step.title, "success")
        # Both sides learn: the requester from the reply, the target from the request it answered.
        caches = cache.update(caches, sender.id, target.ip, target.mac)
        caches = cache.update(caches, target.id, sender.ip, sender.mac)

    elif step.kind == "cache-hit":
        emit(step.title, "success")
        emit(f"{sender.name} can now send IPv4 frames using dst MAC {target.mac}. (IPv4 not simulated.)")

    logger.debug("Applied step %d (%s), generation %d", index, step.kind, generation)
    return state.model_copy(update={
        "step_index": index,
        "caches": caches,
        "event_log": log,
        "selected_frame": selected_frame,
        "animation": animation,
        "generation": generation,
    })


# ─── Cursor Transitions ──────────────────────────────────────────────────────

def advance(state: SimulationState, script: Sequence[Step], topology: Topology,
            clock: Optional[Clock] = None, log_cap: int = LOG_CAP) -> SimulationState:
    """Next step; stays put (without re-running effects) at the last index."""
    if state.step_index >= len(script) - 1:
        return state
    return apply_step(state, script, topology, state.step_index + 1, clock, log_cap)


def retreat(state: SimulationState, script: Sequence[Step], topology: Topology,
            clock: Optional[Clock] = None, log_cap: int = LOG_CAP) -> SimulationState:
    """Previous step; stays put (without re-running effects) at index 0."""
    if state.step_index <= 0:
        return state
    return apply_step(state, script, topology, state.step_index - 1, clock, log_cap)


def jump_to(state: SimulationState, script: Sequence[Step], topology: Topology, index: int,
            clock: Optional[Clock] = None, log_cap: int = LOG_CAP) -> SimulationState:
    """Explicit jump; out-of-range indices are clamped onto the script."""
    target_index = clamp_index(index, script)
    if target_index == state.step_index:
        return state
    return apply_step(state, script, topology, target_index, clock, log_cap)


def reset(state: SimulationState, topology: Topology) -> SimulationState:
    """Back to index 0 with empty caches, an empty log and no frame or animation."""
    logger.debug("Simulation reset")
    return initial_state(topology).model_copy(update={"generation": state.generation + 1})


def set_progress(state: SimulationState, generation: int, progress: float) -> SimulationState:
    """Records a timer tick; ticks from a superseded generation leave state untouched."""
    animation = with_progress(state.animation, generation, progress)
    if animation is state.animation:
        return state
    return state.model_copy(update={"animation": animation})
