"""
Transmission animation: the generation-keyed progress timer and the mapping
from progress to the packet's place on the sender -> switch -> receiver path.

A frame travels to the switch, dwells there for ``pause`` of the run
(store-and-forward), then continues to its destination(s). A broadcast fans
out to every other host with all legs in lockstep.
"""
from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from .models import AnimationState, DeliveryMode, Frame, PacketDot, ProgressMapping, Topology

logger = logging.getLogger(__name__)


# ─── Constants ───────────────────────────────────────────────────────────────

DURATION_MS = 1200.0
UNICAST_SPLIT = 0.5
BROADCAST_SPLIT = 0.38
PAUSE_FRACTION = 0.18


def clamp(v: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, v))


def lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


# ─── Progress Mapping ────────────────────────────────────────────────────────

def map_progress(t: float, split: float, pause: float) -> ProgressMapping:
    """
    Maps overall progress t to the current leg of the trip.

    [0, split)               pre:       approaching the switch, fraction t / split
    [split, split + pause)   at-switch: frozen at the switch, fraction 1
    [split + pause, 1]       post:      leaving the switch, rescaled to [0, 1]
    """
    pause_end = split + pause
    if t < split:
        return ProgressMapping(phase="pre", local_fraction=t / split)
    if t < pause_end:
        return ProgressMapping(phase="at-switch", local_fraction=1.0)

    remaining = 1.0 - pause_end
    u = 1.0 if remaining <= 0 else (t - pause_end) / remaining
    return ProgressMapping(phase="post", local_fraction=clamp(u, 0.0, 1.0))


def split_for(mode: DeliveryMode, unicast_split: float = UNICAST_SPLIT,
              broadcast_split: float = BROADCAST_SPLIT) -> float:
    return broadcast_split if mode == "broadcast" else unicast_split


def map_animation(animation: AnimationState, pause: float = PAUSE_FRACTION,
                  unicast_split: float = UNICAST_SPLIT,
                  broadcast_split: float = BROADCAST_SPLIT) -> ProgressMapping:
    split = split_for(animation.mode, unicast_split, broadcast_split)
    return map_progress(animation.progress, split, pause)


# ─── Animation State ─────────────────────────────────────────────────────────

def broadcast_destinations(topology: Topology, from_id: str) -> List[str]:
    """Every end host except the sender receives a broadcast."""
    return [h.id for h in topology.end_hosts if h.id != from_id]


def new_animation(topology: Topology, mode: DeliveryMode, from_id: str,
                  to_id: Optional[str], frame: Frame, generation: int) -> AnimationState:
    if mode == "broadcast":
        to_ids = broadcast_destinations(topology, from_id)
    else:
        to_ids = [to_id]
    return AnimationState(
        mode=mode,
        from_id=from_id,
        to_ids=to_ids,
        frame=frame,
        progress=0.0,
        generation=generation,
    )


def with_progress(animation: Optional[AnimationState], generation: int,
                  progress: float) -> Optional[AnimationState]:
    """Returns animation at the new progress, or unchanged if the tick belongs to another generation."""
    if animation is None or animation.generation != generation:
        return animation
    return animation.model_copy(update={"progress": clamp(progress, 0.0, 1.0)})


# ─── Timer ───────────────────────────────────────────────────────────────────

class AnimationTimer:
    """
    Tracks wall-clock time for the one in-flight transmission.

    Each transmission is started under a generation number. A tick that carries
    any other generation is ignored, so a refresh callback that fires after its
    step was superseded cannot move the current packet.
    """

    def __init__(self, duration_ms: float = DURATION_MS):
        self.duration_ms = duration_ms
        self._generation: Optional[int] = None
        self._last_ts: Optional[float] = None
        self._progress = 0.0

    @property
    def generation(self) -> Optional[int]:
        return self._generation

    @property
    def progress(self) -> float:
        return self._progress

    def is_active(self) -> bool:
        return self._generation is not None and self._progress < 1.0

    def start(self, generation: int) -> None:
        self._generation = generation
        self._last_ts = None
        self._progress = 0.0
        logger.debug("Animation timer started (generation %d)", generation)

    def cancel(self) -> None:
        if self._generation is not None:
            logger.debug("Animation timer cancelled (generation %d)", self._generation)
        self._generation = None
        self._last_ts = None
        self._progress = 0.0

    def tick(self, generation: int, now_ms: float) -> Optional[float]:
        """
        Advances progress by the time elapsed since the previous tick.
        Returns the new progress, or None for a stale or finished timer.
        The first tick only records the baseline timestamp.
        """
        if generation != self._generation or self._progress >= 1.0:
            return None
        if self._last_ts is None:
            self._last_ts = now_ms
        delta = now_ms - self._last_ts
        self._last_ts = now_ms
        self._progress = clamp(self._progress + delta / self.duration_ms, 0.0, 1.0)
        if self._progress >= 1.0:
            logger.debug("Animation finished (generation %d)", generation)
        return self._progress


# ─── Geometry ────────────────────────────────────────────────────────────────

def transmission_legs(animation: AnimationState, topology: Topology) -> List[Tuple[str, str]]:
    """The highlighted path: sender -> switch, then switch -> each receiver."""
    switch = topology.switch
    legs = [(animation.from_id, switch.id)]
    legs.extend((switch.id, to_id) for to_id in animation.to_ids)
    return legs


def packet_positions(animation: AnimationState, topology: Topology,
                     mapping: ProgressMapping) -> List[PacketDot]:
    """
    Where to draw the packet dot(s) for the given mapping.
    Host positions are read-only inputs owned by the presentation layer.
    """
    sw = topology.switch.position
    src = topology.host(animation.from_id).position

    if mapping.phase == "pre":
        u = mapping.local_fraction
        return [PacketDot(x=lerp(src.x, sw.x, u), y=lerp(src.y, sw.y, u))]
    if mapping.phase == "at-switch":
        return [PacketDot(x=sw.x, y=sw.y, at_switch=True)]

    dots = []
    for to_id in animation.to_ids:
        dst = topology.host(to_id).position
        u = mapping.local_fraction
        dots.append(PacketDot(x=lerp(sw.x, dst.x, u), y=lerp(sw.y, dst.y, u)))
    return dots
