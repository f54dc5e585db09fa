"""
ArpSimulation: one learner's run through the ARP scenario.

Holds the current SimulationState snapshot and drives the pure executor
transitions, the animation timer's refresh loop and auto-play on a
FrameScheduler.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Optional

from . import executor
from .animation import AnimationTimer, map_animation, packet_positions
from .config import SimulationSettings
from .executor import Clock
from .frames import describe_frame
from .models import (
    AnimationState,
    DeviceInfo,
    FrameDescription,
    LogEntry,
    PacketDot,
    ProgressMapping,
    SimulationState,
    Step,
    Topology,
)
from .scheduler import FrameScheduler
from .script import generate_script
from .topology import default_topology, validate_topology

logger = logging.getLogger(__name__)


class ArpSimulation:
    def __init__(
        self,
        topology: Optional[Topology] = None,
        settings: Optional[SimulationSettings] = None,
        scheduler: Optional[FrameScheduler] = None,
        clock: Optional[Clock] = None,
    ):
        self.settings = settings or SimulationSettings()
        self.topology = validate_topology(topology or default_topology())
        self.scheduler = scheduler or FrameScheduler(self.settings.frame_interval_ms)
        self._clock = clock

        self._script: List[Step] = generate_script(
            self.topology, self.topology.sender_id, self.topology.target_id
        )
        self._timer = AnimationTimer(self.settings.duration_ms)
        self._frame_handle: Optional[int] = None
        self._auto_handle: Optional[int] = None

        self._state = executor.initial_state(self.topology)
        self._transition(executor.apply_step(
            self._state, self._script, self.topology, 0, self._clock, self.settings.log_cap
        ))
        logger.info("ARP simulation ready: %s resolves %s",
                    self.topology.sender_id, self.topology.target_id)

    # ── Read side ────────────────────────────────────────────────────────────

    @property
    def state(self) -> SimulationState:
        return self._state

    def get_script(self) -> List[Step]:
        return list(self._script)

    def get_current_step(self) -> Step:
        return self._script[self._state.step_index]

    def get_step_index(self) -> int:
        return self._state.step_index

    def step_label(self) -> str:
        return f"{self._state.step_index + 1} / {len(self._script)}"

    def get_cache(self, host_id: str) -> Dict[str, str]:
        if self.topology.host(host_id) is None:
            raise KeyError(host_id)
        return dict(self._state.caches.get(host_id, {}))

    def get_event_log(self) -> List[LogEntry]:
        return list(self._state.event_log)

    def get_animation_state(self) -> Optional[AnimationState]:
        return self._state.animation

    def get_progress(self) -> float:
        animation = self._state.animation
        return animation.progress if animation else 0.0

    def get_progress_mapping(self) -> Optional[ProgressMapping]:
        animation = self._state.animation
        if animation is None:
            return None
        return map_animation(
            animation,
            pause=self.settings.pause_fraction,
            unicast_split=self.settings.unicast_split,
            broadcast_split=self.settings.broadcast_split,
        )

    def get_packet_dots(self) -> List[PacketDot]:
        mapping = self.get_progress_mapping()
        if mapping is None:
            return []
        return packet_positions(self._state.animation, self.topology, mapping)

    def describe_selected_frame(self) -> Optional[FrameDescription]:
        frame = self._state.selected_frame
        return describe_frame(frame) if frame else None

    def get_devices(self) -> List[DeviceInfo]:
        """End hosts first, then the switch, as listed in the device panel."""
        hosts = self.topology.end_hosts + [h for h in self.topology.hosts if h.kind == "switch"]
        return [
            DeviceInfo(id=h.id, name=h.name, kind=h.kind, role=h.role, ip=h.ip, mac=h.mac)
            for h in hosts
        ]

    # ── Cursor transitions ───────────────────────────────────────────────────

    def advance(self) -> SimulationState:
        return self._transition(executor.advance(
            self._state, self._script, self.topology, self._clock, self.settings.log_cap
        ))

    def retreat(self) -> SimulationState:
        return self._transition(executor.retreat(
            self._state, self._script, self.topology, self._clock, self.settings.log_cap
        ))

    def jump_to(self, index: int) -> SimulationState:
        return self._transition(executor.jump_to(
            self._state, self._script, self.topology, index, self._clock, self.settings.log_cap
        ))

    def reset(self) -> SimulationState:
        self.stop_auto_play()
        return self._transition(executor.reset(self._state, self.topology))

    def _transition(self, new_state: SimulationState) -> SimulationState:
        if new_state is self._state:
            return self._state
        self._stop_animation()
        self._state = new_state
        if new_state.animation is not None:
            self._start_animation(new_state.animation.generation)
        return self._state

    # ── Animation loop ───────────────────────────────────────────────────────

    def _start_animation(self, generation: int) -> None:
        self._timer.start(generation)
        self._frame_handle = self.scheduler.request_frame(
            lambda now_ms: self._on_frame(generation, now_ms)
        )

    def _stop_animation(self) -> None:
        self.scheduler.cancel(self._frame_handle)
        self._frame_handle = None
        self._timer.cancel()

    def _on_frame(self, generation: int, now_ms: float) -> None:
        progress = self._timer.tick(generation, now_ms)
        if progress is None:
            return
        self._state = executor.set_progress(self._state, generation, progress)
        if self._timer.is_active():
            self._frame_handle = self.scheduler.request_frame(
                lambda ts: self._on_frame(generation, ts)
            )
        else:
            self._frame_handle = None

    # ── Auto play ────────────────────────────────────────────────────────────

    def is_auto_playing(self) -> bool:
        return self._auto_handle is not None

    def start_auto_play(self) -> None:
        if self._auto_handle is not None:
            return
        self._auto_handle = self.scheduler.set_interval(
            lambda now_ms: self.advance(), self.settings.auto_play_interval_ms, label="auto-play"
        )
        logger.info("Auto play started (every %.0f ms)", self.settings.auto_play_interval_ms)

    def stop_auto_play(self) -> None:
        if self._auto_handle is None:
            return
        self.scheduler.cancel(self._auto_handle)
        self._auto_handle = None
        logger.info("Auto play stopped")

    def toggle_auto_play(self) -> bool:
        if self.is_auto_playing():
            self.stop_auto_play()
        else:
            self.start_auto_play()
        return self.is_auto_playing()

