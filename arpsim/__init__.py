"""
ARP Step Simulator
==================
A step-driven walkthrough of one host resolving another's MAC address over a
switch, with a FastAPI backend for the browser front end.

Modules:
    - frames     : Ethernet + ARP frame builders and text formatting
    - script     : The fixed eight-step ARP narrative
    - cache      : Per-host ARP cache helpers
    - executor   : Pure step transitions over SimulationState
    - animation  : Transmission timer and progress-to-position mapping
    - scheduler  : Cooperative frame / interval scheduler
    - simulation : ArpSimulation session facade (cursor, animation, auto play)
    - topology   : Classroom topology and construction-time validation
    - config     : SimulationSettings
    - models     : Shared Pydantic models
    - main       : FastAPI application
"""

# --- Frames / Script ---
from .frames import (
    BROADCAST_MAC,
    ZERO_MAC,
    build_request,
    build_reply,
    describe_frame,
    classify_frame,
)
from .script import generate_script

# --- Cache ---
from .cache import (
    lookup,
    update,
    is_empty,
    format_cache,
)

# --- Engine ---
from .executor import (
    initial_state,
    apply_step,
    advance,
    retreat,
    jump_to,
    reset,
)
from .animation import (
    AnimationTimer,
    map_progress,
    broadcast_destinations,
    packet_positions,
)
from .scheduler import FrameScheduler
from .simulation import ArpSimulation

# --- Topology / Config / Errors ---
from .topology import default_topology, validate_topology
from .config import SimulationSettings, get_settings
from .errors import ConfigurationError

# --- Models ---
from .models import (
    Host,
    Topology,
    Frame,
    Step,
    SimulationState,
    AnimationState,
    LogEntry,
    FrameDescription,
    ProgressMapping,
)

__all__ = [
    # Frames / Script
    "BROADCAST_MAC",
    "ZERO_MAC",
    "build_request",
    "build_reply",
    "describe_frame",
    "classify_frame",
    "generate_script",
    # Cache
    "lookup",
    "update",
    "is_empty",
    "format_cache",
    # Engine
    "initial_state",
    "apply_step",
    "advance",
    "retreat",
    "jump_to",
    "reset",
    "AnimationTimer",
    "map_progress",
    "broadcast_destinations",
    "packet_positions",
    "FrameScheduler",
    "ArpSimulation",
    # Topology / Config / Errors
    "default_topology",
    "validate_topology",
    "SimulationSettings",
    "get_settings",
    "ConfigurationError",
    # Models
    "Host",
    "Topology",
    "Frame",
    "Step",
    "SimulationState",
    "AnimationState",
    "LogEntry",
    "FrameDescription",
    "ProgressMapping",
]
