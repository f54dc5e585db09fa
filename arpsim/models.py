"""
Pydantic models for the ARP step simulator: topology, frames, steps,
simulation state and the HTTP request/response schemas.
"""
from __future__ import annotations

from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# ── Shared ──────────────────────────────────────────────────────────────────

class Position(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: float
    y: float


RoleType = Literal['none', 'sender', 'target']
HostKind = Literal['pc', 'switch']
DeliveryMode = Literal['broadcast', 'unicast']
LogType = Literal['info', 'success', 'warning']


class Host(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    kind: HostKind = 'pc'
    role: RoleType = 'none'
    ip: Optional[str] = None          # switches carry no network address
    mac: str
    position: Position = Position(x=0, y=0)


class Link(BaseModel):
    model_config = ConfigDict(frozen=True)

    a: str
    b: str


class Topology(BaseModel):
    model_config = ConfigDict(frozen=True)

    hosts: List[Host]
    links: List[Link] = []
    sender_id: str
    target_id: str

    def host(self, host_id: str) -> Optional[Host]:
        return next((h for h in self.hosts if h.id == host_id), None)

    @property
    def end_hosts(self) -> List[Host]:
        return [h for h in self.hosts if h.kind == 'pc']

    @property
    def switch(self) -> Optional[Host]:
        return next((h for h in self.hosts if h.kind == 'switch'), None)


# ── Frames ──────────────────────────────────────────────────────────────────

class EthernetHeader(BaseModel):
    model_config = ConfigDict(frozen=True)

    dst: str
    src: str
    type: int = 0x0806


class ArpPayload(BaseModel):
    model_config = ConfigDict(frozen=True)

    htype: int = 1
    ptype: int = 0x0800
    hlen: int = 6
    plen: int = 4
    opcode: int
    sha: str
    spa: str
    tha: str
    tpa: str


class Frame(BaseModel):
    model_config = ConfigDict(frozen=True)

    eth: EthernetHeader
    arp: ArpPayload


class FrameDescription(BaseModel):
    ethernet: str
    arp: str


# ── Steps ───────────────────────────────────────────────────────────────────
# One variant per step kind; frame-carrying steps cannot be built without one.

class _StepBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str


class ScenarioStartStep(_StepBase):
    kind: Literal['scenario-start'] = 'scenario-start'


class CacheLookupStep(_StepBase):
    kind: Literal['cache-lookup'] = 'cache-lookup'


class CacheMissStep(_StepBase):
    kind: Literal['cache-miss'] = 'cache-miss'


class ArpRequestStep(_StepBase):
    kind: Literal['arp-request'] = 'arp-request'
    frame: Frame


class PeerReceivedStep(_StepBase):
    kind: Literal['peer-received'] = 'peer-received'


class ArpReplyStep(_StepBase):
    kind: Literal['arp-reply'] = 'arp-reply'
    frame: Frame


class CacheUpdateStep(_StepBase):
    kind: Literal['cache-update'] = 'cache-update'


class CacheHitStep(_StepBase):
    kind: Literal['cache-hit'] = 'cache-hit'


Step = Annotated[
    Union[
        ScenarioStartStep,
        CacheLookupStep,
        CacheMissStep,
        ArpRequestStep,
        PeerReceivedStep,
        ArpReplyStep,
        CacheUpdateStep,
        CacheHitStep,
    ],
    Field(discriminator='kind'),
]


# ── Simulation state ────────────────────────────────────────────────────────

class LogEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    timestamp: str
    message: str
    type: LogType = 'info'


class AnimationState(BaseModel):
    model_config = ConfigDict(frozen=True)

    mode: DeliveryMode
    from_id: str
    to_ids: List[str]
    frame: Frame
    progress: float = Field(0.0, ge=0.0, le=1.0)
    generation: int = 0


class SimulationState(BaseModel):
    """Snapshot passed into and returned from every step transition."""
    model_config = ConfigDict(frozen=True)

    step_index: int = 0
    caches: Dict[str, Dict[str, str]] = {}       # hostId -> { ip -> mac }
    event_log: List[LogEntry] = []               # newest first
    selected_frame: Optional[Frame] = None
    animation: Optional[AnimationState] = None
    generation: int = 0                          # bumped on every cursor move / reset


class ProgressMapping(BaseModel):
    phase: Literal['pre', 'at-switch', 'post']
    local_fraction: float


class PacketDot(BaseModel):
    x: float
    y: float
    at_switch: bool = False


# ── API Request / Response schemas ──────────────────────────────────────────

class CreateSessionRequest(BaseModel):
    topology: Optional[Topology] = None


class JumpRequest(BaseModel):
    index: int


class AutoPlayRequest(BaseModel):
    enabled: bool


class TickRequest(BaseModel):
    now_ms: float


class DeviceInfo(BaseModel):
    id: str
    name: str
    kind: HostKind
    role: RoleType
    ip: Optional[str]
    mac: str


class AnimationResponse(BaseModel):
    animation: Optional[AnimationState]
    progress: float
    mapping: Optional[ProgressMapping]
    classification: Optional[Literal['request', 'reply', 'other']]
    dots: List[PacketDot]
    legs: List[List[str]]                        # highlighted path segments


class SessionResponse(BaseModel):
    sessionId: str
    stepIndex: int
    stepLabel: str
    currentStep: Step
    autoPlay: bool
    caches: Dict[str, Dict[str, str]]
    cacheText: Dict[str, str]                    # sender / target panels
    eventLog: List[LogEntry]
    selectedFrame: Optional[FrameDescription]
    animation: Optional[AnimationState]
    devices: List[DeviceInfo]
