"""
FastAPI Backend — ARP Step Simulator
Exposes one in-memory simulation per session; the browser front end renders
the topology and posts its display-refresh timestamps to /tick.
"""
from __future__ import annotations

import logging
import uuid
from typing import Dict, List, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .animation import map_progress, split_for, transmission_legs
from .cache import format_cache, get_cache_summary
from .config import get_settings
from .errors import ConfigurationError
from .frames import classify_frame
from .models import (
    AnimationResponse,
    AutoPlayRequest,
    CreateSessionRequest,
    DeliveryMode,
    FrameDescription,
    JumpRequest,
    LogEntry,
    ProgressMapping,
    SessionResponse,
    Step,
    TickRequest,
)
from .simulation import ArpSimulation

settings = get_settings()
logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# FastAPI App
# ─────────────────────────────────────────────────────────────────────────────

app = FastAPI(
    title="ARP Step Simulator API",
    description="Step-by-step ARP request/reply walkthrough with cache state and frame animation.",
    version="1.0.0",
)

# Allow all origins for local development (Vite runs on port 5173)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ConfigurationError)
def configuration_error_handler(request: Request, exc: ConfigurationError):
    logger.warning("Rejected topology: %s", exc)
    return JSONResponse(status_code=422, content={"detail": str(exc)})


# ─────────────────────────────────────────────────────────────────────────────
# Sessions
# ─────────────────────────────────────────────────────────────────────────────

class Session:
    """A simulation plus the offset between the client's clock and the scheduler's."""

    def __init__(self, session_id: str, simulation: ArpSimulation):
        self.id = session_id
        self.simulation = simulation
        self.clock_offset: Optional[float] = None

    def tick(self, now_ms: float) -> None:
        # The first tick pins the client's timestamp to the scheduler's current time.
        scheduler = self.simulation.scheduler
        if self.clock_offset is None:
            self.clock_offset = now_ms - scheduler.now()
        local = now_ms - self.clock_offset
        if local < scheduler.now():
            logger.debug("Session %s: ignoring out-of-order tick at %.1f", self.id, now_ms)
            return
        scheduler.advance_to(local)


sessions: Dict[str, Session] = {}


def _get_session(session_id: str) -> Session:
    session = sessions.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail=f"Unknown session {session_id}")
    return session


def _snapshot(session: Session) -> SessionResponse:
    sim = session.simulation
    return SessionResponse(
        sessionId=session.id,
        stepIndex=sim.get_step_index(),
        stepLabel=sim.step_label(),
        currentStep=sim.get_current_step(),
        autoPlay=sim.is_auto_playing(),
        caches=sim.state.caches,
        cacheText={
            host_id: format_cache(sim.get_cache(host_id))
            for host_id in (sim.topology.sender_id, sim.topology.target_id)
        },
        eventLog=sim.get_event_log(),
        selectedFrame=sim.describe_selected_frame(),
        animation=sim.get_animation_state(),
        devices=sim.get_devices(),
    )


# ─────────────────────────────────────────────────────────────────────────────
# Health Check
# ─────────────────────────────────────────────────────────────────────────────

@app.get("/")
def root():
    return {"status": "ok", "message": "ARP Simulation API is running"}


# ─────────────────────────────────────────────────────────────────────────────
# Session Endpoints
# ─────────────────────────────────────────────────────────────────────────────

@app.post("/api/arp/sessions", response_model=SessionResponse)
def create_session(req: Optional[CreateSessionRequest] = None):
    """Starts a new run. Without a topology the classroom one (PC1 resolving PC3) is used."""
    topology = req.topology if req else None
    session_id = str(uuid.uuid4())
    session = Session(session_id, ArpSimulation(topology=topology, settings=settings))
    sessions[session_id] = session
    logger.info("Created session %s", session_id)
    return _snapshot(session)


@app.get("/api/arp/sessions/{session_id}", response_model=SessionResponse)
def get_session(session_id: str):
    return _snapshot(_get_session(session_id))


@app.delete("/api/arp/sessions/{session_id}")
def delete_session(session_id: str):
    session = _get_session(session_id)
    session.simulation.stop_auto_play()
    del sessions[session_id]
    logger.info("Deleted session %s", session_id)
    return {"status": "deleted", "sessionId": session_id}


@app.get("/api/arp/sessions/{session_id}/script", response_model=List[Step])
def get_script(session_id: str):
    """The full, fixed list of steps for this run."""
    return _get_session(session_id).simulation.get_script()


# ─────────────────────────────────────────────────────────────────────────────
# Cursor Endpoints
# ─────────────────────────────────────────────────────────────────────────────

@app.post("/api/arp/sessions/{session_id}/advance", response_model=SessionResponse)
def advance(session_id: str):
    session = _get_session(session_id)
    session.simulation.advance()
    return _snapshot(session)


@app.post("/api/arp/sessions/{session_id}/retreat", response_model=SessionResponse)
def retreat(session_id: str):
    session = _get_session(session_id)
    session.simulation.retreat()
    return _snapshot(session)


@app.post("/api/arp/sessions/{session_id}/jump", response_model=SessionResponse)
def jump(session_id: str, req: JumpRequest):
    """Jumps to a step; out-of-range indices are clamped."""
    session = _get_session(session_id)
    session.simulation.jump_to(req.index)
    return _snapshot(session)


@app.post("/api/arp/sessions/{session_id}/reset", response_model=SessionResponse)
def reset(session_id: str):
    """Stops auto play and clears caches, log, frame and animation."""
    session = _get_session(session_id)
    session.simulation.reset()
    return _snapshot(session)


@app.post("/api/arp/sessions/{session_id}/autoplay", response_model=SessionResponse)
def autoplay(session_id: str, req: AutoPlayRequest):
    session = _get_session(session_id)
    if req.enabled:
        session.simulation.start_auto_play()
    else:
        session.simulation.stop_auto_play()
    return _snapshot(session)


# ─────────────────────────────────────────────────────────────────────────────
# Animation Endpoints
# ─────────────────────────────────────────────────────────────────────────────

@app.post("/api/arp/sessions/{session_id}/tick", response_model=AnimationResponse)
def tick(session_id: str, req: TickRequest):
    """
    Display-refresh trigger: runs every frame callback and auto-play interval
    due by the client's timestamp, then reports where the packet is.
    """
    session = _get_session(session_id)
    session.tick(req.now_ms)
    sim = session.simulation
    animation = sim.get_animation_state()
    return AnimationResponse(
        animation=animation,
        progress=sim.get_progress(),
        mapping=sim.get_progress_mapping(),
        classification=classify_frame(animation.frame) if animation else None,
        dots=sim.get_packet_dots(),
        legs=[list(leg) for leg in transmission_legs(animation, sim.topology)] if animation else [],
    )


@app.get("/api/arp/map-progress", response_model=ProgressMapping)
def map_progress_endpoint(t: float, mode: DeliveryMode = "unicast"):
    """Evaluates the progress mapping for a delivery mode with the configured split and pause."""
    if not 0.0 <= t <= 1.0:
        raise HTTPException(status_code=422, detail="t must be within [0, 1]")
    split = split_for(mode, settings.unicast_split, settings.broadcast_split)
    return map_progress(t, split, settings.pause_fraction)


# ─────────────────────────────────────────────────────────────────────────────
# Inspection Endpoints
# ─────────────────────────────────────────────────────────────────────────────

@app.get("/api/arp/sessions/{session_id}/cache/{host_id}", response_model=Dict[str, str])
def get_cache(session_id: str, host_id: str):
    session = _get_session(session_id)
    try:
        return session.simulation.get_cache(host_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown host {host_id}") from None


@app.get("/api/arp/sessions/{session_id}/caches")
def get_all_caches(session_id: str):
    """Every cache entry of every host, flattened for display."""
    sim = _get_session(session_id).simulation
    return get_cache_summary(sim.state.caches, sim.topology.hosts)


@app.get("/api/arp/sessions/{session_id}/log", response_model=List[LogEntry])
def get_log(session_id: str):
    """Event log, newest first."""
    return _get_session(session_id).simulation.get_event_log()


@app.get("/api/arp/sessions/{session_id}/frame", response_model=Optional[FrameDescription])
def get_frame(session_id: str):
    """Ethernet and ARP text for the most recent request/reply frame, or null."""
    return _get_session(session_id).simulation.describe_selected_frame()


def run(host: str = "127.0.0.1", port: int = 8000) -> None:
    import uvicorn

    uvicorn.run(app, host=host, port=port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
