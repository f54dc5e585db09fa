"""
The fixed teaching topology (one switch, four PCs on a line) and the
construction-time checks every simulator runs on the topology it is given.
"""
from __future__ import annotations

import logging
from typing import List

from .errors import ConfigurationError
from .models import Host, Link, Position, Topology

logger = logging.getLogger(__name__)


# ─── Constants ───────────────────────────────────────────────────────────────

DEFAULT_SENDER_ID = "PC1"
DEFAULT_TARGET_ID = "PC3"
SWITCH_ID = "SW1"

PC_Y = 470
SWITCH_Y = 240
BASE_X = 240
GAP_X = 240


def _pc(i: int, host_id: str, ip: str, mac: str) -> Host:
    return Host(
        id=host_id,
        name=host_id,
        kind="pc",
        ip=ip,
        mac=mac,
        position=Position(x=BASE_X + GAP_X * i, y=PC_Y),
    )


def default_topology(sender_id: str = DEFAULT_SENDER_ID, target_id: str = DEFAULT_TARGET_ID) -> Topology:
    """
    Builds the classroom topology: SW1 above PC1..PC4.
    The sender/target pair defaults to PC1 resolving PC3.
    """
    hosts = [
        Host(
            id=SWITCH_ID,
            name="Switch1",
            kind="switch",
            mac="02:aa:bb:cc:dd:f1",
            position=Position(x=BASE_X + GAP_X * 1.5, y=SWITCH_Y),
        ),
        _pc(0, "PC1", "192.168.1.10", "00:1a:2b:3c:4d:10"),
        _pc(1, "PC2", "192.168.1.20", "00:1a:2b:3c:4d:20"),
        _pc(2, "PC3", "192.168.1.30", "00:1a:2b:3c:4d:30"),
        _pc(3, "PC4", "192.168.1.40", "00:1a:2b:3c:4d:40"),
    ]
    links = [Link(a=SWITCH_ID, b=h.id) for h in hosts if h.kind == "pc"]
    return with_roles(Topology(hosts=hosts, links=links, sender_id=sender_id, target_id=target_id))


def with_roles(topology: Topology) -> Topology:
    """Returns a copy whose hosts carry the sender/target role tags."""
    hosts: List[Host] = []
    for h in topology.hosts:
        role = "sender" if h.id == topology.sender_id else "target" if h.id == topology.target_id else "none"
        hosts.append(h if h.role == role else h.model_copy(update={"role": role}))
    return topology.model_copy(update={"hosts": hosts})


def validate_topology(topology: Topology) -> Topology:
    """
    Fails fast on a topology the scenario cannot run on.
    Returns the topology with role tags applied.
    """
    ids = [h.id for h in topology.hosts]
    if len(set(ids)) != len(ids):
        raise ConfigurationError(f"Duplicate host identifiers in topology: {ids}")
    if topology.sender_id == topology.target_id:
        raise ConfigurationError(f"Sender and target must differ (both are {topology.sender_id!r})")

    for label, host_id in (("sender", topology.sender_id), ("target", topology.target_id)):
        host = topology.host(host_id)
        if host is None:
            raise ConfigurationError(f"Topology has no {label} host {host_id!r}")
        if host.kind != "pc" or not host.ip:
            raise ConfigurationError(f"The {label} host {host_id!r} must be an end host with a network address")

    if topology.switch is None:
        raise ConfigurationError("Topology has no switch to forward frames through")

    logger.debug("Topology accepted: %d hosts, sender=%s target=%s",
                 len(ids), topology.sender_id, topology.target_id)
    return with_roles(topology)
