"""
Builds the fixed eight-step ARP narrative for a sender resolving a target.
"""
from __future__ import annotations

from typing import List

from .errors import ConfigurationError
from .frames import build_reply, build_request
from .models import (
    ArpReplyStep,
    ArpRequestStep,
    CacheHitStep,
    CacheLookupStep,
    CacheMissStep,
    CacheUpdateStep,
    Host,
    PeerReceivedStep,
    ScenarioStartStep,
    Step,
    Topology,
)


def _participant(topology: Topology, host_id: str, label: str) -> Host:
    host = topology.host(host_id)
    if host is None or not host.ip:
        raise ConfigurationError(f"Cannot build ARP script: {label} {host_id!r} is missing or has no IP")
    return host


def generate_script(topology: Topology, sender_id: str, target_id: str) -> List[Step]:
    """
    Returns the steps in protocol order:
    miss -> broadcast request -> target receives -> unicast reply -> cache update -> hit.
    Calling it twice with the same inputs yields equal scripts.
    """
    sender = _participant(topology, sender_id, "sender")
    target = _participant(topology, target_id, "target")

    return [
        ScenarioStartStep(title=f"{sender.name} wants to send IPv4 traffic to {target.ip}"),
        CacheLookupStep(title=f"{sender.name} checks ARP cache for {target.ip}"),
        CacheMissStep(title=f"Cache miss -> {sender.name} must ARP for {target.ip}"),
        ArpRequestStep(
            title=f"ARP Request (broadcast): Who has {target.ip}? Tell {sender.ip}",
            frame=build_request(sender, target.ip),
        ),
        PeerReceivedStep(
            title=f"{target.name} receives broadcast ARP request and recognizes {target.ip}",
        ),
        ArpReplyStep(
            title=f"ARP Reply (unicast): {target.ip} is at {target.mac}",
            frame=build_reply(target, sender),
        ),
        CacheUpdateStep(title=f"{sender.name} updates ARP cache: {target.ip} -> {target.mac}"),
        CacheHitStep(title="Second send: ARP cache hit -> no broadcast needed"),
    ]
