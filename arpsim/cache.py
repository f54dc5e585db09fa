"""
Per-host ARP caches.

Caches are plain ``{hostId: {ip: mac}}`` dicts. Every function here is pure:
updates return a new mapping and never touch the one passed in.
"""
from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from .models import Host

Caches = Dict[str, Dict[str, str]]


def empty_caches(host_ids: Iterable[str]) -> Caches:
    return {host_id: {} for host_id in host_ids}


def lookup(caches: Caches, host_id: str, ip: str) -> Optional[str]:
    """Returns the cached MAC for ip, or None when the address is unresolved."""
    return caches.get(host_id, {}).get(ip)


def update(caches: Caches, host_id: str, ip: str, mac: str) -> Caches:
    """
    Returns a copy of caches with ip -> mac recorded for host_id.
    Existing entries are kept; writing the same mapping twice is a no-op.
    """
    updated = {k: dict(v) for k, v in caches.items()}
    updated[host_id] = {**updated.get(host_id, {}), ip: mac}
    return updated


def is_empty(caches: Caches, host_id: str) -> bool:
    return not caches.get(host_id)


def format_cache(entries: Dict[str, str]) -> str:
    """One "ip -> mac" line per entry, or "(empty)"."""
    if not entries:
        return "(empty)"
    return "\n".join(f"{ip} -> {mac}" for ip, mac in entries.items())


def get_cache_summary(caches: Caches, hosts: List[Host]) -> List[dict]:
    """
    Returns a flat, human-readable listing of all cache entries.
    Useful for debugging and UI display.
    """
    host_map = {h.id: h for h in hosts}
    summary = []
    for host_id, entries in caches.items():
        host = host_map.get(host_id)
        host_name = host.name if host else host_id
        for ip, mac in entries.items():
            summary.append({
                "hostId": host_id,
                "hostName": host_name,
                "ip": ip,
                "mac": mac,
            })
    return summary
