"""
Ethernet + ARP frame construction and formatting.
"""
from __future__ import annotations

from .models import ArpPayload, EthernetHeader, Frame, FrameDescription, Host


# ─── Constants ───────────────────────────────────────────────────────────────

BROADCAST_MAC = "ff:ff:ff:ff:ff:ff"
ZERO_MAC = "00:00:00:00:00:00"

ETHERTYPE_ARP = 0x0806
PTYPE_IPV4 = 0x0800

OPCODE_REQUEST = 1
OPCODE_REPLY = 2


def hex16(value: int) -> str:
    """Formats a 16-bit field as 0x-prefixed, zero-padded hex (e.g. 0x0806)."""
    return f"0x{value:04x}"


def opcode_name(opcode: int) -> str:
    if opcode == OPCODE_REQUEST:
        return "request"
    if opcode == OPCODE_REPLY:
        return "reply"
    return str(opcode)


# ─── Builders ────────────────────────────────────────────────────────────────

def build_request(sender: Host, target_ip: str) -> Frame:
    """
    Builds a broadcast ARP request: "Who has target_ip? Tell sender.ip".
    The target hardware address is unknown, so it is sent as all zeros.
    """
    return Frame(
        eth=EthernetHeader(dst=BROADCAST_MAC, src=sender.mac, type=ETHERTYPE_ARP),
        arp=ArpPayload(
            opcode=OPCODE_REQUEST,
            sha=sender.mac,
            spa=sender.ip,
            tha=ZERO_MAC,
            tpa=target_ip,
        ),
    )


def build_reply(target: Host, requester: Host) -> Frame:
    """Builds the unicast ARP reply sent by the owner of the address back to the requester."""
    return Frame(
        eth=EthernetHeader(dst=requester.mac, src=target.mac, type=ETHERTYPE_ARP),
        arp=ArpPayload(
            opcode=OPCODE_REPLY,
            sha=target.mac,
            spa=target.ip,
            tha=requester.mac,
            tpa=requester.ip,
        ),
    )


# ─── Inspection ──────────────────────────────────────────────────────────────

def describe_frame(frame: Frame) -> FrameDescription:
    """Renders the Ethernet II header and the ARP payload as two text blocks."""
    eth, arp = frame.eth, frame.arp
    ethernet = "\n".join([
        f"Dst: {eth.dst}",
        f"Src: {eth.src}",
        f"Type: {hex16(eth.type)} (ARP)",
    ])
    arp_text = "\n".join([
        f"htype: {arp.htype} (Ethernet)",
        f"ptype: {hex16(arp.ptype)} (IPv4)",
        f"hlen:  {arp.hlen}",
        f"plen:  {arp.plen}",
        f"opcode: {arp.opcode} ({opcode_name(arp.opcode)})",
        f"SHA: {arp.sha}",
        f"SPA: {arp.spa}",
        f"THA: {arp.tha}",
        f"TPA: {arp.tpa}",
    ])
    return FrameDescription(ethernet=ethernet, arp=arp_text)


def classify_frame(frame: Frame) -> str:
    """Request frames are drawn as broadcast traffic, replies as unicast."""
    if frame.arp.opcode == OPCODE_REQUEST:
        return "request"
    if frame.arp.opcode == OPCODE_REPLY:
        return "reply"
    return "other"
