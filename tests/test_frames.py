from arpsim.frames import (
    BROADCAST_MAC,
    ZERO_MAC,
    build_reply,
    build_request,
    classify_frame,
    describe_frame,
    hex16,
    opcode_name,
)


def test_request_is_broadcast_with_zero_target_mac(topology):
    pc1 = topology.host("PC1")
    frame = build_request(pc1, "192.168.1.30")
    assert frame.arp.opcode == 1
    assert frame.eth.dst == BROADCAST_MAC
    assert frame.eth.src == pc1.mac
    assert frame.arp.tha == ZERO_MAC
    assert frame.arp.sha == pc1.mac
    assert frame.arp.spa == "192.168.1.10"
    assert frame.arp.tpa == "192.168.1.30"


def test_reply_is_unicast_to_requester(topology):
    pc1, pc3 = topology.host("PC1"), topology.host("PC3")
    frame = build_reply(pc3, pc1)
    assert frame.arp.opcode == 2
    assert frame.eth.dst == pc1.mac
    assert frame.arp.tha == pc1.mac
    assert frame.arp.tpa == pc1.ip
    assert frame.arp.sha == pc3.mac
    assert frame.arp.spa == pc3.ip


def test_frame_header_constants(topology):
    frame = build_request(topology.host("PC1"), "192.168.1.30")
    assert frame.eth.type == 0x0806
    assert (frame.arp.htype, frame.arp.ptype, frame.arp.hlen, frame.arp.plen) == (1, 0x0800, 6, 4)


def test_describe_request(topology):
    text = describe_frame(build_request(topology.host("PC1"), "192.168.1.30"))
    assert text.ethernet.splitlines() == [
        "Dst: ff:ff:ff:ff:ff:ff",
        "Src: 00:1a:2b:3c:4d:10",
        "Type: 0x0806 (ARP)",
    ]
    assert "opcode: 1 (request)" in text.arp
    assert "ptype: 0x0800 (IPv4)" in text.arp
    assert "THA: 00:00:00:00:00:00" in text.arp
    assert "TPA: 192.168.1.30" in text.arp


def test_describe_reply_names_opcode(topology):
    text = describe_frame(build_reply(topology.host("PC3"), topology.host("PC1")))
    assert "opcode: 2 (reply)" in text.arp


def test_opcode_name_falls_back_to_number():
    assert opcode_name(1) == "request"
    assert opcode_name(2) == "reply"
    assert opcode_name(7) == "7"


def test_hex16_pads():
    assert hex16(0x806) == "0x0806"


def test_classify_frame(topology):
    pc1, pc3 = topology.host("PC1"), topology.host("PC3")
    assert classify_frame(build_request(pc1, pc3.ip)) == "request"
    assert classify_frame(build_reply(pc3, pc1)) == "reply"
    odd = build_reply(pc3, pc1).model_copy(
        update={"arp": build_reply(pc3, pc1).arp.model_copy(update={"opcode": 9})}
    )
    assert classify_frame(odd) == "other"
