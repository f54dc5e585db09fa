import pytest

from arpsim.config import SimulationSettings
from arpsim.errors import ConfigurationError
from arpsim.models import Host, Position, Topology
from arpsim.simulation import ArpSimulation
from arpsim.topology import default_topology


def test_example_run(sim):
    assert sim.get_step_index() == 0
    assert sim.get_current_step().kind == "scenario-start"
    assert any("PC1 wants to send" in e.message for e in sim.get_event_log())

    sim.jump_to(3)
    frame = sim.get_current_step().frame
    assert frame.arp.opcode == 1
    assert frame.eth.dst == "ff:ff:ff:ff:ff:ff"
    assert frame.arp.tha == "00:00:00:00:00:00"
    assert frame.arp.tpa == "192.168.1.30"

    sim.advance()
    sim.advance()
    frame = sim.get_current_step().frame
    assert frame.arp.opcode == 2
    assert frame.eth.dst == sim.topology.host("PC1").mac

    sim.advance()
    assert sim.get_cache("PC1")["192.168.1.30"] == sim.topology.host("PC3").mac
    assert sim.get_cache("PC3")["192.168.1.10"] == sim.topology.host("PC1").mac


def test_step_label(sim):
    assert sim.step_label() == "1 / 8"
    sim.jump_to(7)
    assert sim.step_label() == "8 / 8"


def test_get_cache_returns_snapshot(sim):
    sim.jump_to(6)
    snapshot = sim.get_cache("PC1")
    snapshot["1.2.3.4"] = "x"
    assert "1.2.3.4" not in sim.get_cache("PC1")


def test_get_cache_unknown_host(sim):
    with pytest.raises(KeyError):
        sim.get_cache("PC9")


def test_describe_selected_frame(sim):
    assert sim.describe_selected_frame() is None
    sim.jump_to(3)
    assert "opcode: 1 (request)" in sim.describe_selected_frame().arp
    sim.advance()
    # still the most recent frame
    assert "opcode: 1 (request)" in sim.describe_selected_frame().arp


def test_broadcast_animation_progresses(sim, scheduler):
    sim.jump_to(3)
    anim = sim.get_animation_state()
    assert anim.mode == "broadcast"
    assert len(anim.to_ids) == 3
    assert "PC1" not in anim.to_ids

    scheduler.advance_by(16)
    assert sim.get_progress() == 0.0
    scheduler.advance_by(600)
    assert 0.0 < sim.get_progress() < 1.0
    scheduler.advance_by(2000)
    assert sim.get_progress() == 1.0
    assert sim.get_progress_mapping().phase == "post"
    assert len(sim.get_packet_dots()) == 3
    assert scheduler.pending_count() == 0


def test_cursor_change_cancels_animation(sim, scheduler):
    sim.jump_to(3)
    scheduler.advance_by(400)
    assert sim.get_progress() > 0.0
    sim.advance()
    assert sim.get_animation_state() is None
    assert scheduler.pending_count() == 0
    scheduler.advance_by(400)
    assert sim.get_animation_state() is None


def test_new_transmission_restarts_from_zero(sim, scheduler):
    sim.jump_to(3)
    scheduler.advance_by(800)
    sim.jump_to(5)
    assert sim.get_animation_state().mode == "unicast"
    assert sim.get_progress() == 0.0
    assert scheduler.pending_count() == 1


def test_reset_clears_state(sim, scheduler):
    sim.start_auto_play()
    sim.jump_to(6)
    sim.jump_to(3)
    sim.reset()
    assert sim.get_step_index() == 0
    assert sim.get_cache("PC1") == {}
    assert sim.get_cache("PC3") == {}
    assert sim.get_event_log() == []
    assert sim.get_animation_state() is None
    assert sim.describe_selected_frame() is None
    assert not sim.is_auto_playing()
    assert scheduler.pending_count() == 0


def test_auto_play_advances_on_interval(sim, scheduler):
    sim.start_auto_play()
    scheduler.advance_by(1349)
    assert sim.get_step_index() == 0
    scheduler.advance_by(1)
    assert sim.get_step_index() == 1
    scheduler.advance_by(1350 * 20)
    assert sim.get_step_index() == 7
    assert sim.is_auto_playing()


def test_toggle_auto_play(sim):
    assert sim.toggle_auto_play() is True
    assert sim.toggle_auto_play() is False


def test_devices_list_pcs_then_switch(sim):
    devices = sim.get_devices()
    assert [d.id for d in devices] == ["PC1", "PC2", "PC3", "PC4", "SW1"]
    assert devices[0].role == "sender"
    assert devices[2].role == "target"
    assert devices[4].ip is None


def test_custom_sender_and_target(scheduler):
    sim = ArpSimulation(topology=default_topology("PC2", "PC4"), scheduler=scheduler)
    sim.jump_to(6)
    assert sim.get_cache("PC2") == {"192.168.1.40": "00:1a:2b:3c:4d:40"}
    assert sim.get_cache("PC4") == {"192.168.1.20": "00:1a:2b:3c:4d:20"}


def test_settings_drive_timing():
    from arpsim.scheduler import FrameScheduler

    scheduler = FrameScheduler(frame_interval_ms=10)
    settings = SimulationSettings(duration_ms=100, auto_play_interval_ms=500)
    sim = ArpSimulation(settings=settings, scheduler=scheduler)
    sim.jump_to(5)
    scheduler.advance_by(10)
    scheduler.advance_by(50)
    assert sim.get_progress() == pytest.approx(0.5)


def test_missing_target_fails_fast():
    hosts = [
        Host(id="SW1", name="SW1", kind="switch", mac="02:00:00:00:00:01"),
        Host(id="PC1", name="PC1", ip="10.0.0.1", mac="02:00:00:00:00:02", position=Position(x=0, y=0)),
    ]
    with pytest.raises(ConfigurationError):
        ArpSimulation(topology=Topology(hosts=hosts, sender_id="PC1", target_id="PC2"))
