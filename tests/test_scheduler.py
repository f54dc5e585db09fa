import pytest

from arpsim.scheduler import FrameScheduler


def test_frames_run_once_in_order():
    scheduler = FrameScheduler(frame_interval_ms=16)
    seen = []
    scheduler.request_frame(lambda ts: seen.append(("a", ts)))
    scheduler.call_later(5, lambda ts: seen.append(("b", ts)))
    assert scheduler.advance_to(20) == 2
    assert seen == [("b", 5), ("a", 16)]
    assert scheduler.now() == 20
    assert scheduler.pending_count() == 0


def test_interval_repeats_until_cancelled():
    scheduler = FrameScheduler()
    seen = []
    handle = scheduler.set_interval(seen.append, 100)
    scheduler.advance_to(350)
    assert seen == [100, 200, 300]
    assert scheduler.cancel(handle)
    scheduler.advance_to(1000)
    assert seen == [100, 200, 300]


def test_interval_can_cancel_itself():
    scheduler = FrameScheduler()
    seen = []
    handles = {}

    def once(ts):
        seen.append(ts)
        scheduler.cancel(handles["h"])

    handles["h"] = scheduler.set_interval(once, 10)
    scheduler.advance_to(100)
    assert seen == [10]


def test_callback_may_schedule_more_work():
    scheduler = FrameScheduler(frame_interval_ms=10)
    seen = []

    def loop(ts):
        seen.append(ts)
        if len(seen) < 3:
            scheduler.request_frame(loop)

    scheduler.request_frame(loop)
    scheduler.advance_to(100)
    assert seen == [10, 20, 30]


def test_cancel_unknown_handle():
    scheduler = FrameScheduler()
    assert scheduler.cancel(None) is False
    assert scheduler.cancel(42) is False


def test_clock_cannot_go_backwards():
    scheduler = FrameScheduler()
    scheduler.advance_to(50)
    with pytest.raises(ValueError):
        scheduler.advance_to(10)
    with pytest.raises(ValueError):
        scheduler.call_later(-1, lambda ts: None)


def test_flush_drops_pending_tasks():
    scheduler = FrameScheduler()
    seen = []
    scheduler.set_interval(seen.append, 10)
    scheduler.request_frame(seen.append)
    scheduler.flush()
    scheduler.advance_by(100)
    assert seen == []
    assert scheduler.pending_count() == 0
