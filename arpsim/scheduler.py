"""
Cooperative, single-threaded scheduler for display-refresh frames and
repeating intervals.

Time is supplied from outside (a browser posting its refresh timestamps, or
a test calling ``advance_to``); the scheduler never sleeps or spawns threads.
Due callbacks run one at a time, in time order, each to completion.
"""
from __future__ import annotations

import heapq
import logging
from typing import Callable, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)

FRAME_INTERVAL_MS = 16.0

Callback = Callable[[float], None]


class ScheduledTask:
    def __init__(self, handle: int, due_ms: float, callback: Callback,
                 interval_ms: Optional[float] = None, label: str = ""):
        self.handle = handle
        self.due_ms = due_ms
        self.callback = callback
        self.interval_ms = interval_ms  # None for one-shot tasks
        self.label = label
        self.cancelled = False

    def __lt__(self, other: "ScheduledTask") -> bool:
        if self.due_ms != other.due_ms:
            return self.due_ms < other.due_ms
        return self.handle < other.handle

    def __repr__(self) -> str:
        return f"ScheduledTask(handle={self.handle}, label={self.label!r}, due_ms={self.due_ms})"


class FrameScheduler:
    """
    Heap-ordered task queue with an explicit clock in milliseconds.
    Callbacks receive the time they were due at.
    """

    def __init__(self, frame_interval_ms: float = FRAME_INTERVAL_MS, start_ms: float = 0.0):
        self.frame_interval_ms = frame_interval_ms
        self._now = start_ms
        self._queue: List[Tuple[float, ScheduledTask]] = []
        self._tasks: Dict[int, ScheduledTask] = {}
        self._last_handle = 0

    def now(self) -> float:
        return self._now

    def _push(self, task: ScheduledTask) -> int:
        self._tasks[task.handle] = task
        heapq.heappush(self._queue, (task.due_ms, task))
        return task.handle

    def _next_handle(self) -> int:
        self._last_handle += 1
        return self._last_handle

    def call_later(self, delay_ms: float, callback: Callback, label: str = "") -> int:
        if delay_ms < 0:
            raise ValueError(f"Cannot schedule a task in the past: delay_ms={delay_ms}")
        return self._push(ScheduledTask(self._next_handle(), self._now + delay_ms, callback, label=label))

    def request_frame(self, callback: Callback) -> int:
        """Runs callback once, on the next display refresh."""
        return self.call_later(self.frame_interval_ms, callback, label="frame")

    def set_interval(self, callback: Callback, interval_ms: float, label: str = "interval") -> int:
        """Runs callback every interval_ms until cancelled."""
        if interval_ms <= 0:
            raise ValueError(f"Interval must be positive, got {interval_ms}")
        task = ScheduledTask(self._next_handle(), self._now + interval_ms, callback,
                             interval_ms=interval_ms, label=label)
        return self._push(task)

    def cancel(self, handle: Optional[int]) -> bool:
        """Marks a task as cancelled; it is discarded when popped. Unknown handles are ignored."""
        if handle is None:
            return False
        task = self._tasks.pop(handle, None)
        if task is None:
            return False
        task.cancelled = True
        return True

    def is_pending(self, handle: Optional[int]) -> bool:
        return handle is not None and handle in self._tasks

    def pending_count(self) -> int:
        return len(self._tasks)

    def advance_to(self, now_ms: float) -> int:
        """
        Moves the clock to now_ms, running every task due on the way.
        Returns the number of callbacks that ran.
        """
        if now_ms < self._now:
            raise ValueError(f"Cannot move the clock backwards: {now_ms} < {self._now}")

        ran = 0
        while self._queue and self._queue[0][0] <= now_ms:
            due_ms, task = heapq.heappop(self._queue)
            if task.cancelled:
                continue
            self._now = due_ms
            if task.interval_ms is None:
                self._tasks.pop(task.handle, None)
            else:
                task.due_ms = due_ms + task.interval_ms
                heapq.heappush(self._queue, (task.due_ms, task))
            task.callback(due_ms)
            ran += 1

        self._now = now_ms
        return ran

    def advance_by(self, delta_ms: float) -> int:
        return self.advance_to(self._now + delta_ms)

    def flush(self) -> None:
        """Drops every pending task; the clock keeps its value."""
        for task in self._tasks.values():
            task.cancelled = True
        self._tasks.clear()
        self._queue = []
