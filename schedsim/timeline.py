from __future__ import annotations

from typing import Iterable, Iterator, List, Tuple

from .models import ScheduledSlice


class Timeline:
    """
    Append-only record of which process held the CPU and until when.

    Idle periods are not stored as segments; a segment may start later than
    the previous one ended, and ``idle_gaps`` reports those holes.
    """

    def __init__(self) -> None:
        self._slices: List[ScheduledSlice] = []

    @classmethod
    def from_slices(cls, slices: Iterable[ScheduledSlice]) -> "Timeline":
        """Rebuild a timeline from finished slices, in start order."""
        timeline = cls()
        for s in sorted(slices, key=lambda s: (s.start_time, s.end_time)):
            timeline.record(s.pid, s.start_time, s.end_time)
        return timeline

    def record(self, pid: int, start_time: int, end_time: int) -> ScheduledSlice:
        if end_time <= start_time:
            raise ValueError(f"Empty or negative slice for P{pid}: [{start_time}, {end_time})")
        if start_time < self.end_time:
            raise ValueError(
                f"Slice for P{pid} starts at {start_time}, before the previous slice ends at {self.end_time}"
            )

        slice_ = ScheduledSlice(pid=pid, start_time=start_time, end_time=end_time)
        self._slices.append(slice_)
        return slice_

    def __iter__(self) -> Iterator[ScheduledSlice]:
        return iter(self._slices)

    def __len__(self) -> int:
        return len(self._slices)

    @property
    def segments(self) -> List[ScheduledSlice]:
        return list(self._slices)

    @property
    def end_time(self) -> int:
        return self._slices[-1].end_time if self._slices else 0

    @property
    def busy_time(self) -> int:
        return sum(s.duration for s in self._slices)

    @property
    def idle_time(self) -> int:
        return self.end_time - self.busy_time

    def idle_gaps(self) -> List[Tuple[int, int]]:
        gaps: List[Tuple[int, int]] = []
        last = 0
        for s in self._slices:
            if s.start_time > last:
                gaps.append((last, s.start_time))
            last = s.end_time
        return gaps
