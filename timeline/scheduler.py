# timeline/scheduler.py
import heapq
from dataclasses import dataclass, field
from typing import Iterator, List

@dataclass(order=True)
class Trigger:
    at: float
    seq: int
    frequency: float = field(compare=False)
    duration: str = field(compare=False)

class Scheduler:
    """Min-heap of pending sound triggers keyed by absolute time.
    Each trigger carries its own frequency, so it stays valid after the note list changes.
    """
    def __init__(self):
        self._heap: List[Trigger] = []
        self._seq = 0

    def __len__(self) -> int:
        return len(self._heap)

    def schedule(self, at: float, frequency: float, duration: str) -> Trigger:
        t = Trigger(at=at, seq=self._seq, frequency=frequency, duration=duration)
        self._seq += 1
        heapq.heappush(self._heap, t)
        return t

    def due(self, now: float, tolerance: float = 0.003) -> Iterator[Trigger]:
        while self._heap and self._heap[0].at <= now + tolerance:
            yield heapq.heappop(self._heap)

    def cancel_all(self) -> int:
        n = len(self._heap)
        self._heap.clear()
        return n
