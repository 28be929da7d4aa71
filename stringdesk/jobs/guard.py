from contextlib import contextmanager
from typing import Hashable, Iterator


class TransitionGuard:
    """Tracks jobs with a status write in flight in this process.

    Claim and release never await, so on a single event loop a claim cannot
    interleave with another request's claim for the same job.
    """

    def __init__(self):
        self._in_flight: set = set()

    def claim(self, job_id: Hashable) -> bool:
        if job_id in self._in_flight:
            return False
        self._in_flight.add(job_id)
        return True

    def release(self, job_id: Hashable) -> None:
        self._in_flight.discard(job_id)

    def is_in_flight(self, job_id: Hashable) -> bool:
        return job_id in self._in_flight

    @contextmanager
    def hold(self, job_id: Hashable) -> Iterator[bool]:
        claimed = self.claim(job_id)
        try:
            yield claimed
        finally:
            if claimed:
                self.release(job_id)


transition_guard = TransitionGuard()
