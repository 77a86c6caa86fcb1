"""Values and hand-off plumbing shared by both recovery engines."""

import queue
from concurrent.futures import Future, InvalidStateError
from dataclasses import dataclass
from typing import NamedTuple, Optional

# --- Configuration ---
# Seconds a blocked hand-off waits before checking for cancellation again
POLL_INTERVAL = 0.05


class Candidate(NamedTuple):
    """A wordlist line together with its digest."""

    plaintext: str
    digest: str


@dataclass(frozen=True)
class Outcome:
    """Result of one recovery run: the recovered plaintext, or None."""

    plaintext: Optional[str] = None

    @property
    def found(self):
        return self.plaintext is not None

    @classmethod
    def hit(cls, plaintext):
        return cls(plaintext)

    def __bool__(self):
        return self.found


NOT_FOUND = Outcome()

# Marks the end of the candidate stream. Sent through the same channel as the
# candidates, so everything offered before it is examined first.
END_OF_INPUT = object()


class OutcomeSlot:
    """
    Holds the single Outcome of a recovery run.

    Any number of threads may race to resolve the slot; only the first write
    is kept. A fatal error may be stored instead and is re-raised by wait().
    """

    def __init__(self):
        self._future = Future()

    def resolve(self, outcome):
        """Stores outcome unless the slot is already set. True if it was stored."""
        try:
            self._future.set_result(outcome)
        except InvalidStateError:
            return False
        return True

    def fail(self, exc):
        try:
            self._future.set_exception(exc)
        except InvalidStateError:
            return False
        return True

    def wait(self, timeout=None):
        return self._future.result(timeout)


def new_channel():
    """A single-slot hand-off channel between two stages."""
    return queue.Queue(maxsize=1)


def offer(channel, item, stop):
    """
    Puts item into channel, waiting for the consumer to make room.

    Returns False without delivering the item once stop is set.
    """
    while not stop.is_set():
        try:
            channel.put(item, timeout=POLL_INTERVAL)
        except queue.Full:
            continue
        return True
    return False
