"""
Recovery engines: find the wordlist line whose digest equals a target.

Two strategies share one matching stage:

* bulk (``recover_bulk``): the whole wordlist is in memory and is split into
  one contiguous chunk per worker thread. Workers hash their chunk in order
  and hand candidates to a single matcher; a tracker thread reports NotFound
  once every worker is done and the matcher has drained the channel.
* streaming (``recover_streaming``): one thread pulls lines from a lazy
  source and hashes them, one thread matches. At most one line and one
  candidate are in flight, whatever the size of the source.

Stages talk through single-slot channels. The first match resolves the
outcome and sets a stop event; workers check it between lines, so a hash
already being computed is finished and then dropped.
"""

import logging
import queue
import threading

from .outcome import (
    END_OF_INPUT,
    NOT_FOUND,
    POLL_INTERVAL,
    Candidate,
    Outcome,
    OutcomeSlot,
    new_channel,
    offer,
)

logger = logging.getLogger(__name__)


def partition(count, workers):
    """
    Splits ``range(count)`` into ``workers`` contiguous (start, end) ranges.

    Every range but the last holds ``max(1, count // workers)`` items, the
    last one takes the remainder. When there are more workers than items the
    trailing ranges are empty.
    """
    if workers < 1:
        raise ValueError("workers must be at least 1")
    chunk_size = max(1, count // workers)
    ranges = []
    for i in range(workers):
        start = min(i * chunk_size, count)
        end = count if i == workers - 1 else min((i + 1) * chunk_size, count)
        ranges.append((start, end))
    return ranges


class _Recovery:
    """State shared by the stages of one recovery run."""

    def __init__(self, digest, target):
        self.digest = digest
        self.target = target
        self._channel = new_channel()
        self._stop = threading.Event()
        self._outcome = OutcomeSlot()

    def _abort(self, exc):
        """Records a fatal error and cancels every stage."""
        if self._outcome.fail(exc):
            logger.debug("Recovery aborted: %r", exc)
        self._stop.set()

    def _take(self):
        # Waits for the next item, giving up once the run is cancelled
        while not self._stop.is_set():
            try:
                return self._channel.get(timeout=POLL_INTERVAL)
            except queue.Empty:
                continue
        return END_OF_INPUT

    def _match(self):
        """Matching stage: compares candidates until a hit or end of input."""
        while True:
            item = self._take()
            if item is END_OF_INPUT:
                return
            if item.digest == self.target:
                if self._outcome.resolve(Outcome.hit(item.plaintext)):
                    logger.debug("Match found: %r", item.plaintext)
                self._stop.set()
                return

    def _wait(self, threads):
        try:
            return self._outcome.wait()
        finally:
            self._stop.set()
            for thread in threads:
                thread.join()


class BulkRecovery(_Recovery):
    """Partitioned search over an in-memory wordlist."""

    def __init__(self, lines, workers, digest, target):
        if workers < 1:
            raise ValueError("workers must be at least 1")
        super().__init__(digest, target)
        self.lines = lines
        self.workers = workers

    def run(self):
        count = len(self.lines)
        if count == 0:
            return NOT_FOUND
        if count == 1:
            line = self.lines[0]
            return Outcome.hit(line) if self.digest(line) == self.target else NOT_FOUND

        ranges = partition(count, self.workers)
        logger.debug("Searching %d lines with %d workers: %s", count, self.workers, ranges)

        workers = [
            threading.Thread(
                target=self._hash_chunk,
                args=(start, end),
                name=f"hashrecover-worker-{i}",
                daemon=True,
            )
            for i, (start, end) in enumerate(ranges)
        ]
        matcher = threading.Thread(
            target=self._match, name="hashrecover-matcher", daemon=True
        )
        tracker = threading.Thread(
            target=self._track,
            args=(workers, matcher),
            name="hashrecover-tracker",
            daemon=True,
        )

        for thread in workers + [matcher, tracker]:
            thread.start()
        return self._wait(workers + [matcher, tracker])

    def _hash_chunk(self, start, end):
        """Worker: hashes lines[start:end] in order, offering each to the matcher."""
        logger.debug("Worker started on lines %d-%d", start, end)
        hashed = 0
        try:
            for index in range(start, end):
                if self._stop.is_set():
                    break
                line = self.lines[index]
                if not offer(self._channel, Candidate(line, self.digest(line)), self._stop):
                    break
                hashed += 1
        except Exception as e:
            self._abort(e)
        logger.debug("Worker on lines %d-%d stopped after %d lines", start, end, hashed)

    def _track(self, workers, matcher):
        """Reports NotFound once every worker is done and the matcher drained."""
        for worker in workers:
            worker.join()
        offer(self._channel, END_OF_INPUT, self._stop)
        matcher.join()
        if self._outcome.resolve(NOT_FOUND):
            logger.debug("All %d workers exhausted without a match", len(workers))


class StreamingRecovery(_Recovery):
    """Two-stage pipeline over a lazily produced wordlist."""

    def __init__(self, source, digest, target):
        super().__init__(digest, target)
        self.source = source

    def run(self):
        hasher = threading.Thread(
            target=self._hash_lines, name="hashrecover-hasher", daemon=True
        )
        matcher = threading.Thread(
            target=self._match_then_finish, name="hashrecover-matcher", daemon=True
        )
        hasher.start()
        matcher.start()
        return self._wait([hasher, matcher])

    def _hash_lines(self):
        """Hashing stage: pulls lines until the source ends or the run stops."""
        lines = None
        hashed = 0
        try:
            lines = iter(self.source)
            while not self._stop.is_set():
                try:
                    line = next(lines)
                except StopIteration:
                    break
                if not offer(self._channel, Candidate(line, self.digest(line)), self._stop):
                    break
                hashed += 1
        except Exception as e:
            self._abort(e)
            return
        finally:
            if lines is not None:
                close = getattr(lines, "close", None)
                if close is not None:
                    close()
        logger.debug("Source finished after %d lines", hashed)
        offer(self._channel, END_OF_INPUT, self._stop)

    def _match_then_finish(self):
        self._match()
        self._outcome.resolve(NOT_FOUND)


def recover_bulk(lines, workers, digest, target):
    """
    Searches an in-memory wordlist with ``workers`` hashing threads.

    Returns ``Outcome.hit(plaintext)`` for the first matching line that
    reaches the matcher, or ``NOT_FOUND``. With several matching lines any
    one of them may be returned.
    """
    return BulkRecovery(lines, workers, digest, target).run()


def recover_streaming(source, digest, target):
    """
    Searches a lazy wordlist one line at a time.

    ``source`` is any iterable of lines, for instance ``stream_lines(path)``.
    Errors raised while reading it are re-raised here.
    """
    return StreamingRecovery(source, digest, target).run()
