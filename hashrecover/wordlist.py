"""Wordlist readers: the whole file at once, or one line at a time."""

import logging

from .digests import TEXT_ENCODING, TEXT_ERRORS
from .errors import WordlistError

logger = logging.getLogger(__name__)


def _open(path):
    try:
        return open(path, "r", encoding=TEXT_ENCODING, errors=TEXT_ERRORS, newline="")
    except OSError as e:
        raise WordlistError(path, e.strerror or e) from e


def _strip_terminator(line):
    if line.endswith("\n"):
        line = line[:-1]
    if line.endswith("\r"):
        line = line[:-1]
    return line


def read_lines(path):
    """Reads the whole wordlist into a list, keeping order and empty lines."""
    with _open(path) as f:
        try:
            lines = [_strip_terminator(line) for line in f]
        except OSError as e:
            raise WordlistError(path, e.strerror or e) from e
    logger.debug("Read %d lines from %s", len(lines), path)
    return lines


def _iter_lines(path, f):
    with f:
        while True:
            try:
                line = f.readline()
            except OSError as e:
                raise WordlistError(path, e.strerror or e) from e
            if not line:
                break
            yield _strip_terminator(line)
    logger.debug("Finished streaming %s", path)


def stream_lines(path):
    """
    Opens the wordlist now and returns an iterator over its lines.

    A missing or unreadable file fails here, before any hashing starts. Read
    errors later on surface from the iterator.
    """
    return _iter_lines(path, _open(path))
