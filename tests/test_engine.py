import hashlib
import logging
import threading

import pytest

from hashrecover.digests import MD5, SHA1, SHA256, SHA512
from hashrecover.engine import partition, recover_bulk, recover_streaming
from hashrecover.errors import WordlistError
from hashrecover.outcome import NOT_FOUND, Outcome
from hashrecover.wordlist import read_lines, stream_lines

MD5_OF_E = "e1671797c52e15f763380b45e841ec32"
MD5_OF_HASHGOAT = "dac0d8a5cf48040d1bb724ea18a4f103"


def bulk(lines, target, digest=MD5(), workers=4):
    return recover_bulk(lines, workers, digest, target)


def streaming(lines, target, digest=MD5()):
    return recover_streaming(iter(lines), digest, target)


ENGINES = [
    pytest.param(lambda lines, target, digest: bulk(lines, target, digest, 1), id="bulk-1"),
    pytest.param(lambda lines, target, digest: bulk(lines, target, digest, 3), id="bulk-3"),
    pytest.param(lambda lines, target, digest: bulk(lines, target, digest, 64), id="bulk-64"),
    pytest.param(streaming, id="streaming"),
]


# --- partition ---


@pytest.mark.parametrize(
    "count, workers, expected",
    [
        (7, 3, [(0, 2), (2, 4), (4, 7)]),
        (6, 3, [(0, 2), (2, 4), (4, 6)]),
        (5, 1, [(0, 5)]),
        (3, 5, [(0, 1), (1, 2), (2, 3), (3, 3), (3, 3)]),
    ],
)
def test_partition(count, workers, expected):
    assert partition(count, workers) == expected


@pytest.mark.parametrize("count", [0, 1, 2, 9, 10, 11, 100])
@pytest.mark.parametrize("workers", [1, 2, 3, 10, 50])
def test_partition_covers_every_index_once(count, workers):
    ranges = partition(count, workers)
    assert len(ranges) == workers
    covered = [i for start, end in ranges for i in range(start, end)]
    assert covered == list(range(count))


def test_partition_rejects_zero_workers():
    with pytest.raises(ValueError):
        partition(10, 0)


# --- scenarios shared by both engines ---


@pytest.mark.parametrize("run", ENGINES)
def test_one_word_md5(run):
    outcome = run(["test_md5"], "9050bddcf415f2d0518804e551c1be98", MD5())
    assert outcome == Outcome.hit("test_md5")
    assert outcome.found


@pytest.mark.parametrize("run", ENGINES)
def test_not_found_md5(run):
    outcome = run(["a", "b", "c", "d"], MD5_OF_E, MD5())
    assert outcome == NOT_FOUND
    assert not outcome.found
    assert outcome.plaintext is None


@pytest.mark.parametrize("run", ENGINES)
def test_not_found_sha1(run):
    outcome = run(["a", "b", "c", "d"], "58e6b3a414a1e090dfc6029add0f3555ccba127f", SHA1())
    assert not outcome.found


@pytest.mark.parametrize("run", ENGINES)
def test_empty_wordlist(run):
    assert run([], MD5_OF_HASHGOAT, MD5()) == NOT_FOUND


@pytest.mark.parametrize("run", ENGINES)
def test_single_wrong_word(run):
    assert run(["a"], MD5_OF_HASHGOAT, MD5()) == NOT_FOUND


@pytest.mark.parametrize("run", ENGINES)
@pytest.mark.parametrize(
    "digest, word",
    [(SHA1(), "test_sha1"), (SHA256(), "test_sha256"), (SHA512(), "test_sha512")],
)
def test_one_word_other_algorithms(run, digest, word):
    assert run([word], digest(word), digest) == Outcome.hit(word)


@pytest.mark.parametrize("run", ENGINES)
@pytest.mark.parametrize("position", [0, 1, 50, 98, 99])
def test_match_anywhere_in_wordlist(run, position):
    lines = [f"word{i}" for i in range(100)]
    target = hashlib.md5(lines[position].encode()).hexdigest()
    assert run(lines, target, MD5()).plaintext == lines[position]


@pytest.mark.parametrize("run", ENGINES)
def test_empty_line_can_be_the_preimage(run):
    outcome = run(["x", "", "y"], "d41d8cd98f00b204e9800998ecf8427e", MD5())
    assert outcome.found
    assert outcome.plaintext == ""


@pytest.mark.parametrize("run", ENGINES)
def test_several_matches_return_one_of_them(run):
    def digest(text):
        return "target" if text.startswith("match") else "other"

    lines = [f"filler{i}" for i in range(30)]
    matches = {"match-a", "match-b", "match-c"}
    lines[3], lines[15], lines[29] = sorted(matches)
    for _ in range(5):
        outcome = run(lines, "target", digest)
        assert outcome.plaintext in matches


@pytest.mark.parametrize("run", ENGINES)
def test_target_comparison_is_case_sensitive(run):
    assert not run(["test_md5"], "9050BDDCF415F2D0518804E551C1BE98", MD5()).found


def test_outcome_does_not_depend_on_worker_count():
    lines = [f"pw{i}" for i in range(37)]
    target = MD5()("pw36")
    for workers in range(1, 45):
        assert recover_bulk(lines, workers, MD5(), target) == Outcome.hit("pw36")
        assert recover_bulk(lines, workers, MD5(), MD5_OF_E) == NOT_FOUND


# --- bulk specifics ---


def test_bulk_rejects_zero_workers():
    with pytest.raises(ValueError):
        recover_bulk(["a", "b"], 0, MD5(), MD5_OF_E)


def test_bulk_accepts_any_sequence():
    assert recover_bulk(("a", "b", "e"), 2, MD5(), MD5_OF_E) == Outcome.hit("e")


def test_bulk_hashing_error_propagates():
    def broken(text):
        if text == "boom":
            raise RuntimeError("hash failed")
        return "x"

    with pytest.raises(RuntimeError, match="hash failed"):
        recover_bulk(["a", "b", "boom", "c"], 2, broken, "never")


def test_bulk_leaves_no_threads_behind():
    before = threading.active_count()
    lines = [f"w{i}" for i in range(500)]
    recover_bulk(lines, 8, MD5(), MD5()("w3"))
    recover_bulk(lines, 8, MD5(), MD5_OF_E)
    assert threading.active_count() == before


# --- streaming specifics ---


class CountingSource:
    """Iterable that records how many lines were pulled and whether it was closed."""

    def __init__(self, lines):
        self.lines = lines
        self.pulled = 0
        self.closed = False

    def __iter__(self):
        try:
            for line in self.lines:
                self.pulled += 1
                yield line
        finally:
            self.closed = True


def test_streaming_stops_pulling_after_a_match():
    source = CountingSource([f"line{i}" for i in range(10000)])
    outcome = recover_streaming(source, MD5(), MD5()("line0"))
    assert outcome == Outcome.hit("line0")
    assert source.pulled < 100
    assert source.closed


def test_streaming_reads_whole_source_when_not_found():
    source = CountingSource(["a", "b", "c", "d"])
    assert recover_streaming(source, MD5(), MD5_OF_E) == NOT_FOUND
    assert source.pulled == 4
    assert source.closed


def test_streaming_last_line_is_checked_before_not_found():
    lines = [f"w{i}" for i in range(200)]
    assert recover_streaming(iter(lines), MD5(), MD5()("w199")) == Outcome.hit("w199")


def test_streaming_source_error_propagates():
    def failing_source():
        yield "a"
        yield "b"
        raise WordlistError("words.txt", "I/O error")

    with pytest.raises(WordlistError, match="I/O error"):
        recover_streaming(failing_source(), MD5(), MD5_OF_E)


def test_streaming_source_failing_on_iter_propagates():
    class UnopenableSource:
        def __iter__(self):
            raise WordlistError("words.txt", "Permission denied")

    result = {}

    def run():
        try:
            recover_streaming(UnopenableSource(), MD5(), MD5_OF_E)
        except WordlistError as e:
            result["error"] = e

    thread = threading.Thread(target=run, daemon=True)
    thread.start()
    thread.join(5)
    assert not thread.is_alive(), "recover_streaming did not return"
    assert "Permission denied" in str(result["error"])


def test_streaming_from_file(write_wordlist):
    path = write_wordlist(["a", "b", "test_md5", "c"])
    outcome = recover_streaming(
        stream_lines(path), MD5(), "9050bddcf415f2d0518804e551c1be98"
    )
    assert outcome == Outcome.hit("test_md5")


def test_bulk_from_file(write_wordlist):
    path = write_wordlist(["a", "b", "c", "d"])
    assert recover_bulk(read_lines(path), 10, MD5(), MD5_OF_E) == NOT_FOUND


def test_bulk_workers_log_start_and_stop(caplog):
    lines = [f"w{i}" for i in range(6)]
    with caplog.at_level(logging.DEBUG, logger="hashrecover.engine"):
        recover_bulk(lines, 3, MD5(), MD5_OF_E)
    messages = [record.getMessage() for record in caplog.records]
    for start, end in partition(6, 3):
        assert f"Worker started on lines {start}-{end}" in messages
        assert f"Worker on lines {start}-{end} stopped after 2 lines" in messages
