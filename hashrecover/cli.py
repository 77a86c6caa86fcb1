"""Command-line front-end for hashrecover."""

import argparse
import logging
import sys
import time

from colorama import Fore, Style, just_fix_windows_console

from . import __version__
from .digests import (
    CRACKABLE_HASH_ALGORITHMS,
    HASH_ALGORITHMS,
    get_digest,
    looks_like_digest,
)
from .engine import recover_bulk, recover_streaming
from .errors import HashesFileError, UnknownAlgorithmError, WordlistError
from .wordlist import read_lines, stream_lines

logger = logging.getLogger(__name__)

# --- Configuration ---
# Number of hashing threads used by --sync mode
NUM_THREADS = 10

# Size of the synthetic wordlist hashed by --benchmark
BENCHMARK_WORDS = 100000

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

TITLE_TEXT = f"HASHRECOVER v{__version__}"

EXIT_OK = 0
EXIT_NOT_FOUND = 1
EXIT_USAGE = 2
EXIT_WORDLIST = 3


# --- Utility Functions ---


def format_time(seconds):
    """Formats elapsed time in a human-readable format."""
    if seconds is None:
        return "N/A"
    if seconds < 60:
        return f"{seconds:.2f} seconds"
    elif seconds < 3600:
        return f"{seconds / 60:.2f} minutes"
    return f"{seconds / 3600:.2f} hours"


def print_error(message):
    print(f"{Fore.RED}Error: {message}{Style.RESET_ALL}")


def print_example():
    print("Example:")
    print("hashrecover -w wordlist.txt -a md5 --sync dac0d8a5cf48040d1bb724ea18a4f103")
    print(
        "hashrecover -w wordlist.txt -t 1 -a sha256 "
        "4e6dc79b64c40a1d2867c7e26e7856404db2a97c1d5854c3b3ae5c6098a61c62"
    )
    print("hashrecover -a sha1 -H password")


def load_targets(hashes, hashes_file):
    """Collects target hashes from the command line and an optional file."""
    targets = [h.strip().lower() for h in hashes if h.strip()]
    if hashes_file:
        try:
            lines = read_lines(hashes_file)
        except WordlistError as e:
            raise HashesFileError(hashes_file, e.reason) from e
        targets.extend(line.strip().lower() for line in lines if line.strip())
    return targets


# --- Modes ---


def recover_targets(targets, wordlist, digest, threads, sync):
    """Recovers each target in turn. Returns the number of targets not found."""
    lines = read_lines(wordlist) if sync else None
    missing = 0

    for target in targets:
        if not looks_like_digest(target, digest):
            logger.warning(
                "%s does not look like a %s digest (%d hex characters)",
                target,
                digest.name,
                digest.hex_length,
            )
        print(f"{TITLE_TEXT} - trying to recover {target}")

        start_time = time.perf_counter()
        if sync:
            outcome = recover_bulk(lines, threads, digest, target)
        else:
            outcome = recover_streaming(stream_lines(wordlist), digest, target)
        elapsed_time = time.perf_counter() - start_time

        if outcome.found:
            print(f"{Fore.GREEN}Result: {outcome.plaintext}{Style.RESET_ALL}")
        else:
            missing += 1
            print(
                f"{Fore.YELLOW}Hash not found! Try another wordlist (-w) "
                f"or hash algorithm (-a){Style.RESET_ALL}"
            )
        print(f"Time elapsed: {format_time(elapsed_time)}")

    return missing


def hash_text(text, digest):
    print(f"Text to hash: {text}")
    print(f"Hash: {digest(text)}")
    print(f"Hash algorithm: {digest.name}")


def run_benchmark(threads, words=None):
    """Times an exhaustive bulk search for every crackable algorithm."""
    if words is None:
        words = BENCHMARK_WORDS
    print("--- Running Benchmark ---")
    print(f"Using {threads} threads, {words} words.")
    wordlist = [f"benchmark{i}" for i in range(words)]

    for name, digest in CRACKABLE_HASH_ALGORITHMS.items():
        # Not in the wordlist, so every line gets hashed
        target = digest("not-in-benchmark-wordlist")
        start_time = time.perf_counter()
        recover_bulk(wordlist, threads, digest, target)
        elapsed_time = max(time.perf_counter() - start_time, 1e-9)
        print(
            f"  {name}: {words / elapsed_time:.2f} hashes/second "
            f"({format_time(elapsed_time)})"
        )

    print("--- Benchmark Complete ---")


# --- Main Execution ---


def build_parser():
    parser = argparse.ArgumentParser(
        prog="hashrecover",
        description=(
            f"{TITLE_TEXT} - recover the plaintext of a hash from a wordlist."
        ),
    )
    parser.add_argument(
        "hashes",
        metavar="HASH",
        nargs="*",
        help="Hash value(s) to recover.",
    )
    parser.add_argument(
        "-w",
        "--wordlist",
        metavar="FILE",
        help="Path to the wordlist, one candidate per line.",
    )
    parser.add_argument(
        "-t",
        "--threads",
        metavar="N",
        type=int,
        default=NUM_THREADS,
        help=f"Number of hashing threads for --sync mode. Default: {NUM_THREADS}.",
    )
    parser.add_argument(
        "-a",
        "--algorithm",
        metavar="ALGO",
        help=f"Hash algorithm. Choices: {', '.join(HASH_ALGORITHMS)}.",
    )
    parser.add_argument(
        "--sync",
        action="store_true",
        help=(
            "Read the whole wordlist first, then hash it with --threads workers "
            "(faster, uses more memory for big files)."
        ),
    )
    parser.add_argument(
        "-cf",
        "--crack-hashes-file",
        metavar="FILE",
        help="Recover multiple hashes from a file (one hash per line).",
    )
    parser.add_argument(
        "-H",
        "--hash-text",
        metavar="TEXT",
        help="Print the hash of TEXT instead of recovering anything.",
    )
    parser.add_argument(
        "--benchmark",
        action="store_true",
        help="Measure hashing speed of every supported algorithm.",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Show debug logging."
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    return parser


def usage_error(message):
    print_error(message)
    print_example()
    return EXIT_USAGE


def main(argv=None):
    """Parses arguments and runs the selected mode. Returns the exit code."""
    just_fix_windows_console()
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING, format=LOG_FORMAT
    )

    if args.threads < 1:
        return usage_error("Threads count must be at least 1")

    if args.benchmark:
        run_benchmark(args.threads)
        return EXIT_OK

    if not args.algorithm:
        return usage_error("Hash algorithm (-a) is not specified!")

    try:
        if args.hash_text is not None:
            hash_text(args.hash_text, get_digest(args.algorithm))
            return EXIT_OK
        digest = get_digest(args.algorithm, crackable=True)
    except UnknownAlgorithmError as e:
        return usage_error(str(e))

    if not args.wordlist:
        return usage_error("Wordlist filename (-w) is not specified!")

    try:
        targets = load_targets(args.hashes, args.crack_hashes_file)
    except HashesFileError as e:
        return usage_error(str(e))
    if not targets:
        return usage_error("You need to specify the hash to recover!")

    try:
        missing = recover_targets(
            targets, args.wordlist, digest, args.threads, args.sync
        )
    except WordlistError as e:
        print_error(e)
        return EXIT_WORDLIST

    return EXIT_NOT_FOUND if missing else EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
