# hashrecover: dictionary recovery of hash preimages
#
#   digests  : MD5 / SHA-1 / SHA-256 / SHA-512 (and hash-only bcrypt)
#   wordlist : whole-file and line-by-line wordlist readers
#   outcome  : Candidate, Outcome and the single-assignment outcome slot
#   engine   : bulk (partitioned) and streaming (pipelined) recovery
#   cli      : command-line front-end

__version__ = "1.0.0"

from .digests import (
    CRACKABLE_HASH_ALGORITHMS,
    HASH_ALGORITHMS,
    MD5,
    SHA1,
    SHA256,
    SHA512,
    Bcrypt,
    Digest,
    get_digest,
)
from .engine import partition, recover_bulk, recover_streaming
from .errors import (
    HashesFileError,
    HashRecoverError,
    UnknownAlgorithmError,
    WordlistError,
)
from .outcome import NOT_FOUND, Candidate, Outcome
from .wordlist import read_lines, stream_lines
