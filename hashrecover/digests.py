"""Digest functions selectable by name.

Each algorithm is a small class with a ``digest(plaintext)`` method returning
lowercase hex. Instances are also callable, so anything that accepts a plain
``str -> str`` function accepts a digest object too.
"""

import hashlib
import string

import bcrypt

from .errors import UnknownAlgorithmError

# Wordlists are decoded with surrogateescape, encoding the same way gives back
# the original bytes for lines that are not valid UTF-8.
TEXT_ENCODING = "utf-8"
TEXT_ERRORS = "surrogateescape"


def _encode(text):
    return text.encode(TEXT_ENCODING, TEXT_ERRORS)


class Digest:
    """A hashing algorithm usable by the recovery engine."""

    name = None
    hex_length = None
    crackable = True

    def digest(self, plaintext):
        raise NotImplementedError

    def __call__(self, plaintext):
        return self.digest(plaintext)

    def __repr__(self):
        return f"<{type(self).__name__} {self.name}>"


class HashlibDigest(Digest):
    """Digest backed by a hashlib constructor."""

    constructor = None

    def digest(self, plaintext):
        return self.constructor(_encode(plaintext)).hexdigest()


class MD5(HashlibDigest):
    name = "md5"
    hex_length = 32
    constructor = staticmethod(hashlib.md5)


class SHA1(HashlibDigest):
    name = "sha1"
    hex_length = 40
    constructor = staticmethod(hashlib.sha1)


class SHA256(HashlibDigest):
    name = "sha256"
    hex_length = 64
    constructor = staticmethod(hashlib.sha256)


class SHA512(HashlibDigest):
    name = "sha512"
    hex_length = 128
    constructor = staticmethod(hashlib.sha512)


class Bcrypt(Digest):
    """
    bcrypt hash of a string.

    bcrypt salts every call, so two digests of the same text differ and a
    target can never be matched by string equality. It is offered for the
    hash-text mode only.
    """

    name = "bcrypt"
    crackable = False

    def digest(self, plaintext):
        return bcrypt.hashpw(_encode(plaintext), bcrypt.gensalt()).decode("ascii")


# Mapping of algorithm names to digest instances
HASH_ALGORITHMS = {
    digest.name: digest for digest in (MD5(), SHA1(), SHA256(), SHA512(), Bcrypt())
}

# Algorithms whose digests can be matched against a target
CRACKABLE_HASH_ALGORITHMS = {
    name: digest for name, digest in HASH_ALGORITHMS.items() if digest.crackable
}


def get_digest(name, crackable=False):
    """Resolve an algorithm name such as ``"SHA256"`` to a digest instance."""
    key = (name or "").strip().lower()
    table = CRACKABLE_HASH_ALGORITHMS if crackable else HASH_ALGORITHMS
    try:
        return table[key]
    except KeyError:
        if key in HASH_ALGORITHMS:
            raise UnknownAlgorithmError(
                f"Cracking is not supported for the '{key}' algorithm"
            ) from None
        raise UnknownAlgorithmError(
            f"Unknown hash algorithm '{name}'. "
            f"Supported algorithms: {', '.join(table)}"
        ) from None


def looks_like_digest(value, digest):
    """Whether value is lowercase hex of the length the algorithm produces."""
    if digest.hex_length is None:
        return True
    return len(value) == digest.hex_length and all(
        char in string.hexdigits.lower() for char in value
    )
