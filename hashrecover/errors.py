class HashRecoverError(Exception):
    """Base class for errors raised by hashrecover."""


class WordlistError(HashRecoverError):
    """The wordlist could not be opened or read. Fatal for a recovery run."""

    def __init__(self, path, reason):
        self.path = path
        self.reason = reason
        super().__init__(f"Could not read wordlist {path}: {reason}")


class UnknownAlgorithmError(HashRecoverError, ValueError):
    """An algorithm selector that does not name a usable digest."""


class HashesFileError(HashRecoverError):
    """The file of target hashes given with -cf could not be read."""

    def __init__(self, path, reason):
        self.path = path
        self.reason = reason
        super().__init__(f"Could not read hashes file {path}: {reason}")
