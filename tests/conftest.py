import logging

import pytest

logging.basicConfig(
    level=logging.DEBUG,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)


@pytest.fixture
def write_wordlist(tmp_path):
    """Writes lines to a wordlist file and returns its path."""

    def _write(lines, name="wordlist.txt", newline="\n"):
        path = tmp_path / name
        path.write_bytes("".join(line + newline for line in lines).encode("utf-8"))
        return path

    return _write
