"""
Synacor VM - Program Binary Loader

Program format: a flat sequence of 16-bit little-endian words (low byte
first), loaded at address 0. No header, no checksum.

Odd-length files: the architecture notes do not say what to do with a
trailing byte. We keep it as the low byte of one last word whose high
byte is zero, and log a warning so a truncated download is noticed.
"""

import logging
import struct
from pathlib import Path
from typing import Iterable, List, Union

from .errors import LoaderError
from .mem.memory import REGISTER_OFFSET

log = logging.getLogger(__name__)

DEFAULT_PROGRAM = 'challenge.bin'


def parse_words(data: bytes) -> List[int]:
    """Split raw bytes into little-endian 16-bit words."""
    data = bytes(data)
    if len(data) % 2:
        log.warning("program has an odd length (%d bytes); "
                    "zero-padding the final word", len(data))
        data += b'\x00'
    count = len(data) // 2
    return list(struct.unpack(f'<{count}H', data))


def words_to_bytes(words: Iterable[int]) -> bytes:
    """Encode words as a program binary (inverse of parse_words)."""
    words = list(words)
    try:
        return struct.pack(f'<{len(words)}H', *words)
    except struct.error as e:
        raise ValueError(f"cannot encode program words: {e}") from e


def load_program(path: Union[str, Path]) -> List[int]:
    """Read a program binary from disk.

    Raises LoaderError if the file cannot be read, is empty, or does not
    fit in the 32768-word address space.
    """
    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise LoaderError(f"could not read program {path}: {e}") from e

    if not data:
        raise LoaderError(f"program {path} is empty")

    words = parse_words(data)
    if len(words) > REGISTER_OFFSET:
        raise LoaderError(
            f"program {path} is {len(words)} words; at most {REGISTER_OFFSET} fit in memory")

    log.info("loaded %s: %d words", path, len(words))
    return words
