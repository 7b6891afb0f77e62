"""
Binary container for passing several PSBTs between commands.

Layout:
    b"psbts" || 0xFF || CompactSize(count) || psbt_1 || ... || psbt_count

Each PSBT uses its canonical binary serialization. There is no per-entry
length prefix: PSBTs are self-delimiting, the decoder reads them one after
the other from the same stream.
"""

from __future__ import annotations

import base64
import binascii
from collections.abc import Sequence
from io import BytesIO
from typing import BinaryIO

from embit.psbt import PSBT
from loguru import logger

from dinasty.constants import CONTAINER_MAGIC, CONTAINER_SEPARATOR


class ContainerDecodeError(Exception):
    """Base class for container decoding failures"""

    pass


class WrongMagicError(ContainerDecodeError):
    def __init__(self, magic: bytes):
        self.magic = magic
        super().__init__(f"WrongMagic {magic!r}")


class WrongSeparatorError(ContainerDecodeError):
    def __init__(self, separator: int):
        self.separator = separator
        super().__init__(f"WrongSeparator 0x{separator:02x}")


class ConsensusDecodeError(ContainerDecodeError):
    """Truncated or non-canonical consensus encoded data"""

    pass


class PsbtDecodeError(ContainerDecodeError):
    def __init__(self, index: int, reason: str):
        self.index = index
        super().__init__(f"Cannot decode PSBT {index}: {reason}")


def encode_compact_size(value: int) -> bytes:
    if value < 0:
        raise ValueError(f"CompactSize must be non-negative, got {value}")
    if value < 0xFD:
        return bytes([value])
    if value <= 0xFFFF:
        return b"\xfd" + value.to_bytes(2, "little")
    if value <= 0xFFFFFFFF:
        return b"\xfe" + value.to_bytes(4, "little")
    return b"\xff" + value.to_bytes(8, "little")


def _read_exact(stream: BinaryIO, size: int, what: str) -> bytes:
    data = stream.read(size)
    if len(data) != size:
        raise ConsensusDecodeError(f"Unexpected end of data reading {what}")
    return data


def read_compact_size(stream: BinaryIO) -> int:
    """Read a CompactSize, rejecting non-minimal encodings like consensus does"""
    first = _read_exact(stream, 1, "varint")[0]

    if first < 0xFD:
        return first

    width, minimum = {0xFD: (2, 0xFD), 0xFE: (4, 0x10000), 0xFF: (8, 0x100000000)}[first]
    value = int.from_bytes(_read_exact(stream, width, "varint"), "little")
    if value < minimum:
        raise ConsensusDecodeError(f"Non-minimal varint {value}")
    return value


def encode(psbts: Sequence[PSBT]) -> bytes:
    """Serialize PSBTs into a single container"""
    parts = [CONTAINER_MAGIC, bytes([CONTAINER_SEPARATOR]), encode_compact_size(len(psbts))]
    parts.extend(psbt.serialize() for psbt in psbts)
    return b"".join(parts)


def decode(data: bytes) -> list[PSBT]:
    """
    Deserialize a container produced by `encode`.

    Raises:
        WrongMagicError: Data doesn't start with b"psbts"
        WrongSeparatorError: The byte after the magic isn't 0xFF
        ConsensusDecodeError: Header or count is truncated or malformed
        PsbtDecodeError: A PSBT body cannot be parsed
    """
    stream = BytesIO(data)

    magic = _read_exact(stream, len(CONTAINER_MAGIC), "magic")
    if magic != CONTAINER_MAGIC:
        raise WrongMagicError(magic)

    separator = _read_exact(stream, 1, "separator")[0]
    if separator != CONTAINER_SEPARATOR:
        raise WrongSeparatorError(separator)

    count = read_compact_size(stream)

    psbts: list[PSBT] = []
    for i in range(count):
        try:
            psbts.append(PSBT.read_from(stream))
        except Exception as e:
            raise PsbtDecodeError(i, str(e)) from e

    trailing = len(data) - stream.tell()
    if trailing:
        logger.warning(f"Ignoring {trailing} trailing bytes after {count} PSBTs")

    logger.debug(f"Decoded {len(psbts)} PSBTs from container")
    return psbts


def is_container(data: bytes) -> bool:
    return data.startswith(CONTAINER_MAGIC)


def psbts_to_base64(psbts: Sequence[PSBT]) -> str:
    """One base64 PSBT per line"""
    return "\n".join(base64.b64encode(psbt.serialize()).decode() for psbt in psbts)


def psbts_from_base64(text: str) -> list[PSBT]:
    """Parse one base64 PSBT per line, skipping blank lines"""
    psbts: list[PSBT] = []
    for i, line in enumerate(line.strip() for line in text.splitlines() if line.strip()):
        try:
            raw = base64.b64decode(line, validate=True)
        except binascii.Error as e:
            raise PsbtDecodeError(i, f"invalid base64: {e}") from e
        try:
            psbts.append(PSBT.parse(raw))
        except Exception as e:
            raise PsbtDecodeError(i, str(e)) from e
    return psbts


def read_psbts(data: bytes) -> list[PSBT]:
    """Read PSBTs given either as a binary container or as base64 lines"""
    if is_container(data):
        return decode(data)

    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise WrongMagicError(data[: len(CONTAINER_MAGIC)]) from e
    return psbts_from_base64(text)
