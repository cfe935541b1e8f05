"""
SBF Block Constants
===================

Wire-level constants for Septentrio Binary Format (SBF) blocks.

Block Header (8 bytes, little-endian):
    Sync (2b) | CRC (2b) | ID (2b) | Length (2b)

    - Sync is the literal "$@"
    - ID carries the block number in its low 13 bits and a revision
      tag in its top 3 bits
    - Length is the total block length, header included
"""

import struct
from enum import IntEnum


SYNC_1 = 0x24  # "$"
SYNC_2 = 0x40  # "@"

HEADER_LENGTH = 8
MIN_BLOCK_LENGTH = HEADER_LENGTH
MAX_BLOCK_LENGTH = 8192

BLOCK_NUMBER_MASK = 0x1FFF
REVISION_SHIFT = 13

# CRC, ID, Length (the 6 header bytes after the sync marker)
HEADER_TAIL = struct.Struct("<HHH")


class BlockId(IntEnum):
    """
    SBF block numbers consumed by the exporter.

    Values are the masked 13-bit block numbers; revision bits are
    never part of the comparison.
    """

    PVT_GEODETIC = 4007
    RECEIVER_STATUS = 4014
    MEAS_EPOCH = 4027
    DISK_STATUS = 4059
    QUALITY_IND = 4082
    RF_STATUS = 4092


def split_block_id(raw_id: int) -> tuple[int, int]:
    """Split a raw 16-bit ID field into (block number, revision)."""
    return raw_id & BLOCK_NUMBER_MASK, raw_id >> REVISION_SHIFT


def is_valid_length(length: int) -> bool:
    """Whether a declared block length is within the accepted range."""
    return MIN_BLOCK_LENGTH <= length <= MAX_BLOCK_LENGTH
