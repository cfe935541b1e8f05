"""
Frame Data Model
=================

Internal representation of one SBF block read off the wire.

Design Rules:
    - Built only by the FrameScanner, after length validation
    - payload is always exactly length - 8 bytes
    - block_id is already masked; revision is informational only
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Frame:
    """
    Validated SBF block.

    Attributes:
        block_id: 13-bit block number (raw ID & 0x1FFF)
        revision: Top 3 bits of the raw ID (never used for dispatch)
        length: Declared total block length, header included
        crc: CRC field as read from the header
        payload: Block body (length - 8 bytes)
    """

    block_id: int
    revision: int
    length: int
    crc: int
    payload: bytes

    def __repr__(self) -> str:
        """Compact repr that doesn't dump the payload."""
        return (
            f"Frame(block_id={self.block_id}, "
            f"revision={self.revision}, "
            f"length={self.length})"
        )
