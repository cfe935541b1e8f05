"""
SBF Module
==========

Septentrio Binary Format constants, checksum and block decoding.

    - BlockId: Block numbers consumed by the exporter
    - decode_block: Payload -> DecodedSample list
    - block_crc: Optional CRC-16/CCITT integrity check
"""

from gnss_exporter.sbf.blocks import (
    BLOCK_NUMBER_MASK,
    HEADER_LENGTH,
    MAX_BLOCK_LENGTH,
    MIN_BLOCK_LENGTH,
    BlockId,
    split_block_id,
)
from gnss_exporter.sbf.crc import block_crc, crc16_ccitt
from gnss_exporter.sbf.decoder import decode_block, jamming_state

__all__ = [
    "BLOCK_NUMBER_MASK",
    "HEADER_LENGTH",
    "MAX_BLOCK_LENGTH",
    "MIN_BLOCK_LENGTH",
    "BlockId",
    "split_block_id",
    "block_crc",
    "crc16_ccitt",
    "decode_block",
    "jamming_state",
]
