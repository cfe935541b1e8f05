"""
SBF Checksum
============

CRC-16/CCITT (polynomial 0x1021, initial value 0) as used by SBF.

The checksum covers everything after the CRC field: the ID and Length
header fields followed by the payload.
"""

from gnss_exporter.sbf.blocks import HEADER_LENGTH


_POLY = 0x1021


def _build_table() -> list[int]:
    table = []
    for i in range(256):
        crc = i << 8
        for _ in range(8):
            if crc & 0x8000:
                crc = ((crc << 1) ^ _POLY) & 0xFFFF
            else:
                crc = (crc << 1) & 0xFFFF
        table.append(crc)
    return table


_CRC_TABLE = _build_table()


def crc16_ccitt(data: bytes, crc: int = 0) -> int:
    """Compute CRC-16/CCITT over data, continuing from crc."""
    for byte in data:
        crc = ((crc << 8) & 0xFF00) ^ _CRC_TABLE[((crc >> 8) & 0xFF) ^ byte]
    return crc


def block_crc(header: bytes, payload: bytes) -> int:
    """
    Compute the checksum of a block from its raw header and payload.

    Args:
        header: The full 8-byte block header (sync marker included)
        payload: The block payload

    Returns:
        The CRC value that the block's CRC field should carry
    """
    return crc16_ccitt(payload, crc16_ccitt(header[4:HEADER_LENGTH]))
