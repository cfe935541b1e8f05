"""
Frame Scanner
=============

Turns a raw SBF byte stream into a sequence of validated Frames.

The scanner is a byte-oriented state machine over an asyncio
StreamReader:

    1. Hunt for the "$@" sync marker one byte at a time. When "$" is
       followed by anything other than "@", hunting resumes after that
       byte; the byte itself is not retried as a new "$".
    2. Read the remaining 6 header bytes (CRC, ID, Length).
    3. Drop headers whose Length is outside [8, 8192]. No payload is
       read or skipped; hunting resumes at the current position.
    4. Read exactly Length - 8 payload bytes and emit the Frame.

Design Rules:
    - One scanner per connection; frames come out in wire order
    - End of stream, short reads and socket errors end the sequence
      without raising (the supervisor treats it as a disconnect)
    - Framing failures are counted and debug-logged, never raised
    - CRC is read but only checked when validate_crc is enabled

Example:
    reader, writer = await asyncio.open_connection(host, port)
    async for frame in FrameScanner(reader):
        handle(frame)
"""

import asyncio
import logging
from typing import AsyncIterator

from gnss_exporter.sbf.blocks import (
    HEADER_LENGTH,
    HEADER_TAIL,
    SYNC_1,
    SYNC_2,
    is_valid_length,
    split_block_id,
)
from gnss_exporter.sbf.crc import block_crc
from gnss_exporter.stream.frame import Frame


logger = logging.getLogger(__name__)

_SYNC = bytes((SYNC_1, SYNC_2))


class ScannerMetrics:
    """Framing counters for one connection."""

    __slots__ = (
        "frames_emitted",
        "sync_misses",
        "length_rejects",
        "crc_rejects",
    )

    def __init__(self) -> None:
        self.frames_emitted: int = 0
        self.sync_misses: int = 0
        self.length_rejects: int = 0
        self.crc_rejects: int = 0

    def to_dict(self) -> dict:
        """Export metrics as dict."""
        return {
            "frames_emitted": self.frames_emitted,
            "sync_misses": self.sync_misses,
            "length_rejects": self.length_rejects,
            "crc_rejects": self.crc_rejects,
        }


class FrameScanner:
    """
    Async iterator of Frames read from a StreamReader.

    Attributes:
        validate_crc: Drop frames whose CRC field does not match
        metrics: Framing counters for this connection
    """

    def __init__(
        self,
        reader: asyncio.StreamReader,
        validate_crc: bool = False,
    ) -> None:
        """
        Initialize scanner.

        Args:
            reader: Byte source for one connection
            validate_crc: Enable CRC-16/CCITT checking (off by default)
        """
        self._reader = reader
        self.validate_crc = validate_crc
        self.metrics = ScannerMetrics()

    def __aiter__(self) -> AsyncIterator[Frame]:
        return self.frames()

    async def frames(self) -> AsyncIterator[Frame]:
        """
        Yield frames until the stream ends or errors.

        Yields:
            Frames in the order they appear on the wire
        """
        reader = self._reader

        try:
            while True:
                byte = await reader.readexactly(1)
                if byte[0] != SYNC_1:
                    continue

                byte = await reader.readexactly(1)
                if byte[0] != SYNC_2:
                    self.metrics.sync_misses += 1
                    continue

                tail = await reader.readexactly(HEADER_LENGTH - 2)
                crc, raw_id, length = HEADER_TAIL.unpack(tail)

                if not is_valid_length(length):
                    self.metrics.length_rejects += 1
                    logger.debug(f"Dropping block header with invalid length {length}")
                    continue

                payload = await reader.readexactly(length - HEADER_LENGTH)
                block_id, revision = split_block_id(raw_id)

                if self.validate_crc and block_crc(_SYNC + tail, payload) != crc:
                    self.metrics.crc_rejects += 1
                    logger.debug(f"Dropping block {block_id}: CRC mismatch")
                    continue

                self.metrics.frames_emitted += 1
                yield Frame(
                    block_id=block_id,
                    revision=revision,
                    length=length,
                    crc=crc,
                    payload=payload,
                )

        except asyncio.IncompleteReadError:
            logger.debug("Stream ended")
        except OSError as e:
            logger.debug(f"Stream read error: {e}")
