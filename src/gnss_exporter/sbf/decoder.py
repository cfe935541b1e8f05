"""
SBF Block Decoder
=================

Extracts exported fields from SBF block payloads.

Every supported block has a fixed payload layout for the fields we
read, so extraction is plain fixed-offset unpacking. Offsets below are
0-indexed into the payload (the 8-byte header is already stripped);
the first 6 payload bytes of every block are TOW (u32) and WNc (u16).

Design Rules:
    - Unknown block numbers decode to an empty list (not an error)
    - Every read is guarded by a payload length check, so truncated or
      older-revision payloads produce fewer samples instead of raising
    - No state: the decoder is safe to share between stations

Example:
    from gnss_exporter.sbf.decoder import decode_block

    for sample in decode_block("base-1", frame.block_id, frame.payload):
        sink.set_gauge(sample.kind, sample.station, sample.value)
"""

import struct
from typing import Callable, Dict, List

from gnss_exporter.models.sample import DecodedSample, MetricKind
from gnss_exporter.sbf.blocks import BlockId


_U32 = struct.Struct("<I")
_I8 = struct.Struct("<b")

MEGABYTE = 1024 * 1024

# Jamming states reported by RFStatus
JAMMING_NONE = 0
JAMMING_WARNING = 1
JAMMING_CRITICAL = 2


BlockParser = Callable[[str, bytes], List[DecodedSample]]


def _parse_pvt_geodetic(station: str, payload: bytes) -> List[DecodedSample]:
    # NrSV at offset 66
    if len(payload) > 66:
        return [DecodedSample(MetricKind.SATELLITES_USED, station, payload[66])]
    return []


def _parse_meas_epoch(station: str, payload: bytes) -> List[DecodedSample]:
    # N1 at offset 6
    if len(payload) > 6:
        return [DecodedSample(MetricKind.SATELLITES_TRACKED, station, payload[6])]
    return []


def jamming_state(flags: int) -> int:
    """
    Map RFStatus flags to a jamming state.

    Bit 1 (critical) wins over bit 0 (warning).
    """
    if flags & 0x02:
        return JAMMING_CRITICAL
    if flags & 0x01:
        return JAMMING_WARNING
    return JAMMING_NONE


def _parse_rf_status(station: str, payload: bytes) -> List[DecodedSample]:
    if len(payload) > 8:
        return [DecodedSample(MetricKind.JAMMING_STATUS, station, jamming_state(payload[8]))]
    return []


def _parse_receiver_status(station: str, payload: bytes) -> List[DecodedSample]:
    """
    ReceiverStatus: CPULoad (u8, 6), UpTime (u32, 7), temperature (i8, 15).

    All three fields are only read when the payload covers the whole
    16-byte prefix.
    """
    if len(payload) < 16:
        return []

    (uptime,) = _U32.unpack_from(payload, 7)
    (temperature,) = _I8.unpack_from(payload, 15)

    return [
        DecodedSample(MetricKind.CPU_LOAD, station, payload[6]),
        DecodedSample(MetricKind.UPTIME, station, uptime),
        DecodedSample(MetricKind.TEMPERATURE, station, temperature),
    ]


def _parse_quality_ind(station: str, payload: bytes) -> List[DecodedSample]:
    if len(payload) < 9:
        return []

    return [
        DecodedSample(MetricKind.QUALITY_OVERALL, station, payload[6]),
        DecodedSample(MetricKind.QUALITY_SIGNALS, station, payload[7]),
        DecodedSample(MetricKind.QUALITY_RF, station, payload[8]),
    ]


def _parse_disk_status(station: str, payload: bytes) -> List[DecodedSample]:
    """
    DiskStatus: N (u8, 6), SBLength (u8, 7), then the first DiskData
    sub-block: DiskID (u8, 8), DiskSize (u32 MB, 9), DiskUsage (u32 MB, 13).
    """
    if len(payload) < 20:
        return []

    (capacity_mb,) = _U32.unpack_from(payload, 9)
    (used_mb,) = _U32.unpack_from(payload, 13)

    # Unsigned 32-bit difference: usage above capacity wraps around
    free_bytes = ((capacity_mb - used_mb) & 0xFFFFFFFF) * MEGABYTE
    return [DecodedSample(MetricKind.DISK_FREE, station, free_bytes)]


BLOCK_PARSERS: Dict[int, BlockParser] = {
    BlockId.PVT_GEODETIC: _parse_pvt_geodetic,
    BlockId.MEAS_EPOCH: _parse_meas_epoch,
    BlockId.RF_STATUS: _parse_rf_status,
    BlockId.RECEIVER_STATUS: _parse_receiver_status,
    BlockId.QUALITY_IND: _parse_quality_ind,
    BlockId.DISK_STATUS: _parse_disk_status,
}


def decode_block(station: str, block_id: int, payload: bytes) -> List[DecodedSample]:
    """
    Decode the exported fields of one SBF block.

    Args:
        station: Station name to label the samples with
        block_id: Masked 13-bit block number
        payload: Block payload (header stripped)

    Returns:
        Samples in layout order. Empty for unknown blocks or payloads
        too short for any field.
    """
    parser = BLOCK_PARSERS.get(block_id)
    if parser is None:
        return []
    return parser(station, payload)
