"""
SBF Decoder Tests
=================

Field extraction per block layout, length guards and checksum.
"""

import struct

import pytest

from gnss_exporter.models.sample import DecodedSample, MetricKind
from gnss_exporter.sbf import BlockId, block_crc, crc16_ccitt, decode_block, jamming_state, split_block_id


STATION = "base-1"


def as_dict(samples):
    return {sample.kind: sample.value for sample in samples}


class TestReceiverStatus:
    """CPU load, uptime and temperature."""

    def test_decodes_all_fields(self, receiver_status_payload):
        samples = decode_block(STATION, BlockId.RECEIVER_STATUS, receiver_status_payload)

        assert as_dict(samples) == {
            MetricKind.CPU_LOAD: 42,
            MetricKind.UPTIME: 100000,
            MetricKind.TEMPERATURE: -5,
        }
        assert all(sample.station == STATION for sample in samples)

    def test_exactly_sixteen_bytes_is_enough(self, receiver_status_payload):
        samples = decode_block(STATION, BlockId.RECEIVER_STATUS, receiver_status_payload[:16])
        assert len(samples) == 3

    def test_short_payload_reads_nothing(self, receiver_status_payload):
        assert decode_block(STATION, BlockId.RECEIVER_STATUS, receiver_status_payload[:15]) == []

    def test_uptime_is_unsigned(self):
        payload = bytearray(16)
        struct.pack_into("<I", payload, 7, 0xFFFFFFFF)

        samples = as_dict(decode_block(STATION, BlockId.RECEIVER_STATUS, bytes(payload)))

        assert samples[MetricKind.UPTIME] == 4294967295


class TestRfStatus:
    """Jamming flags."""

    @pytest.mark.parametrize(
        "flags,expected",
        [
            (0x00, 0),
            (0x01, 1),
            (0x02, 2),
            (0x03, 2),
            (0xFC, 0),
        ],
    )
    def test_jamming_state(self, flags, expected):
        payload = bytearray(9)
        payload[8] = flags

        samples = decode_block(STATION, BlockId.RF_STATUS, bytes(payload))

        assert samples == [DecodedSample(MetricKind.JAMMING_STATUS, STATION, expected)]

    def test_critical_overrides_warning(self):
        assert jamming_state(0x03) == 2

    def test_short_payload(self):
        assert decode_block(STATION, BlockId.RF_STATUS, bytes(8)) == []


class TestSatelliteCounts:
    """PVTGeodetic and MeasEpoch."""

    def test_satellites_used(self):
        payload = bytearray(67)
        payload[66] = 18

        samples = decode_block(STATION, BlockId.PVT_GEODETIC, bytes(payload))

        assert as_dict(samples) == {MetricKind.SATELLITES_USED: 18}

    def test_satellites_used_needs_offset_66(self):
        assert decode_block(STATION, BlockId.PVT_GEODETIC, bytes(66)) == []

    def test_satellites_tracked(self):
        payload = bytearray(7)
        payload[6] = 31

        samples = decode_block(STATION, BlockId.MEAS_EPOCH, bytes(payload))

        assert as_dict(samples) == {MetricKind.SATELLITES_TRACKED: 31}

    def test_satellites_tracked_short(self):
        assert decode_block(STATION, BlockId.MEAS_EPOCH, bytes(6)) == []


class TestQualityInd:
    """Overall, signal and RF quality."""

    def test_decodes_three_indicators(self):
        payload = bytes([0, 0, 0, 0, 0, 0, 9, 8, 7])

        samples = decode_block(STATION, BlockId.QUALITY_IND, payload)

        assert as_dict(samples) == {
            MetricKind.QUALITY_OVERALL: 9,
            MetricKind.QUALITY_SIGNALS: 8,
            MetricKind.QUALITY_RF: 7,
        }

    def test_short_payload(self):
        assert decode_block(STATION, BlockId.QUALITY_IND, bytes(8)) == []


class TestDiskStatus:
    """Free disk space from capacity and usage."""

    def test_free_bytes(self):
        payload = bytearray(20)
        struct.pack_into("<II", payload, 9, 1000, 400)

        samples = decode_block(STATION, BlockId.DISK_STATUS, bytes(payload))

        assert as_dict(samples) == {MetricKind.DISK_FREE: 600 * 1024 * 1024}

    def test_usage_above_capacity_wraps_unsigned(self):
        payload = bytearray(20)
        struct.pack_into("<II", payload, 9, 400, 1000)

        samples = as_dict(decode_block(STATION, BlockId.DISK_STATUS, bytes(payload)))

        assert samples[MetricKind.DISK_FREE] == 4503598998224896
        assert samples[MetricKind.DISK_FREE] == (2**32 - 600) * 1024 * 1024

    def test_short_payload(self):
        payload = bytearray(19)
        struct.pack_into("<II", payload, 9, 1000, 400)

        assert decode_block(STATION, BlockId.DISK_STATUS, bytes(payload)) == []


class TestDispatch:
    """Block id handling."""

    def test_unknown_block_is_ignored(self):
        assert decode_block(STATION, 5914, bytes(100)) == []

    def test_empty_payload_for_every_block(self):
        for block_id in BlockId:
            assert decode_block(STATION, block_id, b"") == []

    def test_split_block_id_discards_revision(self):
        raw = (2 << 13) | BlockId.DISK_STATUS
        assert split_block_id(raw) == (BlockId.DISK_STATUS, 2)


class TestCrc:
    """CRC-16/CCITT as used by SBF."""

    def test_check_value(self):
        assert crc16_ccitt(b"123456789") == 0x31C3

    def test_block_crc_skips_sync_and_crc_fields(self):
        header = b"$@\xaa\xbb" + struct.pack("<HH", 4027, 16)
        payload = bytes(range(8))

        assert block_crc(header, payload) == crc16_ccitt(header[4:] + payload)
