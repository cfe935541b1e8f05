"""
Test Configuration
==================

Pytest fixtures and test configuration for the GNSS exporter.
"""

import asyncio
import struct

import pytest

from gnss_exporter.config import StationConfig
from gnss_exporter.sbf.crc import block_crc


class RecordingSink:
    """MetricSink that records every call in order."""

    def __init__(self):
        self.calls = []

    def set_gauge(self, kind, station, value):
        self.calls.append((kind, station, value))

    def latest(self, kind, station):
        for call_kind, call_station, value in reversed(self.calls):
            if call_kind == kind and call_station == station:
                return value
        return None

    def values(self, kind):
        return [value for call_kind, _, value in self.calls if call_kind == kind]


class FakeWriter:
    """Stand-in for asyncio.StreamWriter; closing ends the paired reader."""

    def __init__(self, reader=None):
        self.reader = reader
        self.closed = False

    def close(self):
        if self.reader is not None and not self.closed:
            self.reader.feed_eof()
        self.closed = True

    async def wait_closed(self):
        return None


def _build_block(block_id, payload=b"", revision=0, crc=None, length=None):
    raw_id = (revision << 13) | block_id
    if length is None:
        length = len(payload) + 8
    tail = struct.pack("<HH", raw_id, length)
    if crc is None:
        crc = block_crc(b"$@\x00\x00" + tail, payload)
    return b"$@" + struct.pack("<H", crc) + tail + payload


def _make_reader(data=b"", eof=True):
    reader = asyncio.StreamReader()
    if data:
        reader.feed_data(data)
    if eof:
        reader.feed_eof()
    return reader


@pytest.fixture
def recording_sink():
    """Provide a fresh RecordingSink."""
    return RecordingSink()


@pytest.fixture
def station():
    """Provide a sample station."""
    return StationConfig(name="base-1", host="127.0.0.1", port=28784)


@pytest.fixture
def sbf_block():
    """
    Factory building a raw SBF block.

    sbf_block(block_id, payload, revision=0, crc=None, length=None)
    computes a valid CRC and length unless given explicitly.
    """
    return _build_block


@pytest.fixture
def make_reader():
    """Factory for a StreamReader pre-fed with bytes (EOF by default)."""
    return _make_reader


@pytest.fixture
def make_writer():
    """Factory for a FakeWriter, optionally paired with a reader."""
    return FakeWriter


@pytest.fixture
def receiver_status_payload():
    """ReceiverStatus payload: CPU=42, uptime=100000 s, temperature=-5 C."""
    payload = bytearray(20)
    payload[6] = 42
    struct.pack_into("<I", payload, 7, 100000)
    struct.pack_into("<b", payload, 15, -5)
    return bytes(payload)
