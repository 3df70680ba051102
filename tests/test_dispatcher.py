#!/usr/bin/env python3
"""
传输模式分发测试
================

测试 serial_tty_write.transfer.dispatcher 中原始拷贝和分帧分发逻辑。
"""

import io
import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from serial_tty_write.config.constants import TransferMode
from serial_tty_write.core.errors import ProtocolError, SinkWriteError, SourceReadError
from serial_tty_write.core.xmodem_protocol import XmodemTransmitter
from serial_tty_write.transfer.dispatcher import (
    TransferDispatcher,
    TransferRequest,
    copy_stream,
)
from serial_tty_write.transfer.source import ByteSource, SourceKind
from tests.conftest import BufferedSerial, EventRecorder, XmodemReceiverSerial


class TestCopyStream:
    """原始拷贝测试"""

    def test_hello(self):
        """输入HELLO，原始模式写入5字节"""
        sink = io.BytesIO()

        assert copy_stream(io.BytesIO(b"HELLO"), sink) == 5
        assert sink.getvalue() == b"HELLO"

    def test_multiple_chunks_keep_order(self):
        """跨多个块时保持字节顺序"""
        data = bytes(range(256)) * 400
        sink = BufferedSerial("fake://")

        written = copy_stream(io.BytesIO(data), sink, chunk_size=1000)

        assert written == len(data)
        assert bytes(sink.written) == data

    def test_empty_source(self):
        sink = io.BytesIO()

        assert copy_stream(io.BytesIO(b""), sink) == 0
        assert sink.getvalue() == b""

    def test_short_writes_are_continued(self):
        """串口一次只写入部分数据时继续写剩余部分"""
        sink = MagicMock()
        received = bytearray()

        def short_write(view):
            part = bytes(view[:3])
            received.extend(part)
            return len(part)

        sink.write.side_effect = short_write

        assert copy_stream(io.BytesIO(b"abcdefgh"), sink) == 8
        assert bytes(received) == b"abcdefgh"
        sink.flush.assert_called_once()

    def test_write_failure_reports_partial_count(self):
        """写入失败时携带失败前已写入的字节数"""
        sink = BufferedSerial("fake://", fail_write_after=10)

        with pytest.raises(SinkWriteError) as exc_info:
            copy_stream(io.BytesIO(b"x" * 20), sink)

        assert exc_info.value.bytes_written == 10
        assert bytes(sink.written) == b"x" * 10

    def test_zero_length_write(self):
        sink = MagicMock()
        sink.write.return_value = 0

        with pytest.raises(SinkWriteError, match="0字节"):
            copy_stream(io.BytesIO(b"abc"), sink)

    def test_read_failure(self):
        source = MagicMock(spec=["read"])
        source.read.side_effect = OSError("read error")

        with pytest.raises(SourceReadError):
            copy_stream(source, io.BytesIO())

    def test_prefers_read1(self):
        """输入源提供read1时按已到达的数据写出，不等待凑满一块"""
        class PipeSource:
            def __init__(self, pieces):
                self.pieces = list(pieces)
                self.sizes = []

            def read(self, size=-1):
                raise AssertionError("read() 会阻塞到凑满 size")

            def read1(self, size=-1):
                self.sizes.append(size)
                return self.pieces.pop(0) if self.pieces else b""

        source = PipeSource([b"ab", b"c", b"def"])
        sink = BufferedSerial("fake://")

        assert copy_stream(source, sink, chunk_size=4096) == 6
        assert bytes(sink.written) == b"abcdef"
        assert source.sizes == [4096] * 4

    def test_byte_source_uses_read1(self):
        stream = io.BufferedReader(io.BytesIO(b"x" * 10))
        source = ByteSource(SourceKind.STDIN, stream)

        assert copy_stream(source, io.BytesIO(), chunk_size=4) == 10


class TestTransferDispatcher:
    """分发器测试"""

    def test_raw_mode_emits_no_events(self):
        """原始模式不产生进度事件"""
        sink = io.BytesIO()
        recorder = EventRecorder()
        dispatcher = TransferDispatcher()

        written = dispatcher.transfer(
            TransferRequest(io.BytesIO(b"HELLO"), sink, TransferMode.RAW), recorder
        )

        assert written == 5
        assert sink.getvalue() == b"HELLO"
        assert recorder.events == []

    def test_framed_mode_delegates_to_transmitter(self):
        """分帧模式把输入源、串口和回调交给发送器"""
        transmitter = MagicMock(spec=XmodemTransmitter)
        transmitter.transmit_with_progress.return_value = 42
        source, sink, callback = io.BytesIO(b"x"), MagicMock(), MagicMock()

        written = TransferDispatcher(transmitter).transfer(
            TransferRequest(source, sink, TransferMode.FRAMED), callback
        )

        assert written == 42
        transmitter.transmit_with_progress.assert_called_once_with(source, sink, callback)
        sink.write.assert_not_called()

    def test_protocol_failure_does_not_fall_back(self):
        """协议失败直接报错，不回退到原始拷贝"""
        transmitter = MagicMock(spec=XmodemTransmitter)
        transmitter.transmit_with_progress.side_effect = ProtocolError("握手失败")
        sink = MagicMock()

        with pytest.raises(ProtocolError):
            TransferDispatcher(transmitter).transfer(
                TransferRequest(io.BytesIO(b"data"), sink, TransferMode.FRAMED)
            )

        sink.write.assert_not_called()

    def test_framed_mode_end_to_end(self):
        """分帧模式与模拟接收端联调"""
        receiver = XmodemReceiverSerial("fake://")
        recorder = EventRecorder()

        written = TransferDispatcher().transfer(
            TransferRequest(io.BytesIO(b"HELLO"), receiver, TransferMode.FRAMED),
            recorder,
        )

        assert written == 5
        assert receiver.payload().rstrip(b"\x1a") == b"HELLO"
        assert [e.size for e in recorder.events[2:]] == [5]
