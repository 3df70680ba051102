"""
测试公共设施
============

提供不依赖硬件的内存串口和模拟的 XMODEM 接收端。
"""

import time
from collections import deque
from typing import Iterable, Optional

import pytest
import serial

SOH = b"\x01"
STX = b"\x02"
EOT = b"\x04"
ACK = b"\x06"
NAK = b"\x15"
CAN = b"\x18"
CRC = b"C"


class BufferedSerial(serial.SerialBase):
    """
    内存串口

    记录全部写入的数据，关闭后仍可检查。可以让驱动拒绝零超时、指定的波特率或数据位，
    模拟真实驱动对参数的限制。
    """

    def __init__(
        self,
        *args,
        reject_zero_timeout: bool = False,
        reject_bytesize: Optional[int] = None,
        reject_baudrate: Optional[int] = None,
        fail_write_after: Optional[int] = None,
        **kwargs,
    ):
        self.written = bytearray()
        self.reject_zero_timeout = reject_zero_timeout
        self.reject_bytesize = reject_bytesize
        self.reject_baudrate = reject_baudrate
        self.fail_write_after = fail_write_after
        self.reconfigure_count = 0
        super().__init__(*args, **kwargs)

    def open(self):
        self.is_open = True

    def close(self):
        self.is_open = False

    def _reconfigure_port(self, force_update=False):
        self.reconfigure_count += 1
        if self.reject_zero_timeout and self._timeout == 0:
            raise ValueError("driver does not support zero timeout")
        if self.reject_bytesize is not None and self._bytesize == self.reject_bytesize:
            raise serial.SerialException("Could not configure port: bytesize")
        if self.reject_baudrate is not None and self._baudrate == self.reject_baudrate:
            raise ValueError("speed not supported by hardware")

    def write(self, data):
        data = bytes(data)
        if self.fail_write_after is not None:
            room = self.fail_write_after - len(self.written)
            if room <= 0:
                raise serial.SerialException("write failed: device disconnected")
            data = data[:room]
        self.written += data
        return len(data)

    def read(self, size=1):
        return b""


class XmodemReceiverSerial(BufferedSerial):
    """
    模拟的 XMODEM 接收端

    握手时回复 handshake（NAK 或 'C'），之后对每个数据包回复 ACK，
    nak_first 指定前几次数据包写入回复 NAK 以触发重传。
    never_ack 为真时握手后不再应答，每次读取像真实串口一样等待 timeout 秒。
    read_timeouts 记录每次读取时生效的超时。
    """

    def __init__(
        self,
        *args,
        handshake: bytes = NAK,
        nak_first: int = 0,
        silent: bool = False,
        never_ack: bool = False,
        **kwargs,
    ):
        self.handshake = handshake
        self.nak_remaining = nak_first
        self.silent = silent
        self.never_ack = never_ack
        self.read_timeouts = []
        self.packets = []
        self.eot_received = False
        self._replies = deque()
        super().__init__(*args, **kwargs)
        if not silent:
            self._replies.append(handshake)

    def write(self, data):
        n = super().write(data)
        data = bytes(data)
        if data == EOT:
            self.eot_received = True
            self._replies.append(ACK)
        elif data[:1] in (SOH, STX):
            self.packets.append(data)
            if self.never_ack:
                return n
            if self.nak_remaining > 0:
                self.nak_remaining -= 1
                self._replies.append(NAK)
            else:
                self._replies.append(ACK)
        return n

    def read(self, size=1):
        self.read_timeouts.append(self.timeout)
        if self._replies:
            return self._replies.popleft()
        if self.never_ack and self.timeout:
            time.sleep(self.timeout)
        return b""

    def payload(self) -> bytes:
        """按包序号去重后拼接的数据段（含填充）"""
        checksum_len = 2 if self.handshake == CRC else 1
        seen = {}
        for packet in self.packets:
            seq = packet[1]
            seen[seq] = packet[3:len(packet) - checksum_len]
        return b"".join(seen[seq] for seq in sorted(seen))


@pytest.fixture
def buffered_serial():
    """返回工厂和最近创建的内存串口"""
    created = []

    def factory(url, **kwargs):
        port = BufferedSerial(url, **kwargs)
        created.append(port)
        return port

    factory.created = created
    return factory


def receiver_factory(**options):
    """创建返回 XmodemReceiverSerial 的串口工厂"""
    created = []

    def factory(url):
        port = XmodemReceiverSerial(url, **options)
        created.append(port)
        return port

    factory.created = created
    return factory


class EventRecorder:
    """记录进度事件"""

    def __init__(self):
        self.events = []

    def __call__(self, event):
        self.events.append(event)

    @property
    def kinds(self) -> Iterable:
        return [e.kind for e in self.events]
