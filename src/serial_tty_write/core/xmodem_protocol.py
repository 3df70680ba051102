"""
XMODEM 协议适配
===============

把 xmodem 库的 XMODEM.send() 包装成带进度事件的发送接口：

    transmit_with_progress(source, sink, on_event) -> 已确认的有效载荷字节数

事件顺序：WAITING（握手前）→ STARTED（握手完成，首次读取输入）→
每个被 ACK 的数据包一个 PACKET(该包有效载荷字节数)。
"""

from typing import BinaryIO, Optional

import serial
import xmodem

from ..config.constants import (
    DEFAULT_PROTOCOL_TIMEOUT,
    DEFAULT_XMODEM_RETRY,
    XMODEM_MODE,
    XMODEM_PACKET_SIZES,
)
from ..utils.logger import get_logger
from .errors import ProtocolError, SinkWriteError, SourceReadError
from .events import ProgressCallback, ProgressEvent

logger = get_logger(__name__)


class _TrackedSource:
    """记录每次读取长度的输入源包装，首次读取即表示握手已完成"""

    def __init__(self, source: BinaryIO, on_event: ProgressCallback):
        self._source = source
        self._on_event = on_event
        self.started = False
        self.last_chunk = 0  # 最近一次读取的字节数，即当前数据包的有效载荷
        self.total_read = 0

    def read(self, size: int) -> bytes:
        if not self.started:
            self.started = True
            self._on_event(ProgressEvent.started())
        try:
            data = self._source.read(size)
        except (OSError, ValueError) as e:
            raise SourceReadError(f"读取输入失败: {e}") from e
        data = data or b""
        self.last_chunk = len(data)
        self.total_read += len(data)
        return data


class XmodemTransmitter:
    """XMODEM 发送器"""

    def __init__(
        self,
        mode: str = XMODEM_MODE,
        retry: int = DEFAULT_XMODEM_RETRY,
        timeout: float = DEFAULT_PROTOCOL_TIMEOUT,
    ):
        """
        初始化发送器

        Args:
            mode: xmodem(128字节包) 或 xmodem1k(1024字节包)
            retry: 单个数据包的最大重传次数
            timeout: 等待应答的超时时间(秒)
        """
        if mode not in XMODEM_PACKET_SIZES:
            raise ValueError(f"不支持的XMODEM模式: {mode}")
        self.mode = mode
        self.retry = retry
        self.timeout = timeout

    @property
    def packet_size(self) -> int:
        return XMODEM_PACKET_SIZES[self.mode]

    def transmit_with_progress(
        self,
        source: BinaryIO,
        sink,
        on_event: Optional[ProgressCallback] = None,
    ) -> int:
        """
        通过 XMODEM 发送输入源的全部数据

        Args:
            source: 可读字节流
            sink: 已配置的串口（需提供 read/write）
            on_event: 进度事件回调

        Returns:
            接收端确认的有效载荷字节数

        Raises:
            SourceReadError: 读取输入失败
            SinkWriteError: 串口读写失败
            ProtocolError: 握手失败、重传超限或被接收端取消
        """
        emit = on_event or (lambda event: None)
        tracked = _TrackedSource(source, emit)
        state = {"acked": 0, "acked_bytes": 0}

        def getc(size, timeout=None):
            # xmodem 等待 ACK 时传入协议超时，握手阶段不传，沿用串口超时
            saved = getattr(sink, "timeout", None)
            override = timeout is not None and timeout != saved
            try:
                if override:
                    sink.timeout = timeout
                try:
                    return sink.read(size) or None
                finally:
                    if override:
                        sink.timeout = saved
            except (serial.SerialException, OSError, ValueError) as e:
                raise SinkWriteError(
                    f"读取串口应答失败: {e}", state["acked_bytes"]
                ) from e

        def putc(data, timeout=1):
            try:
                return sink.write(data)
            except (serial.SerialException, OSError) as e:
                raise SinkWriteError(
                    f"写入串口失败: {e}", state["acked_bytes"]
                ) from e

        def callback(total_packets, success_count, error_count):
            if error_count:
                logger.debug(f"数据包 {total_packets} 重传，第 {error_count} 次")
            if success_count > state["acked"]:
                state["acked"] = success_count
                state["acked_bytes"] += tracked.last_chunk
                emit(ProgressEvent.packet(tracked.last_chunk))

        modem = xmodem.XMODEM(getc, putc, mode=self.mode)
        logger.info(f"等待接收端握手 (模式={self.mode}, 重试={self.retry})")
        emit(ProgressEvent.waiting())

        ok = modem.send(
            tracked,
            retry=self.retry,
            timeout=self.timeout,
            quiet=True,
            callback=callback,
        )
        if not ok:
            if not tracked.started:
                reason = "握手失败或被接收端取消"
            else:
                reason = f"第 {state['acked'] + 1} 个数据包或结束符未被确认"
            raise ProtocolError(reason, state["acked_bytes"])

        logger.info(f"XMODEM 发送完成，共 {state['acked_bytes']} 字节")
        return state["acked_bytes"]
