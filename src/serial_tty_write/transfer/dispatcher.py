"""
传输模式分发
============

根据传输模式把输入源的数据写入已配置的串口：
原始模式直接拷贝字节，分帧模式交给 XMODEM 发送器。
两种模式都返回写入的字节数；模式在一次调用内固定，协议失败不会退回原始模式。
"""

from dataclasses import dataclass
from typing import Any, BinaryIO, Optional

import serial

from ..config.constants import RAW_CHUNK_SIZE, TransferMode
from ..core.errors import SinkWriteError, SourceReadError
from ..core.events import ProgressCallback
from ..core.xmodem_protocol import XmodemTransmitter
from ..utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class TransferRequest:
    """一次传输请求，由分发器消费一次"""

    source: BinaryIO
    sink: Any  # 已配置的串口，需提供 write()
    mode: TransferMode


def copy_stream(source: BinaryIO, sink, chunk_size: int = RAW_CHUNK_SIZE) -> int:
    """
    把输入源全部拷贝到串口

    输入源提供 read1() 时优先使用，管道中已到达的数据立即写出。

    Args:
        source: 可读字节流
        sink: 可写字节流
        chunk_size: 单次读取大小

    Returns:
        写入的字节数

    Raises:
        SourceReadError: 读取失败
        SinkWriteError: 写入失败，bytes_written 为失败前已写入的字节数
    """
    reader = getattr(source, "read1", None) or source.read
    written = 0
    while True:
        try:
            chunk = reader(chunk_size)
        except (OSError, ValueError) as e:
            raise SourceReadError(f"读取输入失败: {e}", written) from e
        if not chunk:
            break

        view = memoryview(chunk)
        while view:
            try:
                n = sink.write(view)
            except (serial.SerialException, OSError) as e:
                raise SinkWriteError(f"写入串口失败: {e}", written) from e
            if n is None:
                n = len(view)  # 部分流对象 write() 不返回长度
            if n <= 0:
                raise SinkWriteError("写入串口失败: 写入了0字节", written)
            written += n
            view = view[n:]

    try:
        if hasattr(sink, "flush"):
            sink.flush()
    except (serial.SerialException, OSError) as e:
        raise SinkWriteError(f"刷新串口缓冲失败: {e}", written) from e
    return written


class TransferDispatcher:
    """传输模式分发器"""

    def __init__(
        self,
        transmitter: Optional[XmodemTransmitter] = None,
        chunk_size: int = RAW_CHUNK_SIZE,
    ):
        self.transmitter = transmitter or XmodemTransmitter()
        self.chunk_size = chunk_size

    def transfer(
        self,
        request: TransferRequest,
        on_event: Optional[ProgressCallback] = None,
    ) -> int:
        """
        执行一次传输

        Args:
            request: 传输请求
            on_event: 进度回调，仅在分帧模式下被调用

        Returns:
            写入的字节数
        """
        if request.mode is TransferMode.RAW:
            logger.info("原始模式：直接拷贝字节")
            written = copy_stream(request.source, request.sink, self.chunk_size)
        else:
            logger.info("分帧模式：使用XMODEM协议")
            written = self.transmitter.transmit_with_progress(
                request.source, request.sink, on_event
            )

        logger.info(f"传输结束，共写入 {written} 字节")
        return written
