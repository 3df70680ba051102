"""
串口写入流程
============

一次调用的完整流程：打开输入源 → 打开并配置串口 → 按模式传输 → 关闭资源。

输入源先于串口打开，输入文件无效时不会改动任何串口参数。
"""

from pathlib import Path
from typing import BinaryIO, Optional, Union

from ..config.constants import TransferMode
from ..config.settings import LinkConfig, TransferConfig
from ..core.events import ProgressCallback
from ..core.serial_link import SerialFactory, SerialLink
from ..core.xmodem_protocol import XmodemTransmitter
from ..utils.logger import get_logger
from ..utils.progress import ProgressReporter
from .dispatcher import TransferDispatcher, TransferRequest
from .source import open_source

logger = get_logger(__name__)


class TtyWriter:
    """串口写入器"""

    def __init__(
        self,
        tty_path: str,
        link_config: Optional[LinkConfig] = None,
        transfer_config: Optional[TransferConfig] = None,
        serial_factory: Optional[SerialFactory] = None,
        on_event: Optional[ProgressCallback] = None,
    ):
        """
        初始化串口写入器

        Args:
            tty_path: 设备路径或 pyserial URL
            link_config: 链路配置（可选）
            transfer_config: 传输配置（可选）
            serial_factory: 串口对象工厂（可选，测试时注入）
            on_event: 进度回调（可选，默认按配置决定是否打印进度）
        """
        self.tty_path = tty_path
        self.link_config = link_config or LinkConfig()
        self.transfer_config = transfer_config or TransferConfig()
        self.serial_factory = serial_factory

        if on_event is None and self.transfer_config.show_progress:
            on_event = ProgressReporter()
        self.on_event = on_event

        self.dispatcher = TransferDispatcher(
            XmodemTransmitter(
                mode=self.transfer_config.xmodem_mode,
                retry=self.transfer_config.retry,
                timeout=self.transfer_config.protocol_timeout,
            ),
            chunk_size=self.transfer_config.chunk_size,
        )

    def write(
        self,
        input_path: Optional[Union[str, Path]] = None,
        stdin: Optional[BinaryIO] = None,
    ) -> int:
        """
        把输入写入串口

        Args:
            input_path: 输入文件路径，None 表示标准输入
            stdin: 替代 sys.stdin.buffer 的输入流（可选）

        Returns:
            写入的字节数

        Raises:
            TtyWriteError: 任一阶段失败
        """
        with open_source(input_path, stdin=stdin) as source:
            with SerialLink(self.tty_path, self.serial_factory) as link:
                port = link.open_and_configure(self.link_config)
                request = TransferRequest(
                    source=source,
                    sink=port,
                    mode=self.transfer_config.mode,
                )
                logger.info(
                    f"开始写入: {source.name} -> {self.tty_path} "
                    f"({'原始' if request.mode is TransferMode.RAW else 'XMODEM'})"
                )
                return self.dispatcher.transfer(request, self.on_event)
