"""
串口写入命令行接口
==================

把解析后的命令行参数转换为配置，执行写入并输出结果。
"""

import argparse
import sys
from typing import BinaryIO, Optional

from ..config.constants import ExitCode, TransferMode, XMODEM_1K_MODE, XMODEM_MODE
from ..config.settings import LinkConfig, TransferConfig
from ..core.errors import TtyWriteError
from ..core.serial_link import SerialFactory
from ..transfer.writer import TtyWriter
from ..utils.logger import get_logger

logger = get_logger(__name__)


class TtyWriteCLI:
    """串口写入命令行接口"""

    @staticmethod
    def build_link_config(args: argparse.Namespace) -> LinkConfig:
        """根据参数创建链路配置"""
        return LinkConfig(
            baud_rate=args.baud,
            char_width=args.width,
            stop_bits=args.stop_bits,
            flow_control=args.flow_control,
            timeout=args.timeout,
        )

    @staticmethod
    def build_transfer_config(args: argparse.Namespace) -> TransferConfig:
        """根据参数创建传输配置"""
        return TransferConfig(
            mode=TransferMode.RAW if args.raw else TransferMode.FRAMED,
            xmodem_mode=XMODEM_1K_MODE if args.xmodem_1k else XMODEM_MODE,
            retry=args.retry,
            show_progress=not args.quiet,
        )

    @staticmethod
    def run(
        args: argparse.Namespace,
        serial_factory: Optional[SerialFactory] = None,
        stdin: Optional[BinaryIO] = None,
    ) -> int:
        """
        执行一次写入

        Args:
            args: 解析后的命令行参数
            serial_factory: 串口对象工厂（可选）
            stdin: 替代标准输入的流（可选）

        Returns:
            进程退出码
        """
        try:
            writer = TtyWriter(
                args.tty_path,
                TtyWriteCLI.build_link_config(args),
                TtyWriteCLI.build_transfer_config(args),
                serial_factory=serial_factory,
            )
            written = writer.write(args.input, stdin=stdin)
        except TtyWriteError as e:
            logger.error(f"{e.stage}失败: {e}")
            print(f"💥 {e.stage}失败: {e}", file=sys.stderr)
            bytes_written = getattr(e, "bytes_written", 0)
            if bytes_written:
                print(f"> 失败前已写入 {bytes_written} 字节", file=sys.stderr)
            return int(e.exit_code)

        print(f"> 共写入 {written} 字节")
        return int(ExitCode.SUCCESS)
