#!/usr/bin/env python3
"""
串口写入工具 - 模块CLI入口
==========================

支持通过 python -m serial_tty_write 或 ttywrite 命令调用
"""

import sys
import argparse
import logging

from . import __version__
from .cli.parsers import (
    parse_baud_rate,
    parse_flow_control,
    parse_stop_bits,
    parse_timeout,
    parse_width,
)
from .cli.tty_write import TtyWriteCLI
from .config.constants import (
    DEFAULT_BAUDRATE,
    DEFAULT_CHAR_WIDTH,
    DEFAULT_FLOW_CONTROL,
    DEFAULT_STOP_BITS,
    DEFAULT_TIMEOUT,
    DEFAULT_XMODEM_RETRY,
    ExitCode,
)
from .core.serial_link import SerialLink
from .utils.logger import get_logger, setup_logger

logger = get_logger(__name__)

PROGRAM_NAME = "串口写入工具"


def create_parser():
    """创建命令行参数解析器"""
    parser = argparse.ArgumentParser(
        prog="ttywrite",
        description=f"{PROGRAM_NAME} v{__version__}：默认使用XMODEM协议向串口写入数据",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
使用示例：
  # 通过XMODEM发送文件
  ttywrite /dev/ttyUSB0 -i kernel.img

  # 原始模式，从标准输入读取
  echo hello | ttywrite /dev/ttyUSB0 --raw -b 9600
        """,
    )

    parser.add_argument(
        "--version", action="version", version=f"{PROGRAM_NAME} v{__version__}"
    )
    parser.add_argument(
        "tty_path", nargs="?", help="串口设备路径或pyserial URL（如 /dev/ttyUSB0, COM3, loop://）"
    )
    parser.add_argument("-i", dest="input", metavar="PATH", help="输入文件（默认读取标准输入）")
    parser.add_argument(
        "-b", "--baud", type=parse_baud_rate, default=DEFAULT_BAUDRATE,
        help=f"波特率（默认{DEFAULT_BAUDRATE}）",
    )
    parser.add_argument(
        "-t", "--timeout", type=parse_timeout, default=DEFAULT_TIMEOUT,
        help=f"超时时间，秒（默认{DEFAULT_TIMEOUT:g}）",
    )
    parser.add_argument(
        "-w", "--width", type=parse_width, default=DEFAULT_CHAR_WIDTH,
        help=f"数据位 5/6/7/8（默认{DEFAULT_CHAR_WIDTH}）",
    )
    parser.add_argument(
        "-f", "--flow-control", type=parse_flow_control, default=DEFAULT_FLOW_CONTROL,
        help="流控 none/software/hardware（默认none）",
    )
    parser.add_argument(
        "-s", "--stop-bits", type=parse_stop_bits, default=DEFAULT_STOP_BITS,
        help=f"停止位 1/2（默认{DEFAULT_STOP_BITS}）",
    )
    parser.add_argument("-r", "--raw", action="store_true", help="禁用XMODEM，直接写入原始字节")
    parser.add_argument("-k", "--xmodem-1k", action="store_true", help="使用1024字节数据包的XMODEM-1K")
    parser.add_argument(
        "--retry", type=int, default=DEFAULT_XMODEM_RETRY,
        help=f"XMODEM单包最大重传次数（默认{DEFAULT_XMODEM_RETRY}）",
    )
    parser.add_argument("-q", "--quiet", action="store_true", help="不显示传输进度")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="输出更多日志（-vv 输出调试日志）")
    parser.add_argument("--log-file", metavar="PATH", help="同时把日志写入文件")
    parser.add_argument("-l", "--list-ports", action="store_true", help="列出可用串口后退出")

    return parser


def _log_level(verbose: int) -> int:
    if verbose >= 2:
        return logging.DEBUG
    if verbose == 1:
        return logging.INFO
    return logging.WARNING


def main(argv=None):
    """主函数"""
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logger(level=_log_level(args.verbose), log_file=args.log_file)

    if args.list_ports:
        SerialLink.print_available_ports()
        sys.exit(ExitCode.SUCCESS)

    if not args.tty_path:
        parser.error("缺少串口设备路径 tty_path")

    if args.retry < 0:
        parser.error("--retry 不能为负数")

    try:
        exit_code = TtyWriteCLI.run(args)
    except KeyboardInterrupt:
        print("\n\n👋 用户中断程序，退出")
        sys.exit(ExitCode.INTERRUPTED)

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
