"""
系统常量定义
============

定义串口写入工具使用的默认值和枚举类型。
"""

from enum import Enum, IntEnum
from typing import Final, Dict, Tuple

import serial


class FlowControl(Enum):
    """流控方式枚举"""

    NONE = "none"  # 无流控
    SOFTWARE = "software"  # XON/XOFF 软件流控
    HARDWARE = "hardware"  # RTS/CTS 硬件流控


class TransferMode(Enum):
    """传输模式枚举"""

    RAW = "raw"  # 原始字节拷贝
    FRAMED = "framed"  # XMODEM 协议分帧


class ExitCode(IntEnum):
    """进程退出码"""

    SUCCESS = 0
    TRANSFER_FAILED = 1
    USAGE = 2  # argparse 参数错误
    DEVICE_ERROR = 3
    CONFIG_ERROR = 4
    INPUT_ERROR = 5
    INTERRUPTED = 130


# 串口配置默认值
DEFAULT_BAUDRATE: Final[int] = 115200  # 默认波特率
DEFAULT_TIMEOUT: Final[float] = 10.0  # 默认超时时间(秒)
DEFAULT_CHAR_WIDTH: Final[int] = 8  # 默认数据位
DEFAULT_STOP_BITS: Final[int] = 1  # 默认停止位
DEFAULT_FLOW_CONTROL: Final[FlowControl] = FlowControl.NONE  # 默认无流控

# 合法取值
VALID_CHAR_WIDTHS: Final[Tuple[int, ...]] = (5, 6, 7, 8)
VALID_STOP_BITS: Final[Tuple[int, ...]] = (1, 2)
STANDARD_BAUDRATES: Final[Tuple[int, ...]] = tuple(serial.Serial.BAUDRATES)

# 数据位/停止位 -> pyserial 常量
BYTESIZE_MAP: Final[Dict[int, int]] = {
    5: serial.FIVEBITS,
    6: serial.SIXBITS,
    7: serial.SEVENBITS,
    8: serial.EIGHTBITS,
}
STOPBITS_MAP: Final[Dict[int, float]] = {
    1: serial.STOPBITS_ONE,
    2: serial.STOPBITS_TWO,
}

# 传输配置默认值
RAW_CHUNK_SIZE: Final[int] = 8 * 1024  # 原始模式单次读取块大小
XMODEM_MODE: Final[str] = "xmodem"  # 128 字节数据包
XMODEM_1K_MODE: Final[str] = "xmodem1k"  # 1024 字节数据包
XMODEM_PACKET_SIZES: Final[Dict[str, int]] = {
    XMODEM_MODE: 128,
    XMODEM_1K_MODE: 1024,
}
DEFAULT_XMODEM_RETRY: Final[int] = 16  # 协议内部重传上限
DEFAULT_PROTOCOL_TIMEOUT: Final[float] = 60.0  # 等待 ACK 的超时时间(秒)
