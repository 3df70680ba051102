"""
串口写入工具
============

向串口设备写入字节流，默认使用XMODEM协议分帧，也支持原始字节写入。

主要功能：
- 串口参数配置（波特率、数据位、停止位、流控、超时）
- 文件或标准输入作为数据来源
- XMODEM / XMODEM-1K 发送与进度显示
- 原始模式直接拷贝

作者: lanford
版本: 1.0.0
"""

__version__ = "1.0.0"
__author__ = "lanford"
__email__ = ""
__description__ = "基于XMODEM协议的串口写入工具"

# 导出主要类
from .config.settings import LinkConfig, TransferConfig
from .transfer.writer import TtyWriter
from .core.serial_link import SerialLink

__all__ = [
    "LinkConfig",
    "TransferConfig",
    "TtyWriter",
    "SerialLink",
]
