"""
命令行接口模块
==============

提供串口写入的命令行接口和参数解析函数。
"""

from .tty_write import TtyWriteCLI

__all__ = [
    "TtyWriteCLI"
]
