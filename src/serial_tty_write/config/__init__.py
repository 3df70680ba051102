"""
配置模块
=======

包含系统常量定义和配置管理功能。
"""

from .constants import *
from .settings import *

__all__ = [
    # 常量
    "FlowControl",
    "TransferMode",
    "ExitCode",
    "DEFAULT_BAUDRATE",
    "DEFAULT_TIMEOUT",
    "DEFAULT_CHAR_WIDTH",
    "DEFAULT_STOP_BITS",
    "DEFAULT_FLOW_CONTROL",
    # 配置
    "LinkConfig",
    "TransferConfig",
]
