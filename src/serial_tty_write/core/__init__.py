"""
核心模块
========

包含串口链路配置、XMODEM 协议适配、进度事件和异常定义。
"""

from .errors import (
    TtyWriteError,
    ConfigurationError,
    DeviceOpenError,
    DeviceUnreachableError,
    InvalidTimeoutError,
    InvalidBaudRateError,
    UnsupportedSettingsError,
    InputSourceError,
    TransferError,
    SourceReadError,
    SinkWriteError,
    ProtocolError,
)
from .events import ProgressEvent, ProgressKind
from .serial_link import SerialLink
from .xmodem_protocol import XmodemTransmitter

__all__ = [
    "TtyWriteError",
    "ConfigurationError",
    "DeviceOpenError",
    "DeviceUnreachableError",
    "InvalidTimeoutError",
    "InvalidBaudRateError",
    "UnsupportedSettingsError",
    "InputSourceError",
    "TransferError",
    "SourceReadError",
    "SinkWriteError",
    "ProtocolError",
    "ProgressEvent",
    "ProgressKind",
    "SerialLink",
    "XmodemTransmitter",
]
