"""
传输模块
========

输入源选择、传输模式分发和整体写入流程。
"""

from .source import ByteSource, SourceKind, open_source
from .dispatcher import TransferDispatcher, TransferRequest, copy_stream
from .writer import TtyWriter

__all__ = [
    "ByteSource",
    "SourceKind",
    "open_source",
    "TransferDispatcher",
    "TransferRequest",
    "copy_stream",
    "TtyWriter",
]
