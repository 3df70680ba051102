"""
进度事件
========

XMODEM 传输过程中产生的生命周期事件。
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable


class ProgressKind(Enum):
    """进度事件类型"""

    WAITING = "waiting"  # 等待接收端发起握手
    STARTED = "started"  # 握手完成，开始发送数据
    PACKET = "packet"  # 一个数据包已被确认


@dataclass(frozen=True)
class ProgressEvent:
    """进度事件，PACKET 事件的 size 为该包的有效载荷字节数"""

    kind: ProgressKind
    size: int = 0

    @classmethod
    def waiting(cls) -> "ProgressEvent":
        return cls(ProgressKind.WAITING)

    @classmethod
    def started(cls) -> "ProgressEvent":
        return cls(ProgressKind.STARTED)

    @classmethod
    def packet(cls, size: int) -> "ProgressEvent":
        return cls(ProgressKind.PACKET, size)


ProgressCallback = Callable[[ProgressEvent], None]
