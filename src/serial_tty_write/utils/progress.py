"""
进度显示模块
============

将 XMODEM 传输的进度事件渲染为状态行。
"""

import sys
import time
from typing import Optional, TextIO

from ..core.events import ProgressEvent, ProgressKind
from .logger import get_logger

logger = get_logger(__name__)


class SpeedMeter:
    """实时传输速率计算器"""

    def __init__(self, alpha: float = 0.3):
        """
        初始化速率计算器

        Args:
            alpha: EMA 平滑系数 (0.0 - 1.0)，值越大越接近瞬时速度
        """
        self.last_bytes = 0
        self.last_ts = time.time()
        self.ema_rate = 0.0  # 指数移动平均速率 (bytes/s)
        self.alpha = alpha

    def reset(self) -> None:
        """从当前时刻重新开始计速"""
        self.last_bytes = 0
        self.last_ts = time.time()
        self.ema_rate = 0.0

    def update(self, current_bytes: int) -> float:
        """
        更新并返回实时传输速率 (KB/s)

        Args:
            current_bytes: 当前已传输的总字节数

        Returns:
            float: 实时传输速率 (KB/s)
        """
        now = time.time()
        interval = now - self.last_ts

        if interval > 0.05:  # 至少等待50ms更新，避免频繁计算和抖动
            instant_rate = (current_bytes - self.last_bytes) / interval  # bytes/s
            self.ema_rate = self.alpha * instant_rate + (1 - self.alpha) * self.ema_rate
            self.last_bytes = current_bytes
            self.last_ts = now

        return self.ema_rate / 1024  # 返回KB/s


class ProgressReporter:
    """
    进度事件渲染器

    在协议的执行上下文中被同步调用，只做格式化和打印。
    输出流出错（例如已关闭）时只记录日志，不影响传输。
    """

    def __init__(self, stream: Optional[TextIO] = None, show_rate: bool = True):
        """
        初始化进度渲染器

        Args:
            stream: 输出流，默认 sys.stdout
            show_rate: 是否显示速率
        """
        self.stream = stream
        self.show_rate = show_rate
        self.total_bytes = 0  # 已确认的累计字节数
        self.speed_meter = SpeedMeter()

    def __call__(self, event: ProgressEvent) -> None:
        self.on_event(event)

    def on_event(self, event: ProgressEvent) -> None:
        """处理一个进度事件"""
        if event.kind is ProgressKind.WAITING:
            self._emit("> 等待接收端就绪...")
        elif event.kind is ProgressKind.STARTED:
            self.total_bytes = 0
            self.speed_meter.reset()
            self._emit("> 开始传输。")
        elif event.kind is ProgressKind.PACKET:
            self.total_bytes += event.size
            line = f"> 已发送 {event.size} 字节 (累计 {self.total_bytes} 字节)"
            if self.show_rate:
                rate = self.speed_meter.update(self.total_bytes)
                line += f" [{rate:6.2f}k/s]"
            self._emit(line)

    def _emit(self, line: str) -> None:
        stream = self.stream or sys.stdout
        try:
            print(line, file=stream, flush=True)
        except (OSError, ValueError) as e:
            logger.debug(f"进度输出失败，已忽略: {e}")
