"""
配置管理
========

提供串口链路和传输相关的配置类。
"""

from dataclasses import dataclass
from typing import Any, Dict

from .constants import (
    DEFAULT_BAUDRATE,
    DEFAULT_TIMEOUT,
    DEFAULT_CHAR_WIDTH,
    DEFAULT_STOP_BITS,
    DEFAULT_FLOW_CONTROL,
    DEFAULT_XMODEM_RETRY,
    DEFAULT_PROTOCOL_TIMEOUT,
    VALID_CHAR_WIDTHS,
    VALID_STOP_BITS,
    BYTESIZE_MAP,
    STOPBITS_MAP,
    RAW_CHUNK_SIZE,
    XMODEM_MODE,
    XMODEM_PACKET_SIZES,
    FlowControl,
    TransferMode,
)


@dataclass(frozen=True)
class LinkConfig:
    """串口链路配置类，构造后不可修改"""

    baud_rate: int = DEFAULT_BAUDRATE  # 波特率
    char_width: int = DEFAULT_CHAR_WIDTH  # 数据位
    stop_bits: int = DEFAULT_STOP_BITS  # 停止位
    flow_control: FlowControl = DEFAULT_FLOW_CONTROL  # 流控方式
    timeout: float = DEFAULT_TIMEOUT  # 读写超时时间(秒)

    def __post_init__(self):
        """参数验证"""
        if self.char_width not in VALID_CHAR_WIDTHS:
            raise ValueError(f"数据位必须是 {VALID_CHAR_WIDTHS} 之一")
        if self.stop_bits not in VALID_STOP_BITS:
            raise ValueError(f"停止位必须是 {VALID_STOP_BITS} 之一")
        if not isinstance(self.flow_control, FlowControl):
            raise ValueError("flow_control必须是FlowControl枚举")

    @property
    def bytesize(self) -> int:
        """pyserial 数据位常量"""
        return BYTESIZE_MAP[self.char_width]

    @property
    def stopbits(self) -> float:
        """pyserial 停止位常量"""
        return STOPBITS_MAP[self.stop_bits]

    def apply_to(self, settings: Dict[str, Any]) -> Dict[str, Any]:
        """
        将配置写入从串口读取的设置字典

        波特率、数据位、停止位和流控被覆盖，其余设置保持不变。

        Args:
            settings: serial.Serial.get_settings() 返回的字典

        Returns:
            新的设置字典（不修改入参）
        """
        updated = dict(settings)
        updated.update(
            {
                "baudrate": self.baud_rate,
                "bytesize": self.bytesize,
                "stopbits": self.stopbits,
                "xonxoff": self.flow_control is FlowControl.SOFTWARE,
                "rtscts": self.flow_control is FlowControl.HARDWARE,
            }
        )
        return updated


@dataclass
class TransferConfig:
    """传输配置类"""

    mode: TransferMode = TransferMode.FRAMED  # 传输模式
    xmodem_mode: str = XMODEM_MODE  # xmodem / xmodem1k
    retry: int = DEFAULT_XMODEM_RETRY  # 协议内部重传上限
    protocol_timeout: float = DEFAULT_PROTOCOL_TIMEOUT  # 等待应答超时(秒)
    chunk_size: int = RAW_CHUNK_SIZE  # 原始模式读取块大小
    show_progress: bool = True  # 是否显示进度

    def __post_init__(self):
        """参数验证"""
        if self.xmodem_mode not in XMODEM_PACKET_SIZES:
            raise ValueError(f"不支持的XMODEM模式: {self.xmodem_mode}")
        if self.retry < 0:
            raise ValueError("retry不能为负数")
        if self.protocol_timeout <= 0:
            raise ValueError("protocol_timeout必须大于0")
        if self.chunk_size <= 0:
            raise ValueError("chunk_size必须大于0")

    @property
    def packet_size(self) -> int:
        """当前XMODEM模式下的数据包大小"""
        return XMODEM_PACKET_SIZES[self.xmodem_mode]
