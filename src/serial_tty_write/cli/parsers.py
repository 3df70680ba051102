"""
命令行参数解析函数
==================

供 argparse 的 type= 使用，把字符串转换为经过校验的配置值。
"""

import argparse

from ..config.constants import (
    STANDARD_BAUDRATES,
    VALID_CHAR_WIDTHS,
    VALID_STOP_BITS,
    FlowControl,
)
from ..utils.logger import get_logger

logger = get_logger(__name__)


def _parse_int(value: str, what: str) -> int:
    try:
        return int(value.strip())
    except ValueError:
        raise argparse.ArgumentTypeError(f"无效的{what}: {value!r}")


def parse_baud_rate(value: str) -> int:
    """解析波特率，允许非标准值"""
    baud = _parse_int(value, "波特率")
    if baud <= 0:
        raise argparse.ArgumentTypeError(f"波特率必须大于0: {value!r}")
    if baud not in STANDARD_BAUDRATES:
        logger.debug(f"非标准波特率: {baud}")
    return baud


def parse_width(value: str) -> int:
    """解析数据位"""
    width = _parse_int(value, "数据位")
    if width not in VALID_CHAR_WIDTHS:
        choices = ", ".join(str(w) for w in VALID_CHAR_WIDTHS)
        raise argparse.ArgumentTypeError(f"数据位必须是 {choices} 之一: {value!r}")
    return width


def parse_stop_bits(value: str) -> int:
    """解析停止位"""
    stop_bits = _parse_int(value, "停止位")
    if stop_bits not in VALID_STOP_BITS:
        raise argparse.ArgumentTypeError(f"停止位必须是 1 或 2: {value!r}")
    return stop_bits


def parse_flow_control(value: str) -> FlowControl:
    """解析流控方式（不区分大小写）"""
    try:
        return FlowControl(value.strip().lower())
    except ValueError:
        choices = ", ".join(f.value for f in FlowControl)
        raise argparse.ArgumentTypeError(f"流控必须是 {choices} 之一: {value!r}")


def parse_timeout(value: str) -> float:
    """解析超时秒数"""
    try:
        timeout = float(value.strip())
    except ValueError:
        raise argparse.ArgumentTypeError(f"无效的超时时间: {value!r}")
    if timeout < 0:
        raise argparse.ArgumentTypeError(f"超时时间不能为负数: {value!r}")
    return timeout
