#!/usr/bin/env python3
"""
配置类测试
==========

这个文件测试 serial_tty_write.config.settings 模块中的配置类。

测试内容包括：
- LinkConfig类的默认值、校验和设置字典转换
- TransferConfig类的参数验证
"""

import dataclasses
import sys
from pathlib import Path

import pytest
import serial

# 添加项目根目录到Python路径
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from serial_tty_write.config.constants import FlowControl, TransferMode
from serial_tty_write.config.settings import LinkConfig, TransferConfig


class TestLinkConfig:
    """
    测试LinkConfig配置类

    LinkConfig描述一次调用的串口线路参数，构造后不可修改
    """

    def test_default_values(self):
        """测试默认值：115200、8数据位、1停止位、无流控、10秒超时"""
        config = LinkConfig()

        assert config.baud_rate == 115200
        assert config.char_width == 8
        assert config.stop_bits == 1
        assert config.flow_control is FlowControl.NONE
        assert config.timeout == 10.0

    def test_pyserial_constants(self):
        """测试数据位和停止位到pyserial常量的映射"""
        config = LinkConfig(char_width=7, stop_bits=2)

        assert config.bytesize == serial.SEVENBITS
        assert config.stopbits == serial.STOPBITS_TWO

    @pytest.mark.parametrize("width", [4, 9, 0])
    def test_invalid_width(self, width):
        """测试非法数据位"""
        with pytest.raises(ValueError, match="数据位"):
            LinkConfig(char_width=width)

    def test_invalid_stop_bits(self):
        """测试非法停止位"""
        with pytest.raises(ValueError, match="停止位"):
            LinkConfig(stop_bits=3)

    def test_invalid_flow_control(self):
        """测试流控必须是枚举值"""
        with pytest.raises(ValueError):
            LinkConfig(flow_control="hardware")

    def test_frozen(self):
        """测试配置构造后不可修改"""
        config = LinkConfig()

        with pytest.raises(dataclasses.FrozenInstanceError):
            config.baud_rate = 9600

    def test_apply_to_overrides_line_settings(self):
        """
        测试apply_to覆盖线路参数

        波特率、数据位、停止位和流控被覆盖，其余设置保持原值
        """
        original = {
            "baudrate": 9600,
            "bytesize": serial.EIGHTBITS,
            "parity": serial.PARITY_EVEN,
            "stopbits": serial.STOPBITS_ONE,
            "xonxoff": False,
            "rtscts": False,
            "dsrdtr": False,
            "timeout": 3.0,
        }
        config = LinkConfig(
            baud_rate=57600,
            char_width=6,
            stop_bits=2,
            flow_control=FlowControl.HARDWARE,
        )

        updated = config.apply_to(original)

        assert updated["baudrate"] == 57600
        assert updated["bytesize"] == serial.SIXBITS
        assert updated["stopbits"] == serial.STOPBITS_TWO
        assert updated["rtscts"] is True
        assert updated["xonxoff"] is False
        # 未涉及的设置保持不变
        assert updated["parity"] == serial.PARITY_EVEN
        assert updated["timeout"] == 3.0
        # 入参未被修改
        assert original["baudrate"] == 9600

    def test_apply_to_software_flow_control(self):
        """测试软件流控映射到xonxoff"""
        updated = LinkConfig(flow_control=FlowControl.SOFTWARE).apply_to({})

        assert updated["xonxoff"] is True
        assert updated["rtscts"] is False


class TestTransferConfig:
    """测试TransferConfig配置类"""

    def test_default_values(self):
        """测试默认值"""
        config = TransferConfig()

        assert config.mode is TransferMode.FRAMED
        assert config.xmodem_mode == "xmodem"
        assert config.packet_size == 128
        assert config.retry == 16
        assert config.show_progress is True

    def test_xmodem_1k_packet_size(self):
        """测试XMODEM-1K的数据包大小"""
        assert TransferConfig(xmodem_mode="xmodem1k").packet_size == 1024

    def test_invalid_xmodem_mode(self):
        """测试不支持的协议模式"""
        with pytest.raises(ValueError, match="XMODEM"):
            TransferConfig(xmodem_mode="ymodem")

    def test_negative_retry(self):
        """测试重试次数不能为负"""
        with pytest.raises(ValueError, match="retry"):
            TransferConfig(retry=-1)

    def test_invalid_chunk_size(self):
        """测试块大小必须大于0"""
        with pytest.raises(ValueError, match="chunk_size"):
            TransferConfig(chunk_size=0)
