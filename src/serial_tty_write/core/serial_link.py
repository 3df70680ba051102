"""
串口链路模块
============

负责打开串口设备并按 LinkConfig 配置线路参数。

配置顺序固定为：先设置超时，再读取当前设置、覆盖波特率/数据位/停止位/流控，
最后整体写回。写回失败时恢复读取到的原设置，调用方看到的结果要么是全部生效，
要么是配置失败。
"""

from typing import Any, Callable, Dict, List, Optional

import serial
from serial.tools import list_ports

from ..config.constants import STANDARD_BAUDRATES
from ..config.settings import LinkConfig
from ..utils.logger import get_logger
from .errors import (
    DeviceOpenError,
    DeviceUnreachableError,
    InvalidBaudRateError,
    InvalidTimeoutError,
    UnsupportedSettingsError,
)

logger = get_logger(__name__)

SerialFactory = Callable[..., serial.SerialBase]


class SerialLink:
    """串口链路管理器"""

    def __init__(self, tty_path: str, serial_factory: Optional[SerialFactory] = None):
        """
        初始化串口链路

        Args:
            tty_path: 设备路径或 pyserial URL（如 /dev/ttyUSB0、loop://）
            serial_factory: 创建串口对象的工厂，默认 serial.serial_for_url
        """
        self.tty_path = tty_path
        self._factory = serial_factory or serial.serial_for_url
        self._port: Optional[serial.SerialBase] = None

    @property
    def port(self) -> Optional[serial.SerialBase]:
        """获取串口对象"""
        return self._port

    @property
    def is_open(self) -> bool:
        """检查串口是否已打开"""
        return self._port is not None and self._port.is_open

    def open(self) -> serial.SerialBase:
        """
        打开串口设备

        Returns:
            已打开但尚未配置的串口对象

        Raises:
            DeviceOpenError: 路径无效或设备无法打开
        """
        if self.is_open:
            logger.warning(f"串口 {self.tty_path} 已经打开")
            return self._port

        try:
            self._port = self._factory(self.tty_path)
        except (serial.SerialException, OSError, ValueError) as e:
            self._port = None
            raise DeviceOpenError(f"无法打开串口 {self.tty_path}: {e}") from e

        logger.info(f"成功打开串口 {self.tty_path}")
        return self._port

    def configure(self, config: LinkConfig) -> serial.SerialBase:
        """
        按配置设置线路参数

        Args:
            config: 链路配置

        Returns:
            已配置的串口对象

        Raises:
            InvalidTimeoutError: 驱动拒绝超时值
            InvalidBaudRateError: 驱动拒绝波特率
            UnsupportedSettingsError: 驱动拒绝其余参数组合
            DeviceUnreachableError: 读写设置时设备I/O失败
        """
        port = self._require_open()

        # 1. 超时优先，避免硬件故障时后续操作永久阻塞
        try:
            port.timeout = config.timeout
            port.write_timeout = config.timeout
        except ValueError as e:
            raise InvalidTimeoutError(f"无效的超时时间 {config.timeout}: {e}") from e
        except serial.SerialException as e:
            raise DeviceUnreachableError(f"设置超时失败: {e}") from e

        # 2. 读取当前设置
        try:
            original = port.get_settings()
        except (serial.SerialException, OSError) as e:
            raise DeviceUnreachableError(f"读取串口设置失败: {e}") from e

        # 3. 波特率单独写入，驱动拒绝时即为无效波特率
        if config.baud_rate not in STANDARD_BAUDRATES:
            logger.debug(f"使用非标准波特率: {config.baud_rate}")
        try:
            port.apply_settings({"baudrate": config.baud_rate})
        except (serial.SerialException, ValueError) as e:
            self._rollback(port, original)
            raise InvalidBaudRateError(f"无效的波特率 {config.baud_rate}: {e}") from e

        # 4. 覆盖其余参数后整体写回
        try:
            port.apply_settings(config.apply_to(original))
        except ValueError as e:
            self._rollback(port, original)
            raise UnsupportedSettingsError(f"串口不支持该设置: {e}") from e
        except serial.SerialException as e:
            self._rollback(port, original)
            raise UnsupportedSettingsError(f"串口拒绝设置: {e}") from e

        logger.info(
            f"串口 {self.tty_path} 已配置: {config.baud_rate} "
            f"{config.char_width}N{config.stop_bits} 流控={config.flow_control.value} "
            f"超时={config.timeout}s"
        )
        return port

    def open_and_configure(self, config: LinkConfig) -> serial.SerialBase:
        """打开设备并配置，配置失败时关闭设备"""
        self.open()
        try:
            return self.configure(config)
        except Exception:
            self.close()
            raise

    def close(self) -> None:
        """关闭串口连接"""
        try:
            if self._port is not None and self._port.is_open:
                self._port.close()
                logger.info(f"已关闭串口 {self.tty_path}")
        except (serial.SerialException, OSError) as e:
            logger.error(f"关闭串口失败: {e}")
        finally:
            self._port = None

    def _require_open(self) -> serial.SerialBase:
        if not self.is_open:
            raise DeviceUnreachableError(f"串口 {self.tty_path} 未打开")
        return self._port

    @staticmethod
    def _rollback(port: serial.SerialBase, original: Dict[str, Any]) -> None:
        """恢复写回前的设置"""
        try:
            # 逆序恢复：写回失败的那一项最先被还原
            for key, value in reversed(list(original.items())):
                port.apply_settings({key: value})
            logger.debug("已恢复原串口设置")
        except (serial.SerialException, OSError, ValueError) as e:
            logger.error(f"恢复原串口设置失败: {e}")

    @staticmethod
    def list_available_ports() -> List[Dict[str, str]]:
        """
        获取系统可用的串口列表

        Returns:
            串口信息列表，每个元素包含device、description等字段
        """
        ports = []
        for port_info in list_ports.comports():
            ports.append({
                'device': port_info.device,
                'description': port_info.description or '未知设备',
                'hwid': port_info.hwid or '未知硬件ID'
            })
        return ports

    @staticmethod
    def print_available_ports() -> None:
        """打印系统可用的串口信息"""
        ports = SerialLink.list_available_ports()

        if not ports:
            print("没有找到可用的串口。")
            return

        print("可用的串口：")
        for port in ports:
            print(f"  {port['device']} - {port['description']}")

    def __enter__(self):
        """支持with语句"""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """支持with语句"""
        self.close()
