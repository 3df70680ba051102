"""
异常定义
========

串口写入流程中各阶段的异常类型。每个异常携带失败阶段和进程退出码，
由命令行入口统一转换为用户可读的错误信息。
"""

from ..config.constants import ExitCode


class TtyWriteError(Exception):
    """所有串口写入错误的基类"""

    stage: str = "执行"
    exit_code: ExitCode = ExitCode.TRANSFER_FAILED


# ---------------------------------------------------------------------------
# 配置阶段
# ---------------------------------------------------------------------------


class ConfigurationError(TtyWriteError):
    """串口打开或配置失败"""

    stage = "配置串口"
    exit_code = ExitCode.CONFIG_ERROR


class DeviceOpenError(ConfigurationError):
    """设备路径无效或无法打开"""

    stage = "打开设备"
    exit_code = ExitCode.DEVICE_ERROR


class DeviceUnreachableError(ConfigurationError):
    """设备已打开但读写设置时I/O失败"""

    exit_code = ExitCode.DEVICE_ERROR


class InvalidTimeoutError(ConfigurationError):
    """驱动拒绝超时设置"""


class InvalidBaudRateError(ConfigurationError):
    """驱动拒绝波特率"""


class UnsupportedSettingsError(ConfigurationError):
    """驱动拒绝数据位/停止位/流控组合"""


# ---------------------------------------------------------------------------
# 输入阶段
# ---------------------------------------------------------------------------


class InputSourceError(TtyWriteError):
    """输入文件无法打开"""

    stage = "打开输入"
    exit_code = ExitCode.INPUT_ERROR


# ---------------------------------------------------------------------------
# 传输阶段
# ---------------------------------------------------------------------------


class TransferError(TtyWriteError):
    """传输失败"""

    stage = "传输"
    exit_code = ExitCode.TRANSFER_FAILED

    def __init__(self, message: str, bytes_written: int = 0):
        super().__init__(message)
        self.bytes_written = bytes_written  # 失败前已写入的字节数


class SourceReadError(TransferError):
    """读取输入源失败"""


class SinkWriteError(TransferError):
    """写入串口失败"""


class ProtocolError(TransferError):
    """XMODEM 协议传输失败"""

    def __init__(self, reason: str, bytes_written: int = 0):
        super().__init__(f"XMODEM传输失败: {reason}", bytes_written)
        self.reason = reason
