"""
日志记录模块
============

提供统一的日志记录功能，支持彩色输出和调用位置追踪。
"""

import datetime
import logging
import sys
from typing import Optional, TextIO

ROOT_LOGGER_NAME = "serial_tty_write"

# 跟随包根日志器输出的第三方日志器
THIRD_PARTY_LOGGERS = ("xmodem",)


class ColoredFormatter(logging.Formatter):
    """彩色日志格式化器"""

    # ANSI颜色代码
    COLORS = {
        'DEBUG': '\033[36m',    # 青色
        'INFO': '\033[0m',      # 默认色
        'WARNING': '\033[33m',  # 黄色
        'ERROR': '\033[31m',    # 红色
        'CRITICAL': '\033[35m', # 紫色
        'RESET': '\033[0m'      # 重置
    }

    def __init__(self, use_color: bool = True):
        super().__init__()
        self.use_color = use_color

    def format(self, record):
        """格式化日志记录"""
        # 添加毫秒精度的时间戳
        created = datetime.datetime.fromtimestamp(record.created)
        milliseconds = created.microsecond // 1000
        timestamp = created.strftime(f"%Y-%m-%d %H:%M:%S.{milliseconds:03d}")

        if self.use_color:
            color = self.COLORS.get(record.levelname, self.COLORS['RESET'])
            reset = self.COLORS['RESET']
        else:
            color = reset = ""

        formatted_message = (
            f"{color}[{timestamp}] {record.getMessage()} "
            f"[{record.filename}.{record.funcName}():{record.lineno}]{reset}"
        )
        if record.exc_info:
            formatted_message += "\n" + self.formatException(record.exc_info)

        return formatted_message


def setup_logger(
    name: str = ROOT_LOGGER_NAME,
    level: int = logging.WARNING,
    log_file: Optional[str] = None,
    console_output: bool = True,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    设置日志器

    设置包根日志器时，THIRD_PARTY_LOGGERS 中的日志器使用相同的级别和处理器。

    Args:
        name: 日志器名称
        level: 日志级别
        log_file: 日志文件路径，None表示不写入文件
        console_output: 是否输出到控制台
        stream: 控制台输出流，默认 sys.stderr

    Returns:
        配置好的日志器
    """
    loggers = [logging.getLogger(name)]
    if name == ROOT_LOGGER_NAME:
        loggers += [logging.getLogger(n) for n in THIRD_PARTY_LOGGERS]

    # 清除已有的处理器
    for logger in loggers:
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()

    handlers = []

    # 控制台处理器
    if console_output:
        stream = stream or sys.stderr
        console_handler = logging.StreamHandler(stream)
        use_color = hasattr(stream, "isatty") and stream.isatty()
        console_handler.setFormatter(ColoredFormatter(use_color=use_color))
        handlers.append(console_handler)

    # 文件处理器
    if log_file:
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
        file_handler.setFormatter(file_formatter)
        handlers.append(file_handler)

    for logger in loggers:
        logger.setLevel(level)
        for handler in handlers:
            logger.addHandler(handler)
        # 防止重复输出
        logger.propagate = False

    return loggers[0]


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """
    获取日志器实例

    模块日志器都挂在包根日志器下，由 setup_logger 统一控制级别和输出。

    Args:
        name: 日志器名称，通常为 __name__

    Returns:
        日志器实例
    """
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


# 默认设置包根日志器
_default_logger = setup_logger()
