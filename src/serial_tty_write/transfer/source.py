"""
输入源选择
==========

在输入文件和标准输入之间选择字节来源。
"""

import sys
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import BinaryIO, Optional, Union

from ..core.errors import InputSourceError
from ..utils.logger import get_logger

logger = get_logger(__name__)


class SourceKind(Enum):
    """输入源类型"""

    FILE = "file"
    STDIN = "stdin"


@dataclass
class ByteSource:
    """
    只读、只前进的字节来源

    作为上下文管理器使用时，退出时关闭文件；标准输入不会被关闭。
    """

    kind: SourceKind
    stream: BinaryIO
    path: Optional[Path] = None

    @property
    def name(self) -> str:
        return str(self.path) if self.kind is SourceKind.FILE else "<stdin>"

    def read(self, size: int = -1) -> bytes:
        return self.stream.read(size)

    def read1(self, size: int = -1) -> bytes:
        """返回已就绪的数据，管道或终端上不等待凑满 size"""
        read1 = getattr(self.stream, "read1", None)
        if read1 is None:
            return self.stream.read(size)
        return read1(size)

    def close(self) -> None:
        if self.kind is SourceKind.FILE and not self.stream.closed:
            self.stream.close()

    def __enter__(self) -> "ByteSource":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def open_source(
    path: Optional[Union[str, Path]] = None,
    stdin: Optional[BinaryIO] = None,
) -> ByteSource:
    """
    选择输入源

    Args:
        path: 输入文件路径，None 表示使用标准输入
        stdin: 标准输入的二进制流，默认 sys.stdin.buffer

    Returns:
        ByteSource 实例

    Raises:
        InputSourceError: 文件不存在、不是文件或无权限读取
    """
    if path is None:
        stream = stdin if stdin is not None else sys.stdin.buffer
        logger.info("未指定输入文件，从标准输入读取")
        return ByteSource(SourceKind.STDIN, stream)

    file_path = Path(path)
    if file_path.is_dir():
        raise InputSourceError(f"路径不是文件: {file_path}")

    try:
        stream = file_path.open("rb")
    except FileNotFoundError as e:
        raise InputSourceError(f"文件不存在: {file_path}") from e
    except PermissionError as e:
        raise InputSourceError(f"无权限读取文件: {file_path}") from e
    except OSError as e:
        raise InputSourceError(f"无法打开文件 {file_path}: {e}") from e

    logger.info(f"已打开输入文件: {file_path}")
    return ByteSource(SourceKind.FILE, stream, file_path)
