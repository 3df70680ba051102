#!/usr/bin/env python3
"""
XMODEM 发送示例
===============

演示如何在代码中使用 TtyWriter 通过 XMODEM 向串口发送文件。

用法：
    python examples/send_example.py /dev/ttyUSB0 kernel.img
"""

import sys
from pathlib import Path

# 添加src路径到Python路径
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from serial_tty_write import LinkConfig, TransferConfig, TtyWriter
from serial_tty_write.core.errors import TtyWriteError


def main():
    """主函数"""
    if len(sys.argv) != 3:
        print(f"用法: {sys.argv[0]} <串口> <文件>")
        sys.exit(2)

    tty_path, file_path = sys.argv[1], sys.argv[2]
    print("串口写入工具 - XMODEM发送")
    print("=" * 40)

    writer = TtyWriter(
        tty_path,
        LinkConfig(baud_rate=115200, timeout=10),
        TransferConfig(xmodem_mode="xmodem1k"),
    )
    try:
        written = writer.write(file_path)
        print(f"\n✅ 发送完成，共 {written} 字节")
    except TtyWriteError as e:
        print(f"\n💥 {e.stage}失败: {e}")
        sys.exit(int(e.exit_code))


if __name__ == "__main__":
    main()
