#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
MLC 命令行语义检查器
用法: ./mlc <源文件路径> [输出目录(默认当前目录)] [--legacy] [--ast]

示例:
    ./mlc input.txt
    ./mlc input.txt ./report
    python3 mlc.py src/main.ml ./out --ast
"""

import sys
import os
from pathlib import Path

# 确保能导入同级目录的模块
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from write_report import ReportWriter
from visitors import print_ast


def print_usage():
    print(__doc__)
    print("\n参数说明:")
    print("  source   - MiniLang 源文件路径")
    print("  target   - 报告输出目录 (可选, 默认当前目录)")
    print("  --legacy - 未定义函数调用时清空其它错误并中止 (与旧工具一致)")
    print("  --ast    - 打印语法树")


def main(argv=None):
    args = sys.argv[1:] if argv is None else argv
    flags = {a for a in args if a.startswith("--")}
    positional = [a for a in args if not a.startswith("--")]

    # 参数检查
    if not positional or "--help" in flags:
        print_usage()
        return 1

    source_path = Path(positional[0])
    target_path = positional[1] if len(positional) > 1 else "."

    # 验证源文件
    if not source_path.exists():
        print(f"✗ 错误: 源文件不存在: {source_path}")
        return 1

    if not source_path.is_file():
        print(f"✗ 错误: 源路径不是文件: {source_path}")
        return 1

    config = {
        "legacy_call_reset": "--legacy" in flags,
    }

    print(f"[MLC] 开始检查...")
    print(f"  源文件: {source_path.absolute()}")
    print(f"  输出到: {Path(target_path).absolute()}")
    print()

    try:
        writer = ReportWriter(target_path, config)
        report = writer.analyze_source(source_path)

        if "--ast" in flags and report.program is not None:
            print(print_ast(report.program))
            print()

        if report.diagnostics:
            print("发现以下错误:")
            for diag in report.diagnostics:
                print(f"  {diag}")
        else:
            print("✓ 没有发现错误")

        written = writer.write()
        for kind, path in written.items():
            print(f"  {kind}: {path}")

    except Exception as e:
        print(f"\n✗ 检查失败!")
        print(f"  错误: {str(e)}")

        # 调试模式显示堆栈
        if os.environ.get("MLC_DEBUG"):
            import traceback
            traceback.print_exc()

        return 1

    return 1 if report.diagnostics else 0


if __name__ == "__main__":
    sys.exit(main())
