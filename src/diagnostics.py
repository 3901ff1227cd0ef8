"""
诊断信息收集
词法、语法、语义三类诊断都按产生顺序写入同一个 DiagnosticCollector
"""
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, TextIO


class ErrorKind(Enum):
    LEXICAL = 'LexicalError'
    SYNTAX = 'SyntaxError'
    DUPLICATE_GLOBAL_VARIABLE = 'DuplicateGlobalVariable'
    DUPLICATE_FUNCTION_SIGNATURE = 'DuplicateFunctionSignature'
    DUPLICATE_LOCAL_VARIABLE = 'DuplicateLocalVariable'
    PARAMETER_SHADOWING = 'ParameterShadowing'
    TYPE_MISMATCH = 'TypeMismatch'
    UNDEFINED_FUNCTION_CALL = 'UndefinedFunctionCall'

    @property
    def tag(self) -> str:
        if self is ErrorKind.LEXICAL:
            return "词法错误"
        if self is ErrorKind.SYNTAX:
            return "语法错误"
        return "语义错误"


@dataclass(frozen=True)
class Diagnostic:
    kind: ErrorKind
    message: str
    line: int
    column: Optional[int] = None
    seq: int = 0  # 记录顺序号，收集器内唯一

    def __str__(self) -> str:
        return format_diagnostic(self)


def format_diagnostic(diag: Diagnostic) -> str:
    """渲染为一行带标签的文本，如 [语义错误] 第 3 行: ..."""
    where = f"第 {diag.line} 行"
    if diag.column is not None:
        where += f", 第 {diag.column} 列"
    return f"[{diag.kind.tag}] {where}: {diag.message}"


class DiagnosticCollector:
    """有序、只追加的诊断记录，所有检查都经由它输出"""

    def __init__(self):
        self._items: List[Diagnostic] = []
        self._next_seq = 0

    def record(self, kind: ErrorKind, message: str, line: int, column: Optional[int] = None) -> Diagnostic:
        diag = Diagnostic(kind, message, line, column, self._next_seq)
        self._next_seq += 1
        self._items.append(diag)
        return diag

    def all(self) -> List[Diagnostic]:
        return self._items

    def clear(self):
        """清空记录 - 只有 legacy 调用检查模式会用到"""
        self._items.clear()


def save_diagnostics(diagnostics, sink: TextIO, newline: str = "\n"):
    """每条诊断写一行到调用方提供的文本流"""
    for diag in diagnostics:
        sink.write(format_diagnostic(diag) + newline)
