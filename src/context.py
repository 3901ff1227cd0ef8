from typing import Optional

from diagnostics import Diagnostic, DiagnosticCollector
from scope import GlobalScope


class AnalysisContext:
    """一次分析运行的全部可变状态，显式传给每个阶段"""

    def __init__(self, diagnostics: Optional[DiagnosticCollector] = None, legacy_call_reset: bool = False):
        self.diagnostics = diagnostics if diagnostics is not None else DiagnosticCollector()
        self.global_scope = GlobalScope()
        self.legacy_call_reset = legacy_call_reset

        # 第一个未定义函数调用；一旦设置，本轮分析不再访问后续语句和函数体
        self.halted_at: Optional[Diagnostic] = None

    @property
    def stopped(self) -> bool:
        return self.halted_at is not None

    def halt(self, diag: Diagnostic):
        if self.halted_at is None:
            self.halted_at = diag
