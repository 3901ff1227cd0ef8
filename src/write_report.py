#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Any, List, Optional, Union

from analyzer import AnalysisResult, SemanticAnalyzer
from ast_nodes import Program
from diagnostics import Diagnostic, DiagnosticCollector, save_diagnostics
from listings import FunctionInfo, GlobalVarInfo, extract_functions, extract_global_variables
from parser import parse


@dataclass
class CheckReport:
    """一次完整检查（前端 + 语义分析）的结果"""
    program: Optional[Program]
    diagnostics: List[Diagnostic]
    result: Optional[AnalysisResult] = None  # 无法得到语法树时为 None
    functions: List[FunctionInfo] = field(default_factory=list)
    globals: List[GlobalVarInfo] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.diagnostics


def check_source(source: str, legacy_call_reset: bool = False) -> CheckReport:
    """
    解析并分析一段源码
    语法树为空时跳过语义分析，只返回前端诊断
    """
    collector = DiagnosticCollector()
    program = parse(source, collector)

    if program is None or not program.items:
        return CheckReport(program, list(collector.all()))

    result = SemanticAnalyzer(legacy_call_reset=legacy_call_reset).analyze(program, collector)
    return CheckReport(
        program=program,
        diagnostics=result.diagnostics,
        result=result,
        functions=extract_functions(program),
        globals=extract_global_variables(program),
    )


class ReportWriter:
    DEFAULT_CONFIG = {
        "errors_file": "errors.txt",
        "functions_file": "functions.txt",
        "globals_file": "global_variables.txt",
        "newline": "\r\n",
        "separator": "-" * 22,
        "legacy_call_reset": False,
    }

    def __init__(self,
                 output_path: Union[str, Path],
                 config: Optional[Dict[str, Any]] = None):
        self.output_path = Path(output_path).resolve()
        self.config = dict(self.DEFAULT_CONFIG)
        self.config.update(config or {})

        self.newline = self.config.get("newline")
        self.separator = self.config.get("separator")
        self.report: Optional[CheckReport] = None

    def analyze_source(self, source_file: Union[str, Path]) -> CheckReport:
        with open(source_file, 'r', encoding='utf-8') as f:
            code = f.read()
        return self.analyze_text(code)

    def analyze_text(self, code: str) -> CheckReport:
        self.report = check_source(code, legacy_call_reset=self.config.get("legacy_call_reset", False))
        return self.report

    def write(self) -> Dict[str, Path]:
        """写出报告文件，返回 {类别: 路径}"""
        if self.report is None:
            raise RuntimeError("请先调用 analyze_source() 或 analyze_text()")

        self.output_path.mkdir(parents=True, exist_ok=True)
        written: Dict[str, Path] = {}

        # 没有错误时不生成错误文件
        if self.report.diagnostics:
            path = self.output_path / self.config["errors_file"]
            with open(path, 'w', encoding='utf-8', newline='') as f:
                save_diagnostics(self.report.diagnostics, f, newline=self.newline)
            written["errors"] = path

        # 语法树为空时没有做语义分析，也不生成清单
        if self.report.result is not None:
            written["functions"] = self._write_listing(
                self.config["functions_file"], [fn.render() for fn in self.report.functions])
            written["globals"] = self._write_listing(
                self.config["globals_file"], [gv.render() for gv in self.report.globals])

        return written

    def _write_listing(self, filename: str, entries: List[str]) -> Path:
        """每个条目之后写一行分隔线"""
        path = self.output_path / filename
        with open(path, 'w', encoding='utf-8', newline='') as f:
            for entry in entries:
                body = entry.rstrip().replace("\n", self.newline)
                f.write(body + self.newline)
                f.write(self.separator + self.newline)
        return path
