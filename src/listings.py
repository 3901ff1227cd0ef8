"""
函数与全局变量清单
只依赖语法树，与诊断结果无关，可随时重新计算
"""
from dataclasses import dataclass
from typing import List, Optional

from ast_nodes import FuncDecl, Program, VarDecl

RECURSIVE = "递归"
ITERATIVE = "迭代"
NO_PARAMS = "无参数"


@dataclass
class FunctionInfo:
    name: str
    ret_type: str
    params: Optional[List[str]]  # ["int a", ...]，None 表示没有参数列表
    kind: str  # RECURSIVE / ITERATIVE

    def render(self) -> str:
        params = ", ".join(self.params) if self.params is not None else NO_PARAMS
        return (f"函数: {self.name}\n"
                f"类型: {self.kind}\n"
                f"返回类型: {self.ret_type}\n"
                f"参数: {params}\n")


@dataclass
class GlobalVarInfo:
    type_name: str
    name: str
    value: str  # 初始化文本，未初始化为 "null"

    def render(self) -> str:
        return f"<类型: {self.type_name}, 名称: {self.name}, 值: {self.value}>"


def classify_function(node: FuncDecl) -> str:
    # 函数名出现在函数体文本中即视为递归（纯文本判断）
    return RECURSIVE if node.name in node.body_text else ITERATIVE


def extract_functions(program: Program) -> List[FunctionInfo]:
    functions = []
    for item in program.items:
        if isinstance(item, FuncDecl):
            params = None
            if item.params is not None:
                params = [f"{p.type_name} {p.name}" for p in item.params]
            functions.append(FunctionInfo(item.name, item.ret_type, params, classify_function(item)))
    return functions


def extract_global_variables(program: Program) -> List[GlobalVarInfo]:
    result = []
    for item in program.items:
        if isinstance(item, VarDecl):
            value = item.init.text if item.init is not None else "null"
            result.append(GlobalVarInfo(item.type_name, item.name, value))
    return result
