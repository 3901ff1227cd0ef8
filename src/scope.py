from dataclasses import dataclass, field
from typing import List, Set


def function_signature(name: str, param_types: List[str]) -> str:
    """函数签名: 名称 + 有序参数类型，如 add(int, int)"""
    return f"{name}({', '.join(param_types)})"


@dataclass
class GlobalScope:
    """全局作用域 - 顶层声明收集完成后只读"""
    variables: Set[str] = field(default_factory=set)
    signatures: Set[str] = field(default_factory=set)
    function_names: Set[str] = field(default_factory=set)

    def declare_variable(self, name: str) -> bool:
        """返回 False 表示重复声明（不会插入）"""
        if name in self.variables:
            return False
        self.variables.add(name)
        return True

    def declare_function(self, signature: str) -> bool:
        if signature in self.signatures:
            return False
        self.signatures.add(signature)
        self.function_names.add(signature.split('(', 1)[0])
        return True

    def has_function_named(self, name: str) -> bool:
        # 只按名称查找，不考虑参数类型
        return name in self.function_names


class FunctionScope:
    """函数局部作用域: 参数 + 目前为止见到的局部变量"""

    def __init__(self, function_name: str, global_scope: GlobalScope):
        self.function_name = function_name
        self.global_scope = global_scope  # 仅用于查找，不归本作用域所有
        self.params: Set[str] = set()
        self.locals: Set[str] = set()

    def declare_parameter(self, name: str) -> bool:
        if name in self.params:
            return False
        self.params.add(name)
        return True

    def declare_local(self, name: str) -> bool:
        if name in self.locals:
            return False
        self.locals.add(name)
        return True

    def has_parameter(self, name: str) -> bool:
        return name in self.params

    def has_function_named(self, name: str) -> bool:
        return self.global_scope.has_function_named(name)
