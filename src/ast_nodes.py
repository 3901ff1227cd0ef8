from dataclasses import dataclass, field
from typing import List, Optional, Any

# 所有节点都带 line（从 1 开始）和 text（去掉空白后的记号拼接文本）


@dataclass
class Program:
    items: List[Any]
    line: int = 1
    def __repr__(self): return f"Program({self.items})"

@dataclass
class Param:
    type_name: str
    name: str
    line: int = 0
    text: str = ''
    def __repr__(self): return f"Param({self.type_name} {self.name})"

@dataclass
class VarDecl:
    type_name: str
    name: str
    init: Optional[Any]
    line: int = 0
    text: str = ''
    def __repr__(self): return f"Var({self.type_name} {self.name} = {self.init})"

@dataclass
class FuncDecl:
    ret_type: str
    name: str
    params: Optional[List[Param]]  # None 表示没有参数列表
    body: List[Any]
    line: int = 0
    body_text: str = ''
    def __repr__(self): return f"Func({self.ret_type} {self.name}, params={self.params}, body={self.body})"

    def param_types(self) -> List[str]:
        return [p.type_name for p in self.params or []]

# Statements
@dataclass
class ExprStmt:
    expr: Any
    line: int = 0
    text: str = ''
    def __repr__(self): return f"ExprStmt({self.expr})"

@dataclass
class AssignStmt:
    name: str
    expr: Any
    line: int = 0
    text: str = ''
    def __repr__(self): return f"Assign({self.name} = {self.expr})"

@dataclass
class ReturnStmt:
    expr: Optional[Any]
    line: int = 0
    text: str = ''
    def __repr__(self): return f"Return({self.expr})"

@dataclass
class IfStmt:
    cond: Any
    then_block: List[Any]
    else_block: List[Any] = field(default_factory=list)
    line: int = 0
    text: str = ''
    def __repr__(self): return f"If({self.cond}, then={self.then_block}, else={self.else_block})"

@dataclass
class WhileStmt:
    cond: Any
    block: List[Any]  # block 是语句列表
    line: int = 0
    text: str = ''
    def __repr__(self): return f"While({self.cond}, {self.block})"

@dataclass
class BlockStmt:
    stmts: List[Any]
    line: int = 0
    text: str = ''
    def __repr__(self): return f"Block({self.stmts})"

# Expressions
@dataclass
class IntLiteral:
    value: int
    line: int = 0
    text: str = ''
    def __repr__(self): return f"Int({self.value})"

@dataclass
class FloatLiteral:
    value: float
    line: int = 0
    text: str = ''
    def __repr__(self): return f"Float({self.value})"

@dataclass
class BoolLiteral:
    value: bool
    line: int = 0
    text: str = ''
    def __repr__(self): return f"Bool({self.value})"

@dataclass
class StringLiteral:
    value: str
    line: int = 0
    text: str = ''  # 保留引号的原始文本
    def __repr__(self): return f"Str({self.value!r})"

@dataclass
class Ident:
    name: str
    line: int = 0
    text: str = ''
    def __repr__(self): return f"Ident({self.name})"

@dataclass
class ParenExpr:
    expr: Any
    line: int = 0
    text: str = ''
    def __repr__(self): return f"Paren({self.expr})"

@dataclass
class UnaryOp:
    op: str           # '-' 或 '!'
    operand: Any
    line: int = 0
    text: str = ''
    def __repr__(self): return f"UnaryOp({self.op}{self.operand})"

@dataclass
class BinOp:
    op: str
    left: Any
    right: Any
    line: int = 0
    text: str = ''
    def __repr__(self): return f"BinOp({self.left} {self.op} {self.right})"

@dataclass
class CallExpr:
    name: str
    args: List[Any]
    line: int = 0
    text: str = ''
    def __repr__(self): return f"Call({self.name}({', '.join(map(str, self.args))}))"


EXPRESSION_NODES = (IntLiteral, FloatLiteral, BoolLiteral, StringLiteral, Ident,
                    ParenExpr, UnaryOp, BinOp, CallExpr)
