import io
from dataclasses import fields, is_dataclass
from typing import Any, Dict, Iterator

# 从 ast_nodes 导入所有节点类型
from ast_nodes import *


def iter_children(node: Any) -> Iterator[Any]:
    """按字段顺序返回节点的直接子节点"""
    if not is_dataclass(node):
        return
    for f in fields(node):
        value = getattr(node, f.name)
        if isinstance(value, list):
            for item in value:
                if is_dataclass(item):
                    yield item
        elif is_dataclass(value):
            yield value


def build_parent_map(root: Any) -> Dict[int, Any]:
    """id(子节点) -> 父节点，用于向上查找祖先"""
    parents: Dict[int, Any] = {}
    stack = [root]
    while stack:
        node = stack.pop()
        for child in iter_children(node):
            parents[id(child)] = node
            stack.append(child)
    return parents


def has_ancestor(node: Any, parents: Dict[int, Any], kind) -> bool:
    parent = parents.get(id(node))
    while parent is not None:
        if isinstance(parent, kind):
            return True
        parent = parents.get(id(parent))
    return False


class ASTPrinter:
    """
    AST打印机
    支持：
    - 源码行号（show_lines）
    - 彩色输出（可选）
    """

    def __init__(self, show_lines=True, use_colors=False, indent_size=2):
        self.show_lines = show_lines
        self.use_colors = use_colors
        self.indent_size = indent_size
        self.output = io.StringIO()

        # 颜色代码
        if use_colors:
            self.colors = {
                'node': '\033[33m',  # 黄色 - 节点名
                'field': '\033[37m',  # 白色 - 字段名
                'value': '\033[32m',  # 绿色 - 值
                'comment': '\033[90m',  # 灰色 - 注释
                'reset': '\033[0m'
            }
        else:
            self.colors = {k: '' for k in ['node', 'field', 'value', 'comment', 'reset']}

    def print(self, node: Any) -> str:
        """打印AST并返回字符串"""
        self.output = io.StringIO()
        self._visit(node, 0)
        return self.output.getvalue()

    def _write(self, text: str):
        self.output.write(text)

    def _indent(self, level: int):
        self._write(" " * (level * self.indent_size))

    def _color(self, text: str, color: str) -> str:
        return f"{self.colors[color]}{text}{self.colors['reset']}"

    def _line_annotation(self, node: Any) -> str:
        if not self.show_lines:
            return ""
        line = getattr(node, 'line', 0)
        if line:
            return self._color(f" /* L{line} */", 'comment')
        return ""

    def _visit(self, node: Any, depth: int):
        if node is None:
            self._write("null")
            return

        if isinstance(node, (str, int, float, bool)):
            self._write(self._color(repr(node), 'value'))
            return

        if isinstance(node, list):
            if not node:
                self._write("[]")
                return
            self._write("[\n")
            for item in node:
                self._visit(item, depth + 1)
                self._write("\n")
            self._indent(depth)
            self._write("]")
            return

        method_name = f'_visit_{node.__class__.__name__}'
        visitor = getattr(self, method_name, self._visit_generic)
        visitor(node, depth)

    def _visit_generic(self, node: Any, depth: int):
        """通用节点访问"""
        self._indent(depth)
        self._write(self._color(node.__class__.__name__, 'node'))
        self._write(" {")
        self._write(self._line_annotation(node))
        self._write("\n")

        for f in fields(node):
            if f.name in ('line', 'text', 'body_text'):
                continue
            value = getattr(node, f.name)
            self._indent(depth + 1)
            self._write(self._color(f.name, 'field'))
            self._write(": ")
            if isinstance(value, (str, int, float, bool)) or value is None:
                self._visit(value, depth + 2)
            elif isinstance(value, list):
                self._visit(value, depth + 1)
            else:
                self._write("\n")
                self._visit(value, depth + 2)
            self._write("\n")

        self._indent(depth)
        self._write("}")

    # 特定节点的紧凑打印

    def _visit_Program(self, node: Program, depth: int):
        self._write(self._color("Program", 'node'))
        self._write(" {\n")
        for item in node.items:
            self._visit(item, depth + 1)
            self._write("\n\n")
        self._indent(depth)
        self._write("}")

    def _visit_FuncDecl(self, node: FuncDecl, depth: int):
        self._indent(depth)
        self._write(self._color(node.ret_type + " ", 'node'))
        self._write(self._color(node.name, 'value'))
        if node.params is None:
            self._write("()")
        else:
            self._write("(" + ", ".join(f"{p.type_name} {p.name}" for p in node.params) + ")")
        self._write(self._line_annotation(node))
        self._write(" {\n")
        for stmt in node.body:
            self._visit(stmt, depth + 1)
            self._write("\n")
        self._indent(depth)
        self._write("}")

    def _visit_VarDecl(self, node: VarDecl, depth: int):
        self._indent(depth)
        self._write(f"{self._color(node.type_name, 'node')} {node.name}")
        if node.init is not None:
            self._write(" = ")
            self._write(self._color(node.init.text, 'value'))
        self._write(self._line_annotation(node))

    def _expr_inline(self, node: Any, depth: int):
        self._indent(depth)
        self._write(self._color(node.__class__.__name__, 'node'))
        self._write(f" {self._color(node.text, 'value')}")
        self._write(self._line_annotation(node))

    _visit_IntLiteral = _expr_inline
    _visit_FloatLiteral = _expr_inline
    _visit_StringLiteral = _expr_inline
    _visit_BoolLiteral = _expr_inline
    _visit_Ident = _expr_inline
    _visit_CallExpr = _expr_inline


def print_ast(node: Any, show_lines: bool = True, use_colors: bool = False) -> str:
    """
    便捷的AST打印函数

    用法:
        from visitors import print_ast
        print(print_ast(ast))
    """
    printer = ASTPrinter(show_lines=show_lines, use_colors=use_colors)
    return printer.print(node)
