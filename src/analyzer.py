from dataclasses import dataclass, field
from typing import Any, List, Optional

from ast_nodes import *
from context import AnalysisContext
from diagnostics import Diagnostic, DiagnosticCollector, ErrorKind
from my_types import literal_matches
from scope import FunctionScope, GlobalScope, function_signature
from visitors import build_parent_map, has_ancestor


class SemanticError(Exception):
    pass


class TypeCompatibilityChecker:
    """初始化值的字面量形式与声明类型是否兼容"""

    def __init__(self, ctx: AnalysisContext):
        self.ctx = ctx

    def check(self, declared_type: str, literal_text: str, line: int) -> bool:
        if literal_matches(declared_type, literal_text):
            return True
        self.ctx.diagnostics.record(
            ErrorKind.TYPE_MISMATCH,
            f"变量类型 '{declared_type}' 与值 '{literal_text}' 不兼容",
            line,
        )
        return False


class DeclarationAnalyzer:
    """顶层声明分析 - 填充全局作用域"""

    def __init__(self, ctx: AnalysisContext, type_checker: TypeCompatibilityChecker):
        self.ctx = ctx
        self.type_checker = type_checker

    def analyze(self, program: Program):
        # 先登记全部函数签名，再处理全局变量
        for item in program.items:
            if isinstance(item, FuncDecl):
                self._declare_function(item)

        parents = build_parent_map(program)
        for item in program.items:
            if isinstance(item, VarDecl) and not has_ancestor(item, parents, FuncDecl):
                self._declare_global(item)

    def _declare_function(self, node: FuncDecl):
        signature = function_signature(node.name, node.param_types())
        if not self.ctx.global_scope.declare_function(signature):
            self.ctx.diagnostics.record(
                ErrorKind.DUPLICATE_FUNCTION_SIGNATURE,
                f"函数 '{node.name}' 已使用相同的参数列表定义: {signature}",
                node.line,
            )

    def _declare_global(self, node: VarDecl):
        if not self.ctx.global_scope.declare_variable(node.name):
            self.ctx.diagnostics.record(
                ErrorKind.DUPLICATE_GLOBAL_VARIABLE,
                f"全局变量 '{node.name}' 被重复定义",
                node.line,
            )

        # 无论是否重复都检查初始化值
        if node.init is not None:
            self.type_checker.check(node.type_name, node.init.text, node.line)


class FunctionBodyAnalyzer:
    """函数体分析 - 构建局部作用域，检查参数遮蔽和局部变量重复"""

    def __init__(self, ctx: AnalysisContext):
        self.ctx = ctx

    def analyze(self, node: FuncDecl) -> FunctionScope:
        scope = FunctionScope(node.name, self.ctx.global_scope)
        for param in node.params or []:
            scope.declare_parameter(param.name)

        # 只看函数体的顶层语句，if/while/块内部不进入
        for stmt in node.body:
            if isinstance(stmt, VarDecl):
                self._declare_local(scope, stmt)
        return scope

    def _declare_local(self, scope: FunctionScope, decl: VarDecl):
        if scope.has_parameter(decl.name):
            self.ctx.diagnostics.record(
                ErrorKind.PARAMETER_SHADOWING,
                f"函数 '{scope.function_name}' 中的局部变量 '{decl.name}' 与参数同名",
                decl.line,
            )

        if not scope.declare_local(decl.name):
            self.ctx.diagnostics.record(
                ErrorKind.DUPLICATE_LOCAL_VARIABLE,
                f"局部变量 '{decl.name}' 在函数 '{scope.function_name}' 中被重复定义",
                decl.line,
            )


class CallResolutionChecker:
    """
    函数调用检查
    每个语句只检查它直接持有的表达式是否为函数调用，
    嵌套在运算符、参数或括号里的调用不检查
    """

    def __init__(self, ctx: AnalysisContext):
        self.ctx = ctx
        # 当前查找作用域：函数体内为 FunctionScope，顶层为全局作用域
        self.scope = ctx.global_scope

    def check_function(self, node: FuncDecl, scope: FunctionScope):
        self.scope = scope
        try:
            self.check_statements(node.body)
        finally:
            self.scope = self.ctx.global_scope

    def check_statements(self, stmts: List[Any]):
        for stmt in stmts:
            if self.ctx.stopped:
                return
            self.check(stmt)

    def check(self, stmt):
        """语句分发"""
        method_name = f'_check_{stmt.__class__.__name__}'
        method = getattr(self, method_name, self._check_generic)
        method(stmt)

    def _check_generic(self, stmt):
        raise SemanticError(f"未知的语句类型: {type(stmt)}")

    def _check_VarDecl(self, stmt: VarDecl):
        if stmt.init is not None:
            self._check_site(stmt.init)

    def _check_ExprStmt(self, stmt: ExprStmt):
        self._check_site(stmt.expr)

    def _check_AssignStmt(self, stmt: AssignStmt):
        self._check_site(stmt.expr)

    def _check_ReturnStmt(self, stmt: ReturnStmt):
        if stmt.expr is not None:
            self._check_site(stmt.expr)

    def _check_IfStmt(self, stmt: IfStmt):
        self._check_site(stmt.cond)
        self.check_statements(stmt.then_block)
        self.check_statements(stmt.else_block)

    def _check_WhileStmt(self, stmt: WhileStmt):
        self._check_site(stmt.cond)
        self.check_statements(stmt.block)

    def _check_BlockStmt(self, stmt: BlockStmt):
        self.check_statements(stmt.stmts)

    def _check_site(self, expr):
        if self.ctx.stopped:
            return
        if not isinstance(expr, EXPRESSION_NODES):
            raise SemanticError(f"未知的表达式类型: {type(expr)}")
        if isinstance(expr, CallExpr) and not self.scope.has_function_named(expr.name):
            self._undefined_call(expr)

    def _undefined_call(self, expr: CallExpr):
        """记录第一个未定义调用并中止本轮分析；之前的诊断保留，legacy 模式除外"""
        message = f"函数 '{expr.name}' 被调用，但未定义"
        if self.ctx.legacy_call_reset:
            # 与旧工具保持一致：丢弃之前的全部诊断，只保留这一条
            self.ctx.diagnostics.clear()
        diag = self.ctx.diagnostics.record(ErrorKind.UNDEFINED_FUNCTION_CALL, message, expr.line)
        self.ctx.halt(diag)


@dataclass
class AnalysisResult:
    """分析结果容器"""
    diagnostics: List[Diagnostic]
    global_scope: GlobalScope
    function_scopes: List[FunctionScope] = field(default_factory=list)
    halted_at: Optional[Diagnostic] = None  # 第一个未定义的函数调用


class SemanticAnalyzer:
    """
    语义分析器主类
    每次 analyze 都使用新的作用域和上下文，可重复调用
    """

    def __init__(self, legacy_call_reset: bool = False):
        self.legacy_call_reset = legacy_call_reset

    def analyze(self, program: Program, diagnostics: Optional[DiagnosticCollector] = None) -> AnalysisResult:
        """
        主分析入口
        diagnostics 可以是已经包含词法/语法错误的收集器，语义诊断追加在其后
        """
        ctx = AnalysisContext(diagnostics, legacy_call_reset=self.legacy_call_reset)
        type_checker = TypeCompatibilityChecker(ctx)
        body_analyzer = FunctionBodyAnalyzer(ctx)
        call_checker = CallResolutionChecker(ctx)
        function_scopes: List[FunctionScope] = []

        # 第一遍：全局作用域必须在任何使用检查之前收集完整
        DeclarationAnalyzer(ctx, type_checker).analyze(program)

        # 第二遍：按源码顺序分析函数体和调用
        for item in program.items:
            if ctx.stopped:
                break
            if isinstance(item, FuncDecl):
                scope = body_analyzer.analyze(item)
                function_scopes.append(scope)
                call_checker.check_function(item, scope)
            else:
                call_checker.check(item)

        return AnalysisResult(
            diagnostics=list(ctx.diagnostics.all()),
            global_scope=ctx.global_scope,
            function_scopes=function_scopes,
            halted_at=ctx.halted_at,
        )
