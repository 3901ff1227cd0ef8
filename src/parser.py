from ply import yacc

from ast_nodes import *
from diagnostics import ErrorKind
from lexer import tokens, new_lexer, find_column

start = 'program'

precedence = (
    ('left', 'OR'),
    ('left', 'AND'),
    ('nonassoc', 'EQ', 'NE'),  # ==, !=
    ('nonassoc', 'LT', 'GT', 'LE', 'GE'),  # <, >, <=, >=
    ('left', 'PLUS', 'MINUS'),
    ('left', 'TIMES', 'DIV', 'MOD'),
    ('right', 'UMINUS', 'NOT'),
)


def _text(*parts) -> str:
    """拼接记号文本（等价于解析树的 getText，不含空白）"""
    out = []
    for part in parts:
        if part is None:
            continue
        if isinstance(part, str):
            out.append(part)
        elif isinstance(part, list):
            out.append(''.join(_text(x) for x in part))
        else:
            out.append(part.text)
    return ''.join(out)


# ==================== 程序结构 ====================

def p_program(p):
    "program : item_list"
    p[0] = Program(p[1])

def p_program_empty(p):
    "program : "
    p[0] = Program([])

def p_item_list_multi(p):
    "item_list : item_list item"
    p[0] = p[1] + [p[2]] if p[2] is not None else p[1]

def p_item_list_single(p):
    "item_list : item"
    p[0] = [p[1]] if p[1] is not None else []

def p_item(p):
    """item : func_decl
            | stmt"""
    p[0] = p[1]

def p_item_error(p):
    "item : error '}'"
    p[0] = None

# ==================== 函数声明 ====================

def p_func_decl(p):
    "func_decl : type IDENT '(' param_list ')' block"
    block = p[6]
    p[0] = FuncDecl(p[1], p[2], p[4], block.stmts, line=p.lineno(1), body_text=block.text)

def p_func_decl_no_params(p):
    "func_decl : type IDENT '(' ')' block"
    block = p[5]
    p[0] = FuncDecl(p[1], p[2], None, block.stmts, line=p.lineno(1), body_text=block.text)

def p_func_decl_bad_params(p):
    "func_decl : type IDENT '(' error ')' block"
    # 参数列表无法恢复，按无参数处理，函数体照常分析
    block = p[6]
    p[0] = FuncDecl(p[1], p[2], None, block.stmts, line=p.lineno(1), body_text=block.text)

def p_param_list_multi(p):
    "param_list : param_list ',' param"
    p[0] = p[1] + [p[3]]

def p_param_list_single(p):
    "param_list : param"
    p[0] = [p[1]]

def p_param(p):
    "param : type IDENT"
    p[0] = Param(p[1], p[2], line=p.lineno(1), text=_text(p[1], p[2]))

def p_type(p):
    """type : INT_TYPE
            | FLOAT_TYPE
            | DOUBLE_TYPE
            | STRING_TYPE
            | BOOL_TYPE
            | CHAR_TYPE
            | VOID_TYPE"""
    p[0] = p[1]
    p.set_lineno(0, p.lineno(1))

# ==================== 语句 ====================

def p_stmt(p):
    """stmt : var_decl
            | expr_stmt
            | assign_stmt
            | return_stmt
            | if_stmt
            | while_stmt
            | block_stmt"""
    p[0] = p[1]

def p_stmt_error(p):
    "stmt : error ';'"
    p[0] = None

def p_stmt_list_multi(p):
    "stmt_list : stmt_list stmt"
    p[0] = p[1] + [p[2]] if p[2] is not None else p[1]

def p_stmt_list_single(p):
    "stmt_list : stmt"
    p[0] = [p[1]] if p[1] is not None else []

def p_var_decl(p):
    "var_decl : type IDENT ';'"
    p[0] = VarDecl(p[1], p[2], None, line=p.lineno(1), text=_text(p[1], p[2], ';'))

def p_var_decl_init(p):
    "var_decl : type IDENT '=' expr ';'"
    p[0] = VarDecl(p[1], p[2], p[4], line=p.lineno(1), text=_text(p[1], p[2], '=', p[4], ';'))

def p_assign(p):
    "assign_stmt : IDENT '=' expr ';'"
    p[0] = AssignStmt(p[1], p[3], line=p.lineno(1), text=_text(p[1], '=', p[3], ';'))

def p_expr_stmt(p):
    "expr_stmt : expr ';'"
    p[0] = ExprStmt(p[1], line=p[1].line, text=_text(p[1], ';'))

def p_return_with_value(p):
    "return_stmt : RETURN expr ';'"
    p[0] = ReturnStmt(p[2], line=p.lineno(1), text=_text('return', p[2], ';'))

def p_return_empty(p):
    "return_stmt : RETURN ';'"
    p[0] = ReturnStmt(None, line=p.lineno(1), text='return;')

def p_if_stmt(p):
    "if_stmt : IF '(' expr ')' block"
    p[0] = IfStmt(p[3], p[5].stmts, [], line=p.lineno(1), text=_text('if(', p[3], ')', p[5]))

def p_if_else_stmt(p):
    "if_stmt : IF '(' expr ')' block ELSE block"
    p[0] = IfStmt(p[3], p[5].stmts, p[7].stmts, line=p.lineno(1),
                  text=_text('if(', p[3], ')', p[5], 'else', p[7]))

def p_while_stmt(p):
    "while_stmt : WHILE '(' expr ')' block"
    p[0] = WhileStmt(p[3], p[5].stmts, line=p.lineno(1), text=_text('while(', p[3], ')', p[5]))

def p_block_stmt(p):
    "block_stmt : block"
    p[0] = p[1]

def p_block_with_stmts(p):
    "block : '{' stmt_list '}'"
    p[0] = BlockStmt(p[2], line=p.lineno(1), text=_text('{', p[2], '}'))

def p_block_empty(p):
    "block : '{' '}'"
    p[0] = BlockStmt([], line=p.lineno(1), text='{}')

def p_block_error(p):
    "block : '{' error '}'"
    p[0] = BlockStmt([], line=p.lineno(1), text='{}')

def p_block_trailing_error(p):
    "block : '{' stmt_list error '}'"
    p[0] = BlockStmt(p[2], line=p.lineno(1), text=_text('{', p[2], '}'))

# ==================== 表达式 ====================

def p_expr_binop(p):
    """expr : expr OR expr
            | expr AND expr
            | expr EQ expr
            | expr NE expr
            | expr LT expr
            | expr GT expr
            | expr LE expr
            | expr GE expr
            | expr PLUS expr
            | expr MINUS expr
            | expr TIMES expr
            | expr DIV expr
            | expr MOD expr"""
    p[0] = BinOp(p[2], p[1], p[3], line=p[1].line, text=_text(p[1], p[2], p[3]))

def p_expr_uminus(p):
    "expr : MINUS expr %prec UMINUS"
    p[0] = UnaryOp('-', p[2], line=p.lineno(1), text=_text('-', p[2]))

def p_expr_not(p):
    "expr : NOT expr"
    p[0] = UnaryOp('!', p[2], line=p.lineno(1), text=_text('!', p[2]))

def p_expr_primary(p):
    "expr : primary"
    p[0] = p[1]

def p_primary_int(p):
    "primary : INT"
    p[0] = IntLiteral(int(p[1]), line=p.lineno(1), text=p[1])

def p_primary_float(p):
    "primary : FLOAT"
    p[0] = FloatLiteral(float(p[1]), line=p.lineno(1), text=p[1])

def p_primary_string(p):
    "primary : STRING"
    raw = p[1]
    s = raw[1:-1].replace('\\n', '\n').replace('\\t', '\t').replace('\\"', '"').replace('\\\\', '\\')
    p[0] = StringLiteral(s, line=p.lineno(1), text=raw)

def p_primary_true(p):
    "primary : TRUE"
    p[0] = BoolLiteral(True, line=p.lineno(1), text='true')

def p_primary_false(p):
    "primary : FALSE"
    p[0] = BoolLiteral(False, line=p.lineno(1), text='false')

def p_primary_ident(p):
    "primary : IDENT"
    p[0] = Ident(p[1], line=p.lineno(1), text=p[1])

def p_primary_call(p):
    "primary : IDENT '(' arg_list_opt ')'"
    args = p[3]
    text = p[1] + '(' + ','.join(a.text for a in args) + ')'
    p[0] = CallExpr(p[1], args, line=p.lineno(1), text=text)

def p_primary_paren(p):
    "primary : '(' expr ')'"
    p[0] = ParenExpr(p[2], line=p.lineno(1), text=_text('(', p[2], ')'))

def p_arg_list_opt_multi(p):
    "arg_list_opt : arg_list"
    p[0] = p[1]

def p_arg_list_opt_empty(p):
    "arg_list_opt : "
    p[0] = []

def p_arg_list_multi(p):
    "arg_list : arg_list ',' expr"
    p[0] = p[1] + [p[3]]

def p_arg_list_single(p):
    "arg_list : expr"
    p[0] = [p[1]]


def p_error(p):
    if p:
        print(f"Syntax error at '{p.value}' (type: {p.type}) on line {p.lineno}")
    else:
        print("Syntax error at EOF")


def _error_reporter(diagnostics, lx):
    """把语法错误写入收集器，替代默认的 p_error 打印"""
    def report(p):
        if p:
            column = find_column(lx.lexdata, p.lexpos)
            diagnostics.record(ErrorKind.SYNTAX, f"'{p.value}' 附近存在语法错误", p.lineno, column)
        else:
            diagnostics.record(ErrorKind.SYNTAX, "文件意外结束", lx.lineno)
    return report


def parse(data, diagnostics=None, debug=False):
    """
    解析 MiniLang 源码，返回 Program
    无法恢复的语法错误返回 None
    """
    lx = new_lexer(diagnostics)
    parser = yacc.yacc(debug=debug, write_tables=False)
    if diagnostics is not None:
        parser.errorfunc = _error_reporter(diagnostics, lx)
    return parser.parse(data, lexer=lx)
