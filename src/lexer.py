from ply import lex

from diagnostics import ErrorKind

reserved = {
    'int': 'INT_TYPE',
    'float': 'FLOAT_TYPE',
    'double': 'DOUBLE_TYPE',
    'string': 'STRING_TYPE',
    'bool': 'BOOL_TYPE',
    'char': 'CHAR_TYPE',
    'void': 'VOID_TYPE',
    'if': 'IF',
    'else': 'ELSE',
    'while': 'WHILE',
    'return': 'RETURN',
    'true': 'TRUE',
    'false': 'FALSE',
}

tokens = [
    'IDENT', 'INT', 'FLOAT', 'STRING',
    'PLUS', 'MINUS', 'TIMES', 'DIV', 'MOD',
    'LT', 'GT', 'LE', 'GE', 'EQ', 'NE',
    'AND', 'OR', 'NOT',
] + sorted(set(reserved.values()))

literals = ['=', ';', ',', '(', ')', '{', '}']

t_LE = r'<='
t_GE = r'>='
t_EQ = r'=='
t_NE = r'!='
t_LT = r'<'
t_GT = r'>'
t_AND = r'&&'
t_OR = r'\|\|'
t_NOT = r'!'

t_PLUS = r'\+'
t_MINUS = r'-'
t_TIMES = r'\*'
t_DIV = r'/'
t_MOD = r'%'

# 字面量保留原始文本（包括字符串的引号），语义检查按文本形式进行

def t_STRING(t):
    r'"([^"\\\n]|\\.)*"'
    return t

def t_FLOAT(t):
    r'(\d+\.\d*|\.\d+)([eE][+-]?\d+)?|\d+[eE][+-]?\d+'
    return t

def t_INT(t):
    r'\d+'
    return t

def t_IDENT(t):
    r'[A-Za-z_]\w*'
    t.type = reserved.get(t.value, 'IDENT')
    return t

t_ignore = ' \t\r'

def t_newline(t):
    r'\n+'
    t.lexer.lineno += t.value.count('\n')

def t_comment(t):
    r'//[^\n]*'
    pass

def t_multiline_comment(t):
    r'/\*(.|\n)*?\*/'
    t.lexer.lineno += t.value.count('\n')
    pass


def find_column(data: str, lexpos: int) -> int:
    """列号从 1 开始"""
    line_start = data.rfind('\n', 0, lexpos) + 1
    return lexpos - line_start + 1


def t_error(t):
    column = find_column(t.lexer.lexdata, t.lexpos)
    diagnostics = getattr(t.lexer, 'diagnostics', None)
    if diagnostics is not None:
        diagnostics.record(ErrorKind.LEXICAL, f"非法字符 {t.value[0]!r}", t.lineno, column)
    else:
        print(f"Illegal character {t.value[0]!r} at line {t.lineno}")
    t.lexer.skip(1)

lexer = lex.lex()
lexer.diagnostics = None


def new_lexer(diagnostics=None):
    """每次解析使用独立的词法分析器副本"""
    lx = lexer.clone()
    lx.lineno = 1
    lx.diagnostics = diagnostics
    return lx
