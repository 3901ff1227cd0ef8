import re
from typing import Callable, Dict

# 基础类型名称
INT = 'int'
FLOAT = 'float'
DOUBLE = 'double'
STRING = 'string'

_int_re = re.compile(r'[+-]?\d+')
_float_re = re.compile(r'[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?')


def _is_int_literal(text: str) -> bool:
    return _int_re.fullmatch(text) is not None


def _is_float_literal(text: str) -> bool:
    return _float_re.fullmatch(text) is not None


def _is_string_literal(text: str) -> bool:
    return len(text) >= 2 and text.startswith('"') and text.endswith('"')


# 声明类型 -> 字面量文本形式检查; 不在表中的类型一律不兼容
LITERAL_RULES: Dict[str, Callable[[str], bool]] = {
    INT: _is_int_literal,
    FLOAT: _is_float_literal,
    DOUBLE: _is_float_literal,
    STRING: _is_string_literal,
}


def literal_matches(declared_type: str, text: str) -> bool:
    """
    纯文本检查：字面量的书写形式是否符合声明类型
    - 不求值表达式，不解析标识符，不做数值范围检查
    """
    rule = LITERAL_RULES.get(declared_type)
    if rule is None:
        return False
    return rule(text)
