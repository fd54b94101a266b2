"""
数值解析工具
整数和小数都先用正则校验，拒绝 Python 额外接受的写法（下划线、NaN、科学计数法）
"""

import re
from decimal import Decimal
from typing import Optional

from .errors import ErrorKind, ParseError


INT_PATTERN = re.compile(r'^[+-]?[0-9]+$')
DECIMAL_PATTERN = re.compile(r'^[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)$')


def parse_int(text: str, kind: ErrorKind = ErrorKind.INVALID_INTEGER,
              minimum: Optional[int] = None, maximum: Optional[int] = None) -> int:
    """解析整数，可选范围检查"""
    value = text.strip()
    if not INT_PATTERN.match(value):
        raise ParseError(kind, text)
    number = int(value)
    if (minimum is not None and number < minimum) or (maximum is not None and number > maximum):
        raise ParseError(kind, text)
    return number


def parse_u8(text: str, kind: ErrorKind = ErrorKind.INVALID_INTEGER) -> int:
    """解析 0-255 的整数"""
    return parse_int(text, kind, 0, 255)


def parse_decimal(text: str, kind: ErrorKind = ErrorKind.INVALID_DECIMAL) -> Decimal:
    """解析十进制小数"""
    value = text.strip()
    if not DECIMAL_PATTERN.match(value):
        raise ParseError(kind, text)
    return Decimal(value)


def is_decimal(text: str) -> bool:
    return DECIMAL_PATTERN.match(text.strip()) is not None


def format_decimal(value: Decimal) -> str:
    """输出小数，不使用科学计数法"""
    return format(value, 'f')


def parse_bool(text: str, kind: ErrorKind = ErrorKind.INVALID_BOOL) -> bool:
    """只接受 0 和 1"""
    value = text.strip()
    if value == "0":
        return False
    if value == "1":
        return True
    raise ParseError(kind, text)


def format_bool(value: bool) -> str:
    return "1" if value else "0"
