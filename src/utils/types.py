"""
基础值类型
位置、颜色、文件路径
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Union

from .errors import ErrorKind
from .lines import FieldReader
from .numbers import format_decimal, parse_u8


Number = Union[int, Decimal]


def render_number(value: Number) -> str:
    """整数直接输出，小数不使用科学计数法"""
    if isinstance(value, Decimal):
        return format_decimal(value)
    return str(value)


@dataclass
class Position:
    """osu!pixel 坐标，默认为屏幕中心"""
    x: Number = 256
    y: Number = 192

    def render(self) -> str:
        return f"{render_number(self.x)},{render_number(self.y)}"


@dataclass
class Rgb:
    """RGB 颜色"""
    red: int = 0
    green: int = 0
    blue: int = 0

    @classmethod
    def parse(cls, text: str) -> 'Rgb':
        """解析 r,g,b（允许空白）"""
        reader = FieldReader(text)
        red = parse_u8(reader.next(ErrorKind.MISSING_RED), ErrorKind.INVALID_RED)
        green = parse_u8(reader.next(ErrorKind.MISSING_GREEN), ErrorKind.INVALID_GREEN)
        blue = parse_u8(reader.rest(ErrorKind.MISSING_BLUE), ErrorKind.INVALID_BLUE)
        return cls(red, green, blue)

    def render(self) -> str:
        return f"{self.red},{self.green},{self.blue}"


@dataclass
class FilePath:
    """文件路径，记录原文是否带引号"""
    path: str = ""
    quoted: bool = False

    @classmethod
    def parse(cls, text: str) -> 'FilePath':
        if len(text) >= 2 and text.startswith('"') and text.endswith('"'):
            return cls(text[1:-1], True)
        return cls(text, False)

    def render(self) -> str:
        if self.quoted or ' ' in self.path:
            return f'"{self.path}"'
        return self.path

    def __str__(self) -> str:
        return self.path
