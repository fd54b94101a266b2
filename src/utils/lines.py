"""
行处理工具
逗号字段、竖线列表、key: value 行以及 [Section] 分段
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Callable, List, Optional, Tuple, TypeVar

from .errors import ErrorKind, ParseError
from .numbers import parse_decimal, parse_int


T = TypeVar('T')

BOM = '\ufeff'


def split_lines(text: str) -> List[str]:
    """按 \\n 或 \\r\\n 分行，末尾换行会留下一个空行"""
    return [line[:-1] if line.endswith('\r') else line for line in text.split('\n')]


def is_blank(line: str) -> bool:
    return not line.strip()


class FieldReader:
    """按分隔符逐个读取字段"""

    def __init__(self, text: str, separator: str = ','):
        self.separator = separator
        self._fields = text.split(separator)
        self._index = 0

    def has_more(self) -> bool:
        return self._index < len(self._fields)

    def peek(self) -> Optional[str]:
        if self.has_more():
            return self._fields[self._index]
        return None

    def next(self, missing: ErrorKind) -> str:
        """读取下一个字段，没有则抛出 missing 错误"""
        if not self.has_more():
            raise ParseError(missing)
        value = self._fields[self._index]
        self._index += 1
        return value

    def next_int(self, missing: ErrorKind, invalid: ErrorKind, **bounds) -> int:
        return parse_int(self.next(missing), invalid, **bounds)

    def next_decimal(self, missing: ErrorKind, invalid: ErrorKind) -> Decimal:
        return parse_decimal(self.next(missing), invalid)

    def rest(self, missing: ErrorKind) -> str:
        """读取剩余全部内容（保留其中的分隔符）"""
        if not self.has_more():
            raise ParseError(missing)
        value = self.separator.join(self._fields[self._index:])
        self._index = len(self._fields)
        return value

    def remaining(self) -> List[str]:
        values = self._fields[self._index:]
        self._index = len(self._fields)
        return values


def parse_pipe_list(text: str, parse_item: Callable[[str], T]) -> List[T]:
    """解析 a|b|c 形式的列表，空字符串返回空列表"""
    if text == "":
        return []
    return [parse_item(item) for item in text.split('|')]


def render_pipe_list(items: List[T], render_item: Callable[[T], str] = str) -> str:
    return '|'.join(render_item(item) for item in items)


@dataclass
class KeyValueLine:
    """key: value 行"""
    key: str
    value: str
    # 冒号后的空白
    spacing: str = ""
    # key 与冒号之间的空白
    key_spacing: str = ""


def parse_key_value_line(line: str) -> KeyValueLine:
    """解析 key: value 行，保留冒号两侧的空白"""
    colon = line.find(':')
    if colon < 0:
        raise ParseError(ErrorKind.MISSING_COLON, line)
    raw_key = line[:colon]
    key = raw_key.rstrip()
    raw_value = line[colon + 1:]
    value = raw_value.lstrip(' \t')
    return KeyValueLine(
        key=key.lstrip(),
        value=value.rstrip(),
        spacing=raw_value[:len(raw_value) - len(value)],
        key_spacing=raw_key[len(key):],
    )


@dataclass
class SectionBlock:
    """一个 [Name] 分段"""
    name: str
    # 标题行的行号（相对于整个文本）
    header_index: int
    # 正文第一行的行号
    body_start: int
    body: List[str] = field(default_factory=list)
    # 正文末尾的空行数
    trailing_blank: int = 0

    @property
    def text(self) -> str:
        return '\n'.join(self.body)


def parse_section_header(line: str) -> Optional[str]:
    """标题行返回分段名，不是标题行返回 None"""
    stripped = line.strip()
    if not stripped.startswith('['):
        return None
    if not stripped.endswith(']'):
        raise ParseError(ErrorKind.SECTION_NAME_NO_CLOSE_BRACKET, stripped)
    return stripped[1:-1]


def split_sections(lines: List[str], start: int = 0) -> Tuple[int, List[SectionBlock]]:
    """
    从 start 行开始切分分段

    Returns:
        (第一个分段之前的空行数, 分段列表)
    """
    leading_blank = 0
    sections: List[SectionBlock] = []
    current: Optional[SectionBlock] = None

    for index in range(start, len(lines)):
        line = lines[index]
        try:
            name = parse_section_header(line)
        except ParseError as e:
            raise e.shifted(index)

        if name is not None:
            if current is not None:
                _close_section(current)
            current = SectionBlock(name=name, header_index=index, body_start=index + 1)
            sections.append(current)
        elif current is None:
            if not is_blank(line):
                raise ParseError(ErrorKind.UNKNOWN_SECTION_NAME, line.strip(), index)
            leading_blank += 1
        else:
            current.body.append(line)

    if current is not None:
        _close_section(current)
    return leading_blank, sections


def _close_section(section: SectionBlock):
    """把正文末尾的空行挪到 trailing_blank"""
    while section.body and is_blank(section.body[-1]):
        section.body.pop()
        section.trailing_blank += 1


def render_section(name: str, body: Optional[str], trailing_blank: int = 0) -> List[str]:
    """输出 [Name]、正文以及之后的空行"""
    lines = [f"[{name}]"]
    if body:
        lines.extend(body.split('\n'))
    lines.extend([""] * trailing_blank)
    return lines
