"""
[Variables] 分段（.osb）

$name=value，事件行中出现的 $name 在解析前替换为 value，输出时按整个字段替换回来
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Pattern

from ..utils.errors import ErrorKind, ParseError
from ..utils.lines import is_blank, split_lines
from ..utils.versioning import LATEST_VERSION

VARIABLE_HEADER = "$"


@dataclass
class Variable:
    name: str
    value: str

    @classmethod
    def parse(cls, line: str, version: int = LATEST_VERSION) -> 'Variable':
        if not line.startswith(VARIABLE_HEADER):
            raise ParseError(ErrorKind.MISSING_VARIABLE_HEADER, line)
        name, equals, value = line[len(VARIABLE_HEADER):].partition('=')
        if not equals:
            raise ParseError(ErrorKind.MISSING_EQUALS, line)
        return cls(name, value)

    def render(self, version: int = LATEST_VERSION) -> Optional[str]:
        return f"{VARIABLE_HEADER}{self.name}={self.value}"


def _alternation(keys: List[str]) -> Optional[Pattern]:
    """长的优先，避免 $ab 被 $a 抢先匹配"""
    keys = sorted((k for k in keys if k), key=len, reverse=True)
    if not keys:
        return None
    return re.compile('|'.join(re.escape(k) for k in keys))


@dataclass
class Variables:
    """变量列表"""
    variables: List[Variable] = field(default_factory=list)

    @classmethod
    def parse(cls, text: str, version: int = LATEST_VERSION) -> Optional['Variables']:
        variables = []
        for index, line in enumerate(split_lines(text)):
            if is_blank(line):
                continue
            try:
                variables.append(Variable.parse(line.rstrip(), version))
            except ParseError as e:
                raise e.shifted(index)
        return cls(variables)

    def render(self, version: int = LATEST_VERSION) -> Optional[str]:
        return '\n'.join(v.render(version) for v in self.variables)

    @classmethod
    def default(cls, version: int = LATEST_VERSION) -> 'Variables':
        return cls()

    def _lookup(self) -> Dict[str, str]:
        return {VARIABLE_HEADER + v.name: v.value for v in self.variables}

    def substitute(self, line: str) -> str:
        """把 $name 替换为变量值"""
        lookup = self._lookup()
        pattern = _alternation(list(lookup))
        if pattern is None:
            return line
        return pattern.sub(lambda m: lookup[m.group(0)], line)

    def restore(self, line: str) -> str:
        """
        把变量值替换回 $name，第一个字段（事件或命令类型）保持不变

        只替换占满整个逗号字段的值（值本身可以跨多个字段，如 320,240），
        替换后再代入一次必须得到原行，否则保留原行
        """
        reverse: Dict[str, str] = {}
        for name, value in self._lookup().items():
            if value:
                reverse.setdefault(value, name)
        if not reverse:
            return line

        # 跨字段多的值优先
        candidates = sorted(((value.split(','), name) for value, name in reverse.items()),
                            key=lambda c: len(c[0]), reverse=True)
        fields = line.split(',')
        restored = fields[:1]
        i = 1
        while i < len(fields):
            for parts, name in candidates:
                if fields[i:i + len(parts)] == parts:
                    restored.append(name)
                    i += len(parts)
                    break
            else:
                restored.append(fields[i])
                i += 1

        result = ','.join(restored)
        if self.substitute(result) != line:
            return line
        return result
