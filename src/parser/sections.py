"""
key: value 分段的通用实现
General / Editor / Metadata / Difficulty 通过字段表声明各自的键
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable, ClassVar, Dict, List, Optional

from ..utils.errors import ErrorKind, ParseError
from ..utils.lines import is_blank, parse_key_value_line, split_lines
from ..utils.numbers import format_bool, format_decimal, parse_bool, parse_decimal, parse_int
from ..utils.versioning import LATEST_VERSION, MIN_VERSION

logger = logging.getLogger(__name__)


@dataclass
class FieldSpec:
    """单个字段的声明"""
    key: str
    attr: str
    parse: Callable[[str, int], Any]
    render: Callable[[Any, int], Optional[str]]
    default: Callable[[int], Any] = lambda version: None
    min_version: int = MIN_VERSION
    max_version: int = LATEST_VERSION

    def in_version(self, version: int) -> bool:
        return self.min_version <= version <= self.max_version


def string_field(key: str, attr: str, default: Optional[str] = None, **kwargs) -> FieldSpec:
    return FieldSpec(key, attr, lambda s, v: s, lambda value, v: value,
                     lambda v: default, **kwargs)


def int_field(key: str, attr: str, default: Optional[int] = None, **kwargs) -> FieldSpec:
    return FieldSpec(key, attr, lambda s, v: parse_int(s), lambda value, v: str(value),
                     lambda v: default, **kwargs)


def decimal_field(key: str, attr: str, default: Optional[str] = None, **kwargs) -> FieldSpec:
    return FieldSpec(key, attr, lambda s, v: parse_decimal(s), lambda value, v: format_decimal(value),
                     lambda v: None if default is None else Decimal(default), **kwargs)


def bool_field(key: str, attr: str, default: Optional[bool] = None, **kwargs) -> FieldSpec:
    return FieldSpec(key, attr, lambda s, v: parse_bool(s), lambda value, v: format_bool(value),
                     lambda v: default, **kwargs)


def enum_field(key: str, attr: str, enum_cls, **kwargs) -> FieldSpec:
    """枚举字段，版本限制由枚举自身决定"""
    return FieldSpec(key, attr, enum_cls.parse, lambda value, v: value.render(v),
                     enum_cls.default, **kwargs)


class KeyValueSection:
    """key: value 分段基类，子类为 dataclass 并声明 FIELDS"""

    FIELDS: ClassVar[List[FieldSpec]] = []
    # 冒号后的默认空白
    DEFAULT_SPACING: ClassVar[str] = " "

    @classmethod
    def _field_map(cls) -> Dict[str, FieldSpec]:
        return {spec.key: spec for spec in cls.FIELDS}

    @classmethod
    def parse(cls, text: str, version: int):
        """解析分段正文，错误的行号相对于正文第一行"""
        section = cls()
        fields = cls._field_map()
        seen = set()

        for index, line in enumerate(split_lines(text)):
            if is_blank(line):
                continue
            try:
                kv = parse_key_value_line(line)
                spec = fields.get(kv.key)
                if spec is None:
                    raise ParseError(ErrorKind.INVALID_KEY, kv.key)
                if kv.key in seen:
                    raise ParseError(ErrorKind.DUPLICATE_FIELD, kv.key)
                seen.add(kv.key)
                value = spec.parse(kv.value, version) if spec.in_version(version) else None
            except ParseError as e:
                raise e.shifted(index)

            if value is None:
                logger.warning(f"v{version} 不支持字段 {kv.key}，已忽略")
                continue
            setattr(section, spec.attr, value)
            section.spacing[kv.key] = kv.spacing

        return section

    def render(self, version: int) -> Optional[str]:
        """输出分段正文，None 值和当前版本不支持的字段会被省略"""
        lines = []
        for spec in self.FIELDS:
            value = getattr(self, spec.attr)
            if value is None or not spec.in_version(version):
                continue
            rendered = spec.render(value, version)
            if rendered is None:
                continue
            spacing = self.spacing.get(spec.key, self.DEFAULT_SPACING)
            lines.append(f"{spec.key}:{spacing}{rendered}")
        return '\n'.join(lines)

    @classmethod
    def default(cls, version: int):
        section = cls()
        for spec in cls.FIELDS:
            if spec.in_version(version):
                setattr(section, spec.attr, spec.default(version))
        return section

    def reset_spacing(self):
        """恢复默认空白"""
        self.spacing.clear()
