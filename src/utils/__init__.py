"""
工具模块
错误、版本协议、数值与行解析、配置、文本规范化
"""

from .errors import ErrorCategory, ErrorKind, ParseError
from .versioning import (
    MIN_VERSION,
    LATEST_VERSION,
    OLD_VERSION_TIME_OFFSET,
    VersionedEnum,
    check_version,
    is_old_version,
)
from .types import Number, Position, Rgb, FilePath
from .lines import split_lines, split_sections, FieldReader
from .config import ParserConfig, load_config, configure_logging
from .normalise import canonicalise, equivalent, assert_equivalent

__all__ = [
    'ErrorCategory',
    'ErrorKind',
    'ParseError',
    'MIN_VERSION',
    'LATEST_VERSION',
    'OLD_VERSION_TIME_OFFSET',
    'VersionedEnum',
    'check_version',
    'is_old_version',
    'Number',
    'Position',
    'Rgb',
    'FilePath',
    'split_lines',
    'split_sections',
    'FieldReader',
    'ParserConfig',
    'load_config',
    'configure_logging',
    'canonicalise',
    'equivalent',
    'assert_equivalent',
]
