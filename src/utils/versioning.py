"""
版本协议
每个类型都提供 parse(text, version) / render(version) / default(version)，
返回 None 表示该版本下不存在或不输出
"""

from enum import Enum
from typing import Optional

from .errors import ErrorKind, ParseError
from .numbers import parse_int


MIN_VERSION = 3
LATEST_VERSION = 14

# v3-v4 的时间整体偏移 24ms
OLD_VERSION_TIME_OFFSET = 24


def check_version(version: int) -> int:
    """检查版本号是否受支持"""
    if not MIN_VERSION <= version <= LATEST_VERSION:
        raise ParseError(ErrorKind.INVALID_FILE_VERSION, str(version))
    return version


def is_old_version(version: int) -> bool:
    """v3-v4 需要时间偏移"""
    return MIN_VERSION <= version <= 4


class VersionedEnum(Enum):
    """以文本或整数值序列化的枚举"""

    @classmethod
    def parse(cls, text: str, version: int = LATEST_VERSION,
              kind: ErrorKind = ErrorKind.UNKNOWN_VARIANT):
        sample = next(iter(cls)).value
        if isinstance(sample, int):
            raw = parse_int(text, kind)
        else:
            raw = text.strip()
        try:
            return cls(raw)
        except ValueError:
            raise ParseError(kind, text) from None

    def render(self, version: int = LATEST_VERSION) -> Optional[str]:
        return str(self.value)

    @classmethod
    def default(cls, version: int = LATEST_VERSION):
        return None
