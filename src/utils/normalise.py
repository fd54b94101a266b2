"""
文本规范化
用于比较两份谱面文本是否等价（去掉空行和 BOM，key: value 分段内排序）
"""

import difflib
from typing import List

from .lines import BOM, parse_section_header, split_lines


# 行内顺序无关的分段
KEY_VALUE_SECTIONS = frozenset({'General', 'Editor', 'Metadata', 'Difficulty', 'Colours'})

# 行首缩进有意义的分段
INDENTED_SECTIONS = frozenset({'Events'})


def _normalise_key_value(line: str) -> str:
    key, sep, value = line.partition(':')
    if not sep:
        return line
    return f"{key.strip()}:{value.strip()}"


def canonicalise(text: str) -> str:
    """规范化谱面文本"""
    text = text.replace(BOM, '')
    result: List[str] = []
    pending: List[str] = []
    section = None

    for raw in split_lines(text):
        line = raw.rstrip()
        if not line.strip():
            continue

        if line.lstrip().startswith('[') and line.rstrip().endswith(']'):
            result.extend(sorted(pending))
            pending = []
            section = parse_section_header(line)
            result.append(line.strip())
            continue

        if section not in INDENTED_SECTIONS:
            line = line.strip()

        if section in KEY_VALUE_SECTIONS:
            pending.append(_normalise_key_value(line))
        else:
            result.append(line)

    result.extend(sorted(pending))
    return '\n'.join(result)


def equivalent(a: str, b: str) -> bool:
    """两份文本规范化后是否相同"""
    return canonicalise(a) == canonicalise(b)


def assert_equivalent(a: str, b: str):
    """不等价时抛出 AssertionError，并附带差异"""
    left, right = canonicalise(a), canonicalise(b)
    if left != right:
        diff = '\n'.join(difflib.unified_diff(
            left.splitlines(), right.splitlines(), 'left', 'right', lineterm=''
        ))
        raise AssertionError(f"谱面文本不等价:\n{diff}")
