"""
[Editor] 分段
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List, Optional

from ..utils.numbers import parse_int
from .sections import FieldSpec, KeyValueSection, decimal_field, int_field


def _parse_bookmarks(text: str, version: int) -> List[int]:
    """逗号分隔的书签时间"""
    if not text.strip():
        return []
    return [parse_int(item) for item in text.split(',')]


@dataclass
class Editor(KeyValueSection):
    """编辑器设置"""
    bookmarks: Optional[List[int]] = None
    distance_spacing: Optional[Decimal] = None
    beat_divisor: Optional[Decimal] = None
    grid_size: Optional[int] = None
    timeline_zoom: Optional[Decimal] = None
    # 旧版本文件中的编辑器当前时间
    current_time: Optional[int] = None
    spacing: Dict[str, str] = field(default_factory=dict, compare=False, repr=False)

    FIELDS = [
        FieldSpec("Bookmarks", "bookmarks", _parse_bookmarks,
                  lambda value, v: ','.join(str(b) for b in value)),
        decimal_field("DistanceSpacing", "distance_spacing", "1"),
        decimal_field("BeatDivisor", "beat_divisor", "4"),
        int_field("GridSize", "grid_size", 4),
        decimal_field("TimelineZoom", "timeline_zoom", "1"),
        int_field("CurrentTime", "current_time"),
    ]
