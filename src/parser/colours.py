"""
[Colours] 分段
v4 及以前不存在
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from ..utils.errors import ErrorKind, ParseError
from ..utils.lines import is_blank, parse_key_value_line, split_lines
from ..utils.numbers import parse_int
from ..utils.types import Rgb


class ColourType(Enum):
    """颜色条目类型"""
    COMBO = "Combo"
    SLIDER_TRACK_OVERRIDE = "SliderTrackOverride"
    SLIDER_BORDER = "SliderBorder"


@dataclass
class Colour:
    """单个颜色条目"""
    colour_type: ColourType
    rgb: Rgb
    # 仅 Combo 使用
    combo: Optional[int] = None

    @property
    def key(self) -> str:
        if self.colour_type == ColourType.COMBO:
            return f"Combo{self.combo}"
        return self.colour_type.value

    @classmethod
    def parse(cls, line: str, version: int) -> Optional['Colour']:
        if version <= 4:
            return None
        kv = parse_key_value_line(line)
        rgb = Rgb.parse(kv.value)

        if kv.key.startswith(ColourType.COMBO.value):
            combo = parse_int(kv.key[len(ColourType.COMBO.value):], ErrorKind.INVALID_COMBO_COUNT, minimum=0)
            return cls(ColourType.COMBO, rgb, combo)
        for colour_type in (ColourType.SLIDER_TRACK_OVERRIDE, ColourType.SLIDER_BORDER):
            if kv.key == colour_type.value:
                return cls(colour_type, rgb)
        raise ParseError(ErrorKind.UNKNOWN_COLOUR_TYPE, kv.key)

    def render(self, version: int) -> Optional[str]:
        if version <= 4:
            return None
        return f"{self.key} : {self.rgb.render()}"


@dataclass
class Colours:
    """颜色列表"""
    colours: List[Colour] = field(default_factory=list)

    @classmethod
    def parse(cls, text: str, version: int) -> Optional['Colours']:
        if version <= 4:
            return None
        colours = []
        for index, line in enumerate(split_lines(text)):
            if is_blank(line):
                continue
            try:
                colours.append(Colour.parse(line, version))
            except ParseError as e:
                raise e.shifted(index)
        return cls(colours)

    def render(self, version: int) -> Optional[str]:
        if version <= 4:
            return None
        return '\n'.join(colour.render(version) for colour in self.colours)

    @classmethod
    def default(cls, version: int) -> Optional['Colours']:
        if version <= 4:
            return None
        return cls()

    def combo_colours(self) -> List[Rgb]:
        """按编号排序的连击颜色"""
        combos = [c for c in self.colours if c.colour_type == ColourType.COMBO]
        return [c.rgb for c in sorted(combos, key=lambda c: c.combo)]
