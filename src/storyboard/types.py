"""
故事板枚举类型
图层、原点、缓动、循环类型、参数以及触发器类型
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from ..utils.errors import ErrorKind, ParseError
from ..utils.numbers import INT_PATTERN
from ..utils.versioning import LATEST_VERSION, VersionedEnum


class Layer(VersionedEnum):
    """故事板图层"""
    BACKGROUND = "Background"
    FAIL = "Fail"
    PASS = "Pass"
    FOREGROUND = "Foreground"

    @property
    def index(self) -> int:
        """音效事件使用的整数形式"""
        return list(Layer).index(self)

    @classmethod
    def from_index(cls, index: int) -> 'Layer':
        layers = list(cls)
        if not 0 <= index < len(layers):
            raise ParseError(ErrorKind.INVALID_LAYER, str(index))
        return layers[index]


class Origin(VersionedEnum):
    """图片原点"""
    TOP_LEFT = "TopLeft"
    CENTRE = "Centre"
    CENTRE_LEFT = "CentreLeft"
    TOP_RIGHT = "TopRight"
    BOTTOM_CENTRE = "BottomCentre"
    TOP_CENTRE = "TopCentre"
    CUSTOM = "Custom"
    CENTRE_RIGHT = "CentreRight"
    BOTTOM_LEFT = "BottomLeft"
    BOTTOM_RIGHT = "BottomRight"


class LoopType(VersionedEnum):
    """动画循环方式"""
    LOOP_FOREVER = "LoopForever"
    LOOP_ONCE = "LoopOnce"

    @classmethod
    def default(cls, version: int = LATEST_VERSION):
        return cls.LOOP_FOREVER


class Easing(VersionedEnum):
    """缓动函数，以整数编号引用"""
    LINEAR = 0
    EASING_OUT = 1
    EASING_IN = 2
    QUAD_IN = 3
    QUAD_OUT = 4
    QUAD_IN_OUT = 5
    CUBIC_IN = 6
    CUBIC_OUT = 7
    CUBIC_IN_OUT = 8
    QUART_IN = 9
    QUART_OUT = 10
    QUART_IN_OUT = 11
    QUINT_IN = 12
    QUINT_OUT = 13
    QUINT_IN_OUT = 14
    SINE_IN = 15
    SINE_OUT = 16
    SINE_IN_OUT = 17
    EXPO_IN = 18
    EXPO_OUT = 19
    EXPO_IN_OUT = 20
    CIRC_IN = 21
    CIRC_OUT = 22
    CIRC_IN_OUT = 23
    ELASTIC_IN = 24
    ELASTIC_OUT = 25
    ELASTIC_HALF_OUT = 26
    ELASTIC_QUARTER_OUT = 27
    ELASTIC_IN_OUT = 28
    BACK_IN = 29
    BACK_OUT = 30
    BACK_IN_OUT = 31
    BOUNCE_IN = 32
    BOUNCE_OUT = 33
    BOUNCE_IN_OUT = 34


class Parameter(VersionedEnum):
    """P 命令的参数"""
    IMAGE_FLIP_HORIZONTAL = "H"
    IMAGE_FLIP_VERTICAL = "V"
    USE_ADDITIVE_COLOUR_BLENDING = "A"


class TriggerSampleSet(VersionedEnum):
    """触发器中的音效组"""
    ALL = "All"
    NORMAL = "Normal"
    SOFT = "Soft"
    DRUM = "Drum"


class Addition(VersionedEnum):
    """触发器中的附加音效"""
    WHISTLE = "Whistle"
    FINISH = "Finish"
    CLAP = "Clap"


class TriggerKind(Enum):
    """触发条件"""
    HIT_SOUND = "HitSound"
    PASSING = "Passing"
    FAILING = "Failing"


HIT_SOUND_PREFIX = "HitSound"
MAX_HIT_SOUND_FIELDS = 4


def _split_hit_sound_fields(text: str) -> List[str]:
    """在每个大写字母或数字处切分（第一个字符除外）"""
    fields = []
    builder = ""
    for i, ch in enumerate(text):
        if i != 0 and (ch.isupper() or ch.isdigit()):
            fields.append(builder)
            builder = ""
        builder += ch
    fields.append(builder)
    return fields


@dataclass
class TriggerType:
    """
    T 命令的触发类型

    HitSound 之后依次可跟 sampleSet、additionsSampleSet、addition、customSampleSet，
    每段按位置尝试解析，失败则换下一个位置
    """
    kind: TriggerKind = TriggerKind.HIT_SOUND
    sample_set: Optional[TriggerSampleSet] = None
    additions_sample_set: Optional[TriggerSampleSet] = None
    addition: Optional[Addition] = None
    custom_sample_set: Optional[int] = None
    # Passing / Failing 是否写作 HitSoundPassing / HitSoundFailing
    hit_sound_prefix: bool = field(default=False, compare=False)

    @classmethod
    def passing(cls) -> 'TriggerType':
        return cls(TriggerKind.PASSING)

    @classmethod
    def failing(cls) -> 'TriggerType':
        return cls(TriggerKind.FAILING)

    @classmethod
    def parse(cls, text: str, version: int = LATEST_VERSION) -> 'TriggerType':
        text = text.strip()
        for kind in (TriggerKind.PASSING, TriggerKind.FAILING):
            if text == kind.value:
                return cls(kind)
            if text == HIT_SOUND_PREFIX + kind.value:
                return cls(kind, hit_sound_prefix=True)

        if not text.startswith(HIT_SOUND_PREFIX):
            raise ParseError(ErrorKind.UNKNOWN_TRIGGER_TYPE, text)

        trigger = cls()
        tail = text[len(HIT_SOUND_PREFIX):]
        if not tail:
            return trigger

        fields = _split_hit_sound_fields(tail)
        if len(fields) > MAX_HIT_SOUND_FIELDS:
            raise ParseError(ErrorKind.TOO_MANY_HIT_SOUND_FIELDS, text)

        position = 0
        for token in fields:
            while True:
                if position >= MAX_HIT_SOUND_FIELDS:
                    raise ParseError(ErrorKind.UNKNOWN_HIT_SOUND_TYPE, token)
                if trigger._try_assign(position, token, version):
                    position += 1
                    break
                if position == MAX_HIT_SOUND_FIELDS - 1:
                    raise ParseError(ErrorKind.UNKNOWN_HIT_SOUND_TYPE, token)
                position += 1
        return trigger

    def _try_assign(self, position: int, token: str, version: int) -> bool:
        """尝试把 token 当作第 position 个字段"""
        try:
            if position == 0:
                self.sample_set = TriggerSampleSet.parse(token, version)
            elif position == 1:
                self.additions_sample_set = TriggerSampleSet.parse(token, version)
            elif position == 2:
                self.addition = Addition.parse(token, version)
            elif INT_PATTERN.match(token):
                self.custom_sample_set = int(token)
            else:
                return False
        except ParseError:
            return False
        return True

    def render(self, version: int = LATEST_VERSION) -> str:
        if self.kind != TriggerKind.HIT_SOUND:
            prefix = HIT_SOUND_PREFIX if self.hit_sound_prefix else ""
            return prefix + self.kind.value

        parts = [HIT_SOUND_PREFIX]
        for value in (self.sample_set, self.additions_sample_set, self.addition):
            if value is not None:
                parts.append(value.render(version))
        if self.custom_sample_set is not None:
            parts.append(str(self.custom_sample_set))
        return ''.join(parts)
