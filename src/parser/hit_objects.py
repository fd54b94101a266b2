"""
[HitObjects] 分段

物件行格式: x,y,time,type,hitSound[,objectParams][,hitSample]
type 的位决定物件种类:
    bit0 圆圈, bit1 滑条, bit2 新连击, bit3 转盘, bit4-6 跳过的连击色数, bit7 mania 长条
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import List, Optional, Union

from ..utils.errors import ErrorKind, ParseError
from ..utils.lines import FieldReader, is_blank, parse_pipe_list, render_pipe_list, split_lines
from ..utils.numbers import format_decimal, parse_int
from ..utils.types import Position


class HitObjectType(Enum):
    """物件种类及其类型位，顺序即判定优先级"""
    HIT_CIRCLE = 0b1
    SLIDER = 0b10
    SPINNER = 0b1000
    OSU_MANIA_HOLD = 0b10000000


NEW_COMBO_BIT = 0b100
COMBO_SKIP_SHIFT = 4
COMBO_SKIP_MASK = 0b111


@dataclass
class HitSound:
    """打击音效位：normal 1, whistle 2, finish 4, clap 8"""
    bits: int = 0

    NORMAL = 0b1
    WHISTLE = 0b10
    FINISH = 0b100
    CLAP = 0b1000

    def _get(self, flag: int) -> bool:
        return bool(self.bits & flag)

    def _set(self, flag: int, value: bool):
        if value:
            self.bits |= flag
        else:
            self.bits &= ~flag

    @property
    def normal(self) -> bool:
        # 没有任何音效位时游戏按 normal 处理
        if self.bits & 0b1111 == 0:
            return True
        return self._get(self.NORMAL)

    @normal.setter
    def normal(self, value: bool):
        self._set(self.NORMAL, value)

    @property
    def whistle(self) -> bool:
        return self._get(self.WHISTLE)

    @whistle.setter
    def whistle(self, value: bool):
        self._set(self.WHISTLE, value)

    @property
    def finish(self) -> bool:
        return self._get(self.FINISH)

    @finish.setter
    def finish(self, value: bool):
        self._set(self.FINISH, value)

    @property
    def clap(self) -> bool:
        return self._get(self.CLAP)

    @clap.setter
    def clap(self, value: bool):
        self._set(self.CLAP, value)

    @classmethod
    def parse(cls, text: str, kind: ErrorKind = ErrorKind.INVALID_HITSOUND) -> 'HitSound':
        return cls(parse_int(text, kind, minimum=0))

    def render(self) -> str:
        return str(self.bits)


class HitSampleSet(Enum):
    """打击音效组"""
    NO_CUSTOM_SAMPLE_SET = 0
    NORMAL_SET = 1
    SOFT_SET = 2
    DRUM_SET = 3

    @classmethod
    def parse(cls, text: str, kind: ErrorKind = ErrorKind.INVALID_HIT_SAMPLE) -> 'HitSampleSet':
        if not text.strip():
            return cls.NO_CUSTOM_SAMPLE_SET
        return cls(parse_int(text, kind, minimum=0, maximum=3))


@dataclass
class HitSample:
    """
    物件附带的音效信息 normalSet:additionSet:index:volume:filename

    index 为 0 时使用时间点的设置，volume 为 0 时同理
    """
    normal_set: HitSampleSet = HitSampleSet.NO_CUSTOM_SAMPLE_SET
    addition_set: HitSampleSet = HitSampleSet.NO_CUSTOM_SAMPLE_SET
    index: int = 0
    volume: int = 0
    filename: str = ""
    # 解析时出现的字段数，输出时原样保留；None 时按版本决定
    field_count: Optional[int] = field(default=None, compare=False, repr=False)

    @classmethod
    def parse(cls, text: str, version: int) -> Optional['HitSample']:
        # filename 可以包含冒号，最多切 4 次
        fields = text.split(':', 4)
        field_count = len(fields)
        fields += [""] * (5 - len(fields))
        normal, addition, index, volume, filename = fields

        sample = cls(
            normal_set=HitSampleSet.parse(normal),
            addition_set=HitSampleSet.parse(addition),
            filename=filename,
            field_count=field_count,
        )
        if index.strip():
            sample.index = parse_int(index, ErrorKind.INVALID_HIT_SAMPLE, minimum=0)
        if volume.strip():
            sample.volume = parse_int(volume, ErrorKind.INVALID_HIT_SAMPLE, minimum=0, maximum=100)
        return sample

    def render(self, version: int) -> Optional[str]:
        fields = [str(self.normal_set.value), str(self.addition_set.value), str(self.index),
                  str(self.volume), self.filename]
        if self.field_count is not None:
            return ':'.join(fields[:self.field_count])
        if version <= 9:
            return None
        if version < 12:
            fields = fields[:3]
        return ':'.join(fields)

    @classmethod
    def default(cls, version: int) -> Optional['HitSample']:
        if version <= 9:
            return None
        return cls()


class CurveType(Enum):
    """滑条曲线类型"""
    BEZIER = "B"
    CENTRIPETAL = "C"
    LINEAR = "L"
    PERFECT_CIRCLE = "P"


@dataclass
class EdgeSet:
    """滑条端点的音效组 normal:addition"""
    normal_set: HitSampleSet = HitSampleSet.NO_CUSTOM_SAMPLE_SET
    addition_set: HitSampleSet = HitSampleSet.NO_CUSTOM_SAMPLE_SET

    @classmethod
    def parse(cls, text: str) -> 'EdgeSet':
        normal, sep, addition = text.partition(':')
        if not sep:
            raise ParseError(ErrorKind.INVALID_EDGE_SET, text)
        return cls(
            HitSampleSet.parse(normal, ErrorKind.INVALID_EDGE_SET),
            HitSampleSet.parse(addition, ErrorKind.INVALID_EDGE_SET),
        )

    def render(self) -> str:
        return f"{self.normal_set.value}:{self.addition_set.value}"


def _parse_curve_point(text: str) -> Position:
    x, sep, y = text.partition(':')
    if not sep:
        raise ParseError(ErrorKind.INVALID_CURVE_POINT, text)
    return Position(
        parse_int(x, ErrorKind.INVALID_CURVE_POINT),
        parse_int(y, ErrorKind.INVALID_CURVE_POINT),
    )


def _render_curve_point(point: Position) -> str:
    return f"{point.x}:{point.y}"


@dataclass
class HitCircle:
    """圆圈"""


@dataclass
class Slider:
    """滑条"""
    curve_type: CurveType = CurveType.BEZIER
    curve_points: List[Position] = field(default_factory=list)
    slides: int = 1
    length: Decimal = Decimal(0)
    # None 表示原文省略了该字段
    edge_sounds: Optional[List[HitSound]] = None
    edge_sets: Optional[List[EdgeSet]] = None


@dataclass
class Spinner:
    """转盘"""
    end_time: int = 0


@dataclass
class OsuManiaHold:
    """mania 长条"""
    end_time: int = 0


ObjectParams = Union[HitCircle, Slider, Spinner, OsuManiaHold]

_PARAMS_TYPE = {
    HitCircle: HitObjectType.HIT_CIRCLE,
    Slider: HitObjectType.SLIDER,
    Spinner: HitObjectType.SPINNER,
    OsuManiaHold: HitObjectType.OSU_MANIA_HOLD,
}


@dataclass
class HitObject:
    """打击物件"""
    position: Position = field(default_factory=Position)
    time: int = 0
    obj_params: ObjectParams = field(default_factory=HitCircle)
    new_combo: bool = False
    # 新连击时跳过的连击色数量，0-7
    combo_skip_count: int = 0
    hitsound: HitSound = field(default_factory=HitSound)
    hitsample: Optional[HitSample] = None

    def __post_init__(self):
        if not 0 <= self.combo_skip_count <= COMBO_SKIP_MASK:
            raise ParseError(ErrorKind.INVALID_COMBO_SKIP_COUNT, str(self.combo_skip_count))

    @classmethod
    def hitcircle_default(cls) -> 'HitObject':
        return cls(hitsample=HitSample())

    @classmethod
    def slider_default(cls) -> 'HitObject':
        return cls(obj_params=Slider(edge_sounds=[], edge_sets=[]), hitsample=HitSample())

    @classmethod
    def spinner_default(cls) -> 'HitObject':
        return cls(obj_params=Spinner(), hitsample=HitSample())

    @classmethod
    def osu_mania_hold_default(cls) -> 'HitObject':
        return cls(obj_params=OsuManiaHold(), hitsample=HitSample())

    @property
    def object_type(self) -> HitObjectType:
        return _PARAMS_TYPE[type(self.obj_params)]

    def type_byte(self) -> int:
        """由物件种类、新连击和跳过数重建 type 字段"""
        value = self.object_type.value
        if self.new_combo:
            value |= NEW_COMBO_BIT
        return value | (self.combo_skip_count << COMBO_SKIP_SHIFT)

    @classmethod
    def parse(cls, line: str, version: int) -> Optional['HitObject']:
        return HitObjectParser(version).parse(line)

    def render(self, version: int) -> Optional[str]:
        return HitObjectRenderer(version).render(self)


class HitObjectParser:
    """单行物件解析器"""

    def __init__(self, version: int):
        self.version = version

    def parse(self, line: str) -> HitObject:
        reader = FieldReader(line)

        x = reader.next_int(ErrorKind.MISSING_X, ErrorKind.INVALID_X)
        y = reader.next_int(ErrorKind.MISSING_Y, ErrorKind.INVALID_Y)
        time = reader.next_int(ErrorKind.MISSING_TIME, ErrorKind.INVALID_TIME)
        obj_type = reader.next_int(ErrorKind.MISSING_OBJ_TYPE, ErrorKind.INVALID_OBJ_TYPE, minimum=0)
        hitsound = HitSound.parse(reader.next(ErrorKind.MISSING_HITSOUND))

        hit_object = HitObject(
            position=Position(x, y),
            time=time,
            new_combo=bool(obj_type & NEW_COMBO_BIT),
            combo_skip_count=(obj_type >> COMBO_SKIP_SHIFT) & COMBO_SKIP_MASK,
            hitsound=hitsound,
        )

        # 按位的优先级判断种类
        if obj_type & HitObjectType.HIT_CIRCLE.value:
            hit_object.obj_params = HitCircle()
            hit_object.hitsample = self._parse_trailing_hitsample(reader)
        elif obj_type & HitObjectType.SLIDER.value:
            hit_object.obj_params, hit_object.hitsample = self._parse_slider(reader)
        elif obj_type & HitObjectType.SPINNER.value:
            end_time = reader.next_int(ErrorKind.MISSING_END_TIME, ErrorKind.INVALID_END_TIME)
            hit_object.obj_params = Spinner(end_time)
            hit_object.hitsample = self._parse_trailing_hitsample(reader)
        elif obj_type & HitObjectType.OSU_MANIA_HOLD.value:
            hit_object.obj_params, hit_object.hitsample = self._parse_mania_hold(reader)
        else:
            raise ParseError(ErrorKind.UNKNOWN_OBJ_TYPE, str(obj_type))

        return hit_object

    def _parse_trailing_hitsample(self, reader: FieldReader) -> Optional[HitSample]:
        if not reader.has_more():
            return None
        return HitSample.parse(reader.rest(ErrorKind.INVALID_HIT_SAMPLE), self.version)

    def _parse_slider(self, reader: FieldReader):
        """curveType|curvePoints,slides,length[,edgeSounds[,edgeSets[,hitSample]]]"""
        curve = reader.next(ErrorKind.MISSING_CURVE_TYPE).split('|')
        try:
            curve_type = CurveType(curve[0])
        except ValueError:
            raise ParseError(ErrorKind.INVALID_CURVE_TYPE, curve[0]) from None
        curve_points = [_parse_curve_point(point) for point in curve[1:]]

        slides = reader.next_int(ErrorKind.MISSING_SLIDES_COUNT, ErrorKind.INVALID_SLIDES_COUNT, minimum=0)
        length = reader.next_decimal(ErrorKind.MISSING_LENGTH, ErrorKind.INVALID_LENGTH)
        slider = Slider(curve_type, curve_points, slides, length)

        if reader.has_more():
            slider.edge_sounds = parse_pipe_list(
                reader.next(ErrorKind.INVALID_EDGE_SOUND),
                lambda s: HitSound.parse(s, ErrorKind.INVALID_EDGE_SOUND),
            )
        if reader.has_more():
            slider.edge_sets = parse_pipe_list(reader.next(ErrorKind.INVALID_EDGE_SET), EdgeSet.parse)
        return slider, self._parse_trailing_hitsample(reader)

    def _parse_mania_hold(self, reader: FieldReader):
        """endTime:hitSample，分隔符是冒号"""
        end_time, sep, hitsample = reader.rest(ErrorKind.MISSING_END_TIME).partition(':')
        hold = OsuManiaHold(parse_int(end_time, ErrorKind.INVALID_END_TIME))
        if not sep:
            return hold, None
        return hold, HitSample.parse(hitsample, self.version)


class HitObjectRenderer:
    """单个物件输出"""

    def __init__(self, version: int):
        self.version = version

    def render(self, hit_object: HitObject) -> str:
        parts = [
            str(hit_object.position.x),
            str(hit_object.position.y),
            str(hit_object.time),
            str(hit_object.type_byte()),
            hit_object.hitsound.render(),
        ]
        hitsample = hit_object.hitsample.render(self.version) if hit_object.hitsample else None
        params = hit_object.obj_params

        if isinstance(params, Slider):
            parts.append(self._render_curve(params))
            parts.append(str(params.slides))
            parts.append(format_decimal(params.length))
            parts += self._render_slider_tail(params, hitsample)
        elif isinstance(params, Spinner):
            parts.append(str(params.end_time))
            if hitsample is not None:
                parts.append(hitsample)
        elif isinstance(params, OsuManiaHold):
            end_time = str(params.end_time)
            parts.append(end_time if hitsample is None else f"{end_time}:{hitsample}")
        elif hitsample is not None:
            parts.append(hitsample)

        return ','.join(parts)

    def _render_curve(self, slider: Slider) -> str:
        points = [slider.curve_type.value] + [_render_curve_point(p) for p in slider.curve_points]
        return '|'.join(points)

    def _render_slider_tail(self, slider: Slider, hitsample: Optional[str]) -> List[str]:
        tail = [
            None if slider.edge_sounds is None else render_pipe_list(slider.edge_sounds, HitSound.render),
            None if slider.edge_sets is None else render_pipe_list(slider.edge_sets, EdgeSet.render),
            hitsample,
        ]
        # 去掉末尾省略的字段，中间省略的输出为空
        while tail and tail[-1] is None:
            tail.pop()
        return ["" if item is None else item for item in tail]


@dataclass
class HitObjects:
    """物件列表"""
    hit_objects: List[HitObject] = field(default_factory=list)

    @classmethod
    def parse(cls, text: str, version: int) -> Optional['HitObjects']:
        parser = HitObjectParser(version)
        objects = []
        for index, line in enumerate(split_lines(text)):
            if is_blank(line):
                continue
            try:
                objects.append(parser.parse(line))
            except ParseError as e:
                raise e.shifted(index)
        return cls(objects)

    def render(self, version: int) -> Optional[str]:
        renderer = HitObjectRenderer(version)
        return '\n'.join(renderer.render(obj) for obj in self.hit_objects)

    @classmethod
    def default(cls, version: int) -> 'HitObjects':
        return cls()
