"""
[TimingPoints] 分段

字段随版本增加：
    v3: time,beatLength
    v4: + meter,sampleSet,sampleIndex
    v5: + volume
    v6+: + uninherited,effects
缺失的字段使用默认值；beatLength 不是数字时原样保留
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import List, Optional, Union

from ..utils.errors import ErrorKind, ParseError
from ..utils.lines import FieldReader, is_blank, split_lines
from ..utils.numbers import format_bool, format_decimal, is_decimal, parse_bool, parse_decimal, parse_int
from ..utils.versioning import OLD_VERSION_TIME_OFFSET, is_old_version


class TimingSampleSet(Enum):
    """时间点音效组，未知的整数原样保留"""
    BEATMAP_DEFAULT = 0
    NORMAL = 1
    SOFT = 2
    DRUM = 3


SampleSetValue = Union[TimingSampleSet, int]


def _parse_sample_set(text: str) -> SampleSetValue:
    value = parse_int(text, ErrorKind.INVALID_SAMPLE_SET, minimum=0)
    try:
        return TimingSampleSet(value)
    except ValueError:
        return value


def _render_sample_set(value: SampleSetValue) -> str:
    if isinstance(value, TimingSampleSet):
        return str(value.value)
    return str(value)


@dataclass
class Effects:
    """时间点效果位：bit0 kiai，bit3 省略首小节线"""
    bits: int = 0

    KIAI = 0b1
    OMIT_FIRST_BARLINE = 0b1000

    @property
    def kiai_time_enabled(self) -> bool:
        return bool(self.bits & self.KIAI)

    @kiai_time_enabled.setter
    def kiai_time_enabled(self, value: bool):
        self.bits = self.bits | self.KIAI if value else self.bits & ~self.KIAI

    @property
    def no_first_barline_in_taiko_mania(self) -> bool:
        return bool(self.bits & self.OMIT_FIRST_BARLINE)

    @no_first_barline_in_taiko_mania.setter
    def no_first_barline_in_taiko_mania(self, value: bool):
        if value:
            self.bits |= self.OMIT_FIRST_BARLINE
        else:
            self.bits &= ~self.OMIT_FIRST_BARLINE

    def clear_unused_bits(self):
        """去掉没有含义的位"""
        self.bits &= self.KIAI | self.OMIT_FIRST_BARLINE


@dataclass
class TimingPoint:
    """时间点"""
    time: Decimal
    # 数字或无法解析的原文
    beat_length: Union[Decimal, str]
    meter: int = 4
    sample_set: SampleSetValue = TimingSampleSet.NORMAL
    # 0 表示使用默认音效
    sample_index: int = 1
    volume: int = 100
    uninherited: bool = True
    effects: Effects = field(default_factory=Effects)

    @classmethod
    def new_uninherited(cls, time: Decimal, beat_length: Decimal, meter: int = 4,
                        sample_set: SampleSetValue = TimingSampleSet.NORMAL,
                        sample_index: int = 1, volume: int = 100,
                        effects: Optional[Effects] = None) -> 'TimingPoint':
        """创建红线（控制 BPM）"""
        return cls(time, beat_length, meter, sample_set, sample_index, volume, True,
                   effects or Effects())

    @classmethod
    def new_inherited(cls, time: Decimal, slider_velocity_multiplier: Decimal, meter: int = 4,
                      sample_set: SampleSetValue = TimingSampleSet.NORMAL,
                      sample_index: int = 1, volume: int = 100,
                      effects: Optional[Effects] = None) -> 'TimingPoint':
        """创建绿线（控制滑条速度）"""
        beat_length = (Decimal(1) / Decimal(slider_velocity_multiplier)) * -100
        return cls(time, beat_length, meter, sample_set, sample_index, volume, False,
                   effects or Effects())

    def calc_bpm(self) -> Optional[Decimal]:
        """红线的 BPM"""
        if not self.uninherited or not isinstance(self.beat_length, Decimal) or self.beat_length == 0:
            return None
        return Decimal(60000) / self.beat_length

    def calc_slider_velocity_multiplier(self) -> Optional[Decimal]:
        """绿线的滑条速度倍率"""
        if self.uninherited or not isinstance(self.beat_length, Decimal) or self.beat_length == 0:
            return None
        return Decimal(1) / (self.beat_length / Decimal(-100))

    @classmethod
    def parse(cls, line: str, version: int) -> Optional['TimingPoint']:
        reader = FieldReader(line)

        time = reader.next_decimal(ErrorKind.MISSING_TIME, ErrorKind.INVALID_TIME)
        if is_old_version(version):
            time += OLD_VERSION_TIME_OFFSET

        # v3 的 beatLength 占据整行剩余部分
        if version == 3:
            raw_beat_length = reader.rest(ErrorKind.MISSING_BEAT_LENGTH)
        else:
            raw_beat_length = reader.next(ErrorKind.MISSING_BEAT_LENGTH)
        point = cls(time, cls._parse_beat_length(raw_beat_length))
        if version == 3:
            return point

        if reader.has_more():
            point.meter = parse_int(reader.next(ErrorKind.INVALID_METER), ErrorKind.INVALID_METER)
        if reader.has_more():
            point.sample_set = _parse_sample_set(reader.next(ErrorKind.INVALID_SAMPLE_SET))
        if reader.has_more():
            raw = reader.rest(ErrorKind.INVALID_SAMPLE_INDEX) if version == 4 else reader.next(ErrorKind.INVALID_SAMPLE_INDEX)
            point.sample_index = parse_int(raw, ErrorKind.INVALID_SAMPLE_INDEX, minimum=0)
        if version == 4:
            return point

        if reader.has_more():
            raw = reader.rest(ErrorKind.INVALID_VOLUME) if version == 5 else reader.next(ErrorKind.INVALID_VOLUME)
            point.volume = parse_int(raw, ErrorKind.INVALID_VOLUME, minimum=0, maximum=100)
        if version == 5:
            return point

        if reader.has_more():
            point.uninherited = parse_bool(reader.next(ErrorKind.INVALID_UNINHERITED), ErrorKind.INVALID_UNINHERITED)
        if reader.has_more():
            point.effects = Effects(parse_int(reader.rest(ErrorKind.INVALID_EFFECTS), ErrorKind.INVALID_EFFECTS, minimum=0))
        return point

    @staticmethod
    def _parse_beat_length(text: str) -> Union[Decimal, str]:
        if is_decimal(text):
            return parse_decimal(text)
        return text

    def render(self, version: int) -> Optional[str]:
        time = self.time - OLD_VERSION_TIME_OFFSET if is_old_version(version) else self.time
        if isinstance(self.beat_length, Decimal):
            beat_length = format_decimal(self.beat_length)
        else:
            beat_length = self.beat_length

        fields = [format_decimal(time), beat_length]
        if version > 3:
            fields += [str(self.meter), _render_sample_set(self.sample_set), str(self.sample_index)]
        if version > 4:
            fields.append(str(self.volume))
        if version > 5:
            fields += [format_bool(self.uninherited), str(self.effects.bits)]
        return ','.join(fields)


@dataclass
class TimingPoints:
    """时间点列表"""
    timing_points: List[TimingPoint] = field(default_factory=list)

    @classmethod
    def parse(cls, text: str, version: int) -> Optional['TimingPoints']:
        points = []
        for index, line in enumerate(split_lines(text)):
            if is_blank(line):
                continue
            try:
                points.append(TimingPoint.parse(line, version))
            except ParseError as e:
                raise e.shifted(index)
        return cls(points)

    def render(self, version: int) -> Optional[str]:
        return '\n'.join(point.render(version) for point in self.timing_points)

    @classmethod
    def default(cls, version: int) -> 'TimingPoints':
        return cls()
