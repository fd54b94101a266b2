"""
故事板命令

命令行格式（缩进之后）:
    F/M/MX/MY/S/V/R/C/P: type,easing,startTime,endTime,参数...
    L: L,startTime,loopCount
    T: T,triggerType,startTime[,endTime[,groupNumber]]
endTime 为空表示与 startTime 相同；参数之后可以继续追加关键帧
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import ClassVar, List, Optional, Tuple, Union

from ..utils.errors import ErrorKind, ParseError
from ..utils.lines import FieldReader
from ..utils.numbers import format_decimal, parse_decimal, parse_int, parse_u8
from ..utils.versioning import LATEST_VERSION
from .types import Easing, Parameter, TriggerType


DecimalPair = Tuple[Decimal, Optional[Decimal]]
RgbTriple = Tuple[int, Optional[int], Optional[int]]


@dataclass
class ContinuingFields:
    """二维关键帧链，只有最后一个元素可以省略第二个值"""
    start: Tuple[Decimal, Decimal]
    continuing: List[DecimalPair] = field(default_factory=list)

    def __post_init__(self):
        last = len(self.continuing) - 1
        for i, (_, second) in enumerate(self.continuing):
            if second is None and i != last:
                raise ParseError(ErrorKind.INVALID_SECOND_FIELD_OPTION, str(i))

    def push(self, fields: DecimalPair):
        """追加关键帧，之前省略的第二个值用上一帧补齐"""
        if self.continuing and self.continuing[-1][1] is None:
            previous = self.continuing[-2][1] if len(self.continuing) > 1 else self.start[1]
            self.continuing[-1] = (self.continuing[-1][0], previous)
        self.continuing.append(fields)

    def set(self, index: int, fields: DecimalPair):
        if fields[1] is None and index != len(self.continuing) - 1:
            raise ParseError(ErrorKind.INVALID_SECOND_FIELD_OPTION, str(index))
        if not 0 <= index < len(self.continuing):
            raise IndexError(index)
        self.continuing[index] = fields

    def render(self) -> str:
        values = [self.start[0], self.start[1]]
        for first, second in self.continuing:
            values.append(first)
            if second is not None:
                values.append(second)
        return ','.join(format_decimal(v) for v in values)


@dataclass
class ContinuingColours:
    """颜色关键帧链，只有最后一个元素可以省略 g/b"""
    start: Tuple[int, int, int]
    continuing: List[RgbTriple] = field(default_factory=list)

    def __post_init__(self):
        last = len(self.continuing) - 1
        for i, (_, green, blue) in enumerate(self.continuing):
            if i != last and (green is None or blue is None):
                raise ParseError(ErrorKind.INVALID_COLOUR_FIELD_OPTION, str(i))
            if green is None and blue is not None:
                raise ParseError(ErrorKind.INVALID_COLOUR_FIELD_OPTION, str(i))

    def push(self, rgb: RgbTriple):
        """追加颜色，之前省略的 g/b 用上一帧补齐"""
        if self.continuing:
            red, green, blue = self.continuing[-1]
            previous = self.continuing[-2] if len(self.continuing) > 1 else self.start
            if green is None:
                green = previous[1]
            if blue is None:
                blue = previous[2]
            self.continuing[-1] = (red, green, blue)
        self.continuing.append(rgb)

    def render(self) -> str:
        values = list(self.start)
        for red, green, blue in self.continuing:
            values.append(red)
            if green is not None:
                values.append(green)
            if blue is not None:
                values.append(blue)
        return ','.join(str(v) for v in values)


@dataclass
class TimedCommand:
    """带缓动和起止时间的命令"""
    easing: Easing = Easing.LINEAR
    end_time: Optional[int] = None

    HEADER: ClassVar[str] = ""

    def render_args(self, version: int) -> str:
        raise NotImplementedError


@dataclass
class Fade(TimedCommand):
    start_opacity: Decimal = Decimal(1)
    continuing_opacities: List[Decimal] = field(default_factory=list)

    HEADER = "F"

    def render_args(self, version: int) -> str:
        return _render_decimals([self.start_opacity] + self.continuing_opacities)


@dataclass
class MoveX(TimedCommand):
    start_x: Decimal = Decimal(0)
    continuing_x: List[Decimal] = field(default_factory=list)

    HEADER = "MX"

    def render_args(self, version: int) -> str:
        return _render_decimals([self.start_x] + self.continuing_x)


@dataclass
class MoveY(TimedCommand):
    start_y: Decimal = Decimal(0)
    continuing_y: List[Decimal] = field(default_factory=list)

    HEADER = "MY"

    def render_args(self, version: int) -> str:
        return _render_decimals([self.start_y] + self.continuing_y)


@dataclass
class Scale(TimedCommand):
    start_scale: Decimal = Decimal(1)
    continuing_scales: List[Decimal] = field(default_factory=list)

    HEADER = "S"

    def render_args(self, version: int) -> str:
        return _render_decimals([self.start_scale] + self.continuing_scales)


@dataclass
class Rotate(TimedCommand):
    start_rotation: Decimal = Decimal(0)
    continuing_rotations: List[Decimal] = field(default_factory=list)

    HEADER = "R"

    def render_args(self, version: int) -> str:
        return _render_decimals([self.start_rotation] + self.continuing_rotations)


@dataclass
class Move(TimedCommand):
    positions_xy: ContinuingFields = field(
        default_factory=lambda: ContinuingFields((Decimal(0), Decimal(0))))

    HEADER = "M"

    def render_args(self, version: int) -> str:
        return self.positions_xy.render()


@dataclass
class VectorScale(TimedCommand):
    scales_xy: ContinuingFields = field(
        default_factory=lambda: ContinuingFields((Decimal(1), Decimal(1))))

    HEADER = "V"

    def render_args(self, version: int) -> str:
        return self.scales_xy.render()


@dataclass
class Colour(TimedCommand):
    colours: ContinuingColours = field(default_factory=lambda: ContinuingColours((255, 255, 255)))

    HEADER = "C"

    def render_args(self, version: int) -> str:
        return self.colours.render()


@dataclass
class ParameterCommand(TimedCommand):
    parameter: Parameter = Parameter.IMAGE_FLIP_HORIZONTAL
    continuing_parameters: List[Parameter] = field(default_factory=list)

    HEADER = "P"

    def render_args(self, version: int) -> str:
        return ','.join(p.render(version) for p in [self.parameter] + self.continuing_parameters)


@dataclass
class Loop:
    """循环块，子命令缩进更深一层"""
    loop_count: int = 1
    commands: List['Command'] = field(default_factory=list)

    HEADER: ClassVar[str] = "L"


@dataclass
class Trigger:
    """触发块，子命令缩进更深一层"""
    trigger_type: TriggerType = field(default_factory=TriggerType)
    end_time: Optional[int] = None
    group_number: Optional[int] = None
    commands: List['Command'] = field(default_factory=list)

    HEADER: ClassVar[str] = "T"


CommandProperties = Union[
    Fade, Move, MoveX, MoveY, Scale, VectorScale, Rotate, Colour, ParameterCommand, Loop, Trigger
]


def _render_decimals(values: List[Decimal]) -> str:
    return ','.join(format_decimal(v) for v in values)


def _optional_int(value: Optional[int]) -> str:
    return "" if value is None else str(value)


@dataclass
class Command:
    """单条故事板命令"""
    start_time: Optional[int]
    properties: CommandProperties

    @property
    def commands(self) -> Optional[List['Command']]:
        """Loop / Trigger 的子命令，其它命令返回 None"""
        if isinstance(self.properties, (Loop, Trigger)):
            return self.properties.commands
        return None

    def is_block(self) -> bool:
        return self.commands is not None

    @classmethod
    def parse(cls, line: str, version: int = LATEST_VERSION) -> 'Command':
        """解析去掉缩进后的命令行"""
        return CommandParser(version).parse(line)

    def render(self, version: int = LATEST_VERSION) -> str:
        """输出命令行（不含缩进，也不含子命令）"""
        props = self.properties
        start_time = _optional_int(self.start_time)

        if isinstance(props, Loop):
            return f"L,{start_time},{props.loop_count}"
        if isinstance(props, Trigger):
            fields = ["T", props.trigger_type.render(version), start_time]
            if props.end_time is not None or props.group_number is not None:
                fields.append(_optional_int(props.end_time))
            if props.group_number is not None:
                fields.append(str(props.group_number))
            return ','.join(fields)

        return (f"{props.HEADER},{props.easing.render(version)},{start_time},"
                f"{_optional_int(props.end_time)},{props.render_args(version)}")


class CommandParser:
    """命令行解析器"""

    FLAT_COMMANDS = {
        Fade.HEADER: Fade,
        MoveX.HEADER: MoveX,
        MoveY.HEADER: MoveY,
        Scale.HEADER: Scale,
        Rotate.HEADER: Rotate,
    }
    PAIR_COMMANDS = {
        Move.HEADER: Move,
        VectorScale.HEADER: VectorScale,
    }

    def __init__(self, version: int = LATEST_VERSION):
        self.version = version

    def parse(self, line: str) -> Command:
        reader = FieldReader(line)
        header = reader.next(ErrorKind.UNKNOWN_COMMAND_TYPE).strip()

        if header == Loop.HEADER:
            return self._parse_loop(reader)
        if header == Trigger.HEADER:
            return self._parse_trigger(reader)

        easing, start_time, end_time = self._parse_easing_times(reader)

        if header in self.FLAT_COMMANDS:
            start = reader.next_decimal(ErrorKind.MISSING_COMMAND_FIELDS, ErrorKind.INVALID_COMMAND_FIELD)
            continuing = [parse_decimal(v, ErrorKind.INVALID_CONTINUING_FIELDS) for v in reader.remaining()]
            props = self.FLAT_COMMANDS[header](easing, end_time, start, continuing)
        elif header in self.PAIR_COMMANDS:
            props = self.PAIR_COMMANDS[header](easing, end_time, self._parse_pairs(reader))
        elif header == Colour.HEADER:
            props = Colour(easing, end_time, self._parse_colours(reader))
        elif header == ParameterCommand.HEADER:
            parameter = Parameter.parse(reader.next(ErrorKind.MISSING_COMMAND_FIELDS), self.version,
                                        kind=ErrorKind.INVALID_COMMAND_FIELD)
            continuing = [Parameter.parse(v, self.version, kind=ErrorKind.INVALID_CONTINUING_FIELDS)
                          for v in reader.remaining()]
            props = ParameterCommand(easing, end_time, parameter, continuing)
        else:
            raise ParseError(ErrorKind.UNKNOWN_COMMAND_TYPE, header)

        return Command(start_time, props)

    def _parse_optional_int(self, text: str, kind: ErrorKind) -> Optional[int]:
        if not text.strip():
            return None
        return parse_int(text, kind)

    def _parse_easing_times(self, reader: FieldReader) -> Tuple[Easing, Optional[int], Optional[int]]:
        """easing,startTime,endTime"""
        easing = Easing.parse(reader.next(ErrorKind.MISSING_EASING), self.version,
                              kind=ErrorKind.INVALID_EASING)
        start_time = self._parse_optional_int(reader.next(ErrorKind.MISSING_START_TIME),
                                              ErrorKind.INVALID_START_TIME)
        end_time = self._parse_optional_int(reader.next(ErrorKind.MISSING_END_TIME),
                                            ErrorKind.INVALID_END_TIME)
        return easing, start_time, end_time

    def _parse_pairs(self, reader: FieldReader) -> ContinuingFields:
        """x,y 之后两两成组，最后一组可以只有一个值"""
        first = reader.next_decimal(ErrorKind.MISSING_COMMAND_FIELDS, ErrorKind.INVALID_COMMAND_FIELD)
        second = reader.next_decimal(ErrorKind.MISSING_COMMAND_FIELDS, ErrorKind.INVALID_COMMAND_FIELD)
        values = [parse_decimal(v, ErrorKind.INVALID_CONTINUING_FIELDS) for v in reader.remaining()]

        continuing = []
        for i in range(0, len(values), 2):
            pair = values[i:i + 2]
            continuing.append((pair[0], pair[1] if len(pair) > 1 else None))
        return ContinuingFields((first, second), continuing)

    def _parse_colours(self, reader: FieldReader) -> ContinuingColours:
        """r,g,b 之后三个一组，最后一组可以缺少 g/b"""
        red = parse_u8(reader.next(ErrorKind.MISSING_RED), ErrorKind.INVALID_RED)
        green = parse_u8(reader.next(ErrorKind.MISSING_GREEN), ErrorKind.INVALID_GREEN)
        blue = parse_u8(reader.next(ErrorKind.MISSING_BLUE), ErrorKind.INVALID_BLUE)
        values = [parse_u8(v, ErrorKind.INVALID_CONTINUING_FIELDS) for v in reader.remaining()]

        continuing = []
        for i in range(0, len(values), 3):
            triple = values[i:i + 3] + [None] * (3 - len(values[i:i + 3]))
            continuing.append(tuple(triple))
        return ContinuingColours((red, green, blue), continuing)

    def _parse_loop(self, reader: FieldReader) -> Command:
        start_time = self._parse_optional_int(reader.next(ErrorKind.MISSING_START_TIME),
                                              ErrorKind.INVALID_START_TIME)
        loop_count = parse_int(reader.rest(ErrorKind.MISSING_LOOP_COUNT), ErrorKind.INVALID_LOOP_COUNT, minimum=0)
        return Command(start_time, Loop(loop_count))

    def _parse_trigger(self, reader: FieldReader) -> Command:
        trigger_type = TriggerType.parse(reader.next(ErrorKind.MISSING_TRIGGER_TYPE), self.version)
        start_time = self._parse_optional_int(reader.next(ErrorKind.MISSING_START_TIME),
                                              ErrorKind.INVALID_START_TIME)
        trigger = Trigger(trigger_type)

        remaining = reader.remaining()
        if len(remaining) > 2:
            raise ParseError(ErrorKind.INVALID_GROUP_NUMBER, ','.join(remaining[1:]))
        if remaining:
            trigger.end_time = self._parse_optional_int(remaining[0], ErrorKind.INVALID_END_TIME)
        if len(remaining) == 2:
            trigger.group_number = parse_int(remaining[1], ErrorKind.INVALID_GROUP_NUMBER)
        return Command(start_time, trigger)
