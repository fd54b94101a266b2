"""
[Events] 分段

每行一个事件：
    //注释
    0,startTime,filename[,x,y]          背景（也可写作 Background）
    1,startTime,filename[,x,y]          视频（也可写作 Video）
    2,startTime,endTime                 休息段（也可写作 Break）
    3,startTime,r,g,b                   背景颜色变化（v14 之前）
    Sprite,... / Animation,...          故事板对象
    Sample,time,layer,filepath[,volume] 音效
以空格或下划线缩进的行是命令，挂到上一个对象上
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

from ..utils.types import FilePath, Position, Rgb
from ..utils.errors import ErrorKind, ParseError
from ..utils.lines import FieldReader, is_blank, split_lines
from ..utils.numbers import parse_decimal, parse_int
from ..utils.versioning import LATEST_VERSION, OLD_VERSION_TIME_OFFSET, is_old_version
from .commands import Command
from .objects import OBJECT_HEADERS, CommandTree, StoryboardObject, indentation_of, parse_command_line
from .types import Layer
from .variables import Variables

logger = logging.getLogger(__name__)

COMMENT_PREFIX = "//"


def _offset_time(time: int, version: int) -> int:
    """v3-v4 读入时加上时间偏移"""
    return time + OLD_VERSION_TIME_OFFSET if is_old_version(version) else time


def _restore_time(time: int, version: int) -> int:
    return time - OLD_VERSION_TIME_OFFSET if is_old_version(version) else time


def _parse_file_and_position(reader: FieldReader):
    """filename[,x,y]"""
    file_name = FilePath.parse(reader.next(ErrorKind.MISSING_FILE_NAME))
    position = None
    if reader.has_more():
        x = reader.next_decimal(ErrorKind.MISSING_X, ErrorKind.INVALID_X)
        y = parse_decimal(reader.rest(ErrorKind.MISSING_Y), ErrorKind.INVALID_Y)
        position = Position(x, y)
    return file_name, position


def _render_position(position: Optional[Position]) -> str:
    return "" if position is None else f",{position.render()}"


@dataclass
class Comment:
    text: str

    def render(self, version: int = LATEST_VERSION) -> Optional[str]:
        return f"{COMMENT_PREFIX}{self.text}"


@dataclass
class Background(CommandTree):
    """背景图片，时间不做偏移"""
    start_time: int
    file_name: FilePath
    position: Optional[Position] = None
    commands: List[Command] = field(default_factory=list)
    short_form: bool = True

    HEADERS = ("0", "Background")

    @classmethod
    def parse(cls, line: str, version: int = LATEST_VERSION) -> 'Background':
        reader = FieldReader(line)
        header = reader.next(ErrorKind.UNKNOWN_EVENT_TYPE).strip()
        start_time = reader.next_int(ErrorKind.MISSING_START_TIME, ErrorKind.INVALID_START_TIME)
        file_name, position = _parse_file_and_position(reader)
        return cls(start_time, file_name, position, short_form=header == cls.HEADERS[0])

    def render(self, version: int = LATEST_VERSION) -> Optional[str]:
        header = self.HEADERS[0] if self.short_form else self.HEADERS[1]
        lines = [f"{header},{self.start_time},{self.file_name.render()}{_render_position(self.position)}"]
        return '\n'.join(lines + self.render_command_lines(version))


@dataclass
class Video(CommandTree):
    """背景视频"""
    start_time: int
    file_name: FilePath
    position: Optional[Position] = None
    commands: List[Command] = field(default_factory=list)
    short_form: bool = True

    HEADERS = ("1", "Video")

    @classmethod
    def parse(cls, line: str, version: int = LATEST_VERSION) -> 'Video':
        reader = FieldReader(line)
        header = reader.next(ErrorKind.UNKNOWN_EVENT_TYPE).strip()
        start_time = reader.next_int(ErrorKind.MISSING_START_TIME, ErrorKind.INVALID_START_TIME)
        file_name, position = _parse_file_and_position(reader)
        return cls(_offset_time(start_time, version), file_name, position,
                   short_form=header == cls.HEADERS[0])

    def render(self, version: int = LATEST_VERSION) -> Optional[str]:
        header = self.HEADERS[0] if self.short_form else self.HEADERS[1]
        lines = [f"{header},{_restore_time(self.start_time, version)},"
                 f"{self.file_name.render()}{_render_position(self.position)}"]
        return '\n'.join(lines + self.render_command_lines(version))


@dataclass
class Break:
    """休息段"""
    start_time: int
    end_time: int
    short_form: bool = True

    HEADERS = ("2", "Break")

    @classmethod
    def parse(cls, line: str, version: int = LATEST_VERSION) -> 'Break':
        reader = FieldReader(line)
        header = reader.next(ErrorKind.UNKNOWN_EVENT_TYPE).strip()
        start_time = reader.next_int(ErrorKind.MISSING_START_TIME, ErrorKind.INVALID_START_TIME)
        end_time = parse_int(reader.rest(ErrorKind.MISSING_END_TIME), ErrorKind.INVALID_END_TIME)
        return cls(_offset_time(start_time, version), _offset_time(end_time, version),
                   short_form=header == cls.HEADERS[0])

    def render(self, version: int = LATEST_VERSION) -> Optional[str]:
        header = self.HEADERS[0] if self.short_form else self.HEADERS[1]
        return f"{header},{_restore_time(self.start_time, version)},{_restore_time(self.end_time, version)}"


@dataclass
class ColourTransformation:
    """背景颜色变化，v14 不再支持"""
    start_time: int
    rgb: Rgb

    HEADERS = ("3",)

    @classmethod
    def parse(cls, line: str, version: int = LATEST_VERSION) -> 'ColourTransformation':
        if version >= 14:
            raise ParseError(ErrorKind.EVENT_NOT_IN_VERSION, line)
        reader = FieldReader(line)
        reader.next(ErrorKind.UNKNOWN_EVENT_TYPE)
        start_time = reader.next_int(ErrorKind.MISSING_START_TIME, ErrorKind.INVALID_START_TIME)
        rgb = Rgb.parse(reader.rest(ErrorKind.MISSING_RED))
        return cls(_offset_time(start_time, version), rgb)

    def render(self, version: int = LATEST_VERSION) -> Optional[str]:
        if version >= 14:
            return None
        return f"{self.HEADERS[0]},{_restore_time(self.start_time, version)},{self.rgb.render()}"


@dataclass
class AudioSample:
    """故事板音效"""
    time: int
    layer: Layer
    filepath: FilePath
    # 1-100，None 表示原文没有写
    volume: Optional[int] = None

    HEADERS = ("Sample",)

    @classmethod
    def parse(cls, line: str, version: int = LATEST_VERSION) -> 'AudioSample':
        reader = FieldReader(line)
        reader.next(ErrorKind.UNKNOWN_EVENT_TYPE)
        time = reader.next_int(ErrorKind.MISSING_TIME, ErrorKind.INVALID_TIME)
        layer = Layer.from_index(reader.next_int(ErrorKind.MISSING_LAYER, ErrorKind.INVALID_LAYER))
        filepath = FilePath.parse(reader.next(ErrorKind.MISSING_FILE_NAME))
        volume = None
        if reader.has_more():
            volume = parse_int(reader.rest(ErrorKind.INVALID_VOLUME), ErrorKind.INVALID_VOLUME,
                               minimum=1, maximum=100)
        return cls(time, layer, filepath, volume)

    def render(self, version: int = LATEST_VERSION) -> Optional[str]:
        fields = [self.HEADERS[0], str(self.time), str(self.layer.index), self.filepath.render()]
        if self.volume is not None:
            fields.append(str(self.volume))
        return ','.join(fields)


@dataclass
class LegacyEvent:
    """旧式的 4/5/6 事件，原样保留"""
    raw: str

    HEADERS = ("4", "5", "6")

    @classmethod
    def parse(cls, line: str, version: int = LATEST_VERSION) -> 'LegacyEvent':
        return cls(line)

    def render(self, version: int = LATEST_VERSION) -> Optional[str]:
        return self.raw


Event = Union[Comment, Background, Video, Break, ColourTransformation, StoryboardObject, AudioSample, LegacyEvent]

EVENT_PARSERS: Dict[str, type] = {}
for _event_cls in (Background, Video, Break, ColourTransformation, AudioSample, LegacyEvent):
    for _header in _event_cls.HEADERS:
        EVENT_PARSERS[_header] = _event_cls
for _header in OBJECT_HEADERS:
    EVENT_PARSERS[_header] = StoryboardObject


def parse_event(line: str, version: int = LATEST_VERSION) -> Event:
    """便捷函数：解析单行事件（不含命令行）"""
    if line.startswith(COMMENT_PREFIX):
        return Comment(line[len(COMMENT_PREFIX):])
    header = line.split(',', 1)[0].strip()
    event_cls = EVENT_PARSERS.get(header)
    if event_cls is None:
        raise ParseError(ErrorKind.UNKNOWN_EVENT_TYPE, header)
    return event_cls.parse(line, version)


@dataclass
class Events:
    """事件列表"""
    events: List[Event] = field(default_factory=list)

    @classmethod
    def parse(cls, text: str, version: int = LATEST_VERSION,
              variables: Optional[Variables] = None) -> Optional['Events']:
        """
        解析分段正文

        Args:
            variables: .osb 中定义的变量，解析前替换到事件行中
        """
        events = cls()
        for index, line in enumerate(split_lines(text)):
            if is_blank(line):
                continue
            try:
                events._parse_line(line, version, variables)
            except ParseError as e:
                raise e.shifted(index)
        logger.debug(f"解析了 {len(events.events)} 个事件")
        return events

    def _parse_line(self, line: str, version: int, variables: Optional[Variables]):
        if line.startswith(COMMENT_PREFIX):
            self.events.append(Comment(line[len(COMMENT_PREFIX):]))
            return

        if variables is not None:
            line = variables.substitute(line)

        indent = indentation_of(line)
        if indent == 0:
            self.events.append(parse_event(line.rstrip(), version))
            return

        target = self.events[-1] if self.events else None
        if not isinstance(target, CommandTree):
            raise ParseError(ErrorKind.STORYBOARD_CMD_WITH_NO_SPRITE, line.strip())
        target.push_cmd(parse_command_line(line.rstrip(), version), indent)

    def render(self, version: int = LATEST_VERSION,
               variables: Optional[Variables] = None) -> Optional[str]:
        lines = []
        for event in self.events:
            rendered = event.render(version)
            if rendered is None:
                logger.warning(f"v{version} 不支持事件 {type(event).__name__}，已省略")
                continue
            if variables is not None and not isinstance(event, Comment):
                lines.extend(variables.restore(line) for line in rendered.split('\n'))
            else:
                lines.append(rendered)
        return '\n'.join(lines)

    @classmethod
    def default(cls, version: int = LATEST_VERSION) -> 'Events':
        return cls()

    def storyboard_objects(self) -> List[StoryboardObject]:
        return [e for e in self.events if isinstance(e, StoryboardObject)]
